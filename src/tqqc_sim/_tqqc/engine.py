"""Delta search of the TQQC optimisation.

The engine measures the parity of the TQQC circuit once at delta = 0 (baseline) and then runs up to `points` outer
iterations. Each outer iteration probes delta +- step for a number of inner steps with decaying step size, keeps the
best parity found and feeds the improvement to the convergence checker, which may stop the search early.
"""

import logging
import numpy as np

from .config import DeltaMode, TqqcConfig
from .convergence import Convergence, DynamicInner
from .parity import build_circuit, expectation
from .stat_test import Direction, StatisticalTest, TestResult
from .._utility.constants import Stats, TQQC


logger = logging.getLogger(__name__)


class IterationRecord(object):
    """ Summary of one outer iteration.

    Attributes:
        iteration (int): Index of the outer iteration.
        delta (float): Delta after the iteration.
        parity_plus (float): Parity at delta + step of the first inner step.
        parity_minus (float): Parity at delta - step of the first inner step.
        parity_selected (float): Parity after the iteration.
        improvement (float): Parity gain of the iteration.
        inner_count (int): Number of inner steps.
        direction (Direction): Direction chosen in the first inner step.
        is_significant (bool): Whether any inner step was significant.
    """

    def __init__(self, iteration: int, delta: float, parity_plus: float, parity_minus: float,
                 parity_selected: float, improvement: float, inner_count: int, direction: Direction,
                 is_significant: bool):
        self.iteration = iteration
        self.delta = delta
        self.parity_plus = parity_plus
        self.parity_minus = parity_minus
        self.parity_selected = parity_selected
        self.improvement = improvement
        self.inner_count = inner_count
        self.direction = direction
        self.is_significant = is_significant

    def to_dict(self) -> dict:
        return {
            "iteration": self.iteration,
            "delta": self.delta,
            "parity_plus": self.parity_plus,
            "parity_minus": self.parity_minus,
            "parity_selected": self.parity_selected,
            "improvement": self.improvement,
            "inner_count": self.inner_count,
            "direction": None if self.direction is None else self.direction.value,
            "is_significant": self.is_significant,
        }


class TqqcResult(object):
    """ Outcome of a TQQC optimisation.

    Attributes:
        delta_opt (float): Optimised delta.
        parity_baseline (float): Parity at delta = 0.
        parity_final (float): Parity at the end of the search.
        improvement (float): parity_final - parity_baseline.
        iterations (int): Number of outer iterations run.
        early_stopped (bool): Whether the convergence checker stopped the search.
        ties_count (int): Outer iterations whose first probe was a tie.
        significant_moves (int): Inner steps with a significant test result.
        total_inner_iterations (int): Sum of the inner counts.
        history (list[IterationRecord]): One record per outer iteration.
    """

    def __init__(self, delta_opt: float, parity_baseline: float, parity_final: float, iterations: int,
                 early_stopped: bool, ties_count: int, significant_moves: int, total_inner_iterations: int,
                 history: list):
        self.delta_opt = delta_opt
        self.parity_baseline = parity_baseline
        self.parity_final = parity_final
        self.improvement = parity_final - parity_baseline
        self.iterations = iterations
        self.early_stopped = early_stopped
        self.ties_count = ties_count
        self.significant_moves = significant_moves
        self.total_inner_iterations = total_inner_iterations
        self.history = history

    def improvement_percent(self) -> float:
        if abs(self.parity_baseline) < 1e-9:
            return 0.0
        return self.improvement / abs(self.parity_baseline) * 100.0

    def improved(self) -> bool:
        return self.improvement > 0.0

    def k_estimated(self, max_points: int) -> float:
        """ Ratio of the saved circuit executions to the saved outer iterations, 1.0 without early stop. """
        if not self.early_stopped or self.iterations >= max_points:
            return 1.0
        early_stop_frac = 1.0 - self.iterations / max_points
        compute_reduction = 1.0 - (2 * self.iterations + 1) / (2 * max_points + 1)
        if early_stop_frac > 1e-9:
            return compute_reduction / early_stop_frac
        return 1.0

    def to_dict(self) -> dict:
        return {
            "delta_opt": self.delta_opt,
            "parity_baseline": self.parity_baseline,
            "parity_final": self.parity_final,
            "improvement": self.improvement,
            "iterations": self.iterations,
            "early_stopped": self.early_stopped,
            "ties_count": self.ties_count,
            "significant_moves": self.significant_moves,
            "total_inner_iterations": self.total_inner_iterations,
            "history": [record.to_dict() for record in self.history],
        }

    def __str__(self):
        return (
            f"TqqcResult(delta={self.delta_opt:.4f}, baseline={self.parity_baseline:.4f}, "
            f"final={self.parity_final:.4f}, iterations={self.iterations}, early_stopped={self.early_stopped})"
        )


class TqqcEngine(object):
    """ Runs the TQQC delta search on a backend.

    Args:
        config (TqqcConfig): Parameters of the run, validated on construction.
        backend (Backend): Anything with an execute(circuit, shots) method returning counts.

    Example:
        .. code:: python

            config = TqqcConfig.default_5q().with_points(10).with_seed(42)
            backend = SimulatorBackend.from_depol(5, config.noise).with_seed(42)

            result = TqqcEngine(config, backend).optimize()
            print(result.delta_opt, result.improvement)

    Note:
        Early stopping is only active together with the dynamic inner loop.
    """

    def __init__(self, config: TqqcConfig, backend):
        config.validate()
        self.config = config
        self.backend = backend
        self.convergence = Convergence.from_noise(config.qubits, config.noise)
        self.dynamic_inner = DynamicInner(config.inner_max, TQQC.DECAY_RATE)
        self.stat_test = StatisticalTest(config.sig_mode, config.sig_level)
        self._rng = np.random.default_rng(config.seed)

        if config.exceeds_critical():
            logger.warning(f"Noise {config.noise} exceeds the critical value {config.threshold():.4f} for "
                           f"{config.qubits} qubits, TQQC is unlikely to improve the parity.")

    def optimize(self) -> TqqcResult:
        config = self.config
        theta = config.theta_init
        delta = config.delta_init
        last_improve = 0.0
        total_inner = 0
        ties_count = 0
        significant_moves = 0
        early_stopped = False
        history = []

        parity_baseline = self.measure_parity(theta, 0.0)
        parity_current = parity_baseline
        logger.debug(f"Baseline parity {parity_baseline:.4f}.")

        for iteration in range(config.points):
            if config.dynamic_inner:
                inner_count = self.dynamic_inner.compute_count(last_improve, self.convergence.threshold())
            else:
                inner_count = 1

            best_delta, best_parity = delta, parity_current
            record_plus = record_minus = 0.0
            record_direction = None
            record_significant = False

            for j in range(inner_count):
                step = self.dynamic_inner.compute_step(j, config.step_amp)
                parity_plus = self.measure_parity(theta, delta + step)
                parity_minus = self.measure_parity(theta, delta - step)

                if config.use_statistical_test:
                    test_result = self.stat_test.test(parity_plus, parity_minus, config.shots, config.noise)
                    if test_result.is_significant:
                        significant_moves += 1
                        record_significant = True
                    candidate_delta, candidate_parity, direction = self._select_direction(
                        delta, step, parity_plus, parity_minus, parity_current, test_result
                    )
                elif parity_plus > parity_minus:
                    candidate_delta, candidate_parity, direction = delta + step, parity_plus, Direction.PLUS
                else:
                    candidate_delta, candidate_parity, direction = delta - step, parity_minus, Direction.MINUS

                if j == 0:
                    record_plus, record_minus = parity_plus, parity_minus
                    record_direction = direction

                if candidate_parity > best_parity:
                    best_delta, best_parity = candidate_delta, candidate_parity

            improvement = best_parity - parity_current
            if config.delta_mode == DeltaMode.TRACK:
                delta = best_delta
            else:
                delta = best_delta - delta
            parity_current = best_parity
            last_improve = improvement
            total_inner += inner_count

            if abs(record_plus - record_minus) < Stats.TIE_EPSILON:
                ties_count += 1

            history.append(IterationRecord(
                iteration=iteration,
                delta=delta,
                parity_plus=record_plus,
                parity_minus=record_minus,
                parity_selected=parity_current,
                improvement=improvement,
                inner_count=inner_count,
                direction=record_direction,
                is_significant=record_significant,
            ))
            logger.debug(f"Iteration {iteration}: delta={delta:.4f}, parity={parity_current:.4f}, "
                         f"improvement={improvement:+.4f}, inner={inner_count}.")

            self.convergence.push(improvement)
            if config.dynamic_inner and self.convergence.check():
                early_stopped = True
                logger.debug(f"Converged after {iteration + 1} iterations.")
                break

        return TqqcResult(
            delta_opt=delta,
            parity_baseline=parity_baseline,
            parity_final=parity_current,
            iterations=len(history),
            early_stopped=early_stopped,
            ties_count=ties_count,
            significant_moves=significant_moves,
            total_inner_iterations=total_inner,
            history=history,
        )

    def measure_parity(self, theta: float, delta: float) -> float:
        circuit = build_circuit(self.config, theta, delta)
        result = self.backend.execute(circuit, self.config.shots)
        return expectation(result.counts)

    def _select_direction(self, delta: float, step: float, parity_plus: float, parity_minus: float,
                          parity_current: float, test_result: TestResult) -> tuple:
        if test_result.is_tie:
            if self._rng.random() > 0.5:
                return delta + step, parity_plus, Direction.PLUS
            return delta - step, parity_minus, Direction.MINUS
        if test_result.is_significant:
            if test_result.direction == Direction.PLUS:
                return delta + step, parity_plus, Direction.PLUS
            if test_result.direction == Direction.MINUS:
                return delta - step, parity_minus, Direction.MINUS
        return delta, parity_current, Direction.STAY
