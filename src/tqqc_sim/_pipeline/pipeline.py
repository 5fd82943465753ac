"""Staged execution of a TQQC optimisation.

The pipeline moves through the stages

    INITIAL -> CALIBRATED -> CIRCUIT_BUILT -> SCHEDULED -> OPTIMIZED

and keeps the intermediate products (calibration, circuit, schedule, TQQC result), so that each of them can be
inspected. The method run() executes all stages and summarises them in an OptimizationResult.
"""

import logging
import time
from enum import Enum

from .config import PipelineConfig
from .._schedule.scheduler import compute_asap
from .._simulation.simulator import SimulatorBackend
from .._tqqc.engine import TqqcEngine
from .._tqqc.parity import build_circuit, expectation
from .._utility.calibration import CalibrationInfo


logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    INITIAL = 0
    CALIBRATED = 1
    CIRCUIT_BUILT = 2
    SCHEDULED = 3
    OPTIMIZED = 4


class ScheduleMetrics(object):

    def __init__(self, total_duration_ns: float, critical_depth: int, parallelism: float, idle_time_ns: float):
        self.total_duration_ns = total_duration_ns
        self.critical_depth = critical_depth
        self.parallelism = parallelism
        self.idle_time_ns = idle_time_ns

    @classmethod
    def from_schedule(cls, schedule):
        return cls(
            schedule.total_duration_ns,
            schedule.critical_path_depth(),
            schedule.parallelism_factor(),
            schedule.total_idle_time(),
        )

    def to_dict(self) -> dict:
        return dict(vars(self))


class CalibrationSummary(object):

    def __init__(self, backend: str, avg_t1: float, avg_t2: float, avg_error_1q: float, avg_error_2q: float):
        self.backend = backend
        self.avg_t1 = avg_t1
        self.avg_t2 = avg_t2
        self.avg_error_1q = avg_error_1q
        self.avg_error_2q = avg_error_2q

    @classmethod
    def from_calibration(cls, calibration: CalibrationInfo):
        return cls(
            calibration.backend_name,
            calibration.avg_t1(),
            calibration.avg_t2(),
            calibration.avg_error_1q(),
            calibration.avg_error_2q(),
        )

    def to_dict(self) -> dict:
        return dict(vars(self))


class ExecutionMetrics(object):
    """ Cost of a run. Every inner step executes two circuits, plus one for the baseline. """

    def __init__(self, total_time_ms: int, circuit_executions: int, total_shots: int, early_stopped: bool):
        self.total_time_ms = total_time_ms
        self.circuit_executions = circuit_executions
        self.total_shots = total_shots
        self.early_stopped = early_stopped

    def to_dict(self) -> dict:
        return dict(vars(self))


class OptimizationResult(object):
    """ TQQC result of a pipeline run together with schedule, calibration and execution metrics. """

    def __init__(self, tqqc_result, schedule: ScheduleMetrics, calibration_summary: CalibrationSummary,
                 metrics: ExecutionMetrics):
        self.tqqc_result = tqqc_result
        self.schedule = schedule
        self.calibration_summary = calibration_summary
        self.metrics = metrics

    def improvement_percent(self) -> float:
        return self.tqqc_result.improvement_percent()

    def improved(self) -> bool:
        return self.tqqc_result.improved()

    def final_parity(self) -> float:
        return self.tqqc_result.parity_final

    def baseline_parity(self) -> float:
        return self.tqqc_result.parity_baseline

    def to_dict(self) -> dict:
        return {
            "tqqc_result": self.tqqc_result.to_dict(),
            "schedule": None if self.schedule is None else self.schedule.to_dict(),
            "calibration_summary": None if self.calibration_summary is None else self.calibration_summary.to_dict(),
            "metrics": self.metrics.to_dict(),
        }


class Pipeline(object):
    """ Runs calibration, circuit construction, scheduling and the TQQC optimisation one after the other.

    Args:
        config (PipelineConfig): Parameters of the run.

    Example:
        .. code:: python

            pipeline = Pipeline(PipelineConfig.quick(5).with_seed(7))
            result = pipeline.run()
            print(result.final_parity(), result.metrics.circuit_executions)

    Note:
        The simulator uses the noise model of the calibration. Without an explicit calibration, the calibration
        is built from the hardware parameters of the config.
    """

    def __init__(self, config: PipelineConfig=None):
        self._init_state(config if config is not None else PipelineConfig.default_7q())

    @classmethod
    def default_7q(cls):
        return cls(PipelineConfig.default_7q())

    @classmethod
    def default_5q(cls):
        return cls(PipelineConfig.default_5q())

    def _init_state(self, config: PipelineConfig):
        self.config = config
        self.verbose = config.verbose
        self.stage = PipelineStage.INITIAL
        self.calibration = None
        self.noise_vectors = None
        self.circuit = None
        self.schedule_ = None
        self.tqqc_result = None

    def _info(self, msg: str):
        if self.verbose:
            logger.info(msg)

    # Stages

    def calibrate(self, calibration: CalibrationInfo=None) -> CalibrationInfo:
        """ Stores the calibration, by default a uniform one from the hardware parameters of the config. """
        self._info("Pipeline: Calibrating...")
        if calibration is None:
            c = self.config
            calibration = CalibrationInfo.uniform("tqqc_simulator", c.qubits, c.t1_us, c.t2_us, c.gate_error_1q,
                                                  c.gate_error_2q, c.readout_error)
        self.calibration = calibration
        self.noise_vectors = calibration.to_noise_vectors()
        self.stage = PipelineStage.CALIBRATED
        return self.calibration

    def build_circuit(self, theta: float=0.0, delta: float=0.0):
        self._info(f"Pipeline: Building circuit (θ={theta:.4f}, δ={delta:.4f})...")
        self.circuit = build_circuit(self.config.to_tqqc_config(), theta, delta)
        self.stage = PipelineStage.CIRCUIT_BUILT
        return self.circuit

    def schedule(self):
        """ ASAP schedule of the current circuit, building the circuit at theta = delta = 0 if there is none. """
        if self.circuit is None:
            self.build_circuit(0.0, 0.0)
        self._info("Pipeline: Scheduling circuit...")
        self.schedule_ = compute_asap(self.circuit, self.config.to_gate_times())
        idle = self.schedule_.idle_times()
        if self.noise_vectors is not None and self.schedule_.estimate_decoherence(self.noise_vectors) > 0.01:
            logger.warning(f"Idle qubits accumulate more than 1% dephasing, idle times in ns: {idle}")
        self.stage = PipelineStage.SCHEDULED
        return self.schedule_

    def optimize(self):
        self._info("Pipeline: Running TQQC optimization...")
        self.config.validate()
        self.tqqc_result = TqqcEngine(self.config.to_tqqc_config(), self._create_backend()).optimize()
        self.stage = PipelineStage.OPTIMIZED
        return self.tqqc_result

    def run(self) -> OptimizationResult:
        start_time = time.perf_counter()
        if self.calibration is None:
            self.calibrate()
        self.build_circuit(0.0, 0.0)
        self.schedule()
        tqqc_result = self.optimize()

        total_time_ms = int((time.perf_counter() - start_time) * 1000)
        circuit_executions = 2 * tqqc_result.total_inner_iterations + 1
        metrics = ExecutionMetrics(
            total_time_ms=total_time_ms,
            circuit_executions=circuit_executions,
            total_shots=circuit_executions * self.config.shots,
            early_stopped=tqqc_result.early_stopped,
        )
        self._info(f"Optimization complete: {tqqc_result.improvement_percent():.2f}% improvement in "
                   f"{total_time_ms}ms")
        return OptimizationResult(
            tqqc_result,
            ScheduleMetrics.from_schedule(self.schedule_),
            CalibrationSummary.from_calibration(self.calibration),
            metrics,
        )

    def reset(self):
        self._init_state(self.config)

    def reconfigure(self, config: PipelineConfig):
        self._init_state(config)

    # Helpers

    @property
    def is_calibrated(self) -> bool:
        return self.calibration is not None

    @property
    def is_scheduled(self) -> bool:
        return self.schedule_ is not None

    @property
    def is_optimized(self) -> bool:
        return self.tqqc_result is not None

    def _create_backend(self) -> SimulatorBackend:
        noise_model = self.calibration.to_noise_model() if self.calibration is not None \
            else self.config.to_noise_model()
        backend = SimulatorBackend(self.config.qubits, noise_model, seed=self.config.seed)
        if self.calibration is not None:
            backend = backend.with_calibration(self.calibration)
        return backend


def measure_parity(config: PipelineConfig, theta: float, delta: float) -> float:
    """ Parity of the TQQC circuit at theta + delta on a simulator with the noise of the config. """
    backend = SimulatorBackend(config.qubits, config.to_noise_model(), seed=config.seed)
    circuit = build_circuit(config.to_tqqc_config(), theta, delta)
    return expectation(backend.execute(circuit, config.shots).counts)
