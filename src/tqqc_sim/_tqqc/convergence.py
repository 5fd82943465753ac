"""
Early stopping and the dynamic inner loop of the TQQC optimisation.

The convergence threshold is corrected for the depth of the linear parity circuit,

    threshold(N) = threshold(5) * D(5) / D(N),  D(k) = k - 1,

so circuits on more qubits get a proportionally tighter threshold.
"""

import math
from collections import deque

from .._utility.constants import TQQC, threshold_for_qubits


class Convergence(object):
    """ Tracks the improvements of the outer iterations and decides when to stop.

    Converged means that the last `window` improvements are all below the absolute threshold and the running sum of
    all improvements is below 1.5 times that threshold.

    Args:
        qubits (int): Number of qubits, used for the depth correction.
        base_threshold (float): Threshold of the 5 qubit circuit.
    """

    def __init__(self, qubits: int, base_threshold: float=TQQC.THRESHOLD_5Q):
        self.window = TQQC.CONVERGENCE_WINDOW
        self.threshold_abs = threshold_for_qubits(qubits, base_threshold)
        self.threshold_cum = self.threshold_abs * TQQC.CUMULATIVE_THRESHOLD_MULT
        self._history = deque(maxlen=self.window)
        self._cumulative = 0.0

    @classmethod
    def default_for_qubits(cls, qubits: int):
        return cls(qubits, TQQC.THRESHOLD_5Q)

    @classmethod
    def from_noise(cls, qubits: int, noise: float):
        """ Uses the base threshold 0.030 up to noise 0.02 and 0.040 above. """
        base = 0.030 if noise <= 0.02 else 0.040
        return cls(qubits, base)

    def push(self, improvement: float):
        self._history.append(improvement)
        self._cumulative += improvement

    def check(self) -> bool:
        return self.window_condition() and self.cumulative_condition()

    def window_condition(self) -> bool:
        if len(self._history) < self.window:
            return False
        return all(abs(imp) < self.threshold_abs for imp in self._history)

    def cumulative_condition(self) -> bool:
        return abs(self._cumulative) < self.threshold_cum

    def reset(self):
        self._history.clear()
        self._cumulative = 0.0

    @property
    def cumulative(self) -> float:
        return self._cumulative

    def history_len(self) -> int:
        return len(self._history)

    def threshold(self) -> float:
        return self.threshold_abs


class DynamicInner(object):
    """ Number of inner iterations and their step sizes.

    The count grows with the last improvement g relative to the threshold tau,

        count = clamp(1 + 2 * floor(|g| / tau), 1, min(5, inner_max)),

    and the step of inner iteration j is step_amp * decay_rate**j.

    Example:
        .. code:: python

            inner = DynamicInner(inner_max=10)
            inner.compute_count(0.04, 0.02)    # 5
            inner.compute_step(2, 0.12)        # 0.0972
    """

    def __init__(self, inner_max: int=TQQC.DEFAULT_INNER_MAX, decay_rate: float=TQQC.DECAY_RATE):
        self.inner_max = inner_max
        self.decay_rate = decay_rate
        self._safety_cap = TQQC.INNER_SAFETY_MULTIPLIER

    @classmethod
    def default_tqqc(cls):
        return cls(TQQC.DEFAULT_INNER_MAX, TQQC.DECAY_RATE)

    def compute_count(self, last_improve: float, threshold: float) -> int:
        tau = max(threshold, 1e-9)
        raw = 1 + 2 * int(math.floor(abs(last_improve) / tau))
        return min(max(min(raw, self._safety_cap), 1), self.inner_max)

    def compute_step(self, j: int, base_step: float) -> float:
        return base_step * self.decay_rate**j
