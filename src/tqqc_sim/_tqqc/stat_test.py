"""
Two-sample z-test deciding whether the parity at delta + step differs significantly from the parity at delta - step.
"""

import math
from enum import Enum

from scipy.stats import norm

from .config import SigMode
from .._utility.constants import Stats


class Direction(Enum):
    PLUS = "plus"
    MINUS = "minus"
    STAY = "stay"


class TestResult(object):
    """ Outcome of a significance test.

    Attributes:
        is_significant (bool): Whether z exceeds the critical value.
        z_score (float): Computed z statistic.
        z_critical (float): Critical value used.
        direction (Direction): Better direction if significant, None otherwise.
        is_tie (bool): Whether the two parities are equal up to 1e-9.
    """

    __test__ = False

    def __init__(self, is_significant: bool, z_score: float, z_critical: float, direction: Direction=None,
                 is_tie: bool=False):
        self.is_significant = is_significant
        self.z_score = z_score
        self.z_critical = z_critical
        self.direction = direction
        self.is_tie = is_tie

    @classmethod
    def significant(cls, z_score: float, z_critical: float, direction: Direction):
        return cls(True, z_score, z_critical, direction)

    @classmethod
    def insignificant(cls, z_score: float, z_critical: float):
        return cls(False, z_score, z_critical)

    @classmethod
    def tie(cls):
        return cls(False, 0.0, 0.0, is_tie=True)

    def __repr__(self):
        return (
            f"TestResult(significant={self.is_significant}, z={self.z_score:.3f}, crit={self.z_critical:.3f}, "
            f"direction={self.direction}, tie={self.is_tie})"
        )


class StatisticalTest(object):
    """ z-test on two parity measurements with a fixed or adaptive critical value.

    Args:
        mode (SigMode): FIXED maps the level directly to a critical value, ADAPTIVE first adjusts it to the
            noise and the number of shots.
        level (float): Confidence level.

    Example:
        .. code:: python

            test = StatisticalTest.fixed(0.95)
            result = test.test(0.8, 0.2, shots=8192, noise=0.02)
            result.direction    # Direction.PLUS
    """

    __test__ = False

    def __init__(self, mode: SigMode=SigMode.FIXED, level: float=Stats.DEFAULT_CONFIDENCE_LEVEL):
        self.mode = mode
        self.level = level

    @classmethod
    def default_tqqc(cls):
        return cls(SigMode.FIXED, 0.95)

    @classmethod
    def fixed(cls, level: float):
        return cls(SigMode.FIXED, level)

    @classmethod
    def adaptive(cls, level: float):
        return cls(SigMode.ADAPTIVE, level)

    # z scores

    @staticmethod
    def compute_z(p_plus: float, p_minus: float, n_plus: int, n_minus: int) -> float:
        """ Pooled two-proportion z statistic, 0 if a sample is empty or the standard error vanishes. """
        if n_plus == 0 or n_minus == 0:
            return 0.0
        pooled = (p_plus * n_plus + p_minus * n_minus) / (n_plus + n_minus)
        se = math.sqrt(max(pooled * (1.0 - pooled) * (1.0 / n_plus + 1.0 / n_minus), 0.0))
        if se < 1e-10:
            return 0.0
        return abs(p_plus - p_minus) / se

    @staticmethod
    def compute_z_from_parity(parity_plus: float, parity_minus: float, shots: int) -> float:
        """ z statistic of two parity expectations with variance (1 - E^2) / N each. """
        if shots == 0:
            return 0.0
        var_plus = (1.0 - parity_plus**2) / shots
        var_minus = (1.0 - parity_minus**2) / shots
        se = math.sqrt(max(var_plus + var_minus, 0.0))
        if se < 1e-10:
            return 0.0
        return abs(parity_plus - parity_minus) / se

    @staticmethod
    def p_value(z: float) -> float:
        """ Two-sided p-value of the z statistic under the standard normal distribution. """
        return float(2.0 * norm.sf(abs(z)))

    # Critical values

    def z_critical(self, shots: int, noise: float) -> float:
        if self.mode == SigMode.ADAPTIVE:
            return self._adaptive_critical(shots, noise)
        return self._fixed_critical()

    def _fixed_critical(self) -> float:
        if self.level >= 0.99:
            return Stats.Z_CRIT_99
        elif self.level >= 0.95:
            return Stats.Z_CRIT_95
        return Stats.Z_CRIT_90

    def _adaptive_critical(self, shots: int, noise: float) -> float:
        """ More conservative for high noise or few shots, less conservative for many shots. """
        level = self.level
        if noise > 0.02:
            level += Stats.ADAPTIVE_HIGH_NOISE_ADJ
        if shots < Stats.LOW_SHOTS_THRESHOLD:
            level += Stats.ADAPTIVE_LOW_SHOTS_ADJ
        if shots >= Stats.HIGH_SHOTS_THRESHOLD:
            level += Stats.ADAPTIVE_HIGH_SHOTS_ADJ
        level = min(max(level, Stats.MIN_CONFIDENCE_LEVEL), Stats.MAX_CONFIDENCE_LEVEL)

        if level >= 0.99:
            return Stats.Z_CRIT_99
        elif level >= 0.975:
            return Stats.Z_CRIT_975
        elif level >= 0.95:
            return Stats.Z_CRIT_95
        return Stats.Z_CRIT_90

    # Tests

    def is_significant(self, z: float, shots: int, noise: float) -> bool:
        return z > self.z_critical(shots, noise)

    def test(self, parity_plus: float, parity_minus: float, shots: int, noise: float) -> TestResult:
        if abs(parity_plus - parity_minus) < Stats.TIE_EPSILON:
            return TestResult.tie()

        z_score = self.compute_z_from_parity(parity_plus, parity_minus, shots)
        z_crit = self.z_critical(shots, noise)
        if z_score > z_crit:
            direction = Direction.PLUS if parity_plus > parity_minus else Direction.MINUS
            return TestResult.significant(z_score, z_crit, direction)
        return TestResult.insignificant(z_score, z_crit)

    def test_proportions(self, p_even_plus: float, p_even_minus: float, shots: int, noise: float) -> TestResult:
        """ Same as test, but with the probabilities of even parity as input. """
        return self.test(2.0 * p_even_plus - 1.0, 2.0 * p_even_minus - 1.0, shots, noise)

    def __repr__(self):
        return f"StatisticalTest(mode={self.mode.value}, level={self.level})"
