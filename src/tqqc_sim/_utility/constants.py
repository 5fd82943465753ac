"""
Physical, algorithmic and statistical constants used throughout the package.

The values are grouped in three namespaces:

    Physics: gate durations and coherence defaults of superconducting hardware.
    TQQC: step sizes, thresholds and noise limits of the optimisation loop.
    Stats: critical values and shot-count limits of the significance test.

Components take these values as defaults, they never read mutable global state.
"""


class Physics(object):
    """ Hardware constants. Times are in ns unless the name says otherwise. """

    GATE_TIME_1Q_NS = 35.0
    GATE_TIME_2Q_NS = 300.0
    MEASUREMENT_NS = 5000.0
    RESET_NS = 1000.0

    DEFAULT_T1_US = 100.0
    DEFAULT_T2_US = 60.0
    MIN_T1_US = 50.0
    MIN_T2_US = 30.0

    # Per-gate durations in seconds
    GATE_TIMES_S = {
        "h": 30e-9,
        "x": 30e-9,
        "y": 30e-9,
        "z": 0.0,
        "rz": 0.0,
        "rx": 30e-9,
        "ry": 30e-9,
        "sx": 30e-9,
        "s": 30e-9,
        "sdg": 30e-9,
        "t": 30e-9,
        "tdg": 30e-9,
        "cx": 300e-9,
        "cz": 300e-9,
        "swap": 900e-9,
    }

    @staticmethod
    def us_to_s(us: float) -> float:
        return us * 1e-6

    @staticmethod
    def ns_to_s(ns: float) -> float:
        return ns * 1e-9


class TQQC(object):
    """ Parameters of the TQQC optimisation loop. """

    DEFAULT_STEP_AMP = 0.12
    DEFAULT_INNER_MAX = 10
    DECAY_RATE = 0.9
    CONVERGENCE_WINDOW = 3
    THRESHOLD_5Q = 0.030
    THRESHOLD_7Q = 0.027
    DEFAULT_POINTS = 20
    DEFAULT_NOISE = 0.02
    MAX_RECOMMENDED_NOISE = 0.030
    ABSOLUTE_MAX_NOISE = 0.06
    CRITICAL_5Q = 0.030
    CRITICAL_7Q = 0.027
    DEFAULT_READOUT_ERROR = 0.005
    INNER_SAFETY_MULTIPLIER = 5
    CUMULATIVE_THRESHOLD_MULT = 1.5


class Stats(object):
    """ Critical values and shot limits of the two-sample z-test. """

    Z_CRIT_90 = 1.645
    Z_CRIT_95 = 1.960
    Z_CRIT_975 = 2.240
    Z_CRIT_99 = 2.575

    DEFAULT_SHOTS = 8192
    MIN_SHOTS = 1024
    MAX_SHOTS = 32768
    HIGH_SHOTS_THRESHOLD = 16384
    LOW_SHOTS_THRESHOLD = 4096

    ADAPTIVE_HIGH_NOISE_ADJ = 0.025
    ADAPTIVE_LOW_SHOTS_ADJ = 0.025
    ADAPTIVE_HIGH_SHOTS_ADJ = -0.05
    MIN_CONFIDENCE_LEVEL = 0.90
    MAX_CONFIDENCE_LEVEL = 0.99
    DEFAULT_CONFIDENCE_LEVEL = 0.95

    TIE_EPSILON = 1e-9


def circuit_depth(num_qubits: int) -> int:
    """ Number of entangling layers of the linear parity circuit on num_qubits qubits. """
    return num_qubits - 1 if num_qubits > 0 else 0


def depth_ratio(num_qubits: int) -> float:
    """ Depth of the circuit relative to the 5 qubit reference circuit. """
    ref_depth = circuit_depth(5)
    if ref_depth > 0:
        return circuit_depth(num_qubits) / ref_depth
    return 1.0


def threshold_for_qubits(num_qubits: int, base: float=TQQC.THRESHOLD_5Q) -> float:
    """ Convergence threshold scaled inversely with the circuit depth, base * D(5) / D(N).

    Deeper circuits lose more parity per step, so the threshold shrinks with the depth. For fewer than two qubits
    the depth is zero and the base threshold is returned.

    Args:
        num_qubits (int): Number of qubits N.
        base (float): Threshold of the 5 qubit circuit.

    Example:
        .. code:: python

            threshold_for_qubits(5)   # 0.030
            threshold_for_qubits(7)   # 0.030 * (4 / 6)
    """
    depth = circuit_depth(num_qubits)
    if depth > 0:
        return base * (circuit_depth(5) / depth)
    return base


def is_noise_valid(noise: float, num_qubits: int) -> bool:
    """ Whether the noise lies below the critical point for the qubit count. """
    return 0.0 <= noise <= threshold_for_qubits(num_qubits)


def is_noise_recommended(noise: float) -> bool:
    return 0.0 <= noise <= TQQC.DEFAULT_NOISE


def z_critical(confidence: float) -> float:
    """ Two-sided critical z value for the confidence level, falling back to 95% below 0.90. """
    if confidence >= 0.99:
        return Stats.Z_CRIT_99
    elif confidence >= 0.975:
        return Stats.Z_CRIT_975
    elif confidence >= 0.95:
        return Stats.Z_CRIT_95
    elif confidence >= 0.90:
        return Stats.Z_CRIT_90
    return Stats.Z_CRIT_95
