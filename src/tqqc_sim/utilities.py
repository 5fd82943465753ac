from ._utility.calibration import CalibrationInfo
from ._utility.types import Probability, Bitstring, Basis, BasisString
from ._utility.constants import (
    Physics,
    TQQC,
    Stats,
    circuit_depth,
    depth_ratio,
    threshold_for_qubits,
    is_noise_valid,
    is_noise_recommended,
    z_critical,
)
