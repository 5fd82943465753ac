"""
Configuration of a complete run: hardware, noise, timing and TQQC parameters in one place.
"""

import copy
import logging
from enum import Enum

from .._circuit.gate import EntanglerType
from .._noise.gate_times import GateTimes
from .._noise.noise_model import NoiseModel
from .._tqqc.config import DeltaMode, SigMode, TqqcConfig
from .._utility.errors import TqqcConfigError, TqqcSimError
from .._utility.types import BasisString


logger = logging.getLogger(__name__)


class OptimizationMode(Enum):
    FULL = "full"
    QUICK = "quick"
    BENCHMARK = "benchmark"
    CUSTOM = "custom"


class HardwareTarget(Enum):
    IBM_SUPERCONDUCTING = "ibm_superconducting"
    TRAPPED_ION = "trapped_ion"
    NEUTRAL_ATOM = "neutral_atom"
    IDEAL = "ideal"
    CUSTOM = "custom"


class PipelineConfig(object):
    """ Parameters of a pipeline run.

    The TQQC parameters are passed on to TqqcConfig, the hardware parameters define the noise model of the
    simulator and the gate times of the scheduler.

    Example:
        .. code:: python

            config = PipelineConfig.quick(5).with_hardware(HardwareTarget.TRAPPED_ION).with_seed(1)
            result = Pipeline(config).run()
    """

    def __init__(self, qubits: int=7):
        self.qubits = qubits
        self.mode = OptimizationMode.FULL
        self.hardware = HardwareTarget.IBM_SUPERCONDUCTING

        # TQQC
        self.points = 20
        self.shots = 8192
        self.noise = 0.02
        self.step_amp = 0.12
        self.inner_max = 10
        self.dynamic_inner = True
        self.use_statistical_test = False
        self.sig_mode = SigMode.FIXED
        self.sig_level = 0.95
        self.delta_mode = DeltaMode.TRACK
        self.basis = BasisString.all_x(qubits)
        self.entangler = EntanglerType.CX

        # Hardware
        self.t1_us = 100.0
        self.t2_us = 60.0
        self.gate_error_1q = 0.0003
        self.gate_error_2q = 0.01
        self.readout_error = 0.01
        self.gate_time_1q_ns = 35.0
        self.gate_time_2q_ns = 300.0

        # Execution
        self.seed = None
        self.verbose = False

    # Presets

    @classmethod
    def default_7q(cls):
        return cls(7)

    @classmethod
    def default_5q(cls):
        return cls(5)

    @classmethod
    def quick(cls, qubits: int):
        config = cls(qubits)
        config.mode = OptimizationMode.QUICK
        config.points = 10
        config.shots = 4096
        config.inner_max = 5
        return config

    @classmethod
    def benchmark(cls, qubits: int):
        config = cls(qubits)
        config.mode = OptimizationMode.BENCHMARK
        config.seed = 42
        return config

    @classmethod
    def ideal(cls, qubits: int):
        return cls(qubits).with_hardware(HardwareTarget.IDEAL)

    # Builder

    def _with(self, **kwargs):
        config = copy.copy(self)
        for key, value in kwargs.items():
            setattr(config, key, value)
        return config

    def with_qubits(self, n: int):
        return self._with(qubits=n, basis=BasisString.all_x(n))

    def with_mode(self, mode: OptimizationMode):
        return self._with(mode=mode)

    def with_hardware(self, hardware: HardwareTarget):
        """ Sets the hardware target together with its coherence times, gate times or error rates. """
        config = self._with(hardware=hardware)
        if hardware == HardwareTarget.IBM_SUPERCONDUCTING:
            config.t1_us, config.t2_us = 100.0, 60.0
            config.gate_time_1q_ns, config.gate_time_2q_ns = 35.0, 300.0
        elif hardware == HardwareTarget.TRAPPED_ION:
            config.t1_us, config.t2_us = 1000.0, 500.0
            config.gate_time_1q_ns, config.gate_time_2q_ns = 10_000.0, 200_000.0
        elif hardware == HardwareTarget.NEUTRAL_ATOM:
            config.t1_us, config.t2_us = 500.0, 200.0
            config.gate_time_1q_ns, config.gate_time_2q_ns = 1000.0, 1000.0
        elif hardware == HardwareTarget.IDEAL:
            config.noise = 0.0
            config.gate_error_1q = 0.0
            config.gate_error_2q = 0.0
            config.readout_error = 0.0
        return config

    def with_noise(self, noise: float):
        return self._with(noise=noise)

    def with_points(self, points: int):
        return self._with(points=points)

    def with_shots(self, shots: int):
        return self._with(shots=shots)

    def with_seed(self, seed: int):
        return self._with(seed=seed)

    def with_verbose(self, verbose: bool):
        return self._with(verbose=verbose)

    def with_dynamic_inner(self, enabled: bool):
        return self._with(dynamic_inner=enabled)

    def with_statistical_test(self, enabled: bool):
        return self._with(use_statistical_test=enabled)

    # Conversions

    def to_tqqc_config(self) -> TqqcConfig:
        return TqqcConfig(
            qubits=self.qubits,
            points=self.points,
            shots=self.shots,
            noise=self.noise,
            step_amp=self.step_amp,
            inner_max=self.inner_max,
            dynamic_inner=self.dynamic_inner,
            use_statistical_test=self.use_statistical_test,
            sig_mode=self.sig_mode,
            sig_level=self.sig_level,
            delta_mode=self.delta_mode,
            basis=self.basis,
            entangler=self.entangler,
            seed=self.seed,
        )

    def to_noise_model(self) -> NoiseModel:
        try:
            return NoiseModel(self.t1_us, self.t2_us, self.gate_error_1q, self.gate_error_2q, self.readout_error)
        except TqqcSimError as e:
            logger.warning(f"Hardware parameters do not form a valid noise model ({e}), use ibm_typical.")
            return NoiseModel.ibm_typical()

    def to_gate_times(self) -> GateTimes:
        return GateTimes(self.gate_time_1q_ns, self.gate_time_2q_ns, 5000.0)

    def validate(self):
        if self.qubits < 2:
            raise TqqcConfigError(f"qubits must be >= 2, got {self.qubits}")
        if self.points <= 0:
            raise TqqcConfigError(f"points must be > 0, got {self.points}")
        if self.shots <= 0:
            raise TqqcConfigError(f"shots must be > 0, got {self.shots}")
        if not 0.0 <= self.noise <= 0.1:
            raise TqqcConfigError(f"noise must be in [0, 0.1], got {self.noise}")
        if self.t2_us > 2.0 * self.t1_us:
            raise TqqcConfigError(f"T2 ({self.t2_us}) must be <= 2*T1 ({2.0 * self.t1_us})")

    def is_recommended(self) -> bool:
        return self.noise <= 0.020 and self.shots >= 4096

    def __str__(self):
        return (
            f"PipelineConfig({self.qubits}Q, {self.mode.value}, noise={self.noise:.3f}, points={self.points}, "
            f"shots={self.shots})"
        )
