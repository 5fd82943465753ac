"""
Configuration of the TQQC optimisation.
"""

import copy
import json
import os
from enum import Enum

from dotenv import load_dotenv

from .._circuit.gate import EntanglerType
from .._utility.constants import TQQC, Stats, depth_ratio, threshold_for_qubits
from .._utility.errors import TqqcConfigError
from .._utility.types import BasisString


class SigMode(Enum):
    """ How the critical value of the significance test is chosen. """

    FIXED = "fixed"
    ADAPTIVE = "adaptive"


class DeltaMode(Enum):
    """ How the delta found in an outer iteration is carried over to the next one. """

    TRACK = "track"
    RESET = "reset"


class TqqcConfig(object):
    """ All parameters of a TQQC run.

    Args:
        qubits (int): Number of qubits of the parity circuit.
        points (int): Maximal number of outer iterations.
        shots (int): Shots per parity measurement.
        noise (float): Effective depolarizing noise level of the device.
        step_amp (float): Initial step of the delta search.
        inner_max (int): Maximal number of inner iterations.
        dynamic_inner (bool): Adapt the inner count to the last improvement and enable early stopping.
        use_statistical_test (bool): Only move delta on significant parity differences.
        sig_mode (SigMode): Fixed or adaptive critical value.
        sig_level (float): Confidence level of the test in [0.8, 0.99].
        delta_mode (DeltaMode): Track the absolute delta or reset it to the relative offset.
        basis (BasisString): Measurement basis, one entry per qubit.
        entangler (EntanglerType): CX or CZ chain.
        theta_init (float): Fixed rotation angle theta.
        delta_init (float): Starting delta.
        seed (int): Seed for the tie breaking of the engine, None for entropy.

    Example:
        .. code:: python

            config = TqqcConfig.default_5q().with_noise(0.01).with_seed(42)
            config.validate()
            config.save_to_json("results/")
    """

    f_json = "tqqc_config.json"

    def __init__(self,
                 qubits: int=7,
                 points: int=TQQC.DEFAULT_POINTS,
                 shots: int=Stats.DEFAULT_SHOTS,
                 noise: float=TQQC.DEFAULT_NOISE,
                 step_amp: float=TQQC.DEFAULT_STEP_AMP,
                 inner_max: int=TQQC.DEFAULT_INNER_MAX,
                 dynamic_inner: bool=True,
                 use_statistical_test: bool=False,
                 sig_mode: SigMode=SigMode.FIXED,
                 sig_level: float=Stats.DEFAULT_CONFIDENCE_LEVEL,
                 delta_mode: DeltaMode=DeltaMode.TRACK,
                 basis: BasisString=None,
                 entangler: EntanglerType=EntanglerType.CX,
                 theta_init: float=0.0,
                 delta_init: float=0.0,
                 seed: int=None):
        self.qubits = qubits
        self.points = points
        self.shots = shots
        self.noise = noise
        self.step_amp = step_amp
        self.inner_max = inner_max
        self.dynamic_inner = dynamic_inner
        self.use_statistical_test = use_statistical_test
        self.sig_mode = sig_mode
        self.sig_level = sig_level
        self.delta_mode = delta_mode
        self.basis = basis if basis is not None else BasisString.all_x(qubits)
        self.entangler = entangler
        self.theta_init = theta_init
        self.delta_init = delta_init
        self.seed = seed

    # Presets

    @classmethod
    def default_7q(cls):
        return cls(qubits=7)

    @classmethod
    def default_5q(cls):
        return cls(qubits=5)

    @classmethod
    def for_qubits(cls, n: int):
        return cls(qubits=n)

    # Builder

    def _with(self, **kwargs):
        config = copy.copy(self)
        for key, value in kwargs.items():
            setattr(config, key, value)
        return config

    def with_qubits(self, n: int):
        """ Changes the number of qubits and resets the basis to all X. """
        return self._with(qubits=n, basis=BasisString.all_x(n))

    def with_noise(self, noise: float):
        return self._with(noise=noise)

    def with_points(self, points: int):
        return self._with(points=points)

    def with_shots(self, shots: int):
        return self._with(shots=shots)

    def with_step_amp(self, step_amp: float):
        return self._with(step_amp=step_amp)

    def with_inner_max(self, inner_max: int):
        return self._with(inner_max=inner_max)

    def with_dynamic_inner(self, enabled: bool):
        return self._with(dynamic_inner=enabled)

    def with_statistical_test(self, enabled: bool):
        return self._with(use_statistical_test=enabled)

    def with_sig_mode(self, mode: SigMode):
        return self._with(sig_mode=mode)

    def with_sig_level(self, level: float):
        return self._with(sig_level=level)

    def with_delta_mode(self, mode: DeltaMode):
        return self._with(delta_mode=mode)

    def with_basis(self, basis: BasisString):
        return self._with(basis=basis)

    def with_entangler(self, entangler: EntanglerType):
        return self._with(entangler=entangler)

    def with_theta(self, theta: float):
        return self._with(theta_init=theta)

    def with_delta(self, delta: float):
        return self._with(delta_init=delta)

    def with_seed(self, seed: int):
        return self._with(seed=seed)

    # Derived values

    def threshold(self) -> float:
        return threshold_for_qubits(self.qubits)

    def depth_ratio(self) -> float:
        return depth_ratio(self.qubits)

    def is_recommended_noise(self) -> bool:
        return self.noise <= TQQC.DEFAULT_NOISE

    def is_valid_noise(self) -> bool:
        return self.noise <= self.threshold()

    def exceeds_critical(self) -> bool:
        return self.noise > self.threshold()

    def validate(self):
        """ Checks the parameters.

        Raises:
            TqqcConfigError: For the first parameter that is out of range.
        """
        if self.qubits < 2:
            raise TqqcConfigError(f"qubits must be >= 2, got {self.qubits}")
        if self.points <= 0:
            raise TqqcConfigError(f"points must be > 0, got {self.points}")
        if self.shots <= 0:
            raise TqqcConfigError(f"shots must be > 0, got {self.shots}")
        if not 0.0 <= self.noise <= TQQC.ABSOLUTE_MAX_NOISE:
            raise TqqcConfigError(f"noise must be in [0, {TQQC.ABSOLUTE_MAX_NOISE}], got {self.noise}")
        if self.step_amp <= 0.0:
            raise TqqcConfigError(f"step_amp must be > 0, got {self.step_amp}")
        if self.inner_max <= 0:
            raise TqqcConfigError(f"inner_max must be > 0, got {self.inner_max}")
        if not 0.8 <= self.sig_level <= 0.99:
            raise TqqcConfigError(f"sig_level must be in [0.8, 0.99], got {self.sig_level}")
        if len(self.basis) != self.qubits:
            raise TqqcConfigError(f"basis length {len(self.basis)} doesn't match qubits {self.qubits}")

    # Persistence

    def to_dict(self) -> dict:
        return {
            "qubits": self.qubits,
            "points": self.points,
            "shots": self.shots,
            "noise": self.noise,
            "step_amp": self.step_amp,
            "inner_max": self.inner_max,
            "dynamic_inner": self.dynamic_inner,
            "use_statistical_test": self.use_statistical_test,
            "sig_mode": self.sig_mode.value,
            "sig_level": self.sig_level,
            "delta_mode": self.delta_mode.value,
            "basis": str(self.basis),
            "entangler": str(self.entangler),
            "theta_init": self.theta_init,
            "delta_init": self.delta_init,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: dict):
        """ Creates the config from a dict as written by to_dict. Missing keys take their default value. """
        kwargs = dict(data)
        if "sig_mode" in kwargs:
            kwargs["sig_mode"] = SigMode(kwargs["sig_mode"])
        if "delta_mode" in kwargs:
            kwargs["delta_mode"] = DeltaMode(kwargs["delta_mode"])
        if "basis" in kwargs:
            kwargs["basis"] = BasisString.from_str(kwargs["basis"])
        if "entangler" in kwargs:
            entangler = EntanglerType.parse(kwargs["entangler"])
            if entangler is None:
                raise TqqcConfigError(f"unknown entangler '{kwargs['entangler']}'")
            kwargs["entangler"] = entangler
        unknown = set(kwargs) - set(cls().to_dict())
        if unknown:
            raise TqqcConfigError(f"unknown keys {sorted(unknown)}")
        return cls(**kwargs)

    def save_to_json(self, location: str):
        """ Save the config as json file in the directory location. """
        with open(location + self.f_json, "w") as fp:
            json.dump(self.to_dict(), fp, indent=4)

    @classmethod
    def load_from_json(cls, location: str):
        if not os.path.exists(location + cls.f_json):
            raise FileNotFoundError(f"TqqcConfig found that at {location} the file {cls.f_json} is missing.")
        with open(location + cls.f_json, "r") as fp:
            return cls.from_dict(json.load(fp))

    @classmethod
    def from_env(cls, prefix: str="TQQC_"):
        """ Reads the config from environment variables such as TQQC_QUBITS or TQQC_NOISE.

        A .env file in the working directory is loaded first. Variables that are not set keep their default.
        """
        load_dotenv()
        config = cls()
        casts = {
            "qubits": int,
            "points": int,
            "shots": int,
            "noise": float,
            "step_amp": float,
            "inner_max": int,
            "dynamic_inner": _parse_bool,
            "use_statistical_test": _parse_bool,
            "sig_mode": SigMode,
            "sig_level": float,
            "delta_mode": DeltaMode,
            "basis": BasisString.from_str,
            "entangler": EntanglerType.parse,
            "theta_init": float,
            "delta_init": float,
            "seed": int,
        }
        for key, cast in casts.items():
            raw = os.environ.get(prefix + key.upper())
            if raw is None:
                continue
            try:
                value = cast(raw.lower() if key in ("sig_mode", "delta_mode") else raw)
            except ValueError as e:
                raise TqqcConfigError(f"cannot parse {prefix + key.upper()}='{raw}': {e}") from e
            if value is None:
                raise TqqcConfigError(f"cannot parse {prefix + key.upper()}='{raw}'")
            setattr(config, key, value)
            if key == "qubits" and f"{prefix}BASIS" not in os.environ:
                config.basis = BasisString.all_x(value)
        return config

    def __eq__(self, other):
        if not isinstance(other, TqqcConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        return (
            f"TqqcConfig({self.qubits}Q, points={self.points}, shots={self.shots}, noise={self.noise:.3f}, "
            f"dynamic={self.dynamic_inner})"
        )


def _parse_bool(raw: str) -> bool:
    if raw.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if raw.strip().lower() in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"'{raw}' is not a boolean")
