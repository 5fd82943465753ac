"""
Device-wide noise model: coherence times, gate errors and readout error. The simulator samples its Pauli errors
from this model and the optimiser uses it to judge whether TQQC can still improve the parity.
"""

import copy
import json
import math
import os

from .._utility.constants import threshold_for_qubits
from .._utility.errors import CalibrationError, InvalidT2, InvalidNoiseLevel


class NoiseModel(object):
    """ Noise parameters of a device, shared by all qubits.

    Args:
        t1_us (float): Relaxation time in microseconds, math.inf for no relaxation.
        t2_us (float): Dephasing time in microseconds, math.inf for no dephasing.
        gate_error_1q (float): Error probability of a single qubit gate.
        gate_error_2q (float): Error probability of a two qubit gate.
        readout_error (float): Probability to flip a measured bit.
        crosstalk (float): Optional crosstalk probability.

    Raises:
        CalibrationError: If a time is not positive or a probability lies outside [0, 1].
        InvalidT2: If T2 > 2 T1.

    Note:
        The with_* methods return modified copies without validation, so that T1 and T2 can be changed one after
        the other. Call validate() on the result if needed.

    Example:
        .. code:: python

            model = NoiseModel.from_depol(0.02)
            model.gate_error_2q          # 0.2
            model.is_tqqc_valid(7)       # True, 0.02 <= 0.02
    """

    f_json = "noise_model.json"

    def __init__(self,
                 t1_us: float,
                 t2_us: float,
                 gate_error_1q: float,
                 gate_error_2q: float,
                 readout_error: float,
                 crosstalk: float=None):
        self.t1_us = float(t1_us)
        self.t2_us = float(t2_us)
        self.gate_error_1q = float(gate_error_1q)
        self.gate_error_2q = float(gate_error_2q)
        self.readout_error = float(readout_error)
        self.crosstalk = None if crosstalk is None else float(crosstalk)
        self.validate()

    # Presets

    @classmethod
    def ideal(cls):
        return cls(math.inf, math.inf, 0.0, 0.0, 0.0)

    @classmethod
    def ibm_typical(cls):
        return cls(100.0, 60.0, 0.0003, 0.01, 0.01, crosstalk=0.001)

    @classmethod
    def high_quality(cls):
        return cls(200.0, 150.0, 0.0001, 0.005, 0.005, crosstalk=0.0005)

    @classmethod
    def noisy_test(cls, depol: float):
        """ Like from_depol, but without the range check. """
        return cls(100.0, 60.0, depol, depol * 10.0, depol / 4.0)

    @classmethod
    def from_depol(cls, p_depol: float):
        """ Model with 1q error p, 2q error 10 p and readout error p / 4.

        Raises:
            InvalidNoiseLevel: If p is outside of [0, 0.06].
        """
        if p_depol < 0.0 or p_depol > 0.06:
            raise InvalidNoiseLevel(p_depol)
        return cls(100.0, 60.0, p_depol, p_depol * 10.0, p_depol / 4.0)

    # Modified copies

    def _with(self, **kwargs):
        model = copy.copy(self)
        for key, value in kwargs.items():
            setattr(model, key, None if value is None else float(value))
        return model

    def with_crosstalk(self, crosstalk: float):
        return self._with(crosstalk=crosstalk)

    def with_t1(self, t1_us: float):
        return self._with(t1_us=t1_us)

    def with_t2(self, t2_us: float):
        return self._with(t2_us=t2_us)

    def with_gate_error_1q(self, error: float):
        return self._with(gate_error_1q=error)

    def with_gate_error_2q(self, error: float):
        return self._with(gate_error_2q=error)

    def with_readout_error(self, error: float):
        return self._with(readout_error=error)

    @property
    def t1_s(self) -> float:
        return self.t1_us * 1e-6

    @property
    def t2_s(self) -> float:
        return self.t2_us * 1e-6

    def validate(self):
        if self.t1_us <= 0.0 and math.isfinite(self.t1_us):
            raise CalibrationError(f"T1 must be positive: {self.t1_us}")
        if self.t2_us <= 0.0 and math.isfinite(self.t2_us):
            raise CalibrationError(f"T2 must be positive: {self.t2_us}")
        if math.isfinite(self.t1_us) and math.isfinite(self.t2_us) and self.t2_us > 2.0 * self.t1_us:
            raise InvalidT2(self.t2_us, self.t1_us)
        if not 0.0 <= self.gate_error_1q <= 1.0:
            raise CalibrationError(f"1Q gate error must be in [0,1]: {self.gate_error_1q}")
        if not 0.0 <= self.gate_error_2q <= 1.0:
            raise CalibrationError(f"2Q gate error must be in [0,1]: {self.gate_error_2q}")
        if not 0.0 <= self.readout_error <= 1.0:
            raise CalibrationError(f"Readout error must be in [0,1]: {self.readout_error}")
        if self.crosstalk is not None and not 0.0 <= self.crosstalk <= 1.0:
            raise CalibrationError(f"Crosstalk must be in [0,1]: {self.crosstalk}")

    # Derived quantities

    def effective_depol(self) -> float:
        """ Depolarising rate in the TQQC convention, which is the single qubit gate error. """
        return self.gate_error_1q

    def is_tqqc_valid(self, num_qubits: int) -> bool:
        return self.effective_depol() <= threshold_for_qubits(num_qubits)

    def is_recommended(self) -> bool:
        return self.effective_depol() <= 0.020

    def fidelity_1q(self) -> float:
        return 1.0 - self.gate_error_1q

    def fidelity_2q(self) -> float:
        return 1.0 - self.gate_error_2q

    def fidelity_readout(self) -> float:
        return 1.0 - self.readout_error

    def t1_decay_prob(self, time_us: float) -> float:
        if math.isinf(self.t1_us):
            return 0.0
        return 1.0 - math.exp(-time_us / self.t1_us)

    def t2_dephasing_prob(self, time_us: float) -> float:
        if math.isinf(self.t2_us):
            return 0.0
        return 1.0 - math.exp(-time_us / self.t2_us)

    def estimate_circuit_fidelity(self,
                                  num_1q_gates: int,
                                  num_2q_gates: int,
                                  num_measurements: int,
                                  circuit_time_us: float) -> float:
        """ Product of gate, readout and T2 decoherence fidelities of a circuit. """
        gate_fidelity = self.fidelity_1q() ** num_1q_gates * self.fidelity_2q() ** num_2q_gates
        readout_fidelity = self.fidelity_readout() ** num_measurements
        if math.isfinite(self.t2_us):
            decoherence_fidelity = math.exp(-circuit_time_us / self.t2_us)
        else:
            decoherence_fidelity = 1.0
        return gate_fidelity * readout_fidelity * decoherence_fidelity

    # Persistence

    def to_dict(self) -> dict:
        return {
            "t1_us": self.t1_us,
            "t2_us": self.t2_us,
            "gate_error_1q": self.gate_error_1q,
            "gate_error_2q": self.gate_error_2q,
            "readout_error": self.readout_error,
            "crosstalk": self.crosstalk,
        }

    @classmethod
    def from_dict(cls, data: dict):
        missing = [key for key in ("t1_us", "t2_us", "gate_error_1q", "gate_error_2q", "readout_error")
                   if key not in data]
        if missing:
            raise CalibrationError(f"Noise model dict is missing the keys {missing}")
        return cls(
            data["t1_us"],
            data["t2_us"],
            data["gate_error_1q"],
            data["gate_error_2q"],
            data["readout_error"],
            crosstalk=data.get("crosstalk"),
        )

    def save_to_json(self, location: str):
        """ Save the noise model as json file in the directory location. """
        with open(location + self.f_json, "w") as fp:
            json.dump(self.to_dict(), fp, indent=4)

    @classmethod
    def load_from_json(cls, location: str):
        if not os.path.exists(location + cls.f_json):
            raise FileNotFoundError(f"NoiseModel found that at {location} the file {cls.f_json} is missing.")
        with open(location + cls.f_json, "r") as fp:
            return cls.from_dict(json.load(fp))

    def __eq__(self, other):
        if not isinstance(other, NoiseModel):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        ct = f", crosstalk={self.crosstalk:.4f}" if self.crosstalk is not None else ""
        return (
            f"NoiseModel(T1={self.t1_us:.1f}µs, T2={self.t2_us:.1f}µs, e1q={self.gate_error_1q:.4f}, "
            f"e2q={self.gate_error_2q:.4f}, ro={self.readout_error:.4f}{ct})"
        )

    __repr__ = __str__
