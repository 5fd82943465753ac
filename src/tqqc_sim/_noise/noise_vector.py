"""
Per-qubit noise parameters and fidelity estimates.

A NoiseVector describes one physical qubit, a NoiseVectorSet a whole device. The set can be collapsed into a
device-wide NoiseModel for the simulator.
"""

import json
import logging
import math
import os
import numpy as np

from .noise_model import NoiseModel
from .._utility.errors import CalibrationError, TqqcSimError


logger = logging.getLogger(__name__)


class NoiseVector(object):
    """ Noise of a single qubit.

    Args:
        qubit_id (int): Physical index of the qubit.
        t1 (float): T1 in microseconds.
        t2 (float): T2 in microseconds.
        gate_error_1q (float): Single qubit gate error.
        gate_error_2q (float): Error of two qubit gates involving the qubit.
        readout_error (float): Readout error.
    """

    def __init__(self, qubit_id: int, t1: float, t2: float, gate_error_1q: float, gate_error_2q: float,
                 readout_error: float):
        self.qubit_id = qubit_id
        self.t1 = t1
        self.t2 = t2
        self.gate_error_1q = gate_error_1q
        self.gate_error_2q = gate_error_2q
        self.readout_error = readout_error

    @classmethod
    def from_noise_model(cls, qubit_id: int, model: NoiseModel):
        return cls(qubit_id, model.t1_us, model.t2_us, model.gate_error_1q, model.gate_error_2q,
                   model.readout_error)

    @classmethod
    def ideal(cls, qubit_id: int):
        return cls(qubit_id, math.inf, math.inf, 0.0, 0.0, 0.0)

    def estimate_gate_fidelity(self, num_1q_gates: int, num_2q_gates: int) -> float:
        return (1.0 - self.gate_error_1q) ** num_1q_gates * (1.0 - self.gate_error_2q) ** num_2q_gates

    def estimate_decoherence(self, time_us: float) -> float:
        """ Dephasing probability after time_us microseconds. """
        if time_us <= 0.0 or math.isinf(self.t2):
            return 0.0
        return 1.0 - math.exp(-time_us / self.t2)

    def estimate_t1_error(self, time_us: float) -> float:
        """ Relaxation probability after time_us microseconds. """
        if time_us <= 0.0 or math.isinf(self.t1):
            return 0.0
        return 1.0 - math.exp(-time_us / self.t1)

    def estimate_readout_fidelity(self, num_measurements: int) -> float:
        return (1.0 - self.readout_error) ** num_measurements

    def estimate_circuit_fidelity(self, num_1q_gates: int, num_2q_gates: int, num_measurements: int,
                                  circuit_time_us: float) -> float:
        return (
            self.estimate_gate_fidelity(num_1q_gates, num_2q_gates)
            * self.estimate_readout_fidelity(num_measurements)
            * (1.0 - self.estimate_decoherence(circuit_time_us))
        )

    def quality_score(self) -> float:
        """ Geometric mean of five fidelities in [0, 1], with T1 and T2 normalised to 200 µs and 120 µs. """
        t1_fidelity = min(self.t1 / 200.0, 1.0) if math.isfinite(self.t1) and self.t1 > 0.0 else 1.0
        t2_fidelity = min(self.t2 / 120.0, 1.0) if math.isfinite(self.t2) and self.t2 > 0.0 else 1.0
        product = (
            t1_fidelity
            * t2_fidelity
            * (1.0 - self.gate_error_1q)
            * (1.0 - self.gate_error_2q)
            * (1.0 - self.readout_error)
        )
        return max(product, 0.0) ** 0.2

    def is_tqqc_usable(self) -> bool:
        return (
            self.t1 >= 50.0
            and self.t2 >= 30.0
            and self.gate_error_1q <= 0.01
            and self.gate_error_2q <= 0.05
            and self.readout_error <= 0.05
        )

    def to_dict(self) -> dict:
        return {
            "qubit_id": self.qubit_id,
            "t1": self.t1,
            "t2": self.t2,
            "gate_error_1q": self.gate_error_1q,
            "gate_error_2q": self.gate_error_2q,
            "readout_error": self.readout_error,
        }

    @classmethod
    def from_dict(cls, data: dict):
        try:
            return cls(data["qubit_id"], data["t1"], data["t2"], data["gate_error_1q"], data["gate_error_2q"],
                       data["readout_error"])
        except KeyError as e:
            raise CalibrationError(f"Noise vector dict is missing the key {e}") from e

    def __eq__(self, other):
        if not isinstance(other, NoiseVector):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        return (
            f"Q{self.qubit_id}: T1={self.t1:.0f}μs T2={self.t2:.0f}μs 1Q={self.gate_error_1q:.4f} "
            f"2Q={self.gate_error_2q:.4f} RO={self.readout_error:.4f}"
        )


class NoiseVectorSet(object):
    """ Noise vectors of all qubits of a device, index i holds qubit i.

    Example:
        .. code:: python

            vectors = NoiseVectorSet.from_noise_model(5, NoiseModel.ibm_typical())
            vectors.best_qubits(3)      # [0, 1, 2] as all qubits are equal
            model = vectors.to_noise_model()
    """

    f_json = "noise_vectors.json"

    def __init__(self, vectors: list):
        self.vectors = list(vectors)

    @classmethod
    def from_noise_model(cls, num_qubits: int, model: NoiseModel):
        return cls([NoiseVector.from_noise_model(q, model) for q in range(num_qubits)])

    @classmethod
    def default(cls):
        return cls.from_noise_model(7, NoiseModel.ibm_typical())

    @property
    def num_qubits(self) -> int:
        return len(self.vectors)

    def get(self, qubit: int):
        if 0 <= qubit < len(self.vectors):
            return self.vectors[qubit]
        return None

    def _finite_mean(self, values: np.ndarray) -> float:
        if values.size == 0:
            return 0.0
        finite = values[np.isfinite(values)]
        return float(finite.mean()) if finite.size > 0 else math.inf

    def avg_t1(self) -> float:
        """ Mean over the finite T1 values. Infinite if all are infinite, 0 for an empty set. """
        return self._finite_mean(np.array([v.t1 for v in self.vectors], dtype=float))

    def avg_t2(self) -> float:
        return self._finite_mean(np.array([v.t2 for v in self.vectors], dtype=float))

    def avg_error_1q(self) -> float:
        if not self.vectors:
            return 0.0
        return float(np.mean([v.gate_error_1q for v in self.vectors]))

    def avg_error_2q(self) -> float:
        if not self.vectors:
            return 0.0
        return float(np.mean([v.gate_error_2q for v in self.vectors]))

    def avg_readout(self) -> float:
        if not self.vectors:
            return 0.0
        return float(np.mean([v.readout_error for v in self.vectors]))

    def best_qubits(self, n: int) -> list:
        """ The n qubits with the highest quality score, best first. """
        ranked = sorted(self.vectors, key=lambda v: v.quality_score(), reverse=True)
        return [v.qubit_id for v in ranked[:n]]

    def tqqc_usable_qubits(self) -> list:
        return [v.qubit_id for v in self.vectors if v.is_tqqc_usable()]

    def to_noise_model(self) -> NoiseModel:
        """ Device-wide model from the averages. Falls back to NoiseModel.ibm_typical() if they are unphysical. """
        try:
            return NoiseModel(self.avg_t1(), self.avg_t2(), self.avg_error_1q(), self.avg_error_2q(),
                              self.avg_readout())
        except TqqcSimError as e:
            logger.warning(f"Averaged noise vectors do not form a valid noise model ({e}), use ibm_typical.")
            return NoiseModel.ibm_typical()

    def to_dict(self) -> dict:
        return {"vectors": [v.to_dict() for v in self.vectors]}

    @classmethod
    def from_dict(cls, data: dict):
        if "vectors" not in data:
            raise CalibrationError("Noise vector set dict is missing the key 'vectors'")
        return cls([NoiseVector.from_dict(v) for v in data["vectors"]])

    def save_to_json(self, location: str):
        """ Save the noise vectors as json file in the directory location. """
        with open(location + self.f_json, "w") as fp:
            json.dump(self.to_dict(), fp, indent=4)

    @classmethod
    def load_from_json(cls, location: str):
        if not os.path.exists(location + cls.f_json):
            raise FileNotFoundError(f"NoiseVectorSet found that at {location} the file {cls.f_json} is missing.")
        with open(location + cls.f_json, "r") as fp:
            return cls.from_dict(json.load(fp))

    def __len__(self):
        return len(self.vectors)

    def __iter__(self):
        return iter(self.vectors)

    def __eq__(self, other):
        if not isinstance(other, NoiseVectorSet):
            return NotImplemented
        return self.vectors == other.vectors
