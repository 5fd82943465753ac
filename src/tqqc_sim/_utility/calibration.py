"""
Calibration snapshot of a device. It can be created from a qiskit backend, stored as json and converted into the
noise model, noise vectors, topology and gate times used by the simulator and the scheduler.
"""

import json
import logging
import os
from datetime import datetime, timedelta

import numpy as np

from .._circuit.topology import Topology
from .._noise.gate_times import GateTimes
from .._noise.noise_model import NoiseModel
from .._noise.noise_vector import NoiseVector, NoiseVectorSet
from .errors import CalibrationError, TopologyError, TqqcSimError


logger = logging.getLogger(__name__)

_DEFAULT_T1_US = 100.0
_DEFAULT_T2_US = 60.0
_DEFAULT_ERROR_1Q = 0.001
_DEFAULT_ERROR_2Q = 0.01
_DEFAULT_READOUT = 0.01


class CalibrationInfo(object):
    """ Per-qubit calibration data of a backend.

    Args:
        backend_name (str): Name of the device.
        timestamp (datetime): Time of the snapshot, now if None.

    Attributes:
        t1_times (dict[int, float]): T1 per qubit in µs.
        t2_times (dict[int, float]): T2 per qubit in µs.
        gate_errors_1q (dict[int, float]): Single qubit gate error per qubit.
        gate_errors_2q (dict[tuple[int, int], float]): Two qubit gate error per coupled pair.
        readout_errors (dict[int, float]): Readout error per qubit.
        coupling_map (list[tuple[int, int]]): Connectivity of the device.
        gate_times_1q_ns (float): Duration of single qubit gates, None if unknown.
        gate_times_2q_ns (float): Duration of two qubit gates, None if unknown.

    Example:
        .. code:: python

            from qiskit.providers.fake_provider import GenericBackendV2

            calibration = CalibrationInfo.from_backend(GenericBackendV2(num_qubits=5, seed=42))
            backend = SimulatorBackend(5, calibration.to_noise_model()).with_calibration(calibration)
    """

    f_json = "calibration.json"

    def __init__(self, backend_name: str, timestamp: datetime=None):
        self.backend_name = backend_name
        self.timestamp = timestamp if timestamp is not None else datetime.now()
        self.t1_times = {}
        self.t2_times = {}
        self.gate_errors_1q = {}
        self.gate_errors_2q = {}
        self.readout_errors = {}
        self.coupling_map = []
        self.gate_times_1q_ns = None
        self.gate_times_2q_ns = None

    @classmethod
    def uniform(cls, backend_name: str, num_qubits: int, t1_us: float, t2_us: float, error_1q: float,
                error_2q: float, readout_error: float):
        """ Identical qubits coupled in a line. """
        info = cls(backend_name)
        for q in range(num_qubits):
            info.t1_times[q] = t1_us
            info.t2_times[q] = t2_us
            info.gate_errors_1q[q] = error_1q
            info.readout_errors[q] = readout_error
        for q in range(num_qubits - 1):
            info.coupling_map.append((q, q + 1))
            info.gate_errors_2q[(q, q + 1)] = error_2q
        return info

    @classmethod
    def ibm_typical(cls, num_qubits: int):
        return cls.uniform("ibm_simulator", num_qubits, 100.0, 60.0, 0.0003, 0.01, 0.01)

    @classmethod
    def from_backend(cls, backend, qubits_layout: list=None):
        """ Reads the calibration from the target of a qiskit BackendV2.

        Args:
            backend: Qiskit backend with a target, e.g. GenericBackendV2 or an IBM backend.
            qubits_layout (list[int]): Physical qubits to read, all qubits if None. They are relabelled 0, 1, ...
                in the given order.
        """
        target = backend.target
        layout = list(range(backend.num_qubits)) if qubits_layout is None else list(qubits_layout)
        index = {physical: virtual for virtual, physical in enumerate(layout)}
        info = cls(backend.name)

        qubit_properties = target.qubit_properties or [None] * backend.num_qubits
        for physical, q in index.items():
            props = qubit_properties[physical]
            if props is not None and getattr(props, "t1", None) is not None:
                info.t1_times[q] = props.t1 * 1e6
            if props is not None and getattr(props, "t2", None) is not None:
                info.t2_times[q] = props.t2 * 1e6

        # The error of x overwrites the one of sx where both are calibrated
        durations_1q = []
        for name in ("sx", "x"):
            if name not in target.operation_names:
                continue
            for qargs, props in target[name].items():
                if props is None or qargs is None or qargs[0] not in index:
                    continue
                if props.error is not None:
                    info.gate_errors_1q[index[qargs[0]]] = props.error
                if props.duration is not None:
                    durations_1q.append(props.duration)

        if "measure" in target.operation_names:
            for qargs, props in target["measure"].items():
                if props is not None and qargs is not None and qargs[0] in index and props.error is not None:
                    info.readout_errors[index[qargs[0]]] = props.error

        durations_2q = []
        for name in ("cx", "ecr", "cz"):
            if name not in target.operation_names:
                continue
            for qargs, props in target[name].items():
                if qargs is None or qargs[0] not in index or qargs[1] not in index:
                    continue
                pair = (index[qargs[0]], index[qargs[1]])
                if pair not in info.coupling_map:
                    info.coupling_map.append(pair)
                if props is not None and props.error is not None:
                    info.gate_errors_2q[pair] = props.error
                if props is not None and props.duration is not None:
                    durations_2q.append(props.duration)

        if durations_1q:
            info.gate_times_1q_ns = float(np.mean(durations_1q)) * 1e9
        if durations_2q:
            info.gate_times_2q_ns = float(np.mean(durations_2q)) * 1e9

        logger.debug(f"Loaded calibration of {backend.name} for {len(layout)} qubits.")
        return info

    # Accessors

    @property
    def num_qubits(self) -> int:
        return max(len(self.t1_times), len(self.t2_times), len(self.gate_errors_1q), len(self.readout_errors))

    def avg_t1(self) -> float:
        return float(np.mean(list(self.t1_times.values()))) if self.t1_times else _DEFAULT_T1_US

    def avg_t2(self) -> float:
        return float(np.mean(list(self.t2_times.values()))) if self.t2_times else _DEFAULT_T2_US

    def avg_error_1q(self) -> float:
        return float(np.mean(list(self.gate_errors_1q.values()))) if self.gate_errors_1q else _DEFAULT_ERROR_1Q

    def avg_error_2q(self) -> float:
        return float(np.mean(list(self.gate_errors_2q.values()))) if self.gate_errors_2q else _DEFAULT_ERROR_2Q

    def avg_readout(self) -> float:
        return float(np.mean(list(self.readout_errors.values()))) if self.readout_errors else _DEFAULT_READOUT

    def age(self) -> timedelta:
        return datetime.now() - self.timestamp

    def is_fresh(self, ttl: timedelta) -> bool:
        age = self.age()
        return timedelta(0) <= age < ttl

    # Conversions

    def to_noise_model(self) -> NoiseModel:
        """ Noise model from the averages, NoiseModel.ibm_typical() if they do not form a valid model. """
        try:
            return NoiseModel(self.avg_t1(), self.avg_t2(), self.avg_error_1q(), self.avg_error_2q(),
                              self.avg_readout())
        except TqqcSimError as e:
            logger.warning(f"Calibration of {self.backend_name} does not form a valid noise model ({e}), "
                           f"use ibm_typical.")
            return NoiseModel.ibm_typical()

    def to_noise_vectors(self) -> NoiseVectorSet:
        """ One noise vector per qubit. The two qubit error of a qubit is the worst error of its couplings. """
        vectors = []
        for q in range(self.num_qubits):
            errors_2q = [e for (q1, q2), e in self.gate_errors_2q.items() if q in (q1, q2)]
            error_2q = max(errors_2q) if errors_2q else _DEFAULT_ERROR_2Q
            vectors.append(NoiseVector(
                q,
                self.t1_times.get(q, _DEFAULT_T1_US),
                self.t2_times.get(q, _DEFAULT_T2_US),
                self.gate_errors_1q.get(q, _DEFAULT_ERROR_1Q),
                error_2q,
                self.readout_errors.get(q, _DEFAULT_READOUT),
            ))
        return NoiseVectorSet(vectors)

    def to_topology(self) -> Topology:
        try:
            return Topology.from_coupling_map(self.coupling_map, bidirectional=True)
        except TopologyError as e:
            logger.warning(f"Calibration of {self.backend_name} has no valid coupling map ({e}), use a line.")
            return Topology.linear(self.num_qubits)

    def to_gate_times(self) -> GateTimes:
        return GateTimes(
            self.gate_times_1q_ns if self.gate_times_1q_ns is not None else 35.0,
            self.gate_times_2q_ns if self.gate_times_2q_ns is not None else 300.0,
            5000.0,
        )

    # Qubit selection

    def best_qubits(self, n: int) -> list:
        return self.to_noise_vectors().best_qubits(n)

    def best_linear_chain(self, length: int):
        return self.to_topology().find_linear_chain(length)

    def qubit_quality(self, qubit: int) -> float:
        t1_score = min(self.t1_times.get(qubit, _DEFAULT_T1_US) / 200.0, 1.0)
        t2_score = min(self.t2_times.get(qubit, _DEFAULT_T2_US) / 120.0, 1.0)
        gate_score = 1.0 - self.gate_errors_1q.get(qubit, _DEFAULT_ERROR_1Q)
        readout_score = 1.0 - self.readout_errors.get(qubit, _DEFAULT_READOUT)
        return (t1_score * t2_score * gate_score * readout_score) ** 0.25

    # Persistence

    def to_dict(self) -> dict:
        return {
            "backend_name": self.backend_name,
            "timestamp": int(self.timestamp.timestamp()),
            "t1_times": {str(q): v for q, v in self.t1_times.items()},
            "t2_times": {str(q): v for q, v in self.t2_times.items()},
            "gate_errors_1q": {str(q): v for q, v in self.gate_errors_1q.items()},
            "gate_errors_2q": {f"{q1},{q2}": v for (q1, q2), v in self.gate_errors_2q.items()},
            "readout_errors": {str(q): v for q, v in self.readout_errors.items()},
            "coupling_map": [list(pair) for pair in self.coupling_map],
            "gate_times_1q_ns": self.gate_times_1q_ns,
            "gate_times_2q_ns": self.gate_times_2q_ns,
        }

    @classmethod
    def from_dict(cls, data: dict):
        try:
            info = cls(data["backend_name"], datetime.fromtimestamp(data["timestamp"]))
            info.t1_times = {int(q): float(v) for q, v in data.get("t1_times", {}).items()}
            info.t2_times = {int(q): float(v) for q, v in data.get("t2_times", {}).items()}
            info.gate_errors_1q = {int(q): float(v) for q, v in data.get("gate_errors_1q", {}).items()}
            info.gate_errors_2q = {
                tuple(int(q) for q in key.split(",")): float(v) for key, v in data.get("gate_errors_2q", {}).items()
            }
            info.readout_errors = {int(q): float(v) for q, v in data.get("readout_errors", {}).items()}
            info.coupling_map = [(int(a), int(b)) for a, b in data.get("coupling_map", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise CalibrationError(f"Malformed calibration data: {e}") from e
        info.gate_times_1q_ns = data.get("gate_times_1q_ns")
        info.gate_times_2q_ns = data.get("gate_times_2q_ns")
        return info

    def save_to_json(self, location: str):
        """ Save the calibration as json file in the directory location. """
        with open(location + self.f_json, "w") as fp:
            json.dump(self.to_dict(), fp, indent=4)

    @classmethod
    def load_from_json(cls, location: str):
        if not os.path.exists(location + cls.f_json):
            raise FileNotFoundError(f"CalibrationInfo found that at {location} the file {cls.f_json} is missing.")
        with open(location + cls.f_json, "r") as fp:
            return cls.from_dict(json.load(fp))

    def __eq__(self, other):
        if not isinstance(other, CalibrationInfo):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        return (
            f"CalibrationInfo({self.backend_name}, {self.num_qubits}Q, T1={self.avg_t1():.0f}μs, "
            f"T2={self.avg_t2():.0f}μs, 1Q={self.avg_error_1q():.4f}, 2Q={self.avg_error_2q():.4f})"
        )
