"""
Gate durations of different hardware platforms, used to estimate circuit duration and idle times.
"""

import copy


class GateTimes(object):
    """ Durations in ns per gate category, with optional overrides per gate name.

    Args:
        single_qubit_ns (float): Duration of single qubit gates.
        two_qubit_ns (float): Duration of two qubit gates.
        measurement_ns (float): Duration of a measurement.
        gate_overrides (dict): Optional map from gate name (e.g. "rz") to duration.

    Example:
        .. code:: python

            times = GateTimes.default()
            times.gate_duration(Gate.h(0))        # 35.0
            times.gate_duration(Gate.rz(0, 1.0))  # 0.0, virtual gate
    """

    def __init__(self, single_qubit_ns: float, two_qubit_ns: float, measurement_ns: float, gate_overrides: dict=None):
        self.single_qubit_ns = single_qubit_ns
        self.two_qubit_ns = two_qubit_ns
        self.measurement_ns = measurement_ns
        self.gate_overrides = dict(gate_overrides or {})

    @classmethod
    def default(cls):
        """ IBM superconducting times including the per-gate overrides. """
        return cls.default_ibm().with_ibm_defaults()

    @classmethod
    def default_ibm(cls):
        return cls(35.0, 300.0, 5000.0)

    @classmethod
    def superconducting(cls):
        return cls.default_ibm()

    @classmethod
    def trapped_ion(cls):
        return cls(10_000.0, 200_000.0, 100_000.0)

    @classmethod
    def neutral_atom(cls):
        return cls(1_000.0, 1_000.0, 50_000.0)

    @classmethod
    def photonic(cls):
        return cls(10.0, 100.0, 1_000.0)

    def with_gate_time(self, gate_name: str, time_ns: float):
        times = copy.deepcopy(self)
        times.gate_overrides[gate_name.lower()] = time_ns
        return times

    def with_ibm_defaults(self):
        times = copy.deepcopy(self)
        times.gate_overrides.update({
            # Virtual gates
            "rz": 0.0,
            "z": 0.0,
            "id": 0.0,
            "h": 35.0,
            "x": 35.0,
            "y": 35.0,
            "sx": 35.0,
            "s": 35.0,
            "sdg": 35.0,
            "t": 35.0,
            "tdg": 35.0,
            "rx": 35.0,
            "ry": 35.0,
            "cx": 300.0,
            "cz": 300.0,
            "ecr": 300.0,
            # Three CNOTs
            "swap": 900.0,
            "reset": 1000.0,
            "measure": 5000.0,
        })
        return times

    def gate_duration(self, gate) -> float:
        if gate.name in self.gate_overrides:
            return self.gate_overrides[gate.name]
        if gate.is_measurement:
            return self.measurement_ns
        if gate.is_two_qubit:
            return self.two_qubit_ns
        if gate.is_three_qubit:
            # Toffoli decomposition into 6 CNOTs
            return self.two_qubit_ns * 6.0
        if gate.is_single_qubit:
            return self.single_qubit_ns
        if gate.is_barrier:
            return 0.0
        return self.single_qubit_ns

    def circuit_duration_sequential(self, circuit) -> float:
        return sum(self.gate_duration(g) for g in circuit.gates)

    def circuit_duration_asap(self, circuit) -> tuple:
        """ Duration when every gate starts as soon as its qubits are free.

        Returns:
            Tuple of the total duration and the list of per-qubit end times.
        """
        qubit_available = [0.0] * circuit.num_qubits
        for gate in circuit.gates:
            qubits = gate.qubits()
            duration = self.gate_duration(gate)
            if not qubits:
                end_time = max(qubit_available, default=0.0) + duration
                qubit_available = [end_time] * circuit.num_qubits
            else:
                start_time = max(qubit_available[q] for q in qubits)
                for q in qubits:
                    qubit_available[q] = start_time + duration
        return max(qubit_available, default=0.0), qubit_available

    @staticmethod
    def to_microseconds(ns: float) -> float:
        return ns / 1000.0

    @staticmethod
    def to_seconds(ns: float) -> float:
        return ns * 1e-9

    def estimate_idle_times(self, circuit) -> list:
        """ Per qubit: end time minus the time spent in gates on that qubit, floored at zero. """
        _, qubit_times = self.circuit_duration_asap(circuit)
        active_times = [0.0] * circuit.num_qubits
        for gate in circuit.gates:
            duration = self.gate_duration(gate)
            for q in gate.qubits():
                active_times[q] += duration
        return [max(total - active, 0.0) for total, active in zip(qubit_times, active_times)]

    def parallelism_factor(self, circuit) -> float:
        sequential = self.circuit_duration_sequential(circuit)
        parallel, _ = self.circuit_duration_asap(circuit)
        return sequential / parallel if parallel > 0.0 else 1.0

    def to_dict(self) -> dict:
        return {
            "single_qubit_ns": self.single_qubit_ns,
            "two_qubit_ns": self.two_qubit_ns,
            "measurement_ns": self.measurement_ns,
            "gate_overrides": dict(self.gate_overrides),
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(data["single_qubit_ns"], data["two_qubit_ns"], data["measurement_ns"], data.get("gate_overrides"))

    def __eq__(self, other):
        if not isinstance(other, GateTimes):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        return f"GateTimes(1Q={self.single_qubit_ns:.0f}ns, 2Q={self.two_qubit_ns:.0f}ns, meas={self.measurement_ns:.0f}ns)"
