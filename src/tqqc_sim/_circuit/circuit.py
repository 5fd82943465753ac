"""
Circuit representation as ordered list of gates on a fixed number of qubits, with OpenQASM 2.0 and Qiskit
interchange.
"""

import numpy as np

from qiskit import QuantumCircuit, qasm2

from .gate import Gate
from .._utility.errors import GateQubitMismatch, InvalidQasm, InvalidGateParameter


class Circuit(object):
    """ Ordered sequence of gates acting on num_qubits qubits.

    Every gate is checked on insertion, so a Circuit never references a qubit outside of range(num_qubits).

    Args:
        num_qubits (int): Number of qubits.
        name (str): Optional name of the circuit.

    Example:
        .. code:: python

            circ = Circuit(2, name="bell")
            circ.add_gate(Gate.h(0))
            circ.add_gate(Gate.cnot(0, 1))
            circ.add_gate(Gate.measure_all())

            print(circ.to_qasm())
    """

    def __init__(self, num_qubits: int, name: str=None):
        self.num_qubits = num_qubits
        self.name = name
        self._gates = []

    @classmethod
    def from_gates(cls, num_qubits: int, gates: list, name: str=None):
        circuit = cls(num_qubits, name)
        circuit.add_gates(gates)
        return circuit

    def add_gate(self, gate: Gate):
        for qubit in gate.qubits():
            if qubit >= self.num_qubits:
                raise GateQubitMismatch(qubit, self.num_qubits)
        self._gates.append(gate)

    def add_gates(self, gates):
        for gate in gates:
            self.add_gate(gate)

    def clear(self):
        self._gates.clear()

    @property
    def gates(self) -> list:
        return list(self._gates)

    def is_empty(self) -> bool:
        return len(self._gates) == 0

    def __len__(self):
        return len(self._gates)

    def __iter__(self):
        return iter(self._gates)

    def __eq__(self, other):
        if not isinstance(other, Circuit):
            return NotImplemented
        return self.num_qubits == other.num_qubits and self._gates == other._gates

    # Analysis

    def depth(self) -> int:
        """ Number of layers when each gate is placed right after the last gate on its qubits.

        Gates without explicit qubits (MeasureAll) synchronise all qubits.
        """
        if not self._gates:
            return 0
        qubit_depths = [0] * self.num_qubits
        for gate in self._gates:
            qubits = gate.qubits()
            if not qubits:
                max_depth = max(qubit_depths, default=0)
                qubit_depths = [max_depth + 1] * self.num_qubits
            else:
                max_depth = max(qubit_depths[q] for q in qubits)
                for q in qubits:
                    qubit_depths[q] = max_depth + 1
        return max(qubit_depths, default=0)

    def gate_count(self) -> int:
        return len(self._gates)

    def count_1q(self) -> int:
        return sum(1 for g in self._gates if g.is_single_qubit)

    def count_2q(self) -> int:
        return sum(1 for g in self._gates if g.is_two_qubit)

    def count_3q(self) -> int:
        return sum(1 for g in self._gates if g.is_three_qubit)

    def count_measurements(self) -> int:
        return sum(1 for g in self._gates if g.is_measurement)

    def count_parameterized(self) -> int:
        return sum(1 for g in self._gates if g.is_parameterized)

    def used_qubits(self) -> set:
        return {q for g in self._gates for q in g.qubits()}

    def two_qubit_pairs(self) -> list:
        return [tuple(g.qubits()[:2]) for g in self._gates if g.is_two_qubit]

    def total_time_ns(self) -> float:
        """ Sum of the intrinsic gate durations, i.e. the duration without any parallelism. """
        return sum(g.gate_time_ns() for g in self._gates)

    def validate(self, topology):
        topology.validate_circuit(self)

    # OpenQASM

    def to_qasm(self) -> str:
        """ OpenQASM 2.0 text of the circuit, written by qiskit from to_qiskit(). """
        return qasm2.dumps(self.to_qiskit())

    @classmethod
    def from_qasm(cls, qasm: str):
        """ Loads an OpenQASM 2.0 program with qiskit and converts it with from_qiskit().

        The qelib1 gates and the legacy extensions (u, p, sx, ...) are known without definition. Register
        broadcasts such as "h q;" expand to one gate per qubit.

        Raises:
            InvalidQasm: If the program does not parse or contains an instruction without counterpart.
        """
        try:
            qc = qasm2.loads(qasm, custom_instructions=qasm2.LEGACY_CUSTOM_INSTRUCTIONS)
        except qasm2.QASM2ParseError as e:
            raise InvalidQasm(str(e)) from e
        try:
            return cls.from_qiskit(qc)
        except InvalidGateParameter as e:
            raise InvalidQasm(str(e)) from e

    # Qiskit

    def to_qiskit(self) -> QuantumCircuit:
        """ Equivalent Qiskit circuit with one classical bit per qubit. """
        qc = QuantumCircuit(self.num_qubits, self.num_qubits, name=self.name)
        for gate in self._gates:
            kind, qs, ps = gate.kind, gate.qubits(), gate.params
            if kind == "measure":
                qc.measure(qs[0], qs[0])
            elif kind == "measure_all":
                qc.measure(range(self.num_qubits), range(self.num_qubits))
            elif kind == "barrier":
                if qs:
                    qc.barrier(*qs)
                else:
                    qc.barrier()
            else:
                getattr(qc, kind)(*ps, *qs)
        return qc

    @classmethod
    def from_qiskit(cls, qc: QuantumCircuit):
        """ Converts a Qiskit circuit with bound parameters.

        A run of measurements q[i] -> c[i] over the whole register in qubit order, as written by to_qiskit() for
        MeasureAll, is read back as MeasureAll.

        Raises:
            InvalidGateParameter: If the circuit contains an instruction without counterpart or unbound parameters.
        """
        circuit = cls(qc.num_qubits, name=qc.name)
        pending = []
        for instruction in qc.data:
            op = instruction.operation
            qubits = [qc.find_bit(q).index for q in instruction.qubits]
            if op.name == "measure":
                clbit = qc.find_bit(instruction.clbits[0]).index
                if not qubits[0] == clbit == len(pending):
                    circuit.add_gates(Gate.measure(q) for q in pending)
                    pending = []
                if qubits[0] == clbit == len(pending):
                    pending.append(qubits[0])
                    if len(pending) == qc.num_qubits:
                        circuit.add_gate(Gate.measure_all())
                        pending = []
                else:
                    circuit.add_gate(Gate.measure(qubits[0]))
                continue
            circuit.add_gates(Gate.measure(q) for q in pending)
            pending = []
            circuit.add_gate(_gate_from_qiskit(op, qubits))
        circuit.add_gates(Gate.measure(q) for q in pending)
        return circuit

    def __str__(self):
        return (
            f"Circuit({self.num_qubits} qubits, {len(self._gates)} gates)\n"
            f"  Depth: {self.depth()}\n"
            f"  1Q gates: {self.count_1q()}\n"
            f"  2Q gates: {self.count_2q()}\n"
        )


_QISKIT_NAMES = {"cnot": "cx", "toffoli": "ccx", "fredkin": "cswap", "u3": "u", "u1": "p"}
_FROM_QISKIT = {
    "h", "x", "y", "z", "s", "sdg", "t", "tdg", "sx", "sxdg", "id", "rx", "ry", "rz", "u", "p",
    "cx", "cz", "cy", "swap", "iswap", "ecr", "crz", "crx", "cry", "ccx", "cswap",
    "barrier", "reset",
}


def _gate_from_qiskit(op, qubits: list) -> Gate:
    try:
        params = [float(p) for p in op.params]
    except TypeError:
        raise InvalidGateParameter(f"instruction '{op.name}' has unbound parameters {op.params}") from None
    if op.name == "u2":
        # u2(phi, lam) = u(pi/2, phi, lam)
        return Gate("u", qubits, [np.pi / 2] + params)
    kind = _QISKIT_NAMES.get(op.name, op.name)
    if kind not in _FROM_QISKIT:
        raise InvalidGateParameter(f"unsupported Qiskit instruction '{op.name}'")
    return Gate(kind, qubits, params)
