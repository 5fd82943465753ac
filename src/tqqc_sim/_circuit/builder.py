"""
Fluent construction of circuits, including the layers used by TQQC and variational algorithms.
"""

from .circuit import Circuit
from .gate import Gate, EntanglerType
from .._utility.errors import EmptyCircuit
from .._utility.types import Basis, BasisString


class CircuitBuilder(object):
    """ Builds a Circuit by chaining gate methods.

    Each method appends to the circuit and returns the builder. A gate on a qubit outside of the register raises
    GateQubitMismatch right away.

    Args:
        num_qubits (int): Number of qubits.
        name (str): Optional name of the circuit.

    Example:
        .. code:: python

            circuit = (
                CircuitBuilder(3)
                .h(0)
                .cx_chain()
                .measure_all()
                .build()
            )
    """

    def __init__(self, num_qubits: int, name: str=None):
        self._circuit = Circuit(num_qubits, name)

    def _add(self, gate: Gate):
        self._circuit.add_gate(gate)
        return self

    # Single qubit gates

    def h(self, qubit: int):
        return self._add(Gate.h(qubit))

    def x(self, qubit: int):
        return self._add(Gate.x(qubit))

    def y(self, qubit: int):
        return self._add(Gate.y(qubit))

    def z(self, qubit: int):
        return self._add(Gate.z(qubit))

    def s(self, qubit: int):
        return self._add(Gate.s(qubit))

    def sdg(self, qubit: int):
        return self._add(Gate.sdg(qubit))

    def t(self, qubit: int):
        return self._add(Gate.t(qubit))

    def tdg(self, qubit: int):
        return self._add(Gate.tdg(qubit))

    def sx(self, qubit: int):
        return self._add(Gate.sx(qubit))

    def sxdg(self, qubit: int):
        return self._add(Gate.sxdg(qubit))

    def id(self, qubit: int):
        return self._add(Gate.id(qubit))

    def rx(self, qubit: int, angle: float):
        return self._add(Gate.rx(qubit, angle))

    def ry(self, qubit: int, angle: float):
        return self._add(Gate.ry(qubit, angle))

    def rz(self, qubit: int, angle: float):
        return self._add(Gate.rz(qubit, angle))

    def u(self, qubit: int, theta: float, phi: float, lam: float):
        return self._add(Gate.u(qubit, theta, phi, lam))

    def p(self, qubit: int, lam: float):
        return self._add(Gate.p(qubit, lam))

    # Multi qubit gates

    def cnot(self, control: int, target: int):
        return self._add(Gate.cnot(control, target))

    cx = cnot

    def cz(self, control: int, target: int):
        return self._add(Gate.cz(control, target))

    def cy(self, control: int, target: int):
        return self._add(Gate.cy(control, target))

    def swap(self, qubit1: int, qubit2: int):
        return self._add(Gate.swap(qubit1, qubit2))

    def iswap(self, qubit1: int, qubit2: int):
        return self._add(Gate.iswap(qubit1, qubit2))

    def crx(self, control: int, target: int, angle: float):
        return self._add(Gate.crx(control, target, angle))

    def cry(self, control: int, target: int, angle: float):
        return self._add(Gate.cry(control, target, angle))

    def crz(self, control: int, target: int, angle: float):
        return self._add(Gate.crz(control, target, angle))

    def ecr(self, control: int, target: int):
        return self._add(Gate.ecr(control, target))

    def ccx(self, c1: int, c2: int, target: int):
        return self._add(Gate.ccx(c1, c2, target))

    def cswap(self, control: int, t1: int, t2: int):
        return self._add(Gate.cswap(control, t1, t2))

    # Measurement and control

    def measure(self, qubit: int):
        return self._add(Gate.measure(qubit))

    def measure_all(self):
        return self._add(Gate.measure_all())

    def barrier(self):
        """ Barrier on all qubits. """
        return self._add(Gate.barrier(range(self._circuit.num_qubits)))

    def barrier_on(self, qubits: list):
        return self._add(Gate.barrier(qubits))

    def reset(self, qubit: int):
        return self._add(Gate.reset(qubit))

    # Layers

    def ry_layer(self, angles: list):
        """ Ry(angles[i]) on qubit i, for as many qubits as there are angles. """
        for i in range(min(self._circuit.num_qubits, len(angles))):
            self._add(Gate.ry(i, angles[i]))
        return self

    def rz_layer(self, angles: list):
        for i in range(min(self._circuit.num_qubits, len(angles))):
            self._add(Gate.rz(i, angles[i]))
        return self

    def h_layer(self):
        for i in range(self._circuit.num_qubits):
            self._add(Gate.h(i))
        return self

    def entangler_chain(self, entangler: EntanglerType):
        """ Entangler on the nearest neighbour pairs (0, 1), (1, 2), ..., (n-2, n-1). """
        for i in range(self._circuit.num_qubits - 1):
            self._add(entangler.gate(i, i + 1))
        return self

    def cx_chain(self):
        return self.entangler_chain(EntanglerType.CX)

    def cz_chain(self):
        return self.entangler_chain(EntanglerType.CZ)

    def apply_basis(self, basis: BasisString):
        """ Rotates qubit i into basis[i]. Bases beyond the number of qubits are ignored. """
        for i, b in enumerate(basis):
            if i >= self._circuit.num_qubits:
                break
            for gate in Gate.basis_transform(i, b):
                self._add(gate)
        return self

    def apply_uniform_basis(self, basis: Basis):
        for i in range(self._circuit.num_qubits):
            for gate in Gate.basis_transform(i, basis):
                self._add(gate)
        return self

    def tqqc_parity(self, theta: float, delta: float, entangler: EntanglerType, basis: BasisString):
        """ Parity circuit of TQQC.

        Prepares a GHZ-like state with H(0) and the entangler chain, imprints the phase theta + delta on qubit 0,
        rotates every qubit into its measurement basis and measures all qubits.

        Args:
            theta (float): Phase to be corrected.
            delta (float): Correction under optimisation.
            entangler (EntanglerType): CX or CZ.
            basis (BasisString): Measurement basis per qubit.
        """
        return (
            self.h(0)
            .entangler_chain(entangler)
            .rz(0, theta + delta)
            .apply_basis(basis)
            .measure_all()
        )

    def hea_layer(self, params: list, layer: int):
        """ One layer of the hardware efficient ansatz.

        The layer reads 2n parameters starting at layer * 2n: n Ry angles followed by n Rz angles. Missing
        parameters are skipped. The layer ends with a CX chain.
        """
        n = self._circuit.num_qubits
        offset = layer * n * 2
        for i in range(n):
            if offset + i < len(params):
                self._add(Gate.ry(i, params[offset + i]))
        for i in range(n):
            if offset + n + i < len(params):
                self._add(Gate.rz(i, params[offset + n + i]))
        return self.cx_chain()

    def qaoa_mixer(self, beta: float):
        for i in range(self._circuit.num_qubits):
            self._add(Gate.rx(i, 2.0 * beta))
        return self

    # Build

    def build(self) -> Circuit:
        """ Copy of the circuit built so far. Further builder calls do not change it. """
        return Circuit.from_gates(self._circuit.num_qubits, self._circuit.gates, self._circuit.name)

    def build_validated(self) -> Circuit:
        if self._circuit.is_empty():
            raise EmptyCircuit()
        return self.build()

    @property
    def circuit(self) -> Circuit:
        return self._circuit

    @property
    def num_qubits(self) -> int:
        return self._circuit.num_qubits
