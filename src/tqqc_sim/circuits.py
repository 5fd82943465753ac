""" Gates, circuits and their construction.

Attributes:
    Gate: Quantum operation on explicit qubit indices with optional angle parameters.
    EntanglerType: Two qubit gate used for the entangling chain of TQQC circuits (CX or CZ).
    Circuit: Ordered list of gates on a fixed register, with QASM and qiskit conversion.
    CircuitBuilder: Fluent construction of circuits, including the TQQC parity circuit.
    Topology: Qubit connectivity with routing helpers.
"""

from ._circuit.gate import Gate, EntanglerType
from ._circuit.circuit import Circuit
from ._circuit.builder import CircuitBuilder
from ._circuit.topology import Topology
