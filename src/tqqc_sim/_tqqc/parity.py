"""
Parity of measurement counts and the TQQC parity circuit.

The parity expectation of counts is E = P(even) - P(odd) = sum_b (-1)**popcount(b) P(b).
"""

from .._circuit.builder import CircuitBuilder
from .._circuit.circuit import Circuit
from .._circuit.gate import EntanglerType
from .._utility.types import BasisString


def popcount(bitstring: str) -> int:
    return bitstring.count("1")


def is_even(bitstring: str) -> bool:
    return popcount(bitstring) % 2 == 0


def is_odd(bitstring: str) -> bool:
    return not is_even(bitstring)


def p_even(counts: dict) -> float:
    """ Probability of even parity, 0.5 for empty counts. """
    total = sum(counts.values())
    if total == 0:
        return 0.5
    return sum(c for bitstring, c in counts.items() if is_even(bitstring)) / total


def p_odd(counts: dict) -> float:
    return 1.0 - p_even(counts)


def expectation(counts: dict) -> float:
    """ Parity expectation P(even) - P(odd), 0.0 for empty counts. """
    total = sum(counts.values())
    if total == 0:
        return 0.0
    weighted = sum(c if is_even(bitstring) else -c for bitstring, c in counts.items())
    return weighted / total


def parity_sign(bitstring: str) -> int:
    return 1 if is_even(bitstring) else -1


def build_circuit(config, theta: float, delta: float) -> Circuit:
    """ Parity circuit of the config: H(0), entangler chain, Rz(theta + delta) on qubit 0, basis change, measure. """
    return build_circuit_with_basis(config.qubits, theta, delta, config.entangler, config.basis)


def build_circuit_with_basis(num_qubits: int, theta: float, delta: float, entangler: EntanglerType,
                             basis: BasisString) -> Circuit:
    return CircuitBuilder(num_qubits).tqqc_parity(theta, delta, entangler, basis).build()
