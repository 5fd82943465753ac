"""
Generators of standard circuits used to test and benchmark the simulator and the TQQC optimisation.

All circuits end with a measurement of all qubits.
"""

import numpy as np

from .._circuit.builder import CircuitBuilder
from .._circuit.circuit import Circuit
from .._circuit.gate import EntanglerType
from .types import BasisString


def bell_circ() -> Circuit:
    """ Generates the Bell state (|00> + |11>) / sqrt(2) on two qubits. """
    return CircuitBuilder(2, name="bell").h(0).cnot(0, 1).measure_all().build()


def ghz_circ(n_qubits: int) -> Circuit:
    """ Generates the GHZ circuit for n qubits.

    The circuit first applies a Hadamard on the first qubit, and then a linear chain of CNOT gates with qubit i as
    control and i+1 as target, i = 0, ..., n_qubits - 2. It prepares (|0...0> + |1...1>) / sqrt(2), which has
    parity expectation 1 in the computational basis for an even number of qubits.

    Args:
        n_qubits (int): Number of qubits.

    Returns:
        The circuit.
    """
    return CircuitBuilder(n_qubits, name="ghz").h(0).cx_chain().measure_all().build()


def w_state_circ(n_qubits: int) -> Circuit:
    """ Generates the W state, the equal superposition of all states with a single excitation. """
    builder = CircuitBuilder(n_qubits, name="w_state").x(0)
    for i in range(n_qubits - 1):
        # keeps amplitude sqrt(1 / (n - i)) on qubit i and moves the rest to qubit i + 1
        angle = 2.0 * np.arccos(np.sqrt(1.0 / (n_qubits - i)))
        builder.cry(i, i + 1, angle).cnot(i + 1, i)
    return builder.measure_all().build()


def qft_circ(n_qubits: int) -> Circuit:
    """ Generates the Quantum Fourier Transform circuit.

    The controlled phases are decomposed into CNOT and Rz gates, so that the circuit only contains gates of the
    superconducting basis plus the final swaps.

    Args:
        n_qubits (int): Number of qubits.

    Returns:
        The circuit.
    """
    builder = CircuitBuilder(n_qubits, name="qft")
    for i in range(n_qubits):
        builder.h(i)
        for j in range(i + 1, n_qubits):
            angle = np.pi / 2**(j - i)
            builder.rz(j, angle / 2).cnot(j, i).rz(i, -angle / 2).cnot(j, i).rz(i, angle / 2)
    for i in range(n_qubits // 2):
        builder.swap(i, n_qubits - 1 - i)
    return builder.measure_all().build()


def tqqc_parity_circ(n_qubits: int, theta: float, delta: float) -> Circuit:
    """ TQQC parity circuit with a CX chain, measured in the X basis. """
    return (
        CircuitBuilder(n_qubits, name="tqqc_parity")
        .tqqc_parity(theta, delta, EntanglerType.CX, BasisString.all_x(n_qubits))
        .build()
    )


def hea_circ(n_qubits: int, depth: int, seed: int=None) -> Circuit:
    """ Hardware efficient ansatz with random Rx and Ry angles followed by a CX chain in every layer. """
    rng = np.random.default_rng(seed)
    builder = CircuitBuilder(n_qubits, name="hea")
    for _ in range(depth):
        for q in range(n_qubits):
            builder.rx(q, rng.random() * 2 * np.pi).ry(q, rng.random() * 2 * np.pi)
        builder.cx_chain()
    return builder.measure_all().build()


def random_circ(n_qubits: int, depth: int, seed: int=None) -> Circuit:
    """ Random layers of H, X, Y, Z, Rx or Ry gates, each followed by CNOTs on neighbouring qubits with p = 0.5. """
    rng = np.random.default_rng(seed)
    builder = CircuitBuilder(n_qubits, name="random")
    for _ in range(depth):
        for q in range(n_qubits):
            choice = rng.integers(0, 6)
            if choice == 0:
                builder.h(q)
            elif choice == 1:
                builder.x(q)
            elif choice == 2:
                builder.y(q)
            elif choice == 3:
                builder.z(q)
            elif choice == 4:
                builder.rx(q, rng.random() * 2 * np.pi)
            else:
                builder.ry(q, rng.random() * 2 * np.pi)
        for q in range(n_qubits - 1):
            if rng.random() < 0.5:
                builder.cnot(q, q + 1)
    return builder.measure_all().build()


def h_layer_circ(n_qubits: int) -> Circuit:
    return CircuitBuilder(n_qubits, name="h_layer").h_layer().measure_all().build()


def identity_circ(n_qubits: int) -> Circuit:
    return CircuitBuilder(n_qubits, name="identity").barrier().measure_all().build()


# Families of circuits

def parity_oscillation(n_qubits: int, num_points: int) -> list:
    """ Parity circuits with theta = i / num_points * pi, i = 0, ..., num_points - 1. """
    return [tqqc_parity_circ(n_qubits, i / num_points * np.pi, 0.0) for i in range(num_points)]


def delta_search(n_qubits: int, theta: float, deltas: list) -> list:
    return [tqqc_parity_circ(n_qubits, theta, delta) for delta in deltas]


def depth_scaling(n_qubits: int, max_depth: int, seed: int=None) -> list:
    return [hea_circ(n_qubits, depth, seed) for depth in range(1, max_depth + 1)]


def qubit_scaling(max_qubits: int) -> list:
    return [ghz_circ(n) for n in range(2, max_qubits + 1)]
