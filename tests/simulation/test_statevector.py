import pytest
import numpy as np

from qiskit.quantum_info import Statevector

from src.tqqc_sim.simulators import StateVector
from src.tqqc_sim.circuits import Gate, CircuitBuilder
from tests.helpers.functions import random_unitary_circuit, vector_almost_equal


def _random_state(nqubit: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    psi = rng.normal(size=2**nqubit) + 1j * rng.normal(size=2**nqubit)
    return psi / np.linalg.norm(psi)


def _run(circuit) -> StateVector:
    sv = StateVector(circuit.num_qubits)
    for gate in circuit.gates:
        sv.apply(gate)
    return sv


def _qiskit_probabilities(circuit) -> np.ndarray:
    qc = circuit.to_qiskit()
    qc.remove_final_measurements(inplace=True)
    return Statevector(qc).probabilities()


def test_statevector_initial_state():
    sv = StateVector(3)
    assert sv.psi.shape == (8,)
    assert sv.probabilities()[0] == 1.0


def test_statevector_wrong_size():
    with pytest.raises(ValueError):
        StateVector(2, np.ones(3))


def test_statevector_copy_is_independent():
    sv = StateVector(1)
    copy = sv.copy()
    copy.apply(Gate.x(0))
    assert sv.probabilities()[0] == 1.0
    assert copy.probabilities()[1] == 1.0


def test_statevector_bell():
    sv = StateVector(2)
    sv.apply(Gate.h(0))
    sv.apply(Gate.cnot(0, 1))
    assert vector_almost_equal(sv.probabilities(), [0.5, 0.0, 0.0, 0.5])


def test_statevector_bit_order():
    sv = StateVector(3)
    sv.apply(Gate.x(1))
    assert sv.probabilities()[2] == pytest.approx(1.0)


@pytest.mark.parametrize("gate,index", [
    (Gate.ccx(0, 1, 2), 0b111),
    (Gate.ccx(0, 2, 1), 0b011),
    (Gate.cswap(0, 1, 2), 0b101),
    (Gate.cswap(2, 0, 1), 0b011),
])
def test_statevector_three_qubit_gates(gate, index):
    sv = StateVector(3)
    sv.apply(Gate.x(0))
    sv.apply(Gate.x(1))
    sv.apply(gate)
    assert sv.probabilities()[index] == pytest.approx(1.0), f"Gate {gate} should map |011> to index {index}."


@pytest.mark.parametrize("gate", [
    Gate.x(1), Gate.z(2), Gate.cnot(0, 2), Gate.cnot(2, 1), Gate.cz(1, 2), Gate.swap(0, 2), Gate.swap(2, 1),
])
def test_statevector_fast_paths_match_matrix(gate):
    psi = _random_state(3, seed=11)
    fast = StateVector(3, psi)
    fast.apply(gate)
    dense = StateVector(3, psi)
    if gate.is_single_qubit:
        dense.apply_single_qubit_matrix(gate.matrix(), gate.qubits()[0])
    else:
        dense.apply_matrix(gate.matrix(), gate.qubits())
    assert vector_almost_equal(fast.psi, dense.psi)


def test_statevector_norm_is_preserved():
    circ = random_unitary_circuit(4, 10, seed=3)
    sv = _run(circ)
    assert np.sum(sv.probabilities()) == pytest.approx(1.0)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_statevector_matches_qiskit_random(seed):
    circ = random_unitary_circuit(4, 6, seed=seed)
    assert vector_almost_equal(_run(circ).probabilities(), _qiskit_probabilities(circ), abstol=1e-9)


def test_statevector_matches_qiskit_all_gates():
    circ = (
        CircuitBuilder(3)
        .h(0).h(1).h(2)
        .u(0, 0.3, 0.7, -0.4).p(1, 0.9).sx(2)
        .cy(0, 1).crz(1, 2, 0.8).ecr(2, 0)
        .ry(1, 1.1).rx(0, -0.5)
        .ccx(0, 1, 2).cswap(2, 0, 1)
        .t(0).s(1).sdg(2)
        .build()
    )
    circ.add_gate(Gate.iswap(0, 2))
    circ.add_gate(Gate.sxdg(1))
    circ.add_gate(Gate.crx(2, 1, 0.4))
    circ.add_gate(Gate.cry(0, 2, -1.3))
    assert vector_almost_equal(_run(circ).probabilities(), _qiskit_probabilities(circ), abstol=1e-9)


def test_statevector_non_unitary_gates_are_ignored():
    sv = StateVector(2)
    sv.apply(Gate.h(0))
    before = sv.psi.copy()
    for gate in [Gate.measure(0), Gate.measure_all(), Gate.barrier([0, 1]), Gate.reset(0), Gate.id(1)]:
        sv.apply(gate)
    assert vector_almost_equal(sv.psi, before)


def test_statevector_paulis():
    sv = StateVector(1)
    sv.apply_pauli("Y", 0)
    assert vector_almost_equal(sv.psi, [0.0, 1j])
    sv.apply_pauli("Z", 0)
    assert vector_almost_equal(sv.psi, [0.0, -1j])
    sv.apply_pauli("X", 0)
    assert vector_almost_equal(sv.psi, [-1j, 0.0])
    with pytest.raises(ValueError):
        sv.apply_pauli("W", 0)


def test_statevector_project():
    sv = StateVector(2)
    sv.apply(Gate.h(0))
    sv.apply(Gate.cnot(0, 1))
    assert sv.probability_of_one(1) == pytest.approx(0.5)

    prob = sv.project(0, 1)
    assert prob == pytest.approx(0.5)
    assert vector_almost_equal(sv.probabilities(), [0.0, 0.0, 0.0, 1.0])
    assert sv.probability_of_one(1) == pytest.approx(1.0)


def test_statevector_project_impossible_outcome():
    sv = StateVector(1)
    assert sv.project(0, 1) == 0.0
    assert np.all(sv.psi == 0.0)
