import pytest
import numpy as np

from src.tqqc_sim.circuits import CircuitBuilder, Gate, EntanglerType
from src.tqqc_sim.utilities import Basis, BasisString
from src.tqqc_sim.errors import EmptyCircuit, GateQubitMismatch


def test_builder_chaining_returns_builder():
    builder = CircuitBuilder(2)
    assert builder.h(0) is builder
    assert builder.cnot(0, 1).rz(1, 0.5).measure_all() is builder
    assert builder.num_qubits == 2
    assert len(builder.circuit) == 4


def test_builder_fails_fast_on_invalid_qubit():
    builder = CircuitBuilder(2)
    with pytest.raises(GateQubitMismatch):
        builder.h(2)


def test_builder_build_validated_empty():
    with pytest.raises(EmptyCircuit):
        CircuitBuilder(2).build_validated()
    assert CircuitBuilder(2).build().is_empty()


def test_builder_barrier_on_all_qubits():
    circ = CircuitBuilder(3).barrier().build()
    assert circ.gates == [Gate.barrier([0, 1, 2])]


@pytest.mark.parametrize("entangler,kind", [(EntanglerType.CX, "cx"), (EntanglerType.CZ, "cz")])
def test_builder_entangler_chain(entangler, kind):
    circ = CircuitBuilder(4).entangler_chain(entangler).build()
    assert [g.kind for g in circ.gates] == [kind] * 3
    assert circ.two_qubit_pairs() == [(0, 1), (1, 2), (2, 3)]


def test_builder_layers():
    circ = CircuitBuilder(3).h_layer().ry_layer([0.1, 0.2]).rz_layer([0.3, 0.4, 0.5, 0.6]).build()
    assert circ.count_1q() == 3 + 2 + 3


def test_builder_apply_basis():
    circ = CircuitBuilder(3).apply_basis(BasisString.from_str("XYZ")).build()
    assert circ.gates == [Gate.h(0), Gate.sdg(1), Gate.h(1)]


def test_builder_apply_uniform_basis():
    circ = CircuitBuilder(2).apply_uniform_basis(Basis.Y).build()
    assert circ.gates == [Gate.sdg(0), Gate.h(0), Gate.sdg(1), Gate.h(1)]


def test_builder_tqqc_parity():
    theta, delta = 0.4, -0.1
    circ = CircuitBuilder(3).tqqc_parity(theta, delta, EntanglerType.CX, BasisString.all_x(3)).build()
    expected = [
        Gate.h(0),
        Gate.cnot(0, 1),
        Gate.cnot(1, 2),
        Gate.rz(0, theta + delta),
        Gate.h(0),
        Gate.h(1),
        Gate.h(2),
        Gate.measure_all(),
    ]
    assert circ.gates == expected


def test_builder_hea_layer():
    params = list(np.linspace(0.1, 1.2, 12))
    circ = CircuitBuilder(3).hea_layer(params, 1).build()
    assert [g.kind for g in circ.gates] == ["ry"] * 3 + ["rz"] * 3 + ["cx"] * 2
    assert circ.gates[0].params[0] == pytest.approx(params[6])


def test_builder_hea_layer_missing_params():
    circ = CircuitBuilder(2).hea_layer([0.1, 0.2, 0.3], 0).build()
    assert [g.kind for g in circ.gates] == ["ry", "ry", "rz", "cx"]


def test_builder_qaoa_mixer():
    circ = CircuitBuilder(2).qaoa_mixer(0.25).build()
    assert circ.gates == [Gate.rx(0, 0.5), Gate.rx(1, 0.5)]


def test_builder_iswap_and_sxdg():
    circ = CircuitBuilder(2).sxdg(0).iswap(0, 1).build()
    assert circ.gates == [Gate.sxdg(0), Gate.iswap(0, 1)]


def test_builder_build_returns_independent_circuit():
    builder = CircuitBuilder(2, name="bell").h(0).cnot(0, 1)
    circ = builder.build()
    builder.measure_all()
    assert circ.gates == [Gate.h(0), Gate.cnot(0, 1)], f"Built circuit changed to {circ.gates}."
    assert circ.name == "bell"
    assert len(builder.build()) == 3
    assert builder.build() is not builder.build()
