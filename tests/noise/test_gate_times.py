import pytest

from src.tqqc_sim.noise import GateTimes
from src.tqqc_sim.circuits import Gate, CircuitBuilder


@pytest.mark.parametrize("gate,duration", [
    (Gate.h(0), 35.0),
    (Gate.rz(0, 1.0), 0.0),
    (Gate.z(0), 0.0),
    (Gate.id(0), 0.0),
    (Gate.cnot(0, 1), 300.0),
    (Gate.ecr(0, 1), 300.0),
    (Gate.swap(0, 1), 900.0),
    (Gate.reset(0), 1000.0),
    (Gate.measure(0), 5000.0),
    (Gate.measure_all(), 5000.0),
    (Gate.barrier([0, 1]), 0.0),
])
def test_gate_times_default(gate, duration):
    assert GateTimes.default().gate_duration(gate) == duration


def test_gate_times_categories():
    times = GateTimes(20.0, 200.0, 1000.0)
    assert times.gate_duration(Gate.rz(0, 0.1)) == 20.0
    assert times.gate_duration(Gate.cz(0, 1)) == 200.0
    assert times.gate_duration(Gate.ccx(0, 1, 2)) == 1200.0
    assert times.gate_duration(Gate.measure(0)) == 1000.0
    assert times.gate_duration(Gate.barrier()) == 0.0


def test_gate_times_override_is_copy():
    times = GateTimes.default_ibm()
    modified = times.with_gate_time("H", 50.0)
    assert modified.gate_duration(Gate.h(0)) == 50.0
    assert times.gate_duration(Gate.h(0)) == 35.0


def test_gate_times_platforms():
    assert GateTimes.superconducting() == GateTimes.default_ibm()
    assert GateTimes.trapped_ion().two_qubit_ns > GateTimes.neutral_atom().two_qubit_ns
    assert GateTimes.photonic().single_qubit_ns == 10.0


def test_gate_times_circuit_duration():
    times = GateTimes.default()
    circ = CircuitBuilder(3).h(0).cnot(0, 1).cnot(1, 2).measure_all().build()
    assert times.circuit_duration_sequential(circ) == pytest.approx(35 + 600 + 5000)

    total, per_qubit = times.circuit_duration_asap(circ)
    assert total == pytest.approx(5635.0)
    assert per_qubit == [5635.0] * 3


def test_gate_times_parallel_circuit():
    times = GateTimes.default()
    circ = CircuitBuilder(2).h(0).h(1).build()
    total, per_qubit = times.circuit_duration_asap(circ)
    assert total == 35.0
    assert times.parallelism_factor(circ) == pytest.approx(2.0)
    assert times.estimate_idle_times(circ) == [0.0, 0.0]


def test_gate_times_idle_times():
    times = GateTimes.default()
    circ = CircuitBuilder(3).h(0).cnot(0, 1).cnot(1, 2).build()
    assert times.estimate_idle_times(circ) == [0.0, 35.0, 335.0]


def test_gate_times_empty_circuit():
    times = GateTimes.default()
    circ = CircuitBuilder(2).build()
    assert times.circuit_duration_asap(circ)[0] == 0.0
    assert times.parallelism_factor(circ) == 1.0


def test_gate_times_conversions():
    assert GateTimes.to_microseconds(5000.0) == 5.0
    assert GateTimes.to_seconds(300.0) == pytest.approx(3e-7)


def test_gate_times_dict():
    times = GateTimes.default()
    assert GateTimes.from_dict(times.to_dict()) == times
