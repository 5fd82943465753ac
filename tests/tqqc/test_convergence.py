import pytest

from src.tqqc_sim.tqqc import Convergence, DynamicInner


@pytest.mark.parametrize("qubits,noise,threshold", [
    (5, 0.01, 0.030),
    (5, 0.02, 0.030),
    (5, 0.03, 0.040),
    (7, 0.01, 0.020),
    (3, 0.01, 0.060),
    (1, 0.01, 0.030),
])
def test_convergence_threshold(qubits, noise, threshold):
    convergence = Convergence.from_noise(qubits, noise)
    assert convergence.threshold() == pytest.approx(threshold)
    assert convergence.threshold_cum == pytest.approx(1.5 * threshold)


def test_convergence_default_for_qubits():
    assert Convergence.default_for_qubits(5).threshold() == pytest.approx(0.030)


def test_convergence_needs_full_window():
    convergence = Convergence.default_for_qubits(5)
    convergence.push(0.001)
    convergence.push(0.001)
    assert not convergence.check()
    convergence.push(0.001)
    assert convergence.check()
    assert convergence.history_len() == 3
    assert convergence.cumulative == pytest.approx(0.003)


def test_convergence_large_improvement_in_window():
    convergence = Convergence.default_for_qubits(5)
    for improvement in [0.001, 0.05, 0.001]:
        convergence.push(improvement)
    assert not convergence.window_condition()
    assert not convergence.check()


def test_convergence_cumulative_condition():
    convergence = Convergence.default_for_qubits(5)
    for improvement in [0.025, 0.025, 0.001, 0.001, 0.001]:
        convergence.push(improvement)
    assert convergence.history_len() == 3
    assert convergence.window_condition()
    assert not convergence.cumulative_condition(), "The running sum 0.053 exceeds 1.5 * 0.03."
    assert not convergence.check()


def test_convergence_negative_improvements():
    convergence = Convergence.default_for_qubits(5)
    for improvement in [-0.01, 0.01, -0.005]:
        convergence.push(improvement)
    assert convergence.check()


def test_convergence_reset():
    convergence = Convergence.default_for_qubits(5)
    for _ in range(3):
        convergence.push(0.0)
    convergence.reset()
    assert convergence.history_len() == 0
    assert convergence.cumulative == 0.0
    assert not convergence.check()


@pytest.mark.parametrize("last_improve,threshold,count", [
    (0.0, 0.02, 1),
    (0.01, 0.02, 1),
    (0.02, 0.02, 3),
    (-0.02, 0.02, 3),
    (0.04, 0.02, 5),
    (1.0, 0.02, 5),
    (0.1, 0.0, 5),
])
def test_dynamic_inner_count(last_improve, threshold, count):
    assert DynamicInner(inner_max=10).compute_count(last_improve, threshold) == count


def test_dynamic_inner_count_capped_by_inner_max():
    assert DynamicInner(inner_max=2).compute_count(1.0, 0.02) == 2
    assert DynamicInner(inner_max=1).compute_count(0.0, 0.02) == 1


def test_dynamic_inner_step():
    inner = DynamicInner.default_tqqc()
    assert inner.compute_step(0, 0.12) == pytest.approx(0.12)
    assert inner.compute_step(2, 0.12) == pytest.approx(0.0972)
    assert DynamicInner(10, 0.5).compute_step(3, 1.0) == pytest.approx(0.125)
