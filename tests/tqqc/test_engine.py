import logging
import pytest

from src.tqqc_sim.tqqc import TqqcConfig, TqqcEngine, TqqcResult, Direction, DeltaMode
from src.tqqc_sim.simulators import SimulatorBackend
from src.tqqc_sim.errors import TqqcConfigError
from tests.helpers.backends import CosineParityBackend, ConstantParityBackend


def _config(**kwargs):
    params = {"qubits": 3, "points": 10, "noise": 0.02, "seed": 1}
    params.update(kwargs)
    return TqqcConfig(**params)


def test_engine_moves_delta_towards_offset():
    backend = CosineParityBackend(3, offset=0.3)
    result = TqqcEngine(_config(), backend).optimize()
    assert result.improved()
    assert result.parity_final > result.parity_baseline
    assert 0.1 < result.delta_opt < 0.4, f"Delta {result.delta_opt} should approach the offset 0.3."
    assert result.history[0].direction == Direction.PLUS


def test_engine_counts_circuit_executions():
    backend = CosineParityBackend(3, offset=0.3)
    result = TqqcEngine(_config(), backend).optimize()
    assert result.total_inner_iterations == sum(record.inner_count for record in result.history)
    assert backend.calls == 1 + 2 * result.total_inner_iterations
    assert result.iterations == len(result.history)


def test_engine_early_stop_on_flat_parity():
    backend = ConstantParityBackend(3, parity=0.5)
    result = TqqcEngine(_config(), backend).optimize()
    assert result.early_stopped
    assert result.iterations == 3
    assert result.ties_count == 3
    assert result.delta_opt == 0.0
    assert result.improvement == 0.0
    assert result.total_inner_iterations == 3
    assert not result.improved()


def test_engine_without_dynamic_inner_runs_all_points():
    backend = ConstantParityBackend(3, parity=0.5)
    result = TqqcEngine(_config(points=6, dynamic_inner=False), backend).optimize()
    assert not result.early_stopped
    assert result.iterations == 6
    assert result.total_inner_iterations == 6
    assert all(record.inner_count == 1 for record in result.history)


def test_engine_dynamic_inner_after_large_improvement():
    backend = CosineParityBackend(3, offset=1.0)
    result = TqqcEngine(_config(step_amp=0.3), backend).optimize()
    assert result.history[0].inner_count == 1
    assert result.history[0].improvement > 0.2
    assert result.history[1].inner_count == 5


def test_engine_inner_steps_are_relative_to_outer_delta():
    backend = CosineParityBackend(3, offset=1.0)
    result = TqqcEngine(_config(points=2, step_amp=0.3), backend).optimize()
    assert backend.phases[:3] == pytest.approx([0.0, 0.3, -0.3])
    assert backend.phases[3:7] == pytest.approx([0.6, 0.0, 0.57, 0.03])
    assert backend.phases[7:9] == pytest.approx([0.3 + 0.3 * 0.81, 0.3 - 0.3 * 0.81])
    assert result.history[1].delta == pytest.approx(0.6)


def test_engine_statistical_test():
    backend = CosineParityBackend(3, offset=0.3)
    result = TqqcEngine(_config(use_statistical_test=True), backend).optimize()
    assert result.significant_moves >= 1
    assert result.history[0].is_significant
    assert result.delta_opt > 0.0


def test_engine_statistical_test_ties_do_not_move():
    backend = ConstantParityBackend(3, parity=0.2)
    result = TqqcEngine(_config(use_statistical_test=True), backend).optimize()
    assert result.significant_moves == 0
    assert result.ties_count == result.iterations
    assert result.delta_opt == 0.0


def test_engine_reset_delta_mode():
    backend = ConstantParityBackend(3, parity=0.9)
    result = TqqcEngine(_config(delta_mode=DeltaMode.RESET), backend).optimize()
    assert result.delta_opt == 0.0


def test_engine_history_records():
    backend = CosineParityBackend(3, offset=0.3)
    result = TqqcEngine(_config(), backend).optimize()
    first = result.history[0]
    assert first.iteration == 0
    assert first.parity_plus > first.parity_minus
    assert first.parity_selected == pytest.approx(result.parity_baseline + first.improvement)
    data = first.to_dict()
    assert data["direction"] == "plus"
    assert set(data) == {"iteration", "delta", "parity_plus", "parity_minus", "parity_selected", "improvement",
                         "inner_count", "direction", "is_significant"}


def test_engine_result_to_dict():
    result = TqqcEngine(_config(), ConstantParityBackend(3, 0.5)).optimize()
    data = result.to_dict()
    assert data["iterations"] == 3
    assert len(data["history"]) == 3
    assert "early_stopped=True" in str(result)


def test_engine_on_ideal_simulator():
    backend = SimulatorBackend.ideal(3).with_seed(5)
    config = _config(points=5, shots=4096)
    result = TqqcEngine(config, backend).optimize()
    assert result.parity_baseline == pytest.approx(1.0)
    assert result.parity_final == pytest.approx(1.0)
    assert result.delta_opt == 0.0


def test_engine_validates_config():
    with pytest.raises(TqqcConfigError):
        TqqcEngine(TqqcConfig(qubits=1), ConstantParityBackend(1, 0.5))


def test_engine_warns_above_critical_noise(caplog):
    with caplog.at_level(logging.WARNING):
        TqqcEngine(TqqcConfig(qubits=7, noise=0.03), ConstantParityBackend(7, 0.5))
    assert "exceeds the critical value" in caplog.text


def test_result_improvement_percent():
    result = TqqcResult(0.1, 0.5, 0.6, 4, True, 0, 0, 4, [])
    assert result.improvement == pytest.approx(0.1)
    assert result.improvement_percent() == pytest.approx(20.0)
    assert TqqcResult(0.0, 0.0, 0.1, 1, False, 0, 0, 1, []).improvement_percent() == 0.0


def test_result_k_estimated():
    early = TqqcResult(0.0, 0.5, 0.5, 3, True, 0, 0, 3, [])
    assert early.k_estimated(10) == pytest.approx((1.0 - 7.0 / 21.0) / 0.7)
    assert TqqcResult(0.0, 0.5, 0.5, 10, False, 0, 0, 10, []).k_estimated(10) == 1.0
    assert TqqcResult(0.0, 0.5, 0.5, 10, True, 0, 0, 10, []).k_estimated(10) == 1.0
