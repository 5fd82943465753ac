import pytest

from src.tqqc_sim.tqqc import Convergence, TqqcConfig
from src.tqqc_sim.utilities import (
    Physics,
    TQQC,
    Stats,
    circuit_depth,
    depth_ratio,
    threshold_for_qubits,
    is_noise_valid,
    is_noise_recommended,
    z_critical,
)


@pytest.mark.parametrize("n,depth", [(0, 0), (1, 0), (2, 1), (5, 4), (7, 6)])
def test_constants_circuit_depth(n, depth):
    assert circuit_depth(n) == depth


@pytest.mark.parametrize("n,ratio", [(5, 1.0), (7, 1.5), (3, 0.5), (1, 0.0)])
def test_constants_depth_ratio(n, ratio):
    assert abs(depth_ratio(n) - ratio) < 1e-12


@pytest.mark.parametrize("n,threshold", [(5, 0.030), (7, 0.030 * (4 / 6)), (3, 0.060), (1, 0.030), (0, 0.030)])
def test_constants_threshold_for_qubits(n, threshold):
    found = threshold_for_qubits(n)
    assert found == threshold, f"Found threshold {found} for {n} qubits, expected {threshold}."


def test_constants_threshold_for_qubits_base():
    assert threshold_for_qubits(7, 0.040) == 0.040 * (4 / 6)
    assert threshold_for_qubits(1, 0.040) == 0.040


def test_constants_threshold_shared_by_config_and_convergence():
    for n in (3, 5, 7, 9):
        assert TqqcConfig.for_qubits(n).threshold() == Convergence.default_for_qubits(n).threshold(), \
            f"Config and convergence disagree on the threshold for {n} qubits."
    assert not is_noise_valid(0.02, 7)


@pytest.mark.parametrize(
    "noise,n,expected",
    [(0.0, 5, True), (0.025, 5, True), (0.03, 5, True), (0.031, 5, False), (0.019, 7, True), (0.025, 7, False),
     (-0.001, 5, False)]
)
def test_constants_is_noise_valid(noise, n, expected):
    assert is_noise_valid(noise, n) == expected


@pytest.mark.parametrize("noise,expected", [(0.0, True), (0.02, True), (0.021, False), (-0.01, False)])
def test_constants_is_noise_recommended(noise, expected):
    assert is_noise_recommended(noise) == expected


@pytest.mark.parametrize(
    "confidence,z",
    [(0.999, 2.575), (0.99, 2.575), (0.98, 2.240), (0.975, 2.240), (0.96, 1.960), (0.95, 1.960), (0.92, 1.645),
     (0.90, 1.645), (0.5, 1.960)]
)
def test_constants_z_critical(confidence, z):
    assert z_critical(confidence) == z


def test_constants_physics():
    assert Physics.us_to_s(100.0) == pytest.approx(1e-4)
    assert Physics.ns_to_s(35.0) == pytest.approx(3.5e-8)
    assert Physics.GATE_TIMES_S["rz"] == 0.0
    assert Physics.GATE_TIMES_S["swap"] == pytest.approx(3 * Physics.GATE_TIMES_S["cx"])


def test_constants_tqqc_and_stats():
    assert TQQC.DECAY_RATE == 0.9
    assert TQQC.CONVERGENCE_WINDOW == 3
    assert TQQC.INNER_SAFETY_MULTIPLIER == 5
    assert Stats.MIN_SHOTS < Stats.DEFAULT_SHOTS < Stats.MAX_SHOTS
    assert Stats.MIN_CONFIDENCE_LEVEL <= Stats.DEFAULT_CONFIDENCE_LEVEL <= Stats.MAX_CONFIDENCE_LEVEL
