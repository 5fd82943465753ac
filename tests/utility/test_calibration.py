import os
import pytest
from datetime import datetime, timedelta

from qiskit.providers.fake_provider import GenericBackendV2

from src.tqqc_sim.utilities import CalibrationInfo
from src.tqqc_sim.circuits import Topology
from src.tqqc_sim.noise import NoiseModel
from src.tqqc_sim.errors import CalibrationError


location = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "helpers", "calibration") + "/"


@pytest.fixture
def calibration():
    return CalibrationInfo.load_from_json(location)


def test_calibration_load_from_json(calibration):
    assert calibration.backend_name == "fake_line_3"
    assert calibration.num_qubits == 3
    assert calibration.timestamp == datetime.fromtimestamp(1700000000)
    assert calibration.coupling_map == [(0, 1), (1, 2)]
    assert calibration.gate_errors_2q == {(0, 1): 0.012, (1, 2): 0.008}


def test_calibration_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CalibrationInfo.load_from_json(str(tmp_path) + "/")


def test_calibration_averages(calibration):
    assert abs(calibration.avg_t1() - 350.0 / 3) < 1e-9
    assert abs(calibration.avg_t2() - 80.0) < 1e-9
    assert abs(calibration.avg_error_1q() - 0.0009) < 1e-12
    assert abs(calibration.avg_error_2q() - 0.01) < 1e-12
    assert abs(calibration.avg_readout() - 0.055 / 3) < 1e-12


def test_calibration_averages_default_when_empty():
    info = CalibrationInfo("empty")
    assert info.num_qubits == 0
    assert info.avg_t1() == 100.0
    assert info.avg_t2() == 60.0
    assert info.avg_error_2q() == 0.01


def test_calibration_to_noise_vectors(calibration):
    vectors = calibration.to_noise_vectors()
    assert len(vectors) == 3
    expected_2q = {0: 0.012, 1: 0.012, 2: 0.008}
    for q, error in expected_2q.items():
        vector = vectors.get(q)
        assert vector.gate_error_2q == error, f"Qubit {q} has 2q error {vector.gate_error_2q}, expected {error}."
    assert vectors.get(1).t1 == 80.0
    assert vectors.get(2).readout_error == 0.01


def test_calibration_to_noise_model(calibration):
    model = calibration.to_noise_model()
    assert isinstance(model, NoiseModel)
    assert abs(model.t1_us - 350.0 / 3) < 1e-9
    assert abs(model.gate_error_2q - 0.01) < 1e-12


def test_calibration_to_noise_model_falls_back():
    info = CalibrationInfo.uniform("broken", 2, 10.0, 50.0, 0.001, 0.01, 0.01)
    assert info.to_noise_model() == NoiseModel.ibm_typical()


def test_calibration_to_topology(calibration):
    assert calibration.to_topology() == Topology.linear(3)


def test_calibration_to_topology_falls_back_to_line():
    info = CalibrationInfo.uniform("single", 1, 100.0, 60.0, 0.001, 0.01, 0.01)
    assert info.coupling_map == []
    assert info.to_topology() == Topology.linear(1)


def test_calibration_to_gate_times(calibration):
    times = calibration.to_gate_times()
    assert times.single_qubit_ns == 36.0
    assert times.two_qubit_ns == 320.0
    assert times.measurement_ns == 5000.0


def test_calibration_to_gate_times_default():
    times = CalibrationInfo("empty").to_gate_times()
    assert (times.single_qubit_ns, times.two_qubit_ns) == (35.0, 300.0)


def test_calibration_best_qubits(calibration):
    assert calibration.best_qubits(3) == [2, 0, 1]
    assert calibration.best_qubits(1) == [2]
    assert calibration.qubit_quality(2) > calibration.qubit_quality(1)


def test_calibration_best_linear_chain(calibration):
    assert calibration.best_linear_chain(3) == [0, 1, 2]
    assert calibration.best_linear_chain(4) is None


def test_calibration_uniform():
    info = CalibrationInfo.uniform("line", 4, 100.0, 60.0, 0.001, 0.01, 0.02)
    assert info.num_qubits == 4
    assert info.coupling_map == [(0, 1), (1, 2), (2, 3)]
    assert set(info.gate_errors_2q.values()) == {0.01}
    assert info.avg_readout() == pytest.approx(0.02)


def test_calibration_ibm_typical():
    info = CalibrationInfo.ibm_typical(5)
    model = info.to_noise_model()
    assert (model.t1_us, model.t2_us) == (100.0, 60.0)
    assert (model.gate_error_1q, model.gate_error_2q, model.readout_error) == pytest.approx((0.0003, 0.01, 0.01))


def test_calibration_from_backend():
    backend = GenericBackendV2(num_qubits=5, seed=42)
    info = CalibrationInfo.from_backend(backend)

    assert info.backend_name == backend.name
    assert info.num_qubits == 5
    assert sorted(info.t1_times) == list(range(5))
    assert all(t1 > 0.0 for t1 in info.t1_times.values())
    assert len(info.coupling_map) > 0
    for q1, q2 in info.coupling_map:
        assert q1 != q2
        assert 0 <= q1 < 5 and 0 <= q2 < 5
    assert info.gate_times_1q_ns is not None and info.gate_times_1q_ns > 0.0
    assert info.gate_times_2q_ns is not None and info.gate_times_2q_ns > 0.0
    assert isinstance(info.to_noise_model(), NoiseModel)


def test_calibration_from_backend_with_layout():
    backend = GenericBackendV2(num_qubits=5, seed=42)
    full = CalibrationInfo.from_backend(backend)
    info = CalibrationInfo.from_backend(backend, qubits_layout=[3, 1])

    assert info.num_qubits == 2
    assert info.t1_times == {0: full.t1_times[3], 1: full.t1_times[1]}
    assert set(info.coupling_map) <= {(0, 1), (1, 0)}


def test_calibration_json_round_trip(calibration, tmp_path):
    target = str(tmp_path) + "/"
    calibration.save_to_json(target)
    assert CalibrationInfo.load_from_json(target) == calibration


def test_calibration_dict_round_trip(calibration):
    assert CalibrationInfo.from_dict(calibration.to_dict()) == calibration


@pytest.mark.parametrize(
    "data",
    [
        {"timestamp": 1700000000},
        {"backend_name": "x"},
        {"backend_name": "x", "timestamp": 1700000000, "t1_times": {"a": 100.0}},
        {"backend_name": "x", "timestamp": 1700000000, "gate_errors_2q": {"0;1": 0.01}},
        {"backend_name": "x", "timestamp": 1700000000, "coupling_map": [[0, 1, 2]]},
    ]
)
def test_calibration_from_dict_malformed(data):
    with pytest.raises(CalibrationError):
        CalibrationInfo.from_dict(data)


def test_calibration_is_fresh(calibration):
    assert not calibration.is_fresh(timedelta(hours=1))
    assert CalibrationInfo("now").is_fresh(timedelta(hours=1))
    future = CalibrationInfo("future", datetime.now() + timedelta(days=1))
    assert not future.is_fresh(timedelta(days=7))


def test_calibration_str(calibration):
    s = str(calibration)
    assert s.startswith("CalibrationInfo(fake_line_3, 3Q")
    assert "2Q=0.0100" in s
