import pytest

from src.tqqc_sim.errors import (
    TqqcSimError,
    ValidationError,
    InvalidProbability,
    QubitOutOfRange,
    InvalidT2,
    InvalidNoiseLevel,
    InvalidBitstring,
    InvalidBasis,
    InvalidAngle,
    CircuitError,
    EmptyCircuit,
    GateQubitMismatch,
    InvalidGateParameter,
    CircuitTooDeep,
    TopologyViolation,
    InvalidQasm,
    TopologyError,
    EmptyCouplingMap,
    InvalidCoupling,
    PathNotFound,
    BackendError,
    BackendNotAvailable,
    ShotsOutOfRange,
    CalibrationError,
    CalibrationExpired,
    ConvergenceFailed,
    TqqcConfigError,
    StatisticalTestError,
    NoiseExceedsCritical,
    is_recoverable,
    is_validation_error,
    is_circuit_error,
)


all_errors = [
    InvalidProbability(1.5),
    QubitOutOfRange(5, 3),
    InvalidT2(130.0, 60.0),
    InvalidNoiseLevel(0.1),
    InvalidBitstring("01a"),
    InvalidBasis("W"),
    InvalidAngle(float("nan")),
    EmptyCircuit(),
    GateQubitMismatch(4, 3),
    InvalidGateParameter("rx needs one parameter"),
    CircuitTooDeep(200, 100),
    TopologyViolation(0, 2),
    InvalidQasm("line 3"),
    EmptyCouplingMap(),
    InvalidCoupling(1, 1),
    PathNotFound(0, 4),
    BackendError("timeout"),
    BackendNotAvailable("ibm_kyiv"),
    ShotsOutOfRange(0, 1, 32768),
    CalibrationError("missing T1"),
    CalibrationExpired("2024-01-01"),
    ConvergenceFailed(20),
    TqqcConfigError("points must be > 0"),
    StatisticalTestError("zero shots"),
    NoiseExceedsCritical(0.05, 0.03, 5),
]


@pytest.mark.parametrize("err", all_errors)
def test_errors_derive_from_base(err):
    assert isinstance(err, TqqcSimError), f"{type(err).__name__} does not derive from TqqcSimError."
    assert str(err) != ""


@pytest.mark.parametrize(
    "err,group,builtin",
    [
        (InvalidProbability(2.0), ValidationError, ValueError),
        (QubitOutOfRange(5, 3), ValidationError, ValueError),
        (EmptyCircuit(), CircuitError, ValueError),
        (TopologyViolation(0, 2), CircuitError, ValueError),
        (InvalidCoupling(1, 1), TopologyError, ValueError),
        (BackendNotAvailable("x"), BackendError, RuntimeError),
        (ShotsOutOfRange(0, 1, 10), BackendError, ValueError),
        (CalibrationExpired("yesterday"), CalibrationError, ValueError),
        (ConvergenceFailed(3), TqqcSimError, RuntimeError),
        (StatisticalTestError("x"), TqqcSimError, ArithmeticError),
    ]
)
def test_errors_hierarchy(err, group, builtin):
    assert isinstance(err, group)
    assert isinstance(err, builtin)


def test_errors_caught_as_builtin():
    with pytest.raises(ValueError):
        raise InvalidBasis("Q")
    with pytest.raises(RuntimeError):
        raise BackendError("down")


@pytest.mark.parametrize(
    "err,message",
    [
        (InvalidProbability(1.5), "Invalid probability 1.5: must be in range [0, 1]"),
        (QubitOutOfRange(5, 3), "Qubit 5 out of range: max is 3"),
        (InvalidBitstring("01a"), "Invalid bitstring '01a': must contain only '0' and '1'"),
        (InvalidBasis("W"), "Invalid basis 'W': must be X, Y, or Z"),
        (EmptyCircuit(), "Circuit is empty"),
        (GateQubitMismatch(4, 3), "Gate references qubit 4 but circuit has only 3 qubits"),
        (TopologyViolation(0, 2), "Topology violation: qubits 0 and 2 are not connected"),
        (PathNotFound(0, 4), "No path found between qubits 0 and 4"),
        (BackendError("timeout"), "Backend error: timeout"),
        (BackendNotAvailable("ibm_kyiv"), "Backend 'ibm_kyiv' not available"),
        (ShotsOutOfRange(0, 1, 32768), "Shots 0 out of range [1, 32768]"),
        (CalibrationExpired("2024-01-01"), "Calibration data expired: last updated 2024-01-01"),
        (ConvergenceFailed(20), "Convergence failed after 20 iterations"),
        (TqqcConfigError("points must be > 0"), "TQQC configuration error: points must be > 0"),
        (NoiseExceedsCritical(0.05, 0.03, 5), "Noise level 0.0500 exceeds critical point 0.0300 for 5 qubits"),
    ]
)
def test_errors_message(err, message):
    assert str(err) == message, f"Found message '{err}', expected '{message}'."


def test_errors_keep_fields():
    err = InvalidT2(130.0, 60.0)
    assert (err.t2_us, err.t1_us) == (130.0, 60.0)
    err = ShotsOutOfRange(0, 1, 32768)
    assert (err.shots, err.min_shots, err.max_shots) == (0, 1, 32768)
    err = NoiseExceedsCritical(0.05, 0.03, 5)
    assert err.qubits == 5


@pytest.mark.parametrize(
    "err,expected",
    [
        (ConvergenceFailed(20), True),
        (CalibrationExpired("yesterday"), True),
        (NoiseExceedsCritical(0.05, 0.03, 5), True),
        (CalibrationError("missing"), False),
        (EmptyCircuit(), False),
        (BackendError("down"), False),
        (ValueError("foreign"), False),
    ]
)
def test_errors_is_recoverable(err, expected):
    assert is_recoverable(err) == expected


def test_errors_classifiers():
    assert is_validation_error(InvalidAngle(float("inf")))
    assert not is_validation_error(EmptyCircuit())
    assert is_circuit_error(InvalidQasm("bad"))
    assert is_circuit_error(GateQubitMismatch(3, 2))
    assert not is_circuit_error(InvalidCoupling(0, 0))
