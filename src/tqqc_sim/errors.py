""" Exceptions of the library. All of them derive from TqqcSimError, validation errors also from ValueError. """

from ._utility.errors import (
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
