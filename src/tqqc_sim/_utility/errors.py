"""
Exception hierarchy of the package.

All exceptions derive from TqqcSimError. Each group additionally derives from the matching builtin exception, so
callers can write ``except ValueError`` for invalid input as with any other Python library.
"""


class TqqcSimError(Exception):
    """ Base class of all errors raised by the package. """


# Validation errors

class ValidationError(TqqcSimError, ValueError):
    """ A scalar input is outside its allowed domain. """


class InvalidProbability(ValidationError):

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Invalid probability {value}: must be in range [0, 1]")


class QubitOutOfRange(ValidationError):

    def __init__(self, qubit: int, max: int):
        self.qubit = qubit
        self.max = max
        super().__init__(f"Qubit {qubit} out of range: max is {max}")


class InvalidT2(ValidationError):

    def __init__(self, t2_us: float, t1_us: float):
        self.t2_us = t2_us
        self.t1_us = t1_us
        super().__init__(f"Invalid T2 ({t2_us:.2f}µs): must be <= 2*T1 ({t1_us:.2f}µs)")


class InvalidNoiseLevel(ValidationError):

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Invalid noise level {value}: must be in range [0, 0.06]")


class InvalidBitstring(ValidationError):

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid bitstring '{value}': must contain only '0' and '1'")


class InvalidBasis(ValidationError):

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid basis '{value}': must be X, Y, or Z")


class InvalidAngle(ValidationError):

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Invalid angle {value}: must be finite")


# Circuit errors

class CircuitError(TqqcSimError, ValueError):
    """ The circuit is malformed or does not fit the target. """


class EmptyCircuit(CircuitError):

    def __init__(self):
        super().__init__("Circuit is empty")


class GateQubitMismatch(CircuitError):

    def __init__(self, qubit: int, num_qubits: int):
        self.qubit = qubit
        self.num_qubits = num_qubits
        super().__init__(f"Gate references qubit {qubit} but circuit has only {num_qubits} qubits")


class InvalidGateParameter(CircuitError):

    def __init__(self, message: str):
        super().__init__(f"Invalid gate parameter: {message}")


class CircuitTooDeep(CircuitError):

    def __init__(self, depth: int, max_depth: int):
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(f"Circuit depth {depth} exceeds maximum {max_depth}")


class TopologyViolation(CircuitError):

    def __init__(self, q1: int, q2: int):
        self.q1 = q1
        self.q2 = q2
        super().__init__(f"Topology violation: qubits {q1} and {q2} are not connected")


class InvalidQasm(CircuitError):

    def __init__(self, message: str):
        super().__init__(f"Invalid QASM: {message}")


# Topology errors

class TopologyError(TqqcSimError, ValueError):
    """ The coupling map is inconsistent. """


class EmptyCouplingMap(TopologyError):

    def __init__(self):
        super().__init__("Coupling map is empty")


class InvalidCoupling(TopologyError):

    def __init__(self, q1: int, q2: int):
        self.q1 = q1
        self.q2 = q2
        super().__init__(f"Invalid coupling ({q1}, {q2}): qubits must be different")


class PathNotFound(TopologyError):

    def __init__(self, q1: int, q2: int):
        self.q1 = q1
        self.q2 = q2
        super().__init__(f"No path found between qubits {q1} and {q2}")


# Backend errors

class BackendError(TqqcSimError, RuntimeError):

    def __init__(self, message: str):
        super().__init__(f"Backend error: {message}")


class BackendNotAvailable(BackendError):

    def __init__(self, name: str):
        self.name = name
        RuntimeError.__init__(self, f"Backend '{name}' not available")


class ShotsOutOfRange(BackendError, ValueError):

    def __init__(self, shots: int, min_shots: int, max_shots: int):
        self.shots = shots
        self.min_shots = min_shots
        self.max_shots = max_shots
        RuntimeError.__init__(self, f"Shots {shots} out of range [{min_shots}, {max_shots}]")


# Calibration errors

class CalibrationError(TqqcSimError, ValueError):

    def __init__(self, message: str):
        super().__init__(f"Calibration error: {message}")


class CalibrationExpired(CalibrationError):

    def __init__(self, last_updated: str):
        self.last_updated = last_updated
        ValueError.__init__(self, f"Calibration data expired: last updated {last_updated}")


# TQQC errors

class ConvergenceFailed(TqqcSimError, RuntimeError):

    def __init__(self, iterations: int):
        self.iterations = iterations
        super().__init__(f"Convergence failed after {iterations} iterations")


class TqqcConfigError(TqqcSimError, ValueError):

    def __init__(self, message: str):
        super().__init__(f"TQQC configuration error: {message}")


class StatisticalTestError(TqqcSimError, ArithmeticError):

    def __init__(self, message: str):
        super().__init__(f"Statistical test error: {message}")


class NoiseExceedsCritical(TqqcSimError, ValueError):

    def __init__(self, noise: float, critical: float, qubits: int):
        self.noise = noise
        self.critical = critical
        self.qubits = qubits
        super().__init__(f"Noise level {noise:.4f} exceeds critical point {critical:.4f} for {qubits} qubits")


def is_recoverable(err: BaseException) -> bool:
    """ Whether a caller may retry with adjusted settings instead of aborting. """
    return isinstance(err, (ConvergenceFailed, CalibrationExpired, NoiseExceedsCritical))


def is_validation_error(err: BaseException) -> bool:
    return isinstance(err, ValidationError)


def is_circuit_error(err: BaseException) -> bool:
    return isinstance(err, CircuitError)
