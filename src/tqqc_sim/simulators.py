from ._simulation.statevector import StateVector
from ._simulation.simulator import SimulatorBackend
from ._simulation.execution import Backend, ExecutionMetadata, ExecutionResult
