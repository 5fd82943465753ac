from .circuits import Gate, EntanglerType, Circuit, CircuitBuilder, Topology
from .noise import NoiseModel, NoiseVector, NoiseVectorSet, GateTimes
from .simulators import StateVector, SimulatorBackend, Backend, ExecutionMetadata, ExecutionResult
from .schedules import ScheduledGate, TimeSlot, CircuitSchedule, compute_asap
from .tqqc import (
    TqqcConfig,
    SigMode,
    DeltaMode,
    Direction,
    TestResult,
    StatisticalTest,
    Convergence,
    DynamicInner,
    TqqcEngine,
    TqqcResult,
    IterationRecord,
)
from .pipelines import (
    PipelineConfig,
    OptimizationMode,
    HardwareTarget,
    Pipeline,
    PipelineStage,
    OptimizationResult,
    measure_parity,
)
from .quantum_algorithms import bell_circ, ghz_circ, w_state_circ, qft_circ, tqqc_parity_circ
from .utilities import CalibrationInfo, Probability, Bitstring, Basis, BasisString
from .errors import TqqcSimError


__all__ = ["Gate", "EntanglerType", "Circuit", "CircuitBuilder", "Topology"]
__all__ += ["NoiseModel", "NoiseVector", "NoiseVectorSet", "GateTimes"]
__all__ += ["StateVector", "SimulatorBackend", "Backend", "ExecutionMetadata", "ExecutionResult"]
__all__ += ["ScheduledGate", "TimeSlot", "CircuitSchedule", "compute_asap"]
__all__ += [
    "TqqcConfig",
    "SigMode",
    "DeltaMode",
    "Direction",
    "TestResult",
    "StatisticalTest",
    "Convergence",
    "DynamicInner",
    "TqqcEngine",
    "TqqcResult",
    "IterationRecord",
]
__all__ += [
    "PipelineConfig",
    "OptimizationMode",
    "HardwareTarget",
    "Pipeline",
    "PipelineStage",
    "OptimizationResult",
    "measure_parity",
]
__all__ += ["bell_circ", "ghz_circ", "w_state_circ", "qft_circ", "tqqc_parity_circ"]
__all__ += ["CalibrationInfo", "Probability", "Bitstring", "Basis", "BasisString"]
__all__ += ["TqqcSimError"]
