from ._pipeline.config import PipelineConfig, OptimizationMode, HardwareTarget
from ._pipeline.pipeline import (
    Pipeline,
    PipelineStage,
    OptimizationResult,
    ScheduleMetrics,
    CalibrationSummary,
    ExecutionMetrics,
    measure_parity,
)
