"""Running ffmpeg: single conversions, batches and background jobs."""

from mediaforge.executor.batch import (
    BatchCallbacks,
    BatchExecutionEngine,
    BatchItemResult,
)
from mediaforge.executor.engine import (
    ConversionCallbacks,
    EngineState,
    ExecutionEngine,
)
from mediaforge.executor.inputs import input_kind, prepared_input
from mediaforge.executor.job import ConversionJob

__all__ = [
    "BatchCallbacks",
    "BatchExecutionEngine",
    "BatchItemResult",
    "ConversionCallbacks",
    "ConversionJob",
    "EngineState",
    "ExecutionEngine",
    "input_kind",
    "prepared_input",
]
