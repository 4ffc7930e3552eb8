"""mediaforge - typed ffmpeg/ffprobe conversions, probing and batch runs."""

from mediaforge.domain import (
    AdvancedOptions,
    AudioCodec,
    AudioConfig,
    ConversionConfig,
    HardwareAccelConfig,
    HardwareAcceleration,
    OutputFormat,
    SizeSpec,
    StreamType,
    TimingConfig,
    VideoCodec,
    VideoConfig,
)
from mediaforge.errors import (
    CancelledError,
    CodecUnsupportedError,
    ErrorKind,
    ExecutionFailedError,
    FormatUnsupportedError,
    HardwareAccelerationUnavailableError,
    InvalidConfigurationError,
    InvalidInputError,
    InvalidOutputError,
    MediaForgeError,
    ToolNotFoundError,
)
from mediaforge.executor import (
    BatchCallbacks,
    BatchExecutionEngine,
    BatchItemResult,
    ConversionCallbacks,
    ConversionJob,
    EngineState,
    ExecutionEngine,
)
from mediaforge.forge import MediaForge, OutputSupportReport, SupportDetail
from mediaforge.presets import apply_preset, get_preset, list_presets

__version__ = "0.1.0"

__all__ = [
    "AdvancedOptions",
    "AudioCodec",
    "AudioConfig",
    "BatchCallbacks",
    "BatchExecutionEngine",
    "BatchItemResult",
    "CancelledError",
    "CodecUnsupportedError",
    "ConversionCallbacks",
    "ConversionConfig",
    "ConversionJob",
    "EngineState",
    "ErrorKind",
    "ExecutionEngine",
    "ExecutionFailedError",
    "FormatUnsupportedError",
    "HardwareAccelConfig",
    "HardwareAcceleration",
    "HardwareAccelerationUnavailableError",
    "InvalidConfigurationError",
    "InvalidInputError",
    "InvalidOutputError",
    "MediaForge",
    "MediaForgeError",
    "OutputFormat",
    "OutputSupportReport",
    "SizeSpec",
    "StreamType",
    "SupportDetail",
    "TimingConfig",
    "ToolNotFoundError",
    "VideoCodec",
    "VideoConfig",
    "apply_preset",
    "get_preset",
    "list_presets",
]
