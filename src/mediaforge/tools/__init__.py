"""External tool detection, hardware resolution and progress parsing."""

from mediaforge.tools.detection import (
    detect_all_tools,
    detect_ffmpeg,
    detect_ffprobe,
    find_tool,
    parse_version_string,
    require_available,
)
from mediaforge.tools.ffmpeg_progress import (
    ProgressParser,
    ProgressSnapshot,
    parse_timemark,
)
from mediaforge.tools.hardware import (
    GPU_CODEC_PATTERNS,
    HWACCEL_FLAGS,
    HardwareResolver,
    HardwareSelection,
    detect_hardware_type,
    filter_codecs_by_acceleration,
    hardware_codec_for,
    is_gpu_codec,
    parse_hwaccels,
    select_best,
)
from mediaforge.tools.models import ToolInfo, ToolRegistry, ToolStatus

__all__ = [
    "GPU_CODEC_PATTERNS",
    "HWACCEL_FLAGS",
    "HardwareResolver",
    "HardwareSelection",
    "ProgressParser",
    "ProgressSnapshot",
    "ToolInfo",
    "ToolRegistry",
    "ToolStatus",
    "detect_all_tools",
    "detect_ffmpeg",
    "detect_ffprobe",
    "detect_hardware_type",
    "filter_codecs_by_acceleration",
    "find_tool",
    "hardware_codec_for",
    "is_gpu_codec",
    "parse_hwaccels",
    "parse_timemark",
    "parse_version_string",
    "require_available",
    "select_best",
]
