"""Domain models for mediaforge."""

from mediaforge.domain.config import (
    AUTO,
    AdvancedOptions,
    AudioConfig,
    ConversionConfig,
    HardwareAccelConfig,
    SizeSpec,
    TimingConfig,
    VideoConfig,
)
from mediaforge.domain.enums import (
    AudioCodec,
    HardwareAcceleration,
    OutputFormat,
    ScalingAlgorithm,
    StreamType,
    VideoCodec,
)
from mediaforge.domain.filters import (
    AudioDenoiseFilter,
    AudioFilters,
    ColorFilter,
    CropFilter,
    DeinterlaceFilter,
    DownscaleOptions,
    EqualizerFilter,
    FadeFilter,
    FilterSpec,
    FlipFilter,
    PadFilter,
    PitchFilter,
    RotateFilter,
    ScaleFilter,
    SharpenFilter,
    TempoFilter,
    TextFilter,
    UpscaleOptions,
    VideoDenoiseFilter,
    VideoFilters,
    VolumeFilter,
    WatermarkFilter,
)
from mediaforge.domain.metadata import (
    AccelerationInfo,
    Capabilities,
    CodecList,
    CodecSupport,
    FormatMetadata,
    FormatSupport,
    ImageMetadata,
    MediaMetadata,
    StreamMetadata,
    VersionInfo,
    VideoMetadata,
)

__all__ = [
    "AUTO",
    "AccelerationInfo",
    "AdvancedOptions",
    "AudioCodec",
    "AudioConfig",
    "AudioDenoiseFilter",
    "AudioFilters",
    "Capabilities",
    "CodecList",
    "CodecSupport",
    "ColorFilter",
    "ConversionConfig",
    "CropFilter",
    "DeinterlaceFilter",
    "DownscaleOptions",
    "EqualizerFilter",
    "FadeFilter",
    "FilterSpec",
    "FlipFilter",
    "FormatMetadata",
    "FormatSupport",
    "HardwareAccelConfig",
    "HardwareAcceleration",
    "ImageMetadata",
    "MediaMetadata",
    "OutputFormat",
    "PadFilter",
    "PitchFilter",
    "RotateFilter",
    "ScaleFilter",
    "ScalingAlgorithm",
    "SharpenFilter",
    "SizeSpec",
    "StreamMetadata",
    "StreamType",
    "TempoFilter",
    "TextFilter",
    "TimingConfig",
    "UpscaleOptions",
    "VersionInfo",
    "VideoCodec",
    "VideoConfig",
    "VideoDenoiseFilter",
    "VideoFilters",
    "VideoMetadata",
    "VolumeFilter",
    "WatermarkFilter",
]
