"""Pydantic models for conversion job YAML.

Job files and preset data are validated with these models and then
converted into the frozen ConversionConfig dataclasses the generator
consumes. Filter sections are validated straight into the domain filter
dataclasses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from mediaforge.domain.config import (
    AdvancedOptions,
    AudioConfig,
    ConversionConfig,
    HardwareAccelConfig,
    SizeSpec,
    TimingConfig,
    VideoConfig,
)
from mediaforge.domain.enums import HardwareAcceleration
from mediaforge.domain.filters import (
    AudioFilters,
    DownscaleOptions,
    FilterSpec,
    UpscaleOptions,
    VideoFilters,
)
from mediaforge.errors import InvalidConfigurationError

VALID_ACCELERATIONS = frozenset(a.value for a in HardwareAcceleration)


class SizeModel(BaseModel):
    """Explicit width/height; "?" keeps aspect for that dimension."""

    model_config = ConfigDict(extra="forbid")

    width: int | str
    height: int | str


class VideoModel(BaseModel):
    """Pydantic model for the video section."""

    model_config = ConfigDict(extra="forbid")

    codec: str | None = None
    bitrate: int | str | None = None
    quality: int | float | None = None
    fps: int | float | None = None
    size: str | SizeModel | None = None
    aspect_ratio: str | int | float | None = None
    disabled: bool = False
    frames: int | None = Field(default=None, ge=1)
    loop: int | None = None
    preset: str | None = None
    profile: str | None = None
    level: str | None = None
    pixel_format: str | None = None
    keyframe_interval: int | None = Field(default=None, ge=1)
    bframes: int | None = Field(default=None, ge=0)
    refs: int | None = Field(default=None, ge=0)
    filters: VideoFilters | None = None
    upscale: UpscaleOptions | None = None
    downscale: DownscaleOptions | None = None


class AudioModel(BaseModel):
    """Pydantic model for the audio section."""

    model_config = ConfigDict(extra="forbid")

    codec: str | None = None
    bitrate: int | str | None = None
    quality: int | float | None = None
    channels: int | None = Field(default=None, ge=1)
    frequency: int | None = Field(default=None, ge=1)
    disabled: bool = False
    profile: str | None = None
    volume_normalization: bool = False
    filters: AudioFilters | None = None


class TimingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    seek: int | float | str | None = None
    duration: int | float | str | None = None
    to: int | float | str | None = None
    fast_seek: bool = False


class HardwareModel(BaseModel):
    """Pydantic model for a detailed hardware directive."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    type: str | None = None
    prefer_hardware: bool = True
    fallback_to_cpu: bool = True

    @model_validator(mode="after")
    def validate_type(self) -> HardwareModel:
        if self.type is not None and self.type.lower() not in VALID_ACCELERATIONS:
            raise ValueError(
                f"Invalid acceleration '{self.type}'. "
                f"Must be one of: {', '.join(sorted(VALID_ACCELERATIONS))}"
            )
        return self


class OptionsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    input_options: list[str] = Field(default_factory=list)
    output_options: list[str] = Field(default_factory=list)
    threads: int | None = Field(default=None, ge=0)
    two_pass: bool = False
    passlogfile: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    subtitles: str | None = None
    burn_subtitles: bool = False


class ConversionModel(BaseModel):
    """Pydantic model for one conversion.

    input and output are optional here so presets can use the same model;
    the generator's validation reports them when missing.
    """

    model_config = ConfigDict(extra="forbid")

    input: str | None = None
    output: str | None = None
    preset: str | None = None
    format: str | None = None
    video: VideoModel | None = None
    audio: AudioModel | None = None
    timing: TimingModel | None = None
    hardware_acceleration: str | HardwareModel | None = None
    complex_filters: list[FilterSpec] = Field(default_factory=list)
    options: OptionsModel | None = None

    @model_validator(mode="after")
    def validate_acceleration(self) -> ConversionModel:
        accel = self.hardware_acceleration
        if isinstance(accel, str) and accel.lower() not in VALID_ACCELERATIONS:
            raise ValueError(
                f"Invalid acceleration '{accel}'. "
                f"Must be one of: {', '.join(sorted(VALID_ACCELERATIONS))}"
            )
        return self


# =============================================================================
# Conversion to domain dataclasses
# =============================================================================


def _size(size: str | SizeModel | None) -> SizeSpec | str | None:
    if isinstance(size, SizeModel):
        return SizeSpec(width=size.width, height=size.height)
    return size


def _video(model: VideoModel) -> VideoConfig:
    values = model.model_dump(exclude={"size", "filters", "upscale", "downscale"})
    return VideoConfig(
        **values,
        size=_size(model.size),
        filters=model.filters,
        upscale=model.upscale,
        downscale=model.downscale,
    )


def _audio(model: AudioModel) -> AudioConfig:
    values = model.model_dump(exclude={"filters"})
    return AudioConfig(**values, filters=model.filters)


def _hardware(
    value: str | HardwareModel | None,
) -> HardwareAccelConfig | str | None:
    if isinstance(value, HardwareModel):
        return HardwareAccelConfig(
            enabled=value.enabled,
            type=value.type.lower() if value.type else None,
            prefer_hardware=value.prefer_hardware,
            fallback_to_cpu=value.fallback_to_cpu,
        )
    return value.lower() if value else None


def _options(model: OptionsModel) -> AdvancedOptions:
    return AdvancedOptions(
        input_options=tuple(model.input_options),
        output_options=tuple(model.output_options),
        threads=model.threads,
        two_pass=model.two_pass,
        passlogfile=model.passlogfile,
        metadata=dict(model.metadata),
        subtitles=model.subtitles,
        burn_subtitles=model.burn_subtitles,
    )


def to_conversion_config(model: ConversionModel) -> ConversionConfig:
    """Convert a validated ConversionModel to a frozen ConversionConfig."""
    return ConversionConfig(
        input=model.input,
        output=model.output,
        format=model.format,
        video=_video(model.video) if model.video else None,
        audio=_audio(model.audio) if model.audio else None,
        timing=TimingConfig(**model.timing.model_dump()) if model.timing else None,
        hardware_acceleration=_hardware(model.hardware_acceleration),
        complex_filters=tuple(model.complex_filters),
        options=_options(model.options) if model.options else None,
    )


def format_validation_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic errors into "loc: message" strings."""
    messages = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item.get("loc", []))
        msg = item.get("msg", str(error))
        messages.append(f"{loc}: {msg}" if loc else msg)
    return messages


def parse_conversion(data: dict[str, Any]) -> ConversionConfig:
    """Validate a raw mapping and convert it.

    Raises:
        InvalidConfigurationError: With every validation problem found.
    """
    try:
        model = ConversionModel.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigurationError(format_validation_errors(e)) from e
    return to_conversion_config(model)
