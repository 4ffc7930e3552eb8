"""Filter configuration models.

Each dataclass describes one ffmpeg filter kind. Field names follow the
ffmpeg option names they serialize to, so the chain builder can render
them without a translation table.
"""

from dataclasses import dataclass, field
from typing import Any

from mediaforge.domain.enums import ScalingAlgorithm

Number = int | float
NumberOrExpr = int | float | str


# =============================================================================
# Video filters
# =============================================================================


@dataclass(frozen=True)
class ScaleFilter:
    """scale filter. None dimensions render as -1 (keep aspect)."""

    width: NumberOrExpr | None = None
    height: NumberOrExpr | None = None
    algorithm: ScalingAlgorithm | str | None = None
    force_original_aspect_ratio: str | None = None  # disable, decrease, increase
    force_divisible_by: int | None = None


@dataclass(frozen=True)
class CropFilter:
    """crop filter. Position defaults to centered."""

    width: NumberOrExpr
    height: NumberOrExpr
    x: NumberOrExpr | None = None
    y: NumberOrExpr | None = None


@dataclass(frozen=True)
class PadFilter:
    """pad filter."""

    width: NumberOrExpr
    height: NumberOrExpr
    x: NumberOrExpr | None = None
    y: NumberOrExpr | None = None
    color: str | None = None


@dataclass(frozen=True)
class DeinterlaceFilter:
    """Deinterlacer (yadif, bwdif or w3fdif)."""

    mode: str | None = None
    parity: str | None = None  # tff, bff, auto
    deint: str | None = None  # all, interlaced


@dataclass(frozen=True)
class VideoDenoiseFilter:
    """Spatial/temporal denoiser with positional strengths."""

    filter: str | None = None
    luma_spatial: Number | None = None
    chroma_spatial: Number | None = None
    luma_tmp: Number | None = None
    chroma_tmp: Number | None = None


@dataclass(frozen=True)
class SharpenFilter:
    """unsharp filter."""

    luma_msize_x: Number | None = None
    luma_msize_y: Number | None = None
    luma_amount: Number | None = None
    chroma_msize_x: Number | None = None
    chroma_msize_y: Number | None = None
    chroma_amount: Number | None = None


@dataclass(frozen=True)
class ColorFilter:
    """eq filter for color correction."""

    brightness: Number | None = None
    contrast: Number | None = None
    saturation: Number | None = None
    gamma: Number | None = None
    gamma_r: Number | None = None
    gamma_g: Number | None = None
    gamma_b: Number | None = None


@dataclass(frozen=True)
class RotateFilter:
    """rotate filter. Angle is in radians or an expression."""

    angle: NumberOrExpr
    fillcolor: str | None = None
    bilinear: bool | None = None


@dataclass(frozen=True)
class FlipFilter:
    """hflip/vflip."""

    horizontal: bool = False
    vertical: bool = False


@dataclass(frozen=True)
class WatermarkFilter:
    """overlay filter for an image input.

    Needs a second input stream, so it is not part of the single-input
    video chain; use it through a complex filter graph.
    """

    input: str
    x: NumberOrExpr | None = None
    y: NumberOrExpr | None = None
    opacity: Number | None = None
    enable: str | None = None


@dataclass(frozen=True)
class TextFilter:
    """drawtext filter."""

    text: str
    fontfile: str | None = None
    fontsize: Number | None = None
    fontcolor: str | None = None
    x: NumberOrExpr | None = None
    y: NumberOrExpr | None = None
    shadowcolor: str | None = None
    shadowx: Number | None = None
    shadowy: Number | None = None
    borderw: Number | None = None
    bordercolor: str | None = None


@dataclass(frozen=True)
class FadeFilter:
    """fade in/out."""

    type: str  # in, out
    start_frame: int | None = None
    nb_frames: int | None = None
    start_time: Number | None = None
    duration: Number | None = None
    color: str | None = None


@dataclass(frozen=True)
class VideoFilters:
    """Bag of video filters. Order of application is fixed by the builder."""

    scale: ScaleFilter | None = None
    crop: CropFilter | None = None
    pad: PadFilter | None = None
    deinterlace: DeinterlaceFilter | None = None
    denoise: VideoDenoiseFilter | None = None
    sharpen: SharpenFilter | None = None
    color: ColorFilter | None = None
    rotate: RotateFilter | None = None
    flip: FlipFilter | None = None
    watermark: WatermarkFilter | None = None
    text: TextFilter | None = None
    fade: FadeFilter | None = None
    custom: tuple[str, ...] = ()


# =============================================================================
# Audio filters
# =============================================================================


@dataclass(frozen=True)
class VolumeFilter:
    volume: NumberOrExpr
    precision: str | None = None  # fixed, float, double


@dataclass(frozen=True)
class AudioDenoiseFilter:
    noise_reduction: Number | None = None
    noise_type: str | None = None  # white, vinyl, shellac, hiss


@dataclass(frozen=True)
class EqualizerFilter:
    frequency: Number
    width_type: str | None = None  # h, q, o, s
    width: Number | None = None
    gain: Number | None = None


@dataclass(frozen=True)
class TempoFilter:
    tempo: Number


@dataclass(frozen=True)
class PitchFilter:
    pitch: Number  # semitones


@dataclass(frozen=True)
class AudioFilters:
    """Bag of audio filters. Order of application is fixed by the builder."""

    volume: VolumeFilter | None = None
    denoise: AudioDenoiseFilter | None = None
    equalizer: tuple[EqualizerFilter, ...] = ()
    tempo: TempoFilter | None = None
    pitch: PitchFilter | None = None
    custom: tuple[str, ...] = ()


# =============================================================================
# Complex graphs and resizing strategies
# =============================================================================


@dataclass(frozen=True)
class FilterSpec:
    """One clause of a -filter_complex graph."""

    filter: str
    inputs: tuple[str, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)
    outputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpscaleOptions:
    algorithm: ScalingAlgorithm | str
    target_width: int
    target_height: int
    enhance_sharpness: bool = False
    denoise_before_scale: bool = False
    sharpness_amount: Number | None = None


@dataclass(frozen=True)
class DownscaleOptions:
    algorithm: ScalingAlgorithm | str
    target_width: int
    target_height: int
    deinterlace: bool = False
    preserve_details: bool = False
