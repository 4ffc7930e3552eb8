"""Filter chain construction.

Builds ffmpeg filter expressions from the filter models in
mediaforge.domain.filters. Per-stream chains are comma-joined and applied
in a fixed order regardless of which fields were set:

video: deinterlace, crop, denoise, scale, pad, color, sharpen, rotate,
       flip, text, fade, custom
audio: denoise, equalizer, tempo, pitch, volume, custom
"""

from __future__ import annotations

from mediaforge.core.formatting import format_number as _n
from mediaforge.domain.enums import enum_value
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

_PARITY = {"tff": "0", "bff": "1", "auto": "-1"}
_DEINT = {"all": "0", "interlaced": "1"}

# Fixed settings of the upscale/downscale sub-chains
UPSCALE_DENOISE = "hqdn3d=4:3:6:4.5"
DOWNSCALE_DEINTERLACE = "yadif=0:-1:0"

# Sample rate the pitch composite resamples around
PITCH_BASE_RATE = 44100


def _keyed(pairs: list[tuple[str, object]]) -> list[str]:
    """Render key=value for every pair whose value is set."""
    return [f"{key}={_n(value)}" for key, value in pairs if value is not None]


# =============================================================================
# Video filter builders
# =============================================================================


def build_scale_filter(scale: ScaleFilter) -> str:
    width = -1 if scale.width is None else scale.width
    height = -1 if scale.height is None else scale.height
    parts = [f"{_n(width)}:{_n(height)}"]
    if scale.algorithm:
        parts.append(f"flags={enum_value(scale.algorithm)}")
    if scale.force_original_aspect_ratio:
        parts.append(f"force_original_aspect_ratio={scale.force_original_aspect_ratio}")
    if scale.force_divisible_by:
        parts.append(f"force_divisible_by={scale.force_divisible_by}")
    return "scale=" + ":".join(parts)


def build_crop_filter(crop: CropFilter) -> str:
    x = "(iw-w)/2" if crop.x is None else _n(crop.x)
    y = "(ih-h)/2" if crop.y is None else _n(crop.y)
    return f"crop={_n(crop.width)}:{_n(crop.height)}:{x}:{y}"


def build_pad_filter(pad: PadFilter) -> str:
    parts = [_n(pad.width), _n(pad.height)]
    if pad.x is not None:
        parts.append(_n(pad.x))
    if pad.y is not None:
        parts.append(_n(pad.y))
    if pad.color:
        parts.append(pad.color)
    return "pad=" + ":".join(parts)


def build_deinterlace_filter(deinterlace: DeinterlaceFilter) -> str:
    mode = deinterlace.mode or "yadif"
    parts = []
    if deinterlace.parity:
        parts.append(_PARITY.get(deinterlace.parity, "-1"))
    if deinterlace.deint:
        parts.append(_DEINT.get(deinterlace.deint, "0"))
    return f"{mode}={':'.join(parts)}" if parts else mode


def build_denoise_filter(denoise: VideoDenoiseFilter) -> str:
    name = denoise.filter or "hqdn3d"
    parts = [
        _n(value)
        for value in (
            denoise.luma_spatial,
            denoise.chroma_spatial,
            denoise.luma_tmp,
            denoise.chroma_tmp,
        )
        if value is not None
    ]
    return f"{name}={':'.join(parts)}" if parts else name


def build_sharpen_filter(sharpen: SharpenFilter) -> str:
    parts = _keyed(
        [
            ("luma_msize_x", sharpen.luma_msize_x),
            ("luma_msize_y", sharpen.luma_msize_y),
            ("luma_amount", sharpen.luma_amount),
            ("chroma_msize_x", sharpen.chroma_msize_x),
            ("chroma_msize_y", sharpen.chroma_msize_y),
            ("chroma_amount", sharpen.chroma_amount),
        ]
    )
    return f"unsharp={':'.join(parts)}" if parts else "unsharp"


def build_color_filter(color: ColorFilter) -> str:
    parts = _keyed(
        [
            ("brightness", color.brightness),
            ("contrast", color.contrast),
            ("saturation", color.saturation),
            ("gamma", color.gamma),
            ("gamma_r", color.gamma_r),
            ("gamma_g", color.gamma_g),
            ("gamma_b", color.gamma_b),
        ]
    )
    return "eq=" + ":".join(parts)


def build_rotate_filter(rotate: RotateFilter) -> str:
    parts = [f"a={_n(rotate.angle)}"]
    if rotate.fillcolor:
        parts.append(f"fillcolor={rotate.fillcolor}")
    if rotate.bilinear is not None:
        parts.append(f"bilinear={'1' if rotate.bilinear else '0'}")
    return "rotate=" + ":".join(parts)


def build_flip_filter(flip: FlipFilter) -> str:
    filters = []
    if flip.horizontal:
        filters.append("hflip")
    if flip.vertical:
        filters.append("vflip")
    return ",".join(filters)


def build_watermark_filter(watermark: WatermarkFilter) -> str:
    """Build the overlay clause for a watermark.

    With an opacity the overlay is rendered in its alpha-blending form and
    the enable expression is not used.
    """
    parts = _keyed([("x", watermark.x), ("y", watermark.y)])
    if watermark.opacity is not None:
        parts += ["format=auto", f"alpha={_n(watermark.opacity)}"]
        return "overlay=" + ":".join(parts)
    if watermark.enable:
        parts.append(f"enable='{watermark.enable}'")
    return "overlay=" + ":".join(parts)


def escape_text(text: str) -> str:
    """Escape single quotes for a quoted drawtext value."""
    return text.replace("'", "\\'")


def build_text_filter(text: TextFilter) -> str:
    parts = [f"text='{escape_text(text.text)}'"]
    if text.fontfile:
        parts.append(f"fontfile={text.fontfile}")
    if text.fontsize:
        parts.append(f"fontsize={_n(text.fontsize)}")
    if text.fontcolor:
        parts.append(f"fontcolor={text.fontcolor}")
    parts += _keyed([("x", text.x), ("y", text.y)])
    if text.shadowcolor:
        parts.append(f"shadowcolor={text.shadowcolor}")
    parts += _keyed(
        [
            ("shadowx", text.shadowx),
            ("shadowy", text.shadowy),
            ("borderw", text.borderw),
        ]
    )
    if text.bordercolor:
        parts.append(f"bordercolor={text.bordercolor}")
    return "drawtext=" + ":".join(parts)


def build_fade_filter(fade: FadeFilter) -> str:
    parts = [f"type={fade.type}"]
    parts += _keyed(
        [
            ("start_frame", fade.start_frame),
            ("nb_frames", fade.nb_frames),
            ("start_time", fade.start_time),
            ("duration", fade.duration),
        ]
    )
    if fade.color:
        parts.append(f"color={fade.color}")
    return "fade=" + ":".join(parts)


# =============================================================================
# Audio filter builders
# =============================================================================


def build_volume_filter(volume: VolumeFilter) -> str:
    parts = [f"volume={_n(volume.volume)}"]
    if volume.precision:
        parts.append(f"precision={volume.precision}")
    return ":".join(parts)


def build_audio_denoise_filter(denoise: AudioDenoiseFilter) -> str:
    parts = _keyed([("nr", denoise.noise_reduction)])
    if denoise.noise_type:
        parts.append(f"nf={denoise.noise_type}")
    return f"afftdn={':'.join(parts)}" if parts else "afftdn"


def build_equalizer_filter(eq: EqualizerFilter) -> str:
    parts = [f"f={_n(eq.frequency)}"]
    if eq.width_type:
        parts.append(f"t={eq.width_type}")
    parts += _keyed([("w", eq.width), ("g", eq.gain)])
    return "equalizer=" + ":".join(parts)


def build_tempo_filter(tempo: TempoFilter) -> str:
    return f"atempo={_n(tempo.tempo)}"


def build_pitch_filter(pitch: PitchFilter) -> str:
    """Shift pitch by resampling; there is no native pitch filter."""
    return (
        f"asetrate={PITCH_BASE_RATE}*2^({_n(pitch.pitch)}/12),"
        f"aresample={PITCH_BASE_RATE}"
    )


# =============================================================================
# Chains
# =============================================================================


def build_upscale_filter(upscale: UpscaleOptions) -> list[str]:
    """Expand an upscale strategy into its filter sub-chain."""
    filters = []
    if upscale.denoise_before_scale:
        filters.append(UPSCALE_DENOISE)
    filters.append(
        f"scale={upscale.target_width}:{upscale.target_height}"
        f":flags={enum_value(upscale.algorithm)}"
    )
    if upscale.enhance_sharpness:
        amount = upscale.sharpness_amount or 1
        filters.append(f"unsharp=5:5:{_n(amount)}:5:5:0.0")
    return filters


def build_downscale_filter(downscale: DownscaleOptions) -> list[str]:
    """Expand a downscale strategy into its filter sub-chain."""
    filters = []
    if downscale.deinterlace:
        filters.append(DOWNSCALE_DEINTERLACE)
    algorithm = "lanczos" if downscale.preserve_details else enum_value(
        downscale.algorithm
    )
    filters.append(
        f"scale={downscale.target_width}:{downscale.target_height}:flags={algorithm}"
    )
    return filters


def build_video_filters(filters: VideoFilters) -> str:
    """Build the -vf chain for a filter bag, or "" if nothing is set.

    Watermarks need a second input and are left to complex filter graphs.
    """
    chain: list[str] = []

    if filters.deinterlace:
        chain.append(build_deinterlace_filter(filters.deinterlace))
    # Crop and denoise act on source pixels, before resampling
    if filters.crop:
        chain.append(build_crop_filter(filters.crop))
    if filters.denoise:
        chain.append(build_denoise_filter(filters.denoise))
    if filters.scale:
        chain.append(build_scale_filter(filters.scale))
    if filters.pad:
        chain.append(build_pad_filter(filters.pad))
    if filters.color:
        chain.append(build_color_filter(filters.color))
    if filters.sharpen:
        chain.append(build_sharpen_filter(filters.sharpen))
    if filters.rotate:
        chain.append(build_rotate_filter(filters.rotate))
    if filters.flip:
        flip = build_flip_filter(filters.flip)
        if flip:
            chain.append(flip)
    if filters.text:
        chain.append(build_text_filter(filters.text))
    if filters.fade:
        chain.append(build_fade_filter(filters.fade))
    chain.extend(filters.custom)

    return ",".join(chain)


def build_audio_filters(filters: AudioFilters) -> str:
    """Build the -af chain for a filter bag, or "" if nothing is set."""
    chain: list[str] = []

    if filters.denoise:
        chain.append(build_audio_denoise_filter(filters.denoise))
    for band in filters.equalizer:
        chain.append(build_equalizer_filter(band))
    if filters.tempo:
        chain.append(build_tempo_filter(filters.tempo))
    if filters.pitch:
        chain.append(build_pitch_filter(filters.pitch))
    # Volume last so gain reflects all earlier processing
    if filters.volume:
        chain.append(build_volume_filter(filters.volume))
    chain.extend(filters.custom)

    return ",".join(chain)


def build_complex_filter(specs: list[FilterSpec] | tuple[FilterSpec, ...]) -> str:
    """Serialize a -filter_complex graph.

    Each clause renders as ``[in]...name=k=v:k=v[out]...``; clauses are
    joined with ";".
    """
    clauses = []
    for spec in specs:
        inputs = "".join(f"[{label}]" for label in spec.inputs)
        outputs = "".join(f"[{label}]" for label in spec.outputs)
        body = spec.filter
        if spec.options:
            opts = ":".join(f"{k}={_n(v)}" for k, v in spec.options.items())
            body = f"{body}={opts}"
        clauses.append(f"{inputs}{body}{outputs}")
    return ";".join(clauses)
