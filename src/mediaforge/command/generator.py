"""ConversionConfig to ffmpeg argument vector.

The emission order below is significant to ffmpeg's option parsing
(input options must precede -i, output options must precede the output
name) and is kept fixed:

 1. -hide_banner
 2. -hwaccel (explicit, or inserted after -hide_banner on hardware substitution)
 3. -threads
 4. raw input options
 5. -ss (fast seek only)
 6. -i <input>
 7. -ss / -t / -to (accurate seek)
 8. video stream arguments, ending with -vf
 9. audio stream arguments, ending with -af
10. -f
11. -filter_complex
12. advanced options (two-pass, metadata, subtitles)
13. raw output options
14. -y <output>
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field

from mediaforge.command.filters import (
    build_audio_filters,
    build_complex_filter,
    build_downscale_filter,
    build_upscale_filter,
    build_video_filters,
)
from mediaforge.core.formatting import (
    format_bitrate,
    format_number,
    format_size,
    format_time,
)
from mediaforge.domain.config import (
    AdvancedOptions,
    AudioConfig,
    ConversionConfig,
    HardwareAccelConfig,
    TimingConfig,
    VideoConfig,
)
from mediaforge.domain.enums import HardwareAcceleration, enum_value
from mediaforge.errors import HardwareAccelerationUnavailableError
from mediaforge.tools.hardware import HardwareResolver, hwaccel_flag

logger = logging.getLogger(__name__)

INPUT_PIPE = "pipe:0"
OUTPUT_PIPE = "pipe:1"
DEFAULT_PASSLOGFILE = "ffmpeg2pass"
SOFT_SUBTITLE_CODEC = "mov_text"

# Codec substrings that select -crf over -q:v
CRF_CODEC_MARKERS = ("264", "265")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of pre-flight validation. errors lists every problem found."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def is_path(value: object) -> bool:
    return isinstance(value, (str, os.PathLike))


def validate(config: ConversionConfig) -> ValidationResult:
    """Check a config for missing and mutually exclusive settings.

    All rules are evaluated; nothing short-circuits.
    """
    errors: list[str] = []

    if config.input is None or (is_path(config.input) and not os.fspath(config.input)):
        errors.append("Input is required")
    if config.output is None or (
        is_path(config.output) and not os.fspath(config.output)
    ):
        errors.append("Output is required")

    video = config.video
    if video is not None:
        if video.upscale and video.downscale:
            errors.append("Cannot use both upscale and downscale")
        if video.upscale and video.size:
            errors.append("Cannot use both upscale and size")

    timing = config.timing
    if timing is not None and timing.duration is not None and timing.to is not None:
        errors.append("Cannot use both duration and to")

    return ValidationResult(valid=not errors, errors=errors)


# =============================================================================
# Argument groups
# =============================================================================


def uses_crf(codec: str | None) -> bool:
    """True if quality should map to -crf for this codec (substring match)."""
    return bool(codec) and any(marker in codec for marker in CRF_CODEC_MARKERS)


def video_args(video: VideoConfig) -> list[str]:
    """Arguments for the video stream, ending with the -vf chain."""
    if video.disabled:
        return ["-vn"]

    args: list[str] = []
    codec = enum_value(video.codec) if video.codec else None

    if codec:
        args.extend(["-c:v", codec])
    if video.bitrate:
        args.extend(["-b:v", format_bitrate(video.bitrate)])
    if video.quality is not None:
        flag = "-crf" if uses_crf(codec) else "-q:v"
        args.extend([flag, format_number(video.quality)])
    if video.fps:
        args.extend(["-r", format_number(video.fps)])
    size = format_size(video.size)
    if size:
        args.extend(["-s", size])
    if video.aspect_ratio:
        args.extend(["-aspect", format_number(video.aspect_ratio)])
    if video.preset:
        args.extend(["-preset", video.preset])
    if video.profile:
        args.extend(["-profile:v", video.profile])
    if video.level:
        args.extend(["-level", video.level])
    if video.pixel_format:
        args.extend(["-pix_fmt", video.pixel_format])
    if video.keyframe_interval:
        args.extend(["-g", str(video.keyframe_interval)])
    if video.bframes is not None:
        args.extend(["-bf", str(video.bframes)])
    if video.refs is not None:
        args.extend(["-refs", str(video.refs)])
    if video.frames is not None:
        args.extend(["-frames:v", str(video.frames)])
    if video.loop is not None:
        args.extend(["-loop", str(video.loop)])

    chain = video_filter_chain(video)
    if chain:
        args.extend(["-vf", chain])
    return args


def video_filter_chain(video: VideoConfig) -> str:
    """Resize sub-chains first, then the standard filter chain."""
    parts: list[str] = []
    if video.upscale:
        parts.extend(build_upscale_filter(video.upscale))
    if video.downscale:
        parts.extend(build_downscale_filter(video.downscale))
    if video.filters:
        standard = build_video_filters(video.filters)
        if standard:
            parts.append(standard)
    return ",".join(parts)


def audio_args(audio: AudioConfig) -> list[str]:
    """Arguments for the audio stream, ending with the -af chain."""
    if audio.disabled:
        return ["-an"]

    args: list[str] = []
    if audio.codec:
        args.extend(["-c:a", enum_value(audio.codec)])
    if audio.bitrate:
        args.extend(["-b:a", format_bitrate(audio.bitrate)])
    if audio.quality is not None:
        args.extend(["-q:a", format_number(audio.quality)])
    if audio.channels:
        args.extend(["-ac", str(audio.channels)])
    if audio.frequency:
        args.extend(["-ar", str(audio.frequency)])
    if audio.profile:
        args.extend(["-profile:a", audio.profile])

    chain = []
    if audio.volume_normalization:
        chain.append("loudnorm")
    if audio.filters:
        standard = build_audio_filters(audio.filters)
        if standard:
            chain.append(standard)
    if chain:
        args.extend(["-af", ",".join(chain)])
    return args


def timing_args(timing: TimingConfig) -> list[str]:
    """Accurate-seek arguments placed after the input."""
    if timing.fast_seek:
        return []
    args: list[str] = []
    if timing.seek is not None:
        args.extend(["-ss", format_time(timing.seek)])
    if timing.duration is not None:
        args.extend(["-t", format_time(timing.duration)])
    elif timing.to is not None:
        args.extend(["-to", format_time(timing.to)])
    return args


def advanced_args(options: AdvancedOptions, args: list[str]) -> list[str]:
    """Two-pass, metadata and subtitle arguments.

    Burned-in subtitles are merged into an existing -vf in ``args``
    (mutated in place) so ffmpeg sees a single video filter chain.
    """
    extra: list[str] = []
    if options.two_pass:
        extra.extend(
            ["-pass", "1", "-passlogfile", options.passlogfile or DEFAULT_PASSLOGFILE]
        )
    for key, value in options.metadata.items():
        extra.extend(["-metadata", f"{key}={value}"])
    if options.subtitles:
        if options.burn_subtitles:
            burn = f"subtitles={options.subtitles}"
            if "-vf" in args:
                index = args.index("-vf") + 1
                args[index] = f"{args[index]},{burn}"
            else:
                extra.extend(["-vf", burn])
        else:
            extra.extend(["-i", options.subtitles, "-c:s", SOFT_SUBTITLE_CODEC])
    return extra


# =============================================================================
# Hardware directive
# =============================================================================


def _hardware_directive(
    directive: HardwareAccelConfig | HardwareAcceleration | str | None,
) -> tuple[str | None, bool, str | None]:
    """Split a hardware directive into (class name, prefer hw, -hwaccel value).

    The class name is None for auto-detection. The -hwaccel value is only
    set for an explicitly named class and is emitted up front.
    """
    if directive is None:
        return None, False, None

    if isinstance(directive, HardwareAccelConfig):
        if not directive.enabled:
            return None, False, None
        name = enum_value(directive.type) if directive.type else None
        prefer = directive.prefer_hardware
    else:
        name = enum_value(directive)
        prefer = True

    if name == HardwareAcceleration.CPU.value:
        return name, False, None
    if name == HardwareAcceleration.ANY.value or name is None:
        return None, prefer, None
    return name, prefer, hwaccel_flag(name)


# =============================================================================
# Entry points
# =============================================================================


def generate(
    config: ConversionConfig,
    ffmpeg_path: str = "ffmpeg",
    resolver: HardwareResolver | None = None,
) -> list[str]:
    """Compile a conversion config into ffmpeg arguments (without argv[0]).

    Args:
        config: Conversion to compile. Never mutated.
        ffmpeg_path: ffmpeg binary, used for hardware detection when no
            resolver is given.
        resolver: Hardware resolver to use for codec substitution.

    Returns:
        Argument list.

    Raises:
        HardwareAccelerationUnavailableError: If hardware encoding was
            required (fallback_to_cpu=False) and no mapping exists.
    """
    args = ["-hide_banner"]

    accel_name, prefer_hardware, explicit_flag = _hardware_directive(
        config.hardware_acceleration
    )
    if explicit_flag:
        args.extend(["-hwaccel", explicit_flag])

    video = config.video
    if prefer_hardware and video is not None and video.codec and not video.disabled:
        resolver = resolver or HardwareResolver(ffmpeg_path)
        codec = enum_value(video.codec)
        selection = resolver.resolve(codec, accel_name)
        if selection.is_hardware:
            video = dataclasses.replace(video, codec=selection.codec)
            if not explicit_flag and selection.hwaccel:
                args[1:1] = ["-hwaccel", selection.hwaccel]
            logger.debug("Using hardware encoder %s for %s", selection.codec, codec)
        elif (
            isinstance(config.hardware_acceleration, HardwareAccelConfig)
            and not config.hardware_acceleration.fallback_to_cpu
        ):
            raise HardwareAccelerationUnavailableError(accel_name or "auto", codec)

    options = config.options
    if options is not None and options.threads is not None:
        args.extend(["-threads", str(options.threads)])
    if options is not None:
        args.extend(options.input_options)

    timing = config.timing
    if timing is not None and timing.fast_seek and timing.seek is not None:
        args.extend(["-ss", format_time(timing.seek)])

    args.extend(["-i", os.fspath(config.input) if is_path(config.input) else INPUT_PIPE])

    if timing is not None:
        args.extend(timing_args(timing))
    if video is not None:
        args.extend(video_args(video))
    if config.audio is not None:
        args.extend(audio_args(config.audio))
    if config.format:
        args.extend(["-f", enum_value(config.format)])
    if config.complex_filters:
        args.extend(["-filter_complex", build_complex_filter(config.complex_filters)])
    if options is not None:
        args.extend(advanced_args(options, args))
        args.extend(options.output_options)

    output = os.fspath(config.output) if is_path(config.output) else OUTPUT_PIPE
    args.extend(["-y", output])
    return args


def display_command(ffmpeg_path: str, args: list[str]) -> str:
    """Join a binary and its arguments for logs and events."""
    return " ".join([ffmpeg_path, *args])


def generate_string(
    config: ConversionConfig,
    ffmpeg_path: str = "ffmpeg",
    resolver: HardwareResolver | None = None,
) -> str:
    """Render the full command line for display."""
    return display_command(ffmpeg_path, generate(config, ffmpeg_path, resolver))


def probe_args(path: str) -> list[str]:
    """ffprobe arguments for a JSON format-and-streams probe."""
    return [
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        path,
    ]
