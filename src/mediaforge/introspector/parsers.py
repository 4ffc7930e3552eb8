"""Pure parsing functions for ffmpeg/ffprobe output.

Each function takes one captured text block (or parsed JSON) and returns
a structured record from mediaforge.domain.metadata. No I/O happens here.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from mediaforge.domain.metadata import (
    CodecList,
    FormatMetadata,
    FormatSupport,
    ImageMetadata,
    MediaMetadata,
    StreamMetadata,
    VersionInfo,
    VideoMetadata,
)
from mediaforge.errors import InvalidInputError

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"ffmpeg version (\S+)")
_COPYRIGHT_RE = re.compile(r"Copyright \(c\) (.+)")
_LIBRARY_RE = re.compile(r"^(lib\w+)\s+([\d.]+)")
_FORMAT_LINE_RE = re.compile(r"^\s*([DE\s]{2})\s+(\S+)")
_CODEC_LINE_RE = re.compile(r"^\s*([VAS][.FXBD]{5})\s+(\S+)")

_CODEC_TYPES = {"V": "video", "A": "audio", "S": "subtitle"}

DISPLAY_MATRIX = "Display Matrix"


# =============================================================================
# Capability listings
# =============================================================================


def parse_version(output: str) -> VersionInfo:
    """Parse ``ffmpeg -version`` output.

    The first line supplies the version and copyright; ``--`` lines are
    configure flags and ``libNAME  X.Y.Z`` lines are library versions.
    """
    lines = output.splitlines()
    first = lines[0] if lines else ""

    version_match = _VERSION_RE.search(first)
    copyright_match = _COPYRIGHT_RE.search(first)

    configuration: list[str] = []
    lib_versions: dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("--"):
            configuration.append(stripped)
            continue
        lib_match = _LIBRARY_RE.match(stripped)
        if lib_match:
            lib_versions[lib_match.group(1)] = lib_match.group(2)

    return VersionInfo(
        version=version_match.group(1) if version_match else "unknown",
        copyright=copyright_match.group(1) if copyright_match else "",
        configuration=configuration,
        lib_versions=lib_versions,
    )


def parse_formats(output: str) -> FormatSupport:
    """Parse ``ffmpeg -formats`` output.

    Only lines after the ``--`` separator are considered. A "D" in the
    two-character flag field marks demuxing, an "E" marks muxing.
    """
    result = FormatSupport()
    started = False
    for line in output.splitlines():
        if "--" in line:
            started = True
            continue
        if not started or not line.strip():
            continue
        match = _FORMAT_LINE_RE.match(line)
        if not match:
            continue
        flags, name = match.groups()
        if "D" in flags:
            result.demuxing.append(name)
        if "E" in flags:
            result.muxing.append(name)
    return result


def parse_codec_list(output: str) -> CodecList:
    """Parse ``ffmpeg -encoders`` or ``ffmpeg -decoders`` output.

    Lines after the ``------`` separator carry a six-character flag field
    whose first character is the stream type.
    """
    result = CodecList()
    started = False
    for line in output.splitlines():
        if "------" in line:
            started = True
            continue
        if not started or not line.strip():
            continue
        match = _CODEC_LINE_RE.match(line)
        if not match:
            continue
        flags, name = match.groups()
        result.for_type(_CODEC_TYPES[flags[0]]).append(name)
    return result


def parse_encoders(output: str) -> CodecList:
    return parse_codec_list(output)


def parse_decoders(output: str) -> CodecList:
    return parse_codec_list(output)


# =============================================================================
# Probe metadata
# =============================================================================


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_stream(stream: dict[str, Any]) -> StreamMetadata:
    return StreamMetadata(
        index=_as_int(stream.get("index")) or 0,
        codec_type=stream.get("codec_type"),
        codec_name=stream.get("codec_name"),
        codec_long_name=stream.get("codec_long_name"),
        codec_tag=stream.get("codec_tag_string"),
        width=_as_int(stream.get("width")),
        height=_as_int(stream.get("height")),
        coded_width=_as_int(stream.get("coded_width")),
        coded_height=_as_int(stream.get("coded_height")),
        display_aspect_ratio=stream.get("display_aspect_ratio"),
        pixel_format=stream.get("pix_fmt"),
        frame_rate=stream.get("r_frame_rate"),
        avg_frame_rate=stream.get("avg_frame_rate"),
        sample_rate=_as_str(stream.get("sample_rate")),
        channels=_as_int(stream.get("channels")),
        channel_layout=stream.get("channel_layout"),
        bits_per_sample=_as_int(stream.get("bits_per_sample")),
        duration=_as_str(stream.get("duration")),
        duration_ts=_as_int(stream.get("duration_ts")),
        start_time=_as_str(stream.get("start_time")),
        start_pts=_as_int(stream.get("start_pts")),
        bitrate=_as_str(stream.get("bit_rate")),
        tags=dict(stream.get("tags") or {}),
        side_data_list=stream.get("side_data_list") or None,
    )


def parse_media_metadata(data: str | dict[str, Any]) -> MediaMetadata:
    """Map an ffprobe JSON result into MediaMetadata.

    Args:
        data: Raw JSON text or already-decoded dict.

    Returns:
        MediaMetadata. Missing optional fields are None.

    Raises:
        json.JSONDecodeError: If data is text and not valid JSON.
    """
    if isinstance(data, str):
        data = json.loads(data)

    fmt = data.get("format") or {}
    format_meta = FormatMetadata(
        filename=fmt.get("filename"),
        format_name=fmt.get("format_name"),
        format_long_name=fmt.get("format_long_name"),
        start_time=_as_str(fmt.get("start_time")),
        duration=_as_str(fmt.get("duration")),
        size=_as_str(fmt.get("size")),
        bit_rate=_as_str(fmt.get("bit_rate")),
        probe_score=_as_int(fmt.get("probe_score")),
        tags=dict(fmt.get("tags") or {}),
    )
    streams = [_parse_stream(s) for s in data.get("streams") or []]
    return MediaMetadata(format=format_meta, streams=streams)


def parse_frame_rate(rate: str | None) -> float:
    """Convert "num/den" to frames per second; 0.0 if unusable."""
    if not rate:
        return 0.0
    num, _, den = rate.partition("/")
    try:
        numerator = float(num)
        denominator = float(den) if den else 1.0
    except ValueError:
        return 0.0
    return numerator / denominator if denominator > 0 else 0.0


def extract_rotation(stream: StreamMetadata) -> int | None:
    """Rotation in degrees from display-matrix side data or the rotate tag.

    Side data wins when both are present; the tag is the legacy location.
    """
    for entry in stream.side_data_list or []:
        kind = entry.get("side_data_type") or entry.get("sideDataType")
        if kind == DISPLAY_MATRIX and entry.get("rotation") is not None:
            try:
                return round(float(entry["rotation"]))
            except (TypeError, ValueError):
                logger.debug("Unparseable display matrix rotation: %r", entry)

    tag = stream.tags.get("rotate")
    if tag:
        return _as_int(tag) or None
    return None


def _float_or_zero(value: str | None) -> float:
    try:
        return float(value) if value else 0.0
    except ValueError:
        return 0.0


def _first_video_stream(metadata: MediaMetadata, what: str) -> StreamMetadata:
    video = metadata.streams_of_type("video")
    if not video:
        raise InvalidInputError(
            metadata.format.filename or "<input>", f"No {what} stream found"
        )
    return video[0]


def parse_video_metadata(metadata: MediaMetadata) -> VideoMetadata:
    """Summarize a probe result as a video.

    Raises:
        InvalidInputError: If there is no video stream.
    """
    primary = _first_video_stream(metadata, "video")
    audio = metadata.streams_of_type("audio")

    return VideoMetadata(
        format=metadata.format,
        video_streams=metadata.streams_of_type("video"),
        audio_streams=audio,
        subtitle_streams=metadata.streams_of_type("subtitle"),
        duration=_float_or_zero(metadata.format.duration),
        width=primary.width or 0,
        height=primary.height or 0,
        frame_rate=parse_frame_rate(primary.avg_frame_rate),
        video_codec=primary.codec_name,
        audio_codec=audio[0].codec_name if audio else None,
        bitrate=(_as_int(metadata.format.bit_rate) or 0) / 1000,
        size=_as_int(metadata.format.size) or 0,
        rotation=extract_rotation(primary),
    )


def parse_image_metadata(metadata: MediaMetadata) -> ImageMetadata:
    """Summarize a probe result as a still image.

    Raises:
        InvalidInputError: If there is no image (video-typed) stream.
    """
    primary = _first_video_stream(metadata, "image")
    return ImageMetadata(
        format=metadata.format,
        width=primary.width or 0,
        height=primary.height or 0,
        pixel_format=primary.pixel_format or "unknown",
        codec=primary.codec_name,
        size=_as_int(metadata.format.size) or 0,
    )
