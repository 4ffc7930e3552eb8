"""Parsing of ffmpeg capability listings and ffprobe reports."""

from mediaforge.introspector.ffprobe import FFprobeIntrospector
from mediaforge.introspector.parsers import (
    extract_rotation,
    parse_codec_list,
    parse_decoders,
    parse_encoders,
    parse_formats,
    parse_frame_rate,
    parse_image_metadata,
    parse_media_metadata,
    parse_video_metadata,
    parse_version,
)

__all__ = [
    "FFprobeIntrospector",
    "extract_rotation",
    "parse_codec_list",
    "parse_decoders",
    "parse_encoders",
    "parse_formats",
    "parse_frame_rate",
    "parse_image_metadata",
    "parse_media_metadata",
    "parse_version",
    "parse_video_metadata",
]
