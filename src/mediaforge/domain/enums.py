"""Domain enums for mediaforge.

Codec and format enums list well-known values only. Every place that
accepts one of them also accepts a free-form string, since the set of
codecs an ffmpeg build supports cannot be enumerated statically.
"""

from enum import Enum


class HardwareAcceleration(Enum):
    """Hardware acceleration class."""

    CPU = "cpu"
    NVIDIA = "nvidia"
    INTEL = "intel"
    AMD = "amd"
    VAAPI = "vaapi"
    VIDEOTOOLBOX = "videotoolbox"
    V4L2 = "v4l2"
    ANY = "any"


class StreamType(Enum):
    """Media stream type as reported by ffmpeg codec listings."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


class VideoCodec(Enum):
    """Well-known video encoder names."""

    H264 = "libx264"
    H264_RGB = "libx264rgb"
    H265 = "libx265"
    VP8 = "libvpx"
    VP9 = "libvpx-vp9"
    AV1_LIBAOM = "libaom-av1"
    AV1_SVT = "libsvtav1"
    MPEG4 = "mpeg4"
    MPEG2 = "mpeg2video"
    H264_NVENC = "h264_nvenc"
    HEVC_NVENC = "hevc_nvenc"
    AV1_NVENC = "av1_nvenc"
    H264_QSV = "h264_qsv"
    HEVC_QSV = "hevc_qsv"
    AV1_QSV = "av1_qsv"
    H264_AMF = "h264_amf"
    HEVC_AMF = "hevc_amf"
    H264_VAAPI = "h264_vaapi"
    HEVC_VAAPI = "hevc_vaapi"
    VP8_VAAPI = "vp8_vaapi"
    VP9_VAAPI = "vp9_vaapi"
    AV1_VAAPI = "av1_vaapi"
    H264_VIDEOTOOLBOX = "h264_videotoolbox"
    HEVC_VIDEOTOOLBOX = "hevc_videotoolbox"
    COPY = "copy"


class AudioCodec(Enum):
    """Well-known audio encoder names."""

    AAC = "aac"
    MP3 = "libmp3lame"
    OPUS = "libopus"
    VORBIS = "libvorbis"
    FLAC = "flac"
    AC3 = "ac3"
    EAC3 = "eac3"
    DTS = "dca"
    COPY = "copy"


class OutputFormat(Enum):
    """Well-known muxer names."""

    MP4 = "mp4"
    WEBM = "webm"
    MKV = "matroska"
    AVI = "avi"
    MOV = "mov"
    FLV = "flv"
    MPEG = "mpeg"
    MPEGTS = "mpegts"
    OGG = "ogg"
    MP3 = "mp3"
    AAC = "aac"
    OPUS = "opus"
    FLAC = "flac"
    WAV = "wav"
    M4A = "m4a"
    GIF = "gif"
    APNG = "apng"
    IMAGE2 = "image2"


class ScalingAlgorithm(Enum):
    """swscale resampling algorithms accepted by the scale filter."""

    FAST_BILINEAR = "fast_bilinear"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    EXPERIMENTAL = "experimental"
    NEIGHBOR = "neighbor"
    AREA = "area"
    BICUBLIN = "bicublin"
    GAUSS = "gauss"
    SINC = "sinc"
    LANCZOS = "lanczos"
    SPLINE = "spline"


def enum_value(value: object) -> str:
    """Return the string token for an enum member or a plain value."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
