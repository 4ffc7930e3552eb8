"""Shared test fixtures for mediaforge."""

import json
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

FFMPEG_VERSION_OUTPUT = """\
ffmpeg version 6.1.1 Copyright (c) 2000-2023 the FFmpeg developers
built with gcc 13 (GCC)
configuration: --enable-gpl --enable-libx264 --enable-nvenc
libavutil      58. 29.100 / 58. 29.100
libavcodec     60. 31.102 / 60. 31.102
"""

FFPROBE_VERSION_OUTPUT = """\
ffprobe version 6.1.1 Copyright (c) 2007-2023 the FFmpeg developers
"""

FORMATS_OUTPUT = """\
File formats:
 D. = Demuxing supported
 .E = Muxing supported
 --
 D  aac             raw ADTS AAC (Advanced Audio Coding)
  E mp4             MP4 (MPEG-4 Part 14)
 DE matroska,webm   Matroska / WebM
 DE mov,mp4,m4a,3gp,3g2,mj2 QuickTime / MOV
  E webm            WebM
"""

ENCODERS_OUTPUT = """\
Encoders:
 V..... = Video
 A..... = Audio
 S..... = Subtitle
 .F.... = Frame-level multithreading
 ------
 V....D libx264              libx264 H.264 / AVC / MPEG-4 AVC
 V....D libx265              libx265 H.265 / HEVC
 V....D h264_nvenc           NVIDIA NVENC H.264 encoder
 V....D hevc_vaapi           H.265/HEVC (VAAPI)
 A....D aac                  AAC (Advanced Audio Coding)
 A....D libopus              libopus Opus
 S..... srt                  SubRip subtitle
"""

DECODERS_OUTPUT = """\
Decoders:
 V..... = Video
 A..... = Audio
 S..... = Subtitle
 ------
 V....D h264                 H.264 / AVC / MPEG-4 AVC
 V....D h264_cuvid           Nvidia CUVID H264 decoder
 V....D hevc                 HEVC (High Efficiency Video Coding)
 A....D aac                  AAC (Advanced Audio Coding)
 S..... srt                  SubRip subtitle
"""

HWACCELS_OUTPUT = """\
Hardware acceleration methods:
cuda
vaapi
"""


def make_probe_data(**format_overrides) -> dict:
    """A typical ffprobe -show_format -show_streams document."""
    fmt = {
        "filename": "movie.mp4",
        "format_name": "mov,mp4,m4a,3gp,3g2,mj2",
        "format_long_name": "QuickTime / MOV",
        "duration": "12.500000",
        "size": "1048576",
        "bit_rate": "671088",
        "probe_score": 100,
        "tags": {"encoder": "Lavf60.16.100"},
    }
    fmt.update(format_overrides)
    return {
        "format": fmt,
        "streams": [
            {
                "index": 0,
                "codec_name": "h264",
                "codec_type": "video",
                "width": 1920,
                "height": 1080,
                "pix_fmt": "yuv420p",
                "r_frame_rate": "30000/1001",
                "avg_frame_rate": "30000/1001",
                "duration": "12.500000",
                "tags": {"rotate": "90"},
            },
            {
                "index": 1,
                "codec_name": "aac",
                "codec_type": "audio",
                "sample_rate": "48000",
                "channels": 2,
                "channel_layout": "stereo",
                "r_frame_rate": "0/0",
                "avg_frame_rate": "0/0",
            },
        ],
    }


@pytest.fixture
def probe_data() -> dict:
    """Return a parsed ffprobe document for a short 1080p video."""
    return make_probe_data()


@pytest.fixture
def probe_json(probe_data: dict) -> str:
    return json.dumps(probe_data)


@pytest.fixture
def fake_runner(probe_json: str) -> Callable:
    """A run_command stand-in answering ffmpeg/ffprobe queries.

    Records every call in ``fake_runner.calls``.
    """
    responses = {
        "-version": None,
        "-formats": FORMATS_OUTPUT,
        "-encoders": ENCODERS_OUTPUT,
        "-decoders": DECODERS_OUTPUT,
        "-hwaccels": HWACCELS_OUTPUT,
    }

    def runner(args, timeout=None, **kwargs):
        runner.calls.append(list(args))
        tool = Path(args[0]).name
        if "ffprobe" in tool:
            if "-version" in args:
                return FFPROBE_VERSION_OUTPUT, "", 0
            return probe_json, "", 0
        for flag, output in responses.items():
            if flag in args:
                if flag == "-version":
                    return FFMPEG_VERSION_OUTPUT, "", 0
                return output, "", 0
        return "", "unexpected command", 1

    runner.calls = []
    return runner


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable POSIX shell script and return its path."""

    def _write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _write
