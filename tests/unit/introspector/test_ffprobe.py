"""Tests for FFprobeIntrospector."""

import json
import subprocess
from unittest.mock import MagicMock

import pytest

from mediaforge.errors import ExecutionFailedError, ToolNotFoundError
from mediaforge.introspector.ffprobe import PROBE_TIMEOUT, FFprobeIntrospector


class TestFFprobeIntrospector:
    """Tests for FFprobeIntrospector.probe."""

    def test_probe_success(self, probe_json):
        runner = MagicMock(return_value=(probe_json, "", 0))
        introspector = FFprobeIntrospector("/opt/ffprobe", runner)

        metadata = introspector.probe("movie.mp4")

        assert metadata.streams[0].codec_name == "h264"
        args = runner.call_args[0][0]
        assert args[0] == "/opt/ffprobe"
        assert args[-1] == "movie.mp4"
        assert "-show_streams" in args
        assert runner.call_args[1]["timeout"] == PROBE_TIMEOUT

    def test_missing_binary(self):
        runner = MagicMock(side_effect=FileNotFoundError())
        with pytest.raises(ToolNotFoundError) as exc_info:
            FFprobeIntrospector("ffprobe", runner).probe("x.mp4")
        assert exc_info.value.tool == "ffprobe"

    def test_timeout(self):
        runner = MagicMock(side_effect=subprocess.TimeoutExpired("ffprobe", 60))
        with pytest.raises(ExecutionFailedError, match="timed out"):
            FFprobeIntrospector("ffprobe", runner).probe("x.mp4")

    def test_nonzero_exit_keeps_stderr(self):
        runner = MagicMock(return_value=("", "x.mp4: Invalid data", 1))
        with pytest.raises(ExecutionFailedError) as exc_info:
            FFprobeIntrospector("ffprobe", runner).probe("x.mp4")
        assert exc_info.value.stderr == "x.mp4: Invalid data"
        assert exc_info.value.command.startswith("ffprobe -v quiet")

    def test_invalid_json(self):
        runner = MagicMock(return_value=("not json", "", 0))
        with pytest.raises(ExecutionFailedError, match="Invalid ffprobe output"):
            FFprobeIntrospector("ffprobe", runner).probe("x.mp4")

    def test_missing_format_section(self):
        runner = MagicMock(return_value=(json.dumps({"streams": []}), "", 0))
        with pytest.raises(ExecutionFailedError, match="Missing 'format'"):
            FFprobeIntrospector("ffprobe", runner).probe("x.mp4")
