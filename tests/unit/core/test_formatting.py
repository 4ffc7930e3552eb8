"""Tests for core/formatting.py."""

import pytest

from mediaforge.core.formatting import (
    format_bitrate,
    format_number,
    format_size,
    format_time,
)
from mediaforge.domain.config import SizeSpec
from mediaforge.domain.enums import ScalingAlgorithm


class TestFormatNumber:
    """Tests for format_number."""

    def test_integral_float_drops_fraction(self):
        assert format_number(2.0) == "2"

    def test_fraction_kept(self):
        assert format_number(1.5) == "1.5"
        assert format_number(0.1) == "0.1"

    def test_int_and_string_verbatim(self):
        assert format_number(23) == "23"
        assert format_number("iw/2") == "iw/2"

    def test_enum_uses_value(self):
        assert format_number(ScalingAlgorithm.LANCZOS) == "lanczos"


class TestFormatTime:
    """Tests for format_time."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "00:00:00"),
            (90, "00:01:30"),
            (3725, "01:02:05"),
            (90.5, "00:01:30.5"),
            (3725.25, "01:02:05.25"),
        ],
    )
    def test_seconds(self, value, expected):
        assert format_time(value) == expected

    def test_string_passes_through(self):
        assert format_time("00:00:10.000") == "00:00:10.000"
        assert format_time("90") == "90"


class TestFormatSize:
    """Tests for format_size."""

    def test_string_passes_through(self):
        assert format_size("1280x720") == "1280x720"

    def test_size_spec(self):
        assert format_size(SizeSpec(width=1920, height=1080)) == "1920x1080"

    def test_auto_dimension_becomes_minus_one(self):
        assert format_size(SizeSpec(width=1280, height="?")) == "1280x-1"
        assert format_size(SizeSpec(width="?", height=720)) == "-1x720"

    def test_empty_is_none(self):
        assert format_size(None) is None
        assert format_size("") is None


class TestFormatBitrate:
    def test_verbatim(self):
        assert format_bitrate("2M") == "2M"
        assert format_bitrate(128000) == "128000"
