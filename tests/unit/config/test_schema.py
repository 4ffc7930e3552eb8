"""Tests for the conversion job pydantic models."""

import pytest

from mediaforge.config.schema import parse_conversion
from mediaforge.domain.config import HardwareAccelConfig, SizeSpec
from mediaforge.domain.filters import CropFilter, FilterSpec, ScaleFilter
from mediaforge.errors import InvalidConfigurationError


class TestParseConversion:
    """Tests for parse_conversion."""

    def test_minimal(self):
        config = parse_conversion({"input": "in.mov", "output": "out.mp4"})
        assert config.input == "in.mov"
        assert config.output == "out.mp4"
        assert config.video is None

    def test_sections(self):
        config = parse_conversion(
            {
                "input": "in.mov",
                "output": "out.mp4",
                "format": "mp4",
                "video": {"codec": "libx264", "bitrate": "2M", "size": "1280x720"},
                "audio": {"codec": "aac", "channels": 2},
                "timing": {"seek": 10, "duration": "00:00:30"},
                "options": {"output_options": ["-movflags", "+faststart"]},
            }
        )
        assert config.video.codec == "libx264"
        assert config.video.size == "1280x720"
        assert config.audio.channels == 2
        assert config.timing.seek == 10
        assert config.options.output_options == ("-movflags", "+faststart")

    def test_size_mapping(self):
        config = parse_conversion({"video": {"size": {"width": 640, "height": "?"}}})
        assert config.video.size == SizeSpec(width=640, height="?")

    def test_filters_become_domain_types(self):
        config = parse_conversion(
            {
                "video": {
                    "filters": {
                        "scale": {"width": 1280},
                        "crop": {"width": 640, "height": 480},
                    }
                },
                "complex_filters": [
                    {"filter": "overlay", "inputs": ["0:v", "1:v"], "outputs": ["v"]}
                ],
            }
        )
        assert config.video.filters.scale == ScaleFilter(width=1280)
        assert config.video.filters.crop == CropFilter(width=640, height=480)
        assert config.complex_filters[0] == FilterSpec(
            filter="overlay", inputs=("0:v", "1:v"), outputs=("v",)
        )

    def test_hardware_string_lowercased(self):
        config = parse_conversion({"hardware_acceleration": "NVIDIA"})
        assert config.hardware_acceleration == "nvidia"

    def test_hardware_mapping(self):
        config = parse_conversion(
            {"hardware_acceleration": {"type": "vaapi", "fallback_to_cpu": False}}
        )
        assert config.hardware_acceleration == HardwareAccelConfig(
            type="vaapi", fallback_to_cpu=False
        )


class TestValidationErrors:
    def test_unknown_key(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            parse_conversion({"video": {"codek": "libx264"}})
        assert any(e.startswith("video.codek") for e in exc_info.value.errors)

    def test_invalid_acceleration(self):
        with pytest.raises(InvalidConfigurationError, match="Invalid acceleration"):
            parse_conversion({"hardware_acceleration": "quantum"})

    def test_multiple_errors_collected(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            parse_conversion(
                {"audio": {"channels": 0}, "video": {"keyframe_interval": 0}}
            )
        assert len(exc_info.value.errors) == 2
