"""Tests for the built-in presets."""

import pytest

from mediaforge.domain.config import ConversionConfig
from mediaforge.presets import (
    apply_preset,
    get_preset,
    list_presets,
    resolve_preset_reference,
)


class TestGetPreset:
    def test_named(self):
        preset = get_preset("youtube", "hd1080")
        assert preset.format == "mp4"
        assert preset.video.codec == "libx264"
        assert preset.audio.frequency == 48000
        assert preset.input is None

    def test_single_entry_category_ignores_name(self):
        assert get_preset("tiktok").video.size == "1080x1920"
        assert get_preset("dvd", "anything").format == "mpeg"

    @pytest.mark.parametrize(
        "category,name", [("web", "nope"), ("nope", None), ("web", None)]
    )
    def test_unknown(self, category, name):
        assert get_preset(category, name) is None

    def test_returned_data_is_a_copy(self):
        first = resolve_preset_reference("web.hd")
        first["video"]["codec"] = "changed"
        assert resolve_preset_reference("web.hd")["video"]["codec"] == "libx264"


class TestListPresets:
    def test_every_preset_parses(self):
        presets = list_presets()
        assert len(presets) > 10
        assert all(isinstance(p.config, ConversionConfig) for p in presets)

    def test_single_entry_name(self):
        names = {(p.category, p.name) for p in list_presets()}
        assert ("tiktok", "tiktok") in names
        assert ("size", "small") in names


class TestApplyPreset:
    def test_sets_input_output(self):
        config = apply_preset(get_preset("web", "sd"), input="a.mov", output="a.mp4")
        assert config.input == "a.mov"
        assert config.output == "a.mp4"
        assert config.video.codec == "libx264"

    def test_section_mapping_merges(self):
        config = apply_preset(get_preset("web", "sd"), video={"bitrate": "2M"})
        assert config.video.bitrate == "2M"
        assert config.video.size == "1280x720"

    def test_missing_section_created(self):
        config = apply_preset(get_preset("web", "sd"), timing={"seek": 5})
        assert config.timing.seek == 5

    def test_preset_unchanged(self):
        preset = get_preset("web", "sd")
        apply_preset(preset, video={"bitrate": "2M"})
        assert preset.video.bitrate == "3M"
