"""Tests for tools/hardware.py."""

import subprocess
from unittest.mock import MagicMock

from mediaforge.domain.enums import HardwareAcceleration
from mediaforge.tools.hardware import (
    HardwareResolver,
    detect_hardware_type,
    filter_codecs_by_acceleration,
    hardware_codec_for,
    hwaccel_flag,
    parse_hwaccels,
    select_best,
)

CODECS = ["libx264", "h264_nvenc", "h264_qsv", "hevc_vaapi", "h264_cuvid", "mpeg4"]


class TestParseHwaccels:
    """Tests for parse_hwaccels."""

    def test_maps_methods_to_classes(self):
        output = "Hardware acceleration methods:\ncuda\nvaapi\nqsv\n"
        assert parse_hwaccels(output) == [
            HardwareAcceleration.NVIDIA,
            HardwareAcceleration.VAAPI,
            HardwareAcceleration.INTEL,
        ]

    def test_synonyms_collapse(self):
        output = "Hardware acceleration methods:\namf\nd3d11va\n"
        assert parse_hwaccels(output) == [HardwareAcceleration.AMD]

    def test_dxva2_kept_as_raw_name(self):
        assert parse_hwaccels("dxva2\n") == ["dxva2"]

    def test_unknown_methods_ignored(self):
        assert parse_hwaccels("Hardware acceleration methods:\nopencl\n") == []


class TestSelection:
    def test_select_best_uses_priority(self):
        detected = [HardwareAcceleration.VAAPI, HardwareAcceleration.NVIDIA]
        assert select_best(detected) == HardwareAcceleration.NVIDIA

    def test_select_best_falls_back_to_first(self):
        assert select_best(["dxva2"]) == "dxva2"

    def test_select_best_empty(self):
        assert select_best([]) is None

    def test_hardware_codec_for(self):
        assert hardware_codec_for("libx264", HardwareAcceleration.NVIDIA) == "h264_nvenc"
        assert hardware_codec_for("libx265", "qsv") == "hevc_qsv"
        assert hardware_codec_for("libvpx-vp9", HardwareAcceleration.AMD) is None
        assert hardware_codec_for("libx264", "dxva2") is None

    def test_hwaccel_flag(self):
        assert hwaccel_flag(HardwareAcceleration.NVIDIA) == "cuda"
        assert hwaccel_flag("intel") == "qsv"
        assert hwaccel_flag("dxva2") == "dxva2"


class TestCodecClassification:
    def test_detect_hardware_type(self):
        assert detect_hardware_type("h264_nvenc") == "nvidia"
        assert detect_hardware_type("h264_cuvid") == "nvidia"
        assert detect_hardware_type("hevc_vaapi") == "vaapi"
        assert detect_hardware_type("libx264") == "cpu"

    def test_filter_any_keeps_all(self):
        assert filter_codecs_by_acceleration(CODECS, HardwareAcceleration.ANY) == CODECS

    def test_filter_cpu_excludes_gpu(self):
        assert filter_codecs_by_acceleration(CODECS, "cpu") == ["libx264", "mpeg4"]

    def test_filter_gpu_class(self):
        assert filter_codecs_by_acceleration(CODECS, HardwareAcceleration.NVIDIA) == [
            "h264_nvenc",
            "h264_cuvid",
        ]

    def test_filter_unknown_class_is_empty(self):
        assert filter_codecs_by_acceleration(CODECS, "opencl") == []


class TestHardwareResolver:
    """Tests for HardwareResolver."""

    def _resolver(self, output: str = "cuda\nvaapi\n", rc: int = 0):
        runner = MagicMock(return_value=(output, "", rc))
        return HardwareResolver("ffmpeg", runner), runner

    def test_probe_runs_once(self):
        resolver, runner = self._resolver()
        resolver.detect()
        resolver.detect()
        runner.assert_called_once()
        assert runner.call_args[0][0] == ["ffmpeg", "-hide_banner", "-hwaccels"]

    def test_failed_probe_means_no_hardware(self):
        resolver, _ = self._resolver(rc=1)
        assert resolver.detect() == []
        assert resolver.resolve("libx264").is_hardware is False

    def test_probe_exception_means_no_hardware(self):
        runner = MagicMock(side_effect=subprocess.TimeoutExpired("ffmpeg", 10))
        resolver = HardwareResolver("ffmpeg", runner)
        assert resolver.detect() == []

    def test_auto_picks_best(self):
        resolver, _ = self._resolver()
        selection = resolver.resolve("libx264")
        assert selection.codec == "h264_nvenc"
        assert selection.hwaccel == "cuda"
        assert selection.is_hardware is True

    def test_explicit_detected_class(self):
        resolver, _ = self._resolver()
        selection = resolver.resolve("libx265", "vaapi")
        assert selection.codec == "hevc_vaapi"
        assert selection.hwaccel == "vaapi"

    def test_explicit_class_not_detected(self):
        resolver, _ = self._resolver()
        selection = resolver.resolve("libx264", HardwareAcceleration.INTEL)
        assert selection.codec == "libx264"
        assert selection.is_hardware is False

    def test_cpu_never_probes(self):
        resolver, runner = self._resolver()
        assert resolver.resolve("libx264", "cpu").codec == "libx264"
        runner.assert_not_called()

    def test_unmapped_codec_stays_software(self):
        resolver, _ = self._resolver()
        selection = resolver.resolve("libvpx")
        assert selection.codec == "libvpx"
        assert selection.hwaccel is None
