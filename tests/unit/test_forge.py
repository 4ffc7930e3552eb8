"""Tests for the MediaForge facade against a fake command runner."""

import pytest

from mediaforge import MediaForge
from mediaforge.config.models import ExecutionConfig, ForgeConfig
from mediaforge.domain.config import ConversionConfig, VideoConfig
from mediaforge.domain.enums import HardwareAcceleration, StreamType
from mediaforge.errors import (
    CodecUnsupportedError,
    ExecutionFailedError,
    FormatUnsupportedError,
    HardwareAccelerationUnavailableError,
    ToolNotFoundError,
)


@pytest.fixture
def forge(fake_runner) -> MediaForge:
    return MediaForge(ffmpeg_path="ffmpeg", ffprobe_path="ffprobe", runner=fake_runner)


def _count(calls, flag):
    return sum(1 for args in calls if flag in args)


class TestCapabilities:
    """Tests for capability queries."""

    def test_version(self, forge):
        assert forge.get_version().version == "6.1.1"

    def test_formats_cached(self, forge, fake_runner):
        forge.get_formats()
        forge.get_formats()
        assert _count(fake_runner.calls, "-formats") == 1
        assert "mp4" in forge.get_formats().muxing

    def test_codecs(self, forge):
        codecs = forge.get_codecs()
        assert "h264_nvenc" in codecs.encoders.video
        assert codecs.decoders.audio == ["aac"]

    def test_capabilities(self, forge):
        caps = forge.get_capabilities()
        assert caps.version.version == "6.1.1"
        assert "webm" in caps.formats.muxing

    def test_tool_version_checked_once(self, forge, fake_runner):
        forge.get_formats()
        forge.get_codecs()
        ffmpeg_version_calls = [
            args
            for args in fake_runner.calls
            if "-version" in args and "ffprobe" not in args[0]
        ]
        assert len(ffmpeg_version_calls) == 1

    def test_query_failure(self, fake_runner):
        def runner(args, timeout=None, **kwargs):
            if "-formats" in args:
                return "", "boom", 1
            return fake_runner(args, timeout=timeout)

        forge = MediaForge("ffmpeg", "ffprobe", runner=runner)
        with pytest.raises(ExecutionFailedError) as exc_info:
            forge.get_formats()
        assert exc_info.value.stderr == "boom"

    def test_missing_ffmpeg(self):
        def runner(args, timeout=None, **kwargs):
            raise FileNotFoundError(args[0])

        forge = MediaForge("ffmpeg", "ffprobe", runner=runner)
        with pytest.raises(ToolNotFoundError):
            forge.get_version()


class TestSupportChecks:
    def test_can_output_format(self, forge):
        assert forge.can_output_format("mp4") is True
        assert forge.can_output_format("aac") is False
        with pytest.raises(FormatUnsupportedError) as exc_info:
            forge.can_output_format("flv", raise_on_error=True)
        assert exc_info.value.operation == "mux"

    def test_encode(self, forge):
        assert forge.can_encode_with_codec("libx264") is True
        assert forge.can_encode_with_codec("libopus", StreamType.AUDIO) is True
        assert forge.can_encode_with_codec("h264_nvenc", acceleration="nvidia") is True
        assert forge.can_encode_with_codec("h264_nvenc", acceleration="cpu") is False

    def test_hardware_mismatch_error(self, forge):
        with pytest.raises(HardwareAccelerationUnavailableError) as exc_info:
            forge.can_encode_with_codec(
                "libx264",
                acceleration=HardwareAcceleration.NVIDIA,
                raise_on_error=True,
            )
        assert exc_info.value.acceleration == "nvidia"
        assert exc_info.value.codec == "libx264"

    def test_absent_codec_error(self, forge):
        with pytest.raises(CodecUnsupportedError) as exc_info:
            forge.can_encode_with_codec("libvpx-vp9", raise_on_error=True)
        assert exc_info.value.operation == "encode"
        assert exc_info.value.stream_type == "video"

    def test_decode(self, forge):
        assert forge.can_decode_with_codec("h264_cuvid", acceleration="nvidia") is True
        with pytest.raises(CodecUnsupportedError):
            forge.can_decode_with_codec("libopus", StreamType.AUDIO, raise_on_error=True)


class TestVerifyOutputSupport:
    def test_all_supported(self, forge):
        report = forge.verify_output_support("mp4", "libx264", "aac")
        assert report.supported is True
        assert report.unsupported == []
        assert report.video_codec.hardware_type == "cpu"

    def test_unsupported_collected(self, forge):
        report = forge.verify_output_support("flv", "hevc_qsv", "mp3")
        assert report.supported is False
        assert report.unsupported == [
            "format: flv",
            "video codec: hevc_qsv (intel)",
            "audio codec: mp3",
        ]

    def test_copy_skipped(self, forge):
        report = forge.verify_output_support(video_codec="copy", audio_codec="copy")
        assert report.supported is True
        assert report.video_codec is None


class TestHardware:
    def test_available_classes(self, forge):
        available = {
            info.type: info for info in forge.get_available_hardware_acceleration()
        }
        assert set(available) == {"cpu", "nvidia", "vaapi"}
        assert available["nvidia"].encoders == ["h264_nvenc"]
        assert available["nvidia"].decoders == ["h264_cuvid"]
        assert "libx264" in available["cpu"].encoders

    def test_by_acceleration(self, forge):
        assert forge.get_encoders_by_acceleration("vaapi") == ["hevc_vaapi"]
        assert forge.get_decoders_by_acceleration("cpu") == ["h264", "hevc"]
        assert forge.get_encoders_by_acceleration("any", "subtitle") == ["srt"]

    def test_detected_hardware(self, forge):
        assert forge.detected_hardware() == ["nvidia", "vaapi"]


class TestMetadata:
    """Tests for probing through the facade."""

    def test_video_metadata(self, forge):
        metadata = forge.get_video_metadata("movie.mp4")
        assert metadata.video_codec == "h264"
        assert forge.get_duration("movie.mp4") == 12.5
        assert forge.get_resolution("movie.mp4") == (1920, 1080)
        assert forge.get_frame_rate("movie.mp4") == pytest.approx(29.97, abs=0.01)

    def test_buffer_source(self, fake_runner, tmp_path):
        forge = MediaForge(
            "ffmpeg",
            "ffprobe",
            config=ForgeConfig(execution=ExecutionConfig(temp_directory=tmp_path)),
            runner=fake_runner,
        )
        assert forge.get_metadata(b"\x00\x00\x00\x18ftypmp42").streams
        probed = fake_runner.calls[-1][-1]
        assert probed.startswith(str(tmp_path))
        assert list(tmp_path.iterdir()) == []

    def test_is_video_and_image(self, forge):
        assert forge.is_video("movie.mp4") is True
        assert forge.is_image("movie.mp4") is False

    def test_is_video_swallows_probe_failure(self):
        def runner(args, timeout=None, **kwargs):
            return "", "Invalid data", 1

        forge = MediaForge("ffmpeg", "ffprobe", runner=runner)
        assert forge.is_video("broken.mp4") is False
        assert forge.is_image("broken.mp4") is False


class TestCommands:
    def test_validate(self, forge):
        assert forge.validate_config(ConversionConfig()).valid is False

    def test_build_command_substitutes_hardware(self, forge):
        command = forge.build_command(
            ConversionConfig(
                input="in.mov",
                output="out.mp4",
                video=VideoConfig(codec="libx264"),
                hardware_acceleration="nvidia",
            )
        )
        assert "h264_nvenc" in command
        assert command.endswith("out.mp4")

    def test_engine_uses_config(self, fake_runner, tmp_path):
        config = ForgeConfig(
            execution=ExecutionConfig(cancel_grace_seconds=0.5, temp_directory=tmp_path)
        )
        forge = MediaForge("ffmpeg", "ffprobe", config=config, runner=fake_runner)
        engine = forge.create_engine()
        assert engine.cancel_grace_seconds == 0.5
        assert engine.temp_dir == tmp_path
