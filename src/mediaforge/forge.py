"""MediaForge: the public entry point.

Ties together tool detection, capability queries, probing and
conversion for one pair of ffmpeg/ffprobe binaries:

    forge = MediaForge()
    if forge.can_encode_with_codec("libx264"):
        forge.convert(ConversionConfig(
            input="in.mov",
            output="out.mp4",
            video=VideoConfig(codec=VideoCodec.H264, bitrate="4M"),
            audio=AudioConfig(codec=AudioCodec.AAC, bitrate="128k"),
        ))
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - only for the TimeoutExpired type
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mediaforge.command.generator import ValidationResult, generate_string, validate
from mediaforge.config.models import ForgeConfig
from mediaforge.core.subprocess_utils import run_command
from mediaforge.domain.config import ConversionConfig, InputSource
from mediaforge.domain.enums import HardwareAcceleration, StreamType, enum_value
from mediaforge.domain.metadata import (
    AccelerationInfo,
    Capabilities,
    CodecSupport,
    FormatSupport,
    ImageMetadata,
    MediaMetadata,
    VersionInfo,
    VideoMetadata,
)
from mediaforge.errors import (
    CodecUnsupportedError,
    ExecutionFailedError,
    FormatUnsupportedError,
    HardwareAccelerationUnavailableError,
    MediaForgeError,
    ToolNotFoundError,
)
from mediaforge.executor.batch import (
    BatchCallbacks,
    BatchExecutionEngine,
    BatchItemResult,
)
from mediaforge.executor.engine import ConversionCallbacks, ExecutionEngine
from mediaforge.executor.inputs import prepared_input
from mediaforge.executor.job import ConversionJob
from mediaforge.introspector import parsers
from mediaforge.introspector.ffprobe import FFprobeIntrospector
from mediaforge.tools.detection import (
    FFMPEG_CONFIG,
    FFPROBE_CONFIG,
    detect_tool,
    find_tool,
    require_available,
)
from mediaforge.tools.hardware import (
    HardwareResolver,
    detect_hardware_type,
    filter_codecs_by_acceleration,
)

logger = logging.getLogger(__name__)

QUERY_TIMEOUT = 30

Runner = Callable[..., tuple[str, str, int]]
Acceleration = HardwareAcceleration | str
StreamKind = StreamType | str

# GPU classes reported by get_available_hardware_acceleration, in order
GPU_CLASSES = (
    HardwareAcceleration.NVIDIA,
    HardwareAcceleration.INTEL,
    HardwareAcceleration.AMD,
    HardwareAcceleration.VAAPI,
    HardwareAcceleration.VIDEOTOOLBOX,
    HardwareAcceleration.V4L2,
)

_NO_FALLBACK_CLASSES = frozenset(
    {HardwareAcceleration.ANY.value, HardwareAcceleration.CPU.value}
)


@dataclass
class SupportDetail:
    """Support verdict for one format or codec."""

    name: str
    supported: bool
    hardware_type: str | None = None


@dataclass
class OutputSupportReport:
    """Result of verify_output_support()."""

    supported: bool
    format: SupportDetail | None = None
    video_codec: SupportDetail | None = None
    audio_codec: SupportDetail | None = None
    unsupported: list[str] = field(default_factory=list)


class MediaForge:
    """Facade over one ffmpeg/ffprobe installation.

    Capability listings are queried once per instance and reused.
    Conversions each get a fresh ExecutionEngine.

    Args:
        ffmpeg_path: ffmpeg binary. Overrides config.tools.ffmpeg.
        ffprobe_path: ffprobe binary. Overrides config.tools.ffprobe.
        config: Settings; defaults apply when omitted.
        runner: Command runner for one-shot queries, injectable for tests.
    """

    def __init__(
        self,
        ffmpeg_path: str | Path | None = None,
        ffprobe_path: str | Path | None = None,
        config: ForgeConfig | None = None,
        runner: Runner = run_command,
    ) -> None:
        self.config = config or ForgeConfig()
        self.ffmpeg_path = find_tool("ffmpeg", ffmpeg_path or self.config.tools.ffmpeg)
        self.ffprobe_path = find_tool(
            "ffprobe", ffprobe_path or self.config.tools.ffprobe
        )
        self._runner = runner
        self._resolver = HardwareResolver(self.ffmpeg_path, runner)
        self._introspector = FFprobeIntrospector(self.ffprobe_path, runner)
        self._lock = threading.Lock()
        self._verified: set[str] = set()
        self._formats: FormatSupport | None = None
        self._codecs: CodecSupport | None = None

    # =========================================================================
    # Tool access
    # =========================================================================

    def _require_tool(self, name: str) -> None:
        """Version-check a tool once per instance.

        Raises:
            ToolNotFoundError: If the tool does not answer -version.
        """
        if name in self._verified:
            return
        if name == "ffmpeg":
            info = detect_tool(FFMPEG_CONFIG, self.ffmpeg_path, self._runner)
        else:
            info = detect_tool(FFPROBE_CONFIG, self.ffprobe_path, self._runner)
        require_available(info)
        self._verified.add(name)

    def _query(self, *args: str) -> str:
        """Run ffmpeg with query flags and return stdout.

        Raises:
            ToolNotFoundError: If ffmpeg is unavailable.
            ExecutionFailedError: If the query fails.
        """
        self._require_tool("ffmpeg")
        command = [self.ffmpeg_path, "-hide_banner", *args]
        try:
            stdout, stderr, rc = self._runner(command, timeout=QUERY_TIMEOUT)
        except FileNotFoundError as e:
            raise ToolNotFoundError("ffmpeg", self.ffmpeg_path) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ExecutionFailedError(
                f"ffmpeg query failed: {e}", " ".join(command)
            ) from e
        if rc != 0:
            raise ExecutionFailedError(
                f"ffmpeg exited with code {rc}", " ".join(command), stderr
            )
        return stdout

    # =========================================================================
    # Capabilities
    # =========================================================================

    def get_version(self) -> VersionInfo:
        return parsers.parse_version(self._query("-version"))

    def get_formats(self) -> FormatSupport:
        with self._lock:
            if self._formats is None:
                self._formats = parsers.parse_formats(self._query("-formats"))
            return self._formats

    def get_codecs(self) -> CodecSupport:
        """Encoders and decoders grouped by stream type."""
        with self._lock:
            if self._codecs is None:
                self._codecs = CodecSupport(
                    encoders=parsers.parse_encoders(self._query("-encoders")),
                    decoders=parsers.parse_decoders(self._query("-decoders")),
                )
            return self._codecs

    def get_capabilities(self) -> Capabilities:
        return Capabilities(
            version=self.get_version(),
            formats=self.get_formats(),
            codecs=self.get_codecs(),
        )

    def can_output_format(self, format: str, raise_on_error: bool = False) -> bool:
        """True if ffmpeg can mux the format.

        Raises:
            FormatUnsupportedError: If unsupported and raise_on_error is set.
        """
        supported = enum_value(format) in self.get_formats().muxing
        if not supported and raise_on_error:
            raise FormatUnsupportedError(enum_value(format), "mux")
        return supported

    def _check_codec(
        self,
        codec: str,
        stream_type: StreamKind,
        acceleration: Acceleration,
        operation: str,
        raise_on_error: bool,
    ) -> bool:
        codecs = self.get_codecs()
        group = codecs.encoders if operation == "encode" else codecs.decoders
        kind = enum_value(stream_type)
        all_codecs = group.for_type(kind)
        codec = enum_value(codec)
        supported = codec in filter_codecs_by_acceleration(all_codecs, acceleration)
        if supported or not raise_on_error:
            return supported

        accel_name = enum_value(acceleration)
        if accel_name not in _NO_FALLBACK_CLASSES and codec in all_codecs:
            raise HardwareAccelerationUnavailableError(accel_name, codec)
        raise CodecUnsupportedError(codec, kind, operation)

    def can_encode_with_codec(
        self,
        codec: str,
        stream_type: StreamKind = StreamType.VIDEO,
        acceleration: Acceleration = HardwareAcceleration.ANY,
        raise_on_error: bool = False,
    ) -> bool:
        """True if codec is an encoder available under the acceleration class.

        Raises:
            HardwareAccelerationUnavailableError: If raise_on_error and the
                codec exists but not under the requested GPU class.
            CodecUnsupportedError: If raise_on_error and the codec is absent.
        """
        return self._check_codec(
            codec, stream_type, acceleration, "encode", raise_on_error
        )

    def can_decode_with_codec(
        self,
        codec: str,
        stream_type: StreamKind = StreamType.VIDEO,
        acceleration: Acceleration = HardwareAcceleration.ANY,
        raise_on_error: bool = False,
    ) -> bool:
        """Decoder counterpart of can_encode_with_codec()."""
        return self._check_codec(
            codec, stream_type, acceleration, "decode", raise_on_error
        )

    def verify_output_support(
        self,
        format: str | None = None,
        video_codec: str | None = None,
        audio_codec: str | None = None,
        acceleration: Acceleration = HardwareAcceleration.ANY,
    ) -> OutputSupportReport:
        """Check a format and codecs together. "copy" codecs are skipped."""
        report = OutputSupportReport(supported=True)

        if format:
            name = enum_value(format)
            ok = self.can_output_format(name)
            report.format = SupportDetail(name, ok)
            if not ok:
                report.unsupported.append(f"format: {name}")

        if video_codec and enum_value(video_codec) != "copy":
            name = enum_value(video_codec)
            ok = self.can_encode_with_codec(name, StreamType.VIDEO, acceleration)
            hw_type = detect_hardware_type(name)
            report.video_codec = SupportDetail(name, ok, hw_type)
            if not ok:
                report.unsupported.append(f"video codec: {name} ({hw_type})")

        if audio_codec and enum_value(audio_codec) != "copy":
            name = enum_value(audio_codec)
            ok = self.can_encode_with_codec(name, StreamType.AUDIO, acceleration)
            report.audio_codec = SupportDetail(name, ok)
            if not ok:
                report.unsupported.append(f"audio codec: {name}")

        report.supported = not report.unsupported
        return report

    def get_available_hardware_acceleration(self) -> list[AccelerationInfo]:
        """CPU plus every GPU class with at least one video encoder or decoder."""
        codecs = self.get_codecs()
        result: list[AccelerationInfo] = []
        for accel in (HardwareAcceleration.CPU, *GPU_CLASSES):
            encoders = filter_codecs_by_acceleration(codecs.encoders.video, accel)
            decoders = filter_codecs_by_acceleration(codecs.decoders.video, accel)
            if encoders or decoders:
                result.append(
                    AccelerationInfo(
                        type=accel.value,
                        available=True,
                        encoders=encoders,
                        decoders=decoders,
                    )
                )
        return result

    def get_encoders_by_acceleration(
        self,
        acceleration: Acceleration = HardwareAcceleration.ANY,
        stream_type: StreamKind = StreamType.VIDEO,
    ) -> list[str]:
        encoders = self.get_codecs().encoders.for_type(enum_value(stream_type))
        return filter_codecs_by_acceleration(encoders, acceleration)

    def get_decoders_by_acceleration(
        self,
        acceleration: Acceleration = HardwareAcceleration.ANY,
        stream_type: StreamKind = StreamType.VIDEO,
    ) -> list[str]:
        decoders = self.get_codecs().decoders.for_type(enum_value(stream_type))
        return filter_codecs_by_acceleration(decoders, acceleration)

    def detected_hardware(self) -> list[str]:
        """Acceleration classes reported by ``ffmpeg -hwaccels``."""
        return [enum_value(a) for a in self._resolver.detect()]

    # =========================================================================
    # Metadata
    # =========================================================================

    def get_metadata(self, source: InputSource) -> MediaMetadata:
        """Probe a path, buffer or stream with ffprobe.

        Raises:
            ToolNotFoundError: If ffprobe is unavailable.
            InvalidInputError: If a buffer/stream source cannot be read.
            ExecutionFailedError: If probing fails.
        """
        self._require_tool("ffprobe")
        with prepared_input(source, self.config.execution.temp_directory) as path:
            return self._introspector.probe(path)

    def get_video_metadata(self, source: InputSource) -> VideoMetadata:
        return parsers.parse_video_metadata(self.get_metadata(source))

    def get_image_metadata(self, source: InputSource) -> ImageMetadata:
        return parsers.parse_image_metadata(self.get_metadata(source))

    def get_duration(self, source: InputSource) -> float:
        return self.get_video_metadata(source).duration

    def get_resolution(self, source: InputSource) -> tuple[int, int]:
        """(width, height) of the first video stream."""
        metadata = self.get_video_metadata(source)
        return metadata.width, metadata.height

    def get_frame_rate(self, source: InputSource) -> float:
        return self.get_video_metadata(source).frame_rate

    def is_video(self, source: InputSource) -> bool:
        """True if the source has a video stream with a frame rate.

        Probe failures count as False.
        """
        try:
            return self.get_metadata(source).is_video
        except MediaForgeError as e:
            logger.debug("is_video probe failed: %s", e)
            return False

    def is_image(self, source: InputSource) -> bool:
        """True if the first video stream has no frame rate.

        Probe failures count as False.
        """
        try:
            return self.get_metadata(source).is_image
        except MediaForgeError as e:
            logger.debug("is_image probe failed: %s", e)
            return False

    # =========================================================================
    # Conversion
    # =========================================================================

    def create_engine(self) -> ExecutionEngine:
        execution = self.config.execution
        return ExecutionEngine(
            self.ffmpeg_path,
            cancel_grace_seconds=execution.cancel_grace_seconds,
            temp_dir=execution.temp_directory,
            resolver=self._resolver,
        )

    def convert(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> None:
        """Run a conversion and block until it finishes.

        Raises:
            InvalidConfigurationError: If validation fails.
            ExecutionFailedError: If ffmpeg fails.
        """
        self.create_engine().execute(config, callbacks)

    def start_conversion(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> ConversionJob:
        """Start a conversion on a background thread and return its job."""
        return ConversionJob(self.create_engine(), config, callbacks).start()

    def convert_to_buffer(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> bytes:
        """Run a conversion with output captured from stdout."""
        return self.create_engine().execute_to_buffer(config, callbacks)

    def create_batch_engine(self) -> BatchExecutionEngine:
        return BatchExecutionEngine(self.create_engine)

    def convert_batch(
        self,
        configs: Sequence[ConversionConfig],
        callbacks: BatchCallbacks | None = None,
    ) -> list[BatchItemResult]:
        return self.create_batch_engine().execute_batch(configs, callbacks)

    def convert_batch_parallel(
        self,
        configs: Sequence[ConversionConfig],
        max_concurrent: int | None = None,
        callbacks: BatchCallbacks | None = None,
    ) -> list[BatchItemResult]:
        """Parallel batch. max_concurrent defaults to the configured width."""
        width = max_concurrent or self.config.execution.max_concurrent
        return self.create_batch_engine().execute_batch_parallel(
            configs, width, callbacks
        )

    def validate_config(self, config: ConversionConfig) -> ValidationResult:
        return validate(config)

    def build_command(self, config: ConversionConfig) -> str:
        """Full command line for display, hardware substitution included."""
        return generate_string(config, self.ffmpeg_path, self._resolver)
