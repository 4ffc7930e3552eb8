"""Error taxonomy for mediaforge.

Every failure surfaced by the library is a MediaForgeError carrying a
closed ErrorKind. Callers can dispatch on ``err.kind`` or on the concrete
subclass; each subclass carries the structured payload for its kind.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    TOOL_NOT_FOUND = "tool_not_found"
    EXECUTION_FAILED = "execution_failed"
    CANCELLED = "cancelled"
    CODEC_UNSUPPORTED = "codec_unsupported"
    FORMAT_UNSUPPORTED = "format_unsupported"
    HARDWARE_ACCELERATION_UNAVAILABLE = "hardware_acceleration_unavailable"
    INVALID_CONFIGURATION = "invalid_configuration"
    INVALID_INPUT = "invalid_input"
    INVALID_OUTPUT = "invalid_output"


class MediaForgeError(Exception):
    """Base exception for all mediaforge errors.

    Attributes:
        kind: The ErrorKind this error belongs to.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ToolNotFoundError(MediaForgeError):
    """Raised when ffmpeg or ffprobe does not answer a version check.

    Attributes:
        tool: Tool name ("ffmpeg" or "ffprobe").
        path: Path or name that was tried.
    """

    kind = ErrorKind.TOOL_NOT_FOUND

    def __init__(self, tool: str, path: str | None = None) -> None:
        self.tool = tool
        self.path = path
        where = f" at {path}" if path else ""
        super().__init__(f"{tool} not found{where}")


class ExecutionFailedError(MediaForgeError):
    """Raised when ffmpeg exits non-zero or cannot be started.

    Attributes:
        command: Display command string that was run.
        stderr: Full diagnostic text accumulated from the process.
    """

    kind = ErrorKind.EXECUTION_FAILED

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class CancelledError(MediaForgeError):
    """Raised when a run ends because cancel() was requested.

    Kept separate from ExecutionFailedError so callers can tell a stopped
    run from a broken one.

    Attributes:
        command: Display command string that was run.
        stderr: Diagnostic text collected before the process exited.
    """

    kind = ErrorKind.CANCELLED

    def __init__(self, command: str = "", stderr: str = "") -> None:
        super().__init__("FFmpeg process was cancelled")
        self.command = command
        self.stderr = stderr


class CodecUnsupportedError(MediaForgeError):
    """Raised when a codec is absent from ffmpeg's capability lists.

    Attributes:
        codec: Requested codec identifier.
        stream_type: "video", "audio" or "subtitle".
        operation: "encode" or "decode".
    """

    kind = ErrorKind.CODEC_UNSUPPORTED

    def __init__(self, codec: str, stream_type: str, operation: str) -> None:
        self.codec = codec
        self.stream_type = stream_type
        self.operation = operation
        super().__init__(
            f"{stream_type.capitalize()} codec '{codec}' is not supported "
            f"for {operation}"
        )


class FormatUnsupportedError(MediaForgeError):
    """Raised when a container format cannot be muxed or demuxed.

    Attributes:
        format: Requested format name.
        operation: "mux" or "demux".
    """

    kind = ErrorKind.FORMAT_UNSUPPORTED

    def __init__(self, format: str, operation: str) -> None:
        self.format = format
        self.operation = operation
        super().__init__(f"Format '{format}' is not supported for {operation}")


class HardwareAccelerationUnavailableError(MediaForgeError):
    """Raised when a hardware class cannot serve the requested codec.

    Attributes:
        acceleration: Requested acceleration class name.
        codec: Codec that was requested, if any.
    """

    kind = ErrorKind.HARDWARE_ACCELERATION_UNAVAILABLE

    def __init__(self, acceleration: str, codec: str | None = None) -> None:
        self.acceleration = acceleration
        self.codec = codec
        if codec:
            message = (
                f"Hardware acceleration '{acceleration}' is not available "
                f"for codec '{codec}'"
            )
        else:
            message = f"Hardware acceleration '{acceleration}' is not available"
        super().__init__(message)


class InvalidConfigurationError(MediaForgeError):
    """Raised when a conversion config fails pre-flight validation.

    Attributes:
        errors: Every validation problem found, in detection order.
    """

    kind = ErrorKind.INVALID_CONFIGURATION

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid configuration: " + "; ".join(self.errors))


class InvalidInputError(MediaForgeError):
    """Raised for a malformed or inaccessible input source."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid input '{source}': {reason}")


class InvalidOutputError(MediaForgeError):
    """Raised for an unwritable output destination."""

    kind = ErrorKind.INVALID_OUTPUT

    def __init__(self, destination: str, reason: str) -> None:
        self.destination = destination
        self.reason = reason
        super().__init__(f"Invalid output '{destination}': {reason}")
