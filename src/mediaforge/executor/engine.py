"""Process execution engine for ffmpeg conversions.

One ExecutionEngine owns at most one ffmpeg process at a time. A run
moves through IDLE -> SPAWNING -> RUNNING and ends in SUCCEEDED, FAILED
or CANCELLED. Callbacks fire on the thread that called execute(): start
first, then progress, then exactly one of end or error.

stderr is read on a helper thread and handed over through a queue, the
same layout the rest of the package uses for long ffmpeg runs. When the
output is a pipe, a second helper thread pumps stdout into the sink.
"""

from __future__ import annotations

import dataclasses
import io
import logging
import queue
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any

from mediaforge.command.generator import (
    OUTPUT_PIPE,
    display_command,
    generate,
    is_path,
    validate,
)
from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import (
    CancelledError,
    ExecutionFailedError,
    InvalidConfigurationError,
    InvalidOutputError,
    MediaForgeError,
)
from mediaforge.executor.inputs import prepared_input
from mediaforge.tools.ffmpeg_progress import ProgressParser, ProgressSnapshot
from mediaforge.tools.hardware import HardwareResolver

logger = logging.getLogger(__name__)

STDOUT_CHUNK_SIZE = 64 * 1024
QUIT_COMMAND = b"q"


class EngineState(Enum):
    """Lifecycle of a single run."""

    IDLE = "idle"
    SPAWNING = "spawning"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {EngineState.SUCCEEDED, EngineState.FAILED, EngineState.CANCELLED}
)


@dataclass
class ConversionCallbacks:
    """Observers for one run. All are optional.

    Attributes:
        on_start: Receives the display command once the process is up.
        on_progress: Receives each parsed ProgressSnapshot.
        on_end: Called after a successful exit.
        on_error: Receives the error about to be raised.
    """

    on_start: Callable[[str], None] | None = None
    on_progress: Callable[[ProgressSnapshot], None] | None = None
    on_end: Callable[[], None] | None = None
    on_error: Callable[[MediaForgeError], None] | None = None


def _notify(name: str, callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    try:
        callback(*args)
    except Exception as e:
        logger.warning("%s callback error: %s", name, e)


class ExecutionEngine:
    """Runs a ConversionConfig through ffmpeg with progress and cancellation."""

    # Seconds between the graceful quit request and the forced kill
    CANCEL_GRACE_SECONDS: float = 2.0
    STDERR_DRAIN_TIMEOUT: float = 5.0

    def __init__(
        self,
        ffmpeg_path: str | Path = "ffmpeg",
        cancel_grace_seconds: float | None = None,
        temp_dir: str | Path | None = None,
        resolver: HardwareResolver | None = None,
    ) -> None:
        self.ffmpeg_path = str(ffmpeg_path)
        self.cancel_grace_seconds = (
            cancel_grace_seconds
            if cancel_grace_seconds is not None
            else self.CANCEL_GRACE_SECONDS
        )
        self.temp_dir = temp_dir
        self.resolver = resolver or HardwareResolver(self.ffmpeg_path)

        self._lock = threading.Lock()
        self._process: subprocess.Popen[bytes] | None = None
        self._cancel_requested = False
        self._kill_timer: threading.Timer | None = None
        self._state = EngineState.IDLE
        self._progress: ProgressSnapshot | None = None
        self._stderr: list[str] = []

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def progress(self) -> ProgressSnapshot | None:
        """Most recent progress snapshot of the current or last run."""
        return self._progress

    @property
    def stderr(self) -> str:
        """Diagnostic text accumulated so far."""
        return "".join(self._stderr)

    def is_running(self) -> bool:
        with self._lock:
            return self._process is not None and not self._cancel_requested

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def execute(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> None:
        """Run a conversion to completion.

        A path output is written by ffmpeg directly. A writable binary
        object as output receives ffmpeg's stdout chunk by chunk.

        Raises:
            InvalidConfigurationError: If validation fails. Nothing is spawned.
            InvalidInputError: If the input cannot be materialised.
            ExecutionFailedError: If ffmpeg fails to start or exits non-zero.
            CancelledError: If cancel() was called during the run.
        """
        sink = None if is_path(config.output) else config.output
        self._run(config, callbacks or ConversionCallbacks(), sink)

    def execute_to_buffer(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> bytes:
        """Run a conversion and return ffmpeg's stdout as bytes.

        Any output set on the config is replaced with the stdout pipe, so
        a container format that can stream (e.g. format=matroska) should
        be chosen.
        """
        buffer = io.BytesIO()
        config = dataclasses.replace(config, output=OUTPUT_PIPE)
        self._run(config, callbacks or ConversionCallbacks(), buffer)
        return buffer.getvalue()

    def cancel(self) -> None:
        """Ask ffmpeg to quit, then kill it after the grace window.

        Safe to call from any thread and more than once. A cancel that
        arrives before the process is up takes effect as soon as it is.
        """
        with self._lock:
            if self._cancel_requested:
                return
            if self._state not in (EngineState.SPAWNING, EngineState.RUNNING):
                return
            self._cancel_requested = True
            process = self._process
        if process is not None:
            self._request_quit(process)

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def _run(
        self,
        config: ConversionConfig,
        callbacks: ConversionCallbacks,
        sink: IO[bytes] | None,
    ) -> None:
        with self._lock:
            if self._state in (EngineState.SPAWNING, EngineState.RUNNING):
                raise ExecutionFailedError("Engine is already running a conversion")
            self._cancel_requested = False
            self._state = EngineState.IDLE
            self._progress = None
            self._stderr = []

        result = validate(config)
        if not result.valid:
            self._fail(InvalidConfigurationError(result.errors), callbacks)

        self._state = EngineState.SPAWNING
        try:
            with prepared_input(config.input, self.temp_dir) as input_path:
                args = generate(
                    dataclasses.replace(config, input=input_path),
                    self.ffmpeg_path,
                    self.resolver,
                )
                self._spawn_and_wait(args, callbacks, sink)
        except MediaForgeError as e:
            if self._state not in TERMINAL_STATES:
                self._fail(e, callbacks)
            raise

    def _fail(self, error: MediaForgeError, callbacks: ConversionCallbacks) -> None:
        self._state = (
            EngineState.CANCELLED
            if isinstance(error, CancelledError)
            else EngineState.FAILED
        )
        logger.debug("Conversion ended in %s: %s", self._state.value, error)
        _notify("Error", callbacks.on_error, error)
        raise error

    def _spawn_and_wait(
        self,
        args: list[str],
        callbacks: ConversionCallbacks,
        sink: IO[bytes] | None,
    ) -> None:
        command = display_command(self.ffmpeg_path, args)
        logger.info("Starting ffmpeg", extra={"command": command})

        try:
            process = subprocess.Popen(  # nosec B603 - args built by the generator
                [self.ffmpeg_path, *args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE if sink is not None else subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            self._fail(
                ExecutionFailedError(f"Failed to start FFmpeg: {e}", command),
                callbacks,
            )

        with self._lock:
            self._process = process
            self._state = EngineState.RUNNING
            cancel_pending = self._cancel_requested
        if cancel_pending:
            self._request_quit(process)

        _notify("Start", callbacks.on_start, command)

        sink_errors: list[Exception] = []
        pump = None
        if sink is not None:
            pump = threading.Thread(
                target=self._pump_stdout,
                args=(process, sink, sink_errors),
                daemon=True,
            )
            pump.start()

        try:
            self._consume_stderr(process, callbacks)
            process.wait()
            if pump is not None:
                pump.join()
        finally:
            with self._lock:
                self._process = None
                if self._kill_timer is not None:
                    self._kill_timer.cancel()
                    self._kill_timer = None

        stderr_text = self.stderr
        if self._cancel_requested:
            self._fail(CancelledError(command, stderr_text), callbacks)
        if process.returncode != 0:
            self._fail(
                ExecutionFailedError(
                    f"FFmpeg process exited with code {process.returncode}",
                    command,
                    stderr_text,
                ),
                callbacks,
            )
        if sink_errors:
            self._fail(
                InvalidOutputError("<sink>", f"Output sink failed: {sink_errors[0]}"),
                callbacks,
            )

        self._state = EngineState.SUCCEEDED
        logger.info("ffmpeg finished", extra={"command": command})
        _notify("End", callbacks.on_end)

    def _consume_stderr(
        self, process: subprocess.Popen[bytes], callbacks: ConversionCallbacks
    ) -> None:
        """Parse stderr lines until EOF, dispatching progress callbacks."""
        lines: queue.Queue[str | None] = queue.Queue()
        parser = ProgressParser()

        def read_stderr() -> None:
            """Read stderr lines and put them in the queue."""
            try:
                assert process.stderr is not None
                # Universal newlines split ffmpeg's \r-terminated status lines
                reader = io.TextIOWrapper(
                    process.stderr, encoding="utf-8", errors="replace"
                )
                for line in reader:
                    lines.put(line)
            except (ValueError, OSError) as e:
                logger.debug("Stderr reader stopped: %s", e)
            finally:
                lines.put(None)

        reader_thread = threading.Thread(target=read_stderr, daemon=True)
        reader_thread.start()

        while True:
            line = lines.get()
            if line is None:
                break
            self._stderr.append(line if line.endswith("\n") else line + "\n")
            if not line.strip():
                continue
            parser.parse_duration(line)
            snapshot = parser.parse_progress(line)
            if snapshot is not None:
                self._progress = snapshot
                _notify("Progress", callbacks.on_progress, snapshot)

        reader_thread.join(timeout=self.STDERR_DRAIN_TIMEOUT)

    @staticmethod
    def _pump_stdout(
        process: subprocess.Popen[bytes],
        sink: IO[bytes],
        errors: list[Exception],
    ) -> None:
        """Copy stdout into the sink. After a sink failure keep draining."""
        assert process.stdout is not None
        try:
            while True:
                chunk = process.stdout.read(STDOUT_CHUNK_SIZE)
                if not chunk:
                    break
                if errors:
                    continue
                try:
                    sink.write(chunk)
                except (OSError, ValueError, TypeError) as e:
                    logger.warning("Output sink write failed: %s", e)
                    errors.append(e)
        except (OSError, ValueError) as e:
            logger.debug("Stdout pump stopped: %s", e)

    # -------------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------------

    def _request_quit(self, process: subprocess.Popen[bytes]) -> None:
        logger.info("Cancelling ffmpeg (pid %s)", process.pid)
        if process.stdin is not None:
            try:
                process.stdin.write(QUIT_COMMAND)
                process.stdin.flush()
                process.stdin.close()
            except (OSError, ValueError) as e:
                logger.debug("Could not send quit to ffmpeg: %s", e)

        timer = threading.Timer(
            self.cancel_grace_seconds, self._kill_if_alive, args=(process,)
        )
        timer.daemon = True
        with self._lock:
            self._kill_timer = timer
        timer.start()

    @staticmethod
    def _kill_if_alive(process: subprocess.Popen[bytes]) -> None:
        if process.poll() is None:
            logger.warning(
                "ffmpeg (pid %s) ignored quit request, killing", process.pid
            )
            try:
                process.kill()
            except OSError as e:
                logger.debug("Kill failed: %s", e)
