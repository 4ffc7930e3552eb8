"""Non-blocking wrapper around ExecutionEngine."""

from __future__ import annotations

import logging
import threading

from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import MediaForgeError
from mediaforge.executor.engine import (
    ConversionCallbacks,
    EngineState,
    ExecutionEngine,
)
from mediaforge.tools.ffmpeg_progress import ProgressSnapshot

logger = logging.getLogger(__name__)


class ConversionJob:
    """A conversion running on a background thread.

    Callbacks are invoked on the job's thread. result() blocks until the
    run settles and re-raises its error, if any.

    Example:
        job = ConversionJob(engine, config).start()
        ...
        job.cancel()
        job.result()  # raises CancelledError
    """

    def __init__(
        self,
        engine: ExecutionEngine,
        config: ConversionConfig,
        callbacks: ConversionCallbacks | None = None,
    ) -> None:
        self._engine = engine
        self._config = config
        self._callbacks = callbacks
        self._done = threading.Event()
        self._error: MediaForgeError | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> ConversionJob:
        if self._thread is not None:
            raise RuntimeError("Job already started")
        self._thread = threading.Thread(
            target=self._run, name="mediaforge-job", daemon=True
        )
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self._engine.execute(self._config, self._callbacks)
        except MediaForgeError as e:
            self._error = e
        finally:
            self._done.set()

    def result(self, timeout: float | None = None) -> None:
        """Wait for the run and raise its error.

        Raises:
            TimeoutError: If the run has not settled within timeout.
            MediaForgeError: Whatever the run failed with.
        """
        if not self._done.wait(timeout):
            raise TimeoutError("Conversion still running")
        if self._error is not None:
            raise self._error

    def cancel(self) -> None:
        self._engine.cancel()

    def done(self) -> bool:
        return self._done.is_set()

    @property
    def state(self) -> EngineState:
        return self._engine.state

    @property
    def progress(self) -> ProgressSnapshot | None:
        return self._engine.progress
