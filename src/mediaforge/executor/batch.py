"""Batch execution over many conversion configs.

A failed item never aborts the batch: its error goes to on_file_error and
the next item proceeds. on_complete fires exactly once after every item
has settled.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import CancelledError, MediaForgeError
from mediaforge.executor.engine import ConversionCallbacks, ExecutionEngine
from mediaforge.logging.context import batch_item_context
from mediaforge.tools.ffmpeg_progress import ProgressSnapshot
from mediaforge.tools.hardware import HardwareResolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 2


@dataclass
class BatchCallbacks:
    """Per-item and aggregate observers for a batch."""

    on_progress: Callable[[int, ProgressSnapshot], None] | None = None
    on_file_complete: Callable[[int], None] | None = None
    on_file_error: Callable[[int, MediaForgeError], None] | None = None
    on_complete: Callable[[], None] | None = None


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of one batch item."""

    index: int
    success: bool
    error: MediaForgeError | None = None


def _notify(name: str, callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    try:
        callback(*args)
    except Exception as e:
        logger.warning("%s callback error: %s", name, e)


class BatchExecutionEngine:
    """Runs configs through one fresh ExecutionEngine each.

    Args:
        engine_factory: Builds the engine for each item. Defaults to
            ExecutionEngine with default settings, all items sharing one
            HardwareResolver so ffmpeg is probed for hwaccels once.
    """

    def __init__(
        self, engine_factory: Callable[[], ExecutionEngine] | None = None
    ) -> None:
        if engine_factory is None:
            resolver = HardwareResolver()
            engine_factory = functools.partial(ExecutionEngine, resolver=resolver)
        self._engine_factory = engine_factory
        self._lock = threading.Lock()
        self._active: set[ExecutionEngine] = set()
        self._cancelled = False

    def _run_item(
        self,
        index: int,
        config: ConversionConfig,
        callbacks: BatchCallbacks,
    ) -> BatchItemResult:
        with self._lock:
            if self._cancelled:
                engine = None
            else:
                engine = self._engine_factory()
                self._active.add(engine)

        if engine is None:
            error = CancelledError()
            _notify("File error", callbacks.on_file_error, index, error)
            return BatchItemResult(index=index, success=False, error=error)

        item_callbacks = ConversionCallbacks(
            on_progress=lambda p: _notify(
                "Progress", callbacks.on_progress, index, p
            )
        )
        input_name = config.input if isinstance(config.input, str) else None
        try:
            with batch_item_context(index, input_name):
                engine.execute(config, item_callbacks)
        except MediaForgeError as e:
            logger.warning("Batch item %d failed: %s", index, e)
            _notify("File error", callbacks.on_file_error, index, e)
            return BatchItemResult(index=index, success=False, error=e)
        finally:
            with self._lock:
                self._active.discard(engine)

        _notify("File complete", callbacks.on_file_complete, index)
        return BatchItemResult(index=index, success=True)

    def execute_batch(
        self,
        configs: Sequence[ConversionConfig],
        callbacks: BatchCallbacks | None = None,
    ) -> list[BatchItemResult]:
        """Run configs one after another."""
        callbacks = callbacks or BatchCallbacks()
        self._cancelled = False
        results = [
            self._run_item(index, config, callbacks)
            for index, config in enumerate(configs)
        ]
        _notify("Complete", callbacks.on_complete)
        return results

    def execute_batch_parallel(
        self,
        configs: Sequence[ConversionConfig],
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        callbacks: BatchCallbacks | None = None,
    ) -> list[BatchItemResult]:
        """Run configs with at most max_concurrent in flight.

        Results are returned in input order; callbacks fire in completion
        order.
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")

        callbacks = callbacks or BatchCallbacks()
        self._cancelled = False
        results: list[BatchItemResult | None] = [None] * len(configs)

        with ThreadPoolExecutor(
            max_workers=max_concurrent, thread_name_prefix="mediaforge-batch"
        ) as pool:
            futures = {
                pool.submit(self._run_item, index, config, callbacks): index
                for index, config in enumerate(configs)
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        _notify("Complete", callbacks.on_complete)
        return [r for r in results if r is not None]

    def cancel_all(self) -> None:
        """Cancel in-flight items and skip the ones not yet started."""
        with self._lock:
            self._cancelled = True
            active = list(self._active)
        for engine in active:
            engine.cancel()
