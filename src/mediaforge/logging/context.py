"""Batch item context for structured logging.

Batch runs tag each log record with the item being converted, so
interleaved output from parallel conversions stays attributable.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_item_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "item_index", default=None
)
_item_input: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "item_input", default=None
)


@contextmanager
def batch_item_context(
    index: int, input_name: str | None = None
) -> Generator[None, None, None]:
    """Tag log records emitted inside the block with a batch item.

    Example:
        with batch_item_context(3, "clip.mov"):
            logger.info("Starting ffmpeg")  # "[#003] ..." in text format
    """
    index_token = _item_index.set(index)
    input_token = _item_input.set(input_name)
    try:
        yield
    finally:
        _item_index.reset(index_token)
        _item_input.reset(input_token)


def get_batch_item_context() -> tuple[int | None, str | None]:
    return _item_index.get(), _item_input.get()


class BatchItemFilter(logging.Filter):
    """Adds item_index, item_input and a compact item_tag to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        index, input_name = get_batch_item_context()
        record.item_index = index
        record.item_input = input_name
        record.item_tag = f"[#{index:03d}] " if index is not None else ""
        return True
