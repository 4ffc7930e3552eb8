"""Structured logging for mediaforge.

Text or JSON output, optional rotating log file, and batch item tagging.
"""

from mediaforge.logging.config import configure_logging
from mediaforge.logging.context import (
    BatchItemFilter,
    batch_item_context,
    get_batch_item_context,
)
from mediaforge.logging.handlers import JSONFormatter

__all__ = [
    "BatchItemFilter",
    "JSONFormatter",
    "batch_item_context",
    "configure_logging",
    "get_batch_item_context",
]
