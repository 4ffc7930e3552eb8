"""Shared helpers with no dependencies on the rest of mediaforge."""

from mediaforge.core.formatting import (
    format_bitrate,
    format_number,
    format_size,
    format_time,
)
from mediaforge.core.subprocess_utils import run_command

__all__ = [
    "format_bitrate",
    "format_number",
    "format_size",
    "format_time",
    "run_command",
]
