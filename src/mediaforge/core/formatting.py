"""Scalar-to-token formatting for ffmpeg arguments.

These helpers turn Python values into the exact text ffmpeg expects on
its command line. They are pure and shared by the filter builder and the
command generator.
"""

import math
from enum import Enum


def format_number(value: int | float | str) -> str:
    """Render a number the way it should appear in an ffmpeg argument.

    Integral floats drop their fractional part (``2.0 -> "2"``) and other
    floats use the shortest round-tripping representation. Strings pass
    through unchanged.

    Args:
        value: Number or preformatted string.

    Returns:
        Token text.
    """
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def format_time(value: int | float | str) -> str:
    """Format a time value for -ss, -t and -to.

    Strings are assumed to be preformatted (``"00:01:30"``, ``"90"``).
    Numbers are seconds and become ``HH:MM:SS``; a fractional part is kept
    on the seconds component.

    Examples:
        >>> format_time(90)
        '00:01:30'
        >>> format_time(3725.5)
        '01:02:05.5'

    Args:
        value: Seconds or preformatted time string.

    Returns:
        ffmpeg time duration string.
    """
    if isinstance(value, str):
        return value

    hours = int(value // 3600)
    minutes = int((value % 3600) // 60)
    seconds = value % 60
    whole = int(seconds)
    fraction = seconds - whole

    text = f"{hours:02d}:{minutes:02d}:{whole:02d}"
    if fraction:
        # Keep the fraction digits of the seconds value, without the "0"
        text += format_number(round(seconds, 6))[len(str(whole)) :]
    return text


def format_size(size: object) -> str | None:
    """Format a -s resolution value.

    Strings pass through. Objects with ``width``/``height`` render as
    ``WxH`` with the auto sentinel ``"?"`` mapped to ``-1``.

    Args:
        size: Size string or SizeSpec-like object.

    Returns:
        Size token, or None when size is empty.
    """
    if not size:
        return None
    if isinstance(size, str):
        return size

    width = getattr(size, "width", None)
    height = getattr(size, "height", None)
    if width is None or height is None:
        return None
    w = "-1" if width == "?" else format_number(width)
    h = "-1" if height == "?" else format_number(height)
    return f"{w}x{h}"


def format_bitrate(value: int | str) -> str:
    """Render a bitrate. Numbers are bits per second and go out verbatim."""
    return format_number(value)
