"""Materialisation of in-memory inputs.

ffmpeg reads a file path. Buffers and readable streams are drained into
a temporary file for the duration of a run and removed afterwards.
"""

import logging
import os
import secrets
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Literal

from mediaforge.errors import InvalidInputError

logger = logging.getLogger(__name__)

InputKind = Literal["path", "buffer", "stream"]

TEMP_PREFIX = "mediaforge-"
TEMP_SUFFIX = ".tmp"
READ_CHUNK_SIZE = 1024 * 1024


def input_kind(source: object) -> InputKind:
    """Classify an input source.

    Raises:
        InvalidInputError: If the source is none of path, buffer or stream.
    """
    if isinstance(source, (str, os.PathLike)):
        return "path"
    if isinstance(source, (bytes, bytearray, memoryview)):
        return "buffer"
    if callable(getattr(source, "read", None)):
        return "stream"
    raise InvalidInputError(repr(source), f"Unsupported input type: {type(source).__name__}")


def temp_input_path(temp_dir: str | Path | None = None) -> Path:
    """Unique temp file path: mediaforge-<ms timestamp>-<random>.tmp."""
    directory = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
    name = f"{TEMP_PREFIX}{int(time.time() * 1000)}-{secrets.token_hex(6)}{TEMP_SUFFIX}"
    return directory / name


def cleanup_temp_file(path: Path) -> None:
    """Remove a temporary file, logging any errors.

    Args:
        path: Path to temp file to remove.
    """
    if path.exists():
        try:
            path.unlink()
            logger.debug("Cleaned up temp file: %s", path)
        except OSError as e:
            logger.warning("Could not clean up temp file %s: %s", path, e)


def _write_stream(stream: object, target: Path) -> None:
    try:
        with target.open("wb") as fh:
            while True:
                chunk = stream.read(READ_CHUNK_SIZE)  # type: ignore[attr-defined]
                if not chunk:
                    break
                if isinstance(chunk, str):
                    raise TypeError("stream must be opened in binary mode")
                fh.write(chunk)
    except (OSError, TypeError, ValueError) as e:
        cleanup_temp_file(target)
        raise InvalidInputError("<stream>", f"Could not read input stream: {e}") from e


@contextmanager
def prepared_input(
    source: object, temp_dir: str | Path | None = None
) -> Iterator[str]:
    """Yield the path ffmpeg should read for a source.

    Paths are yielded unchanged. Buffers and streams are written to a
    temporary file which is removed exactly once when the block exits,
    whether or not it raised.

    Raises:
        InvalidInputError: If the source type is unsupported or a stream
            cannot be read.
    """
    kind = input_kind(source)
    if kind == "path":
        yield os.fspath(source)  # type: ignore[arg-type]
        return

    temp_path = temp_input_path(temp_dir)
    if kind == "buffer":
        try:
            temp_path.write_bytes(bytes(source))  # type: ignore[arg-type]
        except OSError as e:
            cleanup_temp_file(temp_path)
            raise InvalidInputError("<buffer>", f"Could not write temp file: {e}") from e
    else:
        _write_stream(source, temp_path)

    logger.debug("Materialised %s input to %s", kind, temp_path)
    try:
        yield str(temp_path)
    finally:
        cleanup_temp_file(temp_path)
