"""Tests for executor/inputs.py."""

import io
from pathlib import Path

import pytest

from mediaforge.errors import InvalidInputError
from mediaforge.executor.inputs import input_kind, prepared_input, temp_input_path


class TestInputKind:
    def test_kinds(self):
        assert input_kind("a.mp4") == "path"
        assert input_kind(Path("a.mp4")) == "path"
        assert input_kind(b"abc") == "buffer"
        assert input_kind(bytearray(b"abc")) == "buffer"
        assert input_kind(memoryview(b"abc")) == "buffer"
        assert input_kind(io.BytesIO(b"abc")) == "stream"

    def test_unsupported(self):
        with pytest.raises(InvalidInputError):
            input_kind(42)


class TestTempInputPath:
    def test_name_pattern(self, tmp_path):
        path = temp_input_path(tmp_path)
        assert path.parent == tmp_path
        assert path.name.startswith("mediaforge-")
        assert path.suffix == ".tmp"

    def test_unique(self, tmp_path):
        assert temp_input_path(tmp_path) != temp_input_path(tmp_path)


class TestPreparedInput:
    """Tests for prepared_input."""

    def test_path_yielded_unchanged(self, tmp_path):
        with prepared_input(Path("movie.mp4"), tmp_path) as path:
            assert path == "movie.mp4"
        assert list(tmp_path.iterdir()) == []

    def test_buffer_written_and_removed(self, tmp_path):
        with prepared_input(b"\x00\x01\x02", tmp_path) as path:
            assert Path(path).read_bytes() == b"\x00\x01\x02"
            written = Path(path)
        assert not written.exists()

    def test_stream_written_and_removed(self, tmp_path):
        with prepared_input(io.BytesIO(b"stream data"), tmp_path) as path:
            assert Path(path).read_bytes() == b"stream data"
        assert list(tmp_path.iterdir()) == []

    def test_removed_when_block_raises(self, tmp_path):
        with pytest.raises(RuntimeError):
            with prepared_input(b"data", tmp_path):
                raise RuntimeError("boom")
        assert list(tmp_path.iterdir()) == []

    def test_text_stream_rejected(self, tmp_path):
        with pytest.raises(InvalidInputError, match="binary mode"):
            with prepared_input(io.StringIO("text"), tmp_path):
                pass
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_temp_dir(self, tmp_path):
        missing = tmp_path / "does-not-exist"
        with pytest.raises(InvalidInputError):
            with prepared_input(b"data", missing):
                pass
