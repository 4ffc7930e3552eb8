"""Unit tests for ExecutionEngine paths that never reach a live process."""

from unittest.mock import MagicMock, patch

import pytest

from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import (
    ErrorKind,
    ExecutionFailedError,
    InvalidConfigurationError,
    InvalidInputError,
)
from mediaforge.executor.engine import (
    ConversionCallbacks,
    EngineState,
    ExecutionEngine,
)


class TestValidationFailure:
    """A config that fails validation never spawns ffmpeg."""

    def test_raises_and_notifies(self):
        on_error = MagicMock()
        on_start = MagicMock()
        engine = ExecutionEngine("ffmpeg")

        with patch("mediaforge.executor.engine.subprocess.Popen") as mock_popen:
            with pytest.raises(InvalidConfigurationError) as exc_info:
                engine.execute(
                    ConversionConfig(output="out.mp4"),
                    ConversionCallbacks(on_start=on_start, on_error=on_error),
                )

        mock_popen.assert_not_called()
        on_start.assert_not_called()
        on_error.assert_called_once_with(exc_info.value)
        assert exc_info.value.errors == ["Input is required"]
        assert engine.state == EngineState.FAILED

    def test_callback_exception_does_not_mask_error(self):
        engine = ExecutionEngine("ffmpeg")
        callbacks = ConversionCallbacks(on_error=MagicMock(side_effect=RuntimeError))
        with pytest.raises(InvalidConfigurationError):
            engine.execute(ConversionConfig(), callbacks)


class TestSpawnFailure:
    def test_missing_binary(self, tmp_path):
        engine = ExecutionEngine(tmp_path / "no-such-ffmpeg")
        on_error = MagicMock()
        with pytest.raises(ExecutionFailedError) as exc_info:
            engine.execute(
                ConversionConfig(input="in.mp4", output="out.mp4"),
                ConversionCallbacks(on_error=on_error),
            )
        assert "Failed to start FFmpeg" in str(exc_info.value)
        assert exc_info.value.kind == ErrorKind.EXECUTION_FAILED
        assert engine.state == EngineState.FAILED
        on_error.assert_called_once()

    def test_bad_input_type(self):
        engine = ExecutionEngine("ffmpeg")
        with patch("mediaforge.executor.engine.subprocess.Popen") as mock_popen:
            with pytest.raises(InvalidInputError):
                engine.execute(ConversionConfig(input=12345, output="out.mp4"))
        mock_popen.assert_not_called()


class TestIdleEngine:
    def test_initial_state(self):
        engine = ExecutionEngine()
        assert engine.state == EngineState.IDLE
        assert engine.is_running() is False
        assert engine.progress is None
        assert engine.stderr == ""

    def test_cancel_when_idle_is_noop(self):
        engine = ExecutionEngine()
        engine.cancel()
        assert engine.state == EngineState.IDLE

    def test_default_grace(self):
        assert ExecutionEngine().cancel_grace_seconds == 2.0
        assert ExecutionEngine(cancel_grace_seconds=0.5).cancel_grace_seconds == 0.5

    def test_default_resolver_follows_ffmpeg_path(self):
        engine = ExecutionEngine("/opt/ffmpeg/bin/ffmpeg")
        assert engine.resolver.ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"
