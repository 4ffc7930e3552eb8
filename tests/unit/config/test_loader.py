"""Tests for configuration loading and precedence."""

from pathlib import Path

import pytest

from mediaforge.config.env import EnvReader
from mediaforge.config.loader import (
    ConfigBuilder,
    ConfigSource,
    get_config,
    get_default_config_path,
    load_config_file,
    source_from_file,
)
from mediaforge.config.models import ExecutionConfig, ForgeConfig, LoggingConfig
from mediaforge.errors import InvalidConfigurationError

CONFIG_TOML = """\
[tools]
ffmpeg = "/opt/ffmpeg/bin/ffmpeg"

[execution]
max_concurrent = 3
cancel_grace_seconds = 1.5

[logging]
level = "warning"
format = "json"
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestModels:
    def test_defaults(self):
        config = ForgeConfig()
        assert config.ffmpeg_path == "ffmpeg"
        assert config.ffprobe_path == "ffprobe"
        assert config.execution.max_concurrent == 2
        assert config.logging.level == "info"

    def test_execution_validation(self):
        with pytest.raises(ValueError, match="max_concurrent"):
            ExecutionConfig(max_concurrent=0)
        with pytest.raises(ValueError, match="cancel_grace_seconds"):
            ExecutionConfig(cancel_grace_seconds=-1)

    def test_logging_validation(self):
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")


class TestConfigBuilder:
    def test_later_sources_win(self):
        builder = ConfigBuilder()
        builder.apply(ConfigSource(max_concurrent=3, logging_level="debug"))
        builder.apply(ConfigSource(max_concurrent=5))
        config = builder.build()
        assert config.execution.max_concurrent == 5
        assert config.logging.level == "debug"

    def test_none_never_overrides(self):
        builder = ConfigBuilder()
        builder.apply(ConfigSource(cancel_grace_seconds=0.5))
        builder.apply(ConfigSource())
        assert builder.build().execution.cancel_grace_seconds == 0.5

    def test_source_from_file(self):
        source = source_from_file({"tools": {"ffprobe": "~/bin/ffprobe"}})
        assert source.ffprobe_path == Path("~/bin/ffprobe").expanduser()
        assert source.ffmpeg_path is None


class TestLoadConfigFile:
    def test_missing_file(self, tmp_path):
        assert load_config_file(tmp_path / "none.toml") == {}

    def test_invalid_toml_lenient(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[execution\nmax_concurrent = ")
        assert load_config_file(path) == {}

    def test_invalid_toml_strict(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[execution\nmax_concurrent = ")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_config_file(path, strict=True)
        assert str(path) in exc_info.value.errors[0]

    def test_default_path_from_env(self, tmp_path):
        reader = EnvReader(env={"MEDIAFORGE_CONFIG_PATH": str(tmp_path / "c.toml")})
        assert get_default_config_path(reader) == tmp_path / "c.toml"


class TestGetConfig:
    """Tests for get_config precedence: cli > env > file > default."""

    def test_file_values(self, config_file):
        config = get_config(config_path=config_file, env_reader=EnvReader(env={}))
        assert config.tools.ffmpeg == Path("/opt/ffmpeg/bin/ffmpeg")
        assert config.execution.max_concurrent == 3
        assert config.execution.cancel_grace_seconds == 1.5
        assert config.logging.format == "json"

    def test_env_overrides_file(self, config_file):
        reader = EnvReader(
            env={
                "MEDIAFORGE_MAX_CONCURRENT": "6",
                "MEDIAFORGE_LOG_LEVEL": "debug",
                "MEDIAFORGE_FFMPEG_PATH": "/env/ffmpeg",
            }
        )
        config = get_config(config_path=config_file, env_reader=reader)
        assert config.execution.max_concurrent == 6
        assert config.logging.level == "debug"
        assert config.ffmpeg_path == "/env/ffmpeg"

    def test_cli_overrides_env(self, config_file):
        reader = EnvReader(env={"MEDIAFORGE_MAX_CONCURRENT": "6"})
        config = get_config(
            config_path=config_file,
            max_concurrent=1,
            log_level="error",
            env_reader=reader,
        )
        assert config.execution.max_concurrent == 1
        assert config.logging.level == "error"

    def test_defaults_without_file(self, tmp_path):
        config = get_config(
            config_path=tmp_path / "absent.toml", env_reader=EnvReader(env={})
        )
        assert config == ForgeConfig()

    def test_out_of_range_value(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[execution]\nmax_concurrent = 0\n")
        with pytest.raises(InvalidConfigurationError, match="max_concurrent"):
            get_config(config_path=path, env_reader=EnvReader(env={}))
