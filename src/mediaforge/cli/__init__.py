"""CLI module for mediaforge."""

import logging
import sys
from pathlib import Path

import click

from mediaforge.cli.exit_codes import ExitCode
from mediaforge.config import ForgeConfig, get_config
from mediaforge.errors import InvalidConfigurationError
from mediaforge.forge import MediaForge
from mediaforge.logging import configure_logging

logger = logging.getLogger(__name__)


def get_forge(ctx: click.Context) -> MediaForge:
    """Return the MediaForge for this invocation, creating it on first use.

    A forge already placed in ctx.obj (tests) is kept.
    """
    obj = ctx.ensure_object(dict)
    if obj.get("forge") is None:
        config: ForgeConfig = obj.get("config") or ForgeConfig()
        obj["forge"] = MediaForge(config=config)
    return obj["forge"]


@click.group()
@click.version_option(package_name="mediaforge")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffmpeg binary.",
)
@click.option(
    "--ffprobe",
    "ffprobe_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffprobe binary.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.mediaforge/config.toml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    ffmpeg_path: Path | None,
    ffprobe_path: Path | None,
    config_path: Path | None,
) -> None:
    """mediaforge - Typed ffmpeg conversions, probing and batch runs."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(
                config_path=config_path,
                ffmpeg_path=ffmpeg_path,
                ffprobe_path=ffprobe_path,
                log_level=log_level,
                log_file=log_file,
                log_format="json" if log_json else None,
                strict=config_path is not None,
            )
        except InvalidConfigurationError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.CONFIG_ERROR)

    config: ForgeConfig = ctx.obj["config"]
    configure_logging(config.logging)
    logger.debug(
        "mediaforge starting: ffmpeg=%s, ffprobe=%s, log_level=%s",
        config.ffmpeg_path,
        config.ffprobe_path,
        config.logging.level,
    )


# Defer import to avoid circular dependency
def _register_commands():
    from mediaforge.cli.doctor import doctor_command
    from mediaforge.cli.jobs import command_command, convert_command
    from mediaforge.cli.presets import presets_command
    from mediaforge.cli.probe import probe_command

    main.add_command(doctor_command)
    main.add_command(probe_command)
    main.add_command(command_command)
    main.add_command(convert_command)
    main.add_command(presets_command)


_register_commands()
