"""mediaforge doctor command for checking external tool health."""

import sys

import click

from mediaforge.cli import get_forge
from mediaforge.cli.exit_codes import ExitCode
from mediaforge.errors import MediaForgeError
from mediaforge.tools import ToolInfo, detect_all_tools

# Oldest ffmpeg release whose option names the generator relies on
MIN_FFMPEG_VERSION = (4, 0)


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


def _format_version(version: str | None) -> str:
    return version if version else "not found"


def _echo_tool(info: ToolInfo, verbose: bool) -> None:
    status = _format_status(info.is_available())
    version = _format_version(info.version)
    path_info = f" ({info.path})" if info.path and verbose else ""
    click.echo(f"  {status} {info.name}: {version}{path_info}")
    if info.version_tuple is not None and not info.meets_version(MIN_FFMPEG_VERSION):
        minimum = ".".join(str(part) for part in MIN_FFMPEG_VERSION)
        click.echo(f"    ⚠ older than {minimum}, some options may be rejected")
    if not info.is_available():
        if info.status_message:
            click.echo(f"    ├─ {info.status_message}")
        click.echo("    └─ Install ffmpeg: https://ffmpeg.org/download.html")


@click.command("doctor")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show tool paths and per-class codec counts",
)
@click.pass_context
def doctor_command(ctx: click.Context, verbose: bool) -> None:
    """Check ffmpeg/ffprobe availability and hardware acceleration.

    Exit codes:
      0 - Both tools available
      3 - ffmpeg or ffprobe missing
    """
    forge = get_forge(ctx)
    registry = detect_all_tools(forge.ffmpeg_path, forge.ffprobe_path)

    click.echo("mediaforge Tool Health Check")
    click.echo("=" * 40)
    click.echo()

    click.echo("FFmpeg Tools:")
    click.echo("-" * 20)
    _echo_tool(registry.ffmpeg, verbose)
    _echo_tool(registry.ffprobe, verbose)
    click.echo()

    if registry.ffmpeg.is_available():
        click.echo("Hardware Acceleration:")
        click.echo("-" * 20)
        detected = forge.detected_hardware()
        click.echo(f"  hwaccels: {', '.join(detected) if detected else 'none'}")
        try:
            classes = forge.get_available_hardware_acceleration()
        except MediaForgeError as e:
            click.echo(f"  ✗ Could not list codecs: {e}")
        else:
            for info in classes:
                line = f"  ✓ {info.type}"
                if verbose:
                    line += (
                        f" ({len(info.encoders)} encoders,"
                        f" {len(info.decoders)} decoders)"
                    )
                click.echo(line)
        click.echo()

    if not registry.all_available():
        click.echo("Status: ✗ Required tools missing")
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    click.echo("Status: ✓ All tools available")
