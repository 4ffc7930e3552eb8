"""CLI probe command."""

import dataclasses
import json
import logging
import sys
from pathlib import Path

import click

from mediaforge.cli import get_forge
from mediaforge.cli.exit_codes import ExitCode
from mediaforge.domain.metadata import StreamMetadata, VideoMetadata
from mediaforge.errors import MediaForgeError, ToolNotFoundError

logger = logging.getLogger(__name__)


def format_json(metadata: VideoMetadata) -> str:
    return json.dumps(dataclasses.asdict(metadata), indent=2, default=str)


def _stream_line(stream: StreamMetadata) -> str:
    parts = [f"#{stream.index}", stream.codec_name or "unknown"]
    if stream.width and stream.height:
        parts.append(f"{stream.width}x{stream.height}")
    if stream.channels:
        parts.append(f"{stream.channels}ch")
    if stream.sample_rate:
        parts.append(f"{stream.sample_rate} Hz")
    return " ".join(parts)


def format_human(path: Path, metadata: VideoMetadata) -> str:
    """Render metadata as an indented text block."""
    lines = [
        f"File: {path}",
        f"  Format:     {metadata.format.format_name}",
        f"  Duration:   {metadata.duration:.2f}s",
        f"  Resolution: {metadata.width}x{metadata.height}",
        f"  Frame rate: {metadata.frame_rate:g} fps",
        f"  Bitrate:    {metadata.bitrate:g} kb/s",
        f"  Size:       {metadata.size} bytes",
    ]
    if metadata.rotation:
        lines.append(f"  Rotation:   {metadata.rotation}°")

    groups = (
        ("Video", metadata.video_streams),
        ("Audio", metadata.audio_streams),
        ("Subtitle", metadata.subtitle_streams),
    )
    for title, streams in groups:
        if streams:
            lines.append(f"  {title} streams:")
            lines.extend(f"    {_stream_line(s)}" for s in streams)
    return "\n".join(lines)


@click.command("probe")
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output metadata as JSON",
)
@click.pass_context
def probe_command(ctx: click.Context, path: Path, json_output: bool) -> None:
    """Show video metadata for PATH."""
    if not path.exists():
        click.echo(f"Error: File not found: {path}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    forge = get_forge(ctx)
    try:
        metadata = forge.get_video_metadata(str(path))
    except ToolNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)
    except MediaForgeError as e:
        logger.debug("Probe failed for %s", path, exc_info=True)
        click.echo(f"Error: Could not probe file: {path}", err=True)
        click.echo(f"Reason: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)

    if json_output:
        click.echo(format_json(metadata))
    else:
        click.echo(format_human(path, metadata))
