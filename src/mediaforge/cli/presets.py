"""CLI presets command."""

import click

from mediaforge.core.formatting import format_size
from mediaforge.domain.enums import enum_value
from mediaforge.presets import PresetInfo, list_presets


def _describe(info: PresetInfo) -> str:
    config = info.config
    parts = []
    if config.format:
        parts.append(enum_value(config.format))
    if config.video:
        if config.video.codec:
            parts.append(enum_value(config.video.codec))
        if config.video.size:
            parts.append(format_size(config.video.size) or "")
        if config.video.bitrate:
            parts.append(str(config.video.bitrate))
    if config.audio and config.audio.codec:
        parts.append(enum_value(config.audio.codec))
    return " ".join(p for p in parts if p)


@click.command("presets")
def presets_command() -> None:
    """List built-in presets.

    Reference one from a job file as ``preset: category.name`` (or just
    ``category`` for single-entry categories).
    """
    current = None
    for info in list_presets():
        if info.category != current:
            current = info.category
            click.echo(f"{current}:")
        reference = (
            info.category
            if info.name == info.category
            else f"{info.category}.{info.name}"
        )
        click.echo(f"  {reference:<22} {_describe(info)}")
