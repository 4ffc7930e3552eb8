"""Built-in conversion presets.

Presets are partial conversion settings (format plus video/audio
sections) stored in presets.yaml. Combine one with an input and output
through apply_preset():

    config = apply_preset(get_preset("youtube", "hd1080"),
                          input="in.mov", output="out.mp4")
"""

from __future__ import annotations

import copy
import dataclasses
import functools
import logging
from dataclasses import dataclass
from importlib import resources
from typing import Any

import yaml

from mediaforge.config.schema import parse_conversion
from mediaforge.domain.config import (
    AdvancedOptions,
    AudioConfig,
    ConversionConfig,
    TimingConfig,
    VideoConfig,
)

logger = logging.getLogger(__name__)

PRESETS_RESOURCE = "presets.yaml"

# Sections apply_preset merges field-by-field
MERGED_SECTIONS = {
    "video": VideoConfig,
    "audio": AudioConfig,
    "timing": TimingConfig,
    "options": AdvancedOptions,
}


@dataclass(frozen=True)
class PresetInfo:
    """One entry of list_presets()."""

    category: str
    name: str
    config: ConversionConfig


@functools.cache
def load_preset_data() -> dict[str, Any]:
    """Raw preset mapping, read once from the packaged YAML."""
    text = resources.files(__package__).joinpath(PRESETS_RESOURCE).read_text(
        encoding="utf-8"
    )
    data = yaml.safe_load(text) or {}
    logger.debug("Loaded %d preset categories", len(data))
    return data


def _is_single(entry: Any) -> bool:
    return isinstance(entry, dict) and "format" in entry


def get_preset_data(category: str, name: str | None = None) -> dict[str, Any] | None:
    """Raw mapping for a preset, or None if unknown.

    Single-entry categories (tiktok, dvd) ignore name.
    """
    entry = load_preset_data().get(category)
    if entry is None:
        return None
    if _is_single(entry):
        return copy.deepcopy(entry)
    if name is None or name not in entry:
        return None
    return copy.deepcopy(entry[name])


def get_preset(category: str, name: str | None = None) -> ConversionConfig | None:
    """Preset as a ConversionConfig without input/output, or None if unknown."""
    data = get_preset_data(category, name)
    return parse_conversion(data) if data is not None else None


def resolve_preset_reference(reference: str) -> dict[str, Any] | None:
    """Raw mapping for "category.name" or "category"."""
    category, _, name = reference.partition(".")
    return get_preset_data(category, name or None)


def list_presets() -> list[PresetInfo]:
    """Every preset in file order. Single-entry categories use name == category."""
    result: list[PresetInfo] = []
    for category, entry in load_preset_data().items():
        if _is_single(entry):
            result.append(PresetInfo(category, category, parse_conversion(entry)))
            continue
        for name, data in entry.items():
            result.append(PresetInfo(category, name, parse_conversion(data)))
    return result


def apply_preset(preset: ConversionConfig, **overrides: Any) -> ConversionConfig:
    """Build a config from a preset plus overrides.

    A mapping given for video, audio, timing or options updates only the
    named fields of the preset's section; any other value replaces the
    field outright.

    Example:
        apply_preset(preset, input="a.mp4", output="b.mp4",
                     video={"bitrate": "2M"})
    """
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        current = getattr(preset, key)
        if key in MERGED_SECTIONS and isinstance(value, dict):
            if current is None:
                changes[key] = MERGED_SECTIONS[key](**value)
            else:
                changes[key] = dataclasses.replace(current, **value)
        else:
            changes[key] = value
    return dataclasses.replace(preset, **changes)


__all__ = [
    "PresetInfo",
    "apply_preset",
    "get_preset",
    "get_preset_data",
    "list_presets",
    "load_preset_data",
    "resolve_preset_reference",
]
