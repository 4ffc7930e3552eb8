"""Conversion job file loading.

A job file is YAML holding either a single ``conversion`` mapping or a
``conversions`` list::

    conversions:
      - input: talk.mov
        output: talk.mp4
        preset: youtube.hd1080
        video:
          bitrate: 6M
      - input: clip.mkv
        output: clip.webm
        preset: size.small

A ``preset`` key pulls in a built-in preset; keys in the job entry
override the preset's, merging nested sections.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from mediaforge.config.schema import parse_conversion
from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import InvalidConfigurationError
from mediaforge.presets import resolve_preset_reference

logger = logging.getLogger(__name__)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested mappings merge recursively."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def expand_preset(entry: dict[str, Any]) -> dict[str, Any]:
    """Apply an entry's preset reference, if any.

    Raises:
        InvalidConfigurationError: If the preset is unknown.
    """
    reference = entry.get("preset")
    if reference is None:
        return entry

    preset = resolve_preset_reference(str(reference))
    if preset is None:
        raise InvalidConfigurationError([f"preset: unknown preset '{reference}'"])
    merged = deep_merge(preset, entry)
    merged.pop("preset", None)
    return merged


def load_jobs_from_dict(data: dict[str, Any]) -> list[ConversionConfig]:
    """Validate job data and convert every entry.

    Raises:
        InvalidConfigurationError: If the structure or any entry is invalid.
            Messages are prefixed with the entry index.
    """
    if "conversion" in data and "conversions" in data:
        raise InvalidConfigurationError(
            ["Job file must contain 'conversion' or 'conversions', not both"]
        )
    if "conversion" in data:
        entries = [data["conversion"]]
    elif "conversions" in data:
        entries = data["conversions"]
    else:
        raise InvalidConfigurationError(
            ["Job file must contain 'conversion' or 'conversions'"]
        )

    if not isinstance(entries, list) or not entries:
        raise InvalidConfigurationError(["'conversions' must be a non-empty list"])

    configs: list[ConversionConfig] = []
    errors: list[str] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            errors.append(f"conversions[{index}]: must be a mapping")
            continue
        try:
            configs.append(parse_conversion(expand_preset(entry)))
        except InvalidConfigurationError as e:
            errors.extend(f"conversions[{index}].{msg}" for msg in e.errors)

    if errors:
        raise InvalidConfigurationError(errors)
    return configs


def load_job_file(path: Path) -> list[ConversionConfig]:
    """Load and validate a job file.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfigurationError: If the file is not a valid job file.
    """
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError([f"Invalid YAML syntax: {e}"]) from e

    if data is None:
        raise InvalidConfigurationError(["Job file is empty"])
    if not isinstance(data, dict):
        raise InvalidConfigurationError(["Job file must be a YAML mapping"])

    configs = load_jobs_from_dict(data)
    logger.debug("Loaded %d conversion(s) from %s", len(configs), path)
    return configs
