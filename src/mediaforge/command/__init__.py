"""Command generation: filter chains and ffmpeg argument vectors."""

from mediaforge.command.generator import (
    ValidationResult,
    display_command,
    generate,
    generate_string,
    probe_args,
    validate,
)

__all__ = [
    "ValidationResult",
    "display_command",
    "generate",
    "generate_string",
    "probe_args",
    "validate",
]
