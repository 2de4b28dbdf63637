"""Loading configuration files from disk and validating them."""

from __future__ import annotations

import os
from pathlib import Path

from claudemerge.types import (
    Config,
    ConfigError,
    PriorityType,
    detect_format,
    parse_config,
)


def load_config(filename: str | os.PathLike[str]) -> Config:
    """Read, detect the format of, and parse a configuration file."""
    name = os.fspath(filename)
    try:
        data = Path(name).read_bytes()
    except OSError as exc:
        raise ConfigError(f"failed to read file {name}: {exc}") from exc

    file_format = detect_format(name)

    try:
        config = parse_config(data, file_format)
    except ConfigError as exc:
        raise ConfigError(f"failed to parse {name}: {exc}") from exc

    config.source_file = name
    config.source_format = file_format
    return config


def validate_config(config: Config) -> Config:
    """Check that a configuration is usable; return it unchanged if so."""
    if not config.metadata.title:
        raise ConfigError("config missing title in metadata")
    if not config.sections:
        raise ConfigError("config has no sections")
    for name, section in config.sections.items():
        priority = section.priority
        if priority.type is not PriorityType.NONE and priority.value < 0:
            raise ConfigError(f"section {name} has invalid priority value: {priority.value}")
    return config