# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the apiscribe project configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from apiscribe.assembler.config import DEFAULT_OPENAPI_VERSION
from apiscribe.assembler.typemap import TypeMapping

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAMES = (".apiscribe.yaml", ".apiscribe.yml", "apiscribe.config.yaml")
OUTPUT_FORMATS = ("yaml", "json")


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class ApiscribeConfig:
    """The parsed configuration of a scanned project.

    Attributes:
        pattern: Glob selecting source files below the scan root.
        ignore_paths: Root-relative path prefixes that are never scanned.
        output: Output file (single document) or directory (multiple documents).
        format: Serialization format, ``yaml`` or ``json``; ``None`` follows the
            output file extension and falls back to YAML.
        cache: Whether the checksum cache is read and written.
        clean_unused: Emit only the schemas reachable from operations.
        enum_refs: Emit enums as component references instead of inline.
        no_default: Leave the default document out of multi-document output.
        openapi_version: Value of the ``openapi`` field.
        custom_types: Extra type mappings keyed by type name.
    """

    pattern: str = "**/*.py"
    ignore_paths: list[str] = field(default_factory=list)
    output: str | None = None
    format: str | None = None
    cache: bool = True
    clean_unused: bool = True
    enum_refs: bool = True
    no_default: bool = False
    openapi_version: str = DEFAULT_OPENAPI_VERSION
    custom_types: dict[str, TypeMapping] = field(default_factory=dict)


def find_config(root: Path) -> Path | None:
    """Return the first configuration file present in *root*, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> ApiscribeConfig:
    """Load and parse an apiscribe configuration file.

    Args:
        path: Path to the configuration file.

    Returns:
        An ApiscribeConfig populated from the file; absent keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return parse_config(text, source_label=str(path))


def load_project_config(root: Path) -> ApiscribeConfig:
    """Load the configuration found in *root*, or the defaults when there is none."""
    path = find_config(root)
    if path is None:
        return ApiscribeConfig()
    return load_config(path)


def parse_config(text: str, source_label: str = "<string>") -> ApiscribeConfig:
    """Parse configuration YAML text.

    An empty document yields the default configuration.

    Raises:
        ConfigError: If the YAML is invalid or a key has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ApiscribeConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown key(s): {', '.join(map(str, unknown))}")

    config = ApiscribeConfig()
    if "pattern" in data:
        config.pattern = _require_string(data, "pattern", source_label)
    if "ignore-paths" in data:
        config.ignore_paths = _require_string_list(data, "ignore-paths", source_label)
    if "output" in data:
        config.output = _require_string(data, "output", source_label)
    if "format" in data:
        fmt = _require_string(data, "format", source_label).lower()
        if fmt not in OUTPUT_FORMATS:
            raise ConfigError(f"{source_label}: 'format' must be one of {', '.join(OUTPUT_FORMATS)}")
        config.format = fmt
    if "openapi-version" in data:
        config.openapi_version = _require_string(data, "openapi-version", source_label)
    for key, attribute in _BOOL_KEYS.items():
        if key in data:
            setattr(config, attribute, _require_bool(data, key, source_label))
    if "custom-types" in data:
        config.custom_types = _parse_custom_types(data["custom-types"], source_label)
    return config


# ################
# Implementation
# ################

_BOOL_KEYS = {
    "cache": "cache",
    "clean-unused": "clean_unused",
    "enum-refs": "enum_refs",
    "no-default": "no_default",
}

_KNOWN_KEYS = {"pattern", "ignore-paths", "output", "format", "openapi-version", "custom-types", *_BOOL_KEYS}


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    value = mapping[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be true or false")
    return value


def _require_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)


def _parse_custom_types(raw: object, source_label: str) -> dict[str, TypeMapping]:
    """Parse the ``custom-types`` mapping of type name to schema settings."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{source_label}: 'custom-types' must be a YAML mapping")
    mappings: dict[str, TypeMapping] = {}
    for name, entry in raw.items():
        location = f"{source_label}: custom-types[{name}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{location} must be a YAML mapping")
        if "type" not in entry:
            raise ConfigError(f"{location}: missing required field 'type'")
        schema_type = _require_string(entry, "type", location)
        fmt = _require_string(entry, "format", location) if "format" in entry else None
        mappings[str(name)] = TypeMapping(
            type=schema_type,
            format=fmt,
            example=entry.get("example"),
            default=entry.get("default"),
        )
    return mappings
