# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML loader for ShapeQL compile options.

Example ``shapeql.yaml``::

    string-unions-as-enums: true
    custom-scalars:
      - name: JSON
        description: Arbitrary JSON value
      - name: URL
        specified-by-url: https://url.spec.whatwg.org/
"""

from __future__ import annotations

import re
from pathlib import Path

import yaml
from graphql import GraphQLScalarType

from shapeql.config.options import CompileOptions

# ###############
# Public Interface
# ###############


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


def load_config(path: Path) -> CompileOptions:
    """Load compile options from a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        The CompileOptions described by the file.

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


def parse_config(text: str, source_label: str = "<string>") -> CompileOptions:
    """Parse configuration YAML text into CompileOptions.

    An empty document yields the default options.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return CompileOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown key(s): {', '.join(unknown)}")

    as_enums = data.get("string-unions-as-enums", False)
    if not isinstance(as_enums, bool):
        raise ConfigError(f"{source_label}: 'string-unions-as-enums' must be a boolean")

    scalars: list[GraphQLScalarType] = []
    raw_scalars = data.get("custom-scalars", [])
    if not isinstance(raw_scalars, list):
        raise ConfigError(f"{source_label}: 'custom-scalars' must be a list")
    seen: set[str] = set()
    for index, entry in enumerate(raw_scalars):
        scalar = _parse_scalar(entry, f"{source_label}: custom-scalars[{index}]")
        if scalar.name in seen:
            raise ConfigError(f"{source_label}: duplicate custom scalar '{scalar.name}'")
        seen.add(scalar.name)
        scalars.append(scalar)

    return CompileOptions(custom_scalars=tuple(scalars), string_unions_as_enums=as_enums)


# ################
# Implementation
# ################

_KNOWN_KEYS: frozenset[str] = frozenset({"custom-scalars", "string-unions-as-enums"})
_GRAPHQL_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


def _require_string(mapping: dict[str, object], key: str, location: str) -> str:
    """Extract a required string field from a mapping, raising ConfigError if missing."""
    if key not in mapping:
        raise ConfigError(f"{location}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{location}: '{key}' must be a string")
    return value


def _optional_string(mapping: dict[str, object], key: str, location: str) -> str | None:
    if key not in mapping:
        return None
    return _require_string(mapping, key, location)


def _parse_scalar(entry: object, location: str) -> GraphQLScalarType:
    """Build a pass-through scalar from one ``custom-scalars`` entry."""
    if isinstance(entry, str):
        entry = {"name": entry}
    if not isinstance(entry, dict):
        raise ConfigError(f"{location} must be a scalar name or a YAML mapping")

    name = _require_string(entry, "name", location)
    if not _GRAPHQL_NAME.fullmatch(name) or name.startswith("__"):
        raise ConfigError(f"{location}: '{name}' is not a valid GraphQL name")
    return GraphQLScalarType(
        name=name,
        description=_optional_string(entry, "description", location),
        specified_by_url=_optional_string(entry, "specified-by-url", location),
    )
