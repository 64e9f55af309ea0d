# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the compile options configuration file."""

from pathlib import Path

import pytest
from graphql import GraphQLScalarType

from shapeql.config import CompileOptions, ConfigError, load_config, parse_config

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a config file and return its path."""
    config_file = tmp_path / "shapeql.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_empty_config_yields_defaults(tmp_path: Path) -> None:
    """An empty file parses to the default CompileOptions."""
    options = load_config(_write_config(tmp_path, ""))
    assert options == CompileOptions()


def test_string_unions_as_enums(tmp_path: Path) -> None:
    options = load_config(_write_config(tmp_path, "string-unions-as-enums: true\n"))
    assert options.string_unions_as_enums is True
    assert options.custom_scalars == ()


def test_custom_scalars(tmp_path: Path) -> None:
    """Scalar entries may be bare names or mappings with optional metadata."""
    content = """\
custom-scalars:
  - JSON
  - name: URL
    description: An absolute URL
    specified-by-url: https://url.spec.whatwg.org/
"""
    options = load_config(_write_config(tmp_path, content))

    json_scalar, url_scalar = options.custom_scalars
    assert isinstance(json_scalar, GraphQLScalarType)
    assert json_scalar.name == "JSON"
    assert json_scalar.description is None
    assert url_scalar.name == "URL"
    assert url_scalar.description == "An absolute URL"
    assert url_scalar.specified_by_url == "https://url.spec.whatwg.org/"


def test_scalar_table_is_keyed_by_name() -> None:
    options = parse_config("custom-scalars: [JSON, URL]")
    assert sorted(options.scalar_table()) == ["JSON", "URL"]


def test_custom_scalar_passes_values_through() -> None:
    (json_scalar,) = parse_config("custom-scalars: [JSON]").custom_scalars
    assert json_scalar.serialize({"a": 1}) == {"a": 1}
    assert json_scalar.parse_value([1, 2]) == [1, 2]


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "custom-scalars: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_non_mapping_raises() -> None:
    with pytest.raises(ConfigError, match="must be a YAML mapping"):
        parse_config("- a\n- b\n")


def test_unknown_key_raises() -> None:
    with pytest.raises(ConfigError, match="unknown key\\(s\\): scalars"):
        parse_config("scalars: []\n", source_label="shapeql.yaml")


def test_non_boolean_flag_raises() -> None:
    with pytest.raises(ConfigError, match="'string-unions-as-enums' must be a boolean"):
        parse_config("string-unions-as-enums: sometimes\n")


def test_custom_scalars_must_be_list() -> None:
    with pytest.raises(ConfigError, match="'custom-scalars' must be a list"):
        parse_config("custom-scalars: JSON\n")


def test_scalar_without_name_raises() -> None:
    with pytest.raises(ConfigError, match=r"custom-scalars\[0\]: missing required field 'name'"):
        parse_config("custom-scalars:\n  - description: nameless\n")


def test_invalid_scalar_name_raises() -> None:
    with pytest.raises(ConfigError, match="is not a valid GraphQL name"):
        parse_config("custom-scalars: [my-scalar]\n")


def test_duplicate_scalar_raises() -> None:
    with pytest.raises(ConfigError, match="duplicate custom scalar 'JSON'"):
        parse_config("custom-scalars: [JSON, {name: JSON}]\n")


def test_error_names_source(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "custom-scalars: 3\n")
    with pytest.raises(ConfigError, match="shapeql.yaml"):
        load_config(path)
