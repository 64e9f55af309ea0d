# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile options and their YAML configuration file."""

from shapeql.config.loader import ConfigError, load_config, parse_config
from shapeql.config.options import CompileOptions, CustomScalarFactory

__all__ = [
    "CompileOptions",
    "CustomScalarFactory",
    "ConfigError",
    "load_config",
    "parse_config",
]
