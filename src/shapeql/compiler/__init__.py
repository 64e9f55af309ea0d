# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline for declaration files: scanning, parsing, extraction and schema synthesis."""

from shapeql.compiler.build import compile_source, create_schema
from shapeql.compiler.errors import (
    CompilerError,
    DeclarationError,
    ModeMismatchError,
    RootResolutionError,
    ScalarResolutionError,
    SynthesisError,
)
from shapeql.compiler.extractor import extract
from shapeql.compiler.parser import ParseError, parse
from shapeql.compiler.scanner import LexerError, tokenize
from shapeql.compiler.synthesizer import Mode, synthesize

__all__ = [
    "tokenize",
    "LexerError",
    "parse",
    "ParseError",
    "extract",
    "synthesize",
    "Mode",
    "compile_source",
    "create_schema",
    "CompilerError",
    "DeclarationError",
    "SynthesisError",
    "RootResolutionError",
    "ModeMismatchError",
    "ScalarResolutionError",
]
