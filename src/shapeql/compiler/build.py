# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end compile workflow: declaration source text to GraphQL schema.

The stages run strictly in order (scan and parse, extract, synthesize) and
share no state between invocations. Any failure aborts the whole compile;
nothing partial is ever returned.
"""

from __future__ import annotations

import logging
from pathlib import Path

from graphql import GraphQLSchema

from shapeql.compiler.errors import CompilerError
from shapeql.compiler.extractor import extract
from shapeql.compiler.parser import ParseError, parse
from shapeql.compiler.scanner import LexerError
from shapeql.compiler.synthesizer import synthesize
from shapeql.config.options import CompileOptions

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def compile_source(
    source: str,
    options: CompileOptions | None = None,
    *,
    source_label: str = "<string>",
) -> GraphQLSchema:
    """Compile declaration source text into a GraphQL schema.

    Args:
        source: Text of a declaration file.
        options: Compile options; defaults to :class:`CompileOptions`.
        source_label: Name used for the source in error messages.

    Returns:
        The synthesized schema.

    Raises:
        CompilerError: On syntax errors (wrapped, naming *source_label*), or
            any declaration or synthesis error.
    """
    options = options or CompileOptions()
    try:
        unit = parse(source)
    except (LexerError, ParseError) as exc:
        raise CompilerError(f"Syntax error in {source_label}: {exc}") from exc
    logger.debug("Parsed %s: %d declarations", source_label, len(unit.declarations))

    descriptors = extract(unit, string_unions_as_enums=options.string_unions_as_enums)
    return synthesize(descriptors, options)


def create_schema(path: Path | str, options: CompileOptions | None = None) -> GraphQLSchema:
    """Read a declaration file and compile it into a GraphQL schema.

    Raises:
        CompilerError: If the file cannot be read or fails to compile.
    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompilerError(f"Cannot read '{path}': {exc}") from exc
    logger.debug("Compiling %s", path)
    return compile_source(source, options, source_label=str(path))
