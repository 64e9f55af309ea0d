# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""ShapeQL: GraphQL schemas from TypeScript-style type declarations."""

from shapeql.compiler import CompilerError, compile_source, create_schema
from shapeql.config import CompileOptions, load_config
from shapeql.scalars import DateScalar, literal_union_scalar

__all__ = [
    "compile_source",
    "create_schema",
    "CompilerError",
    "CompileOptions",
    "load_config",
    "DateScalar",
    "literal_union_scalar",
]
