# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile-time error taxonomy.

Every error here is terminal for the current compile invocation. There is
no partial schema: compilation either fully succeeds or raises one of these.
"""

# ###############
# Public Interface
# ###############


class CompilerError(Exception):
    """Raised when the compiler encounters any unrecoverable error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DeclarationError(CompilerError):
    """Raised during extraction for a declaration shape that cannot be compiled.

    Attributes:
        declaration: Name of the offending declaration or member.
        line: 1-based line number of the declaration, or 0 when unknown.
        column: 1-based column number of the declaration, or 0 when unknown.
    """

    def __init__(self, message: str, declaration: str, line: int = 0, column: int = 0) -> None:
        location = f"Line {line}, column {column}: " if line else ""
        super().__init__(f"{location}{message}")
        self.declaration = declaration
        self.line = line
        self.column = column


class SynthesisError(CompilerError):
    """Raised when a descriptor cannot be materialized into a schema type.

    Attributes:
        descriptor: Label of the offending descriptor.
    """

    def __init__(self, message: str, descriptor: str) -> None:
        super().__init__(message)
        self.descriptor = descriptor


class RootResolutionError(SynthesisError):
    """Raised when neither a ``Query`` nor a ``Mutation`` root interface exists."""


class ModeMismatchError(SynthesisError):
    """Raised when a descriptor is unsupported in the requested input/output mode."""


class ScalarResolutionError(SynthesisError):
    """Raised when no step of the scalar fallback chain resolves a primitive."""
