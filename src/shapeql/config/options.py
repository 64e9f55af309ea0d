# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile options recognized by the schema synthesizer."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from graphql import GraphQLScalarType

from shapeql.model.descriptors import Primitive

# ###############
# Public Interface
# ###############

# Maps a primitive descriptor to a scalar, or None to fall through to the built-in mapping.
CustomScalarFactory = Callable[[Primitive], GraphQLScalarType | None]


@dataclass(frozen=True)
class CompileOptions:
    """Immutable configuration for one or more compile invocations.

    Attributes:
        custom_scalars: Pre-built scalars, consulted by name before the
            built-in primitive mapping.
        custom_scalar_factory: Called with each primitive descriptor the
            named table did not resolve.
        string_unions_as_enums: Classify top-level aliases made only of
            string literals as enums instead of literal-checked scalars.
    """

    custom_scalars: tuple[GraphQLScalarType, ...] = field(default_factory=tuple)
    custom_scalar_factory: CustomScalarFactory | None = None
    string_unions_as_enums: bool = False

    def scalar_table(self) -> dict[str, GraphQLScalarType]:
        """Return the custom scalars keyed by name."""
        return {scalar.name: scalar for scalar in self.custom_scalars}
