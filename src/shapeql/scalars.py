# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scalar types materialized by the synthesizer.

Value errors raised here surface during query execution as request-level
``GraphQLError`` entries, never during schema construction.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from graphql import GraphQLError, GraphQLScalarType, StringValueNode, ValueNode, print_ast

# ###############
# Public Interface
# ###############


def serialize_date(value: Any) -> str:
    """Serialize a ``datetime`` to the 24-character form ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Aware values are converted to UTC; naive values are taken to be UTC.
    """
    if not isinstance(value, datetime):
        raise GraphQLError(f"Date cannot represent a non-datetime value: {value!r}")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}.{value.microsecond // 1000:03d}Z"
    )
    if len(text) != _TIMESTAMP_LENGTH:
        raise GraphQLError(f"Date cannot represent a value outside years 0000-9999: {value!r}")
    return text


def parse_date(value: Any) -> datetime:
    """Parse a 24-character UTC timestamp into an aware ``datetime``."""
    if not isinstance(value, str) or len(value) != _TIMESTAMP_LENGTH or not _TIMESTAMP.fullmatch(value):
        raise GraphQLError(f"Date cannot represent value: {value!r}; expected YYYY-MM-DDTHH:MM:SS.mmmZ")
    try:
        parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError as exc:
        raise GraphQLError(f"Date cannot represent an invalid timestamp: {value!r}") from exc
    return parsed.replace(tzinfo=timezone.utc)


def parse_date_literal(value_node: ValueNode, _variables: Any = None) -> datetime:
    if not isinstance(value_node, StringValueNode):
        raise GraphQLError(f"Date cannot represent a non-string value: {print_ast(value_node)}", value_node)
    return parse_date(value_node.value)


DateScalar = GraphQLScalarType(
    name="Date",
    description="A UTC timestamp serialized as YYYY-MM-DDTHH:MM:SS.mmmZ.",
    serialize=serialize_date,
    parse_value=parse_date,
    parse_literal=parse_date_literal,
)


def literal_union_scalar(name: str, literals: Iterable[str], description: str | None = None) -> GraphQLScalarType:
    """Build a string scalar that only admits the given literal values.

    The same check guards serialization, variable values and inline literals.
    """
    allowed = tuple(literals)
    expected = " | ".join(f'"{literal}"' for literal in allowed)

    def validate(value: Any) -> str:
        if not isinstance(value, str) or value not in allowed:
            raise GraphQLError(f"{name} ({expected}) does not have value: {value!r}")
        return value

    def parse_literal(value_node: ValueNode, _variables: Any = None) -> str:
        if not isinstance(value_node, StringValueNode):
            raise GraphQLError(f"{name} expects a string literal, got {print_ast(value_node)}", value_node)
        return validate(value_node.value)

    return GraphQLScalarType(
        name=name,
        description=description,
        serialize=validate,
        parse_value=validate,
        parse_literal=parse_literal,
    )


# ################
# Implementation
# ################

_TIMESTAMP_LENGTH = 24
_TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z")
