# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type descriptors: the deduplicated, possibly cyclic type graph built by the extractor.

Descriptors compare and hash by identity. Two references to the same
declaration share one descriptor object, and records may reach themselves
through their members, so structural equality would neither terminate nor
mean anything useful.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ###############
# Public Interface
# ###############

LiteralValue = str | int | float | bool


@dataclass(eq=False)
class Primitive:
    """A scalar leaf.

    Attributes:
        name: ``string``, ``number`` or ``boolean`` for built-in scalars, or
            the referenced name when the scalar is left for synthesis to resolve.
        raw_annotation: The annotation as written at the use site (``Int``,
            ``ID``, an alias name), used as a hint by scalar resolution.
        literal: The value of a single-literal type, if any.
    """

    name: str
    raw_annotation: str
    literal: LiteralValue | None = None

    def __repr__(self) -> str:
        if self.literal is not None:
            return f"Primitive({self.name}, literal={self.literal!r})"
        return f"Primitive({self.name}, raw={self.raw_annotation!r})"


@dataclass(eq=False)
class Native:
    """A built-in composite or opaque type: an array or a date."""

    kind: Literal["array", "date"]
    element: Descriptor | None = None

    def __repr__(self) -> str:
        if self.kind == "array":
            return f"Native(array of {self.element!r})"
        return "Native(date)"


@dataclass(eq=False)
class Member:
    """A field of a record, or an argument of a resolver member."""

    name: str
    type: Descriptor
    doc: str | None = None
    is_optional: bool = False
    is_nullable: bool = False
    default_literal: LiteralValue | None = None
    args: list[Member] | None = None

    @property
    def nullable(self) -> bool:
        """True when either the property is optional or its type admits null."""
        return self.is_optional or self.is_nullable

    def __repr__(self) -> str:
        return f"Member({self.name})"


@dataclass(eq=False)
class InterfaceNamed:
    """A top-level named record declaration."""

    id: int
    name: str
    doc: str | None = None
    members: list[Member] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"InterfaceNamed#{self.id}({self.name})"


@dataclass(eq=False)
class InterfaceLiteral:
    """An inline, unnamed record shape."""

    id: int
    doc: str | None = None
    members: list[Member] = field(default_factory=list)
    location: str = ""

    def __repr__(self) -> str:
        return f"InterfaceLiteral#{self.id}({self.location})"


@dataclass(eq=False)
class Union:
    """A named or inline alternation of descriptors."""

    id: int
    name: str | None = None
    doc: str | None = None
    members: list[Descriptor] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Union#{self.id}({self.name or 'anonymous'})"


@dataclass(eq=False)
class Enum:
    """A fixed set of string-literal primitives."""

    id: int
    name: str
    doc: str | None = None
    members: list[Primitive] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Enum#{self.id}({self.name})"


Descriptor = Primitive | Native | InterfaceNamed | InterfaceLiteral | Union | Enum


def describe(descriptor: Descriptor) -> str:
    """Return a short human-readable label for *descriptor*, for error messages."""
    if isinstance(descriptor, (InterfaceNamed, Enum)):
        return f"'{descriptor.name}'"
    if isinstance(descriptor, Union):
        return f"union '{descriptor.name}'" if descriptor.name else f"anonymous union #{descriptor.id}"
    if isinstance(descriptor, InterfaceLiteral):
        where = f" at {descriptor.location}" if descriptor.location else ""
        return f"anonymous object type #{descriptor.id}{where}"
    if isinstance(descriptor, Native):
        return "array" if descriptor.kind == "array" else "Date"
    if isinstance(descriptor, Primitive):
        return f"primitive '{descriptor.raw_annotation}'"
    raise TypeError(f"Not a type descriptor: {descriptor!r}")
