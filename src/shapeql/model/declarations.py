# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration model produced by the parser: one compilation unit of type declarations."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

KeywordName = Literal["string", "number", "boolean", "null", "undefined", "any", "unknown", "void", "never"]


class KeywordTypeExpr(BaseModel):
    """A built-in keyword type such as ``string`` or ``null``."""

    kind: Literal["keyword"] = "keyword"
    name: KeywordName


class LiteralTypeExpr(BaseModel):
    """A single-value literal type: ``'Foo'``, ``12`` or ``true``."""

    kind: Literal["literal"] = "literal"
    value: bool | int | float | str


class ReferenceTypeExpr(BaseModel):
    """A reference to a named type, with optional type arguments."""

    kind: Literal["reference"] = "reference"
    name: str
    type_arguments: list[TypeExpr] = _Field(default_factory=list)
    line: int = 0
    column: int = 0


class ArrayTypeExpr(BaseModel):
    """A postfix array type ``T[]``."""

    kind: Literal["array"] = "array"
    element: TypeExpr


class UnionTypeExpr(BaseModel):
    """An alternation ``A | B | ...`` of two or more type expressions."""

    kind: Literal["union"] = "union"
    members: list[TypeExpr]


class ObjectTypeExpr(BaseModel):
    """An inline object literal type ``{ a: string; b?: number }``."""

    kind: Literal["object"] = "object"
    members: list[PropertySignature] = _Field(default_factory=list)
    line: int = 0
    column: int = 0


class FunctionTypeExpr(BaseModel):
    """A call signature: a method member or a ``(args: T) => R`` type."""

    kind: Literal["function"] = "function"
    parameters: list[Parameter] = _Field(default_factory=list)
    return_type: TypeExpr


# A type expression; the `kind` discriminator keeps nested unions unambiguous.
TypeExpr = Annotated[
    KeywordTypeExpr
    | LiteralTypeExpr
    | ReferenceTypeExpr
    | ArrayTypeExpr
    | UnionTypeExpr
    | ObjectTypeExpr
    | FunctionTypeExpr,
    _Field(discriminator="kind"),
]


class Parameter(BaseModel):
    """A single call-signature parameter."""

    name: str
    type: TypeExpr
    optional: bool = False


class PropertySignature(BaseModel):
    """A property or method declared inside an interface or object literal."""

    name: str
    type: TypeExpr
    optional: bool = False
    readonly: bool = False
    doc: str | None = None
    line: int = 0
    column: int = 0


class InterfaceDecl(BaseModel):
    """A top-level ``interface`` declaration."""

    kind: Literal["interface"] = "interface"
    name: str
    extends: list[str] = _Field(default_factory=list)
    members: list[PropertySignature] = _Field(default_factory=list)
    doc: str | None = None
    line: int = 0
    column: int = 0


class TypeAliasDecl(BaseModel):
    """A top-level ``type Name = ...`` declaration."""

    kind: Literal["alias"] = "alias"
    name: str
    type: TypeExpr
    doc: str | None = None
    line: int = 0
    column: int = 0


class EnumMemberDecl(BaseModel):
    """One ``Name = value`` entry of an ``enum`` declaration."""

    name: str
    value: int | float | str | None = None
    doc: str | None = None


class EnumDecl(BaseModel):
    """A top-level ``enum`` declaration."""

    kind: Literal["enum"] = "enum"
    name: str
    members: list[EnumMemberDecl] = _Field(default_factory=list)
    doc: str | None = None
    line: int = 0
    column: int = 0


Declaration = Annotated[InterfaceDecl | TypeAliasDecl | EnumDecl, _Field(discriminator="kind")]


class ImportDecl(BaseModel):
    """An ``import { A, B } from "module"`` statement; recorded but not resolved."""

    source: str
    names: list[str] = _Field(default_factory=list)


class SourceUnit(BaseModel):
    """The parsed contents of one compilation unit, declarations in source order."""

    imports: list[ImportDecl] = _Field(default_factory=list)
    declarations: list[Declaration] = _Field(default_factory=list)


# Resolve forward references for the mutually recursive type expressions.
ReferenceTypeExpr.model_rebuild()
ArrayTypeExpr.model_rebuild()
UnionTypeExpr.model_rebuild()
ObjectTypeExpr.model_rebuild()
FunctionTypeExpr.model_rebuild()
Parameter.model_rebuild()
PropertySignature.model_rebuild()
