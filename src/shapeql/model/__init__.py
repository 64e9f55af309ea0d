# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration model and type descriptors for ShapeQL."""

from shapeql.model.declarations import (
    ArrayTypeExpr,
    Declaration,
    EnumDecl,
    EnumMemberDecl,
    FunctionTypeExpr,
    ImportDecl,
    InterfaceDecl,
    KeywordTypeExpr,
    LiteralTypeExpr,
    ObjectTypeExpr,
    Parameter,
    PropertySignature,
    ReferenceTypeExpr,
    SourceUnit,
    TypeAliasDecl,
    TypeExpr,
    UnionTypeExpr,
)
from shapeql.model.descriptors import (
    Descriptor,
    Enum,
    InterfaceLiteral,
    InterfaceNamed,
    Member,
    Native,
    Primitive,
    Union,
    describe,
)

__all__ = [
    # Declarations
    "SourceUnit",
    "ImportDecl",
    "Declaration",
    "InterfaceDecl",
    "TypeAliasDecl",
    "EnumDecl",
    "EnumMemberDecl",
    "PropertySignature",
    "Parameter",
    "TypeExpr",
    "KeywordTypeExpr",
    "LiteralTypeExpr",
    "ReferenceTypeExpr",
    "ArrayTypeExpr",
    "UnionTypeExpr",
    "ObjectTypeExpr",
    "FunctionTypeExpr",
    # Descriptors
    "Descriptor",
    "Primitive",
    "Native",
    "Member",
    "InterfaceNamed",
    "InterfaceLiteral",
    "Union",
    "Enum",
    "describe",
]
