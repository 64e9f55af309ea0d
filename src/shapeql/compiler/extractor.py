# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-graph extraction: turns parsed declarations into a deduplicated descriptor graph.

Every declaration (and every inline object or union node) maps to exactly one
descriptor. The descriptor is allocated and registered before its members are
resolved, so a member that refers back to a declaration still under
construction receives the partially filled descriptor instead of recursing.
"""

from __future__ import annotations

import logging

from shapeql.compiler.errors import DeclarationError
from shapeql.model.declarations import (
    ArrayTypeExpr,
    Declaration,
    EnumDecl,
    FunctionTypeExpr,
    InterfaceDecl,
    KeywordTypeExpr,
    LiteralTypeExpr,
    ObjectTypeExpr,
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
    LiteralValue,
    Member,
    Native,
    Primitive,
    Union,
    describe,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Name of the two-parameter sentinel type ``Default<Type, Value>``.
DEFAULT_SENTINEL = "Default"

# Scalar names understood without a local declaration, mapped to their base primitive.
SCALAR_ALIASES: dict[str, str] = {"ID": "string", "Int": "number", "Float": "number"}


def extract(unit: SourceUnit, *, string_unions_as_enums: bool = False) -> list[Descriptor]:
    """Extract the descriptor graph of one compilation unit.

    Args:
        unit: The parsed compilation unit.
        string_unions_as_enums: Classify every top-level alias whose
            alternatives are all string literals as an :class:`Enum` instead
            of a :class:`Union`.

    Returns:
        The record, union and enum descriptors in first-visited order.
        Primitive and native descriptors are reachable from members but are
        not listed.

    Raises:
        DeclarationError: On duplicate declarations or any declaration shape
            that cannot be compiled.
    """
    return _Extractor(unit, string_unions_as_enums).extract()


# ################
# Implementation
# ################

_ARRAY_NAMES: frozenset[str] = frozenset({"Array", "ReadonlyArray"})
_DATE_NAMES: frozenset[str] = frozenset({"Date"})
_NULLISH: frozenset[str] = frozenset({"null", "undefined"})
_PRIMITIVE_KEYWORDS: frozenset[str] = frozenset({"string", "number", "boolean"})


def _is_nullish(expr: TypeExpr) -> bool:
    return isinstance(expr, KeywordTypeExpr) and expr.name in _NULLISH


def _literal_kind(value: LiteralValue) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"


def _literal_text(value: LiteralValue) -> str:
    """Render a literal the way it is written in a declaration file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)


def _is_int(value: LiteralValue) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _admits_default(descriptor: Descriptor, value: LiteralValue) -> bool:
    """True when *value* can be the default of a member typed *descriptor*.

    Scalars left for synthesis to resolve accept any literal; records,
    arrays, dates and object unions accept none.
    """
    if isinstance(descriptor, Enum):
        return isinstance(value, str) and any(m.literal == value for m in descriptor.members)
    if isinstance(descriptor, Union):
        literals = [m.literal for m in descriptor.members if isinstance(m, Primitive)]
        if len(literals) != len(descriptor.members) or not all(isinstance(lit, str) for lit in literals):
            return False
        return isinstance(value, str) and value in literals
    if not isinstance(descriptor, Primitive):
        return False
    if descriptor.literal is not None:
        return _literal_kind(value) == descriptor.name and value == descriptor.literal
    if descriptor.raw_annotation == "Int":
        return _is_int(value)
    if descriptor.raw_annotation == "ID":
        return isinstance(value, str) or _is_int(value)
    if descriptor.name in _PRIMITIVE_KEYWORDS:
        return _literal_kind(value) == descriptor.name
    return True


class _Extractor:
    """Builds descriptors for a single compilation unit."""

    def __init__(self, unit: SourceUnit, string_unions_as_enums: bool) -> None:
        self._unit = unit
        self._string_unions_as_enums = string_unions_as_enums
        self._declarations: dict[str, Declaration] = {}
        # Keyed by id() of the declaration or inline node; the nodes are owned
        # by the unit and outlive the extraction.
        self._descriptors: dict[int, Descriptor] = {}
        self._next_id = 0

    def extract(self) -> list[Descriptor]:
        """Visit every top-level declaration and return the descriptor list."""
        for decl in self._unit.declarations:
            if decl.name in self._declarations:
                raise DeclarationError(f"Duplicate declaration '{decl.name}'", decl.name, decl.line, decl.column)
            self._declarations[decl.name] = decl

        for decl in self._unit.declarations:
            if isinstance(decl, InterfaceDecl):
                self._interface(decl)
            elif isinstance(decl, EnumDecl):
                self._enum(decl)
            elif isinstance(decl, TypeAliasDecl):
                self._alias(decl)
            else:
                raise DeclarationError(f"Unsupported declaration {decl!r}", decl.name)

        descriptors = list(self._descriptors.values())
        logger.debug(
            "Extracted %d descriptors from %d declarations",
            len(descriptors),
            len(self._unit.declarations),
        )
        return descriptors

    # ------------------------------------------------------------------
    # Descriptor registry
    # ------------------------------------------------------------------

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _register(self, node: object, descriptor: Descriptor) -> None:
        """Record *descriptor* for *node* before any of its members are resolved."""
        self._descriptors[id(node)] = descriptor
        logger.debug("Allocated %r", descriptor)

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def _interface(self, decl: InterfaceDecl) -> InterfaceNamed:
        existing = self._descriptors.get(id(decl))
        if existing is not None:
            assert isinstance(existing, InterfaceNamed)
            return existing
        descriptor = InterfaceNamed(id=self._new_id(), name=decl.name, doc=decl.doc)
        self._register(decl, descriptor)
        descriptor.members.extend(self._interface_members(decl))
        return descriptor

    def _interface_members(self, decl: InterfaceDecl, chain: tuple[str, ...] = ()) -> list[Member]:
        """Resolve inherited members first, then own members overriding same-named ones.

        *chain* holds the interfaces whose ``extends`` clause led here.
        """
        if decl.name in chain:
            raise DeclarationError(
                f"Interface '{decl.name}' inherits from itself",
                decl.name,
                decl.line,
                decl.column,
            )
        by_name: dict[str, Member] = {}
        for base_name in decl.extends:
            base = self._declarations.get(base_name)
            if isinstance(base, InterfaceDecl):
                inherited = self._interface_members(base, (*chain, decl.name))
            elif isinstance(base, TypeAliasDecl) and isinstance(base.type, ObjectTypeExpr):
                inherited = self._members(base.type.members, base.name)
            else:
                raise DeclarationError(
                    f"Interface '{decl.name}' extends '{base_name}', which is not an interface "
                    "or object type declared in this file",
                    decl.name,
                    decl.line,
                    decl.column,
                )
            for member in inherited:
                by_name[member.name] = member
        for member in self._members(decl.members, decl.name):
            by_name[member.name] = member
        return list(by_name.values())

    def _enum(self, decl: EnumDecl) -> Enum:
        existing = self._descriptors.get(id(decl))
        if existing is not None:
            assert isinstance(existing, Enum)
            return existing
        descriptor = Enum(id=self._new_id(), name=decl.name, doc=decl.doc)
        self._register(decl, descriptor)
        for member in decl.members:
            if not isinstance(member.value, str):
                raise DeclarationError(
                    f"Enum '{decl.name}' member '{member.name}' must be initialized with a string literal",
                    decl.name,
                    decl.line,
                    decl.column,
                )
            descriptor.members.append(
                Primitive(name="string", raw_annotation=f"{decl.name}.{member.name}", literal=member.value)
            )
        return descriptor

    def _alias(self, decl: TypeAliasDecl) -> Descriptor | None:
        """Return the descriptor of an alias that names a shape, or None for a transparent alias."""
        existing = self._descriptors.get(id(decl))
        if existing is not None:
            return existing
        if not self._names_shape(decl):
            return None

        alternatives = self._alternatives(decl.type)
        if len(alternatives) == 1:
            obj = alternatives[0]
            assert isinstance(obj, ObjectTypeExpr)
            record = InterfaceNamed(id=self._new_id(), name=decl.name, doc=decl.doc)
            self._register(decl, record)
            record.members.extend(self._members(obj.members, decl.name))
            return record

        if self._string_unions_as_enums and all(isinstance(a, LiteralTypeExpr) for a in alternatives):
            values = [a.value for a in alternatives if isinstance(a, LiteralTypeExpr)]
            if all(isinstance(v, str) for v in values):
                enum = Enum(id=self._new_id(), name=decl.name, doc=decl.doc)
                self._register(decl, enum)
                enum.members.extend(
                    Primitive(name="string", raw_annotation=_literal_text(v), literal=v) for v in values
                )
                return enum
            if any(isinstance(v, str) for v in values):
                raise DeclarationError(
                    f"Type alias '{decl.name}' mixes string and non-string literals and cannot be an enum",
                    decl.name,
                    decl.line,
                    decl.column,
                )

        union = Union(id=self._new_id(), name=decl.name, doc=decl.doc)
        self._register(decl, union)
        union.members.extend(self._alternative(a, decl.name) for a in alternatives)
        return union

    def _names_shape(self, decl: TypeAliasDecl) -> bool:
        """True when the alias introduces a record, union or enum rather than renaming a type."""
        alternatives = self._alternatives(decl.type)
        if len(alternatives) >= 2:
            return True
        return len(alternatives) == 1 and isinstance(alternatives[0], ObjectTypeExpr)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _members(self, signatures: list[PropertySignature], owner: str) -> list[Member]:
        return [self._member(sig, owner) for sig in signatures]

    def _member(self, sig: PropertySignature, owner: str) -> Member:
        """Resolve one property or method signature into a Member."""
        where = f"{owner}.{sig.name}"
        type_expr = sig.type
        args: list[Member] | None = None
        if isinstance(type_expr, FunctionTypeExpr):
            args = self._arguments(type_expr, sig, where)
            type_expr = type_expr.return_type

        default: LiteralValue | None = None
        if isinstance(type_expr, ReferenceTypeExpr) and type_expr.name == DEFAULT_SENTINEL:
            type_expr, default = self._unwrap_default(type_expr, sig, where)

        type_expr, nullable, raw = self._strip(type_expr, where)
        descriptor = self._resolve(type_expr, raw, where)
        if default is not None and not _admits_default(descriptor, default):
            raise DeclarationError(
                f"Default value {_literal_text(default)} of '{where}' does not match its type {describe(descriptor)}",
                where,
                sig.line,
                sig.column,
            )
        return Member(
            name=sig.name,
            type=descriptor,
            doc=sig.doc,
            is_optional=sig.optional,
            is_nullable=nullable,
            default_literal=default,
            args=args,
        )

    def _arguments(self, signature: FunctionTypeExpr, sig: PropertySignature, where: str) -> list[Member] | None:
        """Return the member list of a resolver's single parameter bag."""
        if len(signature.parameters) > 1:
            raise DeclarationError(
                f"Resolver '{where}' declares {len(signature.parameters)} parameters; "
                "only a single argument object is supported",
                where,
                sig.line,
                sig.column,
            )
        if not signature.parameters:
            return None
        param = signature.parameters[0]
        param_type, _, raw = self._strip(param.type, where)
        bag = self._resolve(param_type, raw, f"{where}({param.name})")
        if not isinstance(bag, (InterfaceNamed, InterfaceLiteral)):
            raise DeclarationError(
                f"Parameter '{param.name}' of resolver '{where}' must be an object type",
                where,
                sig.line,
                sig.column,
            )
        return bag.members

    def _unwrap_default(
        self, ref: ReferenceTypeExpr, sig: PropertySignature, where: str
    ) -> tuple[TypeExpr, LiteralValue]:
        """Split ``Default<Type, Value>`` into the actual type and the literal default."""
        if len(ref.type_arguments) != 2 or not isinstance(ref.type_arguments[1], LiteralTypeExpr):
            raise DeclarationError(
                f"Malformed default-value annotation on '{where}': expected {DEFAULT_SENTINEL}<Type, literal>",
                where,
                sig.line,
                sig.column,
            )
        actual, value = ref.type_arguments
        assert isinstance(value, LiteralTypeExpr)
        return actual, value.value

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def _flatten(self, expr: TypeExpr, seen: frozenset[str] = frozenset()) -> list[TypeExpr]:
        """Flatten nested unions, expanding references to union aliases in place."""
        if isinstance(expr, UnionTypeExpr):
            flat: list[TypeExpr] = []
            for member in expr.members:
                flat.extend(self._flatten(member, seen))
            return flat
        if isinstance(expr, ReferenceTypeExpr) and not expr.type_arguments:
            decl = self._declarations.get(expr.name)
            if isinstance(decl, TypeAliasDecl) and isinstance(decl.type, UnionTypeExpr) and decl.name not in seen:
                return self._flatten(decl.type, seen | {decl.name})
        return [expr]

    def _alternatives(self, expr: TypeExpr) -> list[TypeExpr]:
        """Return the non-null alternatives of *expr* (itself, unless it is a union)."""
        if not isinstance(expr, UnionTypeExpr):
            return [expr]
        return [m for m in self._flatten(expr) if not _is_nullish(m)]

    def _strip(self, expr: TypeExpr, where: str) -> tuple[TypeExpr, bool, str | None]:
        """Strip null/undefined alternatives, ``Promise<T>`` and transparent aliases.

        Returns:
            The remaining type expression, whether a nullish alternative was
            removed anywhere along the way, and the innermost alias name seen
            (used as the raw annotation of primitives).
        """
        nullable = False
        raw: str | None = None
        seen: set[str] = set()
        while True:
            if isinstance(expr, UnionTypeExpr):
                if any(_is_nullish(m) for m in self._flatten(expr)):
                    nullable = True
                # Nullish members are split off the written members; union aliases stay unexpanded.
                alternatives = [m for m in expr.members if not all(_is_nullish(f) for f in self._flatten(m))]
                if not alternatives:
                    raise DeclarationError(f"Type of '{where}' has no non-null alternative", where)
                if len(alternatives) >= 2:
                    return expr, nullable, raw
                expr = alternatives[0]
                continue
            if _is_nullish(expr):
                raise DeclarationError(f"Type of '{where}' has no non-null alternative", where)
            if not isinstance(expr, ReferenceTypeExpr):
                return expr, nullable, raw
            if expr.name == "Promise" and len(expr.type_arguments) == 1:
                expr = expr.type_arguments[0]
                continue
            decl = self._declarations.get(expr.name)
            if not isinstance(decl, TypeAliasDecl):
                return expr, nullable, raw
            if self._names_shape(decl):
                if isinstance(decl.type, UnionTypeExpr) and any(_is_nullish(m) for m in self._flatten(decl.type)):
                    nullable = True
                return expr, nullable, raw
            if decl.name in seen:
                raise DeclarationError(
                    f"Type alias '{decl.name}' refers to itself",
                    decl.name,
                    decl.line,
                    decl.column,
                )
            seen.add(decl.name)
            raw = decl.name
            expr = decl.type

    def _resolve(self, expr: TypeExpr, raw: str | None, where: str) -> Descriptor:
        """Resolve a stripped type expression to its descriptor."""
        if isinstance(expr, KeywordTypeExpr):
            if expr.name in _PRIMITIVE_KEYWORDS:
                return Primitive(name=expr.name, raw_annotation=raw or expr.name)
            raise DeclarationError(f"Unsupported type '{expr.name}' for '{where}'", where)
        if isinstance(expr, LiteralTypeExpr):
            return Primitive(
                name=_literal_kind(expr.value),
                raw_annotation=raw or _literal_text(expr.value),
                literal=expr.value,
            )
        if isinstance(expr, ArrayTypeExpr):
            return self._array(expr.element, where)
        if isinstance(expr, ObjectTypeExpr):
            return self._object_literal(expr, where)
        if isinstance(expr, UnionTypeExpr):
            return self._inline_union(expr, where)
        if isinstance(expr, ReferenceTypeExpr):
            return self._reference(expr, raw, where)
        if isinstance(expr, FunctionTypeExpr):
            raise DeclarationError(
                f"Function type of '{where}' is only supported as the type of an interface member",
                where,
            )
        raise DeclarationError(f"Unsupported type expression for '{where}': {expr!r}", where)

    def _array(self, element: TypeExpr, where: str) -> Native:
        element, _, raw = self._strip(element, where)
        return Native(kind="array", element=self._resolve(element, raw, where))

    def _alternative(self, expr: TypeExpr, where: str) -> Descriptor:
        expr, _, raw = self._strip(expr, where)
        return self._resolve(expr, raw, where)

    def _reference(self, ref: ReferenceTypeExpr, raw: str | None, where: str) -> Descriptor:
        name = ref.name
        decl = self._declarations.get(name)
        if decl is None:
            if name in _ARRAY_NAMES:
                if len(ref.type_arguments) != 1:
                    raise DeclarationError(
                        f"'{name}' of '{where}' expects one type argument", where, ref.line, ref.column
                    )
                return self._array(ref.type_arguments[0], where)
            if name == DEFAULT_SENTINEL:
                raise DeclarationError(
                    f"'{DEFAULT_SENTINEL}' of '{where}' is only allowed as the outermost type of a member",
                    where,
                    ref.line,
                    ref.column,
                )
            if ref.type_arguments:
                raise DeclarationError(f"Unknown generic type '{name}' for '{where}'", where, ref.line, ref.column)
            if name in _DATE_NAMES:
                return Native(kind="date")
            # Left for scalar resolution at synthesis time.
            return Primitive(name=SCALAR_ALIASES.get(name, name), raw_annotation=name)

        if ref.type_arguments:
            raise DeclarationError(f"'{name}' of '{where}' does not take type arguments", where, ref.line, ref.column)
        if isinstance(decl, InterfaceDecl):
            return self._interface(decl)
        if isinstance(decl, EnumDecl):
            return self._enum(decl)
        descriptor = self._alias(decl)
        if descriptor is None:
            raise DeclarationError(f"Type alias '{name}' of '{where}' could not be resolved", where)
        return descriptor

    def _object_literal(self, node: ObjectTypeExpr, where: str) -> InterfaceLiteral:
        existing = self._descriptors.get(id(node))
        if existing is not None:
            assert isinstance(existing, InterfaceLiteral)
            return existing
        descriptor = InterfaceLiteral(id=self._new_id(), location=f"{where}, line {node.line}")
        self._register(node, descriptor)
        descriptor.members.extend(self._members(node.members, where))
        return descriptor

    def _inline_union(self, node: UnionTypeExpr, where: str) -> Union:
        existing = self._descriptors.get(id(node))
        if existing is not None:
            assert isinstance(existing, Union)
            return existing
        descriptor = Union(id=self._new_id())
        self._register(node, descriptor)
        descriptor.members.extend(self._alternative(a, where) for a in self._alternatives(node))
        return descriptor
