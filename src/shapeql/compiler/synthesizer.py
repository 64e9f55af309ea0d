# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema synthesis: materializes a descriptor graph into graphql-core types.

Synthesis is driven depth-first from the ``Query`` and ``Mutation`` roots.
Every named type is cached per (descriptor, mode) before its fields or
members are synthesized, so cyclic descriptor graphs terminate and each
logical type is materialized exactly once per mode.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLFloat,
    GraphQLID,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    GraphQLString,
    GraphQLType,
    GraphQLUnionType,
    Undefined,
)

from shapeql.compiler.errors import ModeMismatchError, RootResolutionError, ScalarResolutionError, SynthesisError
from shapeql.config.options import CompileOptions
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
from shapeql.scalars import DateScalar, literal_union_scalar

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class Mode(enum.Enum):
    """Whether a descriptor is materialized as an input or an output type."""

    INPUT = "input"
    OUTPUT = "output"


# Appended to the name of a record materialized in input mode.
INPUT_SUFFIX = "Input"

# Literal-valued member that names an anonymous record; never materialized as a field.
TYPENAME_FIELD = "__typename"

QUERY_ROOT = "Query"
MUTATION_ROOT = "Mutation"


def synthesize(descriptors: list[Descriptor], options: CompileOptions | None = None) -> GraphQLSchema:
    """Build a GraphQL schema from an extracted descriptor list.

    Args:
        descriptors: Output of :func:`shapeql.compiler.extractor.extract`.
        options: Custom scalar configuration; defaults to no custom scalars.

    Returns:
        A schema whose query root is ``Query`` and whose mutation root, if
        declared, is ``Mutation``.

    Raises:
        RootResolutionError: If neither root interface is present.
        ModeMismatchError: If a descriptor cannot be used in the required mode.
        ScalarResolutionError: If a primitive matches no scalar.
        SynthesisError: On any other descriptor that cannot be materialized.
    """
    return _SchemaSynthesizer(options or CompileOptions()).build(descriptors)


# ################
# Implementation
# ################

_GRAPHQL_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")
_RESERVED_ENUM_VALUES: frozenset[str] = frozenset({"true", "false", "null"})
_BUILTIN_SCALARS: tuple[GraphQLScalarType, ...] = (GraphQLID, GraphQLString, GraphQLInt, GraphQLFloat, GraphQLBoolean)


def _non_null(gql_type: GraphQLType, nullable: bool) -> GraphQLType:
    """Wrap *gql_type* in GraphQLNonNull unless it is nullable or already wrapped."""
    if nullable or isinstance(gql_type, GraphQLNonNull):
        return gql_type
    return GraphQLNonNull(gql_type)


def _typename_literal(descriptor: InterfaceLiteral) -> str | None:
    """Return the string literal of a ``__typename`` member, if the shape has one."""
    for member in descriptor.members:
        if (
            member.name == TYPENAME_FIELD
            and isinstance(member.type, Primitive)
            and isinstance(member.type.literal, str)
        ):
            return member.type.literal
    return None


class _SchemaSynthesizer:
    """Per-invocation synthesis state: the mode cache, type names and anonymous counter."""

    def __init__(self, options: CompileOptions) -> None:
        self._scalars = options.scalar_table()
        self._scalar_factory = options.custom_scalar_factory
        self._cache: dict[tuple[int, Mode], GraphQLNamedType] = {}
        self._names: dict[str, GraphQLNamedType] = {scalar.name: scalar for scalar in _BUILTIN_SCALARS}
        # Label of the descriptor each name was claimed for, for collision messages.
        self._owners: dict[str, str] = {scalar.name: "the built-in scalar" for scalar in _BUILTIN_SCALARS}
        self._literal_scalars: dict[tuple[str, ...], GraphQLScalarType] = {}
        self._anonymous_index = 0

    def build(self, descriptors: list[Descriptor]) -> GraphQLSchema:
        roots: dict[str, InterfaceNamed] = {}
        for descriptor in descriptors:
            if isinstance(descriptor, InterfaceNamed) and descriptor.name in (QUERY_ROOT, MUTATION_ROOT):
                if descriptor.name in roots:
                    raise RootResolutionError(f"More than one '{descriptor.name}' root found", descriptor.name)
                roots[descriptor.name] = descriptor
        if not roots:
            raise RootResolutionError(
                f"No '{QUERY_ROOT}' or '{MUTATION_ROOT}' interface found among top-level declarations",
                "<schema>",
            )

        query = self._root(roots.get(QUERY_ROOT))
        mutation = self._root(roots.get(MUTATION_ROOT))
        logger.debug("Synthesized %d named types", len(self._names) - len(_BUILTIN_SCALARS))
        return GraphQLSchema(query=query, mutation=mutation)

    def _root(self, descriptor: InterfaceNamed | None) -> GraphQLObjectType | None:
        if descriptor is None:
            return None
        logger.debug("Resolving root %s", descriptor.name)
        root = self.synthesize(descriptor, Mode.OUTPUT)
        assert isinstance(root, GraphQLObjectType)
        return root

    def synthesize(self, descriptor: Descriptor, mode: Mode) -> GraphQLType:
        """Materialize *descriptor* for *mode*, reusing any type already built for the pair."""
        cached = self._cache.get((id(descriptor), mode))
        if cached is not None:
            logger.debug("Reusing %s for %r in %s mode", cached.name, descriptor, mode.value)
            return cached

        if isinstance(descriptor, Primitive):
            return self._primitive(descriptor)
        if isinstance(descriptor, Native):
            return self._native(descriptor, mode)
        if isinstance(descriptor, (InterfaceNamed, InterfaceLiteral)):
            return self._record(descriptor, mode)
        if isinstance(descriptor, Union):
            if mode is Mode.OUTPUT:
                return self._output_union(descriptor)
            return self._input_union(descriptor)
        if isinstance(descriptor, Enum):
            return self._enum(descriptor)
        raise SynthesisError(f"Unsupported descriptor {descriptor!r}", repr(descriptor))

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _claim(self, name: str, gql_type: GraphQLNamedType, descriptor: Descriptor) -> None:
        """Reserve *name* for *gql_type*, rejecting invalid names and collisions."""
        label = describe(descriptor)
        if not _GRAPHQL_NAME.fullmatch(name) or name.startswith("__"):
            raise SynthesisError(f"'{name}' of {label} is not a valid GraphQL type name", label)
        existing = self._names.get(name)
        if existing is not None and existing is not gql_type:
            raise SynthesisError(
                f"Type name '{name}' of {label} is already used by {self._owners[name]}",
                label,
            )
        self._names[name] = gql_type
        self._owners.setdefault(name, label)

    def _anonymous_name(self, prefix: str) -> str:
        self._anonymous_index += 1
        return f"{prefix}{self._anonymous_index}"

    def _record_name(self, descriptor: InterfaceNamed | InterfaceLiteral, mode: Mode) -> str:
        suffix = INPUT_SUFFIX if mode is Mode.INPUT else ""
        if isinstance(descriptor, InterfaceNamed):
            return descriptor.name + suffix
        discriminant = _typename_literal(descriptor)
        if discriminant is not None:
            return discriminant + suffix
        name = self._anonymous_name("Anonymous" + suffix)
        logger.debug("Named %r %s", descriptor, name)
        return name

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def _primitive(self, descriptor: Primitive) -> GraphQLScalarType:
        """Resolve a primitive through the scalar fallback chain."""
        if descriptor.raw_annotation == "ID":
            return GraphQLID

        scalar = self._scalars.get(descriptor.raw_annotation) or self._scalars.get(descriptor.name)
        if scalar is None and self._scalar_factory is not None:
            scalar = self._scalar_factory(descriptor)
        if scalar is not None:
            existing = self._names.get(scalar.name)
            if isinstance(existing, GraphQLScalarType):
                return existing
            self._claim(scalar.name, scalar, descriptor)
            return scalar

        if descriptor.name == "number":
            return GraphQLInt if descriptor.raw_annotation == "Int" else GraphQLFloat
        if descriptor.name == "string":
            return GraphQLString
        if descriptor.name == "boolean":
            return GraphQLBoolean
        raise ScalarResolutionError(
            f"Cannot resolve scalar for {describe(descriptor)}: it is not a built-in primitive "
            "and no custom scalar matched it",
            describe(descriptor),
        )

    def _native(self, descriptor: Native, mode: Mode) -> GraphQLType:
        if descriptor.kind == "date":
            self._claim(DateScalar.name, DateScalar, descriptor)
            return DateScalar
        if descriptor.element is None:
            raise SynthesisError("Array descriptor has no element type", describe(descriptor))
        return GraphQLList(_non_null(self.synthesize(descriptor.element, mode), False))

    def _literal_scalar(self, descriptor: Union) -> GraphQLScalarType:
        """Materialize a union of string literals as one literal-checked scalar for both modes."""
        literals = [m.literal for m in descriptor.members if isinstance(m, Primitive) and isinstance(m.literal, str)]
        if descriptor.name is None and tuple(literals) in self._literal_scalars:
            scalar = self._literal_scalars[tuple(literals)]
        else:
            name = descriptor.name or "__".join(re.sub(r"[^A-Za-z]+", "_", literal) for literal in literals)
            scalar = literal_union_scalar(name, literals, descriptor.doc)
            self._claim(name, scalar, descriptor)
            if descriptor.name is None:
                self._literal_scalars[tuple(literals)] = scalar
        self._cache[(id(descriptor), Mode.INPUT)] = scalar
        self._cache[(id(descriptor), Mode.OUTPUT)] = scalar
        return scalar

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _record(self, descriptor: InterfaceNamed | InterfaceLiteral, mode: Mode) -> GraphQLNamedType:
        name = self._record_name(descriptor, mode)
        label = describe(descriptor)
        fields: dict[str, Any] = {}
        gql_type: GraphQLObjectType | GraphQLInputObjectType
        if mode is Mode.INPUT:
            gql_type = GraphQLInputObjectType(name, lambda: fields, description=descriptor.doc)
        else:
            gql_type = GraphQLObjectType(name, lambda: fields, description=descriptor.doc)
        self._claim(name, gql_type, descriptor)
        # Registered before the members are visited; cyclic references resolve to this type.
        self._cache[(id(descriptor), mode)] = gql_type

        for member in descriptor.members:
            if member.name == TYPENAME_FIELD:
                continue
            self._check_field_name(member, label)
            if mode is Mode.INPUT:
                fields[member.name] = self._input_field(member)
            else:
                fields[member.name] = self._output_field(member, label)

        if not fields:
            raise SynthesisError(f"{label} has no fields", label)
        return gql_type

    def _check_field_name(self, member: Member, owner: str) -> None:
        if not _GRAPHQL_NAME.fullmatch(member.name) or member.name.startswith("__"):
            raise SynthesisError(f"Member '{member.name}' of {owner} is not a valid GraphQL field name", owner)

    def _output_field(self, member: Member, owner: str) -> GraphQLField:
        field_type = _non_null(self.synthesize(member.type, Mode.OUTPUT), member.nullable)
        args = self._arguments(member.args, owner) if member.args is not None else None
        return GraphQLField(field_type, args=args, description=member.doc)

    def _input_field(self, member: Member) -> GraphQLInputField:
        field_type = _non_null(self.synthesize(member.type, Mode.INPUT), member.nullable)
        default = Undefined if member.default_literal is None else member.default_literal
        return GraphQLInputField(field_type, default_value=default, description=member.doc)

    def _arguments(self, members: list[Member], owner: str) -> dict[str, GraphQLArgument]:
        """Synthesize a resolver's argument map; arguments are always in input mode."""
        args: dict[str, GraphQLArgument] = {}
        for arg in members:
            if arg.name == TYPENAME_FIELD:
                continue
            self._check_field_name(arg, owner)
            arg_type = _non_null(self.synthesize(arg.type, Mode.INPUT), arg.nullable)
            default = Undefined if arg.default_literal is None else arg.default_literal
            args[arg.name] = GraphQLArgument(arg_type, default_value=default, description=arg.doc)
        return args

    # ------------------------------------------------------------------
    # Unions and enums
    # ------------------------------------------------------------------

    def _is_string_literal_union(self, descriptor: Union) -> bool:
        return all(isinstance(m, Primitive) and isinstance(m.literal, str) for m in descriptor.members)

    def _output_union(self, descriptor: Union) -> GraphQLNamedType:
        label = describe(descriptor)
        if self._is_string_literal_union(descriptor):
            return self._literal_scalar(descriptor)
        if all(isinstance(m, Primitive) for m in descriptor.members):
            raise ModeMismatchError(
                f"{label} consists only of primitives; only unions of object types or of string literals "
                "can be used as output types",
                label,
            )

        name = descriptor.name or self._anonymous_name("AnonymousUnion")
        members: list[GraphQLObjectType] = []
        gql_union = GraphQLUnionType(name, lambda: members, description=descriptor.doc)
        self._claim(name, gql_union, descriptor)
        self._cache[(id(descriptor), Mode.OUTPUT)] = gql_union
        for member in descriptor.members:
            gql_member = self.synthesize(member, Mode.OUTPUT)
            if not isinstance(gql_member, GraphQLObjectType):
                raise ModeMismatchError(
                    f"Member {describe(member)} of {label} is not an object type; union members must be object types",
                    label,
                )
            members.append(gql_member)
        return gql_union

    def _input_union(self, descriptor: Union) -> GraphQLScalarType:
        if not self._is_string_literal_union(descriptor):
            label = describe(descriptor)
            raise ModeMismatchError(
                f"{label} is used as an input type, but input unions may only consist of string literals",
                label,
            )
        return self._literal_scalar(descriptor)

    def _enum(self, descriptor: Enum) -> GraphQLEnumType:
        label = describe(descriptor)
        values: dict[str, GraphQLEnumValue] = {}
        for member in descriptor.members:
            if not (isinstance(member, Primitive) and isinstance(member.literal, str)):
                raise SynthesisError(f"Enum {label} may only contain string literals, got {member!r}", label)
            value = member.literal
            if not _GRAPHQL_NAME.fullmatch(value) or value in _RESERVED_ENUM_VALUES:
                raise SynthesisError(f"Enum {label} value '{value}' is not a valid GraphQL enum value name", label)
            values[value] = GraphQLEnumValue(value)
        gql_enum = GraphQLEnumType(descriptor.name, values, description=descriptor.doc)
        self._claim(descriptor.name, gql_enum, descriptor)
        # Enums are valid in both modes and must not be materialized twice.
        self._cache[(id(descriptor), Mode.INPUT)] = gql_enum
        self._cache[(id(descriptor), Mode.OUTPUT)] = gql_enum
        return gql_enum
