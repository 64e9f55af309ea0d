# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for TypeScript-style type declaration files.

Converts a token stream produced by the scanner into a SourceUnit model.
Only the declaration subset needed to describe data shapes is accepted:
interfaces, type aliases and string enums.
"""

from shapeql.compiler.scanner import Token, TokenType, tokenize
from shapeql.model.declarations import (
    ArrayTypeExpr,
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

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised when the parser encounters a syntactically invalid or unsupported construct.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def parse(source: str) -> SourceUnit:
    """Parse declaration source text into a SourceUnit model.

    Args:
        source: The full text of a declaration file.

    Returns:
        A SourceUnit holding the top-level declarations in source order.

    Raises:
        LexerError: If the source contains invalid characters or unterminated literals.
        ParseError: If the source is syntactically invalid or uses unsupported syntax.
    """
    tokens = tokenize(source)
    return _Parser(tokens).parse()


# ################
# Implementation
# ################

_KEYWORD_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.INTERFACE,
        TokenType.TYPE,
        TokenType.ENUM,
        TokenType.EXPORT,
        TokenType.DECLARE,
        TokenType.EXTENDS,
        TokenType.IMPORT,
        TokenType.FROM,
        TokenType.READONLY,
        TokenType.CONST,
        TokenType.TRUE,
        TokenType.FALSE,
        TokenType.NULL,
        TokenType.UNDEFINED,
    }
)

# Tokens that may name a member or a parameter.
_NAME_TYPES: frozenset[TokenType] = _KEYWORD_TYPES | {TokenType.IDENTIFIER}

_BUILTIN_KEYWORDS: frozenset[str] = frozenset({"string", "number", "boolean", "any", "unknown", "void", "never"})

_UNSUPPORTED_OPERATORS: frozenset[str] = frozenset({"keyof", "typeof", "infer", "unique"})


class _Parser:
    """Recursive-descent parser for declaration token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> SourceUnit:
        """Parse the full token stream and return a SourceUnit."""
        result = SourceUnit()
        while not self._at_end():
            self._parse_top_level(result)
        return result

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the token type *offset* tokens ahead, clamped to EOF."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise ParseError(
                f"Expected {expected}, got {tok.value!r}",
                tok.line,
                tok.column,
            )
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without consuming)."""
        return self._peek_type() in types

    def _skip(self, *types: TokenType) -> None:
        """Consume the current token if it matches any of the given types."""
        if self._check(*types):
            self._advance()

    def _expect_name_token(self) -> Token:
        """Consume the current token as a member or parameter name.

        Accepts identifiers and keywords used in name positions (e.g. a
        property named 'type'). Raises ParseError for structural tokens and EOF.
        """
        tok = self._current()
        if tok.type not in _NAME_TYPES:
            raise ParseError(
                f"Expected identifier, got {tok.value!r}",
                tok.line,
                tok.column,
            )
        return self._advance()

    def _unsupported(self, what: str) -> ParseError:
        """Build a ParseError for a recognized but unsupported construct at the current token."""
        tok = self._current()
        return ParseError(f"{what} are not supported", tok.line, tok.column)

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def _parse_top_level(self, result: SourceUnit) -> None:
        """Parse one top-level declaration and append it to the SourceUnit."""
        first = self._current()
        doc = first.doc
        if first.type == TokenType.SEMICOLON:
            self._advance()
            return
        if first.type == TokenType.IMPORT:
            result.imports.append(self._parse_import())
            return

        # Modifiers carry no meaning for schema construction.
        while self._check(TokenType.EXPORT, TokenType.DECLARE):
            self._advance()

        tok = self._current()
        if tok.type == TokenType.INTERFACE:
            result.declarations.append(self._parse_interface(doc))
        elif tok.type == TokenType.TYPE:
            result.declarations.append(self._parse_type_alias(doc))
        elif tok.type == TokenType.ENUM:
            result.declarations.append(self._parse_enum(doc))
        elif tok.type == TokenType.CONST and self._peek_type(1) == TokenType.ENUM:
            self._advance()  # consume 'const'
            result.declarations.append(self._parse_enum(doc))
        else:
            raise ParseError(
                f"Unexpected token {tok.value!r} at top level",
                tok.line,
                tok.column,
            )

    # ------------------------------------------------------------------
    # Import declarations
    # ------------------------------------------------------------------

    def _parse_import(self) -> ImportDecl:
        """Parse: import [type] ({ A [as B], ... } | * as X | X) from "<module>" [;]"""
        self._expect(TokenType.IMPORT)
        if self._check(TokenType.TYPE) and self._peek_type(1) != TokenType.FROM:
            self._advance()  # consume 'type'
        names: list[str] = []
        if self._check(TokenType.LBRACE):
            self._advance()
            while not self._check(TokenType.RBRACE, TokenType.EOF):
                names.append(self._expect_name_token().value)
                if self._check(TokenType.IDENTIFIER) and self._current().value == "as":
                    self._advance()
                    names[-1] = self._expect_name_token().value
                if not self._check(TokenType.RBRACE):
                    self._expect(TokenType.COMMA)
            self._expect(TokenType.RBRACE)
        elif self._check(TokenType.STAR):
            self._advance()
            as_tok = self._expect(TokenType.IDENTIFIER)
            if as_tok.value != "as":
                raise ParseError(f"Expected 'as', got {as_tok.value!r}", as_tok.line, as_tok.column)
            names.append(self._expect(TokenType.IDENTIFIER).value)
        else:
            names.append(self._expect(TokenType.IDENTIFIER).value)
        self._expect(TokenType.FROM)
        source = self._expect(TokenType.STRING).value
        self._skip(TokenType.SEMICOLON)
        return ImportDecl(source=source, names=names)

    # ------------------------------------------------------------------
    # Interface declarations
    # ------------------------------------------------------------------

    def _parse_interface(self, doc: str | None) -> InterfaceDecl:
        """Parse: interface <Name> [extends A, B] { member* }"""
        self._expect(TokenType.INTERFACE)
        name_tok = self._expect(TokenType.IDENTIFIER)
        if self._check(TokenType.LANGLE):
            raise self._unsupported("Generic interface declarations")
        extends: list[str] = []
        if self._check(TokenType.EXTENDS):
            self._advance()
            extends.append(self._parse_qualified_name())
            while self._check(TokenType.COMMA):
                self._advance()
                extends.append(self._parse_qualified_name())
            if self._check(TokenType.LANGLE):
                raise self._unsupported("Generic base interfaces")
        members = self._parse_object_body()
        return InterfaceDecl(
            name=name_tok.value,
            extends=extends,
            members=members,
            doc=doc,
            line=name_tok.line,
            column=name_tok.column,
        )

    # ------------------------------------------------------------------
    # Type alias declarations
    # ------------------------------------------------------------------

    def _parse_type_alias(self, doc: str | None) -> TypeAliasDecl:
        """Parse: type <Name> = <type> [;]"""
        self._expect(TokenType.TYPE)
        name_tok = self._expect(TokenType.IDENTIFIER)
        if self._check(TokenType.LANGLE):
            raise self._unsupported("Generic type aliases")
        self._expect(TokenType.EQUALS)
        alias_type = self._parse_type()
        self._skip(TokenType.SEMICOLON)
        return TypeAliasDecl(
            name=name_tok.value,
            type=alias_type,
            doc=doc,
            line=name_tok.line,
            column=name_tok.column,
        )

    # ------------------------------------------------------------------
    # Enum declarations
    # ------------------------------------------------------------------

    def _parse_enum(self, doc: str | None) -> EnumDecl:
        """Parse: enum <Name> { <Member> [= <literal>] (, ...)* }"""
        self._expect(TokenType.ENUM)
        name_tok = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.LBRACE)
        enum_decl = EnumDecl(name=name_tok.value, doc=doc, line=name_tok.line, column=name_tok.column)
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            member_tok = self._current()
            if member_tok.type == TokenType.STRING:
                self._advance()
            else:
                self._expect_name_token()
            member = EnumMemberDecl(name=member_tok.value, doc=member_tok.doc)
            if self._check(TokenType.EQUALS):
                self._advance()
                member.value = self._parse_enum_initializer()
            enum_decl.members.append(member)
            if not self._check(TokenType.RBRACE):
                self._expect(TokenType.COMMA)
        self._expect(TokenType.RBRACE)
        return enum_decl

    def _parse_enum_initializer(self) -> int | float | str:
        """Parse a constant enum initializer: a string or a (negative) number."""
        if self._check(TokenType.STRING):
            return self._advance().value
        return self._parse_number()

    # ------------------------------------------------------------------
    # Object bodies and members
    # ------------------------------------------------------------------

    def _parse_object_body(self) -> list[PropertySignature]:
        """Parse: { (member [; | ,])* }"""
        self._expect(TokenType.LBRACE)
        members: list[PropertySignature] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            members.append(self._parse_member())
            self._skip(TokenType.SEMICOLON, TokenType.COMMA)
        self._expect(TokenType.RBRACE)
        return members

    def _parse_member(self) -> PropertySignature:
        """Parse a property ``name[?]: T`` or a method ``name[?](params): T``."""
        first = self._current()
        doc = first.doc
        readonly = False
        # 'readonly' is a modifier only when another name follows it.
        if first.type == TokenType.READONLY and self._peek_type(1) in (_NAME_TYPES | {TokenType.STRING}):
            self._advance()
            readonly = True

        if self._check(TokenType.LBRACKET):
            raise self._unsupported("Index signatures")
        if self._check(TokenType.LPAREN, TokenType.LANGLE):
            raise self._unsupported("Call signatures on object types")

        name_tok = self._current()
        if name_tok.type in (TokenType.STRING, TokenType.INTEGER):
            self._advance()
        else:
            self._expect_name_token()
        optional = False
        if self._check(TokenType.QUESTION):
            self._advance()
            optional = True

        member_type: TypeExpr
        if self._check(TokenType.LANGLE):
            raise self._unsupported("Generic methods")
        if self._check(TokenType.LPAREN):
            parameters = self._parse_parameters()
            self._expect(TokenType.COLON)
            member_type = FunctionTypeExpr(parameters=parameters, return_type=self._parse_type())
        else:
            self._expect(TokenType.COLON)
            member_type = self._parse_type()
        return PropertySignature(
            name=name_tok.value,
            type=member_type,
            optional=optional,
            readonly=readonly,
            doc=doc,
            line=name_tok.line,
            column=name_tok.column,
        )

    def _parse_parameters(self) -> list[Parameter]:
        """Parse: ( [name[?]: T (, name[?]: T)* [,]] )"""
        self._expect(TokenType.LPAREN)
        parameters: list[Parameter] = []
        while not self._check(TokenType.RPAREN, TokenType.EOF):
            name_tok = self._expect_name_token()
            optional = False
            if self._check(TokenType.QUESTION):
                self._advance()
                optional = True
            self._expect(TokenType.COLON)
            parameters.append(Parameter(name=name_tok.value, type=self._parse_type(), optional=optional))
            if not self._check(TokenType.RPAREN):
                self._expect(TokenType.COMMA)
        self._expect(TokenType.RPAREN)
        return parameters

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def _parse_type(self) -> TypeExpr:
        """Parse a union type: [|] postfix (| postfix)*"""
        self._skip(TokenType.PIPE)
        members = [self._parse_postfix_type()]
        while self._check(TokenType.PIPE):
            self._advance()
            members.append(self._parse_postfix_type())
        if self._check(TokenType.AMPERSAND):
            raise self._unsupported("Intersection types")
        if len(members) == 1:
            return members[0]
        return UnionTypeExpr(members=members)

    def _parse_postfix_type(self) -> TypeExpr:
        """Parse a primary type followed by any number of ``[]`` suffixes."""
        result = self._parse_primary_type()
        while self._check(TokenType.LBRACKET):
            if self._peek_type(1) != TokenType.RBRACKET:
                raise self._unsupported("Indexed access types")
            self._advance()  # [
            self._advance()  # ]
            result = ArrayTypeExpr(element=result)
        return result

    def _parse_primary_type(self) -> TypeExpr:
        """Parse a keyword, literal, reference, object literal, function or parenthesized type."""
        tok = self._current()
        if tok.type == TokenType.LBRACE:
            members = self._parse_object_body()
            return ObjectTypeExpr(members=members, line=tok.line, column=tok.column)
        if tok.type == TokenType.LPAREN:
            if self._looks_like_function_type():
                return self._parse_function_type()
            self._advance()
            inner = self._parse_type()
            self._expect(TokenType.RPAREN)
            return inner
        if tok.type == TokenType.LBRACKET:
            raise self._unsupported("Tuple types")
        if tok.type == TokenType.STRING:
            self._advance()
            return LiteralTypeExpr(value=tok.value)
        if tok.type in (TokenType.INTEGER, TokenType.FLOAT, TokenType.MINUS):
            return self._parse_number_literal()
        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return LiteralTypeExpr(value=tok.type == TokenType.TRUE)
        if tok.type == TokenType.NULL:
            self._advance()
            return KeywordTypeExpr(name="null")
        if tok.type == TokenType.UNDEFINED:
            self._advance()
            return KeywordTypeExpr(name="undefined")
        if tok.type == TokenType.IDENTIFIER:
            if tok.value in _BUILTIN_KEYWORDS:
                self._advance()
                return KeywordTypeExpr(name=tok.value)
            if tok.value in _UNSUPPORTED_OPERATORS:
                raise self._unsupported(f"'{tok.value}' type operators")
            return self._parse_type_reference()
        raise ParseError(f"Expected a type, got {tok.value!r}", tok.line, tok.column)

    def _parse_number_literal(self) -> LiteralTypeExpr:
        """Parse a numeric literal type."""
        return LiteralTypeExpr(value=self._parse_number())

    def _parse_number(self) -> int | float:
        """Parse: [-] (INTEGER | FLOAT)"""
        negative = False
        if self._check(TokenType.MINUS):
            self._advance()
            negative = True
        tok = self._expect(TokenType.INTEGER, TokenType.FLOAT)
        value: int | float = int(tok.value) if tok.type == TokenType.INTEGER else float(tok.value)
        return -value if negative else value

    def _parse_qualified_name(self) -> str:
        """Parse: IDENT (. IDENT)*"""
        parts = [self._expect(TokenType.IDENTIFIER).value]
        while self._check(TokenType.DOT):
            self._advance()
            parts.append(self._expect_name_token().value)
        return ".".join(parts)

    def _parse_type_reference(self) -> ReferenceTypeExpr:
        """Parse: Name [< T (, T)* >]"""
        tok = self._current()
        name = self._parse_qualified_name()
        type_arguments: list[TypeExpr] = []
        if self._check(TokenType.LANGLE):
            self._advance()
            type_arguments.append(self._parse_type())
            while self._check(TokenType.COMMA):
                self._advance()
                type_arguments.append(self._parse_type())
            self._expect(TokenType.RANGLE)
        return ReferenceTypeExpr(name=name, type_arguments=type_arguments, line=tok.line, column=tok.column)

    def _looks_like_function_type(self) -> bool:
        """Decide whether the '(' at the current position opens a function type."""
        after = self._peek_type(1)
        if after == TokenType.RPAREN:
            return True
        if after in _NAME_TYPES:
            follow = self._peek_type(2)
            if follow in (TokenType.COLON, TokenType.QUESTION, TokenType.COMMA):
                return True
            return follow == TokenType.RPAREN and self._peek_type(3) == TokenType.FAT_ARROW
        return False

    def _parse_function_type(self) -> FunctionTypeExpr:
        """Parse: (params) => T"""
        parameters = self._parse_parameters()
        self._expect(TokenType.FAT_ARROW)
        return FunctionTypeExpr(parameters=parameters, return_type=self._parse_type())
