# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for TypeScript-style type declaration files.

Converts raw source text into a sequence of tokens for subsequent parsing.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the scanner."""

    # Keywords
    INTERFACE = "interface"
    TYPE = "type"
    ENUM = "enum"
    EXPORT = "export"
    DECLARE = "declare"
    EXTENDS = "extends"
    IMPORT = "import"
    FROM = "from"
    READONLY = "readonly"
    CONST = "const"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    UNDEFINED = "undefined"

    # Symbols and operators
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LANGLE = "<"
    RANGLE = ">"
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    QUESTION = "?"
    PIPE = "|"
    AMPERSAND = "&"
    EQUALS = "="
    DOT = "."
    STAR = "*"
    MINUS = "-"
    FAT_ARROW = "=>"

    # Literals
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token (or decoded string content for STRING tokens).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        doc: Text of a ``/** ... */`` comment immediately preceding the token.
    """

    type: TokenType
    value: str
    line: int
    column: int
    doc: str | None = None


class LexerError(Exception):
    """Raised when the scanner encounters an invalid character or unterminated literal.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Tokenize declaration source text into a sequence of tokens.

    Returns a list of tokens. The final token is always an EOF token.
    Whitespace and ordinary comments are consumed and not included in the
    output; a JSDoc comment is attached to the token that follows it.

    Args:
        source: The full text of a declaration file.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unexpected characters, unterminated string literals,
            or unterminated block comments.
    """
    return _Lexer(source).tokenize()


def clean_doc_comment(raw: str) -> str | None:
    """Strip JSDoc gutters from the body of a ``/** ... */`` comment.

    Text after the first ``@tag`` line is dropped. Returns None when nothing
    but whitespace remains.
    """
    lines: list[str] = []
    for line in raw.splitlines():
        text = line.strip()
        if text.startswith("*"):
            text = text[1:].strip()
        if text.startswith("@"):
            break
        lines.append(text)
    result = "\n".join(lines).strip()
    return result or None


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "interface": TokenType.INTERFACE,
    "type": TokenType.TYPE,
    "enum": TokenType.ENUM,
    "export": TokenType.EXPORT,
    "declare": TokenType.DECLARE,
    "extends": TokenType.EXTENDS,
    "import": TokenType.IMPORT,
    "from": TokenType.FROM,
    "readonly": TokenType.READONLY,
    "const": TokenType.CONST,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "undefined": TokenType.UNDEFINED,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "?": TokenType.QUESTION,
    "|": TokenType.PIPE,
    "&": TokenType.AMPERSAND,
    ".": TokenType.DOT,
    "*": TokenType.STAR,
    "-": TokenType.MINUS,
}

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "0": "\0",
}


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []
        # Doc comment waiting to be attached to the next token.
        self._pending_doc: str | None = None

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' at end of input."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _emit(self, token_type: TokenType, value: str, line: int, col: int) -> None:
        """Append a token, attaching any pending doc comment to it."""
        self._tokens.append(Token(token_type, value, line, col, self._pending_doc))
        self._pending_doc = None

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n\ufeff":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the newline itself)."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/', keeping JSDoc text."""
        start_line = self._line
        start_col = self._column
        # '/**/' is an empty ordinary comment, not a doc comment.
        is_doc = self._peek(2) == "*" and self._peek(3) != "/"
        self._advance()  # /
        self._advance()  # *
        start = self._pos
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                body = self._source[start : self._pos]
                self._advance()  # *
                self._advance()  # /
                if is_doc:
                    self._pending_doc = clean_doc_comment(body[1:])
                return
            self._advance()
        raise LexerError("Unterminated block comment", start_line, start_col)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch == "=":
            self._advance()
            if self._current() == ">":
                self._advance()
                self._emit(TokenType.FAT_ARROW, "=>", line, col)
            else:
                self._emit(TokenType.EQUALS, "=", line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._emit(_SINGLE_CHAR_TOKENS[ch], ch, line, col)
        elif ch in "\"'":
            self._scan_string(ch, line, col)
        elif ch.isdigit():
            self._scan_number(line, col)
        elif ch.isalpha() or ch in "_$":
            self._scan_identifier_or_keyword(line, col)
        else:
            raise LexerError(f"Unexpected character: {ch!r}", line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, quote: str, line: int, col: int) -> None:
        """Scan a single- or double-quoted string literal with escape sequences."""
        self._advance()  # opening quote
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()  # closing quote
                self._emit(TokenType.STRING, "".join(chars), line, col)
                return
            if ch == "\n":
                raise LexerError("Unterminated string literal", line, col)
            if ch == "\\":
                self._advance()
                if self._pos >= len(self._source):
                    raise LexerError("Unterminated string literal", line, col)
                esc = self._current()
                if esc not in _ESCAPES:
                    raise LexerError(
                        f"Invalid escape sequence: '\\{esc}'",
                        self._line,
                        self._column,
                    )
                chars.append(_ESCAPES[esc])
                self._advance()
            else:
                chars.append(ch)
                self._advance()
        raise LexerError("Unterminated string literal", line, col)

    def _scan_number(self, line: int, col: int) -> None:
        """Scan an integer or floating-point literal.

        A float requires at least one digit on both sides of the decimal point.
        """
        start = self._pos
        while self._pos < len(self._source) and self._current().isdigit():
            self._advance()

        if self._pos < len(self._source) and self._current() == "." and self._peek().isdigit():
            self._advance()  # consume the '.'
            while self._pos < len(self._source) and self._current().isdigit():
                self._advance()
            value = self._source[start : self._pos]
            self._emit(TokenType.FLOAT, value, line, col)
        else:
            value = self._source[start : self._pos]
            self._emit(TokenType.INTEGER, value, line, col)

    def _scan_identifier_or_keyword(self, line: int, col: int) -> None:
        """Scan an identifier and map it to a keyword token type if applicable."""
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() in "_$"):
            self._advance()
        value = self._source[start : self._pos]
        token_type = _KEYWORDS.get(value, TokenType.IDENTIFIER)
        self._emit(token_type, value, line, col)
