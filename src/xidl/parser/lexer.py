# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for IDL source text.

Converts raw source text into a sequence of tokens for subsequent parsing.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass

from xidl.parser.charclass import is_identifier_continue, is_identifier_start
from xidl.parser.diagnostics import DiagnosticCollector

# ###############
# Public Interface
# ###############


class TokenCategory(enum.Enum):
    """Coarse token kinds, used in diagnostics and literal-kind checks."""

    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    INTEGER_LITERAL = "integer literal"
    HEX_LITERAL = "hexadecimal literal"
    FLOAT_LITERAL = "floating-point literal"
    STRING_LITERAL = "string literal"
    UUID_LITERAL = "uuid literal"
    PUNCTUATION = "punctuation"
    END_OF_INPUT = "end of input"


class TokenType(enum.Enum):
    """All token types produced by the IDL lexer."""

    # Keywords
    IMPORT = "import"
    NAMESPACE = "namespace"
    ENUM = "enum"
    STRUCT = "struct"
    DELEGATE = "delegate"
    INTERFACE = "interface"
    EVENT = "event"
    VOID = "void"
    REF = "ref"
    CONST = "const"
    OUT = "out"

    # Punctuation
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LANGLE = "<"
    RANGLE = ">"
    COMMA = ","
    DOT = "."
    SEMICOLON = ";"
    COLON = ":"
    EQUALS = "="

    # Literals
    INTEGER = "INTEGER"
    HEX = "HEX"
    FLOAT = "FLOAT"
    STRING = "STRING"
    UUID = "UUID"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"

    @property
    def category(self) -> TokenCategory:
        """Return the coarse category this token type belongs to."""
        return _CATEGORIES.get(self, TokenCategory.PUNCTUATION)


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw source text of the token (string literals keep their quotes).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        offset: 0-based offset of the first character in the source text.
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int = 0

    @property
    def end(self) -> int:
        """Offset one past the last character of the token."""
        return self.offset + len(self.value)


class LexerError(Exception):
    """Raised by strict tokenization on an invalid character or unterminated construct.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


KEYWORDS: dict[str, TokenType] = {
    "import": TokenType.IMPORT,
    "namespace": TokenType.NAMESPACE,
    "enum": TokenType.ENUM,
    "struct": TokenType.STRUCT,
    "delegate": TokenType.DELEGATE,
    "interface": TokenType.INTERFACE,
    "event": TokenType.EVENT,
    "void": TokenType.VOID,
    "ref": TokenType.REF,
    "const": TokenType.CONST,
    "out": TokenType.OUT,
}


def tokenize(source: str, diagnostics: DiagnosticCollector | None = None) -> list[Token]:
    """Tokenize IDL source text into a list of tokens.

    The final token is always an EOF token. Comments and whitespace are
    consumed and not included in the output.

    Args:
        source: The full text of one IDL source unit.
        diagnostics: Collector for lexical errors. When omitted, the first
            lexical error is raised instead of recorded.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On the first lexical error, only when *diagnostics* is None.
    """
    return list(_Lexer(source, diagnostics).tokens())


def iter_tokens(source: str, diagnostics: DiagnosticCollector) -> Iterator[Token]:
    """Lazily tokenize *source*, recording lexical errors in *diagnostics*.

    Errors are recorded as the scanner reaches them, so they interleave with
    the parser's own diagnostics in source order.
    """
    return _Lexer(source, diagnostics).tokens()


def describe_token(tok: Token) -> str:
    """Describe a token for diagnostics, e.g. ``integer literal '123'``."""
    category = tok.type.category
    if category == TokenCategory.END_OF_INPUT:
        return "end of input"
    if category == TokenCategory.PUNCTUATION:
        return repr(tok.value)
    return f"{category.value} {tok.value!r}"


def describe_type(token_type: TokenType) -> str:
    """Describe an expected token type for diagnostics."""
    category = token_type.category
    if category in (TokenCategory.PUNCTUATION, TokenCategory.KEYWORD):
        return repr(token_type.value)
    return category.value


# ################
# Implementation
# ################

_CATEGORIES: dict[TokenType, TokenCategory] = {
    **{token_type: TokenCategory.KEYWORD for token_type in KEYWORDS.values()},
    TokenType.INTEGER: TokenCategory.INTEGER_LITERAL,
    TokenType.HEX: TokenCategory.HEX_LITERAL,
    TokenType.FLOAT: TokenCategory.FLOAT_LITERAL,
    TokenType.STRING: TokenCategory.STRING_LITERAL,
    TokenType.UUID: TokenCategory.UUID_LITERAL,
    TokenType.IDENTIFIER: TokenCategory.IDENTIFIER,
    TokenType.EOF: TokenCategory.END_OF_INPUT,
}

_PUNCTUATION: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "=": TokenType.EQUALS,
}

_WHITESPACE = frozenset(" \t\n\r\f\v")
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_UUID_PATTERN = re.compile(
    r"[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}"
)


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, diagnostics: DiagnosticCollector | None) -> None:
        self._source = source
        self._diagnostics = diagnostics
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokens(self) -> Iterator[Token]:
        """Yield every token in source order, ending with a single EOF token."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            tok = self._scan_token()
            if tok is not None:
                yield tok
        yield Token(TokenType.EOF, "", self._line, self._column, self._pos)

    def _error(self, message: str, line: int, column: int) -> None:
        if self._diagnostics is None:
            raise LexerError(message, line, column)
        self._diagnostics.record(line, column, message)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, distance: int = 1) -> str:
        """Return the character *distance* positions ahead, or '' past the end."""
        if self._pos + distance < len(self._source):
            return self._source[self._pos + distance]
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

    def _make(self, token_type: TokenType, start: int, line: int, col: int) -> Token:
        return Token(token_type, self._source[start : self._pos], line, col, start)

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in _WHITESPACE:
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
        """Consume from '/*' through the first '*/'."""
        start_line = self._line
        start_col = self._column
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return
            self._advance()
        self._error("Unterminated block comment", start_line, start_col)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token | None:
        """Scan one token at the current position.

        Returns None when the character was rejected and skipped.
        """
        ch = self._current()
        line = self._line
        col = self._column

        if ch in _PUNCTUATION:
            start = self._pos
            self._advance()
            return self._make(_PUNCTUATION[ch], start, line, col)
        if ch == '"':
            return self._scan_string(line, col)
        if ch in _HEX_DIGITS and self._at_uuid():
            return self._scan_uuid(line, col)
        if ch in _DIGITS:
            return self._scan_number(line, col)
        if is_identifier_start(ch):
            return self._scan_identifier_or_keyword(line, col)
        self._advance()
        self._error(f"Unexpected character {ch!r}", line, col)
        return None

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _at_uuid(self) -> bool:
        """Return True if a complete UUID literal starts at the current position."""
        match = _UUID_PATTERN.match(self._source, self._pos)
        if match is None:
            return False
        following = self._source[match.end() : match.end() + 1]
        return not (following == "-" or is_identifier_continue(following))

    def _scan_uuid(self, line: int, col: int) -> Token:
        start = self._pos
        for _ in range(36):
            self._advance()
        return self._make(TokenType.UUID, start, line, col)

    def _scan_string(self, line: int, col: int) -> Token:
        """Scan a double-quoted string literal; a backslash escapes the next character."""
        start = self._pos
        self._advance()  # opening "
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                return self._make(TokenType.STRING, start, line, col)
            if ch == "\n":
                break
            self._advance()
            if ch == "\\" and self._pos < len(self._source) and self._current() != "\n":
                self._advance()
        self._error("Unterminated string literal", line, col)
        return self._make(TokenType.STRING, start, line, col)

    def _scan_number(self, line: int, col: int) -> Token:
        """Scan a decimal, hexadecimal, or floating-point literal.

        A fraction requires at least one digit on both sides of the decimal point.
        """
        start = self._pos
        if self._current() == "0" and self._peek() in ("x", "X"):
            self._advance()  # 0
            self._advance()  # x
            if self._current() not in _HEX_DIGITS:
                self._error(
                    f"Malformed hexadecimal literal {self._source[start : self._pos]!r}: expected hex digits",
                    line,
                    col,
                )
            while self._current() in _HEX_DIGITS:
                self._advance()
            return self._make(TokenType.HEX, start, line, col)

        self._consume_digits()
        is_float = False
        if self._current() == "." and self._peek() in _DIGITS:
            self._advance()  # consume the '.'
            self._consume_digits()
            is_float = True

        if self._current() in ("e", "E"):
            if self._exponent_follows():
                self._advance()  # e
                if self._current() in ("+", "-"):
                    self._advance()
                self._consume_digits()
                is_float = True
            elif is_float:
                self._advance()  # e
                if self._current() in ("+", "-"):
                    self._advance()
                self._error(
                    f"Malformed floating-point literal {self._source[start : self._pos]!r}: expected exponent digits",
                    line,
                    col,
                )

        return self._make(TokenType.FLOAT if is_float else TokenType.INTEGER, start, line, col)

    def _consume_digits(self) -> None:
        while self._current() in _DIGITS:
            self._advance()

    def _exponent_follows(self) -> bool:
        """Return True if the 'e' at the current position starts a complete exponent."""
        nxt = self._peek(1)
        if nxt in ("+", "-"):
            nxt = self._peek(2)
        return nxt in _DIGITS

    def _scan_identifier_or_keyword(self, line: int, col: int) -> Token:
        """Scan an identifier and map it to a keyword token type if applicable."""
        start = self._pos
        self._advance()
        while self._pos < len(self._source) and is_identifier_continue(self._current()):
            self._advance()
        value = self._source[start : self._pos]
        return Token(KEYWORDS.get(value, TokenType.IDENTIFIER), value, line, col, start)
