# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for IDL source text.

Converts a token stream produced by the lexer into an IdlFile parse tree.
Malformed input never aborts the parse: each problem is recorded as a
diagnostic, the parser resynchronizes, and a complete tree is returned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from xidl.model.declarations import (
    Declaration,
    DelegateDecl,
    EnumDecl,
    EnumMember,
    EventDecl,
    IdlFile,
    ImportDirective,
    InterfaceDecl,
    MethodDecl,
    NamespaceDecl,
    PropertyDecl,
    StructDecl,
    StructField,
)
from xidl.model.types import (
    AttributeApplication,
    ExpressionLiteral,
    LiteralKind,
    Parameter,
    ParameterModifier,
    Span,
    TypeRef,
)
from xidl.parser.diagnostics import Diagnostic, DiagnosticCollector
from xidl.parser.lexer import Token, TokenType, describe_token, describe_type, iter_tokens
from xidl.parser.stream import TokenStream

# ###############
# Public Interface
# ###############


class ParseError(Exception):
    """Raised inside the parser when a production cannot continue.

    The parser catches it at the nearest list boundary, records it as a
    diagnostic, and resynchronizes; it never escapes :func:`parse`.

    Attributes:
        message: Description of the expected and found tokens.
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


@dataclass(frozen=True)
class ParseResult:
    """The outcome of parsing one IDL source unit.

    Attributes:
        tree: The parse tree; always present, even for malformed input.
        diagnostics: Every lexical and syntactic error, in the order recorded.
    """

    tree: IdlFile
    diagnostics: tuple[Diagnostic, ...]

    @property
    def error_count(self) -> int:
        """Number of diagnostics. Zero means the input is well-formed."""
        return len(self.diagnostics)


def parse(source: str) -> ParseResult:
    """Parse IDL source text into a parse tree plus diagnostics.

    Args:
        source: The full text of one IDL source unit.

    Returns:
        A ParseResult holding the tree and all recorded diagnostics.

    Raises:
        TypeError: If *source* is not a string.
    """
    if not isinstance(source, str):
        raise TypeError(f"IDL source must be a str, not {type(source).__name__}")
    diagnostics = DiagnosticCollector()
    tree = parse_stream(TokenStream(iter_tokens(source, diagnostics)), diagnostics)
    return ParseResult(tree=tree, diagnostics=diagnostics.all())


def parse_stream(stream: TokenStream, diagnostics: DiagnosticCollector) -> IdlFile:
    """Parse the tokens of *stream* until EOF, recording errors in *diagnostics*."""
    return _Parser(stream, diagnostics).parse()


# ################
# Implementation
# ################

_DECLARATION_KEYWORDS: tuple[TokenType, ...] = (
    TokenType.NAMESPACE,
    TokenType.ENUM,
    TokenType.STRUCT,
    TokenType.DELEGATE,
    TokenType.INTERFACE,
)

# Tokens at which a list loop can restart after an error (not consumed by resync).
_TOP_LEVEL_RESUME = frozenset({TokenType.NAMESPACE, TokenType.IMPORT, TokenType.LBRACKET})
_BODY_RESUME = frozenset({*_DECLARATION_KEYWORDS, TokenType.LBRACKET, TokenType.RBRACE})
_ENUM_RESUME = frozenset({TokenType.COMMA, TokenType.RBRACE})
_BLOCK_RESUME = frozenset({TokenType.RBRACE})
_INTERFACE_RESUME = frozenset({TokenType.RBRACE, TokenType.LBRACKET})

_ARGUMENT_LITERALS: dict[TokenType, LiteralKind] = {
    TokenType.UUID: LiteralKind.UUID,
    TokenType.INTEGER: LiteralKind.INTEGER,
    TokenType.HEX: LiteralKind.HEX,
    TokenType.FLOAT: LiteralKind.FLOAT,
    TokenType.STRING: LiteralKind.STRING,
}

# Literal kinds rejected as enum initializers: consumed and reported without resync.
_INVALID_INITIALIZERS = frozenset({TokenType.FLOAT, TokenType.STRING, TokenType.UUID, TokenType.IDENTIFIER})

_ACCESSORS = ("get", "set")

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


def _expected(*types: TokenType) -> str:
    names = [describe_type(t) for t in types]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]


def _token_span(tok: Token) -> Span:
    return Span(line=tok.line, column=tok.column, start=tok.offset, end=tok.end)


def _string_contents(raw: str) -> str:
    """Strip the quotes from a string literal and resolve backslash escapes."""
    body = raw[1:-1] if len(raw) >= 2 and raw.endswith('"') else raw[1:]
    return _ESCAPE.sub(r"\1", body)


class _Parser:
    """Recursive-descent parser with statement-level error recovery."""

    def __init__(self, stream: TokenStream, diagnostics: DiagnosticCollector) -> None:
        self._stream = stream
        self._diagnostics = diagnostics
        self._prev_end = 0

    def parse(self) -> IdlFile:
        """Parse the full token stream and return an IdlFile."""
        result = IdlFile()
        while not self._at_end():
            before = self._stream.consumed
            try:
                self._parse_top_level(result)
            except ParseError as exc:
                self._recover(exc, _TOP_LEVEL_RESUME, before)
        return result

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._stream.peek()

    def _at_end(self) -> bool:
        return self._stream.at_end()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._stream.check(*types)

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._stream.advance()
        if tok.type != TokenType.EOF:
            self._prev_end = tok.end
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            raise ParseError(f"Expected {_expected(*types)}, found {describe_token(tok)}", tok.line, tok.column)
        return self._advance()

    def _expect_identifier(self) -> Token:
        return self._expect(TokenType.IDENTIFIER)

    def _expect_or_report(self, token_type: TokenType) -> Token | None:
        """Consume a closing token, or report it missing and carry on as if present."""
        if self._check(token_type):
            return self._advance()
        self._report_at(self._current(), f"Expected {_expected(token_type)}, found {describe_token(self._current())}")
        return None

    def _span(self, start: Token) -> Span:
        """Span from *start* through the last consumed token."""
        return Span(line=start.line, column=start.column, start=start.offset, end=max(start.offset, self._prev_end))

    # ------------------------------------------------------------------
    # Error recovery
    # ------------------------------------------------------------------

    def _report_at(self, tok: Token, message: str) -> None:
        self._diagnostics.record(tok.line, tok.column, message)

    def _recover(self, exc: ParseError, resume: frozenset[TokenType], before: int | None = None) -> None:
        """Record *exc* and skip ahead to a point where parsing can resume.

        When *before* is given and nothing has been consumed since, one token
        is dropped so the calling loop always makes progress.
        """
        self._diagnostics.record(exc.line, exc.column, exc.message)
        self._synchronize(resume)
        if before is not None and self._stream.consumed == before and not self._at_end():
            self._advance()

    def _synchronize(self, resume: frozenset[TokenType]) -> None:
        """Skip tokens until ';' (consumed), a resume token, or EOF.

        A '{' met along the way skips its whole balanced block.
        """
        depth = 0
        while not self._at_end():
            tok_type = self._current().type
            if depth == 0:
                if tok_type == TokenType.SEMICOLON:
                    self._advance()
                    return
                if tok_type in resume:
                    return
            if tok_type == TokenType.LBRACE:
                depth += 1
            elif tok_type == TokenType.RBRACE and depth > 0:
                depth -= 1
            self._advance()

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def _parse_top_level(self, result: IdlFile) -> None:
        """Parse one import directive or namespace and append it to the IdlFile."""
        if self._check(TokenType.IMPORT):
            result.imports.append(self._parse_import())
            return
        start = self._current()
        attributes = self._parse_attribute_lists()
        if self._check(TokenType.NAMESPACE):
            result.namespaces.append(self._parse_namespace(start, attributes))
            return
        tok = self._current()
        raise ParseError(
            f"Expected {_expected(TokenType.NAMESPACE, TokenType.IMPORT)}, found {describe_token(tok)}",
            tok.line,
            tok.column,
        )

    def _parse_import(self) -> ImportDirective:
        """Parse: import "<path>" ;"""
        start = self._expect(TokenType.IMPORT)
        path_tok = self._expect(TokenType.STRING)
        self._expect_or_report(TokenType.SEMICOLON)
        return ImportDirective(path=_string_contents(path_tok.value), span=self._span(start))

    # ------------------------------------------------------------------
    # Namespaces and declaration lists
    # ------------------------------------------------------------------

    def _parse_namespace(self, start: Token, attributes: list[AttributeApplication]) -> NamespaceDecl:
        """Parse: namespace <A.B.C> { <declaration>* }"""
        self._expect(TokenType.NAMESPACE)
        name = self._parse_qualified_segments()
        self._expect(TokenType.LBRACE)
        declarations = self._parse_declarations()
        self._expect_or_report(TokenType.RBRACE)
        return NamespaceDecl(name=name, declarations=declarations, attributes=attributes, span=self._span(start))

    def _parse_declarations(self) -> list[Declaration]:
        """Parse declarations up to the closing '}' of the enclosing body."""
        declarations: list[Declaration] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            before = self._stream.consumed
            try:
                declarations.append(self._parse_declaration())
            except ParseError as exc:
                self._recover(exc, _BODY_RESUME, before)
                continue
            if self._check(TokenType.SEMICOLON):
                self._advance()
        return declarations

    def _parse_declaration(self) -> Declaration:
        """Parse one attributed declaration inside a namespace body."""
        start = self._current()
        attributes = self._parse_attribute_lists()
        tok = self._current()
        if tok.type == TokenType.NAMESPACE:
            return self._parse_namespace(start, attributes)
        if tok.type == TokenType.ENUM:
            return self._parse_enum(start, attributes)
        if tok.type == TokenType.STRUCT:
            return self._parse_struct(start, attributes)
        if tok.type == TokenType.DELEGATE:
            return self._parse_delegate(start, attributes)
        if tok.type == TokenType.INTERFACE:
            return self._parse_interface(start, attributes)
        raise ParseError(
            f"Expected {_expected(*_DECLARATION_KEYWORDS)}, found {describe_token(tok)}",
            tok.line,
            tok.column,
        )

    def _parse_qualified_segments(self) -> list[str]:
        """Parse: <ident> (. <ident>)*"""
        segments = [self._expect_identifier().value]
        while self._check(TokenType.DOT):
            self._advance()  # consume .
            segments.append(self._expect_identifier().value)
        return segments

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _parse_attribute_lists(self) -> list[AttributeApplication]:
        """Parse zero or more: [ <attribute> (, <attribute>)* ]"""
        attributes: list[AttributeApplication] = []
        while self._check(TokenType.LBRACKET):
            self._advance()  # consume [
            attributes.append(self._parse_attribute())
            while self._check(TokenType.COMMA):
                self._advance()
                attributes.append(self._parse_attribute())
            self._expect(TokenType.RBRACKET)
        return attributes

    def _parse_attribute(self) -> AttributeApplication:
        """Parse: <name> [ ( <argument> (, <argument>)* ) ]"""
        start = self._current()
        name = ".".join(self._parse_qualified_segments())
        arguments: list[ExpressionLiteral] = []
        if self._check(TokenType.LPAREN):
            self._advance()  # consume (
            if not self._check(TokenType.RPAREN):
                arguments.append(self._parse_attribute_argument())
                while self._check(TokenType.COMMA):
                    self._advance()
                    arguments.append(self._parse_attribute_argument())
            self._expect(TokenType.RPAREN)
        return AttributeApplication(name=name, arguments=arguments, span=self._span(start))

    def _parse_attribute_argument(self) -> ExpressionLiteral:
        """Parse a literal or qualified-name attribute argument."""
        tok = self._current()
        if tok.type in _ARGUMENT_LITERALS:
            self._advance()
            return ExpressionLiteral(kind=_ARGUMENT_LITERALS[tok.type], text=tok.value, span=_token_span(tok))
        if tok.type == TokenType.IDENTIFIER:
            name = ".".join(self._parse_qualified_segments())
            return ExpressionLiteral(kind=LiteralKind.NAME, text=name, span=self._span(tok))
        raise ParseError(f"Expected attribute argument, found {describe_token(tok)}", tok.line, tok.column)

    # ------------------------------------------------------------------
    # Enum declarations
    # ------------------------------------------------------------------

    def _parse_enum(self, start: Token, attributes: list[AttributeApplication]) -> EnumDecl:
        """Parse: enum <Name> { <member> (, <member>)* [,] }"""
        self._expect(TokenType.ENUM)
        name_tok = self._expect_identifier()
        self._expect(TokenType.LBRACE)
        members: list[EnumMember] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            try:
                members.append(self._parse_enum_member())
            except ParseError as exc:
                self._recover(exc, _ENUM_RESUME)
            if self._check(TokenType.COMMA):
                self._advance()
                continue
            if self._check(TokenType.RBRACE, TokenType.EOF):
                break
            tok = self._current()
            self._report_at(tok, f"Expected {_expected(TokenType.COMMA, TokenType.RBRACE)}, found {describe_token(tok)}")
            if not self._check(TokenType.IDENTIFIER, TokenType.LBRACKET):
                self._synchronize(_ENUM_RESUME)
                if self._check(TokenType.COMMA):
                    self._advance()
        self._expect_or_report(TokenType.RBRACE)
        return EnumDecl(name=name_tok.value, members=members, attributes=attributes, span=self._span(start))

    def _parse_enum_member(self) -> EnumMember:
        """Parse: [attrs] <Name> [= <integer>]"""
        start = self._current()
        attributes = self._parse_attribute_lists()
        name_tok = self._expect_identifier()
        value: ExpressionLiteral | None = None
        if self._check(TokenType.EQUALS):
            self._advance()  # consume =
            value = self._parse_enum_initializer()
        return EnumMember(name=name_tok.value, value=value, attributes=attributes, span=self._span(start))

    def _parse_enum_initializer(self) -> ExpressionLiteral | None:
        """Parse the value of an enum member; only integer and hex literals are legal.

        Other literal kinds are consumed and reported, and the member keeps no value.
        """
        tok = self._current()
        if tok.type == TokenType.INTEGER:
            self._advance()
            return ExpressionLiteral(kind=LiteralKind.INTEGER, text=tok.value, span=_token_span(tok))
        if tok.type == TokenType.HEX:
            self._advance()
            return ExpressionLiteral(kind=LiteralKind.HEX, text=tok.value, span=_token_span(tok))
        message = f"Expected {_expected(TokenType.INTEGER, TokenType.HEX)}, found {describe_token(tok)}"
        if tok.type not in _INVALID_INITIALIZERS:
            raise ParseError(message, tok.line, tok.column)
        self._report_at(tok, message)
        if tok.type == TokenType.IDENTIFIER:
            self._parse_qualified_segments()
        else:
            self._advance()
        return None

    # ------------------------------------------------------------------
    # Struct declarations
    # ------------------------------------------------------------------

    def _parse_struct(self, start: Token, attributes: list[AttributeApplication]) -> StructDecl:
        """Parse: struct <Name> { (<type> <name> ;)* }"""
        self._expect(TokenType.STRUCT)
        name_tok = self._expect_identifier()
        self._expect(TokenType.LBRACE)
        fields: list[StructField] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            before = self._stream.consumed
            try:
                fields.append(self._parse_struct_field())
            except ParseError as exc:
                self._recover(exc, _BLOCK_RESUME, before)
        self._expect_or_report(TokenType.RBRACE)
        return StructDecl(name=name_tok.value, fields=fields, attributes=attributes, span=self._span(start))

    def _parse_struct_field(self) -> StructField:
        start = self._current()
        field_type = self._parse_type()
        name_tok = self._expect_identifier()
        self._expect_or_report(TokenType.SEMICOLON)
        return StructField(name=name_tok.value, type=field_type, span=self._span(start))

    # ------------------------------------------------------------------
    # Delegate declarations
    # ------------------------------------------------------------------

    def _parse_delegate(self, start: Token, attributes: list[AttributeApplication]) -> DelegateDecl:
        """Parse: delegate <type> <Name> ( <params> ) ;"""
        self._expect(TokenType.DELEGATE)
        return_type = self._parse_type()
        name_tok = self._expect_identifier()
        self._expect(TokenType.LPAREN)
        parameters = self._parse_parameters()
        self._expect(TokenType.RPAREN)
        self._expect_or_report(TokenType.SEMICOLON)
        return DelegateDecl(
            name=name_tok.value,
            return_type=return_type,
            parameters=parameters,
            attributes=attributes,
            span=self._span(start),
        )

    # ------------------------------------------------------------------
    # Interface declarations
    # ------------------------------------------------------------------

    def _parse_interface(self, start: Token, attributes: list[AttributeApplication]) -> InterfaceDecl:
        """Parse: interface <Name> [: <type> (, <type>)*] { <member>* }"""
        self._expect(TokenType.INTERFACE)
        name_tok = self._expect_identifier()
        bases: list[TypeRef] = []
        if self._check(TokenType.COLON):
            self._advance()  # consume :
            bases.append(self._parse_type())
            while self._check(TokenType.COMMA):
                self._advance()
                bases.append(self._parse_type())
        self._expect(TokenType.LBRACE)
        members: list[MethodDecl | PropertyDecl | EventDecl] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            before = self._stream.consumed
            try:
                members.append(self._parse_interface_member())
            except ParseError as exc:
                self._recover(exc, _INTERFACE_RESUME, before)
        self._expect_or_report(TokenType.RBRACE)
        return InterfaceDecl(
            name=name_tok.value,
            bases=bases,
            members=members,
            attributes=attributes,
            span=self._span(start),
        )

    def _parse_interface_member(self) -> MethodDecl | PropertyDecl | EventDecl:
        """Parse a method, property, or event declaration."""
        start = self._current()
        attributes = self._parse_attribute_lists()
        if self._check(TokenType.EVENT):
            self._advance()  # consume 'event'
            event_type = self._parse_type()
            name_tok = self._expect_identifier()
            self._expect_or_report(TokenType.SEMICOLON)
            return EventDecl(name=name_tok.value, type=event_type, attributes=attributes, span=self._span(start))

        member_type = self._parse_type()
        name_tok = self._expect_identifier()
        if self._check(TokenType.LPAREN):
            self._advance()  # consume (
            parameters = self._parse_parameters()
            self._expect(TokenType.RPAREN)
            self._expect_or_report(TokenType.SEMICOLON)
            return MethodDecl(
                name=name_tok.value,
                return_type=member_type,
                parameters=parameters,
                attributes=attributes,
                span=self._span(start),
            )

        if self._check(TokenType.LBRACE):
            accessors = self._parse_accessors()
            if self._check(TokenType.SEMICOLON):
                self._advance()
            return PropertyDecl(
                name=name_tok.value,
                type=member_type,
                accessors=accessors,
                attributes=attributes,
                span=self._span(start),
            )

        self._expect_or_report(TokenType.SEMICOLON)
        return PropertyDecl(name=name_tok.value, type=member_type, attributes=attributes, span=self._span(start))

    def _parse_accessors(self) -> list[str]:
        """Parse: { (get|set ;)+ }

        Problems inside the block are resolved locally so that its closing
        brace is never mistaken for the end of the interface.
        """
        self._expect(TokenType.LBRACE)
        accessors: list[str] = []
        while not self._check(TokenType.RBRACE, TokenType.EOF):
            tok = self._current()
            if tok.type != TokenType.IDENTIFIER or tok.value not in _ACCESSORS:
                self._report_at(tok, f"Expected 'get' or 'set', found {describe_token(tok)}")
                self._synchronize(_BLOCK_RESUME)
                continue
            self._advance()
            if tok.value in accessors:
                self._report_at(tok, f"Duplicate accessor {tok.value!r}")
            else:
                accessors.append(tok.value)
            self._expect_or_report(TokenType.SEMICOLON)
        if not accessors and self._check(TokenType.RBRACE):
            self._report_at(self._current(), "Expected 'get' or 'set', found '}'")
        self._expect_or_report(TokenType.RBRACE)
        return accessors

    # ------------------------------------------------------------------
    # Types and parameters
    # ------------------------------------------------------------------

    def _parse_type(self) -> TypeRef:
        """Parse: void | <A.B.C> [< <type> (, <type>)* >] [ [] ]"""
        start = self._current()
        if self._check(TokenType.VOID):
            self._advance()
            return TypeRef(name="void", span=self._span(start))
        name = ".".join(self._parse_qualified_segments())
        type_arguments: list[TypeRef] = []
        if self._check(TokenType.LANGLE):
            self._advance()  # consume <
            type_arguments.append(self._parse_type())
            while self._check(TokenType.COMMA):
                self._advance()
                type_arguments.append(self._parse_type())
            self._expect(TokenType.RANGLE)
        is_array = False
        if self._check(TokenType.LBRACKET):
            self._advance()  # consume [
            self._expect(TokenType.RBRACKET)
            is_array = True
        return TypeRef(name=name, type_arguments=type_arguments, is_array=is_array, span=self._span(start))

    def _parse_parameters(self) -> list[Parameter]:
        """Parse a possibly empty, comma-separated parameter list (without parentheses)."""
        parameters: list[Parameter] = []
        if self._check(TokenType.RPAREN):
            return parameters
        parameters.append(self._parse_parameter())
        while self._check(TokenType.COMMA):
            self._advance()
            parameters.append(self._parse_parameter())
        return parameters

    def _parse_parameter(self) -> Parameter:
        """Parse: [ref | const ref | out] <type> <name>"""
        start = self._current()
        modifier: ParameterModifier | None = None
        if self._check(TokenType.OUT):
            self._advance()
            modifier = ParameterModifier.OUT
        elif self._check(TokenType.REF):
            self._advance()
            modifier = ParameterModifier.REF
        elif self._check(TokenType.CONST):
            self._advance()
            self._expect(TokenType.REF)
            modifier = ParameterModifier.CONST_REF
        param_type = self._parse_type()
        name_tok = self._expect_identifier()
        return Parameter(name=name_tok.value, type=param_type, modifier=modifier, span=self._span(start))
