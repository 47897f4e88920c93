# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for IDL source text."""

from xidl.parser.charclass import CharClass, classify, is_identifier_continue, is_identifier_start
from xidl.parser.diagnostics import Diagnostic, DiagnosticCollector, Severity
from xidl.parser.lexer import KEYWORDS, LexerError, Token, TokenCategory, TokenType, iter_tokens, tokenize
from xidl.parser.parser import ParseError, ParseResult, parse, parse_stream
from xidl.parser.stream import TokenStream

__all__ = [
    # Character classification
    "CharClass",
    "classify",
    "is_identifier_start",
    "is_identifier_continue",
    # Lexer
    "KEYWORDS",
    "LexerError",
    "Token",
    "TokenCategory",
    "TokenType",
    "TokenStream",
    "iter_tokens",
    "tokenize",
    # Parser
    "ParseError",
    "ParseResult",
    "parse",
    "parse_stream",
    # Diagnostics
    "Diagnostic",
    "DiagnosticCollector",
    "Severity",
]
