# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Forward-only token buffer with lookahead."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

from xidl.parser.lexer import Token, TokenType

# ###############
# Public Interface
# ###############


class TokenStream:
    """Buffers tokens from a lexer and offers k-token lookahead.

    Tokens are pulled from the underlying iterable only as far as lookahead
    requires. The stream never rewinds. Once the EOF token is reached it is
    returned for every further peek and advance.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._source: Iterator[Token] = iter(tokens)
        self._buffer: deque[Token] = deque()
        self._eof: Token | None = None
        self._last: Token | None = None
        self._consumed = 0

    @property
    def consumed(self) -> int:
        """Number of tokens consumed so far (EOF is never counted)."""
        return self._consumed

    def peek(self, k: int = 0) -> Token:
        """Return the k-th unconsumed token without consuming it."""
        if k < 0:
            raise ValueError("Lookahead distance must be non-negative")
        while len(self._buffer) <= k:
            if not self._fill():
                return self._eof_token()
        return self._buffer[k]

    def advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self.peek()
        if tok.type != TokenType.EOF:
            self._buffer.popleft()
            self._consumed += 1
        return tok

    def check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self.peek().type in types

    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    # ------------------------------------------------------------------
    # Buffer management
    # ------------------------------------------------------------------

    def _fill(self) -> bool:
        """Pull one token into the buffer. Returns False once the input is exhausted."""
        if self._eof is not None:
            return False
        tok = next(self._source, None)
        if tok is None:
            # Input without a terminal EOF token; synthesize one after the last token.
            last = self._last
            if last is None:
                self._eof = Token(TokenType.EOF, "", 1, 1, 0)
            else:
                self._eof = Token(TokenType.EOF, "", last.line, last.column + len(last.value), last.end)
            return False
        if tok.type == TokenType.EOF:
            self._eof = tok
            return False
        self._buffer.append(tok)
        self._last = tok
        return True

    def _eof_token(self) -> Token:
        assert self._eof is not None
        return self._eof
