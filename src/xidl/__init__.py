# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""xidl - lexer and error-recovering parser for an interface definition language."""

from xidl.parser import ParseResult, parse

__version__ = "0.1.0"

__all__ = ["ParseResult", "parse", "__version__"]
