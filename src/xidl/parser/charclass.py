# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Unicode character classification for IDL identifiers.

Reduces the Unicode general category of a code point to the subset the
identifier rules care about.
"""

import enum
import unicodedata

# ###############
# Public Interface
# ###############


class CharClass(enum.Enum):
    """Character categories relevant to identifier recognition."""

    UPPERCASE_LETTER = "Lu"
    LOWERCASE_LETTER = "Ll"
    TITLECASE_LETTER = "Lt"
    MODIFIER_LETTER = "Lm"
    OTHER_LETTER = "Lo"
    LETTER_NUMBER = "Nl"
    DECIMAL_DIGIT = "Nd"
    CONNECTOR_PUNCTUATION = "Pc"
    NONSPACING_MARK = "Mn"
    SPACING_MARK = "Mc"
    OTHER = "other"


MAX_CODE_POINT = 0x10FFFF

IDENTIFIER_START_CLASSES: frozenset[CharClass] = frozenset(
    {
        CharClass.UPPERCASE_LETTER,
        CharClass.LOWERCASE_LETTER,
        CharClass.TITLECASE_LETTER,
        CharClass.MODIFIER_LETTER,
        CharClass.OTHER_LETTER,
        CharClass.LETTER_NUMBER,
    }
)

IDENTIFIER_CONTINUE_CLASSES: frozenset[CharClass] = IDENTIFIER_START_CLASSES | frozenset(
    {
        CharClass.DECIMAL_DIGIT,
        CharClass.CONNECTOR_PUNCTUATION,
        CharClass.NONSPACING_MARK,
        CharClass.SPACING_MARK,
    }
)


def classify(code_point: int) -> CharClass:
    """Return the identifier-relevant category of a code point.

    Args:
        code_point: An integer in the range ``0..0x10FFFF``.

    Returns:
        The matching CharClass. Code points whose general category is not
        relevant to identifiers (controls, whitespace, symbols, unassigned)
        map to ``CharClass.OTHER``.

    Raises:
        ValueError: If the value is not a valid Unicode code point.
    """
    if code_point < 0 or code_point > MAX_CODE_POINT:
        raise ValueError(f"Not a Unicode code point: {code_point:#x}")
    if code_point < 128:
        return _ASCII_TABLE[code_point]
    return _category_to_class(unicodedata.category(chr(code_point)))


def is_identifier_start(ch: str) -> bool:
    """Return True if *ch* may begin an identifier.

    The underscore is accepted in addition to the letter categories.
    """
    if ch == "_":
        return True
    return bool(ch) and classify(ord(ch)) in IDENTIFIER_START_CLASSES


def is_identifier_continue(ch: str) -> bool:
    """Return True if *ch* may appear after the first character of an identifier."""
    return bool(ch) and classify(ord(ch)) in IDENTIFIER_CONTINUE_CLASSES


# ################
# Implementation
# ################

_CATEGORY_CLASSES: dict[str, CharClass] = {c.value: c for c in CharClass if c is not CharClass.OTHER}


def _category_to_class(category: str) -> CharClass:
    return _CATEGORY_CLASSES.get(category, CharClass.OTHER)


# Built once at import; the ASCII range covers nearly every character in real sources.
_ASCII_TABLE: tuple[CharClass, ...] = tuple(_category_to_class(unicodedata.category(chr(cp))) for cp in range(128))
