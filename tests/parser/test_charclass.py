# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for Unicode character classification."""

import pytest

from xidl.parser.charclass import (
    IDENTIFIER_CONTINUE_CLASSES,
    IDENTIFIER_START_CLASSES,
    MAX_CODE_POINT,
    CharClass,
    classify,
    is_identifier_continue,
    is_identifier_start,
)

# ###############
# classify
# ###############


class TestClassify:
    @pytest.mark.parametrize(
        ("ch", "expected"),
        [
            ("A", CharClass.UPPERCASE_LETTER),
            ("z", CharClass.LOWERCASE_LETTER),
            ("ǅ", CharClass.TITLECASE_LETTER),  # Latin capital D with small z with caron
            ("ʰ", CharClass.MODIFIER_LETTER),
            ("א", CharClass.OTHER_LETTER),  # Hebrew alef
            ("Ⅰ", CharClass.LETTER_NUMBER),  # Roman numeral one
            ("7", CharClass.DECIMAL_DIGIT),
            ("٣", CharClass.DECIMAL_DIGIT),  # Arabic-Indic three
            ("_", CharClass.CONNECTOR_PUNCTUATION),
            ("\u0301", CharClass.NONSPACING_MARK),
            ("\u0903", CharClass.SPACING_MARK),
        ],
    )
    def test_relevant_categories(self, ch: str, expected: CharClass) -> None:
        assert classify(ord(ch)) == expected

    @pytest.mark.parametrize("ch", [" ", "\t", "\n", "+", "$", "{", "©", "€", "\x00"])
    def test_irrelevant_categories_map_to_other(self, ch: str) -> None:
        assert classify(ord(ch)) == CharClass.OTHER

    def test_unassigned_code_point_is_other(self) -> None:
        assert classify(0x0378) == CharClass.OTHER

    def test_boundaries_are_accepted(self) -> None:
        assert classify(0) == CharClass.OTHER
        assert classify(MAX_CODE_POINT) == CharClass.OTHER

    @pytest.mark.parametrize("code_point", [-1, MAX_CODE_POINT + 1, 0x7FFFFFFF])
    def test_out_of_range_raises(self, code_point: int) -> None:
        with pytest.raises(ValueError, match="code point"):
            classify(code_point)

    def test_ascii_matches_unicode_lookup(self) -> None:
        assert classify(ord("Q")) == classify(ord("Ｑ")) == CharClass.UPPERCASE_LETTER


# ###############
# Identifier predicates
# ###############


class TestIdentifierPredicates:
    def test_start_classes_are_subset_of_continue_classes(self) -> None:
        assert IDENTIFIER_START_CLASSES < IDENTIFIER_CONTINUE_CLASSES

    @pytest.mark.parametrize("ch", ["a", "Z", "_", "é", "中", "ǅ", "ʰ", "Ⅰ"])
    def test_identifier_start(self, ch: str) -> None:
        assert is_identifier_start(ch)

    @pytest.mark.parametrize("ch", ["0", "9", "\u0301", "-", " ", "", "‿"])
    def test_not_identifier_start(self, ch: str) -> None:
        assert not is_identifier_start(ch)

    @pytest.mark.parametrize("ch", ["a", "_", "0", "٣", "\u0301", "\u0903", "‿"])
    def test_identifier_continue(self, ch: str) -> None:
        assert is_identifier_continue(ch)

    @pytest.mark.parametrize("ch", ["-", ".", " ", "", "©"])
    def test_not_identifier_continue(self, ch: str) -> None:
        assert not is_identifier_continue(ch)
