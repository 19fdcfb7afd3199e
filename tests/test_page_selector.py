"""
Unit tests for page selection expressions.
"""

import pytest

from minibooklet.logic.errors import EmptySelectionError
from minibooklet.logic.page_selector import resolve_pages, select


class TestSelect:
    def test_select_when_singles_and_range_then_zero_based_in_order(self):
        assert select("1-3,5", 5) == [0, 1, 2, 4]

    def test_select_when_descending_range_then_walks_down(self):
        assert select("5-2", 10) == [4, 3, 2, 1]

    @pytest.mark.parametrize("expression", [None, "", "   "])
    def test_select_when_blank_then_none(self, expression):
        assert select(expression, 10) is None

    def test_select_when_terms_repeat_then_repetition_kept(self):
        assert select("2, 1-3, 2", 5) == [1, 0, 1, 2, 1]

    def test_select_when_spaces_around_terms_then_ignored(self):
        assert select(" 4 ,  1 - 2 ", 5) == [3, 0, 1]

    def test_select_when_some_terms_invalid_then_skipped(self):
        assert select("3, 99, x, 0, 2-4, 1-", 5) == [2, 1, 2, 3]

    def test_select_when_range_exceeds_document_then_clamped(self):
        assert select("8-12", 10) == [7, 8, 9]
        assert select("12-8", 10) == [9, 8, 7]

    def test_select_when_range_entirely_outside_then_skipped(self):
        assert select("20-30, 1", 10) == [0]

    def test_select_when_empty_terms_then_ignored(self):
        assert select("1,,2,", 3) == [0, 1]

    def test_select_when_every_term_invalid_then_empty_selection_error(self):
        with pytest.raises(EmptySelectionError):
            select("0, 11, abc", 10)

    def test_select_when_huge_range_then_only_document_walked(self):
        assert select("1-999999999999", 3) == [0, 1, 2]


class TestResolvePages:
    def test_resolve_when_blank_then_all_pages(self):
        assert resolve_pages("", 4) == [0, 1, 2, 3]

    def test_resolve_when_expression_then_selected_pages(self):
        assert resolve_pages("4-3", 4) == [3, 2]
