"""Tests for selector specificity."""

from __future__ import annotations

import pytest

from inlinestyles import SelectorError, compare_specificity, specificity
from inlinestyles.specificity import INLINE_SPECIFICITY


class TestSpecificity:
    @pytest.mark.parametrize(
        ("selector", "expected"),
        [
            ("*", (0, 0, 0, 0)),
            ("a", (0, 0, 0, 1)),
            ("ul li > a", (0, 0, 0, 3)),
            (".a.b", (0, 0, 2, 0)),
            ("[href]", (0, 0, 1, 0)),
            ("a:first-child", (0, 0, 1, 1)),
            ("a:hover", (0, 0, 1, 1)),
            ("p::before", (0, 0, 0, 2)),
            ("p:after", (0, 0, 0, 2)),
            ("#x", (0, 1, 0, 0)),
            ("div.a#b", (0, 1, 1, 1)),
            ("*:not(#x)", (0, 1, 0, 0)),
            (":not(.a, #b)", (0, 1, 0, 0)),
            ("li:nth-child(2n+1)", (0, 0, 1, 1)),
        ],
    )
    def test_values(self, selector, expected):
        assert specificity(selector) == expected

    def test_inline_beats_any_selector(self):
        assert INLINE_SPECIFICITY > specificity("#a#b#c .d .e f g")

    def test_invalid_selector(self):
        with pytest.raises(SelectorError):
            specificity("a!b")


class TestCompareSpecificity:
    def test_less(self):
        assert compare_specificity("a", "#x") == -1

    def test_greater(self):
        assert compare_specificity("#x", ".a.b.c.d") == 1

    def test_equal(self):
        assert compare_specificity(".a", "[b]") == 0
        assert compare_specificity("a b", "a > b") == 0

    def test_counts_compare_from_most_significant(self):
        assert compare_specificity(".a.b.c.d.e.f.g.h.i.j.k", "#x") == -1
