"""Tests for selector parsing and matching."""

from __future__ import annotations

import pytest

from inlinestyles import Document, SelectorError, matches
from inlinestyles.selector import (
    ComplexSelector,
    SelectorList,
    SimpleSelector,
    parse_selector,
)


@pytest.fixture
def doc():
    return Document(
        "<div id='a' class='x y'>"
        "<p>1</p>"
        "<p class='y' data-kind='note-big'>2</p>"
        "<span></span>"
        "</div>"
        "<ul><li>a</li><li>b</li><li>c</li><li>d</li></ul>"
    )


def _texts(nodes):
    return [node.to_text() for node in nodes]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParse:
    def test_compound(self):
        parsed = parse_selector("div.note#main")
        assert isinstance(parsed, ComplexSelector)
        (combinator, compound), = parsed.parts
        assert combinator is None
        assert [s.type for s in compound.selectors] == ["tag", "class", "id"]

    def test_combinators(self):
        parsed = parse_selector("ul li > a + b ~ c")
        assert [part[0] for part in parsed.parts] == [None, " ", ">", "+", "~"]

    def test_list(self):
        parsed = parse_selector("a, b")
        assert isinstance(parsed, SelectorList)
        assert len(parsed.selectors) == 2

    def test_attribute_operators(self):
        for op in ("=", "~=", "|=", "^=", "$=", "*="):
            parsed = parse_selector(f"[lang{op}'en']")
            simple = parsed.parts[0][1].selectors[0]
            assert simple.type == SimpleSelector.TYPE_ATTR
            assert simple.operator == op
            assert simple.value == "en"

    def test_pseudo_element(self):
        for text in ("p::before", "p:after"):
            simple = parse_selector(text).parts[0][1].selectors[1]
            assert simple.type == SimpleSelector.TYPE_PSEUDO_ELEMENT

    def test_not_argument_is_parsed(self):
        simple = parse_selector(":not(.a)").parts[0][1].selectors[0]
        assert simple.name == "not"
        assert isinstance(simple.arg, ComplexSelector)

    @pytest.mark.parametrize("text", ["", "   ", "a!b", "#1a", "a[", "[=x]", ". a", "a >", "::"])
    def test_invalid(self, text):
        with pytest.raises(SelectorError):
            parse_selector(text)

    def test_selector_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_selector("a!b")


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class TestQuery:
    def test_type(self, doc):
        assert _texts(doc.query("p")) == ["1", "2"]

    def test_class_in_document_order(self, doc):
        assert [node.name for node in doc.query(".y")] == ["div", "p"]

    def test_id_and_child(self, doc):
        assert _texts(doc.query("#a > p.y")) == ["2"]

    def test_descendant(self, doc):
        assert len(doc.query("div p")) == 2
        assert doc.query("ul p") == []

    def test_adjacent_sibling(self, doc):
        assert _texts(doc.query("p + p")) == ["2"]

    def test_general_sibling(self, doc):
        assert [node.name for node in doc.query("p ~ span")] == ["span"]

    def test_attribute(self, doc):
        assert _texts(doc.query("[data-kind]")) == ["2"]
        assert _texts(doc.query("[data-kind|=note]")) == ["2"]
        assert _texts(doc.query("[data-kind$=big]")) == ["2"]
        assert doc.query("[data-kind=note]") == []

    def test_universal(self, doc):
        assert len(doc.query("#a > *")) == 3

    def test_first_and_last_child(self, doc):
        assert _texts(doc.query("li:first-child")) == ["a"]
        assert _texts(doc.query("li:last-child")) == ["d"]

    def test_nth_child(self, doc):
        assert _texts(doc.query("li:nth-child(2)")) == ["b"]
        assert _texts(doc.query("li:nth-child(odd)")) == ["a", "c"]
        assert _texts(doc.query("li:nth-child(2n)")) == ["b", "d"]
        assert _texts(doc.query("li:nth-child(-n+2)")) == ["a", "b"]

    def test_of_type(self, doc):
        assert _texts(doc.query("p:first-of-type")) == ["1"]
        assert _texts(doc.query("p:last-of-type")) == ["2"]
        assert [node.name for node in doc.query("#a > :only-of-type")] == ["span"]

    def test_not(self, doc):
        assert [node.name for node in doc.query("#a > :not(p)")] == ["span"]

    def test_empty(self, doc):
        assert [node.name for node in doc.query(":empty")] == ["span"]

    def test_root(self, doc):
        assert [node.name for node in doc.query(":root")] == ["div", "ul"]

    def test_dynamic_pseudo_class_matches_nothing(self, doc):
        assert doc.query("p:hover") == []
        assert doc.query("li:visited") == []

    def test_pseudo_element_matches_nothing(self, doc):
        assert doc.query("p::before") == []

    def test_unsupported_pseudo_class(self, doc):
        with pytest.raises(SelectorError):
            doc.query("p:bogus")

    def test_bad_nth_expression(self, doc):
        with pytest.raises(SelectorError):
            doc.query("li:nth-child(x)")

    def test_type_names_are_case_insensitive(self):
        svg = Document(
            '<svg xmlns="http://www.w3.org/2000/svg"><linearGradient id="g"/></svg>',
            xml=True,
        )
        assert len(svg.query("linearGradient")) == 1
        assert len(svg.query("lineargradient")) == 1


class TestMatches:
    def test_matches(self, doc):
        div = doc.query("div")[0]
        assert matches(div, "div.x")
        assert matches(div, "#a")
        assert not matches(div, "p")

    def test_text_nodes_never_match(self, doc):
        text = doc.query("li")[0].children[0]
        assert not matches(text, "*")
