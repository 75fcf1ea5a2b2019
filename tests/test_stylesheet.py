"""Tests for the stylesheet codec."""

from __future__ import annotations

import pytest

from inlinestyles.errors import SerializationError, StylesheetParseError
from inlinestyles.stylesheet import (
    AtRule,
    Declaration,
    RuleTree,
    Ruleset,
    decode,
    decode_declarations,
    encode,
    encode_declarations,
)


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


class TestDecode:
    def test_single_ruleset(self):
        tree = decode("a { color: red; }")
        assert len(tree.rules) == 1
        rule = tree.rules[0]
        assert isinstance(rule, Ruleset)
        assert rule.selectors == ["a"]
        assert rule.declarations == [Declaration("color", "red")]

    def test_selector_group_is_split(self):
        tree = decode("h1 , h2>p { margin: 0 auto }")
        assert tree.rules[0].selectors == ["h1", "h2>p"]
        assert tree.rules[0].declarations == [Declaration("margin", "0 auto")]

    def test_selectors_are_normalized(self):
        spaced = decode("div   p > a{x:y}").rules[0].selectors
        tight = decode("div p>a{x:y}").rules[0].selectors
        assert spaced == tight == ["div p>a"]

    def test_nested_selectors_are_normalized(self):
        spaced = decode("p:not( a > b ), [ href = 'x' ], :not( .a , .b ){x:y}").rules[0].selectors
        tight = decode("p:not(a>b), [href='x'], :not(.a,.b){x:y}").rules[0].selectors
        assert spaced == tight == ["p:not(a>b)", '[href="x"]', ":not(.a,.b)"]

    def test_value_whitespace_inside_functions_is_kept(self):
        tree = decode("a { width: calc( 1px  +  2px ) }")
        assert tree.rules[0].declarations == [Declaration("width", "calc(1px + 2px)")]

    def test_comments_are_dropped(self):
        tree = decode("/* header */ a /* x */ { color: /* y */ red }")
        assert tree.rules[0].selectors == ["a"]
        assert tree.rules[0].declarations == [Declaration("color", "red")]

    def test_important_flag(self):
        tree = decode("a { color: red !important }")
        assert tree.rules[0].declarations == [Declaration("color", "red", important=True)]

    def test_rules_keep_source_order(self):
        tree = decode("a{x:1} b{x:2} c{x:3}")
        assert [rule.selectors for rule in tree.rules] == [["a"], ["b"], ["c"]]

    def test_at_rule_is_opaque(self):
        tree = decode("@media print { a { color: red } } b { color: blue }")
        assert isinstance(tree.rules[0], AtRule)
        assert tree.rules[0].keyword == "media"
        assert isinstance(tree.rules[1], Ruleset)

    def test_empty_text(self):
        assert decode("").is_empty()
        assert decode("  \n ").is_empty()


class TestDecodeErrors:
    def test_rule_without_block(self):
        with pytest.raises(StylesheetParseError) as excinfo:
            decode("a b c")
        assert excinfo.value.code == "invalid"
        assert excinfo.value.lineno == 1

    def test_empty_selector_in_group(self):
        with pytest.raises(StylesheetParseError):
            decode("a,,b { color: red }")

    def test_malformed_declaration(self):
        with pytest.raises(StylesheetParseError):
            decode("a { color red }")

    def test_error_line_points_into_source(self):
        with pytest.raises(StylesheetParseError) as excinfo:
            decode("a { color: red }\nb { width 1px }")
        assert excinfo.value.lineno == 2
        assert excinfo.value.text == "b { width 1px }"

    def test_unterminated_string_in_value(self):
        with pytest.raises(StylesheetParseError):
            decode('a { content: "abc\n}')

    def test_at_rule_in_declaration_block(self):
        with pytest.raises(StylesheetParseError) as excinfo:
            decode_declarations("color: red; @media print { }")
        assert excinfo.value.code == "unexpected-at-rule"
        assert "@media" in str(excinfo.value)

    def test_is_a_syntax_error(self):
        with pytest.raises(SyntaxError):
            decode("a b c")


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------


class TestEncode:
    def test_compact_output(self):
        assert encode(decode("a , b { color : red ; margin:0 }")) == "a,b{color:red;margin:0}"

    def test_important(self):
        assert encode(decode("a{color:red !important}")) == "a{color:red!important}"

    def test_at_rule_verbatim(self):
        assert encode(decode("@media print{a{color:red}}b{c:d}")) == "@media print{a{color:red}}b{c:d}"

    def test_empty_declaration_block(self):
        assert encode(decode("a {}")) == "a{}"

    def test_stable_under_reencoding(self):
        once = encode(decode("ul  li > a , .x[href^='http'] { color : red ; font-family: a,  b }"))
        assert encode(decode(once)) == once

    def test_ruleset_without_selectors_is_rejected(self):
        tree = RuleTree([Ruleset([], [Declaration("color", "red")])])
        with pytest.raises(SerializationError) as excinfo:
            encode(tree)
        assert excinfo.value.code == "ruleset-without-selectors"

    def test_unknown_rule_is_rejected(self):
        tree = RuleTree([object()])  # type: ignore[list-item]
        with pytest.raises(SerializationError):
            encode(tree)


# ---------------------------------------------------------------------------
# style attribute declarations
# ---------------------------------------------------------------------------


class TestDeclarations:
    def test_decode(self):
        assert decode_declarations("color: red; font-weight:bold;") == [
            Declaration("color", "red"),
            Declaration("font-weight", "bold"),
        ]

    def test_decode_empty(self):
        assert decode_declarations("") == []

    def test_decode_malformed(self):
        with pytest.raises(StylesheetParseError):
            decode_declarations("color red")

    def test_last_occurrence_wins(self):
        declarations = [
            Declaration("color", "blue"),
            Declaration("font-weight", "bold"),
            Declaration("color", "red"),
        ]
        assert encode_declarations(declarations) == "font-weight:bold;color:red"

    def test_property_names_compare_case_insensitively(self):
        declarations = [Declaration("COLOR", "blue"), Declaration("color", "red")]
        assert encode_declarations(declarations) == "color:red"

    def test_custom_properties_are_case_sensitive(self):
        declarations = [Declaration("--Main", "1"), Declaration("--main", "2")]
        assert encode_declarations(declarations) == "--Main:1;--main:2"

    def test_important_is_not_overridden_by_normal(self):
        declarations = [Declaration("color", "blue", important=True), Declaration("color", "red")]
        assert encode_declarations(declarations) == "color:blue!important"

    def test_later_important_wins(self):
        declarations = [Declaration("color", "blue", important=True), Declaration("color", "red", important=True)]
        assert encode_declarations(declarations) == "color:red!important"

    def test_no_declarations(self):
        assert encode_declarations([]) == ""
