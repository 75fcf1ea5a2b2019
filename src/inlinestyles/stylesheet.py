"""Stylesheet codec: CSS text to rule trees and back, built on tinycss2.

Output is compact (no optional whitespace, no trailing semicolons), and
``encode(decode(encode(tree)))`` equals ``encode(tree)``.
"""

from __future__ import annotations

from typing import Any

import tinycss2
from tinycss2.ast import FunctionBlock, ParenthesesBlock, SquareBracketsBlock, WhitespaceToken

from .errors import SerializationError, StylesheetParseError, generate_error_message

# Whitespace around these is insignificant inside a selector
_TIGHT_LITERALS = frozenset({">", "+", "~", ",", "=", "~=", "|=", "^=", "$=", "*="})


class Declaration:
    """A property/value pair, optionally ``!important``."""

    __slots__ = ("important", "name", "value")

    name: str
    value: str
    important: bool

    def __init__(self, name: str, value: str, important: bool = False) -> None:
        self.name = name
        self.value = value
        self.important = bool(important)

    @property
    def key(self) -> str:
        # Custom properties are case-sensitive, all others are not.
        if self.name.startswith("--"):
            return self.name
        return self.name.lower()

    def to_css(self) -> str:
        if self.important:
            return f"{self.name}:{self.value}!important"
        return f"{self.name}:{self.value}"

    def __repr__(self) -> str:
        return f"Declaration({self.to_css()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Declaration):
            return NotImplemented
        return (self.name, self.value, self.important) == (other.name, other.value, other.important)

    __hash__ = None  # type: ignore[assignment]


class Ruleset:
    """A selector group plus its declaration list."""

    __slots__ = ("declarations", "selectors")

    selectors: list[str]
    declarations: list[Declaration]

    def __init__(self, selectors: list[str], declarations: list[Declaration] | None = None) -> None:
        self.selectors = selectors
        self.declarations = declarations if declarations is not None else []

    def __repr__(self) -> str:
        return f"Ruleset({self.selectors!r}, {self.declarations!r})"


class AtRule:
    """An @-rule, kept verbatim."""

    __slots__ = ("keyword", "text")

    keyword: str
    text: str

    def __init__(self, keyword: str, text: str) -> None:
        self.keyword = keyword
        self.text = text

    def __repr__(self) -> str:
        return f"AtRule({self.text!r})"


class RuleTree:
    """The decoded contents of one stylesheet, rules in source order."""

    __slots__ = ("rules",)

    rules: list[Ruleset | AtRule]

    def __init__(self, rules: list[Ruleset | AtRule] | None = None) -> None:
        self.rules = rules if rules is not None else []

    def is_empty(self) -> bool:
        return not self.rules

    def __repr__(self) -> str:
        return f"RuleTree({self.rules!r})"


def _raise_parse_error(error: Any, source: str) -> None:
    raise StylesheetParseError(
        error.kind,
        error.message,
        line=error.source_line,
        column=error.source_column,
        source=source,
    )


def _check_tokens(tokens: list[Any], source: str) -> None:
    for token in tokens:
        if token.type == "error":
            _raise_parse_error(token, source)


def _is_tight(token: Any) -> bool:
    return token.type == "literal" and token.value in _TIGHT_LITERALS


def _collapse_whitespace(tokens: list[Any], tight: bool) -> list[Any]:
    kept = [t for t in tokens if t.type != "comment"]
    out: list[Any] = []
    for i, token in enumerate(kept):
        if token.type == "function":
            arguments = _collapse_whitespace(token.arguments, tight)
            out.append(FunctionBlock(token.source_line, token.source_column, token.name, arguments))
            continue
        if token.type == "[] block":
            content = _collapse_whitespace(token.content, tight)
            out.append(SquareBracketsBlock(token.source_line, token.source_column, content))
            continue
        if token.type == "() block":
            content = _collapse_whitespace(token.content, tight)
            out.append(ParenthesesBlock(token.source_line, token.source_column, content))
            continue
        if token.type != "whitespace":
            out.append(token)
            continue
        if not out or i == len(kept) - 1 or kept[i + 1].type == "whitespace":
            continue
        if tight and (_is_tight(out[-1]) or _is_tight(kept[i + 1])):
            continue
        out.append(WhitespaceToken(token.source_line, token.source_column, " "))
    return out


def _normalize_tokens(tokens: list[Any], *, tight_combinators: bool = False) -> str:
    """Serialize component values with whitespace collapsed to single spaces.

    Comments are dropped, at every nesting level. With ``tight_combinators``,
    whitespace around selector combinators, commas and attribute operators
    is dropped as well, so ``p:not(a > b)`` and ``p:not(a>b)`` serialize
    identically.
    """
    return tinycss2.serialize(_collapse_whitespace(tokens, tight_combinators)).strip()


def _split_selector_group(prelude: list[Any], source: str) -> list[str]:
    _check_tokens(prelude, source)
    groups: list[list[Any]] = [[]]
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            groups.append([])
        else:
            groups[-1].append(token)

    selectors: list[str] = []
    for group in groups:
        text = _normalize_tokens(group, tight_combinators=True)
        if not text:
            first = prelude[0] if prelude else None
            raise StylesheetParseError(
                "invalid",
                f"Empty selector in {tinycss2.serialize(prelude).strip()!r}",
                line=getattr(first, "source_line", None),
                column=getattr(first, "source_column", None),
                source=source,
            )
        selectors.append(text)
    return selectors


def _decode_declaration_list(tokens: list[Any] | str, source: str) -> list[Declaration]:
    declarations: list[Declaration] = []
    for item in tinycss2.parse_declaration_list(tokens, skip_comments=True, skip_whitespace=True):
        if item.type == "error":
            _raise_parse_error(item, source)
        if item.type != "declaration":
            raise StylesheetParseError(
                "unexpected-at-rule",
                generate_error_message("unexpected-at-rule", item.at_keyword),
                line=item.source_line,
                column=item.source_column,
                source=source,
            )
        _check_tokens(item.value, source)
        declarations.append(Declaration(item.name, _normalize_tokens(item.value), item.important))
    return declarations


def decode(text: str) -> RuleTree:
    """Parse stylesheet text into a RuleTree.

    Raises:
        StylesheetParseError: If the text contains malformed CSS
    """
    rules: list[Ruleset | AtRule] = []
    for node in tinycss2.parse_stylesheet(text, skip_comments=True, skip_whitespace=True):
        if node.type == "error":
            _raise_parse_error(node, text)
        elif node.type == "at-rule":
            rules.append(AtRule(node.lower_at_keyword, node.serialize().strip()))
        else:
            selectors = _split_selector_group(node.prelude, text)
            rules.append(Ruleset(selectors, _decode_declaration_list(node.content, text)))
    return RuleTree(rules)


def encode(tree: RuleTree) -> str:
    """Serialize a RuleTree back to CSS text.

    Raises:
        SerializationError: If a ruleset has no selectors left
    """
    parts: list[str] = []
    for rule in tree.rules:
        if isinstance(rule, Ruleset):
            if not rule.selectors:
                raise SerializationError("ruleset-without-selectors")
            body = ";".join(d.to_css() for d in rule.declarations)
            parts.append(f"{','.join(rule.selectors)}{{{body}}}")
        elif isinstance(rule, AtRule):
            parts.append(rule.text)
        else:
            raise SerializationError("unknown-rule-type", type(rule).__name__)
    return "".join(parts)


def decode_declarations(text: str) -> list[Declaration]:
    """Parse the value of a ``style`` attribute into declarations.

    Raises:
        StylesheetParseError: If the text contains malformed CSS
    """
    return _decode_declaration_list(text, text)


def encode_declarations(declarations: list[Declaration]) -> str:
    """Serialize declarations as a ``style`` attribute value.

    Each property is written once, at the position of the declaration that
    wins: the last one, unless an earlier one is ``!important`` and the
    later one is not.
    """
    winners: dict[str, int] = {}
    for index, declaration in enumerate(declarations):
        current = winners.get(declaration.key)
        if current is not None and declarations[current].important and not declaration.important:
            continue
        winners[declaration.key] = index
    return ";".join(declarations[i].to_css() for i in sorted(winners.values()))
