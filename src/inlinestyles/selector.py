# CSS Selector implementation for inlinestyles
# Parses selectors from tinycss2 component values and matches them against
# document nodes.

from __future__ import annotations

from typing import Any

import tinycss2

from .constants import DYNAMIC_PSEUDO_CLASSES, LEGACY_PSEUDO_ELEMENTS


class SelectorError(ValueError):
    """Raised when a CSS selector is invalid or unsupported."""


# AST Node types for parsed selectors


class SimpleSelector:
    """A single simple selector (tag, id, class, attribute, pseudo-class or pseudo-element)."""

    __slots__ = ("arg", "name", "operator", "type", "value")

    TYPE_TAG: str = "tag"
    TYPE_ID: str = "id"
    TYPE_CLASS: str = "class"
    TYPE_UNIVERSAL: str = "universal"
    TYPE_ATTR: str = "attr"
    TYPE_PSEUDO: str = "pseudo"
    TYPE_PSEUDO_ELEMENT: str = "pseudo-element"

    type: str
    name: str | None
    operator: str | None
    value: str | None
    arg: Any

    def __init__(
        self,
        selector_type: str,
        name: str | None = None,
        operator: str | None = None,
        value: str | None = None,
        arg: Any = None,
    ) -> None:
        self.type = selector_type
        self.name = name
        self.operator = operator
        self.value = value
        self.arg = arg  # Parsed selector for :not(), expression text for :nth-*()

    def __repr__(self) -> str:
        parts = [f"SimpleSelector({self.type!r}"]
        if self.name:
            parts.append(f", name={self.name!r}")
        if self.operator:
            parts.append(f", op={self.operator!r}")
        if self.value is not None:
            parts.append(f", value={self.value!r}")
        if self.arg is not None:
            parts.append(f", arg={self.arg!r}")
        parts.append(")")
        return "".join(parts)


class CompoundSelector:
    """A sequence of simple selectors (e.g., div.foo#bar)."""

    __slots__ = ("selectors",)

    selectors: list[SimpleSelector]

    def __init__(self, selectors: list[SimpleSelector] | None = None) -> None:
        self.selectors = selectors or []

    def __repr__(self) -> str:
        return f"CompoundSelector({self.selectors!r})"


class ComplexSelector:
    """A chain of compound selectors with combinators."""

    __slots__ = ("parts",)

    parts: list[tuple[str | None, CompoundSelector]]

    def __init__(self) -> None:
        # List of (combinator, compound_selector) tuples
        # First item has combinator=None
        self.parts = []

    def __repr__(self) -> str:
        return f"ComplexSelector({self.parts!r})"


class SelectorList:
    """A comma-separated list of complex selectors."""

    __slots__ = ("selectors",)

    selectors: list[ComplexSelector]

    def __init__(self, selectors: list[ComplexSelector] | None = None) -> None:
        self.selectors = selectors or []

    def __repr__(self) -> str:
        return f"SelectorList({self.selectors!r})"


# Type alias for parsed selectors
ParsedSelector = ComplexSelector | SelectorList

_ATTR_OPERATORS = frozenset({"=", "~=", "|=", "^=", "$=", "*="})


class SelectorParser:
    """Parses tinycss2 component values into a selector AST."""

    __slots__ = ("pos", "tokens")

    tokens: list[Any]
    pos: int

    def __init__(self, tokens: list[Any]) -> None:
        self.tokens = [t for t in tokens if t.type != "comment"]
        self.pos = 0

    def _peek(self, offset: int = 0) -> Any | None:
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def _advance(self) -> Any | None:
        token = self._peek()
        self.pos += 1
        return token

    def _skip_whitespace(self) -> bool:
        skipped = False
        while (token := self._peek()) is not None and token.type == "whitespace":
            self.pos += 1
            skipped = True
        return skipped

    def _is_literal(self, token: Any | None, value: str) -> bool:
        return token is not None and token.type == "literal" and token.value == value

    def parse(self) -> ParsedSelector:
        """Parse a complete selector (possibly comma-separated list)."""
        selectors: list[ComplexSelector] = [self._parse_complex_selector()]

        while self._is_literal(self._peek(), ","):
            self._advance()  # consume comma
            selectors.append(self._parse_complex_selector())

        token = self._peek()
        if token is not None:
            raise SelectorError(f"Unexpected token: {tinycss2.serialize([token])!r}")

        if len(selectors) == 1:
            return selectors[0]
        return SelectorList(selectors)

    def _parse_complex_selector(self) -> ComplexSelector:
        """Parse a complex selector (compound selectors with combinators)."""
        self._skip_whitespace()
        complex_sel = ComplexSelector()

        # First compound selector (no combinator)
        compound = self._parse_compound_selector()
        if not compound:
            raise SelectorError("Expected selector")
        complex_sel.parts.append((None, compound))

        while True:
            had_whitespace = self._skip_whitespace()
            token = self._peek()
            if token is None or self._is_literal(token, ","):
                break
            if token.type == "literal" and token.value in {">", "+", "~"}:
                self._advance()
                self._skip_whitespace()
                combinator = token.value
            elif had_whitespace:
                combinator = " "
            else:
                raise SelectorError(f"Unexpected token: {tinycss2.serialize([token])!r}")

            compound = self._parse_compound_selector()
            if not compound:
                raise SelectorError("Expected selector after combinator")
            complex_sel.parts.append((combinator, compound))

        return complex_sel

    def _parse_compound_selector(self) -> CompoundSelector | None:
        """Parse a compound selector (sequence of simple selectors)."""
        simple_selectors: list[SimpleSelector] = []

        while True:
            token = self._peek()
            if token is None:
                break

            if token.type == "ident" and not simple_selectors:
                self._advance()
                simple_selectors.append(SimpleSelector(SimpleSelector.TYPE_TAG, name=token.value))

            elif self._is_literal(token, "*") and not simple_selectors:
                self._advance()
                simple_selectors.append(SimpleSelector(SimpleSelector.TYPE_UNIVERSAL))

            elif token.type == "hash":
                if not token.is_identifier:
                    raise SelectorError(f"Invalid ID selector: #{token.value}")
                self._advance()
                simple_selectors.append(SimpleSelector(SimpleSelector.TYPE_ID, name=token.value))

            elif self._is_literal(token, "."):
                self._advance()
                name_token = self._advance()
                if name_token is None or name_token.type != "ident":
                    raise SelectorError("Expected identifier after .")
                simple_selectors.append(SimpleSelector(SimpleSelector.TYPE_CLASS, name=name_token.value))

            elif token.type == "[] block":
                self._advance()
                simple_selectors.append(self._parse_attribute_selector(token.content))

            elif self._is_literal(token, ":"):
                simple_selectors.append(self._parse_pseudo_selector())

            else:
                break

        if not simple_selectors:
            return None
        return CompoundSelector(simple_selectors)

    def _parse_attribute_selector(self, content: list[Any]) -> SimpleSelector:
        """Parse an attribute selector [attr], [attr=value], etc."""
        tokens = [t for t in content if t.type not in {"whitespace", "comment"}]
        if not tokens or tokens[0].type != "ident":
            raise SelectorError("Expected attribute name")
        attr_name = tokens[0].value

        if len(tokens) == 1:
            return SimpleSelector(SimpleSelector.TYPE_ATTR, name=attr_name)

        op_token = tokens[1]
        if op_token.type != "literal" or op_token.value not in _ATTR_OPERATORS:
            raise SelectorError(f"Unexpected token in attribute selector: {tinycss2.serialize([op_token])!r}")
        if len(tokens) < 3 or tokens[2].type not in {"ident", "string"}:
            raise SelectorError(f"Expected value after {op_token.value} in attribute selector")
        # A trailing case-sensitivity flag ("i" or "s") is accepted and ignored.
        if len(tokens) > 4 or (len(tokens) == 4 and tokens[3].type != "ident"):
            raise SelectorError("Expected ] in attribute selector")

        return SimpleSelector(SimpleSelector.TYPE_ATTR, name=attr_name, operator=op_token.value, value=tokens[2].value)

    def _parse_pseudo_selector(self) -> SimpleSelector:
        """Parse a pseudo-class like :first-child or :not(selector), or a pseudo-element."""
        self._advance()  # consume ':'
        if self._is_literal(self._peek(), ":"):
            self._advance()
            token = self._advance()
            if token is None or token.type != "ident":
                raise SelectorError("Expected pseudo-element name after ::")
            return SimpleSelector(SimpleSelector.TYPE_PSEUDO_ELEMENT, name=token.lower_value)

        token = self._advance()
        if token is None:
            raise SelectorError("Expected pseudo-class name after :")

        if token.type == "ident":
            if token.lower_value in LEGACY_PSEUDO_ELEMENTS:
                return SimpleSelector(SimpleSelector.TYPE_PSEUDO_ELEMENT, name=token.lower_value)
            return SimpleSelector(SimpleSelector.TYPE_PSEUDO, name=token.lower_value)

        if token.type == "function":
            name = token.lower_name
            if name == "not":
                inner = SelectorParser(token.arguments).parse()
                return SimpleSelector(SimpleSelector.TYPE_PSEUDO, name=name, arg=inner)
            # Token by token: tinycss2.serialize() would insert comments into "2n+1"
            arg = "".join(t.serialize() for t in token.arguments if t.type != "comment").strip()
            return SimpleSelector(SimpleSelector.TYPE_PSEUDO, name=name, arg=arg or None)

        raise SelectorError(f"Expected pseudo-class name after :, got {tinycss2.serialize([token])!r}")


class SelectorMatcher:
    """Matches selectors against DOM nodes."""

    __slots__ = ()

    def matches(self, node: Any, selector: ParsedSelector | CompoundSelector | SimpleSelector) -> bool:
        """Check if a node matches a parsed selector."""
        if isinstance(selector, SelectorList):
            return any(self.matches(node, sel) for sel in selector.selectors)
        if isinstance(selector, ComplexSelector):
            return self._matches_complex(node, selector)
        if isinstance(selector, CompoundSelector):
            return self._matches_compound(node, selector)
        if isinstance(selector, SimpleSelector):
            return self._matches_simple(node, selector)
        return False

    def _matches_complex(self, node: Any, selector: ComplexSelector) -> bool:
        """Match a complex selector (with combinators)."""
        # Work backwards from the rightmost compound selector
        parts = selector.parts
        if not parts:
            return False

        combinator, compound = parts[-1]
        if not self._matches_compound(node, compound):
            return False

        current = node
        for i in range(len(parts) - 2, -1, -1):
            combinator = parts[i + 1][0]
            prev_compound = parts[i][1]

            if combinator == " ":  # Descendant
                ancestor = current.parent
                while ancestor is not None and not self._matches_compound(ancestor, prev_compound):
                    ancestor = ancestor.parent
                if ancestor is None:
                    return False
                current = ancestor

            elif combinator == ">":  # Child
                parent = current.parent
                if parent is None or not self._matches_compound(parent, prev_compound):
                    return False
                current = parent

            elif combinator == "+":  # Adjacent sibling
                sibling = self._get_previous_sibling(current)
                if sibling is None or not self._matches_compound(sibling, prev_compound):
                    return False
                current = sibling

            else:  # combinator == "~" - General sibling
                sibling = self._get_previous_sibling(current)
                while sibling is not None and not self._matches_compound(sibling, prev_compound):
                    sibling = self._get_previous_sibling(sibling)
                if sibling is None:
                    return False
                current = sibling

        return True

    def _matches_compound(self, node: Any, compound: CompoundSelector) -> bool:
        """Match a compound selector (all simple selectors must match)."""
        return all(self._matches_simple(node, simple) for simple in compound.selectors)

    def _matches_simple(self, node: Any, selector: SimpleSelector) -> bool:
        """Match a simple selector against a node."""
        # Text nodes, the document and other non-element nodes never match
        if node.name.startswith("#") or node.name == "!doctype":
            return False

        sel_type = selector.type

        if sel_type == SimpleSelector.TYPE_UNIVERSAL:
            return True

        if sel_type == SimpleSelector.TYPE_TAG:
            # Tag names compare case-insensitively (HTML) while keeping
            # camelCase SVG names like linearGradient matchable
            return bool(node.name.lower() == (selector.name or "").lower())

        if sel_type == SimpleSelector.TYPE_ID:
            node_id = node.attrs.get("id", "") if node.attrs else ""
            return node_id == selector.name

        if sel_type == SimpleSelector.TYPE_CLASS:
            class_attr = node.attrs.get("class", "") if node.attrs else ""
            classes = class_attr.split() if class_attr else []
            return selector.name in classes

        if sel_type == SimpleSelector.TYPE_ATTR:
            return self._matches_attribute(node, selector)

        if sel_type == SimpleSelector.TYPE_PSEUDO:
            return self._matches_pseudo(node, selector)

        # Pseudo-elements address generated content, never a node
        return False

    def _matches_attribute(self, node: Any, selector: SimpleSelector) -> bool:
        """Match an attribute selector."""
        attrs = node.attrs or {}
        attr_name = (selector.name or "").lower()

        attr_value: str | None = None
        found = False
        for name, value in attrs.items():
            if name.lower() == attr_name:
                attr_value = value or ""
                found = True
                break

        if not found or attr_value is None:
            return False

        # Presence check only
        if selector.operator is None:
            return True

        value = selector.value or ""
        op = selector.operator

        if op == "=":
            return attr_value == value

        if op == "~=":
            return value in attr_value.split()

        if op == "|=":
            return attr_value == value or attr_value.startswith(value + "-")

        if op == "^=":
            return attr_value.startswith(value) if value else False

        if op == "$=":
            return attr_value.endswith(value) if value else False

        # op == "*="
        return value in attr_value if value else False

    def _matches_pseudo(self, node: Any, selector: SimpleSelector) -> bool:
        """Match a pseudo-class selector."""
        name = selector.name or ""

        if name in DYNAMIC_PSEUDO_CLASSES:
            return False

        if name == "first-child":
            return self._is_first_child(node)

        if name == "last-child":
            return self._is_last_child(node)

        if name == "only-child":
            return self._is_first_child(node) and self._is_last_child(node)

        if name == "nth-child":
            return self._matches_nth_child(node, selector.arg)

        if name == "not":
            return not self.matches(node, selector.arg)

        if name == "empty":
            for child in node.children or []:
                if child.name == "#text":
                    if child.data:
                        return False
                elif not child.name.startswith("#"):
                    return False
            return True

        if name == "root":
            parent = node.parent
            return parent is not None and parent.name == "#document"

        if name == "first-of-type":
            return self._is_first_of_type(node)

        if name == "last-of-type":
            return self._is_last_of_type(node)

        if name == "only-of-type":
            return self._is_first_of_type(node) and self._is_last_of_type(node)

        if name == "nth-of-type":
            return self._matches_nth_of_type(node, selector.arg)

        raise SelectorError(f"Unsupported pseudo-class: :{name}")

    def _get_element_children(self, parent: Any) -> list[Any]:
        """Get only element children (exclude text, comments, etc.)."""
        if parent is None or not parent.has_child_nodes():
            return []
        return [c for c in parent.children if not c.name.startswith("#") and c.name != "!doctype"]

    def _get_previous_sibling(self, node: Any) -> Any | None:
        """Get the previous element sibling. Returns None if node is first or detached."""
        parent = node.parent
        if parent is None:
            return None

        prev: Any | None = None
        for child in self._get_element_children(parent):
            if child is node:
                return prev
            prev = child
        return None

    def _is_first_child(self, node: Any) -> bool:
        elements = self._get_element_children(node.parent)
        return bool(elements) and elements[0] is node

    def _is_last_child(self, node: Any) -> bool:
        elements = self._get_element_children(node.parent)
        return bool(elements) and elements[-1] is node

    def _siblings_of_type(self, node: Any) -> list[Any]:
        node_name = node.name.lower()
        return [c for c in self._get_element_children(node.parent) if c.name.lower() == node_name]

    def _is_first_of_type(self, node: Any) -> bool:
        siblings = self._siblings_of_type(node)
        return bool(siblings) and siblings[0] is node

    def _is_last_of_type(self, node: Any) -> bool:
        siblings = self._siblings_of_type(node)
        return bool(siblings) and siblings[-1] is node

    def _parse_nth_expression(self, expr: str | None) -> tuple[int, int]:
        """Parse an nth-child expression like '2n+1', 'odd', 'even', '3'."""
        if not expr:
            raise SelectorError("Missing :nth-* expression")

        expr = expr.strip().lower().replace(" ", "")

        if expr == "odd":
            return (2, 1)  # 2n+1
        if expr == "even":
            return (2, 0)  # 2n

        try:
            if "n" not in expr:
                return (0, int(expr))
            a_part, b_part = expr.split("n", 1)
            if a_part in {"", "+"}:
                a = 1
            elif a_part == "-":
                a = -1
            else:
                a = int(a_part)
            b = int(b_part) if b_part else 0
        except ValueError:
            raise SelectorError(f"Invalid :nth-* expression: {expr!r}") from None
        return (a, b)

    def _matches_nth(self, index: int, a: int, b: int) -> bool:
        """Check if 1-based index matches An+B formula."""
        if a == 0:
            return index == b
        diff = index - b
        if a > 0:
            return diff >= 0 and diff % a == 0
        return diff <= 0 and diff % a == 0

    def _matches_nth_child(self, node: Any, arg: str | None) -> bool:
        a, b = self._parse_nth_expression(arg)
        for i, child in enumerate(self._get_element_children(node.parent)):
            if child is node:
                return self._matches_nth(i + 1, a, b)
        return False

    def _matches_nth_of_type(self, node: Any, arg: str | None) -> bool:
        a, b = self._parse_nth_expression(arg)
        for i, child in enumerate(self._siblings_of_type(node)):
            if child is node:
                return self._matches_nth(i + 1, a, b)
        return False


def parse_selector(selector_string: str) -> ParsedSelector:
    """Parse a CSS selector string into an AST."""
    if not selector_string or not selector_string.strip():
        raise SelectorError("Empty selector")

    tokens = tinycss2.parse_component_value_list(selector_string.strip(), skip_comments=True)
    for token in tokens:
        if token.type == "error":
            raise SelectorError(f"Invalid selector {selector_string!r}: {token.message}")
    return SelectorParser(tokens).parse()


# Global matcher instance
_matcher: SelectorMatcher = SelectorMatcher()


def query(root: Any, selector_string: str) -> list[Any]:
    """
    Query the DOM tree starting from root, returning all matching elements.

    Searches descendants of root, not including root itself (matching browser
    behavior for querySelectorAll). Results are in document order.

    Args:
        root: The root node to search from
        selector_string: A CSS selector string

    Returns:
        A list of matching nodes
    """
    selector = parse_selector(selector_string)
    results: list[Any] = []
    _query_descendants(root, selector, results)
    return results


def _query_descendants(node: Any, selector: ParsedSelector, results: list[Any]) -> None:
    """Recursively search for matching nodes in descendants."""
    if node.has_child_nodes():
        for child in node.children:
            if not child.name.startswith("#") and child.name != "!doctype":
                if _matcher.matches(child, selector):
                    results.append(child)
                _query_descendants(child, selector, results)


def matches(node: Any, selector_string: str) -> bool:
    """
    Check if a node matches a CSS selector.

    Args:
        node: The node to check
        selector_string: A CSS selector string

    Returns:
        True if the node matches, False otherwise
    """
    selector = parse_selector(selector_string)
    return _matcher.matches(node, selector)
