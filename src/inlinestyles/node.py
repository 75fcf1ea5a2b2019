from __future__ import annotations

from typing import Any

from .selector import query
from .serialize import to_html


def _to_text_collect(node: Any, parts: list[str], strip: bool) -> None:
    name: str = node.name

    if name == "#text":
        data: str | None = node.data
        if not data:
            return
        if strip:
            data = data.strip()
            if not data:
                return
        parts.append(data)
        return

    if node.children:
        for child in node.children:
            _to_text_collect(child, parts, strip=strip)


class SimpleDomNode:
    """Document, comment, doctype and processing-instruction nodes.

    Also the base class of `ElementNode`. Only ``#document`` and elements
    take children.
    """

    __slots__ = ("attrs", "children", "data", "name", "namespace", "parent")

    name: str
    parent: SimpleDomNode | ElementNode | None
    attrs: dict[str, str | None] | None
    children: list[Any] | None
    data: str | None
    namespace: str | None

    def __init__(
        self,
        name: str,
        attrs: dict[str, str | None] | None = None,
        data: str | None = None,
        namespace: str | None = None,
    ) -> None:
        self.name = name
        self.parent = None
        self.data = data
        self.namespace = namespace

        if name in {"#comment", "#pi", "!doctype"}:
            self.children = None
            self.attrs = None
        else:
            self.children = []
            self.attrs = attrs if attrs is not None else {}

    def append_child(self, node: Any) -> None:
        if self.children is not None:
            self.children.append(node)
            node.parent = self

    def remove_child(self, node: Any) -> None:
        if self.children is not None:
            self.children.remove(node)
            node.parent = None

    def has_child_nodes(self) -> bool:
        """Return True if this node has children."""
        return bool(self.children)

    def to_html(self, indent: int = 0, indent_size: int = 2, pretty: bool = False, xml: bool = False) -> str:
        """Convert node to markup."""
        return to_html(self, indent, indent_size, pretty=pretty, xml=xml)

    def query(self, selector: str) -> list[Any]:
        """
        Query this subtree using a CSS selector.

        Args:
            selector: A CSS selector string

        Returns:
            A list of matching nodes, in document order

        Raises:
            SelectorError: If the selector is invalid
        """
        result: list[Any] = query(self, selector)
        return result

    def to_text(self, separator: str = "", strip: bool = False) -> str:
        """Return the concatenated text of this node's descendants.

        Defaults keep text exactly as parsed, which is what raw-text
        elements such as ``<style>`` need.
        """
        parts: list[str] = []
        _to_text_collect(self, parts, strip=strip)
        if not parts:
            return ""
        return separator.join(parts)


class ElementNode(SimpleDomNode):
    __slots__ = ()

    children: list[Any]
    attrs: dict[str, str | None]

    def __init__(self, name: str, attrs: dict[str, str | None] | None = None, namespace: str | None = None) -> None:
        self.name = name
        self.parent = None
        self.data = None
        self.namespace = namespace
        self.children = []
        self.attrs = attrs if attrs is not None else {}

    def set_text(self, text: str) -> None:
        """Replace all children with a single text node."""
        for child in list(self.children):
            self.remove_child(child)
        self.append_child(TextNode(text))

    def detach(self) -> None:
        """Remove this element from its parent's child list."""
        if self.parent is not None:
            self.parent.remove_child(self)


class TextNode:
    __slots__ = ("data", "name", "namespace", "parent")

    data: str | None
    name: str
    namespace: None
    parent: SimpleDomNode | ElementNode | None

    def __init__(self, data: str | None) -> None:
        self.data = data
        self.parent = None
        self.name = "#text"
        self.namespace = None

    @property
    def text(self) -> str:
        """Return the text content of this node."""
        return self.data or ""

    @property
    def children(self) -> list[Any]:
        """Return empty list for TextNode (leaf node)."""
        return []

    def has_child_nodes(self) -> bool:
        """Return False for TextNode."""
        return False

    def to_text(self, separator: str = "", strip: bool = False) -> str:  # noqa: ARG002
        if self.data is None:
            return ""
        if strip:
            return self.data.strip()
        return self.data
