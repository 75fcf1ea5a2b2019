"""Document entry point: parse markup, inline its styles, write it back."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .inliner import InlineOptions, inline_styles
from .treebuilder import parse_html, parse_xml

if TYPE_CHECKING:
    from .node import SimpleDomNode


class Document:
    __slots__ = ("root", "xml")

    root: SimpleDomNode
    xml: bool

    def __init__(self, markup: str | None, *, xml: bool = False) -> None:
        """Parse ``markup`` as HTML, or as XML (SVG and friends) with ``xml=True``.

        Raises:
            DocumentParseError: If ``xml=True`` and the markup is not
                well-formed XML.
        """
        self.xml = bool(xml)
        text = markup or ""
        self.root = parse_xml(text) if self.xml else parse_html(text)

    def query(self, selector: str) -> list[Any]:
        """Query the document using a CSS selector. Delegates to root.query()."""
        return self.root.query(selector)

    def inline_styles(self, options: InlineOptions | None = None) -> Document:
        """Move ``<style>`` rules into ``style`` attributes, in place.

        See `inlinestyles.inliner.inline_styles`.
        """
        inline_styles(self.root, options)
        return self

    def to_html(self, pretty: bool = False, indent_size: int = 2) -> str:
        """Serialize the document. Delegates to root.to_html()."""
        return self.root.to_html(indent=0, indent_size=indent_size, pretty=pretty, xml=self.xml)
