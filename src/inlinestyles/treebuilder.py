from __future__ import annotations

from html.parser import HTMLParser
from typing import Any
from xml.parsers import expat

from .constants import VOID_ELEMENTS
from .errors import DocumentParseError, generate_error_message
from .node import ElementNode, SimpleDomNode, TextNode


class TreeBuilder:
    """Builds a node tree from start/end/text events.

    The builder is forgiving in the way most HTML consumers are: an end tag
    closes the nearest open element of that name (and everything opened
    after it), and an end tag with no open match is ignored.
    """

    __slots__ = ("document", "open_elements", "xml")

    document: SimpleDomNode
    open_elements: list[Any]
    xml: bool

    def __init__(self, xml: bool = False) -> None:
        self.xml = xml
        self.document = SimpleDomNode("#document")
        self.open_elements = []

    def _current_node(self) -> Any:
        if self.open_elements:
            return self.open_elements[-1]
        return self.document

    def start_tag(self, name: str, attrs: dict[str, str | None], self_closing: bool = False) -> ElementNode:
        parent = self._current_node()
        if name == "svg":
            namespace = "svg"
        else:
            namespace = parent.namespace or (None if self.xml else "html")
        node = ElementNode(name, attrs, namespace)
        parent.append_child(node)
        if self_closing or (not self.xml and name in VOID_ELEMENTS):
            return node
        self.open_elements.append(node)
        return node

    def end_tag(self, name: str) -> None:
        index = len(self.open_elements) - 1
        while index >= 0:
            if self.open_elements[index].name == name:
                del self.open_elements[index:]
                return
            index -= 1

    def text(self, data: str) -> None:
        if not data:
            return
        target = self._current_node()
        children = target.children
        if children and type(children[-1]) is TextNode:
            children[-1].data = (children[-1].data or "") + data
            return
        target.append_child(TextNode(data))

    def comment(self, data: str) -> None:
        self._current_node().append_child(SimpleDomNode("#comment", data=data))

    def doctype(self, data: str) -> None:
        self.document.append_child(SimpleDomNode("!doctype", data=data))

    def processing_instruction(self, data: str) -> None:
        self._current_node().append_child(SimpleDomNode("#pi", data=data))

    def finish(self) -> SimpleDomNode:
        self.open_elements = []
        return self.document


class _HTMLEventSource(HTMLParser):
    """Feeds `html.parser` events into a TreeBuilder."""

    def __init__(self, builder: TreeBuilder) -> None:
        super().__init__(convert_charrefs=True)
        self.builder = builder

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.builder.start_tag(tag, dict(attrs))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        # <foo/> only self-closes void elements in HTML; other elements stay
        # open, except in foreign (SVG) content.
        node = self.builder.start_tag(tag, dict(attrs))
        if node.namespace == "svg" and tag not in VOID_ELEMENTS:
            self.builder.end_tag(tag)

    def handle_endtag(self, tag: str) -> None:
        self.builder.end_tag(tag)

    def handle_data(self, data: str) -> None:
        self.builder.text(data)

    def handle_comment(self, data: str) -> None:
        self.builder.comment(data)

    def handle_decl(self, decl: str) -> None:
        self.builder.doctype(decl)

    def handle_pi(self, data: str) -> None:
        # html.parser reports "<?xml ...?>" as "xml ...?"
        self.builder.processing_instruction(data[:-1] if data.endswith("?") else data)


def parse_html(html: str) -> SimpleDomNode:
    """Parse HTML text into a ``#document`` node tree."""
    builder = TreeBuilder()
    source = _HTMLEventSource(builder)
    source.feed(html)
    source.close()
    return builder.finish()


def parse_xml(text: str) -> SimpleDomNode:
    """Parse XML (e.g. SVG) text into a ``#document`` node tree.

    Names keep their case and namespace prefixes are kept verbatim.

    Raises:
        DocumentParseError: If the text is not well-formed XML.
    """
    builder = TreeBuilder(xml=True)
    parser = expat.ParserCreate()
    parser.ordered_attributes = False

    def xml_decl(version: str | None, encoding: str | None, standalone: int) -> None:
        parts = ["xml"]
        if version:
            parts.append(f'version="{version}"')
        if encoding:
            parts.append(f'encoding="{encoding}"')
        if standalone != -1:
            parts.append(f'standalone="{"yes" if standalone else "no"}"')
        builder.processing_instruction(" ".join(parts))

    def start_doctype(name: str, system_id: str | None, public_id: str | None, has_internal_subset: int) -> None:  # noqa: ARG001
        decl = f"DOCTYPE {name}"
        if public_id:
            decl += f' PUBLIC "{public_id}" "{system_id or ""}"'
        elif system_id:
            decl += f' SYSTEM "{system_id}"'
        builder.doctype(decl)

    parser.XmlDeclHandler = xml_decl
    parser.StartDoctypeDeclHandler = start_doctype
    parser.StartElementHandler = builder.start_tag
    parser.EndElementHandler = builder.end_tag
    parser.CharacterDataHandler = builder.text
    parser.CommentHandler = builder.comment
    parser.ProcessingInstructionHandler = lambda target, data: builder.processing_instruction(
        f"{target} {data}" if data else target
    )

    try:
        parser.Parse(text, True)
    except expat.ExpatError as e:
        detail = expat.errors.messages[e.code]
        raise DocumentParseError(
            "malformed-xml",
            generate_error_message("malformed-xml", detail),
            line=e.lineno,
            column=e.offset + 1,
            source=text,
        ) from e
    return builder.finish()
