"""Markup serialization for document nodes (HTML and XML flavours)."""

from __future__ import annotations

# ruff: noqa: PERF401

from typing import Any

from .constants import RAWTEXT_ELEMENTS, VOID_ELEMENTS


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def _raw_text(node: Any, xml: bool) -> str:
    text = "".join(child.data or "" for child in node.children if child.name == "#text")
    if xml and ("<" in text or "&" in text) and "]]>" not in text:
        return f"<![CDATA[{text}]]>"
    return text


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None, *, xml: bool = False, close: bool = False) -> str:
    attrs = attrs or {}
    parts: list[str] = ["<", name]
    for key, value in attrs.items():
        if value is None and not xml:
            parts.extend([" ", key])
        else:
            parts.extend([" ", key, '="', _escape_attr_value(value or ""), '"'])
    parts.append("/>" if close else ">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Any, indent: int = 0, indent_size: int = 2, *, pretty: bool = False, xml: bool = False) -> str:
    """Convert node to markup.

    With ``pretty=False`` (the default) the output reproduces the parsed
    document; whitespace-only text is kept as is.
    """
    if node.name == "#document":
        parts: list[str] = []
        for child in node.children or []:
            child_html = _node_to_html(child, indent, indent_size, pretty, xml)
            if child_html:
                parts.append(child_html)
        return "\n".join(parts) if pretty else "".join(parts)
    return _node_to_html(node, indent, indent_size, pretty, xml)


def _node_to_html(node: Any, indent: int, indent_size: int, pretty: bool, xml: bool) -> str:
    prefix = " " * (indent * indent_size) if pretty else ""
    newline = "\n" if pretty else ""
    name: str = node.name

    # Text node
    if name == "#text":
        text: str | None = node.data
        if pretty:
            text = text.strip() if text else ""
            if text:
                return f"{prefix}{_escape_text(text)}"
            return ""
        return _escape_text(text)

    if name == "#comment":
        return f"{prefix}<!--{node.data or ''}-->"

    if name == "!doctype":
        return f"{prefix}<!{node.data or 'DOCTYPE html'}>"

    if name == "#pi":
        return f"{prefix}<?{node.data or ''}?>"

    # Element node
    attrs: dict[str, str | None] = node.attrs or {}
    children: list[Any] = node.children or []

    if xml and not children:
        return f"{prefix}{serialize_start_tag(name, attrs, xml=True, close=True)}"

    open_tag = serialize_start_tag(name, attrs, xml=xml)

    if not xml and name in VOID_ELEMENTS:
        return f"{prefix}{open_tag}"

    if not children:
        return f"{prefix}{open_tag}{serialize_end_tag(name)}"

    if name.lower() in RAWTEXT_ELEMENTS:
        return f"{prefix}{open_tag}{_raw_text(node, xml)}{serialize_end_tag(name)}"

    # Text-only children render inline
    if pretty and all(c.name == "#text" for c in children):
        return f"{prefix}{open_tag}{_escape_text(node.to_text())}{serialize_end_tag(name)}"

    parts = [f"{prefix}{open_tag}"]
    for child in children:
        child_html = _node_to_html(child, indent + 1, indent_size, pretty, xml)
        if child_html:
            parts.append(child_html)
    parts.append(f"{prefix}{serialize_end_tag(name)}")
    return newline.join(parts) if pretty else "".join(parts)
