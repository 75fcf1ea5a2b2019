from .errors import DocumentParseError, InlineStylesError, SerializationError, StylesheetParseError
from .inliner import InlineOptions, inline_styles
from .node import ElementNode, SimpleDomNode, TextNode
from .parser import Document
from .selector import SelectorError, matches, query
from .specificity import compare_specificity, specificity

__all__ = [
    "Document",
    "DocumentParseError",
    "ElementNode",
    "InlineOptions",
    "InlineStylesError",
    "SelectorError",
    "SerializationError",
    "SimpleDomNode",
    "StylesheetParseError",
    "TextNode",
    "compare_specificity",
    "inline_styles",
    "matches",
    "query",
    "specificity",
]
