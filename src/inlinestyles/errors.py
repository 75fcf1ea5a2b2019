"""Error types and message definitions for stylesheet inlining.

Parse errors carry a short kebab-case ``code`` (the tinycss2 error kind, or
one of the codes below) and a human-readable message looked up from a single
table.
"""

from __future__ import annotations


def generate_error_message(code: str, detail: str | None = None) -> str:
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        detail: Optional detail (selector, property, tag) for context

    Returns:
        Human-readable error message string
    """
    messages = {
        # ================================================================
        # STYLESHEET ERRORS (tinycss2 parse error kinds)
        # ================================================================
        "invalid": "Invalid CSS",
        "eof-in-string": "Unexpected end of input in string",
        "eof-in-url": "Unexpected end of input in url()",
        "bad-string": "Unterminated string",
        "bad-url": "Malformed url()",
        # ================================================================
        # DECLARATION ERRORS
        # ================================================================
        "unexpected-at-rule": f"Unexpected @{detail} rule in declaration block",
        # ================================================================
        # SERIALIZATION ERRORS
        # ================================================================
        "ruleset-without-selectors": "Cannot serialize a ruleset with no selectors",
        "unknown-rule-type": f"Cannot serialize rule of type {detail!r}",
        # ================================================================
        # DOCUMENT ERRORS
        # ================================================================
        "malformed-xml": f"Malformed XML: {detail}",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)


class InlineStylesError(Exception):
    """Base class for all errors raised while inlining styles."""


class _LocatedError(InlineStylesError, SyntaxError):
    """An error with a code and a 1-based position in some source text.

    Inherits from SyntaxError so tracebacks show the offending line with
    its position highlighted.
    """

    source_name: str = "<css>"

    code: str

    def __init__(
        self,
        code: str,
        message: str | None = None,
        *,
        line: int | None = None,
        column: int | None = None,
        source: str | None = None,
    ) -> None:
        self.code = code
        msg = message or generate_error_message(code)
        super().__init__(msg)
        self.msg = msg
        self.filename = self.source_name
        self.lineno = line
        self.offset = column
        if source is not None and line is not None:
            lines = source.split("\n")
            if 1 <= line <= len(lines):
                self.text = lines[line - 1]

    def __str__(self) -> str:
        if self.lineno is not None and self.offset is not None:
            return f"({self.lineno},{self.offset}): {self.code} - {self.msg}"
        return f"{self.code} - {self.msg}"


class StylesheetParseError(_LocatedError):
    """Raised when a stylesheet block or a style attribute is malformed CSS."""


class DocumentParseError(_LocatedError):
    """Raised when an XML document cannot be parsed."""

    source_name = "<xml>"


class SerializationError(InlineStylesError):
    """Raised when a rule tree cannot be turned back into CSS text.

    This indicates broken internal state rather than bad input.
    """

    code: str

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        super().__init__(generate_error_message(code, detail))
