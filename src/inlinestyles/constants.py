from __future__ import annotations

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose text content is written out without escaping.
RAWTEXT_ELEMENTS: frozenset[str] = frozenset({"style", "script"})

# Elements carrying an embedded stylesheet.
STYLE_ELEMENT = "style"

STYLE_ATTRIBUTE = "style"

# Pseudo-classes that depend on user interaction or browser state. They are
# valid selectors but never match a static document.
DYNAMIC_PSEUDO_CLASSES: frozenset[str] = frozenset(
    {
        "active",
        "checked",
        "disabled",
        "enabled",
        "focus",
        "focus-visible",
        "focus-within",
        "hover",
        "link",
        "target",
        "visited",
    }
)

# CSS2 pseudo-elements that may be written with a single colon.
LEGACY_PSEUDO_ELEMENTS: frozenset[str] = frozenset({"before", "after", "first-line", "first-letter"})
