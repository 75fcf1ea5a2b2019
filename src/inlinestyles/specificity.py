"""CSS selector specificity.

Specificity is a 4-tuple ``(inline, ids, classes, types)``:

- ``inline`` is 1 only for declarations from a ``style`` attribute;
- ``ids`` counts ID selectors;
- ``classes`` counts class selectors, attribute selectors and pseudo-classes;
- ``types`` counts type selectors and pseudo-elements.

The universal selector and combinators add nothing. ``:not(x)`` adds the
specificity of its argument (the most specific alternative when the argument
is a list). Tuples compare lexicographically, so plain ``<`` orders them.
"""

from __future__ import annotations

from .selector import (
    ParsedSelector,
    SelectorList,
    SimpleSelector,
    parse_selector,
)

Specificity = tuple[int, int, int, int]

INLINE_SPECIFICITY: Specificity = (1, 0, 0, 0)


def _add(a: Specificity, b: Specificity) -> Specificity:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2], a[3] + b[3])


def _simple_specificity(simple: SimpleSelector) -> Specificity:
    sel_type = simple.type
    if sel_type == SimpleSelector.TYPE_ID:
        return (0, 1, 0, 0)
    if sel_type in {SimpleSelector.TYPE_CLASS, SimpleSelector.TYPE_ATTR}:
        return (0, 0, 1, 0)
    if sel_type == SimpleSelector.TYPE_PSEUDO:
        if simple.name == "not" and simple.arg is not None:
            return selector_specificity(simple.arg)
        return (0, 0, 1, 0)
    if sel_type in {SimpleSelector.TYPE_TAG, SimpleSelector.TYPE_PSEUDO_ELEMENT}:
        return (0, 0, 0, 1)
    return (0, 0, 0, 0)


def selector_specificity(selector: ParsedSelector) -> Specificity:
    """Return the specificity of a parsed selector."""
    if isinstance(selector, SelectorList):
        return max(selector_specificity(sel) for sel in selector.selectors)

    total: Specificity = (0, 0, 0, 0)
    for _combinator, compound in selector.parts:
        for simple in compound.selectors:
            total = _add(total, _simple_specificity(simple))
    return total


def specificity(selector_string: str) -> Specificity:
    """Return the specificity of a selector string.

    Raises:
        SelectorError: If the selector cannot be parsed
    """
    return selector_specificity(parse_selector(selector_string))


def compare_specificity(a: str, b: str) -> int:
    """Compare two selectors by specificity.

    Returns -1 if ``a`` is less specific than ``b``, 1 if more specific,
    and 0 if equal.
    """
    spec_a = specificity(a)
    spec_b = specificity(b)
    if spec_a < spec_b:
        return -1
    if spec_a > spec_b:
        return 1
    return 0
