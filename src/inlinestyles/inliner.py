"""Move stylesheet rules from ``<style>`` elements into ``style`` attributes.

The pipeline runs in five steps over one mutable document:

1. collect every non-empty ``<style>`` element and decode its stylesheet;
2. extract one record per selector of every ruleset;
3. sort the records by specificity, keeping source order for ties;
4. merge each record's declarations into the elements it matches;
5. drop applied selectors, then empty rulesets, then empty ``<style>``
   elements, and write the remaining stylesheets back.

Stylesheets are not mutated before step 5: step 4 only records which
selectors to remove, addressing them by ``(block, rule, selector)`` index.
"""

from __future__ import annotations

import logging
from typing import Any

from .constants import STYLE_ATTRIBUTE, STYLE_ELEMENT
from .selector import SelectorError
from .specificity import Specificity, specificity
from .stylesheet import (
    Declaration,
    RuleTree,
    Ruleset,
    decode,
    decode_declarations,
    encode,
    encode_declarations,
)

logger = logging.getLogger(__name__)

# (block index, rule index, selector index)
SelectorHandle = tuple[int, int, int]

_CDATA_START = "<![CDATA["
_CDATA_END = "]]>"


class InlineOptions:
    __slots__ = ("only_matched_once", "remove_matched_selectors")

    def __init__(self, only_matched_once: bool = True, remove_matched_selectors: bool = True) -> None:
        # Skip selectors that match more than one element
        self.only_matched_once = bool(only_matched_once)
        # Delete selectors from their stylesheet once applied
        self.remove_matched_selectors = bool(remove_matched_selectors)

    def __repr__(self) -> str:
        return (
            f"InlineOptions(only_matched_once={self.only_matched_once}, "
            f"remove_matched_selectors={self.remove_matched_selectors})"
        )


class StyleBlock:
    __slots__ = ("element", "index", "tree")

    element: Any
    index: int
    tree: RuleTree

    def __init__(self, index: int, element: Any, tree: RuleTree) -> None:
        self.index = index
        self.element = element
        self.tree = tree

    def __repr__(self) -> str:
        return f"StyleBlock({self.index}, {self.tree!r})"


class SelectorRecord:
    __slots__ = ("handle", "ruleset", "selector", "sequence", "specificity")

    selector: str
    specificity: Specificity
    handle: SelectorHandle
    ruleset: Ruleset
    sequence: int

    def __init__(
        self,
        selector: str,
        selector_specificity: Specificity,
        handle: SelectorHandle,
        ruleset: Ruleset,
        sequence: int,
    ) -> None:
        self.selector = selector
        self.specificity = selector_specificity
        self.handle = handle
        self.ruleset = ruleset
        self.sequence = sequence

    def __repr__(self) -> str:
        return f"SelectorRecord({self.selector!r}, {self.specificity}, seq={self.sequence})"


def _unwrap_cdata(text: str) -> str:
    # html.parser keeps an SVG stylesheet's CDATA section as raw text
    stripped = text.strip()
    if stripped.startswith(_CDATA_START) and stripped.endswith(_CDATA_END):
        return stripped[len(_CDATA_START) : -len(_CDATA_END)]
    return text


def collect_style_blocks(root: Any) -> list[StyleBlock]:
    """Decode every non-empty ``<style>`` element under root, in document order.

    Raises:
        StylesheetParseError: If any stylesheet is malformed. Nothing has
            been modified at that point.
    """
    blocks: list[StyleBlock] = []
    for element in root.query(STYLE_ELEMENT):
        text = element.to_text()
        if not text:
            continue
        blocks.append(StyleBlock(len(blocks), element, decode(_unwrap_cdata(text))))
    return blocks


def extract_selectors(blocks: list[StyleBlock]) -> list[SelectorRecord]:
    """Return one record per selector, in block, rule, selector order."""
    records: list[SelectorRecord] = []
    for block in blocks:
        for rule_index, rule in enumerate(block.tree.rules):
            if not isinstance(rule, Ruleset):
                continue
            for selector_index, selector in enumerate(rule.selectors):
                try:
                    selector_specificity = specificity(selector)
                except SelectorError as e:
                    logger.warning("Leaving selector %r in place: %s", selector, e)
                    continue
                records.append(
                    SelectorRecord(
                        selector,
                        selector_specificity,
                        (block.index, rule_index, selector_index),
                        rule,
                        len(records),
                    )
                )
    return records


def sort_by_specificity(records: list[SelectorRecord]) -> list[SelectorRecord]:
    """Order records by ascending specificity, ties in extraction order."""
    return sorted(records, key=lambda record: (record.specificity, record.sequence))


def _match(root: Any, record: SelectorRecord) -> list[Any]:
    try:
        return root.query(record.selector)
    except SelectorError as e:
        logger.warning("Selector %r matches nothing: %s", record.selector, e)
        return []


def merge_style(declarations: list[Declaration], inline: str | None) -> str:
    """Return the style attribute value of declarations merged with an existing one.

    The existing declarations go after the merged ones, so they win.
    """
    merged = list(declarations)
    if inline:
        merged.extend(decode_declarations(inline))
    return encode_declarations(merged)


def apply_records(root: Any, records: list[SelectorRecord], options: InlineOptions) -> set[SelectorHandle]:
    """Merge each record into the elements it matches, in the given order.

    Each merge is written to the element at once, so later records match
    against the styles merged so far. A malformed ``style`` attribute stops
    the run; merges written before it stay.

    Returns the handles of the selectors to remove from their stylesheets.
    """
    removals: set[SelectorHandle] = set()
    for record in records:
        elements = _match(root, record)
        if options.only_matched_once and len(elements) > 1:
            logger.debug("Skipping %r: matches %d elements", record.selector, len(elements))
            continue

        for element in elements:
            current = element.attrs.get(STYLE_ATTRIBUTE)
            element.attrs[STYLE_ATTRIBUTE] = merge_style(record.ruleset.declarations, current)

        if options.remove_matched_selectors and elements:
            removals.add(record.handle)
        logger.debug("Applied %r to %d element(s)", record.selector, len(elements))

    return removals


def cleanup(blocks: list[StyleBlock], removals: set[SelectorHandle]) -> None:
    """Apply selector removals, then drop empty rulesets and empty blocks.

    Blocks left without rules are detached from the document; the others
    get their stylesheet text rewritten.
    """
    for block in blocks:
        rules: list[Any] = []
        for rule_index, rule in enumerate(block.tree.rules):
            if isinstance(rule, Ruleset):
                rule.selectors = [
                    selector
                    for selector_index, selector in enumerate(rule.selectors)
                    if (block.index, rule_index, selector_index) not in removals
                ]
                if not rule.selectors:
                    continue
            rules.append(rule)
        block.tree.rules = rules

    for block in blocks:
        if block.tree.is_empty():
            logger.debug("Removing emptied <%s> element", block.element.name)
            block.element.detach()
            continue
        block.element.set_text(encode(block.tree))


def inline_styles(root: Any, options: InlineOptions | None = None) -> Any:
    """Inline the document's ``<style>`` rules into ``style`` attributes.

    Mutates the tree under ``root`` in place and returns ``root``.

    Raises:
        StylesheetParseError: If a stylesheet or a style attribute is
            malformed CSS
    """
    options = options or InlineOptions()
    blocks = collect_style_blocks(root)
    records = sort_by_specificity(extract_selectors(blocks))
    removals = apply_records(root, records, options)
    cleanup(blocks, removals)
    return root
