"""Derive structural paths for lxml elements.

The authoring side records where a user clicked by turning the element into
a path of tag segments from just below ``<body>`` down to the element. A
segment is disambiguated with ``:nth-of-type(k)`` only when its parent has
more than one child with the same tag.
"""

from __future__ import annotations

from typing import Any

from lxml import etree

from scrapeweave.common.paths import join_path, nth_of_type

# Containers the walk stops at; they are never part of a path.
_BOUNDARY_TAGS = frozenset({"body", "html"})


def _is_element(node: Any) -> bool:
    # Comments, processing instructions and entities are _Element subclasses
    # whose tag is a factory function rather than a string.
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def _is_boundary(node: etree._Element) -> bool:
    if node.tag.lower() not in _BOUNDARY_TAGS:
        return False
    # Only the document's own body/html count, not a stray nested one.
    parent = node.getparent()
    return parent is None or parent.getparent() is None


def locate_path(element: Any) -> str:
    """Build the structural path of an element.

    Args:
        element: An lxml element. Anything else yields an empty path.

    Returns:
        Segments from just below the document body down to the element,
        joined with ``" > "``.

    Example::

        doc = lxml.html.fromstring("<html><body><ul><li>a</li><li>b</li>"
                                   "</ul></body></html>")
        locate_path(doc.cssselect("li")[1])  # "ul > li:nth-of-type(2)"
    """
    if not _is_element(element):
        return ""

    segments: list[str] = []
    current: etree._Element | None = element

    while current is not None and not _is_boundary(current):
        tag = current.tag.lower()
        parent = current.getparent()

        if parent is not None:
            siblings = [
                child
                for child in parent
                if _is_element(child) and child.tag.lower() == tag
            ]
            if len(siblings) > 1:
                tag = nth_of_type(tag, siblings.index(current) + 1)

        segments.insert(0, tag)
        current = parent

    if segments and segments[0] == "html":
        segments.pop(0)

    return join_path(segments)
