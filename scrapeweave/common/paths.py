"""Structural path utility functions.

A structural path is a chain of tag-name segments joined by ``" > "``, most
specific last. A segment may carry a ``:nth-of-type(N)`` disambiguator when
its element has same-tag siblings::

    div > ul > li:nth-of-type(2) > p

Paths are valid CSS child-combinator selectors, so the extractor can run them
directly.
"""

import re

SEPARATOR = " > "

_LEADING_TAG = re.compile(r"^[a-zA-Z0-9_-]+")


def split_path(path: str) -> list[str]:
    """Split a path into its segments.

    Splits on ``>`` and strips surrounding whitespace, so ``"a>b"`` and
    ``"a > b"`` yield the same segments.

    Examples:
        >>> split_path("div > ul > li")
        ['div', 'ul', 'li']
        >>> split_path("div>ul")
        ['div', 'ul']
    """
    return [segment.strip() for segment in path.split(">")]


def join_path(segments: list[str]) -> str:
    """Join segments back into a path.

    Examples:
        >>> join_path(["li", "p"])
        'li > p'
        >>> join_path([])
        ''
    """
    return SEPARATOR.join(segments)


def nth_of_type(tag: str, index: int) -> str:
    """Build a segment disambiguated by its 1-based same-tag position.

    Examples:
        >>> nth_of_type("li", 2)
        'li:nth-of-type(2)'
    """
    return f"{tag}:nth-of-type({index})"


def reduce_to_tag_name(segment: str) -> str:
    """Reduce a segment to the tag name it starts with.

    Everything after the tag goes: the ``:nth-of-type(N)`` disambiguator as
    well as classes, ids and other pseudo-classes. Segments that do not start
    with a tag name are returned unchanged.

    Examples:
        >>> reduce_to_tag_name("li:nth-of-type(3)")
        'li'
        >>> reduce_to_tag_name("li.item:nth-of-type(2)")
        'li'
        >>> reduce_to_tag_name(".item")
        '.item'
    """
    found = _LEADING_TAG.match(segment)
    if found is None:
        return segment
    return found.group(0)


def common_prefix_length(left: list[str], right: list[str]) -> int:
    """Count the leading segments two paths share, stopping at the first
    mismatch.

    Examples:
        >>> common_prefix_length(["div", "ul", "li"], ["div", "ul"])
        2
        >>> common_prefix_length(["section"], ["div"])
        0
    """
    count = 0
    for left_segment, right_segment in zip(left, right):
        if left_segment != right_segment:
            break
        count += 1
    return count
