"""Merge scraped content into a scheme tree.

Interlacing produces a populated copy of a scheme: every STRING and LIST node
carries the value scraped for it in ``content``, next to the rule that
produced it. The input tree is never modified, so one stored scheme can be
interlaced against any number of payloads.

Content comes from the scraping side and is untrusted. Interlacing never
raises for bad content: a LIST given something other than a sequence gets an
empty list, and an OBJECT given something other than a mapping keeps its
fields as they are. Callers wanting strict checking validate the content
first.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from scrapeweave.common.exceptions import InvalidSchemeKind
from scrapeweave.scheme import (
    Instructions,
    ListScheme,
    ObjectScheme,
    Scheme,
    StringScheme,
    kind_of,
)

logger = logging.getLogger(__name__)


class InterlaceMode(Enum):
    """How LIST content is propagated into the element scheme.

    Values:
        REPRESENTATIVE: Interlace ``element_scheme`` with the first item
            only. This is what stored data has always been displayed with.
        PER_ELEMENT: Additionally interlace one copy of ``element_scheme``
            per item into ``element_schemes``.
    """

    REPRESENTATIVE = "representative"
    PER_ELEMENT = "per_element"


def interlace(
    scheme: Scheme,
    content: Any,
    mode: InterlaceMode = InterlaceMode.REPRESENTATIVE,
) -> Scheme:
    """Return a copy of ``scheme`` populated with ``content``.

    Args:
        scheme: The scheme to populate. Not modified.
        content: JSON-like data shaped like the scheme (string, list or
            mapping). Wrong shapes degrade instead of raising.
        mode: How LIST items reach the element scheme.

    Returns:
        A new scheme tree with ``content`` set on STRING and LIST nodes.

    Raises:
        InvalidSchemeKind: If a node is not a scheme model.

    Example::

        scheme = ObjectScheme(fields=(
            SchemeField(key="title", value=StringScheme(path="h1")),
        ))
        interlace(scheme, {"title": "Hello"}).get("title").content  # "Hello"
    """
    match scheme:
        case StringScheme():
            return scheme.model_copy(update={"content": content})

        case ListScheme():
            return _interlace_list(scheme, content, mode)

        case ObjectScheme():
            return _interlace_object(scheme, content, mode)

        case _:
            raise InvalidSchemeKind(kind_of(scheme))


def _interlace_list(
    scheme: ListScheme, content: Any, mode: InterlaceMode
) -> ListScheme:
    if isinstance(content, (list, tuple)):
        items = list(content)
    else:
        if content is not None:
            logger.debug(
                f"List content is {type(content).__name__}, not a sequence; "
                "using an empty list"
            )
        items = []

    # Per-item schemes from an earlier payload never survive re-interlacing.
    update: dict[str, Any] = {"content": items, "element_schemes": None}

    if scheme.element_scheme is not None:
        first = items[0] if items else None
        update["element_scheme"] = interlace(
            scheme.element_scheme, first, mode
        )

        if mode is InterlaceMode.PER_ELEMENT:
            update["element_schemes"] = tuple(
                interlace(scheme.element_scheme, item, mode) for item in items
            )

    return scheme.model_copy(update=update)


def _interlace_object(
    scheme: ObjectScheme, content: Any, mode: InterlaceMode
) -> ObjectScheme:
    if not isinstance(content, Mapping):
        if content is not None:
            logger.debug(
                f"Object content is {type(content).__name__}, not a mapping; "
                "leaving fields unchanged"
            )
        content = {}

    fields = tuple(
        field.model_copy(
            update={"value": interlace(field.value, content[field.key], mode)}
        )
        if field.value is not None and field.key in content
        else field
        for field in scheme.fields
    )
    return scheme.model_copy(update={"fields": fields})


def interlace_instructions(
    instructions: Instructions,
    content: Any,
    mode: InterlaceMode = InterlaceMode.REPRESENTATIVE,
) -> Instructions:
    """Interlace the scheme of ``instructions``, keeping its url."""
    return instructions.model_copy(
        update={"scheme": interlace(instructions.scheme, content, mode)}
    )

