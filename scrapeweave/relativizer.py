"""Rewrite scheme paths relative to their enclosing list.

Authoring records absolute paths (from just below ``<body>``) for every
element a user picks. Inside a LIST, only the relationship between the
repeating container and its items matters, so the paths of everything under
a list's ``element_scheme`` are rewritten to drop the leading segments they
share with the list's path::

    LIST path="div > ul"
      element_scheme: STRING path="div > ul > li:nth-of-type(2) > p"

becomes::

    LIST path="div > ul"
      element_scheme: STRING path="li > p"

The first remaining segment is reduced to its tag name. The sibling index it
carried was computed in the absolute context and means nothing inside a
single item, and neither do the classes or ids picked along with it.

Per-item copies in ``element_schemes`` (left by per-element interlacing) are
rewritten the same way as ``element_scheme``.

Nested lists (a LIST somewhere under another LIST's element scheme) are
rewritten by the same rules, each relative to its enclosing list's original
path, but that case has not been verified against real pages.
"""

from __future__ import annotations

import logging

from scrapeweave.common.exceptions import InvalidSchemeKind
from scrapeweave.common.paths import (
    common_prefix_length,
    join_path,
    reduce_to_tag_name,
    split_path,
)
from scrapeweave.scheme import (
    Instructions,
    ListScheme,
    ObjectScheme,
    Scheme,
    StringScheme,
    kind_of,
)

logger = logging.getLogger(__name__)


def relativize(scheme: Scheme) -> Scheme:
    """Return a copy of ``scheme`` with list element paths made relative.

    Args:
        scheme: The scheme to rewrite. Not modified.

    Returns:
        A new scheme tree.

    Raises:
        InvalidSchemeKind: If a node is not a scheme model.
    """
    return make_element_scheme_paths_relative(scheme)


def relativize_instructions(instructions: Instructions) -> Instructions:
    """Relativize the scheme of ``instructions``, keeping its url."""
    return instructions.model_copy(
        update={"scheme": relativize(instructions.scheme)}
    )


def make_element_scheme_paths_relative(scheme: Scheme) -> Scheme:
    """Rewrite every list's element scheme relative to that list's path.

    A list's own path is left alone: it is relative to whatever encloses the
    list. A STRING outside any list has nothing to be relative to and is
    returned unchanged, as is a list missing its path or element scheme.
    """
    match scheme:
        case ListScheme(path=path, element_scheme=element_scheme) if (
            path and element_scheme is not None
        ):
            logger.debug(f"Relativizing element scheme of list '{path}'")
            return scheme.model_copy(update=_element_update(scheme, path))

        case ObjectScheme():
            return scheme.model_copy(
                update={
                    "fields": tuple(
                        field.model_copy(
                            update={
                                "value": make_element_scheme_paths_relative(
                                    field.value
                                )
                            }
                        )
                        if field.value is not None
                        else field
                        for field in scheme.fields
                    )
                }
            )

        case StringScheme() | ListScheme():
            return scheme

        case _:
            raise InvalidSchemeKind(kind_of(scheme))


def make_path_relative_to_parent(scheme: Scheme, parent_path: str) -> Scheme:
    """Rewrite the paths in ``scheme`` relative to ``parent_path``.

    A nested list's own path is rewritten relative to ``parent_path``; its
    element scheme is rewritten relative to the nested list's original,
    unrewritten path. Nodes without a path are returned unchanged.
    """
    match scheme:
        case StringScheme(path=path) if path:
            return scheme.model_copy(
                update={"path": make_path_relative(path, parent_path)}
            )

        case ObjectScheme():
            return scheme.model_copy(
                update={
                    "fields": tuple(
                        field.model_copy(
                            update={
                                "value": make_path_relative_to_parent(
                                    field.value, parent_path
                                )
                            }
                        )
                        if field.value is not None
                        else field
                        for field in scheme.fields
                    )
                }
            )

        case ListScheme(path=path) if path:
            update = _element_update(scheme, path)
            update["path"] = make_path_relative(path, parent_path)
            return scheme.model_copy(update=update)

        case StringScheme() | ListScheme():
            return scheme

        case _:
            raise InvalidSchemeKind(kind_of(scheme))


def _element_update(scheme: ListScheme, path: str) -> dict[str, object]:
    # element_schemes are populated copies of element_scheme and follow it.
    update: dict[str, object] = {}
    if scheme.element_scheme is not None:
        update["element_scheme"] = make_path_relative_to_parent(
            scheme.element_scheme, path
        )
    if scheme.element_schemes is not None:
        update["element_schemes"] = tuple(
            make_path_relative_to_parent(item, path)
            for item in scheme.element_schemes
        )
    return update


def make_path_relative(child_path: str, parent_path: str) -> str:
    """Express ``child_path`` relative to ``parent_path``.

    Drops the leading segments both paths share, then reduces the first
    remaining segment to its tag name, dropping its ``:nth-of-type``
    disambiguator along with any classes or ids. Deeper segments are kept as
    they are.

    Examples:
        >>> make_path_relative("div > ul > li:nth-of-type(2) > p", "div > ul")
        'li > p'
        >>> make_path_relative("section > span", "div > ul")
        'section > span'
    """
    parent_segments = split_path(parent_path)
    child_segments = split_path(child_path)

    common = common_prefix_length(parent_segments, child_segments)
    remaining = child_segments[common:]

    if remaining:
        remaining[0] = reduce_to_tag_name(remaining[0])

    return join_path(remaining)
