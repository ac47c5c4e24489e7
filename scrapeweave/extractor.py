"""Run a scheme against an HTML document.

The extractor is the scraping side of the system: it turns a page and a
scheme into the JSON-like content that ``interlace`` merges back into the
scheme for display. Paths are evaluated as CSS selectors relative to the
element matched by the enclosing node, which is why list element schemes are
stored relativized.

Two evaluation modes mirror each other:

- ``process`` evaluates a node once against a context element (the top of
  the document, or a list container) and returns one value.
- ``process_many`` evaluates a node against every match inside a list
  container and returns one value per item. OBJECT nodes evaluate each field
  many times and zip the results into per-item dicts.
"""

from __future__ import annotations

import logging
from typing import Any

from scrapeweave.common.checked_html import CheckedHtmlElement
from scrapeweave.common.exceptions import (
    InvalidSchemeKind,
    MismatchedFieldCount,
)
from scrapeweave.scheme import (
    Instructions,
    ListScheme,
    ObjectScheme,
    Scheme,
    StringMode,
    StringScheme,
    kind_of,
)

logger = logging.getLogger(__name__)


def extract(scheme: Scheme, html_text: str | bytes, url: str = "") -> Any:
    """Extract content from an HTML document.

    Args:
        scheme: The scheme to run.
        html_text: The page's HTML.
        url: URL of the page, used in error messages.

    Returns:
        A string, list or dict shaped like the scheme.

    Raises:
        InvalidPath: If a path is not a valid selector.
        NoElementFound: If a path required to match does not.
        MismatchedFieldCount: If the fields of a listed object disagree on
            the number of items.
    """
    root = CheckedHtmlElement.from_string(html_text, url)
    return process(scheme, root)


def extract_instructions(
    instructions: Instructions, html_text: str | bytes
) -> Any:
    """Extract content for ``instructions`` from the page at its url."""
    return extract(instructions.scheme, html_text, instructions.url)


def _read(scheme: StringScheme, element: CheckedHtmlElement) -> str | None:
    match scheme.mode:
        case StringMode.INNER_HTML:
            return element.inner_html()
        case StringMode.SRC:
            return element.get("src")


def _untyped_items(container: CheckedHtmlElement) -> list[Any]:
    # Without an element scheme each child element is an opaque item.
    return [
        CheckedHtmlElement(child, container.request_url).inner_html()
        for child in container.element
        if isinstance(child.tag, str)
    ]


def process(scheme: Scheme, element: CheckedHtmlElement) -> Any:
    """Evaluate ``scheme`` once against ``element``.

    Returns:
        The inner HTML (or ``src``) of the first STRING match, the per-item
        values of the first LIST container match, or a dict of field values.
    """
    match scheme:
        case ObjectScheme(fields=fields):
            result: dict[str, Any] = {}
            for field in fields:
                result[field.key] = (
                    process(field.value, element)
                    if field.value is not None
                    else None
                )
            return result

        case StringScheme(path=path):
            return _read(scheme, element.select_one(path))

        case ListScheme(path=path, element_scheme=element_scheme):
            container = element.select_one(path)
            if element_scheme is None:
                return _untyped_items(container)
            items = process_many(element_scheme, container)
            logger.debug(f"List '{path}' yielded {len(items)} items")
            return items

        case _:
            raise InvalidSchemeKind(kind_of(scheme))


def process_many(scheme: Scheme, element: CheckedHtmlElement) -> list[Any]:
    """Evaluate ``scheme`` against every match inside ``element``.

    Returns:
        One value per item.

    Raises:
        MismatchedFieldCount: If OBJECT fields yield different counts.
    """
    match scheme:
        case ObjectScheme(fields=fields):
            columns: list[list[Any] | None] = []
            expected: int | None = None

            for field in fields:
                if field.value is None:
                    columns.append(None)
                    continue

                values = process_many(field.value, element)
                if expected is None:
                    expected = len(values)
                elif expected != len(values):
                    raise MismatchedFieldCount(
                        field=field.key,
                        expected=expected,
                        found=len(values),
                        request_url=element.request_url,
                    )
                columns.append(values)

            objects: list[Any] = []
            for i in range(expected or 0):
                item: dict[str, Any] = {}
                for field, column in zip(fields, columns):
                    item[field.key] = column[i] if column is not None else None
                objects.append(item)
            return objects

        case StringScheme(path=path):
            return [_read(scheme, found) for found in element.select_all(path)]

        case ListScheme(path=path, element_scheme=element_scheme):
            return [
                _untyped_items(container)
                if element_scheme is None
                else process_many(element_scheme, container)
                for container in element.select_all(path)
            ]

        case _:
            raise InvalidSchemeKind(kind_of(scheme))
