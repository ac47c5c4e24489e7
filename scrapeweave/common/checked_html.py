"""Checked HTML element wrapper for scheme paths.

This module provides CheckedHtmlElement, a wrapper around
lxml.html.HtmlElement that runs scheme paths as CSS selectors and validates
the number of matches. An empty path selects the element itself.
"""

from __future__ import annotations

from cssselect import SelectorError
from lxml import html
from lxml.html import HtmlElement

from scrapeweave.common.exceptions import (
    InvalidPath,
    NoElementFound,
)


class CheckedHtmlElement:
    """Wrapper around HtmlElement with validated path queries.

    Results are wrapped again so nested schemes can keep querying relative to
    the matched element.
    """

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        """Initialize the checked element wrapper.

        Args:
            element: The lxml HtmlElement to wrap.
            request_url: Optional URL for error context.
        """
        self._element = element
        self._request_url = request_url

    @classmethod
    def from_string(
        cls, html_text: str | bytes, request_url: str = ""
    ) -> CheckedHtmlElement:
        """Parse a whole HTML document and wrap its root element."""
        return cls(html.document_fromstring(html_text), request_url)

    @property
    def element(self) -> HtmlElement:
        return self._element

    @property
    def request_url(self) -> str:
        return self._request_url

    def select_all(self, path: str | None) -> list[CheckedHtmlElement]:
        """Select every element matching ``path``.

        Args:
            path: Structural path, used as a CSS selector. None or an empty
                path selects this element.

        Returns:
            Matching elements in document order, possibly empty.

        Raises:
            InvalidPath: If the path is not a valid CSS selector.
        """
        if not path:
            return [self]

        try:
            results = self._element.cssselect(path)
        except SelectorError as e:
            raise InvalidPath(path, self._request_url) from e

        return [
            CheckedHtmlElement(result, self._request_url) for result in results
        ]

    def select_one(self, path: str | None) -> CheckedHtmlElement:
        """Select the first element matching ``path``.

        Raises:
            InvalidPath: If the path is not a valid CSS selector.
            NoElementFound: If nothing matches.
        """
        results = self.select_all(path)
        if not results:
            raise NoElementFound(path or "", self._request_url)
        return results[0]

    def inner_html(self) -> str:
        """Get the inner HTML content, including leading text."""
        elem = self._element
        return (elem.text or "") + "".join(
            html.tostring(child, encoding="unicode") for child in elem
        )

    def get(self, name: str) -> str | None:
        """Get an attribute value, or None if it doesn't exist."""
        return self._element.get(name)
