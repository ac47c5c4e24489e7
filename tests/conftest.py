"""Shared fixtures for scheme tests."""

import pytest
from click.testing import CliRunner
from lxml import html
from lxml.html import HtmlElement

from scrapeweave.scheme import (
    ListScheme,
    ObjectScheme,
    SchemeField,
    StringMode,
    StringScheme,
)

PAGE_HTML = """
<html>
<body>
    <div id="main">
        <h1>Hello</h1>
        <ul>
            <li><span class="name">a</span><img src="/a.png"></li>
            <li><span class="name">b</span><img src="/b.png"></li>
            <li><span class="name">c</span><img src="/c.png"></li>
        </ul>
        <p>first</p>
        <p>second</p>
    </div>
</body>
</html>
"""


@pytest.fixture
def page_html() -> str:
    """HTML page with a heading, a three item list and two paragraphs."""
    return PAGE_HTML


@pytest.fixture
def page(page_html: str) -> HtmlElement:
    """The parsed page document."""
    return html.document_fromstring(page_html)


@pytest.fixture
def title_items_scheme() -> ObjectScheme:
    """Object with a title string and a list of item strings."""
    return ObjectScheme(
        fields=(
            SchemeField(key="title", value=StringScheme(path="h1")),
            SchemeField(
                key="items",
                value=ListScheme(
                    path="ul", element_scheme=StringScheme(path="li")
                ),
            ),
        )
    )


@pytest.fixture
def absolute_products_scheme() -> ObjectScheme:
    """Scheme as recorded by the element picker, before relativizing."""
    return ObjectScheme(
        fields=(
            SchemeField(key="title", value=StringScheme(path="div > h1")),
            SchemeField(
                key="products",
                value=ListScheme(
                    path="div > ul",
                    element_scheme=ObjectScheme(
                        fields=(
                            SchemeField(
                                key="name",
                                value=StringScheme(
                                    path="div > ul > li:nth-of-type(1) > span"
                                ),
                            ),
                            SchemeField(
                                key="image",
                                value=StringScheme(
                                    path="div > ul > li:nth-of-type(1) > img",
                                    mode=StringMode.SRC,
                                ),
                            ),
                        )
                    ),
                ),
            ),
        )
    )


@pytest.fixture
def runner() -> CliRunner:
    """Click test runner."""
    return CliRunner()
