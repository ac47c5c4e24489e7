"""Tests for the scheme model, loading and dumping."""

import json

import pytest
from pydantic import ValidationError

from scrapeweave.common.exceptions import (
    InvalidSchemeKind,
    SchemeFormatException,
)
from scrapeweave.scheme import (
    Instructions,
    ListScheme,
    ObjectScheme,
    SchemeField,
    SchemeType,
    StringMode,
    StringScheme,
    dump_instructions,
    dump_scheme,
    empty_scheme,
    iter_source_urls,
    load_document,
    load_instructions,
    load_scheme,
)

STORED_SCHEME = {
    "type": "OBJECT",
    "fields": [
        {
            "key": "title",
            "value": {"type": "STRING", "path": "h1", "mode": "INNER_HTML"},
        },
        {
            "key": "items",
            "value": {
                "type": "LIST",
                "path": "div > ul",
                "element_scheme": {
                    "type": "STRING",
                    "path": "li > img",
                    "mode": "SRC",
                },
            },
        },
        {"key": "empty"},
    ],
}


class TestEmptyScheme:
    """Tests for empty_scheme."""

    def test_string(self):
        """An empty STRING reads inner HTML and has no path."""
        scheme = empty_scheme(SchemeType.STRING)

        assert isinstance(scheme, StringScheme)
        assert scheme.path is None
        assert scheme.mode is StringMode.INNER_HTML

    def test_object(self):
        """An empty OBJECT has no fields."""
        scheme = empty_scheme(SchemeType.OBJECT)

        assert isinstance(scheme, ObjectScheme)
        assert scheme.fields == ()

    def test_list(self):
        """An empty LIST has neither path nor element scheme."""
        scheme = empty_scheme(SchemeType.LIST)

        assert isinstance(scheme, ListScheme)
        assert scheme.path is None
        assert scheme.element_scheme is None

    def test_accepts_string_kind(self):
        """The kind may be given as its string value."""
        assert isinstance(empty_scheme("LIST"), ListScheme)

    def test_unknown_kind(self):
        """An unknown kind fails loudly."""
        with pytest.raises(InvalidSchemeKind) as exc_info:
            empty_scheme("TABLE")

        assert exc_info.value.kind == "TABLE"
        assert "TABLE" in str(exc_info.value)


class TestModel:
    """Tests for scheme model behavior."""

    def test_nodes_are_frozen(self):
        """Scheme nodes cannot be modified in place."""
        scheme = StringScheme(path="h1")

        with pytest.raises(ValidationError):
            scheme.path = "h2"

    def test_get_last_duplicate_wins(self):
        """With duplicate keys, get returns the last field's scheme."""
        first = StringScheme(path="h1")
        second = StringScheme(path="h2")
        scheme = ObjectScheme(
            fields=(
                SchemeField(key="title", value=first),
                SchemeField(key="title", value=second),
            )
        )

        assert scheme.get("title") is second
        assert scheme.get("missing") is None

    def test_keys_keep_order_and_duplicates(self):
        """keys lists every field key in order."""
        scheme = ObjectScheme(
            fields=(
                SchemeField(key="b"),
                SchemeField(key="a"),
                SchemeField(key="b"),
            )
        )

        assert scheme.keys() == ["b", "a", "b"]


class TestLoading:
    """Tests for load_scheme, load_instructions and load_document."""

    def test_load_nested_scheme(self):
        """A stored scheme loads into the matching node types."""
        scheme = load_scheme(STORED_SCHEME)

        assert isinstance(scheme, ObjectScheme)
        assert scheme.keys() == ["title", "items", "empty"]

        items = scheme.get("items")
        assert isinstance(items, ListScheme)
        assert items.path == "div > ul"
        assert isinstance(items.element_scheme, StringScheme)
        assert items.element_scheme.mode is StringMode.SRC
        assert scheme.get("empty") is None

    def test_load_json_text(self):
        """JSON text loads the same as the parsed dict."""
        assert load_scheme(json.dumps(STORED_SCHEME)) == load_scheme(
            STORED_SCHEME
        )

    def test_unknown_type_tag(self):
        """An unknown type tag is a format error."""
        with pytest.raises(SchemeFormatException) as exc_info:
            load_scheme({"type": "TABLE", "path": "table"})

        assert exc_info.value.model_name == "Scheme"
        assert exc_info.value.errors

    def test_missing_type_tag(self):
        """A node without a type tag is a format error."""
        with pytest.raises(SchemeFormatException):
            load_scheme({"path": "h1"})

    def test_attribute_illegal_for_tag(self):
        """Only the attributes legal for the tag are accepted."""
        with pytest.raises(SchemeFormatException):
            load_scheme({"type": "STRING", "path": "h1", "fields": []})

    def test_nested_error_location(self):
        """Errors deep in the tree are reported with their location."""
        with pytest.raises(SchemeFormatException) as exc_info:
            load_scheme(
                {
                    "type": "LIST",
                    "path": "ul",
                    "element_scheme": {"type": "STRING", "mode": "TEXT"},
                }
            )

        assert "element_scheme" in str(exc_info.value)

    def test_load_instructions(self):
        """Instructions carry a url and a scheme."""
        instructions = load_instructions(
            {"url": "https://example.com/", "scheme": STORED_SCHEME}
        )

        assert instructions.url == "https://example.com/"
        assert isinstance(instructions.scheme, ObjectScheme)

    def test_load_instructions_requires_url(self):
        """Instructions without a url are rejected."""
        with pytest.raises(SchemeFormatException) as exc_info:
            load_instructions({"scheme": STORED_SCHEME})

        assert exc_info.value.model_name == "Instructions"

    def test_load_document_detects_shape(self):
        """load_document returns instructions or a bare scheme."""
        instructions = load_document(
            json.dumps(
                {"url": "https://example.com/", "scheme": STORED_SCHEME}
            )
        )
        scheme = load_document(json.dumps(STORED_SCHEME))

        assert isinstance(instructions, Instructions)
        assert isinstance(scheme, ObjectScheme)

    def test_load_document_invalid_json(self):
        """Text that is not JSON is a format error."""
        with pytest.raises(SchemeFormatException):
            load_document("{not json")


class TestDumping:
    """Tests for dump_scheme and dump_instructions."""

    def test_dump_omits_unset_attributes(self):
        """Unset optional attributes are left out of the JSON shape."""
        assert dump_scheme(StringScheme(path="h1")) == {
            "type": "STRING",
            "path": "h1",
            "mode": "INNER_HTML",
        }
        assert dump_scheme(ListScheme()) == {"type": "LIST"}

    def test_dump_matches_stored_shape(self):
        """A loaded scheme dumps back to its stored shape."""
        assert dump_scheme(load_scheme(STORED_SCHEME)) == STORED_SCHEME

    def test_dump_instructions(self):
        """Instructions dump with their url."""
        instructions = Instructions(
            url="https://example.com/", scheme=StringScheme(path="h1")
        )

        assert dump_instructions(instructions) == {
            "url": "https://example.com/",
            "scheme": {"type": "STRING", "path": "h1", "mode": "INNER_HTML"},
        }


class TestSourceUrls:
    """Tests for iter_source_urls."""

    def test_inherits_instructions_url(self):
        """Without overrides, everything reads from the instructions' url."""
        instructions = Instructions(
            url="https://example.com/", scheme=load_scheme(STORED_SCHEME)
        )

        assert list(iter_source_urls(instructions)) == ["https://example.com/"]

    def test_overrides_are_inherited_by_descendants(self):
        """A url override applies to its subtree, in first-seen order."""
        instructions = Instructions(
            url="https://example.com/",
            scheme=ObjectScheme(
                fields=(
                    SchemeField(
                        key="reviews",
                        value=ListScheme(
                            url="https://example.com/reviews",
                            path="ul",
                            element_scheme=StringScheme(path="li"),
                        ),
                    ),
                    SchemeField(
                        key="image",
                        value=StringScheme(
                            url="https://cdn.example.com/",
                            path="img",
                            mode=StringMode.SRC,
                        ),
                    ),
                    SchemeField(key="title", value=StringScheme(path="h1")),
                )
            ),
        )

        assert list(iter_source_urls(instructions)) == [
            "https://example.com/",
            "https://example.com/reviews",
            "https://cdn.example.com/",
        ]
