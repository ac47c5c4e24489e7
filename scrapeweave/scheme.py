"""Scheme model for declarative scraping instructions.

A scheme is a recursive tree describing how to pull one piece of data out of
a DOM subtree. There are exactly three kinds of node:

1. STRING - a leaf read from one element (inner HTML or ``src`` attribute)
2. LIST - a repeating container whose items are each described by an
   ``element_scheme``
3. OBJECT - an ordered sequence of key/sub-scheme pairs

The same tree shape is used for the authoring-time rule and the
extraction-time result: after interlacing, ``content`` carries the scraped
value next to the rule that produced it.

Nodes are frozen pydantic models. Transformations never mutate a tree; they
build a new one with ``model_copy(update=...)``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from scrapeweave.common.exceptions import (
    InvalidSchemeKind,
    SchemeFormatException,
)

logger = logging.getLogger(__name__)


class SchemeType(str, Enum):
    """The closed set of scheme node kinds."""

    STRING = "STRING"
    LIST = "LIST"
    OBJECT = "OBJECT"


class StringMode(str, Enum):
    """What a STRING node reads from its element.

    Values:
        INNER_HTML: The element's inner HTML.
        SRC: The element's ``src`` attribute.
    """

    INNER_HTML = "INNER_HTML"
    SRC = "SRC"


class _SchemeNode(BaseModel):
    """Attributes shared by every scheme node.

    Attributes:
        url: Source URL override for this subtree. Inherited from the nearest
            ancestor (or the instructions) when absent.
        name: Human-readable label.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str | None = None
    name: str | None = None


class StringScheme(_SchemeNode):
    """Leaf node extracting a single string.

    An absent path means the context element itself. ``content`` is only set
    by interlacing and is stored as given, without coercion.
    """

    type: Literal["STRING"] = "STRING"
    path: str | None = None
    mode: StringMode = StringMode.INNER_HTML
    content: Any = None


class ListScheme(_SchemeNode):
    """Repeating container node.

    Attributes:
        path: Locates the repeating container.
        element_scheme: Scheme applied to each matched item. A list without
            one is untyped; its items cannot be decomposed further.
        content: Extracted items, set by interlacing.
        element_schemes: One interlaced element scheme per item. Only set by
            the per-element interlacing mode.
    """

    type: Literal["LIST"] = "LIST"
    path: str | None = None
    element_scheme: Scheme | None = None
    content: list[Any] | None = None
    element_schemes: tuple[Scheme, ...] | None = None


class SchemeField(BaseModel):
    """One key/sub-scheme pair of an OBJECT node."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    value: Scheme | None = None


class ObjectScheme(_SchemeNode):
    """Keyed node whose structure comes entirely from its fields.

    Field order is significant: it is the key order of the extracted object.
    """

    type: Literal["OBJECT"] = "OBJECT"
    fields: tuple[SchemeField, ...] = ()

    def get(self, key: str) -> Scheme | None:
        """Return the sub-scheme for ``key``.

        Duplicate keys are allowed; the last one wins.

        Args:
            key: The field key to look up.

        Returns:
            The sub-scheme of the last field with that key, or None.
        """
        found: Scheme | None = None
        for field in self.fields:
            if field.key == key:
                found = field.value
        return found

    def keys(self) -> list[str]:
        """Return the field keys in order, duplicates included."""
        return [field.key for field in self.fields]


Scheme = Annotated[
    Union[StringScheme, ListScheme, ObjectScheme],
    Field(discriminator="type"),
]

ListScheme.model_rebuild()
SchemeField.model_rebuild()
ObjectScheme.model_rebuild()


class Instructions(BaseModel):
    """A scheme together with the page it is run against."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str
    scheme: Scheme


_SCHEME_ADAPTER: TypeAdapter[Scheme] = TypeAdapter(Scheme)


def empty_scheme(kind: SchemeType | str) -> Scheme:
    """Create an empty scheme of the given kind.

    Args:
        kind: A SchemeType or its string value.

    Returns:
        A STRING node reading inner HTML, an OBJECT with no fields, or a LIST
        with neither path nor element scheme.

    Raises:
        InvalidSchemeKind: If ``kind`` is not a known scheme kind.
    """
    try:
        kind = SchemeType(kind)
    except ValueError:
        raise InvalidSchemeKind(kind) from None

    match kind:
        case SchemeType.STRING:
            return StringScheme(mode=StringMode.INNER_HTML)
        case SchemeType.OBJECT:
            return ObjectScheme(fields=())
        case SchemeType.LIST:
            return ListScheme()


def kind_of(scheme: Any) -> Any:
    """Best-effort description of a node's kind for error messages."""
    return getattr(scheme, "type", type(scheme).__name__)


# =============================================================================
# Loading and dumping
# =============================================================================


def load_scheme(data: dict[str, Any] | str | bytes) -> Scheme:
    """Validate JSON data into a scheme tree.

    Args:
        data: A JSON-like dict, or JSON text.

    Returns:
        The validated scheme.

    Raises:
        SchemeFormatException: If the data does not describe a scheme.
    """
    try:
        if isinstance(data, (str, bytes)):
            return _SCHEME_ADAPTER.validate_json(data)
        return _SCHEME_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise SchemeFormatException(
            errors=e.errors(include_url=False), model_name="Scheme"
        ) from e


def load_instructions(data: dict[str, Any] | str | bytes) -> Instructions:
    """Validate JSON data into instructions.

    Args:
        data: A JSON-like dict, or JSON text.

    Returns:
        The validated instructions.

    Raises:
        SchemeFormatException: If the data does not describe instructions.
    """
    try:
        if isinstance(data, (str, bytes)):
            return Instructions.model_validate_json(data)
        return Instructions.model_validate(data)
    except ValidationError as e:
        raise SchemeFormatException(
            errors=e.errors(include_url=False), model_name="Instructions"
        ) from e


def load_document(data: dict[str, Any] | str | bytes) -> Instructions | Scheme:
    """Load either instructions or a bare scheme.

    Documents with a ``scheme`` key are treated as instructions.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise SchemeFormatException(
                errors=[{"loc": (), "msg": str(e)}], model_name="document"
            ) from e
    if isinstance(data, dict) and "scheme" in data:
        return load_instructions(data)
    return load_scheme(data)


def dump_scheme(scheme: Scheme) -> dict[str, Any]:
    """Serialize a scheme tree to its JSON shape, omitting unset attributes."""
    return _SCHEME_ADAPTER.dump_python(scheme, mode="json", exclude_none=True)


def dump_instructions(instructions: Instructions) -> dict[str, Any]:
    """Serialize instructions to their JSON shape, omitting unset fields."""
    return instructions.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Source URLs
# =============================================================================


def iter_source_urls(instructions: Instructions) -> Iterator[str]:
    """Yield each distinct effective source URL in first-seen order.

    A node without its own ``url`` inherits its nearest ancestor's; the root
    inherits the instructions' url.
    """
    seen: set[str] = set()
    for url in _walk_urls(instructions.scheme, instructions.url):
        if url not in seen:
            seen.add(url)
            yield url


def _walk_urls(scheme: Scheme | None, inherited: str) -> Iterator[str]:
    if scheme is None:
        return
    url = scheme.url or inherited
    yield url

    match scheme:
        case StringScheme():
            pass
        case ListScheme(element_scheme=element_scheme):
            yield from _walk_urls(element_scheme, url)
        case ObjectScheme(fields=fields):
            for field in fields:
                yield from _walk_urls(field.value, url)
        case _:
            raise InvalidSchemeKind(kind_of(scheme))
