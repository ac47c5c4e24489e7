"""Exception types for scheme errors.

This module defines the exception hierarchy for scheme handling. The
transformations (interlacing and relativization) are lenient about data and
only raise for programmer errors such as an unknown node type. Loading
schemes and running them against HTML raise the more specific errors below.
"""

from typing import Any


class SchemeException(Exception):
    """Base class for scheme errors.

    Carries a human-readable message and an optional dict of context that is
    rendered beneath the message.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the problem.
            context: Optional dict of additional context (path, counts, etc).
        """
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message]

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


class InvalidSchemeKind(SchemeException):
    """Raised when a node is not one of the STRING, LIST or OBJECT variants.

    This never happens for data that went through ``load_scheme``; it means a
    caller built a tree out of something that is not a scheme model, or the
    model and the stored data disagree about the set of variants.

    Attributes:
        kind: The offending type tag or object type name.
    """

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(
            f"Unrecognized scheme kind: {kind!r}",
            {"expected": "STRING, LIST or OBJECT"},
        )


class SchemeFormatException(SchemeException):
    """Raised when a JSON document does not describe a valid scheme.

    Wraps the pydantic validation errors produced while loading.

    Attributes:
        errors: List of pydantic error dicts.
        model_name: Name of the model that was being validated.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        model_name: str,
    ) -> None:
        """Initialize the exception.

        Args:
            errors: List of Pydantic validation errors.
            model_name: Name of the model that was being validated against.
        """
        self.errors = errors
        self.model_name = model_name

        error_summary = ", ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: "
            f"{err['msg']}"
            for err in errors
        )

        message = f"Invalid {model_name}: {error_summary}"

        context = {
            "model": model_name,
            "error_count": len(errors),
        }

        super().__init__(message, context)


# =============================================================================
# Extraction errors
# =============================================================================


class ExtractionException(SchemeException):
    """Base class for errors raised while running a scheme against HTML.

    Attributes:
        request_url: The URL of the page being extracted, if known.
    """

    def __init__(
        self,
        message: str,
        request_url: str = "",
        context: dict[str, Any] | None = None,
    ) -> None:
        self.request_url = request_url
        context = dict(context or {})
        if request_url:
            context["url"] = request_url
        super().__init__(message, context)


class InvalidPath(ExtractionException):
    """Raised when a scheme path is not a valid CSS selector.

    Attributes:
        path: The path that failed to parse.
    """

    def __init__(self, path: str, request_url: str = "") -> None:
        self.path = path
        super().__init__(
            f"'{path}' is not a valid path.",
            request_url,
            {"path": path},
        )


class NoElementFound(ExtractionException):
    """Raised when a path matches nothing where one element is required.

    Attributes:
        path: The path that matched nothing.
    """

    def __init__(self, path: str, request_url: str = "") -> None:
        self.path = path
        super().__init__(
            f"No element found using the '{path}' path.",
            request_url,
            {"path": path},
        )


class MismatchedFieldCount(ExtractionException):
    """Raised when the fields of a listed object match different counts.

    Each field of an object inside a list is evaluated against every item of
    the list; all fields must yield the same number of values so they can be
    zipped into per-item objects.

    Attributes:
        field: Key of the field whose count disagreed.
        expected: Count produced by the first field.
        found: Count produced by this field.
    """

    def __init__(
        self,
        field: str,
        expected: int,
        found: int,
        request_url: str = "",
    ) -> None:
        self.field = field
        self.expected = expected
        self.found = found
        super().__init__(
            f"Field '{field}' expected {expected} values, but found {found}.",
            request_url,
            {"field": field, "expected": expected, "found": found},
        )
