"""Exception hierarchy for loose XML parsing.

Malformed but recognizable markup is tolerated and never raises; the
exceptions below cover invalid names, input no parser can start on, and
custom parsers that break the dispatch contract.
"""

from typing import Any, Optional

# Max length of remaining text quoted in error messages
ERROR_PREVIEW_LENGTH = 50


class MarkupError(Exception):
    """Base exception for all parsing and tree-building errors."""


class InvalidNameError(MarkupError, ValueError):
    """Raised when a name, type or key is not an acceptable identifier."""

    def __init__(self, name: Any) -> None:
        super().__init__(f"Unparsable name: {name!r}")
        self.name = name


class NoParserError(MarkupError):
    """Raised when no registered parser can start at the current position."""

    def __init__(self, text: str) -> None:
        preview = text[:ERROR_PREVIEW_LENGTH]
        if len(text) > ERROR_PREVIEW_LENGTH:
            preview += "..."
        super().__init__(f"Couldn't parse: {preview}")
        self.text = text


class NonConsumingParserError(MarkupError, RuntimeError):
    """Raised when a parser returns without consuming any input."""

    def __init__(self, parser: Any, text: str) -> None:
        super().__init__(
            f"{type(parser).__name__} did not consume input at: "
            f"{text[:ERROR_PREVIEW_LENGTH]!r}"
        )
        self.parser = parser
        self.text = text


class InputTooLargeError(MarkupError):
    """Raised when input exceeds the configured size limit."""

    def __init__(self, size: int, limit: Optional[int]) -> None:
        super().__init__(f"Input of {size} characters exceeds limit of {limit}")
        self.size = size
        self.limit = limit
