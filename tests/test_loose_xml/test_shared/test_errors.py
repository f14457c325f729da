"""Tests for the parsing exception hierarchy."""

import pytest

from loose_xml.shared.errors import (
    ERROR_PREVIEW_LENGTH,
    InputTooLargeError,
    InvalidNameError,
    MarkupError,
    NoParserError,
    NonConsumingParserError,
)


class TestErrorHierarchy:
    """Test base classes of each error."""

    @pytest.mark.parametrize(
        "error_class",
        [InvalidNameError, NoParserError, NonConsumingParserError, InputTooLargeError],
    )
    def test_all_are_markup_errors(self, error_class):
        """Test that every error can be caught as MarkupError."""
        assert issubclass(error_class, MarkupError)

    def test_invalid_name_is_value_error(self):
        """Test that InvalidNameError can be caught as ValueError."""
        assert issubclass(InvalidNameError, ValueError)

    def test_non_consuming_is_runtime_error(self):
        """Test that a broken parser is reported as a RuntimeError."""
        assert issubclass(NonConsumingParserError, RuntimeError)


class TestErrorMessages:
    """Test error attributes and messages."""

    def test_invalid_name(self):
        """Test invalid name message and attribute."""
        error = InvalidNameError("a b")

        assert error.name == "a b"
        assert str(error) == "Unparsable name: 'a b'"

    def test_no_parser_short_text(self):
        """Test that short remaining text is quoted whole."""
        error = NoParserError("< oops")

        assert error.text == "< oops"
        assert str(error) == "Couldn't parse: < oops"

    def test_no_parser_long_text_truncated(self):
        """Test that long remaining text is truncated in the message."""
        text = "<" + "x" * 100
        error = NoParserError(text)

        assert error.text == text
        assert str(error) == f"Couldn't parse: {text[:ERROR_PREVIEW_LENGTH]}..."

    def test_non_consuming(self):
        """Test that the offending parser is named."""

        class StuckParser:
            pass

        parser = StuckParser()
        error = NonConsumingParserError(parser, "<x>")

        assert error.parser is parser
        assert "StuckParser did not consume input" in str(error)

    def test_input_too_large(self):
        """Test size limit message."""
        error = InputTooLargeError(20, 10)

        assert (error.size, error.limit) == (20, 10)
        assert str(error) == "Input of 20 characters exceeds limit of 10"
