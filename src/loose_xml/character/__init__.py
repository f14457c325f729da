"""Character-level helpers: name validation and the escape codec."""

from .escaping import escape, escape_value, unescape
from .names import NAME_PATTERN, is_valid_name, validate_name

__all__ = [
    "NAME_PATTERN",
    "escape",
    "escape_value",
    "is_valid_name",
    "unescape",
    "validate_name",
]
