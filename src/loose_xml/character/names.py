"""Name validation for element types, attribute keys and other identifiers."""

import re
from typing import Any

from loose_xml.shared.errors import InvalidNameError

# Characters allowed in a name: ASCII word characters plus '.', '-', ':'
NAME_PATTERN = r"[\w.\-:]+"

_NAME_RE = re.compile(NAME_PATTERN, re.ASCII)


def is_valid_name(name: Any) -> bool:
    """Return True if ``name`` is a non-empty string of allowed characters."""
    return isinstance(name, str) and _NAME_RE.fullmatch(name) is not None


def validate_name(name: Any) -> str:
    """Validate a markup name.

    Args:
        name: Proposed element type, attribute key, declaration key or token

    Returns:
        The name, unchanged

    Raises:
        InvalidNameError: If the name is empty, not a string, or contains a
            character outside ``[A-Za-z0-9_.:-]``
    """
    if not is_valid_name(name):
        raise InvalidNameError(name)
    return name
