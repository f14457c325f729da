"""Escaping and unescaping of reserved markup characters.

The replacement order in each direction is fixed: ``&`` is escaped first and
unescaped last, so entity markers introduced by one step are never
reinterpreted by another.
"""

import re
from typing import Any, List, Tuple

MAX_CODE_POINT = 0x10FFFF

_TEXT_ESCAPES: List[Tuple[str, str]] = [
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
]

_VALUE_ESCAPES: List[Tuple[str, str]] = [
    ('"', "&quot;"),
    ("'", "&apos;"),
    ("\n", "&#10;"),
    ("\r", "&#13;"),
]

_BASIC_UNESCAPES: List[Tuple[str, str]] = [
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
]

_DECIMAL_REFERENCE = re.compile(r"&#(\d+);")
_HEX_REFERENCE = re.compile(r"&#[xX]([0-9A-Fa-f]+);")


def escape(text: Any) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in character content."""
    result = str(text)
    for char, entity in _TEXT_ESCAPES:
        result = result.replace(char, entity)
    return result


def escape_value(text: Any) -> str:
    """Escape a value for use inside a quoted attribute or pair."""
    result = escape(text)
    for char, entity in _VALUE_ESCAPES:
        result = result.replace(char, entity)
    return result


def _resolve_reference(match: "re.Match[str]", base: int) -> str:
    code_point = int(match.group(1), base)
    if code_point > MAX_CODE_POINT:
        return match.group(0)
    return chr(code_point)


def unescape(text: Any) -> str:
    """Resolve the five basic entities and numeric character references.

    Examples:
        >>> unescape("3 &lt; 4 &amp;&amp; 4 &gt; 3")
        '3 < 4 && 4 > 3'
        >>> unescape("Line1&#10;Line2&#x21;")
        'Line1\\nLine2!'
    """
    result = str(text)
    for entity, char in _BASIC_UNESCAPES:
        result = result.replace(entity, char)
    result = _DECIMAL_REFERENCE.sub(lambda m: _resolve_reference(m, 10), result)
    result = _HEX_REFERENCE.sub(lambda m: _resolve_reference(m, 16), result)
    return result.replace("&amp;", "&")
