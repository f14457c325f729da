"""Public parsing API and library adapters.

Progressive API disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - LooseXMLParser class returning ParseResult
"""

from .adapters import from_etree, to_etree, to_lxml
from .parser import LooseXMLParser, ParseResult, parse, parse_file, parse_string

__all__ = [
    "LooseXMLParser",
    "ParseResult",
    "from_etree",
    "parse",
    "parse_file",
    "parse_string",
    "to_etree",
    "to_lxml",
]
