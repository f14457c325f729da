"""Loose XML Parser.

A tolerant, best-effort structural parser that turns markup text into a tree
of typed nodes (elements, text, comments, CDATA, declarations, metadata) and
serializes the tree back to text. It does not validate documents, resolve
namespaces or detect encodings.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - LooseXMLParser class
- Level 3: Custom parsers - NodeParser subclasses in a ParserRegistry
"""

__version__ = "0.1.0"
__author__ = "Loose XML Parser Team"

# Progressive API disclosure - Level 1 and Level 2
from .api import LooseXMLParser, ParseResult, parse, parse_file, parse_string

# Character-level helpers
from .character import escape, escape_value, is_valid_name, unescape, validate_name

# Level 3: Extensible dispatch
from .parsing import NodeParser, OffsetParser, ParseContext, ParserRegistry

# Configuration and errors
from .shared import (
    InputTooLargeError,
    InvalidNameError,
    MarkupError,
    NoParserError,
    NonConsumingParserError,
    ParserConfig,
)

# Tree model
from .tree import (
    CData,
    Comment,
    Declaration,
    Document,
    Element,
    Metadata,
    Node,
    Text,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "LooseXMLParser",
    "ParseResult",
    "ParserConfig",

    # Level 3: Extensible dispatch
    "NodeParser",
    "OffsetParser",
    "ParseContext",
    "ParserRegistry",

    # Character helpers
    "escape",
    "escape_value",
    "unescape",
    "validate_name",
    "is_valid_name",

    # Tree model
    "Node",
    "Document",
    "Element",
    "Text",
    "Comment",
    "CData",
    "Declaration",
    "Metadata",

    # Errors
    "MarkupError",
    "InvalidNameError",
    "NoParserError",
    "NonConsumingParserError",
    "InputTooLargeError",
]
