"""Lexical parsers and the dispatch loop that drives them.

Key Components:
    NodeParser: Interface implemented by every construct parser
    OffsetParser: NodeParser that reads the input in place
    ParseContext: Per-call state carrying the registry and diagnostics
    ParserRegistry: Ordered parser set with the dispatch loop
    TextParser, CommentParser, CDataParser, DeclarationParser,
    MetadataParser, ElementParser: Built-in construct parsers
"""

from .base import NodeParser, OffsetParser, ParseContext
from .dispatch import DEFAULT_PARSERS, ParserRegistry
from .parsers import (
    CDataParser,
    CommentParser,
    DeclarationParser,
    ElementParser,
    MetadataParser,
    TextParser,
)

__all__ = [
    "DEFAULT_PARSERS",
    "CDataParser",
    "CommentParser",
    "DeclarationParser",
    "ElementParser",
    "MetadataParser",
    "NodeParser",
    "OffsetParser",
    "ParseContext",
    "ParserRegistry",
    "TextParser",
]
