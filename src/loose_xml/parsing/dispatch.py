"""Parser registry and the dispatch loop.

The registry is an explicit, ordered and immutable list of parsers. The
dispatch loop walks an offset through the input and picks the first parser
that can start there, so more specific prefixes must be registered before the
generic ones they overlap with.
"""

import logging
from typing import Iterable, Iterator, Optional, Tuple, Union

from loose_xml.shared import NoParserError, NonConsumingParserError
from loose_xml.tree import Container

from .base import NodeParser, ParseContext
from .parsers import (
    CLOSING_TAG_OPEN,
    CDataParser,
    CommentParser,
    DeclarationParser,
    ElementParser,
    MetadataParser,
    TextParser,
)

ParsersArg = Optional[Union["ParserRegistry", Iterable[NodeParser]]]


def _check_parser(parser: object) -> NodeParser:
    if not isinstance(parser, NodeParser):
        raise TypeError(f"{parser!r} is not a parser: NodeParser subclass required")
    return parser


class ParserRegistry:
    """Ordered, immutable collection of parsers.

    Safe to share between threads since it is never mutated after
    construction.
    """

    def __init__(self, parsers: Iterable[NodeParser]) -> None:
        self._parsers: Tuple[NodeParser, ...] = tuple(
            _check_parser(parser) for parser in parsers
        )

    @classmethod
    def default(cls) -> "ParserRegistry":
        """Registry with the built-in parsers in their required order."""
        return _DEFAULT_REGISTRY

    @classmethod
    def resolve(cls, parsers: ParsersArg = None) -> "ParserRegistry":
        """Turn a ``parsers`` argument into a registry.

        ``None`` selects the default registry, a registry is used as-is, and
        any other iterable of parsers extends the default registry.
        """
        if parsers is None:
            return _DEFAULT_REGISTRY
        if isinstance(parsers, ParserRegistry):
            return parsers
        return _DEFAULT_REGISTRY.extended(parsers)

    @property
    def parsers(self) -> Tuple[NodeParser, ...]:
        return self._parsers

    def __iter__(self) -> Iterator[NodeParser]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def __repr__(self) -> str:
        names = ", ".join(type(parser).__name__ for parser in self._parsers)
        return f"ParserRegistry([{names}])"

    def extended(self, parsers: Iterable[NodeParser]) -> "ParserRegistry":
        """New registry trying ``parsers`` first, then the existing ones.

        An existing parser is dropped when a parser of exactly the same
        class is supplied.
        """
        custom = [_check_parser(parser) for parser in parsers]
        custom_types = {type(parser) for parser in custom}
        kept = [parser for parser in self._parsers if type(parser) not in custom_types]
        return ParserRegistry(custom + kept)

    def select(self, text: str) -> NodeParser:
        """Return the first parser that can start on ``text``.

        Raises:
            NoParserError: If no parser accepts the text
        """
        return self.select_at(text, 0)

    def select_at(self, text: str, pos: int) -> NodeParser:
        """Return the first parser that can start at offset ``pos``."""
        for parser in self._parsers:
            if parser.can_start_at(text, pos):
                return parser
        raise NoParserError(text[pos:])

    def dispatch(
        self,
        text: str,
        container: Container,
        context: ParseContext,
        stop_at_close: bool = False,
    ) -> str:
        """Parse nodes from ``text`` into ``container``.

        Returns:
            The unconsumed text: empty, or starting with a closing tag when
            ``stop_at_close`` is set
        """
        return text[self.dispatch_at(text, 0, container, context, stop_at_close):]

    def dispatch_at(
        self,
        text: str,
        pos: int,
        container: Container,
        context: ParseContext,
        stop_at_close: bool = False,
    ) -> int:
        """Parse nodes from ``text``, starting at ``pos``, into ``container``.

        Args:
            text: Whole input
            pos: Offset to start parsing at
            container: Node receiving the parsed children
            context: State of the current parse call
            stop_at_close: Stop when the input continues with a closing tag

        Returns:
            Offset of the unconsumed input: the end of ``text``, or the start
            of a closing tag when ``stop_at_close`` is set

        Raises:
            NoParserError: If no parser can start at some position
            NonConsumingParserError: If a parser consumes nothing
        """
        end = len(text)
        context.enter()
        try:
            while pos < end:
                if stop_at_close and text.startswith(CLOSING_TAG_OPEN, pos):
                    break
                parser = self.select_at(text, pos)
                if context.logger.is_enabled_for(logging.DEBUG):
                    context.logger.debug(
                        "Dispatching to parser",
                        extra={"parser": type(parser).__name__, "position": pos},
                    )
                node, next_pos = parser.parse_at(text, pos, context)
                if next_pos <= pos:
                    raise NonConsumingParserError(parser, text[pos:])
                container.add(node)
                context.node_created()
                pos = next_pos
        finally:
            context.leave()
        return pos


DEFAULT_PARSERS: Tuple[NodeParser, ...] = (
    TextParser(),
    CDataParser(),
    CommentParser(),
    MetadataParser(),
    DeclarationParser(),
    ElementParser(),
)

_DEFAULT_REGISTRY = ParserRegistry(DEFAULT_PARSERS)
