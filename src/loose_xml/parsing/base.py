"""Parser interface and per-call parse state.

A parser answers two questions about the input at some offset: whether it can
start there and, if selected, which node the construct becomes and where the
next one begins.

``NodeParser`` works on the remaining text and is the simplest interface for
custom parsers. ``OffsetParser`` works on the whole input and an offset, which
avoids copying the rest of the input at every step; the built-in parsers use
it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from loose_xml.shared import DiagnosticEntry, DiagnosticSeverity, get_logger
from loose_xml.tree import Node

if TYPE_CHECKING:
    from .dispatch import ParserRegistry


class NodeParser(ABC):
    """Lexical parser for one kind of markup construct."""

    #: Component name used in logs and diagnostics
    component = "parser"

    @abstractmethod
    def can_start(self, text: str) -> bool:
        """Return True if this parser can consume a prefix of ``text``."""

    @abstractmethod
    def parse(self, text: str, context: "ParseContext") -> Tuple[Node, str]:
        """Consume a prefix of ``text``.

        Args:
            text: Remaining input, for which ``can_start`` returned True
            context: State of the current parse call, including the registry
                used to parse nested content

        Returns:
            The constructed node and the unconsumed remainder, which must be
            strictly shorter than ``text``
        """

    def can_start_at(self, text: str, pos: int) -> bool:
        """Offset form of ``can_start``; copies ``text[pos:]``."""
        return self.can_start(text[pos:])

    def parse_at(self, text: str, pos: int, context: "ParseContext") -> Tuple[Node, int]:
        """Offset form of ``parse``, returning the offset after the node."""
        node, remaining = self.parse(text[pos:], context)
        return node, len(text) - len(remaining)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class OffsetParser(NodeParser):
    """Parser that reads the input in place, starting at an offset.

    Subclasses implement ``can_start_at`` and ``parse_at``; ``can_start``
    and ``parse`` are derived from them.
    """

    @abstractmethod
    def can_start_at(self, text: str, pos: int) -> bool:
        """Return True if this parser can consume input starting at ``pos``."""

    @abstractmethod
    def parse_at(self, text: str, pos: int, context: "ParseContext") -> Tuple[Node, int]:
        """Consume input starting at ``pos``.

        Returns:
            The constructed node and the offset where the next construct
            starts, which must be greater than ``pos``
        """

    def can_start(self, text: str) -> bool:
        return self.can_start_at(text, 0)

    def parse(self, text: str, context: "ParseContext") -> Tuple[Node, str]:
        node, end = self.parse_at(text, 0, context)
        return node, text[end:]


@dataclass
class ParseContext:
    """State of a single parse call.

    Each call owns its context; the registry it references is shared and
    read-only.
    """

    registry: "ParserRegistry"
    source_length: int = 0
    correlation_id: Optional[str] = None
    record_diagnostics: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    nodes_created: int = 0
    depth: int = 0
    max_depth: int = 0

    def __post_init__(self) -> None:
        self.logger = get_logger(__name__, self.correlation_id, "dispatch")

    def position(self, remaining: str) -> int:
        """Offset in the original input at which ``remaining`` starts."""
        return max(0, self.source_length - len(remaining))

    def enter(self) -> None:
        self.depth += 1

    def leave(self) -> None:
        self.depth -= 1

    def node_created(self) -> None:
        self.nodes_created += 1
        if self.depth > self.max_depth:
            self.max_depth = self.depth

    def warn(
        self,
        message: str,
        component: str,
        position: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Report a tolerated malformation found at offset ``position``.

        Parsers working on remaining text can compute the offset with
        ``position(remaining)``.
        """
        self.logger.warning(
            message, extra={"position": position, "parser": component}
        )
        if not self.record_diagnostics:
            return
        self.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )
