"""Core parser API with progressive disclosure for loose XML parsing.

Level 1 is the module-level functions, which return a ``Document``. Level 2
is ``LooseXMLParser``, which applies a ``ParserConfig`` and wraps the
document in a ``ParseResult`` with diagnostics and metrics.

Unlike malformed markup, which is tolerated, the errors listed under each
function are raised to the caller; there is no partial result.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from loose_xml.parsing import ParseContext, ParserRegistry
from loose_xml.parsing.dispatch import ParsersArg
from loose_xml.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    InputTooLargeError,
    MarkupError,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from loose_xml.tree import Container, Document

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion

PathType = Union[str, Path]


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def _build_document(
    text: str,
    registry: ParserRegistry,
    correlation_id: Optional[str] = None,
    record_diagnostics: bool = True,
) -> Tuple[Document, ParseContext]:
    """Run the dispatch loop over the whole input."""
    if not isinstance(text, str):
        raise TypeError(f"Expected str input, got {type(text).__name__}")

    logger = get_logger(__name__, correlation_id, "parse")
    logger.info(
        "Starting parse operation",
        extra={"content_length": len(text), "preview": _preview(text)},
    )

    context = ParseContext(
        registry=registry,
        source_length=len(text),
        correlation_id=correlation_id,
        record_diagnostics=record_diagnostics,
    )
    document = Document()
    try:
        registry.dispatch_at(text, 0, document, context)
    except MarkupError as e:
        logger.error(
            f"Parse operation failed: {e}",
            extra={"position": context.position(getattr(e, "text", text))},
            exc_info=False,
        )
        raise

    logger.info(
        "Parse operation completed",
        extra={
            "nodes_created": context.nodes_created,
            "warnings": len(context.diagnostics),
        },
    )
    return document, context


def parse(text: str, parsers: ParsersArg = None) -> Document:
    """Parse markup text into a document tree.

    Args:
        text: Markup to parse
        parsers: A ``ParserRegistry`` to use as-is, or an iterable of parsers
            tried before the built-in ones

    Returns:
        Document whose children are the top-level nodes of the input

    Raises:
        NoParserError: If some position matches no registered parser
        NonConsumingParserError: If a custom parser consumes nothing
        InvalidNameError: If a name or key in the input is not valid

    Examples:
        >>> document = parse('Hello<root a="1"/>World')
        >>> [child.node_type for child in document]
        ['text', 'element', 'text']
        >>> document.serialize()
        'Hello<root a="1"/>World'
    """
    document, _ = _build_document(text, ParserRegistry.resolve(parsers))
    return document


def parse_string(text: str, parsers: ParsersArg = None) -> Document:
    """Parse markup from a string; same as ``parse``."""
    return parse(text, parsers)


def parse_file(
    file_path: PathType,
    encoding: str = "utf-8",
    parsers: ParsersArg = None,
) -> Document:
    """Parse markup from a file.

    Args:
        file_path: Path to the file
        encoding: Text encoding of the file (no detection is attempted)
        parsers: See ``parse``

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid in ``encoding``
    """
    text = Path(file_path).read_text(encoding=encoding)
    return parse(text, parsers)


@dataclass
class ParseResult:
    """Document tree together with diagnostics and performance information."""

    document: Document = field(default_factory=Document)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None
    source: Optional[str] = None

    @property
    def node_count(self) -> int:
        """Total number of nodes created by the parse."""
        return self.performance.nodes_created

    @property
    def element_count(self) -> int:
        return sum(1 for _ in self.document.iter_elements())

    @property
    def has_warnings(self) -> bool:
        """Check if any malformation was tolerated."""
        return any(
            diag.severity is DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        by_type: Dict[str, int] = {}

        def count(container: Container) -> None:
            for child in container:
                by_type[child.node_type] = by_type.get(child.node_type, 0) + 1
                if isinstance(child, Container):
                    count(child)

        count(self.document)
        summary: Dict[str, Any] = {
            "node_count": self.node_count,
            "element_count": self.element_count,
            "nodes_by_type": by_type,
            "max_depth": self.performance.max_depth,
            "processing_time_ms": self.performance.processing_time_ms,
            "characters_processed": self.performance.characters_processed,
            "has_warnings": self.has_warnings,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.source is not None:
            summary["source"] = self.source
        return summary


class LooseXMLParser:
    """Configured parser producing ``ParseResult`` objects.

    One instance can be shared across threads: it holds only the immutable
    configuration and registry.

    Examples:
        >>> parser = LooseXMLParser(ParserConfig(max_input_size=1024))
        >>> result = parser.parse("<root><child>text")
        >>> result.has_warnings
        True
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        parsers: ParsersArg = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.registry = ParserRegistry.resolve(parsers)
        self.logger = get_logger(__name__, self.config.correlation_id, "parser")

    def parse(self, text: str, source: Optional[str] = None) -> ParseResult:
        """Parse ``text`` according to the configuration.

        Raises:
            InputTooLargeError: If the input exceeds ``max_input_size``
            MarkupError: As raised by ``parse``
        """
        limit = self.config.max_input_size
        if limit is not None and len(text) > limit:
            self.logger.error(
                "Input rejected by size limit",
                extra={"content_length": len(text), "limit": limit},
                exc_info=False,
            )
            raise InputTooLargeError(len(text), limit)

        start_time = time.time()
        document, context = _build_document(
            text,
            self.registry,
            correlation_id=self.config.correlation_id,
            record_diagnostics=self.config.record_diagnostics,
        )
        processing_time = (time.time() - start_time) * MS_PER_SECOND

        return ParseResult(
            document=document,
            diagnostics=list(context.diagnostics),
            performance=PerformanceMetrics(
                processing_time_ms=processing_time,
                characters_processed=len(text),
                nodes_created=context.nodes_created,
                max_depth=context.max_depth,
            ),
            correlation_id=self.config.correlation_id,
            source=source,
        )

    def parse_file(self, file_path: PathType) -> ParseResult:
        """Read a file with the configured encoding and parse it."""
        path = Path(file_path)
        text = path.read_text(encoding=self.config.encoding)
        return self.parse(text, source=str(path))
