"""Shared utilities for loose XML parsing.

This module provides shared configuration objects, result types, errors and
logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    InputTooLargeError,
    InvalidNameError,
    MarkupError,
    NoParserError,
    NonConsumingParserError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "InputTooLargeError",
    "InvalidNameError",
    "MarkupError",
    "NoParserError",
    "NonConsumingParserError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
