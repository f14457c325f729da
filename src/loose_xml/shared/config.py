"""Configuration classes for loose XML parsing.

This module provides the immutable configuration object that controls the
parser facade, the CLI and their logging behavior.
"""

import codecs
import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for parse calls made through ``LooseXMLParser``.

    Thread-safe due to frozen dataclass implementation, so one instance can
    be shared by parsers running in several threads.

    Attributes:
        max_input_size: Reject inputs longer than this many characters
        record_diagnostics: Collect diagnostics for tolerated malformations
        correlation_id: Correlation ID attached to logs and diagnostics
        logging_level: Level the CLI configures logging with
        encoding: Encoding used when reading files
    """

    max_input_size: Optional[int] = None
    record_diagnostics: bool = True
    correlation_id: Optional[str] = None
    logging_level: str = "WARNING"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.max_input_size is not None and (
            isinstance(self.max_input_size, bool) or not isinstance(self.max_input_size, int)
        ):
            raise ConfigValidationError(
                "max_input_size must be an integer or None",
                field_name="max_input_size",
            )
        if self.max_input_size is not None and self.max_input_size <= 0:
            raise ConfigValidationError(
                "max_input_size must be > 0 or None",
                field_name="max_input_size",
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS,
            )
        if not self.encoding:
            raise ConfigValidationError(
                "encoding cannot be empty", field_name="encoding"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}", field_name="encoding"
            ) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> config.override(max_input_size=1024).max_input_size
            1024
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be an object")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        config_path = Path(path)
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Default tolerant configuration with diagnostics recorded."""
        return cls()

    @classmethod
    def quiet(cls) -> "ParserConfig":
        """Configuration that skips diagnostic collection and logs errors only."""
        return cls(record_diagnostics=False, logging_level="ERROR")
