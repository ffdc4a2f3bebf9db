"""Configuration classes for SML parsing and writing.

Configuration objects are frozen dataclasses validated on construction, so an
invalid setting (for example an indent string holding a non-whitespace
character) is rejected before any text is produced.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .text import WHITESPACE_CHARS

DEFAULT_INDENT = "    "
LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ColumnAlignment(Enum):
    """Layout of the attribute rows written under one element."""

    PACKED = auto()   # Single space between values
    LEFT = auto()     # Columns padded after the value
    RIGHT = auto()    # Columns padded before the value


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
class WriterConfig:
    """Formatting options for :class:`~sml_parser.tree.writer.SMLWriter`.

    Attributes:
        indent: String repeated once per nesting level. Whitespace only.
        end_keyword: Token closing each element. ``None`` (or ``""``) writes
            the null value ``-``.
        column_alignment: Layout of each element's attribute rows.
    """

    indent: str = DEFAULT_INDENT
    end_keyword: Optional[str] = None
    column_alignment: ColumnAlignment = ColumnAlignment.PACKED

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if not isinstance(self.indent, str):
            raise ConfigValidationError("indent must be a string", field_name="indent")
        invalid = [char for char in self.indent if char not in WHITESPACE_CHARS]
        if invalid:
            raise ConfigValidationError(
                f"indent may only contain whitespace characters, found {invalid[0]!r}",
                field_name="indent",
                suggestions=["Use spaces or tabs for indentation"],
            )
        if self.end_keyword is not None and not isinstance(self.end_keyword, str):
            raise ConfigValidationError(
                "end_keyword must be a string or None", field_name="end_keyword"
            )
        if self.end_keyword == "":
            object.__setattr__(self, "end_keyword", None)
        if not isinstance(self.column_alignment, ColumnAlignment):
            raise ConfigValidationError(
                "column_alignment must be a ColumnAlignment member",
                field_name="column_alignment",
                suggestions=[member.name for member in ColumnAlignment],
            )

    def override(self, **kwargs: Any) -> "WriterConfig":
        """Return a copy with the given fields replaced (and re-validated)."""
        return replace(self, **kwargs)

    @classmethod
    def minified(cls) -> "WriterConfig":
        """No indentation, packed attributes, ``-`` as closer."""
        return cls(indent="", column_alignment=ColumnAlignment.PACKED)

    @classmethod
    def pretty(cls) -> "WriterConfig":
        """Four-space indentation with left-aligned attribute columns."""
        return cls(indent=DEFAULT_INDENT, column_alignment=ColumnAlignment.LEFT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indent": self.indent,
            "end_keyword": self.end_keyword,
            "column_alignment": self.column_alignment.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WriterConfig":
        values = dict(data)
        alignment = values.get("column_alignment")
        if isinstance(alignment, str):
            try:
                values["column_alignment"] = ColumnAlignment[alignment.upper()]
            except KeyError as e:
                raise ConfigValidationError(
                    f"Unknown column alignment: {alignment}",
                    field_name="column_alignment",
                    suggestions=[member.name for member in ColumnAlignment],
                ) from e
        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigValidationError(
                f"Unknown writer configuration fields: {sorted(unknown)}"
            )
        return cls(**values)


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for the text-level parsing API and the ``sml`` command.

    The tree parser itself has no options; these settings govern how input is
    read and bounded before it reaches the parser, and how trees are written
    back out.
    """

    writer: WriterConfig = field(default_factory=WriterConfig)
    encoding: str = "utf-8-sig"
    max_input_size_bytes: Optional[int] = None
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not isinstance(self.writer, WriterConfig):
            raise ConfigValidationError(
                "writer must be a WriterConfig instance", field_name="writer"
            )
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ConfigValidationError(
                "encoding must be a non-empty string", field_name="encoding"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding}",
                field_name="encoding",
                suggestions=["utf-8-sig", "utf-8", "utf-16"],
            ) from e
        if self.max_input_size_bytes is not None and (
            isinstance(self.max_input_size_bytes, bool)
            or not isinstance(self.max_input_size_bytes, int)
            or self.max_input_size_bytes <= 0
        ):
            raise ConfigValidationError(
                "max_input_size_bytes must be a positive integer or None",
                field_name="max_input_size_bytes",
            )
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string or None", field_name="correlation_id"
            )
        if not isinstance(self.logging_level, str) or self.logging_level not in LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Writer fields use double-underscore notation.

        Example:
            >>> config = ParserConfig()
            >>> config.override(writer__indent="\\t", max_input_size_bytes=4096)
        """
        writer_overrides: Dict[str, Any] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key.startswith("writer__"):
                writer_overrides[key.split("__", 1)[1]] = value
            else:
                top_level[key] = value

        if writer_overrides:
            base_writer = top_level.get("writer", self.writer)
            top_level["writer"] = base_writer.override(**writer_overrides)

        return replace(self, **top_level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "writer": self.writer.to_dict(),
            "encoding": self.encoding,
            "max_input_size_bytes": self.max_input_size_bytes,
            "logging_level": self.logging_level,
            "correlation_id": self.correlation_id,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from a dictionary such as one loaded from JSON."""
        values = dict(data)
        if isinstance(values.get("writer"), dict):
            values["writer"] = WriterConfig.from_dict(values["writer"])
        unknown = set(values) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {sorted(unknown)}"
            )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)
