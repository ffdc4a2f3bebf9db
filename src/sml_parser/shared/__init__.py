"""Shared utilities for SML parsing.

This module provides the configuration objects, error types, diagnostics and
logging helpers used by the tokenization, tree and API layers.
"""

from .config import (
    ColumnAlignment,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    WriterConfig,
)
from .errors import (
    InputTooLargeError,
    ParseError,
    SMLErrorType,
    SMLParseError,
    SMLWriterError,
    SMLWriterErrorType,
    WSVErrorType,
    WSVParseError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ColumnAlignment",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "WriterConfig",
    "InputTooLargeError",
    "ParseError",
    "SMLErrorType",
    "SMLParseError",
    "SMLWriterError",
    "SMLWriterErrorType",
    "WSVErrorType",
    "WSVParseError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
