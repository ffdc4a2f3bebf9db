"""SML Parser.

Reads and writes the Simple Markup Language: a tree-structured configuration
format layered on whitespace-separated values (WSV).

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), dumps(), write()
- Level 2: Configured parser - SMLParser class with ParserConfig
- Level 3: Building blocks - WSVTokenizer, SMLTreeBuilder, SMLWriter
"""

__version__ = "0.1.0"
__author__ = "SML Parser Team"

from .api import (
    ParseResult,
    SMLParser,
    dumps,
    parse,
    parse_document,
    parse_file,
    parse_string,
    write,
)
from .shared.config import ColumnAlignment, ParserConfig, WriterConfig
from .shared.errors import (
    ParseError,
    SMLErrorType,
    SMLParseError,
    SMLWriterError,
    SMLWriterErrorType,
    WSVErrorType,
    WSVParseError,
)
from .tokenization import WSVTokenizer, WSVWriter
from .tree import SMLAttribute, SMLDocument, SMLElement, SMLTreeBuilder, SMLWriter

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "dumps",
    "parse",
    "parse_document",
    "parse_file",
    "parse_string",
    "write",

    # Level 2: Configured parser
    "SMLParser",
    "ParserConfig",
    "WriterConfig",
    "ColumnAlignment",

    # Level 3: Building blocks
    "WSVTokenizer",
    "WSVWriter",
    "SMLTreeBuilder",
    "SMLWriter",

    # Tree and result objects
    "ParseResult",
    "SMLAttribute",
    "SMLDocument",
    "SMLElement",

    # Errors
    "ParseError",
    "SMLErrorType",
    "SMLParseError",
    "SMLWriterError",
    "SMLWriterErrorType",
    "WSVErrorType",
    "WSVParseError",
]
