"""Public parsing API for SML documents."""

from sml_parser.tree import write

from .parser import (
    SMLParser,
    dumps,
    parse,
    parse_document,
    parse_file,
    parse_string,
)
from .result import ParseResult

__all__ = [
    "ParseResult",
    "SMLParser",
    "dumps",
    "parse",
    "parse_document",
    "parse_file",
    "parse_string",
    "write",
]
