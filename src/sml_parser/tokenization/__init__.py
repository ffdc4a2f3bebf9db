"""WSV tokenization layer for SML parsing.

SML documents are WSV documents: every line is a row of whitespace-separated,
optionally quoted or null values. This package converts between text and rows.

Key Components:
    WSVTokenizer: Splits text into rows of optional values
    WSVWriter: Renders rows back into packed or column-aligned lines
    Row: Type alias for one tokenized line
"""

from .tokenizer import Row, WSVTokenizer, parse_rows
from .writer import (
    WSVWriter,
    needs_quoting,
    quote_value,
    serialize_row,
    serialize_value,
)

__all__ = [
    "Row",
    "WSVTokenizer",
    "WSVWriter",
    "needs_quoting",
    "parse_rows",
    "quote_value",
    "serialize_row",
    "serialize_value",
]
