"""WSV row tokenizer.

Splits source text into rows of optional string values. Each source line
yields exactly one row; blank and comment-only lines yield an empty row so row
indices always equal 0-based line numbers.

Value grammar per line:

* values are separated by WSV whitespace; ``#`` starts a comment;
* an unquoted ``-`` is the null value (``None``);
* a quoted value may contain whitespace and ``#``; ``""`` encodes a quote and
  ``"/"`` a line feed.
"""

from typing import List, Optional, Tuple

from sml_parser.shared.errors import WSVErrorType, WSVParseError
from sml_parser.shared.logging import get_logger
from sml_parser.shared.text import (
    COMMENT_CHAR,
    LINE_BREAK_MARKER,
    LINE_FEED,
    NULL_TOKEN,
    QUOTE_CHAR,
    is_whitespace,
)

Row = List[Optional[str]]


class WSVTokenizer:
    """Converts WSV text into rows of optional values."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "wsv_tokenizer")

    def tokenize(self, text: str) -> List[Row]:
        """Tokenize a whole document.

        Args:
            text: Source text. Lines are separated by line feeds; a trailing
                carriage return is ordinary whitespace.

        Returns:
            One row per source line.

        Raises:
            WSVParseError: If any line is malformed.
        """
        rows = [
            self.tokenize_line(line, line_num)
            for line_num, line in enumerate(text.split(LINE_FEED))
        ]
        self.logger.debug(
            "Tokenized document",
            extra={"row_count": len(rows), "character_count": len(text)},
        )
        return rows

    def tokenize_line(self, line: str, line_num: int = 0) -> Row:
        """Tokenize a single line (which must not contain a line feed)."""
        values: Row = []
        index = 0
        length = len(line)

        while index < length:
            char = line[index]
            if is_whitespace(char):
                index += 1
            elif char == COMMENT_CHAR:
                break
            elif char == QUOTE_CHAR:
                value, index = self._read_string(line, index, line_num)
                values.append(value)
            else:
                value, index = self._read_value(line, index, line_num)
                values.append(None if value == NULL_TOKEN else value)

        return values

    def _read_value(self, line: str, start: int, line_num: int) -> Tuple[str, int]:
        index = start
        length = len(line)
        while index < length:
            char = line[index]
            if is_whitespace(char) or char == COMMENT_CHAR:
                break
            if char == QUOTE_CHAR:
                raise WSVParseError(
                    WSVErrorType.INVALID_DOUBLE_QUOTE_AFTER_VALUE, line_num, index
                )
            index += 1
        return line[start:index], index

    def _read_string(self, line: str, start: int, line_num: int) -> Tuple[str, int]:
        chars: List[str] = []
        index = start + 1
        length = len(line)

        while index < length:
            char = line[index]
            index += 1
            if char != QUOTE_CHAR:
                chars.append(char)
                continue

            following = line[index] if index < length else None
            if following == QUOTE_CHAR:
                chars.append(QUOTE_CHAR)
                index += 1
            elif following == LINE_BREAK_MARKER:
                if index + 1 < length and line[index + 1] == QUOTE_CHAR:
                    chars.append(LINE_FEED)
                    index += 2
                else:
                    raise WSVParseError(
                        WSVErrorType.INVALID_STRING_LINE_BREAK, line_num, index
                    )
            elif following is None or following == COMMENT_CHAR or is_whitespace(following):
                return "".join(chars), index
            else:
                raise WSVParseError(
                    WSVErrorType.INVALID_CHARACTER_AFTER_STRING, line_num, index
                )

        raise WSVParseError(WSVErrorType.STRING_NOT_CLOSED, line_num, length)


def parse_rows(text: str, correlation_id: Optional[str] = None) -> List[Row]:
    """Tokenize ``text`` into rows with a fresh :class:`WSVTokenizer`."""
    return WSVTokenizer(correlation_id).tokenize(text)
