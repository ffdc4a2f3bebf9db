"""WSV row writer.

Renders rows of optional values back into WSV lines, either packed (one space
between values) or with every column padded to a common width.
"""

from typing import Iterable, List, Optional, Sequence

from sml_parser.shared.config import ColumnAlignment
from sml_parser.shared.text import (
    COMMENT_CHAR,
    LINE_BREAK_MARKER,
    LINE_FEED,
    NULL_TOKEN,
    QUOTE_CHAR,
    is_whitespace,
)

EMPTY_STRING_TOKEN = QUOTE_CHAR * 2
VALUE_SEPARATOR = " "


def needs_quoting(value: str) -> bool:
    """Return True if ``value`` cannot be written as a bare WSV value."""
    if value == "" or value == NULL_TOKEN:
        return True
    return any(
        char in (QUOTE_CHAR, COMMENT_CHAR, LINE_FEED) or is_whitespace(char)
        for char in value
    )


def quote_value(value: str) -> str:
    """Wrap ``value`` in quotes, doubling inner quotes and encoding line feeds."""
    escaped = value.replace(QUOTE_CHAR, EMPTY_STRING_TOKEN)
    escaped = escaped.replace(LINE_FEED, QUOTE_CHAR + LINE_BREAK_MARKER + QUOTE_CHAR)
    return QUOTE_CHAR + escaped + QUOTE_CHAR


def serialize_value(value: Optional[str]) -> str:
    """Render one value: ``None`` as ``-``, everything else bare or quoted."""
    if value is None:
        return NULL_TOKEN
    if value == "":
        return EMPTY_STRING_TOKEN
    if needs_quoting(value):
        return quote_value(value)
    return value


def serialize_row(row: Sequence[Optional[str]]) -> str:
    """Render one row packed."""
    return VALUE_SEPARATOR.join(serialize_value(value) for value in row)


class WSVWriter:
    """Renders a table of rows as WSV text.

    Example:
        >>> WSVWriter([["a", "1"], ["bbb", None]]).align_columns(
        ...     ColumnAlignment.RIGHT).to_string()
        '  a 1\\nbbb -'
    """

    def __init__(
        self,
        rows: Iterable[Sequence[Optional[str]]],
        alignment: ColumnAlignment = ColumnAlignment.PACKED,
    ) -> None:
        self.rows: List[List[Optional[str]]] = [list(row) for row in rows]
        self.alignment = alignment

    def align_columns(self, alignment: ColumnAlignment) -> "WSVWriter":
        """Return a writer over the same rows with a different alignment."""
        return WSVWriter(self.rows, alignment)

    def lines(self) -> List[str]:
        """Render each row to one line, without line feeds."""
        serialized = [[serialize_value(value) for value in row] for row in self.rows]
        if self.alignment is ColumnAlignment.PACKED:
            return [VALUE_SEPARATOR.join(row) for row in serialized]

        widths: List[int] = []
        for row in serialized:
            for column, text in enumerate(row):
                if column == len(widths):
                    widths.append(len(text))
                elif len(text) > widths[column]:
                    widths[column] = len(text)

        lines = []
        for row in serialized:
            if self.alignment is ColumnAlignment.LEFT:
                # No padding after the last value of a row
                cells = [text.ljust(widths[column]) for column, text in enumerate(row[:-1])]
                cells.extend(row[-1:])
            else:
                cells = [text.rjust(widths[column]) for column, text in enumerate(row)]
            lines.append(VALUE_SEPARATOR.join(cells))
        return lines

    def to_string(self) -> str:
        return LINE_FEED.join(self.lines())
