"""Character classes shared by the WSV tokenizer, row writer and configuration.

WSV separates values with an explicit set of Unicode whitespace characters.
The line feed is not part of the set: it separates rows, not values.
"""

from typing import FrozenSet

WHITESPACE_CHARS: FrozenSet[str] = frozenset(
    "\u0009\u000B\u000C\u000D\u0020\u0085\u00A0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200A"
    "\u2028\u2029\u202F\u205F\u3000"
)

LINE_FEED = "\n"
QUOTE_CHAR = '"'
COMMENT_CHAR = "#"
LINE_BREAK_MARKER = "/"
NULL_TOKEN = "-"


def is_whitespace(char: str) -> bool:
    """Return True if ``char`` separates WSV values."""
    return char in WHITESPACE_CHARS
