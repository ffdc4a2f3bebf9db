"""Exception types for SML parsing and writing.

Parsing and writing have separate, closed error taxonomies. Every parse error
carries the 0-based index of the row (source line) where it was detected;
messages shown to users number lines from 1.
"""

from enum import Enum, auto
from typing import Optional


class WSVErrorType(Enum):
    """Row-level tokenization failures."""

    STRING_NOT_CLOSED = auto()
    INVALID_DOUBLE_QUOTE_AFTER_VALUE = auto()
    INVALID_CHARACTER_AFTER_STRING = auto()
    INVALID_STRING_LINE_BREAK = auto()


class SMLErrorType(Enum):
    """Tree assembly failures."""

    # The file was empty, held only comments, or is not valid SML
    END_KEYWORD_NOT_DETECTED = auto()
    INVALID_ROOT_ELEMENT_START = auto()
    NULL_VALUE_AS_ELEMENT_NAME = auto()
    NULL_VALUE_AS_ATTRIBUTE_NAME = auto()
    ROOT_NOT_CLOSED = auto()
    ONLY_ONE_ROOT_ELEMENT_ALLOWED = auto()
    ATTRIBUTE_OUTSIDE_ELEMENT = auto()


class SMLWriterErrorType(Enum):
    """Serialization failures."""

    ELEMENT_HAS_END_KEYWORD_NAME = auto()
    ATTRIBUTE_HAS_END_KEYWORD_NAME = auto()


_WSV_MESSAGES = {
    WSVErrorType.STRING_NOT_CLOSED: "String not closed",
    WSVErrorType.INVALID_DOUBLE_QUOTE_AFTER_VALUE: "Invalid double quote after value",
    WSVErrorType.INVALID_CHARACTER_AFTER_STRING: "Invalid character after string",
    WSVErrorType.INVALID_STRING_LINE_BREAK: "Invalid string line break",
}

_SML_MESSAGES = {
    SMLErrorType.END_KEYWORD_NOT_DETECTED: "End keyword could not be detected",
    SMLErrorType.INVALID_ROOT_ELEMENT_START: "Invalid root element start",
    SMLErrorType.NULL_VALUE_AS_ELEMENT_NAME: "Null value as element name is not allowed",
    SMLErrorType.NULL_VALUE_AS_ATTRIBUTE_NAME: "Null value as attribute name is not allowed",
    SMLErrorType.ROOT_NOT_CLOSED: "Root element not closed",
    SMLErrorType.ONLY_ONE_ROOT_ELEMENT_ALLOWED: "Only one root element allowed",
    SMLErrorType.ATTRIBUTE_OUTSIDE_ELEMENT: "Attribute found outside of an element",
}

_WRITER_MESSAGES = {
    SMLWriterErrorType.ELEMENT_HAS_END_KEYWORD_NAME: "Element name matches the end keyword",
    SMLWriterErrorType.ATTRIBUTE_HAS_END_KEYWORD_NAME: "Attribute name matches the end keyword",
}


class ParseError(Exception):
    """Base class for all errors raised while turning SML text into a tree."""

    def __init__(self, message: str, line_num: int) -> None:
        super().__init__(message)
        self.message = message
        self.line_num = line_num


class WSVParseError(ParseError):
    """A source line could not be split into values."""

    def __init__(self, error_type: WSVErrorType, line_num: int, column: int) -> None:
        self.error_type = error_type
        self.column = column
        super().__init__(
            f"{_WSV_MESSAGES[error_type]} (line {line_num + 1}, column {column + 1})",
            line_num,
        )


class SMLParseError(ParseError):
    """The rows do not form a valid element tree."""

    def __init__(self, error_type: SMLErrorType, line_num: int) -> None:
        self.error_type = error_type
        super().__init__(f"{_SML_MESSAGES[error_type]} (line {line_num + 1})", line_num)


class InputTooLargeError(ParseError):
    """Input exceeds the configured ``max_input_size_bytes``."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Input of {size} bytes exceeds limit of {limit} bytes", 0)


class SMLWriterError(Exception):
    """A tree cannot be serialized with the configured end keyword."""

    def __init__(self, error_type: SMLWriterErrorType, name: Optional[str] = None) -> None:
        message = _WRITER_MESSAGES[error_type]
        if name is not None:
            message = f"{message}: {name!r}"
        super().__init__(message)
        self.error_type = error_type
        self.name = name
