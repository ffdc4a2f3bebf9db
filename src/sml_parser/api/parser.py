"""Core parser API with progressive disclosure for SML.

Level 1 functions raise on malformed input (:func:`parse`,
:func:`parse_document`) or return a :class:`ParseResult` (:func:`parse_string`,
:func:`parse_file`). Level 2 is the configured :class:`SMLParser` class.
"""

import time
from pathlib import Path
from typing import Optional, Union

from sml_parser.shared import (
    ColumnAlignment,
    DiagnosticSeverity,
    InputTooLargeError,
    ParseError,
    ParserConfig,
    SMLParseError,
    WriterConfig,
    WSVParseError,
    get_logger,
)
from sml_parser.shared.config import DEFAULT_INDENT
from sml_parser.tokenization import WSVTokenizer
from sml_parser.tree import SMLDocument, SMLElement, SMLTreeBuilder, SMLWriter

from .result import ParseResult

MS_PER_SECOND = 1000
SIZE_ENCODING = "utf-8"


class SMLParser:
    """Configured SML parser.

    Example:
        >>> parser = SMLParser(ParserConfig(max_input_size_bytes=1 << 20))
        >>> result = parser.parse_string("Root\\n  Name Value\\n-")
        >>> result.root.get_attribute("Name").values
        ['Value']
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "sml_parser")

    def parse(self, text: str) -> SMLElement:
        """Parse ``text`` and return the root element.

        Raises:
            ParseError: ``WSVParseError`` for malformed lines, ``SMLParseError``
                for an invalid tree, ``InputTooLargeError`` above the size limit.
        """
        return self.parse_document(text).root

    def parse_document(self, text: str) -> SMLDocument:
        """Like :meth:`parse` but keeps the detected end keyword and statistics."""
        self._check_size(text)
        rows = WSVTokenizer(self.correlation_id).tokenize(text)
        builder = SMLTreeBuilder(self.correlation_id)
        root = builder.build(rows)
        return SMLDocument(root=root, end_keyword=builder.end_keyword)

    def parse_string(self, text: str, source: Optional[str] = None) -> ParseResult:
        """Parse ``text`` without raising for malformed input."""
        start_time = time.perf_counter()
        result = ParseResult(source=source, correlation_id=self.correlation_id)
        result.performance.characters_processed = len(text)

        try:
            self._check_size(text)
            rows = WSVTokenizer(self.correlation_id).tokenize(text)
            result.performance.rows_processed = len(rows)

            builder = SMLTreeBuilder(self.correlation_id)
            root = builder.build(rows)
            result.document = SMLDocument(root=root, end_keyword=builder.end_keyword)
            result.performance.elements_created = builder.elements_created
            result.performance.attributes_created = builder.attributes_created
        except ParseError as e:
            self._record_failure(result, e)

        result.performance.processing_time_ms = (
            (time.perf_counter() - start_time) * MS_PER_SECOND
        )
        return result

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        """Read ``file_path`` with the configured encoding and parse it."""
        path_obj = Path(file_path)

        error_message = None
        if not path_obj.exists():
            error_message = f"File not found: {path_obj}"
        elif not path_obj.is_file():
            error_message = f"Path is not a file: {path_obj}"
        else:
            try:
                text = path_obj.read_text(encoding=self.config.encoding)
            except (OSError, UnicodeDecodeError) as e:
                error_message = f"Could not read {path_obj}: {e}"

        if error_message:
            self.logger.warning(error_message, extra={"file_path": str(path_obj)})
            result = ParseResult(
                success=False, source=str(path_obj), correlation_id=self.correlation_id
            )
            result.add_diagnostic(
                DiagnosticSeverity.ERROR,
                error_message,
                "file_reader",
                details={"file_path": str(path_obj)},
            )
            return result

        return self.parse_string(text, source=str(path_obj))

    def dumps(self, root: SMLElement) -> str:
        """Render ``root`` with the configured writer settings."""
        return SMLWriter(root, self.config.writer, self.correlation_id).to_string()

    def _check_size(self, text: str) -> None:
        limit = self.config.max_input_size_bytes
        if limit is None:
            return
        size = len(text.encode(SIZE_ENCODING))
        if size > limit:
            raise InputTooLargeError(size, limit)

    def _record_failure(self, result: ParseResult, error: ParseError) -> None:
        if isinstance(error, WSVParseError):
            component = "wsv_tokenizer"
            column: Optional[int] = error.column
        elif isinstance(error, SMLParseError):
            component = "sml_tree_builder"
            column = None
        else:
            component = "sml_parser"
            column = None

        error_type = getattr(error, "error_type", None)
        result.success = False
        result.error = error
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            component,
            line_num=error.line_num,
            column=column,
            details={"error_type": error_type.name if error_type else type(error).__name__},
        )
        self.logger.info(
            "Parse failed",
            extra={"source": result.source, "line_num": error.line_num},
        )


def parse(text: str, correlation_id: Optional[str] = None) -> SMLElement:
    """Parse SML text and return the root element, raising :class:`ParseError`.

    Examples:
        >>> root = parse('Configuration\\n  Player\\n    Name "Hero 123"\\n  -\\n-')
        >>> root.find("Player").get_values("Name")
        ['Hero 123']
    """
    return SMLParser(correlation_id=correlation_id).parse(text)


def parse_document(text: str, correlation_id: Optional[str] = None) -> SMLDocument:
    """Parse SML text into an :class:`SMLDocument`, raising :class:`ParseError`."""
    return SMLParser(correlation_id=correlation_id).parse_document(text)


def parse_string(text: str, correlation_id: Optional[str] = None) -> ParseResult:
    """Parse SML text into a :class:`ParseResult` without raising."""
    return SMLParser(correlation_id=correlation_id).parse_string(text)


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse an SML file into a :class:`ParseResult` without raising.

    Args:
        file_path: Path to the file
        encoding: Optional encoding override (default ``utf-8-sig``)
        correlation_id: Optional correlation ID for request tracking
    """
    config = ParserConfig(encoding=encoding) if encoding else ParserConfig()
    return SMLParser(config, correlation_id).parse_file(file_path)


def dumps(
    root: SMLElement,
    indent: str = DEFAULT_INDENT,
    end_keyword: Optional[str] = None,
    column_alignment: ColumnAlignment = ColumnAlignment.PACKED,
) -> str:
    """Render ``root`` as SML text.

    Raises:
        ConfigValidationError: If ``indent`` is not whitespace-only.
        SMLWriterError: If a name collides with ``end_keyword``.
    """
    config = WriterConfig(
        indent=indent, end_keyword=end_keyword, column_alignment=column_alignment
    )
    return SMLWriter(root, config).to_string()
