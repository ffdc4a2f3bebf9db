"""Serialization of SML element trees.

:class:`SMLWriter` renders a tree depth-first from an explicit stack, so any
tree the builder accepts can be written back. Element names and closers take a
line each; the attributes of an element are rendered together through
:class:`~sml_parser.tokenization.WSVWriter` so that column alignment applies to
all of them at once.

Example:
    >>> root = SMLElement("Configuration")
    >>> video = root.add_child(SMLElement("Video"))
    >>> _ = video.add_attribute("Resolution", "1280", "720")
    >>> print(SMLWriter(root).indent_with("  ").to_string())
    Configuration
      Video
        Resolution 1280 720
      -
    -
"""

from typing import List, Optional, Tuple

from sml_parser.shared import (
    ColumnAlignment,
    SMLWriterError,
    SMLWriterErrorType,
    WriterConfig,
    get_logger,
)
from sml_parser.shared.text import LINE_FEED, NULL_TOKEN
from sml_parser.tokenization import WSVWriter, needs_quoting, quote_value, serialize_value

from .elements import SMLElement


def encode_end_keyword(end_keyword: Optional[str]) -> str:
    """Return the closer token as it appears in the output."""
    if not end_keyword:
        return NULL_TOKEN
    if needs_quoting(end_keyword):
        return quote_value(end_keyword)
    return end_keyword


class SMLWriter:
    """Builder-style writer for one element tree.

    Configuration methods return a new writer and leave this one unchanged;
    the tree itself is never modified.
    """

    def __init__(
        self,
        root: SMLElement,
        config: Optional[WriterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.root = root
        self.config = config or WriterConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "sml_writer")

        self._closer = encode_end_keyword(self.config.end_keyword)
        self._end_keyword = (
            self.config.end_keyword.lower() if self.config.end_keyword else None
        )

    def _with_config(self, config: WriterConfig) -> "SMLWriter":
        return SMLWriter(self.root, config, self.correlation_id)

    def indent_with(self, indent: str) -> "SMLWriter":
        """Use ``indent`` once per nesting level.

        Raises:
            ConfigValidationError: If ``indent`` holds a non-whitespace character.
        """
        return self._with_config(self.config.override(indent=indent))

    def with_end_keyword(self, end_keyword: Optional[str]) -> "SMLWriter":
        """Close elements with ``end_keyword``; ``None`` or ``""`` writes ``-``."""
        return self._with_config(self.config.override(end_keyword=end_keyword))

    def align_columns(self, alignment: ColumnAlignment) -> "SMLWriter":
        """Lay out attribute rows with ``alignment``."""
        return self._with_config(self.config.override(column_alignment=alignment))

    @property
    def closer(self) -> str:
        return self._closer

    def to_string(self) -> str:
        """Render the tree.

        Raises:
            SMLWriterError: If an element or attribute name would be read back
                as the end keyword. No partial output is returned.
        """
        buffer: List[str] = []
        try:
            self._write_tree(buffer)
        except SMLWriterError as e:
            self.logger.warning(
                "Writing failed",
                extra={"error_type": e.error_type.name, "element_name": e.name},
            )
            raise

        text = "".join(buffer)
        self.logger.debug(
            "Wrote document",
            extra={
                "character_count": len(text),
                "alignment": self.config.column_alignment.name,
            },
        )
        return text

    def _matches_end_keyword(self, name: str) -> bool:
        return self._end_keyword is not None and name.lower() == self._end_keyword

    def _write_tree(self, buffer: List[str]) -> None:
        """Render pre-order from an explicit stack of ``(element, depth, closing)`` frames."""
        stack: List[Tuple[SMLElement, int, bool]] = [(self.root, 0, False)]
        while stack:
            element, depth, closing = stack.pop()
            indent = self.config.indent * depth
            if closing:
                buffer.append(LINE_FEED)
                buffer.append(indent)
                buffer.append(self._closer)
                continue

            if buffer:
                buffer.append(LINE_FEED)
            self._write_start(element, depth, indent, buffer)

            stack.append((element, depth, True))
            for child in reversed(element.children):
                stack.append((child, depth + 1, False))

    def _write_start(
        self, element: SMLElement, depth: int, indent: str, buffer: List[str]
    ) -> None:
        """Write the element name line and its attribute rows."""
        if self._matches_end_keyword(element.name):
            raise SMLWriterError(SMLWriterErrorType.ELEMENT_HAS_END_KEYWORD_NAME, element.name)

        buffer.append(indent)
        buffer.append(serialize_value(element.name))

        if not element.attributes:
            return
        for attribute in element.attributes:
            if self._matches_end_keyword(attribute.name):
                raise SMLWriterError(
                    SMLWriterErrorType.ATTRIBUTE_HAS_END_KEYWORD_NAME, attribute.name
                )

        attribute_indent = self.config.indent * (depth + 1)
        rows = (attribute.to_row() for attribute in element.attributes)
        for line in WSVWriter(rows, self.config.column_alignment).lines():
            buffer.append(LINE_FEED)
            buffer.append(attribute_indent)
            buffer.append(line)


def write(
    root: SMLElement,
    config: Optional[WriterConfig] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """Render ``root`` with ``config`` (defaults: four spaces, ``-``, packed)."""
    return SMLWriter(root, config, correlation_id).to_string()
