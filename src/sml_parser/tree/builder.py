"""Tree building for SML documents.

Converts tokenized rows into a single rooted :class:`SMLElement` tree. The
closing token ("end keyword") is not fixed by the grammar: it is read from the
last non-blank row of the document. Elements under construction are kept on an
explicit stack rather than the call stack, so nesting depth is bounded only by
memory.

Row interpretation after the root row:

* one value equal to the end keyword (compared lowercased, or null when the
  document closes with ``-``) closes the top element;
* any other single value opens a child element;
* two or more values add an attribute to the top element.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from sml_parser.shared import SMLErrorType, SMLParseError, get_logger
from sml_parser.tokenization import Row

from .elements import SMLAttribute, SMLElement


def detect_end_keyword(rows: Sequence[Row]) -> Optional[str]:
    """Return the document's end keyword from its last non-blank row.

    Only the first value of that row is read. ``None`` means the null value
    closes elements; otherwise the lowercased string is returned.

    Raises:
        SMLParseError: ``END_KEYWORD_NOT_DETECTED`` if every row is blank.
    """
    for row in reversed(rows):
        if row:
            closer = row[0]
            return None if closer is None else closer.lower()
    raise SMLParseError(SMLErrorType.END_KEYWORD_NOT_DETECTED, len(rows))


def is_end_keyword(value: Optional[str], end_keyword: Optional[str]) -> bool:
    """Check whether a single-value row closes the current element."""
    if value is None:
        return end_keyword is None
    return end_keyword is not None and value.lower() == end_keyword


class SMLTreeBuilder:
    """Builds an element tree from WSV rows in one linear pass.

    A builder instance can be reused; each :meth:`build` call owns its own
    construction stack. After a successful build, :attr:`end_keyword` and the
    push/pop counters describe the last document.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "sml_tree_builder")

        self.end_keyword: Optional[str] = None
        self.elements_created = 0
        self.attributes_created = 0
        self.pushes = 0
        self.pops = 0

    def build(self, rows: Sequence[Row]) -> SMLElement:
        """Build the document tree.

        Args:
            rows: Tokenized rows, one per source line. Empty rows are skipped.

        Returns:
            The root element.

        Raises:
            SMLParseError: If the rows do not form exactly one closed root.
        """
        rows = list(rows)
        self._reset_state()
        self.logger.info("Starting tree building", extra={"row_count": len(rows)})

        try:
            root = self._build_tree(rows)
        except SMLParseError as e:
            self.logger.warning(
                "Tree building failed",
                extra={"error_type": e.error_type.name, "line_num": e.line_num},
            )
            raise

        self.logger.info(
            "Tree building completed",
            extra={
                "element_count": self.elements_created,
                "attribute_count": self.attributes_created,
                "end_keyword": self.end_keyword,
            },
        )
        return root

    def _reset_state(self) -> None:
        self.end_keyword = None
        self.elements_created = 0
        self.attributes_created = 0
        self.pushes = 0
        self.pops = 0

    def _build_tree(self, rows: List[Row]) -> SMLElement:
        end_keyword = detect_end_keyword(rows)
        self.end_keyword = end_keyword

        lines = enumerate(rows)
        stack: List[SMLElement] = [self._open_root(lines, len(rows))]
        result: Optional[SMLElement] = None

        for line_num, row in lines:
            if not row:
                continue

            if len(row) > 1:
                self._add_attribute(stack, row, line_num)
                continue

            value = row[0]
            if is_end_keyword(value, end_keyword):
                result = self._close_element(stack, result, line_num)
            elif value is None:
                raise SMLParseError(SMLErrorType.NULL_VALUE_AS_ELEMENT_NAME, line_num)
            else:
                self._push(stack, SMLElement(name=value))

        if result is None or stack:
            raise SMLParseError(SMLErrorType.ROOT_NOT_CLOSED, len(rows))
        return result

    def _open_root(self, lines: Iterator[Tuple[int, Row]], row_count: int) -> SMLElement:
        for line_num, row in lines:
            if not row:
                continue
            if len(row) > 1:
                raise SMLParseError(SMLErrorType.INVALID_ROOT_ELEMENT_START, line_num)
            if row[0] is None:
                raise SMLParseError(SMLErrorType.NULL_VALUE_AS_ELEMENT_NAME, line_num)
            root = SMLElement(name=row[0])
            self.pushes += 1
            self.elements_created += 1
            return root
        # detect_end_keyword already rejected documents without a non-blank row
        raise SMLParseError(SMLErrorType.END_KEYWORD_NOT_DETECTED, row_count)

    def _push(self, stack: List[SMLElement], element: SMLElement) -> None:
        stack.append(element)
        self.pushes += 1
        self.elements_created += 1

    def _close_element(
        self,
        stack: List[SMLElement],
        result: Optional[SMLElement],
        line_num: int,
    ) -> Optional[SMLElement]:
        """Pop the top element and attach it; return the finalized root, if any."""
        if not stack:
            raise SMLParseError(SMLErrorType.ONLY_ONE_ROOT_ELEMENT_ALLOWED, line_num)

        element = stack.pop()
        self.pops += 1

        if stack:
            stack[-1].children.append(element)
            return result
        if result is not None:
            raise SMLParseError(SMLErrorType.ONLY_ONE_ROOT_ELEMENT_ALLOWED, line_num)
        return element

    def _add_attribute(self, stack: List[SMLElement], row: Row, line_num: int) -> None:
        name = row[0]
        if name is None:
            raise SMLParseError(SMLErrorType.NULL_VALUE_AS_ATTRIBUTE_NAME, line_num)
        if not stack:
            raise SMLParseError(SMLErrorType.ATTRIBUTE_OUTSIDE_ELEMENT, line_num)
        stack[-1].attributes.append(SMLAttribute(name=name, values=list(row[1:])))
        self.attributes_created += 1


def build_tree(rows: Sequence[Row], correlation_id: Optional[str] = None) -> SMLElement:
    """Build a tree from rows with a fresh :class:`SMLTreeBuilder`."""
    return SMLTreeBuilder(correlation_id).build(rows)
