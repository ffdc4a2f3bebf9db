"""Tests for the WSV row tokenizer."""

import pytest

from sml_parser.shared import WSVErrorType, WSVParseError
from sml_parser.tokenization import WSVTokenizer, parse_rows


@pytest.fixture
def tokenizer() -> WSVTokenizer:
    return WSVTokenizer()


class TestTokenizeLine:
    """Test splitting single lines into values."""

    def test_whitespace_separated_values(self, tokenizer: WSVTokenizer) -> None:
        """Test values separated by runs of spaces and tabs."""
        assert tokenizer.tokenize_line("a  b\tc") == ["a", "b", "c"]

    def test_leading_and_trailing_whitespace_ignored(self, tokenizer: WSVTokenizer) -> None:
        """Test indentation and trailing whitespace produce no values."""
        assert tokenizer.tokenize_line("    Resolution 1280 720   ") == [
            "Resolution", "1280", "720"
        ]

    def test_blank_line_is_empty_row(self, tokenizer: WSVTokenizer) -> None:
        """Test blank lines yield an empty row."""
        assert tokenizer.tokenize_line("") == []
        assert tokenizer.tokenize_line("   \t ") == []

    def test_dash_is_null(self, tokenizer: WSVTokenizer) -> None:
        """Test an unquoted dash is the null value."""
        assert tokenizer.tokenize_line("v - 2") == ["v", None, "2"]

    def test_quoted_dash_is_string(self, tokenizer: WSVTokenizer) -> None:
        """Test a quoted dash stays a string."""
        assert tokenizer.tokenize_line('"-"') == ["-"]

    def test_dash_inside_value_is_not_null(self, tokenizer: WSVTokenizer) -> None:
        """Test only a lone dash means null."""
        assert tokenizer.tokenize_line("a-b --") == ["a-b", "--"]

    def test_empty_quoted_string(self, tokenizer: WSVTokenizer) -> None:
        """Test two quotes produce the empty string, distinct from null."""
        assert tokenizer.tokenize_line('x "" -') == ["x", "", None]

    def test_quoted_string_with_spaces(self, tokenizer: WSVTokenizer) -> None:
        """Test quoted values keep their whitespace."""
        assert tokenizer.tokenize_line('Name "Hero 123"') == ["Name", "Hero 123"]

    def test_escaped_quote(self, tokenizer: WSVTokenizer) -> None:
        """Test doubled quotes inside a string."""
        assert tokenizer.tokenize_line('"say ""hi"""') == ['say "hi"']

    def test_line_break_escape(self, tokenizer: WSVTokenizer) -> None:
        """Test the quote-slash-quote sequence encodes a line feed."""
        assert tokenizer.tokenize_line('"line1"/"line2"') == ["line1\nline2"]

    def test_comment_stripped(self, tokenizer: WSVTokenizer) -> None:
        """Test text after a hash is ignored."""
        assert tokenizer.tokenize_line("a b # comment") == ["a", "b"]
        assert tokenizer.tokenize_line("# only a comment") == []

    def test_comment_directly_after_value(self, tokenizer: WSVTokenizer) -> None:
        """Test a hash ends an unquoted value."""
        assert tokenizer.tokenize_line("a#comment") == ["a"]
        assert tokenizer.tokenize_line('"a"#comment') == ["a"]

    def test_hash_inside_quotes_is_kept(self, tokenizer: WSVTokenizer) -> None:
        """Test a quoted hash is not a comment."""
        assert tokenizer.tokenize_line('"a#b" c') == ["a#b", "c"]

    def test_unicode_whitespace_separates(self, tokenizer: WSVTokenizer) -> None:
        """Test non-ASCII whitespace characters separate values."""
        assert tokenizer.tokenize_line("a\u3000b\u00a0c\u2003d") == ["a", "b", "c", "d"]

    def test_carriage_return_is_whitespace(self, tokenizer: WSVTokenizer) -> None:
        """Test CRLF line endings leave no stray characters."""
        assert tokenizer.tokenize_line("a b\r") == ["a", "b"]


class TestTokenizeErrors:
    """Test malformed lines raise WSVParseError with position."""

    def test_string_not_closed(self, tokenizer: WSVTokenizer) -> None:
        """Test a missing closing quote."""
        with pytest.raises(WSVParseError) as exc_info:
            tokenizer.tokenize_line('"abc', 3)

        assert exc_info.value.error_type is WSVErrorType.STRING_NOT_CLOSED
        assert exc_info.value.line_num == 3
        assert exc_info.value.column == 4

    def test_quote_inside_unquoted_value(self, tokenizer: WSVTokenizer) -> None:
        """Test a quote in the middle of a bare value."""
        with pytest.raises(WSVParseError) as exc_info:
            tokenizer.tokenize_line('ab"c')

        assert exc_info.value.error_type is WSVErrorType.INVALID_DOUBLE_QUOTE_AFTER_VALUE
        assert exc_info.value.column == 2

    def test_character_after_string(self, tokenizer: WSVTokenizer) -> None:
        """Test text glued to a closing quote."""
        with pytest.raises(WSVParseError) as exc_info:
            tokenizer.tokenize_line('"abc"d')

        assert exc_info.value.error_type is WSVErrorType.INVALID_CHARACTER_AFTER_STRING
        assert exc_info.value.column == 5

    def test_invalid_line_break(self, tokenizer: WSVTokenizer) -> None:
        """Test a quote-slash not followed by a quote."""
        with pytest.raises(WSVParseError) as exc_info:
            tokenizer.tokenize_line('"a"/b')

        assert exc_info.value.error_type is WSVErrorType.INVALID_STRING_LINE_BREAK
        assert exc_info.value.column == 3

    def test_error_message_uses_one_based_position(self, tokenizer: WSVTokenizer) -> None:
        """Test messages number lines and columns from one."""
        with pytest.raises(WSVParseError, match=r"String not closed \(line 1, column 5\)"):
            tokenizer.tokenize_line('"abc', 0)


class TestTokenizeDocument:
    """Test whole-document tokenization."""

    def test_one_row_per_line(self, tokenizer: WSVTokenizer) -> None:
        """Test blank lines are kept as empty rows so indices match lines."""
        rows = tokenizer.tokenize("Root\n\n  Name Value\n# comment\n-")

        assert rows == [["Root"], [], ["Name", "Value"], [], [None]]

    def test_error_reports_line_number(self, tokenizer: WSVTokenizer) -> None:
        """Test the failing line index is reported."""
        with pytest.raises(WSVParseError) as exc_info:
            tokenizer.tokenize('Root\n  Name "unterminated\n-')

        assert exc_info.value.line_num == 1

    def test_parse_rows_helper(self) -> None:
        """Test the module-level helper."""
        assert parse_rows("a b\r\nc") == [["a", "b"], ["c"]]

    def test_empty_text(self, tokenizer: WSVTokenizer) -> None:
        """Test empty input yields a single empty row."""
        assert tokenizer.tokenize("") == [[]]
