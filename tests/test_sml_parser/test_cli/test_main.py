"""Tests for the CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from sml_parser.cli.main import (
    CLIConfig,
    SMLProcessor,
    create_argument_parser,
    dumps_json,
    format_outline,
    format_results,
    main,
)
from sml_parser.shared import ColumnAlignment, ConfigError, ConfigValidationError, WriterConfig
from sml_parser.tree import SMLElement

VALID_DOCUMENT = 'Configuration\n  Player\n    Name "Hero 123"\n    Lives 3 -\n  End\nEnd\n'
INVALID_DOCUMENT = "A\n-\nB\n-\n"


@pytest.fixture
def valid_file(tmp_path: Path) -> Path:
    path = tmp_path / "valid.sml"
    path.write_text(VALID_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def invalid_file(tmp_path: Path) -> Path:
    path = tmp_path / "invalid.sml"
    path.write_text(INVALID_DOCUMENT, encoding="utf-8")
    return path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        config = CLIConfig()

        assert config.output_format == "json"
        assert config.parser_config.writer.column_alignment is ColumnAlignment.PACKED

    def test_config_from_file(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "output_format": "text",
            "max_input_size_bytes": 1024,
            "writer": {"indent": "\t", "end_keyword": "End", "column_alignment": "left"},
        }))

        config = CLIConfig.from_file(config_path)

        assert config.output_format == "text"
        assert config.parser_config.max_input_size_bytes == 1024
        assert config.parser_config.writer.indent == "\t"
        assert config.parser_config.writer.column_alignment is ColumnAlignment.LEFT

    def test_config_from_nonexistent_file(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            CLIConfig.from_file(tmp_path / "missing.json")

    def test_config_not_an_object(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            CLIConfig.from_file(config_path)

    def test_config_unknown_field(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"batch_size": 10}))

        with pytest.raises(ConfigError):
            CLIConfig.from_file(config_path)

    @pytest.mark.parametrize("data, field_name", [
        ({"max_input_size_bytes": "10"}, "max_input_size_bytes"),
        ({"encoding": 8}, "encoding"),
        ({"encoding": "no-such-codec"}, "encoding"),
        ({"logging_level": ["DEBUG"]}, "logging_level"),
        ({"correlation_id": 42}, "correlation_id"),
        ({"writer": "tabs"}, "writer"),
        ({"output_format": "xml"}, "output_format"),
    ])
    def test_config_wrong_field_types(self, tmp_path: Path, data, field_name):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(data))

        with pytest.raises(ConfigValidationError) as exc_info:
            CLIConfig.from_file(config_path)

        assert exc_info.value.field_name == field_name


class TestSMLProcessor:
    """Test file processing."""

    def test_process_files(self, valid_file: Path, invalid_file: Path):
        processor = SMLProcessor(CLIConfig())
        results = processor.process_files([valid_file, invalid_file])

        assert [result.success for result in results] == [True, False]
        assert results[0].root.name == "Configuration"


class TestArgumentParser:
    """Test command-line argument parsing."""

    def test_parse_command(self):
        args = create_argument_parser().parse_args(["parse", "a.sml", "b.sml"])

        assert args.command == "parse"
        assert args.paths == [Path("a.sml"), Path("b.sml")]
        assert args.format is None

    def test_format_command_options(self):
        args = create_argument_parser().parse_args(
            ["format", "a.sml", "--indent-width", "2", "-e", "End", "--align", "right"]
        )

        assert args.indent_width == 2
        assert args.end_keyword == "End"
        assert args.align == "right"
        assert args.tabs is False

    def test_indent_options_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(
                ["format", "a.sml", "--tabs", "--indent-width", "2"]
            )

    def test_validate_defaults_to_text(self):
        args = create_argument_parser().parse_args(["validate", "a.sml"])

        assert args.format == "text"


class TestOutputFormatting:
    """Test result rendering."""

    def test_format_outline(self):
        root = SMLElement("Root")
        root.add_attribute("Name", "Hero 123", None)
        root.add_child(SMLElement("Child")).add_attribute("Empty", "")

        assert format_outline(root) == "\n".join([
            "Root",
            '  @Name: "Hero 123", null',
            "  Child",
            '    @Empty: ""',
        ])

    def test_format_json(self, valid_file: Path):
        results = SMLProcessor(CLIConfig()).process_files([valid_file])
        data = json.loads(format_results(results, "json"))

        assert data[0]["success"] is True
        assert data[0]["element_count"] == 2
        assert data[0]["root"]["children"][0]["name"] == "Player"

    def test_format_json_failure(self, invalid_file: Path):
        results = SMLProcessor(CLIConfig()).process_files([invalid_file])
        data = json.loads(format_results(results, "json"))

        assert data[0]["success"] is False
        assert "root" not in data[0]
        assert data[0]["error"]["error_type"] == "ONLY_ONE_ROOT_ELEMENT_ALLOWED"
        assert data[0]["error"]["line_num"] == 3

    def test_format_text(self, valid_file: Path, invalid_file: Path):
        results = SMLProcessor(CLIConfig()).process_files([valid_file, invalid_file])
        text = format_results(results, "text")

        assert f"== {valid_file}" in text
        assert "    @Name: \"Hero 123\"" in text
        assert "Error: Only one root element allowed (line 4)" in text

    def test_format_empty_results(self):
        assert format_results([], "text") == "No results to display."
        assert format_results([], "json") == "[]"

    @pytest.mark.parametrize("value", [
        {"name": "A", "values": [None, "", "caf\u00e9", "say \"hi\""], "count": 3, "ok": True},
        [[], {}, [1.5, [False]], {"nested": {"deeper": []}}],
        "plain",
        [],
    ])
    def test_dumps_json_matches_stdlib(self, value):
        assert dumps_json(value) == json.dumps(value, indent=2)

    def test_dumps_json_deep_nesting(self):
        depth = 3000
        value: list = []
        for _ in range(depth):
            value = [value]

        text = dumps_json(value, indent=0)

        assert text.count("[") == depth + 1
        assert text.startswith("[\n[\n")
        assert text.endswith("]\n]")


class TestMainFunction:
    """Test command dispatch and exit codes."""

    def test_main_no_args(self):
        assert main([]) == 1

    def test_main_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_parse_json(self, valid_file: Path, capsys):
        assert main(["parse", str(valid_file)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data[0]["root"]["name"] == "Configuration"

    def test_parse_reports_failure(self, valid_file: Path, invalid_file: Path, capsys):
        assert main(["parse", "--format", "text", str(valid_file), str(invalid_file)]) == 1

        assert "Only one root element allowed" in capsys.readouterr().out

    def test_parse_to_output_file(self, valid_file: Path, tmp_path: Path):
        output = tmp_path / "out.json"

        assert main(["parse", str(valid_file), "--output", str(output)]) == 0
        assert json.loads(output.read_text())[0]["success"] is True

    def test_parse_uses_configured_format(self, valid_file: Path, tmp_path: Path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"output_format": "text"}))

        assert main(["--config", str(config_path), "parse", str(valid_file)]) == 0
        assert capsys.readouterr().out.startswith(f"== {valid_file}")

    def test_bad_config_exit_code(self, valid_file: Path, tmp_path: Path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        assert main(["--config", str(config_path), "parse", str(valid_file)]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_mistyped_config_exit_code(self, valid_file: Path, tmp_path: Path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"max_input_size_bytes": "10"}))

        assert main(["--config", str(config_path), "parse", str(valid_file)]) == 2
        err = capsys.readouterr().err
        assert "Configuration error" in err
        assert "max_input_size_bytes" in err

    def test_format_defaults(self, valid_file: Path, capsys):
        assert main(["format", str(valid_file)]) == 0

        assert capsys.readouterr().out == "\n".join([
            "Configuration",
            "    Player",
            '        Name "Hero 123"',
            "        Lives 3 -",
            "    -",
            "-",
        ]) + "\n"

    def test_format_options(self, valid_file: Path, capsys):
        code = main([
            "format", str(valid_file), "--indent-width", "2", "-e", "End", "--align", "left",
        ])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == [
            "Configuration",
            "  Player",
            '    Name  "Hero 123"',
            "    Lives 3" + " " * 10 + "-",
            "  End",
            "End",
        ]

    def test_format_tabs_to_file(self, valid_file: Path, tmp_path: Path):
        output = tmp_path / "formatted.sml"

        assert main(["format", str(valid_file), "--tabs", "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8").startswith("Configuration\n\tPlayer\n")

    def test_format_keyword_collision(self, tmp_path: Path, capsys):
        path = tmp_path / "collide.sml"
        path.write_text("Root\n  End\n  -\n-\n", encoding="utf-8")

        assert main(["format", str(path), "-e", "end"]) == 1
        assert "Cannot format" in capsys.readouterr().err

    def test_format_invalid_input(self, invalid_file: Path, capsys):
        assert main(["format", str(invalid_file)]) == 1
        assert "Only one root element allowed" in capsys.readouterr().err

    def test_format_negative_indent(self, valid_file: Path):
        assert main(["format", str(valid_file), "--indent-width", "-1"]) == 2

    def test_format_writer_config_error(self, valid_file: Path, capsys):
        error = ConfigValidationError("indent must be a string", field_name="indent")

        with patch.object(WriterConfig, "override", side_effect=error):
            code = main(["format", str(valid_file), "--tabs"])

        assert code == 2
        err = capsys.readouterr().err
        assert err.startswith("Configuration error: indent must be a string")
        assert "Cannot format" not in err

    def test_format_deep_document(self, tmp_path: Path, capsys):
        depth = 5000
        path = tmp_path / "deep.sml"
        lines = [f"Level{level}" for level in range(depth)] + ["-"] * depth
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

        assert main(["format", str(path), "--indent-width", "0"]) == 0
        assert capsys.readouterr().out.splitlines() == lines

    def test_parse_deep_document_as_json(self, tmp_path: Path, capsys):
        depth = 1200
        path = tmp_path / "deep.sml"
        lines = [f"Level{level}" for level in range(depth)] + ["-"] * depth
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

        assert main(["parse", str(path)]) == 0
        out = capsys.readouterr().out
        assert '"max_depth": 1199' in out
        assert '"name": "Level1199"' in out

    def test_validate_text(self, valid_file: Path, invalid_file: Path, capsys):
        assert main(["validate", str(valid_file), str(invalid_file)]) == 1

        out = capsys.readouterr().out
        assert "Validated 2 files, 1 valid" in out
        assert f"✓ {valid_file}" in out
        assert f"✗ {invalid_file}" in out

    def test_validate_json(self, valid_file: Path, capsys):
        assert main(["validate", "--format", "json", str(valid_file)]) == 0

        assert json.loads(capsys.readouterr().out) == [{"file": str(valid_file), "valid": True}]

    def test_validate_missing_file(self, tmp_path: Path, capsys):
        assert main(["validate", str(tmp_path / "nope.sml")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_main_keyboard_interrupt(self, valid_file: Path):
        with patch("sml_parser.cli.main.cmd_parse", side_effect=KeyboardInterrupt):
            assert main(["parse", str(valid_file)]) == 130

    @patch("sml_parser.cli.main.configure_logging")
    def test_logging_level_flags(self, mock_configure, valid_file: Path):
        main(["--verbose", "validate", str(valid_file)])
        mock_configure.assert_called_with("DEBUG")

        main(["--quiet", "validate", str(valid_file)])
        mock_configure.assert_called_with("ERROR")

        main(["validate", str(valid_file)])
        mock_configure.assert_called_with("WARNING")
