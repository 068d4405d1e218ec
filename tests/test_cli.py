"""Tests for the UnitBridge command-line interface."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from unittest.mock import patch

import orjson
import pytest
import typer
from typer.testing import CliRunner

from unitbridge.cli import app, parse_value

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep the CLI from reconfiguring structlog during tests."""
    with patch("unitbridge.cli.configure_logging") as configure:
        yield configure


class TestParseValue:
    """Test cases for command-line number parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("3", 3),
        ("-2", -2),
        ("3/4", Fraction(3, 4)),
        ("1.5", 1.5),
        ("d1.5", Decimal("1.5")),
    ])
    def test_numbers(self, text, expected):
        """Test each supported number form."""
        value = parse_value(text)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("text", ["abc", "1/0", "dx"])
    def test_invalid(self, text):
        """Test text that is not a number."""
        with pytest.raises(typer.BadParameter):
            parse_value(text)


class TestCommands:
    """Test cases for CLI commands."""

    def test_info(self):
        """Test the info command."""
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "UnitBridge 0.1.0" in result.output
        assert "Configuration" in result.output

    def test_verbose_configures_debug(self, quiet_logging):
        """Test that --verbose enables debug logging."""
        result = runner.invoke(app, ["--verbose", "categories", "--json"])
        assert result.exit_code == 0
        quiet_logging.assert_called_once_with(level="DEBUG", enable_colors=True)

    def test_convert_json(self):
        """Test a conversion with JSON output."""
        result = runner.invoke(app, ["convert", "1", "mile", "foot", "--json"])
        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data["from"] == {"unit": "mile", "value": 1}
        assert data["to"] == {"unit": "foot", "value": 5280}

    def test_convert_rational_json(self):
        """Test that rational results keep their exact form."""
        result = runner.invoke(app, ["convert", "1", "inch", "centimeter", "--json"])
        data = orjson.loads(result.output)
        assert data["to"]["value"] == {"numerator": 127, "denominator": 50}

    def test_convert_table(self):
        """Test the table output of a conversion."""
        result = runner.invoke(app, ["convert", "1", "mile", "foot"])
        assert result.exit_code == 0
        assert "5,280 feet" in result.output

    def test_convert_error(self):
        """Test that unit errors exit with status 1."""
        result = runner.invoke(app, ["convert", "1", "meter", "second"])
        assert result.exit_code == 1
        assert "Conversion failed" in result.output

    def test_format(self):
        """Test localized formatting."""
        result = runner.invoke(app, ["format", "3", "meter", "--locale", "de", "--case", "dative"])
        assert result.exit_code == 0
        assert result.output.strip() == "3 Metern"

    def test_format_json(self):
        """Test formatting with JSON output."""
        result = runner.invoke(app, ["format", "100", "kilometer per hour", "--json"])
        data = orjson.loads(result.output)
        assert data == {"unit": "kilometer_per_hour", "value": 100, "text": "100 kilometers per hour"}

    def test_format_unknown_unit(self):
        """Test formatting an unknown unit."""
        result = runner.invoke(app, ["format", "3", "blergh"])
        assert result.exit_code == 1
        assert "Formatting failed" in result.output

    def test_preferred_json(self):
        """Test a preference lookup with JSON output."""
        result = runner.invoke(
            app, ["preferred", "180", "centimeter", "--usage", "person_height", "--territory", "US", "--json"]
        )
        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data["units"] == ["foot", "inch"]
        assert [part["unit"] for part in data["localized"]] == ["foot", "inch"]
        assert data["text"].startswith("5 feet")

    def test_preferred_unknown_usage(self):
        """Test a usage the category does not define."""
        result = runner.invoke(app, ["preferred", "1", "meter", "--usage", "bogus"])
        assert result.exit_code == 1
        assert "Preference lookup failed" in result.output

    def test_decompose_json(self):
        """Test decomposition with JSON output."""
        result = runner.invoke(app, ["decompose", "3725", "second", "hour", "minute", "second", "--json"])
        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data == [
            {"unit": "hour", "value": 1},
            {"unit": "minute", "value": 2},
            {"unit": "second", "value": 5},
        ]

    def test_decompose_zero(self):
        """Test the warning for a zero value."""
        result = runner.invoke(app, ["decompose", "0", "foot", "foot", "inch"])
        assert result.exit_code == 0
        assert "zero" in result.output

    def test_parse_json(self):
        """Test parsing with JSON output."""
        result = runner.invoke(app, ["parse", "kilometer per hour", "--json"])
        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data["unit"] == "kilometer_per_hour"
        assert data["base_unit"] == "meter_per_second"
        assert [(token["name"], token["side"]) for token in data["tokens"]] == [
            ("kilometer", "numerator"),
            ("hour", "denominator"),
        ]

    def test_parse_table(self):
        """Test the table output of parse."""
        result = runner.invoke(app, ["parse", "square_meter"])
        assert result.exit_code == 0
        assert "square_meter" in result.output

    def test_parse_error(self):
        """Test parsing an unknown unit."""
        result = runner.invoke(app, ["parse", "wibble"])
        assert result.exit_code == 1
        assert "Parsing failed" in result.output

    def test_categories_json(self):
        """Test the category listing."""
        result = runner.invoke(app, ["categories", "--json"])
        assert result.exit_code == 0
        data = orjson.loads(result.output)
        assert data["length"] == "meter"
        assert data["speed"] == "meter_per_second"
