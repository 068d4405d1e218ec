"""Tests for settings and additional unit definitions."""

from __future__ import annotations

from fractions import Fraction

import pytest
from pydantic import ValidationError

from unitbridge.config import UnitBridgeSettings, get_settings
from unitbridge.formatting import to_string
from unitbridge.registry import configure_additional_units, get_registry, reset_registry
from unitbridge.systems import measurement_systems_for_unit
from unitbridge.unit import convert, new_unit, unit_category
from unitkernel.errors import AdditionalUnitError, NoPatternError, UnknownUnitError


class TestSettings:
    """Test cases for UnitBridgeSettings."""

    def test_defaults(self):
        """Test default settings."""
        settings = get_settings()
        assert settings.default_locale == "en"
        assert settings.default_style == "long"
        assert settings.environment == "development"
        assert settings.is_development
        assert settings.additional_units_file is None
        assert settings.max_quantities == 100

    def test_environment_overrides(self, monkeypatch):
        """Test UNITBRIDGE_* environment variables."""
        monkeypatch.setenv("UNITBRIDGE_DEFAULT_LOCALE", "fr")
        monkeypatch.setenv("UNITBRIDGE_DEFAULT_STYLE", "short")
        monkeypatch.setenv("UNITBRIDGE_ENVIRONMENT", "production")
        get_settings.cache_clear()

        settings = get_settings()
        assert settings.default_locale == "fr"
        assert settings.default_style == "short"
        assert not settings.is_development

    def test_invalid_style(self):
        """Test validation of the style setting."""
        with pytest.raises(ValidationError):
            UnitBridgeSettings(default_style="wide")

    def test_default_style_used(self, monkeypatch):
        """Test that formatting picks up the default style."""
        monkeypatch.setenv("UNITBRIDGE_DEFAULT_STYLE", "short")
        get_settings.cache_clear()
        assert to_string(new_unit("foot", 3)) == "3 ft"


class TestAdditionalUnits:
    """Test cases for configuring additional units."""

    def test_from_mapping(self, additional_units):
        """Test units registered from a mapping."""
        registry = configure_additional_units(additional_units)

        assert registry is get_registry()
        assert registry.is_additional("vehicle")
        assert get_registry().stats()["additional_units"] == ["vehicle", "quarter_year"]

        assert to_string(new_unit("vehicle", 3)) == "3 vehicles"
        assert to_string(new_unit("vehicle", 1)) == "1 vehicle"
        assert unit_category(new_unit("vehicle")) == "concentr"

    def test_composed_factor(self, additional_units):
        """Test a unit based on an existing unit."""
        configure_additional_units(additional_units)
        assert convert(new_unit("quarter_year", 4), "year").value == 1
        assert measurement_systems_for_unit("quarter_year") == ["metric"]

    def test_missing_localization(self, additional_units):
        """Test formatting in a locale the unit has no patterns for."""
        configure_additional_units(additional_units)
        with pytest.raises(NoPatternError, match="vehicle"):
            to_string(new_unit("vehicle", 3), locale="de")

    def test_offset(self):
        """Test a unit with an offset from its base unit."""
        configure_additional_units({"warmth": {"base_unit": "kelvin", "factor": 1, "offset": "10.5"}})
        assert convert(new_unit("warmth", 0), "kelvin").value == Fraction("10.5")

    def test_regional_localization(self):
        """Test that a localization for a regional locale is used for it."""
        configure_additional_units({
            "vehicle": {
                "base_unit": "item",
                "factor": 1,
                "localizations": {
                    "en": {"long": {"one": "{0} vehicle", "other": "{0} vehicles"}},
                    "en-GB": {"long": {"one": "{0} motor", "other": "{0} motors"}},
                },
            }
        })
        assert to_string(new_unit("vehicle", 3), locale="en-GB") == "3 motors"
        assert to_string(new_unit("vehicle", 3), locale="en_GB") == "3 motors"
        assert to_string(new_unit("vehicle", 3), locale="en-AU") == "3 vehicles"
        assert to_string(new_unit("vehicle", 3)) == "3 vehicles"

    def test_from_file(self, additional_units_file):
        """Test units loaded from a JSON file."""
        configure_additional_units(path=additional_units_file)
        assert new_unit("vehicle", 2).name == "vehicle"

    def test_from_settings(self, monkeypatch, additional_units_file):
        """Test the additional units file setting."""
        monkeypatch.setenv("UNITBRIDGE_ADDITIONAL_UNITS_FILE", str(additional_units_file))
        get_settings.cache_clear()
        reset_registry()

        assert get_registry().is_additional("quarter_year")

    def test_reset_drops_units(self, additional_units):
        """Test that a reset rebuilds the registry from settings."""
        configure_additional_units(additional_units)
        reset_registry()
        with pytest.raises(UnknownUnitError):
            new_unit("vehicle")

    def test_requires_input(self):
        """Test calling without units or a path."""
        with pytest.raises(ValueError, match="Provide additional units"):
            configure_additional_units()

    @pytest.mark.parametrize("config,message", [
        ({"meter": {"base_unit": "meter", "factor": 1}}, "already defined"),
        ({"thing": {"factor": 1}}, "requires a base_unit"),
        ({"thing": {"base_unit": "item"}}, "requires a factor"),
        ({"thing": {"base_unit": "item", "factor": "abc"}}, "invalid factor"),
        ({"thing": {"base_unit": "item", "factor": True}}, "invalid factor"),
        ({"thing": {"base_unit": "item", "factor": 0}}, "factor of zero"),
        ({"thing": {"base_unit": "wibble", "factor": 1}}, "unknown base unit"),
        ({"thing": {"base_unit": "celsius", "factor": 2}}, "no plain conversion factor"),
        ({"thing": {"base_unit": "kelvin", "factor": 1, "offset": "warm"}}, "invalid offset"),
        ({"thing": {"base_unit": "kelvin", "factor": 1, "offset": [1]}}, "invalid offset"),
        ({"thing": {"base_unit": "kelvin", "factor": 1, "offset": None}}, "invalid offset"),
        ({"thing": {"base_unit": "item", "factor": 1, "localizations": {"xx": {}}}}, "unknown locale"),
    ])
    def test_invalid_units(self, config, message):
        """Test invalid unit configurations."""
        with pytest.raises(AdditionalUnitError, match=message):
            configure_additional_units(config)

    def test_missing_file(self, temp_dir, log_output):
        """Test a file that does not exist."""
        with pytest.raises(AdditionalUnitError, match="not found"):
            configure_additional_units(path=temp_dir / "missing.json")

        assert any(
            entry["event"] == "Additional units file not found" and entry["log_level"] == "warning"
            for entry in log_output.entries
        )

    def test_invalid_file(self, temp_dir):
        """Test files that are not valid unit JSON."""
        broken = temp_dir / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(AdditionalUnitError, match="not valid JSON"):
            configure_additional_units(path=broken)

        no_units = temp_dir / "no_units.json"
        no_units.write_text('{"vehicle": {}}')
        with pytest.raises(AdditionalUnitError, match="'units' object"):
            configure_additional_units(path=no_units)
