"""Tests for measurement systems."""

from __future__ import annotations

import pytest

from unitbridge.systems import (
    in_measurement_system,
    known_measurement_systems,
    measurement_system_for_territory,
    measurement_system_from_locale,
    measurement_systems_for_unit,
    units_for_system,
    validate_measurement_system,
)
from unitkernel.errors import UnknownMeasurementSystemError, UnknownTerritoryError


class TestTerritorySystems:
    """Test cases for territory and locale measurement systems."""

    @pytest.mark.parametrize("territory,system", [
        ("US", "ussystem"),
        ("GB", "uksystem"),
        ("AU", "metric"),
        ("LR", "ussystem"),
    ])
    def test_for_territory(self, territory, system):
        """Test the general system of territories."""
        assert measurement_system_for_territory(territory) == system

    def test_category_override(self):
        """Test that a category can override the general system."""
        assert measurement_system_for_territory("GB", "temperature") == "uksystem"
        assert measurement_system_for_territory("BS", "temperature") == "ussystem"
        assert measurement_system_for_territory("BS") == "metric"

    def test_unknown_territory(self):
        """Test an unknown territory."""
        with pytest.raises(UnknownTerritoryError):
            measurement_system_for_territory("QQ")

    @pytest.mark.parametrize("locale,system", [
        ("en", "ussystem"),
        ("en-GB", "uksystem"),
        ("de", "metric"),
    ])
    def test_from_locale(self, locale, system):
        """Test systems of locales, with and without a territory."""
        assert measurement_system_from_locale(locale) == system


class TestUnitSystems:
    """Test cases for the systems units belong to."""

    @pytest.mark.parametrize("unit,systems", [
        ("acre_foot", ["ussystem"]),
        ("meter", ["metric", "si"]),
        ("foot", ["uksystem", "ussystem"]),
        ("kilometer_per_hour", ["metric"]),
    ])
    def test_systems_for_unit(self, unit, systems):
        """Test the systems shared by every part of a unit."""
        assert measurement_systems_for_unit(unit) == systems

    def test_unknown_systems(self):
        """Test a unit that belongs to no system."""
        with pytest.raises(UnknownMeasurementSystemError):
            measurement_systems_for_unit("earth_radius")

    def test_in_measurement_system(self):
        """Test system membership, with metric including SI."""
        assert in_measurement_system("meter", "metric")
        assert in_measurement_system("foot", ["metric", "ussystem"])
        assert not in_measurement_system("foot", "metric")

    def test_units_for_system(self):
        """Test the units of a system."""
        units = units_for_system("uksystem")
        assert "stone" in units
        assert "ton" not in units

    def test_known_systems(self):
        """Test system names and validation."""
        assert set(known_measurement_systems()) == {"metric", "ussystem", "uksystem"}
        assert validate_measurement_system("metric") == "metric"
        with pytest.raises(UnknownMeasurementSystemError, match="imperial"):
            validate_measurement_system("imperial")
