"""Tests for exact unit conversion and the Unit value type."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from unitbridge.unit import (
    base_unit,
    compatible,
    convert,
    convert_to_base_unit,
    known_unit_categories,
    known_units,
    new_unit,
    unit_category,
)
from unitkernel.errors import (
    IncompatibleUnitsError,
    InvalidUnitValueError,
    NotInvertibleError,
    UnitNotConvertibleError,
    UnknownUnitError,
    UnknownUsageError,
)


class TestNewUnit:
    """Test cases for creating unit values."""

    def test_defaults(self):
        """Test a unit created with defaults."""
        unit = new_unit("meter")
        assert unit.name == "meter"
        assert unit.value == 1
        assert unit.usage == "default"
        assert unit.format_options == {}

    def test_canonical_name(self):
        """Test that names are canonicalized."""
        assert new_unit("kilometre", 3).name == "kilometer"
        assert new_unit("Meter Kilogram").name == "kilogram_meter"

    @pytest.mark.parametrize("value", [1, 1.5, Decimal("2.25"), Fraction(1, 3)])
    def test_value_types(self, value):
        """Test every supported numeric type."""
        assert new_unit("meter", value).value == value

    @pytest.mark.parametrize("value", [True, "3", None, float("nan"), float("inf"), Decimal("NaN")])
    def test_invalid_values(self, value):
        """Test that non-numbers and non-finite values are rejected."""
        with pytest.raises(InvalidUnitValueError):
            new_unit("meter", value)

    def test_usage(self):
        """Test that a usage is validated against the unit's category."""
        assert new_unit("centimeter", 180, usage="person-height").usage == "person_height"

        with pytest.raises(UnknownUsageError, match="bogus"):
            new_unit("meter", 1, usage="bogus")

    def test_unknown_unit(self):
        """Test that an unknown unit name raises."""
        with pytest.raises(UnknownUnitError):
            new_unit("smoot", 1)

    def test_immutable(self):
        """Test that units cannot be modified in place."""
        unit = new_unit("meter", 1)
        with pytest.raises(AttributeError):
            unit.value = 2  # type: ignore[misc]

        changed = unit.with_value(2)
        assert changed.value == 2
        assert unit.value == 1

    def test_equality_ignores_parse_form(self):
        """Test that units compare by name, value, usage and options."""
        assert new_unit("metre", 2) == new_unit("meter", 2)
        assert new_unit("meter", 2) != new_unit("meter", 3)


class TestConvert:
    """Test cases for unit conversion."""

    def test_exact_integer_result(self, one_mile):
        """Test that an integral result is an int."""
        result = convert(one_mile, "foot")
        assert result.name == "foot"
        assert result.value == 5280
        assert isinstance(result.value, int)

    def test_rational_result(self):
        """Test that int input with a fractional result stays exact."""
        assert convert(new_unit("inch", 1), "centimeter").value == Fraction(127, 50)

    def test_float_input(self):
        """Test that float input gives float output."""
        result = convert(new_unit("foot", 1.0), "meter")
        assert isinstance(result.value, float)
        assert result.value == 0.3048

    def test_float_integral_result(self):
        """Test that an integral result from a float is an int."""
        result = convert(new_unit("meter", 1.5), "centimeter")
        assert result.value == 150
        assert isinstance(result.value, int)

    def test_decimal_input(self):
        """Test that Decimal input gives Decimal output."""
        result = convert(new_unit("foot", Decimal("1")), "meter")
        assert result.value == Decimal("0.3048")
        assert isinstance(result.value, Decimal)

    def test_temperature_offsets(self):
        """Test conversions with offsets."""
        assert convert(new_unit("celsius", 100), "fahrenheit").value == 212
        assert convert(new_unit("fahrenheit", 32), "celsius").value == 0
        assert convert(new_unit("celsius", 0), "kelvin").value == Fraction("273.15")

    def test_offsets_ignored_in_compounds(self):
        """Test that a temperature inside a compound converts as a difference."""
        assert convert(new_unit("kelvin_per_second", 5), "celsius_per_second").value == 5
        assert convert(new_unit("fahrenheit_per_second", 9), "kelvin_per_second").value == 5
        assert convert(new_unit("celsius_per_second", 2), "fahrenheit_per_hour").value == 12960

    def test_compound(self):
        """Test converting compound per units."""
        assert convert(new_unit("kilometer_per_hour", 36), "meter_per_second").value == 10

    def test_inverse_conversion(self):
        """Test converting between reciprocal units."""
        result = convert(new_unit("mile_per_gallon", 30), "liter_per_100_kilometer")
        assert float(result.value) == pytest.approx(7.84049, rel=1e-5)

    def test_inverse_of_zero(self):
        """Test that a zero value cannot be inverted."""
        with pytest.raises(NotInvertibleError):
            convert(new_unit("mile_per_gallon", 0), "liter_per_100_kilometer")

    def test_incompatible(self):
        """Test that converting between unrelated units raises."""
        with pytest.raises(IncompatibleUnitsError, match="'meter' and 'second'"):
            convert(new_unit("meter", 1), "second")

    def test_not_convertible(self):
        """Test that beaufort never converts."""
        with pytest.raises(UnitNotConvertibleError, match="beaufort"):
            convert(new_unit("beaufort", 3), "meter_per_second")

    def test_same_unit(self):
        """Test that converting into the same unit keeps the value."""
        assert convert(new_unit("beaufort", 3), "beaufort").value == 3

    def test_usage_and_options_carry_over(self):
        """Test that usage and format options survive conversion."""
        unit = new_unit("centimeter", 180, usage="person_height", format_options={"fractional_digits": 1})
        result = convert(unit, "inch")
        assert result.usage == "person_height"
        assert result.format_options == {"fractional_digits": 1}

    def test_round_trip_is_exact(self):
        """Test that chained conversions do not drift."""
        unit = new_unit("meter", 1)
        for target in ("foot", "inch", "yard", "mile", "meter"):
            unit = convert(unit, target)
        assert unit.value == 1

    def test_convert_to_base_unit(self):
        """Test expressing a unit in its base unit."""
        result = convert_to_base_unit(new_unit("kilometer", 2))
        assert result.name == "meter"
        assert result.value == 2000


class TestUnitQueries:
    """Test cases for unit query helpers."""

    def test_base_unit(self):
        """Test base unit lookup by name or unit."""
        assert base_unit("newton") == "kilogram_meter_per_square_second"
        assert base_unit(new_unit("kilometer_per_hour")) == "meter_per_second"

    def test_compatible(self):
        """Test compatibility by name."""
        assert compatible("foot", "meter")
        assert compatible("mile_per_gallon", "liter_per_100_kilometer")
        assert not compatible("foot", "second")

    def test_unit_category(self):
        """Test category lookup."""
        assert unit_category("kilometer_per_hour") == "speed"

    def test_known(self):
        """Test the listings of units and categories."""
        assert "meter" in known_units()
        assert "length" in known_unit_categories()
        assert list(known_unit_categories()) == sorted(known_unit_categories())
