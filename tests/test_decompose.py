"""Tests for decomposing units into sequences of smaller units."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from unitbridge.decompose import decompose
from unitbridge.unit import new_unit
from unitkernel.errors import IncompatibleUnitsError


class TestDecompose:
    """Test cases for decompose."""

    def test_feet_and_inches(self):
        """Test the classic feet and inches breakdown."""
        parts = decompose(new_unit("foot", 10.3), ["foot", "inch"])
        assert [(part.name, part.value) for part in parts] == [("foot", 10), ("inch", Fraction(18, 5))]

    def test_from_metric(self, person_height):
        """Test breaking a metric height into feet and inches."""
        parts = decompose(person_height, ["foot", "inch"])
        assert [part.name for part in parts] == ["foot", "inch"]
        assert parts[0].value == 5
        assert parts[1].value == Fraction(1380, 127)

    def test_no_targets(self, one_mile):
        """Test that no targets returns the unit itself."""
        assert decompose(one_mile, []) == [one_mile]

    def test_zero_parts_dropped(self):
        """Test that parts with a zero value are left out."""
        parts = decompose(new_unit("inch", 7), ["foot", "inch"])
        assert [(part.name, part.value) for part in parts] == [("inch", 7)]

        assert decompose(new_unit("foot", 2), ["foot", "inch"])[-1].name == "foot"
        assert decompose(new_unit("foot", 0), ["foot", "inch"]) == []

    def test_three_levels(self):
        """Test decomposing into three units."""
        parts = decompose(new_unit("second", 3725), ["hour", "minute", "second"])
        assert [(part.name, part.value) for part in parts] == [
            ("hour", 1),
            ("minute", 2),
            ("second", 5),
        ]

    def test_decimal(self):
        """Test that Decimal values keep their type."""
        parts = decompose(new_unit("foot", Decimal("1.5")), ["foot", "inch"])
        assert parts[0].value == Decimal("1")
        assert parts[1].value == Decimal("6.0")
        assert isinstance(parts[1].value, Decimal)

    def test_format_options_on_last_part(self):
        """Test that format options land on the last unit only."""
        parts = decompose(new_unit("foot", 10.3), ["foot", "inch"], format_options={"fractional_digits": 0})
        assert parts[0].format_options == {}
        assert parts[1].format_options == {"fractional_digits": 0}

    def test_incompatible_target(self):
        """Test that an incompatible target raises."""
        with pytest.raises(IncompatibleUnitsError):
            decompose(new_unit("foot", 1), ["second"])
