"""Tests for unit name parsing and the token dictionary."""

from __future__ import annotations

from fractions import Fraction

import pytest

from unitkernel.dictionary import TokenDictionary
from unitkernel.errors import UnknownUnitError, UnsupportedPowerError
from unitkernel.parsed import PerUnit, canonical_unit_name, denominator_of, numerator_of
from unitkernel.parser import UnitParser, normalize_unit_name, parse_unit


def _names(tokens):
    return [token.name for token in tokens]


class TestNormalizeUnitName:
    """Test cases for unit name normalization."""

    def test_separators_collapse(self):
        """Test that spaces and hyphens become underscores."""
        assert normalize_unit_name("Meter per Second") == "meter_per_second"
        assert normalize_unit_name("liter-per-100-kilometer") == "liter_per_100_kilometer"
        assert normalize_unit_name("  foot  ") == "foot"


class TestUnitParser:
    """Test cases for the compound unit parser."""

    def test_simple_unit(self):
        """Test parsing a single atomic unit."""
        parsed = parse_unit("meter")
        assert _names(parsed) == ["meter"]
        assert parsed[0].conversion.factor == Fraction(1)

    def test_per_unit(self):
        """Test that _per_ splits numerator and denominator."""
        parsed = parse_unit("meter_per_second")
        assert isinstance(parsed, PerUnit)
        assert _names(numerator_of(parsed)) == ["meter"]
        assert _names(denominator_of(parsed)) == ["second"]

    def test_canonical_order(self):
        """Test that tokens sort by base unit rank."""
        parsed = parse_unit("meter_kilogram")
        assert canonical_unit_name(parsed) == "kilogram_meter"

    def test_repeated_unit_becomes_power(self):
        """Test that a repeated unit folds into a power."""
        assert canonical_unit_name(parse_unit("meter_meter")) == "square_meter"
        assert canonical_unit_name(parse_unit("square_meter")) == "square_meter"

        cubic = parse_unit("cubic_foot")
        assert cubic[0].power == 3
        assert cubic[0].conversion.factor == Fraction("0.3048") ** 3

    def test_quartic_power_rejected(self):
        """Test that powers above cubic raise UnsupportedPowerError."""
        with pytest.raises(UnsupportedPowerError, match="greater than cubic"):
            parse_unit("meter_meter_meter_meter")

        with pytest.raises(UnsupportedPowerError):
            parse_unit("cubic_meter_meter")

    def test_si_prefix(self):
        """Test that SI prefixes scale units not in the dictionary."""
        token = parse_unit("megameter")[0]
        assert token.prefix == "mega"
        assert token.unit == "megameter"
        assert token.conversion.factor == Fraction(10**6)

    def test_newer_si_prefixes(self):
        """Test the ronna, quetta, ronto and quecto prefixes."""
        assert parse_unit("quettagram")[0].conversion.factor == Fraction(10**30, 1000)
        assert parse_unit("rontometer")[0].conversion.factor == Fraction(1, 10**27)

    def test_binary_prefix(self):
        """Test binary prefixes such as kibi."""
        token = parse_unit("kibibyte")[0]
        assert token.prefix == "kibi"
        assert token.conversion.factor == Fraction(8 * 1024)

    def test_integer_multiplier(self):
        """Test integer-prefixed units such as calorie_per_100_gram."""
        parsed = parse_unit("calorie_per_100_gram")
        token = denominator_of(parsed)[0]
        assert token.multiplier == 100
        assert token.name == "100_gram"
        assert token.conversion.factor == Fraction(100, 1000)
        assert canonical_unit_name(parsed) == "calorie_per_100_gram"

    def test_currency(self):
        """Test that curr_<code> embeds a currency."""
        parsed = parse_unit("curr_usd_per_gallon")
        token = numerator_of(parsed)[0]
        assert token.currency == "USD"
        assert token.name == "curr_usd"

    def test_second_per_joins_denominator(self):
        """Test that a second _per_ multiplies into the denominator."""
        parsed = parse_unit("meter_per_second_per_second")
        assert canonical_unit_name(parsed) == "meter_per_square_second"

    def test_whole_name_alias(self):
        """Test aliases that apply to a whole unit name."""
        assert canonical_unit_name(parse_unit("part_per_million")) == "permillion"
        assert canonical_unit_name(parse_unit("meter_per_second_squared")) == "meter_per_square_second"

    def test_token_alias(self):
        """Test aliases that apply to single tokens."""
        assert canonical_unit_name(parse_unit("kilometre")) == "kilometer"
        assert canonical_unit_name(parse_unit("litre_per_100_kilometre")) == "liter_per_100_kilometer"

    def test_unknown_unit(self):
        """Test that unmatched text raises UnknownUnitError naming it."""
        with pytest.raises(UnknownUnitError, match="blergh"):
            parse_unit("blergh")

        with pytest.raises(UnknownUnitError, match="wibble"):
            parse_unit("meter_per_wibble")

    def test_empty_name(self):
        """Test that an empty name is an unknown unit."""
        with pytest.raises(UnknownUnitError):
            parse_unit("")

    def test_parse_cache(self):
        """Test that repeated parses are served from the cache."""
        parser = UnitParser(TokenDictionary.default(), cache_size=16)
        first = parser.parse("kilometer_per_hour")
        second = parser.parse("Kilometer per Hour")

        assert first is second
        info = parser.cache_info()
        assert info.hits == 1
        assert info.misses == 1


class TestTokenDictionary:
    """Test cases for the token dictionary."""

    def test_default_contents(self):
        """Test that the built-in dictionary knows common units."""
        dictionary = TokenDictionary.default()
        assert "meter" in dictionary
        assert "quarter_year" not in dictionary
        assert len(dictionary) == len(dictionary.names())

    def test_longest_match(self):
        """Test that multi-word units win over their first word."""
        dictionary = TokenDictionary.default()
        assert dictionary.match(["nautical", "mile"], 0) == ("nautical_mile", 2)
        assert dictionary.match(["mile"], 0) == ("mile", 1)

    def test_prefix_never_stacks(self):
        """Test that a prefix is not applied to an already prefixed unit."""
        dictionary = TokenDictionary.default()
        assert dictionary.match_prefixed(["kilokilometer"], 0) is None

    def test_currency_codes(self):
        """Test ISO currency detection."""
        dictionary = TokenDictionary.default()
        assert dictionary.is_currency("usd")
        assert dictionary.is_currency("EUR")
        assert not dictionary.is_currency("meter")
