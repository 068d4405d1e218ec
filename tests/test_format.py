"""Tests for localized unit formatting."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from unit_grammar.engine import UnitFormatter
from unit_grammar.locale_data import DEFAULT_STORE, locale_key
from unit_grammar.nodes import Inflection
from unit_grammar.numbers import format_list, format_number, territory_for_locale
from unitbridge.formatting import display_name, grammar_as_data, to_string, unit_grammar, unit_pattern
from unitbridge.unit import convert, new_unit
from unitkernel.definitions import UNIT_DEFINITIONS
from unitkernel.errors import (
    NoPatternError,
    UnknownGrammaticalCaseError,
    UnknownLocaleError,
    UnknownStyleError,
)
from unitkernel.parser import parse_unit

BUNDLED_LOCALES = ("en", "de", "fr")

# "integer" patterns apply to non-negative integers only
INTEGER_METER = {
    "en": {"long": {"meter": {
        "one": "one meter",
        "other": "{0} meters",
        "integer": {"other": "{0} whole meters"},
    }}}
}

# German meter with a dative plural but no singular forms
SPARSE_METER = {
    "de": {"long": {"meter": {
        "gender": "masculine",
        "other": "{0} Meter",
        "cases": {"dative": {"other": "{0} Metern"}},
    }}}
}


def format_with(overlays, value, unit="meter", locale="en", **kwargs):
    """Format with the bundled data plus unit entry overlays."""
    formatter = UnitFormatter(DEFAULT_STORE.with_overlays(overlays))
    return formatter.format(value, parse_unit(unit), unit, locale=locale, **kwargs)


class TestToStringEnglish:
    """Test cases for English formatting."""

    def test_plural_forms(self):
        """Test singular and plural patterns."""
        assert to_string(new_unit("meter", 1)) == "1 meter"
        assert to_string(new_unit("meter", 3)) == "3 meters"

    def test_grouping(self, one_mile):
        """Test that numbers use the locale's grouping."""
        assert to_string(convert(one_mile, "foot")) == "5,280 feet"

    def test_whole_name(self):
        """Test a compound the locale translates as a whole."""
        assert to_string(new_unit("kilometer_per_hour", 100)) == "100 kilometers per hour"

    def test_per_unit_pattern(self):
        """Test a per compound using the denominator's per pattern."""
        assert to_string(new_unit("meter_per_hour", 5)) == "5 meters per hour"

    def test_times(self):
        """Test a times compound: the left unit is singular."""
        assert to_string(new_unit("kilogram_meter", 5)) == "5 kilogram-meters"

    def test_power(self):
        """Test a power the locale has no whole name for."""
        assert to_string(new_unit("square_furlong", 5)) == "5 square furlongs"

    def test_prefix(self):
        """Test an SI prefix the locale has no whole name for."""
        assert to_string(new_unit("megameter", 5)) == "5 megameters"

    def test_integer_prefixed(self):
        """Test a unit with an integer multiplier."""
        assert to_string(new_unit("calorie_per_100_gram", 2)) == "2 calories per 100 grams"

    def test_styles(self):
        """Test short and narrow styles."""
        assert to_string(new_unit("foot", 3), style="short") == "3 ft"
        assert to_string(new_unit("foot", 3), style="narrow") == "3′"

    def test_fraction_value(self):
        """Test that rational values are expanded for display."""
        assert to_string(new_unit("inch", Fraction(18, 5))) == "3.6 inches"

    def test_decimal_value(self):
        """Test Decimal values."""
        assert to_string(new_unit("meter", Decimal("2.50"))) == "2.5 meters"

    def test_number_options(self):
        """Test rounding options."""
        unit = new_unit("meter", Fraction(1, 3))
        assert to_string(unit, options={"fractional_digits": 2}) == "0.33 meters"
        assert to_string(unit, options={"format": "#,##0.0"}) == "0.3 meters"

    def test_unit_format_options(self):
        """Test that a unit's own format options apply."""
        unit = new_unit("foot", 328, format_options={"round_nearest": 50})
        assert to_string(unit) == "350 feet"


class TestCurrency:
    """Test cases for currency units."""

    def test_amount(self):
        """Test a bare currency amount."""
        assert to_string(new_unit("curr_usd", 2)) == "$2.00"

    def test_currency_per_unit(self):
        """Test a currency numerator."""
        assert to_string(new_unit("curr_usd_per_gallon", 2)) == "$2.00 per gallon"

    def test_currency_denominator(self):
        """Test a currency denominator uses the currency's name."""
        assert to_string(new_unit("gallon_per_curr_usd", 2)) == "2 gallons per US dollar"


class TestOtherLocales:
    """Test cases for German and French formatting."""

    def test_german_cases(self):
        """Test German grammatical cases."""
        assert to_string(new_unit("meter", 3), locale="de") == "3 Meter"
        assert to_string(new_unit("meter", 3), locale="de", grammatical_case="dative") == "3 Metern"

    def test_german_per(self):
        """Test that the numerator takes the requested case."""
        unit = new_unit("meter_per_hour", 5)
        assert to_string(unit, locale="de", grammatical_case="dative") == "5 Metern pro Stunde"

    def test_german_number_format(self):
        """Test German decimal and grouping separators."""
        assert to_string(new_unit("meter", 1234.5), locale="de") == "1.234,5 Meter"

    def test_german_prefix(self):
        """Test a German prefix joined into one word."""
        assert to_string(new_unit("megameter", 5), locale="de") == "5 Megameter"

    def test_french(self):
        """Test French patterns."""
        assert to_string(new_unit("meter", 3), locale="fr") == "3 mètres"
        assert to_string(new_unit("meter_per_hour", 5), locale="fr") == "5 mètres par heure"

    def test_regional_locale_falls_back(self):
        """Test that a regional locale uses its language data."""
        assert to_string(new_unit("meter", 3), locale="de-CH") == "3 Meter"

    def test_default_locale_setting(self, monkeypatch):
        """Test that the default locale comes from settings."""
        from unitbridge.config import get_settings

        monkeypatch.setenv("UNITBRIDGE_DEFAULT_LOCALE", "de")
        get_settings.cache_clear()
        assert to_string(new_unit("meter", 3)) == "3 Meter"


class TestFormattingErrors:
    """Test cases for formatting failures."""

    def test_unknown_locale(self):
        """Test a locale without bundled data."""
        with pytest.raises(UnknownLocaleError):
            to_string(new_unit("meter", 3), locale="ja")

    def test_unknown_style(self):
        """Test an unknown style."""
        with pytest.raises(UnknownStyleError, match="wide"):
            to_string(new_unit("meter", 3), style="wide")

    def test_unknown_case(self):
        """Test an unknown grammatical case."""
        with pytest.raises(UnknownGrammaticalCaseError, match="bogus"):
            to_string(new_unit("meter", 3), grammatical_case="bogus")

    def test_no_pattern(self):
        """Test a unit whose entry has no pattern after every fallback."""
        overlays = {"de": {"long": {"meter": {"gender": "masculine", "one": "{0} Meter"}}}}
        with pytest.raises(NoPatternError, match="meter") as info:
            format_with(overlays, 3, locale="de")
        assert info.value.gender == "masculine"


class TestPatternSelection:
    """Test cases for pattern lookup and its fallbacks."""

    def test_integer_pattern(self):
        """Test that a non-negative integer prefers the integer pattern."""
        assert format_with(INTEGER_METER, 3) == "3 whole meters"
        assert format_with(INTEGER_METER, 0) == "0 whole meters"

    def test_integer_pattern_needs_exact_plural(self):
        """Test that the integer table's other form never stands in for one."""
        assert format_with(INTEGER_METER, 1) == "one meter"

    def test_negative_integer_uses_main_patterns(self):
        """Test that negative integers skip the integer table."""
        assert format_with(INTEGER_METER, -3) == "-3 meters"

    def test_fraction_uses_main_patterns(self):
        """Test that non-integers skip the integer table."""
        assert format_with(INTEGER_METER, 2.5) == "2.5 meters"

    def test_placeholderless_pattern_needs_exact_value(self):
        """Test that a pattern without a number is used only for that exact value."""
        overlays = {"fr": {"long": {"meter": {"one": "un mètre", "other": "{0} mètres"}}}}
        assert format_with(overlays, 1, locale="fr") == "un mètre"
        # French 0 and 1.5 are also plural "one"
        assert format_with(overlays, 0, locale="fr") == "0 mètres"
        assert format_with(overlays, Decimal("1.5"), locale="fr") == "1,5 mètres"

    def test_requested_case_and_plural(self):
        """Test the exact case and plural."""
        assert format_with(SPARSE_METER, 3, locale="de", grammatical_case="dative") == "3 Metern"

    def test_nominative_with_plural(self):
        """Test falling back to the nominative with the requested plural."""
        assert to_string(new_unit("meter", 1), locale="de", grammatical_case="dative") == "1 Meter"

    def test_case_with_other(self):
        """Test falling back to the requested case with other."""
        assert format_with(SPARSE_METER, 1, locale="de", grammatical_case="dative") == "1 Metern"

    def test_nominative_other(self):
        """Test the last fallback, nominative other."""
        assert format_with(SPARSE_METER, 1, locale="de", grammatical_case="genitive") == "1 Meter"


class TestLocaleStore:
    """Test cases for the bundled locale tables."""

    def test_patterns(self):
        """Test the pattern table of a locale and style."""
        table = DEFAULT_STORE.patterns("de", "long")
        assert table["meter"]["dative"]["other"] == "{0} Metern"
        assert table["meter"]["nominative"]["one"] == "{0} Meter"
        assert table["per"]["nominative"]["other"] == "{0} pro {1}"

    def test_patterns_style_fallback(self):
        """Test that narrow tables include short and long entries."""
        table = DEFAULT_STORE.patterns("en", "narrow")
        assert table["fathom"]["nominative"]["other"] == "{0} fth"
        assert table["per"]["nominative"]["other"] == "{0}/{1}"
        assert "power2" in table

    def test_locale_key(self):
        """Test locale identifier normalization."""
        assert locale_key("en-gb") == "en_GB"
        assert locale_key("en_GB") == "en_GB"
        assert locale_key("de") == "de"

    def test_regional_overlay(self):
        """Test that an overlay for a regional locale applies to that locale only."""
        overlays = {"en-GB": {"long": {"meter": {"one": "{0} metre", "other": "{0} metres"}}}}
        assert format_with(overlays, 3, locale="en-GB") == "3 metres"
        assert format_with(overlays, 3, locale="en") == "3 meters"
        assert format_with(overlays, 3, locale="en-US") == "3 meters"

    def test_regional_overlay_over_language(self):
        """Test that regional entries win over the language's."""
        overlays = {
            "en": {"long": {"meter": {"one": "{0} m", "other": "{0} m"}}},
            "en_GB": {"long": {"meter": {"one": "{0} metre", "other": "{0} metres"}}},
        }
        assert format_with(overlays, 3, locale="en-GB") == "3 metres"
        assert format_with(overlays, 3, locale="en-AU") == "3 m"

    @pytest.mark.parametrize("style", ["long", "short"])
    @pytest.mark.parametrize("locale", BUNDLED_LOCALES)
    def test_every_unit_formats(self, locale, style):
        """Test that every dictionary unit can be formatted in every bundled locale."""
        for name in sorted(UNIT_DEFINITIONS):
            assert "2" in to_string(new_unit(name, 2), locale=locale, style=style), name

    @pytest.mark.parametrize("locale", BUNDLED_LOCALES)
    def test_compound_prefixes(self, locale):
        """Test that every prefix has a pattern."""
        assert "2" in to_string(new_unit("quettameter", 2), locale=locale)
        assert "2" in to_string(new_unit("yobibyte", 2), locale=locale)
        assert "2" in to_string(new_unit("newton_meter", 2), locale=locale)


class TestNames:
    """Test cases for display names and patterns."""

    def test_display_name(self):
        """Test localized unit names."""
        assert display_name("kilometer_per_hour") == "kilometers per hour"
        assert display_name("meter_per_hour") == "meters per hour"
        assert display_name(new_unit("meter"), locale="de") == "Meter"

    def test_unit_pattern(self):
        """Test unsubstituted patterns."""
        assert unit_pattern("kilometer_per_hour") == "{0} kilometers per hour"
        assert unit_pattern("meter", plural="one") == "{0} meter"


class TestGrammar:
    """Test cases for grammatical feature resolution."""

    def test_times(self):
        """Test the inflections of a times compound."""
        grammar = unit_grammar(new_unit("kilogram_meter", 5))
        assert grammar == [
            ("kilogram", Inflection("nominative", "one")),
            ("meter", Inflection("nominative", "other")),
        ]

    def test_german_per(self):
        """Test that German denominators take the accusative."""
        numerator, denominator = unit_grammar(new_unit("meter_per_hour", 5), locale="de")
        assert numerator == [("meter", Inflection("nominative", "other"))]
        assert denominator == [("hour", Inflection("accusative", "one"))]

    def test_as_data(self):
        """Test the JSON-friendly form of a grammar."""
        grammar = unit_grammar(new_unit("meter_per_hour", 5), locale="de")
        assert grammar_as_data(grammar) == [
            [["meter", "nominative", "other"]],
            [["hour", "accusative", "one"]],
        ]


class TestNumbers:
    """Test cases for Babel-backed number helpers."""

    def test_format_number(self):
        """Test locale number formatting."""
        assert format_number(1234.5, "en") == "1,234.5"
        assert format_number(1234.5, "de") == "1.234,5"

    def test_format_list(self):
        """Test unit list joining."""
        assert format_list(["5 feet", "11 inches"], "en") == "5 feet, 11 inches"

    def test_territory_for_locale(self):
        """Test territory lookup with likely subtags."""
        assert territory_for_locale("en-AU") == "AU"
        assert territory_for_locale("de") == "DE"
