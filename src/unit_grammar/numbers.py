"""Number, plural and currency formatting backed by Babel.

Values reach Babel as Decimals: Fractions are expanded to a fixed
precision first, since Babel does not accept them directly.
"""

from __future__ import annotations

from decimal import Decimal, localcontext
from fractions import Fraction
from functools import lru_cache
from typing import Any, Dict, Optional, Sequence

from babel import Locale, UnknownLocaleError as BabelUnknownLocaleError
from babel.core import get_global
from babel.lists import format_list as babel_format_list
from babel.numbers import format_currency, format_decimal, get_currency_name

from unitkernel.errors import UnknownLocaleError
from unitkernel.numeric import Number, round_to_increment, round_value, to_decimal

# Digits kept when expanding a Fraction such as 1/3
FRACTION_PRECISION = 28

_EXACT_PLURALS = {0: "zero", 1: "one", 2: "two"}
_LIST_STYLES = {"long": "unit", "short": "unit-short", "narrow": "unit-narrow"}


@lru_cache(maxsize=64)
def babel_locale(locale: str) -> Locale:
    """Parse a locale identifier such as ``en``, ``en-AU`` or ``de_CH``.

    Raises:
        UnknownLocaleError: If Babel has no data for the locale
    """
    try:
        return Locale.parse(str(locale).replace("-", "_"))
    except (BabelUnknownLocaleError, ValueError) as e:
        raise UnknownLocaleError(f"The locale {locale!r} is not known") from e


def territory_for_locale(locale: str) -> str:
    """Territory of a locale, filling it in from likely subtags when absent.

    Examples:
        >>> territory_for_locale("en-AU")
        'AU'
        >>> territory_for_locale("de")
        'DE'
    """
    parsed = babel_locale(locale)
    if parsed.territory:
        return parsed.territory

    likely = get_global("likely_subtags").get(parsed.language)
    if likely:
        territory = Locale.parse(likely).territory
        if territory:
            return territory
    return "001"


def as_decimal(value: Number) -> Decimal:
    if isinstance(value, Fraction):
        with localcontext() as context:
            context.prec = FRACTION_PRECISION
            return to_decimal(value)
    return to_decimal(value)


def plural_category(value: Number, locale: str) -> str:
    """CLDR plural category (``one``, ``few``, ``other`` ...) of a value."""
    return babel_locale(locale).plural_form(as_decimal(value))


def exact_plural(value: Number) -> Optional[str]:
    """``zero``, ``one`` or ``two`` when the value is exactly 0, 1 or 2."""
    if isinstance(value, (int, Fraction, Decimal, float)) and value == int(value):
        return _EXACT_PLURALS.get(int(value))
    return None


def apply_number_options(value: Number, options: Optional[Dict[str, Any]] = None) -> Number:
    """Apply the rounding options of a preference skeleton or caller.

    Recognised options are ``round_nearest`` (an increment such as 10 or
    50), ``fractional_digits`` and ``rounding_mode``.
    """
    if not options:
        return value
    mode = options.get("rounding_mode", "half_even")
    if options.get("round_nearest"):
        value = round_to_increment(value, options["round_nearest"], mode)
    if options.get("fractional_digits") is not None:
        value = round_value(value, int(options["fractional_digits"]), mode)
    return value


def format_number(value: Number, locale: str, options: Optional[Dict[str, Any]] = None) -> str:
    """Format a number for a locale.

    Args:
        value: Number to format
        locale: Locale identifier
        options: Rounding options (see :func:`apply_number_options`) and an
            optional Babel ``format`` pattern such as ``"#,##0.00"``

    Examples:
        >>> format_number(1234.5, "en")
        '1,234.5'
        >>> format_number(1234.5, "de")
        '1.234,5'
    """
    options = options or {}
    value = apply_number_options(value, options)
    return format_decimal(as_decimal(value), format=options.get("format"), locale=babel_locale(locale))


def format_currency_amount(value: Number, currency: str, locale: str) -> str:
    """Format a currency amount, e.g. ``$2.00`` in ``en``."""
    return format_currency(as_decimal(value), currency.upper(), locale=babel_locale(locale))


def currency_name(currency: str, locale: str, count: Optional[Number] = None) -> str:
    """Localized currency name, singular or plural after ``count``."""
    return get_currency_name(currency.upper(), count=count, locale=babel_locale(locale))


def format_list(items: Sequence[str], locale: str, style: str = "long") -> str:
    """Join formatted units the way the locale lists units.

    Examples:
        >>> format_list(["5 feet", "11 inches"], "en")
        '5 feet, 11 inches'
    """
    return babel_format_list(list(items), style=_LIST_STYLES.get(style, "unit"), locale=babel_locale(locale))
