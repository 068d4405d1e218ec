"""Localized text for units."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple, Union

from unit_grammar.features import ResolvedGrammar
from unit_grammar.nodes import DEFAULT_CASE

from .config import get_settings
from .registry import UnitRegistry, get_registry
from .unit import Unit, UnitLike, parsed_of


def _defaults(locale: Optional[str], style: Optional[str]) -> Tuple[str, str]:
    settings = get_settings()
    return locale or settings.default_locale, style or settings.default_style


def to_string(
    unit: Union[Unit, Sequence[Unit]],
    locale: Optional[str] = None,
    style: Optional[str] = None,
    grammatical_case: str = DEFAULT_CASE,
    options: Optional[Dict[str, Any]] = None,
    registry: Optional[UnitRegistry] = None,
) -> str:
    """Format a unit, or a list of units, as localized text.

    A list, such as the result of :func:`localize`, is joined with the
    locale's unit list pattern.

    Args:
        unit: Unit or list of units
        locale: Locale such as ``en``, ``de`` or ``fr-CA``; defaults to settings
        style: ``long``, ``short`` or ``narrow``; defaults to settings
        grammatical_case: Case to inflect into, for locales with cases
        options: Number options (``round_nearest``, ``fractional_digits``,
            ``rounding_mode``, ``format``); override the unit's own options

    Returns:
        Formatted text

    Raises:
        UnknownLocaleError: If no unit data serves the locale
        UnknownStyleError: If the style is not known
        UnknownGrammaticalCaseError: If the case is not known
        NoPatternError: If a unit has no pattern after all fallbacks

    Examples:
        >>> to_string(new_unit("kilometer_per_hour", 100))
        '100 kilometers per hour'
        >>> to_string(new_unit("meter", 3), locale="de", grammatical_case="dative")
        '3 Metern'
    """
    locale, style = _defaults(locale, style)
    formatter = (registry or get_registry()).formatter

    if not isinstance(unit, Unit):
        parts = [
            to_string(part, locale, style, grammatical_case, options, registry) for part in unit
        ]
        return formatter.join(parts, locale, style)

    merged = {**unit.format_options, **(options or {})}
    return formatter.format(
        unit.value,
        unit.base_conversion,
        unit.name,
        locale=locale,
        style=style,
        grammatical_case=grammatical_case,
        options=merged,
    )


def display_name(
    unit: UnitLike,
    locale: Optional[str] = None,
    style: Optional[str] = None,
    registry: Optional[UnitRegistry] = None,
) -> str:
    """Localized name of a unit, such as ``"kilometers per hour"``."""
    locale, style = _defaults(locale, style)
    registry = registry or get_registry()
    name, parsed = parsed_of(unit, registry)
    return registry.formatter.display_name(parsed, name, locale, style)


def unit_pattern(
    unit: UnitLike,
    locale: Optional[str] = None,
    style: Optional[str] = None,
    grammatical_case: str = DEFAULT_CASE,
    plural: str = "other",
    registry: Optional[UnitRegistry] = None,
) -> str:
    """Unsubstituted pattern of a unit, such as ``"{0} kilometers per hour"``."""
    locale, style = _defaults(locale, style)
    registry = registry or get_registry()
    name, parsed = parsed_of(unit, registry)
    return registry.formatter.pattern(parsed, name, locale, style, grammatical_case, plural)


def unit_grammar(
    unit: Unit,
    locale: Optional[str] = None,
    style: Optional[str] = None,
    grammatical_case: str = DEFAULT_CASE,
    registry: Optional[UnitRegistry] = None,
) -> Union[ResolvedGrammar, Tuple[ResolvedGrammar, ResolvedGrammar]]:
    """Case and plural each part of a unit takes when formatted.

    Returns:
        A list of ``(unit_name, Inflection)`` pairs, or a
        (numerator, denominator) pair of such lists for "per" units
    """
    locale, style = _defaults(locale, style)
    formatter = (registry or get_registry()).formatter
    return formatter.grammar(
        unit.base_conversion, unit.name, locale, style, unit.value, grammatical_case
    )


def grammar_as_data(grammar: Union[ResolvedGrammar, Tuple[ResolvedGrammar, ResolvedGrammar]]) -> Any:
    """Plain lists and tuples of a resolved grammar, for JSON output."""
    if isinstance(grammar, tuple):
        return [grammar_as_data(side) for side in grammar]
    return [
        [name, inflection.grammatical_case, inflection.plural] for name, inflection in grammar
    ]

