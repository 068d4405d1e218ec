"""Exact conversion between parsed units.

Values travel through the common base unit:
``base = value * factor + offset`` on the way in and
``value = (base - offset) / factor`` on the way out. A "per" unit
converts as the quotient of its numerator and denominator conversions.
Offsets only apply to a unit made of a single token: inside a compound
such as ``celsius_per_second`` a temperature is a difference, so only
its factor is used. All intermediate arithmetic is on Fractions.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Optional

import structlog

from .base_unit import canonical_base_unit, inverted_base_unit
from .errors import IncompatibleUnitsError, NotInvertibleError, UnitNotConvertibleError
from .numeric import Number, coerce, to_fraction
from .parsed import ParsedUnit, PerUnit, UnitToken, all_tokens, canonical_unit_name

logger = structlog.get_logger(__name__)


def _tokens_to_base(value: Fraction, tokens: tuple[UnitToken, ...], affine: bool = False) -> Fraction:
    for token in tokens:
        conversion = token.conversion
        value = value * conversion.factor  # type: ignore[operator]
        if affine:
            value += conversion.offset
    return value


def _tokens_from_base(value: Fraction, tokens: tuple[UnitToken, ...], affine: bool = False) -> Fraction:
    for token in reversed(tokens):
        conversion = token.conversion
        if affine:
            value -= conversion.offset
        value = value / conversion.factor  # type: ignore[operator]
    return value


def is_affine(parsed: ParsedUnit) -> bool:
    """Whether offsets apply: only a plain unit of exactly one token."""
    return not isinstance(parsed, PerUnit) and len(parsed) == 1 and parsed[0].power == 1


def to_base(value: Fraction, parsed: ParsedUnit) -> Fraction:
    """Express ``value`` of ``parsed`` in the base unit."""
    if isinstance(parsed, PerUnit):
        return _tokens_to_base(value, parsed.numerator) / _tokens_to_base(Fraction(1), parsed.denominator)
    return _tokens_to_base(value, parsed, is_affine(parsed))


def from_base(value: Fraction, parsed: ParsedUnit) -> Fraction:
    """Express a base unit ``value`` in ``parsed``."""
    if isinstance(parsed, PerUnit):
        return _tokens_from_base(value, parsed.numerator) / _tokens_from_base(Fraction(1), parsed.denominator)
    return _tokens_from_base(value, parsed, is_affine(parsed))


def check_convertible(parsed: ParsedUnit, unit_name: Optional[str] = None) -> None:
    """Raise if any token of ``parsed`` has no conversion factor.

    Raises:
        UnitNotConvertibleError: Naming the unit that cannot be converted
    """
    for token in all_tokens(parsed):
        if not token.conversion.convertible:
            raise UnitNotConvertibleError(
                f"No conversion is possible for {unit_name or token.name!r}"
            )


def convert_value(
    value: Number,
    from_unit: ParsedUnit,
    to_unit: ParsedUnit,
    from_name: Optional[str] = None,
    to_name: Optional[str] = None,
) -> Number:
    """Convert a number between two parsed units.

    Args:
        value: Number in ``from_unit``
        from_unit: Parsed source unit
        to_unit: Parsed target unit
        from_name: Source name for error messages
        to_name: Target name for error messages

    Returns:
        Converted value, typed after the input (see :func:`numeric.coerce`)

    Raises:
        UnitNotConvertibleError: If either unit has no conversion factor
        IncompatibleUnitsError: If the units share no base unit, even inverted
        NotInvertibleError: If an inverted conversion meets a zero value

    Examples:
        >>> from unitkernel.parser import parse_unit
        >>> convert_value(1, parse_unit("mile"), parse_unit("foot"))
        5280
        >>> convert_value(0, parse_unit("celsius"), parse_unit("fahrenheit"))
        32
    """
    if from_unit == to_unit:
        return value

    from_name = from_name or canonical_unit_name(from_unit)
    to_name = to_name or canonical_unit_name(to_unit)
    check_convertible(from_unit, from_name)
    check_convertible(to_unit, to_name)

    target_base = canonical_base_unit(to_unit)
    exact = to_fraction(value)

    if canonical_base_unit(from_unit) == target_base:
        result = from_base(to_base(exact, from_unit), to_unit)
    elif inverted_base_unit(from_unit) == target_base:
        base_value = to_base(exact, from_unit)
        if base_value == 0:
            raise NotInvertibleError(
                f"Cannot invert a zero value of {from_name!r} to convert into {to_name!r}"
            )
        logger.debug("Converting through inverse", from_unit=from_name, to_unit=to_name)
        result = from_base(1 / base_value, to_unit)
    else:
        raise IncompatibleUnitsError(
            from_name,
            to_name,
            "Operations can only be performed between units of the same type. "
            f"Received {from_name!r} and {to_name!r}",
        )

    return coerce(result, value)


def convert_to_base_value(value: Number, parsed: ParsedUnit, unit_name: Optional[str] = None) -> Number:
    """Convert a value into its canonical base unit, typed after the input."""
    check_convertible(parsed, unit_name)
    return coerce(to_base(to_fraction(value), parsed), value)
