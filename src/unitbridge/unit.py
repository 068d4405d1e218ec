"""The unit value type and the operations that create and convert it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog

from unitkernel import base_unit as resolver
from unitkernel.conversion import convert_value
from unitkernel.definitions import known_unit_categories as _known_unit_categories
from unitkernel.errors import UnknownUsageError
from unitkernel.numeric import Number, validate_number
from unitkernel.parsed import ParsedUnit, canonical_unit_name

from .registry import UnitRegistry, get_registry

logger = structlog.get_logger(__name__)

DEFAULT_USAGE = "default"


@dataclass(frozen=True)
class Unit:
    """A quantity: a number in a unit.

    ``name`` is the canonical unit name, ``base_conversion`` its parsed
    form. Operations never change a unit; they return a new one.
    """

    name: str
    value: Number
    base_conversion: ParsedUnit = field(repr=False, compare=False)
    usage: str = DEFAULT_USAGE
    format_options: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __str__(self) -> str:
        from .formatting import to_string

        return to_string(self)

    def with_value(self, value: Number) -> "Unit":
        return replace(self, value=validate_number(value))


UnitLike = Union[Unit, str]


def _registry(registry: Optional[UnitRegistry]) -> UnitRegistry:
    return registry or get_registry()


def parse(name: str, registry: Optional[UnitRegistry] = None) -> ParsedUnit:
    """Parse a unit name with the shared registry."""
    return _registry(registry).parser.parse(name)


def parsed_of(unit: UnitLike, registry: Optional[UnitRegistry] = None) -> Tuple[str, ParsedUnit]:
    """Canonical name and parsed form of a unit or unit name."""
    if isinstance(unit, Unit):
        return unit.name, unit.base_conversion
    parsed = parse(unit, registry)
    return canonical_unit_name(parsed), parsed


def validate_usage(category: str, usage: str) -> str:
    """Check that ``usage`` has preferences for ``category``.

    Raises:
        UnknownUsageError: If the category defines no such usage
    """
    from .preference import known_usages

    if usage == DEFAULT_USAGE or usage in known_usages(category):
        return usage
    raise UnknownUsageError(category, usage)


def new_unit(
    unit: str,
    value: Number = 1,
    usage: str = DEFAULT_USAGE,
    format_options: Optional[Dict[str, Any]] = None,
    registry: Optional[UnitRegistry] = None,
) -> Unit:
    """Create a unit value.

    Args:
        unit: Unit name such as ``"meter"``, ``"kilometer per hour"`` or
            ``"curr_usd_per_gallon"``
        value: int, float, Decimal or Fraction
        usage: Preference usage such as ``"person_height"`` or ``"road"``
        format_options: Number options used when the unit is formatted
        registry: Registry to parse with, defaults to the shared one

    Returns:
        New Unit

    Raises:
        InvalidUnitValueError: If the value is not a supported number
        UnknownUnitError: If the name does not parse
        UnknownUsageError: If the usage is not defined for the unit's category

    Examples:
        >>> new_unit("kilometre", 3).name
        'kilometer'
        >>> new_unit("meter_kilogram").name
        'kilogram_meter'
    """
    validate_number(value)
    name, parsed = parsed_of(unit, registry)
    usage = (usage or DEFAULT_USAGE).replace("-", "_")
    if usage != DEFAULT_USAGE:
        validate_usage(resolver.unit_category(parsed, name), usage)

    return Unit(
        name=name,
        value=value,
        base_conversion=parsed,
        usage=usage,
        format_options=dict(format_options or {}),
    )


def convert(unit: Unit, to_unit: UnitLike, registry: Optional[UnitRegistry] = None) -> Unit:
    """Convert a unit into another compatible unit.

    Usage and format options carry over to the result.

    Raises:
        UnknownUnitError: If the target does not parse
        IncompatibleUnitsError: If the units share no base unit, even inverted
        UnitNotConvertibleError: If either unit has no conversion factor

    Examples:
        >>> convert(new_unit("mile", 1), "foot").value
        5280
        >>> convert(new_unit("celsius", 0), "fahrenheit").value
        32
    """
    target_name, target = parsed_of(to_unit, registry)
    value = convert_value(unit.value, unit.base_conversion, target, unit.name, target_name)
    logger.debug("Converted unit", from_unit=unit.name, to_unit=target_name)
    return replace(unit, name=target_name, value=value, base_conversion=target)


def base_unit(unit: UnitLike, registry: Optional[UnitRegistry] = None) -> str:
    """Canonical base-unit identity, such as ``"kilogram_meter_per_square_second"``."""
    _, parsed = parsed_of(unit, registry)
    return resolver.canonical_base_unit(parsed)


def convert_to_base_unit(unit: Unit, registry: Optional[UnitRegistry] = None) -> Unit:
    """Express a unit in its canonical base unit.

    Examples:
        >>> convert_to_base_unit(new_unit("kilometer", 2)).name
        'meter'
    """
    return convert(unit, base_unit(unit), registry)


def compatible(unit_1: UnitLike, unit_2: UnitLike, registry: Optional[UnitRegistry] = None) -> bool:
    """Whether two units convert into each other, directly or inverted."""
    _, parsed_1 = parsed_of(unit_1, registry)
    _, parsed_2 = parsed_of(unit_2, registry)
    return resolver.compatible(parsed_1, parsed_2)


def unit_category(unit: UnitLike, registry: Optional[UnitRegistry] = None) -> str:
    """Category of a unit, such as ``length`` or ``consumption``.

    Raises:
        UnknownUnitCategoryError: If the unit's base unit has no category
    """
    name, parsed = parsed_of(unit, registry)
    return resolver.unit_category(parsed, name)


def known_units(registry: Optional[UnitRegistry] = None) -> List[str]:
    return _registry(registry).dictionary.names()


def known_unit_categories() -> Tuple[str, ...]:
    return _known_unit_categories()
