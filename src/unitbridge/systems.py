"""Measurement systems of units and territories."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence, Union

from unit_grammar.locale_data import load_json
from unit_grammar.numbers import territory_for_locale
from unitkernel.errors import UnknownMeasurementSystemError
from unitkernel.parsed import all_tokens

from .preference import DATA_DIR, validate_territory
from .registry import UnitRegistry, get_registry
from .unit import UnitLike, parsed_of


@lru_cache(maxsize=1)
def _system_data() -> Dict[str, Any]:
    return load_json(DATA_DIR / "measurement_systems.json")


def known_measurement_systems() -> Dict[str, str]:
    """Mapping of measurement system to its description."""
    return {name: system["description"] for name, system in _system_data()["systems"].items()}


def validate_measurement_system(system: str) -> str:
    """Check a measurement system name.

    Raises:
        UnknownMeasurementSystemError: If the system is not known
    """
    if system not in _system_data()["systems"]:
        raise UnknownMeasurementSystemError(
            f"The measurement system {system!r} is not known. "
            f"Known systems are {sorted(known_measurement_systems())}"
        )
    return system


def measurement_system_for_territory(territory: str, category: Optional[str] = None) -> str:
    """The measurement system a territory uses.

    A category such as ``temperature`` can override the general system.

    Raises:
        UnknownTerritoryError: If the territory is not known

    Examples:
        >>> measurement_system_for_territory("GB")
        'uksystem'
        >>> measurement_system_for_territory("AU")
        'metric'
    """
    code = validate_territory(territory)
    data = _system_data()
    if category and code in data.get(category, {}):
        return data[category][code]
    return data["territories"].get(code, data["default"])


def measurement_system_from_locale(locale: str, category: Optional[str] = None) -> str:
    """The measurement system of a locale's territory.

    Raises:
        UnknownLocaleError: If the locale is not known
    """
    return measurement_system_for_territory(territory_for_locale(locale), category)


def _token_systems(name: str, registry: UnitRegistry) -> Sequence[str]:
    definition = registry.definition(name)
    return definition.systems if definition else ()


def measurement_systems_for_unit(unit: UnitLike, registry: Optional[UnitRegistry] = None) -> List[str]:
    """Systems every part of a unit belongs to, sorted.

    Raises:
        UnknownMeasurementSystemError: If the unit belongs to no system

    Examples:
        >>> measurement_systems_for_unit("acre_foot")
        ['ussystem']
    """
    registry = registry or get_registry()
    name, parsed = parsed_of(unit, registry)

    common = None
    for token in all_tokens(parsed):
        core = token.unit[len(token.prefix):] if token.prefix else token.unit
        systems = set(_token_systems(core or token.name, registry))
        common = systems if common is None else common & systems

    if not common:
        raise UnknownMeasurementSystemError(f"The measurement systems for {name!r} are not known")
    return sorted(common)


def _includes(system: str) -> List[str]:
    return _system_data()["systems"][system]["includes"]


def in_measurement_system(
    unit: UnitLike,
    systems: Union[str, Sequence[str]],
    registry: Optional[UnitRegistry] = None,
) -> bool:
    """Whether a unit belongs to any of the given measurement systems."""
    if isinstance(systems, str):
        systems = [systems]
    wanted = set()
    for system in systems:
        wanted.update(_includes(validate_measurement_system(system)))
    return bool(wanted & set(measurement_systems_for_unit(unit, registry)))


def units_for_system(system: str, registry: Optional[UnitRegistry] = None) -> List[str]:
    """Known units that belong to a measurement system.

    Raises:
        UnknownMeasurementSystemError: If the system is not known
    """
    registry = registry or get_registry()
    wanted = set(_includes(validate_measurement_system(system)))
    return [
        name for name in registry.dictionary.names()
        if wanted & set(_token_systems(name, registry))
    ]
