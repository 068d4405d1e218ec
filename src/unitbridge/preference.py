"""Preferred units for a territory and usage.

Preferences are grouped by unit category and usage. Each entry lists
the regions it applies to, the units to display, a ``geq`` threshold in
the category's base unit and number options (``skeleton``) such as a
rounding increment. Resolution walks the usage chain (most specific
first) and, for each usage, the territory containment chain.
"""

from __future__ import annotations

from fractions import Fraction
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import structlog

from unit_grammar.locale_data import load_json
from unit_grammar.numbers import territory_for_locale
from unitkernel.conversion import check_convertible, to_base
from unitkernel.errors import UnknownTerritoryError, UnknownUnitPreferenceError, UnknownUsageError
from unitkernel.numeric import round_value, to_fraction

from .config import get_settings
from .decompose import decompose
from .registry import UnitRegistry
from .unit import DEFAULT_USAGE, Unit, unit_category

logger = structlog.get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"
WORLD = "001"

# Base values are rounded before comparing with thresholds
BASE_VALUE_PLACES = 10

# (units, skeleton)
Preference = Tuple[List[str], Dict[str, Any]]


@lru_cache(maxsize=1)
def preference_table() -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
    """``{category: {usage: [entry, ...]}}`` from the bundled data."""
    return load_json(DATA_DIR / "preferences.json")


@lru_cache(maxsize=1)
def _parents() -> Dict[str, str]:
    return load_json(DATA_DIR / "territory_containment.json")["parents"]


def known_usages(category: str) -> List[str]:
    return sorted(preference_table().get(category, {}))


def known_territories() -> List[str]:
    parents = _parents()
    return sorted(set(parents) | set(parents.values()))


def validate_territory(territory: str) -> str:
    """Normalize a territory code such as ``us`` to ``US``.

    Raises:
        UnknownTerritoryError: If the territory is not in the containment data
    """
    code = str(territory).upper()
    if code == WORLD or code in _parents() or code in _parents().values():
        return code
    raise UnknownTerritoryError(f"The territory {territory!r} is unknown")


def territory_chain(territory: str) -> List[str]:
    """The territory followed by every region containing it.

    Examples:
        >>> territory_chain("US")
        ['US', '021', '019', '001']
    """
    chain = [validate_territory(territory)]
    parents = _parents()
    while chain[-1] in parents:
        chain.append(parents[chain[-1]])
    if chain[-1] != WORLD:
        chain.append(WORLD)
    return chain


def usage_chain(usage: str) -> List[str]:
    """Usages from most to least specific, ending with ``default``.

    Examples:
        >>> usage_chain("person_height")
        ['person_height', 'person', 'default']
    """
    parts = usage.split("_")
    chain = ["_".join(parts[:end]) for end in range(len(parts), 0, -1)]
    if chain[-1] != DEFAULT_USAGE:
        chain.append(DEFAULT_USAGE)
    return chain


def base_value(unit: Unit) -> Fraction:
    """Value of a unit in its base unit, rounded for threshold comparison."""
    check_convertible(unit.base_conversion, unit.name)
    exact = to_base(to_fraction(unit.value), unit.base_conversion)
    return round_value(exact, BASE_VALUE_PLACES, "half_even")  # type: ignore[return-value]


def _matches(entry: Dict[str, Any], territory: str, value: Fraction) -> bool:
    if territory not in entry["regions"]:
        return False
    geq = entry.get("geq", 0)
    return geq == 0 or value >= to_fraction(geq)


def preferred_units(
    unit: Unit,
    locale: Optional[str] = None,
    territory: Optional[str] = None,
    usage: Optional[str] = None,
    registry: Optional[UnitRegistry] = None,
) -> Preference:
    """Units a territory prefers for displaying a unit in a usage.

    Args:
        unit: Unit to find preferences for
        locale: Locale whose territory applies when ``territory`` is not
            given; defaults to the configured locale
        territory: Territory code such as ``US`` or ``AU``
        usage: Usage such as ``person_height``; defaults to the unit's usage

    Returns:
        Tuple of (unit names, number options)

    Raises:
        UnknownUnitCategoryError: If the unit has no category
        UnknownUsageError: If the category does not define the usage
        UnknownTerritoryError: If the territory is not known
        UnknownUnitPreferenceError: If no usage and territory combination matches

    Examples:
        >>> preferred_units(new_unit("meter", 1), territory="US", usage="person_height")
        (['foot', 'inch'], {})
        >>> preferred_units(new_unit("meter", 1), territory="US", usage="road")
        (['foot'], {'round_nearest': 10})
    """
    usage = (usage or unit.usage or DEFAULT_USAGE).replace("-", "_")
    if territory is None:
        territory = territory_for_locale(locale or get_settings().default_locale)

    category = unit_category(unit, registry)
    usages = preference_table().get(category, {})
    if usage != DEFAULT_USAGE and usage not in usages:
        raise UnknownUsageError(category, usage)

    territories = territory_chain(territory)
    value = base_value(unit)

    for candidate in usage_chain(usage):
        for entry_territory in territories:
            for entry in usages.get(candidate, []):
                if _matches(entry, entry_territory, value):
                    logger.debug(
                        "Resolved unit preference",
                        unit=unit.name,
                        category=category,
                        usage=candidate,
                        territory=entry_territory,
                        units=entry["units"],
                    )
                    return list(entry["units"]), dict(entry.get("skeleton", {}))

    raise UnknownUnitPreferenceError(
        f"No preferences found for {category!r} with usage {usage!r} "
        f"for region {territories!r} and value {float(value)!r}"
    )


def localize(
    unit: Unit,
    locale: Optional[str] = None,
    territory: Optional[str] = None,
    usage: Optional[str] = None,
    registry: Optional[UnitRegistry] = None,
) -> List[Unit]:
    """Convert a unit into the units preferred for a locale and usage.

    Examples:
        >>> [u.name for u in localize(new_unit("meter", 2), territory="US", usage="person_height")]
        ['foot', 'inch']
    """
    units, skeleton = preferred_units(unit, locale, territory, usage, registry)
    return decompose(unit, units, format_options=skeleton, registry=registry)
