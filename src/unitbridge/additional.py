"""Additional unit definitions.

Applications can define units of their own in a JSON file::

    {
      "units": {
        "vehicle": {
          "base_unit": "item",
          "factor": 1,
          "systems": ["metric", "ussystem", "uksystem"],
          "localizations": {
            "en": {"long": {"display_name": "vehicles",
                            "one": "{0} vehicle", "other": "{0} vehicles"}}
          }
        },
        "quarter_year": {"base_unit": "year", "factor": {"numerator": 1, "denominator": 4}}
      }
    }

``base_unit`` is either a base unit such as ``item`` or ``meter``, or a
unit that is already defined, in which case the factor is composed with
that unit's own factor.
"""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import orjson
import structlog

from unit_grammar.locale_data import locale_key
from unitkernel.definitions import BASE_UNIT_RANKS, UnitDefinition
from unitkernel.dictionary import TokenDictionary
from unitkernel.errors import AdditionalUnitError, UnknownLocaleError

logger = structlog.get_logger(__name__)

DEFAULT_SYSTEMS = ("metric", "ussystem", "uksystem")

# {locale: {style: {unit: entry}}}
Localizations = Dict[str, Dict[str, Dict[str, Any]]]


def parse_factor(name: str, value: Any) -> Fraction:
    """Exact factor from an int, float, numeric string or ``{"numerator", "denominator"}``.

    Raises:
        AdditionalUnitError: If the factor is not a number or is zero
    """
    try:
        if isinstance(value, Mapping):
            factor = Fraction(int(value["numerator"]), int(value["denominator"]))
        elif isinstance(value, bool):
            raise TypeError(value)
        elif isinstance(value, float):
            factor = Fraction(repr(value))
        else:
            factor = Fraction(value)
    except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
        raise AdditionalUnitError(
            f"Additional unit {name!r} has an invalid factor {value!r}"
        ) from e

    if factor == 0:
        raise AdditionalUnitError(f"Additional unit {name!r} cannot have a factor of zero")
    return factor


def parse_offset(name: str, value: Any) -> Fraction:
    """Exact offset from an int, float or numeric string.

    Raises:
        AdditionalUnitError: If the offset is not a number
    """
    try:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TypeError(value)
        return Fraction(repr(value) if isinstance(value, float) else str(value))
    except (TypeError, ValueError, ZeroDivisionError) as e:
        raise AdditionalUnitError(
            f"Additional unit {name!r} has an invalid offset {value!r}"
        ) from e


def _localization_key(name: str, locale: str) -> str:
    try:
        return locale_key(locale)
    except UnknownLocaleError as e:
        raise AdditionalUnitError(
            f"Additional unit {name!r} has a localization for unknown locale {locale!r}"
        ) from e


def _resolve_base(
    name: str, base_unit: str, factor: Fraction, dictionary: TokenDictionary
) -> Tuple[str, Fraction]:
    if base_unit in BASE_UNIT_RANKS:
        return base_unit, factor

    existing = dictionary.definition(base_unit)
    if existing is None:
        raise AdditionalUnitError(
            f"Additional unit {name!r} has unknown base unit {base_unit!r}"
        )
    if existing.factor is None or existing.offset != 0:
        raise AdditionalUnitError(
            f"Additional unit {name!r} cannot be based on {base_unit!r}, "
            "which has no plain conversion factor"
        )
    return existing.base_unit, factor * existing.factor


def build_definitions(
    units: Mapping[str, Mapping[str, Any]],
    dictionary: TokenDictionary,
) -> Tuple[List[UnitDefinition], Localizations]:
    """Turn raw unit entries into definitions and locale overlays.

    Args:
        units: Mapping of unit name to its configuration
        dictionary: Dictionary the units extend, used to resolve base units

    Returns:
        Tuple of (definitions, localizations)

    Raises:
        AdditionalUnitError: For a missing key, a bad factor or offset, an
            unknown base unit or a localization for an unknown locale
    """
    definitions: List[UnitDefinition] = []
    localizations: Localizations = {}

    for name, config in units.items():
        name = name.lower().replace("-", "_").replace(" ", "_")
        if "base_unit" not in config:
            raise AdditionalUnitError(f"Additional unit {name!r} requires a base_unit")
        if "factor" not in config:
            raise AdditionalUnitError(f"Additional unit {name!r} requires a factor")

        base_unit, factor = _resolve_base(
            name, str(config["base_unit"]), parse_factor(name, config["factor"]), dictionary
        )
        offset = parse_offset(name, config.get("offset", 0))
        systems = tuple(config.get("systems", DEFAULT_SYSTEMS))
        definitions.append(UnitDefinition(name, base_unit, factor, offset, systems))

        for locale, styles in config.get("localizations", {}).items():
            key = _localization_key(name, locale)
            for style, entry in styles.items():
                localizations.setdefault(key, {}).setdefault(style, {})[name] = dict(entry)

    return definitions, localizations


def load_additional_units(path: Path) -> Dict[str, Any]:
    """Read the ``units`` mapping of an additional units file.

    Raises:
        AdditionalUnitError: If the file cannot be read or is not valid JSON
    """
    path = Path(path)
    try:
        data = orjson.loads(path.read_bytes())
    except FileNotFoundError as e:
        logger.warning("Additional units file not found", path=str(path))
        raise AdditionalUnitError(f"Additional units file not found: {path}") from e
    except orjson.JSONDecodeError as e:
        raise AdditionalUnitError(f"Additional units file {path} is not valid JSON: {e}") from e

    units = data.get("units") if isinstance(data, dict) else None
    if not isinstance(units, dict):
        raise AdditionalUnitError(f"Additional units file {path} must contain a 'units' object")

    logger.debug("Loaded additional units", path=str(path), units=len(units))
    return units
