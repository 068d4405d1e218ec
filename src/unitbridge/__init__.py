"""UnitBridge: parse, convert, compute with and localize units of measure.

Example:
    >>> from unitbridge import new_unit, convert, to_string
    >>> to_string(convert(new_unit("mile", 1), "foot"))
    '5,280 feet'
"""

from unitkernel.errors import Result, UnitError

from .arithmetic import add, compare, div, mul, round, sub, trunc
from .config import UnitBridgeSettings, get_settings
from .decompose import decompose
from .formatting import display_name, to_string, unit_grammar, unit_pattern
from .preference import localize, preferred_units, territory_chain, usage_chain
from .registry import UnitRegistry, configure_additional_units, get_registry, reset_registry
from .serialize import dumps, loads, unit_from_dict, unit_to_dict
from .systems import (
    in_measurement_system,
    known_measurement_systems,
    measurement_system_for_territory,
    measurement_system_from_locale,
    measurement_systems_for_unit,
    units_for_system,
)
from .unit import (
    Unit,
    base_unit,
    compatible,
    convert,
    convert_to_base_unit,
    known_unit_categories,
    known_units,
    new_unit,
    parse,
    unit_category,
)
from .unit_range import UnitRange, new_range

__version__ = "0.1.0"
__all__ = [
    "Result", "UnitError",
    "add", "compare", "div", "mul", "round", "sub", "trunc",
    "UnitBridgeSettings", "get_settings",
    "decompose",
    "display_name", "to_string", "unit_grammar", "unit_pattern",
    "localize", "preferred_units", "territory_chain", "usage_chain",
    "UnitRegistry", "configure_additional_units", "get_registry", "reset_registry",
    "dumps", "loads", "unit_from_dict", "unit_to_dict",
    "in_measurement_system", "known_measurement_systems", "measurement_system_for_territory",
    "measurement_system_from_locale", "measurement_systems_for_unit", "units_for_system",
    "Unit", "base_unit", "compatible", "convert", "convert_to_base_unit",
    "known_unit_categories", "known_units", "new_unit", "parse", "unit_category",
    "UnitRange", "new_range",
]
