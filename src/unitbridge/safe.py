"""Non-raising variants of the public operations.

Each ``try_<operation>`` takes the same arguments as the operation and
returns a :class:`~unitkernel.errors.Result` instead of raising a
:class:`~unitkernel.errors.UnitError`::

    result = try_convert(new_unit("meter", 1), "second")
    if not result.ok:
        print(result.error)
"""

from __future__ import annotations

from typing import Any, List, Tuple

from unitkernel.errors import Result, attempt
from unitkernel.parsed import ParsedUnit

from . import arithmetic, formatting, preference, systems, unit, unit_range
from .decompose import decompose
from .unit import Unit


def try_parse(*args: Any, **kwargs: Any) -> Result[ParsedUnit]:
    return attempt(unit.parse, *args, **kwargs)


def try_new_unit(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(unit.new_unit, *args, **kwargs)


def try_convert(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(unit.convert, *args, **kwargs)


def try_convert_to_base_unit(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(unit.convert_to_base_unit, *args, **kwargs)


def try_unit_category(*args: Any, **kwargs: Any) -> Result[str]:
    return attempt(unit.unit_category, *args, **kwargs)


def try_add(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(arithmetic.add, *args, **kwargs)


def try_sub(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(arithmetic.sub, *args, **kwargs)


def try_mul(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(arithmetic.mul, *args, **kwargs)


def try_div(*args: Any, **kwargs: Any) -> Result[Unit]:
    return attempt(arithmetic.div, *args, **kwargs)


def try_compare(*args: Any, **kwargs: Any) -> Result[str]:
    return attempt(arithmetic.compare, *args, **kwargs)


def try_decompose(*args: Any, **kwargs: Any) -> Result[List[Unit]]:
    return attempt(decompose, *args, **kwargs)


def try_preferred_units(*args: Any, **kwargs: Any) -> Result[Tuple[List[str], dict]]:
    return attempt(preference.preferred_units, *args, **kwargs)


def try_localize(*args: Any, **kwargs: Any) -> Result[List[Unit]]:
    return attempt(preference.localize, *args, **kwargs)


def try_to_string(*args: Any, **kwargs: Any) -> Result[str]:
    return attempt(formatting.to_string, *args, **kwargs)


def try_display_name(*args: Any, **kwargs: Any) -> Result[str]:
    return attempt(formatting.display_name, *args, **kwargs)


def try_unit_grammar(*args: Any, **kwargs: Any) -> Result[Any]:
    return attempt(formatting.unit_grammar, *args, **kwargs)


def try_new_range(*args: Any, **kwargs: Any) -> Result[unit_range.UnitRange]:
    return attempt(unit_range.new_range, *args, **kwargs)


def try_measurement_systems_for_unit(*args: Any, **kwargs: Any) -> Result[List[str]]:
    return attempt(systems.measurement_systems_for_unit, *args, **kwargs)


def try_measurement_system_from_locale(*args: Any, **kwargs: Any) -> Result[str]:
    return attempt(systems.measurement_system_from_locale, *args, **kwargs)
