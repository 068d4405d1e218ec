"""JSON serialization of unit values.

Values keep their exact type: a Fraction becomes
``{"numerator": n, "denominator": d}``, a Decimal its string, and ints
and floats stay JSON numbers.
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, List, Optional, Union

import orjson

from unitkernel.errors import InvalidUnitValueError
from unitkernel.numeric import Number

from .registry import UnitRegistry
from .unit import Unit, new_unit


def value_to_json(value: Number) -> Any:
    if isinstance(value, Fraction):
        return {"numerator": value.numerator, "denominator": value.denominator}
    if isinstance(value, Decimal):
        return str(value)
    return value


def value_from_json(data: Any) -> Number:
    """Inverse of :func:`value_to_json`.

    Raises:
        InvalidUnitValueError: If the data is not a serialized number
    """
    if isinstance(data, dict):
        try:
            return Fraction(int(data["numerator"]), int(data["denominator"]))
        except (KeyError, TypeError, ValueError, ZeroDivisionError) as e:
            raise InvalidUnitValueError(f"Invalid rational value {data!r}") from e
    if isinstance(data, str):
        try:
            return Decimal(data)
        except ArithmeticError as e:
            raise InvalidUnitValueError(f"Invalid decimal value {data!r}") from e
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        return data
    raise InvalidUnitValueError(f"Invalid unit value {data!r}")


def unit_to_dict(unit: Unit) -> Dict[str, Any]:
    data: Dict[str, Any] = {"unit": unit.name, "value": value_to_json(unit.value)}
    if unit.usage != "default":
        data["usage"] = unit.usage
    if unit.format_options:
        data["format_options"] = dict(unit.format_options)
    return data


def unit_from_dict(data: Dict[str, Any], registry: Optional[UnitRegistry] = None) -> Unit:
    """Rebuild a unit, re-parsing its name.

    Raises:
        InvalidUnitValueError: If the value cannot be read
        UnknownUnitError: If the unit name does not parse
    """
    if "unit" not in data:
        raise InvalidUnitValueError(f"Serialized unit has no 'unit' key: {data!r}")
    return new_unit(
        data["unit"],
        value_from_json(data.get("value", 1)),
        usage=data.get("usage", "default"),
        format_options=data.get("format_options"),
        registry=registry,
    )


def dumps(unit: Union[Unit, List[Unit]], pretty: bool = False) -> str:
    """Serialize a unit or a list of units to a JSON string.

    Examples:
        >>> dumps(new_unit("inch", Fraction(18, 5)))
        '{"unit":"inch","value":{"numerator":18,"denominator":5}}'
    """
    data: Any = [unit_to_dict(u) for u in unit] if isinstance(unit, list) else unit_to_dict(unit)
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(data, option=option).decode("utf-8")


def loads(text: Union[str, bytes], registry: Optional[UnitRegistry] = None) -> Union[Unit, List[Unit]]:
    """Deserialize what :func:`dumps` produced.

    Raises:
        InvalidUnitValueError: If the JSON is malformed or holds a bad value
    """
    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise InvalidUnitValueError(f"Invalid unit JSON: {e}") from e

    if isinstance(data, list):
        return [unit_from_dict(item, registry) for item in data]
    if not isinstance(data, dict):
        raise InvalidUnitValueError(f"Expected a JSON object or list, received {type(data).__name__}")
    return unit_from_dict(data, registry)
