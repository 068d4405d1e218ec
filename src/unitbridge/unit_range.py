"""Ranges of units, such as 1 to 3 meters."""

from __future__ import annotations

from dataclasses import dataclass

from unitkernel.base_unit import compatible
from unitkernel.errors import InvalidRangeError, UnitNotConvertibleError
from unitkernel.numeric import compare

from .unit import Unit, convert


@dataclass(frozen=True)
class UnitRange:
    """A range whose ``last`` is expressed in the unit of ``first``."""

    first: Unit
    last: Unit

    @property
    def name(self) -> str:
        return self.first.name

    def __contains__(self, unit: object) -> bool:
        if not isinstance(unit, Unit) or not compatible(unit.base_conversion, self.first.base_conversion):
            return False
        value = convert(unit, self.first.name).value
        return compare(self.first.value, value) <= 0 <= compare(self.last.value, value)


def new_range(first: Unit, last: Unit) -> UnitRange:
    """Create a range from two units.

    Raises:
        InvalidRangeError: If ``last`` cannot be converted into ``first``'s
            unit or is less than ``first``

    Examples:
        >>> r = new_range(new_unit("meter", 1), new_unit("centimeter", 300))
        >>> r.last.name, r.last.value
        ('meter', 3)
    """
    if not compatible(first.base_conversion, last.base_conversion):
        raise InvalidRangeError(
            f"Unit ranges require that last is convertible to first. "
            f"Received {first.name!r} and {last.name!r}"
        )

    try:
        converted = convert(last, first.name)
    except UnitNotConvertibleError as e:
        raise InvalidRangeError(f"Unit range {first.name!r} to {last.name!r} is not convertible: {e}") from e

    if compare(converted.value, first.value) < 0:
        raise InvalidRangeError(
            f"Unit ranges require that last is greater than or equal to first. "
            f"Received {first.value!r} {first.name} and {last.value!r} {last.name}"
        )
    return UnitRange(first=first, last=converted)
