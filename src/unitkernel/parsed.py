"""Parsed unit structures.

A parsed unit is either a tuple of :class:`UnitToken` (a product of
atomic units) or a :class:`PerUnit` pairing a numerator and denominator
tuple. Both are immutable and hashable so parse results can be cached
and shared freely.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Tuple, Union

from .prefixes import POWER_PREFIXES


@dataclass(frozen=True)
class Conversion:
    """How one token maps onto its base unit.

    ``base_unit`` is ``(base,)`` or ``(power_marker, base)`` when a power
    prefix applied, for example ``("square", "meter")``. A ``factor`` of
    None marks a unit that cannot be converted.
    """

    factor: Optional[Fraction]
    offset: Fraction = Fraction(0)
    base_unit: Tuple[str, ...] = ()

    @property
    def convertible(self) -> bool:
        return self.factor is not None

    @property
    def power(self) -> int:
        if len(self.base_unit) == 2:
            return POWER_PREFIXES[self.base_unit[0]]
        return 1

    @property
    def base_name(self) -> str:
        return self.base_unit[-1]


@dataclass(frozen=True)
class UnitToken:
    """One atomic unit, possibly prefixed, powered or multiplied."""

    name: str
    conversion: Conversion
    unit: str = ""
    prefix: Optional[str] = None
    power: int = 1
    multiplier: int = 1
    currency: Optional[str] = None

    @property
    def unpowered_name(self) -> str:
        """Token name without its integer multiplier or power marker."""
        return self.unit or self.name


@dataclass(frozen=True)
class PerUnit:
    """A compound "per" unit."""

    numerator: Tuple[UnitToken, ...]
    denominator: Tuple[UnitToken, ...]

    def inverted(self) -> "PerUnit":
        return PerUnit(numerator=self.denominator, denominator=self.numerator)


ParsedUnit = Union[Tuple[UnitToken, ...], PerUnit]


def numerator_of(parsed: ParsedUnit) -> Tuple[UnitToken, ...]:
    return parsed.numerator if isinstance(parsed, PerUnit) else parsed


def denominator_of(parsed: ParsedUnit) -> Tuple[UnitToken, ...]:
    return parsed.denominator if isinstance(parsed, PerUnit) else ()


def all_tokens(parsed: ParsedUnit) -> Tuple[UnitToken, ...]:
    return numerator_of(parsed) + denominator_of(parsed)


def token_names(tokens: Tuple[UnitToken, ...]) -> str:
    return "_".join(token.name for token in tokens)


def canonical_unit_name(parsed: ParsedUnit) -> str:
    """Join a parsed unit's token names back into a unit name.

    Examples:
        ``(kilogram, meter)`` gives ``"kilogram_meter"`` and a per unit
        gives ``"meter_per_second"``.
    """
    if isinstance(parsed, PerUnit):
        numerator = token_names(parsed.numerator)
        denominator = token_names(parsed.denominator)
        return f"{numerator}_per_{denominator}" if numerator else f"per_{denominator}"
    return token_names(parsed)
