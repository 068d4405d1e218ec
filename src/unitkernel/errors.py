"""Error taxonomy for unit parsing, conversion and formatting.

Every public operation raises one of these on failure. The paired
non-raising variants wrap the same call with :func:`attempt` and hand
back a :class:`Result` instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class UnitError(Exception):
    """Base class for all unit errors."""
    pass


class UnknownUnitError(UnitError):
    """Raised when a unit name contains a substring matching no known token."""

    def __init__(self, unmatched: str, unit_name: Optional[str] = None):
        self.unmatched = unmatched
        self.unit_name = unit_name
        message = f"Unknown unit was detected at {unmatched!r}"
        if unit_name and unit_name != unmatched:
            message += f" in {unit_name!r}"
        super().__init__(message)


class UnsupportedPowerError(UnitError):
    """Raised when a unit is repeated more often than cubic."""

    def __init__(self, token: str, power: int):
        self.token = token
        self.power = power
        super().__init__(
            f"Cannot parse power greater than cubic: {token!r} appears {power} times"
        )


class UnknownBaseUnitError(UnitError):
    """Raised when a base unit is missing from the base unit ranking."""
    pass


class IncompatibleUnitsError(UnitError):
    """Raised when two units do not share a canonical base unit."""

    def __init__(self, unit_1: Any, unit_2: Any, message: Optional[str] = None):
        self.unit_1 = unit_1
        self.unit_2 = unit_2
        super().__init__(
            message
            or "Operations can only be performed between units with the same base unit. "
            f"Received {unit_1!r} and {unit_2!r}"
        )


class UnitNotConvertibleError(UnitError):
    """Raised when a unit carries no numeric conversion factor."""
    pass


class NotInvertibleError(UnitError):
    """Raised when an inverted conversion would divide by zero."""
    pass


class ReciprocalUnitError(UnitError):
    """Raised when multiplying or dividing units would leave nothing in the numerator."""

    def __init__(self, unit_1: Any, unit_2: Any, operation: str):
        self.unit_1 = unit_1
        self.unit_2 = unit_2
        super().__init__(
            f"{operation} {unit_1!r} by {unit_2!r} gives a reciprocal unit with "
            "no numerator, which cannot be named"
        )


class UnitDivisionByZeroError(UnitError):
    """Raised when a unit is divided by zero."""
    pass


class UnknownUnitCategoryError(UnitError):
    """Raised when a base unit does not belong to a known category."""
    pass


class UnknownUsageError(UnitError):
    """Raised when a usage is not defined for a unit category."""

    def __init__(self, category: str, usage: str):
        self.category = category
        self.usage = usage
        super().__init__(f"The unit category {category!r} does not define a usage {usage!r}")


class UnknownUnitPreferenceError(UnitError):
    """Raised when no preference entry matches any usage or territory."""
    pass


class UnknownMeasurementSystemError(UnitError):
    """Raised for a measurement system that is not known."""
    pass


class UnknownTerritoryError(UnitError):
    """Raised for a territory missing from the containment data."""
    pass


class NoPatternError(UnitError):
    """Raised when formatting finds no localized pattern after all fallbacks."""

    def __init__(self, name: str, grammatical_case: str, gender: Optional[str], plural: str):
        self.name = name
        self.grammatical_case = grammatical_case
        self.gender = gender
        self.plural = plural
        super().__init__(
            f"No format pattern was found for unit {name!r} with grammatical case "
            f"{grammatical_case!r}, gender {gender!r} and plural type {plural!r}"
        )


class UnknownGrammaticalCaseError(UnitError):
    """Raised for a grammatical case the locale does not define."""
    pass


class UnknownLocaleError(UnitError):
    """Raised when no locale data is bundled for a locale."""
    pass


class UnknownStyleError(UnitError):
    """Raised for a format style other than long, short or narrow."""
    pass


class InvalidRangeError(UnitError):
    """Raised when a unit range cannot be constructed."""
    pass


class InvalidUnitValueError(UnitError):
    """Raised when a unit value is not a supported number type."""
    pass


class AdditionalUnitError(UnitError):
    """Raised when an additional unit definition is invalid."""
    pass


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a non-raising operation.

    Exactly one of ``value`` or ``error`` is meaningful: ``ok`` tells which.
    """

    value: Optional[T] = None
    error: Optional[UnitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call ``func`` and capture any :class:`UnitError` in a :class:`Result`.

    Errors outside the unit taxonomy (programming errors) still propagate.
    """
    try:
        return Result(value=func(*args, **kwargs))
    except UnitError as e:
        return Result(error=e)
