"""Built-in unit definitions, base unit ranking and aliases.

Each atomic unit maps onto a canonical base unit through an exact
rational factor and offset: ``base = value * factor + offset``.
Factors are derived from the exact international definitions of the
foot, pound and gallon so that chained conversions never drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class UnitDefinition:
    """Conversion definition of one atomic unit."""

    name: str
    base_unit: str
    factor: Optional[Fraction]
    offset: Fraction = Fraction(0)
    systems: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Unit definition name cannot be empty")
        if not self.base_unit:
            raise ValueError(f"Unit definition {self.name!r} has no base unit")

    @property
    def convertible(self) -> bool:
        return self.factor is not None


# Exact physical constants
FOOT = Fraction("0.3048")
INCH = FOOT / 12
YARD = FOOT * 3
MILE = FOOT * 5280
POUND = Fraction("0.45359237")
OUNCE = POUND / 16
GALLON = 231 * INCH**3
GALLON_IMPERIAL = Fraction("0.00454609")
GRAVITY = Fraction("9.80665")
ASTRONOMICAL_UNIT = Fraction(149597870700)
LIGHT_YEAR = Fraction(9460730472580800)
YEAR = Fraction(31556952)
# PI to the precision used by CLDR
PI = Fraction(411557987, 131002976)

SI = ("si", "metric")
METRIC = ("metric",)
SI_ACCEPTABLE = ("si_acceptable", "metric")
US_UK = ("ussystem", "uksystem")
US = ("ussystem",)
UK = ("uksystem",)
ALL = ("si", "metric", "ussystem", "uksystem")

# name: (base unit, factor, offset, systems)
_CONVERSIONS: Dict[str, Tuple[str, Optional[Fraction], Fraction, Tuple[str, ...]]] = {
    # Length
    "meter": ("meter", Fraction(1), Fraction(0), SI),
    "kilometer": ("meter", Fraction(1000), Fraction(0), SI),
    "decimeter": ("meter", Fraction(1, 10), Fraction(0), SI),
    "centimeter": ("meter", Fraction(1, 100), Fraction(0), SI),
    "millimeter": ("meter", Fraction(1, 1000), Fraction(0), SI),
    "micrometer": ("meter", Fraction(1, 10**6), Fraction(0), SI),
    "nanometer": ("meter", Fraction(1, 10**9), Fraction(0), SI),
    "picometer": ("meter", Fraction(1, 10**12), Fraction(0), SI),
    "inch": ("meter", INCH, Fraction(0), US_UK),
    "foot": ("meter", FOOT, Fraction(0), US_UK),
    "yard": ("meter", YARD, Fraction(0), US_UK),
    "mile": ("meter", MILE, Fraction(0), US_UK),
    "fathom": ("meter", FOOT * 6, Fraction(0), US_UK),
    "furlong": ("meter", FOOT * 660, Fraction(0), US_UK),
    "chain": ("meter", FOOT * 66, Fraction(0), US_UK),
    "rod": ("meter", FOOT * Fraction(33, 2), Fraction(0), US_UK),
    "point": ("meter", INCH / 72, Fraction(0), US_UK),
    "mile_scandinavian": ("meter", Fraction(10000), Fraction(0), METRIC),
    "nautical_mile": ("meter", Fraction(1852), Fraction(0), SI_ACCEPTABLE),
    "astronomical_unit": ("meter", ASTRONOMICAL_UNIT, Fraction(0), SI_ACCEPTABLE),
    "light_year": ("meter", LIGHT_YEAR, Fraction(0), SI_ACCEPTABLE),
    "parsec": ("meter", ASTRONOMICAL_UNIT * 648000 / PI, Fraction(0), SI_ACCEPTABLE),
    "earth_radius": ("meter", Fraction(6378100), Fraction(0), ()),
    "solar_radius": ("meter", Fraction(695700000), Fraction(0), ()),
    # Mass
    "kilogram": ("kilogram", Fraction(1), Fraction(0), SI),
    "gram": ("kilogram", Fraction(1, 1000), Fraction(0), SI),
    "milligram": ("kilogram", Fraction(1, 10**6), Fraction(0), SI),
    "microgram": ("kilogram", Fraction(1, 10**9), Fraction(0), SI),
    "tonne": ("kilogram", Fraction(1000), Fraction(0), SI_ACCEPTABLE),
    "pound": ("kilogram", POUND, Fraction(0), US_UK),
    "ounce": ("kilogram", OUNCE, Fraction(0), US_UK),
    "ounce_troy": ("kilogram", Fraction("0.03110348"), Fraction(0), US_UK),
    "stone": ("kilogram", POUND * 14, Fraction(0), UK),
    "ton": ("kilogram", POUND * 2000, Fraction(0), US),
    "grain": ("kilogram", POUND / 7000, Fraction(0), US_UK),
    "carat": ("kilogram", Fraction(1, 5000), Fraction(0), SI_ACCEPTABLE),
    "dalton": ("kilogram", Fraction("1.66053878283e-27"), Fraction(0), SI_ACCEPTABLE),
    "earth_mass": ("kilogram", Fraction("5.9722e24"), Fraction(0), ()),
    "solar_mass": ("kilogram", Fraction("1.98847e30"), Fraction(0), ()),
    # Duration
    "second": ("second", Fraction(1), Fraction(0), SI),
    "millisecond": ("second", Fraction(1, 1000), Fraction(0), SI),
    "microsecond": ("second", Fraction(1, 10**6), Fraction(0), SI),
    "nanosecond": ("second", Fraction(1, 10**9), Fraction(0), SI),
    "minute": ("second", Fraction(60), Fraction(0), SI_ACCEPTABLE),
    "hour": ("second", Fraction(3600), Fraction(0), SI_ACCEPTABLE),
    "day": ("second", Fraction(86400), Fraction(0), SI_ACCEPTABLE),
    "day_person": ("second", Fraction(86400), Fraction(0), SI_ACCEPTABLE),
    "week": ("second", Fraction(604800), Fraction(0), SI_ACCEPTABLE),
    "week_person": ("second", Fraction(604800), Fraction(0), SI_ACCEPTABLE),
    "month": ("second", YEAR / 12, Fraction(0), SI_ACCEPTABLE),
    "month_person": ("second", YEAR / 12, Fraction(0), SI_ACCEPTABLE),
    "quarter": ("second", YEAR / 4, Fraction(0), SI_ACCEPTABLE),
    "year": ("second", YEAR, Fraction(0), SI_ACCEPTABLE),
    "year_person": ("second", YEAR, Fraction(0), SI_ACCEPTABLE),
    "decade": ("second", YEAR * 10, Fraction(0), SI_ACCEPTABLE),
    "century": ("second", YEAR * 100, Fraction(0), SI_ACCEPTABLE),
    # Area
    "hectare": ("square_meter", Fraction(10000), Fraction(0), METRIC),
    "dunam": ("square_meter", Fraction(1000), Fraction(0), ()),
    "acre": ("square_meter", FOOT**2 * 43560, Fraction(0), US_UK),
    # Volume
    "liter": ("cubic_meter", Fraction(1, 1000), Fraction(0), SI_ACCEPTABLE),
    "milliliter": ("cubic_meter", Fraction(1, 10**6), Fraction(0), SI_ACCEPTABLE),
    "centiliter": ("cubic_meter", Fraction(1, 10**5), Fraction(0), SI_ACCEPTABLE),
    "deciliter": ("cubic_meter", Fraction(1, 10**4), Fraction(0), SI_ACCEPTABLE),
    "hectoliter": ("cubic_meter", Fraction(1, 10), Fraction(0), SI_ACCEPTABLE),
    "megaliter": ("cubic_meter", Fraction(1000), Fraction(0), SI_ACCEPTABLE),
    "cup_metric": ("cubic_meter", Fraction(1, 4000), Fraction(0), METRIC),
    "pint_metric": ("cubic_meter", Fraction(1, 2000), Fraction(0), METRIC),
    "gallon": ("cubic_meter", GALLON, Fraction(0), US),
    "quart": ("cubic_meter", GALLON / 4, Fraction(0), US),
    "pint": ("cubic_meter", GALLON / 8, Fraction(0), US),
    "cup": ("cubic_meter", GALLON / 16, Fraction(0), US),
    "fluid_ounce": ("cubic_meter", GALLON / 128, Fraction(0), US),
    "tablespoon": ("cubic_meter", GALLON / 256, Fraction(0), US),
    "teaspoon": ("cubic_meter", GALLON / 768, Fraction(0), US),
    "barrel": ("cubic_meter", GALLON * 42, Fraction(0), US),
    "bushel": ("cubic_meter", Fraction("0.03523907016688"), Fraction(0), US),
    "acre_foot": ("cubic_meter", FOOT**3 * 43560, Fraction(0), US),
    "gallon_imperial": ("cubic_meter", GALLON_IMPERIAL, Fraction(0), UK),
    "quart_imperial": ("cubic_meter", GALLON_IMPERIAL / 4, Fraction(0), UK),
    "pint_imperial": ("cubic_meter", GALLON_IMPERIAL / 8, Fraction(0), UK),
    "fluid_ounce_imperial": ("cubic_meter", GALLON_IMPERIAL / 160, Fraction(0), UK),
    # Speed and acceleration
    "knot": ("meter_per_second", Fraction(1852, 3600), Fraction(0), SI_ACCEPTABLE),
    "beaufort": ("meter_per_second", None, Fraction(0), METRIC),
    "g_force": ("meter_per_square_second", GRAVITY, Fraction(0), ()),
    # Temperature
    "kelvin": ("kelvin", Fraction(1), Fraction(0), SI),
    "celsius": ("kelvin", Fraction(1), Fraction("273.15"), SI_ACCEPTABLE),
    "fahrenheit": ("kelvin", Fraction(5, 9), Fraction("2298.35") / 9, US),
    "rankine": ("kelvin", Fraction(5, 9), Fraction(0), US),
    # Pressure
    "pascal": ("kilogram_per_meter_square_second", Fraction(1), Fraction(0), SI),
    "bar": ("kilogram_per_meter_square_second", Fraction(100000), Fraction(0), METRIC),
    "millibar": ("kilogram_per_meter_square_second", Fraction(100), Fraction(0), METRIC),
    "atmosphere": ("kilogram_per_meter_square_second", Fraction(101325), Fraction(0), METRIC),
    "inch_ofhg": ("kilogram_per_meter_square_second", Fraction("3386.389"), Fraction(0), US),
    "millimeter_ofhg": ("kilogram_per_meter_square_second", Fraction("133.322387415"), Fraction(0), METRIC),
    # Force
    "newton": ("kilogram_meter_per_square_second", Fraction(1), Fraction(0), SI),
    "kilogram_force": ("kilogram_meter_per_square_second", GRAVITY, Fraction(0), METRIC),
    "pound_force": ("kilogram_meter_per_square_second", POUND * GRAVITY, Fraction(0), US_UK),
    # Energy
    "joule": ("kilogram_square_meter_per_square_second", Fraction(1), Fraction(0), SI),
    "kilojoule": ("kilogram_square_meter_per_square_second", Fraction(1000), Fraction(0), SI),
    "calorie": ("kilogram_square_meter_per_square_second", Fraction("4.184"), Fraction(0), METRIC),
    "kilocalorie": ("kilogram_square_meter_per_square_second", Fraction(4184), Fraction(0), METRIC),
    "foodcalorie": ("kilogram_square_meter_per_square_second", Fraction(4184), Fraction(0), US_UK),
    "kilowatt_hour": ("kilogram_square_meter_per_square_second", Fraction(3600000), Fraction(0), SI_ACCEPTABLE),
    "electronvolt": ("kilogram_square_meter_per_square_second", Fraction("1.602176634e-19"), Fraction(0), SI_ACCEPTABLE),
    "british_thermal_unit": ("kilogram_square_meter_per_square_second", Fraction("1055.05585262"), Fraction(0), US_UK),
    "therm_us": ("kilogram_square_meter_per_square_second", Fraction(105480400), Fraction(0), US),
    # Power
    "watt": ("kilogram_square_meter_per_cubic_second", Fraction(1), Fraction(0), SI),
    "kilowatt": ("kilogram_square_meter_per_cubic_second", Fraction(1000), Fraction(0), SI),
    "horsepower": ("kilogram_square_meter_per_cubic_second", Fraction("745.69987158227022"), Fraction(0), US_UK),
    "solar_luminosity": ("kilogram_square_meter_per_cubic_second", Fraction("3.828e26"), Fraction(0), ()),
    # Electric
    "ampere": ("ampere", Fraction(1), Fraction(0), SI),
    "milliampere": ("ampere", Fraction(1, 1000), Fraction(0), SI),
    "volt": ("kilogram_square_meter_per_cubic_second_ampere", Fraction(1), Fraction(0), SI),
    "ohm": ("kilogram_square_meter_per_cubic_second_square_ampere", Fraction(1), Fraction(0), SI),
    # Frequency and angle
    "hertz": ("revolution_per_second", Fraction(1), Fraction(0), SI),
    "revolution": ("revolution", Fraction(1), Fraction(0), ALL),
    "degree": ("revolution", Fraction(1, 360), Fraction(0), ALL),
    "arc_minute": ("revolution", Fraction(1, 21600), Fraction(0), ALL),
    "arc_second": ("revolution", Fraction(1, 1296000), Fraction(0), ALL),
    "radian": ("revolution", 1 / (2 * PI), Fraction(0), SI),
    # Digital
    "bit": ("bit", Fraction(1), Fraction(0), ALL),
    "byte": ("bit", Fraction(8), Fraction(0), ALL),
    # Concentration
    "portion": ("portion", Fraction(1), Fraction(0), ALL),
    "percent": ("portion", Fraction(1, 100), Fraction(0), ALL),
    "permille": ("portion", Fraction(1, 1000), Fraction(0), ALL),
    "permyriad": ("portion", Fraction(1, 10000), Fraction(0), ALL),
    "permillion": ("portion", Fraction(1, 10**6), Fraction(0), ALL),
    "karat": ("portion", Fraction(1, 24), Fraction(0), US_UK),
    "mole": ("mole", Fraction(1), Fraction(0), SI),
    "millimole": ("mole", Fraction(1, 1000), Fraction(0), SI),
    "item": ("item", Fraction(1), Fraction(0), ALL),
    # Graphics and light
    "pixel": ("pixel", Fraction(1), Fraction(0), ALL),
    "dot": ("pixel", Fraction(1), Fraction(0), ALL),
    "em": ("em", Fraction(1), Fraction(0), ALL),
    "candela": ("candela", Fraction(1), Fraction(0), SI),
    "lux": ("candela_per_square_meter", Fraction(1), Fraction(0), SI),
}

UNIT_DEFINITIONS: Dict[str, UnitDefinition] = {
    name: UnitDefinition(name, base, factor, offset, systems)
    for name, (base, factor, offset, systems) in _CONVERSIONS.items()
}

# Base units in canonical order. Atomic units give the order of factors
# inside a canonical identity; compound entries are known base units that
# the resolver never reduces further.
BASE_UNITS: Tuple[str, ...] = (
    "candela",
    "kilogram_per_cubic_meter",
    "kilogram_per_meter_square_second",
    "kilogram_meter_per_square_second",
    "kilogram_square_meter_per_square_second",
    "kilogram_square_meter_per_cubic_second",
    "kilogram_square_meter_per_cubic_second_ampere",
    "kilogram_square_meter_per_cubic_second_square_ampere",
    "kilogram",
    "meter_per_cubic_meter",
    "cubic_meter_per_meter",
    "meter_per_square_second",
    "meter_per_second",
    "meter",
    "square_meter",
    "cubic_meter",
    "revolution",
    "revolution_per_second",
    "second",
    "ampere",
    "kelvin",
    "mole",
    "mole_per_cubic_meter",
    "item",
    "portion",
    "bit",
    "pixel",
    "em",
    "candela_per_square_meter",
)

BASE_UNIT_RANKS: Dict[str, int] = {name: rank for rank, name in enumerate(BASE_UNITS)}

BASE_UNIT_CATEGORIES: Dict[str, str] = {
    "candela": "light",
    "candela_per_square_meter": "light",
    "kilogram_per_cubic_meter": "concentr",
    "kilogram_per_meter_square_second": "pressure",
    "kilogram_meter_per_square_second": "force",
    "kilogram_square_meter_per_square_second": "energy",
    "kilogram_square_meter_per_cubic_second": "power",
    "kilogram_square_meter_per_cubic_second_ampere": "electric",
    "kilogram_square_meter_per_cubic_second_square_ampere": "electric",
    "kilogram": "mass",
    "meter_per_cubic_meter": "consumption",
    "cubic_meter_per_meter": "consumption",
    "meter_per_square_second": "acceleration",
    "meter_per_second": "speed",
    "meter": "length",
    "square_meter": "area",
    "cubic_meter": "volume",
    "revolution": "angle",
    "revolution_per_second": "frequency",
    "second": "duration",
    "ampere": "electric",
    "kelvin": "temperature",
    "mole": "concentr",
    "mole_per_cubic_meter": "concentr",
    "item": "concentr",
    "portion": "concentr",
    "bit": "digital",
    "pixel": "graphics",
    "em": "graphics",
}

CURRENCY_CATEGORY = "currency"
CURRENCY_PREFIX = "curr"

# Aliases applied to a whole normalized unit name before it is split
WHOLE_NAME_ALIASES: Dict[str, str] = {
    "part_per_million": "permillion",
    "meter_per_second_squared": "meter_per_square_second",
    "liter_per_100kilometers": "liter_per_100_kilometer",
    "pound_per_square_inch": "pound_force_per_square_inch",
    "pound_foot": "pound_force_foot",
    "inch_hg": "inch_ofhg",
    "millimeter_of_mercury": "millimeter_ofhg",
    "metric_ton": "tonne",
}

# Aliases applied to individual tokens while tokenizing
TOKEN_ALIASES: Dict[str, str] = {
    "metre": "meter",
    "kilometre": "kilometer",
    "decimetre": "decimeter",
    "centimetre": "centimeter",
    "millimetre": "millimeter",
    "micrometre": "micrometer",
    "nanometre": "nanometer",
    "picometre": "picometer",
    "litre": "liter",
    "millilitre": "milliliter",
    "centilitre": "centiliter",
    "decilitre": "deciliter",
    "hectolitre": "hectoliter",
    "megalitre": "megaliter",
    "gramme": "gram",
    "kilogramme": "kilogram",
    "tonne_metric": "tonne",
    "btu": "british_thermal_unit",
}


def base_unit_rank(base_unit: str) -> int:
    """Return the canonical sort rank of a base unit.

    Currency base units (``curr_xxx``) sort ahead of everything else.

    Raises:
        KeyError: If the base unit is not ranked
    """
    if base_unit.startswith(CURRENCY_PREFIX + "_"):
        return -1
    return BASE_UNIT_RANKS[base_unit]


def category_for_base_unit(base_unit: str) -> Optional[str]:
    """Return the category of a canonical base-unit identity, if known."""
    if base_unit.startswith(CURRENCY_PREFIX + "_") and "_per_" not in base_unit:
        return CURRENCY_CATEGORY
    return BASE_UNIT_CATEGORIES.get(base_unit)


def known_unit_categories() -> Tuple[str, ...]:
    """Return the sorted list of unit categories."""
    return tuple(sorted(set(BASE_UNIT_CATEGORIES.values())))
