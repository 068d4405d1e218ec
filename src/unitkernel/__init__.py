"""Kernel package for unit parsing, canonicalization and exact conversion.

This package provides the token dictionary, the compound unit parser,
the base-unit resolver and the rational conversion engine. It has no
locale data; formatting lives in ``unit_grammar``.
"""

from .base_unit import canonical_base_unit, compatible, inverted_base_unit, unit_category
from .conversion import convert_value, from_base, to_base
from .dictionary import TokenDictionary
from .errors import Result, UnitError, attempt
from .parsed import Conversion, ParsedUnit, PerUnit, UnitToken, canonical_unit_name
from .parser import UnitParser, default_parser, normalize_unit_name, parse_unit

__version__ = "0.1.0"
__all__ = [
    "canonical_base_unit", "compatible", "inverted_base_unit", "unit_category",
    "convert_value", "from_base", "to_base",
    "TokenDictionary",
    "Result", "UnitError", "attempt",
    "Conversion", "ParsedUnit", "PerUnit", "UnitToken", "canonical_unit_name",
    "UnitParser", "default_parser", "normalize_unit_name", "parse_unit",
]
