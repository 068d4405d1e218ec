"""Localized unit formatting.

Builds a grammar tree from a parsed unit, derives the grammatical case
and plural category of each component, and renders it with the bundled
CLDR-style pattern tables. Number, plural and currency formatting come
from Babel.
"""

from .engine import DEFAULT_FORMATTER, UnitFormatter
from .features import GrammaticalFeatures, grammatical_features, resolve_grammar
from .locale_data import DEFAULT_STORE, STYLES, LocaleStore
from .nodes import Inflection, build_tree
from .numbers import format_number, plural_category, territory_for_locale

__all__ = [
    "DEFAULT_FORMATTER", "UnitFormatter",
    "GrammaticalFeatures", "grammatical_features", "resolve_grammar",
    "DEFAULT_STORE", "STYLES", "LocaleStore",
    "Inflection", "build_tree",
    "format_number", "plural_category", "territory_for_locale",
]
