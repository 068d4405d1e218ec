"""Bundled locale pattern tables.

Each locale file holds, per style, a ``units`` table and a ``compound``
table. A unit entry looks like::

    "meter": {
        "display_name": "meters",
        "gender": "masculine",
        "per_unit": "{0} per meter",
        "one": "{0} meter",
        "other": "{0} meters",
        "cases": {"dative": {"other": "{0} Metern"}}
    }

Plural keys at the top of an entry are nominative patterns; ``cases``
adds patterns for other grammatical cases, and ``integer`` holds
patterns used only for integer values. Compound entries (``per``,
``times``, ``power2``, ``10p3`` ...) are a plain pattern or the same
plural/cases mapping, optionally under ``genders``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

import orjson
import structlog

from unitkernel.errors import UnknownLocaleError, UnknownStyleError

from .nodes import DEFAULT_CASE, DEFAULT_PLURAL
from .numbers import babel_locale

logger = structlog.get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"
LOCALE_DIR = DATA_DIR / "locales"

STYLES = ("long", "short", "narrow")
STYLE_FALLBACK = {
    "narrow": ("narrow", "short", "long"),
    "short": ("short", "long"),
    "long": ("long",),
}

PLURAL_KEYS = ("zero", "one", "two", "few", "many", "other")

# Every case CLDR defines; a locale without patterns for one uses the nominative
KNOWN_GRAMMATICAL_CASES = (
    "abessive", "ablative", "accusative", "adessive", "allative", "causal",
    "comitative", "dative", "delative", "elative", "ergative", "genitive",
    "illative", "inessive", "instrumental", "locative", "localtivecopulative",
    "nominative", "oblique", "partitive", "prepositional", "sociative",
    "sublative", "superessive", "terminative", "translative", "vocative",
)

# {case: {plural: pattern}}
PatternTable = Dict[str, Dict[str, str]]


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def pattern_table(entry: Mapping[str, Any], key: str = "cases") -> PatternTable:
    """Case and plural patterns of an entry as ``{case: {plural: pattern}}``."""
    table: PatternTable = {DEFAULT_CASE: {p: entry[p] for p in PLURAL_KEYS if p in entry}}
    for case, plurals in entry.get(key, {}).items():
        table.setdefault(case, {}).update(plurals)
    return table


def locale_key(locale: str) -> str:
    """Normalized identifier of a locale: ``en-gb`` and ``en_GB`` both give ``en_GB``."""
    parsed = babel_locale(locale)
    if parsed.territory:
        return f"{parsed.language}_{parsed.territory}"
    return parsed.language


def validate_style(style: str) -> str:
    if style not in STYLES:
        raise UnknownStyleError(f"The style {style!r} is not known. Use one of {list(STYLES)}")
    return style


class LocaleStore:
    """Read-only access to the unit pattern tables of the bundled locales.

    Overlays add or replace unit entries without touching the bundled
    files; they are used for the localizations of additional units.
    """

    def __init__(
        self,
        locale_dir: Path = LOCALE_DIR,
        overlays: Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]] = None,
    ):
        self.locale_dir = Path(locale_dir)
        self._overlays: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for locale, styles in (overlays or {}).items():
            for style, units in styles.items():
                self._overlays.setdefault(locale_key(locale), {}).setdefault(style, {}).update(units)
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._known: Dict[Tuple[str, str], FrozenSet[str]] = {}

    def with_overlays(self, overlays: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> "LocaleStore":
        """Return a store with unit entries overlaid per ``{locale: {style: {unit: entry}}}``."""
        merged: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for source in (self._overlays, overlays):
            for locale, styles in source.items():
                for style, units in styles.items():
                    merged.setdefault(locale_key(locale), {}).setdefault(style, {}).update(units)
        return LocaleStore(self.locale_dir, merged)

    def available_locales(self) -> List[str]:
        return sorted(path.stem for path in self.locale_dir.glob("*.json"))

    def resolve_locale(self, locale: str) -> str:
        """Name of the bundled data file serving ``locale``.

        ``de-CH`` is served by ``de_CH`` when bundled, otherwise by ``de``.

        Raises:
            UnknownLocaleError: If no bundled data serves the locale
        """
        parsed = babel_locale(locale)
        candidates = [locale_key(locale)]
        if parsed.territory:
            candidates.append(parsed.language)

        available = self.available_locales()
        for candidate in candidates:
            if candidate in available:
                return candidate
        raise UnknownLocaleError(
            f"No unit data is available for locale {locale!r}. Available: {available}"
        )

    def locale_data(self, locale: str) -> Dict[str, Any]:
        name = self.resolve_locale(locale)
        if name not in self._cache:
            self._cache[name] = load_json(self.locale_dir / f"{name}.json")
            logger.debug("Loaded locale data", locale=name)
        return self._cache[name]

    def _style(self, locale: str, style: str) -> Dict[str, Any]:
        return self.locale_data(locale).get("styles", {}).get(style, {})

    def _overlay(self, locale: str, style: str) -> Dict[str, Any]:
        """Overlaid entries for a locale; regional entries win over the language's."""
        units: Dict[str, Any] = {}
        for key in dict.fromkeys((babel_locale(locale).language, locale_key(locale))):
            units.update(self._overlays.get(key, {}).get(style, {}))
        return units

    def units(self, locale: str, style: str) -> Dict[str, Any]:
        """Unit entries of exactly one style, overlays included."""
        validate_style(style)
        units = dict(self._style(locale, style).get("units", {}))
        units.update(self._overlay(locale, style))
        return units

    def unit_entry(self, locale: str, style: str, name: str) -> Optional[Dict[str, Any]]:
        """Entry for a unit, falling back from narrow to short to long."""
        for candidate in STYLE_FALLBACK[validate_style(style)]:
            entry = self.units(locale, candidate).get(name)
            if entry is not None:
                if candidate != style:
                    logger.debug("Style fallback", unit=name, locale=locale, style=style, used=candidate)
                return entry
        return None

    def patterns(self, locale: str, style: str) -> Dict[str, PatternTable]:
        """Pattern table of a locale and style: unit or compound key to ``{case: {plural: pattern}}``.

        Style fallback is applied, so ``narrow`` includes every ``short`` and
        ``long`` entry it lacks.
        """
        validate_style(style)
        table: Dict[str, PatternTable] = {}
        for candidate in reversed(STYLE_FALLBACK[style]):
            for key, value in self._style(locale, candidate).get("compound", {}).items():
                table[key] = {DEFAULT_CASE: {DEFAULT_PLURAL: value}} if isinstance(value, str) else pattern_table(value)
            for name, entry in self.units(locale, candidate).items():
                table[name] = pattern_table(entry)
        return table

    def known_units(self, locale: str, style: str) -> FrozenSet[str]:
        """Units translatable in ``style`` once style fallback is applied."""
        self.resolve_locale(locale)
        key = (locale_key(locale), validate_style(style))
        if key not in self._known:
            names: set = set()
            for candidate in STYLE_FALLBACK[style]:
                names.update(self.units(locale, candidate))
            self._known[key] = frozenset(names)
        return self._known[key]

    def compound(self, locale: str, style: str, key: str) -> Optional[Any]:
        for candidate in STYLE_FALLBACK[validate_style(style)]:
            value = self._style(locale, candidate).get("compound", {}).get(key)
            if value is not None:
                return value
        return None

    def compound_pattern(
        self,
        locale: str,
        style: str,
        key: str,
        grammatical_case: str = DEFAULT_CASE,
        plural: str = DEFAULT_PLURAL,
        gender: Optional[str] = None,
    ) -> Optional[str]:
        """Pattern for a compound key such as ``per``, ``times``, ``power2`` or ``10p3``."""
        value = self.compound(locale, style, key)
        if value is None or isinstance(value, str):
            return value

        if gender and gender in value.get("genders", {}):
            value = value["genders"][gender]
        table = pattern_table(value)
        for case, count in (
            (grammatical_case, plural),
            (DEFAULT_CASE, plural),
            (grammatical_case, DEFAULT_PLURAL),
            (DEFAULT_CASE, DEFAULT_PLURAL),
        ):
            pattern = table.get(case, {}).get(count)
            if pattern is not None:
                return pattern
        return None

    def default_gender(self, locale: str) -> Optional[str]:
        return self.locale_data(locale).get("default_gender")

    def gender(self, locale: str, style: str, name: str) -> Optional[str]:
        entry = self.unit_entry(locale, style, name) or {}
        return entry.get("gender") or self.default_gender(locale)

    def display_name(self, locale: str, style: str, name: str) -> Optional[str]:
        entry = self.unit_entry(locale, style, name)
        return entry.get("display_name") if entry else None

    def per_unit_pattern(self, locale: str, style: str, name: str) -> Optional[str]:
        entry = self.unit_entry(locale, style, name)
        return entry.get("per_unit") if entry else None


DEFAULT_STORE = LocaleStore()
