"""The process-wide unit registry.

The registry bundles the token dictionary, the parser and the formatter
used by every public operation. It is built lazily on first use from
the settings, and replaced (never mutated) when additional units are
configured.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import structlog

from unit_grammar.engine import UnitFormatter
from unit_grammar.locale_data import DEFAULT_STORE, LocaleStore
from unitkernel.definitions import UNIT_DEFINITIONS, UnitDefinition
from unitkernel.dictionary import TokenDictionary
from unitkernel.parser import UnitParser

from .additional import build_definitions, load_additional_units
from .config import UnitBridgeSettings, get_settings

logger = structlog.get_logger(__name__)


class UnitRegistry:
    """Dictionary, parser and formatter for one set of unit definitions."""

    def __init__(
        self,
        dictionary: Optional[TokenDictionary] = None,
        store: LocaleStore = DEFAULT_STORE,
        cache_size: int = 4096,
        additional: Optional[List[UnitDefinition]] = None,
    ):
        self.dictionary = dictionary or TokenDictionary.default()
        self.store = store
        self.parser = UnitParser(self.dictionary, cache_size=cache_size)
        self.formatter = UnitFormatter(store)
        self.additional = list(additional or [])
        self.cache_size = cache_size

    def with_units(self, units: Mapping[str, Mapping[str, Any]]) -> "UnitRegistry":
        """Return a registry extended with additional unit configurations.

        Raises:
            AdditionalUnitError: If a unit is invalid or already defined
        """
        definitions, localizations = build_definitions(units, self.dictionary)
        registry = UnitRegistry(
            dictionary=self.dictionary.with_additional(definitions),
            store=self.store.with_overlays(localizations),
            cache_size=self.cache_size,
            additional=self.additional + definitions,
        )
        logger.debug(
            "Registered additional units",
            units=[definition.name for definition in definitions],
            locales=sorted(localizations),
        )
        return registry

    def definition(self, name: str) -> Optional[UnitDefinition]:
        return self.dictionary.definition(name)

    def is_additional(self, name: str) -> bool:
        return any(definition.name == name for definition in self.additional)

    def stats(self) -> Dict[str, Any]:
        info = self.parser.cache_info()
        return {
            "units": len(self.dictionary),
            "builtin_units": len(UNIT_DEFINITIONS),
            "additional_units": [definition.name for definition in self.additional],
            "parse_cache_hits": info.hits,
            "parse_cache_misses": info.misses,
            "parse_cache_size": info.currsize,
            "locales": self.store.available_locales(),
        }


_lock = threading.Lock()
_registry: Optional[UnitRegistry] = None


def build_registry(settings: Optional[UnitBridgeSettings] = None) -> UnitRegistry:
    """Build a registry from settings, loading the additional units file if set."""
    settings = settings or get_settings()
    registry = UnitRegistry(cache_size=settings.parse_cache_size)
    if settings.additional_units_file:
        registry = registry.with_units(load_additional_units(settings.additional_units_file))
    return registry


def get_registry() -> UnitRegistry:
    """Return the shared registry, building it on first use."""
    global _registry
    if _registry is None:
        with _lock:
            if _registry is None:
                _registry = build_registry()
    return _registry


def configure_additional_units(
    units: Optional[Mapping[str, Mapping[str, Any]]] = None,
    path: Optional[Path] = None,
) -> UnitRegistry:
    """Add units to the shared registry from a mapping or a JSON file.

    Args:
        units: Mapping of unit name to configuration
        path: JSON file with a ``units`` object

    Returns:
        The new shared registry

    Raises:
        AdditionalUnitError: If a unit is invalid or already defined
        ValueError: If neither units nor path is given
    """
    if units is None and path is None:
        raise ValueError("Provide additional units or a path to an additional units file")

    global _registry
    current = get_registry()
    if path is not None:
        current = current.with_units(load_additional_units(path))
    if units:
        current = current.with_units(units)

    with _lock:
        _registry = current
    return current


def reset_registry() -> None:
    """Drop the shared registry so it is rebuilt from settings on next use."""
    global _registry
    with _lock:
        _registry = None
