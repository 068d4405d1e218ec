"""Token dictionary: every parseable atomic unit name.

The dictionary is built once from the built-in definitions (plus any
additional units) and is read-only afterwards. Longest-match lookup walks
a word-level trie keyed on the ``_`` separated words of a unit name.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog
from babel.numbers import list_currencies

from .definitions import (
    BASE_UNIT_RANKS,
    CURRENCY_PREFIX,
    TOKEN_ALIASES,
    UNIT_DEFINITIONS,
    WHOLE_NAME_ALIASES,
    UnitDefinition,
)
from .errors import AdditionalUnitError
from .prefixes import split_prefix

logger = structlog.get_logger(__name__)

_TERMINAL = ""


def _build_trie(names: Mapping[str, str]) -> Dict[str, Any]:
    """Build a nested word trie; terminal nodes map to the canonical name."""
    root: Dict[str, Any] = {}
    for spelling, canonical in names.items():
        node = root
        for word in spelling.split("_"):
            node = node.setdefault(word, {})
        node[_TERMINAL] = canonical
    return root


class TokenDictionary:
    """Known unit tokens, aliases and currency codes."""

    def __init__(
        self,
        definitions: Mapping[str, UnitDefinition],
        token_aliases: Optional[Mapping[str, str]] = None,
        whole_name_aliases: Optional[Mapping[str, str]] = None,
        currencies: Optional[Iterable[str]] = None,
    ):
        self._definitions: Dict[str, UnitDefinition] = dict(definitions)
        self._token_aliases = dict(token_aliases or {})
        self._whole_name_aliases = dict(whole_name_aliases or {})
        self._currencies: FrozenSet[str] = frozenset(
            code.lower() for code in (currencies if currencies is not None else list_currencies())
        )

        spellings = {name: name for name in self._definitions}
        spellings.update(
            (alias, target) for alias, target in self._token_aliases.items()
            if target in self._definitions
        )
        self._trie = _build_trie(spellings)

        logger.debug(
            "Token dictionary built",
            units=len(self._definitions),
            aliases=len(self._token_aliases),
            currencies=len(self._currencies),
        )

    @classmethod
    def default(cls) -> "TokenDictionary":
        """Dictionary of the built-in units."""
        return cls(UNIT_DEFINITIONS, TOKEN_ALIASES, WHOLE_NAME_ALIASES)

    def with_additional(self, additional: Iterable[UnitDefinition]) -> "TokenDictionary":
        """Return a new dictionary extended with additional unit definitions.

        Raises:
            AdditionalUnitError: If a unit is already defined or its base
                unit is not a known base unit
        """
        definitions = dict(self._definitions)
        for definition in additional:
            if definition.name in definitions:
                raise AdditionalUnitError(
                    f"Additional unit {definition.name!r} is already defined"
                )
            if definition.base_unit not in BASE_UNIT_RANKS:
                raise AdditionalUnitError(
                    f"Additional unit {definition.name!r} has unknown base unit "
                    f"{definition.base_unit!r}"
                )
            definitions[definition.name] = definition

        return TokenDictionary(
            definitions, self._token_aliases, self._whole_name_aliases, self._currencies
        )

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def definition(self, name: str) -> Optional[UnitDefinition]:
        return self._definitions.get(name)

    def resolve_whole_name(self, name: str) -> str:
        return self._whole_name_aliases.get(name, name)

    def is_currency(self, code: str) -> bool:
        return code.lower() in self._currencies

    def match(self, words: Sequence[str], start: int) -> Optional[Tuple[str, int]]:
        """Longest known unit starting at ``words[start]``.

        Returns:
            ``(canonical_name, end_index)`` or None
        """
        node = self._trie
        found: Optional[Tuple[str, int]] = None
        for index in range(start, len(words)):
            node = node.get(words[index])
            if node is None:
                break
            if _TERMINAL in node:
                found = (node[_TERMINAL], index + 1)
        return found

    def match_prefixed(self, words: Sequence[str], start: int) -> Optional[Tuple[str, str, int]]:
        """Longest SI or binary prefixed unit starting at ``words[start]``.

        Returns:
            ``(prefix, canonical_name, end_index)`` or None
        """
        split = split_prefix(words[start])
        if split is None:
            return None

        prefix, remainder = split
        candidate = [remainder, *words[start + 1:]]
        matched = self.match(candidate, 0)
        if matched is None:
            return None

        name, end = matched
        # A prefix never stacks on a unit that already carries one
        if self.implied_prefix(name) is not None:
            return None
        return prefix, name, start + end

    def implied_prefix(self, name: str) -> Optional[str]:
        """Prefix built into a dictionary name, such as ``kilo`` in ``kilometer``."""
        split = split_prefix(name)
        if split is not None and split[1] in self._definitions:
            return split[0]
        return None

    def currency_definition(self, code: str) -> UnitDefinition:
        base = f"{CURRENCY_PREFIX}_{code.lower()}"
        return UnitDefinition(name=base, base_unit=base, factor=Fraction(1))
