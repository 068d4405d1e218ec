"""Parser for compound unit names.

Turns names such as ``"kilogram_meter_per_cubic_second_ampere"`` into a
canonically ordered :data:`~unitkernel.parsed.ParsedUnit`. The grammar:

* spaces and hyphens are separators, like ``_``
* the first ``_per_`` splits numerator from denominator; any further
  ``_per_`` multiplies into the denominator
* ``square_`` and ``cubic_`` raise the following unit to a power
* SI and binary prefixes scale the unit they are attached to
* a leading integer (``100_gram``) multiplies the first unit of a part
* ``curr_<code>`` embeds a currency
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

import structlog

from .definitions import CURRENCY_PREFIX, base_unit_rank
from .dictionary import TokenDictionary
from .errors import UnknownBaseUnitError, UnknownUnitError, UnsupportedPowerError
from .parsed import Conversion, ParsedUnit, PerUnit, UnitToken, canonical_unit_name
from .prefixes import POWER_NAMES, POWER_PREFIXES, prefix_rank, prefix_scale

logger = structlog.get_logger(__name__)

PER = "_per_"
_SEPARATORS = re.compile(r"[\s\-_]+")
MAX_POWER = 3


@dataclass(frozen=True)
class _Atom:
    """A single occurrence of a unit while tokenizing."""

    name: str
    unit: str
    prefix: Optional[str] = None
    multiplier: int = 1
    currency: Optional[str] = None


def normalize_unit_name(name: str) -> str:
    """Lower-case a unit name and collapse separators to single underscores.

    Examples:
        >>> normalize_unit_name("Meter per Second")
        'meter_per_second'
        >>> normalize_unit_name("liter-per-100-kilometer")
        'liter_per_100_kilometer'
    """
    return _SEPARATORS.sub("_", str(name).strip().lower()).strip("_")


class UnitParser:
    """Parses unit names against a :class:`TokenDictionary`.

    Parse results are memoized. Parsing is deterministic, so concurrent
    population of the cache is harmless.
    """

    def __init__(self, dictionary: TokenDictionary, cache_size: int = 4096):
        self.dictionary = dictionary
        self._cached_parse = lru_cache(maxsize=cache_size)(self._parse)

    def parse(self, name: str) -> ParsedUnit:
        """Parse a unit name.

        Args:
            name: Unit name such as ``"meter_per_second"``

        Returns:
            Tuple of tokens, or a PerUnit for compound "per" units

        Raises:
            UnknownUnitError: If part of the name matches no unit
            UnsupportedPowerError: If a unit repeats more than three times
        """
        return self._cached_parse(normalize_unit_name(name))

    def canonical_name(self, name: str) -> str:
        """Return the canonical (sorted, power-folded) name of a unit."""
        return canonical_unit_name(self.parse(name))

    def cache_info(self):
        return self._cached_parse.cache_info()

    def _parse(self, normalized: str) -> ParsedUnit:
        if not normalized:
            raise UnknownUnitError(normalized)

        resolved = self.dictionary.resolve_whole_name(normalized)
        numerator, per, denominator = resolved.partition(PER)

        if per:
            # a_per_b_per_c is a_per_(b*c)
            denominator = denominator.replace(PER, "_")
            if not numerator or not denominator:
                raise UnknownUnitError(resolved, normalized)
            parsed: ParsedUnit = PerUnit(
                numerator=self._parse_part(numerator, normalized),
                denominator=self._parse_part(denominator, normalized),
            )
        else:
            parsed = self._parse_part(resolved, normalized)

        logger.debug("Parsed unit", unit=normalized, canonical=canonical_unit_name(parsed))
        return parsed

    def _parse_part(self, part: str, original: str) -> Tuple[UnitToken, ...]:
        atoms = self._tokenize(part, original)
        grouped = _group(atoms)
        tokens = [self._resolve(atom, power) for atom, power in grouped]
        return tuple(sorted(tokens, key=self._sort_key))

    def _tokenize(self, part: str, original: str) -> List[_Atom]:
        """Split a numerator or denominator into atoms, expanding powers."""
        words = part.split("_")
        atoms: List[_Atom] = []
        pending_power = 1
        multiplier = 1
        index = 0

        while index < len(words):
            word = words[index]

            if word.isdigit() and index == 0 and len(words) > 1:
                multiplier = int(word)
                index += 1
                continue

            if word in POWER_PREFIXES and pending_power == 1 and index + 1 < len(words):
                pending_power = POWER_PREFIXES[word]
                index += 1
                continue

            atom, index = self._match_atom(words, index, original)
            if multiplier != 1:
                atom = _Atom(
                    name=f"{multiplier}_{atom.name}",
                    unit=atom.unit,
                    prefix=atom.prefix,
                    multiplier=multiplier,
                    currency=atom.currency,
                )
                multiplier = 1

            atoms.extend([atom] * pending_power)
            pending_power = 1

        return atoms

    def _match_atom(self, words: List[str], index: int, original: str) -> Tuple[_Atom, int]:
        word = words[index]

        if word == CURRENCY_PREFIX and index + 1 < len(words) and self.dictionary.is_currency(words[index + 1]):
            code = words[index + 1]
            name = f"{CURRENCY_PREFIX}_{code}"
            return _Atom(name=name, unit=name, currency=code.upper()), index + 2

        matched = self.dictionary.match(words, index)
        if matched is not None:
            name, end = matched
            return _Atom(name=name, unit=name), end

        prefixed = self.dictionary.match_prefixed(words, index)
        if prefixed is not None:
            prefix, name, end = prefixed
            return _Atom(name=f"{prefix}{name}", unit=name, prefix=prefix), end

        raise UnknownUnitError("_".join(words[index:]), original)

    def _resolve(self, atom: _Atom, power: int) -> UnitToken:
        """Resolve an atom raised to ``power`` into a token with its conversion."""
        if atom.currency:
            definition = self.dictionary.currency_definition(atom.currency)
        else:
            definition = self.dictionary.definition(atom.unit)
            if definition is None:
                raise UnknownUnitError(atom.unit)

        factor = definition.factor
        if factor is not None:
            if atom.prefix:
                factor = factor * prefix_scale(atom.prefix)
            factor = factor ** power * atom.multiplier

        offset = definition.offset if power == 1 else Fraction(0)
        if power > 1:
            base_unit: Tuple[str, ...] = (POWER_NAMES[power], definition.base_unit)
            name = f"{POWER_NAMES[power]}_{atom.name}"
            if atom.multiplier != 1:
                name = f"{atom.multiplier}_{POWER_NAMES[power]}_{atom.prefix or ''}{atom.unit}"
        else:
            base_unit = (definition.base_unit,)
            name = atom.name

        return UnitToken(
            name=name,
            conversion=Conversion(factor=factor, offset=offset, base_unit=base_unit),
            unit=f"{atom.prefix or ''}{atom.unit}",
            prefix=atom.prefix,
            power=power,
            multiplier=atom.multiplier,
            currency=atom.currency,
        )

    def _sort_key(self, token: UnitToken) -> Tuple[int, Fraction, str]:
        """Base unit rank, then larger prefixes first, then name."""
        try:
            rank = base_unit_rank(token.conversion.base_name)
        except KeyError:
            raise UnknownBaseUnitError(
                f"Base unit {token.conversion.base_name!r} of {token.name!r} is not ranked"
            ) from None

        prefix = token.prefix or self.dictionary.implied_prefix(token.unit)
        return rank, -prefix_rank(prefix), token.name


def _group(atoms: List[_Atom]) -> List[Tuple[_Atom, int]]:
    """Group identical atoms, preserving first appearance, into (atom, power)."""
    counts: Dict[_Atom, int] = {}
    for atom in atoms:
        counts[atom] = counts.get(atom, 0) + 1

    grouped = []
    for atom, count in counts.items():
        if count > MAX_POWER:
            raise UnsupportedPowerError(atom.name, count)
        grouped.append((atom, count))
    return grouped


@lru_cache(maxsize=1)
def default_parser() -> UnitParser:
    """Parser over the built-in token dictionary."""
    return UnitParser(TokenDictionary.default())


def parse_unit(name: str) -> ParsedUnit:
    """Parse a unit name with the built-in dictionary.

    Examples:
        >>> tokens = parse_unit("kilogram_meter")
        >>> [token.name for token in tokens]
        ['kilogram', 'meter']
    """
    return default_parser().parse(name)
