"""Grammatical feature derivation for compound units.

For every structure (``per``, ``times``, ``power``, ``prefix``) a locale
says which case and plural category each of its two components takes.
The value ``compound`` means "inherit from the enclosing compound".
For ``power`` and ``prefix`` component 0 is the modifier pattern and
component 1 the unit it wraps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Tuple, Union

from .locale_data import DATA_DIR, load_json
from .nodes import (
    CountNode,
    GrammarNode,
    Inflection,
    PerNode,
    PowerNode,
    Structure,
    TimesNode,
    UnitNode,
)

COMPOUND = "compound"
ROOT = "root"

# Flat resolution of a tree: (unit or modifier key, inflection)
ResolvedGrammar = List[Tuple[str, Inflection]]


@dataclass(frozen=True)
class GrammaticalFeatures:
    """Derivation rules of one locale."""

    case: Dict[str, Tuple[str, str]] = field(default_factory=dict)
    plural: Dict[str, Tuple[str, str]] = field(default_factory=dict)

    def derive(self, structure: Structure, component: int, compound: Inflection) -> Inflection:
        """Inflection of ``component`` (0 or 1) of ``structure`` inside ``compound``."""
        case = self.case.get(structure, (COMPOUND, COMPOUND))[component]
        plural = self.plural.get(structure, (COMPOUND, COMPOUND))[component]
        return Inflection(
            grammatical_case=compound.grammatical_case if case == COMPOUND else case,
            plural=compound.plural if plural == COMPOUND else plural,
        )


@lru_cache(maxsize=1)
def _feature_table() -> Dict[str, Dict[str, Dict[str, List[str]]]]:
    return load_json(DATA_DIR / "grammatical_features.json")


@lru_cache(maxsize=32)
def grammatical_features(language: str) -> GrammaticalFeatures:
    """Derivation rules for a language, the root rules overridden per language.

    Examples:
        >>> grammatical_features("de").derive("per", 1, Inflection()).grammatical_case
        'accusative'
    """
    table = _feature_table()
    merged: Dict[str, Dict[str, Tuple[str, str]]] = {"case": {}, "plural": {}}
    for source in (table[ROOT], table.get(language, {})):
        for feature, structures in source.items():
            merged[feature].update((structure, tuple(values)) for structure, values in structures.items())
    return GrammaticalFeatures(case=merged["case"], plural=merged["plural"])


def resolve_grammar(
    node: GrammarNode,
    inflection: Inflection,
    features: GrammaticalFeatures,
) -> Union[ResolvedGrammar, Tuple[ResolvedGrammar, ResolvedGrammar]]:
    """Flatten a tree into the inflection each unit takes.

    A ``per`` root gives a ``(numerator, denominator)`` pair of lists.

    Examples:
        ``kilogram_meter`` as plural ``other`` resolves to
        ``[("kilogram", one), ("meter", other)]`` with the root rules.
    """
    if isinstance(node, PerNode):
        return (
            _flatten(node.numerator, features.derive("per", 0, inflection), features),
            _flatten(node.denominator, features.derive("per", 1, inflection), features),
        )
    return _flatten(node, inflection, features)


def _flatten(node: GrammarNode, inflection: Inflection, features: GrammaticalFeatures) -> ResolvedGrammar:
    if isinstance(node, UnitNode):
        return [(node.name, inflection)]
    if isinstance(node, CountNode):
        return [(str(node.count), inflection)] + _flatten(node.inner, inflection, features)
    if isinstance(node, TimesNode):
        return (
            _flatten(node.left, features.derive("times", 0, inflection), features)
            + _flatten(node.right, features.derive("times", 1, inflection), features)
        )
    if isinstance(node, PerNode):
        return (
            _flatten(node.numerator, features.derive("per", 0, inflection), features)
            + _flatten(node.denominator, features.derive("per", 1, inflection), features)
        )

    structure: Structure = "power" if isinstance(node, PowerNode) else "prefix"
    key = node.power if isinstance(node, PowerNode) else node.prefix
    return [(key, features.derive(structure, 0, inflection))] + _flatten(
        node.inner, features.derive(structure, 1, inflection), features
    )
