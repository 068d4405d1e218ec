"""Grammar tree for unit formatting.

A parsed unit is folded into a small binary tree before formatting:
``per`` nodes split numerator from denominator, ``times`` nodes join
adjacent units, and ``power`` and ``prefix`` nodes wrap the unit they
modify. Leaves are simple unit names that a locale can translate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Container, List, Literal, Optional, Tuple, Union

from unitkernel.parsed import ParsedUnit, PerUnit, UnitToken, canonical_unit_name
from unitkernel.prefixes import POWER_NAMES, prefix_key

# Structural positions used by the grammatical feature tables
Structure = Literal["per", "times", "power", "prefix"]

DEFAULT_CASE = "nominative"
DEFAULT_PLURAL = "other"


@dataclass(frozen=True)
class Inflection:
    """Grammatical case and plural category requested for a node."""

    grammatical_case: str = DEFAULT_CASE
    plural: str = DEFAULT_PLURAL


@dataclass(frozen=True)
class UnitNode:
    """A unit the locale data translates directly."""

    name: str
    currency: Optional[str] = None


@dataclass(frozen=True)
class CountNode:
    """An integer multiplier, as in ``100_gram``."""

    count: int
    inner: "GrammarNode"


@dataclass(frozen=True)
class PowerNode:
    """``square`` or ``cubic`` applied to a unit; ``power`` is ``power2`` or ``power3``."""

    power: str
    inner: "GrammarNode"


@dataclass(frozen=True)
class PrefixNode:
    """An SI or binary prefix applied to a unit; ``prefix`` is a key like ``10p3``."""

    prefix: str
    inner: "GrammarNode"


@dataclass(frozen=True)
class TimesNode:
    left: "GrammarNode"
    right: "GrammarNode"


@dataclass(frozen=True)
class PerNode:
    numerator: "GrammarNode"
    denominator: "GrammarNode"


GrammarNode = Union[UnitNode, CountNode, PowerNode, PrefixNode, TimesNode, PerNode]


def _core_unit(token: UnitToken) -> str:
    if token.prefix:
        return token.unit[len(token.prefix):]
    return token.unit or token.name


def _token_node(token: UnitToken, known: Container[str]) -> GrammarNode:
    """Tree for one token, using the largest name the locale knows.

    ``square_kilometer`` stays whole when translated, otherwise it becomes
    ``power2(kilometer)`` and then ``power2(10p3(meter))``.
    """
    if token.currency:
        node: GrammarNode = UnitNode(name=token.name, currency=token.currency)
    elif token.power > 1 and _powered_name(token) in known:
        node = UnitNode(name=_powered_name(token))
    else:
        if token.unit in known or not token.prefix:
            node = UnitNode(name=token.unit or token.name)
        else:
            node = PrefixNode(prefix=prefix_key(token.prefix), inner=UnitNode(name=_core_unit(token)))
        if token.power > 1:
            node = PowerNode(power=prefix_key(POWER_NAMES[token.power]), inner=node)

    if token.multiplier != 1:
        node = CountNode(count=token.multiplier, inner=node)
    return node


def _powered_name(token: UnitToken) -> str:
    return f"{POWER_NAMES[token.power]}_{token.unit or token.name}"


def _fold(tokens: Tuple[UnitToken, ...], known: Container[str]) -> GrammarNode:
    nodes = [_token_node(token, known) for token in tokens]
    tree = nodes[0]
    for node in nodes[1:]:
        tree = TimesNode(left=tree, right=node)
    return tree


def build_tree(parsed: ParsedUnit, known: Container[str], name: Optional[str] = None) -> GrammarNode:
    """Fold a parsed unit into a grammar tree.

    Args:
        parsed: Parsed unit
        known: Unit names the target locale translates as a whole
        name: Canonical unit name, used for the whole-name lookup

    Returns:
        Root node of the tree
    """
    name = name or canonical_unit_name(parsed)
    if name in known:
        return UnitNode(name=name)

    if isinstance(parsed, PerUnit):
        numerator = _fold(parsed.numerator, known) if parsed.numerator else None
        denominator = _fold(parsed.denominator, known)
        if numerator is None:
            raise ValueError(f"Unit {name!r} has an empty numerator")
        return PerNode(numerator=numerator, denominator=denominator)
    return _fold(parsed, known)


def leaves(node: GrammarNode) -> List[UnitNode]:
    """Unit leaves of a tree, left to right."""
    if isinstance(node, UnitNode):
        return [node]
    if isinstance(node, TimesNode):
        return leaves(node.left) + leaves(node.right)
    if isinstance(node, PerNode):
        return leaves(node.numerator) + leaves(node.denominator)
    return leaves(node.inner)


def leading_leaf(node: GrammarNode) -> Optional[UnitNode]:
    """The leaf that carries the number, or None when a count leads."""
    if isinstance(node, UnitNode):
        return node
    if isinstance(node, CountNode):
        return None
    if isinstance(node, TimesNode):
        return leading_leaf(node.left)
    if isinstance(node, PerNode):
        return leading_leaf(node.numerator)
    return leading_leaf(node.inner)


__all__ = [
    "Inflection", "UnitNode", "CountNode", "PowerNode", "PrefixNode", "TimesNode",
    "PerNode", "GrammarNode", "Structure", "DEFAULT_CASE", "DEFAULT_PLURAL",
    "build_tree", "leaves", "leading_leaf",
]
