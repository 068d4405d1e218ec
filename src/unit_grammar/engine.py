"""Grammar-driven unit formatting.

Formatting renders the grammar tree of a unit into one pattern with a
single ``{0}`` placeholder for the number, then substitutes the
formatted number. Only the leftmost unit keeps the placeholder; every
other unit contributes its text with the placeholder removed.

Pattern lookup falls back in this order: the integer-only pattern for
exactly the requested case and plural (for non-negative integer values),
the requested case and plural, the nominative with that plural, the
requested case with ``other``, then nominative ``other``. A pattern
without a placeholder (such as "a dozen") is only used when the value
itself is exactly 0, 1 or 2.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import structlog

from unitkernel.errors import NoPatternError, UnknownGrammaticalCaseError
from unitkernel.numeric import Number
from unitkernel.parsed import ParsedUnit

from .features import GrammaticalFeatures, ResolvedGrammar, grammatical_features, resolve_grammar
from .locale_data import DEFAULT_STORE, KNOWN_GRAMMATICAL_CASES, LocaleStore, pattern_table, validate_style
from .nodes import (
    DEFAULT_CASE,
    DEFAULT_PLURAL,
    CountNode,
    GrammarNode,
    Inflection,
    PerNode,
    PowerNode,
    TimesNode,
    UnitNode,
    build_tree,
    leading_leaf,
    leaves,
)
from .numbers import (
    apply_number_options,
    babel_locale,
    currency_name,
    exact_plural,
    format_currency_amount,
    format_list,
    format_number,
    plural_category,
)

logger = structlog.get_logger(__name__)

PLACEHOLDER = "{0}"
DEFAULT_COUNT_PATTERN = "{0} × {1}"


@dataclass(frozen=True)
class _Context:
    locale: str
    style: str
    features: GrammaticalFeatures
    exact: Optional[str] = None
    integer: bool = False


def strip_placeholder(pattern: str) -> str:
    """Unit text of a pattern: ``"{0} meters"`` gives ``"meters"``."""
    return pattern.replace(PLACEHOLDER, "").strip()


def with_core(pattern: str, transform: Callable[[str], str]) -> str:
    """Apply ``transform`` to the unit text of a pattern, keeping the placeholder.

    Examples:
        >>> with_core("{0} meters", str.upper)
        '{0} METERS'
        >>> with_core("$ {0}", str.upper)
        '$ {0}'
    """
    if PLACEHOLDER not in pattern:
        return transform(pattern)

    before, after = pattern.split(PLACEHOLDER, 1)
    if not before.strip():
        core = after.strip()
        if not core:
            return transform(PLACEHOLDER)
        separator = after[: len(after) - len(after.lstrip())]
        return f"{before}{PLACEHOLDER}{separator}{transform(core)}"

    core = before.strip()
    separator = before[len(before.rstrip()):]
    return f"{transform(core)}{separator}{PLACEHOLDER}{after}"


def fuse(modifier: str, core: str) -> str:
    """Merge a prefix or power pattern onto a unit's text.

    Examples:
        >>> fuse("kilo{0}", "meters")
        'kilometers'
        >>> fuse("Mega{0}", "Meter")
        'Megameter'
        >>> fuse("square {0}", "meters")
        'square meters'
    """
    before, _, after = modifier.partition(PLACEHOLDER)
    # Word prefixes join the unit into one word; symbols such as "k" keep its case
    if len(before) > 2 and before[-1].islower():
        core = core[:1].lower() + core[1:]
    return f"{before}{core}{after}"


class UnitFormatter:
    """Formats units with the patterns of a :class:`LocaleStore`."""

    def __init__(self, store: LocaleStore = DEFAULT_STORE):
        self.store = store

    def _context(self, locale: str, style: str, value: Optional[Number] = None) -> _Context:
        validate_style(style)
        self.store.resolve_locale(locale)
        language = babel_locale(locale).language
        return _Context(
            locale=locale,
            style=style,
            features=grammatical_features(language),
            exact=exact_plural(value) if value is not None else None,
            integer=value is not None and value >= 0 and value == int(value),
        )

    @staticmethod
    def _check_case(grammatical_case: str) -> None:
        if grammatical_case not in KNOWN_GRAMMATICAL_CASES:
            raise UnknownGrammaticalCaseError(
                f"The grammatical case {grammatical_case!r} is not known. "
                f"The valid cases are {list(KNOWN_GRAMMATICAL_CASES)}"
            )

    def tree(self, parsed: ParsedUnit, locale: str, style: str = "long", name: Optional[str] = None) -> GrammarNode:
        return build_tree(parsed, self.store.known_units(locale, style), name)

    def format(
        self,
        value: Number,
        parsed: ParsedUnit,
        name: Optional[str] = None,
        locale: str = "en",
        style: str = "long",
        grammatical_case: str = DEFAULT_CASE,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Format a value of a unit as localized text.

        Args:
            value: The number
            parsed: Parsed unit
            name: Canonical unit name, used for whole-name pattern lookup
            locale: Locale identifier such as ``en`` or ``de-CH``
            style: ``long``, ``short`` or ``narrow``
            grammatical_case: Case to inflect into, for locales that have cases
            options: Number options: ``round_nearest``, ``fractional_digits``,
                ``rounding_mode`` and a Babel ``format`` pattern

        Returns:
            Formatted string, for example ``"3 Metern"``

        Raises:
            UnknownLocaleError: If no unit data serves the locale
            UnknownStyleError: If the style is not known
            UnknownGrammaticalCaseError: If the case is not a known grammatical case
            NoPatternError: If a unit has no pattern after all fallbacks
        """
        options = options or {}
        value = apply_number_options(value, options)
        context = self._context(locale, style, value)
        self._check_case(grammatical_case)

        tree = self.tree(parsed, locale, style, name)
        inflection = Inflection(grammatical_case, plural_category(value, locale))
        pattern = self._render(tree, inflection, context, bearing=True)

        lead = leading_leaf(tree)
        if lead is not None and lead.currency:
            number = format_currency_amount(value, lead.currency, locale)
        else:
            number = format_number(value, locale, {"format": options.get("format")})

        logger.debug("Formatted unit", unit=name, locale=locale, style=style, pattern=pattern)
        return pattern.replace(PLACEHOLDER, number)

    def pattern(
        self,
        parsed: ParsedUnit,
        name: Optional[str] = None,
        locale: str = "en",
        style: str = "long",
        grammatical_case: str = DEFAULT_CASE,
        plural: str = DEFAULT_PLURAL,
    ) -> str:
        """The unsubstituted pattern of a unit, such as ``"{0} kilometers per hour"``."""
        context = self._context(locale, style)
        self._check_case(grammatical_case)
        tree = self.tree(parsed, locale, style, name)
        return self._render(tree, Inflection(grammatical_case, plural), context, bearing=True)

    def display_name(self, parsed: ParsedUnit, name: Optional[str] = None, locale: str = "en", style: str = "long") -> str:
        """Localized name of a unit without a number, e.g. ``"kilometers per hour"``."""
        context = self._context(locale, style)
        tree = self.tree(parsed, locale, style, name)
        if isinstance(tree, UnitNode) and not tree.currency:
            display = self.store.display_name(locale, style, tree.name)
            if display:
                return display
        return self._render(tree, Inflection(), context, bearing=False)

    def grammar(
        self,
        parsed: ParsedUnit,
        name: Optional[str] = None,
        locale: str = "en",
        style: str = "long",
        value: Optional[Number] = None,
        grammatical_case: str = DEFAULT_CASE,
    ) -> Union[ResolvedGrammar, Tuple[ResolvedGrammar, ResolvedGrammar]]:
        """The case and plural each unit of a compound takes."""
        context = self._context(locale, style, value)
        self._check_case(grammatical_case)
        plural = plural_category(value, locale) if value is not None else DEFAULT_PLURAL
        tree = self.tree(parsed, locale, style, name)
        return resolve_grammar(tree, Inflection(grammatical_case, plural), context.features)

    def join(self, formatted: Sequence[str], locale: str = "en", style: str = "long") -> str:
        """Join several formatted units, as for a decomposed value."""
        return format_list(formatted, locale, validate_style(style))

    def _render(self, node: GrammarNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        if isinstance(node, UnitNode):
            return self._render_unit(node, inflection, context, bearing)
        if isinstance(node, CountNode):
            return self._render_count(node, inflection, context, bearing)
        if isinstance(node, TimesNode):
            return self._render_times(node, inflection, context, bearing)
        if isinstance(node, PerNode):
            return self._render_per(node, inflection, context, bearing)
        return self._render_modifier(node, inflection, context, bearing)

    def _render_unit(self, node: UnitNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        if node.currency:
            if bearing:
                return PLACEHOLDER
            count = 1 if inflection.plural == "one" else 2
            return currency_name(node.currency, context.locale, count=count)

        entry = self.store.unit_entry(context.locale, context.style, node.name)
        if entry is None:
            raise NoPatternError(node.name, inflection.grammatical_case, None, inflection.plural)

        pattern = self._select(entry, node.name, inflection, context, bearing)
        return pattern if bearing else strip_placeholder(pattern)

    def _select(self, entry: Dict[str, Any], name: str, inflection: Inflection, context: _Context, bearing: bool) -> str:
        case, plural = inflection.grammatical_case, inflection.plural
        lookups: List[Tuple[Dict[str, Dict[str, str]], str, str]] = []
        if bearing and context.integer and "integer" in entry:
            # Only the exact case and plural; integer patterns have no fallbacks
            lookups.append((pattern_table(entry["integer"]), case, plural))

        table = pattern_table(entry)
        lookups += [
            (table, case, plural),
            (table, DEFAULT_CASE, plural),
            (table, case, DEFAULT_PLURAL),
            (table, DEFAULT_CASE, DEFAULT_PLURAL),
        ]
        for source, lookup_case, lookup_plural in lookups:
            pattern = source.get(lookup_case, {}).get(lookup_plural)
            if pattern is None:
                continue
            if bearing and PLACEHOLDER not in pattern and lookup_plural != context.exact:
                continue
            return pattern

        gender = entry.get("gender") or self.store.default_gender(context.locale)
        raise NoPatternError(name, case, gender, plural)

    def _render_count(self, node: CountNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        count_context = replace(context, exact=exact_plural(node.count), integer=True)
        count_inflection = replace(inflection, plural=plural_category(node.count, context.locale))
        inner = self._render(node.inner, count_inflection, count_context, bearing=True)
        text = inner.replace(PLACEHOLDER, format_number(node.count, context.locale))
        if not bearing:
            return text
        pattern = self.store.compound_pattern(context.locale, context.style, "count") or DEFAULT_COUNT_PATTERN
        return pattern.replace("{1}", text)

    def _render_times(self, node: TimesNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        features = context.features
        left = self._render(node.left, features.derive("times", 0, inflection), context, bearing)
        right = self._render(node.right, features.derive("times", 1, inflection), context, False)
        times = self._compound(context, "times", inflection)
        return with_core(left, lambda core: times.replace("{1}", right).replace(PLACEHOLDER, core))

    def _render_per(self, node: PerNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        features = context.features
        numerator = self._render(node.numerator, features.derive("per", 0, inflection), context, bearing)

        denominator = node.denominator
        if isinstance(denominator, UnitNode) and not denominator.currency:
            per_unit = self.store.per_unit_pattern(context.locale, context.style, denominator.name)
            if per_unit:
                return per_unit.replace(PLACEHOLDER, numerator).strip()

        lower = self._render(denominator, features.derive("per", 1, inflection), context, False)
        per = self._compound(context, "per", inflection)
        return per.replace("{1}", lower).replace(PLACEHOLDER, numerator).strip()

    def _render_modifier(self, node: GrammarNode, inflection: Inflection, context: _Context, bearing: bool) -> str:
        if isinstance(node, PowerNode):
            structure, key = "power", node.power
        else:
            structure, key = "prefix", node.prefix  # type: ignore[union-attr]

        features = context.features
        inner = self._render(node.inner, features.derive(structure, 1, inflection), context, bearing)  # type: ignore[union-attr]
        outer = features.derive(structure, 0, inflection)
        leaf = leaves(node)[0]
        gender = self.store.gender(context.locale, context.style, leaf.name)
        modifier = self.store.compound_pattern(
            context.locale, context.style, key, outer.grammatical_case, outer.plural, gender
        )
        if modifier is None:
            raise NoPatternError(key, outer.grammatical_case, gender, outer.plural)
        return with_core(inner, lambda core: fuse(modifier, core))

    def _compound(self, context: _Context, key: str, inflection: Inflection) -> str:
        pattern = self.store.compound_pattern(
            context.locale, context.style, key, inflection.grammatical_case, inflection.plural
        )
        if pattern is None:
            raise NoPatternError(key, inflection.grammatical_case, None, inflection.plural)
        return pattern


DEFAULT_FORMATTER = UnitFormatter()
