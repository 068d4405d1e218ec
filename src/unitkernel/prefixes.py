"""Scale tables for SI, binary and power prefixes.

Scales are exact rationals. Each prefix also maps to the key under which
locale pattern tables store its localized form (``10p3`` for kilo,
``1024p1`` for kibi, ``power2`` for square).
"""

from __future__ import annotations

from fractions import Fraction
from typing import Dict, Optional, Tuple

SI_PREFIXES: Dict[str, Fraction] = {
    "quecto": Fraction(1, 10**30),
    "ronto": Fraction(1, 10**27),
    "yocto": Fraction(1, 10**24),
    "zepto": Fraction(1, 10**21),
    "atto": Fraction(1, 10**18),
    "femto": Fraction(1, 10**15),
    "pico": Fraction(1, 10**12),
    "nano": Fraction(1, 10**9),
    "micro": Fraction(1, 10**6),
    "milli": Fraction(1, 10**3),
    "centi": Fraction(1, 10**2),
    "deci": Fraction(1, 10),
    "deka": Fraction(10),
    "hecto": Fraction(10**2),
    "kilo": Fraction(10**3),
    "mega": Fraction(10**6),
    "giga": Fraction(10**9),
    "tera": Fraction(10**12),
    "peta": Fraction(10**15),
    "exa": Fraction(10**18),
    "zetta": Fraction(10**21),
    "yotta": Fraction(10**24),
    "ronna": Fraction(10**27),
    "quetta": Fraction(10**30),
}

SI_PREFIX_EXPONENTS: Dict[str, int] = {
    "quecto": -30, "ronto": -27, "yocto": -24, "zepto": -21, "atto": -18,
    "femto": -15, "pico": -12, "nano": -9, "micro": -6, "milli": -3,
    "centi": -2, "deci": -1, "deka": 1, "hecto": 2, "kilo": 3, "mega": 6,
    "giga": 9, "tera": 12, "peta": 15, "exa": 18, "zetta": 21, "yotta": 24,
    "ronna": 27, "quetta": 30,
}

BINARY_PREFIXES: Dict[str, Fraction] = {
    "kibi": Fraction(1024),
    "mebi": Fraction(1024**2),
    "gibi": Fraction(1024**3),
    "tebi": Fraction(1024**4),
    "pebi": Fraction(1024**5),
    "exbi": Fraction(1024**6),
    "zebi": Fraction(1024**7),
    "yobi": Fraction(1024**8),
}

POWER_PREFIXES: Dict[str, int] = {
    "square": 2,
    "cubic": 3,
}

POWER_NAMES: Dict[int, str] = {power: name for name, power in POWER_PREFIXES.items()}

# Longest first: "exbi" is tried before "exa".
_PREFIXES_BY_LENGTH: Tuple[str, ...] = tuple(
    sorted(list(SI_PREFIXES) + list(BINARY_PREFIXES), key=lambda p: (-len(p), p))
)


def prefix_scale(prefix: str) -> Fraction:
    """Return the exact scale factor of an SI or binary prefix.

    Args:
        prefix: Prefix name such as ``"kilo"`` or ``"kibi"``

    Returns:
        Scale as a Fraction

    Raises:
        KeyError: If the prefix is unknown

    Examples:
        >>> prefix_scale("kilo")
        Fraction(1000, 1)
        >>> prefix_scale("kibi")
        Fraction(1024, 1)
    """
    if prefix in SI_PREFIXES:
        return SI_PREFIXES[prefix]
    return BINARY_PREFIXES[prefix]


def prefix_key(prefix: str) -> str:
    """Return the pattern table key for a prefix (``10p3``, ``10p_3``, ``1024p2``, ``power2``)."""
    if prefix in SI_PREFIX_EXPONENTS:
        exponent = SI_PREFIX_EXPONENTS[prefix]
        return f"10p{exponent}" if exponent > 0 else f"10p_{-exponent}"
    if prefix in BINARY_PREFIXES:
        return f"1024p{list(BINARY_PREFIXES).index(prefix) + 1}"
    if prefix in POWER_PREFIXES:
        return f"power{POWER_PREFIXES[prefix]}"
    raise KeyError(prefix)


def split_prefix(word: str) -> Optional[Tuple[str, str]]:
    """Split a leading SI or binary prefix from a word.

    Returns:
        ``(prefix, remainder)`` or None when the word has no prefix
        followed by a non-empty remainder
    """
    for prefix in _PREFIXES_BY_LENGTH:
        if word.startswith(prefix) and len(word) > len(prefix):
            return prefix, word[len(prefix):]
    return None


def prefix_rank(prefix: Optional[str]) -> Fraction:
    """Sort weight for a prefix: larger scales sort first, unprefixed units weigh 1."""
    if prefix is None:
        return Fraction(1)
    return prefix_scale(prefix)
