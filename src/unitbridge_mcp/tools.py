"""MCP tools implementation with a quantity session.

This module provides the tools behind the UnitBridge MCP server. Each
``tool_*`` function takes a parameter dictionary and returns a JSON-safe
result dictionary; unit errors come back as ``{"success": False}``.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Union

import structlog

from unitkernel.errors import UnitError
from unitkernel.parsed import denominator_of, numerator_of

from unitbridge import arithmetic
from unitbridge.config import get_settings
from unitbridge.formatting import display_name, to_string
from unitbridge.preference import localize, preferred_units
from unitbridge.serialize import unit_to_dict, value_from_json, value_to_json
from unitbridge.unit import Unit, base_unit, convert, new_unit, unit_category

logger = structlog.get_logger(__name__)

OPERATIONS = ("add", "sub", "mul", "div", "compare")


class SessionError(Exception):
    """Raised when session operations fail."""
    pass


class UnitBridgeSession:
    """Session store for named quantities."""

    def __init__(self, max_quantities: Optional[int] = None):
        """Initialize session.

        Args:
            max_quantities: Maximum number of quantities to keep; defaults
                to the ``max_quantities`` setting
        """
        self._quantities: Dict[str, Unit] = {}
        self._max_quantities = max_quantities or get_settings().max_quantities
        self._store_times: Dict[str, float] = {}

        logger.info("UnitBridge session initialized", max_quantities=self._max_quantities)

    def cleanup_old_quantities(self) -> None:
        """Remove the oldest quantities if we exceed the limit."""
        if len(self._quantities) <= self._max_quantities:
            return

        sorted_names = sorted(self._store_times.items(), key=lambda x: x[1])
        for name, _ in sorted_names[:-self._max_quantities]:
            self.remove_quantity(name)

    def remove_quantity(self, name: str) -> None:
        if name in self._quantities:
            del self._quantities[name]
            logger.debug("Removed quantity from session", name=name)
        self._store_times.pop(name, None)

    def has_quantity(self, name: str) -> bool:
        return name in self._quantities

    def get_quantity(self, name: str) -> Unit:
        """Get a stored quantity.

        Raises:
            SessionError: If nothing is stored under the name
        """
        if name not in self._quantities:
            raise SessionError(f"Quantity not found: {name}")
        return self._quantities[name]

    def store_quantity(self, name: str, quantity: Unit) -> None:
        self._quantities[name] = quantity
        self._store_times.pop(name, None)
        self._store_times[name] = time.time()
        self.cleanup_old_quantities()
        logger.info("Stored quantity", name=name, unit=quantity.name)

    def list_quantities(self) -> List[str]:
        return list(self._quantities.keys())

    def get_session_stats(self) -> Dict[str, Any]:
        """Get session statistics."""
        return {
            "stored_quantities": len(self._quantities),
            "max_quantities": self._max_quantities,
            "quantity_names": list(self._quantities.keys()),
        }


_session = UnitBridgeSession()


def _require(params: Dict[str, Any], *names: str) -> None:
    for name in names:
        if name not in params:
            raise ValueError(f"Missing required parameter: {name}")
        if params[name] is None or params[name] == "":
            raise ValueError(f"Parameter '{name}' cannot be empty")


def _quantity(ref: Union[str, Dict[str, Any]]) -> Unit:
    """Resolve an operand: a stored quantity name or ``{"value", "unit"}``."""
    if isinstance(ref, str):
        return _session.get_quantity(ref)
    if isinstance(ref, dict) and "unit" in ref:
        return new_unit(
            ref["unit"],
            value_from_json(ref.get("value", 1)),
            usage=ref.get("usage", "default"),
        )
    raise ValueError(f"Operand must be a quantity name or an object with 'unit': {ref!r}")


def _failure(tool: str, error: Exception, **extra: Any) -> Dict[str, Any]:
    logger.error(f"{tool} tool failed", error=str(error), **extra)
    return {"success": False, "error": str(error), "error_type": type(error).__name__, **extra}


def tool_convert_unit(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Convert a value between units.

    Args:
        params: Tool parameters containing 'value', 'from_unit', 'to_unit'
            and optionally 'locale'

    Returns:
        Dictionary with the converted quantity and its formatted text

    Raises:
        ValueError: If parameters are invalid
    """
    _require(params, "value", "from_unit", "to_unit")

    try:
        source = new_unit(params["from_unit"], value_from_json(params["value"]))
        result = convert(source, params["to_unit"])

        return {
            "success": True,
            "from": unit_to_dict(source),
            "to": unit_to_dict(result),
            "approximate": float(result.value),
            "text": to_string(result, locale=params.get("locale")),
        }

    except UnitError as e:
        return _failure("convert_unit", e, from_unit=params["from_unit"], to_unit=params["to_unit"])


def tool_format_unit(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Format a value as localized text.

    Args:
        params: Tool parameters containing 'value' and 'unit'; optional
            'locale', 'style', 'grammatical_case' and 'options'

    Returns:
        Dictionary with the formatted text and display name
    """
    _require(params, "value", "unit")

    try:
        quantity = new_unit(params["unit"], value_from_json(params["value"]))
        locale = params.get("locale")
        style = params.get("style")
        text = to_string(
            quantity,
            locale=locale,
            style=style,
            grammatical_case=params.get("grammatical_case") or "nominative",
            options=params.get("options"),
        )

        return {
            "success": True,
            "unit": quantity.name,
            "text": text,
            "display_name": display_name(quantity, locale=locale, style=style),
        }

    except UnitError as e:
        return _failure("format_unit", e, unit=params["unit"])


def tool_preferred_units(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Resolve the units a territory prefers for a usage.

    Args:
        params: Tool parameters containing 'value' and 'unit'; optional
            'usage', 'territory' and 'locale'

    Returns:
        Dictionary with the preferred units, their options, the localized
        breakdown and its formatted text
    """
    _require(params, "value", "unit")

    try:
        quantity = new_unit(
            params["unit"],
            value_from_json(params["value"]),
            usage=params.get("usage") or "default",
        )
        locale = params.get("locale")
        territory = params.get("territory")
        units, options = preferred_units(quantity, locale=locale, territory=territory)
        parts = localize(quantity, locale=locale, territory=territory)

        return {
            "success": True,
            "category": unit_category(quantity),
            "units": units,
            "options": options,
            "localized": [unit_to_dict(part) for part in parts],
            "text": to_string(parts, locale=locale) if parts else "",
        }

    except UnitError as e:
        return _failure("preferred_units", e, unit=params["unit"])


def tool_parse_unit(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Parse a unit name into its canonical form.

    Args:
        params: Tool parameters containing 'unit'

    Returns:
        Dictionary with the canonical name, base unit, category and tokens
    """
    _require(params, "unit")

    try:
        quantity = new_unit(params["unit"])
        parsed = quantity.base_conversion
        sides = [("numerator", numerator_of(parsed)), ("denominator", denominator_of(parsed))]
        try:
            category: Optional[str] = unit_category(quantity)
        except UnitError:
            category = None

        return {
            "success": True,
            "unit": quantity.name,
            "base_unit": base_unit(quantity),
            "category": category,
            "tokens": [
                {
                    "name": token.name,
                    "side": side,
                    "prefix": token.prefix,
                    "power": token.power,
                    "convertible": token.conversion.factor is not None,
                }
                for side, tokens in sides
                for token in tokens
            ],
        }

    except UnitError as e:
        return _failure("parse_unit", e, unit=params["unit"])


def tool_store_quantity(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Store a quantity under a name for later tools.

    Args:
        params: Tool parameters containing 'name', 'value' and 'unit';
            optional 'usage'

    Returns:
        Dictionary with the stored quantity and session stats
    """
    _require(params, "name", "value", "unit")

    try:
        quantity = new_unit(
            params["unit"],
            value_from_json(params["value"]),
            usage=params.get("usage") or "default",
        )
        _session.store_quantity(params["name"], quantity)

        return {
            "success": True,
            "name": params["name"],
            "quantity": unit_to_dict(quantity),
            "session_stats": _session.get_session_stats(),
        }

    except UnitError as e:
        return _failure("store_quantity", e, name=params["name"])


def tool_unit_math(params: Dict[str, Any]) -> Dict[str, Any]:
    """MCP tool: Add, subtract, multiply, divide or compare two quantities.

    Operands are stored quantity names or ``{"value", "unit"}`` objects.
    A bare number is accepted as the right operand of ``mul`` and ``div``.

    Args:
        params: Tool parameters containing 'operation', 'left', 'right';
            optional 'store_as' and 'locale'

    Returns:
        Dictionary with the result quantity, or the comparison for
        ``compare``
    """
    _require(params, "operation", "left", "right")

    operation = params["operation"]
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown operation: {operation}. Expected one of {', '.join(OPERATIONS)}")

    try:
        left = _quantity(params["left"])
        right_ref = params["right"]
        if operation in ("mul", "div") and isinstance(right_ref, (int, float)) and not isinstance(right_ref, bool):
            right: Any = right_ref
        else:
            right = _quantity(right_ref)

        if operation == "compare":
            return {"success": True, "operation": operation, "comparison": arithmetic.compare(left, right)}

        result = getattr(arithmetic, operation)(left, right)
        if params.get("store_as"):
            _session.store_quantity(params["store_as"], result)

        return {
            "success": True,
            "operation": operation,
            "result": unit_to_dict(result),
            "approximate": float(result.value),
            "text": to_string(result, locale=params.get("locale")),
        }

    except (UnitError, SessionError) as e:
        return _failure("unit_math", e, operation=operation)


def tool_session_info(params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """MCP tool: Get session information and stored quantities.

    Args:
        params: Optional parameters (unused)

    Returns:
        Dictionary with session information
    """
    stats = _session.get_session_stats()

    quantities = []
    for name in stats["quantity_names"]:
        quantity = _session.get_quantity(name)
        quantities.append({
            "name": name,
            "unit": quantity.name,
            "value": value_to_json(quantity.value),
            "text": str(quantity),
        })

    return {
        "success": True,
        "session_stats": stats,
        "quantities": quantities,
        "available_tools": [
            "convert_unit",
            "format_unit",
            "preferred_units",
            "parse_unit",
            "store_quantity",
            "unit_math",
            "session_info",
        ],
    }
