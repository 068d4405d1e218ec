"""UnitBridge MCP Server implementation.

Provides a stdio-based MCP server with robust error handling and
logging. Logs go to stderr since stdout carries the protocol.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, Optional, Union

import structlog
from mcp.server.fastmcp import FastMCP

from unitbridge.logging_setup import configure_from_settings
from unitbridge.registry import get_registry

from .tools import (
    tool_convert_unit,
    tool_format_unit,
    tool_parse_unit,
    tool_preferred_units,
    tool_session_info,
    tool_store_quantity,
    tool_unit_math,
)

logger = structlog.get_logger(__name__)

# Create FastMCP app
app = FastMCP("unitbridge")

Value = Union[int, float, str, Dict[str, int]]
Operand = Union[str, Dict[str, Any]]


def _params(**kwargs: Any) -> Dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


@app.tool()
def convert_unit(value: Value, from_unit: str, to_unit: str, locale: Optional[str] = None) -> Dict[str, Any]:
    """Convert a value from one unit to a compatible unit.

    Conversion is exact: integer and rational inputs give rational results.

    Args:
        value: Number, decimal string or {"numerator", "denominator"}
        from_unit: Unit of the value, e.g. "mile" or "kilometer_per_hour"
        to_unit: Unit to convert into
        locale: Locale for the formatted text (defaults to settings)

    Returns:
        Dictionary containing the source and converted quantities

    Example:
        >>> convert_unit(1, "mile", "foot")
        {
            "success": True,
            "from": {"unit": "mile", "value": 1},
            "to": {"unit": "foot", "value": 5280},
            "approximate": 5280.0,
            "text": "5,280 feet"
        }
    """
    try:
        logger.info("MCP tool: convert_unit", from_unit=from_unit, to_unit=to_unit)
        result = tool_convert_unit(
            _params(value=value, from_unit=from_unit, to_unit=to_unit, locale=locale)
        )
        logger.info("MCP tool: convert_unit completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: convert_unit failed", from_unit=from_unit, to_unit=to_unit, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "from_unit": from_unit,
            "to_unit": to_unit,
        }


@app.tool()
def format_unit(
    value: Value,
    unit: str,
    locale: Optional[str] = None,
    style: Optional[str] = None,
    grammatical_case: Optional[str] = None,
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Format a value and unit as localized text.

    Args:
        value: Number, decimal string or {"numerator", "denominator"}
        unit: Unit name
        locale: Locale such as "en", "de" or "fr"
        style: "long", "short" or "narrow"
        grammatical_case: Case to inflect into, e.g. "dative" for German
        options: Number options such as {"fractional_digits": 2}

    Returns:
        Dictionary containing the formatted text and the unit's display name

    Example:
        >>> format_unit(3, "meter", locale="de", grammatical_case="dative")
        {"success": True, "unit": "meter", "text": "3 Metern", "display_name": "Meter"}
    """
    try:
        logger.info("MCP tool: format_unit", unit=unit, locale=locale, style=style)
        result = tool_format_unit(_params(
            value=value,
            unit=unit,
            locale=locale,
            style=style,
            grammatical_case=grammatical_case,
            options=options,
        ))
        logger.info("MCP tool: format_unit completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: format_unit failed", unit=unit, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "unit": unit,
            "text": None,
        }


@app.tool()
def preferred_units(
    value: Value,
    unit: str,
    usage: Optional[str] = None,
    territory: Optional[str] = None,
    locale: Optional[str] = None,
) -> Dict[str, Any]:
    """Find the units a territory prefers for a quantity and usage.

    Args:
        value: Number, decimal string or {"numerator", "denominator"}
        unit: Unit of the value
        usage: Usage such as "person_height" or "road" (default "default")
        territory: Territory such as "US"; derived from the locale when omitted
        locale: Locale for formatting and territory lookup

    Returns:
        Dictionary containing the preferred units and the localized breakdown

    Example:
        >>> preferred_units(180, "centimeter", usage="person_height", territory="US")
        {
            "success": True,
            "category": "length",
            "units": ["foot", "inch"],
            "options": {},
            "localized": [...],
            "text": "5 feet, 10.866 inches"
        }
    """
    try:
        logger.info("MCP tool: preferred_units", unit=unit, usage=usage, territory=territory)
        result = tool_preferred_units(_params(
            value=value, unit=unit, usage=usage, territory=territory, locale=locale
        ))
        logger.info("MCP tool: preferred_units completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: preferred_units failed", unit=unit, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "unit": unit,
            "units": None,
        }


@app.tool()
def parse_unit(unit: str) -> Dict[str, Any]:
    """Parse a unit name and report its canonical form and base unit.

    Args:
        unit: Unit name, e.g. "meter_per_second_squared"

    Returns:
        Dictionary containing the canonical name, base unit, category and tokens

    Example:
        >>> parse_unit("kilometer_per_hour")
        {
            "success": True,
            "unit": "kilometer_per_hour",
            "base_unit": "meter_per_second",
            "category": "speed",
            "tokens": [...]
        }
    """
    try:
        logger.info("MCP tool: parse_unit", unit=unit)
        result = tool_parse_unit({"unit": unit})
        logger.info("MCP tool: parse_unit completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: parse_unit failed", unit=unit, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "unit": unit,
        }


@app.tool()
def store_quantity(name: str, value: Value, unit: str, usage: Optional[str] = None) -> Dict[str, Any]:
    """Store a quantity in the session under a name.

    Stored names can be used as operands of unit_math.

    Args:
        name: Name to store the quantity under
        value: Number, decimal string or {"numerator", "denominator"}
        unit: Unit name
        usage: Optional usage for later preference lookups

    Returns:
        Dictionary containing the stored quantity and session stats
    """
    try:
        logger.info("MCP tool: store_quantity", name=name, unit=unit)
        result = tool_store_quantity(_params(name=name, value=value, unit=unit, usage=usage))
        logger.info("MCP tool: store_quantity completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: store_quantity failed", name=name, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "name": name,
        }


@app.tool()
def unit_math(
    operation: str,
    left: Operand,
    right: Union[Operand, int, float],
    store_as: Optional[str] = None,
    locale: Optional[str] = None,
) -> Dict[str, Any]:
    """Add, subtract, multiply, divide or compare two quantities.

    Args:
        operation: One of "add", "sub", "mul", "div" or "compare"
        left: Stored quantity name or {"value", "unit"}
        right: Stored quantity name, {"value", "unit"}, or a number for mul/div
        store_as: Store the result under this name
        locale: Locale for the formatted result

    Returns:
        Dictionary containing the result quantity, or the comparison

    Example:
        >>> unit_math("div", {"value": 10, "unit": "meter"}, {"value": 2, "unit": "second"})
        {
            "success": True,
            "operation": "div",
            "result": {"unit": "meter_per_second", "value": 5},
            "approximate": 5.0,
            "text": "5 meters per second"
        }
    """
    try:
        logger.info("MCP tool: unit_math", operation=operation)
        result = tool_unit_math(_params(
            operation=operation, left=left, right=right, store_as=store_as, locale=locale
        ))
        logger.info("MCP tool: unit_math completed", success=result.get("success", False))
        return result
    except Exception as e:
        logger.error("MCP tool: unit_math failed", operation=operation, error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "operation": operation,
            "result": None,
        }


@app.tool()
def session_info() -> Dict[str, Any]:
    """Get information about the current session and stored quantities.

    Returns:
        Dictionary containing session statistics and available tools
    """
    try:
        logger.info("MCP tool: session_info")
        result = tool_session_info()
        logger.info("MCP tool: session_info completed")
        return result
    except Exception as e:
        logger.error("MCP tool: session_info failed", error=str(e))
        return {
            "success": False,
            "error": f"Tool execution failed: {e}",
            "session_stats": None,
        }


def main() -> None:
    """Main entry point for the MCP server."""
    configure_from_settings(stream=sys.stderr)

    try:
        logger.info("Starting UnitBridge MCP server")

        stats = get_registry().stats()
        logger.info(
            "Unit registry loaded",
            units=stats["units"],
            additional_units=stats["additional_units"],
            locales=stats["locales"],
        )

        logger.info("UnitBridge MCP server ready")
        app.run()

    except KeyboardInterrupt:
        logger.info("MCP server shutting down (keyboard interrupt)")
        sys.exit(0)
    except Exception as e:
        logger.error("MCP server startup failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
