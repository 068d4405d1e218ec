"""UnitBridge CLI for local development and testing.

Provides command-line access to unit parsing, conversion, preferences
and localized formatting.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, List, Optional

import orjson
import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from unitkernel.base_unit import base_unit_categories
from unitkernel.errors import UnitError
from unitkernel.numeric import Number
from unitkernel.parsed import UnitToken, denominator_of, numerator_of

from . import __version__
from .config import get_settings
from .decompose import decompose as decompose_unit
from .formatting import display_name, to_string
from .logging_setup import configure_logging
from .preference import localize, preferred_units
from .registry import get_registry
from .serialize import unit_to_dict, value_to_json
from .unit import base_unit, convert as convert_unit, new_unit, unit_category

logger = structlog.get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="unitbridge",
    help="UnitBridge CLI for unit conversion and localized formatting",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Parse, convert and localize units of measure."""
    configure_logging(level="DEBUG" if verbose else "WARNING", enable_colors=True)


def _display_error(message: str, error: Optional[Exception] = None) -> None:
    """Display error message with styling."""
    error_text = Text(f"❌ {message}", style="bold red")
    if error:
        error_text.append(f"\n   {str(error)}", style="red")
    console.print(Panel(error_text, title="Error", border_style="red"))


def _display_warning(message: str) -> None:
    """Display warning message with styling."""
    warning_text = Text(f"⚠️  {message}", style="bold yellow")
    console.print(Panel(warning_text, title="Warning", border_style="yellow"))


def _echo_json(data: Any) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def parse_value(text: str) -> Number:
    """Read a number typed on the command line.

    ``3`` gives an int, ``3/4`` a Fraction, ``1.5`` a float and
    ``d1.5`` a Decimal.

    Raises:
        typer.BadParameter: If the text is not a number
    """
    try:
        if text.startswith("d"):
            return Decimal(text[1:])
        if "/" in text:
            return Fraction(text)
        if text.lstrip("-").isdigit():
            return int(text)
        return float(text)
    except (ValueError, ZeroDivisionError, InvalidOperation):
        raise typer.BadParameter(f"{text!r} is not a number") from None


def _format_value(value: Number) -> str:
    if isinstance(value, Fraction):
        return f"{value} (≈{float(value):.6g})"
    return str(value)


def _fail(message: str, error: Exception) -> None:
    logger.warning(message, error=str(error))
    _display_error(message, error)
    raise typer.Exit(1)


@app.command()
def info() -> None:
    """Display UnitBridge information and configuration."""
    settings = get_settings()
    stats = get_registry().stats()

    console.print(Panel(
        f"UnitBridge {__version__}\n"
        "Unit parsing, exact conversion and localized formatting",
        title="UnitBridge",
        border_style="blue"
    ))

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Environment", settings.environment)
    table.add_row("Default locale", settings.default_locale)
    table.add_row("Default style", settings.default_style)
    table.add_row("Additional units file", str(settings.additional_units_file or "none"))
    table.add_row("Known units", str(stats["units"]))
    table.add_row("Additional units", ", ".join(stats["additional_units"]) or "none")
    table.add_row("Bundled locales", ", ".join(stats["locales"]))
    table.add_row("Parse cache", f"{stats['parse_cache_size']} entries")

    console.print(table)


@app.command()
def convert(
    value: str = typer.Argument(..., help="Value to convert, e.g. 3, 1.5 or 3/4"),
    from_unit: str = typer.Argument(..., help="Unit of the value"),
    to_unit: str = typer.Argument(..., help="Unit to convert into"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale for the formatted result"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Convert a value between compatible units."""
    try:
        source = new_unit(from_unit, parse_value(value))
        result = convert_unit(source, to_unit)

        if json_output:
            _echo_json({"from": unit_to_dict(source), "to": unit_to_dict(result)})
            return

        table = Table(title="Conversion")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("From", f"{_format_value(source.value)} {source.name}")
        table.add_row("To", f"{_format_value(result.value)} {result.name}")
        table.add_row("Base unit", base_unit(result))
        table.add_row("Formatted", to_string(result, locale=locale))
        console.print(table)

    except UnitError as e:
        _fail("Conversion failed", e)


@app.command(name="format")
def format_command(
    value: str = typer.Argument(..., help="Value to format"),
    unit: str = typer.Argument(..., help="Unit name, e.g. kilometer_per_hour"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale, e.g. en, de, fr"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="long, short or narrow"),
    grammatical_case: str = typer.Option("nominative", "--case", help="Grammatical case"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Format a value as localized text."""
    try:
        quantity = new_unit(unit, parse_value(value))
        text = to_string(quantity, locale=locale, style=style, grammatical_case=grammatical_case)

        if json_output:
            _echo_json({"unit": quantity.name, "value": value_to_json(quantity.value), "text": text})
        else:
            console.print(text)

    except UnitError as e:
        _fail("Formatting failed", e)


@app.command()
def preferred(
    value: str = typer.Argument(..., help="Value of the unit"),
    unit: str = typer.Argument(..., help="Unit name"),
    territory: Optional[str] = typer.Option(None, "--territory", "-t", help="Territory, e.g. US"),
    usage: str = typer.Option("default", "--usage", "-u", help="Usage, e.g. person_height"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale for formatting"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Show the units a territory prefers for a usage."""
    try:
        quantity = new_unit(unit, parse_value(value), usage=usage)
        units, skeleton = preferred_units(quantity, locale=locale, territory=territory)
        localized = localize(quantity, locale=locale, territory=territory)
        text = to_string(localized, locale=locale) if localized else ""

        if json_output:
            _echo_json({
                "units": units,
                "options": skeleton,
                "localized": [unit_to_dict(part) for part in localized],
                "text": text,
            })
            return

        table = Table(title=f"Preferred units for {usage}")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Category", unit_category(quantity))
        table.add_row("Units", ", ".join(units))
        table.add_row("Options", ", ".join(f"{k}: {v}" for k, v in skeleton.items()) or "none")
        table.add_row("Localized", text or "(zero)")
        console.print(table)

    except UnitError as e:
        _fail("Preference lookup failed", e)


@app.command()
def decompose(
    value: str = typer.Argument(..., help="Value to break down"),
    unit: str = typer.Argument(..., help="Unit of the value"),
    targets: List[str] = typer.Argument(..., help="Target units, largest first"),
    locale: Optional[str] = typer.Option(None, "--locale", "-l", help="Locale for formatting"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Break a value into a sequence of units, such as feet and inches."""
    try:
        parts = decompose_unit(new_unit(unit, parse_value(value)), targets)

        if json_output:
            _echo_json([unit_to_dict(part) for part in parts])
            return

        if not parts:
            _display_warning("The value decomposes to zero")
            return
        console.print(to_string(parts, locale=locale))

    except UnitError as e:
        _fail("Decomposition failed", e)


def _token_row(token: UnitToken, side: str) -> List[str]:
    conversion = token.conversion
    return [
        side,
        token.name,
        token.prefix or "",
        str(token.power),
        str(conversion.factor) if conversion.factor is not None else "not convertible",
        str(conversion.offset),
        "_".join(conversion.base_unit),
    ]


@app.command()
def parse(
    unit: str = typer.Argument(..., help="Unit name to parse"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Show how a unit name is parsed and canonicalized."""
    try:
        quantity = new_unit(unit)
        parsed = quantity.base_conversion
        sides = [("numerator", numerator_of(parsed)), ("denominator", denominator_of(parsed))]
        identity = base_unit(quantity)

        if json_output:
            _echo_json({
                "unit": quantity.name,
                "base_unit": identity,
                "tokens": [
                    {
                        "name": token.name,
                        "side": side,
                        "factor": value_to_json(token.conversion.factor) if token.conversion.factor is not None else None,
                        "offset": value_to_json(token.conversion.offset),
                        "base_unit": list(token.conversion.base_unit),
                    }
                    for side, tokens in sides
                    for token in tokens
                ],
            })
            return

        table = Table(title=f"Parsed {quantity.name}")
        for column in ("Side", "Token", "Prefix", "Power", "Factor", "Offset", "Base unit"):
            table.add_column(column, style="cyan" if column == "Token" else "white")
        for side, tokens in sides:
            for token in tokens:
                table.add_row(*_token_row(token, side))
        console.print(table)

        console.print(f"Canonical name: [bold]{quantity.name}[/bold]")
        console.print(f"Base unit: [bold]{identity}[/bold]")
        console.print(f"Display name: [bold]{display_name(quantity)}[/bold]")

    except UnitError as e:
        _fail("Parsing failed", e)


@app.command()
def categories(
    json_output: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """List unit categories and their base units."""
    mapping = base_unit_categories()

    if json_output:
        _echo_json(mapping)
        return

    table = Table(title="Unit Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Base unit", style="white")
    for category, identity in sorted(mapping.items()):
        table.add_row(category, identity)
    console.print(table)


if __name__ == "__main__":
    app()
