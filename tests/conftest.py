"""Pytest configuration and shared fixtures.

Provides common test fixtures and configuration for the UnitBridge test suite.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import orjson
import pytest
import structlog

from unitbridge.config import get_settings
from unitbridge.registry import reset_registry
from unitbridge.unit import Unit, new_unit


def configure_test_logging(capture: structlog.testing.LogCapture) -> None:
    """Route all log events into ``capture``."""
    structlog.reset_defaults()
    structlog.configure(
        processors=[capture],
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# Configure test logging
configure_test_logging(structlog.testing.LogCapture())


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate settings and the shared registry between tests."""
    for name in ("DEFAULT_LOCALE", "DEFAULT_STYLE", "ENVIRONMENT", "LOG_LEVEL", "ADDITIONAL_UNITS_FILE"):
        monkeypatch.delenv(f"UNITBRIDGE_{name}", raising=False)
    get_settings.cache_clear()
    reset_registry()
    yield
    get_settings.cache_clear()
    reset_registry()


@pytest.fixture
def log_output() -> Generator[structlog.testing.LogCapture, None, None]:
    """Capture structured log entries emitted during a test."""
    capture = structlog.testing.LogCapture()
    configure_test_logging(capture)
    yield capture
    configure_test_logging(structlog.testing.LogCapture())


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def additional_units() -> Dict[str, Any]:
    """Provide additional unit configurations with English localizations."""
    return {
        "vehicle": {
            "base_unit": "item",
            "factor": 1,
            "localizations": {
                "en": {
                    "long": {
                        "display_name": "vehicles",
                        "one": "{0} vehicle",
                        "other": "{0} vehicles",
                    }
                }
            },
        },
        "quarter_year": {
            "base_unit": "year",
            "factor": {"numerator": 1, "denominator": 4},
            "systems": ["metric"],
        },
    }


@pytest.fixture
def additional_units_file(temp_dir: Path, additional_units: Dict[str, Any]) -> Path:
    """Write the additional units to a JSON file."""
    path = temp_dir / "units.json"
    path.write_bytes(orjson.dumps({"units": additional_units}))
    return path


@pytest.fixture
def one_mile() -> Unit:
    return new_unit("mile", 1)


@pytest.fixture
def person_height() -> Unit:
    """180 centimeters as a person's height."""
    return new_unit("centimeter", 180, usage="person_height")
