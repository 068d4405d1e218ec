"""UnitBridge MCP Server package.

Provides an MCP (Model Context Protocol) server exposing unit conversion,
localized formatting and unit preferences as tools.
"""

from .server import main as server_main
from .tools import UnitBridgeSession

__version__ = "0.1.0"
__all__ = ["server_main", "UnitBridgeSession"]
