"""
MCP server for calltree.

Exposes call tree browsing to LLMs via the Model Context Protocol. The trace
named by CALLTREE_FILE is loaded once, before the server starts answering.

Tools:
    - calltree_classes: List classes
    - calltree_class: Methods of a class with call counts
    - calltree_entrypoints: Entry points in trace order
    - calltree_method: What a method calls and what calls it
    - calltree_trace: Caller and callee trees around a method
    - calltree_stats: Graph and load statistics

Usage:
    CALLTREE_FILE=calltree.txt calltree-mcp
"""

import asyncio
import sys

from calltree.core.exceptions import ConfigurationError, TraceReadError
from calltree.core.logging import setup_logging
from calltree.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    setup_logging()
    try:
        asyncio.run(_serve())
    except (ConfigurationError, TraceReadError) as e:
        print(f"calltree-mcp: {e}", file=sys.stderr)
        sys.exit(2)


__all__ = ["serve"]
