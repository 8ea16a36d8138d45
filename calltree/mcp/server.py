"""MCP server implementation for calltree."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from calltree.core.config import get_trace_path
from calltree.core.graph import CallGraph, TreeNode, load_with_stats
from calltree.core.graph.query import (
    get_class,
    get_method,
    invert_call_type,
    list_classes,
    list_entrypoints,
)
from calltree.core.graph.traversal import get_callee_tree, get_caller_tree
from calltree.core.models import LoadStats
from calltree.text import decode_signature

log = structlog.get_logger("calltree.mcp")

_CLASS_PROPERTY = {
    "type": "string",
    "description": "Fully qualified class name, e.g. java.util.ArrayList",
}
_SIGNATURE_PROPERTY = {
    "type": "string",
    "description": "Method signature as listed for the class, e.g. size()",
}

TOOLS = [
    Tool(
        name="calltree_classes",
        description="List every class that appears in the call tree, sorted by name.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="calltree_class",
        description=(
            "List the methods of a class with the number of calls each makes (forward) "
            "and receives (reverse)."
        ),
        inputSchema={
            "type": "object",
            "properties": {"class_name": _CLASS_PROPERTY},
            "required": ["class_name"],
        },
    ),
    Tool(
        name="calltree_entrypoints",
        description="List the entry points of the call tree in the order they were recorded.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="calltree_method",
        description=(
            "Show what a method calls and what calls it. Reverse calls are phrased from "
            "the method's side, e.g. 'virtually called by' or 'overrides'."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "class_name": _CLASS_PROPERTY,
                "signature": _SIGNATURE_PROPERTY,
            },
            "required": ["class_name", "signature"],
        },
    ),
    Tool(
        name="calltree_trace",
        description=(
            "Trace the caller and callee trees around a method. Recursive chains are cut "
            "where they would revisit a method already on the path."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "class_name": _CLASS_PROPERTY,
                "signature": _SIGNATURE_PROPERTY,
                "max_depth": {
                    "type": "integer",
                    "description": "Maximum depth to trace (default: 5)",
                    "default": 5,
                },
            },
            "required": ["class_name", "signature"],
        },
    ),
    Tool(
        name="calltree_stats",
        description="Get statistics about the loaded call tree.",
        inputSchema={"type": "object", "properties": {}},
    ),
]


def _tree_to_dict(node: TreeNode, reverse: bool = False) -> dict[str, Any]:
    """Convert a TreeNode to a JSON-serializable dict."""
    call_type = None
    if node.edge is not None:
        call_type = invert_call_type(node.edge.call_type) if reverse else node.edge.call_type
    return {
        "class_name": node.method.class_name,
        "signature": node.method.signature,
        "call_type": call_type,
        "depth": node.depth,
        "children": [_tree_to_dict(c, reverse) for c in node.children],
    }


def _lookup_signature(graph: CallGraph, class_name: str, signature: str) -> str:
    if graph.get_method(class_name, signature) is None:
        decoded = decode_signature(signature)
        if graph.get_method(class_name, decoded) is not None:
            return decoded
    return signature


def _handle_classes(graph: CallGraph) -> dict[str, Any]:
    return {"results": list_classes(graph)}


def _handle_class(graph: CallGraph, class_name: str) -> dict[str, Any]:
    info = get_class(graph, class_name)
    if info is None:
        return {"error": f"Class {class_name} not found"}
    return asdict(info)


def _handle_entrypoints(graph: CallGraph) -> dict[str, Any]:
    return {"results": [asdict(ref) for ref in list_entrypoints(graph)]}


def _handle_method(graph: CallGraph, class_name: str, signature: str) -> dict[str, Any]:
    if graph.get_class(class_name) is None:
        return {"error": f"Class {class_name} not found"}
    signature = _lookup_signature(graph, class_name, signature)
    info = get_method(graph, class_name, signature)
    if info is None:
        return {"error": f"Method {signature} not found"}
    return asdict(info)


def _handle_trace(
    graph: CallGraph, class_name: str, signature: str, max_depth: int
) -> dict[str, Any]:
    signature = _lookup_signature(graph, class_name, signature)
    start = graph.get_method(class_name, signature)
    if start is None:
        return {"error": f"Method {class_name}.{signature} not found"}

    callee_tree = get_callee_tree(graph, start.id, max_depth)
    caller_tree = get_caller_tree(graph, start.id, max_depth)
    return {
        "start": start.qualified_name,
        "callers": _tree_to_dict(caller_tree, reverse=True) if caller_tree else None,
        "callees": _tree_to_dict(callee_tree) if callee_tree else None,
    }


def _handle_stats(graph: CallGraph, stats: LoadStats) -> dict[str, Any]:
    return {
        "classes": graph.num_classes,
        "methods": graph.num_methods,
        **stats.to_dict(),
    }


def dispatch(
    graph: CallGraph, stats: LoadStats, name: str, arguments: dict[str, Any]
) -> dict[str, Any]:
    """Run a tool against the loaded graph."""
    if name == "calltree_classes":
        return _handle_classes(graph)
    if name == "calltree_class":
        return _handle_class(graph, arguments["class_name"])
    if name == "calltree_entrypoints":
        return _handle_entrypoints(graph)
    if name == "calltree_method":
        return _handle_method(graph, arguments["class_name"], arguments["signature"])
    if name == "calltree_trace":
        return _handle_trace(
            graph,
            arguments["class_name"],
            arguments["signature"],
            arguments.get("max_depth", 5),
        )
    if name == "calltree_stats":
        return _handle_stats(graph, stats)
    return {"error": f"Unknown tool: {name}"}


def create_server(graph: CallGraph, stats: LoadStats) -> Server:
    """Build an MCP server answering from a frozen graph."""
    server = Server("calltree")

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return TOOLS

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls."""
        try:
            result = dispatch(graph, stats, name, arguments)
        except KeyError as e:
            result = {"error": f"Missing argument: {e}"}
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    return server


async def serve() -> None:
    """Load the configured trace, then run the MCP server over stdio."""
    graph, stats = load_with_stats(get_trace_path())
    server = create_server(graph, stats)
    log.info("mcp.serving", classes=graph.num_classes, methods=graph.num_methods)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
