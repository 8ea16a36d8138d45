"""
Core module: data models, exceptions, configuration and logging.

This module provides the foundational types:

Models (models.py):
    - ClassNode / MethodNode: Graph nodes, addressed by arena index
    - CallEdge: A typed call between two methods
    - CallType: Known call phrases and their inverses
    - LoadStats: Counters and diagnostics from loading a trace

Exceptions (exceptions.py):
    - CallTreeError: Base exception for all calltree errors
    - MalformedRecordError: A trace line could not be parsed
    - TraceReadError: The trace file could not be read
    - ConfigurationError: No trace file configured
    - GraphFrozenError: A frozen graph was modified

Graph (graph/):
    - CallGraph, GraphBuilder, load(), queries and traversal
"""

from calltree.core.exceptions import (
    CallTreeError,
    ConfigurationError,
    GraphFrozenError,
    MalformedRecordError,
    TraceReadError,
)
from calltree.core.models import (
    ENTRY_CALL_TYPE,
    CallEdge,
    CallType,
    ClassNode,
    LoadStats,
    MethodNode,
)

__all__ = [
    # Models
    "ENTRY_CALL_TYPE",
    "CallEdge",
    "CallType",
    "ClassNode",
    "LoadStats",
    "MethodNode",
    # Exceptions
    "CallTreeError",
    "ConfigurationError",
    "GraphFrozenError",
    "MalformedRecordError",
    "TraceReadError",
]
