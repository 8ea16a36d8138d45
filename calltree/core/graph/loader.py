"""Load a CallGraph from a call-tree trace file."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from calltree.core.exceptions import TraceReadError
from calltree.core.graph.base import CallGraph
from calltree.core.graph.builder import GraphBuilder
from calltree.core.models import LoadStats

log = structlog.get_logger("calltree.loader")


def load_lines(lines: Iterable[str]) -> tuple[CallGraph, LoadStats]:
    """Build a frozen graph from trace lines (header first)."""
    builder = GraphBuilder()
    builder.add_lines(lines)
    return builder.build(), builder.stats


def load_with_stats(path: Path) -> tuple[CallGraph, LoadStats]:
    """Read and parse a whole trace file. O(lines).

    Raises:
        TraceReadError: The file cannot be opened, or reading fails part way.
    """
    log.info("trace.loading", path=str(path))
    try:
        with path.open(encoding="utf-8", errors="replace") as f:
            graph, stats = load_lines(f)
    except OSError as e:
        raise TraceReadError(f"Cannot read call tree file {path}: {e}") from e

    log.info(
        "trace.loaded",
        path=str(path),
        classes=graph.num_classes,
        methods=graph.num_methods,
        edges=graph.num_edges,
        entrypoints=stats.entrypoints,
        malformed=stats.malformed,
    )
    return graph, stats


def load(path: Path) -> CallGraph:
    """Load the call graph stored in a trace file."""
    graph, _ = load_with_stats(path)
    return graph
