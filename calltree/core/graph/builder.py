"""Fold a depth-first trace into a CallGraph using a frame stack."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from calltree.core.exceptions import MalformedRecordError
from calltree.core.graph.base import CallGraph
from calltree.core.models import ENTRY_CALL_TYPE, LoadStats, MethodNode
from calltree.trace import TraceParser, TraceRecord

log = structlog.get_logger("calltree.builder")


class GraphBuilder:
    """Single-pass state machine from trace records to a call graph.

    The frame stack holds the current lineage of enclosing calls: entry
    ``i`` is the method open at depth ``i``. A record at depth ``d`` trims
    the stack to ``d`` frames, so its caller is always ``stack[d - 1]``.
    Repeated call chains fold into the same nodes and edges.

    Not safe for concurrent use; build on one thread, then share the frozen
    graph returned by build().
    """

    def __init__(self) -> None:
        self._graph = CallGraph()
        self._parser = TraceParser()
        self._stack: list[MethodNode] = []
        self._origin: int | None = None
        self.stats = LoadStats()

    @property
    def depth(self) -> int:
        """Number of open frames."""
        return len(self._stack)

    def add_lines(self, lines: Iterable[str], skip_header: bool = True) -> None:
        """Parse and add trace lines.

        The first line is a header and is skipped unless ``skip_header`` is
        False. Blank lines are ignored; malformed lines are logged, counted
        and skipped.
        """
        for line_no, line in enumerate(lines, start=1):
            self.stats.lines += 1
            if skip_header and line_no == 1:
                continue
            if not line.strip():
                continue
            try:
                record = self._parser.parse_line(line, line_no)
                self.add_record(record)
            except MalformedRecordError as e:
                self.stats.malformed += 1
                self.stats.errors.append(str(e))
                log.warning(
                    "trace.malformed_record", line_no=line_no, reason=str(e), line=e.line
                )

    def add_record(self, record: TraceRecord) -> None:
        """Add one record to the graph.

        Raises:
            MalformedRecordError: The record sits above the first record's
                level or skips a nesting level.
        """
        if self._origin is None:
            # Traces with entry points in column zero parse to depth -1.
            self._origin = min(record.depth, 0)
        depth = record.depth - self._origin

        if depth < 0:
            raise MalformedRecordError(
                f"depth {record.depth} is above the top level",
                record.line_no,
                record.qualified_name,
            )
        if depth > len(self._stack):
            raise MalformedRecordError(
                f"depth {depth} skips a level (open frames: {len(self._stack)})",
                record.line_no,
                record.qualified_name,
            )

        del self._stack[depth:]
        klass = self._graph.add_class(record.class_name)
        callee = self._graph.add_method(klass, record.signature)
        self._stack.append(callee)
        self.stats.records += 1

        if depth == 0:
            if record.call_type != ENTRY_CALL_TYPE:
                message = (
                    f"entry point {record.qualified_name} has call type {record.call_type!r}"
                )
                if record.line_no is not None:
                    message = f"line {record.line_no}: {message}"
                self.stats.warnings.append(message)
                log.warning(
                    "trace.unexpected_entry_type",
                    line_no=record.line_no,
                    method=record.qualified_name,
                    call_type=record.call_type,
                )
            if self._graph.add_entrypoint(callee):
                self.stats.entrypoints += 1
            return

        caller = self._stack[depth - 1]
        if self._graph.add_edge(record.call_type, caller, callee):
            self.stats.edges += 1
        else:
            self.stats.duplicate_edges += 1

    def build(self) -> CallGraph:
        """Freeze and return the graph. The builder must not be used afterwards."""
        self._stack.clear()
        self._graph.freeze()
        return self._graph
