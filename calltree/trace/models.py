"""Data models for parsed trace records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TraceRecord:
    """One call parsed from a trace line (before it enters the graph)."""

    depth: int
    call_type: str
    class_name: str
    signature: str
    line_no: int | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.signature}"
