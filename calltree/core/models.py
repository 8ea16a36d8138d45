"""Data models for calltree."""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass, field
from enum import Enum

ENTRY_CALL_TYPE = "entry"


class CallType(Enum):
    """Known call relationships, phrased from the caller's side."""

    DIRECT = "directly calls"
    VIRTUAL = "virtually calls"
    INTERFACE = "interfacially calls"
    OVERRIDE = "is overridden by"
    IMPLEMENT = "is implemented by"

    @property
    def inverse(self) -> str:
        """The same relationship phrased from the callee's side."""
        return _INVERSE[self]


_INVERSE = {
    CallType.DIRECT: "directly called by",
    CallType.VIRTUAL: "virtually called by",
    CallType.INTERFACE: "interfacially called by",
    CallType.OVERRIDE: "overrides",
    CallType.IMPLEMENT: "implements",
}


@dataclass(frozen=True)
class CallEdge:
    """A typed call from one method to another.

    Methods are referenced by arena index, so two edges are equal when type,
    caller and callee all match.
    """

    call_type: str
    caller_id: int
    callee_id: int


@dataclass(eq=False)
class MethodNode:
    """A method of a class, with the calls it makes and receives."""

    id: int
    class_id: int
    class_name: str
    signature: str
    forward: Set[CallEdge] = field(default_factory=set)
    reverse: Set[CallEdge] = field(default_factory=set)

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.signature}"

    def __repr__(self) -> str:
        return (
            f"MethodNode({self.qualified_name}, "
            f"out={len(self.forward)}, in={len(self.reverse)})"
        )


@dataclass(eq=False)
class ClassNode:
    """A class and the methods seen on it, keyed by signature."""

    id: int
    name: str
    methods: dict[str, MethodNode] = field(default_factory=dict)

    def sorted_methods(self) -> list[MethodNode]:
        return [self.methods[sig] for sig in sorted(self.methods)]

    def __repr__(self) -> str:
        return f"ClassNode({self.name}, methods={len(self.methods)})"


class LoadStats:
    """Statistics from loading a trace."""

    def __init__(self) -> None:
        self.lines: int = 0
        self.records: int = 0
        self.malformed: int = 0
        self.entrypoints: int = 0
        self.edges: int = 0
        self.duplicate_edges: int = 0
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def to_dict(self) -> dict[str, int]:
        return {
            "lines": self.lines,
            "records": self.records,
            "malformed": self.malformed,
            "entrypoints": self.entrypoints,
            "edges": self.edges,
            "duplicate_edges": self.duplicate_edges,
            "warnings": len(self.warnings),
        }

    def __repr__(self) -> str:
        return (
            f"LoadStats(lines={self.lines}, records={self.records}, "
            f"malformed={self.malformed}, entrypoints={self.entrypoints}, "
            f"edges={self.edges}, duplicate_edges={self.duplicate_edges}, "
            f"warnings={len(self.warnings)})"
        )
