"""Read-only views returned by graph queries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calltree.core.models import CallEdge, MethodNode


@dataclass(frozen=True)
class MethodRef:
    """A method named by its class and signature."""

    class_name: str
    signature: str

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.signature}"


@dataclass(frozen=True)
class CallRef:
    """One end of a call as seen from the other end.

    For forward calls ``call_type`` is the recorded phrase; for reverse calls
    it is the inverted phrase.
    """

    call_type: str
    class_name: str
    signature: str

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.signature}"


@dataclass(frozen=True)
class MethodSummary:
    """A method listed on its class page."""

    signature: str
    forward_count: int
    reverse_count: int


@dataclass(frozen=True)
class ClassInfo:
    name: str
    methods: tuple[MethodSummary, ...]


@dataclass(frozen=True)
class MethodInfo:
    class_name: str
    signature: str
    forward: tuple[CallRef, ...]
    reverse: tuple[CallRef, ...]

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.signature}"


@dataclass
class TreeNode:
    """A node in a caller or callee tree."""

    method: MethodNode
    edge: CallEdge | None
    depth: int
    children: list[TreeNode] = field(default_factory=list)

    def __iter__(self) -> Iterator[TreeNode]:
        """Pre-order traversal."""
        yield self
        for child in self.children:
            yield from child

    def __len__(self) -> int:
        """Total nodes in subtree."""
        return 1 + sum(len(c) for c in self.children)
