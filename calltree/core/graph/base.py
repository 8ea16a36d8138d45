"""Core CallGraph store: an arena of class and method nodes."""

from __future__ import annotations

from calltree.core.exceptions import GraphFrozenError
from calltree.core.models import CallEdge, ClassNode, MethodNode


class CallGraph:
    """Directed, typed graph of calls between methods.

    Nodes live in arenas and are addressed by integer index; edges refer to
    methods by index and sit in both the caller's ``forward`` and the
    callee's ``reverse`` set for O(1) navigation either way. The graph is
    filled once, then frozen and shared read-only.
    """

    __slots__ = (
        "_classes",
        "_class_list",
        "_methods",
        "_entrypoints",
        "_entry_ids",
        "_num_edges",
        "_frozen",
    )

    def __init__(self) -> None:
        self._classes: dict[str, ClassNode] = {}
        self._class_list: list[ClassNode] = []
        self._methods: list[MethodNode] = []
        self._entrypoints: list[MethodNode] = []
        self._entry_ids: set[int] = set()
        self._num_edges = 0
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError("Call graph is frozen")

    def add_class(self, name: str) -> ClassNode:
        """Get or create a class node. O(1)."""
        node = self._classes.get(name)
        if node is None:
            self._check_mutable()
            node = ClassNode(id=len(self._class_list), name=name)
            self._classes[name] = node
            self._class_list.append(node)
        return node

    def add_method(self, klass: ClassNode, signature: str) -> MethodNode:
        """Get or create a method node owned by ``klass``. O(1)."""
        node = klass.methods.get(signature)
        if node is None:
            self._check_mutable()
            node = MethodNode(
                id=len(self._methods),
                class_id=klass.id,
                class_name=klass.name,
                signature=signature,
            )
            klass.methods[signature] = node
            self._methods.append(node)
        return node

    def add_entrypoint(self, method: MethodNode) -> bool:
        """Register an entry point on first encounter. Returns True if new."""
        self._check_mutable()
        if method.id in self._entry_ids:
            return False
        self._entry_ids.add(method.id)
        self._entrypoints.append(method)
        return True

    def add_edge(self, call_type: str, caller: MethodNode, callee: MethodNode) -> bool:
        """Record a call on both endpoints. Returns False for a repeated edge. O(1)."""
        self._check_mutable()
        edge = CallEdge(call_type=call_type, caller_id=caller.id, callee_id=callee.id)
        if edge in caller.forward:
            return False
        caller.forward.add(edge)  # type: ignore[attr-defined]
        callee.reverse.add(edge)  # type: ignore[attr-defined]
        self._num_edges += 1
        return True

    def freeze(self) -> None:
        """Make the graph read-only. Edge sets become frozensets."""
        if self._frozen:
            return
        for method in self._methods:
            method.forward = frozenset(method.forward)
            method.reverse = frozenset(method.reverse)
        self._frozen = True

    def get_class(self, name: str) -> ClassNode | None:
        """Get class by name. O(1)."""
        return self._classes.get(name)

    def get_method(self, class_name: str, signature: str) -> MethodNode | None:
        """Get method by class name and signature. O(1)."""
        klass = self._classes.get(class_name)
        if klass is None:
            return None
        return klass.methods.get(signature)

    def method(self, method_id: int) -> MethodNode:
        """Get method by arena index. O(1)."""
        return self._methods[method_id]

    def class_names(self) -> list[str]:
        return sorted(self._classes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entrypoints(self) -> list[MethodNode]:
        return list(self._entrypoints)

    @property
    def methods(self) -> list[MethodNode]:
        return list(self._methods)

    @property
    def num_classes(self) -> int:
        return len(self._class_list)

    @property
    def num_methods(self) -> int:
        return len(self._methods)

    @property
    def num_edges(self) -> int:
        return self._num_edges

    def __contains__(self, method_id: object) -> bool:
        return isinstance(method_id, int) and 0 <= method_id < len(self._methods)

    def __repr__(self) -> str:
        return (
            f"CallGraph(classes={self.num_classes}, methods={self.num_methods}, "
            f"edges={self.num_edges}, entrypoints={len(self._entrypoints)})"
        )
