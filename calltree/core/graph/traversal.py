"""Tree extraction using DFS traversal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from calltree.core.graph.models import TreeNode

if TYPE_CHECKING:
    from calltree.core.graph.base import CallGraph
    from calltree.core.models import CallEdge


def _edge_key(graph: CallGraph, node_id: int, edge: CallEdge) -> tuple[str, str]:
    method = graph.method(node_id)
    return (edge.call_type, method.qualified_name)


def get_callee_tree(graph: CallGraph, root_id: int, max_depth: int = 10) -> TreeNode | None:
    """Build call tree of all callees from root.

    DFS that cuts a branch before it re-enters a method already on the
    current path, so recursive chains terminate. O(V + E) in subgraph.
    """
    if root_id not in graph:
        return None

    on_path: set[int] = set()

    def dfs(method_id: int, edge: CallEdge | None, depth: int) -> TreeNode | None:
        if depth > max_depth or method_id in on_path:
            return None

        on_path.add(method_id)
        method = graph.method(method_id)
        node = TreeNode(method=method, edge=edge, depth=depth)

        callees = sorted(
            method.forward,
            key=lambda e: _edge_key(graph, e.callee_id, e),
        )
        for callee_edge in callees:
            child = dfs(callee_edge.callee_id, callee_edge, depth + 1)
            if child:
                node.children.append(child)

        on_path.remove(method_id)
        return node

    return dfs(root_id, None, 0)


def get_caller_tree(graph: CallGraph, root_id: int, max_depth: int = 10) -> TreeNode | None:
    """Build tree of all callers leading to root.

    DFS going backwards. O(V + E) in subgraph.
    """
    if root_id not in graph:
        return None

    on_path: set[int] = set()

    def dfs(method_id: int, edge: CallEdge | None, depth: int) -> TreeNode | None:
        if depth > max_depth or method_id in on_path:
            return None

        on_path.add(method_id)
        method = graph.method(method_id)
        node = TreeNode(method=method, edge=edge, depth=depth)

        callers = sorted(
            method.reverse,
            key=lambda e: _edge_key(graph, e.caller_id, e),
        )
        for caller_edge in callers:
            child = dfs(caller_edge.caller_id, caller_edge, depth + 1)
            if child:
                node.children.append(child)

        on_path.remove(method_id)
        return node

    return dfs(root_id, None, 0)


def flatten_tree(root: TreeNode, include_root: bool = True) -> list[TreeNode]:
    """Flatten tree to list in pre-order. O(n)."""
    result: list[TreeNode] = []
    if include_root:
        result.append(root)
    for child in root.children:
        result.extend(flatten_tree(child, include_root=True))
    return result
