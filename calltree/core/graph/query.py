"""Queries over a frozen CallGraph.

All functions are pure reads. Lookups of unknown classes or methods return
None rather than raising, so callers decide how to report absence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from calltree.core.graph.models import CallRef, ClassInfo, MethodInfo, MethodRef, MethodSummary
from calltree.core.models import CallType

if TYPE_CHECKING:
    from calltree.core.graph.base import CallGraph
    from calltree.core.models import ClassNode, MethodNode


def invert_call_type(call_type: str) -> str:
    """Phrase a call type from the callee's side.

    Unknown types come back as ``REV(<type>)`` with the original text kept.
    """
    try:
        return CallType(call_type).inverse
    except ValueError:
        return f"REV({call_type})"


def list_classes(graph: CallGraph) -> list[str]:
    """Class names, ascending."""
    return graph.class_names()


def _summaries(klass: ClassNode) -> list[MethodSummary]:
    return [
        MethodSummary(
            signature=m.signature,
            forward_count=len(m.forward),
            reverse_count=len(m.reverse),
        )
        for m in klass.sorted_methods()
    ]


def list_methods(graph: CallGraph, class_name: str) -> list[MethodSummary] | None:
    """Methods of a class with their call counts, ascending by signature."""
    klass = graph.get_class(class_name)
    if klass is None:
        return None
    return _summaries(klass)


def list_entrypoints(graph: CallGraph) -> list[MethodRef]:
    """Entry points in the order they were first seen."""
    return [MethodRef(m.class_name, m.signature) for m in graph.entrypoints]


def get_class(graph: CallGraph, name: str) -> ClassInfo | None:
    klass = graph.get_class(name)
    if klass is None:
        return None
    return ClassInfo(name=klass.name, methods=tuple(_summaries(klass)))


def _sort_key(ref: CallRef) -> tuple[str, str, str]:
    return (ref.call_type, ref.class_name, ref.signature)


def forward_edges(graph: CallGraph, method: MethodNode) -> list[CallRef]:
    """Calls made by ``method``: recorded type and callee."""
    refs = []
    for edge in method.forward:
        callee = graph.method(edge.callee_id)
        refs.append(CallRef(edge.call_type, callee.class_name, callee.signature))
    return sorted(refs, key=_sort_key)


def reverse_edges(graph: CallGraph, method: MethodNode) -> list[CallRef]:
    """Calls made into ``method``: inverted type and caller."""
    refs = []
    for edge in method.reverse:
        caller = graph.method(edge.caller_id)
        refs.append(
            CallRef(invert_call_type(edge.call_type), caller.class_name, caller.signature)
        )
    return sorted(refs, key=_sort_key)


def get_method(graph: CallGraph, class_name: str, signature: str) -> MethodInfo | None:
    method = graph.get_method(class_name, signature)
    if method is None:
        return None
    return MethodInfo(
        class_name=method.class_name,
        signature=method.signature,
        forward=tuple(forward_edges(graph, method)),
        reverse=tuple(reverse_edges(graph, method)),
    )
