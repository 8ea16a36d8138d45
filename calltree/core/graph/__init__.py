"""
Call graph data structures and algorithms.

This module builds and queries the in-memory graph of a call-tree trace:

Data Structures:
    - CallGraph: Arena of class/method nodes with forward and reverse edge sets
    - MethodRef, CallRef, ClassInfo, MethodInfo: Query results
    - TreeNode: Tree representation for caller/callee hierarchies

Building:
    - GraphBuilder: Single-pass, frame-stack construction from trace records
    - load(): Read a trace file into a frozen CallGraph
    - load_with_stats(): Same, with LoadStats for the run

Algorithms:
    - query: Class/method lookups, edge listings, call type inversion
    - traversal: DFS tree extraction (get_callee_tree, get_caller_tree)
"""

from calltree.core.graph.base import CallGraph
from calltree.core.graph.builder import GraphBuilder
from calltree.core.graph.loader import load, load_lines, load_with_stats
from calltree.core.graph.models import (
    CallRef,
    ClassInfo,
    MethodInfo,
    MethodRef,
    MethodSummary,
    TreeNode,
)

__all__ = [
    "CallGraph",
    "CallRef",
    "ClassInfo",
    "GraphBuilder",
    "MethodInfo",
    "MethodRef",
    "MethodSummary",
    "TreeNode",
    "load",
    "load_lines",
    "load_with_stats",
]
