"""
calltree: Browse call graphs recorded as indented call-tree traces.

A trace is a depth-first dump of entry points and the chains of methods they
invoke, one call per line, nested by indentation. calltree folds it into a
bidirectional graph so you can ask:
- What does a method call?
- What calls a method (with the relationship inverted)?
- Which methods are entry points?

Usage:
    from calltree.core.graph import load
    from calltree.core.graph.query import get_method

    graph = load(Path("calltree.txt"))
    info = get_method(graph, "org.example.Foo", "bar()")
"""

__version__ = "0.1.0"
