"""
Trace parsing: turn call-tree dump lines into structured records.

Components:
    - TraceParser: Splits a line into depth, call type, class and signature
    - TraceRecord: One parsed call
    - measure_indent: Indentation rule shared by parser and tests

Malformed lines raise MalformedRecordError from parse_line(); the graph
builder reports and skips them.
"""

from calltree.trace.models import TraceRecord
from calltree.trace.parser import INDENT_WIDTH, TraceParser, measure_indent

__all__ = [
    "INDENT_WIDTH",
    "TraceParser",
    "TraceRecord",
    "measure_indent",
]
