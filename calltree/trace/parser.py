"""Parser for indented call-tree trace lines.

A trace line looks like::

    <indent><call type> <class>.<method>(<params>)<return>:<rest>

for example ``        virtually calls java.util.List.size()I:...``. Every
four columns of indentation is one nesting level, with the first level
(four columns) holding entry points.
"""

from __future__ import annotations

import sys

from calltree.core.exceptions import MalformedRecordError
from calltree.trace.models import TraceRecord

INDENT_WIDTH = 4


def measure_indent(line: str) -> int:
    """Offset of the first character that is neither a space nor non-ASCII.

    Box-drawing and other non-ASCII decoration counts as indentation. A line
    with no such character measures 0.
    """
    for i, ch in enumerate(line):
        if ch != " " and ord(ch) < 0x80:
            return i
    return 0


class TraceParser:
    """Parser for call-tree trace lines."""

    def parse_line(self, line: str, line_no: int | None = None) -> TraceRecord:
        """Split one trace line into depth, call type, class and signature.

        Raises:
            MalformedRecordError: A delimiter could not be found.
        """
        line = line.rstrip("\r\n")
        indent = measure_indent(line)

        dot = line.find(".", indent)
        if dot < 0:
            raise MalformedRecordError("no '.' after indentation", line_no, line)
        type_end = line.rfind(" ", indent, dot)
        if type_end < 0:
            raise MalformedRecordError("no call type before class name", line_no, line)

        params_start = line.find("(", type_end)
        if params_start < 0:
            raise MalformedRecordError("no parameter list", line_no, line)
        method_start = line.rfind(".", type_end + 1, params_start)
        if method_start < 0:
            raise MalformedRecordError("no '.' between class and method", line_no, line)
        method_end = line.find(":", params_start)
        if method_end < 0:
            raise MalformedRecordError("no ':' after method signature", line_no, line)

        return TraceRecord(
            depth=indent // INDENT_WIDTH - 1,
            call_type=sys.intern(line[indent:type_end]),
            class_name=line[type_end + 1 : method_start],
            signature=line[method_start + 1 : method_end],
            line_no=line_no,
        )
