"""Unit tests for trace line parsing."""

import pytest

from calltree.core.exceptions import MalformedRecordError
from calltree.trace import TraceParser, TraceRecord, measure_indent


@pytest.fixture
def parser() -> TraceParser:
    return TraceParser()


class TestMeasureIndent:
    """Tests for the indentation rule."""

    def test_spaces(self) -> None:
        assert measure_indent("        directly calls Foo.bar():V") == 8

    def test_no_indent(self) -> None:
        assert measure_indent("entry Foo.bar():V") == 0

    def test_non_ascii_counts_as_indent(self) -> None:
        assert measure_indent("│   ├── directly calls Foo.bar():V") == 8

    def test_blank_line_measures_zero(self) -> None:
        assert measure_indent("    ") == 0


class TestParseLine:
    """Tests for splitting a line into its fields."""

    def test_entry_line(self, parser: TraceParser) -> None:
        record = parser.parse_line("    entry Foo.bar():V")
        assert record == TraceRecord(
            depth=0, call_type="entry", class_name="Foo", signature="bar()"
        )

    def test_nested_line(self, parser: TraceParser) -> None:
        record = parser.parse_line("        virtually calls java.util.List.size()I:extra")
        assert record.depth == 1
        assert record.call_type == "virtually calls"
        assert record.class_name == "java.util.List"
        assert record.signature == "size()I"

    def test_depth_from_indentation(self, parser: TraceParser) -> None:
        line = " " * 16 + "directly calls a.B.c()V:"
        assert parser.parse_line(line).depth == 3

    def test_multi_word_call_type(self, parser: TraceParser) -> None:
        record = parser.parse_line("        is implemented by org.example.Impl.run()V:")
        assert record.call_type == "is implemented by"
        assert record.class_name == "org.example.Impl"
        assert record.signature == "run()V"

    def test_dots_inside_parameters(self, parser: TraceParser) -> None:
        record = parser.parse_line("        directly calls a.B.m(java.lang.String)V:")
        assert record.class_name == "a.B"
        assert record.signature == "m(java.lang.String)V"

    def test_generic_signature(self, parser: TraceParser) -> None:
        record = parser.parse_line("    entry Foo.get(Ljava/util/List<Ljava/lang/String;>;)V:")
        assert record.signature == "get(Ljava/util/List<Ljava/lang/String;>;)V"

    def test_non_ascii_indentation(self, parser: TraceParser) -> None:
        record = parser.parse_line("    │   directly calls Foo.bar():V")
        assert record.depth == 1
        assert record.call_type == "directly calls"

    def test_column_zero_is_negative_depth(self, parser: TraceParser) -> None:
        assert parser.parse_line("entry Foo.bar():V").depth == -1

    def test_line_endings_stripped(self, parser: TraceParser) -> None:
        record = parser.parse_line("    entry Foo.bar():V\r\n")
        assert record.signature == "bar()"

    def test_line_number_kept(self, parser: TraceParser) -> None:
        assert parser.parse_line("    entry Foo.bar():V", line_no=7).line_no == 7

    def test_call_types_are_interned(self, parser: TraceParser) -> None:
        a = parser.parse_line("        directly calls A.a():V")
        b = parser.parse_line("        directly calls B.b():V")
        assert a.call_type is b.call_type


class TestMalformedLines:
    """Tests for lines missing a delimiter."""

    @pytest.mark.parametrize(
        "line",
        [
            "    no delimiters here",
            "    entry Foo.bar",
            "    entry Foo.bar()V",
            "    Foo.bar():V",
            "    entry Foo(int).bar:V",
        ],
    )
    def test_raises(self, parser: TraceParser, line: str) -> None:
        with pytest.raises(MalformedRecordError):
            parser.parse_line(line)

    def test_error_carries_line(self, parser: TraceParser) -> None:
        with pytest.raises(MalformedRecordError) as exc_info:
            parser.parse_line("    garbage", line_no=12)

        assert exc_info.value.line_no == 12
        assert exc_info.value.line == "    garbage"
        assert "line 12" in str(exc_info.value)
