"""Integration tests: trace file to graph, CLI, HTML export and MCP tools."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from calltree.cli import app
from calltree.core.graph import CallGraph, load, load_with_stats
from calltree.core.graph.query import get_class, get_method, list_entrypoints
from calltree.core.models import LoadStats
from calltree.export import class_file, export_html, method_file
from calltree.mcp.server import TOOLS, dispatch
from calltree.text import encode_signature

SAMPLE_TRACE = """\
Call tree for demo.jar
    entry demo.Main.main([Ljava/lang/String;)V:
        directly calls demo.Orders.create(I)Ldemo/Order;:
            directly calls demo.Order.<init>(I)V:
        virtually calls demo.Orders.ship(Ldemo/Order;)V:
            interfacially calls demo.Carrier.send(Ldemo/Order;)Z:
                is implemented by demo.Truck.send(Ldemo/Order;)Z:
    entry demo.Main.main([Ljava/lang/String;)V:
        directly calls demo.Orders.create(I)Ldemo/Order;:
    entry demo.Worker.run()V:
        virtually calls demo.Orders.ship(Ldemo/Order;)V:
"""

SHIP = "ship(Ldemo/Order;)V"


@pytest.fixture
def trace_file(tmp_path: Path) -> Path:
    """Write a sample trace to disk."""
    path = tmp_path / "calltree.txt"
    path.write_text(SAMPLE_TRACE, encoding="utf-8")
    return path


@pytest.fixture
def loaded(trace_file: Path) -> tuple[CallGraph, LoadStats]:
    return load_with_stats(trace_file)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestLoad:
    """Tests for loading a trace file end to end."""

    def test_entrypoints(self, trace_file: Path) -> None:
        graph = load(trace_file)
        assert [ref.qualified_name for ref in list_entrypoints(graph)] == [
            "demo.Main.main([Ljava/lang/String;)V",
            "demo.Worker.run()V",
        ]

    def test_counts(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, stats = loaded
        assert graph.num_classes == 6
        assert graph.num_methods == 7
        assert graph.num_edges == 6
        assert stats.edges == 6
        assert stats.duplicate_edges == 1
        assert stats.malformed == 0
        assert graph.frozen

    def test_shared_callee(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, _ = loaded
        info = get_method(graph, "demo.Orders", SHIP)
        assert info is not None
        assert {(r.call_type, r.qualified_name) for r in info.reverse} == {
            ("virtually called by", "demo.Main.main([Ljava/lang/String;)V"),
            ("virtually called by", "demo.Worker.run()V"),
        }

    def test_class_page_counts(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, _ = loaded
        info = get_class(graph, "demo.Orders")
        assert info is not None
        counts = {m.signature: (m.reverse_count, m.forward_count) for m in info.methods}
        assert counts == {"create(I)Ldemo/Order;": (1, 1), SHIP: (2, 1)}


class TestCli:
    """Tests for the command line."""

    def test_classes(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(app, ["--file", str(trace_file), "classes", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            "demo.Carrier",
            "demo.Main",
            "demo.Order",
            "demo.Orders",
            "demo.Truck",
            "demo.Worker",
        ]

    def test_file_from_environment(
        self, runner: CliRunner, trace_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CALLTREE_FILE", str(trace_file))
        result = runner.invoke(app, ["entrypoints", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)[1] == {"class_name": "demo.Worker", "signature": "run()V"}

    def test_class(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(app, ["--file", str(trace_file), "class", "demo.Orders", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["name"] == "demo.Orders"
        assert [m["signature"] for m in data["methods"]] == ["create(I)Ldemo/Order;", SHIP]

    def test_class_text(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(app, ["--file", str(trace_file), "class", "demo.Order"])
        assert result.exit_code == 0
        assert "<init>(I)V" in result.stdout

    def test_class_not_found(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(app, ["--file", str(trace_file), "class", "Nonexistent"])
        assert result.exit_code == 1
        assert "Class Nonexistent not found" in result.output

    def test_method(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(
            app, ["--file", str(trace_file), "method", "demo.Orders", SHIP, "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["forward"] == [
            {
                "call_type": "interfacially calls",
                "class_name": "demo.Carrier",
                "signature": "send(Ldemo/Order;)Z",
            }
        ]
        assert len(data["reverse"]) == 2

    def test_method_encoded_signature(self, runner: CliRunner, trace_file: Path) -> None:
        encoded = encode_signature(SHIP)
        result = runner.invoke(
            app, ["--file", str(trace_file), "method", "demo.Orders", encoded, "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["signature"] == SHIP

    def test_method_not_found(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(
            app, ["--file", str(trace_file), "method", "demo.Orders", "missing()", "--json"]
        )
        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"error": "Method missing() not found"}

    def test_trace(self, runner: CliRunner, trace_file: Path) -> None:
        args = ["trace", "demo.Carrier", "send(Ldemo/Order;)Z", "--json"]
        result = runner.invoke(app, ["--file", str(trace_file), *args])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["start"] == "demo.Carrier.send(Ldemo/Order;)Z"
        callee = data["callees"]["children"][0]
        assert callee["class_name"] == "demo.Truck"
        assert callee["call_type"] == "is implemented by"
        caller = data["callers"]["children"][0]
        assert caller["class_name"] == "demo.Orders"
        assert caller["call_type"] == "interfacially called by"
        assert len(caller["children"]) == 2

    def test_stats(self, runner: CliRunner, trace_file: Path) -> None:
        result = runner.invoke(app, ["--file", str(trace_file), "stats", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["classes"] == 6
        assert data["edges"] == 6
        assert data["entrypoints"] == 2

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--file", str(tmp_path / "nope.txt"), "classes"])
        assert result.exit_code == 2
        assert "Cannot read" in result.output

    def test_no_file_configured(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("CALLTREE_FILE", raising=False)
        result = runner.invoke(app, ["classes"])
        assert result.exit_code == 2


class TestExport:
    """Tests for the static HTML export."""

    def test_writes_all_pages(self, loaded: tuple[CallGraph, LoadStats], tmp_path: Path) -> None:
        graph, _ = loaded
        out = tmp_path / "site"
        pages = export_html(graph, out)

        assert pages == 2 + graph.num_classes + graph.num_methods
        assert (out / "index.html").is_file()
        assert (out / "classes.html").is_file()
        assert (out / class_file("demo.Orders")).is_file()
        assert (out / method_file("demo.Orders", SHIP)).is_file()

    def test_signatures_escaped(self, loaded: tuple[CallGraph, LoadStats], tmp_path: Path) -> None:
        graph, _ = loaded
        export_html(graph, tmp_path)

        page = (tmp_path / class_file("demo.Order")).read_text(encoding="utf-8")
        assert "&lt;init&gt;(I)V" in page
        assert "<init>" not in page

    def test_method_page_links(self, loaded: tuple[CallGraph, LoadStats], tmp_path: Path) -> None:
        graph, _ = loaded
        export_html(graph, tmp_path)

        page = (tmp_path / method_file("demo.Orders", SHIP)).read_text(encoding="utf-8")
        assert "interfacially calls" in page
        assert "virtually called by" in page
        assert "demo.Carrier.send(Ldemo/Order;)Z</a>" in page
        assert method_file("demo.Orders", SHIP).name == f"{encode_signature(SHIP)}.html"

    def test_long_signature_file_name(self, tmp_path: Path) -> None:
        long_signature = "m(" + "Ljava/lang/String;" * 40 + ")V"
        path = method_file("demo.Big", long_signature)
        assert len(path.name) < 255


class TestMcpTools:
    """Tests for the MCP tool handlers."""

    def test_tools_listed(self) -> None:
        names = {tool.name for tool in TOOLS}
        assert names == {
            "calltree_classes",
            "calltree_class",
            "calltree_entrypoints",
            "calltree_method",
            "calltree_trace",
            "calltree_stats",
        }

    def test_method(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, stats = loaded
        arguments = {"class_name": "demo.Truck", "signature": "send(Ldemo/Order;)Z"}
        result = dispatch(graph, stats, "calltree_method", arguments)
        assert list(result["reverse"]) == [
            {
                "call_type": "implements",
                "class_name": "demo.Carrier",
                "signature": "send(Ldemo/Order;)Z",
            }
        ]

    def test_not_found(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, stats = loaded
        assert dispatch(graph, stats, "calltree_class", {"class_name": "Nope"}) == {
            "error": "Class Nope not found"
        }
        result = dispatch(
            graph, stats, "calltree_method", {"class_name": "demo.Main", "signature": "x()"}
        )
        assert "error" in result

    def test_entrypoints_and_stats(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, stats = loaded
        entries = dispatch(graph, stats, "calltree_entrypoints", {})["results"]
        assert entries[0] == {
            "class_name": "demo.Main",
            "signature": "main([Ljava/lang/String;)V",
        }
        assert dispatch(graph, stats, "calltree_stats", {})["methods"] == 7

    def test_unknown_tool(self, loaded: tuple[CallGraph, LoadStats]) -> None:
        graph, stats = loaded
        assert dispatch(graph, stats, "nope", {}) == {"error": "Unknown tool: nope"}
