"""CLI entry point for calltree."""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from calltree.core.config import ENV_LOG_LEVEL, ENV_TRACE_FILE, get_trace_path
from calltree.core.exceptions import ConfigurationError, TraceReadError
from calltree.core.graph import CallGraph, TreeNode, load_with_stats
from calltree.core.graph.query import (
    get_class,
    get_method,
    invert_call_type,
    list_classes,
    list_entrypoints,
)
from calltree.core.graph.traversal import get_callee_tree, get_caller_tree
from calltree.core.logging import setup_logging
from calltree.core.models import LoadStats
from calltree.text import decode_signature

app = typer.Typer(
    name="calltree",
    help="Browse the call graph recorded in a call-tree trace.",
    no_args_is_help=True,
)
console = Console()

_EXIT_NOT_FOUND = 1
_EXIT_LOAD_FAILED = 2


@app.callback()
def main(
    ctx: typer.Context,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", envvar=ENV_TRACE_FILE, help="Call tree trace to load"),
    ] = None,
    log_level: Annotated[
        str, typer.Option("--log-level", envvar=ENV_LOG_LEVEL, help="Log level for stderr")
    ] = "WARNING",
) -> None:
    """Browse the call graph recorded in a call-tree trace."""
    setup_logging(level=log_level)
    ctx.obj = file


def load_graph(ctx: typer.Context) -> tuple[CallGraph, LoadStats]:
    """Load the configured trace, exiting with a message if it cannot be read."""
    try:
        path = get_trace_path(ctx.obj)
        return load_with_stats(path)
    except (ConfigurationError, TraceReadError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=_EXIT_LOAD_FAILED) from e


def _resolve_signature(graph: CallGraph, class_name: str, signature: str) -> str:
    """Accept a signature as typed or percent-encoded."""
    if graph.get_method(class_name, signature) is None:
        decoded = decode_signature(signature)
        if graph.get_method(class_name, decoded) is not None:
            return decoded
    return signature


def _not_found(message: str, output_json: bool) -> typer.Exit:
    if output_json:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]{escape(message)}[/red]")
    return typer.Exit(code=_EXIT_NOT_FOUND)


@app.command()
def classes(
    ctx: typer.Context,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List all classes."""
    graph, _ = load_graph(ctx)
    names = list_classes(graph)

    if output_json:
        print(json.dumps(names))
        return
    for name in names:
        console.print(f"[cyan]{escape(name)}[/cyan]")


@app.command("class")
def show_class(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Fully qualified class name")],
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show the methods of a class with their IN/OUT call counts."""
    graph, _ = load_graph(ctx)
    info = get_class(graph, name)
    if info is None:
        raise _not_found(f"Class {name} not found", output_json)

    if output_json:
        print(json.dumps(asdict(info)))
        return

    console.print(f"[bold]class [cyan]{escape(info.name)}[/cyan][/]")
    for summary in info.methods:
        console.print(
            f"  [dim]IN[/] {summary.reverse_count:<6} [dim]OUT[/] {summary.forward_count:<6} "
            f"{escape(summary.signature)}"
        )


@app.command()
def entrypoints(
    ctx: typer.Context,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List entry points in the order they appear in the trace."""
    graph, _ = load_graph(ctx)
    refs = list_entrypoints(graph)

    if output_json:
        print(json.dumps([asdict(ref) for ref in refs]))
        return
    for ref in refs:
        console.print(f"[cyan]{escape(ref.class_name)}[/].{escape(ref.signature)}")


@app.command()
def method(
    ctx: typer.Context,
    class_name: Annotated[str, typer.Argument(help="Fully qualified class name")],
    signature: Annotated[str, typer.Argument(help="Method signature, raw or URL-encoded")],
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show what a method calls and what calls it."""
    graph, _ = load_graph(ctx)
    if graph.get_class(class_name) is None:
        raise _not_found(f"Class {class_name} not found", output_json)
    signature = _resolve_signature(graph, class_name, signature)
    info = get_method(graph, class_name, signature)
    if info is None:
        raise _not_found(f"Method {signature} not found", output_json)

    if output_json:
        print(json.dumps(asdict(info)))
        return

    console.print(f"[bold]method [cyan]{escape(info.signature)}[/cyan][/]")
    console.print(f"  [dim]Class:[/] {escape(info.class_name)}")

    console.print("\n[green]Calling:[/]")
    if not info.forward:
        console.print("  [dim]No calls found[/]")
    for call in info.forward:
        console.print(f"  [dim]{escape(call.call_type)}[/] {escape(call.qualified_name)}")

    console.print("\n[green]Called by:[/]")
    if not info.reverse:
        console.print("  [dim]No callers found[/]")
    for call in info.reverse:
        console.print(f"  [dim]{escape(call.call_type)}[/] {escape(call.qualified_name)}")


def _call_label(node: TreeNode, reverse: bool) -> str | None:
    """Call type linking a tree node to its parent, inverted in caller trees."""
    if node.edge is None:
        return None
    return invert_call_type(node.edge.call_type) if reverse else node.edge.call_type


def _tree_to_dict(node: TreeNode, reverse: bool = False) -> dict[str, object]:
    return {
        "class_name": node.method.class_name,
        "signature": node.method.signature,
        "call_type": _call_label(node, reverse),
        "depth": node.depth,
        "children": [_tree_to_dict(c, reverse) for c in node.children],
    }


@app.command()
def trace(
    ctx: typer.Context,
    class_name: Annotated[str, typer.Argument(help="Fully qualified class name")],
    signature: Annotated[str, typer.Argument(help="Method signature, raw or URL-encoded")],
    max_depth: Annotated[int, typer.Option("--depth", "-d", help="Maximum trace depth")] = 5,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Trace the calls around a method as trees (callers and callees)."""
    graph, _ = load_graph(ctx)
    signature = _resolve_signature(graph, class_name, signature)
    start = graph.get_method(class_name, signature)
    if start is None:
        raise _not_found(f"Method {class_name}.{signature} not found", output_json)

    callee_tree = get_callee_tree(graph, start.id, max_depth)
    caller_tree = get_caller_tree(graph, start.id, max_depth)

    if output_json:
        result = {
            "start": start.qualified_name,
            "callers": _tree_to_dict(caller_tree, reverse=True) if caller_tree else None,
            "callees": _tree_to_dict(callee_tree) if callee_tree else None,
        }
        print(json.dumps(result))
        return

    def print_tree(node: TreeNode, prefix: str, reverse: bool) -> None:
        for i, child in enumerate(node.children):
            is_last = i == len(node.children) - 1
            branch = "└─" if is_last else "├─"
            call_type = _call_label(child, reverse) or ""
            color = "blue" if reverse else "cyan"
            console.print(
                f"{prefix}{branch} [dim]{escape(call_type)}[/] "
                f"[{color}]{escape(child.method.qualified_name)}[/]"
            )
            print_tree(child, prefix + ("   " if is_last else "│  "), reverse)

    console.print(f"\n[bold yellow]▶ {escape(start.qualified_name)}[/]\n")

    if caller_tree and caller_tree.children:
        console.print("[dim]Callers:[/]")
        print_tree(caller_tree, "", reverse=True)
        console.print()

    if callee_tree and callee_tree.children:
        console.print("[dim]Callees:[/]")
        print_tree(callee_tree, "", reverse=False)

    caller_count = len(caller_tree) - 1 if caller_tree else 0
    callee_count = len(callee_tree) - 1 if callee_tree else 0
    console.print(f"\n[dim]Callers: {caller_count} | Callees: {callee_count}[/]")


@app.command()
def stats(
    ctx: typer.Context,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show graph and load statistics."""
    graph, load_stats = load_graph(ctx)
    result = {
        "classes": graph.num_classes,
        "methods": graph.num_methods,
        **load_stats.to_dict(),
    }

    if output_json:
        print(json.dumps(result))
        return

    console.print(f"Classes: {result['classes']}")
    console.print(f"Methods: {result['methods']}")
    console.print(f"Edges: {result['edges']}")
    console.print(f"Entry points: {result['entrypoints']}")
    if load_stats.duplicate_edges:
        console.print(f"  [dim]Repeated calls merged: {load_stats.duplicate_edges}[/]")
    if load_stats.malformed:
        console.print(f"  [red]Malformed lines: {load_stats.malformed}[/red]")
        for error in load_stats.errors:
            console.print(f"    {escape(error)}")
    for warning in load_stats.warnings:
        console.print(f"  [yellow]{escape(warning)}[/yellow]")


@app.command()
def export(
    ctx: typer.Context,
    output_dir: Annotated[Path, typer.Argument(help="Directory to write HTML pages to")],
) -> None:
    """Write the graph as static, linked HTML pages."""
    from calltree.export import export_html

    graph, _ = load_graph(ctx)
    pages = export_html(graph, output_dir)
    console.print(f"[green]Done![/green] {pages} pages written to {escape(str(output_dir))}")


if __name__ == "__main__":
    app()
