"""Static HTML export of a call graph.

Writes one page per class and per method plus an entry point index and a
class index, linked together so the graph can be browsed offline::

    index.html                              entry points
    classes.html                            class index
    class/<class>.html                      methods with IN/OUT counts
    method/<class>/<signature>.html         calling / called by

Class names and signatures are percent-encoded into file names. Links encode
them a second time so that the browser's decoding of the link yields the
file name on disk.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

import structlog

from calltree.core.graph.query import get_class, get_method, list_classes, list_entrypoints
from calltree.text import encode_signature, escape_signature

if TYPE_CHECKING:
    from calltree.core.graph.base import CallGraph
    from calltree.core.graph.models import ClassInfo, MethodInfo

log = structlog.get_logger("calltree.export")

_MAX_NAME = 200

_STYLE = "a { text-decoration: none; }a:hover { text-decoration: underline }"


def _page(root: str, body: str) -> str:
    header = (
        f'<a href="{root}index.html">VM entry-points</a>&nbsp;&nbsp;'
        f'<a href="{root}classes.html">class index</a>\n'
    )
    return (
        f"<html><head><meta charset=\"utf-8\"><style>{_STYLE}</style></head><body>"
        f"{header}{body}</body></html>"
    )


def _file_name(text: str) -> str:
    """Encoded file name for a class or signature, shortened past filesystem limits."""
    name = encode_signature(text)
    if len(name) > _MAX_NAME:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]
        name = f"{name[: _MAX_NAME - 17]}-{digest}"
    return name


def class_file(class_name: str) -> Path:
    return Path("class") / f"{_file_name(class_name)}.html"


def method_file(class_name: str, signature: str) -> Path:
    return Path("method") / _file_name(class_name) / f"{_file_name(signature)}.html"


def _href(root: str, path: Path) -> str:
    return root + "/".join(quote(part, safe="") for part in path.parts)


def _method_link(root: str, class_name: str, signature: str) -> str:
    href = _href(root, method_file(class_name, signature))
    label = f"{escape_signature(class_name)}.{escape_signature(signature)}"
    return f'<a href="{href}">{label}</a>'


def render_entrypoints(graph: CallGraph) -> str:
    lines = ["<h1>VM entry-points</h1>\n"]
    for ref in list_entrypoints(graph):
        lines.append(f"{_method_link('', ref.class_name, ref.signature)}<br>\n")
    return _page("", "".join(lines))


def render_classes(graph: CallGraph) -> str:
    lines = ["<h1>Classes</h1>\n"]
    for name in list_classes(graph):
        href = _href("", class_file(name))
        lines.append(f'<a href="{href}">{escape_signature(name)}</a><br>\n')
    return _page("", "".join(lines))


def render_class(info: ClassInfo) -> str:
    root = "../"
    lines = [f"<h1>class {escape_signature(info.name)}</h1>\n"]
    for method in info.methods:
        href = _href(root, method_file(info.name, method.signature))
        lines.append(f'<span style="float: left; width: 80px">IN {method.reverse_count}</span>\n')
        lines.append(f'<span style="float: left; width: 80px">OUT {method.forward_count}</span>\n')
        lines.append(f'<a href="{href}">{escape_signature(method.signature)}</a><br>\n')
    return _page(root, "".join(lines))


def render_method(info: MethodInfo) -> str:
    root = "../../"
    class_href = _href(root, class_file(info.class_name))
    lines = [
        f"<h1>method {escape_signature(info.signature)}</h1>\n",
        f'Class: <a href="{class_href}">{escape_signature(info.class_name)}</a>',
        "<h2>Calling:</h2>",
    ]
    for call in info.forward:
        link = _method_link(root, call.class_name, call.signature)
        lines.append(f"{escape_signature(call.call_type)} {link}<br>\n")
    lines.append("<h2>Called by</h2>")
    for call in info.reverse:
        link = _method_link(root, call.class_name, call.signature)
        lines.append(f"{escape_signature(call.call_type)} {link}<br>\n")
    return _page(root, "".join(lines))


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def export_html(graph: CallGraph, output_dir: Path) -> int:
    """Write the browsable pages for ``graph`` under ``output_dir``.

    Returns:
        Number of pages written.
    """
    _write(output_dir / "index.html", render_entrypoints(graph))
    _write(output_dir / "classes.html", render_classes(graph))
    pages = 2

    for class_name in list_classes(graph):
        info = get_class(graph, class_name)
        if info is None:
            continue
        _write(output_dir / class_file(class_name), render_class(info))
        pages += 1
        for summary in info.methods:
            method = get_method(graph, class_name, summary.signature)
            if method is None:
                continue
            _write(output_dir / method_file(class_name, method.signature), render_method(method))
            pages += 1

    log.info("export.done", output_dir=str(output_dir), pages=pages)
    return pages
