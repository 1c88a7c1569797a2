from __future__ import annotations

import pytest

pytest.importorskip("tree_sitter_python")

from scope_echo.config import ScopeEchoConfig  # noqa: E402
from scope_echo.document import TextDocument  # noqa: E402
from scope_echo.engine import OverlayCanvas  # noqa: E402
from scope_echo.mode import ScopeEchoMode  # noqa: E402
from scope_echo.syntax import TreeSitterBackend  # noqa: E402
from scope_echo.targets import DEFAULT_TARGETS  # noqa: E402

SOURCE = """class Pipeline:
    def run(self, items):
        for item in items:
            if item.ready:
                item.start()
                item.wait()
                item.check()
                item.finish()
                item.report()
                item.close()
        return items
"""


def test_combined_query_emits_mixed_kinds_in_document_order() -> None:
    backend = TreeSitterBackend("python")
    tree = backend.parse(SOURCE.encode("utf-8"))

    nodes = backend.query(tree, DEFAULT_TARGETS["python"])

    assert [node.kind for node in nodes] == [
        "class_definition",
        "function_definition",
        "for_statement",
        "if_statement",
    ]


def test_unknown_kinds_are_left_out_of_the_query() -> None:
    backend = TreeSitterBackend("python")
    tree = backend.parse(SOURCE.encode("utf-8"))

    nodes = backend.query(tree, ("if_statement", "no_such_kind"))

    assert [node.kind for node in nodes] == ["if_statement"]
    assert backend.query(tree, ("no_such_kind",)) == []


def test_python_echoes_with_and_without_anchor_dedupe() -> None:
    deduped = OverlayCanvas()
    stacked = OverlayCanvas()
    for canvas, dedupe in ((deduped, True), (stacked, False)):
        document = TextDocument("p.py", SOURCE, "python", TreeSitterBackend("python"))
        document.parse()
        ScopeEchoMode.for_sink(ScopeEchoConfig(dedupe_anchors=dedupe), canvas).enable(document)

    rendered = deduped.render(SOURCE.encode("utf-8")).splitlines()
    assert rendered[9] == "                item.close()  ¤ if item.ready:"
    assert rendered[10] == "        return items  ¤ def run(self, items):"

    assert [item.text for item in stacked.live()] == [
        "  ¤ if item.ready:",
        "  ¤ for item in items:",
        "  ¤ def run(self, items):",
        "  ¤ class Pipeline:",
    ]


def test_incremental_edit_moves_the_echo_to_the_innermost_long_block() -> None:
    canvas = OverlayCanvas()
    document = TextDocument("p.py", SOURCE, "python", TreeSitterBackend("python"))
    ScopeEchoMode.for_sink(ScopeEchoConfig(min_lines=9), canvas).enable(document)
    document.parse()
    assert [item.text for item in canvas.live()] == ["  ¤ class Pipeline:"]

    offset = document.source.index(b"        return items")
    document.insert(offset, "        items.sort()\n")

    assert [item.text for item in canvas.live()] == ["  ¤ def run(self, items):"]
    assert canvas.live()[0].offset == len(document.source) - 1


def test_incremental_edit_stacks_shared_anchors_without_dedupe() -> None:
    canvas = OverlayCanvas()
    document = TextDocument("p.py", SOURCE, "python", TreeSitterBackend("python"))
    config = ScopeEchoConfig(min_lines=9, dedupe_anchors=False)
    ScopeEchoMode.for_sink(config, canvas).enable(document)
    document.parse()

    offset = document.source.index(b"        return items")
    document.insert(offset, "        items.sort()\n")

    assert [item.text for item in canvas.live()] == [
        "  ¤ def run(self, items):",
        "  ¤ class Pipeline:",
    ]
    assert {item.offset for item in canvas.live()} == {len(document.source) - 1}
