from __future__ import annotations

from scope_echo.config import ScopeEchoConfig
from scope_echo.document import CHANGED, PARSED, TextDocument
from scope_echo.engine import OverlayCanvas
from scope_echo.logging import EngineEvent
from scope_echo.mode import ScopeEchoMode
from scope_echo.syntax import PythonAstBackend


def if_block(body_lines: int) -> str:
    return "x = 1\nif x:\n" + "".join(f"    y{index} = {index}\n" for index in range(body_lines))


def labels(canvas: OverlayCanvas) -> list[tuple[int, str]]:
    return [(item.offset, item.text) for item in canvas.live()]


def test_ten_line_if_block_gets_one_echo_on_its_closing_line() -> None:
    text = if_block(9)
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("a.py", text, "python", PythonAstBackend())

    mode.enable(document)
    document.parse()

    assert labels(canvas) == [(len(text) - 1, "  ¤ if x:")]
    assert canvas.render(document.source).splitlines()[-1] == "    y8 = 8  ¤ if x:"


def test_crlf_buffers_get_the_echo_before_the_line_break() -> None:
    text = if_block(9).replace("\n", "\r\n")
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("a.py", text, "python", PythonAstBackend())

    mode.enable(document)
    document.parse()

    assert labels(canvas) == [(len(text) - 2, "  ¤ if x:")]
    assert canvas.render(document.source).endswith("    y8 = 8  ¤ if x:\r\n")


def test_block_spanning_exactly_min_lines_is_not_echoed() -> None:
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(min_lines=5), canvas)
    document = TextDocument("a.py", if_block(5), "python", PythonAstBackend())
    document.parse()

    mode.enable(document)

    assert canvas.live() == []


def test_edits_that_grow_a_block_past_the_threshold_add_an_echo() -> None:
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("a.py", if_block(5), "python", PythonAstBackend())
    mode.enable(document)
    document.parse()
    assert canvas.live() == []

    document.insert(len(document.source), "    extra = 1\n")

    assert labels(canvas) == [(len(document.source) - 1, "  ¤ if x:")]

    document.delete(len(if_block(2)), len(if_block(4)))

    assert canvas.live() == []


def test_disable_clears_echoes_and_detaches_listeners() -> None:
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("a.py", if_block(9), "python", PythonAstBackend())
    mode.enable(document)
    document.parse()
    assert len(canvas.live()) == 1

    mode.disable(document)
    document.insert(len(document.source), "    more = 2\n")

    assert canvas.live() == []
    assert mode.is_enabled("a.py") is False
    assert document.listener_count(PARSED) == 0
    assert document.listener_count(CHANGED) == 0
    assert mode.renderer.annotations("a.py") == ()


def test_reenable_matches_a_fresh_enable() -> None:
    text = if_block(9)
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("a.py", text, "python", PythonAstBackend())
    document.parse()
    mode.enable(document)
    mode.disable(document)

    mode.enable(document)

    fresh_canvas = OverlayCanvas()
    fresh_document = TextDocument("b.py", text, "python", PythonAstBackend())
    fresh_document.parse()
    ScopeEchoMode.for_sink(ScopeEchoConfig(), fresh_canvas).enable(fresh_document)
    assert labels(canvas) == labels(fresh_canvas)


def test_enable_twice_registers_listeners_once() -> None:
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), OverlayCanvas())
    document = TextDocument("a.py", if_block(9), "python", PythonAstBackend())

    mode.enable(document)
    mode.enable(document)

    assert document.listener_count(PARSED) == 1
    assert document.listener_count(CHANGED) == 1


def test_unsupported_language_produces_no_echoes() -> None:
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), canvas)
    document = TextDocument("notes", if_block(9), "plaintext", PythonAstBackend())
    document.parse()

    mode.enable(document)

    assert canvas.live() == []


def test_mode_reports_enable_recompute_and_disable_events() -> None:
    events: list[EngineEvent] = []
    mode = ScopeEchoMode.for_sink(ScopeEchoConfig(), OverlayCanvas(), events.append)
    document = TextDocument("a.py", if_block(9), "python", PythonAstBackend())
    document.parse()

    mode.enable(document)
    mode.disable(document)

    assert [event.event for event in events] == ["enable", "recompute", "disable"]
    assert events[1].metadata["installed"] == 1
    assert events[2].metadata == {"released": 1}
