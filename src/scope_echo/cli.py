"""Command-line entrypoint printing a source file with its scope echoes."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from scope_echo.config import CliOverrides, ScopeEchoConfig, load_effective_config
from scope_echo.document import TextDocument
from scope_echo.engine import OverlayCanvas
from scope_echo.logging import EventHandler, JsonlEventLogger
from scope_echo.mode import ScopeEchoMode
from scope_echo.syntax import BACKEND_CHOICES, build_backend
from scope_echo.targets import language_for_path


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the annotate command."""
    parser = argparse.ArgumentParser(
        prog="scope-echo",
        description="Print a source file with block openings echoed on their closing lines.",
    )
    parser.add_argument("path")
    parser.add_argument("--language", required=False, default=None)
    parser.add_argument("--backend", choices=BACKEND_CHOICES, default="tree-sitter")
    parser.add_argument("--min-lines", type=int, required=False, default=None)
    parser.add_argument("--prefix", required=False, default=None)
    parser.add_argument("--no-dedupe", action="store_true")
    parser.add_argument("--config-root", required=False, default=".")
    parser.add_argument("--event-log", required=False, default=None)
    return parser


def annotate_text(
    text: str,
    language: str | None,
    config: ScopeEchoConfig,
    *,
    backend: str = "tree-sitter",
    document_id: str = "<buffer>",
    on_event: EventHandler | None = None,
) -> str:
    """Return text with scope echoes rendered at their anchors."""
    if language is None:
        return text
    document = TextDocument(document_id, text, language, build_backend(language, backend))
    canvas = OverlayCanvas()
    mode = ScopeEchoMode.for_sink(config, canvas, on_event)
    mode.enable(document)
    document.parse()
    return canvas.render(document.source)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the scope-echo command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        min_lines=args.min_lines,
        overlay_prefix=args.prefix,
        dedupe_anchors=False if args.no_dedupe else None,
    )
    on_event: EventHandler | None = None
    if args.event_log is not None:
        on_event = JsonlEventLogger(Path(args.event_log)).append
    try:
        config = load_effective_config(Path(args.config_root), overrides)
        text = Path(args.path).read_text(encoding="utf-8")
        language = args.language or language_for_path(args.path)
        output = annotate_text(
            text,
            language,
            config,
            backend=args.backend,
            document_id=args.path,
            on_event=on_event,
        )
    except (OSError, ValueError) as err:
        print(f"scope-echo: {err}", file=sys.stderr)
        return 2
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
