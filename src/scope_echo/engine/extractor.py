"""Scope extraction from a parsed document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from scope_echo.logging import EventHandler, emit, make_event
from scope_echo.syntax import QueryConstructionError, ScopeNode
from scope_echo.targets import TargetRegistry

DEFAULT_MIN_LINES = 5


@dataclass(slots=True, frozen=True)
class AnnotationRecord:
    """Label to draw at an anchor offset."""

    anchor: int
    label: str


class ScopeSource(Protocol):
    """Parsed document primitives the extractor reads from."""

    document_id: str

    def query(self, kinds: tuple[str, ...]) -> list[ScopeNode]:
        """Return nodes of the given kinds in query emission order."""

    def position_at(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and column of an offset."""

    def line_end_offset(self, offset: int) -> int:
        """Return the end-of-line offset for the line containing offset."""

    def line_text(self, offset: int) -> str:
        """Return the text of the line containing offset."""


def extract_annotations(
    document: ScopeSource,
    language: str | None,
    min_lines: int,
    registry: TargetRegistry,
    on_event: EventHandler | None = None,
) -> list[AnnotationRecord]:
    """Return annotations for every target node spanning more than min_lines.

    Records come back in reverse query emission order, so later-starting
    (inner) blocks precede the blocks that enclose them.
    """
    kinds = registry.targets_for(language)
    if not kinds:
        return []
    try:
        nodes = document.query(kinds)
    except QueryConstructionError as err:
        emit(
            on_event,
            make_event(
                document.document_id,
                "query_failed",
                ok=False,
                error_code="query_construction_failed",
                language=language,
                message=str(err),
            ),
        )
        return []

    records: list[AnnotationRecord] = []
    for node in reversed(nodes):
        start_line, _ = document.position_at(node.start_byte)
        end_line, _ = document.position_at(node.end_byte)
        if end_line - start_line <= min_lines:
            continue
        records.append(
            AnnotationRecord(
                anchor=document.line_end_offset(node.end_byte),
                label=document.line_text(node.start_byte).strip(),
            )
        )
    return records
