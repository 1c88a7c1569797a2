"""Per-document annotation rendering and handle tracking."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from scope_echo.engine.extractor import AnnotationRecord, ScopeSource, extract_annotations
from scope_echo.logging import EventHandler, emit, make_event
from scope_echo.targets import TargetRegistry

DEFAULT_OVERLAY_PREFIX = "  ¤ "


@dataclass(slots=True, frozen=True)
class AnnotationStyle:
    """Named visual style for scope labels, inheriting a host style."""

    name: str = "scope-echo"
    inherit: str | None = "comment"


class AnnotationSink(Protocol):
    """Host primitives for drawing and removing inline labels."""

    def create_annotation(self, offset: int, text: str, style: AnnotationStyle) -> object:
        """Draw text at offset and return an opaque handle."""

    def destroy_annotation(self, handle: object) -> None:
        """Remove a previously created annotation."""


@dataclass(slots=True, frozen=True)
class RenderedAnnotation:
    """Live annotation handle and the record it was drawn from."""

    handle: object
    anchor: int
    label: str


@dataclass(slots=True)
class DocumentAnnotations:
    """Annotations currently tracked for one document."""

    document_id: str
    rendered: list[RenderedAnnotation] = field(default_factory=list)

    def anchors(self) -> set[int]:
        """Return the anchors that already carry an annotation."""
        return {annotation.anchor for annotation in self.rendered}


class AnnotationRenderer:
    """Install and release scope labels, one tracked collection per document."""

    def __init__(
        self,
        sink: AnnotationSink,
        *,
        prefix: str = DEFAULT_OVERLAY_PREFIX,
        style: AnnotationStyle | None = None,
        dedupe_anchors: bool = True,
    ) -> None:
        self._sink = sink
        self._prefix = prefix
        self._style = style or AnnotationStyle()
        self._dedupe_anchors = dedupe_anchors
        self._documents: dict[str, DocumentAnnotations] = {}

    def state(self, document_id: str) -> DocumentAnnotations:
        """Return the tracked collection for a document, creating it if needed."""
        tracked = self._documents.get(document_id)
        if tracked is None:
            tracked = DocumentAnnotations(document_id=document_id)
            self._documents[document_id] = tracked
        return tracked

    def annotations(self, document_id: str) -> tuple[RenderedAnnotation, ...]:
        """Return the annotations tracked for a document in install order."""
        tracked = self._documents.get(document_id)
        if tracked is None:
            return ()
        return tuple(tracked.rendered)

    def clear_all(self, document_id: str) -> int:
        """Release every tracked annotation for a document; return how many."""
        tracked = self._documents.get(document_id)
        if tracked is None or not tracked.rendered:
            return 0
        released, tracked.rendered = tracked.rendered, []
        for annotation in released:
            self._sink.destroy_annotation(annotation.handle)
        return len(released)

    def install(self, document_id: str, records: Iterable[AnnotationRecord]) -> int:
        """Draw records in order and track their handles; return how many were drawn."""
        tracked = self.state(document_id)
        seen = tracked.anchors() if self._dedupe_anchors else set()
        installed = 0
        for record in records:
            if self._dedupe_anchors:
                if record.anchor in seen:
                    continue
                seen.add(record.anchor)
            handle = self._sink.create_annotation(
                record.anchor, f"{self._prefix}{record.label}", self._style
            )
            tracked.rendered.append(
                RenderedAnnotation(handle=handle, anchor=record.anchor, label=record.label)
            )
            installed += 1
        return installed

    def recompute(
        self,
        document: ScopeSource,
        language: str | None,
        min_lines: int,
        registry: TargetRegistry,
        on_event: EventHandler | None = None,
    ) -> tuple[RenderedAnnotation, ...]:
        """Replace a document's annotations with a fresh extraction."""
        document_id = document.document_id
        released = self.clear_all(document_id)
        records = extract_annotations(document, language, min_lines, registry, on_event)
        installed = self.install(document_id, records)
        emit(
            on_event,
            make_event(
                document_id,
                "recompute",
                language=language,
                released=released,
                records=len(records),
                installed=installed,
            ),
        )
        return self.annotations(document_id)

    def forget(self, document_id: str) -> None:
        """Release a document's annotations and drop its tracked collection."""
        self.clear_all(document_id)
        self._documents.pop(document_id, None)
