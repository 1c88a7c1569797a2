"""Per-document feature toggle wiring document events to the renderer."""

from __future__ import annotations

from scope_echo.config import ScopeEchoConfig
from scope_echo.document import CHANGED, PARSED, DocumentListener, TextDocument
from scope_echo.engine import AnnotationRenderer, AnnotationSink, RenderedAnnotation
from scope_echo.logging import EventHandler, emit, make_event


class ScopeEchoMode:
    """Enable or disable scope echoes on individual documents."""

    def __init__(
        self,
        config: ScopeEchoConfig,
        renderer: AnnotationRenderer,
        on_event: EventHandler | None = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._on_event = on_event
        self._enabled: dict[str, tuple[TextDocument, DocumentListener]] = {}

    @classmethod
    def for_sink(
        cls,
        config: ScopeEchoConfig,
        sink: AnnotationSink,
        on_event: EventHandler | None = None,
    ) -> ScopeEchoMode:
        """Build a mode whose renderer draws onto the given sink."""
        renderer = AnnotationRenderer(
            sink,
            prefix=config.overlay_prefix,
            style=config.style,
            dedupe_anchors=config.dedupe_anchors,
        )
        return cls(config, renderer, on_event)

    @property
    def renderer(self) -> AnnotationRenderer:
        """Return the renderer shared by all enabled documents."""
        return self._renderer

    def is_enabled(self, document_id: str) -> bool:
        """Return True when the feature is active for a document."""
        return document_id in self._enabled

    def enable(self, document: TextDocument) -> None:
        """Attach recompute to the document's events and annotate it now if parsed."""
        if document.document_id in self._enabled:
            return
        listener: DocumentListener = self.refresh
        document.add_listener(PARSED, listener)
        document.add_listener(CHANGED, listener)
        self._enabled[document.document_id] = (document, listener)
        emit(self._on_event, make_event(document.document_id, "enable", language=document.language))
        if document.is_parsed:
            self.refresh(document)

    def disable(self, document: TextDocument) -> None:
        """Detach listeners and release every annotation for the document."""
        entry = self._enabled.pop(document.document_id, None)
        if entry is None:
            return
        _, listener = entry
        document.remove_listener(PARSED, listener)
        document.remove_listener(CHANGED, listener)
        released = self._renderer.clear_all(document.document_id)
        self._renderer.forget(document.document_id)
        emit(self._on_event, make_event(document.document_id, "disable", released=released))

    def refresh(self, document: TextDocument) -> tuple[RenderedAnnotation, ...]:
        """Run one recompute cycle for a document."""
        return self._renderer.recompute(
            document,
            document.language,
            self._config.min_lines,
            self._config.targets,
            self._on_event,
        )
