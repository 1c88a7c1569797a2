"""In-memory annotation sink that renders labels into plain text."""

from __future__ import annotations

from dataclasses import dataclass

from scope_echo.engine.renderer import AnnotationStyle


@dataclass(slots=True, frozen=True)
class CanvasAnnotation:
    """One live label on the canvas."""

    handle: int
    offset: int
    text: str
    style: AnnotationStyle


class OverlayCanvas:
    """Annotation sink keeping live labels keyed by integer handle."""

    def __init__(self) -> None:
        self._live: dict[int, CanvasAnnotation] = {}
        self._next_handle = 1

    def create_annotation(self, offset: int, text: str, style: AnnotationStyle) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._live[handle] = CanvasAnnotation(handle=handle, offset=offset, text=text, style=style)
        return handle

    def destroy_annotation(self, handle: object) -> None:
        # releasing an unknown handle is a no-op
        if isinstance(handle, int):
            self._live.pop(handle, None)

    def live(self) -> list[CanvasAnnotation]:
        """Return live labels ordered by offset, then creation order."""
        return sorted(self._live.values(), key=lambda item: (item.offset, item.handle))

    def render(self, source: bytes) -> str:
        """Return source text with every live label inserted at its offset."""
        rendered = source
        # insert from the end so earlier offsets stay valid
        for annotation in sorted(
            self._live.values(), key=lambda item: (item.offset, item.handle), reverse=True
        ):
            offset = min(max(annotation.offset, 0), len(rendered))
            rendered = rendered[:offset] + annotation.text.encode("utf-8") + rendered[offset:]
        return rendered.decode("utf-8", errors="replace")
