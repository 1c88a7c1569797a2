"""In-memory text document with an incrementally maintained syntax tree."""

from __future__ import annotations

from collections.abc import Callable

from scope_echo.syntax import LineIndex, ScopeNode, SyntaxBackend, TextEdit

PARSED = "parsed"
CHANGED = "changed"
DOCUMENT_EVENTS = (PARSED, CHANGED)

DocumentListener = Callable[["TextDocument"], None]


class TextDocument:
    """Source buffer owning its bytes, current tree and listener lists.

    Listeners run synchronously in registration order, so change events for
    one document are always delivered one at a time.
    """

    def __init__(
        self,
        document_id: str,
        text: str,
        language: str | None,
        backend: SyntaxBackend,
    ) -> None:
        self.document_id = document_id
        self.language = language
        self._backend = backend
        self._source = text.encode("utf-8")
        self._lines = LineIndex(self._source)
        self._tree: object | None = None
        self._parsed = False
        self._listeners: dict[str, list[DocumentListener]] = {
            event: [] for event in DOCUMENT_EVENTS
        }

    @property
    def source(self) -> bytes:
        """Return the current buffer contents as UTF-8 bytes."""
        return self._source

    @property
    def tree(self) -> object | None:
        """Return the current syntax tree, if any."""
        return self._tree

    @property
    def is_parsed(self) -> bool:
        """Return True once the initial parse has completed."""
        return self._parsed

    def add_listener(self, event: str, callback: DocumentListener) -> None:
        """Register a callback for the parsed or changed event."""
        self._listeners_for(event).append(callback)

    def remove_listener(self, event: str, callback: DocumentListener) -> bool:
        """Detach a callback; return False when it was not registered."""
        listeners = self._listeners_for(event)
        if callback not in listeners:
            return False
        listeners.remove(callback)
        return True

    def listener_count(self, event: str) -> int:
        """Return the number of callbacks registered for an event."""
        return len(self._listeners_for(event))

    def parse(self) -> None:
        """Run the initial full parse and notify parsed listeners."""
        self._tree = self._backend.parse(self._source)
        self._parsed = True
        self._emit(PARSED)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace bytes [start, end) with text, reparse and notify change listeners."""
        if start < 0 or end < start or end > len(self._source):
            raise ValueError(f"Invalid edit range [{start}, {end}) for {len(self._source)} bytes.")
        inserted = text.encode("utf-8")
        new_source = self._source[:start] + inserted + self._source[end:]
        new_lines = LineIndex(new_source)
        new_end = start + len(inserted)
        edit = TextEdit(
            start_byte=start,
            old_end_byte=end,
            new_end_byte=new_end,
            start_point=self._lines.point_at(start),
            old_end_point=self._lines.point_at(end),
            new_end_point=new_lines.point_at(new_end),
        )
        previous = self._tree
        if previous is not None:
            self._backend.apply_edit(previous, edit)
        self._source = new_source
        self._lines = new_lines
        self._tree = self._backend.parse(new_source, previous)
        self._parsed = True
        self._emit(CHANGED)

    def insert(self, offset: int, text: str) -> None:
        """Insert text at a byte offset."""
        self.replace(offset, offset, text)

    def delete(self, start: int, end: int) -> None:
        """Delete bytes [start, end)."""
        self.replace(start, end, "")

    def query(self, kinds: tuple[str, ...]) -> list[ScopeNode]:
        """Run the backend scope query over the current tree."""
        return self._backend.query(self._tree, kinds)

    def position_at(self, offset: int) -> tuple[int, int]:
        """Return the 1-based line and byte column of an offset."""
        return self._lines.position_at(offset)

    def line_end_offset(self, offset: int) -> int:
        """Return the end-of-line offset for the line containing offset."""
        return self._lines.line_end_offset(offset)

    def line_text(self, offset: int) -> str:
        """Return the text of the line containing offset."""
        return self._lines.line_text(offset)

    def _listeners_for(self, event: str) -> list[DocumentListener]:
        listeners = self._listeners.get(event)
        if listeners is None:
            raise ValueError(f"Unknown document event '{event}'; expected {DOCUMENT_EVENTS}.")
        return listeners

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback(self)
