"""Structured JSONL engine event log utilities."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class EngineEvent:
    """Single annotation engine event for one document."""

    timestamp: str
    document_id: str
    event: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object] = field(default_factory=dict)


EventHandler = Callable[[EngineEvent], None]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_event(
    document_id: str,
    event: str,
    *,
    ok: bool = True,
    error_code: str | None = None,
    **metadata: object,
) -> EngineEvent:
    """Build a timestamped event with sorted metadata keys."""
    return EngineEvent(
        timestamp=utc_timestamp(),
        document_id=document_id,
        event=event,
        ok=ok,
        error_code=error_code,
        metadata={key: metadata[key] for key in sorted(metadata)},
    )


def emit(handler: EventHandler | None, event: EngineEvent) -> None:
    """Deliver an event to an optional handler."""
    if handler is not None:
        handler(event)


class JsonlEventLogger:
    """Append-only JSONL event logger."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: EngineEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")
