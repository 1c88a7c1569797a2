"""Core syntax backend protocol and data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class ScopeNode:
    """Read-only view of a matched syntax node."""

    kind: str
    start_byte: int
    end_byte: int


@dataclass(slots=True, frozen=True)
class TextEdit:
    """Single buffer edit described in bytes and (row, column) points."""

    start_byte: int
    old_end_byte: int
    new_end_byte: int
    start_point: tuple[int, int]
    old_end_point: tuple[int, int]
    new_end_point: tuple[int, int]


class QueryConstructionError(ValueError):
    """Raised when a combined scope query cannot be built for a grammar."""


class GrammarUnavailableError(ValueError):
    """Raised when no grammar can be loaded for a language key."""


class SyntaxBackend(Protocol):
    """Protocol implemented by parsing backends."""

    name: str

    def parse(self, source: bytes, previous: object | None = None) -> object | None:
        """Parse source bytes, reusing a previous (edited) tree when possible."""

    def apply_edit(self, tree: object, edit: TextEdit) -> None:
        """Record an edit on a tree ahead of an incremental reparse."""

    def query(self, tree: object | None, kinds: tuple[str, ...]) -> list[ScopeNode]:
        """Return nodes of the given kinds in query emission order."""
