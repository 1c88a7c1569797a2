"""Byte offset to line/column mapping for a source buffer."""

from __future__ import annotations

from bisect import bisect_right


class LineIndex:
    """Line start table over UTF-8 source bytes.

    Lines are 1-based; columns are 0-based byte columns.
    """

    def __init__(self, source: bytes) -> None:
        self._source = source
        starts = [0]
        index = source.find(b"\n")
        while index != -1:
            starts.append(index + 1)
            index = source.find(b"\n", index + 1)
        self._starts = starts

    @property
    def line_count(self) -> int:
        """Return the number of lines, counting a trailing empty line."""
        return len(self._starts)

    def _clamp(self, offset: int) -> int:
        return min(max(offset, 0), len(self._source))

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing a byte offset."""
        return bisect_right(self._starts, self._clamp(offset))

    def position_at(self, offset: int) -> tuple[int, int]:
        """Return the (line, column) of a byte offset."""
        clamped = self._clamp(offset)
        line = bisect_right(self._starts, clamped)
        return line, clamped - self._starts[line - 1]

    def offset_at(self, line: int, column: int = 0) -> int:
        """Return the byte offset of a (line, column) position."""
        if line < 1 or line > len(self._starts):
            raise ValueError(f"Line {line} is outside 1..{len(self._starts)}.")
        return self._clamp(self._starts[line - 1] + column)

    def point_at(self, offset: int) -> tuple[int, int]:
        """Return the 0-based (row, column) point of a byte offset."""
        line, column = self.position_at(offset)
        return line - 1, column

    def line_start_offset(self, offset: int) -> int:
        """Return the offset of the start of the line containing offset."""
        return self._starts[self.line_of(offset) - 1]

    def line_end_offset(self, offset: int) -> int:
        """Return the offset of the end of the line containing offset, before the line break."""
        line = self.line_of(offset)
        start = self._starts[line - 1]
        end = self._starts[line] - 1 if line < len(self._starts) else len(self._source)
        if end > start and self._source[end - 1 : end] == b"\r":
            end -= 1
        return end

    def line_text(self, offset: int) -> str:
        """Return the text of the line containing offset, without its newline."""
        start = self.line_start_offset(offset)
        end = self.line_end_offset(offset)
        return self._source[start:end].decode("utf-8", errors="replace")
