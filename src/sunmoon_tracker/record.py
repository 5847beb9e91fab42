"""Fixed-width table rows for the position listing."""

from __future__ import annotations

from typing import TextIO


class Record:
    """Row buffer: fields are padded to their column width and joined by one blank."""

    def __init__(self, widths: dict[str, int] | None = None) -> None:
        self._widths = dict(widths or {})
        self._parts: list[str] = []

    def clear(self) -> None:
        self._parts = []

    def append(self, text: str, column: str | None = None) -> None:
        """Add a field, right-aligned to the width registered for column."""
        width = self._widths.get(column, 0) if column else 0
        self._parts.append(text.rjust(width))

    def get_line(self) -> str:
        return ' '.join(self._parts).rstrip()

    def write(self, stream: TextIO) -> None:
        """Write the row (if any) followed by a newline, then clear."""
        line = self.get_line()
        if line:
            stream.write(line + '\n')
        self.clear()
