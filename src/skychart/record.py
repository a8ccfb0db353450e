"""Fixed-width table rows for command-line output."""

from __future__ import annotations

from typing import TextIO


class Record:
    """Row buffer: fields padded to column widths, separated by one blank."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def init(self) -> None:
        """Clear the row."""
        self._parts = []

    def append(self, value: object, width: int = 0, align: str = '<') -> Record:
        """Append ``value`` formatted in a column of ``width`` characters.

        Parameters:
            value: Field value (converted with str()).
            width: Minimum column width; 0 leaves the field unpadded.
            align: '<' left, '>' right, '^' centre.

        Returns:
            The record, so appends can be chained.
        """
        self._parts.append(f'{value!s:{align}{width}}')
        return self

    def get_line(self) -> str:
        """Current row without trailing blanks."""
        return ' '.join(self._parts).rstrip()

    def write(self, stream: TextIO) -> None:
        """Write the row (if not empty) and clear it."""
        line = self.get_line()
        if line:
            stream.write(line + '\n')
        self.init()
