"""Read-only line view of a document used as the edit coordinate space."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sortpatch.errors import RangeOutOfBoundsError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True, order=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Immutable snapshot of document text split into 0-based lines.

    Only ``\\r\\n``, ``\\r`` and ``\\n`` break lines; ``str.splitlines`` would
    also split on form feeds and Unicode separators, which shifts coordinates
    relative to what diff tools report.
    """

    text: str
    lines: tuple[str, ...] = field(init=False)
    eol: str = field(init=False)
    _line_offsets: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        lines: list[str] = []
        offsets: list[int] = []
        cursor = 0
        eol: str | None = None
        for match in _LINE_BREAK.finditer(self.text):
            offsets.append(cursor)
            lines.append(self.text[cursor : match.start()])
            if eol is None:
                eol = match.group()
            cursor = match.end()
        if cursor < len(self.text):
            offsets.append(cursor)
            lines.append(self.text[cursor:])
        object.__setattr__(self, "lines", tuple(lines))
        object.__setattr__(self, "eol", eol or "\n")
        object.__setattr__(self, "_line_offsets", tuple(offsets))

    @classmethod
    def from_lines(
        cls, lines: list[str] | tuple[str, ...], eol: str = "\n", *, final_newline: bool = True
    ) -> DocumentSnapshot:
        text = eol.join(lines)
        if lines and final_newline:
            text += eol
        return cls(text)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def has_line_break(self) -> bool:
        """True when ``eol`` was read from the text rather than defaulted."""

        return _LINE_BREAK.search(self.text) is not None

    @property
    def has_final_newline(self) -> bool:
        """True when the last line is terminated (an empty document counts as terminated)."""

        return not self.text or self.text.endswith(("\n", "\r"))

    def end_position(self) -> Position:
        if not self.lines:
            return Position(0, 0)
        if self.has_final_newline:
            return Position(self.line_count, 0)
        return Position(self.line_count - 1, len(self.lines[-1]))

    def line_start(self, line: int) -> Position:
        """Return the position where ``line`` begins, or the end of the document for ``line == line_count``."""

        if line < 0 or line > self.line_count:
            raise RangeOutOfBoundsError(
                f"line {line} is outside the document (0..{self.line_count})",
                fragment=str(line),
            )
        if line == self.line_count:
            return self.end_position()
        return Position(line, 0)

    def line_end(self, line: int) -> Position:
        """Return the position just after the content of ``line``, before its terminator."""

        if line < 0 or line >= self.line_count:
            raise RangeOutOfBoundsError(
                f"line {line} is outside the document (0..{self.line_count - 1})",
                fragment=str(line),
            )
        return Position(line, len(self.lines[line]))

    def offset_at(self, position: Position) -> int:
        """Convert a position into a character offset into ``text``."""

        if position == self.end_position():
            return len(self.text)
        if position.line < 0 or position.line >= self.line_count:
            raise RangeOutOfBoundsError(f"position {position} is outside the document", fragment=str(position))
        if position.character < 0 or position.character > len(self.lines[position.line]):
            raise RangeOutOfBoundsError(
                f"character {position.character} is outside line {position.line}",
                fragment=self.lines[position.line],
            )
        return self._line_offsets[position.line] + position.character


__all__ = ["DocumentSnapshot", "Position"]
