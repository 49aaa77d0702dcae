"""Translate parsed hunks into range edits against a document snapshot."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sortpatch.errors import RangeOutOfBoundsError
from sortpatch.patch.parser import Hunk, parse_patch
from sortpatch.patch.snapshot import DocumentSnapshot, Position


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace the half-open range ``[start, end)`` with ``new_text``."""

    start: Position
    end: Position
    new_text: str

    @property
    def start_line(self) -> int:
        return self.start.line

    @property
    def start_char(self) -> int:
        return self.start.character

    @property
    def end_line(self) -> int:
        return self.end.line

    @property
    def end_char(self) -> int:
        return self.end.character

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def to_dict(self) -> dict[str, object]:
        return {
            "range": {
                "start": {"line": self.start.line, "character": self.start.character},
                "end": {"line": self.end.line, "character": self.end.character},
            },
            "newText": self.new_text,
        }


def synthesize_edits(snapshot: DocumentSnapshot, hunks: Sequence[Hunk]) -> list[TextEdit]:
    """Build one whole-line edit per hunk.

    The result is ordered by ascending original position and every range is
    expressed against ``snapshot``, not against the text produced by earlier
    edits. Apply it with ``apply_edits`` or in reverse order when the target
    applies edits one at a time.
    """

    edits: list[TextEdit] = []
    previous_end = 0
    for hunk in hunks:
        if hunk.original_start < 0 or hunk.original_length < 0:
            raise RangeOutOfBoundsError(f"negative hunk range {hunk.original_start}+{hunk.original_length}")
        if hunk.original_end > snapshot.line_count:
            raise RangeOutOfBoundsError(
                f"hunk covers lines {hunk.original_start}..{hunk.original_end} "
                f"but the document has {snapshot.line_count} lines",
                fragment="\n".join(hunk.new_lines),
            )
        if hunk.original_start < previous_end:
            raise RangeOutOfBoundsError(
                f"hunk at line {hunk.original_start} overlaps the previous hunk ending at line {previous_end}"
            )
        edits.append(_hunk_to_edit(snapshot, hunk))
        previous_end = hunk.original_end

    _ensure_ordered(edits)
    return edits


def _hunk_to_edit(snapshot: DocumentSnapshot, hunk: Hunk) -> TextEdit:
    eol = snapshot.eol if snapshot.has_line_break else hunk.eol or snapshot.eol
    reaches_eof = hunk.original_end == snapshot.line_count
    start = snapshot.line_start(hunk.original_start)
    end = snapshot.line_start(hunk.original_end)

    if not reaches_eof:
        return TextEdit(start, end, "".join(line + eol for line in hunk.new_lines))

    terminated = snapshot.has_final_newline if hunk.final_newline is None else hunk.final_newline
    body = eol.join(hunk.new_lines)
    if hunk.new_lines and terminated:
        body += eol

    if not hunk.new_lines and not terminated and hunk.original_start > 0:
        # the line before the deleted tail becomes the last line and loses its terminator
        start = snapshot.line_end(hunk.original_start - 1)
    elif hunk.new_lines and start != Position(hunk.original_start, 0):
        # appending after an unterminated last line
        body = eol + body
    return TextEdit(start, end, body)


def _ensure_ordered(edits: Sequence[TextEdit]) -> None:
    for before, after in zip(edits, edits[1:]):
        if after.start < before.end:
            raise RangeOutOfBoundsError(f"edit at {after.start} overlaps edit ending at {before.end}")


def apply_edits(snapshot: DocumentSnapshot, edits: Sequence[TextEdit]) -> str:
    """Apply edits computed against ``snapshot`` and return the resulting text."""

    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    _ensure_ordered(ordered)
    text = snapshot.text
    for edit in reversed(ordered):
        start = snapshot.offset_at(edit.start)
        end = snapshot.offset_at(edit.end)
        if end < start:
            raise RangeOutOfBoundsError(f"edit range {edit.start}..{edit.end} is inverted")
        text = text[:start] + edit.new_text + text[end:]
    return text


def edits_from_patch(text: str, diff_text: str) -> list[TextEdit]:
    """Parse ``diff_text`` and synthesize edits for the document ``text``."""

    hunks = parse_patch(diff_text)
    if not hunks:
        return []
    return synthesize_edits(DocumentSnapshot(text), hunks)


__all__ = ["TextEdit", "synthesize_edits", "apply_edits", "edits_from_patch"]
