"""Unified diff parsing into ordered hunks."""

from __future__ import annotations

import re
from dataclasses import dataclass

from sortpatch.errors import PatchFormatError

NO_NEWLINE_MARKER = "\\"


@dataclass(frozen=True, slots=True)
class Hunk:
    """A contiguous span of the original document and the lines that replace it.

    ``original_start`` is a 0-based line index. For pure insertions
    (``original_length == 0``) it is the index the new lines are inserted
    before. ``eol`` is ``"\\r\\n"`` when the new lines carried CRLF terminators
    in the diff; it only matters for documents without any line break.
    """

    original_start: int
    original_length: int
    new_lines: tuple[str, ...]
    new_start: int = 0
    new_length: int = 0
    final_newline: bool | None = None
    eol: str | None = None

    @property
    def original_end(self) -> int:
        return self.original_start + self.original_length

    @property
    def is_insertion(self) -> bool:
        return self.original_length == 0


_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def parse_patch(diff_text: str) -> list[Hunk]:
    """Parse unified diff text into hunks ordered by original position.

    Blank input means "no changes" and yields an empty list. Lines outside hunk
    bodies (file headers, tool banners) are skipped.
    """

    if not diff_text.strip():
        return []

    lines = diff_text.split("\n")
    if lines[-1] == "":
        lines.pop()
    hunks: list[Hunk] = []
    idx = 0

    while idx < len(lines):
        line = lines[idx]
        if line.startswith("@@"):
            hunk, idx = _parse_hunk(lines, idx)
            if hunks and hunk.original_start < hunks[-1].original_end:
                raise PatchFormatError(
                    f"hunk at line {hunk.original_start + 1} overlaps or precedes the previous hunk",
                    fragment=line,
                )
            hunks.append(hunk)
        else:
            idx += 1

    if not hunks:
        raise PatchFormatError("no hunk header found in patch", fragment=diff_text[:200])
    return hunks


def _parse_hunk(lines: list[str], idx: int) -> tuple[Hunk, int]:
    header_idx = idx
    header = lines[idx].rstrip("\r")
    match = _HUNK_HEADER.match(header)
    if not match:
        raise PatchFormatError(f"invalid hunk header: {header}", fragment=header)
    start_old = int(match.group(1))
    len_old = int(match.group(2) or "1")
    start_new = int(match.group(3))
    len_new = int(match.group(4) or "1")
    if len_old > 0 and start_old == 0:
        raise PatchFormatError(f"invalid hunk header: {header}", fragment=header)

    idx += 1
    seen_old = 0
    seen_new = 0
    new_lines: list[str] = []
    final_newline: bool | None = None
    last_prefix = ""
    eol: str | None = None

    while seen_old < len_old or seen_new < len_new:
        if idx >= len(lines) or lines[idx].startswith("@@"):
            body = "\n".join(lines[header_idx:idx])
            raise PatchFormatError(
                f"truncated hunk {header}: expected -{len_old}/+{len_new} lines, got -{seen_old}/+{seen_new}",
                fragment=body,
            )
        raw = lines[idx]
        line = raw[:-1] if raw.endswith("\r") else raw
        prefix = line[:1]
        if eol is None and raw.endswith("\r") and prefix not in ("-", NO_NEWLINE_MARKER):
            eol = "\r\n"
        if prefix == "-":
            seen_old += 1
            last_prefix = "-"
        elif prefix == "+":
            new_lines.append(line[1:])
            seen_new += 1
            last_prefix = "+"
        elif prefix == NO_NEWLINE_MARKER:
            final_newline = _apply_marker(final_newline, last_prefix)
            idx += 1
            continue
        else:
            # context line; some tools drop the leading space on blank lines
            new_lines.append(line[1:] if prefix == " " else line)
            seen_old += 1
            seen_new += 1
            last_prefix = " "
        idx += 1

    if seen_old > len_old or seen_new > len_new:
        raise PatchFormatError(f"hunk body does not match header {header}", fragment=header)

    if idx < len(lines) and lines[idx].startswith(NO_NEWLINE_MARKER):
        final_newline = _apply_marker(final_newline, last_prefix)
        idx += 1

    hunk = Hunk(
        original_start=start_old if len_old == 0 else start_old - 1,
        original_length=len_old,
        new_lines=tuple(new_lines),
        new_start=start_new,
        new_length=len_new,
        final_newline=final_newline,
        eol=eol,
    )
    return hunk, idx


def _apply_marker(current: bool | None, last_prefix: str) -> bool | None:
    # A marker after a removed line only describes the original text; the new
    # text keeps its newline unless a later marker says otherwise.
    if last_prefix == "-":
        return True if current is None else current
    if last_prefix in ("+", " "):
        return False
    return current


__all__ = ["Hunk", "parse_patch", "NO_NEWLINE_MARKER"]
