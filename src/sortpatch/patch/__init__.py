"""Diff-to-edit engine.

``parse_patch`` turns unified diff text into ``Hunk`` objects and
``synthesize_edits`` maps them onto ``TextEdit`` ranges of a
``DocumentSnapshot``. Both are pure functions and never touch the filesystem.
"""

from __future__ import annotations

from sortpatch.patch.edits import TextEdit, apply_edits, edits_from_patch, synthesize_edits
from sortpatch.patch.parser import Hunk, parse_patch
from sortpatch.patch.snapshot import DocumentSnapshot, Position

__all__ = [
    "DocumentSnapshot",
    "Position",
    "Hunk",
    "TextEdit",
    "parse_patch",
    "synthesize_edits",
    "apply_edits",
    "edits_from_patch",
]
