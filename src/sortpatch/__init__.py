"""Turn import-sorter diffs into precise document edits."""

from __future__ import annotations

from sortpatch.errors import (
    DocumentIOError,
    ErrorKind,
    ExternalToolError,
    PatchFormatError,
    RangeOutOfBoundsError,
    SortPatchError,
    TempFileError,
)
from sortpatch.patch import (
    DocumentSnapshot,
    Hunk,
    Position,
    TextEdit,
    apply_edits,
    edits_from_patch,
    parse_patch,
    synthesize_edits,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DocumentSnapshot",
    "Hunk",
    "Position",
    "TextEdit",
    "parse_patch",
    "synthesize_edits",
    "apply_edits",
    "edits_from_patch",
    "ErrorKind",
    "SortPatchError",
    "PatchFormatError",
    "RangeOutOfBoundsError",
    "ExternalToolError",
    "TempFileError",
    "DocumentIOError",
]
