"""Error taxonomy for sortpatch.

Every failure raised by the package derives from ``SortPatchError`` and carries
an ``ErrorKind`` tag so callers can branch on ``exc.kind`` instead of
inspecting exception types.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    PATCH_FORMAT = "patch-format"
    RANGE_OUT_OF_BOUNDS = "range-out-of-bounds"
    EXTERNAL_TOOL = "external-tool"
    TEMP_FILE = "temp-file"
    DOCUMENT_IO = "document-io"


class SortPatchError(Exception):
    """Base class for all sortpatch failures."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, fragment: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fragment = fragment


class PatchFormatError(SortPatchError):
    """Raised when diff text does not follow the unified hunk grammar."""

    kind = ErrorKind.PATCH_FORMAT


class RangeOutOfBoundsError(SortPatchError):
    """Raised when a hunk or edit range does not fit the document snapshot."""

    kind = ErrorKind.RANGE_OUT_OF_BOUNDS


class ExternalToolError(SortPatchError):
    """Raised when the external sort tool cannot be run or reports a failure."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        fragment: str | None = None,
    ) -> None:
        super().__init__(message, fragment=fragment)
        self.returncode = returncode
        self.stderr = stderr


class TempFileError(SortPatchError):
    """Raised when the temporary document copy cannot be written."""

    kind = ErrorKind.TEMP_FILE


class DocumentIOError(SortPatchError):
    """Raised when a document cannot be read, decoded or written back."""

    kind = ErrorKind.DOCUMENT_IO


__all__ = [
    "ErrorKind",
    "SortPatchError",
    "PatchFormatError",
    "RangeOutOfBoundsError",
    "ExternalToolError",
    "TempFileError",
    "DocumentIOError",
]
