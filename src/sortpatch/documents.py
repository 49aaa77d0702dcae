"""Documents the orchestrator can read from and apply edits to."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from sortpatch.errors import DocumentIOError, RangeOutOfBoundsError
from sortpatch.patch import DocumentSnapshot, TextEdit, apply_edits

PYTHON_SUFFIXES = frozenset({".py", ".pyi"})


class Document(Protocol):
    @property
    def uri(self) -> str: ...

    @property
    def path(self) -> Path: ...

    @property
    def language_id(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def get_text(self) -> str: ...

    def apply_edits(self, edits: Sequence[TextEdit]) -> None: ...


class FileDocument:
    """A document backed by a file on disk.

    The text is loaded once; ``apply_edits`` resolves edits against that
    snapshot and refuses to write if the file changed on disk in the meantime.
    With ``in_memory=True`` edits only update the loaded text.
    """

    def __init__(self, path: str | Path, *, in_memory: bool = False) -> None:
        self._path = Path(path).resolve()
        self.in_memory = in_memory
        self._snapshot = DocumentSnapshot(self._read())

    @property
    def uri(self) -> str:
        return self._path.as_uri()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def language_id(self) -> str:
        return "python" if self._path.suffix in PYTHON_SUFFIXES else "plaintext"

    @property
    def line_count(self) -> int:
        return self._snapshot.line_count

    @property
    def snapshot(self) -> DocumentSnapshot:
        return self._snapshot

    def get_text(self) -> str:
        return self._snapshot.text

    def preview_edits(self, edits: Sequence[TextEdit]) -> str:
        return apply_edits(self._snapshot, edits)

    def apply_edits(self, edits: Sequence[TextEdit]) -> None:
        if not edits:
            return
        content = apply_edits(self._snapshot, edits)
        if self.in_memory:
            self._snapshot = DocumentSnapshot(content)
            return
        if self._read() != self._snapshot.text:
            raise RangeOutOfBoundsError(f"{self._path} changed on disk since it was loaded")
        self._write_atomic(content)
        self._snapshot = DocumentSnapshot(content)

    def _read(self) -> str:
        try:
            with self._path.open("r", encoding="utf-8", newline="") as handle:
                return handle.read()
        except UnicodeDecodeError as exc:
            raise DocumentIOError(f"{self._path} is not valid UTF-8: {exc.reason}", fragment=str(self._path)) from exc
        except OSError as exc:
            raise DocumentIOError(f"cannot read {self._path}: {exc.strerror or exc}") from exc

    def _write_atomic(self, content: str) -> None:
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", newline="", dir=self._path.parent, delete=False
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            if self._path.exists():
                os.chmod(tmp_path, self._path.stat().st_mode)
            tmp_path.replace(self._path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise DocumentIOError(f"cannot write {self._path}: {exc.strerror or exc}") from exc


__all__ = ["Document", "FileDocument", "PYTHON_SUFFIXES"]
