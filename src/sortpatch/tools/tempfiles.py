"""Scoped temporary copy of a document for tools that only read files."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from sortpatch.errors import TempFileError

if TYPE_CHECKING:
    from sortpatch.documents import Document

logger = logging.getLogger(__name__)


def temp_copy_path(document: Document) -> Path:
    """Return ``<path>.<md5(uri)><suffix>`` next to the document.

    Keeping the copy beside the original lets the tool pick up the same
    project configuration (``pyproject.toml``, ``.isort.cfg``).
    """

    digest = hashlib.md5(document.uri.encode("utf-8")).hexdigest()
    path = document.path
    return path.with_name(f"{path.name}.{digest}{path.suffix}")


@contextmanager
def temporary_document_copy(document: Document) -> Iterator[Path]:
    """Write the document's current text to a sibling file and remove it on exit."""

    target = temp_copy_path(document)
    try:
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write(document.get_text())
    except OSError as exc:
        target.unlink(missing_ok=True)
        raise TempFileError(f"Failed to create a temporary file, {exc}", fragment=str(target)) from exc

    try:
        yield target
    finally:
        try:
            target.unlink(missing_ok=True)
        except OSError:
            logger.warning("could not remove temporary file %s", target, exc_info=True)


__all__ = ["temporary_document_copy", "temp_copy_path"]
