"""Sort the imports of a document with an external tool.

The configured provider is run against a temporary copy of the document in
``--diff`` mode; its unified diff is translated into edits by
``sortpatch.patch`` and applied to the document in one step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from sortpatch.config import Settings
from sortpatch.documents import Document
from sortpatch.errors import SortPatchError
from sortpatch.logging import OUTPUT_LOGGER
from sortpatch.patch import TextEdit, edits_from_patch
from sortpatch.tools.process import SubprocessToolRunner, ToolRunner
from sortpatch.tools.providers import resolve_execution_info
from sortpatch.tools.tempfiles import temporary_document_copy

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Failed to sort imports"
_BANNER = "#" * 10


class OutputChannel(Protocol):
    def append_line(self, value: str) -> None: ...


class LoggerOutputChannel:
    """Output channel that forwards every line to a logger."""

    def __init__(self, logger_: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger_ or logging.getLogger(OUTPUT_LOGGER)
        self.level = level

    def append_line(self, value: str) -> None:
        for line in value.splitlines() or [""]:
            self.logger.log(self.level, "%s", line)


class SortStatus(str, Enum):
    SKIPPED = "skipped"
    UNCHANGED = "unchanged"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SortOutcome:
    status: SortStatus
    patch: str = ""
    edits: tuple[TextEdit, ...] = field(default_factory=tuple)
    error: SortPatchError | None = None

    @property
    def ok(self) -> bool:
        return self.status != SortStatus.FAILED


def generate_imports_diff(document: Document, settings: Settings, runner: ToolRunner) -> str:
    """Run the configured provider on a copy of ``document`` and return its diff."""

    info = resolve_execution_info(settings)
    if info is None:
        logger.debug("provider %s has no external command", settings.provider.value)
        return ""

    with temporary_document_copy(document) as temp_path:
        output = runner.run(info.with_target(str(temp_path)), cwd=document.path.parent)
    return output.stdout


def sort_imports(
    document: Document,
    settings: Settings,
    *,
    runner: ToolRunner | None = None,
    output: OutputChannel | None = None,
    notify: Callable[[str], None] | None = None,
) -> SortOutcome:
    """Sort the imports of ``document`` in place.

    Failures are reported on ``output`` and through ``notify`` and returned as
    a ``FAILED`` outcome; the document is only modified when every hunk of the
    patch translated cleanly.
    """

    if document.language_id != "python" or document.line_count <= 1:
        return SortOutcome(status=SortStatus.SKIPPED)

    runner = runner or SubprocessToolRunner(timeout_ms=settings.timeout_ms, stderr_policy=settings.stderr_policy)
    channel = output or LoggerOutputChannel()

    try:
        patch = generate_imports_diff(document, settings, runner)
        edits = edits_from_patch(document.get_text(), patch)
        document.apply_edits(edits)
    except SortPatchError as exc:
        logger.info("sort imports failed for %s: %s (%s)", document.uri, exc.message, exc.kind.value)
        channel.append_line(f"{_BANNER} sortImports Error {_BANNER}")
        channel.append_line(exc.message)
        if notify is not None:
            notify(FAILURE_NOTICE)
        return SortOutcome(status=SortStatus.FAILED, error=exc)

    channel.append_line(f"{_BANNER} sortImports Output {_BANNER}")
    channel.append_line(patch)
    status = SortStatus.APPLIED if edits else SortStatus.UNCHANGED
    return SortOutcome(status=status, patch=patch, edits=tuple(edits))


__all__ = [
    "OutputChannel",
    "LoggerOutputChannel",
    "SortStatus",
    "SortOutcome",
    "FAILURE_NOTICE",
    "generate_imports_diff",
    "sort_imports",
]
