"""Command resolution for the configured import-sort provider."""

from __future__ import annotations

import logging
import os
import shutil

from pydantic import BaseModel, ConfigDict, Field

from sortpatch.config import Settings, SortProvider

logger = logging.getLogger(__name__)

RUFF_ARGS = ("check", "--quiet", "--diff", "--select", "I001")


class ExecutionInfo(BaseModel):
    """Executable and arguments for one tool run; the target file is appended later."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    exec_path: str = Field(description="Executable to run.")
    args: tuple[str, ...] = Field(default_factory=tuple, description="Arguments before the target file.")

    def with_target(self, target: str) -> ExecutionInfo:
        return self.model_copy(update={"args": (*self.args, target)})

    def command(self) -> list[str]:
        return [self.exec_path, *self.args]


def resolve_execution_info(settings: Settings) -> ExecutionInfo | None:
    """Return how to invoke the provider, or None when there is nothing to run.

    ``pyright`` organizes imports inside the language server, so it never
    produces an external command.
    """

    if settings.provider == SortProvider.ISORT:
        return _isort_info(settings)
    if settings.provider == SortProvider.RUFF:
        return _ruff_info(settings)
    return None


def _isort_info(settings: Settings) -> ExecutionInfo:
    if settings.isort_path:
        return ExecutionInfo(exec_path=settings.isort_path, args=("--diff", *settings.isort_args))
    return ExecutionInfo(exec_path=settings.python_path, args=("-m", "isort", "--diff", *settings.isort_args))


def _ruff_info(settings: Settings) -> ExecutionInfo | None:
    expanded = os.path.expandvars(os.path.expanduser(settings.ruff_path))
    exec_path = shutil.which(expanded)
    if not exec_path:
        logger.warning("ruff executable %r not found; skipping import sort", settings.ruff_path)
        return None
    return ExecutionInfo(exec_path=exec_path, args=RUFF_ARGS)


__all__ = ["ExecutionInfo", "resolve_execution_info", "RUFF_ARGS"]
