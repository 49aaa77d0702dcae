"""Run the external sort tool and capture its output."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from sortpatch.config import StderrPolicy
from sortpatch.errors import ExternalToolError
from sortpatch.tools.limits import truncate_output
from sortpatch.tools.providers import ExecutionInfo

logger = logging.getLogger(__name__)


class ToolOutput(BaseModel):
    stdout: str
    stderr: str
    returncode: int


class ToolRunner(Protocol):
    """Anything that can run an ``ExecutionInfo`` and hand back its output."""

    def run(self, info: ExecutionInfo, *, cwd: str | Path | None = None) -> ToolOutput: ...


class SubprocessToolRunner:
    """Run tools with ``subprocess.run`` and apply the stderr policy."""

    def __init__(self, *, timeout_ms: int = 60_000, stderr_policy: StderrPolicy = StderrPolicy.FAIL) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.timeout_ms = timeout_ms
        self.stderr_policy = stderr_policy

    def run(self, info: ExecutionInfo, *, cwd: str | Path | None = None) -> ToolOutput:
        command = info.command()
        logger.debug("running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout_ms / 1000,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(
                f"{info.exec_path} timed out after {self.timeout_ms} ms", fragment=str(exc)
            ) from exc
        except OSError as exc:
            raise ExternalToolError(f"failed to start {info.exec_path}: {exc}") from exc

        output = ToolOutput(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )
        self._check(info, output)
        return output

    def _check(self, info: ExecutionInfo, output: ToolOutput) -> None:
        stderr, _ = truncate_output(output.stderr)
        if output.stderr.strip():
            if self.stderr_policy == StderrPolicy.FAIL:
                raise ExternalToolError(
                    stderr.strip(), returncode=output.returncode, stderr=output.stderr, fragment=stderr
                )
            logger.warning("%s wrote to stderr (exit %s): %s", info.exec_path, output.returncode, stderr.strip())
        if output.returncode != 0 and not output.stdout.strip():
            raise ExternalToolError(
                f"{info.exec_path} exited with status {output.returncode}",
                returncode=output.returncode,
                stderr=output.stderr,
                fragment=stderr,
            )


__all__ = ["ToolOutput", "ToolRunner", "SubprocessToolRunner"]
