"""External tool plumbing: provider commands, process execution, temp copies.

Nothing in here is imported by ``sortpatch.patch``; the orchestrator wires
the two together.
"""

from __future__ import annotations

from sortpatch.tools.limits import truncate_output
from sortpatch.tools.process import SubprocessToolRunner, ToolOutput, ToolRunner
from sortpatch.tools.providers import ExecutionInfo, resolve_execution_info
from sortpatch.tools.tempfiles import temporary_document_copy

__all__ = [
    "ExecutionInfo",
    "resolve_execution_info",
    "SubprocessToolRunner",
    "ToolOutput",
    "ToolRunner",
    "temporary_document_copy",
    "truncate_output",
]
