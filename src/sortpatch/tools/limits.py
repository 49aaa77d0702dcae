"""Output truncation for tool diagnostics."""

from __future__ import annotations


def truncate_output(
    text: str, *, max_bytes: int = 4_096, max_lines: int = 50, marker: str = "[truncated]"
) -> tuple[str, bool]:
    """Clip tool output for log and error messages, returning (result, was_truncated).

    Whichever of the UTF-8 byte budget or the line budget runs out first stops
    the output; a marker line is appended when anything was dropped.
    """

    collected: list[str] = []
    bytes_used = 0
    truncated = False

    for count, line in enumerate(text.splitlines(keepends=True)):
        size = len(line.encode("utf-8"))
        if count >= max_lines or bytes_used + size > max_bytes:
            truncated = True
            break
        collected.append(line)
        bytes_used += size

    result = "".join(collected)
    if not truncated:
        return result, False
    if result and not result.endswith("\n"):
        result += "\n"
    return result + marker, True


__all__ = ["truncate_output"]
