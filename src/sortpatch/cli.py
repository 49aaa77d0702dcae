"""Console entrypoint for sortpatch.

``sortpatch sort`` runs the configured import sorter on a file and applies its
diff; ``sortpatch apply`` applies an existing unified diff through the same
edit engine.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from sortpatch import __version__
from sortpatch.config import LogLevel, Settings, SortProvider, StderrPolicy, default_config_path, load_settings
from sortpatch.documents import FileDocument
from sortpatch.errors import SortPatchError
from sortpatch.logging import configure_logging
from sortpatch.patch import edits_from_patch
from sortpatch.sort_imports import LoggerOutputChannel, SortStatus, sort_imports


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sortpatch",
        description="Sort Python imports with an external tool and apply the result as minimal edits",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--log-level",
        choices=[e.value for e in LogLevel],
        dest="log_level",
        help="Log level override",
    )
    parser.add_argument("--log-file", dest="log_file", help="Also write logs to this file")
    parser.add_argument("--config-path", dest="config_path", help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sort_parser = subparsers.add_parser("sort", help="Sort the imports of a file")
    sort_parser.add_argument("file", help="Python file to sort")
    sort_parser.add_argument("--provider", choices=[e.value for e in SortProvider], help="Provider override")
    sort_parser.add_argument(
        "--stderr-policy",
        choices=[e.value for e in StderrPolicy],
        dest="stderr_policy",
        help="How to treat tool output on stderr",
    )
    sort_parser.add_argument("--timeout-ms", type=int, dest="timeout_ms", help="Tool timeout in milliseconds")
    sort_parser.add_argument("--dry-run", action="store_true", help="Print the sorted text instead of writing it")

    apply_parser = subparsers.add_parser("apply", help="Apply a unified diff to a file")
    apply_parser.add_argument("file", help="File to patch")
    apply_parser.add_argument("--patch", dest="patch_path", help="Diff file (defaults to stdin)")
    apply_parser.add_argument("--print-edits", action="store_true", help="Print edits as JSON instead of writing")

    config_parser = subparsers.add_parser("config", help="Config helpers")
    config_sub = config_parser.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("path", help="Print config path")
    config_sub.add_parser("print", help="Print resolved settings")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(cli_overrides=_collect_overrides(args), config_path=args.config_path)
    configure_logging(log_level=settings.log_level, debug_enabled=args.debug, log_file=args.log_file)

    if args.command == "sort":
        return _run_sort(settings, args)
    if args.command == "apply":
        return _run_apply(args)
    if args.command == "config":
        return _run_config(settings, args)

    parser.error(f"unknown command {args.command}")
    return 1


def _run_sort(settings: Settings, args: argparse.Namespace) -> int:
    try:
        document = FileDocument(args.file, in_memory=args.dry_run)
    except SortPatchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    outcome = sort_imports(
        document,
        settings,
        output=LoggerOutputChannel(),
        notify=lambda message: print(message, file=sys.stderr),
    )
    if outcome.status == SortStatus.FAILED:
        if outcome.error is not None:
            print(f"error: {outcome.error.message}", file=sys.stderr)
        return 1

    if args.dry_run:
        sys.stdout.write(document.get_text())
    return 0


def _run_apply(args: argparse.Namespace) -> int:
    try:
        diff_text = Path(args.patch_path).read_text(encoding="utf-8") if args.patch_path else sys.stdin.read()
        document = FileDocument(args.file)
        edits = edits_from_patch(document.get_text(), diff_text)
        if args.print_edits:
            print(json.dumps([edit.to_dict() for edit in edits], indent=2))
            return 0
        document.apply_edits(edits)
    except (OSError, UnicodeDecodeError, SortPatchError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _run_config(settings: Settings, args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        print(Path(args.config_path) if args.config_path else default_config_path())
        return 0
    if args.config_cmd == "print":
        print(settings.model_dump_json(indent=2))
        return 0
    return 1


def _collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "provider": getattr(args, "provider", None),
        "stderr_policy": getattr(args, "stderr_policy", None),
        "timeout_ms": getattr(args, "timeout_ms", None),
        "log_level": args.log_level,
    }


if __name__ == "__main__":
    sys.exit(main())
