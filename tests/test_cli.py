import io
import json

import pytest

from sortpatch import __version__, cli
from sortpatch.config import Settings, SortProvider
from sortpatch.errors import ExternalToolError
from sortpatch.sort_imports import SortOutcome, SortStatus

UNSORTED = "import sys\nimport os\n\nprint(os, sys)\n"
SORTED = "import os\nimport sys\n\nprint(os, sys)\n"
PATCH = "@@ -1,2 +1,2 @@\n-import sys\n-import os\n+import os\n+import sys\n"


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_version_constant() -> None:
    assert __version__ == "0.1.0"


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_apply_patch_file(python_file, tmp_path) -> None:
    target = python_file(UNSORTED)
    patch_file = tmp_path / "imports.diff"
    patch_file.write_text(PATCH, encoding="utf-8")

    code = cli.main(["apply", str(target), "--patch", str(patch_file)])

    assert code == 0
    assert target.read_text(encoding="utf-8") == SORTED


def test_apply_reads_stdin(python_file, monkeypatch: pytest.MonkeyPatch) -> None:
    target = python_file(UNSORTED)
    monkeypatch.setattr("sys.stdin", io.StringIO(PATCH))

    assert cli.main(["apply", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == SORTED


def test_apply_print_edits(python_file, tmp_path, capsys) -> None:
    target = python_file(UNSORTED)
    patch_file = tmp_path / "imports.diff"
    patch_file.write_text(PATCH, encoding="utf-8")

    code = cli.main(["apply", str(target), "--patch", str(patch_file), "--print-edits"])

    assert code == 0
    edits = json.loads(capsys.readouterr().out)
    assert edits == [
        {
            "range": {"start": {"line": 0, "character": 0}, "end": {"line": 2, "character": 0}},
            "newText": "import os\nimport sys\n",
        }
    ]
    assert target.read_text(encoding="utf-8") == UNSORTED


def test_apply_malformed_patch_fails(python_file, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    target = python_file(UNSORTED)
    monkeypatch.setattr("sys.stdin", io.StringIO("not a diff"))

    assert cli.main(["apply", str(target)]) == 1
    assert "no hunk header" in capsys.readouterr().err
    assert target.read_text(encoding="utf-8") == UNSORTED


def test_apply_missing_file_fails(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(PATCH))

    assert cli.main(["apply", str(tmp_path / "missing.py")]) == 1


def test_sort_passes_provider_override(python_file, monkeypatch: pytest.MonkeyPatch) -> None:
    target = python_file(UNSORTED)
    seen: dict[str, object] = {}

    def fake_sort_imports(document, settings, **kwargs):
        seen["settings"] = settings
        seen["path"] = document.path
        return SortOutcome(status=SortStatus.UNCHANGED)

    monkeypatch.setattr(cli, "sort_imports", fake_sort_imports)

    code = cli.main(["sort", str(target), "--provider", "isort", "--timeout-ms", "500"])

    assert code == 0
    settings = seen["settings"]
    assert isinstance(settings, Settings)
    assert settings.provider == SortProvider.ISORT
    assert settings.timeout_ms == 500
    assert seen["path"] == target.resolve()


def test_sort_dry_run_prints_without_writing(
    python_file, fake_runner_cls, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    target = python_file(UNSORTED)
    real_sort_imports = cli.sort_imports

    def sort_with_canned_patch(document, settings, **kwargs):
        return real_sort_imports(document, settings, runner=fake_runner_cls(stdout=PATCH), output=kwargs["output"])

    monkeypatch.setattr(cli, "sort_imports", sort_with_canned_patch)

    code = cli.main(["sort", str(target), "--provider", "isort", "--dry-run"])

    assert code == 0
    assert capsys.readouterr().out == SORTED
    assert target.read_text(encoding="utf-8") == UNSORTED


def test_sort_failure_exit_code(python_file, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    target = python_file(UNSORTED)
    monkeypatch.setattr(
        cli,
        "sort_imports",
        lambda document, settings, **kwargs: SortOutcome(
            status=SortStatus.FAILED, error=ExternalToolError("isort exited with status 2")
        ),
    )

    assert cli.main(["sort", str(target)]) == 1
    assert "isort exited with status 2" in capsys.readouterr().err


def test_sort_missing_file(tmp_path, capsys) -> None:
    assert cli.main(["sort", str(tmp_path / "nope.py")]) == 1
    assert "error:" in capsys.readouterr().err


def test_config_path(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path) -> None:
    monkeypatch.setenv("SORTPATCH_HOME", str(tmp_path / "home"))

    assert cli.main(["config", "path"]) == 0
    assert capsys.readouterr().out.strip() == str(tmp_path / "home" / "config.toml")


def test_config_print(capsys) -> None:
    assert cli.main(["--log-level", "info", "config", "print"]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed["provider"] == "pyright"
    assert printed["log_level"] == "info"


def test_command_is_required(capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main([])


def test_sort_non_utf8_file_fails_cleanly(python_file, capsys) -> None:
    target = python_file("")
    target.write_bytes(b"import sys\nx = '\xe9'\n")

    assert cli.main(["sort", str(target), "--provider", "isort"]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err


def test_apply_non_utf8_file_fails_cleanly(python_file, tmp_path, capsys) -> None:
    target = python_file("")
    target.write_bytes(b"import sys\nx = '\xe9'\n")
    patch_file = tmp_path / "imports.diff"
    patch_file.write_text(PATCH, encoding="utf-8")

    assert cli.main(["apply", str(target), "--patch", str(patch_file)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err
