import difflib
import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sortpatch.config import Settings, SortProvider  # noqa: E402
from sortpatch.tools.process import ToolOutput  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_sortpatch_home(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path):
    """Point SORTPATCH_HOME at a per-test sandbox so we never touch the real config."""

    home = tmp_path / ".sortpatch-home"
    home.mkdir()
    for name in ("SORTPATCH_PROVIDER", "SORTPATCH_PYTHON", "SORTPATCH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SORTPATCH_HOME", str(home))
    yield


def make_diff(before: str, after: str, *, context: int = 3) -> str:
    """Unified diff of two texts in the shape isort/ruff print with ``--diff``."""

    return "\n".join(
        difflib.unified_diff(
            before.splitlines(),
            after.splitlines(),
            fromfile="before.py",
            tofile="after.py",
            n=context,
            lineterm="",
        )
    )


@pytest.fixture
def isort_settings() -> Settings:
    return Settings(provider=SortProvider.ISORT, isort_path="isort")


class FakeRunner:
    """ToolRunner stand-in returning canned output and recording calls."""

    def __init__(self, stdout: str = "", *, error: Exception | None = None) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[dict[str, object]] = []

    def run(self, info, *, cwd=None) -> ToolOutput:
        target = pathlib.Path(info.args[-1])
        self.calls.append(
            {
                "command": info.command(),
                "cwd": cwd,
                "target_existed": target.exists(),
                "target_text": target.read_text(encoding="utf-8") if target.exists() else None,
            }
        )
        if self.error is not None:
            raise self.error
        return ToolOutput(stdout=self.stdout, stderr="", returncode=0)


@pytest.fixture
def fake_runner_cls():
    return FakeRunner


@pytest.fixture
def python_file(tmp_path: pathlib.Path):
    project = tmp_path / "project"
    project.mkdir()

    def _write(text: str, name: str = "module.py") -> pathlib.Path:
        path = project / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def unified_diff():
    return make_diff
