"""Configuration models and enums for sortpatch.

Settings are resolved once per invocation from CLI overrides, environment
variables, ``config.toml`` and built-in defaults, in that order.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

HOME_ENV = "SORTPATCH_HOME"
CONFIG_FILENAME = "config.toml"


class SortProvider(str, Enum):
    PYRIGHT = "pyright"
    ISORT = "isort"
    RUFF = "ruff"


class StderrPolicy(str, Enum):
    FAIL = "fail"
    WARN = "warn"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Settings(BaseModel):
    """Resolved sortpatch settings."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    provider: SortProvider = SortProvider.PYRIGHT
    python_path: str = "python"
    isort_path: str = ""
    isort_args: tuple[str, ...] = Field(default_factory=tuple)
    ruff_path: str = "ruff"
    timeout_ms: int = Field(default=60_000, ge=1)
    stderr_policy: StderrPolicy = StderrPolicy.FAIL
    log_level: LogLevel = LogLevel.WARNING

    @field_validator("python_path", "ruff_path")
    @classmethod
    def _validate_executable(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("executable path cannot be empty")
        return value.strip()

    @field_validator("isort_path")
    @classmethod
    def _strip_isort_path(cls, value: str) -> str:
        return value.strip()


def default_config_path() -> Path:
    """``$SORTPATCH_HOME/config.toml``, falling back to ``~/.sortpatch/config.toml``."""

    home = os.environ.get(HOME_ENV, "").strip()
    base = Path(home).expanduser() if home else Path.home() / ".sortpatch"
    return base / CONFIG_FILENAME


def load_settings(
    cli_overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
    *,
    create_if_missing: bool = False,
) -> Settings:
    env = os.environ if env is None else env
    cli_overrides = cli_overrides or {}
    path = Path(config_path) if config_path else default_config_path()

    if not path.exists() and create_if_missing:
        write_config(Settings(), path)

    config_data: dict[str, Any] = {}
    if path.exists():
        config_data = _read_toml(path)

    defaults = Settings()

    provider = _first_value(
        _clean_str(cli_overrides.get("provider")),
        _clean_str(env.get("SORTPATCH_PROVIDER")),
        _clean_str(_get_config_value(config_data, "organize_imports", "provider")),
    )

    python_path = _first_value(
        _clean_str(cli_overrides.get("python_path")),
        _clean_str(env.get("SORTPATCH_PYTHON")),
        _clean_str(_get_config_value(config_data, "python", "path")),
        defaults.python_path,
    )

    isort_path = _first_value(
        _clean_str(cli_overrides.get("isort_path")),
        _clean_str(_get_config_value(config_data, "isort", "path")),
        defaults.isort_path,
    )

    isort_args = _first_value(
        cli_overrides.get("isort_args"),
        _get_config_value(config_data, "isort", "args"),
        defaults.isort_args,
    )

    ruff_path = _first_value(
        _clean_str(cli_overrides.get("ruff_path")),
        _clean_str(_get_config_value(config_data, "ruff", "path")),
        defaults.ruff_path,
    )

    timeout_ms = _first_value(
        cli_overrides.get("timeout_ms"),
        _get_config_value(config_data, "runtime", "timeout_ms"),
        defaults.timeout_ms,
    )

    stderr_policy = _first_value(
        _clean_str(cli_overrides.get("stderr_policy")),
        _clean_str(_get_config_value(config_data, "runtime", "stderr_policy")),
    )

    log_level = _first_value(
        _clean_str(cli_overrides.get("log_level")),
        _clean_str(env.get("SORTPATCH_LOG_LEVEL")),
        _clean_str(_get_config_value(config_data, "logging", "log_level")),
    )

    return Settings(
        provider=cast(SortProvider, _coerce_enum(provider, SortProvider, defaults.provider)),
        python_path=python_path,
        isort_path=isort_path,
        isort_args=_coerce_args(isort_args),
        ruff_path=ruff_path,
        timeout_ms=timeout_ms,
        stderr_policy=cast(StderrPolicy, _coerce_enum(stderr_policy, StderrPolicy, defaults.stderr_policy)),
        log_level=cast(LogLevel, _coerce_enum(log_level, LogLevel, defaults.log_level)),
    )


def write_config(settings: Settings, config_path: Path | str | None = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    sections: list[str] = []
    _append_section(sections, "organize_imports", {"provider": settings.provider})
    _append_section(sections, "python", {"path": settings.python_path})
    _append_section(sections, "isort", {"path": settings.isort_path or None, "args": list(settings.isort_args)})
    _append_section(sections, "ruff", {"path": settings.ruff_path})
    _append_section(
        sections,
        "runtime",
        {"timeout_ms": settings.timeout_ms, "stderr_policy": settings.stderr_policy},
    )
    _append_section(sections, "logging", {"log_level": settings.log_level})

    content = "\n\n".join(filter(None, sections)) + "\n"
    path.write_text(content, encoding="utf-8")
    return path


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_config_value(config: Mapping[str, Any], section: str, key: str) -> Any:
    section_data = config.get(section)
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _coerce_enum(value: Any, enum_cls: type[Enum], default: Enum) -> Enum:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            return default
    return default


def _coerce_args(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, list | tuple):
        return tuple(str(item) for item in value)
    return ()


def _append_section(parts: list[str], name: str, values: Mapping[str, Any]) -> None:
    filtered = {k: v for k, v in values.items() if v is not None and v != [] and v != ()}
    if not filtered:
        return
    lines = [f"[{name}]"]
    for key, val in filtered.items():
        lines.append(f"{key} = {_render_value(val)}")
    parts.append("\n".join(lines))


def _render_value(val: Any) -> str:
    if isinstance(val, Enum):
        return _render_value(val.value)
    if isinstance(val, str):
        escaped = val.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(val, list | tuple):
        return "[" + ", ".join(_render_value(item) for item in val) + "]"
    if isinstance(val, bool):
        return "true" if val else "false"
    return str(val)


__all__ = [
    "Settings",
    "SortProvider",
    "StderrPolicy",
    "LogLevel",
    "default_config_path",
    "load_settings",
    "write_config",
]
