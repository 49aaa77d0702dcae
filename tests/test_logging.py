import logging
from pathlib import Path

import pytest

from sortpatch.config import LogLevel
from sortpatch.logging import OUTPUT_LOGGER, _to_logging_level, attach_file_handler, configure_logging


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger("sortpatch")
    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logging.getLogger(OUTPUT_LOGGER).setLevel(logging.NOTSET)


def test_configure_logging_sets_package_level() -> None:
    logger = configure_logging(log_level=LogLevel.INFO)

    assert logger.name == "sortpatch"
    assert logger.level == logging.INFO
    assert logging.getLogger().level == logging.WARNING


def test_tool_output_visible_at_default_level() -> None:
    configure_logging()

    assert logging.getLogger(OUTPUT_LOGGER).isEnabledFor(logging.INFO)
    assert not logging.getLogger("sortpatch.sort_imports").isEnabledFor(logging.INFO)


def test_debug_overrides_level() -> None:
    logger = configure_logging(log_level=LogLevel.ERROR, debug_enabled=True)

    assert logger.level == logging.DEBUG
    assert logging.getLogger().level == logging.INFO


def test_log_file_receives_package_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "sortpatch.log"
    configure_logging(log_level="info", log_file=log_file)

    logging.getLogger("sortpatch.sort_imports").info("sorted %s", "mod.py")

    for handler in logging.getLogger("sortpatch").handlers:
        handler.flush()
    assert "INFO sortpatch.sort_imports: sorted mod.py" in log_file.read_text(encoding="utf-8")


def test_file_handler_is_not_duplicated(tmp_path: Path) -> None:
    logger = logging.getLogger("sortpatch")
    first = attach_file_handler(logger, tmp_path / "a.log", logging.INFO)
    second = attach_file_handler(logger, tmp_path / "a.log", logging.DEBUG)

    assert first is second
    assert second.level == logging.DEBUG
    assert len(logger.handlers) == 1


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (LogLevel.DEBUG, logging.DEBUG),
        ("info", logging.INFO),
        ("ERROR", logging.ERROR),
        ("verbose", logging.WARNING),
        (None, logging.WARNING),
    ],
)
def test_log_level_mapping(value, expected: int) -> None:
    assert _to_logging_level(value) == expected
