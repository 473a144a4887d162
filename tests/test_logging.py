"""Tests for logging setup."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from protocol_registry.core.logging import configure_logging, disable_logging
from protocol_registry.data.token_registry import JSONTokenRegistry


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    yield
    logger.remove()
    disable_logging()


def _read_log(path: Path) -> str:
    # Removing the sinks closes and flushes the file
    logger.remove()
    return path.read_text()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_file_sink_receives_package_logs(self, temp_log_dir: Path) -> None:
        """Package modules log once enabled."""
        log_file = temp_log_dir / "run.log"
        configure_logging("DEBUG", log_file=log_file)

        JSONTokenRegistry.load(chain_ids=[1])

        content = _read_log(log_file)
        assert "Loaded" in content
        assert "| tokens |" in content

    def test_level_filters(self, temp_log_dir: Path) -> None:
        log_file = temp_log_dir / "run.log"
        configure_logging("warning", log_file=log_file)

        JSONTokenRegistry.load(chain_ids=[1])

        assert "Loaded" not in _read_log(log_file)

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        log_file = tmp_path / "nested" / "dir" / "run.log"
        configure_logging("INFO", log_file=log_file)
        assert log_file.parent.is_dir()

    def test_unbound_logger_has_component(self, temp_log_dir: Path) -> None:
        """Records without a bound component still format."""
        log_file = temp_log_dir / "run.log"
        configure_logging("INFO", log_file=log_file)

        logger.info("plain message")

        assert "| - | plain message" in _read_log(log_file)


class TestDisableLogging:
    """Tests for disable_logging()."""

    def test_disabled_package_is_silent(self, temp_log_dir: Path) -> None:
        log_file = temp_log_dir / "run.log"
        configure_logging("DEBUG", log_file=log_file)
        disable_logging()

        JSONTokenRegistry.load(chain_ids=[1])

        assert "Loaded" not in _read_log(log_file)
