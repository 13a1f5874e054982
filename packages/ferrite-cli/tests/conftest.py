"""Shared test fixtures for ferrite-cli tests.

Provides CliRunner fixtures, board file helpers, and keeps logging
configuration and FERRITE_* variables from leaking between tests.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import structlog
from click.testing import CliRunner

BOARD_FILE_NAME = "ferrite.yaml"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def no_logging_setup() -> Generator[MagicMock, None, None]:
    """Keep commands from reconfiguring global logging during tests."""
    with patch("ferrite_cli.commands.options.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture(autouse=True)
def clean_ferrite_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FERRITE_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("FERRITE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance whose working directory is a fresh temp dir.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def create_board_file(isolated_runner: CliRunner) -> Callable[..., Path]:
    """Factory fixture to create board files with custom content.

    Returns:
        Function that writes a board file and returns its path.
    """

    def _create(content: str, filename: str = BOARD_FILE_NAME) -> Path:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _create
