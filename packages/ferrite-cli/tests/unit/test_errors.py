"""Unit tests for ferrite_cli.errors module."""

from __future__ import annotations

import pytest

from ferrite_cli.errors import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    CLIError,
    exit_code_for,
    handle_ferrite_error,
    handle_file_not_found,
)
from ferrite_core.errors import (
    CompileFailedError,
    ConfigError,
    DocumentationFailedError,
    ToolMissingError,
)


class TestCLIError:
    """Tests for CLIError exception."""

    def test_message(self) -> None:
        error = CLIError("Test error message")
        assert error.message == "Test error message"
        assert str(error) == "Test error message"

    def test_show_prints_brackets_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        CLIError("Cannot read board file boards/[/hail].yaml").show()

        assert "Cannot read board file boards/[/hail].yaml" in capsys.readouterr().out

    def test_default_exit_code(self) -> None:
        assert CLIError("Test error").exit_code == EXIT_USER_ERROR

    def test_custom_exit_code(self) -> None:
        assert CLIError("Test error", exit_code=EXIT_SYSTEM_ERROR).exit_code == EXIT_SYSTEM_ERROR


class TestExitCodeFor:
    """Tests for mapping ferrite-core errors to exit codes."""

    def test_missing_tool_is_system_error(self) -> None:
        assert exit_code_for(ToolMissingError("rustup")) == EXIT_SYSTEM_ERROR

    def test_config_error_is_user_error(self) -> None:
        assert exit_code_for(ConfigError("Missing", fields=["platform"])) == EXIT_USER_ERROR

    def test_build_failure_is_user_error(self) -> None:
        assert exit_code_for(DocumentationFailedError(101)) == EXIT_USER_ERROR


class TestHandleFerriteError:
    """Tests for handle_ferrite_error."""

    def test_build_error_names_goal(self) -> None:
        with pytest.raises(CLIError) as exc_info:
            handle_ferrite_error(CompileFailedError(None, 101), "debug-build")

        assert exc_info.value.message == "debug-build: Compile step failed"
        assert exc_info.value.exit_code == EXIT_USER_ERROR

    def test_config_error_not_prefixed(self) -> None:
        with pytest.raises(CLIError) as exc_info:
            handle_ferrite_error(ConfigError("Missing required configuration", fields=["target"]))

        assert exc_info.value.message == "Missing required configuration: target"

    def test_chains_original(self) -> None:
        original = ToolMissingError("rustup")

        with pytest.raises(CLIError) as exc_info:
            handle_ferrite_error(original, "build")

        assert exc_info.value.__cause__ is original
        assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR


def test_handle_file_not_found() -> None:
    with pytest.raises(CLIError) as exc_info:
        handle_file_not_found("boards/hail.yaml")

    assert "boards/hail.yaml" in exc_info.value.message
    assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR
