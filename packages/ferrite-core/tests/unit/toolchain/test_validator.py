"""Unit tests for the environment validator's healing policy."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

from ferrite_core.config import BuildConfig
from ferrite_core.errors import ToolMissingError
from ferrite_core.toolchain.models import CheckStatus
from ferrite_core.toolchain.validator import EnvironmentValidator, validate_environment

if TYPE_CHECKING:
    from conftest import FakeToolRunner

TRIPLE = "thumbv7em-none-eabi"


def _validator(
    config: BuildConfig, runner: FakeToolRunner, sleep: MagicMock | None = None
) -> EnvironmentValidator:
    return EnvironmentValidator(config, runner, triple=TRIPLE, sleep=sleep or MagicMock())


class TestHealthyEnvironment:
    """Validation of an environment that needs nothing."""

    def test_all_checks_pass(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        result = _validator(config, fake_runner).validate()

        assert result.overall_status == CheckStatus.PASSED
        assert result.passed is True
        assert result.healed is False
        assert [c.name for c in result.checks] == [
            "toolchain_manager",
            "component_rust-src",
            f"target_{TRIPLE}",
        ]

    def test_only_queries_are_run(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        _validator(config, fake_runner).validate()

        assert fake_runner.commands == [
            ["rustup", "--version"],
            ["rustup", "component", "list"],
            ["rustup", "target", "list"],
        ]

    def test_convenience_function(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        result = validate_environment(config, fake_runner, triple=TRIPLE)

        assert result.passed is True


class TestMissingManager:
    """A missing toolchain manager is the one fatal outcome."""

    def test_raises_tool_missing(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        fake_runner.missing.add("rustup")

        with pytest.raises(ToolMissingError) as exc_info:
            _validator(config, fake_runner).validate()

        assert exc_info.value.tool == "rustup"

    def test_nothing_else_runs(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        fake_runner.missing.add("rustup")

        with pytest.raises(ToolMissingError):
            _validator(config, fake_runner).validate()

        assert fake_runner.commands == []


class TestOutdatedManager:
    """An outdated manager is updated exactly once, after a pause."""

    def test_update_runs_once_after_delay(
        self, target_dir: Path, fake_runner: FakeToolRunner
    ) -> None:
        config = BuildConfig(
            platform="imix", target=TRIPLE, target_dir=target_dir, update_delay_seconds=10
        )
        fake_runner.rustup_version = "rustup 1.10.0"
        sleep = MagicMock()

        result = _validator(config, fake_runner, sleep).validate()

        sleep.assert_called_once_with(10)
        assert fake_runner.invocations("rustup", "update") == [["rustup", "update"]]
        assert result.overall_status == CheckStatus.WARNING
        assert result.passed is True
        assert result.remediations[0].check == "toolchain_manager"
        assert result.remediations[0].status == CheckStatus.PASSED

    def test_validation_continues_after_update(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        fake_runner.rustup_version = "rustup 1.0.0"

        result = _validator(config, fake_runner).validate()

        assert len(result.checks) == 3
        assert fake_runner.invocations("rustup", "target") == [["rustup", "target", "list"]]

    def test_failed_update_is_not_fatal(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        fake_runner.rustup_version = "rustup 1.0.0"
        fake_runner.failures[("rustup", "update")] = 1

        result = _validator(config, fake_runner).validate()

        assert result.passed is True
        assert result.remediations[0].status == CheckStatus.WARNING
        assert result.remediations[0].returncode == 1

    def test_version_is_not_rechecked(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        fake_runner.rustup_version = "rustup 1.0.0"

        _validator(config, fake_runner).validate()

        assert len(fake_runner.invocations("rustup", "--version")) == 1


class TestMisbehavingManager:
    """A manager that is present but cannot report its version is updated, not fatal."""

    def test_nonzero_version_exit_takes_update_path(
        self, target_dir: Path, fake_runner: FakeToolRunner
    ) -> None:
        config = BuildConfig(
            platform="imix", target=TRIPLE, target_dir=target_dir, update_delay_seconds=10
        )
        fake_runner.failures[("rustup", "--version")] = 1
        sleep = MagicMock()

        result = _validator(config, fake_runner, sleep).validate()

        sleep.assert_called_once_with(10)
        assert fake_runner.invocations("rustup", "update") == [["rustup", "update"]]
        assert result.passed is True
        assert result.checks[0].status == CheckStatus.WARNING
        assert result.remediations[0].check == "toolchain_manager"

    def test_validation_continues(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        fake_runner.failures[("rustup", "--version")] = 127

        result = _validator(config, fake_runner).validate()

        assert len(result.checks) == 3
        assert len(fake_runner.invocations("rustup", "--version")) == 1


class TestMissingComponents:
    """Missing components and targets are installed."""

    def test_installs_source_component(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        fake_runner.components.clear()

        result = _validator(config, fake_runner).validate()

        assert fake_runner.invocations("rustup", "component")[-1] == [
            "rustup",
            "component",
            "add",
            "rust-src",
        ]
        assert "rust-src" in fake_runner.components
        assert [r.check for r in result.remediations] == ["component_rust-src"]

    def test_installs_target(self, config: BuildConfig, fake_runner: FakeToolRunner) -> None:
        fake_runner.targets.clear()

        result = _validator(config, fake_runner).validate()

        assert fake_runner.invocations("rustup", "target")[-1] == [
            "rustup",
            "target",
            "add",
            TRIPLE,
        ]
        assert result.overall_status == CheckStatus.WARNING

    def test_failed_install_recorded_as_warning(
        self, config: BuildConfig, fake_runner: FakeToolRunner
    ) -> None:
        fake_runner.targets.clear()
        fake_runner.failures[("rustup", "target")] = 1

        result = _validator(config, fake_runner).validate()

        assert result.passed is True
        assert result.remediations[-1].status == CheckStatus.WARNING

    def test_custom_source_component(self, target_dir: Path, fake_runner: FakeToolRunner) -> None:
        config = BuildConfig(
            platform="imix",
            target=TRIPLE,
            target_dir=target_dir,
            source_component="llvm-tools",
            update_delay_seconds=0,
        )

        result = _validator(config, fake_runner).validate()

        assert ["rustup", "component", "add", "llvm-tools"] in fake_runner.commands
        assert result.checks[1].name == "component_llvm-tools"
