"""Host toolchain environment validator.

Runs the toolchain checks once per invocation, before any artifact work,
and applies the healing policy:

- manager missing: fatal, ToolMissingError propagates
- manager outdated: warn, pause for ``update_delay_seconds`` so the
  operator can interrupt, run the update, continue regardless of outcome
- component or target missing: install it, continue without re-checking

Failed remedial actions are recorded as WARNING remediations and logged.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from ferrite_core.config import BuildConfig
from ferrite_core.errors import ComponentMissingError, ToolMissingError, ToolOutdatedError
from ferrite_core.runner import ToolRunner
from ferrite_core.toolchain.checks import (
    BaseCheck,
    ComponentCheck,
    TargetCheck,
    ToolchainManagerCheck,
)
from ferrite_core.toolchain.models import (
    CheckResult,
    CheckStatus,
    Remediation,
    ValidationResult,
)

logger = structlog.get_logger(__name__)


class EnvironmentValidator:
    """Validates and heals the host toolchain environment.

    Attributes:
        config: Invocation configuration
        runner: Tool runner for queries and remedial actions
        triple: Compilation target triple that must be installed

    Example:
        >>> validator = EnvironmentValidator(config, runner, triple="thumbv7em-none-eabi")
        >>> result = validator.validate()
        >>> result.passed
        True
    """

    def __init__(
        self,
        config: BuildConfig,
        runner: ToolRunner,
        *,
        triple: str,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.runner = runner
        self.triple = triple
        self._sleep = sleep
        self._log = logger.bind(component="environment_validator")

    def validate(self) -> ValidationResult:
        """Run all toolchain checks, healing what can be healed.

        Returns:
            ValidationResult with checks and remedial actions.

        Raises:
            ToolMissingError: If the toolchain manager is not installed.
        """
        start_time = time.monotonic()
        started_at = datetime.now(UTC)
        checks: list[CheckResult] = []
        remediations: list[Remediation] = []
        rustup = self.config.rustup

        self._log.info("validation_started", tool=rustup, triple=self.triple)

        try:
            self._check_manager(checks)
        except ToolOutdatedError as e:
            self._log.warning(
                "tool_outdated",
                tool=e.tool,
                installed=e.installed,
                required=e.required,
                update_in_seconds=self.config.update_delay_seconds,
            )
            self._sleep(self.config.update_delay_seconds)
            remediations.append(self._remediate(checks[-1].name, [rustup, "update"]))

        component_checks: list[tuple[BaseCheck, list[str]]] = [
            (
                ComponentCheck(self.runner, tool=rustup, component=self.config.source_component),
                [rustup, "component", "add", self.config.source_component],
            ),
            (
                TargetCheck(self.runner, tool=rustup, triple=self.triple),
                [rustup, "target", "add", self.triple],
            ),
        ]
        for check, install in component_checks:
            try:
                self._check_installed(check, checks)
            except ComponentMissingError as e:
                self._log.warning("component_missing", component=e.component)
                remediations.append(self._remediate(check.name, install))

        overall_status = self._determine_overall_status(checks, remediations)
        total_duration_ms = int((time.monotonic() - start_time) * 1000)

        self._log.info(
            "validation_completed",
            overall_status=overall_status.value,
            remediations=len(remediations),
            total_duration_ms=total_duration_ms,
        )

        return ValidationResult(
            checks=checks,
            remediations=remediations,
            overall_status=overall_status,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            total_duration_ms=total_duration_ms,
        )

    def _check_manager(self, checks: list[CheckResult]) -> None:
        check = ToolchainManagerCheck(
            self.runner,
            tool=self.config.rustup,
            minimum=self.config.min_rustup_version,
        )
        result = check.run()
        checks.append(result)

        if result.failed:
            raise ToolMissingError(self.config.rustup, internal_details=result.message)
        if result.status == CheckStatus.WARNING:
            raise ToolOutdatedError(
                self.config.rustup,
                installed=str(result.details.get("installed", "unknown")),
                required=self.config.min_rustup_version,
            )

    def _check_installed(self, check: BaseCheck, checks: list[CheckResult]) -> None:
        result = check.run()
        checks.append(result)
        if not result.passed:
            item = getattr(check, "item", check.name)
            raise ComponentMissingError(item)

    def _remediate(self, check_name: str, command: list[str]) -> Remediation:
        """Run a remedial action without verifying its effect."""
        self._log.info("remediation_started", check=check_name, command=command)
        try:
            returncode: int | None = self.runner.run(command)
        except FileNotFoundError:
            returncode = None

        status = CheckStatus.PASSED if returncode == 0 else CheckStatus.WARNING
        if status == CheckStatus.WARNING:
            self._log.warning(
                "remediation_failed",
                check=check_name,
                command=command,
                returncode=returncode,
            )
        return Remediation(
            check=check_name,
            command=command,
            status=status,
            returncode=returncode,
        )

    def _determine_overall_status(
        self,
        checks: list[CheckResult],
        remediations: list[Remediation],
    ) -> CheckStatus:
        if all(c.passed for c in checks) and not remediations:
            return CheckStatus.PASSED
        return CheckStatus.WARNING


def validate_environment(
    config: BuildConfig,
    runner: ToolRunner,
    *,
    triple: str,
) -> ValidationResult:
    """Validate the host toolchain for ``triple``.

    Convenience function that creates a validator and runs it.

    Raises:
        ToolMissingError: If the toolchain manager is not installed.
    """
    return EnvironmentValidator(config, runner, triple=triple).validate()
