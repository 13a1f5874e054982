"""Toolchain manager presence and version check."""

from __future__ import annotations

from ferrite_core.runner import ToolRunner
from ferrite_core.toolchain.checks.base import BaseCheck
from ferrite_core.toolchain.models import CheckResult, CheckStatus
from ferrite_core.toolchain.version import (
    LOWEST_VERSION,
    format_version,
    is_outdated,
    parse_version,
)


class ToolchainManagerCheck(BaseCheck):
    """Verify the toolchain manager is installed and recent enough.

    FAILED means the tool is missing entirely (fatal). WARNING means it is
    older than ``minimum`` or its version could not be determined, either
    because the output did not parse or because ``--version`` exited
    non-zero. The validator heals a warning with an update.

    Example:
        >>> check = ToolchainManagerCheck(runner, tool="rustup", minimum="1.11.0")
        >>> check.run().status
        <CheckStatus.PASSED: 'passed'>
    """

    def __init__(self, runner: ToolRunner, *, tool: str, minimum: str) -> None:
        super().__init__(name="toolchain_manager", runner=runner)
        self.tool = tool
        self.minimum = minimum

    def _execute(self) -> CheckResult:
        details: dict[str, str] = {"tool": self.tool, "minimum": self.minimum}

        try:
            output = self.runner.capture([self.tool, "--version"])
        except FileNotFoundError:
            return self._make_result(
                status=CheckStatus.FAILED,
                message=f"{self.tool} not found",
                details=details,
            )

        if not output.ok:
            details["installed"] = format_version(LOWEST_VERSION)
            details["returncode"] = str(output.returncode)
            return self._make_result(
                status=CheckStatus.WARNING,
                message=f"{self.tool} --version exited with status {output.returncode}",
                details=details,
            )

        installed = format_version(parse_version(output.stdout))
        details["installed"] = installed

        if is_outdated(output.stdout, self.minimum):
            return self._make_result(
                status=CheckStatus.WARNING,
                message=f"{self.tool} {installed} is older than {self.minimum}",
                details=details,
            )

        return self._make_result(
            status=CheckStatus.PASSED,
            message=f"{self.tool} {installed}",
            details=details,
        )
