"""Installed toolchain component checks.

- ComponentCheck: a named component (e.g. ``rust-src``)
- TargetCheck: the compilation target for the requested triple
"""

from __future__ import annotations

from ferrite_core.runner import ToolRunner
from ferrite_core.toolchain.checks.base import BaseCheck
from ferrite_core.toolchain.models import CheckResult, CheckStatus

INSTALLED_MARKER = "(installed)"


def is_listed_installed(listing: str, name: str) -> bool:
    """Whether ``<name> (installed)`` appears in a ``rustup ... list`` output.

    Only whole entries match, so ``thumbv7em-none-eabi`` does not match
    ``thumbv7em-none-eabihf (installed)``.
    """
    for line in listing.splitlines():
        entry = line.strip()
        if not entry.endswith(INSTALLED_MARKER):
            continue
        entry_name = entry[: -len(INSTALLED_MARKER)].strip()
        if entry_name == name:
            return True
    return False


class _ListedCheck(BaseCheck):
    list_args: tuple[str, ...] = ()
    label = "component"

    def __init__(self, runner: ToolRunner, *, tool: str, item: str, name: str) -> None:
        super().__init__(name=name, runner=runner)
        self.tool = tool
        self.item = item

    def _execute(self) -> CheckResult:
        details = {"tool": self.tool, self.label: self.item}
        output = self.runner.capture([self.tool, *self.list_args])

        if output.ok and is_listed_installed(output.stdout, self.item):
            return self._make_result(
                status=CheckStatus.PASSED,
                message=f"{self.label} {self.item} installed",
                details=details,
            )

        if not output.ok:
            details["returncode"] = str(output.returncode)
        return self._make_result(
            status=CheckStatus.WARNING,
            message=f"{self.label} {self.item} not installed",
            details=details,
        )


class ComponentCheck(_ListedCheck):
    """Verify a toolchain component is installed."""

    list_args = ("component", "list")
    label = "component"

    def __init__(self, runner: ToolRunner, *, tool: str, component: str) -> None:
        super().__init__(runner, tool=tool, item=component, name=f"component_{component}")


class TargetCheck(_ListedCheck):
    """Verify the compilation target for a triple is installed."""

    list_args = ("target", "list")
    label = "target"

    def __init__(self, runner: ToolRunner, *, tool: str, triple: str) -> None:
        super().__init__(runner, tool=tool, item=triple, name=f"target_{triple}")
