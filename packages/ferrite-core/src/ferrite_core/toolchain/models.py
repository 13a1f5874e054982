"""Environment validation result models.

Models for representing toolchain check results and remedial actions.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CheckStatus(str, Enum):
    """Status of a toolchain check.

    Attributes:
        PASSED: Requirement met
        FAILED: Requirement not met and cannot be healed
        WARNING: Requirement not met, remedial action applies
        ERROR: Check encountered an unexpected error
    """

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    ERROR = "error"


class CheckResult(BaseModel):
    """Result of a single toolchain check.

    Attributes:
        name: Check name (e.g., "toolchain_manager", "component_rust-src")
        status: Check status
        message: Human-readable result message
        details: Additional details (versions, component names, errors)
        duration_ms: Check duration in milliseconds
        timestamp: When the check was performed

    Example:
        >>> result = CheckResult(
        ...     name="toolchain_manager",
        ...     status=CheckStatus.PASSED,
        ...     message="rustup 1.27.1",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Check name")
    status: CheckStatus = Field(..., description="Check status")
    message: str = Field(default="", description="Result message")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional details")
    duration_ms: int = Field(default=0, ge=0, description="Duration in milliseconds")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Check timestamp"
    )

    @property
    def passed(self) -> bool:
        """Check if result indicates the requirement is met."""
        return self.status == CheckStatus.PASSED

    @property
    def failed(self) -> bool:
        """Check if result indicates an unrecoverable failure."""
        return self.status in (CheckStatus.FAILED, CheckStatus.ERROR)


class Remediation(BaseModel):
    """A remedial action taken in response to a failed check.

    Attributes:
        check: Name of the check that triggered the action
        command: Command line that was run
        status: PASSED if the command exited 0, WARNING otherwise
        returncode: Exit code, or None if the tool could not be started
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    check: str
    command: list[str]
    status: CheckStatus
    returncode: int | None = None


class ValidationResult(BaseModel):
    """Aggregated result of environment validation.

    Attributes:
        checks: Individual check results
        remediations: Remedial actions taken
        overall_status: Overall validation status
        started_at: When validation started
        finished_at: When validation finished
        total_duration_ms: Total duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    checks: list[CheckResult] = Field(default_factory=list, description="Check results")
    remediations: list[Remediation] = Field(default_factory=list, description="Actions taken")
    overall_status: CheckStatus = Field(default=CheckStatus.PASSED, description="Overall status")
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Start time"
    )
    finished_at: datetime | None = Field(default=None, description="End time")
    total_duration_ms: int = Field(default=0, ge=0, description="Total duration")

    @property
    def passed(self) -> bool:
        """Validation allows the build to proceed."""
        return self.overall_status in (CheckStatus.PASSED, CheckStatus.WARNING)

    @property
    def healed(self) -> bool:
        """At least one remedial action was taken."""
        return bool(self.remediations)

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def warning_count(self) -> int:
        return sum(1 for c in self.checks if c.status == CheckStatus.WARNING)
