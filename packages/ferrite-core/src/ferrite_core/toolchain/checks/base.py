"""Base class for toolchain checks.

Abstract base class defining the interface for all toolchain checks.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

import structlog

from ferrite_core.runner import ToolRunner
from ferrite_core.toolchain.models import CheckResult, CheckStatus

logger = structlog.get_logger(__name__)


class BaseCheck(ABC):
    """Base class for toolchain checks.

    Provides common functionality for running checks with timing,
    error handling, and logging. A check only observes; remedial
    actions belong to the validator.

    Attributes:
        name: Check name for identification
        runner: Tool runner used to query the toolchain

    Example:
        >>> class MyCheck(BaseCheck):
        ...     def _execute(self) -> CheckResult:
        ...         return self._make_result(CheckStatus.PASSED)
    """

    def __init__(self, name: str, runner: ToolRunner) -> None:
        """Initialize the check.

        Args:
            name: Check name for identification and logging
            runner: Tool runner used to query the toolchain
        """
        self.name = name
        self.runner = runner
        self._log = logger.bind(check=name)

    def run(self) -> CheckResult:
        """Run the check with timing and error handling.

        Returns:
            CheckResult with status, message, and duration.
        """
        start_time = time.monotonic()
        timestamp = datetime.now(UTC)

        self._log.debug("check_started")

        try:
            result = self._execute()
        except OSError as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            self._log.error("check_error", error=str(e))
            return CheckResult(
                name=self.name,
                status=CheckStatus.ERROR,
                message=f"Check failed with error: {type(e).__name__}",
                details={"error": str(e), "error_type": type(e).__name__},
                duration_ms=duration_ms,
                timestamp=timestamp,
            )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        final_result = result.model_copy(
            update={"duration_ms": duration_ms, "timestamp": timestamp}
        )

        self._log.debug(
            "check_completed",
            status=final_result.status.value,
            duration_ms=duration_ms,
        )
        return final_result

    @abstractmethod
    def _execute(self) -> CheckResult:
        """Execute the actual check logic.

        Returns:
            CheckResult with the check outcome.

        Raises:
            OSError: Converted to ERROR status by run().
        """

    def _make_result(
        self,
        status: CheckStatus,
        message: str = "",
        details: dict[str, Any] | None = None,
    ) -> CheckResult:
        """Create a CheckResult with common fields."""
        return CheckResult(
            name=self.name,
            status=status,
            message=message,
            details=details or {},
        )
