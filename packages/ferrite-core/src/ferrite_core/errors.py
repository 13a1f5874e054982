"""Custom exception hierarchy for ferrite-core.

This module defines the exception classes used throughout ferrite:
- FerriteError: Base exception for all ferrite errors
- ConfigError: Required build identity missing or board file invalid
- ValidationError: Host toolchain environment does not meet requirements
- BuildError: An artifact production step failed

Design:
- User-facing messages are safe to display
- Technical details (command lines, exit codes) are logged via structlog
- External tool diagnostics are passed through by the tools themselves,
  these messages only name the step that failed
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from ferrite_core.models import Artifact, ArtifactKind

logger = structlog.get_logger(__name__)


class FerriteError(Exception):
    """Base exception for ferrite.

    All ferrite exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details for logging only.

    Example:
        >>> raise FerriteError(
        ...     "Build failed",
        ...     internal_details="cargo exited with status 101",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize FerriteError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "ferrite_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigError(FerriteError):
    """Raised when required build configuration is missing or invalid.

    Raised before any external tool is invoked.

    Attributes:
        fields: Names of the fields that are missing or invalid.

    Example:
        >>> raise ConfigError("Missing required configuration", fields=["platform"])
    """

    def __init__(
        self,
        user_message: str,
        *,
        fields: list[str] | None = None,
        internal_details: str | None = None,
    ) -> None:
        self.fields = list(fields or [])
        if self.fields:
            user_message = f"{user_message}: {', '.join(self.fields)}"
        super().__init__(user_message, internal_details=internal_details)


class ValidationError(FerriteError):
    """Raised when the host toolchain environment fails validation."""


class ToolMissingError(ValidationError):
    """Raised when the toolchain manager is not installed at all.

    This is the only fatal validation outcome; it aborts the invocation
    before any artifact work begins.

    Attributes:
        tool: Name or path of the missing tool.
    """

    def __init__(self, tool: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Required tool '{tool}' is not installed or not on PATH",
            internal_details=internal_details,
        )
        self.tool = tool


class ToolOutdatedError(ValidationError):
    """Raised when the toolchain manager is older than the required minimum.

    Self-healing: the validator reacts by running an update and continues.

    Attributes:
        tool: Tool name.
        installed: Installed version string.
        required: Minimum required version string.
    """

    def __init__(self, tool: str, installed: str, required: str) -> None:
        super().__init__(f"{tool} {installed} is older than required {required}")
        self.tool = tool
        self.installed = installed
        self.required = required


class ComponentMissingError(ValidationError):
    """Raised when a toolchain component is not installed.

    Self-healing: the validator reacts by installing the component.

    Attributes:
        component: Component name (e.g., "rust-src" or a target triple).
    """

    def __init__(self, component: str) -> None:
        super().__init__(f"Toolchain component '{component}' is not installed")
        self.component = component


class BuildError(FerriteError):
    """Raised when a production step fails.

    Attributes:
        step: Name of the failing step (compile, convert, doc, check).
        artifact: Artifact that was being produced, if any.
        returncode: Exit code of the failing tool, if it ran.
    """

    def __init__(
        self,
        user_message: str,
        *,
        step: str,
        artifact: Artifact | None = None,
        returncode: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message, internal_details=internal_details)
        self.step = step
        self.artifact = artifact
        self.returncode = returncode


class CompileFailedError(BuildError):
    """Raised when the compile-and-link step fails."""

    def __init__(
        self,
        artifact: Artifact | None,
        returncode: int | None,
        *,
        step: str = "compile",
        internal_details: str | None = None,
    ) -> None:
        target = f" for {artifact.describe()}" if artifact is not None else ""
        super().__init__(
            f"{step.capitalize()} step failed{target}",
            step=step,
            artifact=artifact,
            returncode=returncode,
            internal_details=internal_details,
        )


class ConversionFailedError(BuildError):
    """Raised when an ELF/BIN/HEX/Listing conversion step fails.

    Attributes:
        kind: Artifact kind whose conversion failed.
    """

    def __init__(
        self,
        artifact: Artifact,
        returncode: int | None,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"Conversion to {artifact.kind.value} failed for {artifact.describe()}",
            step="convert",
            artifact=artifact,
            returncode=returncode,
            internal_details=internal_details,
        )
        self.kind: ArtifactKind = artifact.kind


class DocumentationFailedError(BuildError):
    """Raised when the documentation generation step fails."""

    def __init__(self, returncode: int | None, *, internal_details: str | None = None) -> None:
        super().__init__(
            "Documentation step failed",
            step="doc",
            returncode=returncode,
            internal_details=internal_details,
        )


class ReportingFailedError(FerriteError):
    """Raised when the informational size report cannot be produced.

    Never propagated as a build failure; callers log and continue.
    """
