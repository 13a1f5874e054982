"""Build session: one invocation of a named goal.

Control flow for every goal except ``clean``:

1. bind TargetSpec from the configuration (ConfigError, no tool invoked)
2. validate the host toolchain (ToolMissingError aborts)
3. compute the kernel version stamp
4. produce the goal's artifact, or run the doc/check step

``clean`` needs neither a target nor a valid toolchain.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ferrite_core.config import BuildConfig
from ferrite_core.errors import CompileFailedError, ConfigError, DocumentationFailedError
from ferrite_core.graph import ArtifactGraphBuilder
from ferrite_core.graph.steps import cargo_env, check_command, doc_command
from ferrite_core.models import (
    ArtifactKind,
    ArtifactState,
    BuildProfile,
    StepRecord,
)
from ferrite_core.runner import ToolRunner
from ferrite_core.toolchain import EnvironmentValidator, ValidationResult
from ferrite_core.version_stamp import kernel_version

logger = structlog.get_logger(__name__)


class Goal(str, Enum):
    """Named terminal goals."""

    BUILD = "build"
    LISTING = "listing"
    DEBUG_BUILD = "debug-build"
    DEBUG_LISTING = "debug-listing"
    DOCUMENTATION = "documentation"
    TYPE_CHECK = "type-check"
    CLEAN = "clean"


GOAL_ARTIFACTS: dict[Goal, tuple[ArtifactKind, BuildProfile]] = {
    Goal.BUILD: (ArtifactKind.BIN, BuildProfile.RELEASE),
    Goal.LISTING: (ArtifactKind.LISTING, BuildProfile.RELEASE),
    Goal.DEBUG_BUILD: (ArtifactKind.BIN, BuildProfile.DEBUG),
    Goal.DEBUG_LISTING: (ArtifactKind.LISTING, BuildProfile.DEBUG),
}
"""Goals that produce an artifact, with the kind and profile they produce."""


class GoalResult(BaseModel):
    """Outcome of a successful goal.

    Attributes:
        goal: Goal that ran
        path: Produced artifact path (artifact goals only)
        validation: Environment validation result (all goals but clean)
        steps: Per-artifact outcomes (artifact goals only)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    goal: Goal
    path: Path | None = None
    validation: ValidationResult | None = None
    steps: list[StepRecord] = Field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        """True if no artifact had to be produced."""
        return all(step.state != ArtifactState.PRODUCED for step in self.steps)


class BuildSession:
    """Runs goals for one invocation.

    Attributes:
        config: Invocation configuration, read once
        runner: Tool runner shared by all components

    Example:
        >>> session = BuildSession(load_config(platform="imix", target="thumbv7em-none-eabi"))
        >>> session.run(Goal.BUILD).path
        PosixPath('target/thumbv7em-none-eabi/release/imix.bin')
    """

    def __init__(self, config: BuildConfig, runner: ToolRunner | None = None) -> None:
        self.config = config
        self.runner = runner or ToolRunner(verbose=config.verbose)
        self._builder: ArtifactGraphBuilder | None = None
        self._log = logger.bind(component="build_session")

    def run(self, goal: Goal) -> GoalResult:
        """Run a goal.

        Raises:
            ConfigError: If platform or target is missing.
            ToolMissingError: If the toolchain manager is not installed.
            BuildError: If any production step fails.
        """
        self._log.info("goal_started", goal=goal.value)

        if goal == Goal.CLEAN:
            self.builder().clean()
            return GoalResult(goal=goal)

        target = self.config.target_spec()
        validation = self.validate(target.triple)
        stamp = kernel_version(self.runner, self.config.git)
        self._log.debug("kernel_version", stamp=stamp)

        if goal in GOAL_ARTIFACTS:
            kind, profile = GOAL_ARTIFACTS[goal]
            builder = self.builder(kernel_version=stamp)
            first_record = len(builder.records)
            path = builder.produce(kind, profile, target)
            return GoalResult(
                goal=goal,
                path=path,
                validation=validation,
                steps=builder.records[first_record:],
            )

        if goal == Goal.DOCUMENTATION:
            self._run_cargo(doc_command(self.config, target, BuildProfile.RELEASE), stamp, goal)
        else:
            self._run_cargo(check_command(self.config, target, BuildProfile.RELEASE), stamp, goal)
        return GoalResult(goal=goal, validation=validation)

    def validate(self, triple: str | None = None) -> ValidationResult:
        """Validate the host toolchain for a target triple.

        Only the triple matters here, so no platform is required.

        Args:
            triple: Target triple, defaults to the configured target.

        Raises:
            ConfigError: If no triple is given and none is configured.
            ToolMissingError: If the toolchain manager is not installed.
        """
        triple = triple or self.config.target
        if not triple:
            raise ConfigError("Missing required configuration", fields=["target"])
        return EnvironmentValidator(self.config, self.runner, triple=triple).validate()

    def builder(self, *, kernel_version: str | None = None) -> ArtifactGraphBuilder:
        """The invocation's graph builder, created on first use."""
        if self._builder is None:
            self._builder = ArtifactGraphBuilder(self.config, self.runner)
        if kernel_version is not None:
            self._builder.kernel_version = kernel_version
        return self._builder

    def _run_cargo(self, command: list[str], stamp: str, goal: Goal) -> None:
        try:
            returncode: int | None = self.runner.run(command, env=cargo_env(self.config, stamp))
        except FileNotFoundError:
            returncode = None

        if returncode == 0:
            return
        details = f"command={command} returncode={returncode}"
        if goal == Goal.DOCUMENTATION:
            raise DocumentationFailedError(returncode, internal_details=details)
        raise CompileFailedError(None, returncode, step="check", internal_details=details)


def run_goal(config: BuildConfig, goal: Goal, runner: ToolRunner | None = None) -> GoalResult:
    """Run one goal in a fresh session."""
    return BuildSession(config, runner).run(goal)
