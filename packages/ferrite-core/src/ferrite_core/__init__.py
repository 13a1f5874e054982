"""ferrite-core: Firmware image build orchestration.

This package provides:
- BuildConfig: Invocation configuration (environment, board file, overrides)
- EnvironmentValidator: Host toolchain validation and healing
- ArtifactGraphBuilder: Staleness-aware production of firmware artifacts
- BuildSession: Runs named goals (build, listing, documentation, type-check, clean, ...)
"""

from __future__ import annotations

__version__ = "0.1.0"

from ferrite_core.config import BuildConfig, load_config
from ferrite_core.errors import (
    BuildError,
    CompileFailedError,
    ComponentMissingError,
    ConfigError,
    ConversionFailedError,
    DocumentationFailedError,
    FerriteError,
    ReportingFailedError,
    ToolMissingError,
    ToolOutdatedError,
    ValidationError,
)
from ferrite_core.graph import ArtifactGraphBuilder, ArtifactLayout
from ferrite_core.models import (
    Artifact,
    ArtifactKind,
    ArtifactState,
    BuildProfile,
    StepRecord,
    TargetSpec,
)
from ferrite_core.runner import ToolOutput, ToolRunner
from ferrite_core.session import GOAL_ARTIFACTS, BuildSession, Goal, GoalResult, run_goal
from ferrite_core.toolchain import EnvironmentValidator, ValidationResult

__all__ = [
    "__version__",
    # Configuration
    "BuildConfig",
    "load_config",
    # Models
    "Artifact",
    "ArtifactKind",
    "ArtifactState",
    "BuildProfile",
    "StepRecord",
    "TargetSpec",
    # Components
    "ArtifactGraphBuilder",
    "ArtifactLayout",
    "EnvironmentValidator",
    "ValidationResult",
    "ToolOutput",
    "ToolRunner",
    # Session
    "GOAL_ARTIFACTS",
    "BuildSession",
    "Goal",
    "GoalResult",
    "run_goal",
    # Errors
    "FerriteError",
    "ConfigError",
    "ValidationError",
    "ToolMissingError",
    "ToolOutdatedError",
    "ComponentMissingError",
    "BuildError",
    "CompileFailedError",
    "ConversionFailedError",
    "DocumentationFailedError",
    "ReportingFailedError",
]
