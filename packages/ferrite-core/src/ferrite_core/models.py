"""Build identity models.

Defines the immutable values that identify what is being built:
- BuildProfile: Release or Debug
- TargetSpec: (platform, architecture triple) pair
- ArtifactKind: production stage of an output file
- Artifact: full identity of one build output
- ArtifactState / StepRecord: per-invocation production bookkeeping
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BuildProfile(str, Enum):
    """Optimization/debug-info variant.

    Attributes:
        RELEASE: Optimized build, output under ``release/``
        DEBUG: Unoptimized build, output under ``debug/``
    """

    RELEASE = "release"
    DEBUG = "debug"

    @property
    def optimized(self) -> bool:
        """Whether optimization flags are passed to the compile step."""
        return self is BuildProfile.RELEASE


class ArtifactKind(str, Enum):
    """Production stage of an artifact.

    Attributes:
        COMPILED_OBJECT: Linked binary as emitted by the compiler
        ELF: Copy of the compiled object with an ``.elf`` suffix
        BIN: Raw binary image
        HEX: Intel HEX image
        LISTING: Disassembly listing
    """

    COMPILED_OBJECT = "compiled-object"
    ELF = "elf"
    BIN = "bin"
    HEX = "hex"
    LISTING = "listing"

    @property
    def suffix(self) -> str:
        """File suffix for artifacts of this kind."""
        return _SUFFIXES[self]


_SUFFIXES: dict[ArtifactKind, str] = {
    ArtifactKind.COMPILED_OBJECT: "",
    ArtifactKind.ELF: ".elf",
    ArtifactKind.BIN: ".bin",
    ArtifactKind.HEX: ".hex",
    ArtifactKind.LISTING: ".lst",
}


class TargetSpec(BaseModel):
    """The (platform, architecture) pair fixing what is being built.

    Attributes:
        platform: Firmware variant name, also the output file stem
        triple: Compilation target triple (instruction set/ABI)

    Example:
        >>> TargetSpec(platform="imix", triple="thumbv7em-none-eabi")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    platform: str = Field(..., min_length=1, description="Platform name")
    triple: str = Field(..., min_length=1, description="Architecture target triple")


class Artifact(BaseModel):
    """Full identity of a build output at a specific production stage.

    Frozen and hashable so it can key per-invocation caches.

    Attributes:
        kind: Production stage
        profile: Build profile
        target: Platform/triple pair
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ArtifactKind
    profile: BuildProfile
    target: TargetSpec

    def with_kind(self, kind: ArtifactKind) -> Artifact:
        """Return the artifact with the same profile and target but another kind."""
        return Artifact(kind=kind, profile=self.profile, target=self.target)

    def describe(self) -> str:
        """Short human-readable identity, e.g. ``imix (release, bin)``."""
        return f"{self.target.platform} ({self.profile.value}, {self.kind.value})"


class ArtifactState(str, Enum):
    """Resolution state of a single artifact within one invocation.

    Transitions: UNRESOLVED -> RESOLVING -> UP_TO_DATE | REBUILDING,
    REBUILDING -> PRODUCED | FAILED.
    """

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    UP_TO_DATE = "up-to-date"
    REBUILDING = "rebuilding"
    PRODUCED = "produced"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        """Whether no further transition can happen."""
        return self in (ArtifactState.UP_TO_DATE, ArtifactState.PRODUCED, ArtifactState.FAILED)


class StepRecord(BaseModel):
    """Outcome of resolving one artifact.

    Attributes:
        artifact: Artifact identity
        state: Terminal state reached
        command: Tool command line run for the step (empty when skipped)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    artifact: Artifact
    state: ArtifactState
    command: list[str] = Field(default_factory=list)
