"""Artifact graph builder.

Resolves a requested artifact by walking the production edges towards the
compiled object, then producing every stale artifact on the way back.

Resolution is memoized per builder (one builder per invocation), keyed by
full artifact identity, so shared ancestors are checked and produced once.
An artifact is up to date when it exists and its modification time is not
older than any of its resolved sources. Conversions write to a partial
file that only replaces the final path on success.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import structlog

from ferrite_core.config import BuildConfig
from ferrite_core.errors import (
    CompileFailedError,
    ConversionFailedError,
    ReportingFailedError,
)
from ferrite_core.graph.layout import ArtifactLayout, sources_of
from ferrite_core.graph.steps import (
    OBJCOPY_FORMATS,
    cargo_env,
    compile_command,
    objcopy_command,
    objdump_command,
    size_command,
)
from ferrite_core.models import (
    Artifact,
    ArtifactKind,
    ArtifactState,
    BuildProfile,
    StepRecord,
    TargetSpec,
)
from ferrite_core.runner import ToolRunner
from ferrite_core.version_stamp import NOT_GIT

logger = structlog.get_logger(__name__)


class ArtifactGraphBuilder:
    """Produces artifacts and their prerequisites, skipping current ones.

    Attributes:
        config: Invocation configuration
        runner: Tool runner for compile, conversion, and report steps
        layout: Artifact path layout under ``config.target_dir``
        kernel_version: Version stamp handed to the compile step
        states: Latest state of every artifact touched in this invocation
        records: Terminal outcome of every resolved artifact, in order

    Example:
        >>> builder = ArtifactGraphBuilder(config, runner, kernel_version="v1.4-12-gabc")
        >>> builder.produce(ArtifactKind.BIN, BuildProfile.RELEASE, target)
        PosixPath('target/thumbv7em-none-eabi/release/imix.bin')
    """

    def __init__(
        self,
        config: BuildConfig,
        runner: ToolRunner,
        *,
        kernel_version: str = NOT_GIT,
    ) -> None:
        self.config = config
        self.runner = runner
        self.layout = ArtifactLayout(config.target_dir)
        self.kernel_version = kernel_version
        self.states: dict[Artifact, ArtifactState] = {}
        self.records: list[StepRecord] = []
        self._resolved: dict[Artifact, int] = {}
        self._log = logger.bind(component="artifact_graph")

    def produce(self, kind: ArtifactKind, profile: BuildProfile, target: TargetSpec) -> Path:
        """Make ``kind`` current for ``profile`` and ``target``.

        After an ELF, BIN, HEX, or Listing was produced, the size report is
        run against the ELF. Its failure is logged, never raised.

        Args:
            kind: Requested artifact kind.
            profile: Build profile.
            target: Platform/triple pair.

        Returns:
            Path of the current artifact.

        Raises:
            CompileFailedError: If the compile step fails.
            ConversionFailedError: If a conversion step fails.
        """
        artifact = Artifact(kind=kind, profile=profile, target=target)
        first_record = len(self.records)

        self._log.info("produce_started", artifact=artifact.describe())
        self._resolve(artifact)

        produced = {
            record.artifact.kind
            for record in self.records[first_record:]
            if record.state == ArtifactState.PRODUCED
        }
        if kind != ArtifactKind.COMPILED_OBJECT and produced & {ArtifactKind.ELF, kind}:
            elf = self.layout.path_for(artifact.with_kind(ArtifactKind.ELF))
            try:
                self._report_size(elf)
            except ReportingFailedError as e:
                self._log.warning("size_report_failed", elf=str(elf), error=e.user_message)

        path = self.layout.path_for(artifact)
        self._log.info(
            "produce_completed",
            artifact=artifact.describe(),
            path=str(path),
            produced=sorted(k.value for k in produced),
        )
        return path

    def clean(self) -> None:
        """Remove the whole output tree, invalidating every artifact."""
        target_dir = self.config.target_dir
        if target_dir.exists():
            shutil.rmtree(target_dir)
            self._log.info("output_tree_removed", path=str(target_dir))
        self._resolved.clear()
        self.states.clear()

    def _resolve(self, artifact: Artifact) -> int:
        """Resolve an artifact and return its modification time in ns."""
        if artifact in self._resolved:
            return self._resolved[artifact]

        self.states[artifact] = ArtifactState.RESOLVING
        path = self.layout.path_for(artifact)
        sources = [artifact.with_kind(kind) for kind in sources_of(artifact.kind)]

        if not sources:
            mtime = self._compile(artifact, path)
        else:
            newest_source = max(self._resolve(source) for source in sources)
            current = _mtime(path)
            if current is not None and current >= newest_source:
                self._finish(artifact, ArtifactState.UP_TO_DATE)
                self._log.debug("artifact_up_to_date", artifact=artifact.describe())
                mtime = current
            else:
                mtime = self._convert(artifact, sources[0], path)

        self._resolved[artifact] = mtime
        return mtime

    def _compile(self, artifact: Artifact, path: Path) -> int:
        before = _mtime(path)
        command = compile_command(self.config, artifact.target, artifact.profile)
        self.states[artifact] = ArtifactState.REBUILDING

        returncode = self._invoke(command, env=cargo_env(self.config, self.kernel_version))
        after = _mtime(path)
        if returncode != 0 or after is None:
            self._finish(artifact, ArtifactState.FAILED, command)
            raise CompileFailedError(
                artifact,
                returncode,
                internal_details=f"command={command} returncode={returncode} output={path}",
            )

        state = ArtifactState.UP_TO_DATE if after == before else ArtifactState.PRODUCED
        self._finish(artifact, state, command)
        return after

    def _convert(self, artifact: Artifact, source: Artifact, path: Path) -> int:
        source_path = self.layout.path_for(source)
        partial = self.layout.partial_path_for(artifact)
        partial.parent.mkdir(parents=True, exist_ok=True)
        self.states[artifact] = ArtifactState.REBUILDING

        command: list[str] = []
        returncode: int | None
        if artifact.kind == ArtifactKind.ELF:
            try:
                shutil.copyfile(source_path, partial)
                returncode = 0
            except OSError:
                returncode = None
        elif artifact.kind in OBJCOPY_FORMATS:
            command = objcopy_command(self.config, artifact.kind, source_path, partial)
            returncode = self._invoke(command)
        else:
            command = objdump_command(self.config, source_path)
            returncode = self._invoke(command, stdout_path=partial)

        if returncode != 0:
            partial.unlink(missing_ok=True)
            self._finish(artifact, ArtifactState.FAILED, command)
            raise ConversionFailedError(
                artifact,
                returncode,
                internal_details=f"command={command} returncode={returncode}",
            )

        os.replace(partial, path)
        self._finish(artifact, ArtifactState.PRODUCED, command)
        self._log.info("artifact_produced", artifact=artifact.describe(), path=str(path))
        return path.stat().st_mtime_ns

    def _report_size(self, elf: Path) -> None:
        command = size_command(self.config, elf)
        returncode = self._invoke(command)
        if returncode != 0:
            raise ReportingFailedError(f"Size report failed for {elf} (exit {returncode})")

    def _invoke(
        self,
        command: list[str],
        *,
        env: dict[str, str] | None = None,
        stdout_path: Path | None = None,
    ) -> int | None:
        """Run a tool; a missing executable yields ``None`` instead of raising."""
        try:
            return self.runner.run(command, env=env, stdout_path=stdout_path)
        except FileNotFoundError:
            self._log.error("tool_not_found", tool=command[0])
            return None

    def _finish(
        self,
        artifact: Artifact,
        state: ArtifactState,
        command: list[str] | None = None,
    ) -> None:
        self.states[artifact] = state
        self.records.append(StepRecord(artifact=artifact, state=state, command=command or []))


def _mtime(path: Path) -> int | None:
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError:
        return None
