"""Shared pytest fixtures for ferrite-core tests.

Provides structlog capture configuration, build configuration fixtures,
and a recording fake ToolRunner that simulates cargo, binutils, rustup,
and git without spawning processes.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest
import structlog

from ferrite_core.config import BuildConfig
from ferrite_core.models import TargetSpec
from ferrite_core.runner import ToolOutput, ToolRunner

PLATFORM = "imix"
TRIPLE = "thumbv7em-none-eabi"


class FakeToolRunner(ToolRunner):
    """ToolRunner double that records commands and simulates their effects.

    Attributes:
        commands: Every command line run or captured, in order
        failures: Map of (tool, subcommand-or-None) to exit code to return
        missing: Executables that raise FileNotFoundError
        rebuild: If True, the next ``cargo build`` rewrites the compiled
            object even if it exists (simulates a source change)
    """

    def __init__(
        self,
        *,
        target_dir: Path,
        platform: str = PLATFORM,
        rustup_version: str = "rustup 1.27.1 (54dd3d00f 2024-04-24)",
        components: set[str] | None = None,
        targets: set[str] | None = None,
        describe: str = "release-2.1-204-g3c1a2b9",
    ) -> None:
        super().__init__(verbose=False)
        self.target_dir = target_dir
        self.platform = platform
        self.rustup_version = rustup_version
        self.components = {"rust-src"} if components is None else components
        self.targets = {TRIPLE} if targets is None else targets
        self.describe = describe
        self.commands: list[list[str]] = []
        self.envs: list[Mapping[str, str] | None] = []
        self.failures: dict[tuple[str, str | None], int] = {}
        self.missing: set[str] = set()
        self.rebuild = False

    # -- helpers -------------------------------------------------------

    def invocations(self, tool: str, subcommand: str | None = None) -> list[list[str]]:
        return [
            c
            for c in self.commands
            if c[0] == tool and (subcommand is None or (len(c) > 1 and c[1] == subcommand))
        ]

    def conversions(self) -> list[list[str]]:
        """objcopy/objdump invocations."""
        return [c for c in self.commands if c[0].endswith(("-objcopy", "-objdump"))]

    def _failure(self, argv: Sequence[str]) -> int | None:
        sub = argv[1] if len(argv) > 1 else None
        return self.failures.get((argv[0], sub), self.failures.get((argv[0], None)))

    # -- ToolRunner interface ------------------------------------------

    def run(
        self,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        stdout_path: Path | None = None,
    ) -> int:
        argv = list(argv)
        if argv[0] in self.missing:
            raise FileNotFoundError(argv[0])
        self.commands.append(argv)
        self.envs.append(env)

        failure = self._failure(argv)
        if stdout_path is not None:
            stdout_path.write_text("" if failure else f"disassembly of {argv[-1]}\n")
        if failure:
            return failure

        tool = argv[0]
        if tool == "cargo" and argv[1] == "build":
            self._cargo_build(argv)
        elif tool.endswith("-objcopy"):
            Path(argv[-1]).write_bytes(b"\x00image:" + Path(argv[-2]).read_bytes())
        elif tool == "rustup" and argv[1:3] == ["component", "add"]:
            self.components.add(argv[3])
        elif tool == "rustup" and argv[1:3] == ["target", "add"]:
            self.targets.add(argv[3])
        return 0

    def capture(self, argv: Sequence[str]) -> ToolOutput:
        argv = list(argv)
        if argv[0] in self.missing:
            raise FileNotFoundError(argv[0])
        self.commands.append(argv)
        self.envs.append(None)

        failure = self._failure(argv)
        if failure:
            return ToolOutput(returncode=failure, stdout="")
        if argv[0] == "git":
            return ToolOutput(returncode=0, stdout=f"{self.describe}\n")
        if argv[1:] == ["--version"]:
            return ToolOutput(returncode=0, stdout=self.rustup_version + "\n")
        if argv[1:] == ["component", "list"]:
            lines = ["cargo-x86_64-unknown-linux-gnu (installed)", "rust-docs (installed)"]
            lines += [f"{c} (installed)" for c in sorted(self.components)]
            lines.append("rustfmt-x86_64-unknown-linux-gnu")
            return ToolOutput(returncode=0, stdout="\n".join(lines) + "\n")
        if argv[1:] == ["target", "list"]:
            lines = ["aarch64-apple-darwin", "thumbv6m-none-eabi"]
            lines += [f"{t} (installed)" for t in sorted(self.targets)]
            return ToolOutput(returncode=0, stdout="\n".join(lines) + "\n")
        return ToolOutput(returncode=0, stdout="")

    def _cargo_build(self, argv: list[str]) -> None:
        triple = next(a.split("=", 1)[1] for a in argv if a.startswith("--target="))
        profile = "release" if "--release" in argv else "debug"
        out = self.target_dir / triple / profile / self.platform
        if out.exists() and not self.rebuild:
            return
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"\x7fELF" + self.describe.encode())
        self.rebuild = False


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clean_ferrite_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FERRITE_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("FERRITE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    return tmp_path / "target"


@pytest.fixture
def config(target_dir: Path) -> BuildConfig:
    """Fully bound configuration with no update delay."""
    return BuildConfig(
        platform=PLATFORM,
        target=TRIPLE,
        target_dir=target_dir,
        update_delay_seconds=0,
    )


@pytest.fixture
def target() -> TargetSpec:
    return TargetSpec(platform=PLATFORM, triple=TRIPLE)


@pytest.fixture
def fake_runner(target_dir: Path) -> FakeToolRunner:
    return FakeToolRunner(target_dir=target_dir)
