"""External tool invocation.

ToolRunner is the single place where ferrite spawns processes. Every
invocation blocks until the tool exits. Tool diagnostics are passed
through unmodified unless output is explicitly captured.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog
from rich.console import Console

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ToolOutput:
    """Captured result of a query-style tool invocation."""

    returncode: int
    stdout: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ToolRunner:
    """Runs external tools synchronously.

    Attributes:
        verbose: Echo each command line to stderr before running it.

    Example:
        >>> runner = ToolRunner(verbose=True)
        >>> runner.run(["cargo", "build", "--release"])
        0
    """

    def __init__(self, *, verbose: bool = False, console: Console | None = None) -> None:
        self.verbose = verbose
        self._console = console or Console(stderr=True, highlight=False)
        self._log = logger.bind(component="tool_runner")

    def run(
        self,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        stdout_path: Path | None = None,
    ) -> int:
        """Run a tool, passing its output through.

        Args:
            argv: Command line.
            env: Extra variables for the child environment only.
            stdout_path: If given, the tool's stdout is written to this file.

        Returns:
            Tool exit code.

        Raises:
            FileNotFoundError: If the executable does not exist.
        """
        self._echo(argv, env)
        child_env = {**os.environ, **env} if env else None

        if stdout_path is not None:
            with stdout_path.open("wb") as out:
                completed = subprocess.run(list(argv), env=child_env, stdout=out, check=False)
        else:
            completed = subprocess.run(list(argv), env=child_env, check=False)

        self._log.debug("tool_exited", tool=argv[0], returncode=completed.returncode)
        return completed.returncode

    def capture(self, argv: Sequence[str]) -> ToolOutput:
        """Run a query-style tool and capture its stdout.

        Args:
            argv: Command line.

        Returns:
            ToolOutput with exit code and UTF-8 decoded stdout, undecodable
            bytes replaced.

        Raises:
            FileNotFoundError: If the executable does not exist.
        """
        self._echo(argv, None)
        completed = subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        self._log.debug("tool_queried", tool=argv[0], returncode=completed.returncode)
        return ToolOutput(returncode=completed.returncode, stdout=completed.stdout or "")

    def _echo(self, argv: Sequence[str], env: Mapping[str, str] | None) -> None:
        self._log.debug("tool_invoked", command=list(argv))
        if not self.verbose:
            return
        prefix = " ".join(f"{k}={shlex.quote(v)}" for k, v in (env or {}).items())
        line = shlex.join(argv)
        self._console.print(f"$ {prefix} {line}" if prefix else f"$ {line}", markup=False)
