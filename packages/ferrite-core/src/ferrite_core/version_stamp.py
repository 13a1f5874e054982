"""Kernel version stamp derived from source-control state."""

from __future__ import annotations

import structlog

from ferrite_core.runner import ToolRunner

logger = structlog.get_logger(__name__)

NOT_GIT = "notgit"
"""Sentinel stamp used when source-control state is unavailable."""

KERNEL_VERSION_VAR = "KERNEL_VERSION"
"""Child-environment variable carrying the stamp to the compile step."""


def kernel_version(runner: ToolRunner, git: str = "git") -> str:
    """Describe the current source tree.

    Args:
        runner: Tool runner used to query git.
        git: Git executable.

    Returns:
        Output of ``git describe --always``, or ``notgit`` if git is
        missing, fails, or prints nothing.
    """
    try:
        output = runner.capture([git, "describe", "--always"])
    except FileNotFoundError:
        logger.debug("git_not_found", git=git)
        return NOT_GIT

    stamp = output.stdout.strip()
    if not output.ok or not stamp:
        logger.debug("git_describe_failed", returncode=output.returncode)
        return NOT_GIT
    return stamp
