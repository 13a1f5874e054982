"""Semantic version parsing for toolchain tools.

Versions are compared as integer tuples. Anything that cannot be parsed
is treated as the lowest possible version so that it always takes the
update path.
"""

from __future__ import annotations

import re

Version = tuple[int, int, int]

LOWEST_VERSION: Version = (0, 0, 0)

_VERSION_RE = re.compile(r"(?<![\w.])(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(text: str | None) -> Version:
    """Extract a (major, minor, patch) tuple from tool output.

    The first dotted numeric token wins; missing minor/patch parts are 0.

    Args:
        text: Version string or full ``--version`` output,
            e.g. ``"rustup 1.27.1 (54dd3d00f 2024-04-24)"``.

    Returns:
        Parsed version, or ``LOWEST_VERSION`` for malformed input.

    Example:
        >>> parse_version("rustup 1.27.1 (54dd3d00f 2024-04-24)")
        (1, 27, 1)
        >>> parse_version("garbage")
        (0, 0, 0)
    """
    if not text:
        return LOWEST_VERSION
    match = _VERSION_RE.search(text)
    if match is None:
        return LOWEST_VERSION
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return (major, minor, patch)


def format_version(version: Version) -> str:
    return ".".join(str(part) for part in version)


def is_outdated(installed: str | None, minimum: str) -> bool:
    """Whether ``installed`` is strictly older than ``minimum``."""
    return parse_version(installed) < parse_version(minimum)
