"""Options shared by every build-related command.

Each command accepts the same identity and toolchain flags; they are
grouped into ``BuildOptions`` and turned into the invocation's
``BuildConfig`` (flags > FERRITE_* environment > board file > defaults).
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from ferrite_cli.errors import handle_ferrite_error, handle_file_not_found
from ferrite_core.config import BOARD_FILE_NAME, BuildConfig, load_config
from ferrite_core.errors import FerriteError
from ferrite_core.observability import configure_logging


@dataclass
class BuildOptions:
    """Grouped build CLI options to reduce parameter count (S107)."""

    platform: str | None
    target: str | None
    toolchain: str | None
    target_dir: str | None
    file_path: str | None
    verbose: bool


_OPTIONS = [
    click.option(
        "-p",
        "--platform",
        default=None,
        help="Platform (board) to build, e.g. imix [env: FERRITE_PLATFORM]",
    ),
    click.option(
        "-t",
        "--target",
        default=None,
        help="Architecture target triple, e.g. thumbv7em-none-eabi [env: FERRITE_TARGET]",
    ),
    click.option(
        "--toolchain",
        default=None,
        help="Cross-toolchain prefix for objcopy/objdump/size [default: arm-none-eabi]",
    ),
    click.option(
        "--target-dir",
        type=click.Path(file_okay=False),
        default=None,
        help="Build output root [default: target]",
    ),
    click.option(
        "-f",
        "--file",
        "file_path",
        type=click.Path(dir_okay=False),
        default=None,
        help=f"Board file [default: ./{BOARD_FILE_NAME} when present]",
    ),
    click.option(
        "-v",
        "--verbose",
        is_flag=True,
        default=False,
        help="Echo external commands and log debug output",
    ),
]


def build_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the shared options to a command and pass them as ``opts``.

    Example:
        >>> @click.command()
        ... @build_options
        ... def build(opts: BuildOptions) -> None: ...
    """

    @functools.wraps(func)
    def wrapper(
        platform: str | None,
        target: str | None,
        toolchain: str | None,
        target_dir: str | None,
        file_path: str | None,
        verbose: bool,
        **kwargs: Any,
    ) -> Any:
        opts = BuildOptions(
            platform=platform,
            target=target,
            toolchain=toolchain,
            target_dir=target_dir,
            file_path=file_path,
            verbose=verbose,
        )
        return func(opts, **kwargs)

    for option in reversed(_OPTIONS):
        wrapper = option(wrapper)
    return wrapper


def load_build_config(opts: BuildOptions) -> BuildConfig:
    """Configure logging and assemble the invocation's configuration.

    Raises:
        CLIError: If an explicit board file is missing or the configuration
            is invalid.
    """
    if opts.file_path is not None and not Path(opts.file_path).exists():
        handle_file_not_found(opts.file_path)
    board_file = Path(opts.file_path or BOARD_FILE_NAME)

    try:
        config = load_config(
            board_file,
            platform=opts.platform,
            target=opts.target,
            toolchain=opts.toolchain,
            target_dir=opts.target_dir,
            verbose=True if opts.verbose else None,
        )
    except FerriteError as e:
        handle_ferrite_error(e)

    configure_logging(log_level="DEBUG" if config.verbose else "WARNING")
    return config
