"""ferrite clean command - Remove the build output tree."""

from __future__ import annotations

import click
from rich.markup import escape

from ferrite_cli.commands.options import BuildOptions, build_options, load_build_config
from ferrite_cli.errors import handle_ferrite_error
from ferrite_cli.output import success
from ferrite_core.errors import FerriteError
from ferrite_core.runner import ToolRunner
from ferrite_core.session import BuildSession, Goal


@click.command("clean")
@build_options
def clean(opts: BuildOptions) -> None:
    """Remove every build output under the target directory.

    Needs neither a platform nor a target, and never touches the toolchain.
    The next build of any artifact starts from scratch.

    Examples:

        ferrite clean

        ferrite clean --target-dir out/
    """
    config = load_build_config(opts)

    try:
        BuildSession(config, ToolRunner(verbose=config.verbose)).run(Goal.CLEAN)
    except FerriteError as e:
        handle_ferrite_error(e, Goal.CLEAN.value)
    except OSError as e:
        raise click.ClickException(f"Cannot remove {config.target_dir}: {e}") from e

    success(f"Removed {escape(str(config.target_dir))}")
