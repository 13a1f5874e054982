"""ferrite goal commands - build, listing, debug variants, documentation, type-check.

Every goal binds the platform/target pair, validates the host toolchain,
and then produces its artifact or runs its cargo step.
"""

from __future__ import annotations

import click
from rich.markup import escape

from ferrite_cli.commands.options import BuildOptions, build_options, load_build_config
from ferrite_cli.errors import handle_ferrite_error
from ferrite_cli.output import info, success, warning
from ferrite_core.errors import FerriteError
from ferrite_core.models import ArtifactState
from ferrite_core.runner import ToolRunner
from ferrite_core.session import BuildSession, Goal, GoalResult


def run_goal_command(goal: Goal, opts: BuildOptions) -> GoalResult:
    """Run one goal and report its outcome.

    Raises:
        CLIError: With exit code 1 for configuration or build failures,
            2 if the toolchain manager is missing.
    """
    config = load_build_config(opts)
    session = BuildSession(config, ToolRunner(verbose=config.verbose))

    try:
        result = session.run(goal)
    except FerriteError as e:
        handle_ferrite_error(e, goal.value)

    _report(result)
    return result


def _report(result: GoalResult) -> None:
    if result.validation is not None and result.validation.healed:
        actions = len(result.validation.remediations)
        warning(f"Toolchain environment healed ({actions} remedial action(s))")

    if result.path is not None:
        if result.up_to_date:
            success(f"{escape(str(result.path))} is up to date")
        else:
            produced = [
                s.artifact.kind.value
                for s in result.steps
                if s.state == ArtifactState.PRODUCED
            ]
            success(f"Built {escape(str(result.path))}")
            info(f"  produced: {', '.join(produced)}")
        return

    if result.goal == Goal.DOCUMENTATION:
        success("Documentation generated")
    elif result.goal == Goal.TYPE_CHECK:
        success("Check passed")


@click.command("build")
@build_options
def build(opts: BuildOptions) -> None:
    """Build the release raw binary image (<platform>.bin).

    Examples:

        ferrite build -p imix -t thumbv7em-none-eabi

        FERRITE_PLATFORM=hail ferrite build -t thumbv7em-none-eabi -v
    """
    run_goal_command(Goal.BUILD, opts)


@click.command("listing")
@build_options
def listing(opts: BuildOptions) -> None:
    """Produce the release disassembly listing (<platform>.lst)."""
    run_goal_command(Goal.LISTING, opts)


@click.command("debug-build")
@build_options
def debug_build(opts: BuildOptions) -> None:
    """Build the debug-profile raw binary image."""
    run_goal_command(Goal.DEBUG_BUILD, opts)


@click.command("debug-listing")
@build_options
def debug_listing(opts: BuildOptions) -> None:
    """Produce the debug-profile disassembly listing."""
    run_goal_command(Goal.DEBUG_LISTING, opts)


@click.command("documentation")
@build_options
def documentation(opts: BuildOptions) -> None:
    """Generate crate documentation for the target."""
    run_goal_command(Goal.DOCUMENTATION, opts)


@click.command("type-check")
@build_options
def type_check(opts: BuildOptions) -> None:
    """Type-check the platform for the target without linking."""
    run_goal_command(Goal.TYPE_CHECK, opts)
