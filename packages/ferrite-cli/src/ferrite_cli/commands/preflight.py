"""ferrite preflight command - Validate the host toolchain environment.

Runs only the environment validator: the toolchain manager version check,
the source component check, and the compilation target check, healing
what can be healed.
"""

from __future__ import annotations

import click

from ferrite_cli import output
from ferrite_cli.commands.options import BuildOptions, build_options, load_build_config
from ferrite_cli.errors import handle_ferrite_error
from ferrite_core.errors import FerriteError
from ferrite_core.runner import ToolRunner
from ferrite_core.session import BuildSession
from ferrite_core.toolchain import print_result


@click.command("preflight")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format [default: table]",
)
@build_options
def preflight(opts: BuildOptions, output_format: str) -> None:
    """Check (and heal) the Rust toolchain for the target.

    Verifies the toolchain manager is installed and recent enough, and
    installs the source component and the compilation target if missing.
    An outdated manager is updated after a short pause.

    Examples:

        ferrite preflight -t thumbv7em-none-eabi

        ferrite preflight -t thumbv7em-none-eabi --format json
    """
    config = load_build_config(opts)
    session = BuildSession(config, ToolRunner(verbose=config.verbose))

    try:
        result = session.validate()
    except FerriteError as e:
        handle_ferrite_error(e)

    print_result(result, output_format=output_format, console=output.console)

    if output_format == "table":
        if result.healed:
            output.warning("Toolchain environment healed")
        else:
            output.success("Toolchain environment ready")
