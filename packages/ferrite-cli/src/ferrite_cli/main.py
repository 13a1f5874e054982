"""CLI entry point for ferrite.

This module defines the main CLI group using the LazyGroup pattern so
``ferrite --help`` does not import the build machinery.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from ferrite_cli import __version__
from ferrite_cli.output import set_no_color

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Commands are only imported when actually invoked, not at import time.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
        aliases: Mapping of alternative names to command names. Aliases
            resolve like their command but are not listed in help.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        aliases: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"build": "ferrite_cli.commands.goals.build"}
            aliases: Mapping of alias to command name.
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}
        self.aliases: dict[str, str] = aliases or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name or alias, loading lazily if needed."""
        cmd_name = self.aliases.get(cmd_name, cmd_name)
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "build": "ferrite_cli.commands.goals.build",
    "listing": "ferrite_cli.commands.goals.listing",
    "debug-build": "ferrite_cli.commands.goals.debug_build",
    "debug-listing": "ferrite_cli.commands.goals.debug_listing",
    "documentation": "ferrite_cli.commands.goals.documentation",
    "type-check": "ferrite_cli.commands.goals.type_check",
    "clean": "ferrite_cli.commands.clean.clean",
    "preflight": "ferrite_cli.commands.preflight.preflight",
}

# Short spellings of the documentation and type-check goals.
COMMAND_ALIASES = {
    "doc": "documentation",
    "check": "type-check",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS, aliases=COMMAND_ALIASES)
@click.version_option(version=__version__, prog_name="ferrite")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """Ferrite - firmware image builds for embedded kernel platforms.

    Validates the host Rust toolchain, compiles a platform, and derives
    its ELF, raw binary, Intel HEX, and disassembly listing, rebuilding
    only what is out of date.

    **Getting Started:**

    - `ferrite preflight -t thumbv7em-none-eabi` - Check the toolchain
    - `ferrite build -p imix -t thumbv7em-none-eabi` - Build `imix.bin`
    - `ferrite listing` - Produce the disassembly listing
    - `ferrite type-check` - Type-check without linking (alias `check`)
    - `ferrite clean` - Remove the output tree

    Platform and target can also come from `ferrite.yaml` or
    `FERRITE_PLATFORM` / `FERRITE_TARGET`.
    """
    pass


if __name__ == "__main__":
    cli()
