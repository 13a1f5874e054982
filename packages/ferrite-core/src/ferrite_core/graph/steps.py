"""Command lines for each production step.

Pure functions of the configuration and artifact paths; nothing here
spawns processes.
"""

from __future__ import annotations

from pathlib import Path

from ferrite_core.config import BuildConfig
from ferrite_core.models import ArtifactKind, BuildProfile, TargetSpec
from ferrite_core.version_stamp import KERNEL_VERSION_VAR

OBJDUMP_FLAGS: tuple[str, ...] = (
    "--disassemble-all",
    "--source",
    "--disassembler-options=force-thumb",
    "-C",
    "--section-headers",
)
"""Full disassembly, source interleaving, forced thumb, demangling, section headers."""

OBJCOPY_FORMATS: dict[ArtifactKind, str] = {
    ArtifactKind.BIN: "binary",
    ArtifactKind.HEX: "ihex",
}


def cargo_env(config: BuildConfig, kernel_version: str) -> dict[str, str]:
    """Child environment for cargo: linking configuration and version stamp."""
    return {
        "RUSTFLAGS": config.rustflags,
        KERNEL_VERSION_VAR: kernel_version,
    }


def _cargo(
    config: BuildConfig,
    subcommand: str,
    target: TargetSpec,
    profile: BuildProfile,
) -> list[str]:
    command = [config.cargo, subcommand, f"--target={target.triple}"]
    if profile.optimized:
        command.append("--release")
    return command


def compile_command(config: BuildConfig, target: TargetSpec, profile: BuildProfile) -> list[str]:
    """Compile-and-link the platform into the compiled object."""
    return _cargo(config, "build", target, profile)


def check_command(config: BuildConfig, target: TargetSpec, profile: BuildProfile) -> list[str]:
    """Type-check without linking."""
    return _cargo(config, "check", target, profile)


def doc_command(config: BuildConfig, target: TargetSpec, profile: BuildProfile) -> list[str]:
    """Generate documentation."""
    return _cargo(config, "doc", target, profile)


def objcopy_command(
    config: BuildConfig,
    kind: ArtifactKind,
    source: Path,
    output: Path,
) -> list[str]:
    """Convert an ELF to a raw binary or Intel HEX image."""
    return [
        config.objcopy_tool,
        f"--output-target={OBJCOPY_FORMATS[kind]}",
        str(source),
        str(output),
    ]


def objdump_command(config: BuildConfig, source: Path) -> list[str]:
    """Disassemble an ELF; the listing is the command's stdout."""
    return [config.objdump_tool, *OBJDUMP_FLAGS, str(source)]


def size_command(config: BuildConfig, elf: Path) -> list[str]:
    """Section size summary of an ELF."""
    return [config.size_tool, str(elf)]
