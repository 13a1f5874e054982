"""Build configuration.

A single immutable ``BuildConfig`` is assembled at invocation start from
(highest precedence first) explicit overrides, ``FERRITE_*`` environment
variables, an optional per-board YAML file, and defaults. Components
receive it explicitly and never consult the process environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ferrite_core.errors import ConfigError
from ferrite_core.models import TargetSpec

logger = structlog.get_logger(__name__)

DEFAULT_TOOLCHAIN = "arm-none-eabi"
"""Default cross-toolchain prefix for binutils."""

BOARD_FILE_NAME = "ferrite.yaml"
"""Conventional per-board configuration file name."""


class BuildConfig(BaseSettings):
    """Configuration for one ferrite invocation.

    Can be loaded from environment variables with the FERRITE_ prefix.

    Example:
        >>> # From environment
        >>> config = BuildConfig()
        >>>
        >>> # Explicit
        >>> config = BuildConfig(platform="imix", target="thumbv7em-none-eabi")
    """

    model_config = SettingsConfigDict(
        env_prefix="FERRITE_",
        frozen=True,
        extra="ignore",
    )

    platform: str | None = Field(default=None, description="Platform (board) name")
    target: str | None = Field(default=None, description="Architecture target triple")
    toolchain: str = Field(default=DEFAULT_TOOLCHAIN, description="Cross-toolchain prefix")
    verbose: bool = Field(default=False, description="Echo external commands")
    target_dir: Path = Field(default=Path("target"), description="Build output root")
    linker_script: str = Field(default="layout.ld", description="Linker script path")

    cargo: str = Field(default="cargo", description="Cargo executable")
    rustup: str = Field(default="rustup", description="Rustup executable")
    git: str = Field(default="git", description="Git executable")
    objcopy: str | None = Field(default=None, description="objcopy override")
    objdump: str | None = Field(default=None, description="objdump override")
    size: str | None = Field(default=None, description="size override")

    min_rustup_version: str = Field(default="1.11.0", description="Minimum rustup version")
    source_component: str = Field(default="rust-src", description="Required source component")
    update_delay_seconds: float = Field(
        default=10,
        ge=0,
        description="Pause before a remedial toolchain update",
    )

    @property
    def objcopy_tool(self) -> str:
        """objcopy executable, derived from the toolchain prefix unless overridden."""
        return self.objcopy or f"{self.toolchain}-objcopy"

    @property
    def objdump_tool(self) -> str:
        """objdump executable, derived from the toolchain prefix unless overridden."""
        return self.objdump or f"{self.toolchain}-objdump"

    @property
    def size_tool(self) -> str:
        """size executable, derived from the toolchain prefix unless overridden."""
        return self.size or f"{self.toolchain}-size"

    @property
    def rustflags(self) -> str:
        """Linking configuration handed to the compile step."""
        return " ".join(
            [
                f"-C link-arg=-T{self.linker_script}",
                "-C linker=rust-lld",
                "-C linker-flavor=ld.lld",
                "-C relocation-model=dynamic-no-pic",
                "-C link-arg=-zmax-page-size=512",
            ]
        )

    def target_spec(self) -> TargetSpec:
        """Bind the required platform/triple pair.

        Returns:
            TargetSpec for this invocation.

        Raises:
            ConfigError: If platform or target is missing or empty.
        """
        missing = [name for name in ("platform", "target") if not getattr(self, name)]
        if missing:
            raise ConfigError("Missing required configuration", fields=missing)
        return TargetSpec(platform=self.platform, triple=self.target)  # type: ignore[arg-type]


def read_board_file(path: Path) -> dict[str, Any]:
    """Read a per-board YAML configuration file.

    Args:
        path: Path to the board file.

    Returns:
        Mapping of configuration fields (empty for an empty file).

    Raises:
        ConfigError: If the file cannot be read, cannot be parsed, or is not
            a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Cannot read board file {path}",
            internal_details=str(e),
        ) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}",
            internal_details=str(e),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Board file {path} must contain a mapping")
    return data


def load_config(
    board_file: Path | None = None,
    **overrides: Any,
) -> BuildConfig:
    """Assemble the invocation's BuildConfig.

    Args:
        board_file: Optional per-board YAML file. Ignored if it does not exist.
        **overrides: Explicit values (e.g. CLI flags). ``None`` values are ignored.

    Returns:
        Frozen BuildConfig.

    Raises:
        ConfigError: If the board file is invalid or a value fails validation.
    """
    file_values: dict[str, Any] = {}
    if board_file is not None and board_file.exists():
        file_values = read_board_file(board_file)
        logger.debug("board_file_loaded", path=str(board_file), keys=sorted(file_values))

    explicit = {k: v for k, v in overrides.items() if v is not None}

    try:
        from_env = BuildConfig()
        merged = {
            **file_values,
            **from_env.model_dump(exclude_unset=True),
            **explicit,
        }
        return BuildConfig(**merged)
    except PydanticValidationError as e:
        fields = sorted({".".join(str(x) for x in err["loc"]) for err in e.errors()})
        raise ConfigError(
            "Invalid configuration",
            fields=fields,
            internal_details=str(e),
        ) from e
