"""Toolchain check implementations."""

from __future__ import annotations

from ferrite_core.toolchain.checks.base import BaseCheck
from ferrite_core.toolchain.checks.components import ComponentCheck, TargetCheck
from ferrite_core.toolchain.checks.manager import ToolchainManagerCheck

__all__ = [
    "BaseCheck",
    "ComponentCheck",
    "TargetCheck",
    "ToolchainManagerCheck",
]
