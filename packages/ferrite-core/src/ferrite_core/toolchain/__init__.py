"""Toolchain environment validation.

Checks that the toolchain manager is present and recent enough and that
the required components are installed, healing what can be healed.
"""

from __future__ import annotations

from ferrite_core.toolchain.models import (
    CheckResult,
    CheckStatus,
    Remediation,
    ValidationResult,
)
from ferrite_core.toolchain.output import (
    format_result_json,
    format_result_table,
    print_result,
)
from ferrite_core.toolchain.validator import EnvironmentValidator, validate_environment
from ferrite_core.toolchain.version import LOWEST_VERSION, is_outdated, parse_version

__all__ = [
    "LOWEST_VERSION",
    "CheckResult",
    "CheckStatus",
    "EnvironmentValidator",
    "Remediation",
    "ValidationResult",
    "format_result_json",
    "format_result_table",
    "is_outdated",
    "parse_version",
    "print_result",
    "validate_environment",
]
