"""ferrite-cli: Command-line interface for ferrite firmware builds."""

from __future__ import annotations

__version__ = "0.1.0"
