"""Unit tests for toolchain version parsing."""

from __future__ import annotations

import pytest

from ferrite_core.toolchain.version import (
    LOWEST_VERSION,
    format_version,
    is_outdated,
    parse_version,
)


class TestParseVersion:
    """Tests for parse_version."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.11.0", (1, 11, 0)),
            ("rustup 1.27.1 (54dd3d00f 2024-04-24)", (1, 27, 1)),
            ("rustup-init 1.2", (1, 2, 0)),
            ("2", (2, 0, 0)),
        ],
    )
    def test_parses_first_dotted_token(self, text: str, expected: tuple[int, int, int]) -> None:
        assert parse_version(text) == expected

    @pytest.mark.parametrize("text", ["", None, "rustup", "unknown version"])
    def test_malformed_is_lowest(self, text: str | None) -> None:
        assert parse_version(text) == LOWEST_VERSION

    def test_numeric_not_lexicographic(self) -> None:
        """1.9.0 is older than 1.11.0 even though "9" > "1" as text."""
        assert parse_version("1.9.0") < parse_version("1.11.0")


class TestIsOutdated:
    """Tests for is_outdated."""

    def test_older(self) -> None:
        assert is_outdated("rustup 1.10.3", "1.11.0") is True

    def test_equal_is_not_outdated(self) -> None:
        assert is_outdated("rustup 1.11.0", "1.11.0") is False

    def test_newer(self) -> None:
        assert is_outdated("rustup 1.27.1", "1.11.0") is False

    def test_malformed_forces_update(self) -> None:
        assert is_outdated("rustup (dev build)", "1.11.0") is True


def test_format_version() -> None:
    assert format_version((1, 27, 1)) == "1.27.1"
