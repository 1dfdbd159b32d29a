"""Unit tests for MFT version parsing and gating."""

from __future__ import annotations

import pytest

from pyibswinfo.exceptions import DependencyError
from pyibswinfo.tool_version import (
    MIN_READ_VERSION,
    MIN_WRITE_VERSION,
    ToolVersion,
    require_version,
)


class TestToolVersion:
    """Test version parsing and ordering."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("4.22.1", ToolVersion(4, 22, 1)),
            ("4.22.1-7", ToolVersion(4, 22, 1)),
            ("4.18", ToolVersion(4, 18, 0)),
            ("mst, mft 4.26.0-93, built on Oct 25 2023", ToolVersion(4, 26, 0)),
        ],
    )
    def test_parse(self, text: str, expected: ToolVersion) -> None:
        assert ToolVersion.parse(text) == expected

    def test_parse_failure(self) -> None:
        with pytest.raises(ValueError):
            ToolVersion.parse("unknown")

    def test_str(self) -> None:
        assert str(ToolVersion(4, 22, 1)) == "4.22.1"

    def test_numeric_ordering(self) -> None:
        assert ToolVersion(4, 9, 0) < ToolVersion(4, 18, 0)
        assert ToolVersion(4, 19, 10) > ToolVersion(4, 19, 2)
        assert ToolVersion(5, 0, 0) > ToolVersion(4, 99, 99)


class TestRequireVersion:
    """Test minimum version gates."""

    def test_read_minimum(self) -> None:
        require_version(MIN_READ_VERSION)
        message = r"must be >= 4\.18\.0 \(current version is 4\.17\.2\)"
        with pytest.raises(DependencyError, match=message):
            require_version(ToolVersion(4, 17, 2))

    def test_write_minimum(self) -> None:
        require_version(ToolVersion(4, 20, 0))
        with pytest.raises(DependencyError, match=r"4\.22\.0 required to set device description"):
            require_version(ToolVersion(4, 20, 0), write=True)
        require_version(MIN_WRITE_VERSION, write=True)

    def test_write_checks_read_minimum_first(self) -> None:
        with pytest.raises(DependencyError, match="must be >="):
            require_version(ToolVersion(4, 10, 0), write=True)
