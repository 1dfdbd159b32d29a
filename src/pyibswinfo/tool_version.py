"""MFT tool version parsing and minimum-version gates.

``mst version`` prints a single line such as::

    mst, mft 4.22.1-7, built on Oct 25 2022, 12:35:05. Git SHA Hash: N/A

Versions are compared as three-component integer tuples, never as strings,
so that ``4.9.0 < 4.18.0`` and ``4.19.10 > 4.19.2`` hold.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pyibswinfo.exceptions import DependencyError

_VERSION_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True, order=True)
class ToolVersion:
    """Parsed ``major.minor.patch`` version of the firmware tools."""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> ToolVersion:
        """Parse ``4.22.1``, ``4.22.1-7`` or a full ``mst version`` line.

        Raises:
            ValueError: If no version number is found
        """
        match = _VERSION_RE.search(text)
        if match is None:
            raise ValueError(f"no tool version found in {text!r}")
        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch or 0))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


MIN_READ_VERSION = ToolVersion(4, 18, 0)
"""Oldest MFT release able to read all registers."""

MIN_WRITE_VERSION = ToolVersion(4, 22, 0)
"""Oldest MFT release able to set the node description."""


def require_version(current: ToolVersion, *, write: bool = False) -> None:
    """Check *current* against the read (or write) minimum.

    Raises:
        DependencyError: If the installed tools are too old
    """
    if current < MIN_READ_VERSION:
        raise DependencyError(
            f"MFT version must be >= {MIN_READ_VERSION} (current version is {current})"
        )
    if write and current < MIN_WRITE_VERSION:
        raise DependencyError(f"MFT >= {MIN_WRITE_VERSION} required to set device description")
