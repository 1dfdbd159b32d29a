"""Installed MFT version from ``mst version``."""

from __future__ import annotations

import asyncio

from pyibswinfo.constants import MST_EXECUTABLE
from pyibswinfo.exceptions import DependencyError
from pyibswinfo.tool_version import ToolVersion

from ._process import run_command


def parse_mst_version(output: str) -> ToolVersion:
    """Parse ``mst, mft 4.22.1-7, built on ...`` into a version.

    The third comma-stripped token carries the version, with the package
    release after the dash ignored.

    Raises:
        DependencyError: If the output carries no version
    """
    tokens = output.replace(",", " ").split()
    candidate = tokens[2].split("-")[0] if len(tokens) >= 3 else output
    try:
        return ToolVersion.parse(candidate)
    except ValueError as err:
        raise DependencyError(f"cannot determine MFT version from {output.strip()!r}") from err


async def read_tool_version(
    executable: str = MST_EXECUTABLE,
    timeout: float | None = None,
) -> ToolVersion:
    """Run ``mst version`` and parse the result."""
    try:
        result = await run_command(executable, "version", timeout=timeout)
    except asyncio.TimeoutError:
        raise DependencyError(f"{executable} version timed out") from None
    return parse_mst_version(result.output)
