"""Subprocess helper shared by the command line tool transports."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pyibswinfo.exceptions import DependencyError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr text of a finished command."""

    args: tuple[str, ...]
    returncode: int
    output: str


async def run_command(*args: str, timeout: float | None = None) -> CommandResult:
    """Run an external command and capture its output.

    stderr is merged into stdout because the MFT tools print their
    ``-E-`` error lines on either stream.

    Args:
        *args: Executable and arguments
        timeout: Seconds to wait before killing the command (None = wait
            indefinitely)

    Raises:
        DependencyError: If the executable cannot be found
        asyncio.TimeoutError: If *timeout* expires
    """
    _LOGGER.debug("Running: %s", " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as err:
        raise DependencyError(f"{args[0]} not found") from err

    try:
        stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        _LOGGER.warning("Command timed out after %.1fs: %s", timeout, " ".join(args))
        raise

    output = stdout.decode(errors="replace") if stdout else ""
    _LOGGER.debug("Exit status %d from %s", process.returncode, args[0])
    return CommandResult(args=tuple(args), returncode=process.returncode or 0, output=output)
