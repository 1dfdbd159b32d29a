"""Register access through the MFT ``mlxreg_ext`` command.

Usage:
    transport = MlxregTransport("SW_MT54000_ibswitch_lid-0x0001")
    result = await transport.read_register(RegisterName.MGIR)
    if isinstance(result, RegisterFailure):
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from pyibswinfo.constants import MLXREG_EXECUTABLE, TOOL_ERROR_MARKER
from pyibswinfo.exceptions import RegisterFetchError, RegisterWriteError
from pyibswinfo.registers.definitions import RegisterName
from pyibswinfo.registers.dump import RegisterFailure, RegisterReadResult, parse_register_output
from pyibswinfo.registers.plan import format_indexes

from ._process import run_command

_LOGGER = logging.getLogger(__name__)


class MlxregTransport:
    """Read, describe and write switch registers with ``mlxreg_ext``.

    Each call spawns one independent ``mlxreg_ext`` process, so concurrent
    calls on the same transport are safe.
    """

    def __init__(
        self,
        device: str,
        *,
        executable: str = MLXREG_EXECUTABLE,
        timeout: float | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            device: MST device name (``SW_...``) or ``lid-N``
            executable: Path or name of ``mlxreg_ext``
            timeout: Per-command timeout in seconds (None = no timeout)
        """
        self._device = device
        self._executable = executable
        self._timeout = timeout

    @property
    def device(self) -> str:
        return self._device

    def _base_args(self) -> list[str]:
        return [self._executable, "-d", self._device]

    async def read_register(
        self,
        register: RegisterName,
        indexes: Mapping[str, str] | None = None,
    ) -> RegisterReadResult:
        """Read one register.

        Returns:
            Parsed dump, or a :class:`RegisterFailure` carrying the tool's
            error message
        """
        args = [*self._base_args(), "--reg_name", register.value, "--get"]
        if indexes:
            args += ["--indexes", format_indexes(indexes)]
        try:
            result = await run_command(*args, timeout=self._timeout)
        except asyncio.TimeoutError:
            return RegisterFailure(
                register=register,
                message=f"{register.value} read timed out after {self._timeout}s",
            )
        return parse_register_output(register, result.output, result.returncode)

    async def show_register(self, register: RegisterName) -> str:
        """Return the ``--show_reg`` field definition table of a register.

        Raises:
            RegisterFetchError: If the tool reports an error or times out
        """
        args = [*self._base_args(), "--show_reg", register.value]
        try:
            result = await run_command(*args, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise RegisterFetchError(
                register.value, f"{register.value} definition query timed out"
            ) from None
        if TOOL_ERROR_MARKER in result.output or result.returncode != 0:
            message = " ".join(result.output.replace(TOOL_ERROR_MARKER, " ").split())
            raise RegisterFetchError(register.value, message)
        return result.output

    async def write_register(
        self,
        register: RegisterName,
        values: Mapping[str, str],
        indexes: Mapping[str, str] | None = None,
    ) -> None:
        """Write field values to a register (answers the tool's prompt with yes).

        Raises:
            RegisterWriteError: If the tool exits with a non-zero status
        """
        args = [
            *self._base_args(),
            "--reg_name",
            register.value,
            "--set",
            format_indexes(values),
        ]
        if indexes:
            args += ["--indexes", format_indexes(indexes)]
        args.append("--yes")
        try:
            result = await run_command(*args, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise RegisterWriteError(register.value, f"{register.value} write timed out") from None
        if result.returncode != 0 or TOOL_ERROR_MARKER in result.output:
            message = " ".join(result.output.replace(TOOL_ERROR_MARKER, " ").split())
            raise RegisterWriteError(register.value, message)
        _LOGGER.debug("Wrote %d fields to %s", len(values), register.value)
