"""Port count from the subnet manager through ``smpquery NodeInfo``.

Used when the switch does not implement MGPIR. ``smpquery NI`` prints
dotted key/value lines::

    # Node info: Lid 1
    BaseVers:........................1
    NumPorts:........................41
"""

from __future__ import annotations

import asyncio
import logging
import re

from pyibswinfo.constants import SMPQUERY_EXECUTABLE
from pyibswinfo.exceptions import SubnetQueryError

from ._process import run_command

_LOGGER = logging.getLogger(__name__)

_NUM_PORTS_RE = re.compile(r"^\s*NumPorts:\.*\s*(\d+)\s*$", re.MULTILINE)
_DEVICE_LID_RE = re.compile(r"lid-(0[xX][0-9a-fA-F]+|\d+)$")


def parse_num_ports(output: str) -> int:
    """Extract ``NumPorts`` from ``smpquery NI`` output.

    Raises:
        SubnetQueryError: If the line is missing
    """
    match = _NUM_PORTS_RE.search(output)
    if match is None:
        raise SubnetQueryError(f"no NumPorts in smpquery output: {output.strip()!r}")
    return int(match.group(1))


def device_lid(device: str) -> str | None:
    """LID encoded in a device name, as accepted by ``smpquery``.

    ``lid-44`` gives ``44``; MST switch names end with the LID in hex
    (``SW_MT54000_ibswitch_lid-0x002c`` gives ``0x2c``).
    """
    match = _DEVICE_LID_RE.search(device)
    if match is None:
        return None
    lid = match.group(1)
    if lid[:2] in ("0x", "0X"):
        return f"0x{int(lid, 16):x}"
    return lid


class SmpQueryPortSource:
    """Query the switch node's port count from the subnet manager."""

    def __init__(
        self,
        device: str,
        *,
        executable: str = SMPQUERY_EXECUTABLE,
        timeout: float | None = None,
    ) -> None:
        self._device = device
        self._executable = executable
        self._timeout = timeout

    def _address_args(self, guid: str | None) -> list[str]:
        if guid:
            return ["-G", guid]
        lid = device_lid(self._device)
        if lid is not None:
            return [lid]
        raise SubnetQueryError(
            f"cannot address {self._device} in the subnet: node GUID and LID unknown"
        )

    async def num_ports(self, guid: str | None = None) -> int:
        """Number of ports reported by NodeInfo (not normalized).

        Args:
            guid: Node GUID; when unknown, the LID in the device name is used

        Raises:
            SubnetQueryError: If the switch cannot be addressed or queried
        """
        args = [self._executable, "NI", *self._address_args(guid)]
        try:
            result = await run_command(*args, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise SubnetQueryError("smpquery timed out") from None
        if result.returncode != 0:
            raise SubnetQueryError(" ".join(result.output.split()) or "smpquery failed")
        ports = parse_num_ports(result.output)
        _LOGGER.debug("smpquery reports %d ports for %s", ports, self._device)
        return ports
