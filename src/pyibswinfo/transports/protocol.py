"""Interfaces of the external collaborators used by the collector.

The collector only depends on these protocols, so tests (and alternative
backends) can substitute in-memory doubles for the MFT and
infiniband-diags command line tools.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from pyibswinfo.registers.definitions import RegisterName
from pyibswinfo.registers.dump import RegisterReadResult


@runtime_checkable
class RegisterTransport(Protocol):
    """Register access to one switch device."""

    @property
    def device(self) -> str:
        """Device identifier the transport talks to."""
        ...

    async def read_register(
        self,
        register: RegisterName,
        indexes: Mapping[str, str] | None = None,
    ) -> RegisterReadResult:
        """Read a register; failures are returned, not raised."""
        ...

    async def show_register(self, register: RegisterName) -> str:
        """Return the register's field definition table."""
        ...

    async def write_register(
        self,
        register: RegisterName,
        values: Mapping[str, str],
        indexes: Mapping[str, str] | None = None,
    ) -> None:
        """Write field values to a register."""
        ...


@runtime_checkable
class PortCountSource(Protocol):
    """Port count from subnet management, used when MGPIR is unavailable."""

    async def num_ports(self, guid: str | None = None) -> int:
        """Raw number of ports reported for the switch node."""
        ...
