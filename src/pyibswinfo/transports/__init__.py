"""External tool transports for pyibswinfo.

Usage:
    from pyibswinfo.transports import MlxregTransport, SmpQueryPortSource

    transport = MlxregTransport("SW_MT54000_ibswitch_lid-0x0001")
    result = await transport.read_register(RegisterName.MSPS)
"""

from __future__ import annotations

from .mlxreg import MlxregTransport
from .mst import parse_mst_version, read_tool_version
from .protocol import PortCountSource, RegisterTransport
from .smpquery import SmpQueryPortSource, device_lid, parse_num_ports

__all__ = [
    # Protocols
    "RegisterTransport",
    "PortCountSource",
    # Implementations
    "MlxregTransport",
    "SmpQueryPortSource",
    # Tool version
    "read_tool_version",
    "parse_mst_version",
    "parse_num_ports",
    "device_lid",
]
