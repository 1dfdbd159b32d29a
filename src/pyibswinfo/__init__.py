"""Python library for querying unmanaged InfiniBand switches.

Reads switch registers through the NVIDIA/Mellanox firmware tools (MFT)
and decodes them into inventory, status and vitals data.

Usage:
    from pyibswinfo import OutputCategory, SwitchInfoCollector
    from pyibswinfo.transports import MlxregTransport, SmpQueryPortSource, read_tool_version

    version = await read_tool_version()
    collector = SwitchInfoCollector(
        MlxregTransport("SW_MT54000_ibswitch_lid-0x0001"),
        version,
        port_source=SmpQueryPortSource("SW_MT54000_ibswitch_lid-0x0001"),
    )
    snapshot = await collector.collect(OutputCategory.VITALS)
    print(snapshot.thermal.temperature)
"""

from __future__ import annotations

__version__ = "0.3.0"

from .collector import SwitchInfoCollector
from .config import QueryConfig
from .exceptions import (
    ConfigurationError,
    DecodeError,
    DependencyError,
    DeviceError,
    IbswinfoError,
    MalformedHexError,
    RegisterFetchError,
    RegisterWriteError,
    SubnetQueryError,
)
from .models import (
    DeviceIdentity,
    FanAlarmStatus,
    FanReading,
    FirmwareVersion,
    HealthStatus,
    PowerSupplyUnit,
    Snapshot,
    ThermalReading,
)
from .registers import OutputCategory, RegisterName
from .tool_version import ToolVersion

__all__ = [
    "SwitchInfoCollector",
    "QueryConfig",
    "ToolVersion",
    # Enums
    "OutputCategory",
    "RegisterName",
    "HealthStatus",
    # Models
    "Snapshot",
    "DeviceIdentity",
    "FirmwareVersion",
    "PowerSupplyUnit",
    "ThermalReading",
    "FanReading",
    "FanAlarmStatus",
    # Exceptions
    "IbswinfoError",
    "ConfigurationError",
    "DependencyError",
    "DeviceError",
    "RegisterFetchError",
    "RegisterWriteError",
    "SubnetQueryError",
    "DecodeError",
    "MalformedHexError",
]
