"""Read-only queries against a real unmanaged switch."""

from __future__ import annotations

import pytest

from pyibswinfo import HealthStatus, OutputCategory, SwitchInfoCollector
from pyibswinfo.config import QueryConfig
from pyibswinfo.device import normalize_device
from pyibswinfo.render import render
from pyibswinfo.tool_version import require_version
from pyibswinfo.transports import MlxregTransport, SmpQueryPortSource, read_tool_version

pytestmark = pytest.mark.integration


async def _collector(config: QueryConfig, **kwargs) -> SwitchInfoCollector:
    version = await read_tool_version(config.mst, config.timeout)
    require_version(version)
    device = normalize_device(config.device)
    return SwitchInfoCollector(
        MlxregTransport(device, executable=config.mlxreg, timeout=config.timeout),
        version,
        port_source=SmpQueryPortSource(
            device, executable=config.smpquery, timeout=config.timeout
        ),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_inventory(live_config: QueryConfig) -> None:
    collector = await _collector(live_config)
    snapshot = await collector.collect(OutputCategory.INVENTORY)

    assert snapshot.identity.part_number
    assert snapshot.identity.serial_number
    assert snapshot.identity.firmware_version is not None
    assert snapshot.power_supplies
    print(render(snapshot, OutputCategory.INVENTORY))


@pytest.mark.asyncio
async def test_status(live_config: QueryConfig) -> None:
    collector = await _collector(live_config)
    snapshot = await collector.collect(OutputCategory.STATUS)

    assert snapshot.fan_alarm is not None
    assert snapshot.fan_alarm.status in (HealthStatus.OK, HealthStatus.ERROR)
    for psu in snapshot.power_supplies:
        assert psu.status in (HealthStatus.OK, HealthStatus.ERROR)


@pytest.mark.asyncio
async def test_vitals_with_modules(live_config: QueryConfig) -> None:
    collector = await _collector(live_config, module_temperatures=True)
    snapshot = await collector.collect(OutputCategory.VITALS)

    assert snapshot.uptime_seconds is not None and snapshot.uptime_seconds > 0
    assert snapshot.thermal is not None
    assert snapshot.thermal.temperature is not None
    assert snapshot.identity.port_count is not None
    assert snapshot.identity.port_count % 2 == 0
    assert snapshot.fans is not None
    assert all(rpm >= 0 for rpm in snapshot.fans.speeds.values())
    print(render(snapshot, OutputCategory.VITALS))


@pytest.mark.asyncio
async def test_node_description_readable(live_config: QueryConfig) -> None:
    collector = await _collector(live_config)
    description = await collector.read_node_description()
    assert description is None or len(description) <= 64
