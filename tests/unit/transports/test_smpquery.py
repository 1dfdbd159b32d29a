"""Unit tests for the smpquery port count fallback."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fakes import load_sample

from pyibswinfo.exceptions import SubnetQueryError
from pyibswinfo.transports import (
    PortCountSource,
    SmpQueryPortSource,
    device_lid,
    parse_num_ports,
)
from pyibswinfo.transports._process import CommandResult


def _result(output: str, returncode: int = 0) -> CommandResult:
    return CommandResult(args=("smpquery",), returncode=returncode, output=output)


def test_parse_num_ports() -> None:
    assert parse_num_ports(load_sample("smpquery_ni.txt")) == 41


def test_parse_num_ports_missing() -> None:
    with pytest.raises(SubnetQueryError):
        parse_num_ports("ibwarn: [1234] smp_query_via: query failed")


@pytest.mark.parametrize(
    ("device", "expected"),
    [
        ("lid-44", "44"),
        ("SW_MT54000_ibswitch_lid-0x002c", "0x2c"),
        ("/dev/mst/SW_MT53236_ibswitch_lid-0x0001", "0x1"),
        ("SW_MT54000_ibswitch", None),
        ("/dev/mst/mt4115_pciconf0", None),
    ],
)
def test_device_lid(device: str, expected: str | None) -> None:
    assert device_lid(device) == expected


def test_satisfies_protocol() -> None:
    assert isinstance(SmpQueryPortSource("lid-44"), PortCountSource)


@pytest.mark.asyncio
async def test_query_by_guid() -> None:
    source = SmpQueryPortSource("SW_MT54000_ibswitch_lid-0x002c")
    with patch(
        "pyibswinfo.transports.smpquery.run_command",
        new=AsyncMock(return_value=_result(load_sample("smpquery_ni.txt"))),
    ) as mock_run:
        assert await source.num_ports("0x7cfe900300a1b2c0") == 41

    mock_run.assert_awaited_once_with(
        "smpquery", "NI", "-G", "0x7cfe900300a1b2c0", timeout=None
    )


@pytest.mark.asyncio
async def test_query_by_lid() -> None:
    source = SmpQueryPortSource("lid-44", executable="/usr/sbin/smpquery")
    with patch(
        "pyibswinfo.transports.smpquery.run_command",
        new=AsyncMock(return_value=_result(load_sample("smpquery_ni.txt"))),
    ) as mock_run:
        await source.num_ports()

    assert mock_run.await_args.args == ("/usr/sbin/smpquery", "NI", "44")


@pytest.mark.asyncio
async def test_cannot_address_without_guid_or_lid() -> None:
    source = SmpQueryPortSource("SW_MT54000_ibswitch")
    with pytest.raises(SubnetQueryError, match="GUID and LID unknown"):
        await source.num_ports(None)


@pytest.mark.asyncio
async def test_query_failure() -> None:
    source = SmpQueryPortSource("lid-44")
    with patch(
        "pyibswinfo.transports.smpquery.run_command",
        new=AsyncMock(return_value=_result("ibwarn: query failed", returncode=255)),
    ):
        with pytest.raises(SubnetQueryError, match="query failed"):
            await source.num_ports()


@pytest.mark.asyncio
async def test_switch_name_queried_by_hex_lid() -> None:
    """MST switch names carry the LID, so no GUID is needed."""
    source = SmpQueryPortSource("/dev/mst/SW_MT54000_ibswitch_lid-0x002c")
    with patch(
        "pyibswinfo.transports.smpquery.run_command",
        new=AsyncMock(return_value=_result(load_sample("smpquery_ni.txt"))),
    ) as mock_run:
        assert await source.num_ports(None) == 41

    assert mock_run.await_args.args == ("smpquery", "NI", "0x2c")
