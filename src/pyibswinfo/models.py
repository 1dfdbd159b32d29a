"""Pydantic models for decoded switch data.

Every model is frozen: a snapshot is decoded once per run and never
mutated. Values the hardware did not report are ``None`` rather than a
placeholder string, so renderers decide how (or whether) to show them.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pyibswinfo.constants import FAN_SPEED_HALVING_THRESHOLD
from pyibswinfo.registers.plan import OutputCategory


class HealthStatus(StrEnum):
    """Health flag decoded from a status field."""

    OK = "OK"
    ERROR = "ERROR"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class FirmwareVersion(_FrozenModel):
    """Switch firmware version (``27.2000.1886``)."""

    major: int
    minor: int
    sub_minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor:04d}.{self.sub_minor:04d}"


class DeviceIdentity(_FrozenModel):
    """Inventory information of the switch."""

    part_number: str | None = None
    serial_number: str | None = None
    product_name: str | None = None
    revision: str | None = None
    psid: str | None = None
    guid: str | None = None
    firmware_version: FirmwareVersion | None = None
    node_description: str | None = Field(default=None, max_length=64)
    port_count: int | None = None


class PowerSupplyUnit(_FrozenModel):
    """One power supply, indexed from 0."""

    index: int
    status: HealthStatus | None = None
    dc_power: HealthStatus | None = None
    fan: HealthStatus | None = None
    part_number: str | None = None
    serial_number: str | None = None
    power_watts: int | None = None


class ThermalReading(_FrozenModel):
    """ASIC temperatures and optional per-module temperatures (Celsius)."""

    temperature: int | None = None
    max_temperature: int | None = None
    module_temperatures: dict[int, int] | None = None


class FanReading(_FrozenModel):
    """Tachometer readings for the physically active fans.

    ``raw_speeds`` holds the RPM values as read; ``speeds`` applies the
    display correction (readings above 10000 are halved).
    """

    raw_speeds: dict[int, int] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def speeds(self) -> dict[int, int]:
        """Corrected RPM per tachometer index, ascending."""
        return {
            tacho: corrected_fan_speed(rpm) for tacho, rpm in sorted(self.raw_speeds.items())
        }


class FanAlarmStatus(_FrozenModel):
    """Fan out-of-range alarms (FORE register)."""

    under_limit: int = 0
    over_limit: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> HealthStatus:
        """OK when no tachometer is under or over its limit."""
        if self.under_limit + self.over_limit == 0:
            return HealthStatus.OK
        return HealthStatus.ERROR

    @computed_field  # type: ignore[prop-decorator]
    @property
    def alerted_tachometers(self) -> list[int]:
        """Tachometer indices with an under- or over-limit bit set."""
        mask = self.under_limit | self.over_limit
        return [bit for bit in range(mask.bit_length()) if (mask >> bit) & 1]


class Snapshot(_FrozenModel):
    """Everything decoded in one run for the requested category."""

    category: OutputCategory
    identity: DeviceIdentity = Field(default_factory=DeviceIdentity)
    uptime_seconds: int | None = None
    power_supplies: tuple[PowerSupplyUnit, ...] = ()
    thermal: ThermalReading | None = None
    fans: FanReading | None = None
    fan_alarm: FanAlarmStatus | None = None


def corrected_fan_speed(rpm: int) -> int:
    """Halve tachometer readings above 10000 RPM.

    Some fan models report twice their real speed; values above the
    threshold are displayed halved (integer division).
    """
    if rpm > FAN_SPEED_HALVING_THRESHOLD:
        return rpm // 2
    return rpm
