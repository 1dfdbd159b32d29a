"""Domain decoders: raw register dumps to pyibswinfo models.

One decoder per logical entity. Decoders never query hardware; they take
parsed :class:`~pyibswinfo.registers.dump.RegisterDump` objects (or plain
integers) and return frozen models from :mod:`pyibswinfo.models`.

A field missing from a dump means "not reported" and decodes to ``None``.
A field that is present but cannot be parsed raises
:class:`~pyibswinfo.exceptions.DecodeError`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pyibswinfo.codec import bitmask_to_binary_string, hex_to_decimal, strip_hex_prefix
from pyibswinfo.constants import PSU_POWER_FLAG, TEMPERATURE_DIVISOR
from pyibswinfo.exceptions import DecodeError
from pyibswinfo.models import (
    DeviceIdentity,
    FanAlarmStatus,
    FanReading,
    FirmwareVersion,
    HealthStatus,
    PowerSupplyUnit,
    ThermalReading,
)
from pyibswinfo.registers.dump import (
    RegisterDump,
    extract_field,
    extract_int,
    extract_text,
)

_LOGGER = logging.getLogger(__name__)

_PSU_BASE_RE = re.compile(r"psu(\d+)")

# MSPS word layout per PSU (psuN[word]):
#   word 0      status nibbles (presence, DC power)
#   word 1      fan status nibble
#   word 2      power draw in watts, high bit set
#   words 4-6   serial number (ASCII)
#   words 12-15 part number (ASCII)
PSU_POWER_WORD = 2
PSU_SERIAL_WORDS = range(4, 7)
PSU_PART_NUMBER_WORDS = range(12, 16)


@dataclass(frozen=True)
class NibbleRule:
    """Where a PSU status nibble lives and what its values mean.

    Attributes:
        word: MSPS word index within the PSU block.
        position: Hex digit position in the tool's rendering of the word
            (after the ``0x`` prefix; negative counts from the right).
        values: Known nibble values; any other hex digit decodes to ERROR.
            A value mapped to None means the field is not applicable.
    """

    word: int
    position: int
    values: dict[str, HealthStatus | None]


# Empirical table from MSPS dumps of unmanaged SB7800/QM8700 switches.
# Fan nibble 3 shows up on managed switches, where the field does not apply.
PSU_NIBBLES: dict[str, NibbleRule] = {
    "status": NibbleRule(word=0, position=0, values={"5": HealthStatus.OK}),
    "dc_power": NibbleRule(word=0, position=-2, values={"1": HealthStatus.OK}),
    "fan": NibbleRule(word=1, position=-1, values={"2": HealthStatus.OK, "3": None}),
}


# ---------------------------------------------------------------------------
# Identity / inventory
# ---------------------------------------------------------------------------


def decode_firmware_version(mgir: RegisterDump) -> FirmwareVersion | None:
    """Decode ``extended_major.extended_minor.extended_sub_minor`` from MGIR."""
    major = extract_int(mgir, "extended_major")
    minor = extract_int(mgir, "extended_minor")
    sub_minor = extract_int(mgir, "extended_sub_minor")
    if major is None or minor is None or sub_minor is None:
        return None
    return FirmwareVersion(major=major, minor=minor, sub_minor=sub_minor)


def decode_uptime(mgir: RegisterDump) -> int | None:
    """Switch uptime in seconds."""
    return extract_int(mgir, "uptime")


def decode_guid(spzr: RegisterDump) -> str | None:
    """Reassemble the 64-bit node GUID from its 32-bit SPZR words."""
    words = extract_field(spzr, "node_guid")
    if words is None:
        return None
    digits = []
    for word in words:
        digits.append(f"{hex_to_decimal(word):08x}")
    return "0x" + "".join(digits)


def decode_node_description(spzr: RegisterDump) -> str | None:
    """Human-set node description (up to 64 characters)."""
    return extract_text(spzr, "node_description")


def decode_identity(
    *,
    mgir: RegisterDump | None = None,
    msgi: RegisterDump | None = None,
    spzr: RegisterDump | None = None,
    port_count: int | None = None,
) -> DeviceIdentity:
    """Build the device identity from whichever inventory dumps were read."""
    values: dict[str, object] = {"port_count": port_count}
    if msgi is not None:
        values.update(
            part_number=extract_text(msgi, "part_number"),
            serial_number=extract_text(msgi, "serial_number"),
            product_name=extract_text(msgi, "product_name"),
            revision=extract_text(msgi, "revision"),
        )
    if mgir is not None:
        values.update(
            psid=extract_text(mgir, "psid"),
            firmware_version=decode_firmware_version(mgir),
        )
    if spzr is not None:
        values.update(
            node_description=decode_node_description(spzr),
            guid=decode_guid(spzr),
        )
    identity = DeviceIdentity.model_validate(values)
    _LOGGER.debug("Decoded identity: %s", identity)
    return identity


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


def decode_port_count(mgpir: RegisterDump | None) -> int | None:
    """Module count from MGPIR, or None when it must come from elsewhere.

    Only a hex-formatted ``num_of_modules`` is trusted; anything else
    (missing register, missing field, odd rendering) returns None.
    """
    if mgpir is None:
        return None
    raw = mgpir.get("num_of_modules")
    if raw is None or not raw.lower().startswith("0x"):
        return None
    return hex_to_decimal(raw)


def normalize_port_count(count: int) -> int:
    """Round an odd port count down to even.

    Subnet management reports an extra virtual port on some switches.
    """
    return count if count % 2 == 0 else count - 1


# ---------------------------------------------------------------------------
# Temperatures
# ---------------------------------------------------------------------------


def decode_temperature(raw: int) -> int:
    """Convert 1/8 degree units to whole degrees Celsius (truncated)."""
    return int(raw / TEMPERATURE_DIVISOR)


def decode_sensor_temperature(mtmp: RegisterDump) -> int | None:
    """Current temperature of one MTMP sensor."""
    raw = extract_int(mtmp, "temperature")
    return None if raw is None else decode_temperature(raw)


def decode_thermal(
    mtmp: RegisterDump,
    module_temperatures: dict[int, int] | None = None,
) -> ThermalReading:
    """ASIC temperature readings, plus module temperatures if requested."""
    max_raw = extract_int(mtmp, "max_temperature")
    return ThermalReading(
        temperature=decode_sensor_temperature(mtmp),
        max_temperature=None if max_raw is None else decode_temperature(max_raw),
        module_temperatures=(
            dict(sorted(module_temperatures.items())) if module_temperatures is not None else None
        ),
    )


# ---------------------------------------------------------------------------
# Fans
# ---------------------------------------------------------------------------


def decode_field_width(definition: str, field: str) -> int | None:
    """Read a field's bit size from ``mlxreg_ext --show_reg`` output.

    The definition table has the columns ``Field Name | Address (Bytes) |
    Offset (Bits) | Size (Bits) | Access``; the size is read as hex, like
    every other register value.
    """
    for line in definition.splitlines():
        if "|" in line:
            columns = [column.strip() for column in line.split("|")]
        else:
            columns = line.split()
        if len(columns) < 3 or columns[0] != field:
            continue
        return hex_to_decimal(columns[-2])
    return None


def active_tachometers(mask: int, width: int) -> tuple[int, ...]:
    """Indices of physically present tachometers.

    The mask is rendered MSB first over *width* bits; positions are scanned
    from ``width - 1`` down to 1 and position *p* (1-based from the MSB)
    maps to tachometer ``width - p``. Results are in ascending order.
    """
    bits = bitmask_to_binary_string(mask, width)
    return tuple(
        width - position for position in range(width - 1, 0, -1) if bits[position - 1] == "1"
    )


def decode_active_tachometers(mfcr: RegisterDump, width: int | None) -> tuple[int, ...]:
    """Active tachometers from MFCR ``tacho_active`` and its declared width."""
    mask = extract_int(mfcr, "tacho_active")
    if mask is None or width is None:
        return ()
    return active_tachometers(mask, width)


def decode_fan_speed(mfsm: RegisterDump) -> int:
    """Raw RPM of one tachometer; a missing reading counts as 0."""
    rpm = extract_int(mfsm, "rpm")
    return 0 if rpm is None else rpm


def decode_fans(raw_speeds: dict[int, int]) -> FanReading:
    return FanReading(raw_speeds=dict(sorted(raw_speeds.items())))


def decode_fan_alarm(fore: RegisterDump) -> FanAlarmStatus | None:
    """Fan out-of-range bitmasks from FORE, None if neither is reported."""
    under = extract_int(fore, "fan_under_limit")
    over = extract_int(fore, "fan_over_limit")
    if under is None and over is None:
        return None
    return FanAlarmStatus(under_limit=under or 0, over_limit=over or 0)


# ---------------------------------------------------------------------------
# Power supplies
# ---------------------------------------------------------------------------


def psu_indices(msps: RegisterDump) -> list[int]:
    """PSU indices present in an MSPS dump (never assumed)."""
    indices = []
    for base in msps.bases(_PSU_BASE_RE):
        match = _PSU_BASE_RE.fullmatch(base)
        if match is not None:
            indices.append(int(match.group(1)))
    return sorted(indices)


def decode_psu_nibble(raw_word: str | None, rule: NibbleRule, field: str) -> HealthStatus | None:
    """Look up one PSU status nibble in the fixed table.

    Raises:
        DecodeError: If the word is too short or the nibble is not hex
    """
    if raw_word is None:
        return None
    digits = strip_hex_prefix(raw_word)
    try:
        nibble = digits[rule.position]
    except IndexError:
        raise DecodeError(field, raw_word, "status nibble out of range") from None
    if nibble not in "0123456789abcdefABCDEF":
        raise DecodeError(field, raw_word, f"unrecognized status nibble {nibble!r}")
    return rule.values.get(nibble, HealthStatus.ERROR)


def decode_psu_power(raw_word: str | None) -> int | None:
    """PSU power draw in watts; 0 or absent means not reported."""
    if raw_word is None:
        return None
    watts = hex_to_decimal(raw_word) & ~PSU_POWER_FLAG
    return watts or None


def decode_power_supply(msps: RegisterDump, index: int) -> PowerSupplyUnit:
    """Decode the ``psuN[...]`` block of one PSU."""
    base = f"psu{index}"

    def word(number: int) -> str | None:
        return msps.get(f"{base}[{number}]")

    statuses = {
        name: decode_psu_nibble(word(rule.word), rule, f"{base}.{name}")
        for name, rule in PSU_NIBBLES.items()
    }
    return PowerSupplyUnit(
        index=index,
        part_number=extract_text(msps, base, PSU_PART_NUMBER_WORDS),
        serial_number=extract_text(msps, base, PSU_SERIAL_WORDS),
        power_watts=decode_psu_power(word(PSU_POWER_WORD)),
        **statuses,
    )


def decode_power_supplies(msps: RegisterDump) -> tuple[PowerSupplyUnit, ...]:
    """Decode every PSU found in an MSPS dump, ordered by index."""
    units = tuple(decode_power_supply(msps, index) for index in psu_indices(msps))
    _LOGGER.debug("Decoded %d power supplies", len(units))
    return units
