"""Text rendering of snapshots.

Two layouts:

- the full human-readable report (``key | value`` rows between separator
  rules), used when no output category is selected
- per-category ``key : value`` lines, stable keys meant for monitoring
  scripts (``awk -F' : '``)

Absent values are skipped, never printed as placeholders.
"""

from __future__ import annotations

from collections.abc import Iterator

from pyibswinfo.codec import seconds_to_clock
from pyibswinfo.models import HealthStatus, Snapshot
from pyibswinfo.registers.plan import OutputCategory

SEPARATOR = "-" * 49
DOUBLE_SEPARATOR = "=" * 49

_Value = str | int | HealthStatus | None


def format_kv(key: str, value: _Value, separator: str) -> str | None:
    """Format one ``key <sep> value`` line, or None when the value is absent."""
    if value is None or value == "":
        return None
    if isinstance(value, HealthStatus):
        value = value.value
    return f"{key:<18} {separator} {value}"


def _lines(pairs: list[tuple[str, _Value]], separator: str) -> Iterator[str]:
    for key, value in pairs:
        line = format_kv(key, value, separator)
        if line is not None:
            yield line


def inventory_pairs(snapshot: Snapshot) -> list[tuple[str, _Value]]:
    identity = snapshot.identity
    firmware = identity.firmware_version
    pairs: list[tuple[str, _Value]] = [
        ("node_desription", identity.node_description),
        ("part_number", identity.part_number),
        ("serial", identity.serial_number),
        ("product_name", identity.product_name),
        ("revision", identity.revision),
        ("fw_version", str(firmware) if firmware else None),
    ]
    for psu in snapshot.power_supplies:
        pairs += [
            (f"psu{psu.index}.part_number", psu.part_number),
            (f"psu{psu.index}.serial", psu.serial_number),
        ]
    return pairs


def status_pairs(snapshot: Snapshot) -> list[tuple[str, _Value]]:
    pairs: list[tuple[str, _Value]] = []
    for psu in snapshot.power_supplies:
        pairs += [
            (f"psu{psu.index}.status", psu.status),
            (f"psu{psu.index}.dc", psu.dc_power),
            (f"psu{psu.index}.fan", psu.fan),
        ]
    pairs.append(("fans", snapshot.fan_alarm.status if snapshot.fan_alarm else None))
    return pairs


def vitals_pairs(snapshot: Snapshot) -> list[tuple[str, _Value]]:
    pairs: list[tuple[str, _Value]] = [("uptime (sec)", snapshot.uptime_seconds)]
    for psu in snapshot.power_supplies:
        pairs.append((f"psu{psu.index}.power (W)", psu.power_watts))
    thermal = snapshot.thermal
    if thermal is not None:
        pairs += [
            ("cur.temp (C)", thermal.temperature),
            ("max.temp (C)", thermal.max_temperature),
        ]
        for module, temperature in (thermal.module_temperatures or {}).items():
            pairs.append((f"QSFP#{module:02d}.temp (C)", temperature))
    if snapshot.fans is not None:
        for tacho, rpm in snapshot.fans.speeds.items():
            pairs.append((f"fan#{tacho}.speed (rpm)", rpm))
    return pairs


_CATEGORY_PAIRS = {
    OutputCategory.INVENTORY: inventory_pairs,
    OutputCategory.STATUS: status_pairs,
    OutputCategory.VITALS: vitals_pairs,
}


def render_key_values(snapshot: Snapshot, category: OutputCategory) -> str:
    """Render one category as ``key : value`` lines.

    Raises:
        ValueError: For :attr:`OutputCategory.ALL` (use :func:`render_report`)
    """
    try:
        builder = _CATEGORY_PAIRS[category]
    except KeyError:
        raise ValueError(f"no key/value layout for category {category.value!r}") from None
    return "\n".join(_lines(builder(snapshot), ":"))


def render_report(snapshot: Snapshot) -> str:
    """Render the full human-readable report."""
    identity = snapshot.identity
    firmware = identity.firmware_version
    out: list[str] = [DOUBLE_SEPARATOR, identity.node_description or "", DOUBLE_SEPARATOR]

    out += _lines(
        [
            ("part number", identity.part_number),
            ("serial number", identity.serial_number),
            ("product name", identity.product_name),
            ("revision", identity.revision),
            ("ports", identity.port_count),
            ("PSID", identity.psid),
            ("GUID", identity.guid),
            ("firmware version", str(firmware) if firmware else None),
        ],
        "|",
    )
    out.append(SEPARATOR)

    if snapshot.uptime_seconds is not None:
        out += _lines(
            [("uptime (d-h:m:s)", seconds_to_clock(snapshot.uptime_seconds, with_days=True))],
            "|",
        )
    out.append(SEPARATOR)

    if snapshot.power_supplies:
        for psu in snapshot.power_supplies:
            out += _lines(
                [
                    (f"PSU{psu.index} status", psu.status),
                    ("     P/N", psu.part_number),
                    ("     S/N", psu.serial_number),
                    ("     DC power", psu.dc_power),
                    ("     fan status", psu.fan),
                    ("     power (W)", psu.power_watts),
                ],
                "|",
            )
        out.append(SEPARATOR)

    thermal = snapshot.thermal
    if thermal is not None:
        pairs: list[tuple[str, _Value]] = [
            ("temperature (C)", thermal.temperature),
            ("max temp (C)", thermal.max_temperature),
        ]
        for module, temperature in (thermal.module_temperatures or {}).items():
            pairs.append((f"QSFP#{module:02d} (C) ", temperature))
        out += _lines(pairs, "|")
    out.append(SEPARATOR)

    out += _lines(
        [("fan status", snapshot.fan_alarm.status if snapshot.fan_alarm else None)], "|"
    )
    speeds = snapshot.fans.speeds if snapshot.fans is not None else {}
    out += _lines([(f"fan#{tacho} (rpm)", rpm) for tacho, rpm in speeds.items()], "|")
    if speeds:
        out.append(SEPARATOR)
    return "\n".join(out)


def render_json(snapshot: Snapshot) -> str:
    """Render the snapshot as JSON (absent values as null)."""
    return snapshot.model_dump_json(indent=2)


def render(snapshot: Snapshot, category: OutputCategory | None = None) -> str:
    """Render a snapshot: the full report, or one category's key/value lines."""
    if category is None or category is OutputCategory.ALL:
        return render_report(snapshot)
    return render_key_values(snapshot, category)
