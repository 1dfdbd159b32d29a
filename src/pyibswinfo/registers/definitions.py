"""Catalogue of the switch registers queried by pyibswinfo.

Source: PRM register access tables shipped with MFT
(``prm_dbs/switch/ext/register_access_table.adb``) and the Linux mlxsw
driver (``drivers/net/ethernet/mellanox/mlxsw/reg.h``). Field layouts were
cross-checked against ``mlxreg_ext --get`` dumps from SB7800, QM8700 and
QM9700 unmanaged switches.

Register │ Name                                          │ Fields used
─────────┼───────────────────────────────────────────────┼──────────────────────────────
MGIR     │ Management General Information                │ uptime, psid[N], extended_*
MGPIR    │ Management General Peripheral Information     │ num_of_modules
MSGI     │ Misc System General Information               │ part/serial_number[N], ...
MSPS     │ Misc System Power Supply                      │ psuN[0..15]
SPZR     │ Switch Partition Configuration                │ node_description[N], node_guid
MTMP     │ Management Temperature                        │ temperature, max_temperature
MTCAP    │ Management Temperature Capabilities           │ sensor_count
MFCR     │ Management Fan Control                        │ tacho_active
FORE     │ Fan Out of Range Event                        │ fan_under_limit, fan_over_limit
MFSM     │ Management Fan Speed Measurement              │ rpm
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class RegisterName(StrEnum):
    """Register mnemonics understood by ``mlxreg_ext``."""

    MGIR = "MGIR"
    MGPIR = "MGPIR"
    MSGI = "MSGI"
    MSPS = "MSPS"
    SPZR = "SPZR"
    MTMP = "MTMP"
    MTCAP = "MTCAP"
    MFCR = "MFCR"
    FORE = "FORE"
    MFSM = "MFSM"


@dataclass(frozen=True)
class RegisterDefinition:
    """Static description of one register.

    Attributes:
        name: Register mnemonic.
        description: Human-readable register title.
        fields: Field base names pyibswinfo reads from the dump.
        optional: True when some hardware generations do not implement the
            register and a failed read must not abort the run.
        per_element: True when the register is queried once per element
            (tachometer) rather than as part of the category plan.
    """

    name: RegisterName
    description: str
    fields: tuple[str, ...] = ()
    optional: bool = False
    per_element: bool = False


REGISTERS: tuple[RegisterDefinition, ...] = (
    RegisterDefinition(
        name=RegisterName.MGIR,
        description="Management General Information Register",
        fields=(
            "uptime",
            "psid",
            "extended_major",
            "extended_minor",
            "extended_sub_minor",
        ),
    ),
    RegisterDefinition(
        name=RegisterName.MGPIR,
        description="Management General Peripheral Information Register",
        fields=("num_of_modules",),
        # Not implemented on some switch generations (e.g. SwitchIB-2)
        optional=True,
    ),
    RegisterDefinition(
        name=RegisterName.MSGI,
        description="Misc System General Information Register",
        fields=("part_number", "serial_number", "product_name", "revision"),
    ),
    RegisterDefinition(
        name=RegisterName.MSPS,
        description="Misc System Power Supply Register",
        fields=("psu0", "psu1"),
    ),
    RegisterDefinition(
        name=RegisterName.SPZR,
        description="Switch Partition Configuration Register",
        fields=("node_description", "node_guid"),
    ),
    RegisterDefinition(
        name=RegisterName.MTMP,
        description="Management Temperature Register",
        fields=("temperature", "max_temperature"),
    ),
    RegisterDefinition(
        name=RegisterName.MTCAP,
        description="Management Temperature Capabilities Register",
        fields=("sensor_count",),
    ),
    RegisterDefinition(
        name=RegisterName.MFCR,
        description="Management Fan Control Register",
        fields=("tacho_active",),
    ),
    RegisterDefinition(
        name=RegisterName.FORE,
        description="Fan Out of Range Event Register",
        fields=("fan_under_limit", "fan_over_limit"),
    ),
    RegisterDefinition(
        name=RegisterName.MFSM,
        description="Management Fan Speed Measurement Register",
        fields=("rpm",),
        per_element=True,
    ),
)

BY_NAME: dict[RegisterName, RegisterDefinition] = {r.name: r for r in REGISTERS}
"""Lookup register definition by mnemonic."""

OPTIONAL_REGISTERS: frozenset[RegisterName] = frozenset(r.name for r in REGISTERS if r.optional)
"""Registers whose read failure is tolerated."""
