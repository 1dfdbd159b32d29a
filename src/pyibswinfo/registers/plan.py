"""Register plan selection.

Decides which registers a run reads for an output category, and which
``--indexes`` parameters each register needs with the installed tool
version. Index parameters come from :data:`INDEX_RULES`, an ordered table
evaluated top to bottom; parameters are emitted in rule order.

Rule history (observed with the MFT releases listed):

- 4.15.1+: temperature registers became slot aware (``slot_index``)
- 4.19.1 - 4.20.x: MGIR required ``module_base``; dropped again in 4.21.0
- 4.23.0+: SPZR requires ``router_entity`` ahead of ``swid``
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from pyibswinfo.codec import decimal_to_hex
from pyibswinfo.constants import MODULE_SENSOR_BASE
from pyibswinfo.registers.definitions import RegisterName
from pyibswinfo.tool_version import ToolVersion

_LOGGER = logging.getLogger(__name__)

IndexParameters = Mapping[str, str]
"""Ordered ``key -> value`` index parameters for one register query."""


class OutputCategory(StrEnum):
    """Output categories selectable on the command line."""

    INVENTORY = "inventory"
    STATUS = "status"
    VITALS = "vitals"
    ALL = "all"


CATEGORY_REGISTERS: dict[OutputCategory, tuple[RegisterName, ...]] = {
    OutputCategory.INVENTORY: (
        RegisterName.MGIR,
        RegisterName.MSGI,
        RegisterName.SPZR,
        RegisterName.MSPS,
    ),
    OutputCategory.STATUS: (
        RegisterName.MGIR,
        RegisterName.MGPIR,
        RegisterName.MSPS,
        RegisterName.MTMP,
        RegisterName.MTCAP,
        RegisterName.MFCR,
        RegisterName.FORE,
    ),
    OutputCategory.VITALS: (
        RegisterName.MGIR,
        RegisterName.MGPIR,
        RegisterName.MSPS,
        RegisterName.MTMP,
        RegisterName.MTCAP,
        RegisterName.MFCR,
    ),
    OutputCategory.ALL: (
        RegisterName.MGIR,
        RegisterName.MGPIR,
        RegisterName.MSGI,
        RegisterName.MSPS,
        RegisterName.SPZR,
        RegisterName.MTMP,
        RegisterName.MTCAP,
        RegisterName.MFCR,
        RegisterName.FORE,
    ),
}


@dataclass(frozen=True)
class IndexRule:
    """Index parameters added to some registers within a version band.

    Attributes:
        registers: Registers the rule applies to.
        parameters: Parameters appended, in order.
        min_version: Inclusive lower bound (None = no bound).
        max_version: Exclusive upper bound (None = no bound).
    """

    registers: frozenset[RegisterName]
    parameters: tuple[tuple[str, str], ...]
    min_version: ToolVersion | None = None
    max_version: ToolVersion | None = None

    def applies(self, register: RegisterName, version: ToolVersion) -> bool:
        """Whether this rule adds parameters to *register* for *version*."""
        if register not in self.registers:
            return False
        if self.min_version is not None and version < self.min_version:
            return False
        return not (self.max_version is not None and version >= self.max_version)


SLOT_INDEX_VERSION = ToolVersion(4, 15, 1)
"""First tool version requiring ``slot_index`` on slot-aware registers."""

SLOT_AWARE_REGISTERS = frozenset({RegisterName.MTMP, RegisterName.MTCAP})

INDEX_RULES: tuple[IndexRule, ...] = (
    IndexRule(
        registers=frozenset({RegisterName.MTMP}),
        parameters=(("sensor_index", "0x0"),),
    ),
    IndexRule(
        registers=SLOT_AWARE_REGISTERS,
        parameters=(("slot_index", "0x0"),),
        min_version=SLOT_INDEX_VERSION,
    ),
    IndexRule(
        registers=frozenset({RegisterName.MGIR}),
        parameters=(("module_base", "0x0"),),
        min_version=ToolVersion(4, 19, 1),
        max_version=ToolVersion(4, 21, 0),
    ),
    IndexRule(
        registers=frozenset({RegisterName.SPZR}),
        parameters=(("router_entity", "0x0"),),
        min_version=ToolVersion(4, 23, 0),
    ),
    IndexRule(
        registers=frozenset({RegisterName.SPZR}),
        parameters=(("swid", "0x0"),),
    ),
)


@dataclass(frozen=True)
class RegisterPlan:
    """Registers to read for one run, with their index parameters."""

    category: OutputCategory
    version: ToolVersion
    registers: Mapping[RegisterName, IndexParameters] = field(default_factory=dict)

    def __contains__(self, register: object) -> bool:
        return register in self.registers

    def indexes_for(self, register: RegisterName) -> IndexParameters:
        """Index parameters planned for *register*."""
        return self.registers[register]

    def slot_parameters(self) -> dict[str, str]:
        """Slot parameter to prepend to per-module MTMP queries, if any."""
        if self.version >= SLOT_INDEX_VERSION:
            return {"slot_index": "0x0"}
        return {}

    def module_temperature_indexes(self, module: int) -> dict[str, str]:
        """MTMP index parameters for the 1-based module (QSFP port) *module*."""
        params = self.slot_parameters()
        params["sensor_index"] = "0x" + decimal_to_hex(MODULE_SENSOR_BASE + module - 1)
        return params


def indexes_for(register: RegisterName, version: ToolVersion) -> dict[str, str]:
    """Evaluate :data:`INDEX_RULES` for one register."""
    params: dict[str, str] = {}
    for rule in INDEX_RULES:
        if rule.applies(register, version):
            params.update(rule.parameters)
    return params


def plan_for(category: OutputCategory | str | None, version: ToolVersion) -> RegisterPlan:
    """Build the register plan for an output category.

    Args:
        category: Requested category; None or ``"all"`` selects everything
        version: Installed tool version

    Returns:
        Plan mapping each register to read to its index parameters. Only
        registers in the plan may be queried.
    """
    resolved = OutputCategory(category) if category else OutputCategory.ALL
    registers = {
        register: MappingProxyType(indexes_for(register, version))
        for register in CATEGORY_REGISTERS[resolved]
    }
    _LOGGER.debug(
        "Plan for %s with MFT %s: %s",
        resolved.value,
        version,
        ", ".join(registers),
    )
    return RegisterPlan(category=resolved, version=version, registers=registers)


def format_indexes(params: IndexParameters) -> str:
    """Render index parameters as the tool's ``key=value,...`` argument."""
    return ",".join(f"{key}={value}" for key, value in params.items())
