"""Switch data collection.

:class:`SwitchInfoCollector` drives one query/decode cycle:

1. select the register plan for the requested category and tool version
2. read every planned register concurrently
3. read dependent per-element registers concurrently (module temperatures
   per QSFP port, fan speeds per active tachometer)
4. decode everything into a single :class:`~pyibswinfo.models.Snapshot`

Only an MGPIR failure is tolerated: the port count then comes from the
subnet manager. Any other failed read aborts the run with
:class:`~pyibswinfo.exceptions.RegisterFetchError`.

Usage:
    collector = SwitchInfoCollector(
        MlxregTransport(device),
        ToolVersion.parse("4.22.1"),
        port_source=SmpQueryPortSource(device),
    )
    snapshot = await collector.collect(OutputCategory.VITALS)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from pyibswinfo import decoders
from pyibswinfo.codec import decimal_to_hex, node_description_words
from pyibswinfo.constants import MAX_DESCRIPTION_LENGTH
from pyibswinfo.exceptions import ConfigurationError, RegisterFetchError, SubnetQueryError
from pyibswinfo.models import Snapshot
from pyibswinfo.registers.definitions import OPTIONAL_REGISTERS, RegisterName
from pyibswinfo.registers.dump import RegisterDump, RegisterFailure, RegisterReadResult
from pyibswinfo.registers.plan import OutputCategory, RegisterPlan, indexes_for, plan_for
from pyibswinfo.tool_version import ToolVersion, require_version
from pyibswinfo.transports.protocol import PortCountSource, RegisterTransport

_LOGGER = logging.getLogger(__name__)

# Categories that decode each part of the snapshot
IDENTITY_CATEGORIES = frozenset({OutputCategory.INVENTORY, OutputCategory.ALL})
ALARM_CATEGORIES = frozenset({OutputCategory.STATUS, OutputCategory.ALL})
VITALS_CATEGORIES = frozenset(
    {OutputCategory.STATUS, OutputCategory.VITALS, OutputCategory.ALL}
)
MODULE_TEMPERATURE_CATEGORIES = frozenset({OutputCategory.VITALS, OutputCategory.ALL})


class SwitchInfoCollector:
    """Collect inventory, status and vitals from one unmanaged switch."""

    def __init__(
        self,
        transport: RegisterTransport,
        tool_version: ToolVersion,
        *,
        port_source: PortCountSource | None = None,
        module_temperatures: bool = False,
    ) -> None:
        """Initialize the collector.

        Args:
            transport: Register access to the switch
            tool_version: Installed MFT version (drives index parameters)
            port_source: Fallback port count source when MGPIR is unavailable
            module_temperatures: Also read per-module (QSFP) temperatures
                for the vitals and full outputs
        """
        self._transport = transport
        self._tool_version = tool_version
        self._port_source = port_source
        self._module_temperatures = module_temperatures

    @property
    def tool_version(self) -> ToolVersion:
        return self._tool_version

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def _read(
        self,
        register: RegisterName,
        indexes: Mapping[str, str] | None = None,
    ) -> RegisterDump:
        """Read one register, raising on failure."""
        result = await self._transport.read_register(register, indexes)
        if isinstance(result, RegisterFailure):
            raise RegisterFetchError(result.register.value, result.message)
        return result

    async def fetch_plan(self, plan: RegisterPlan) -> dict[RegisterName, RegisterDump]:
        """Read all planned registers concurrently.

        Returns:
            Dumps keyed by register name. Optional registers (MGPIR) that
            failed are left out.

        Raises:
            RegisterFetchError: For the first failed non-optional register,
                in plan order
        """
        registers = list(plan.registers)
        results: list[RegisterReadResult] = await asyncio.gather(
            *(self._transport.read_register(r, plan.indexes_for(r)) for r in registers)
        )

        dumps: dict[RegisterName, RegisterDump] = {}
        for register, result in zip(registers, results, strict=True):
            if isinstance(result, RegisterFailure):
                if register in OPTIONAL_REGISTERS:
                    _LOGGER.warning(
                        "%s not available on %s, ignoring: %s",
                        register.value,
                        self._transport.device,
                        result.message,
                    )
                    continue
                raise RegisterFetchError(register.value, result.message)
            dumps[register] = result
        return dumps

    async def read_module_temperatures(self, plan: RegisterPlan, count: int) -> dict[int, int]:
        """Read module temperatures for ports ``1..count`` concurrently."""
        modules = list(range(1, count + 1))
        dumps = await asyncio.gather(
            *(
                self._read(RegisterName.MTMP, plan.module_temperature_indexes(module))
                for module in modules
            )
        )
        temperatures: dict[int, int] = {}
        for module, dump in zip(modules, dumps, strict=True):
            value = decoders.decode_sensor_temperature(dump)
            if value is not None:
                temperatures[module] = value
        return temperatures

    async def read_active_tachometers(self, mfcr: RegisterDump) -> tuple[int, ...]:
        """Active tachometer indices, using the MFCR definition for the mask width."""
        definition = await self._transport.show_register(RegisterName.MFCR)
        width = decoders.decode_field_width(definition, "tacho_active")
        tachometers = decoders.decode_active_tachometers(mfcr, width)
        _LOGGER.debug("Active tachometers (width %s): %s", width, tachometers)
        return tachometers

    async def read_fan_speeds(self, tachometers: tuple[int, ...]) -> dict[int, int]:
        """Read the raw RPM of each tachometer concurrently."""
        dumps = await asyncio.gather(
            *(
                self._read(RegisterName.MFSM, {"tacho": "0x" + decimal_to_hex(tacho)})
                for tacho in tachometers
            )
        )
        return {
            tacho: decoders.decode_fan_speed(dump)
            for tacho, dump in zip(tachometers, dumps, strict=True)
        }

    async def resolve_port_count(
        self,
        dumps: Mapping[RegisterName, RegisterDump],
        guid: str | None,
    ) -> int | None:
        """Port count from MGPIR, falling back to the subnet manager."""
        count = decoders.decode_port_count(dumps.get(RegisterName.MGPIR))
        if count is not None:
            return count
        if self._port_source is None:
            _LOGGER.warning("MGPIR module count unavailable and no fallback port source")
            return None
        try:
            raw = await self._port_source.num_ports(guid)
        except SubnetQueryError as err:
            _LOGGER.warning("Port count unavailable for %s: %s", self._transport.device, err)
            return None
        return decoders.normalize_port_count(raw)

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    async def collect(self, category: OutputCategory | str | None = None) -> Snapshot:
        """Run one query/decode cycle.

        Args:
            category: Output category; None selects everything

        Returns:
            Snapshot holding the data the category needs

        Raises:
            RegisterFetchError: If a required register read fails
            DecodeError: If a register field cannot be decoded
        """
        plan = plan_for(category, self._tool_version)
        dumps = await self.fetch_plan(plan)
        resolved = plan.category

        identity_kwargs: dict[str, RegisterDump | None] = {}
        if resolved in IDENTITY_CATEGORIES:
            identity_kwargs = {
                "mgir": dumps.get(RegisterName.MGIR),
                "msgi": dumps.get(RegisterName.MSGI),
                "spzr": dumps.get(RegisterName.SPZR),
            }
        guid = (
            decoders.decode_guid(dumps[RegisterName.SPZR]) if RegisterName.SPZR in dumps else None
        )

        port_count: int | None = None
        uptime: int | None = None
        thermal = None
        fans = None
        if resolved in VITALS_CATEGORIES:
            port_count = await self.resolve_port_count(dumps, guid)
            uptime = decoders.decode_uptime(dumps[RegisterName.MGIR])

            module_temperatures: dict[int, int] | None = None
            if self._module_temperatures and resolved in MODULE_TEMPERATURE_CATEGORIES:
                module_temperatures = await self.read_module_temperatures(plan, port_count or 0)
            thermal = decoders.decode_thermal(dumps[RegisterName.MTMP], module_temperatures)

            tachometers = await self.read_active_tachometers(dumps[RegisterName.MFCR])
            fans = decoders.decode_fans(await self.read_fan_speeds(tachometers))

        fan_alarm = None
        if resolved in ALARM_CATEGORIES:
            fan_alarm = decoders.decode_fan_alarm(dumps[RegisterName.FORE])

        snapshot = Snapshot(
            category=resolved,
            identity=decoders.decode_identity(port_count=port_count, **identity_kwargs),
            uptime_seconds=uptime,
            power_supplies=decoders.decode_power_supplies(dumps[RegisterName.MSPS]),
            thermal=thermal,
            fans=fans,
            fan_alarm=fan_alarm,
        )
        _LOGGER.debug("Collected %s snapshot from %s", resolved.value, self._transport.device)
        return snapshot

    # ------------------------------------------------------------------
    # Node description
    # ------------------------------------------------------------------

    def _spzr_indexes(self) -> dict[str, str]:
        return indexes_for(RegisterName.SPZR, self._tool_version)

    async def read_node_description(self) -> str | None:
        """Current node description of the switch."""
        dump = await self._read(RegisterName.SPZR, self._spzr_indexes())
        return decoders.decode_node_description(dump)

    async def set_node_description(self, description: str) -> None:
        """Overwrite the node description.

        All 16 description words are written, zero-filled past the new
        text, so no part of a longer previous description survives.

        Raises:
            ConfigurationError: If the description is too long or not ASCII
            DependencyError: If the tool version cannot set descriptions
            RegisterWriteError: If the write is rejected
        """
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ConfigurationError(
                f"description string > {MAX_DESCRIPTION_LENGTH} characters"
            )
        require_version(self._tool_version, write=True)
        try:
            words = node_description_words(description)
        except ValueError as err:
            raise ConfigurationError(f"invalid description: {err}") from err

        values = {"ndm": "0x1"}
        for index, word in enumerate(words):
            values[f"node_description[{index}]"] = word
        await self._transport.write_register(RegisterName.SPZR, values, self._spzr_indexes())
        _LOGGER.info("Node description of %s set to %r", self._transport.device, description)
