"""Sample loaders and in-memory doubles shared by the unit tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pyibswinfo.registers.definitions import RegisterName
from pyibswinfo.registers.dump import (
    RegisterDump,
    RegisterFailure,
    RegisterReadResult,
    parse_register_output,
)
from pyibswinfo.registers.plan import format_indexes

SAMPLES_DIR = Path(__file__).parent / "samples"

# Register dumps captured from an SB7800 (EDR) switch
SAMPLE_FILES: dict[RegisterName, str] = {
    RegisterName.MGIR: "mgir.txt",
    RegisterName.MGPIR: "mgpir.txt",
    RegisterName.MSGI: "msgi.txt",
    RegisterName.MSPS: "msps.txt",
    RegisterName.SPZR: "spzr.txt",
    RegisterName.MTMP: "mtmp.txt",
    RegisterName.MTCAP: "mtcap.txt",
    RegisterName.MFCR: "mfcr.txt",
    RegisterName.FORE: "fore.txt",
}

# Raw MFSM rpm per active tachometer in the samples (tacho_active = 0x1e)
SAMPLE_FAN_RPM: dict[int, int] = {1: 6355, 2: 13200, 3: 6336, 4: 13170}


def load_sample(name: str) -> str:
    """Load a sample tool output from tests/samples."""
    return (SAMPLES_DIR / name).read_text()


def load_dump(register: RegisterName) -> RegisterDump:
    """Parse the sample dump of *register*."""
    return RegisterDump.parse(register, load_sample(SAMPLE_FILES[register]))


def dump_from_fields(register: RegisterName, fields: Mapping[str, str]) -> RegisterDump:
    """Build a dump from ``name -> value`` pairs, rendered like the tool does."""
    lines = [f"{name:<35}| {value}" for name, value in fields.items()]
    return RegisterDump.parse(register, "\n".join(lines))


def mfsm_output(rpm: int) -> str:
    """``mlxreg_ext --get`` output of MFSM for one tachometer."""
    return f"Field Name | Data\n====\nrpm                                | 0x{rpm:08x}\n====\n"


def mtmp_output(raw_temperature: int) -> str:
    """``mlxreg_ext --get`` output of MTMP for one module sensor."""
    return (
        "Field Name | Data\n====\n"
        f"temperature                        | 0x{raw_temperature:08x}\n"
        f"max_temperature                    | 0x{raw_temperature:08x}\n"
        "====\n"
    )


class FakeTransport:
    """In-memory register transport replaying canned tool output.

    Responses are looked up by ``(register, "key=value,...")`` first, then
    by register alone. Every read, show and write is recorded.
    """

    def __init__(
        self,
        responses: Mapping[RegisterName | tuple[RegisterName, str], str] | None = None,
        *,
        failures: Mapping[RegisterName, str] | None = None,
        definition: str | None = None,
        device: str = "SW_MT54000_ibswitch_lid-0x002c",
    ) -> None:
        self.responses = dict(responses or {})
        self.failures = dict(failures or {})
        self.definition = definition if definition is not None else ""
        self._device = device
        self.reads: list[tuple[RegisterName, dict[str, str]]] = []
        self.shows: list[RegisterName] = []
        self.writes: list[tuple[RegisterName, dict[str, str], dict[str, str]]] = []

    @property
    def device(self) -> str:
        return self._device

    @property
    def read_registers(self) -> set[RegisterName]:
        return {register for register, _ in self.reads}

    async def read_register(
        self,
        register: RegisterName,
        indexes: Mapping[str, str] | None = None,
    ) -> RegisterReadResult:
        params = dict(indexes or {})
        self.reads.append((register, params))
        if register in self.failures:
            return RegisterFailure(register=register, message=self.failures[register])
        text = self.responses.get((register, format_indexes(params)))
        if text is None:
            text = self.responses.get(register)
        if text is None:
            raise AssertionError(f"unexpected read of {register.value} {params}")
        return parse_register_output(register, text)

    async def show_register(self, register: RegisterName) -> str:
        self.shows.append(register)
        return self.definition

    async def write_register(
        self,
        register: RegisterName,
        values: Mapping[str, str],
        indexes: Mapping[str, str] | None = None,
    ) -> None:
        self.writes.append((register, dict(values), dict(indexes or {})))


class FakePortSource:
    """Port count source returning a fixed NumPorts value."""

    def __init__(self, ports: int = 41) -> None:
        self.ports = ports
        self.guids: list[str | None] = []

    async def num_ports(self, guid: str | None = None) -> int:
        self.guids.append(guid)
        return self.ports
