"""Register dump parsing and field extraction.

``mlxreg_ext --get`` prints one field per line, framed by a header and
separator rules::

    Sending access register...

    Field Name            | Data
    ===================================
    uptime                | 0x002b6a4c
    psid[0]               | 0x4d540000
    ...
    ===================================

Array fields carry their word index in brackets (``psid[0]``,
``psu1[12]``). The tool does not guarantee that array words are printed in
index order, so every multi-word extraction sorts by that index before the
words are concatenated.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Container
from dataclasses import dataclass

from pyibswinfo.codec import hex_to_decimal, hex_words_to_text
from pyibswinfo.constants import TOOL_ERROR_MARKER
from pyibswinfo.registers.definitions import RegisterName

_LOGGER = logging.getLogger(__name__)

_FIELD_NAME_RE = re.compile(r"^(?P<base>[A-Za-z_][A-Za-z0-9_]*)(?:\[(?P<index>\d+)\])?$")
_FIELD_VALUE_RE = re.compile(r"^(?:0[xX][0-9a-fA-F]+|\d+)$")


@dataclass(frozen=True)
class RegisterField:
    """One ``name value`` line of a register dump."""

    base: str
    index: int | None
    value: str

    @property
    def name(self) -> str:
        """Field name as printed by the tool (``psu0[1]``)."""
        return self.base if self.index is None else f"{self.base}[{self.index}]"


@dataclass(frozen=True)
class RegisterFailure:
    """A register query that the tool reported as failed."""

    register: RegisterName
    message: str


@dataclass(frozen=True)
class RegisterDump:
    """Parsed fields of a single register query, in emission order."""

    register: RegisterName
    fields: tuple[RegisterField, ...]

    @classmethod
    def parse(cls, register: RegisterName, text: str) -> RegisterDump:
        """Parse raw tool output into a dump.

        Lines that do not look like ``field value`` pairs (banners, headers,
        separator rules) are skipped. Both ``name | value`` and
        ``name value`` layouts are accepted.
        """
        fields: list[RegisterField] = []
        for line in text.splitlines():
            tokens = line.replace("|", " ").split()
            if len(tokens) < 2:
                continue
            name_match = _FIELD_NAME_RE.match(tokens[0])
            value = tokens[-1]
            if name_match is None or not _FIELD_VALUE_RE.match(value):
                continue
            index = name_match.group("index")
            fields.append(
                RegisterField(
                    base=name_match.group("base"),
                    index=int(index) if index is not None else None,
                    value=value,
                )
            )
        _LOGGER.debug("%s: parsed %d fields", register.value, len(fields))
        return cls(register=register, fields=tuple(fields))

    def get(self, name: str) -> str | None:
        """Return the raw value of the field printed exactly as *name*."""
        for item in self.fields:
            if item.name == name:
                return item.value
        return None

    def family(
        self,
        base: str,
        indices: Container[int] | None = None,
    ) -> tuple[RegisterField, ...]:
        """Return all fields named *base* or ``base[N]``, sorted by index.

        Args:
            base: Field base name (``part_number``, ``psu1``)
            indices: Restrict to these bracketed indices (e.g. ``range(4, 7)``)

        Returns:
            Matching fields ordered by ascending index; unindexed fields keep
            their emission order ahead of indexed ones. Empty if none match.
        """
        matches = [
            item
            for item in self.fields
            if item.base == base
            and (indices is None or (item.index is not None and item.index in indices))
        ]
        return tuple(sorted(matches, key=lambda item: -1 if item.index is None else item.index))

    def bases(self, pattern: str | re.Pattern[str]) -> list[str]:
        """Distinct field base names matching *pattern*, in emission order."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        seen: dict[str, None] = {}
        for item in self.fields:
            if regex.fullmatch(item.base):
                seen.setdefault(item.base, None)
        return list(seen)


RegisterReadResult = RegisterDump | RegisterFailure
"""Outcome of a register read: parsed fields or a structured failure."""


def parse_register_output(
    register: RegisterName,
    text: str,
    returncode: int = 0,
) -> RegisterReadResult:
    """Classify raw tool output as a dump or a failure.

    The tool flags failures with a ``-E-`` marker; the marker is stripped
    from the message so it can be surfaced verbatim.
    """
    if TOOL_ERROR_MARKER in text:
        message = " ".join(text.replace(TOOL_ERROR_MARKER, " ").split())
        return RegisterFailure(register=register, message=message)
    if returncode != 0:
        message = " ".join(text.split()) or f"exit status {returncode}"
        return RegisterFailure(register=register, message=message)
    return RegisterDump.parse(register, text)


def extract_field(
    dump: RegisterDump,
    name: str,
    indices: Container[int] | None = None,
) -> tuple[str, ...] | None:
    """Extract the raw words of a field or indexed field family.

    Args:
        dump: Parsed register dump
        name: Literal field name (``uptime``, ``psu0[1]``) or family base
            name (``serial_number`` matches ``serial_number[0..N]``)
        indices: Optional index filter for families

    Returns:
        Raw values in ascending index order, or None when the dump does not
        contain the field (value unavailable, not an error).
    """
    if indices is None:
        literal = dump.get(name)
        if literal is not None and "[" in name:
            return (literal,)
    words = tuple(item.value for item in dump.family(name, indices))
    return words or None


def extract_int(dump: RegisterDump, name: str) -> int | None:
    """Decode a single hex field to an integer, None when absent."""
    words = extract_field(dump, name)
    if words is None:
        return None
    return hex_to_decimal(words[0])


def extract_text(
    dump: RegisterDump,
    name: str,
    indices: Container[int] | None = None,
) -> str | None:
    """Decode a packed-ASCII field family, None when absent or blank."""
    words = extract_field(dump, name, indices)
    if words is None:
        return None
    return hex_words_to_text(words) or None
