"""Exceptions raised by pyibswinfo.

Every error derives from :class:`IbswinfoError` so callers can use a single
``except IbswinfoError`` around a whole query/decode/render cycle.
"""

from __future__ import annotations


class IbswinfoError(Exception):
    """Base exception for all pyibswinfo errors."""

    pass


class ConfigurationError(IbswinfoError):
    """Invalid or conflicting run options (detected before any query)."""

    pass


class DependencyError(IbswinfoError):
    """A required external tool is missing or too old."""

    pass


class DeviceError(IbswinfoError):
    """The switch device cannot be found or has an unexpected name."""

    pass


class RegisterFetchError(IbswinfoError):
    """The register-access tool reported an error for a register query."""

    def __init__(self, register: str, message: str) -> None:
        """Initialize with the register name and the tool's message.

        Args:
            register: Register mnemonic that was queried (e.g. ``MGIR``)
            message: Error text reported by the tool
        """
        self.register = register
        self.message = message
        super().__init__(message or f"failed to read register {register}")


class RegisterWriteError(RegisterFetchError):
    """The register-access tool rejected a register write."""

    pass


class SubnetQueryError(IbswinfoError):
    """The subnet management query for the port count failed."""

    pass


class DecodeError(IbswinfoError):
    """A raw register field could not be decoded."""

    def __init__(self, field: str, raw: str, reason: str = "") -> None:
        self.field = field
        self.raw = raw
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot decode {field} value {raw!r}{detail}")


class MalformedHexError(DecodeError, ValueError):
    """A value expected to be hexadecimal contains non-hex characters."""

    def __init__(self, raw: str, field: str = "value") -> None:
        super().__init__(field, raw, "not a hexadecimal number")
