"""Primitive converters for register values.

The register-access tool prints every field as a hexadecimal word
(``0x0000001e``). Strings are packed four ASCII characters per 32-bit word,
most significant byte first, and padded with NUL bytes:

    part_number[0]   | 0x4d534233   -> "MSB3"
    part_number[1]   | 0x37303000   -> "700"

All helpers here are pure functions; decoding errors raise
:class:`~pyibswinfo.exceptions.MalformedHexError` or
:class:`~pyibswinfo.exceptions.DecodeError` instead of guessing a value.
"""

from __future__ import annotations

from collections.abc import Iterable

from pyibswinfo.constants import NODE_DESCRIPTION_WORDS
from pyibswinfo.exceptions import DecodeError, MalformedHexError

# Characters per 32-bit word when text is packed into registers
WORD_BYTES = 4
WORD_HEX_DIGITS = WORD_BYTES * 2

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def strip_hex_prefix(raw: str) -> str:
    """Drop surrounding whitespace and one leading ``0x`` marker from *raw*."""
    digits = raw.strip()
    if digits[:2] in ("0x", "0X"):
        return digits[2:]
    return digits


def hex_to_decimal(raw: str) -> int:
    """Convert a tool-formatted hex value to an integer.

    Args:
        raw: Hex string, with or without ``0x`` prefix and leading zeros
            (``"0x0000001e"``, ``"1e"``)

    Returns:
        Parsed non-negative integer

    Raises:
        MalformedHexError: If nothing is left after the prefix or non-hex
            characters remain
    """
    digits = strip_hex_prefix(raw)
    if not digits or not set(digits) <= _HEX_DIGITS:
        raise MalformedHexError(raw)
    return int(digits, 16)


def decimal_to_hex(value: int) -> str:
    """Format *value* as lowercase hex without prefix (``"4a"``)."""
    if value < 0:
        raise ValueError(f"cannot format negative value {value} as register hex")
    return f"{value:x}"


def hex_words_to_text(words: Iterable[str]) -> str:
    """Decode packed ASCII from a sequence of 32-bit hex words.

    Each word is left-padded to eight hex digits so that short renderings
    such as ``0x0`` keep their four-byte slot. Trailing NUL bytes are
    stripped; embedded spaces and punctuation are kept.

    Args:
        words: Hex words in register index order

    Returns:
        Decoded text, at most ``4 * len(words)`` characters

    Raises:
        MalformedHexError: If a word is not hexadecimal
        DecodeError: If a byte falls outside the ASCII range
    """
    chunks: list[str] = []
    for word in words:
        digits = strip_hex_prefix(word)
        if not digits or not set(digits) <= _HEX_DIGITS or len(digits) > WORD_HEX_DIGITS:
            raise MalformedHexError(word)
        chunks.append(digits.zfill(WORD_HEX_DIGITS))

    raw = bytes.fromhex("".join(chunks))
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as err:
        raise DecodeError("text", raw.hex(), "not ASCII") from err
    return text.rstrip("\x00")


def text_to_hex_words(text: str) -> list[str]:
    """Encode ASCII *text* as 32-bit hex words for a register write.

    The last word is zero-padded to a full four bytes. Word 0 holds the
    leftmost four characters.

    Example:
        >>> text_to_hex_words("secret message")
        ['0x73656372', '0x6574206d', '0x65737361', '0x67650000']

    Raises:
        ValueError: If *text* contains non-ASCII characters
    """
    digits = text.encode("ascii").hex()
    remainder = len(digits) % WORD_HEX_DIGITS
    if remainder:
        digits += "0" * (WORD_HEX_DIGITS - remainder)
    return [
        f"0x{digits[i : i + WORD_HEX_DIGITS]}" for i in range(0, len(digits), WORD_HEX_DIGITS)
    ]


def node_description_words(description: str) -> list[str]:
    """Encode a node description into exactly 16 register words.

    Slots beyond the encoded text are explicitly zero-filled so that a
    previously stored longer description is fully overwritten.

    Raises:
        ValueError: If the description does not fit in 16 words or is not ASCII
    """
    words = text_to_hex_words(description)
    if len(words) > NODE_DESCRIPTION_WORDS:
        raise ValueError(
            f"description needs {len(words)} words, register holds {NODE_DESCRIPTION_WORDS}"
        )
    zero = "0x" + "0" * WORD_HEX_DIGITS
    return words + [zero] * (NODE_DESCRIPTION_WORDS - len(words))


def bitmask_to_binary_string(value: int, width: int) -> str:
    """Render the low *width* bits of *value*, most significant bit first.

    Bits above *width* are ignored, so the result is always exactly
    *width* characters long.
    """
    return "".join(str((value >> bit) & 1) for bit in range(width - 1, -1, -1))


def seconds_to_clock(seconds: int, *, with_days: bool = False) -> str:
    """Format a duration in seconds.

    Args:
        seconds: Duration in seconds
        with_days: Split out whole days (``"3d-04:05:06"``); otherwise hours
            keep counting past 24 (``"76:05:06"``)
    """
    if with_days:
        return "%dd-%02d:%02d:%02d" % (
            seconds // 86400,
            seconds % 86400 // 3600,
            seconds % 3600 // 60,
            seconds % 60,
        )
    return "%02d:%02d:%02d" % (seconds // 3600, seconds % 3600 // 60, seconds % 60)
