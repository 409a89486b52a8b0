"""
Hex and ABI helpers shared by both backend adapters.

Strict helpers (hex_to_bytes, hex_to_int, hex_to_decimal) raise DecodeError.
decode_abi_string is best-effort: it feeds display fields and returns "" on
anything irregular.
"""

import re
from typing import Any

from .errors import DecodeError

HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")
DECIMAL_PATTERN = re.compile(r"[0-9]+")
UINT64_MAX = 2**64 - 1
WORD_HEX_LEN = 64  # one 32-byte ABI word


def hex_to_bytes(text: str) -> bytes:
    if not isinstance(text, str):
        raise DecodeError("Hex input must be a string.")
    if len(text) % 2 != 0:
        raise DecodeError(f"Hex input has odd length ({len(text)}).")
    if not HEX_PATTERN.fullmatch(text):
        raise DecodeError("Hex input contains non-hex characters.")
    return bytes.fromhex(text)


def _strip_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def hex_to_int(value: Any, field: str = "value") -> int:
    if not isinstance(value, str):
        raise DecodeError(f"{field} must be a hex string.")
    body = _strip_prefix(value.strip())
    if not body or not HEX_PATTERN.fullmatch(body):
        raise DecodeError(f"{field} is not a valid hex value.")
    return int(body, 16)


def decode_abi_string(value: Any) -> str:
    """Decode a single ABI `string`/`bytes` return value, or a raw bytes32."""
    if not isinstance(value, str):
        return ""

    # Offset word + length word need 2 * 64 hex chars after the prefix.
    if len(value) < 2 + 2 * WORD_HEX_LEN:
        if len(value) < 2 + WORD_HEX_LEN:
            return ""
        try:
            raw = hex_to_bytes(value[2 : 2 + WORD_HEX_LEN])
        except DecodeError:
            return ""
        return raw.rstrip(b"\x00").decode("utf-8", errors="replace")

    body = value[2:]
    try:
        length = int(body[WORD_HEX_LEN : 2 * WORD_HEX_LEN], 16)
    except ValueError:
        return ""
    if length == 0:
        return ""

    start = 2 * WORD_HEX_LEN
    end = start + length * 2
    if end > len(body):
        return ""

    try:
        raw = hex_to_bytes(body[start:end])
    except DecodeError:
        return ""
    return raw.decode("utf-8", errors="replace")


def to_hex_quantity(value: str) -> str:
    """Convert a decimal block number/index to 0x hex for raw-proxy actions.

    "latest" and anything that is not a uint64 decimal pass through unchanged.
    """
    if value == "latest" or not DECIMAL_PATTERN.fullmatch(value):
        return value
    number = int(value)
    if number > UINT64_MAX:
        return value
    return hex(number)


def hex_to_uint64_text(value: str) -> str:
    """0x hex block number -> decimal text; returned unchanged if it does not fit."""
    if len(value) > 2 and value.startswith("0x") and HEX_PATTERN.fullmatch(value[2:]):
        number = int(value[2:], 16)
        if number <= UINT64_MAX:
            return str(number)
    return value


def hex_to_decimal(value: str, field: str = "balance") -> str:
    """0x hex quantity -> arbitrary-precision decimal text (wei amounts)."""
    if len(value) > 2 and value.startswith("0x"):
        return str(hex_to_int(value, field))
    return value


def pad_address(address: str) -> str:
    """Left-pad an address to one 32-byte word, without 0x."""
    return _strip_prefix(address).rjust(WORD_HEX_LEN, "0")
