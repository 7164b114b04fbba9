"""
Calldata encoding and return-data decoding for static ABI types.

The contracts this client talks to only take and return static words
(uint/int/bool/address/bytesN), so dynamic types are rejected.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence

from eth_utils import keccak, to_checksum_address

WORD_HEX = 64
_UINT_RE = re.compile(r"^uint(\d*)$")
_INT_RE = re.compile(r"^int(\d*)$")
_BYTES_RE = re.compile(r"^bytes(\d+)$")


class AbiEncodingError(ValueError):
    """Arguments or return data do not match the ABI fragment."""


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def _bits(match: re.Match) -> int:
    return int(match.group(1) or 256)


def function_signature(fragment: Dict[str, Any]) -> str:
    types = ",".join(item["type"] for item in fragment.get("inputs", []))
    return f"{fragment['name']}({types})"


def function_selector(fragment: Dict[str, Any]) -> str:
    return "0x" + keccak(text=function_signature(fragment))[:4].hex()


def encode_value(abi_type: str, value: Any) -> str:
    """Encode one static value as a 32-byte word (hex, no prefix)."""
    match = _UINT_RE.match(abi_type)
    if match is not None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise AbiEncodingError(f"{abi_type} expects an int, got {value!r}")
        if value < 0 or value >= 2 ** _bits(match):
            raise AbiEncodingError(f"{value} out of range for {abi_type}")
        return format(value, "064x")
    match = _INT_RE.match(abi_type)
    if match is not None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise AbiEncodingError(f"{abi_type} expects an int, got {value!r}")
        bound = 2 ** (_bits(match) - 1)
        if not -bound <= value < bound:
            raise AbiEncodingError(f"{value} out of range for {abi_type}")
        return format(value % 2**256, "064x")
    if abi_type == "bool":
        if not isinstance(value, bool):
            raise AbiEncodingError(f"bool expects True/False, got {value!r}")
        return format(int(value), "064x")
    if abi_type == "address":
        addr = _strip_0x(str(value)).lower()
        if len(addr) != 40:
            raise AbiEncodingError(f"Invalid address length: {value}")
        return addr.rjust(WORD_HEX, "0")
    match = _BYTES_RE.match(abi_type)
    if match is not None:
        size = int(match.group(1))
        raw = bytes(value) if isinstance(value, (bytes, bytearray)) else bytes.fromhex(_strip_0x(str(value)))
        if len(raw) > size:
            raise AbiEncodingError(f"{abi_type} value too long")
        return raw.hex().ljust(WORD_HEX, "0")
    raise AbiEncodingError(f"Unsupported ABI type: {abi_type}")


def decode_value(abi_type: str, word: str) -> Any:
    value = int(word, 16)
    if _UINT_RE.match(abi_type):
        return value
    if _INT_RE.match(abi_type):
        return value - 2**256 if value >= 2**255 else value
    if abi_type == "bool":
        return value != 0
    if abi_type == "address":
        return to_checksum_address("0x" + word[-40:])
    match = _BYTES_RE.match(abi_type)
    if match is not None:
        return bytes.fromhex(word)[: int(match.group(1))]
    raise AbiEncodingError(f"Unsupported ABI type: {abi_type}")


def encode_call(fragment: Dict[str, Any], args: Sequence[Any]) -> str:
    inputs: List[Dict[str, Any]] = fragment.get("inputs", [])
    if len(args) != len(inputs):
        raise AbiEncodingError(
            f"{fragment['name']} expects {len(inputs)} argument(s), got {len(args)}"
        )
    body = "".join(encode_value(item["type"], arg) for item, arg in zip(inputs, args))
    return function_selector(fragment) + body


def decode_output(fragment: Dict[str, Any], data: str) -> Any:
    """Decode return data; one output is returned bare, several as a tuple."""
    outputs: List[Dict[str, Any]] = fragment.get("outputs", [])
    if not outputs:
        return None
    hex_data = _strip_0x(data or "")
    if len(hex_data) < WORD_HEX * len(outputs):
        raise AbiEncodingError(
            f"{fragment['name']} returned {len(hex_data) // 2} bytes, expected {32 * len(outputs)}"
        )
    values = tuple(
        decode_value(item["type"], hex_data[i * WORD_HEX:(i + 1) * WORD_HEX])
        for i, item in enumerate(outputs)
    )
    return values[0] if len(values) == 1 else values
