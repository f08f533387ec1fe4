from __future__ import annotations

import re
import string

from web3 import Web3

from .result import Result


ZERO_HASH = "0x" + "0" * 64
ZERO_BYTES2 = "0x0000"

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")
_BYTES32_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_ASCII_LETTERS = frozenset(string.ascii_letters)


def keccak256(data: bytes) -> bytes:
    return bytes(Web3.keccak(primitive=data))


def is_ascii_letter(char: str) -> bool:
    return char in _ASCII_LETTERS


def is_bytes32_hex(value: str) -> bool:
    return bool(_BYTES32_RE.match(value or ""))


def strip_hex_prefix(value: str) -> str:
    text = value or ""
    if text[:2] in {"0x", "0X"}:
        return text[2:]
    return text


def to_bytes32(value: str) -> str:
    """Normalize a hash-like field to a lowercase bytes32 hex string.

    Well-formed bytes32 input passes through lowercased, blank input maps to
    ZERO_HASH and anything else is keccak-hashed after trimming.
    """

    trimmed = (value or "").strip()
    if not trimmed:
        return ZERO_HASH
    if is_bytes32_hex(trimmed):
        return trimmed.lower()
    return "0x" + keccak256(trimmed.encode("utf-8")).hex()


def normalize_hash(raw: str | None) -> str:
    value = (raw or "").strip().lower()
    if not value or value == ZERO_HASH:
        return ""
    return value


def normalize_address(address: str | None) -> str | None:
    value = (address or "").strip().lower()
    if not value.startswith("0x") or len(value) != 42:
        return None
    if not _HEX_RE.match(value[2:]):
        return None
    return value


def to_bytes2_country_code(code: str) -> str:
    trimmed = (code or "").strip().upper()
    if len(trimmed) < 2:
        return ZERO_BYTES2
    first, second = trimmed[0], trimmed[1]
    if not is_ascii_letter(first) or not is_ascii_letter(second):
        return ZERO_BYTES2
    return f"0x{ord(first):02x}{ord(second):02x}"


def from_bytes2_country_code(hex_value: str) -> str | None:
    raw = strip_hex_prefix((hex_value or "").strip())
    if len(raw) < 4 or not _HEX_RE.match(raw[:4]):
        return None
    value = int(raw[:4], 16)
    if value == 0:
        return None
    first = chr((value >> 8) & 0xFF)
    second = chr(value & 0xFF)
    if not is_ascii_letter(first) or not is_ascii_letter(second):
        return None
    return f"{first}{second}".upper()


def function_selector(signature: str) -> str:
    return keccak256(signature.encode("utf-8"))[:4].hex()


def hex_word_to_int(word: str) -> int:
    text = (word or "").strip()
    if not text or not _HEX_RE.match(text):
        return 0
    return int(text, 16)


def hex_to_bytes(value: str, *, field: str = "hex") -> Result[bytes]:
    raw = strip_hex_prefix((value or "").strip())
    if len(raw) % 2 != 0:
        return Result.failure(field, f"odd-length hex string ({len(raw)} chars)")
    if not _HEX_RE.match(raw):
        return Result.failure(field, "non-hex characters in input")
    return Result.success(bytes.fromhex(raw))
