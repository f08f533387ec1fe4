from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .hashing import is_ascii_letter


MAX_LANGUAGES = 8
SLOT_BITS = 32
MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 7

_SLOT_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class LanguageEntry:
    """One spoken language. Codes are held lowercase; the wire stores them uppercase."""

    code: str
    proficiency: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", str(self.code).strip().lower())

    def to_json(self) -> dict[str, object]:
        return {"code": self.code, "proficiency": int(self.proficiency)}


def _coerce_entry(entry: LanguageEntry | tuple[str, int]) -> LanguageEntry:
    if isinstance(entry, LanguageEntry):
        return entry
    code, proficiency = entry
    return LanguageEntry(code=str(code), proficiency=int(proficiency))


def _slot_shift(index: int) -> int:
    return (MAX_LANGUAGES - 1 - index) * SLOT_BITS


def is_valid_language(entry: LanguageEntry) -> bool:
    code = (entry.code or "").strip()
    if len(code) != 2 or not all(is_ascii_letter(char) for char in code):
        return False
    return MIN_PROFICIENCY <= entry.proficiency <= MAX_PROFICIENCY


def pack_languages(entries: Iterable[LanguageEntry | tuple[str, int]]) -> int:
    """Pack up to 8 (code, proficiency) pairs into one uint256.

    Slot i is the entry's list position, so an invalid entry leaves its slot
    empty instead of shifting later entries up.
    """

    packed = 0
    for index, raw in enumerate(list(entries)[:MAX_LANGUAGES]):
        entry = _coerce_entry(raw)
        if not is_valid_language(entry):
            continue
        upper = entry.code.upper()
        language_value = (ord(upper[0]) << 8) | ord(upper[1])
        slot_value = (language_value << 16) | ((entry.proficiency & 0xFF) << 8)
        packed |= slot_value << _slot_shift(index)
    return packed


def parse_packed_word(value: int | str | None) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    text = (value or "").strip()
    if not text:
        return 0
    try:
        if text[:2] in {"0x", "0X"}:
            return int(text[2:] or "0", 16)
        return int(text, 10)
    except ValueError:
        return 0


def unpack_languages(word: int | str | None) -> list[LanguageEntry]:
    packed = parse_packed_word(word)
    if packed == 0:
        return []

    out: list[LanguageEntry] = []
    for index in range(MAX_LANGUAGES):
        slot = (packed >> _slot_shift(index)) & _SLOT_MASK
        if slot == 0:
            continue
        language_value = (slot >> 16) & 0xFFFF
        proficiency = (slot >> 8) & 0xFF
        if language_value == 0 or not (MIN_PROFICIENCY <= proficiency <= MAX_PROFICIENCY):
            continue
        first = chr((language_value >> 8) & 0xFF)
        second = chr(language_value & 0xFF)
        if not is_ascii_letter(first) or not is_ascii_letter(second):
            continue
        out.append(LanguageEntry(code=first + second, proficiency=proficiency))
    return out
