from __future__ import annotations

from typing import Iterable

from .hashing import ZERO_HASH, hex_word_to_int, is_bytes32_hex, strip_hex_prefix


MAX_TAG_IDS = 16
MIN_TAG_ID = 1
MAX_TAG_ID = 0xFFFF

_SLOT_HEX_CHARS = 4


def parse_ids_csv(csv: str) -> list[int]:
    ids: set[int] = set()
    for token in (csv or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            value = int(token, 10)
        except ValueError:
            continue
        if MIN_TAG_ID <= value <= MAX_TAG_ID:
            ids.add(value)
    return sorted(ids)[:MAX_TAG_IDS]


def pack_ids(ids: Iterable[int]) -> str:
    """Write up to 16 ids as big-endian 16-bit slots of one bytes32 word.

    Ids are deduplicated and sorted ascending; anything outside 1..65535 is dropped.
    """

    slots = sorted({int(value) for value in ids if MIN_TAG_ID <= int(value) <= MAX_TAG_ID})[:MAX_TAG_IDS]
    if not slots:
        return ZERO_HASH
    slots.extend([0] * (MAX_TAG_IDS - len(slots)))
    return "0x" + "".join(f"{value:04x}" for value in slots)


def unpack_ids(word: str) -> list[int]:
    raw = strip_hex_prefix((word or "").strip())
    if len(raw) != MAX_TAG_IDS * _SLOT_HEX_CHARS:
        return []
    out: list[int] = []
    for start in range(0, len(raw), _SLOT_HEX_CHARS):
        value = hex_word_to_int(raw[start : start + _SLOT_HEX_CHARS])
        if value > 0:
            out.append(value)
    return out


def ids_to_csv(ids: Iterable[int]) -> str:
    return ",".join(str(int(value)) for value in ids)


def to_tag_commit(raw: str) -> str:
    """Pass an existing bytes32 commitment through, otherwise pack a CSV of ids.

    A passed-through commitment is opaque: nothing on the wire marks it apart
    from a packed id set.
    """

    trimmed = (raw or "").strip()
    if not trimmed:
        return ZERO_HASH
    if is_bytes32_hex(trimmed):
        return trimmed.lower()
    return pack_ids(parse_ids_csv(trimmed))
