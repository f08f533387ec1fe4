"""Hand decoder for the `getProfile(address)` return tuple.

The payload is one dynamic tuple: word 0 holds the byte offset of the tuple
head, the head holds a fixed number of words, and the two strings live in the
tail at byte offsets relative to the head. Structural problems return None;
a bad string only blanks that string.
"""

from __future__ import annotations

from dataclasses import fields

from .enums import unpack_enums
from .hashing import from_bytes2_country_code, hex_to_bytes, hex_word_to_int, normalize_hash, strip_hex_prefix
from .languages import unpack_languages
from .layout import (
    KIND_BYTES2,
    KIND_BYTES32,
    KIND_ENUMS,
    KIND_INT32,
    KIND_LANGUAGES,
    KIND_STRING,
    KIND_TAG_COMMIT,
    KIND_UINT,
    WORD_HEX_CHARS,
    ProfileLayout,
    layout_for_version,
)
from .model import ProfileRecord, contract_key
from .tags import ids_to_csv, unpack_ids


_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000
_ATTR_BY_KEY = {contract_key(item.name): item.name for item in fields(ProfileRecord)}


def decode_int32_word(word: str) -> int:
    low = hex_word_to_int(word) & _INT32_MASK
    if low >= _INT32_SIGN:
        return low - (_INT32_MASK + 1)
    return low


def word_at(raw: str, index: int) -> str:
    start = index * WORD_HEX_CHARS
    end = start + WORD_HEX_CHARS
    if start < 0 or end > len(raw):
        return "0" * WORD_HEX_CHARS
    return raw[start:end]


def decode_dynamic_string(raw: str, tuple_base: int, offset_bytes: int) -> str:
    if offset_bytes < 0:
        return ""
    start = tuple_base + offset_bytes * 2
    if start + WORD_HEX_CHARS > len(raw):
        return ""
    length = hex_word_to_int(raw[start : start + WORD_HEX_CHARS])
    if length <= 0:
        return ""
    data_start = start + WORD_HEX_CHARS
    data_end = data_start + length * 2
    if data_end > len(raw):
        return ""
    decoded = hex_to_bytes(raw[data_start:data_end], field="string")
    if not decoded.ok:
        return ""
    return decoded.unwrap().decode("utf-8", errors="replace")


def _head_fits(raw: str, tuple_base: int, layout: ProfileLayout) -> bool:
    return tuple_base + layout.head_words * WORD_HEX_CHARS <= len(raw)


def decode_profile_tuple(hex_payload: str, layout: ProfileLayout | None = None) -> ProfileRecord | None:
    if not isinstance(hex_payload, str):
        return None
    raw = strip_hex_prefix(hex_payload.strip())
    if len(raw) < WORD_HEX_CHARS:
        return None

    tuple_base = hex_word_to_int(word_at(raw, 0)) * 2
    head_layout = layout or layout_for_version()
    if not _head_fits(raw, tuple_base, head_layout):
        return None

    def tuple_word(index: int) -> str:
        start = tuple_base + index * WORD_HEX_CHARS
        return raw[start : start + WORD_HEX_CHARS]

    if hex_word_to_int(tuple_word(head_layout.exists_word)) == 0:
        return None

    if layout is None:
        version = hex_word_to_int(tuple_word(head_layout.word_index("profileVersion")))
        layout = layout_for_version(version)
        if not _head_fits(raw, tuple_base, layout):
            return None

    record = ProfileRecord()
    for spec in layout.fields:
        word = tuple_word(spec.word_index)
        attr = _ATTR_BY_KEY.get(spec.name)
        if spec.kind == KIND_UINT:
            setattr(record, attr, hex_word_to_int(word))
        elif spec.kind == KIND_BYTES2:
            setattr(record, attr, from_bytes2_country_code("0x" + word[:4]) or "")
        elif spec.kind == KIND_BYTES32:
            setattr(record, attr, normalize_hash("0x" + word))
        elif spec.kind == KIND_INT32:
            setattr(record, attr, decode_int32_word(word))
        elif spec.kind == KIND_LANGUAGES:
            record.languages = unpack_languages(hex_word_to_int(word))
        elif spec.kind == KIND_TAG_COMMIT:
            setattr(record, attr, ids_to_csv(unpack_ids("0x" + word)))
        elif spec.kind == KIND_ENUMS:
            record.set_enum_values(unpack_enums(hex_word_to_int(word), layout))
        elif spec.kind == KIND_STRING:
            setattr(record, attr, decode_dynamic_string(raw, tuple_base, hex_word_to_int(word)))

    if not record.location_city_id:
        record.location_lat_e6 = 0
        record.location_lng_e6 = 0
    return record
