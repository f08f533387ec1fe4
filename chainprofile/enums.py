from __future__ import annotations

from typing import Mapping

from .layout import ProfileLayout, layout_for_version


def enum_at(word: int, index: int) -> int:
    return (int(word) >> (index * 8)) & 0xFF


def unpack_enums(word: int, layout: ProfileLayout | None = None) -> dict[str, int]:
    """Read path only: the contract exposes enums as one packed word."""

    layout = layout or layout_for_version()
    return {slot.name: enum_at(word, slot.byte_index) for slot in layout.enums}


def clamp_enum(name: str, value: int, layout: ProfileLayout | None = None) -> int:
    layout = layout or layout_for_version()
    upper = layout.enum_max(name)
    return max(0, min(int(value), upper))


def clamp_enums(values: Mapping[str, int], layout: ProfileLayout | None = None) -> dict[str, int]:
    """Write path: each enum goes out as its own clamped uint8, never re-packed."""

    layout = layout or layout_for_version()
    return {slot.name: clamp_enum(slot.name, values.get(slot.name, 0), layout) for slot in layout.enums}
