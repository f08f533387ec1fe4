from __future__ import annotations

from .enums import clamp_enums
from .hashing import ZERO_HASH, to_bytes2_country_code, to_bytes32
from .languages import pack_languages
from .layout import MIN_PROFILE_VERSION, ProfileLayout, layout_for_version
from .model import ENUM_ATTRS, ProfileRecord, WireProfileInput
from .tags import to_tag_commit


LAT_E6_LIMIT = 90_000_000
LNG_E6_LIMIT = 180_000_000
FRIENDS_MASK_BITS = 0x07


def _clamp(value: int, low: int, high: int) -> int:
    if value < low:
        return low
    if value > high:
        return high
    return value


def build_wire_input(record: ProfileRecord, layout: ProfileLayout | None = None) -> WireProfileInput:
    """Normalize an edited record into the write-call struct.

    Total: every out-of-range or malformed value is clamped, hashed or zeroed.
    """

    layout = layout or layout_for_version(record.profile_version)
    city_id = to_bytes32(record.location_city_id)
    has_city = city_id != ZERO_HASH
    lat = _clamp(int(record.location_lat_e6), -LAT_E6_LIMIT, LAT_E6_LIMIT) if has_city else 0
    lng = _clamp(int(record.location_lng_e6), -LNG_E6_LIMIT, LNG_E6_LIMIT) if has_city else 0
    enums = clamp_enums(record.enum_values(), layout)

    return WireProfileInput(
        profile_version=max(MIN_PROFILE_VERSION, int(record.profile_version)),
        display_name=(record.display_name or "").strip(),
        name_hash=to_bytes32(record.name_hash),
        age=max(0, int(record.age)),
        height_cm=max(0, int(record.height_cm)),
        nationality=to_bytes2_country_code(record.nationality),
        languages_packed=pack_languages(record.languages),
        friends_open_to_mask=int(record.friends_open_to_mask) & FRIENDS_MASK_BITS,
        location_city_id=city_id,
        location_lat_e6=lat,
        location_lng_e6=lng,
        school_id=to_bytes32(record.school_id),
        skills_commit=to_tag_commit(record.skills_commit),
        hobbies_commit=to_tag_commit(record.hobbies_commit),
        photo_uri=(record.photo_uri or "").strip(),
        **{attr: enums[name] for name, attr in ENUM_ATTRS.items()},
    )
