from __future__ import annotations

from typing import Any

from .hashing import from_bytes2_country_code, normalize_hash
from .languages import unpack_languages
from .layout import CURRENT_PROFILE_VERSION
from .model import ENUM_ATTRS, ProfileRecord
from .tags import ids_to_csv, unpack_ids


PROFILE_QUERY_FIELDS: tuple[str, ...] = (
    "profileVersion",
    "displayName",
    "nameHash",
    "age",
    "heightCm",
    "nationality",
    "languagesPacked",
    "friendsOpenToMask",
    "locationCityId",
    "locationLatE6",
    "locationLngE6",
    "schoolId",
    "skillsCommit",
    "hobbiesCommit",
    "photoURI",
    *ENUM_ATTRS.keys(),
)


def build_profile_query(address: str) -> str:
    body = "\n".join(f"    {name}" for name in PROFILE_QUERY_FIELDS)
    return "{\n  profile(id: \"" + address.lower() + "\") {\n" + body + "\n  }\n}"


def _opt_int(profile: dict[str, Any], key: str, default: int = 0) -> int:
    value = profile.get(key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _opt_str(profile: dict[str, Any], key: str) -> str:
    value = profile.get(key)
    return value if isinstance(value, str) else ""


def record_from_subgraph(payload: Any) -> ProfileRecord | None:
    """Map a `{"data": {"profile": {...}}}` response onto a ProfileRecord.

    The indexer exposes the raw contract values, so commits and packed words go
    through the same unpackers as the ABI path.
    """

    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    profile = data.get("profile") if isinstance(data, dict) else None
    if not isinstance(profile, dict):
        return None

    record = ProfileRecord(
        profile_version=_opt_int(profile, "profileVersion", CURRENT_PROFILE_VERSION),
        display_name=_opt_str(profile, "displayName"),
        name_hash=normalize_hash(_opt_str(profile, "nameHash")),
        age=_opt_int(profile, "age"),
        height_cm=_opt_int(profile, "heightCm"),
        nationality=from_bytes2_country_code(_opt_str(profile, "nationality")) or "",
        languages=unpack_languages(_opt_str(profile, "languagesPacked") or "0"),
        friends_open_to_mask=_opt_int(profile, "friendsOpenToMask"),
        location_city_id=normalize_hash(_opt_str(profile, "locationCityId")),
        location_lat_e6=_opt_int(profile, "locationLatE6"),
        location_lng_e6=_opt_int(profile, "locationLngE6"),
        school_id=normalize_hash(_opt_str(profile, "schoolId")),
        skills_commit=ids_to_csv(unpack_ids(_opt_str(profile, "skillsCommit"))),
        hobbies_commit=ids_to_csv(unpack_ids(_opt_str(profile, "hobbiesCommit"))),
        photo_uri=_opt_str(profile, "photoURI"),
    )
    record.set_enum_values({name: _opt_int(profile, name) for name in ENUM_ATTRS})
    if not record.location_city_id:
        record.location_lat_e6 = 0
        record.location_lng_e6 = 0
    return record
