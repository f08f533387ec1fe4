from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from .languages import LanguageEntry
from .layout import CURRENT_PROFILE_VERSION


# Contract enum name -> ProfileRecord attribute, in packed byte order.
ENUM_ATTRS: dict[str, str] = {
    "gender": "gender",
    "relocate": "relocate",
    "degree": "degree",
    "fieldBucket": "field_bucket",
    "profession": "profession",
    "industry": "industry",
    "relationshipStatus": "relationship_status",
    "sexuality": "sexuality",
    "ethnicity": "ethnicity",
    "datingStyle": "dating_style",
    "children": "children",
    "wantsChildren": "wants_children",
    "drinking": "drinking",
    "smoking": "smoking",
    "drugs": "drugs",
    "lookingFor": "looking_for",
    "religion": "religion",
    "pets": "pets",
    "diet": "diet",
}

_KEY_OVERRIDES = {"photo_uri": "photoURI"}


def contract_key(attr: str) -> str:
    if attr in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[attr]
    head, *rest = attr.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _as_int(value: Any, *, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return int(default)


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class ProfileRecord:
    """Decoded, editable profile.

    Hash-like fields hold "" for the zero sentinel. Commit fields hold either a
    CSV of tag ids or an opaque bytes32 commitment.
    """

    profile_version: int = CURRENT_PROFILE_VERSION
    display_name: str = ""
    name_hash: str = ""
    age: int = 0
    height_cm: int = 0
    nationality: str = ""
    languages: list[LanguageEntry] = field(default_factory=list)
    friends_open_to_mask: int = 0
    location_city_id: str = ""
    location_lat_e6: int = 0
    location_lng_e6: int = 0
    school_id: str = ""
    skills_commit: str = ""
    hobbies_commit: str = ""
    photo_uri: str = ""
    gender: int = 0
    relocate: int = 0
    degree: int = 0
    field_bucket: int = 0
    profession: int = 0
    industry: int = 0
    relationship_status: int = 0
    sexuality: int = 0
    ethnicity: int = 0
    dating_style: int = 0
    children: int = 0
    wants_children: int = 0
    drinking: int = 0
    smoking: int = 0
    drugs: int = 0
    looking_for: int = 0
    religion: int = 0
    pets: int = 0
    diet: int = 0

    def enum_values(self) -> dict[str, int]:
        return {name: int(getattr(self, attr)) for name, attr in ENUM_ATTRS.items()}

    def set_enum_values(self, values: dict[str, int]) -> None:
        for name, attr in ENUM_ATTRS.items():
            if name in values:
                setattr(self, attr, int(values[name]))

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "languages":
                value = [entry.to_json() for entry in value]
            out[contract_key(item.name)] = value
        return out

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ProfileRecord:
        record = cls()
        if not isinstance(payload, dict):
            return record
        for item in fields(cls):
            key = contract_key(item.name)
            if key not in payload:
                continue
            raw = payload[key]
            if item.name == "languages":
                record.languages = _languages_from_json(raw)
            elif isinstance(getattr(record, item.name), int):
                setattr(record, item.name, _as_int(raw, default=getattr(record, item.name)))
            else:
                setattr(record, item.name, _as_str(raw))
        return record


def _languages_from_json(raw: Any) -> list[LanguageEntry]:
    if not isinstance(raw, list):
        return []
    out: list[LanguageEntry] = []
    for item in raw:
        if isinstance(item, dict):
            code = _as_str(item.get("code")).strip().lower()
            proficiency = _as_int(item.get("proficiency"))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            code = _as_str(item[0]).strip().lower()
            proficiency = _as_int(item[1])
        else:
            continue
        out.append(LanguageEntry(code=code, proficiency=proficiency))
    return out


@dataclass(frozen=True)
class WireProfileInput:
    """ABI-ready struct for the profile write call, in contract field order."""

    profile_version: int
    display_name: str
    name_hash: str
    age: int
    height_cm: int
    nationality: str
    languages_packed: int
    friends_open_to_mask: int
    location_city_id: str
    location_lat_e6: int
    location_lng_e6: int
    school_id: str
    skills_commit: str
    hobbies_commit: str
    photo_uri: str
    gender: int
    relocate: int
    degree: int
    field_bucket: int
    profession: int
    industry: int
    relationship_status: int
    sexuality: int
    ethnicity: int
    dating_style: int
    children: int
    wants_children: int
    drinking: int
    smoking: int
    drugs: int
    looking_for: int
    religion: int
    pets: int
    diet: int

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "languages_packed":
                # uint256 does not fit a JSON number safely.
                value = str(value)
            out[contract_key(item.name)] = value
        return out

    def as_tuple(self) -> tuple[object, ...]:
        return tuple(getattr(self, item.name) for item in fields(self))

