"""Display tables for profile enums.

Static data for the UI layer. The codec modules never import this.
"""

from __future__ import annotations

from dataclasses import dataclass

from .model import ProfileRecord


@dataclass(frozen=True)
class EnumOption:
    value: int
    label: str


def _options(*labels: str) -> tuple[EnumOption, ...]:
    return tuple(EnumOption(value=index, label=label) for index, label in enumerate(("Not specified", *labels)))


ENUM_OPTIONS: dict[str, tuple[EnumOption, ...]] = {
    "gender": _options("Woman", "Man", "Non-binary", "Trans woman", "Trans man", "Intersex", "Other"),
    "relocate": _options("No", "Maybe", "Yes"),
    "degree": _options(
        "No degree", "High school", "Associate", "Bachelor", "Master", "Doctorate", "Professional", "Bootcamp", "Other"
    ),
    "fieldBucket": _options(
        "Computer science",
        "Engineering",
        "Math / Stats",
        "Physical sciences",
        "Biology",
        "Medicine / Health",
        "Business",
        "Economics",
        "Law",
        "Social sciences",
        "Psychology",
        "Arts / Design",
        "Humanities",
        "Education",
        "Communications",
        "Other",
    ),
    "profession": _options(
        "Software engineer", "Product", "Design", "Data", "Sales", "Marketing", "Operations", "Founder", "Student", "Other"
    ),
    "industry": _options(
        "Technology", "Finance", "Healthcare", "Education", "Manufacturing", "Retail", "Media", "Government", "Nonprofit", "Other"
    ),
    "relationshipStatus": _options(
        "Single", "In a relationship", "Married", "Divorced", "Separated", "Widowed", "It's complicated"
    ),
    "sexuality": _options("Straight", "Gay", "Lesbian", "Bisexual", "Pansexual", "Asexual", "Queer", "Questioning", "Other"),
    "ethnicity": _options(
        "White",
        "Black",
        "East Asian",
        "South Asian",
        "Southeast Asian",
        "Middle Eastern / North African",
        "Hispanic / Latino/a",
        "Native American / Indigenous",
        "Pacific Islander",
        "Mixed",
        "Other",
    ),
    "datingStyle": _options("Monogamous", "Non-monogamous", "Open relationship", "Polyamorous", "Other"),
    "children": _options("None", "Has children"),
    "wantsChildren": _options("No", "Yes", "Open to it", "Unsure"),
    "drinking": _options("Never", "Rarely", "Socially", "Often"),
    "smoking": _options("No", "Socially", "Yes", "Vape"),
    "drugs": _options("Never", "Sometimes", "Often"),
    "lookingFor": _options("Friendship", "Casual", "Serious", "Long-term", "Marriage", "Not sure", "Other"),
    "religion": _options(
        "Agnostic", "Atheist", "Buddhist", "Christian", "Hindu", "Jewish", "Muslim", "Sikh", "Spiritual", "Other"
    ),
    "pets": _options("No pets", "Has pets", "Wants pets", "Allergic"),
    "diet": _options("Omnivore", "Vegetarian", "Vegan", "Pescatarian", "Halal", "Kosher", "Other"),
}

PROFICIENCY_LABELS = {7: "Native", 6: "C2", 5: "C1", 4: "B2", 3: "B1", 2: "A2", 1: "A1"}

FRIENDS_LABELS = ((0x1, "Men"), (0x2, "Women"), (0x4, "Non-binary"))


def proficiency_label(level: int) -> str:
    return PROFICIENCY_LABELS.get(level, "Not specified")


def friends_labels(mask: int) -> list[str]:
    return [label for bit, label in FRIENDS_LABELS if mask & bit]


def enum_label(options: tuple[EnumOption, ...], value: int) -> str | None:
    if value <= 0:
        return None
    for option in options:
        if option.value == value:
            return option.label
    return None


def has_coords(lat_e6: int, lng_e6: int) -> bool:
    if lat_e6 == 0 and lng_e6 == 0:
        return False
    return -90_000_000 <= lat_e6 <= 90_000_000 and -180_000_000 <= lng_e6 <= 180_000_000


def profile_labels(record: ProfileRecord) -> dict[str, object]:
    """Human-readable view of a record's coded fields; unset enums are omitted."""

    enums: dict[str, str] = {}
    for name, value in record.enum_values().items():
        label = enum_label(ENUM_OPTIONS[name], value)
        if label is not None:
            enums[name] = label
    return {
        "enums": enums,
        "languages": {entry.code: proficiency_label(entry.proficiency) for entry in record.languages},
        "friendsOpenTo": friends_labels(record.friends_open_to_mask),
        "hasCoords": has_coords(record.location_lat_e6, record.location_lng_e6),
    }
