from __future__ import annotations

from dataclasses import dataclass


CURRENT_PROFILE_VERSION = 2
MIN_PROFILE_VERSION = 2

WORD_HEX_CHARS = 64

KIND_UINT = "uint"
KIND_BYTES2 = "bytes2"
KIND_BYTES32 = "bytes32"
KIND_INT32 = "int32"
KIND_LANGUAGES = "packed_languages"
KIND_TAG_COMMIT = "tag_commit"
KIND_ENUMS = "packed_enums"
KIND_STRING = "string_offset"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str
    word_index: int


@dataclass(frozen=True)
class EnumSlot:
    name: str
    byte_index: int
    max_value: int


@dataclass(frozen=True)
class ProfileLayout:
    """Head word positions and packed-enum byte order for one contract version.

    Slots are never reinterpreted: a changed layout gets a new version entry.
    """

    version: int
    head_words: int
    exists_word: int
    fields: tuple[FieldSpec, ...]
    enums: tuple[EnumSlot, ...]

    def spec(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"unknown head field: {name}")

    def word_index(self, name: str) -> int:
        return self.spec(name).word_index

    def enum_names(self) -> list[str]:
        return [slot.name for slot in self.enums]

    def enum_max(self, name: str) -> int:
        for slot in self.enums:
            if slot.name == name:
                return slot.max_value
        raise KeyError(f"unknown enum field: {name}")


LAYOUT_V2 = ProfileLayout(
    version=2,
    head_words=17,
    # Word 1 is the contract's `exists` flag; zero means no profile.
    exists_word=1,
    fields=(
        FieldSpec("profileVersion", KIND_UINT, 0),
        FieldSpec("age", KIND_UINT, 2),
        FieldSpec("heightCm", KIND_UINT, 3),
        FieldSpec("nationality", KIND_BYTES2, 4),
        FieldSpec("friendsOpenToMask", KIND_UINT, 5),
        FieldSpec("languagesPacked", KIND_LANGUAGES, 6),
        FieldSpec("locationCityId", KIND_BYTES32, 7),
        FieldSpec("locationLatE6", KIND_INT32, 8),
        FieldSpec("locationLngE6", KIND_INT32, 9),
        FieldSpec("schoolId", KIND_BYTES32, 10),
        FieldSpec("skillsCommit", KIND_TAG_COMMIT, 11),
        FieldSpec("hobbiesCommit", KIND_TAG_COMMIT, 12),
        FieldSpec("nameHash", KIND_BYTES32, 13),
        FieldSpec("packedEnums", KIND_ENUMS, 14),
        FieldSpec("displayName", KIND_STRING, 15),
        FieldSpec("photoURI", KIND_STRING, 16),
    ),
    enums=(
        EnumSlot("gender", 0, 7),
        EnumSlot("relocate", 1, 3),
        EnumSlot("degree", 2, 9),
        EnumSlot("fieldBucket", 3, 16),
        EnumSlot("profession", 4, 10),
        EnumSlot("industry", 5, 10),
        EnumSlot("relationshipStatus", 6, 7),
        EnumSlot("sexuality", 7, 9),
        EnumSlot("ethnicity", 8, 11),
        EnumSlot("datingStyle", 9, 5),
        EnumSlot("children", 10, 2),
        EnumSlot("wantsChildren", 11, 4),
        EnumSlot("drinking", 12, 4),
        EnumSlot("smoking", 13, 4),
        EnumSlot("drugs", 14, 3),
        EnumSlot("lookingFor", 15, 7),
        EnumSlot("religion", 16, 10),
        EnumSlot("pets", 17, 4),
        EnumSlot("diet", 18, 7),
    ),
)

LAYOUTS: dict[int, ProfileLayout] = {
    LAYOUT_V2.version: LAYOUT_V2,
}


def layout_for_version(version: int | None = None) -> ProfileLayout:
    if version is not None and version in LAYOUTS:
        return LAYOUTS[version]
    return LAYOUTS[CURRENT_PROFILE_VERSION]
