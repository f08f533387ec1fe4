from __future__ import annotations

import unittest

from chainprofile.languages import LanguageEntry
from chainprofile.layout import LAYOUT_V2, layout_for_version
from chainprofile.model import ENUM_ATTRS, ProfileRecord, contract_key


class TestProfileRecord(unittest.TestCase):
    def test_contract_keys(self) -> None:
        self.assertEqual("photoURI", contract_key("photo_uri"))
        self.assertEqual("locationLngE6", contract_key("location_lng_e6"))
        self.assertEqual("friendsOpenToMask", contract_key("friends_open_to_mask"))
        self.assertEqual("age", contract_key("age"))

    def test_enum_attrs_follow_layout_order(self) -> None:
        self.assertEqual(LAYOUT_V2.enum_names(), list(ENUM_ATTRS))

    def test_json_round_trip(self) -> None:
        record = ProfileRecord(
            display_name="Ada",
            age=36,
            languages=[LanguageEntry("en", 7)],
            skills_commit="1,2",
            religion=2,
        )
        restored = ProfileRecord.from_json(record.to_json())
        self.assertEqual(record, restored)

    def test_from_json_is_lenient(self) -> None:
        record = ProfileRecord.from_json(
            {
                "age": "41",
                "heightCm": "tall",
                "displayName": None,
                "languages": [{"code": "DE", "proficiency": "4"}, ["es", 2], "junk"],
                "unknownKey": 1,
            }
        )
        self.assertEqual(41, record.age)
        self.assertEqual(0, record.height_cm)
        self.assertEqual("", record.display_name)
        self.assertEqual([LanguageEntry("de", 4), LanguageEntry("es", 2)], record.languages)
        self.assertEqual(ProfileRecord(), ProfileRecord.from_json("nope"))  # type: ignore[arg-type]

    def test_enum_values_round_trip(self) -> None:
        record = ProfileRecord()
        record.set_enum_values({"wantsChildren": 3, "lookingFor": 4})
        values = record.enum_values()
        self.assertEqual(3, record.wants_children)
        self.assertEqual(4, values["lookingFor"])
        self.assertEqual(19, len(values))


class TestLayout(unittest.TestCase):
    def test_head_has_seventeen_distinct_words(self) -> None:
        indices = [spec.word_index for spec in LAYOUT_V2.fields] + [LAYOUT_V2.exists_word]
        self.assertEqual(17, LAYOUT_V2.head_words)
        self.assertEqual(list(range(17)), sorted(indices))

    def test_enum_bytes_are_consecutive(self) -> None:
        self.assertEqual(list(range(19)), [slot.byte_index for slot in LAYOUT_V2.enums])

    def test_unknown_version_falls_back_to_current(self) -> None:
        self.assertIs(LAYOUT_V2, layout_for_version(99))
        self.assertIs(LAYOUT_V2, layout_for_version(None))
        self.assertEqual(16, LAYOUT_V2.word_index("photoURI"))
        with self.assertRaises(KeyError):
            LAYOUT_V2.spec("nope")


if __name__ == "__main__":
    unittest.main()
