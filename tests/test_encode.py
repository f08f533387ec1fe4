from __future__ import annotations

import unittest

from chainprofile.abi_reader import decode_profile_tuple
from chainprofile.hashing import ZERO_HASH, to_bytes32
from chainprofile.languages import LanguageEntry, unpack_languages
from chainprofile.model import ProfileRecord
from chainprofile.tags import pack_ids, unpack_ids
from chainprofile.encode import build_wire_input

from tests.helpers import build_profile_payload


class TestBuildWireInput(unittest.TestCase):
    def test_empty_profile_normalizes_to_zero_values(self) -> None:
        wire = build_wire_input(ProfileRecord())
        self.assertEqual(2, wire.profile_version)
        self.assertEqual(ZERO_HASH, wire.name_hash)
        self.assertEqual(ZERO_HASH, wire.location_city_id)
        self.assertEqual(ZERO_HASH, wire.skills_commit)
        self.assertEqual("0x0000", wire.nationality)
        self.assertEqual(0, wire.languages_packed)
        self.assertEqual(0, wire.location_lat_e6)

    def test_coordinates_require_a_city(self) -> None:
        record = ProfileRecord(location_lat_e6=10_000_000, location_lng_e6=20_000_000)
        wire = build_wire_input(record)
        self.assertEqual(0, wire.location_lat_e6)
        self.assertEqual(0, wire.location_lng_e6)

    def test_coordinates_are_clamped_when_city_is_set(self) -> None:
        record = ProfileRecord(location_city_id="Berlin", location_lat_e6=95_000_000, location_lng_e6=-200_000_000)
        wire = build_wire_input(record)
        self.assertEqual(to_bytes32("Berlin"), wire.location_city_id)
        self.assertEqual(90_000_000, wire.location_lat_e6)
        self.assertEqual(-180_000_000, wire.location_lng_e6)

    def test_scalars_are_floored_masked_and_trimmed(self) -> None:
        record = ProfileRecord(
            profile_version=1,
            age=-4,
            height_cm=-1,
            friends_open_to_mask=0xFF,
            display_name="  Ada  ",
            photo_uri=" ipfs://x ",
        )
        wire = build_wire_input(record)
        self.assertEqual(2, wire.profile_version)
        self.assertEqual(0, wire.age)
        self.assertEqual(0, wire.height_cm)
        self.assertEqual(0x07, wire.friends_open_to_mask)
        self.assertEqual("Ada", wire.display_name)
        self.assertEqual("ipfs://x", wire.photo_uri)

    def test_enums_are_clamped_individually(self) -> None:
        record = ProfileRecord(gender=99, field_bucket=40, diet=3, children=5)
        wire = build_wire_input(record)
        self.assertEqual(7, wire.gender)
        self.assertEqual(16, wire.field_bucket)
        self.assertEqual(3, wire.diet)
        self.assertEqual(2, wire.children)

    def test_commits_and_languages(self) -> None:
        opaque = "0x" + "9f" * 32
        record = ProfileRecord(
            skills_commit="12, 3, 3",
            hobbies_commit=opaque,
            languages=[LanguageEntry("en", 7), LanguageEntry("xx1", 2), LanguageEntry("fr", 3)],
            nationality="de",
            school_id="TU Berlin",
        )
        wire = build_wire_input(record)
        self.assertEqual(pack_ids([3, 12]), wire.skills_commit)
        self.assertEqual([3, 12], unpack_ids(wire.skills_commit))
        self.assertEqual(opaque, wire.hobbies_commit)
        self.assertEqual([LanguageEntry("en", 7), LanguageEntry("fr", 3)], unpack_languages(wire.languages_packed))
        self.assertEqual("0x4445", wire.nationality)
        self.assertEqual(to_bytes32("TU Berlin"), wire.school_id)

    def test_to_json_uses_contract_keys(self) -> None:
        wire = build_wire_input(ProfileRecord(languages=[LanguageEntry("en", 7)]))
        payload = wire.to_json()
        self.assertIn("photoURI", payload)
        self.assertIn("locationLatE6", payload)
        self.assertIn("wantsChildren", payload)
        self.assertIsInstance(payload["languagesPacked"], str)
        self.assertEqual(34, len(payload))
        self.assertEqual(34, len(wire.as_tuple()))
        self.assertEqual("profileVersion", next(iter(payload)))

    def test_decoded_record_survives_encode(self) -> None:
        payload = build_profile_payload(
            age=29,
            nationality="FR",
            languages_packed=build_wire_input(ProfileRecord(languages=[LanguageEntry("fr", 7)])).languages_packed,
            skills_commit=pack_ids([4, 8]),
            location_city_id="0x" + "aa" * 32,
            location_lat_e6=-33_868_820,
            location_lng_e6=151_209_296,
            display_name="Round Trip",
        )
        record = decode_profile_tuple(payload)
        assert record is not None
        wire = build_wire_input(record)
        self.assertEqual(29, wire.age)
        self.assertEqual("0x4652", wire.nationality)
        self.assertEqual(pack_ids([4, 8]), wire.skills_commit)
        self.assertEqual("0x" + "aa" * 32, wire.location_city_id)
        self.assertEqual(-33_868_820, wire.location_lat_e6)
        self.assertEqual(151_209_296, wire.location_lng_e6)
        self.assertEqual("Round Trip", wire.display_name)


if __name__ == "__main__":
    unittest.main()
