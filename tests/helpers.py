from __future__ import annotations

from contextlib import contextmanager
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import json
import threading

from chainprofile.layout import LAYOUT_V2

ZERO_WORD = "0" * 64
HEAD_WORDS = 17


def uint_word(value: int) -> str:
    return f"{value % (1 << 256):064x}"


def int_word(value: int) -> str:
    # ABI int32 is sign-extended to the full word.
    return uint_word(value)


def bytes32_word(value: str) -> str:
    raw = value[2:] if value.startswith("0x") else value
    return raw.lower().rjust(64, "0") if raw else ZERO_WORD


def bytes2_word(code: str) -> str:
    if not code:
        return ZERO_WORD
    return f"{ord(code[0]):02x}{ord(code[1]):02x}".ljust(64, "0")


def string_tail(text: str) -> str:
    data = text.encode("utf-8").hex()
    padded = data.ljust(((len(data) + 63) // 64) * 64, "0")
    return uint_word(len(text.encode("utf-8"))) + padded


def pack_enums(values: dict[str, int]) -> int:
    # Storage packing of the enum word; the write path never packs.
    word = 0
    for slot in LAYOUT_V2.enums:
        word |= (int(values.get(slot.name, 0)) & 0xFF) << (slot.byte_index * 8)
    return word


def build_profile_payload(
    *,
    profile_version: int = 2,
    exists: int = 1,
    age: int = 0,
    height_cm: int = 0,
    nationality: str = "",
    friends_open_to_mask: int = 0,
    languages_packed: int = 0,
    location_city_id: str = "",
    location_lat_e6: int = 0,
    location_lng_e6: int = 0,
    school_id: str = "",
    skills_commit: str = "",
    hobbies_commit: str = "",
    name_hash: str = "",
    packed_enums: int = 0,
    display_name: str = "",
    photo_uri: str = "",
    tuple_offset: int = 32,
    display_name_offset: int | None = None,
    photo_uri_offset: int | None = None,
) -> str:
    """Hand-build a getProfile() return payload the way the ABI encoder lays it out."""

    name_tail = string_tail(display_name)
    photo_tail = string_tail(photo_uri)
    name_offset = HEAD_WORDS * 32 if display_name_offset is None else display_name_offset
    photo_offset = HEAD_WORDS * 32 + len(name_tail) // 2 if photo_uri_offset is None else photo_uri_offset

    head = [
        uint_word(profile_version),
        uint_word(exists),
        uint_word(age),
        uint_word(height_cm),
        bytes2_word(nationality),
        uint_word(friends_open_to_mask),
        uint_word(languages_packed),
        bytes32_word(location_city_id),
        int_word(location_lat_e6),
        int_word(location_lng_e6),
        bytes32_word(school_id),
        bytes32_word(skills_commit),
        bytes32_word(hobbies_commit),
        bytes32_word(name_hash),
        uint_word(packed_enums),
        uint_word(name_offset),
        uint_word(photo_offset),
    ]
    prefix = uint_word(tuple_offset) + "0" * max(0, tuple_offset * 2 - 64)
    return "0x" + prefix + "".join(head) + name_tail + photo_tail


@contextmanager
def local_json_server(payload: object, *, status: int = 200):
    """Serve one fixed JSON body to every POST, recording the request bodies."""

    body = json.dumps(payload).encode("utf-8")
    received: list[dict] = []

    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):  # noqa: N802
            length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(length)
            received.append(json.loads(raw.decode("utf-8") or "{}"))
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, _format, *_args):  # noqa: A003
            return

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_port}/", received
    finally:
        server.shutdown()
        thread.join(timeout=5.0)
        server.server_close()
