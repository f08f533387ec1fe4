from __future__ import annotations

import argparse
import contextlib
from datetime import datetime, timezone
import json
from pathlib import Path
import sys

from . import __version__
from .abi_reader import decode_profile_tuple
from .config import explain_profile_toml, load_config
from .encode import build_wire_input
from .events import EventBus
from .hashing import function_selector
from .model import ProfileRecord
from .options import profile_labels
from .rpc import ProfileFetchError, build_get_profile_call, fetch_profile


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_PROFILE = 3
NO_PROFILE_MESSAGE = "no on-chain profile yet"


def _emit_log(message: str, *, level: str = "info") -> None:
    normalized = " ".join(message.split())
    stamp = datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()
    print(f"{stamp} [{level.lower()}] {normalized}", file=sys.stderr)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False, ensure_ascii=False))


def _print_record(record: ProfileRecord, *, labels: bool) -> None:
    payload = record.to_json()
    if labels:
        payload["labels"] = profile_labels(record)
    _print_json(payload)


def _read_argument(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


def _log_event(event: dict[str, object]) -> None:
    if event["severity"] in {"warn", "error"}:
        _emit_log(str(event["message"]), level=str(event["severity"]))


def _events_from_config(events_path: str) -> EventBus:
    bus = EventBus()
    if events_path:
        with contextlib.suppress(OSError):
            bus.set_log_path(Path(events_path).expanduser())
    bus.subscribe(_log_event)
    return bus


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainprofile",
        description="Encode and decode on-chain profile records",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="cmd", required=True)

    decode = sub.add_parser("decode", help="Decode a getProfile(address) return payload.")
    decode.add_argument("payload", help="0x-prefixed hex, @file, or - for stdin")
    decode.add_argument("--labels", action="store_true", help="Append display labels for coded fields.")

    encode = sub.add_parser("encode", help="Build the write-call struct from a profile JSON document.")
    encode.add_argument("profile", help="JSON file path, or - for stdin")

    selector = sub.add_parser("selector", help="Print the 4-byte selector for a function signature.")
    selector.add_argument("signature", help="e.g. getProfile(address)")

    calldata = sub.add_parser("calldata", help="Print getProfile(address) call data.")
    calldata.add_argument("address", help="0x-prefixed 20-byte address")

    fetch = sub.add_parser("fetch", help="Fetch a profile via configured RPC/subgraph endpoints.")
    fetch.add_argument("address", help="0x-prefixed 20-byte address")
    fetch.add_argument("--labels", action="store_true", help="Append display labels for coded fields.")

    sub.add_parser("config", help="Explain the active profile.toml settings.")

    return parser


def cmd_decode(args: argparse.Namespace) -> int:
    try:
        payload = _read_argument(args.payload)
    except OSError as exc:
        print(f"Error reading payload: {exc}", file=sys.stderr)
        return EXIT_ERROR
    record = decode_profile_tuple(payload.strip())
    if record is None:
        print(NO_PROFILE_MESSAGE)
        return EXIT_NO_PROFILE
    _print_record(record, labels=args.labels)
    return EXIT_OK


def cmd_encode(args: argparse.Namespace) -> int:
    try:
        source = sys.stdin.read() if args.profile == "-" else Path(args.profile).read_text(encoding="utf-8")
        document = json.loads(source)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error reading profile JSON: {exc}", file=sys.stderr)
        return EXIT_ERROR
    if not isinstance(document, dict):
        print("Error reading profile JSON: top-level is not an object", file=sys.stderr)
        return EXIT_ERROR
    config, _path, warning = load_config()
    if warning:
        _emit_log(warning, level="warn")
    record = ProfileRecord.from_json(document)
    if "profileVersion" not in document:
        record.profile_version = config.contract.profile_version
    wire = build_wire_input(record)
    _print_json(wire.to_json())
    return EXIT_OK


def cmd_selector(args: argparse.Namespace) -> int:
    print("0x" + function_selector(args.signature.strip()))
    return EXIT_OK


def cmd_calldata(args: argparse.Namespace) -> int:
    try:
        print(build_get_profile_call(args.address))
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


def cmd_fetch(args: argparse.Namespace) -> int:
    config, _path, warning = load_config()
    if warning:
        _emit_log(warning, level="warn")
    events = _events_from_config(config.logging.events_path)
    try:
        record = fetch_profile(args.address, config, events=events)
    except ProfileFetchError as exc:
        print(f"Profile fetch failed: {exc}", file=sys.stderr)
        return EXIT_ERROR
    if record is None:
        print(NO_PROFILE_MESSAGE)
        return EXIT_NO_PROFILE
    _print_record(record, labels=args.labels)
    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    config, path, warning = load_config()
    if warning:
        _emit_log(warning, level="warn")
    print(explain_profile_toml(config, path=path))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.cmd == "decode":
        return cmd_decode(args)
    if args.cmd == "encode":
        return cmd_encode(args)
    if args.cmd == "selector":
        return cmd_selector(args)
    if args.cmd == "calldata":
        return cmd_calldata(args)
    if args.cmd == "fetch":
        return cmd_fetch(args)
    if args.cmd == "config":
        return cmd_config(args)

    parser.error(f"Unknown command: {args.cmd}")
    return 2
