from __future__ import annotations

import json
from typing import Any
from urllib.request import Request, urlopen

from web3 import Web3

from .abi_reader import decode_profile_tuple
from .config import ProfileConfig
from .events import (
    FETCH_ABSENT,
    FETCH_INVALID_ADDRESS,
    FETCH_OK,
    FETCH_RPC_FAILED,
    FETCH_SUBGRAPH_FAILED,
    EventBus,
)
from .hashing import function_selector, normalize_address
from .layout import layout_for_version
from .model import ProfileRecord
from .subgraph import build_profile_query, record_from_subgraph


GET_PROFILE_SIGNATURE = "getProfile(address)"


class ProfileFetchError(RuntimeError):
    pass


def build_get_profile_call(address: str) -> str:
    normalized = normalize_address(address)
    if normalized is None:
        raise ValueError(f"not a 20-byte hex address: {address!r}")
    return "0x" + function_selector(GET_PROFILE_SIGNATURE) + normalized[2:].rjust(64, "0")


def eth_call(rpc_urls: list[str], to: str, data: str, *, timeout_s: float = 10.0) -> str:
    if not rpc_urls:
        raise ProfileFetchError("no RPC URLs configured")
    last_error: Exception | None = None
    for rpc_url in rpc_urls:
        try:
            web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s}))
            result = web3.eth.call({"to": Web3.to_checksum_address(to), "data": data}, "latest")
            return "0x" + bytes(result).hex()
        except Exception as exc:  # noqa: BLE001
            last_error = exc
    raise ProfileFetchError(f"eth_call failed via {', '.join(rpc_urls)}: {last_error}")


def post_subgraph_query(urls: list[str], query: str, *, timeout_s: float = 10.0) -> dict[str, Any]:
    if not urls:
        raise ProfileFetchError("no subgraph URLs configured")
    body = json.dumps({"query": query}).encode("utf-8")
    last_error: Exception | None = None
    for url in urls:
        request = Request(url, data=body, headers={"Content-Type": "application/json"}, method="POST")
        try:
            with urlopen(request, timeout=timeout_s) as response:
                if response.status >= 400:
                    raise RuntimeError(f"subgraph returned {response.status} {response.reason}")
                data = response.read()
            payload: Any = json.loads(data.decode("utf-8"))
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            continue
        if isinstance(payload, dict):
            return payload
        last_error = RuntimeError("subgraph returned a non-object payload")
    raise ProfileFetchError(f"profiles query failed via {', '.join(urls)}: {last_error}")


def _publish(events: EventBus | None, event_type: str, message: str, *, severity: str = "info", **metadata: Any) -> None:
    if events is not None:
        events.publish_event(event_type, message, severity=severity, metadata=metadata)


def fetch_profile(address: str, config: ProfileConfig, events: EventBus | None = None) -> ProfileRecord | None:
    """Read a profile over RPC, falling back to the subgraph.

    Returns None when no transport knows the profile. Raises ProfileFetchError
    only when every configured transport failed outright.
    """

    normalized = normalize_address(address)
    if normalized is None:
        _publish(events, FETCH_INVALID_ADDRESS, f"ignoring malformed address {address!r}", severity="warn")
        return None

    errors: list[str] = []
    contract = config.contract.address
    if contract:
        try:
            raw = eth_call(
                config.rpc.urls,
                contract,
                build_get_profile_call(normalized),
                timeout_s=config.rpc.timeout_s,
            )
        except ProfileFetchError as exc:
            errors.append(str(exc))
            _publish(events, FETCH_RPC_FAILED, str(exc), severity="warn", address=normalized)
        else:
            record = decode_profile_tuple(raw, layout_for_version(config.contract.profile_version))
            if record is not None:
                _publish(events, FETCH_OK, "profile decoded from eth_call", address=normalized, source="rpc")
                return record
            _publish(events, FETCH_ABSENT, "eth_call returned no profile", address=normalized, source="rpc")

    try:
        payload = post_subgraph_query(config.subgraph.urls, build_profile_query(normalized), timeout_s=config.rpc.timeout_s)
    except ProfileFetchError as exc:
        errors.append(str(exc))
        _publish(events, FETCH_SUBGRAPH_FAILED, str(exc), severity="warn", address=normalized)
        if contract and len(errors) == 1:
            # eth_call succeeded and reported no profile.
            return None
        raise ProfileFetchError("; ".join(errors)) from exc

    record = record_from_subgraph(payload)
    if record is None:
        _publish(events, FETCH_ABSENT, "subgraph has no profile", address=normalized, source="subgraph")
        return None
    _publish(events, FETCH_OK, "profile decoded from subgraph", address=normalized, source="subgraph")
    return record
