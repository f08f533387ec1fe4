from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
import tomllib

from .hashing import normalize_address
from .layout import CURRENT_PROFILE_VERSION


CONFIG_FILENAME = "profile.toml"
DEFAULT_RPC_URLS = ["https://rpc.moderato.tempo.xyz"]
DEFAULT_SUBGRAPH_URLS = ["https://graph.dotheaven.org/subgraphs/name/dotheaven/profiles-tempo"]
DEFAULT_PROFILE_CONTRACT = "0xe00e82086480e61aac8d5ad8b05b56a582dd0000"


def _as_float(value, *, default: float) -> float:
    try:
        return float(value)
    except Exception:  # noqa: BLE001
        return float(default)


def _as_int(value, *, default: int) -> int:
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return int(default)


def _as_str_list(value) -> list[str]:
    if isinstance(value, list):
        out: list[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                out.append(item.strip().rstrip("/"))
        return out
    if isinstance(value, str) and value.strip():
        return [item.strip().rstrip("/") for item in value.split(",") if item.strip()]
    return []


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


@dataclass(frozen=True)
class RpcConfig:
    urls: list[str] = field(default_factory=lambda: list(DEFAULT_RPC_URLS))
    timeout_s: float = 10.0


@dataclass(frozen=True)
class ContractConfig:
    address: str = DEFAULT_PROFILE_CONTRACT
    profile_version: int = CURRENT_PROFILE_VERSION


@dataclass(frozen=True)
class SubgraphConfig:
    urls: list[str] = field(default_factory=lambda: list(DEFAULT_SUBGRAPH_URLS))


@dataclass(frozen=True)
class LoggingConfig:
    events_path: str = ""


@dataclass(frozen=True)
class ProfileConfig:
    rpc: RpcConfig = field(default_factory=RpcConfig)
    contract: ContractConfig = field(default_factory=ContractConfig)
    subgraph: SubgraphConfig = field(default_factory=SubgraphConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def find_config_path(start: Path | None = None) -> Path | None:
    probe = (start or Path.cwd()).resolve()
    for candidate in [probe, *probe.parents]:
        path = candidate / CONFIG_FILENAME
        if path.exists():
            return path
    return None


def load_profile_toml(path: Path | None) -> tuple[ProfileConfig, str]:
    """Load transport config from profile.toml.

    Returns (config, warning). Warning is empty on success.
    """

    if path is None or not path.exists():
        return ProfileConfig(), ""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        return ProfileConfig(), f"{path.name} parse failed: {exc}"

    rpc = data.get("rpc") if isinstance(data.get("rpc"), dict) else {}
    contract = data.get("contract") if isinstance(data.get("contract"), dict) else {}
    subgraph = data.get("subgraph") if isinstance(data.get("subgraph"), dict) else {}
    logging = data.get("logging") if isinstance(data.get("logging"), dict) else {}

    warning = ""
    address = str(contract.get("address") or "").strip()
    if address and normalize_address(address) is None:
        warning = f"contract.address is not a 20-byte hex address: {address}"
        address = DEFAULT_PROFILE_CONTRACT

    cfg = ProfileConfig(
        rpc=RpcConfig(
            urls=_dedupe(_as_str_list(rpc.get("urls"))) or list(DEFAULT_RPC_URLS),
            timeout_s=max(1.0, _as_float(rpc.get("timeout_s"), default=RpcConfig.timeout_s)),
        ),
        contract=ContractConfig(
            address=normalize_address(address) or DEFAULT_PROFILE_CONTRACT,
            profile_version=max(
                CURRENT_PROFILE_VERSION,
                _as_int(contract.get("profile_version"), default=ContractConfig.profile_version),
            ),
        ),
        subgraph=SubgraphConfig(
            urls=_dedupe(_as_str_list(subgraph.get("urls"))) or list(DEFAULT_SUBGRAPH_URLS),
        ),
        logging=LoggingConfig(
            events_path=str(logging.get("events_path") or ""),
        ),
    )
    return cfg, warning


def apply_env_overrides(config: ProfileConfig, environ: dict[str, str] | None = None) -> ProfileConfig:
    env = os.environ if environ is None else environ
    updated = config
    rpc_urls = _as_str_list(env.get("CHAINPROFILE_RPC_URLS", ""))
    if rpc_urls:
        updated = replace(updated, rpc=replace(updated.rpc, urls=_dedupe(rpc_urls)))
    contract = normalize_address(env.get("CHAINPROFILE_CONTRACT"))
    if contract:
        updated = replace(updated, contract=replace(updated.contract, address=contract))
    subgraph_urls = _as_str_list(env.get("CHAINPROFILE_SUBGRAPH_URLS", ""))
    if subgraph_urls:
        updated = replace(updated, subgraph=replace(updated.subgraph, urls=_dedupe(subgraph_urls)))
    return updated


def load_config(start: Path | None = None) -> tuple[ProfileConfig, Path | None, str]:
    path = find_config_path(start)
    cfg, warning = load_profile_toml(path)
    return apply_env_overrides(cfg), path, warning


def explain_profile_toml(config: ProfileConfig, *, path: Path | None = None) -> str:
    location = str(path) if path is not None else f"{CONFIG_FILENAME} (not found, using defaults)"
    lines = [
        f"{CONFIG_FILENAME} guide ({location})",
        "",
        "[rpc]",
        f"- urls: JSON-RPC endpoints tried in order for eth_call (current: {', '.join(config.rpc.urls)})",
        f"- timeout_s: per-request timeout in seconds (current: {config.rpc.timeout_s:g})",
        "",
        "[contract]",
        f"- address: profile contract address (current: {config.contract.address or '(unset)'})",
        "- profile_version: layout used to decode fetched profiles; also written by encode when the input",
        f"  has no profileVersion (current: {config.contract.profile_version})",
        "",
        "[subgraph]",
        f"- urls: GraphQL fallbacks when every RPC fails (current: {', '.join(config.subgraph.urls)})",
        "",
        "[logging]",
        f"- events_path: JSONL event log path (current: {config.logging.events_path or '(disabled)'})",
        "",
        "Environment overrides: CHAINPROFILE_RPC_URLS, CHAINPROFILE_CONTRACT, CHAINPROFILE_SUBGRAPH_URLS.",
    ]
    return "\n".join(lines)
