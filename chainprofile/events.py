from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
import contextlib
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import json
import secrets
import time
from pathlib import Path
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

SEVERITIES = ("debug", "info", "warn", "error")
RECENT_EVENTS_MAX = 256
DEFAULT_SOURCE = "chainprofile"

FETCH_OK = "profile.fetch.ok"
FETCH_ABSENT = "profile.fetch.absent"
FETCH_RPC_FAILED = "profile.fetch.rpc_failed"
FETCH_SUBGRAPH_FAILED = "profile.fetch.subgraph_failed"
FETCH_INVALID_ADDRESS = "profile.fetch.invalid_address"


def _stamp() -> str:
    return datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()


def _event_id() -> str:
    return f"evt-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


@dataclass(frozen=True)
class ProfileEvent:
    type: str
    message: str = ""
    severity: str = "info"
    source: str = DEFAULT_SOURCE
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_event_id)
    ts: str = field(default_factory=_stamp)

    @classmethod
    def coerce(cls, raw: Mapping[str, Any]) -> "ProfileEvent":
        """Build an event from a loose mapping; unknown severities read as info."""

        severity = str(raw.get("severity") or "info").lower()
        metadata = raw.get("metadata")
        return cls(
            type=str(raw.get("type") or "profile.event"),
            message=str(raw.get("message") or ""),
            severity=severity if severity in SEVERITIES else "info",
            source=str(raw.get("source") or DEFAULT_SOURCE),
            metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
            id=str(raw.get("id") or _event_id()),
            ts=str(raw.get("ts") or _stamp()),
        )

    def to_json(self) -> dict[str, Any]:
        return asdict(self)


class EventBus:
    """Fetch/CLI event sink: subscribers, a recent-events ring and optional JSONL file.

    Events published before a log path is set are held and written once one is.
    Handlers are called synchronously; a failing handler never stops a publish.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path: Path | None = None
        self._unwritten: list[dict[str, Any]] = []
        self._handlers: list[EventHandler] = []
        self._recent: deque[dict[str, Any]] = deque(maxlen=RECENT_EVENTS_MAX)
        self.events_written = 0
        if log_path is not None:
            self.set_log_path(log_path)

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def set_log_path(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
        self._log_path = path
        backlog, self._unwritten = self._unwritten, []
        for event in backlog:
            self._write(event)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def recent(self, limit: int | None = None, *, event_type: str = "") -> list[dict[str, Any]]:
        matched = [event for event in self._recent if not event_type or event["type"] == event_type]
        return matched if limit is None else matched[-max(0, limit) :]

    def publish(self, event: ProfileEvent | Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(event, ProfileEvent):
            event = ProfileEvent.coerce(event)
        record = event.to_json()
        self._recent.append(record)
        if self._log_path is None:
            self._unwritten.append(record)
        else:
            self._write(record)
        for handler in list(self._handlers):
            try:
                handler(record)
            except Exception:  # noqa: BLE001
                continue
        return record

    def publish_event(
        self,
        event_type: str,
        message: str,
        *,
        severity: str = "info",
        source: str = DEFAULT_SOURCE,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.publish(
            {"type": event_type, "message": message, "severity": severity, "source": source, "metadata": metadata}
        )

    def _write(self, record: dict[str, Any]) -> None:
        if self._log_path is None:
            return
        with self._log_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True, ensure_ascii=True) + "\n")
        self.events_written += 1
