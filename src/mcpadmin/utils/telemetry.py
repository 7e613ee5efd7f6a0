"""Local structured event log (opt-out via MCPADMIN_TELEMETRY)."""

from __future__ import annotations

import json
import os
import sys
import time
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Iterator

import jsonschema

from mcpadmin.resources import load_telemetry_schema
from mcpadmin.settings import RuntimeSettings

_DISABLE_VALUES = {"0", "false", "no", "off"}

_TELEMETRY_VALIDATOR = None


def telemetry_enabled() -> bool:
    value = os.getenv("MCPADMIN_TELEMETRY", "1").lower()
    return value not in _DISABLE_VALUES


def log_path_for(settings: RuntimeSettings) -> Path:
    return settings.log_dir / "telemetry.jsonl"


def record_structured_event(
    settings: RuntimeSettings,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    duration_ms: float | None = None,
) -> None:
    """Append one event; a log that cannot be written never fails the command."""

    if not telemetry_enabled():
        return
    record: dict[str, Any] = {
        "ts": time.time(),
        "event": event,
        "payload": payload or {},
        "level": level,
    }
    if status:
        record["status"] = status
    if component:
        record["component"] = component
    if duration_ms is not None:
        record["durationMs"] = duration_ms
    _validator().validate(record)
    log_path = log_path_for(settings)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError as exc:
        print(f"mcpadmin: telemetry not recorded ({exc})", file=sys.stderr)


def iter_events(settings: RuntimeSettings) -> Iterator[dict[str, Any]]:
    log_path = log_path_for(settings)
    if not log_path.is_file():
        return
    with log_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def summarize(events: Iterable[dict[str, Any]]) -> dict[str, Any]:
    by_event: Counter[str] = Counter()
    by_status: Counter[str] = Counter()
    for evt in events:
        by_event[evt.get("event", "unknown")] += 1
        by_status[evt.get("status", "unknown")] += 1
    return {"total": sum(by_event.values()), "by_event": dict(by_event), "by_status": dict(by_status)}


def clear(settings: RuntimeSettings) -> None:
    log_path_for(settings).unlink(missing_ok=True)


def _validator() -> jsonschema.Draft202012Validator:
    global _TELEMETRY_VALIDATOR
    if _TELEMETRY_VALIDATOR is None:
        _TELEMETRY_VALIDATOR = jsonschema.Draft202012Validator(load_telemetry_schema())
    return _TELEMETRY_VALIDATOR
