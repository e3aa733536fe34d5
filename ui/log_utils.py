"""Shared logging utilities."""

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

MAX_LOGGED_BODY = 10_000


def write_incoming_log(
    method: str,
    target: str | None,
    headers: Iterable[tuple[str, str]],
    body: bytes,
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single incoming request log entry."""
    log_root = log_root or LOG_ROOT
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "target": target,
        "headers": _redact_headers(headers),
        "body": _preview_body(body),
        "body_size": len(body),
    }
    return _write_json(log_root / "incoming", payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path | None = None) -> int:
    """Delete incoming request logs left over from a previous run."""
    log_root = log_root or LOG_ROOT
    folder = log_root / "incoming"
    if not folder.exists():
        return 0

    deleted = 0
    for old_file in folder.glob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _preview_body(body: bytes) -> str:
    text = body[:MAX_LOGGED_BODY].decode("utf-8", errors="replace")
    if len(body) > MAX_LOGGED_BODY:
        text += "...[truncated]"
    return text


def _redact_headers(headers: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers:
        lowered = key.lower()
        if "key" in lowered or "authorization" in lowered or lowered == "cookie":
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
