from typing import Callable

import httpx
import pytest

from ui import log_utils


class RecordingLogger:
    """RequestLogger that keeps every event for assertions."""

    def __init__(self):
        self.forwards: list[tuple[str, str]] = []
        self.responses: list[tuple[str, str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, method: str, target: str) -> None:
        self.forwards.append((method, target))

    def log_response(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        self.responses.append((method, target, status))

    def log_error(self, target: str, status: int, message: str) -> None:
        self.errors.append((target, status, message))


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep CLI and incoming request logs out of the working directory."""
    log_root = tmp_path / "logs"
    monkeypatch.setattr(log_utils, "LOG_ROOT", log_root)
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", log_root / "proxy.log")
    return log_root


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def target_response() -> Callable[..., httpx.Response]:
    """Build a streamed httpx.Response the way a real transport returns it."""

    def _create(status_code=200, headers=None, body=b""):
        return httpx.Response(
            status_code,
            headers=headers or [],
            stream=httpx.ByteStream(body),
        )

    return _create
