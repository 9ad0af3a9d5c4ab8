"""Shared pytest fixtures for the Walkup Voice test suite.

Provides a scriptable capture source, a recording audio player, and helpers
for building ``httpx.MockTransport`` backends.
"""

import asyncio

import httpx
import pytest

from src.core.config import get_settings
from src.core.exceptions import DeviceUnavailableError
from src.services.audio.base import CaptureSource
from src.services.playback.base import AudioPlayer
from src.services.playback.store import MemoryResourceStore

AUDIO_BYTES = b"ID3\x03\x00fake-mp3-audio"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Clear the cached Settings so env overrides in one test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Capture Fixtures
# ---------------------------------------------------------------------------


class FakeCaptureSource(CaptureSource):
    """Capture source driven by the test.

    Args:
        fail_open: Exception raised from ``open()``, if any.
        notify_on_stop: Queue the stop notification when stop is requested.
        trailing_chunks: Chunks delivered after the stop request, before the
            stop notification (mirrors a recorder's final data event).
    """

    content_type = "audio/webm"
    file_extension = "webm"

    def __init__(
        self,
        fail_open: Exception | None = None,
        notify_on_stop: bool = True,
        trailing_chunks: list[bytes] | None = None,
    ) -> None:
        self.fail_open = fail_open
        self.notify_on_stop = notify_on_stop
        self.trailing_chunks = trailing_chunks or []
        self.opened = False
        self.stop_requested = False
        self.aborted = False
        self._on_chunk = None
        self._on_stop = None

    async def open(self, on_chunk, on_stop) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self._on_chunk = on_chunk
        self._on_stop = on_stop
        self.opened = True

    def emit(self, data: bytes) -> None:
        self._on_chunk(data)

    def fire_stop(self) -> None:
        self._on_stop()

    def request_stop(self) -> None:
        self.stop_requested = True
        loop = asyncio.get_running_loop()
        for chunk in self.trailing_chunks:
            loop.call_soon(self._on_chunk, chunk)
        if self.notify_on_stop:
            loop.call_soon(self._on_stop)

    def abort(self) -> None:
        self.aborted = True


@pytest.fixture
def fake_source():
    """A FakeCaptureSource that notifies on stop."""
    return FakeCaptureSource()


@pytest.fixture
def denied_source():
    """A FakeCaptureSource whose open() is denied."""
    return FakeCaptureSource(fail_open=DeviceUnavailableError("Permission denied"))


# ---------------------------------------------------------------------------
# Playback Fixtures
# ---------------------------------------------------------------------------


class RecordingPlayer(AudioPlayer):
    """AudioPlayer that records every play call instead of making sound."""

    def __init__(self) -> None:
        self.played: list[tuple[bytes, str]] = []

    def play(self, data: bytes, content_type: str) -> None:
        self.played.append((data, content_type))


@pytest.fixture
def player():
    return RecordingPlayer()


@pytest.fixture
def store():
    store = MemoryResourceStore()
    yield store
    store.close()


# ---------------------------------------------------------------------------
# HTTP Fixtures
# ---------------------------------------------------------------------------


class FakeBackend:
    """Scriptable voice backend for ``httpx.MockTransport``.

    Records every request and answers with ``status`` and ``body``, or raises
    ``error`` to simulate a transport failure.
    """

    def __init__(self, status: int = 200, body: bytes = AUDIO_BYTES) -> None:
        self.status = status
        self.body = body
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []
        self.observe = None  # called while each request is in flight
        self.headers = {"content-type": "audio/mpeg"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.observe is not None:
            self.observe()
        if self.error is not None:
            raise self.error
        return httpx.Response(
            self.status,
            content=self.body,
            headers=self.headers,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def backend():
    return FakeBackend()
