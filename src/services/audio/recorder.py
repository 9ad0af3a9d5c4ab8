"""Recorder controller: microphone session lifecycle and chunk buffering.

States: idle -> armed -> recording -> finalizing -> idle

The controller owns the active capture source and its chunk buffer. The
captured recording is assembled only after the source's stop notification
arrives, so every chunk delivered before that point is included. Callbacks
are bound to the session that opened the source; late chunks or stop
notifications from an ended session are ignored.
"""

import asyncio
import logging
from collections.abc import Callable

from src.core.config import get_settings
from src.core.exceptions import DeviceUnavailableError, RecorderStateError
from src.core.models import CapturedRecording, IdentityPhrase, RecorderState
from src.services.audio.base import CaptureSource

logger = logging.getLogger(__name__)

_ACCEPTING_CHUNKS = (RecorderState.armed, RecorderState.recording, RecorderState.finalizing)


class RecorderController:
    """Runs one capture session at a time and assembles its recording.

    Args:
        source_factory: Builds a fresh capture source for each session.
        stop_timeout: Seconds to wait for the stop notification
            (falls back to settings if not provided).
        filename_stem: Base name of the assembled recording file.
    """

    def __init__(
        self,
        source_factory: Callable[[], CaptureSource],
        stop_timeout: float | None = None,
        filename_stem: str = "recording",
    ) -> None:
        self._source_factory = source_factory
        self._stop_timeout = stop_timeout if stop_timeout is not None else get_settings().stop_timeout
        self._filename_stem = filename_stem
        self._state = RecorderState.idle
        self._source: CaptureSource | None = None
        self._chunks: list[bytes] = []
        self._stopped: asyncio.Future[None] | None = None
        self._session: int | None = None
        self._session_counter = 0
        self._identity: IdentityPhrase | None = None

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == RecorderState.recording

    @property
    def identity(self) -> IdentityPhrase | None:
        """Identity of the current (or last started) session."""
        return self._identity

    @property
    def buffered_bytes(self) -> int:
        """Total size of the chunks accumulated in the current session."""
        return sum(len(chunk) for chunk in self._chunks)

    async def start(self, identity: IdentityPhrase) -> None:
        """Open a capture source and begin accumulating chunks.

        Raises:
            RecorderStateError: If a session is already armed, recording, or finalizing.
            DeviceUnavailableError: If the microphone cannot be opened.
        """
        if self._state != RecorderState.idle:
            raise RecorderStateError(f"Cannot start recording while {self._state}")

        self._state = RecorderState.armed
        self._identity = identity
        self._chunks = []
        self._session_counter += 1
        session = self._session = self._session_counter
        source = self._source_factory()
        try:
            await source.open(
                lambda data: self._on_chunk(session, data),
                lambda: self._on_stop(session),
            )
        except DeviceUnavailableError:
            self._reset()
            raise
        except Exception as exc:
            logger.warning("Capture source failed to open: %s", exc)
            self._reset()
            raise DeviceUnavailableError(f"Could not access microphone: {exc}") from exc

        self._source = source
        self._state = RecorderState.recording
        logger.debug("Recording started for %r", identity.phrase)

    async def stop(self) -> CapturedRecording:
        """Stop the session and return the assembled recording.

        Waits for the source's stop notification before assembling.

        Raises:
            RecorderStateError: If no session is recording, or the session is
                aborted while waiting.
            DeviceUnavailableError: If the stop notification never arrives.
        """
        if self._state != RecorderState.recording or self._source is None:
            raise RecorderStateError(f"Cannot stop recording while {self._state}")

        self._state = RecorderState.finalizing
        self._stopped = asyncio.get_running_loop().create_future()
        source = self._source
        source.request_stop()

        try:
            await asyncio.wait_for(self._stopped, timeout=self._stop_timeout)
        except TimeoutError:
            logger.warning("Recorder stop notification timed out after %.1fs", self._stop_timeout)
            source.abort()
            self._reset()
            raise DeviceUnavailableError("Recorder did not finish stopping") from None

        recording = CapturedRecording(
            data=b"".join(self._chunks),
            content_type=source.content_type,
            filename=f"{self._filename_stem}.{source.file_extension}",
            chunk_count=len(self._chunks),
        )
        self._reset()
        logger.debug(
            "Recording assembled: %d bytes from %d chunks", recording.size, recording.chunk_count
        )
        return recording

    async def aclose(self) -> None:
        """Abort any active session without assembling a recording."""
        if self._source is not None:
            self._source.abort()
        self._reset()

    def _on_chunk(self, session: int, data: bytes) -> None:
        if session != self._session:
            logger.debug("Dropping %d-byte chunk from ended session %d", len(data), session)
            return
        if self._state not in _ACCEPTING_CHUNKS:
            logger.debug("Dropping %d-byte chunk delivered while %s", len(data), self._state)
            return
        if not data:
            return
        self._chunks.append(data)

    def _on_stop(self, session: int) -> None:
        if session != self._session:
            return
        if self._stopped is not None and not self._stopped.done():
            self._stopped.set_result(None)

    def _reset(self) -> None:
        if self._stopped is not None and not self._stopped.done():
            self._stopped.set_exception(RecorderStateError("Recording was aborted before it stopped"))
        self._state = RecorderState.idle
        self._session = None
        self._source = None
        self._chunks = []
        self._stopped = None
