"""Tests for the recorder controller state machine.

Covers session start/stop transitions, chunk accumulation order, zero-length
chunk filtering, waiting for the stop notification, device failures, and
rejection of overlapping sessions.
"""

import asyncio

import pytest

from src.core.exceptions import DeviceUnavailableError, RecorderStateError
from src.core.models import IdentityPhrase, RecorderState
from src.services.audio.clip import RecordedClipSource
from src.services.audio.recorder import RecorderController
from tests.conftest import FakeCaptureSource


@pytest.fixture
def identity():
    return IdentityPhrase.from_names("Ada", "Lovelace")


@pytest.fixture
def recorder(fake_source):
    return RecorderController(lambda: fake_source, stop_timeout=1.0)


class TestStart:
    """Verify the idle -> recording transition."""

    async def test_start_enters_recording(self, recorder, fake_source, identity):
        await recorder.start(identity)
        assert recorder.state == RecorderState.recording
        assert recorder.is_recording
        assert fake_source.opened

    async def test_start_while_recording_rejected(self, recorder, identity):
        """A second start does not restart the session."""
        await recorder.start(identity)
        with pytest.raises(RecorderStateError):
            await recorder.start(identity)
        assert recorder.state == RecorderState.recording

    async def test_start_while_finalizing_rejected(self, identity):
        """Start is rejected while waiting for the stop notification."""
        source = FakeCaptureSource(notify_on_stop=False)
        recorder = RecorderController(lambda: source, stop_timeout=1.0)
        await recorder.start(identity)
        stop_task = asyncio.create_task(recorder.stop())
        await asyncio.sleep(0)
        assert recorder.state == RecorderState.finalizing

        with pytest.raises(RecorderStateError):
            await recorder.start(identity)

        source.fire_stop()
        await stop_task
        assert recorder.state == RecorderState.idle

    async def test_device_denied_returns_to_idle(self, denied_source, identity):
        """A denied microphone raises DeviceUnavailableError and leaves no session."""
        recorder = RecorderController(lambda: denied_source)
        with pytest.raises(DeviceUnavailableError):
            await recorder.start(identity)
        assert recorder.state == RecorderState.idle
        assert recorder.buffered_bytes == 0

    async def test_unexpected_open_failure_is_device_unavailable(self, identity):
        """Any other open() failure is reported as DeviceUnavailableError."""
        source = FakeCaptureSource(fail_open=OSError("no input device"))
        recorder = RecorderController(lambda: source)
        with pytest.raises(DeviceUnavailableError, match="no input device"):
            await recorder.start(identity)
        assert recorder.state == RecorderState.idle


class TestChunks:
    """Verify chunk accumulation."""

    async def test_chunks_concatenated_in_order(self, recorder, fake_source, identity):
        """Scenario: 10 + 20 byte chunks produce one 30 byte recording."""
        await recorder.start(identity)
        fake_source.emit(b"a" * 10)
        fake_source.emit(b"b" * 20)

        rec = await recorder.stop()

        assert rec.size == 30
        assert rec.data == b"a" * 10 + b"b" * 20
        assert rec.chunk_count == 2
        assert rec.content_type == "audio/webm"
        assert rec.filename == "recording.webm"

    async def test_zero_length_chunks_discarded(self, recorder, fake_source, identity):
        await recorder.start(identity)
        fake_source.emit(b"")
        fake_source.emit(b"abc")
        fake_source.emit(b"")

        rec = await recorder.stop()

        assert rec.data == b"abc"
        assert rec.chunk_count == 1

    async def test_chunks_before_stop_notification_included(self, identity):
        """Chunks delivered after the stop request but before the notification are kept."""
        source = FakeCaptureSource(trailing_chunks=[b"tail-1", b"tail-2"])
        recorder = RecorderController(lambda: source, stop_timeout=1.0)
        await recorder.start(identity)
        source.emit(b"head")

        rec = await recorder.stop()

        assert rec.data == b"headtail-1tail-2"

    async def test_assembly_waits_for_notification(self, identity):
        """stop() does not return until the stop notification fires."""
        source = FakeCaptureSource(notify_on_stop=False)
        recorder = RecorderController(lambda: source, stop_timeout=1.0)
        await recorder.start(identity)
        source.emit(b"one")

        stop_task = asyncio.create_task(recorder.stop())
        await asyncio.sleep(0.01)
        assert not stop_task.done()
        assert source.stop_requested

        source.emit(b"two")
        source.fire_stop()
        rec = await stop_task
        assert rec.data == b"onetwo"

    async def test_new_session_starts_empty(self, recorder, fake_source, identity):
        """A second session never reuses chunks from the first."""
        await recorder.start(identity)
        fake_source.emit(b"first")
        await recorder.stop()

        await recorder.start(identity)
        fake_source.emit(b"second")
        rec = await recorder.stop()

        assert rec.data == b"second"

    async def test_chunks_after_session_dropped(self, recorder, fake_source, identity):
        await recorder.start(identity)
        await recorder.stop()
        fake_source.emit(b"late")
        assert recorder.buffered_bytes == 0


class TestStop:
    """Verify the recording -> finalizing -> idle transition."""

    async def test_returns_to_idle(self, recorder, identity):
        await recorder.start(identity)
        await recorder.stop()
        assert recorder.state == RecorderState.idle

    async def test_stop_when_idle_rejected(self, recorder):
        with pytest.raises(RecorderStateError):
            await recorder.stop()

    async def test_stop_timeout(self, identity):
        """A missing stop notification aborts the session."""
        source = FakeCaptureSource(notify_on_stop=False)
        recorder = RecorderController(lambda: source, stop_timeout=0.05)
        await recorder.start(identity)
        source.emit(b"data")

        with pytest.raises(DeviceUnavailableError):
            await recorder.stop()

        assert source.aborted
        assert recorder.state == RecorderState.idle
        assert recorder.buffered_bytes == 0

    async def test_identity_kept_after_stop(self, recorder, identity):
        await recorder.start(identity)
        await recorder.stop()
        assert recorder.identity.phrase == "Ada Lovelace"


class TestAclose:
    """Verify aborting an active session."""

    async def test_aborts_active_session(self, recorder, fake_source, identity):
        await recorder.start(identity)
        fake_source.emit(b"partial")
        await recorder.aclose()

        assert fake_source.aborted
        assert recorder.state == RecorderState.idle
        assert recorder.buffered_bytes == 0

    async def test_noop_when_idle(self, recorder):
        await recorder.aclose()
        assert recorder.state == RecorderState.idle


class TestSessionIsolation:
    """Verify callbacks from an ended session never reach the next one."""

    async def test_queued_chunks_after_aclose_ignored(self, identity):
        """Chunks an aborted source had already queued are not recorded by the next session."""
        sources = iter([RecordedClipSource(b"OLD-SESSION"), FakeCaptureSource()])
        recorder = RecorderController(lambda: next(sources), stop_timeout=1.0)
        await recorder.start(identity)
        await recorder.aclose()

        await recorder.start(identity)
        rec = await recorder.stop()

        assert rec.data == b""
        assert rec.chunk_count == 0

    async def test_late_stop_from_timed_out_session_ignored(self, identity):
        """A stale stop notification does not end the next session early."""
        old = FakeCaptureSource(notify_on_stop=False)
        new = FakeCaptureSource(notify_on_stop=False)
        sources = iter([old, new])
        recorder = RecorderController(lambda: next(sources), stop_timeout=0.05)
        await recorder.start(identity)
        with pytest.raises(DeviceUnavailableError):
            await recorder.stop()

        recorder._stop_timeout = 1.0
        await recorder.start(identity)
        new.emit(b"first")
        stop_task = asyncio.create_task(recorder.stop())
        await asyncio.sleep(0)

        old.fire_stop()
        old.emit(b"stale")
        await asyncio.sleep(0.01)
        assert not stop_task.done()

        new.emit(b"second")
        new.fire_stop()
        rec = await stop_task

        assert rec.data == b"firstsecond"

    async def test_aclose_during_stop_raises_state_error(self, identity):
        """Aborting while stop() waits raises RecorderStateError, not CancelledError."""
        source = FakeCaptureSource(notify_on_stop=False)
        recorder = RecorderController(lambda: source, stop_timeout=1.0)
        await recorder.start(identity)
        stop_task = asyncio.create_task(recorder.stop())
        await asyncio.sleep(0)

        await recorder.aclose()

        with pytest.raises(RecorderStateError):
            await stop_task
        assert source.aborted
        assert recorder.state == RecorderState.idle
