"""
Sound-card capture source backed by ``sounddevice``.

PortAudio invokes the stream callbacks on its own thread; every chunk and the
final stop notification are handed to the event loop with
``loop.call_soon_threadsafe`` so the recorder only ever sees them in order on
the loop thread.
"""

import asyncio
import logging

import numpy as np
import sounddevice as sd

from src.core.config import get_settings
from src.core.exceptions import DeviceUnavailableError
from src.services.audio.base import CaptureSource, ChunkCallback, StopCallback

logger = logging.getLogger(__name__)


class MicrophoneSource(CaptureSource):
    """Records 16-bit PCM from the default (or given) input device.

    Chunks are raw little-endian int16 frames, delivered at the cadence
    PortAudio chooses (``blocksize=0``).
    """

    file_extension = "pcm"

    def __init__(
        self,
        sample_rate: int | None = None,
        channels: int | None = None,
        device: int | str | None = None,
        blocksize: int = 0,
    ) -> None:
        settings = get_settings()
        self._sample_rate = sample_rate or settings.sample_rate
        self._channels = channels or settings.channels
        self._device = device
        self._blocksize = blocksize
        self._stream: sd.InputStream | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stopping: asyncio.Future | None = None
        self.content_type = f"audio/L16;rate={self._sample_rate};channels={self._channels}"

    async def open(self, on_chunk: ChunkCallback, on_stop: StopCallback) -> None:
        loop = asyncio.get_running_loop()
        self._loop = loop

        def _callback(indata: np.ndarray, frames: int, time_info, status: sd.CallbackFlags) -> None:  # noqa: ANN001
            if status:
                logger.warning("Input stream status: %s", status)
            loop.call_soon_threadsafe(on_chunk, np.ascontiguousarray(indata).tobytes())

        def _finished() -> None:
            loop.call_soon_threadsafe(on_stop)

        try:
            self._stream = await asyncio.to_thread(self._open_stream, _callback, _finished)
        except (sd.PortAudioError, ValueError) as exc:
            raise DeviceUnavailableError(f"Could not access microphone: {exc}") from exc
        logger.debug(
            "Microphone opened (%d Hz, %d ch, device=%s)",
            self._sample_rate,
            self._channels,
            self._device,
        )

    def _open_stream(self, callback, finished_callback) -> sd.InputStream:  # noqa: ANN001
        stream = sd.InputStream(
            samplerate=self._sample_rate,
            channels=self._channels,
            dtype="int16",
            device=self._device,
            blocksize=self._blocksize,
            callback=callback,
            finished_callback=finished_callback,
        )
        try:
            stream.start()
        except sd.PortAudioError:
            stream.close()
            raise
        return stream

    def request_stop(self) -> None:
        if self._stream is None or self._loop is None or self._stopping is not None:
            return
        stream = self._stream
        # Stream.stop() drains pending buffers and blocks, so run it off the loop
        self._stopping = self._loop.run_in_executor(None, self._close_stream, stream)
        self._stopping.add_done_callback(lambda future: self._stream_closed(stream, future))

    def abort(self) -> None:
        if self._stream is None:
            return
        stream = self._stream
        try:
            stream.abort()
            # An in-flight stop closes the stream once abort unblocks it
            if self._stopping is None:
                stream.close()
        except sd.PortAudioError as exc:
            logger.warning("Failed to abort microphone stream: %s", exc)
        self._stream = None

    
    def _close_stream(stream: sd.InputStream) -> None:
        stream.stop()
        stream.close()

    def _stream_closed(self, stream: sd.InputStream, future: asyncio.Future) -> None:
        if self._stream is stream:
            self._stream = None
        self._stopping = None
        if not future.cancelled() and future.exception() is not None:
            logger.warning("Failed to stop microphone stream: %s", future.exception())
