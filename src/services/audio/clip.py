"""
Capture source for audio already recorded by the browser.

Streamlit's ``st.audio_input`` hands the page one finished WAV clip. This
source replays that clip through the normal capture lifecycle: the clip is
delivered as ordered chunks on the event loop and the stop notification is
queued behind them.
"""

import asyncio

from src.services.audio.base import CaptureSource, ChunkCallback, StopCallback


class RecordedClipSource(CaptureSource):
    """Feeds a pre-recorded clip to the recorder controller.

    Args:
        data: Encoded audio bytes of the clip.
        content_type: MIME type of ``data``.
        file_extension: Extension used for the uploaded file name.
        chunk_size: Bytes per delivered chunk (1 second of 16 kHz 16-bit mono).
    """

    def __init__(
        self,
        data: bytes,
        content_type: str = "audio/wav",
        file_extension: str = "wav",
        chunk_size: int = 32000,
    ) -> None:
        self._data = data
        self.content_type = content_type
        self.file_extension = file_extension
        self._chunk_size = chunk_size
        self._loop: asyncio.AbstractEventLoop | None = None
        self._on_stop: StopCallback | None = None

    async def open(self, on_chunk: ChunkCallback, on_stop: StopCallback) -> None:
        self._loop = asyncio.get_running_loop()
        self._on_stop = on_stop
        for offset in range(0, len(self._data), self._chunk_size):
            self._loop.call_soon(on_chunk, self._data[offset : offset + self._chunk_size])

    def request_stop(self) -> None:
        if self._loop is None or self._on_stop is None:
            return
        # FIFO scheduling keeps the notification behind every queued chunk
        self._loop.call_soon(self._on_stop)
        self._on_stop = None

    def abort(self) -> None:
        self._on_stop = None
