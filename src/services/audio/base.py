"""
Abstract base class for audio capture sources.

A capture source wraps a platform recording primitive (sound card, browser
clip) and reports its progress through two callbacks: one per audio chunk and
one when the recording has fully stopped. Both callbacks must be invoked on
the event loop thread that called ``open()``.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

ChunkCallback = Callable[[bytes], None]
StopCallback = Callable[[], None]


class CaptureSource(ABC):
    """Interface that every capture source must implement."""

    content_type: str = "application/octet-stream"
    file_extension: str = "bin"

    @abstractmethod
    async def open(self, on_chunk: ChunkCallback, on_stop: StopCallback) -> None:
        """Acquire the device and start delivering chunks.

        Args:
            on_chunk: Called with each chunk of encoded audio, in capture order.
            on_stop: Called once, after the last chunk, when capture has stopped.

        Raises:
            DeviceUnavailableError: If access is denied or the device fails.
        """

    @abstractmethod
    def request_stop(self) -> None:
        """Ask the source to stop. Returns immediately; completion is signalled via ``on_stop``."""

    @abstractmethod
    def abort(self) -> None:
        """Release the device without waiting for pending chunks."""
