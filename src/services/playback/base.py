"""
Abstract base class for audio output.
"""

from abc import ABC, abstractmethod


class AudioPlayer(ABC):
    """Interface that every audio output must implement."""

    @abstractmethod
    def play(self, data: bytes, content_type: str) -> None:
        """Start playing encoded audio. May return before playback ends."""
