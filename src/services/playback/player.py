"""
Local speaker output backed by ``soundfile`` and ``sounddevice``.
"""

import io
import logging

import sounddevice as sd
import soundfile as sf

from src.core.exceptions import PlaybackError
from src.services.playback.base import AudioPlayer

logger = logging.getLogger(__name__)


class SoundDevicePlayer(AudioPlayer):
    """Decodes audio with soundfile and plays it on the default output device.

    Args:
        blocking: Wait for playback to finish before returning.
    """

    def __init__(self, blocking: bool = True) -> None:
        self._blocking = blocking

    def play(self, data: bytes, content_type: str) -> None:
        try:
            samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32")
        except RuntimeError as exc:  # soundfile.LibsndfileError
            raise PlaybackError(f"Could not decode {content_type} audio: {exc}") from exc

        logger.debug(
            "Playing %s clip: %d frames at %d Hz", content_type, len(samples), sample_rate
        )
        try:
            sd.play(samples, sample_rate)
            if self._blocking:
                sd.wait()
        except sd.PortAudioError as exc:
            raise PlaybackError(f"Audio output failed: {exc}") from exc
