"""Synthesis client: turns free text into speech and plays it right away."""

import logging

from src.core.utils import BusyFlag
from src.services.api_client import VoiceAPIClient
from src.services.playback.base import AudioPlayer
from src.services.playback.handle import PlaybackHandle, PlaybackSlot
from src.services.playback.store import ResourceStore

logger = logging.getLogger(__name__)


class SynthesisClient:
    """Requests text-to-speech audio and auto-plays each result.

    Args:
        api: Voice backend client.
        slot: Synthesis Flow playback slot.
        store: Resource store for response audio.
        player: Output the result is played on.
    """

    def __init__(
        self,
        api: VoiceAPIClient,
        slot: PlaybackSlot,
        store: ResourceStore,
        player: AudioPlayer,
    ) -> None:
        self._api = api
        self._slot = slot
        self._store = store
        self._player = player
        self.busy = BusyFlag()

    @property
    def slot(self) -> PlaybackSlot:
        return self._slot

    async def synthesize(self, text: str) -> PlaybackHandle | None:
        """Synthesize ``text`` and play it.

        Empty text is ignored locally: no request is made and None is returned.

        Raises:
            SubmissionPendingError: If a request is already outstanding.
            ServerRejectedError: On a non-2xx response.
            TransportError: On connection failures.
        """
        if not text:
            return None

        with self.busy.hold():
            logger.info("Requesting speech for %d characters", len(text))
            payload = await self._api.text_to_speech(text)

        handle = self._slot.replace(PlaybackHandle.from_payload(payload, self._store, self._player))
        handle.play()
        return handle
