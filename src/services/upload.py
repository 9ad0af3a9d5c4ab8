"""Upload client: sends a captured recording to the speech-to-text endpoint.

The busy flag is held for exactly the lifetime of the request. On success the
response audio replaces the Capture Flow's playback handle; on failure the
slot is left untouched.
"""

import logging

from src.core.models import CapturedRecording
from src.core.utils import BusyFlag
from src.services.api_client import VoiceAPIClient
from src.services.playback.base import AudioPlayer
from src.services.playback.handle import PlaybackHandle, PlaybackSlot
from src.services.playback.store import ResourceStore

logger = logging.getLogger(__name__)


class UploadClient:
    """Submits recordings and keeps the resulting playback handle.

    Args:
        api: Voice backend client.
        slot: Capture Flow playback slot.
        store: Resource store for response audio.
        player: Output used when the handle is played.
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

    async def upload(self, recording: CapturedRecording, phrase: str) -> PlaybackHandle:
        """Send ``recording`` under ``phrase`` and store the response audio.

        Raises:
            SubmissionPendingError: If an upload is already outstanding.
            ServerRejectedError: On a non-2xx response.
            TransportError: On connection failures.
        """
        with self.busy.hold():
            logger.info("Uploading %d-byte recording for %r", recording.size, phrase)
            payload = await self._api.speech_to_text(recording, phrase)

        handle = PlaybackHandle.from_payload(payload, self._store, self._player)
        return self._slot.replace(handle)
