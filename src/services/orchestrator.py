"""Flow boundaries for the two page interactions.

``CaptureFlow`` drives recorder -> upload -> playback and ``SynthesisFlow``
drives text -> synthesis -> playback. Both catch every ``WalkupVoiceError``
here and surface it through the notifier with a user-facing message, so
callers (Streamlit page, CLI) never see partial state or a stuck busy flag.

Usage::

    flow = CaptureFlow(recorder, uploader, notify=print)
    if await flow.start("Ada", "Lovelace"):
        ...
        await flow.stop_and_send()
        flow.play()
"""

import logging
from collections.abc import Callable

from src.core.exceptions import (
    DeviceUnavailableError,
    PlaybackError,
    ServerRejectedError,
    SubmissionPendingError,
    TransportError,
    WalkupVoiceError,
)
from src.core.models import IdentityPhrase
from src.services.audio.recorder import RecorderController
from src.services.playback.handle import PlaybackHandle
from src.services.synthesis import SynthesisClient
from src.services.upload import UploadClient

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]

CONNECTION_MESSAGE = "Error connecting to server"


def _message_for(exc: WalkupVoiceError, messages: dict[type[WalkupVoiceError], str]) -> str:
    for exc_type, message in messages.items():
        if isinstance(exc, exc_type):
            return message
    return exc.detail


class CaptureFlow:
    """Registers a voice sample under a first/last name.

    Args:
        recorder: Controller that owns the microphone session.
        uploader: Client that submits recordings and keeps the playback handle.
        notify: Called with a user-facing message for every failure.
    """

    messages: dict[type[WalkupVoiceError], str] = {
        DeviceUnavailableError: "Could not access microphone",
        ServerRejectedError: "Error processing audio",
        TransportError: CONNECTION_MESSAGE,
        PlaybackError: "Could not play audio",
    }

    @classmethod
    def describe(cls, exc: WalkupVoiceError) -> str:
        """User-facing message for a capture flow failure."""
        return _message_for(exc, cls.messages)

    def __init__(
        self,
        recorder: RecorderController,
        uploader: UploadClient,
        notify: Notifier,
    ) -> None:
        self._recorder = recorder
        self._uploader = uploader
        self._notify = notify

    @property
    def recorder(self) -> RecorderController:
        return self._recorder

    @property
    def loading(self) -> bool:
        return self._uploader.busy.is_set

    @property
    def recording(self) -> bool:
        return self._recorder.is_recording

    @property
    def playback(self) -> PlaybackHandle | None:
        return self._uploader.slot.handle

    def can_start(self, first_name: str, last_name: str) -> bool:
        """Whether the start control should be enabled."""
        return bool(first_name.strip() and last_name.strip()) and not self.loading

    async def start(self, first_name: str, last_name: str) -> bool:
        """Begin a capture session. Returns False if it could not start."""
        if self.loading:
            self._surface(SubmissionPendingError())
            return False
        try:
            identity = IdentityPhrase.from_names(first_name, last_name)
            await self._recorder.start(identity)
        except WalkupVoiceError as exc:
            self._surface(exc)
            return False
        # A new session invalidates the previous response
        self._uploader.slot.clear()
        return True

    async def stop_and_send(self) -> PlaybackHandle | None:
        """Stop the session, upload the recording, and keep the response audio."""
        try:
            recording = await self._recorder.stop()
            identity = self._recorder.identity
            phrase = identity.phrase if identity is not None else ""
            return await self._uploader.upload(recording, phrase)
        except WalkupVoiceError as exc:
            self._surface(exc)
            return None

    def play(self) -> bool:
        """Play the last response audio. No-op (False) when there is none."""
        try:
            return self._uploader.slot.play()
        except WalkupVoiceError as exc:
            self._surface(exc)
            return False

    async def aclose(self) -> None:
        """End the page session: abort recording and release playback."""
        await self._recorder.aclose()
        self._uploader.slot.close()

    def _surface(self, exc: WalkupVoiceError) -> None:
        logger.warning("Capture flow failed [%s]: %s", exc.code, exc.detail)
        self._notify(self.describe(exc))


class SynthesisFlow:
    """Converts free text to speech and plays it immediately.

    Args:
        synthesizer: Client that requests audio and auto-plays it.
        notify: Called with a user-facing message for every failure.
    """

    messages: dict[type[WalkupVoiceError], str] = {
        ServerRejectedError: "Error generating voice",
        TransportError: CONNECTION_MESSAGE,
        PlaybackError: "Could not play audio",
    }

    def __init__(self, synthesizer: SynthesisClient, notify: Notifier) -> None:
        self._synthesizer = synthesizer
        self._notify = notify

    @property
    def loading(self) -> bool:
        return self._synthesizer.busy.is_set

    @property
    def playback(self) -> PlaybackHandle | None:
        return self._synthesizer.slot.handle

    async def submit(self, text: str) -> PlaybackHandle | None:
        """Synthesize and play ``text``. Empty text does nothing."""
        try:
            return await self._synthesizer.synthesize(text)
        except WalkupVoiceError as exc:
            logger.warning("Synthesis flow failed [%s]: %s", exc.code, exc.detail)
            self._notify(_message_for(exc, self.messages))
            return None

    def close(self) -> None:
        """Release the last synthesized audio."""
        self._synthesizer.slot.close()
