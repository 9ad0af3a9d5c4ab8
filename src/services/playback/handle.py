"""Playback handles and the per-flow slot that owns them.

A ``PlaybackHandle`` owns one resource from a ``ResourceStore``. A
``PlaybackSlot`` holds at most one live handle; putting a new handle in the
slot supersedes the old one and releases it.
"""

import logging

from src.core.config import get_settings
from src.core.exceptions import ResourceReleasedError
from src.core.models import AudioPayload, AudioResource
from src.services.playback.base import AudioPlayer
from src.services.playback.store import ResourceStore

logger = logging.getLogger(__name__)


class PlaybackHandle:
    """Owns a playable audio resource until released."""

    def __init__(self, resource: AudioResource, store: ResourceStore, player: AudioPlayer) -> None:
        self._resource = resource
        self._store = store
        self._player = player
        self._released = False

    @classmethod
    def from_payload(
        cls, payload: AudioPayload, store: ResourceStore, player: AudioPlayer
    ) -> "PlaybackHandle":
        """Store a response body and wrap it in a new handle."""
        return cls(store.create(payload.data, payload.content_type), store, player)

    @property
    def resource(self) -> AudioResource:
        return self._resource

    @property
    def released(self) -> bool:
        return self._released

    def read(self) -> bytes:
        """Return the audio bytes behind this handle."""
        if self._released:
            raise ResourceReleasedError(self._resource.uri)
        return self._store.read(self._resource)

    def play(self) -> None:
        """Play the wrapped audio.

        Raises:
            ResourceReleasedError: If the handle was already released.
        """
        self._player.play(self.read(), self._resource.content_type)

    def release(self) -> None:
        """Revoke the underlying resource. Safe to call more than once."""
        if self._released:
            return
        self._store.revoke(self._resource)
        self._released = True
        logger.debug("Released playback resource %s", self._resource.uri)


class PlaybackSlot:
    """Holds the single live playback handle of one flow.

    Args:
        name: Flow name used in log messages.
        release_superseded: Revoke a handle when a newer one replaces it
            (falls back to settings if not provided).
    """

    def __init__(self, name: str, release_superseded: bool | None = None) -> None:
        self.name = name
        if release_superseded is None:
            release_superseded = get_settings().release_superseded_handles
        self._release_superseded = release_superseded
        self._handle: PlaybackHandle | None = None

    @property
    def handle(self) -> PlaybackHandle | None:
        return self._handle

    def __bool__(self) -> bool:
        return self._handle is not None

    def replace(self, handle: PlaybackHandle) -> PlaybackHandle:
        """Make ``handle`` the live handle, superseding the previous one."""
        previous, self._handle = self._handle, handle
        if previous is not None and previous is not handle:
            self._discard(previous)
        return handle

    def clear(self) -> None:
        """Invalidate the live handle, if any."""
        previous, self._handle = self._handle, None
        if previous is not None:
            self._discard(previous)

    def play(self) -> bool:
        """Play the live handle. Returns False (no-op) when the slot is empty."""
        if self._handle is None:
            return False
        self._handle.play()
        return True

    def close(self) -> None:
        """Release the live handle unconditionally (session end)."""
        previous, self._handle = self._handle, None
        if previous is not None:
            previous.release()

    def _discard(self, handle: PlaybackHandle) -> None:
        if self._release_superseded:
            handle.release()
        else:
            logger.warning(
                "%s playback resource %s superseded without release",
                self.name,
                handle.resource.uri,
            )
