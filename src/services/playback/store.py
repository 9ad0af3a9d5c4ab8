"""
Resource stores: turn response bytes into a releasable audio resource.

A store hands out ``AudioResource`` references that stay readable until
``revoke()`` is called. ``MemoryResourceStore`` keeps bytes in a dict for the
lifetime of a page session; ``TempFileResourceStore`` writes them to a private
temporary directory so file-based players can open them by path.
"""

import logging
import tempfile
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from src.core.exceptions import ResourceReleasedError
from src.core.models import AudioResource

logger = logging.getLogger(__name__)


class ResourceStore(ABC):
    """Interface for creating, reading, and revoking audio resources."""

    @abstractmethod
    def create(self, data: bytes, content_type: str) -> AudioResource:
        """Store ``data`` and return a reference to it."""

    @abstractmethod
    def read(self, resource: AudioResource) -> bytes:
        """Return the bytes behind ``resource``.

        Raises:
            ResourceReleasedError: If the resource was already revoked.
        """

    @abstractmethod
    def revoke(self, resource: AudioResource) -> None:
        """Release the bytes behind ``resource``. Revoking twice is a no-op."""

    @abstractmethod
    def close(self) -> None:
        """Release every resource still held by the store."""


class MemoryResourceStore(ResourceStore):
    """Keeps audio bytes in memory under ``mem://`` URIs."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    def create(self, data: bytes, content_type: str) -> AudioResource:
        uri = f"mem://{uuid.uuid4().hex}"
        self._blobs[uri] = bytes(data)
        return AudioResource(uri=uri, content_type=content_type, size=len(data))

    def read(self, resource: AudioResource) -> bytes:
        try:
            return self._blobs[resource.uri]
        except KeyError:
            raise ResourceReleasedError(resource.uri) from None

    def revoke(self, resource: AudioResource) -> None:
        self._blobs.pop(resource.uri, None)

    def close(self) -> None:
        self._blobs.clear()


_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/webm": ".webm",
    "audio/flac": ".flac",
}


class TempFileResourceStore(ResourceStore):
    """Writes each resource to its own file in a private temp directory."""

    def __init__(self, prefix: str = "walkup-voice-") -> None:
        self._tmpdir = tempfile.TemporaryDirectory(prefix=prefix)
        self._root = Path(self._tmpdir.name)

    @property
    def root(self) -> Path:
        return self._root

    def create(self, data: bytes, content_type: str) -> AudioResource:
        suffix = _EXTENSIONS.get(content_type.split(";")[0].strip().lower(), ".bin")
        path = self._root / f"{uuid.uuid4().hex}{suffix}"
        path.write_bytes(data)
        return AudioResource(uri=path.as_uri(), content_type=content_type, size=len(data))

    def read(self, resource: AudioResource) -> bytes:
        try:
            return self.path_for(resource).read_bytes()
        except FileNotFoundError:
            raise ResourceReleasedError(resource.uri) from None

    def path_for(self, resource: AudioResource) -> Path:
        """Local filesystem path of ``resource``."""
        return self._root / resource.uri.rsplit("/", 1)[-1]

    def revoke(self, resource: AudioResource) -> None:
        self.path_for(resource).unlink(missing_ok=True)

    def close(self) -> None:
        self._tmpdir.cleanup()
        logger.debug("Removed playback directory %s", self._root)
