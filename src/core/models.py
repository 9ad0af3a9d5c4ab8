"""
Pydantic v2 models shared by the recorder, the HTTP clients, and playback.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.core.exceptions import InvalidIdentityError
from src.core.utils import build_identity_phrase

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class IdentityPhrase(BaseModel):
    """First and last name that a voice sample is registered under."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str

    @field_validator("first_name", "last_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def phrase(self) -> str:
        """Names joined by a single space, trimmed."""
        return build_identity_phrase(self.first_name, self.last_name)

    @classmethod
    def from_names(cls, first_name: str, last_name: str) -> "IdentityPhrase":
        """Build an identity, raising ``InvalidIdentityError`` when a name is empty."""
        try:
            return cls(first_name=first_name, last_name=last_name)
        except ValidationError as exc:
            missing = ", ".join(str(err["loc"][0]) for err in exc.errors())
            raise InvalidIdentityError(f"Missing required name: {missing}") from None


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------


class RecorderState(StrEnum):
    """Lifecycle states of the recorder controller."""

    idle = "idle"
    armed = "armed"
    recording = "recording"
    finalizing = "finalizing"


class CapturedRecording(BaseModel):
    """Immutable result of one capture session."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str
    filename: str
    chunk_count: int = 0

    @property
    def size(self) -> int:
        return len(self.data)


# ---------------------------------------------------------------------------
# Audio responses and playback resources
# ---------------------------------------------------------------------------


class AudioPayload(BaseModel):
    """Audio body returned by the voice backend."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str = "application/octet-stream"


class AudioResource(BaseModel):
    """Reference to audio bytes held by a resource store."""

    model_config = ConfigDict(frozen=True)

    uri: str
    content_type: str
    size: int = Field(ge=0)
