"""
Walkup Voice exception hierarchy.

All application-specific exceptions inherit from WalkupVoiceError so the
flow boundaries can catch them in one place and surface them to the user.
"""

from datetime import UTC, datetime


class WalkupVoiceError(Exception):
    """Base exception for all Walkup Voice errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "WALKUP_VOICE_ERROR",
    ) -> None:
        self.detail = detail
        self.code = code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class InvalidIdentityError(WalkupVoiceError):
    """Raised when the first or last name is missing."""

    def __init__(self, detail: str = "First name and last name are both required") -> None:
        super().__init__(detail=detail, code="INVALID_IDENTITY")


class DeviceUnavailableError(WalkupVoiceError):
    """Raised when microphone access is denied or the device fails."""

    def __init__(self, detail: str = "Microphone is not available") -> None:
        super().__init__(detail=detail, code="DEVICE_UNAVAILABLE")


class RecorderStateError(WalkupVoiceError):
    """Raised when a recorder operation is invalid for its current state."""

    def __init__(self, detail: str = "A recording is already active") -> None:
        super().__init__(detail=detail, code="RECORDER_STATE")


class ServerRejectedError(WalkupVoiceError):
    """Raised when the voice backend answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(
            detail=detail or f"Server rejected the request (HTTP {status_code})",
            code="SERVER_REJECTED",
        )


class TransportError(WalkupVoiceError):
    """Raised on DNS, connection, or timeout failures talking to the backend."""

    def __init__(self, detail: str = "Could not reach the voice backend") -> None:
        super().__init__(detail=detail, code="TRANSPORT_ERROR")


class SubmissionPendingError(WalkupVoiceError):
    """Raised when a flow is asked to submit while a request is outstanding."""

    def __init__(self) -> None:
        super().__init__(
            detail="A submission is already in progress",
            code="SUBMISSION_PENDING",
        )


class ResourceReleasedError(WalkupVoiceError):
    """Raised when a released playback resource is used."""

    def __init__(self, uri: str) -> None:
        super().__init__(
            detail=f"Audio resource already released: {uri}",
            code="RESOURCE_RELEASED",
        )


class PlaybackError(WalkupVoiceError):
    """Raised when audio cannot be decoded or sent to the output device."""

    def __init__(self, detail: str = "Could not play audio") -> None:
        super().__init__(detail=detail, code="PLAYBACK_ERROR")
