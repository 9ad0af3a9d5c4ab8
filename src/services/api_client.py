"""
Asynchronous HTTP client for the voice backend.

Uses ``httpx.AsyncClient`` so uploads and synthesis requests never block the
event loop that also receives microphone chunks. Each call is a single
attempt: non-2xx answers become ``ServerRejectedError`` and connection,
DNS, or timeout failures become ``TransportError``.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.exceptions import ServerRejectedError, TransportError
from src.core.models import AudioPayload, CapturedRecording

logger = logging.getLogger(__name__)


class VoiceAPIClient:
    """Thin async wrapper around httpx for the speech endpoints.

    Use as an async context manager, or call ``aclose()`` when done.

    Args:
        base_url: Backend root URL (falls back to settings if not provided).
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests inject ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._speech_to_text_path = settings.speech_to_text_path
        self._text_to_speech_path = settings.text_to_speech_path
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "VoiceAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute one HTTP request and translate failures.

        Raises:
            ServerRejectedError: On any non-2xx status.
            TransportError: On connection, DNS, timeout, or other network errors.
        """
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out: %s", method.upper(), path, exc)
            raise TransportError("Request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method.upper(), path, exc)
            raise TransportError(f"Could not connect to {self._base_url}") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method.upper(), path, exc)
            raise TransportError(f"Network error: {exc}") from exc

        if not resp.is_success:
            # Failure bodies carry no contract; only the status is reported
            logger.warning("%s %s returned HTTP %d", method.upper(), path, resp.status_code)
            raise ServerRejectedError(resp.status_code)
        return resp

    @staticmethod
    def _to_payload(resp: httpx.Response) -> AudioPayload:
        return AudioPayload(
            data=resp.content,
            content_type=resp.headers.get("content-type", "application/octet-stream"),
        )

    # -- speech to text --

    async def speech_to_text(self, recording: CapturedRecording, phrase: str) -> AudioPayload:
        """Upload a captured recording with its identity phrase.

        Sends multipart fields ``file`` and ``phrase`` and returns the audio
        body of the response.
        """
        files = {"file": (recording.filename, recording.data, recording.content_type)}
        resp = await self._request(
            "post", self._speech_to_text_path, files=files, data={"phrase": phrase}
        )
        return self._to_payload(resp)

    # -- text to speech --

    async def text_to_speech(self, text: str) -> AudioPayload:
        """Request synthesized speech for ``text``."""
        resp = await self._request("post", self._text_to_speech_path, json={"text": text})
        return self._to_payload(resp)
