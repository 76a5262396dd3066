"""This module contains classes to manage the communication with the upload and transcription endpoints"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import MissingInput, RequestTimeout, TransportFailure, UnsupportedMediaType
from .models import TranscribeResponse

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/upload-video"


@dataclass(frozen=True)
class SelectedFile:
    """A file picked by the user, held in memory by the client."""

    name: str
    content_type: str
    data: bytes


class TranscribeService:
    """Talks to the upload gateway and the transcription endpoint over HTTP."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self.http_client = http_client or httpx.AsyncClient(
            base_url=settings.api_url, timeout=httpx.Timeout(settings.request_timeout)
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def upload_video(self, file: SelectedFile) -> str:
        """POST the file to the gateway and return the storage locator."""
        response = await self._post(UPLOAD_PATH, {"file": (file.name, file.data, file.content_type)})
        body = self._json(response)
        if response.status_code == 400:
            # Surface the gateway's own validation message
            message = body.get("error", "Upload rejected")
            if message == "File is required.":
                raise MissingInput(message)
            raise UnsupportedMediaType(message)
        if not response.is_success:
            raise TransportFailure(f"Upload failed with status {response.status_code}", status=response.status_code)
        locator = body.get("s3Path")
        if not body.get("success") or not isinstance(locator, str):
            raise TransportFailure("Malformed upload response", status=response.status_code)
        return locator

    async def transcribe(self, file: SelectedFile) -> TranscribeResponse:
        """POST the raw media as field `audio` and parse the transcript and summary."""
        response = await self._post(
            self.settings.transcribe_path, {"audio": (file.name, file.data, file.content_type)}
        )
        if not response.is_success:
            raise TransportFailure(
                f"Transcription failed with status {response.status_code}", status=response.status_code
            )
        try:
            return TranscribeResponse.model_validate(self._json(response))
        except ValidationError as e:
            raise TransportFailure(f"Malformed transcription response: {e}", status=response.status_code) from e

    async def _post(self, path: str, files: Dict[str, Any]) -> httpx.Response:
        try:
            return await self.http_client.post(path, files=files)
        except httpx.TimeoutException as e:
            logger.warning("Request to %s timed out", path)
            raise RequestTimeout(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", path, e)
            raise TransportFailure(f"Request to {path} failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
