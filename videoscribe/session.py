"""Client-side state machine driving file selection, upload and transcription."""

import asyncio
import enum
import logging
from typing import Any, Dict, Optional

from .errors import MissingInput, RequestTimeout, TransportFailure, UnsupportedMediaType, VideoscribeError
from .models import TranscriptionResult
from .transcribe_service import SelectedFile, TranscribeService

logger = logging.getLogger(__name__)

NO_FILE_SELECTED = "No file selected"
VIDEO_ONLY = "Only video files are allowed."
NO_FILE_FOR_TRANSCRIPTION = "No file selected for transcription"
UPLOAD_NOT_COMPLETE = "Upload has not completed"
UPLOAD_FAILED = "Upload failed"
TRANSCRIPTION_REJECTED = "Failed to start transcription"
TRANSCRIPTION_ERROR = "Error starting transcription"
TRANSCRIPTION_TIMEOUT = "Transcription request timed out"


class State(enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    SIMULATING_UPLOAD = "simulating_upload"
    UPLOAD_COMPLETE = "upload_complete"
    TRANSCRIBING = "transcribing"
    TRANSCRIBED = "transcribed"
    ERRORED = "errored"


class UploadSession:
    """One upload-then-transcribe cycle.

    The progress counter is an animation only: it advances on a timer and
    knows nothing about bytes sent by `upload()`. None of the public
    coroutines raise; failures end up in `error` with the session left in a
    state the user can retry from.
    """

    def __init__(
        self,
        service: TranscribeService,
        progress_step: int = 20,
        progress_interval: float = 1.0,
    ) -> None:
        self.service = service
        self.progress_step = progress_step
        self.progress_interval = progress_interval
        self.progress_task: Optional[asyncio.Task] = None
        self._cycle = 0
        self._clear()

    def _clear(self) -> None:
        self._cycle += 1
        self.state = State.IDLE
        self.selected_file: Optional[SelectedFile] = None
        self.progress = 0
        self.upload_complete = False
        self.transcribing = False
        self.error: Optional[str] = None
        self.locator: Optional[str] = None
        self.transcription: Optional[TranscriptionResult] = None
        self.summary: Optional[Dict[str, Any]] = None

    def _fail(self, message: str) -> None:
        self.error = message
        self.state = State.ERRORED

    def _cancel_progress(self) -> None:
        if self.progress_task is not None and not self.progress_task.done():
            self.progress_task.cancel()
        self.progress_task = None

    def begin_selection(self) -> None:
        """The file picker was opened."""
        if self.state in (State.IDLE, State.ERRORED):
            self.state = State.SELECTING

    def select_file(self, file: Optional[SelectedFile]) -> Optional[asyncio.Task]:
        """Hold `file` and start the progress animation. Must run inside the event loop."""
        if file is None:
            self._fail(NO_FILE_SELECTED)
            return None
        if not file.content_type.startswith("video"):
            # The gateway only stores video, so audio-only files are refused here too
            self._fail(VIDEO_ONLY)
            return None

        self._cancel_progress()
        self._cycle += 1
        self.selected_file = file
        self.progress = 0
        self.upload_complete = False
        self.transcribing = False
        self.error = None
        self.locator = None
        self.transcription = None
        self.summary = None
        self.state = State.SIMULATING_UPLOAD
        self.progress_task = asyncio.get_running_loop().create_task(self._animate_progress())
        return self.progress_task

    async def _animate_progress(self) -> None:
        while self.progress < 100:
            await asyncio.sleep(self.progress_interval)
            self.progress = min(100, self.progress + self.progress_step)
        self.upload_complete = True
        if self.state == State.SIMULATING_UPLOAD:
            self.state = State.UPLOAD_COMPLETE

    async def upload(self) -> Optional[str]:
        """Send the held file to the gateway and keep the returned locator."""
        if self.selected_file is None:
            self._fail(NO_FILE_SELECTED)
            return None
        file = self.selected_file
        cycle = self._cycle
        try:
            locator = await self.service.upload_video(file)
        except (MissingInput, UnsupportedMediaType) as e:
            if self._cycle == cycle:
                self._fail(str(e))
            return None
        except VideoscribeError as e:
            logger.warning("Upload of %s failed: %s", file.name, e)
            if self._cycle == cycle:
                self._fail(UPLOAD_FAILED)
            return None
        if self._cycle != cycle:
            logger.info("Dropping locator for %s: session was reset or reselected", file.name)
            return None
        self.locator = locator
        if self.state == State.ERRORED:
            self.error = None
            self.state = State.UPLOAD_COMPLETE if self.upload_complete else State.SIMULATING_UPLOAD
        logger.info("Uploaded %s to %s", file.name, self.locator)
        return self.locator

    async def submit(self, file: Optional[SelectedFile]) -> Optional[str]:
        """Select `file`, then run the real upload while the animation plays."""
        if self.select_file(file) is None:
            return None
        return await self.upload()

    async def transcribe(self) -> Optional[TranscriptionResult]:
        """Request the transcript of the uploaded file; one request at a time."""
        if self.selected_file is None:
            self.error = NO_FILE_FOR_TRANSCRIPTION
            return None
        if self.state == State.TRANSCRIBING:
            return None
        if not self.upload_complete or self.locator is None:
            self.error = UPLOAD_NOT_COMPLETE
            return None

        file = self.selected_file
        cycle = self._cycle
        self.state = State.TRANSCRIBING
        self.transcribing = True
        self.error = None
        try:
            response = await self.service.transcribe(file)
        except VideoscribeError as e:
            if self._cycle != cycle:
                return None
            self.transcribing = False
            if isinstance(e, RequestTimeout):
                logger.warning("Transcription of %s timed out", file.name)
                self._fail(TRANSCRIPTION_TIMEOUT)
            elif isinstance(e, TransportFailure) and e.status is not None:
                logger.warning("Transcription of %s rejected: %s", file.name, e)
                self._fail(TRANSCRIPTION_REJECTED)
            else:
                logger.warning("Transcription of %s failed: %s", file.name, e)
                self._fail(TRANSCRIPTION_ERROR)
            return None

        if self._cycle != cycle:
            logger.info("Dropping transcript for %s: session was reset or reselected", file.name)
            return None
        self.transcribing = False
        self.transcription = response.transcription
        self.summary = response.summary
        self.state = State.TRANSCRIBED
        return self.transcription

    def reset(self) -> None:
        """Drop the file and every result; requests still in flight are ignored when they return."""
        self._cancel_progress()
        self._clear()
