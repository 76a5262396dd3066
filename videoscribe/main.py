"""FastAPI application exposing the video upload gateway."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from . import __version__
from .config import configure_logging, get_settings
from .errors import InternalError, MissingInput, UnsupportedMediaType, VideoscribeError
from .storage import StorageService, get_storage

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="videoscribe", version=__version__)


@app.exception_handler(VideoscribeError)
async def videoscribe_error_handler(request: Request, exc: VideoscribeError) -> JSONResponse:
    """Render every known failure as `{"error": ...}` with its status code."""
    return JSONResponse({"error": exc.public_message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """A `file` field that is not a file upload counts as a missing file."""
    logger.error("Rejected upload at stage=validate: %s", exc.errors())
    return JSONResponse({"error": "File is required."}, status_code=MissingInput.status_code)


@app.get("/healthz")
async def healthz() -> dict:
    """Liveness probe for load balancers."""
    return {"status": "ok", "version": __version__}


@app.post("/api/upload-video")
async def upload_video(
    file: Optional[UploadFile] = File(None),
    storage: StorageService = Depends(get_storage),
) -> dict:
    """Validate the uploaded video, store it in S3 and return its locator."""
    logger.info("POST request received")
    if file is None or not file.filename:
        logger.error("Rejected upload at stage=validate: File is required.")
        raise MissingInput("File is required.")

    filename = file.filename
    content_type = file.content_type or ""
    if not content_type.startswith("video"):
        logger.error("Rejected upload at stage=validate file=%s type=%s", filename, content_type)
        raise UnsupportedMediaType("Only video files are allowed.")
    logger.info("File received: %s (%s)", filename, content_type)

    stage = "ensure_prefix"
    try:
        await run_in_threadpool(storage.ensure_prefix)
        stage = "upload"
        stored = await run_in_threadpool(storage.upload, file.file, filename, content_type)
    except VideoscribeError as e:
        logger.error("Upload failed at stage=%s file=%s: %s", stage, filename, e)
        raise
    except Exception as e:
        logger.exception("Unexpected error at stage=%s file=%s", stage, filename)
        raise InternalError(f"Unexpected error at stage {stage}") from e

    return {"success": True, "s3Path": stored.locator}
