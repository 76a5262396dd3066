"""Transcription payloads returned by the external transcription endpoint."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TranscriptionWord(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: str
    start: float
    end: float


class TranscriptionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    words: List[TranscriptionWord] = Field(default_factory=list)


class TranscribeResponse(BaseModel):
    """Body of a successful `POST /api/transcribe` call."""

    transcription: TranscriptionResult
    summary: Dict[str, Any] = Field(default_factory=dict, alias="webhookResponseBody")

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: Any) -> Dict[str, Any]:
        # No schema: a body that is not an object is kept under its own name
        if value is None:
            return {}
        if not isinstance(value, dict):
            return {"webhookResponseBody": value}
        return value
