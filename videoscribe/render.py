"""Plain-text rendering of transcripts and webhook summaries."""

import json
from collections.abc import Mapping
from typing import Any, List, Tuple

from .models import TranscriptionResult, TranscriptionWord


def format_word(word: TranscriptionWord) -> str:
    """One transcript word with its start and end time in seconds."""
    return f"{word.word} ({word.start:.2f}s - {word.end:.2f}s)"


def render_transcript(result: TranscriptionResult) -> List[str]:
    """One line per word, in the order the service returned them."""
    return [format_word(word) for word in result.words]


def format_value(value: Any) -> str:
    """JSON text for any value; objects json cannot encode fall back to str()."""
    return json.dumps(value, ensure_ascii=False, default=str)


def render_summary(summary: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Key and JSON text pairs in the mapping's own order."""
    return [(str(key), format_value(value)) for key, value in summary.items()]
