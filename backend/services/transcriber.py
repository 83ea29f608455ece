"""Whisper-backed transcription of learner recordings."""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)


class TranscriptionError(RuntimeError):
    """Raised when transcription fails."""


class SpeechRecognizer(Protocol):
    def transcribe(
        self,
        audio_bytes: bytes,
        *,
        filename: str = "recording.webm",
        language: str = "ja",
    ) -> str: ...


class WhisperTranscriber:
    MODEL = "whisper-1"

    def __init__(self, api_key: str | None = None, client: Optional[OpenAI] = None) -> None:
        if client is not None:
            self.client = client
            return

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not configured")
        self.client = OpenAI(api_key=api_key)

    def transcribe(
        self,
        audio_bytes: bytes,
        *,
        filename: str = "recording.webm",
        language: str = "ja",
    ) -> str:
        """Return the transcript text of ``audio_bytes``."""

        if not audio_bytes:
            raise TranscriptionError("Empty audio upload")

        try:
            result = self.client.audio.transcriptions.create(
                model=self.MODEL,
                file=(filename, audio_bytes),
                language=language,
            )
        except OpenAIError as exc:
            logger.warning("Whisper transcription failed: %s", exc)
            raise TranscriptionError(f"Transcription failed: {exc}") from exc

        text = getattr(result, "text", None)
        if text is None:
            raise TranscriptionError("Whisper did not return a transcript")
        return text.strip()
