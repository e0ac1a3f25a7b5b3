"""OpenAI transcription adapter."""

from __future__ import annotations

import logging
from typing import Any, Optional

import openai

from ..exceptions import TranscriptionFailed
from ..interfaces import SpeechToText
from ..models import CapturedAudio

logger = logging.getLogger(__name__)


class OpenAISpeechToText(SpeechToText):
    """
    Speech-to-text implementation using the OpenAI audio transcription API.

    Args:
        model: Model selector sent with every upload (e.g., "whisper-1").
        api_key: API key; defaults to ``OPENAI_API_KEY`` from the environment.
        base_url: API root; defaults to ``OPENAI_BASE_URL`` or the public endpoint.
        timeout: HTTP timeout in seconds.
        client: Pre-built ``openai.OpenAI`` client, mainly for tests.

    Notes:
        - The client is created lazily so a missing API key only fails at upload time.
        - Retries are whatever the SDK does by default.
    """

    def __init__(
        self,
        *,
        model: str = "whisper-1",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = openai.OpenAI(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    timeout=self._timeout,
                )
            except openai.OpenAIError as exc:
                raise TranscriptionFailed(str(exc)) from exc
        return self._client

    def transcribe(self, audio: CapturedAudio, *, language: Optional[str] = None) -> str:
        if not audio.data:
            raise TranscriptionFailed("No audio data provided for transcription.")

        kwargs = {"language": language} if language else {}
        logger.info("Uploading %s (%d bytes) to model %s", audio.filename, len(audio.data), self.model)
        try:
            response = self.client.audio.transcriptions.create(
                model=self.model,
                file=(audio.filename, audio.data, audio.encoding),
                **kwargs,
            )
        except openai.OpenAIError as exc:
            raise TranscriptionFailed(str(exc)) from exc

        text = getattr(response, "text", None)
        if text is None:
            raise TranscriptionFailed(f"Transcription response had no text: {response!r}")
        return text
