"""Self-hosted Whisper STT adapter via HTTP API."""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from typing import Optional
from urllib.parse import urlencode

from ..exceptions import TranscriptionFailed
from ..interfaces import SpeechToText
from ..models import CapturedAudio


class RemoteSpeechToText(SpeechToText):
    """
    Speech-to-text implementation using a self-hosted Whisper server.

    Args:
        base_url: Base URL for the Whisper service (e.g., "http://whisper:9000")
        timeout: HTTP timeout in seconds.
        ssl_context: Optional SSL context for HTTPS.

    Expected API format:
        POST /transcribe[?language=xx]
        Content-Type: audio/wav
        Body: the finalized WAV file

        Response: {"text": "transcribed text"} or a plain-text body
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}/transcribe"
        self._timeout = timeout
        self._ssl_context = ssl_context

    def transcribe(self, audio: CapturedAudio, *, language: Optional[str] = None) -> str:
        if not audio.data:
            raise TranscriptionFailed("No audio data provided for transcription.")

        url = self._endpoint
        if language:
            url = f"{url}?{urlencode({'language': language})}"
        request = urllib.request.Request(
            url,
            data=audio.data,
            headers={
                "Content-Type": audio.encoding,
                "X-Filename": audio.filename,
            },
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self._timeout, context=self._ssl_context) as response:  # type: ignore[arg-type]
                body = response.read()
                content_type = response.headers.get("Content-Type", "")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise TranscriptionFailed(f"Whisper request failed ({exc.code}): {detail}") from exc
        except urllib.error.URLError as exc:
            raise TranscriptionFailed(f"Whisper request could not reach the server: {exc.reason}") from exc

        if "application/json" in content_type:
            try:
                payload = json.loads(body.decode("utf-8"))
            except json.JSONDecodeError as exc:
                raise TranscriptionFailed("Whisper response was not valid JSON") from exc
            if not isinstance(payload, dict) or not isinstance(payload.get("text"), str):
                raise TranscriptionFailed(f"Whisper response had no text: {payload!r}")
            return payload["text"].strip()

        # Plain text response
        return body.decode("utf-8", errors="ignore").strip()
