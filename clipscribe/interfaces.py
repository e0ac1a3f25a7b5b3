"""Protocol interfaces for dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Union

from .models import CapturedAudio, DeviceConfig, Recording


class AudioRecorder(Protocol):
    """Captures a fixed-duration clip from the microphone into a WAV file."""

    def open(self) -> DeviceConfig:
        """Select the input device and return its stream configuration."""

    def record(self, path: Union[str, Path], seconds: float) -> Recording:
        """Record for ``seconds`` and return the finalized file."""


class SpeechToText(Protocol):
    """Transcribes recorded audio into text."""

    def transcribe(self, audio: CapturedAudio, *, language: Optional[str] = None) -> str:
        """Return the transcribed text for the provided audio."""
