"""Configuration helpers for the clip recorder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_OUTPUT_PATH = Path(__file__).resolve().parents[1] / "recorded.wav"


@dataclass
class AppConfig:
    """
    Runtime configuration for the recorder.

    Attributes:
        record_seconds: Fixed capture duration in seconds.
        output_path: Temporary WAV file the clip is written to.
        stt_mode: "openai" or "remote" for the STT implementation.
        stt_model: Model selector string sent with the upload.
        whisper_url: URL for a self-hosted Whisper service (when stt_mode=remote).
        language: Optional language hint passed to STT implementations.
        request_timeout: HTTP timeout in seconds.
        channels: Channel override; None uses the device default.
        sample_rate: Sample-rate override; None uses the device default.
        sample_format: Native format override ("int8", "int16", "int32", "float32").
        keep_recording: Leave the WAV file on disk after transcription.

    Usage:
        >>> config = AppConfig.from_env()
        >>> config.record_seconds
        5.0
    """

    record_seconds: float
    output_path: Path
    stt_mode: str
    stt_model: str
    whisper_url: Optional[str]
    language: Optional[str]
    request_timeout: float
    channels: Optional[int]
    sample_rate: Optional[int]
    sample_format: Optional[str]
    keep_recording: bool

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Build an :class:`AppConfig` from environment variables.

        Supported variables:
            - CLIPSCRIBE_RECORD_SECONDS: Capture duration (float, default: 5).
            - CLIPSCRIBE_OUTPUT_PATH: WAV path (default: recorded.wav next to the package).
            - CLIPSCRIBE_STT_MODE: "openai" (default) or "remote".
            - CLIPSCRIBE_STT_MODEL: Transcription model (default: "whisper-1").
            - CLIPSCRIBE_WHISPER_URL: URL for a self-hosted Whisper (HTTP) service.
            - CLIPSCRIBE_LANGUAGE: Language hint for STT (e.g., "en").
            - CLIPSCRIBE_REQUEST_TIMEOUT: Timeout in seconds (float, default: 60).
            - CLIPSCRIBE_CHANNELS: Input channel count (default: device, capped at 2).
            - CLIPSCRIBE_SAMPLE_RATE: Sample rate in Hz (default: device).
            - CLIPSCRIBE_SAMPLE_FORMAT: int8/int16/int32/float32 (default: device).
            - CLIPSCRIBE_KEEP_RECORDING: "true"/"1" to keep the WAV file (default: false).

        The OpenAI credentials (OPENAI_API_KEY, OPENAI_BASE_URL) are read by
        the openai SDK itself.
        """

        record_seconds = _float_env("CLIPSCRIBE_RECORD_SECONDS", "5")
        if record_seconds <= 0:
            raise ValueError("CLIPSCRIBE_RECORD_SECONDS must be positive")
        output_raw = os.environ.get("CLIPSCRIBE_OUTPUT_PATH") or None
        output_path = Path(output_raw).expanduser() if output_raw else DEFAULT_OUTPUT_PATH
        stt_mode = os.environ.get("CLIPSCRIBE_STT_MODE", "openai").lower()
        stt_model = os.environ.get("CLIPSCRIBE_STT_MODEL", "whisper-1")
        whisper_url = os.environ.get("CLIPSCRIBE_WHISPER_URL") or None
        language = os.environ.get("CLIPSCRIBE_LANGUAGE") or None
        request_timeout = _float_env("CLIPSCRIBE_REQUEST_TIMEOUT", "60")
        channels = _optional_int_env("CLIPSCRIBE_CHANNELS")
        sample_rate = _optional_int_env("CLIPSCRIBE_SAMPLE_RATE")
        sample_format = os.environ.get("CLIPSCRIBE_SAMPLE_FORMAT") or None
        keep_raw = os.environ.get("CLIPSCRIBE_KEEP_RECORDING", "false").lower()
        keep_recording = keep_raw in {"1", "true", "yes", "on"}

        return cls(
            record_seconds=record_seconds,
            output_path=output_path,
            stt_mode=stt_mode,
            stt_model=stt_model,
            whisper_url=whisper_url,
            language=language,
            request_timeout=request_timeout,
            channels=channels,
            sample_rate=sample_rate,
            sample_format=sample_format,
            keep_recording=keep_recording,
        )


def _float_env(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc


def _optional_int_env(name: str) -> Optional[int]:
    raw = os.environ.get(name) or None
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
