"""CLI harness: record a short clip from the microphone and print its transcript."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import AppConfig
from .exceptions import ClipscribeError
from .interfaces import SpeechToText
from .pipeline import ClipTranscriber
from .services.capture import CaptureSession
from .services.stt_openai import OpenAISpeechToText
from .services.stt_remote import RemoteSpeechToText

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_stt(config: AppConfig) -> SpeechToText:
    """Choose the STT implementation based on config."""
    if config.stt_mode == "remote":
        if not config.whisper_url:
            raise ClipscribeError("CLIPSCRIBE_WHISPER_URL must be set when CLIPSCRIBE_STT_MODE=remote.")
        return RemoteSpeechToText(base_url=config.whisper_url, timeout=config.request_timeout)
    if config.stt_mode != "openai":
        raise ClipscribeError(f"Unknown STT mode '{config.stt_mode}' (expected openai or remote).")
    return OpenAISpeechToText(model=config.stt_model, timeout=config.request_timeout)


def build_transcriber(config: AppConfig) -> ClipTranscriber:
    """Wire up the transcriber with the microphone recorder and configured STT."""
    recorder = CaptureSession(
        channels=config.channels,
        sample_rate=config.sample_rate,
        sample_format=config.sample_format,
    )
    return ClipTranscriber(
        recorder=recorder,
        stt=build_stt(config),
        output_path=config.output_path,
        record_seconds=config.record_seconds,
        language=config.language,
        keep_recording=config.keep_recording,
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record a short clip from the default microphone and transcribe it.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--seconds",
        type=float,
        help="Override CLIPSCRIBE_RECORD_SECONDS.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Override CLIPSCRIBE_OUTPUT_PATH.",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep the WAV file after transcription.",
    )
    parser.add_argument(
        "--stt",
        choices=["openai", "remote"],
        help="Override CLIPSCRIBE_STT_MODE (openai/remote).",
    )
    parser.add_argument(
        "--model",
        help="Override CLIPSCRIBE_STT_MODEL.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        config = AppConfig.from_env()
        if args.seconds is not None:
            if args.seconds <= 0:
                raise ValueError("--seconds must be positive")
            config.record_seconds = args.seconds
        if args.output:
            config.output_path = args.output
        if args.keep:
            config.keep_recording = True
        if args.stt:
            config.stt_mode = args.stt
        if args.model:
            config.stt_model = args.model
        transcriber = build_transcriber(config)
        transcriber.run()
    except (ClipscribeError, ValueError) as exc:
        logger.debug("Run failed", exc_info=True)
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
