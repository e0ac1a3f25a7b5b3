"""Core orchestration: record a clip, transcribe it, print the text."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .exceptions import FileReadFailed
from .interfaces import AudioRecorder, SpeechToText
from .models import CapturedAudio, Recording

logger = logging.getLogger(__name__)


class ClipTranscriber:
    """
    Runs one record-then-transcribe pass.

    Compose this class with a recorder and a speech-to-text implementation.
    The defaults are provided by the CLI harness.

    Usage:
        transcriber = ClipTranscriber(
            recorder=CaptureSession(),
            stt=OpenAISpeechToText(model="whisper-1"),
            output_path=Path("recorded.wav"),
            record_seconds=5,
        )
        text = transcriber.run()
    """

    def __init__(
        self,
        *,
        recorder: AudioRecorder,
        stt: SpeechToText,
        output_path: Union[str, Path],
        record_seconds: float = 5.0,
        language: Optional[str] = None,
        keep_recording: bool = False,
    ) -> None:
        self._recorder = recorder
        self._stt = stt
        self._output_path = Path(output_path)
        self._record_seconds = record_seconds
        self._language = language
        self._keep_recording = keep_recording

    def run(self) -> str:
        """Record, transcribe, print and clean up. Returns the transcript."""
        self._recorder.open()
        recording = self._recorder.record(self._output_path, self._record_seconds)
        logger.info(
            "Captured %.2fs (%d samples) into %s",
            recording.duration,
            recording.samples_written,
            recording.path,
        )

        try:
            audio = _read_recording(recording)
            text = self._stt.transcribe(audio, language=self._language)
        finally:
            self._cleanup(recording.path)

        print(text)
        return text

    def _cleanup(self, path: Path) -> None:
        if self._keep_recording:
            logger.info("Keeping recording at %s", path)
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not delete %s: %s", path, exc)


def _read_recording(recording: Recording) -> CapturedAudio:
    try:
        data = recording.path.read_bytes()
    except OSError as exc:
        raise FileReadFailed(f"Could not read {recording.path}: {exc}") from exc
    return CapturedAudio(
        data=data,
        filename=recording.path.name,
        sample_rate=recording.spec.sample_rate,
    )
