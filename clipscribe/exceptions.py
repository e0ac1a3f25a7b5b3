"""Custom exceptions for the recorder and transcription flow."""

from __future__ import annotations


class ClipscribeError(RuntimeError):
    """Base class for every failure the CLI reports at the process boundary."""


class DeviceUnavailable(ClipscribeError):
    """Raised when no default input device (or no audio backend) is available."""


class ConfigQueryFailed(ClipscribeError):
    """Raised when the input device cannot report or accept a stream configuration."""


class UnsupportedSampleFormat(ClipscribeError):
    """Raised when the native sample format is not int8, int16, int32 or float32."""


class StreamStartFailed(ClipscribeError):
    """Raised when the audio backend refuses to open or start the input stream."""


class SampleWriteDropped(ClipscribeError):
    """Raised by the sink when a write lost the lock race or the sink is already finalized.

    The capture callback recovers from this locally; it never reaches the CLI.
    """


class FinalizeFailed(ClipscribeError):
    """Raised when the WAV file cannot be closed, or was already finalized."""


class FileReadFailed(ClipscribeError):
    """Raised when the finalized recording cannot be read back for upload."""


class TranscriptionFailed(ClipscribeError):
    """Raised when the speech-to-text service responds with an error or invalid payload."""


class StreamStopFailed(ClipscribeError):
    """Raised when the audio backend fails to stop or close the input stream."""
