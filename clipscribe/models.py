"""Shared dataclasses for the recorder and transcription flow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from .exceptions import UnsupportedSampleFormat

SampleKind = Literal["int", "float"]


class SampleFormat(str, Enum):
    """Native sample representations the recorder can capture.

    Values are the dtype names sounddevice uses for its streams.
    """

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    FLOAT32 = "float32"

    @classmethod
    def from_native(cls, name: str) -> "SampleFormat":
        try:
            return cls(str(name).lower())
        except ValueError:
            raise UnsupportedSampleFormat(f"Unsupported sample format '{name}'") from None

    @property
    def bits(self) -> int:
        return {"int8": 8, "int16": 16, "int32": 32, "float32": 32}[self.value]

    @property
    def is_float(self) -> bool:
        return self is SampleFormat.FLOAT32


@dataclass(frozen=True)
class DeviceConfig:
    """
    Stream configuration of the default input device.

    Attributes:
        channels: Number of interleaved input channels.
        sample_rate: Sample rate in Hz.
        native_format: Sample dtype name as reported or requested (e.g. "int16").
            Validated only when the stream is about to start.
        device_name: Human-readable device name, for logging.
    """

    channels: int
    sample_rate: int
    native_format: str
    device_name: str = ""


@dataclass(frozen=True)
class WavSpec:
    """
    Header fields of the WAV file a recording is written to.

    Every sample written to the file must match these fields.

    Usage:
        >>> spec = WavSpec.from_device(DeviceConfig(2, 44100, "int16"))
        >>> (spec.channels, spec.sample_rate, spec.bits_per_sample, spec.sample_kind)
        (2, 44100, 16, 'int')
    """

    channels: int
    sample_rate: int
    bits_per_sample: int
    sample_kind: SampleKind

    @classmethod
    def from_device(cls, config: DeviceConfig) -> "WavSpec":
        fmt = SampleFormat.from_native(config.native_format)
        return cls(
            channels=config.channels,
            sample_rate=config.sample_rate,
            bits_per_sample=fmt.bits,
            sample_kind="float" if fmt.is_float else "int",
        )

    @property
    def subtype(self) -> str:
        """libsndfile subtype storing samples of this width and kind."""
        if self.sample_kind == "float":
            return "FLOAT"
        # WAV stores 8-bit PCM unsigned.
        return {8: "PCM_U8", 16: "PCM_16", 32: "PCM_32"}[self.bits_per_sample]

    @property
    def storage_dtype(self) -> str:
        """Buffer dtype the file writer accepts for samples of this spec."""
        if self.sample_kind == "float":
            return "float32"
        # 8-bit samples are written widened to int16.
        return "int32" if self.bits_per_sample == 32 else "int16"


@dataclass
class Recording:
    """A finalized WAV file produced by a capture session."""

    path: Path
    spec: WavSpec
    samples_written: int
    dropped_buffers: int = 0

    @property
    def frames(self) -> int:
        return self.samples_written // self.spec.channels

    @property
    def duration(self) -> float:
        return self.frames / float(self.spec.sample_rate)


@dataclass
class CapturedAudio:
    """
    Audio blob handed to a speech-to-text service.

    Attributes:
        data: Full byte content of the finalized WAV file.
        filename: Name sent alongside the upload (e.g., "recorded.wav").
        sample_rate: Sample rate in Hz.
        encoding: MIME type of ``data``.
    """

    data: bytes
    filename: str
    sample_rate: int
    encoding: str = "audio/wav"
