"""Fixed-duration microphone capture backed by sounddevice."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..exceptions import (
    ConfigQueryFailed,
    DeviceUnavailable,
    SampleWriteDropped,
    StreamStartFailed,
    StreamStopFailed,
)
from ..interfaces import AudioRecorder
from ..models import DeviceConfig, Recording, SampleFormat, WavSpec
from .convert import convert_block
from .sink import WavSink

logger = logging.getLogger(__name__)

MAX_DEFAULT_CHANNELS = 2
DROP_WARNING_INTERVAL = 25


class SessionState(str, Enum):
    IDLE = "idle"
    OPENED = "opened"
    STREAMING = "streaming"
    STOPPED = "stopped"
    FINALIZED = "finalized"


class CaptureSession(AudioRecorder):
    """
    Records the default input device into a WAV file for a fixed duration.

    The session moves through ``IDLE -> OPENED -> STREAMING -> STOPPED ->
    FINALIZED``. Samples arrive on the audio backend's callback thread and are
    written straight into a :class:`WavSink`; the calling thread only sleeps,
    stops the stream and finalizes the sink.

    Args:
        channels: Channel count; defaults to the device's input channels,
            capped at stereo.
        sample_rate: Sample rate in Hz; defaults to the device's default rate.
        sample_format: Native dtype name; defaults to sounddevice's default
            input dtype.

    Usage:
        session = CaptureSession()
        session.open()
        recording = session.record(Path("recorded.wav"), seconds=5)
    """

    def __init__(
        self,
        *,
        channels: Optional[int] = None,
        sample_rate: Optional[int] = None,
        sample_format: Optional[str] = None,
    ) -> None:
        self._channels = channels
        self._sample_rate = sample_rate
        self._sample_format = sample_format
        self.state = SessionState.IDLE
        self.config: Optional[DeviceConfig] = None
        self._sink: Optional[WavSink] = None
        self._format: Optional[SampleFormat] = None
        self._last_status: Optional[str] = None

    def open(self) -> DeviceConfig:
        """Select the default input device and query its stream configuration."""
        self._expect(SessionState.IDLE)
        sd = _lazy_import_sounddevice()

        try:
            info = sd.query_devices(kind="input")
        except (ValueError, sd.PortAudioError) as exc:
            raise DeviceUnavailable(f"No input device available: {exc}") from exc
        if not info:
            raise DeviceUnavailable("No input device available")

        try:
            max_channels = int(info["max_input_channels"])
            default_rate = int(round(float(info["default_samplerate"])))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigQueryFailed(f"Input device did not report a stream configuration: {exc}") from exc
        if max_channels < 1 or default_rate <= 0:
            raise ConfigQueryFailed(
                f"Input device reported an unusable configuration "
                f"({max_channels} channels, {default_rate} Hz)"
            )

        self.config = DeviceConfig(
            channels=self._channels or min(max_channels, MAX_DEFAULT_CHANNELS),
            sample_rate=self._sample_rate or default_rate,
            native_format=self._sample_format or _default_input_dtype(sd),
            device_name=str(info.get("name", "")),
        )
        logger.info(
            "Using input device %r: %d ch, %d Hz, %s",
            self.config.device_name,
            self.config.channels,
            self.config.sample_rate,
            self.config.native_format,
        )
        self.state = SessionState.OPENED
        return self.config

    def record(self, path: Union[str, Path], seconds: float) -> Recording:
        """
        Stream into ``path`` for ``seconds`` and return the finalized recording.

        The stream is stopped and closed before the sink is finalized, so no
        callback can race the final write.
        """
        if self.state is SessionState.IDLE:
            self.open()
        self._expect(SessionState.OPENED)
        sd = _lazy_import_sounddevice()

        spec = WavSpec.from_device(self.config)
        self._format = SampleFormat.from_native(self.config.native_format)
        logger.info("sample format %s", self._format.value)
        try:
            sd.check_input_settings(
                channels=self.config.channels,
                dtype=self._format.value,
                samplerate=self.config.sample_rate,
            )
        except (ValueError, sd.PortAudioError) as exc:
            raise ConfigQueryFailed(f"Input device rejected the stream configuration: {exc}") from exc

        self._sink = WavSink(path, spec)
        try:
            stream = sd.InputStream(
                samplerate=self.config.sample_rate,
                channels=self.config.channels,
                dtype=self._format.value,
                callback=self._callback,
            )
            stream.start()
        except (ValueError, sd.PortAudioError) as exc:
            self._sink.discard()
            self._sink = None
            raise StreamStartFailed(f"Could not start the input stream: {exc}") from exc

        self.state = SessionState.STREAMING
        print("Begin recording...")
        completed = False
        try:
            sd.sleep(int(seconds * 1000))
            completed = True
        finally:
            try:
                _stop_stream(sd, stream)
            except StreamStopFailed:
                completed = False
                raise
            finally:
                self.state = SessionState.STOPPED
                if not completed:
                    self._sink.discard()

        recording = self._sink.finalize()
        self.state = SessionState.FINALIZED
        if recording.dropped_buffers:
            logger.warning("Dropped %d audio buffers during capture", recording.dropped_buffers)
        print(f"Recording {recording.path} complete!")
        return recording

    def _callback(self, indata, frames, time_info, status) -> None:
        # Runs on the audio backend's thread: log failures, never raise.
        if status:
            status_str = str(status)
            if status_str != self._last_status:
                logger.warning("Audio callback status: %s", status_str)
                self._last_status = status_str

        sink = self._sink
        if sink is None or self._format is None:
            return
        try:
            sink.write_samples(convert_block(indata, self._format))
        except SampleWriteDropped as exc:
            logger.debug("%s", exc)
            if sink.dropped % DROP_WARNING_INTERVAL == 0:
                logger.warning("Dropped %d audio buffers so far", sink.dropped)
        except (RuntimeError, OSError, ValueError) as exc:
            logger.error("Failed to write audio buffer: %s", exc)

    def _expect(self, state: SessionState) -> None:
        if self.state is not state:
            raise RuntimeError(f"Capture session is {self.state.value}, expected {state.value}")


def _stop_stream(sd, stream) -> None:
    # close() runs even when stop() fails; after both, no callback can fire.
    try:
        stream.stop()
    except sd.PortAudioError as exc:
        raise StreamStopFailed(f"Could not stop the input stream: {exc}") from exc
    finally:
        try:
            stream.close()
        except sd.PortAudioError as exc:
            raise StreamStopFailed(f"Could not close the input stream: {exc}") from exc


def _default_input_dtype(sd) -> str:
    dtype = sd.default.dtype
    if not isinstance(dtype, str):
        dtype = dtype[0]
    return str(dtype or "float32")


def _lazy_import_sounddevice():
    try:
        import sounddevice as sd  # type: ignore
    except ImportError as exc:  # pragma: no cover - runtime dependency
        raise DeviceUnavailable("sounddevice is required for microphone recording. Install via pip.") from exc
    except OSError as exc:  # pragma: no cover - PortAudio missing
        raise DeviceUnavailable(f"PortAudio library not found: {exc}") from exc
    return sd
