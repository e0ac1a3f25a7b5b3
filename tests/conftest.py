"""Shared pytest fixtures: a scripted stand-in for the sounddevice module."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import numpy as np
import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from clipscribe.services import capture


class FakePortAudioError(Exception):
    pass


def make_block(frames: int, channels: int, dtype: str, offset: int = 0) -> np.ndarray:
    """Deterministic interleaved test signal in the given dtype."""
    ramp = np.arange(offset, offset + frames * channels)
    if dtype == "float32":
        values = ((ramp % 200) - 100) / 200.0
    else:
        values = (ramp % 200) - 100
    return values.astype(dtype).reshape(frames, channels)


class FakeInputStream:
    """Delivers all scripted buffers to the callback synchronously on start()."""

    def __init__(self, owner: "FakeSoundDevice", *, samplerate, channels, dtype, callback) -> None:
        self.owner = owner
        self.samplerate = samplerate
        self.channels = channels
        self.dtype = dtype
        self.callback = callback
        self.started = False
        self.stopped = False
        self.closed = False

    def start(self) -> None:
        if self.owner.start_error:
            raise self.owner.PortAudioError(self.owner.start_error)
        self.started = True
        for index in range(self.owner.buffers):
            block = make_block(self.owner.frames, self.channels, self.dtype, offset=index * self.owner.frames)
            self.callback(block, self.owner.frames, None, self.owner.status)

    def stop(self) -> None:
        self.stopped = True

    def close(self) -> None:
        self.closed = True


class FakeSoundDevice:
    PortAudioError = FakePortAudioError

    def __init__(
        self,
        *,
        device: Optional[Dict[str, Any]] = None,
        dtype: str = "float32",
        buffers: int = 3,
        frames: int = 441,
    ) -> None:
        self.device = device
        self.default = SimpleNamespace(dtype=(dtype, dtype))
        self.buffers = buffers
        self.frames = frames
        self.status = ""
        self.start_error: Optional[str] = None
        self.reject_settings: Optional[str] = None
        self.streams: List[FakeInputStream] = []
        self.slept_ms: List[int] = []

    def query_devices(self, device=None, kind=None):
        assert kind == "input"
        if self.device is None:
            raise self.PortAudioError("Error querying device -1")
        return dict(self.device)

    def check_input_settings(self, device=None, channels=None, dtype=None, extra_settings=None, samplerate=None):
        if self.reject_settings:
            raise self.PortAudioError(self.reject_settings)

    def InputStream(self, **kwargs) -> FakeInputStream:
        stream = FakeInputStream(self, **kwargs)
        self.streams.append(stream)
        return stream

    def sleep(self, msec: int) -> None:
        self.slept_ms.append(msec)


def default_device(**overrides: Any) -> Dict[str, Any]:
    device = {
        "name": "Built-in Microphone",
        "max_input_channels": 2,
        "default_samplerate": 44100.0,
    }
    device.update(overrides)
    return device


@pytest.fixture
def fake_sd(monkeypatch) -> FakeSoundDevice:
    """Stereo 44.1 kHz int16 microphone."""
    sd = FakeSoundDevice(device=default_device(), dtype="int16")
    monkeypatch.setattr(capture, "_lazy_import_sounddevice", lambda: sd)
    return sd


@pytest.fixture
def install_sd(monkeypatch):
    """Install a custom FakeSoundDevice for the capture module."""

    def _install(sd: FakeSoundDevice) -> FakeSoundDevice:
        monkeypatch.setattr(capture, "_lazy_import_sounddevice", lambda: sd)
        return sd

    return _install
