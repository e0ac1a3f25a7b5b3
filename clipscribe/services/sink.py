"""Lock-guarded WAV writer shared between the audio callback and the main thread."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Union

import numpy as np
import soundfile as sf

from ..exceptions import FinalizeFailed, SampleWriteDropped
from ..models import Recording, WavSpec

logger = logging.getLogger(__name__)


class WavSink:
    """
    Appends interleaved samples to a WAV file until finalized.

    The open writer sits in an optional slot guarded by a lock. Writers never
    wait for the lock: a write that finds it taken, or finds the slot empty,
    is dropped and reported with :class:`SampleWriteDropped`. :meth:`finalize`
    waits for the lock, empties the slot and closes the file exactly once.

    Args:
        path: Destination file; created (or truncated) immediately.
        spec: Header fields; samples passed to :meth:`write_samples` must
            already be converted to match them.

    Usage:
        sink = WavSink(Path("clip.wav"), spec)
        sink.write_samples(block)
        recording = sink.finalize()
    """

    def __init__(self, path: Union[str, Path], spec: WavSpec) -> None:
        self.path = Path(path)
        self.spec = spec
        self._lock = threading.Lock()
        self._writer: Optional[sf.SoundFile] = sf.SoundFile(
            str(self.path),
            mode="w",
            samplerate=spec.sample_rate,
            channels=spec.channels,
            subtype=spec.subtype,
            format="WAV",
        )
        self._carry = np.empty(0)
        self._samples_written = 0
        self._dropped = 0
        logger.debug(
            "Opened %s (%d ch, %d Hz, %d-bit %s)",
            self.path,
            spec.channels,
            spec.sample_rate,
            spec.bits_per_sample,
            spec.sample_kind,
        )

    @property
    def samples_written(self) -> int:
        return self._samples_written

    @property
    def dropped(self) -> int:
        """Number of write calls whose samples were discarded."""
        return self._dropped

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    def write(self, sample: Union[int, float]) -> None:
        """Append one converted sample."""
        self.write_samples(np.asarray([sample], dtype=self.spec.storage_dtype))

    def write_samples(self, samples: np.ndarray) -> None:
        """
        Append converted samples in interleaved order.

        Raises:
            SampleWriteDropped: the lock was held elsewhere or the sink is
                finalized; nothing from ``samples`` was written.
        """
        if not self._lock.acquire(blocking=False):
            self._dropped += 1
            raise SampleWriteDropped("Sink is busy; samples dropped")
        try:
            writer = self._writer
            if writer is None:
                self._dropped += 1
                raise SampleWriteDropped("Sink is finalized; samples dropped")

            data = np.ravel(samples)
            if self._carry.size:
                data = np.concatenate([self._carry, data]).astype(data.dtype, copy=False)
            whole = data.size - data.size % self.spec.channels
            if whole:
                writer.write(data[:whole].reshape(-1, self.spec.channels))
                self._samples_written += whole
            self._carry = data[whole:].copy()
        finally:
            self._lock.release()

    def finalize(self) -> Recording:
        """
        Close the file so its header matches the samples written.

        Only call once the producer is stopped.

        Raises:
            FinalizeFailed: already finalized, or the file could not be flushed.
        """
        with self._lock:
            writer, self._writer = self._writer, None
            carry, self._carry = self._carry, np.empty(0)

        if writer is None:
            raise FinalizeFailed(f"{self.path} was already finalized")
        if carry.size:
            logger.warning("Discarding %d samples of an incomplete frame", carry.size)

        try:
            writer.close()
        except (RuntimeError, OSError) as exc:
            raise FinalizeFailed(f"Could not finalize {self.path}: {exc}") from exc

        logger.debug("Finalized %s with %d samples", self.path, self._samples_written)
        return Recording(
            path=self.path,
            spec=self.spec,
            samples_written=self._samples_written,
            dropped_buffers=self._dropped,
        )

    def discard(self) -> None:
        """Close the file if still open and delete it."""
        if self.is_open:
            try:
                self.finalize()
            except FinalizeFailed as exc:
                logger.warning("%s", exc)
        self.path.unlink(missing_ok=True)
