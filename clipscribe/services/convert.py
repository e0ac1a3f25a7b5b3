"""Per-sample conversion from the device's native format to the sink's format."""

from __future__ import annotations

from typing import Union

import numpy as np

from ..models import SampleFormat

# soundfile only accepts int16, int32, float32 and float64 buffers, so 8-bit
# samples are widened to int16 and narrowed back to 8 bits on disk.
_OUTPUT_DTYPES = {
    SampleFormat.INT8: np.int16,
    SampleFormat.INT16: np.int16,
    SampleFormat.INT32: np.int32,
    SampleFormat.FLOAT32: np.float32,
}


def output_dtype(fmt: SampleFormat) -> np.dtype:
    return np.dtype(_OUTPUT_DTYPES[fmt])


def convert_block(block: np.ndarray, fmt: SampleFormat) -> np.ndarray:
    """
    Convert one callback buffer of native samples for the WAV sink.

    Shape and interleaved channel order are preserved. The mapping is
    lossless for every supported format.

    Args:
        block: Samples as delivered by the input stream.
        fmt: Native format of ``block``.

    Returns:
        An array of :func:`output_dtype` for ``fmt``. May share memory with
        ``block`` when no conversion is required.
    """
    if fmt is SampleFormat.INT8:
        return block.astype(np.int16) << 8
    return block.astype(_OUTPUT_DTYPES[fmt], copy=False)


def convert_sample(value: Union[int, float], fmt: SampleFormat) -> Union[int, float]:
    """Single-sample form of :func:`convert_block`."""
    native = np.asarray([value], dtype=fmt.value)
    return convert_block(native, fmt)[0].item()
