from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .config import AnalysisConfig


@dataclass(frozen=True)
class Frame:
    start: int
    time: float
    samples: np.ndarray


@dataclass
class FrameStats:
    scanned: int = 0
    silent: int = 0

    @property
    def analyzed(self) -> int:
        return self.scanned - self.silent


def window_db(window: np.ndarray) -> float:
    """RMS level of a window in dBFS. -inf for digital silence."""
    if window.size == 0:
        return float("-inf")
    rms = float(np.sqrt(np.mean(np.square(window, dtype=np.float64))))
    if rms <= 0.0:
        return float("-inf")
    return 20.0 * np.log10(rms)


def is_silence(window: np.ndarray, threshold_db: float) -> bool:
    return window_db(window) < threshold_db


def iter_frames(
    samples: np.ndarray,
    config: AnalysisConfig,
    stats: FrameStats | None = None,
) -> Iterator[Frame]:
    """Yield the non-silent, full-length windows of `samples` in time order.

    Windows start at 0 and advance by hop_size; a trailing partial window
    is never produced.
    """
    buf_size = config.buf_size
    hop_size = config.hop_size
    sample_rate = config.sample_rate

    start = 0
    while start + buf_size <= len(samples):
        window = samples[start:start + buf_size]
        if stats is not None:
            stats.scanned += 1

        if is_silence(window, config.silence_threshold_db):
            if stats is not None:
                stats.silent += 1
        else:
            yield Frame(start=start, time=start / sample_rate, samples=window)

        start += hop_size
