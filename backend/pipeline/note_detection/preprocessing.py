import math

import numpy as np
from scipy.signal import lfilter

from .config import LOWPASS_CUTOFF_HZ, NORMALIZE_PEAK


def normalize_audio(samples: np.ndarray) -> None:
    """Peak normalize in place so that max(|x|) == 0.95. No-op on silence."""
    if samples.size == 0:
        return
    peak = float(np.max(np.abs(samples)))
    if peak > 0:
        samples *= NORMALIZE_PEAK / peak


def apply_lowpass_filter(
    samples: np.ndarray, sample_rate: int, cutoff_hz: float = LOWPASS_CUTOFF_HZ
) -> None:
    """Single-pole IIR low-pass over the whole buffer, in place.

    y[0] = x[0]; y[i] = y[i-1] + alpha * (x[i] - y[i-1])
    """
    if samples.size < 2:
        return

    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    dt = 1.0 / sample_rate
    alpha = dt / (rc + dt)

    # zi seeds the filter so the first output equals the first input
    zi = [(1.0 - alpha) * float(samples[0])]
    filtered, _ = lfilter([alpha], [1.0, -(1.0 - alpha)], samples, zi=zi)
    samples[:] = filtered.astype(samples.dtype, copy=False)


def preprocess(samples: np.ndarray, sample_rate: int) -> np.ndarray:
    """Normalize then low-pass filter. Mutates and returns the same buffer."""
    normalize_audio(samples)
    apply_lowpass_filter(samples, sample_rate)
    return samples
