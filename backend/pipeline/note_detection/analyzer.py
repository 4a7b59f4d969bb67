from typing import Callable, Protocol

import librosa
import numpy as np
from scipy.signal import get_window

from .config import (
    AnalysisConfig,
    FMAX,
    FMIN,
    ONSET_FLUX_THRESHOLD,
    VELOCITY_FLOOR_DB,
    VOICING_THRESHOLD,
)
from .errors import AnalyzerInitError
from .frames import window_db
from .types import FrameAnalysis, PitchEstimate


class FrameAnalyzer(Protocol):
    """Stateful per-window pitch + onset estimator.

    Windows must be exactly buf_size long and arrive in increasing time order.
    """

    def reset(self) -> None: ...

    def process(self, window: np.ndarray) -> FrameAnalysis: ...


AnalyzerFactory = Callable[[AnalysisConfig], FrameAnalyzer]


class SpectralAnalyzer:
    """Default analyzer: YIN pitch + spectral-flux onsets.

    A pitch estimate is reported only when a note starts: the first voiced
    window, a change of rounded MIDI pitch, or a window carrying an onset.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        fmin: float = FMIN,
        fmax: float = FMAX,
        onset_threshold: float = ONSET_FLUX_THRESHOLD,
        voicing_threshold: float = VOICING_THRESHOLD,
    ):
        config.validate()
        self.buf_size = config.buf_size
        self.sample_rate = config.sample_rate
        self.fmin = float(fmin)
        self.fmax = min(float(fmax), self.sample_rate / 2)
        self.onset_threshold = onset_threshold
        self.voicing_threshold = voicing_threshold

        # YIN needs room for the longest lag after its half-length integration window
        max_lag = self.buf_size - self.buf_size // 2 - 1
        if self.fmin >= self.fmax or max_lag <= self.sample_rate // self.fmax:
            raise AnalyzerInitError(
                f"Cannot track pitch in [{self.fmin:.0f}, {self.fmax:.0f}] Hz with "
                f"buf_size={self.buf_size} at {self.sample_rate} Hz"
            )

        self._window = get_window("hann", self.buf_size, fftbins=True)
        self._prev_mag: np.ndarray | None = None
        self._last_pitch: int | None = None

    def reset(self) -> None:
        self._prev_mag = None
        self._last_pitch = None

    def process(self, window: np.ndarray) -> FrameAnalysis:
        onset = self.estimate_onset(window)
        pitches = self.estimate_pitches(window, onset=onset)
        return FrameAnalysis(pitches=tuple(pitches), onset=onset)

    def estimate_onset(self, window: np.ndarray) -> bool:
        """Half-wave rectified spectral flux against the previous window."""
        self._check_window(window)
        mag = np.abs(np.fft.rfft(window * self._window))
        prev = self._prev_mag if self._prev_mag is not None else np.zeros_like(mag)
        self._prev_mag = mag

        energy = float(np.sum(mag))
        if energy <= 0.0:
            return False
        flux = float(np.sum(np.maximum(mag - prev, 0.0))) / energy
        return flux > self.onset_threshold

    def estimate_pitches(self, window: np.ndarray, onset: bool = False) -> list[PitchEstimate]:
        self._check_window(window)
        f0 = float(librosa.yin(
            window,
            fmin=self.fmin,
            fmax=self.fmax,
            sr=self.sample_rate,
            frame_length=self.buf_size,
            center=False,
        )[0])

        if not np.isfinite(f0) or f0 <= 0 or not self._is_voiced(window, f0):
            self._last_pitch = None
            return []

        pitch = float(librosa.hz_to_midi(f0))
        rounded = int(round(pitch))
        if rounded == self._last_pitch and not onset:
            return []
        self._last_pitch = rounded

        return [PitchEstimate(pitch=pitch, velocity=self._velocity(window))]

    def _is_voiced(self, window: np.ndarray, f0: float) -> bool:
        # Normalized autocorrelation at the detected period
        lag = int(round(self.sample_rate / f0))
        if lag <= 0 or lag >= len(window):
            return False
        x = window.astype(np.float64)
        a, b = x[:-lag], x[lag:]
        energy = float(np.sqrt(np.dot(a, a) * np.dot(b, b)))
        if energy <= 0.0:
            return False
        clarity = float(np.dot(a, b)) / energy
        return clarity >= self.voicing_threshold

    def _velocity(self, window: np.ndarray) -> float:
        db = window_db(window)
        return float(np.clip((db - VELOCITY_FLOOR_DB) / -VELOCITY_FLOOR_DB, 0.0, 1.0))

    def _check_window(self, window: np.ndarray) -> None:
        if len(window) != self.buf_size:
            raise ValueError(f"Expected a window of {self.buf_size} samples, got {len(window)}")
