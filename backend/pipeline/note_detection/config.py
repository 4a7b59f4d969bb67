import os
from dataclasses import dataclass, replace

from .errors import AnalyzerInitError

# ── Framing ───────────────────────────────────────────────────────────
BUF_SIZE = 1024
HOP_SIZE = 512  # half the window

# ── Preprocessing ─────────────────────────────────────────────────────
NORMALIZE_PEAK = 0.95
LOWPASS_CUTOFF_HZ = 8000.0

# ── Silence gate ──────────────────────────────────────────────────────
SILENCE_THRESHOLD_DB = -50.0

# ── Event gate ────────────────────────────────────────────────────────
MIN_INTER_ONSET_INTERVAL = 0.05  # seconds
ONSET_VELOCITY_THRESHOLD = 0.3
SUSTAINED_VELOCITY_THRESHOLD = 0.5

# ── Merge ─────────────────────────────────────────────────────────────
MERGE_TIME_WINDOW = 0.05  # seconds
MERGE_PITCH_WINDOW = 2.0  # semitones

# ── Spectral analyzer ─────────────────────────────────────────────────
FMIN = 65
FMAX = 2093
ONSET_FLUX_THRESHOLD = 0.3
VOICING_THRESHOLD = 0.6  # normalized autocorrelation at the YIN period
VELOCITY_FLOOR_DB = -60.0


@dataclass(frozen=True)
class AnalysisConfig:
    buf_size: int = BUF_SIZE
    hop_size: int = HOP_SIZE
    sample_rate: int | None = None
    silence_threshold_db: float = SILENCE_THRESHOLD_DB
    min_inter_onset_interval_s: float = MIN_INTER_ONSET_INTERVAL
    onset_velocity_threshold: float = ONSET_VELOCITY_THRESHOLD
    sustained_velocity_threshold: float = SUSTAINED_VELOCITY_THRESHOLD
    merge_time_window_s: float = MERGE_TIME_WINDOW
    merge_pitch_window: float = MERGE_PITCH_WINDOW

    def with_sample_rate(self, sample_rate: int) -> "AnalysisConfig":
        return replace(self, sample_rate=int(sample_rate))

    def validate(self) -> None:
        """Check the buffer/hop/sample-rate relationship.

        Raises AnalyzerInitError when no analyzer can be built for it.
        """
        if self.buf_size <= 0:
            raise AnalyzerInitError(f"buf_size must be > 0, got {self.buf_size}")
        if self.hop_size <= 0 or self.hop_size > self.buf_size:
            raise AnalyzerInitError(
                f"hop_size must be in (0, buf_size={self.buf_size}], got {self.hop_size}"
            )
        if self.sample_rate is None or self.sample_rate <= 0:
            raise AnalyzerInitError(f"sample_rate must be > 0, got {self.sample_rate}")

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Build a config from NOTE_* environment variables, falling back to defaults."""
        return cls(
            buf_size=int(os.getenv("NOTE_BUF_SIZE", BUF_SIZE)),
            hop_size=int(os.getenv("NOTE_HOP_SIZE", HOP_SIZE)),
            silence_threshold_db=float(os.getenv("NOTE_SILENCE_DB", SILENCE_THRESHOLD_DB)),
            min_inter_onset_interval_s=float(
                os.getenv("NOTE_MIN_IOI", MIN_INTER_ONSET_INTERVAL)
            ),
            onset_velocity_threshold=float(
                os.getenv("NOTE_ONSET_VELOCITY", ONSET_VELOCITY_THRESHOLD)
            ),
            sustained_velocity_threshold=float(
                os.getenv("NOTE_SUSTAINED_VELOCITY", SUSTAINED_VELOCITY_THRESHOLD)
            ),
            merge_time_window_s=float(os.getenv("NOTE_MERGE_TIME", MERGE_TIME_WINDOW)),
            merge_pitch_window=float(os.getenv("NOTE_MERGE_PITCH", MERGE_PITCH_WINDOW)),
        )
