from dataclasses import dataclass, field


@dataclass(frozen=True)
class PitchEstimate:
    pitch: float  # MIDI note number, fractional
    velocity: float  # 0.0 - 1.0

    def __post_init__(self):
        if not 0.0 <= self.velocity <= 1.0:
            raise ValueError(f"velocity must be in [0, 1], got {self.velocity}")


@dataclass(frozen=True)
class FrameAnalysis:
    """What the analyzer reports for one window."""
    pitches: tuple[PitchEstimate, ...] = field(default_factory=tuple)
    onset: bool = False


@dataclass(frozen=True)
class NoteEvent:
    pitch: float
    velocity: float
    timestamp_s: float

    def as_triple(self) -> tuple[float, float, float]:
        return (float(self.pitch), float(self.velocity), float(self.timestamp_s))
