from .config import AnalysisConfig
from .types import FrameAnalysis, NoteEvent


class EventGate:
    """Turns per-window analyzer output into note events.

    An onset lowers the velocity bar (onset_velocity_threshold) because it
    corroborates a new strike; windows without one only pass estimates above
    sustained_velocity_threshold. Onsets closer than
    min_inter_onset_interval_s to the last accepted one are dropped together
    with all of their estimates.

    One gate belongs to one pipeline invocation.
    """

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.last_onset_time: float | None = None

    def process(self, time: float, analysis: FrameAnalysis) -> list[NoteEvent]:
        if analysis.onset:
            if not self._accepts_onset(time):
                return []
            self.last_onset_time = time
            threshold = self.config.onset_velocity_threshold
        else:
            threshold = self.config.sustained_velocity_threshold

        return [
            NoteEvent(pitch=est.pitch, velocity=est.velocity, timestamp_s=time)
            for est in analysis.pitches
            if est.velocity > threshold
        ]

    def _accepts_onset(self, time: float) -> bool:
        if self.last_onset_time is None:
            return True
        return time - self.last_onset_time > self.config.min_inter_onset_interval_s
