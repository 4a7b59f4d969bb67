import pytest

from pipeline.note_detection import AnalysisConfig, FrameAnalysis, NoteEvent, PitchEstimate
from pipeline.note_detection.event_gate import EventGate

from conftest import note


def _gate(**overrides):
    return EventGate(AnalysisConfig(sample_rate=44100, **overrides))


class TestOnsetFrames:

    def test_first_onset_is_accepted(self):
        gate = _gate()
        events = gate.process(0.20, note(60, 0.8, onset=True))
        assert events == [NoteEvent(pitch=60, velocity=0.8, timestamp_s=0.20)]
        assert gate.last_onset_time == 0.20

    def test_onset_uses_lower_threshold(self):
        gate = _gate()
        events = gate.process(0.0, note(60, 0.4, onset=True))
        assert len(events) == 1

    def test_onset_threshold_is_strict(self):
        gate = _gate()
        assert gate.process(0.0, note(60, 0.3, onset=True)) == []
        # the onset itself still counts
        assert gate.last_onset_time == 0.0

    def test_filters_each_estimate(self):
        gate = _gate()
        analysis = FrameAnalysis(
            pitches=(PitchEstimate(60, 0.9), PitchEstimate(64, 0.2), PitchEstimate(67, 0.31)),
            onset=True,
        )
        events = gate.process(1.0, analysis)
        assert [e.pitch for e in events] == [60, 67]
        assert all(e.timestamp_s == 1.0 for e in events)

    def test_onset_without_pitches(self):
        gate = _gate()
        assert gate.process(0.5, FrameAnalysis(onset=True)) == []
        assert gate.last_onset_time == 0.5


class TestDebounce:

    def test_close_onset_is_suppressed(self):
        gate = _gate()
        first = gate.process(0.10, note(60, 0.8, onset=True))
        second = gate.process(0.12, note(62, 0.9, onset=True))
        assert len(first) == 1
        assert second == []
        assert gate.last_onset_time == 0.10

    def test_interval_boundary_is_suppressed(self):
        gate = _gate()
        gate.process(0.0, note(60, 0.8, onset=True))
        assert gate.process(0.05, note(60, 0.8, onset=True)) == []

    def test_onset_after_interval_is_accepted(self):
        gate = _gate()
        gate.process(0.0, note(60, 0.8, onset=True))
        events = gate.process(0.06, note(62, 0.8, onset=True))
        assert len(events) == 1
        assert gate.last_onset_time == 0.06

    def test_suppressed_onset_does_not_move_anchor(self):
        gate = _gate()
        gate.process(0.0, note(60, 0.8, onset=True))
        gate.process(0.04, note(60, 0.8, onset=True))
        events = gate.process(0.08, note(60, 0.8, onset=True))
        assert len(events) == 1
        assert gate.last_onset_time == 0.08

    def test_configurable_interval(self):
        gate = _gate(min_inter_onset_interval_s=0.2)
        gate.process(0.0, note(60, 0.8, onset=True))
        assert gate.process(0.15, note(60, 0.8, onset=True)) == []
        assert len(gate.process(0.25, note(60, 0.8, onset=True))) == 1


class TestSustainedFrames:

    def test_strong_estimate_passes(self):
        gate = _gate()
        events = gate.process(0.3, note(57, 0.7))
        assert events == [NoteEvent(pitch=57, velocity=0.7, timestamp_s=0.3)]

    def test_sustained_threshold_is_strict(self):
        gate = _gate()
        assert gate.process(0.3, note(57, 0.5)) == []

    def test_weak_estimate_dropped_without_onset(self):
        gate = _gate()
        assert gate.process(0.3, note(57, 0.4)) == []

    def test_does_not_touch_onset_state(self):
        gate = _gate()
        gate.process(0.3, note(57, 0.9))
        assert gate.last_onset_time is None

    def test_sustained_frames_pass_during_debounce(self):
        gate = _gate()
        gate.process(0.0, note(60, 0.8, onset=True))
        assert len(gate.process(0.02, note(60, 0.9))) == 1


class TestPitchEstimate:

    @pytest.mark.parametrize("velocity", [-0.1, 1.1])
    def test_velocity_out_of_range(self, velocity):
        with pytest.raises(ValueError):
            PitchEstimate(pitch=60, velocity=velocity)

    def test_bounds_are_inclusive(self):
        assert PitchEstimate(60, 0.0).velocity == 0.0
        assert PitchEstimate(60, 1.0).velocity == 1.0
