import base64
import io

import numpy as np
import pytest
import soundfile as sf

from pipeline.note_detection import AnalysisConfig, FrameAnalysis, PitchEstimate

# 1 kHz with a 40-sample window and 20-sample hop puts frame k at t = k * 0.02s
SMALL_SR = 1000
SMALL_CONFIG = AnalysisConfig(buf_size=40, hop_size=20)


class ScriptedAnalyzer:
    """Deterministic analyzer: returns script[k] for the k-th window it sees."""

    def __init__(self, script=None, fail_at=None):
        self.script = script or {}
        self.fail_at = fail_at
        self.calls = 0
        self.window_lengths = []
        self.resets = 0

    def reset(self):
        self.calls = 0
        self.resets += 1

    def process(self, window):
        idx = self.calls
        self.calls += 1
        self.window_lengths.append(len(window))
        if idx == self.fail_at:
            raise RuntimeError("analyzer exploded")
        return self.script.get(idx, FrameAnalysis())


def note(pitch, velocity, onset=False):
    return FrameAnalysis(pitches=(PitchEstimate(pitch, velocity),), onset=onset)


def tone(duration, sr=SMALL_SR, freq=50.0, amplitude=0.5):
    t = np.arange(int(duration * sr)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def wav_base64(samples, sr, channels=1):
    data = samples if channels == 1 else np.stack([samples] * channels, axis=1)
    buf = io.BytesIO()
    sf.write(buf, data, sr, format="WAV", subtype="PCM_16")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def scripted():
    """Build a ScriptedAnalyzer plus a factory that hands it to the pipeline."""
    def make(script=None, fail_at=None):
        analyzer = ScriptedAnalyzer(script, fail_at)
        return analyzer, lambda config: analyzer
    return make
