import numpy as np
import pytest

from pipeline.note_detection import detect_notes, detect_notes_from_base64

from conftest import wav_base64

SR = 16000


def _melody():
    """440 Hz for 0.5s, 0.2s of silence, then 660 Hz for 0.5s."""
    t = np.arange(int(0.5 * SR)) / SR
    a4 = 0.5 * np.sin(2 * np.pi * 440.0 * t)
    e5 = 0.5 * np.sin(2 * np.pi * 660.0 * t)
    gap = np.zeros(int(0.2 * SR))
    return np.concatenate([a4, gap, e5]).astype(np.float32)


class TestSpectralPipeline:

    def test_two_note_melody(self):
        events = detect_notes(_melody(), SR)

        assert any(abs(e.pitch - 69.0) < 0.5 and e.timestamp_s < 0.05 for e in events)
        assert any(abs(e.pitch - 76.02) < 0.5 and 0.6 < e.timestamp_s < 0.8 for e in events)

        times = [e.timestamp_s for e in events]
        assert times == sorted(times)
        assert all(0.0 <= e.velocity <= 1.0 for e in events)
        # nothing is emitted from inside the gap
        window = 1024 / SR
        assert not any(0.5 < e.timestamp_s and e.timestamp_s + window < 0.7 for e in events)

    def test_silence(self):
        assert detect_notes(np.zeros(SR, dtype=np.float32), SR) == []

    def test_base64_round_trip_matches_array_path(self):
        samples = _melody()
        payload = wav_base64(samples, SR)
        from_payload = detect_notes_from_base64(payload)
        assert from_payload
        assert from_payload[0][0] == pytest.approx(69.0, abs=0.5)

    def test_repeatable(self):
        first = detect_notes(_melody(), SR)
        second = detect_notes(_melody(), SR)
        assert first == second
