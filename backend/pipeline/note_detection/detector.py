import asyncio

import numpy as np

from .analyzer import AnalyzerFactory, FrameAnalyzer, SpectralAnalyzer
from .config import AnalysisConfig
from .decoder import decode_base64_audio
from .errors import (
    AnalyzerInitError,
    FrameAnalysisError,
    NoteDetectionError,
    WorkerJoinError,
)
from .event_gate import EventGate
from .frames import FrameStats, iter_frames
from .merger import merge_close_events, sort_events
from .preprocessing import preprocess
from .types import NoteEvent


def _build_analyzer(factory: AnalyzerFactory, config: AnalysisConfig) -> FrameAnalyzer:
    try:
        analyzer = factory(config)
    except AnalyzerInitError:
        raise
    except Exception as e:
        raise AnalyzerInitError(f"Failed to create analyzer: {e}") from e
    analyzer.reset()
    return analyzer


def detect_notes(
    samples: np.ndarray,
    sample_rate: int,
    config: AnalysisConfig | None = None,
    analyzer_factory: AnalyzerFactory | None = None,
) -> list[NoteEvent]:
    """Run the note detection pipeline over one complete mono buffer.

    preprocessing -> frame scan + silence gate -> analyzer -> event gate ->
    sort -> merge. A float32 `samples` array is modified in place.

    Raises AnalyzerInitError or FrameAnalysisError; nothing is returned
    for a run that fails part-way.
    """
    config = (config or AnalysisConfig()).with_sample_rate(sample_rate)
    config.validate()
    analyzer = _build_analyzer(analyzer_factory or SpectralAnalyzer, config)
    gate = EventGate(config)

    samples = np.asarray(samples, dtype=np.float32)
    preprocess(samples, sample_rate)
    print(f"[onset] Preprocessed: {len(samples)} samples @ {sample_rate}Hz")

    stats = FrameStats()
    events: list[NoteEvent] = []
    for frame in iter_frames(samples, config, stats):
        try:
            analysis = analyzer.process(frame.samples)
        except Exception as e:
            raise FrameAnalysisError(
                f"Frame analysis failed at {frame.time:.3f}s: {e}"
            ) from e
        events.extend(gate.process(frame.time, analysis))

    print(
        f"[onset] Frames: {stats.scanned} scanned, {stats.silent} silent, "
        f"{len(events)} raw events"
    )

    merged = merge_close_events(
        sort_events(events),
        time_window=config.merge_time_window_s,
        pitch_window=config.merge_pitch_window,
    )
    print(f"[onset] Detected {len(merged)} notes/onsets")
    return merged


def detect_notes_from_base64(
    payload: str,
    config: AnalysisConfig | None = None,
    analyzer_factory: AnalyzerFactory | None = None,
) -> list[tuple[float, float, float]]:
    """Decode a base64 (or data URL) audio blob and return (pitch, velocity, time) triples."""
    print("[onset] Running onset detection on base64 audio")
    samples, sample_rate = decode_base64_audio(payload)
    events = detect_notes(samples, sample_rate, config, analyzer_factory)
    return [event.as_triple() for event in events]


async def detect_notes_async(
    payload: str,
    config: AnalysisConfig | None = None,
    analyzer_factory: AnalyzerFactory | None = None,
) -> list[tuple[float, float, float]]:
    """Run detect_notes_from_base64 on a worker thread.

    Pipeline errors propagate as-is; anything else that stops the worker
    is reported as WorkerJoinError.
    """
    try:
        return await asyncio.to_thread(
            detect_notes_from_base64, payload, config, analyzer_factory
        )
    except NoteDetectionError:
        raise
    except Exception as e:
        raise WorkerJoinError(f"Task join error: {e}") from e
