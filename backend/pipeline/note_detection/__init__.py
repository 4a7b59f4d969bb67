from .analyzer import FrameAnalyzer, SpectralAnalyzer
from .config import AnalysisConfig
from .detector import detect_notes, detect_notes_async, detect_notes_from_base64
from .errors import (
    AnalyzerInitError,
    FrameAnalysisError,
    InputDecodeError,
    NoteDetectionError,
    WorkerJoinError,
)
from .types import FrameAnalysis, NoteEvent, PitchEstimate
