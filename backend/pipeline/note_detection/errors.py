class NoteDetectionError(Exception):
    """Base class for every failure surfaced by the note detection pipeline."""


class InputDecodeError(NoteDetectionError):
    """Malformed base64, unreadable container/codec, or no audio frames."""


class AnalyzerInitError(NoteDetectionError):
    """The frame analyzer cannot be built for this buffer/hop/sample-rate."""


class FrameAnalysisError(NoteDetectionError):
    """A per-window analyzer call failed. Aborts the whole invocation."""


class WorkerJoinError(NoteDetectionError):
    """The worker thread running the pipeline did not complete."""
