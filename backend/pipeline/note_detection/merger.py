from .config import MERGE_PITCH_WINDOW, MERGE_TIME_WINDOW
from .types import NoteEvent


def sort_events(events: list[NoteEvent]) -> list[NoteEvent]:
    """Stable ascending sort by timestamp; ties keep emission order."""
    return sorted(events, key=lambda e: e.timestamp_s)


def merge_close_events(
    events: list[NoteEvent],
    time_window: float = MERGE_TIME_WINDOW,
    pitch_window: float = MERGE_PITCH_WINDOW,
) -> list[NoteEvent]:
    """Collapse near-duplicate strikes in a time-sorted event list.

    Greedy forward scan: each event is compared only with the running
    `current`. When both the time and pitch distance are inside the windows,
    the louder of the two becomes `current` (ties keep `current`); otherwise
    `current` is flushed.
    """
    if not events:
        return []

    merged: list[NoteEvent] = []
    current = events[0]

    for event in events[1:]:
        close_in_time = abs(event.timestamp_s - current.timestamp_s) < time_window
        close_in_pitch = abs(event.pitch - current.pitch) < pitch_window
        if close_in_time and close_in_pitch:
            if event.velocity > current.velocity:
                current = event
        else:
            merged.append(current)
            current = event

    merged.append(current)
    return merged
