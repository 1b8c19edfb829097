from __future__ import annotations

from .ghosts import GhostList, GhostStore, Trace, ghost_frame_index, ghost_position, ghost_positions
from .recorder import RecordingError, RunRecorder, RunRecording

__all__ = [
    "GhostList",
    "GhostStore",
    "RecordingError",
    "RunRecorder",
    "RunRecording",
    "Trace",
    "ghost_frame_index",
    "ghost_position",
    "ghost_positions",
]
