from __future__ import annotations

from collections.abc import Sequence

from ..config import DEFAULT_CONFIG, GameConfig
from ..replay.recorder import RecordingError, RunRecording
from ..schedule import SpawnSpec
from .engine import StateEngine
from .state_types import State


def replay_recording(
    recording: RunRecording,
    schedule: Sequence[SpawnSpec],
    *,
    config: GameConfig = DEFAULT_CONFIG,
) -> State:
    """Re-simulate a recorded run headlessly and return its final state.

    The replay starts from an empty ghost store, so `ghosts` on the returned
    state is always empty; compare runs with `state_hash`.
    """

    if len(schedule) != int(recording.total_planned):
        raise RecordingError(
            f"recording planned {recording.total_planned} pipes, schedule has {len(schedule)}"
        )

    engine = StateEngine(schedule, config=config, seed_source=lambda: int(recording.seed))
    engine.start()
    for time_ms in recording.flap_times_ms:
        if time_ms > float(recording.end_time_ms):
            raise RecordingError(f"flap at {time_ms}ms is after run end at {recording.end_time_ms}ms")
        engine.advance_to(time_ms)
        engine.flap()
    engine.advance_to(recording.end_time_ms)

    state = engine.state
    assert state is not None
    return state
