from __future__ import annotations

import math
from typing import TypeAlias

from ..geom import Vec2

Trace: TypeAlias = tuple[Vec2, ...]
GhostList: TypeAlias = tuple[Trace, ...]


class GhostStore:
    """Completed run traces, shared across runs of one engine.

    A run reads `get()` once when it starts and keeps that snapshot; traces
    appended later only show up in runs started afterwards.
    """

    __slots__ = ("_ghosts",)

    def __init__(self, ghosts: GhostList = ()) -> None:
        self._ghosts: GhostList = tuple(tuple(trace) for trace in ghosts)

    def __len__(self) -> int:
        return len(self._ghosts)

    def get(self) -> GhostList:
        return self._ghosts

    def append(self, trace: Trace) -> None:
        self._ghosts = self._ghosts + (tuple(trace),)


def ghost_frame_index(time_ms: float, tick_interval_ms: int) -> int:
    return int(math.floor(float(time_ms) / float(tick_interval_ms)))


def ghost_position(trace: Trace, time_ms: float, tick_interval_ms: int) -> Vec2 | None:
    """Position of a ghost at `time_ms` into the current run, or None once its trace is exhausted."""
    idx = ghost_frame_index(time_ms, tick_interval_ms)
    if 0 <= idx < len(trace):
        return trace[idx]
    return None


def ghost_positions(ghosts: GhostList, time_ms: float, tick_interval_ms: int) -> tuple[Vec2 | None, ...]:
    return tuple(ghost_position(trace, time_ms, tick_interval_ms) for trace in ghosts)
