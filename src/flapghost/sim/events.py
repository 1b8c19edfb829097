from __future__ import annotations

"""Timestamped engine events and the per-run event queue."""

import heapq
import itertools
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias

from ..schedule import SpawnSpec


class EventSource(IntEnum):
    # Same-instant delivery order: lower value first.
    TICK = 0
    FLAP = 1
    SPAWN = 2


@dataclass(frozen=True, slots=True)
class TickEvent:
    run_id: int
    time_ms: float


@dataclass(frozen=True, slots=True)
class FlapEvent:
    run_id: int
    time_ms: float


@dataclass(frozen=True, slots=True)
class SpawnEvent:
    run_id: int
    time_ms: float
    spec: SpawnSpec
    index: int


EngineEvent: TypeAlias = TickEvent | FlapEvent | SpawnEvent


def event_source(event: EngineEvent) -> EventSource:
    if isinstance(event, TickEvent):
        return EventSource.TICK
    if isinstance(event, FlapEvent):
        return EventSource.FLAP
    return EventSource.SPAWN


def timer_due_ms(offset_ms: float) -> float:
    """Clamp a timer offset the way a host timer would: NaN or negative fires at 0."""
    offset_ms = float(offset_ms)
    if math.isnan(offset_ms) or offset_ms < 0.0:
        return 0.0
    return offset_ms


class EventQueue:
    """Min-heap ordered by `(time_ms, source, arrival)`."""

    __slots__ = ("_heap", "_seq")

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, int, EngineEvent]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, event: EngineEvent) -> None:
        heapq.heappush(self._heap, (float(event.time_ms), int(event_source(event)), next(self._seq), event))

    def pop_due(self, until_ms: float) -> EngineEvent | None:
        if not self._heap or self._heap[0][0] > float(until_ms):
            return None
        return heapq.heappop(self._heap)[3]

    def cancel_all(self) -> int:
        dropped = len(self._heap)
        self._heap.clear()
        return dropped
