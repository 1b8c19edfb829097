from __future__ import annotations

"""Run orchestration: merges tick, flap and spawn events into one fold.

Time is virtual and run-relative. Callers move it forward with `advance`;
every event due within the window is popped in `(time, source, arrival)`
order and its reducer applied to the current `State`.
"""

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from ..config import DEFAULT_CONFIG, GameConfig
from ..console import ConsoleLog
from ..rand import SEED_LIMIT
from ..replay.ghosts import GhostStore
from ..replay.recorder import RunRecorder, RunRecording
from ..schedule import SpawnSpec
from .events import EngineEvent, EventQueue, FlapEvent, SpawnEvent, TickEvent, timer_due_ms
from .reducers import Reducer, flap_reducer, spawn_reducer, tick_reducer
from .state_types import State, initial_state

EngineStatus: TypeAlias = Literal["idle", "running"]
Observer: TypeAlias = Callable[[State], None]


def random_seed() -> int:
    return random.randrange(SEED_LIMIT)


@dataclass(slots=True)
class RunHandle:
    run_id: int
    state: State
    recorder: RunRecorder
    queue: EventQueue = field(default_factory=EventQueue)
    clock_ms: float = 0.0
    cancelled: bool = False
    ghost_recorded: bool = False


class StateEngine:
    def __init__(
        self,
        schedule: Sequence[SpawnSpec],
        *,
        config: GameConfig = DEFAULT_CONFIG,
        ghost_store: GhostStore | None = None,
        seed_source: Callable[[], int] | None = None,
        log: ConsoleLog | None = None,
    ) -> None:
        self._schedule = tuple(schedule)
        self.config = config
        self.ghost_store = ghost_store if ghost_store is not None else GhostStore()
        self._seed_source = seed_source if seed_source is not None else random_seed
        self.log = log if log is not None else ConsoleLog()
        self.recordings: list[RunRecording] = []

        self._observers: list[Observer] = []
        self._run: RunHandle | None = None
        self._next_run_id = 1

        self._tick = tick_reducer(config)
        self._flap = flap_reducer(config)

    @property
    def status(self) -> EngineStatus:
        return "idle" if self._run is None else "running"

    @property
    def state(self) -> State | None:
        if self._run is None:
            return None
        return self._run.state

    @property
    def run_id(self) -> int | None:
        if self._run is None:
            return None
        return self._run.run_id

    @property
    def clock_ms(self) -> float:
        if self._run is None:
            return 0.0
        return self._run.clock_ms

    @property
    def pending_events(self) -> int:
        if self._run is None:
            return 0
        return len(self._run.queue)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # -- input triggers -------------------------------------------------

    def start(self) -> State:
        """Begin the first run. Later start triggers are ignored."""
        if self._run is not None:
            return self._run.state
        return self._begin_run()

    def restart(self) -> State:
        """Cancel the current run (if any) and begin a fresh one."""
        if self._run is not None:
            self._cancel_run(self._run)
        return self._begin_run()

    def flap(self) -> State | None:
        """Apply a flap at the current run clock.

        Live input lands after every event already folded at this clock, so a
        spawn due at the same instant is observed before the flap.
        """
        run = self._run
        if run is None:
            return None
        if not run.state.game_ended:
            run.recorder.record_flap(run.clock_ms)
        run.queue.push(FlapEvent(run_id=run.run_id, time_ms=run.clock_ms))
        self._drain(run, run.clock_ms)
        return self.state

    # -- time -----------------------------------------------------------

    def advance(self, dt_ms: float) -> list[State]:
        """Move the run clock forward by `dt_ms`, folding every event that falls due."""
        run = self._run
        if run is None or not (float(dt_ms) > 0.0):
            return []
        target = run.clock_ms + float(dt_ms)
        produced = self._drain(run, target)
        if not run.cancelled:
            run.clock_ms = target
        return produced

    def advance_to(self, time_ms: float) -> list[State]:
        if self._run is None:
            return []
        return self.advance(float(time_ms) - self._run.clock_ms)

    def run_until_ended(self, *, max_ms: float) -> State | None:
        """Step tick by tick until the run ends or `max_ms` of run time has elapsed."""
        step = float(self.config.tick_interval_ms)
        run = self._run
        while run is not None and run is self._run and not run.state.game_ended and run.clock_ms < float(max_ms):
            self.advance(min(step, float(max_ms) - run.clock_ms))
        return self.state

    # -- internals ------------------------------------------------------

    def _begin_run(self) -> State:
        run_id = self._next_run_id
        self._next_run_id += 1

        seed = int(self._seed_source())
        ghosts = self.ghost_store.get()
        state = initial_state(self.config, seed=seed, total_planned=len(self._schedule), ghosts=ghosts)
        run = RunHandle(
            run_id=run_id,
            state=state,
            recorder=RunRecorder(seed=seed, total_planned=len(self._schedule)),
        )

        run.queue.push(TickEvent(run_id=run_id, time_ms=float(self.config.tick_interval_ms)))
        for idx, spec in enumerate(self._schedule):
            run.queue.push(
                SpawnEvent(run_id=run_id, time_ms=timer_due_ms(spec.time_offset_ms), spec=spec, index=idx)
            )

        self._run = run
        self.log.log(f"run {run_id}: start seed=0x{seed:08x} planned={len(self._schedule)} ghosts={len(ghosts)}")

        # Zero-offset spawns are due immediately.
        self._drain(run, 0.0)
        return run.state

    def _cancel_run(self, run: RunHandle) -> None:
        run.cancelled = True
        dropped = run.queue.cancel_all()
        if not run.recorder.finished:
            self.recordings.append(run.recorder.finish(end_time_ms=run.clock_ms, ended=run.state.game_ended))
        if self._run is run:
            self._run = None
        self.log.log(f"run {run.run_id}: cancelled at {run.clock_ms:.0f}ms, dropped {dropped} pending events")

    def _reducer_for(self, event: EngineEvent) -> Reducer:
        if isinstance(event, TickEvent):
            return self._tick
        if isinstance(event, FlapEvent):
            return self._flap
        return spawn_reducer(event.spec, self.config)

    def _drain(self, run: RunHandle, until_ms: float) -> list[State]:
        produced: list[State] = []
        while not run.cancelled:
            event = run.queue.pop_due(until_ms)
            if event is None:
                break
            run.clock_ms = max(run.clock_ms, float(event.time_ms))
            if isinstance(event, TickEvent):
                run.queue.push(
                    TickEvent(run_id=run.run_id, time_ms=event.time_ms + float(self.config.tick_interval_ms))
                )
            state = self._fold(run, event)
            if state is not None:
                produced.append(state)
        return produced

    def _fold(self, run: RunHandle, event: EngineEvent) -> State | None:
        if run.cancelled or run is not self._run or event.run_id != run.run_id:
            self.log.log(f"run {run.run_id}: dropped stale event from run {event.run_id}")
            return None

        prev = run.state
        state = self._reducer_for(event)(prev)
        run.state = state

        if isinstance(event, SpawnEvent) and state is not prev:
            self.log.log(
                f"run {run.run_id}: spawn pipe id={prev.next_id} (schedule row {event.index}) at {event.time_ms:.0f}ms"
            )
        if state.game_ended and not prev.game_ended:
            self._finish_run(run, state)

        for observer in list(self._observers):
            observer(state)
        return state

    def _finish_run(self, run: RunHandle, state: State) -> None:
        if run.ghost_recorded:
            return
        run.ghost_recorded = True
        self.ghost_store.append(state.trace)
        self.recordings.append(run.recorder.finish(end_time_ms=run.clock_ms, ended=True))
        self.log.log(
            f"run {run.run_id}: game over at {state.time_ms}ms score={state.score} lives={state.lives} "
            f"trace={len(state.trace)} ghosts_stored={len(self.ghost_store)}"
        )
