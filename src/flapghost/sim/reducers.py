from __future__ import annotations

"""Pure `State -> State` transitions folded by the engine."""

from collections.abc import Callable
from dataclasses import replace
from typing import TypeAlias

from ..config import GameConfig
from ..schedule import SpawnSpec
from .collision import resolve_collisions
from .state_types import Bird, Pipe, State

Reducer: TypeAlias = Callable[[State], State]


def tick(state: State, config: GameConfig) -> State:
    if state.game_ended:
        return state

    dt = config.dt

    outcome = resolve_collisions(state, config)
    lives = max(0, state.lives - 1) if outcome.collided else state.lives

    shift = float(config.pipe_speed) * dt
    moved = [replace(p, x=p.x - shift) for p in state.pipes]
    kept = [p for p in moved if p.x > -float(config.pipe_width)]

    bird_left = state.bird.pos.x - float(config.bird_width) / 2.0
    newly_passed = 0
    pipes: list[Pipe] = []
    for p in kept:
        if not p.passed and p.x + float(config.pipe_width) < bird_left:
            p = replace(p, passed=True)
            newly_passed += 1
        pipes.append(p)

    all_spawned = state.next_id - 1 >= state.total_planned
    game_ended = lives <= 0 or (all_spawned and not pipes)

    pos = state.bird.pos.with_y(outcome.y)
    return replace(
        state,
        time_ms=state.time_ms + int(config.tick_interval_ms),
        game_ended=game_ended,
        bird=Bird(pos=pos, velocity_y=outcome.velocity_y),
        pipes=tuple(pipes),
        lives=lives,
        score=state.score + newly_passed,
        seed=outcome.seed,
        trace=state.trace + (pos,),
    )


def flap(state: State, config: GameConfig) -> State:
    if state.game_ended:
        return state
    return replace(state, bird=replace(state.bird, velocity_y=float(config.flap_velocity)))


def spawn(state: State, spec: SpawnSpec, config: GameConfig) -> State:
    if state.game_ended:
        return state
    pipe = Pipe(
        id=state.next_id,
        x=float(config.canvas_width),
        gap_center_y=spec.gap_center_y,
        gap_height=spec.gap_height,
        passed=False,
    )
    return replace(state, next_id=state.next_id + 1, pipes=state.pipes + (pipe,))


def tick_reducer(config: GameConfig) -> Reducer:
    return lambda state: tick(state, config)


def flap_reducer(config: GameConfig) -> Reducer:
    return lambda state: flap(state, config)


def spawn_reducer(spec: SpawnSpec, config: GameConfig) -> Reducer:
    return lambda state: spawn(state, spec, config)
