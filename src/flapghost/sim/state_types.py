from __future__ import annotations

from dataclasses import dataclass, field

from ..config import GameConfig
from ..geom import Vec2
from ..replay.ghosts import GhostList, Trace


@dataclass(frozen=True, slots=True)
class Bird:
    pos: Vec2
    velocity_y: float = 0.0  # +y is downward


@dataclass(frozen=True, slots=True)
class Pipe:
    id: int
    x: float  # left edge
    gap_center_y: float
    gap_height: float
    passed: bool = False


@dataclass(frozen=True, slots=True)
class CollisionOutcome:
    y: float
    velocity_y: float
    seed: int
    collided: bool


@dataclass(frozen=True, slots=True)
class State:
    time_ms: int
    game_ended: bool
    bird: Bird
    pipes: tuple[Pipe, ...] = ()
    lives: int = 3
    score: int = 0
    next_id: int = 1
    seed: int = 0
    total_planned: int = 0
    ghosts: GhostList = ()
    trace: Trace = field(default_factory=tuple)


def initial_state(
    config: GameConfig,
    *,
    seed: int,
    total_planned: int,
    ghosts: GhostList = (),
) -> State:
    return State(
        time_ms=0,
        game_ended=False,
        bird=Bird(pos=Vec2(config.bird_x, config.bird_y), velocity_y=0.0),
        pipes=(),
        lives=int(config.start_lives),
        score=0,
        next_id=1,
        seed=int(seed),
        total_planned=int(total_planned),
        ghosts=tuple(ghosts),
        trace=(),
    )
