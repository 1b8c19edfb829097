from __future__ import annotations

"""Render-ready view of a `State`.

Renderers stay outside the package; this derives the geometry they need
(bird box, pipe boxes keyed by id, ghost positions, HUD values).
"""

from dataclasses import dataclass

from ..config import GameConfig
from ..geom import Hitbox, Vec2
from ..replay.ghosts import ghost_positions
from .collision import bird_hitbox, pipe_bottom_hitbox, pipe_top_hitbox
from .state_types import State


@dataclass(frozen=True, slots=True)
class PipeFrame:
    id: int
    top: Hitbox
    bottom: Hitbox
    passed: bool


@dataclass(frozen=True, slots=True)
class Frame:
    time_ms: int
    bird: Hitbox
    pipes: tuple[PipeFrame, ...]
    ghosts: tuple[Vec2 | None, ...]
    lives: int
    score: int
    game_over: bool

    @property
    def visible_ghosts(self) -> int:
        return sum(1 for pos in self.ghosts if pos is not None)


def build_frame(state: State, config: GameConfig) -> Frame:
    return Frame(
        time_ms=state.time_ms,
        bird=bird_hitbox(state.bird.pos.x, state.bird.pos.y, config),
        pipes=tuple(
            PipeFrame(
                id=pipe.id,
                top=pipe_top_hitbox(pipe, config),
                bottom=pipe_bottom_hitbox(pipe, config),
                passed=pipe.passed,
            )
            for pipe in state.pipes
        ),
        ghosts=ghost_positions(state.ghosts, state.time_ms, config.tick_interval_ms),
        lives=state.lives,
        score=state.score,
        game_over=state.game_ended,
    )


def format_frame(frame: Frame) -> str:
    pipes = " ".join(f"#{p.id}@{p.top.left:.1f}" for p in frame.pipes) or "-"
    status = " GAME OVER" if frame.game_over else ""
    return (
        f"t={frame.time_ms:6d}ms bird_y={(frame.bird.top + frame.bird.bottom) / 2.0:7.2f} "
        f"lives={frame.lives} score={frame.score} ghosts={frame.visible_ghosts}/{len(frame.ghosts)} "
        f"pipes={pipes}{status}"
    )
