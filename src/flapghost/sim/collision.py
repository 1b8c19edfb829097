from __future__ import annotations

from ..config import GameConfig
from ..geom import Hitbox, Vec2, clamp
from ..rand import rand_in_range
from .state_types import CollisionOutcome, Pipe, State

# Pipe hits push the bird this far off the pipe edge.
PIPE_NUDGE_PX = 1.0


def bird_hitbox(x: float, y: float, config: GameConfig) -> Hitbox:
    return Hitbox.centered(Vec2(float(x), float(y)), config.bird_width, config.bird_height)


def pipe_top_hitbox(pipe: Pipe, config: GameConfig) -> Hitbox:
    return Hitbox(
        left=pipe.x,
        right=pipe.x + config.pipe_width,
        top=0.0,
        bottom=pipe.gap_center_y - pipe.gap_height / 2.0,
    )


def pipe_bottom_hitbox(pipe: Pipe, config: GameConfig) -> Hitbox:
    return Hitbox(
        left=pipe.x,
        right=pipe.x + config.pipe_width,
        top=pipe.gap_center_y + pipe.gap_height / 2.0,
        bottom=float(config.canvas_height),
    )


def _bounce(seed: int, direction: float, config: GameConfig) -> tuple[float, int]:
    draw = rand_in_range(seed, config.bounce_min, config.bounce_max)
    return direction * abs(draw.value), draw.next_seed


def resolve_collisions(state: State, config: GameConfig) -> CollisionOutcome:
    """Integrate one tick of bird physics and resolve at most one bounce.

    Hits are checked in a fixed priority: top boundary, bottom boundary,
    pipe top, pipe bottom. Only the first match bounces and consumes a
    random draw; `collided` reports whether any of them matched.
    """

    dt = config.dt
    terminal = float(config.terminal_velocity)

    vy = clamp(state.bird.velocity_y + float(config.gravity) * dt, -terminal, terminal)

    y_next_raw = state.bird.pos.y + vy * dt
    min_y = config.min_y
    max_y = config.max_y
    y_clamped = clamp(y_next_raw, min_y, max_y)

    rect = bird_hitbox(state.bird.pos.x, y_clamped, config)
    hit_top = y_next_raw < min_y
    hit_bottom = y_next_raw > max_y
    hit_pipe_top = any(rect.overlaps(pipe_top_hitbox(p, config)) for p in state.pipes)
    hit_pipe_bottom = any(rect.overlaps(pipe_bottom_hitbox(p, config)) for p in state.pipes)
    collided = hit_top or hit_bottom or hit_pipe_top or hit_pipe_bottom

    if hit_top:
        bounce_vy, seed = _bounce(state.seed, 1.0, config)
        return CollisionOutcome(y=min_y, velocity_y=bounce_vy, seed=seed, collided=collided)
    if hit_bottom:
        bounce_vy, seed = _bounce(state.seed, -1.0, config)
        return CollisionOutcome(y=max_y, velocity_y=bounce_vy, seed=seed, collided=collided)
    if hit_pipe_top:
        bounce_vy, seed = _bounce(state.seed, 1.0, config)
        return CollisionOutcome(
            y=min(y_clamped + PIPE_NUDGE_PX, max_y),
            velocity_y=bounce_vy,
            seed=seed,
            collided=collided,
        )
    if hit_pipe_bottom:
        bounce_vy, seed = _bounce(state.seed, -1.0, config)
        return CollisionOutcome(
            y=max(y_clamped - PIPE_NUDGE_PX, min_y),
            velocity_y=bounce_vy,
            seed=seed,
            collided=collided,
        )

    # Resting on a clamped edge while pushing into it.
    if (y_clamped == min_y and vy < 0.0) or (y_clamped == max_y and vy > 0.0):
        vy = 0.0
    return CollisionOutcome(y=y_clamped, velocity_y=vy, seed=state.seed, collided=collided)
