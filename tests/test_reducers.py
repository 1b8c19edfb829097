from __future__ import annotations

from dataclasses import replace

import pytest

from flapghost.config import DEFAULT_CONFIG
from flapghost.geom import Vec2
from flapghost.schedule import SpawnSpec
from flapghost.sim.reducers import flap, spawn, tick
from flapghost.sim.state_types import Bird, Pipe, State, initial_state

CFG = DEFAULT_CONFIG


def _state(**changes) -> State:
    base = initial_state(CFG, seed=0xBEEF, total_planned=5, ghosts=((Vec2(1.0, 2.0),),))
    return replace(base, **changes)


def test_tick_is_noop_once_ended() -> None:
    state = _state(game_ended=True, pipes=(Pipe(id=1, x=300.0, gap_center_y=200.0, gap_height=100.0),))
    assert tick(state, CFG) is state


def test_tick_advances_time_and_records_trace() -> None:
    state = _state()
    out = tick(state, CFG)

    assert out.time_ms == 16
    assert len(out.trace) == 1
    assert out.trace[0] == out.bird.pos
    assert out.bird.pos.x == state.bird.pos.x
    assert out.bird.pos.y == pytest.approx(200.0 + 19.2 * 0.016)
    assert out.ghosts == state.ghosts
    assert out.lives == state.lives
    assert out.game_ended is False


def test_tick_moves_pipes_left() -> None:
    pipe = Pipe(id=1, x=600.0, gap_center_y=200.0, gap_height=100.0)
    out = tick(_state(pipes=(pipe,), next_id=2), CFG)

    assert out.pipes[0].x == pytest.approx(600.0 - 150.0 * 0.016)
    assert out.pipes[0].id == 1


def test_tick_culls_pipes_past_left_edge() -> None:
    gone = Pipe(id=1, x=-49.0, gap_center_y=200.0, gap_height=100.0, passed=True)
    stays = Pipe(id=2, x=-47.0, gap_center_y=200.0, gap_height=100.0, passed=True)
    out = tick(_state(pipes=(gone, stays), next_id=3), CFG)

    assert [p.id for p in out.pipes] == [2]


def test_pipe_fully_off_screen_is_removed_next_tick() -> None:
    pipe = Pipe(id=1, x=-CFG.pipe_width, gap_center_y=200.0, gap_height=100.0, passed=True)
    out = tick(_state(pipes=(pipe,), next_id=2), CFG)
    assert out.pipes == ()


def test_passing_a_pipe_scores_once() -> None:
    pipe = Pipe(id=1, x=50.0, gap_center_y=200.0, gap_height=100.0)
    state = _state(pipes=(pipe,), next_id=2, score=4)

    first = tick(state, CFG)
    assert first.pipes[0].passed is True
    assert first.score == 5

    second = tick(first, CFG)
    assert second.pipes[0].passed is True
    assert second.score == 5


def test_pipe_right_of_bird_is_not_passed() -> None:
    pipe = Pipe(id=1, x=300.0, gap_center_y=200.0, gap_height=100.0)
    out = tick(_state(pipes=(pipe,), next_id=2), CFG)
    assert out.pipes[0].passed is False
    assert out.score == 0


def test_collision_costs_a_life() -> None:
    state = _state(bird=Bird(pos=Vec2(CFG.bird_x, CFG.min_y), velocity_y=-600.0), lives=3)
    out = tick(state, CFG)

    assert out.lives == 2
    assert out.game_ended is False
    assert out.seed != state.seed


def test_last_life_lost_ends_the_run() -> None:
    state = _state(bird=Bird(pos=Vec2(CFG.bird_x, CFG.min_y), velocity_y=-600.0), lives=1)
    out = tick(state, CFG)

    assert out.lives == 0
    assert out.game_ended is True
    assert out.bird.pos.y == CFG.min_y
    assert CFG.bounce_min <= out.bird.velocity_y <= CFG.bounce_max


def test_run_ends_when_all_pipes_spawned_and_cleared() -> None:
    done = tick(_state(total_planned=2, next_id=3, pipes=()), CFG)
    waiting = tick(_state(total_planned=2, next_id=2, pipes=()), CFG)

    assert done.game_ended is True
    assert waiting.game_ended is False


def test_run_continues_while_pipes_remain_on_screen() -> None:
    pipe = Pipe(id=1, x=300.0, gap_center_y=200.0, gap_height=100.0)
    out = tick(_state(total_planned=1, next_id=2, pipes=(pipe,)), CFG)
    assert out.game_ended is False


def test_flap_overrides_velocity_only() -> None:
    state = _state(bird=Bird(pos=Vec2(CFG.bird_x, 250.0), velocity_y=480.0))
    out = flap(state, CFG)

    assert out.bird.velocity_y == CFG.flap_velocity
    assert out.bird.pos == state.bird.pos
    assert replace(out, bird=state.bird) == state


def test_flap_then_tick_integrates_from_flap_velocity() -> None:
    out = tick(flap(_state(), CFG), CFG)
    assert out.bird.velocity_y == pytest.approx(-350.0 + 19.2)
    assert out.bird.pos.y == pytest.approx(200.0 + (-350.0 + 19.2) * 0.016)


def test_spawn_appends_pipe_at_right_edge() -> None:
    existing = Pipe(id=3, x=400.0, gap_center_y=200.0, gap_height=100.0)
    state = _state(pipes=(existing,), next_id=4)
    out = spawn(state, SpawnSpec(gap_center_y=120.0, gap_height=90.0, time_offset_ms=0.0), CFG)

    assert out.next_id == 5
    assert out.pipes[0] == existing
    assert out.pipes[1] == Pipe(id=4, x=600.0, gap_center_y=120.0, gap_height=90.0, passed=False)


def test_every_reducer_is_a_fixed_point_after_end() -> None:
    state = _state(game_ended=True, lives=0)
    spec = SpawnSpec(gap_center_y=120.0, gap_height=90.0, time_offset_ms=0.0)

    assert tick(state, CFG) == state
    assert flap(state, CFG) == state
    assert spawn(state, spec, CFG) == state
