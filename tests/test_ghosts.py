from __future__ import annotations

from flapghost.config import DEFAULT_CONFIG
from flapghost.geom import Vec2
from flapghost.replay import GhostStore, ghost_frame_index, ghost_position, ghost_positions
from flapghost.sim import build_frame
from flapghost.sim.state_types import initial_state

TRACE = (Vec2(180.0, 200.0), Vec2(180.0, 201.0), Vec2(180.0, 203.0))


def test_store_starts_empty_and_appends() -> None:
    store = GhostStore()
    assert store.get() == ()

    store.append(TRACE)
    store.append(TRACE[:1])

    assert len(store) == 2
    assert store.get() == (TRACE, TRACE[:1])


def test_snapshot_taken_before_append_is_unchanged() -> None:
    store = GhostStore()
    store.append(TRACE)
    snapshot = store.get()

    store.append(TRACE[:2])

    assert snapshot == (TRACE,)
    assert len(store.get()) == 2


def test_ghost_position_indexes_by_tick() -> None:
    assert ghost_frame_index(47.0, 16) == 2
    assert ghost_position(TRACE, 0, 16) == TRACE[0]
    assert ghost_position(TRACE, 31, 16) == TRACE[1]
    assert ghost_position(TRACE, 47, 16) == TRACE[2]


def test_ghost_is_finished_past_its_trace() -> None:
    assert ghost_position(TRACE, 48, 16) is None
    assert ghost_position(TRACE, 10_000, 16) is None
    assert ghost_position((), 0, 16) is None


def test_ghost_positions_per_ghost() -> None:
    ghosts = (TRACE, TRACE[:1])
    assert ghost_positions(ghosts, 16, 16) == (TRACE[1], None)


def test_frame_reports_finished_ghosts() -> None:
    state = initial_state(DEFAULT_CONFIG, seed=1, total_planned=0, ghosts=(TRACE, TRACE[:1]))
    frame = build_frame(state, DEFAULT_CONFIG)

    assert frame.ghosts == (TRACE[0], TRACE[0])
    assert frame.visible_ghosts == 2
    assert frame.lives == DEFAULT_CONFIG.start_lives
    assert frame.game_over is False
