from __future__ import annotations

import hashlib
import struct

from .state_types import Pipe, State

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_F64 = struct.Struct("<d")


def _h_u8(h: "hashlib._Hash", value: int) -> None:
    h.update(_U8.pack(int(value) & 0xFF))


def _h_u32(h: "hashlib._Hash", value: int) -> None:
    h.update(_U32.pack(int(value) & 0xFFFF_FFFF))


def _h_i64(h: "hashlib._Hash", value: int) -> None:
    h.update(_I64.pack(int(value)))


def _h_f64(h: "hashlib._Hash", value: float) -> None:
    h.update(_F64.pack(float(value)))


def _hash_pipe(h: "hashlib._Hash", pipe: Pipe) -> None:
    _h_i64(h, pipe.id)
    _h_f64(h, pipe.x)
    _h_f64(h, pipe.gap_center_y)
    _h_f64(h, pipe.gap_height)
    _h_u8(h, 1 if pipe.passed else 0)


def state_hash(state: State) -> str:
    """Stable digest of everything a run's dynamics produce.

    `ghosts` is excluded: it is injected from earlier runs and never feeds
    back into the simulation.
    """
    h = hashlib.sha256()
    _h_i64(h, state.time_ms)
    _h_u8(h, 1 if state.game_ended else 0)
    _h_f64(h, state.bird.pos.x)
    _h_f64(h, state.bird.pos.y)
    _h_f64(h, state.bird.velocity_y)
    _h_i64(h, state.lives)
    _h_i64(h, state.score)
    _h_i64(h, state.next_id)
    _h_u32(h, state.seed)
    _h_i64(h, state.total_planned)

    _h_u32(h, len(state.pipes))
    for pipe in state.pipes:
        _hash_pipe(h, pipe)

    _h_u32(h, len(state.trace))
    for point in state.trace:
        _h_f64(h, point.x)
        _h_f64(h, point.y)
    return h.hexdigest()
