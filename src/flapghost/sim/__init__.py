from __future__ import annotations

from .collision import bird_hitbox, pipe_bottom_hitbox, pipe_top_hitbox, resolve_collisions
from .engine import StateEngine
from .fingerprint import state_hash
from .presentation import Frame, PipeFrame, build_frame, format_frame
from .reducers import flap, spawn, tick
from .runner import replay_recording
from .state_types import Bird, CollisionOutcome, GhostList, Pipe, State, Trace, initial_state

__all__ = [
    "Bird",
    "CollisionOutcome",
    "Frame",
    "GhostList",
    "Pipe",
    "PipeFrame",
    "State",
    "StateEngine",
    "Trace",
    "bird_hitbox",
    "build_frame",
    "flap",
    "format_frame",
    "initial_state",
    "pipe_bottom_hitbox",
    "pipe_top_hitbox",
    "replay_recording",
    "resolve_collisions",
    "spawn",
    "state_hash",
    "tick",
]
