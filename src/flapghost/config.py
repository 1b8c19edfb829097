from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from platformdirs import PlatformDirs

APP_NAME = "flapghost"
CONFIG_FILE_NAME = "flapghost.toml"
CONFIG_TABLE = "game"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class GameConfig:
    # Viewport
    canvas_width: float = 600.0
    canvas_height: float = 400.0

    # Bird sprite box; the bird's x never changes during a run.
    bird_width: float = 42.0
    bird_height: float = 30.0
    bird_x_fraction: float = 0.3

    pipe_width: float = 50.0
    pipe_speed: float = 150.0  # px/s, leftward
    tick_interval_ms: int = 16

    # Physics (px, px/s, px/s^2; +y is downward)
    gravity: float = 1200.0
    flap_velocity: float = -350.0
    terminal_velocity: float = 600.0
    bounce_min: float = 220.0
    bounce_max: float = 420.0

    start_lives: int = 3

    def __post_init__(self) -> None:
        for name in ("canvas_width", "canvas_height", "bird_width", "bird_height", "pipe_width"):
            value = float(getattr(self, name))
            if not (value > 0.0):
                raise ConfigError(f"{name} must be positive, got {value}")
        if float(self.tick_interval_ms) != int(self.tick_interval_ms):
            raise ConfigError(f"tick_interval_ms must be a whole number of milliseconds, got {self.tick_interval_ms}")
        if int(self.tick_interval_ms) <= 0:
            raise ConfigError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if float(self.bird_height) >= float(self.canvas_height):
            raise ConfigError("bird_height must be smaller than canvas_height")
        if not (0.0 <= float(self.bird_x_fraction) <= 1.0):
            raise ConfigError(f"bird_x_fraction must be in [0, 1], got {self.bird_x_fraction}")
        if float(self.pipe_speed) <= 0.0:
            raise ConfigError(f"pipe_speed must be positive, got {self.pipe_speed}")
        if float(self.terminal_velocity) <= 0.0:
            raise ConfigError(f"terminal_velocity must be positive, got {self.terminal_velocity}")
        if float(self.flap_velocity) >= 0.0:
            raise ConfigError(f"flap_velocity must point upward (negative), got {self.flap_velocity}")
        if not (0.0 <= float(self.bounce_min) <= float(self.bounce_max)):
            raise ConfigError(f"bounce range must satisfy 0 <= min <= max, got [{self.bounce_min}, {self.bounce_max}]")
        if float(self.bounce_max) > float(self.terminal_velocity):
            raise ConfigError(f"bounce_max must not exceed terminal_velocity, got {self.bounce_max} > {self.terminal_velocity}")
        if -float(self.flap_velocity) > float(self.terminal_velocity):
            raise ConfigError(f"flap_velocity must not exceed terminal_velocity, got {self.flap_velocity}")
        if int(self.start_lives) < 1:
            raise ConfigError(f"start_lives must be at least 1, got {self.start_lives}")

    @property
    def dt(self) -> float:
        """Seconds per tick."""
        return float(self.tick_interval_ms) / 1000.0

    @property
    def min_y(self) -> float:
        return float(self.bird_height) / 2.0

    @property
    def max_y(self) -> float:
        return float(self.canvas_height) - float(self.bird_height) / 2.0

    @property
    def bird_x(self) -> float:
        return float(self.canvas_width) * float(self.bird_x_fraction)

    @property
    def bird_y(self) -> float:
        return float(self.canvas_height) / 2.0


DEFAULT_CONFIG = GameConfig()


def default_config_path() -> Path:
    return Path(PlatformDirs(APP_NAME, appauthor=False).user_config_dir) / CONFIG_FILE_NAME


def config_from_dict(data: dict[str, Any], *, base: GameConfig = DEFAULT_CONFIG) -> GameConfig:
    known = {f.name: f for f in fields(GameConfig)}
    unknown = sorted(key for key in data if key not in known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"config key {key!r} must be a number, got {value!r}")
        if key in ("tick_interval_ms", "start_lives"):
            if isinstance(value, float) and not value.is_integer():
                raise ConfigError(f"config key {key!r} must be an integer, got {value!r}")
            overrides[key] = int(value)
        else:
            overrides[key] = float(value)
    return replace(base, **overrides)


def load_config(path: Path) -> GameConfig:
    """Load a `[game]` table from a TOML file on top of the defaults."""
    path = Path(path)
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc

    table = raw.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] in {path} must be a table")
    return config_from_dict(table)


def resolve_config(path: Path | None = None) -> GameConfig:
    """Explicit path wins; otherwise use the per-user file if one exists."""
    if path is not None:
        return load_config(path)
    candidate = default_config_path()
    if candidate.is_file():
        return load_config(candidate)
    return DEFAULT_CONFIG
