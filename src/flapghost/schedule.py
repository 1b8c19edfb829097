from __future__ import annotations

"""Pipe schedule parsing.

The schedule is CSV with a header row, then one row per pipe:

    gap_y,gap_height,time
    0.5,0.3,1.0

The first two columns are fractions of the canvas height; the third is the
spawn offset in seconds from run start.
"""

import math
import warnings
from dataclasses import dataclass
from pathlib import Path


class ScheduleError(ValueError):
    pass


class ScheduleRowWarning(UserWarning):
    """A schedule row has fields that did not parse as numbers."""


@dataclass(frozen=True, slots=True)
class SpawnSpec:
    gap_center_y: float
    gap_height: float
    time_offset_ms: float


def _parse_number(raw: str | None) -> float:
    if raw is None:
        return math.nan
    text = raw.strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_schedule(text: str, *, canvas_height: float, strict: bool = False) -> tuple[SpawnSpec, ...]:
    """Parse schedule CSV text into spawn specs, preserving row order.

    Fields that are not numbers become NaN and flow into the `SpawnSpec` unchanged
    (a `ScheduleRowWarning` is emitted). With `strict=True` such rows raise
    `ScheduleError` instead.

    Empty or blank fields count as not-a-number, so a trailing comma yields a
    NaN spawn time rather than 0. Spellings `float()` accepts, such as `inf`
    and `1_0`, parse as numbers.
    """

    lines = text.strip().splitlines()
    specs: list[SpawnSpec] = []
    for line_no, line in enumerate(lines[1:], start=2):
        parts = line.split(",")
        gap_y = _parse_number(parts[0] if len(parts) > 0 else None)
        gap_h = _parse_number(parts[1] if len(parts) > 1 else None)
        time_s = _parse_number(parts[2] if len(parts) > 2 else None)

        if any(math.isnan(value) for value in (gap_y, gap_h, time_s)):
            message = f"schedule line {line_no} has non-numeric fields: {line!r}"
            if strict:
                raise ScheduleError(message)
            warnings.warn(message, category=ScheduleRowWarning, stacklevel=2)

        specs.append(
            SpawnSpec(
                gap_center_y=gap_y * float(canvas_height),
                gap_height=gap_h * float(canvas_height),
                time_offset_ms=time_s * 1000.0,
            )
        )
    return tuple(specs)


def load_schedule_file(path: Path, *, canvas_height: float, strict: bool = False) -> tuple[SpawnSpec, ...]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScheduleError(f"cannot read schedule {path}: {exc}") from exc
    return parse_schedule(text, canvas_height=canvas_height, strict=strict)
