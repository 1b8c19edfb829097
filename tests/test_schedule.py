from __future__ import annotations

import math
from pathlib import Path

import pytest

from flapghost.schedule import (
    ScheduleError,
    ScheduleRowWarning,
    SpawnSpec,
    load_schedule_file,
    parse_schedule,
)

CSV = "gap_y,gap_height,time\n0.5,0.25,1\n0.3,0.2,2.5\n"


def test_parse_schedule_scales_fields_and_keeps_order() -> None:
    specs = parse_schedule(CSV, canvas_height=400.0)

    assert len(specs) == 2
    assert specs[0] == SpawnSpec(gap_center_y=200.0, gap_height=100.0, time_offset_ms=1000.0)
    assert specs[1].gap_center_y == pytest.approx(120.0)
    assert specs[1].gap_height == pytest.approx(80.0)
    assert specs[1].time_offset_ms == pytest.approx(2500.0)


def test_parse_schedule_accepts_crlf_and_surrounding_whitespace() -> None:
    specs = parse_schedule("\n  gap_y,gap_height,time\r\n0.5,0.5,0\r\n\n", canvas_height=100.0)
    assert specs == (SpawnSpec(gap_center_y=50.0, gap_height=50.0, time_offset_ms=0.0),)


def test_header_only_schedule_is_empty() -> None:
    assert parse_schedule("gap_y,gap_height,time\n", canvas_height=400.0) == ()


def test_malformed_row_passes_nan_through_with_warning() -> None:
    text = "gap_y,gap_height,time\nabc,0.2,1\n0.5,0.2\n"
    with pytest.warns(ScheduleRowWarning, match="line 2"):
        specs = parse_schedule(text, canvas_height=400.0)

    assert len(specs) == 2
    assert math.isnan(specs[0].gap_center_y)
    assert specs[0].gap_height == pytest.approx(80.0)
    assert math.isnan(specs[1].time_offset_ms)


def test_blank_field_is_not_a_number() -> None:
    with pytest.warns(ScheduleRowWarning, match="line 2"):
        specs = parse_schedule("gap_y,gap_height,time\n0.5,0.2,\n0.5, ,1\n", canvas_height=400.0)

    assert specs[0].gap_center_y == 200.0
    assert math.isnan(specs[0].time_offset_ms)
    assert math.isnan(specs[1].gap_height)


def test_strict_mode_rejects_malformed_rows() -> None:
    with pytest.raises(ScheduleError, match="line 3"):
        parse_schedule("gap_y,gap_height,time\n0.5,0.2,1\n0.5,x,2\n", canvas_height=400.0, strict=True)


def test_load_schedule_file(tmp_path: Path) -> None:
    path = tmp_path / "map.csv"
    path.write_text(CSV, encoding="utf-8")
    assert load_schedule_file(path, canvas_height=400.0) == parse_schedule(CSV, canvas_height=400.0)


def test_missing_schedule_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ScheduleError, match="cannot read schedule"):
        load_schedule_file(tmp_path / "missing.csv", canvas_height=400.0)
