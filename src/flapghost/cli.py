from __future__ import annotations

import warnings
from collections.abc import Callable, Iterator
from pathlib import Path

import msgspec
import typer

from .config import ConfigError, GameConfig, resolve_config
from .console import ConsoleLog
from .rand import lcg_hash
from .replay import RecordingError
from .schedule import ScheduleError, ScheduleRowWarning, SpawnSpec, load_schedule_file
from .sim import StateEngine, build_frame, format_frame, replay_recording, state_hash
from .sim.engine import random_seed
from .sim.state_types import State

app = typer.Typer(add_completion=False)


class RunSummary(msgspec.Struct):
    run: int
    seed: int
    ended: bool
    time_ms: int
    ticks: int
    score: int
    lives: int
    pipes_spawned: int
    total_planned: int
    ghosts: int
    state_hash: str


class SpawnRow(msgspec.Struct):
    index: int
    gap_center_y: float
    gap_height: float
    time_offset_ms: float


def _load_config(config_file: Path | None) -> GameConfig:
    try:
        return resolve_config(config_file)
    except ConfigError as exc:
        typer.echo(f"config error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _load_schedule(schedule_file: Path, config: GameConfig, *, strict: bool) -> tuple[SpawnSpec, ...]:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ScheduleRowWarning)
        try:
            schedule = load_schedule_file(schedule_file, canvas_height=config.canvas_height, strict=strict)
        except ScheduleError as exc:
            typer.echo(f"schedule error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
    for warning in caught:
        typer.echo(f"warning: {warning.message}", err=True)
    return schedule


def _load_flap_times(flap_at: list[float] | None, flaps_file: Path | None) -> list[float]:
    """Flap times in seconds from `--flap-at` and `--flaps`, sorted."""
    times = [float(value) for value in (flap_at or [])]
    if flaps_file is not None:
        try:
            text = Path(flaps_file).read_text(encoding="utf-8")
        except OSError as exc:
            typer.echo(f"cannot read flaps file {flaps_file}: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        for line_no, line in enumerate(text.splitlines(), start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            try:
                times.append(float(line))
            except ValueError as exc:
                raise typer.BadParameter(f"line {line_no}: {line!r} is not a number", param_hint="--flaps") from exc
    if any(value < 0.0 for value in times):
        raise typer.BadParameter("flap times must be non-negative", param_hint="--flap-at")
    return sorted(times)


def _seed_chain(seed: int) -> Iterator[int]:
    # Fixed first seed; later runs step the LCG so a whole session is reproducible.
    while True:
        yield seed
        seed = lcg_hash(seed)


def _seed_source(seed: int | None) -> Callable[[], int]:
    if seed is None:
        return random_seed
    seeds = _seed_chain(int(seed))
    return lambda: next(seeds)


def _play_run(engine: StateEngine, flap_times_s: list[float], *, max_ms: float) -> State:
    for time_s in flap_times_s:
        time_ms = time_s * 1000.0
        if time_ms > max_ms:
            break
        engine.advance_to(time_ms)
        engine.flap()
    state = engine.run_until_ended(max_ms=max_ms)
    assert state is not None
    return state


def _summarize(run: int, seed: int, state: State, ghosts: int) -> RunSummary:
    return RunSummary(
        run=run,
        seed=seed,
        ended=state.game_ended,
        time_ms=state.time_ms,
        ticks=len(state.trace),
        score=state.score,
        lives=state.lives,
        pipes_spawned=state.next_id - 1,
        total_planned=state.total_planned,
        ghosts=ghosts,
        state_hash=state_hash(state),
    )


def _format_summary(summary: RunSummary) -> str:
    status = "ended" if summary.ended else "timeout"
    return (
        f"run {summary.run}: {status} t={summary.time_ms}ms ticks={summary.ticks} "
        f"score={summary.score} lives={summary.lives} pipes={summary.pipes_spawned}/{summary.total_planned} "
        f"ghosts={summary.ghosts} seed=0x{summary.seed:08x} hash={summary.state_hash[:16]}"
    )


@app.command("run")
def cmd_run(
    schedule_file: Path = typer.Argument(..., help="pipe schedule CSV"),
    seed: int | None = typer.Option(None, help="seed for the first run (default: random)"),
    flap_at: list[float] | None = typer.Option(None, "--flap-at", help="flap at this many seconds into each run"),
    flaps_file: Path | None = typer.Option(None, "--flaps", help="file with one flap time (seconds) per line"),
    runs: int = typer.Option(1, min=1, help="consecutive runs; each one sees the previous runs as ghosts"),
    max_seconds: float = typer.Option(120.0, help="give up on a run after this much game time"),
    strict: bool = typer.Option(False, "--strict", help="reject schedule rows with non-numeric fields"),
    config_file: Path | None = typer.Option(None, "--config", help="game config TOML (default: per-user file)"),
    as_json: bool = typer.Option(False, "--json", help="print run summaries as JSON"),
    frames: bool = typer.Option(False, "--frames", help="print one line per state change"),
    log_file: Path | None = typer.Option(None, "--log-file", help="append the engine log to this file"),
) -> None:
    """Play runs headlessly in virtual time and report how each one ended."""
    config = _load_config(config_file)
    schedule = _load_schedule(schedule_file, config, strict=strict)
    flap_times = _load_flap_times(flap_at, flaps_file)

    log = ConsoleLog()
    engine = StateEngine(schedule, config=config, seed_source=_seed_source(seed), log=log)

    if frames:
        last: list[State | None] = [None]

        def _print_frame(state: State) -> None:
            if state is last[0]:
                return
            last[0] = state
            typer.echo(format_frame(build_frame(state, config)))

        engine.subscribe(_print_frame)

    summaries: list[RunSummary] = []
    for run in range(1, int(runs) + 1):
        initial = engine.start() if run == 1 else engine.restart()
        state = _play_run(engine, flap_times, max_ms=float(max_seconds) * 1000.0)
        summaries.append(_summarize(run, initial.seed, state, len(initial.ghosts)))
        if not as_json:
            typer.echo(_format_summary(summaries[-1]))

    if as_json:
        typer.echo(msgspec.json.encode(summaries).decode("utf-8"))
    if log_file is not None:
        log.flush(log_file)


@app.command("schedule")
def cmd_schedule(
    schedule_file: Path = typer.Argument(..., help="pipe schedule CSV"),
    strict: bool = typer.Option(False, "--strict", help="reject schedule rows with non-numeric fields"),
    config_file: Path | None = typer.Option(None, "--config", help="game config TOML (default: per-user file)"),
    as_json: bool = typer.Option(False, "--json", help="print spawns as JSON"),
) -> None:
    """Print the spawns a schedule file produces, in pixels and milliseconds."""
    config = _load_config(config_file)
    schedule = _load_schedule(schedule_file, config, strict=strict)
    rows = [
        SpawnRow(
            index=idx,
            gap_center_y=spec.gap_center_y,
            gap_height=spec.gap_height,
            time_offset_ms=spec.time_offset_ms,
        )
        for idx, spec in enumerate(schedule)
    ]
    if as_json:
        typer.echo(msgspec.json.encode(rows).decode("utf-8"))
        return
    typer.echo(f"{len(rows)} spawns")
    for row in rows:
        typer.echo(
            f"{row.index:03d}  t={row.time_offset_ms:9.1f}ms  gap_y={row.gap_center_y:7.2f}  gap_h={row.gap_height:7.2f}"
        )


@app.command("verify")
def cmd_verify(
    schedule_file: Path = typer.Argument(..., help="pipe schedule CSV"),
    seed: int = typer.Option(0x1234, help="seed to verify"),
    flap_at: list[float] | None = typer.Option(None, "--flap-at", help="flap at this many seconds into the run"),
    flaps_file: Path | None = typer.Option(None, "--flaps", help="file with one flap time (seconds) per line"),
    max_seconds: float = typer.Option(120.0, help="give up on the run after this much game time"),
    strict: bool = typer.Option(False, "--strict", help="reject schedule rows with non-numeric fields"),
    config_file: Path | None = typer.Option(None, "--config", help="game config TOML (default: per-user file)"),
) -> None:
    """Check that a seeded run reproduces bit-for-bit, live and from its recording."""
    config = _load_config(config_file)
    schedule = _load_schedule(schedule_file, config, strict=strict)
    flap_times = _load_flap_times(flap_at, flaps_file)
    max_ms = float(max_seconds) * 1000.0

    hashes: list[str] = []
    engine: StateEngine | None = None
    for _ in range(2):
        engine = StateEngine(schedule, config=config, seed_source=lambda: int(seed))
        engine.start()
        hashes.append(state_hash(_play_run(engine, flap_times, max_ms=max_ms)))
    assert engine is not None

    # Close out the live run so its recording is available.
    engine.restart()
    recording = engine.recordings[0]
    try:
        replayed = replay_recording(recording, schedule, config=config)
    except RecordingError as exc:
        typer.echo(f"replay failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    hashes.append(state_hash(replayed))

    if len(set(hashes)) != 1:
        typer.echo("determinism check failed", err=True)
        for label, value in zip(("live#1", "live#2", "replay"), hashes):
            typer.echo(f"  {label}: {value}", err=True)
        raise typer.Exit(code=1)

    typer.echo(
        f"ok: seed=0x{int(seed):08x} flaps={len(recording.flap_times_ms)} "
        f"end={recording.end_time_ms:.0f}ms score={replayed.score} hash={hashes[0][:16]}"
    )


def main(argv: list[str] | None = None) -> None:
    app(prog_name="flapghost", args=argv)


if __name__ == "__main__":
    main()
