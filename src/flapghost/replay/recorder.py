from __future__ import annotations

from dataclasses import dataclass


class RecordingError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class RunRecording:
    seed: int
    total_planned: int
    flap_times_ms: tuple[float, ...]
    end_time_ms: float
    ended: bool


class RunRecorder:
    """Collects the inputs of a single run so it can be re-simulated."""

    def __init__(self, *, seed: int, total_planned: int) -> None:
        self._seed = int(seed)
        self._total_planned = int(total_planned)
        self._flaps: list[float] = []
        self._finished: RunRecording | None = None

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def finished(self) -> bool:
        return self._finished is not None

    def record_flap(self, time_ms: float) -> None:
        if self._finished is not None:
            raise RecordingError("recording already finished")
        time_ms = float(time_ms)
        if self._flaps and time_ms < self._flaps[-1]:
            raise RecordingError(f"flap at {time_ms}ms recorded after flap at {self._flaps[-1]}ms")
        self._flaps.append(time_ms)

    def finish(self, *, end_time_ms: float, ended: bool) -> RunRecording:
        if self._finished is None:
            self._finished = RunRecording(
                seed=self._seed,
                total_planned=self._total_planned,
                flap_times_ms=tuple(self._flaps),
                end_time_ms=float(end_time_ms),
                ended=bool(ended),
            )
        return self._finished
