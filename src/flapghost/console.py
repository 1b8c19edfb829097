from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

MAX_CONSOLE_LINES = 0x1000


@dataclass(slots=True)
class ConsoleLog:
    """Bounded in-memory line log; oldest lines drop first."""

    lines: list[str] = field(default_factory=list)
    max_lines: int = MAX_CONSOLE_LINES

    def log(self, message: str) -> None:
        self.lines.append(message)
        if len(self.lines) > int(self.max_lines):
            self.lines.pop(0)

    def flush(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            for line in self.lines:
                handle.write(line.rstrip() + "\n")
        self.lines.clear()
