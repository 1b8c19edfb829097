from __future__ import annotations

from dataclasses import dataclass


def clamp(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


@dataclass(slots=True, frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def with_y(self, y: float) -> Vec2:
        return Vec2(self.x, float(y))


@dataclass(slots=True, frozen=True)
class Hitbox:
    """Axis-aligned rectangle in screen space (y grows downward)."""

    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def centered(cls, center: Vec2, width: float, height: float) -> Hitbox:
        half_w = float(width) / 2.0
        half_h = float(height) / 2.0
        return cls(
            left=center.x - half_w,
            right=center.x + half_w,
            top=center.y - half_h,
            bottom=center.y + half_h,
        )

    def overlaps(self, other: Hitbox) -> bool:
        # Strict: touching edges do not count.
        return (
            self.left < other.right
            and self.right > other.left
            and self.top < other.bottom
            and self.bottom > other.top
        )
