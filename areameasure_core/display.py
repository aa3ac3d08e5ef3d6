"""Display zoom: a multiplier picked from a fixed ascending list."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import require
from .settings import DEFAULT_SCALES

Point = Tuple[float, float]


@dataclass(frozen=True)
class DisplayScale:
    """Current zoom step. Purely presentational: calibration never reads it back."""

    scales: Tuple[float, ...] = DEFAULT_SCALES
    index: int = DEFAULT_SCALES.index(1.0)

    def __post_init__(self):
        require(len(self.scales) > 0, "display scale list is empty")
        require(0 <= self.index < len(self.scales), f"scale index {self.index} out of range")

    @classmethod
    def from_list(cls, scales: Sequence[float], value: float = 1.0) -> "DisplayScale":
        values = tuple(float(s) for s in scales)
        if value in values:
            return cls(values, values.index(value))
        # nearest step when the requested value is not in the list
        nearest = min(range(len(values)), key=lambda i: abs(values[i] - value))
        return cls(values, nearest)

    @property
    def value(self) -> float:
        return self.scales[self.index]

    def can_zoom_in(self) -> bool:
        return self.index + 1 < len(self.scales)

    def can_zoom_out(self) -> bool:
        return self.index > 0

    def zoomed_in(self) -> "DisplayScale":
        return DisplayScale(self.scales, min(self.index + 1, len(self.scales) - 1))

    def zoomed_out(self) -> "DisplayScale":
        return DisplayScale(self.scales, max(self.index - 1, 0))

    def with_index(self, index: int) -> "DisplayScale":
        return DisplayScale(self.scales, index)

    def fitting(self, image_size: Tuple[float, float], viewport_size: Tuple[float, float]) -> "DisplayScale":
        """Largest step that shows the whole image in the viewport (the smallest step otherwise)."""
        iw, ih = float(image_size[0]), float(image_size[1])
        vw, vh = float(viewport_size[0]), float(viewport_size[1])
        if iw <= 0.0 or ih <= 0.0:
            return self
        limit = min(vw / iw, vh / ih)
        best = 0
        for i, s in enumerate(self.scales):
            if s <= limit:
                best = i
        return DisplayScale(self.scales, best)

    def to_display(self, point: Sequence[float]) -> Point:
        s = self.value
        return (float(point[0]) * s, float(point[1]) * s)

    def to_original(self, point: Sequence[float]) -> Point:
        s = self.value
        return (float(point[0]) / s, float(point[1]) / s)


__all__ = ["DisplayScale"]
