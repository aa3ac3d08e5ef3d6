"""Scale bar selection: a round real-world length that fits a pixel budget."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

MULTIPLIERS: Tuple[int, ...] = (5, 2, 1)


@dataclass(frozen=True)
class RulerContent:
    meters: float
    pixels: float
    text: str = ""


def choose(
    meters_per_pixel: float,
    max_pixel_budget: float,
    min_pixel_budget: float,
    *,
    max_exponent: int = 15,
    min_exponent: int = -15,
) -> Optional[Tuple[float, float]]:
    """Return ``(meters, pixels)`` for the scale bar, or ``None`` to hide it.

    Candidates are 5, 2 and 1 times ``10**k`` for ``k`` walking down from
    ``max_exponent``. The first one projecting to fewer than
    ``max_pixel_budget`` pixels is taken; it is kept only if it is at least
    ``min_pixel_budget`` pixels long.
    """
    if meters_per_pixel <= 0.0:
        return None
    for k in range(max_exponent, min_exponent - 1, -1):
        for multiplier in MULTIPLIERS:
            meters = multiplier * 10.0 ** k
            pixels = meters / meters_per_pixel
            if pixels < max_pixel_budget:
                if pixels >= min_pixel_budget:
                    return meters, pixels
                return None
    return None


__all__ = ["MULTIPLIERS", "RulerContent", "choose"]
