"""Pixel to real-world calibration driven by a single etalon figure.

The etalon's pixel extent (its length, or the square root of its area) and
the real-world size typed by the user give ``meters_per_pixel_original``.
That factor always refers to original image pixels; the zoom is applied on
read through :class:`CalibrationSnapshot`, so repeated zooming never
accumulates rounding error.
"""
from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional, Protocol

from .labels import MessageCatalog
from .settings import MeasureSettings
from .shapes import Correctness, Dimensionality, Shape

logger = logging.getLogger(__name__)


class CalibrationOutcome(str, Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"
    INVALID_INPUT = "invalid_input"
    DEGENERATE_EXTENT = "degenerate_extent"
    SELF_INTERSECTING = "self_intersecting"


class NumericPrompt(Protocol):
    """Ask the user for one positive number; ``None`` means cancelled."""

    def __call__(
        self, text: str, default: float, minimum: float, maximum: float, decimals: int
    ) -> Optional[float]:
        ...


def cancelling_prompt(text: str, default: float, minimum: float, maximum: float, decimals: int) -> Optional[float]:
    """Prompt used when no input capability is wired: always cancels."""
    return None


class ScriptedPrompt:
    """Answers prompts from a queue; ``None`` entries (or an empty queue) cancel."""

    def __init__(self, answers: Iterable[Optional[float]] = ()):
        self._answers: Deque[Optional[float]] = deque(answers)
        self.calls: List[str] = []

    def push(self, answer: Optional[float]) -> None:
        self._answers.append(answer)

    def __call__(self, text: str, default: float, minimum: float, maximum: float, decimals: int) -> Optional[float]:
        self.calls.append(text)
        if not self._answers:
            return None
        return self._answers.popleft()


@dataclass(frozen=True)
class CalibrationSnapshot:
    """Calibration and zoom as seen by one query."""

    meters_per_pixel_original: float = 0.0
    scale: float = 1.0

    @property
    def is_calibrated(self) -> bool:
        return self.meters_per_pixel_original > 0.0

    @property
    def effective_meters_per_pixel(self) -> float:
        """Meters per on-screen pixel at the current zoom."""
        if self.scale <= 0.0:
            return 0.0
        return self.meters_per_pixel_original / self.scale

    def real_length(self, pixel_length: float) -> float:
        return pixel_length * self.meters_per_pixel_original

    def real_area(self, pixel_area: float) -> float:
        return pixel_area * self.meters_per_pixel_original ** 2

    def real_size(self, shape: Shape) -> float:
        if shape.dimensionality() is Dimensionality.SHAPE_1D:
            return self.real_length(shape.length())
        return self.real_area(shape.area())


@dataclass(frozen=True)
class CalibrationState:
    """Session-owned calibration. Replaced as a whole, never edited in place."""

    meters_per_pixel_original: float = 0.0
    etalon_real_linear: float = 0.0

    @property
    def is_calibrated(self) -> bool:
        return self.meters_per_pixel_original > 0.0

    def snapshot(self, scale: float = 1.0) -> CalibrationSnapshot:
        return CalibrationSnapshot(self.meters_per_pixel_original, float(scale))


UNCALIBRATED = CalibrationState()


@dataclass(frozen=True)
class CalibrationResult:
    state: CalibrationState
    outcome: CalibrationOutcome

    @property
    def applied(self) -> bool:
        return self.outcome is CalibrationOutcome.APPLIED


class CalibrationEngine:
    """Derives calibration from an etalon shape."""

    def __init__(self, settings: MeasureSettings | None = None):
        self.settings = settings or MeasureSettings()
        self.messages = MessageCatalog.for_settings(self.settings)

    def pixel_extent(self, shape: Shape) -> float:
        return shape.linear_extent()

    def geometry_problem(self, shape: Shape) -> Optional[CalibrationOutcome]:
        if shape.correctness() is Correctness.SELF_INTERSECTING:
            return CalibrationOutcome.SELF_INTERSECTING
        if self.pixel_extent(shape) < self.settings.calibration_epsilon:
            return CalibrationOutcome.DEGENERATE_EXTENT
        return None

    def prompt_text(self, shape: Shape) -> str:
        return self.messages.prompt_text(shape.dimensionality())

    def calibrate(self, shape: Shape, prompt: NumericPrompt) -> CalibrationResult:
        """Prompt once for the etalon's real size and derive the factor.

        Any failure (cancel, bad answer, degenerate or self-intersecting
        etalon) yields the uncalibrated state.
        """
        cfg = self.settings.prompt
        answer = prompt(self.prompt_text(shape), cfg.default, cfg.minimum, cfg.maximum, cfg.decimals)
        if answer is None:
            logger.warning("Etalon calibration cancelled by the user")
            return CalibrationResult(UNCALIBRATED, CalibrationOutcome.CANCELLED)
        return self.from_real_size(shape, answer)

    def from_real_size(self, shape: Shape, real_size: float) -> CalibrationResult:
        """Calibrate from a known real size (a length, or an area for 2D etalons)."""
        cfg = self.settings.prompt
        try:
            value = float(real_size)
        except (TypeError, ValueError):
            value = float("nan")
        if not math.isfinite(value) or value <= 0.0 or not cfg.minimum <= value <= cfg.maximum:
            logger.warning("Rejected etalon size %r", real_size)
            return CalibrationResult(UNCALIBRATED, CalibrationOutcome.INVALID_INPUT)
        problem = self.geometry_problem(shape)
        if problem is not None:
            logger.warning("Etalon %s cannot calibrate: %s", shape.kind.value, problem.value)
            return CalibrationResult(UNCALIBRATED, problem)
        if shape.dimensionality() is Dimensionality.SHAPE_2D:
            real_linear = math.sqrt(value)
        else:
            real_linear = value
        pixel_linear = self.pixel_extent(shape)
        state = CalibrationState(real_linear / pixel_linear, real_linear)
        logger.info(
            "Calibrated: %.6g %s per pixel (etalon %.6g px)",
            state.meters_per_pixel_original,
            self.messages.linear_unit,
            pixel_linear,
        )
        return CalibrationResult(state, CalibrationOutcome.APPLIED)

    def recalibrate(self, shape: Shape, state: CalibrationState) -> CalibrationResult:
        """Re-derive the factor after the etalon was edited, keeping its real size."""
        if state.etalon_real_linear <= 0.0:
            return CalibrationResult(UNCALIBRATED, CalibrationOutcome.INVALID_INPUT)
        problem = self.geometry_problem(shape)
        if problem is not None:
            # keep the real size so a later valid edit restores calibration
            logger.warning("Edited etalon invalidates calibration: %s", problem.value)
            return CalibrationResult(CalibrationState(0.0, state.etalon_real_linear), problem)
        pixel_linear = self.pixel_extent(shape)
        new_state = CalibrationState(state.etalon_real_linear / pixel_linear, state.etalon_real_linear)
        logger.debug("Recalibrated after etalon edit: %.6g", new_state.meters_per_pixel_original)
        return CalibrationResult(new_state, CalibrationOutcome.APPLIED)


__all__ = [
    "CalibrationEngine",
    "CalibrationOutcome",
    "CalibrationResult",
    "CalibrationSnapshot",
    "CalibrationState",
    "NumericPrompt",
    "ScriptedPrompt",
    "UNCALIBRATED",
    "cancelling_prompt",
]
