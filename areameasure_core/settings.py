"""Tunable constants for the measurement core.

Everything the session needs to know about radii, zoom steps, ruler budgets
and the etalon prompt lives in :class:`MeasureSettings`. The defaults match
the desktop tool; a JSON file can override any subset of them.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "AREAMEASURE_SETTINGS"

DEFAULT_SCALES: tuple[float, ...] = (
    0.1, 0.125, 0.167, 0.25, 0.333, 0.5, 0.667, 0.75,
    1.0, 1.25, 1.5, 2.0, 3.0, 4.0, 6.0, 8.0,
)


class SelectionRadii(BaseModel):
    vertex: float = Field(8.0, gt=0.0, description="Activation radius (px) around each vertex handle.")
    polyline: float = Field(6.0, gt=0.0, description="Activation radius (px) around the body of a 1D shape.")
    polygon: float = Field(2.0, gt=0.0, description="Activation radius (px) outside the body of a 2D shape.")
    label: float = Field(2.0, gt=0.0, description="Activation radius (px) around a label box.")


class RulerSettings(BaseModel):
    max_pixels: float = Field(180.0, gt=0.0, description="Scale bar must be shorter than this many pixels.")
    min_pixels: float = Field(40.0, ge=0.0, description="Scale bar is hidden when shorter than this.")
    max_exponent: int = Field(15, description="Largest power of ten tried for the bar length.")
    min_exponent: int = Field(-15, description="Smallest power of ten tried for the bar length.")

    @model_validator(mode="after")
    def _check_ranges(self) -> "RulerSettings":
        if self.min_pixels >= self.max_pixels:
            raise ValueError("min_pixels must be smaller than max_pixels")
        if self.min_exponent > self.max_exponent:
            raise ValueError("min_exponent must not exceed max_exponent")
        return self


class PromptSettings(BaseModel):
    default: float = Field(1.0, gt=0.0, description="Value pre-filled in the etalon size prompt.")
    minimum: float = Field(0.001, gt=0.0, description="Smallest accepted etalon size.")
    maximum: float = Field(1e9, gt=0.0, description="Largest accepted etalon size.")
    decimals: int = Field(3, ge=0, le=12, description="Decimals offered by the prompt.")

    @model_validator(mode="after")
    def _check_bounds(self) -> "PromptSettings":
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError("prompt default must lie within [minimum, maximum]")
        return self


class TextMetricsSettings(BaseModel):
    char_width: float = Field(7.0, gt=0.0, description="Approximate glyph width (px) when no renderer metrics exist.")
    line_height: float = Field(14.0, gt=0.0, description="Approximate line height (px) when no renderer metrics exist.")


class MeasureSettings(BaseModel):
    radii: SelectionRadii = Field(default_factory=SelectionRadii)
    scales: list[float] = Field(
        default_factory=lambda: list(DEFAULT_SCALES),
        description="Acceptable display zoom factors in ascending order.",
    )
    default_scale: float = Field(1.0, gt=0.0, description="Zoom factor selected for a fresh session.")
    ruler: RulerSettings = Field(default_factory=RulerSettings)
    prompt: PromptSettings = Field(default_factory=PromptSettings)
    text: TextMetricsSettings = Field(default_factory=TextMetricsSettings)
    calibration_epsilon: float = Field(1e-6, gt=0.0, description="Etalon pixel extents below this are degenerate.")
    size_epsilon: float = Field(1e-6, ge=0.0, description="Measured sizes at or below this produce no size string.")
    language: Literal["en", "ru"] = Field("en", description="Language of status and label strings.")
    unit: Optional[str] = Field(
        None, min_length=1, description="Symbol of the real-world length unit; the language default when unset."
    )

    @field_validator("scales")
    @classmethod
    def _check_scales(cls, value: list[float]) -> list[float]:
        if not value:
            raise ValueError("at least one display scale is required")
        if any(s <= 0.0 for s in value):
            raise ValueError("display scales must be positive")
        if any(b <= a for a, b in zip(value, value[1:])):
            raise ValueError("display scales must be strictly ascending")
        return [float(s) for s in value]

    @model_validator(mode="after")
    def _check_default_scale(self) -> "MeasureSettings":
        if self.default_scale not in self.scales:
            raise ValueError(f"default_scale {self.default_scale} is not one of the display scales")
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> "MeasureSettings":
        path = Path(path)
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        logger.info("Loaded settings from %s", path)
        return cls.model_validate(data)


def load_settings(path: Optional[str | Path] = None) -> MeasureSettings:
    """Settings from ``path``, else from ``$AREAMEASURE_SETTINGS``, else defaults."""
    if path is None:
        path = os.getenv(SETTINGS_ENV_VAR) or None
    if path is None:
        return MeasureSettings()
    return MeasureSettings.from_file(path)


__all__ = [
    "DEFAULT_SCALES",
    "MeasureSettings",
    "PromptSettings",
    "RulerSettings",
    "SETTINGS_ENV_VAR",
    "SelectionRadii",
    "TextMetricsSettings",
    "load_settings",
]
