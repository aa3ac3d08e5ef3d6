"""Pydantic schemas for recorded input scripts and their reports."""
from __future__ import annotations

from typing import Any, Iterable, Literal, Optional, Sequence

from pydantic import BaseModel, Field, field_validator, model_validator

EventOp = Literal[
    "kind",
    "etalon",
    "begin",
    "point",
    "finish",
    "cancel",
    "move",
    "select",
    "drag",
    "delete",
    "zoom_in",
    "zoom_out",
]

_NEEDS_POSITION = {"point", "move", "drag"}


def _coerce_point(value: Optional[Sequence[float]]) -> Optional[tuple[float, float]]:
    if value is None:
        return None
    if len(value) != 2:
        raise ValueError("positions must be (x, y) pairs")
    return (float(value[0]), float(value[1]))


class ReplayEvent(BaseModel):
    op: EventOp = Field(..., description="Session command to issue.")
    kind: Optional[str] = Field(
        None, description="Shape kind for 'kind' and (optionally) 'begin' events, e.g. 'polygon'."
    )
    at: Optional[tuple[float, float]] = Field(
        None, description="Position in original image coordinates for 'point', 'move' and 'drag'."
    )
    flag: bool = Field(True, description="New value of the etalon-definition mode for 'etalon' events.")

    @field_validator("at", mode="before")
    @classmethod
    def _check_at(cls, value: Any) -> Optional[tuple[float, float]]:
        return _coerce_point(value)

    @model_validator(mode="after")
    def _check_arguments(self) -> "ReplayEvent":
        if self.op in _NEEDS_POSITION and self.at is None:
            raise ValueError(f"'{self.op}' events need an 'at' position")
        if self.op == "kind" and not self.kind:
            raise ValueError("'kind' events need a shape kind")
        return self


class ReplayScript(BaseModel):
    settings: dict[str, Any] = Field(
        default_factory=dict, description="Top-level settings fields overriding the loaded settings."
    )
    scale_index: Optional[int] = Field(None, ge=0, description="Display scale index applied before the first event.")
    answers: list[Optional[float]] = Field(
        default_factory=list, description="Queued etalon prompt answers; null cancels the prompt."
    )
    events: list[ReplayEvent] = Field(default_factory=list, description="Ordered input events.")


class LabelReport(BaseModel):
    kind: str = Field(..., description="Shape kind of the labelled figure.")
    text: str = Field(..., description="Label text as drawn next to the figure.")
    size: Optional[float] = Field(None, description="Real-world length or area behind the label.")
    is_etalon: bool = Field(False, description="Whether the figure is the etalon.")
    box: tuple[float, float, float, float] = Field(..., description="Label box (x, y, width, height) in display pixels.")


class RulerReport(BaseModel):
    meters: float = Field(..., gt=0.0, description="Real length represented by the scale bar.")
    pixels: float = Field(..., gt=0.0, description="On-screen length of the scale bar.")
    text: str = Field(..., description="Scale bar caption.")


class ReplayReport(BaseModel):
    figures: int = Field(..., ge=0, description="Number of live figures after the replay.")
    meters_per_pixel: float = Field(..., ge=0.0, description="Calibration factor in original pixels (0 when uncalibrated).")
    last_outcome: Optional[str] = Field(None, description="Outcome of the most recent calibration attempt.")
    scale: float = Field(..., gt=0.0, description="Display scale after the replay.")
    scale_text: str = Field(..., description="Scale indicator text.")
    status: str = Field("", description="Status line after the replay.")
    labels: list[LabelReport] = Field(default_factory=list, description="Labels of measured figures in creation order.")
    ruler: Optional[RulerReport] = Field(None, description="Scale bar, when one is shown.")

    def lines(self) -> Iterable[str]:
        yield self.scale_text
        for label in self.labels:
            yield f"{label.kind}: {label.text}"
        if self.ruler is not None:
            yield f"ruler: {self.ruler.text} ({self.ruler.pixels:.1f} px)"
        if self.status:
            yield f"status: {self.status}"


__all__ = [
    "EventOp",
    "LabelReport",
    "ReplayEvent",
    "ReplayReport",
    "ReplayScript",
    "RulerReport",
]
