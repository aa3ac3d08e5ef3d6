"""Drive a :class:`MeasureSession` from a recorded input script."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from .calibration import ScriptedPrompt
from .schemas import LabelReport, ReplayEvent, ReplayReport, ReplayScript, RulerReport
from .session import MeasureSession
from .settings import MeasureSettings

logger = logging.getLogger(__name__)


def load_script(path: str | Path) -> ReplayScript:
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return ReplayScript.model_validate(data)


def merged_settings(base: MeasureSettings, overrides: dict) -> MeasureSettings:
    if not overrides:
        return base
    data = base.model_dump()
    data.update(overrides)
    return MeasureSettings.model_validate(data)


def apply_event(session: MeasureSession, event: ReplayEvent) -> None:
    op = event.op
    if op == "kind":
        session.set_shape_kind(event.kind)
    elif op == "etalon":
        session.set_defining_etalon(event.flag)
    elif op == "begin":
        session.begin_shape(event.kind)
    elif op == "point":
        session.add_point(event.at)
    elif op == "finish":
        session.finish_shape()
    elif op == "cancel":
        session.cancel_shape()
    elif op == "move":
        session.move_cursor(event.at)
    elif op == "select":
        if event.at is not None:
            session.move_cursor(event.at)
        session.select_at_cursor()
    elif op == "drag":
        session.drag_selection(event.at)
    elif op == "delete":
        session.delete_selected()
    elif op == "zoom_in":
        session.zoom_in()
    elif op == "zoom_out":
        session.zoom_out()
    else:  # pragma: no cover - guarded by the schema literal
        raise ValueError(f"Unsupported event '{op}'")


def build_report(session: MeasureSession) -> ReplayReport:
    labels = []
    for label in session.labels():
        figure = session.figure(label.handle)
        labels.append(
            LabelReport(
                kind=figure.shape.kind.value,
                text=label.text,
                size=session.figure_size(label.handle),
                is_etalon=label.is_etalon,
                box=label.box,
            )
        )
    ruler = session.ruler()
    return ReplayReport(
        figures=len(session.figures),
        meters_per_pixel=session.meters_per_pixel_original,
        last_outcome=session.last_outcome.value if session.last_outcome is not None else None,
        scale=session.scale,
        scale_text=session.scale_text(),
        status=session.status(),
        labels=labels,
        ruler=RulerReport(meters=ruler.meters, pixels=ruler.pixels, text=ruler.text) if ruler is not None else None,
    )


def run_script(
    script: ReplayScript, settings: Optional[MeasureSettings] = None
) -> Tuple[MeasureSession, ReplayReport]:
    """Replay ``script`` on a fresh session and report the final state."""
    session = MeasureSession(
        merged_settings(settings or MeasureSettings(), script.settings),
        prompt=ScriptedPrompt(script.answers),
    )
    if script.scale_index is not None:
        session.set_scale_index(script.scale_index)
    for number, event in enumerate(script.events):
        logger.debug("Event %d: %s", number, event.op)
        apply_event(session, event)
    return session, build_report(session)


__all__ = ["apply_event", "build_report", "load_script", "merged_settings", "run_script"]
