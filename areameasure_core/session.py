"""Measurement session: the command surface driven by the input collaborator.

The session owns the figure arena, the one :class:`CalibrationState`, the
current :class:`DisplayScale`, the cursor, hover and selection. It performs
no I/O and no drawing; hosts read :meth:`MeasureSession.status`,
:meth:`MeasureSession.labels`, :meth:`MeasureSession.render_items` and
:meth:`MeasureSession.ruler` after each command.

Positions passed in are original (unscaled) image coordinates.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import geometry
from .calibration import (
    UNCALIBRATED,
    CalibrationEngine,
    CalibrationOutcome,
    CalibrationSnapshot,
    CalibrationState,
    NumericPrompt,
    cancelling_prompt,
)
from .display import DisplayScale
from .figures import Figure, FigureArena, FigureHandle, RenderRole
from .labels import MessageCatalog
from .ruler import RulerContent, choose
from .selection import EMPTY_SELECTION, Locus, Selection, find_selection
from .settings import MeasureSettings
from .shapes import Shape, ShapeKind, coerce_kind

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
TextMetrics = Callable[[str], Tuple[float, float]]


def approximate_text_metrics(char_width: float = 7.0, line_height: float = 14.0) -> TextMetrics:
    def measure(text: str) -> Tuple[float, float]:
        return (len(text) * char_width, line_height)

    return measure


@dataclass(frozen=True)
class FigureLabel:
    handle: FigureHandle
    text: str
    box: geometry.Rect  # display coordinates, top-left corner plus size
    is_etalon: bool = False

    @property
    def anchor(self) -> Point:
        return (self.box[0], self.box[1])


@dataclass(frozen=True)
class RenderItem:
    handle: FigureHandle
    closed: bool
    points: Tuple[Point, ...]
    vertices: Tuple[Point, ...]
    role: RenderRole
    finished: bool
    hovered: bool = False
    selected: bool = False


class MeasureSession:
    """Interactive measurement state machine."""

    def __init__(
        self,
        settings: MeasureSettings | None = None,
        prompt: NumericPrompt | None = None,
        text_metrics: TextMetrics | None = None,
    ):
        self.settings = settings or MeasureSettings()
        self.messages = MessageCatalog.for_settings(self.settings)
        self.engine = CalibrationEngine(self.settings)
        self.prompt: NumericPrompt = prompt or cancelling_prompt
        self.text_metrics: TextMetrics = text_metrics or approximate_text_metrics(
            self.settings.text.char_width, self.settings.text.line_height
        )
        self.figures = FigureArena()
        self.shape_kind = ShapeKind.SEGMENT
        self.defining_etalon = False
        self.show_ruler = True
        self.hover: Selection = EMPTY_SELECTION
        self.selection: Selection = EMPTY_SELECTION
        self.last_outcome: Optional[CalibrationOutcome] = None
        self._calibration: CalibrationState = UNCALIBRATED
        self._scale = DisplayScale.from_list(self.settings.scales, self.settings.default_scale)
        self._cursor: Optional[Point] = None
        self._active: Optional[FigureHandle] = None
        self._etalon: Optional[FigureHandle] = None

    # ------------------------------------------------------------------
    # State accessors
    @property
    def calibration(self) -> CalibrationState:
        return self._calibration

    @property
    def meters_per_pixel_original(self) -> float:
        return self._calibration.meters_per_pixel_original

    @property
    def display_scale(self) -> DisplayScale:
        return self._scale

    @property
    def scale(self) -> float:
        return self._scale.value

    @property
    def cursor(self) -> Optional[Point]:
        return self._cursor

    @property
    def active_handle(self) -> Optional[FigureHandle]:
        return self._active

    @property
    def active_figure(self) -> Optional[Figure]:
        return self.figures.get(self._active)

    @property
    def etalon_handle(self) -> Optional[FigureHandle]:
        return self._etalon

    @property
    def etalon_figure(self) -> Optional[Figure]:
        return self.figures.get(self._etalon)

    def snapshot(self) -> CalibrationSnapshot:
        return self._calibration.snapshot(self._scale.value)

    def figure(self, handle: Optional[FigureHandle]) -> Optional[Figure]:
        return self.figures.get(handle)

    # ------------------------------------------------------------------
    # Modes
    def set_shape_kind(self, kind: "str | ShapeKind") -> None:
        self.cancel_shape()
        self.shape_kind = coerce_kind(kind)

    def set_defining_etalon(self, enabled: bool) -> None:
        self.cancel_shape()
        self.defining_etalon = bool(enabled)

    def set_show_ruler(self, enabled: bool) -> None:
        self.show_ruler = bool(enabled)

    # ------------------------------------------------------------------
    # Construction
    def begin_shape(self, kind: "str | ShapeKind | None" = None) -> FigureHandle:
        """Start a new figure of ``kind`` (the current shape kind by default)."""
        self.cancel_shape()
        if kind is not None:
            self.shape_kind = coerce_kind(kind)
        is_etalon = self.defining_etalon
        if is_etalon:
            self._clear_etalon()
        handle = self.figures.insert(Figure(Shape(self.shape_kind), is_etalon=is_etalon))
        self._active = handle
        self.selection = EMPTY_SELECTION
        logger.debug("Began %s%s as %s", self.shape_kind.value, " etalon" if is_etalon else "", handle)
        return handle

    def add_point(self, pos: Sequence[float]) -> bool:
        """Add a vertex to the active figure, starting one if needed.

        Returns whether the figure finished as a result.
        """
        point = (float(pos[0]), float(pos[1]))
        if self.active_figure is None:
            self.begin_shape()
        figure = self.active_figure
        self._cursor = point
        finished = figure.shape.add_point(point)
        if finished:
            self._complete_active()
        self._refresh_hover()
        return finished

    def can_finish(self) -> bool:
        figure = self.active_figure
        return figure is not None and figure.shape.can_finish()

    def finish_shape(self) -> bool:
        """Finish a multi-point figure; ``False`` when there is nothing big enough to finish."""
        if not self.can_finish():
            return False
        self.active_figure.shape.finish()
        self._complete_active()
        self._refresh_hover()
        return True

    def cancel_shape(self) -> bool:
        """Drop the figure under construction."""
        if self._active is None:
            return False
        return self._remove(self._active)

    def _complete_active(self) -> None:
        handle = self._active
        figure = self.figures.get(handle)
        self._active = None
        if figure is None:
            return
        logger.debug("Finished %s with %d vertices", figure.shape.kind.value, len(figure.shape.stored_vertices))
        if figure.is_etalon:
            self._apply_etalon(handle, figure)

    def _apply_etalon(self, handle: FigureHandle, figure: Figure) -> None:
        result = self.engine.calibrate(figure.shape, self.prompt)
        self.last_outcome = result.outcome
        self._calibration = result.state
        if result.applied:
            self._etalon = handle
            self.defining_etalon = False
        else:
            # the outline stays as an ordinary figure
            figure.is_etalon = False

    # ------------------------------------------------------------------
    # Cursor, hover and selection
    def move_cursor(self, pos: Optional[Sequence[float]]) -> Selection:
        self._cursor = None if pos is None else (float(pos[0]), float(pos[1]))
        self._refresh_hover()
        return self.hover

    def select_at_cursor(self) -> Selection:
        self._refresh_hover()
        self.selection = self.hover
        return self.selection

    def clear_selection(self) -> None:
        self.selection = EMPTY_SELECTION

    def drag_selection(self, pos: Sequence[float], selection: Optional[Selection] = None) -> bool:
        """Move the selected vertex or label to ``pos``."""
        target = self.selection if selection is None else selection
        figure = self.figures.get(target.handle)
        if figure is None:
            self.selection = EMPTY_SELECTION
            return False
        point = (float(pos[0]), float(pos[1]))
        if target.locus is Locus.VERTEX:
            figure.shape.drag_vertex(target.vertex_index, point)
            if target.handle == self._etalon:
                self._recalibrate(figure)
        elif target.locus is Locus.LABEL:
            figure.pin_label(point)
        else:
            return False
        self._cursor = point
        self._refresh_hover()
        return True

    def _recalibrate(self, figure: Figure) -> None:
        result = self.engine.recalibrate(figure.shape, self._calibration)
        self.last_outcome = result.outcome
        self._calibration = result.state

    def delete_selected(self) -> bool:
        if self.selection.is_empty:
            return False
        return self._remove(self.selection.handle)

    def remove_figure(self, handle: FigureHandle) -> bool:
        return self._remove(handle)

    def _remove(self, handle: Optional[FigureHandle]) -> bool:
        figure = self.figures.remove(handle) if handle is not None else None
        if figure is None:
            return False
        if self.selection.refers_to(handle):
            self.selection = EMPTY_SELECTION
        if self.hover.refers_to(handle):
            self.hover = EMPTY_SELECTION
        if handle == self._active:
            self._active = None
        if handle == self._etalon:
            self._etalon = None
            self._calibration = UNCALIBRATED
            logger.info("Etalon removed; calibration reset")
        logger.info("Removed %s figure %s", figure.shape.kind.value, handle)
        self._refresh_hover()
        return True

    def _clear_etalon(self) -> None:
        """Demote the current etalon to a plain figure and drop the calibration."""
        figure = self.figures.get(self._etalon)
        if figure is not None:
            figure.is_etalon = False
            logger.info("Etalon %s demoted; calibration reset", self._etalon)
        self._etalon = None
        self._calibration = UNCALIBRATED

    def _refresh_hover(self) -> None:
        if self.figures.get(self.selection.handle) is None:
            self.selection = EMPTY_SELECTION
        if self._cursor is None:
            self.hover = EMPTY_SELECTION
            return
        hover = find_selection(
            self._scale.to_display(self._cursor),
            self.figures.items(),
            self._scale.value,
            self.settings.radii,
            self.label_boxes(),
        )
        if hover != self.hover:
            logger.debug("Hover changed to %s", hover)
        self.hover = hover

    # ------------------------------------------------------------------
    # Zoom
    def _set_scale(self, scale: DisplayScale) -> None:
        if scale == self._scale:
            return
        self._scale = scale
        logger.info("Display scale set to %g", scale.value)
        self._refresh_hover()

    def zoom_in(self) -> float:
        self._set_scale(self._scale.zoomed_in())
        return self.scale

    def zoom_out(self) -> float:
        self._set_scale(self._scale.zoomed_out())
        return self.scale

    def set_scale_index(self, index: int) -> float:
        self._set_scale(self._scale.with_index(index))
        return self.scale

    def fit_scale(self, image_size: Tuple[float, float], viewport_size: Tuple[float, float]) -> float:
        self._set_scale(self._scale.fitting(image_size, viewport_size))
        return self.scale

    def reset(self) -> None:
        """Forget every figure and the calibration; keep settings and zoom."""
        self.figures.clear()
        self._active = None
        self._etalon = None
        self._calibration = UNCALIBRATED
        self.hover = EMPTY_SELECTION
        self.selection = EMPTY_SELECTION
        self.last_outcome = None
        self.defining_etalon = False
        logger.info("Session reset")

    # ------------------------------------------------------------------
    # Output for the host
    def figure_size(self, handle: FigureHandle) -> Optional[float]:
        """Real-world length or area of a figure, ``None`` when not reportable."""
        figure = self.figures.get(handle)
        if figure is None:
            return None
        return figure.real_size(self.snapshot(), self._cursor, self.settings.size_epsilon)

    def status(self) -> str:
        snap = self.snapshot()
        eps = self.settings.size_epsilon
        active = self.active_figure
        if active is not None:
            text = active.status_text(snap, self.messages, self._cursor, eps)
            if text:
                return text
        hovered = self.figures.get(self.hover.handle)
        if hovered is not None and hovered.finished:
            text = hovered.status_text(snap, self.messages, None, eps)
            if text:
                return text
        if self.defining_etalon:
            return self.messages.text("define_etalon")
        if not snap.is_calibrated:
            return self.messages.text("uncalibrated")
        return ""

    def labels(self) -> List[FigureLabel]:
        snap = self.snapshot()
        scale = self._scale.value
        offset_x = self.settings.text.char_width / 2.0
        out: List[FigureLabel] = []
        for handle, figure in self.figures.items():
            text = figure.label_text(snap, self.messages, self._cursor, self.settings.size_epsilon)
            if not text:
                continue
            anchor = figure.label_anchor(self._cursor)
            if anchor is None:
                continue
            width, height = self.text_metrics(text)
            box = (anchor[0] * scale + offset_x, anchor[1] * scale, float(width), float(height))
            out.append(FigureLabel(handle, text, box, figure.is_etalon))
        return out

    def label_boxes(self) -> Dict[FigureHandle, geometry.Rect]:
        return {label.handle: label.box for label in self.labels() if label.handle != self._active}

    def render_items(self, display: bool = True) -> List[RenderItem]:
        scale = self._scale.value if display else 1.0
        items: List[RenderItem] = []
        for handle, figure in self.figures.items():
            items.append(
                RenderItem(
                    handle=handle,
                    closed=figure.is_closed_drawing(),
                    points=tuple(figure.display_points(scale, self._cursor)),
                    vertices=tuple(figure.display_vertices(scale, self._cursor)),
                    role=figure.render_role(self._cursor),
                    finished=figure.finished,
                    hovered=self.hover.refers_to(handle),
                    selected=self.selection.refers_to(handle),
                )
            )
        return items

    def ruler(self) -> Optional[RulerContent]:
        if not self.show_ruler:
            return None
        snap = self.snapshot()
        if not snap.is_calibrated:
            return None
        cfg = self.settings.ruler
        picked = choose(
            snap.effective_meters_per_pixel,
            cfg.max_pixels,
            cfg.min_pixels,
            max_exponent=cfg.max_exponent,
            min_exponent=cfg.min_exponent,
        )
        if picked is None:
            return None
        meters, pixels = picked
        return RulerContent(meters, pixels, self.messages.ruler_text(meters))

    def scale_text(self) -> str:
        return self.messages.scale_text(self._scale.value)


__all__ = [
    "FigureLabel",
    "MeasureSession",
    "RenderItem",
    "TextMetrics",
    "approximate_text_metrics",
]
