"""Hit testing of finished figures under the cursor.

Candidates are scored as ``max(0, radius - distance)`` in display pixels.
Figures are visited in creation order and, within a figure, the body comes
first, then the vertices in index order, then the label box. Only a
strictly better score replaces the current best, so ties go to the earliest
candidate in that order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from . import geometry
from .figures import Figure, FigureHandle
from .settings import SelectionRadii
from .shapes import Dimensionality

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class Locus(str, Enum):
    BODY = "body"
    VERTEX = "vertex"
    LABEL = "label"


@dataclass(frozen=True)
class Selection:
    handle: Optional[FigureHandle] = None
    locus: Locus = Locus.BODY
    vertex_index: int = -1

    @property
    def is_empty(self) -> bool:
        return self.handle is None

    def refers_to(self, handle: Optional[FigureHandle]) -> bool:
        return handle is not None and self.handle == handle

    def is_draggable(self) -> bool:
        return not self.is_empty and self.locus in (Locus.VERTEX, Locus.LABEL)


EMPTY_SELECTION = Selection()


def score(distance: float, activation_radius: float) -> float:
    return max(0.0, activation_radius - distance)


class SelectionFinder:
    """Keeps the best-scoring candidate seen so far."""

    def __init__(self, cursor: Sequence[float], radii: SelectionRadii | None = None):
        self.cursor: Point = (float(cursor[0]), float(cursor[1]))
        self.radii = radii or SelectionRadii()
        self.best: Selection = EMPTY_SELECTION
        self.best_score: float = 0.0

    def _consider(self, value: float, candidate: Selection) -> None:
        if value > self.best_score:
            self.best = candidate
            self.best_score = value

    def test_polyline(self, polyline: Sequence[Sequence[float]], handle: FigureHandle) -> None:
        d = geometry.distance_point_polyline(self.cursor, polyline)
        self._consider(score(d, self.radii.polyline), Selection(handle, Locus.BODY))

    def test_polygon(self, ring: Sequence[Sequence[float]], handle: FigureHandle) -> None:
        d = geometry.distance_point_polygon(self.cursor, ring)
        self._consider(score(d, self.radii.polygon), Selection(handle, Locus.BODY))

    def test_vertex(self, vertex: Sequence[float], handle: FigureHandle, index: int) -> None:
        d = geometry.distance_point_point(self.cursor, vertex)
        self._consider(score(d, self.radii.vertex), Selection(handle, Locus.VERTEX, index))

    def test_label(self, box: geometry.Rect, handle: FigureHandle) -> None:
        d = geometry.distance_point_rect(self.cursor, box)
        self._consider(score(d, self.radii.label), Selection(handle, Locus.LABEL))

    def test_figure(self, handle: FigureHandle, figure: Figure, scale: float, label_box: Optional[geometry.Rect]) -> None:
        body = figure.display_points(scale)
        if figure.shape.dimensionality() is Dimensionality.SHAPE_1D:
            self.test_polyline(body, handle)
        else:
            self.test_polygon(body, handle)
        for index, vertex in enumerate(figure.display_vertices(scale)):
            self.test_vertex(vertex, handle, index)
        if label_box is not None:
            self.test_label(label_box, handle)


def find_selection(
    cursor_display: Sequence[float],
    figures: Iterable[Tuple[FigureHandle, Figure]],
    scale: float = 1.0,
    radii: SelectionRadii | None = None,
    label_boxes: Optional[Mapping[FigureHandle, geometry.Rect]] = None,
) -> Selection:
    """Best hit among the finished ``figures``; the empty selection when nothing scores."""
    finder = SelectionFinder(cursor_display, radii)
    boxes = label_boxes or {}
    for handle, figure in figures:
        if not figure.finished:
            continue
        finder.test_figure(handle, figure, scale, boxes.get(handle))
    return finder.best


__all__ = [
    "EMPTY_SELECTION",
    "Locus",
    "Selection",
    "SelectionFinder",
    "find_selection",
    "score",
]
