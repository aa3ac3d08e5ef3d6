"""Shape model: incremental construction, finishing and vertex editing.

A :class:`Shape` stores its vertices in original (unscaled) image
coordinates. The stored list is never force-closed; closed kinds expose a
closed :meth:`Shape.ring` view instead. A rectangle stores only two
opposite corners and expands them to four on read.
"""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Sequence, Tuple

from . import geometry
from .errors import ContractViolation, require

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class ShapeKind(str, Enum):
    SEGMENT = "segment"
    POLYLINE = "polyline"
    CLOSED_POLYLINE = "closed_polyline"
    RECTANGLE = "rectangle"
    POLYGON = "polygon"


class Dimensionality(str, Enum):
    SHAPE_1D = "1d"
    SHAPE_2D = "2d"


class Correctness(str, Enum):
    VALID = "valid"
    SELF_INTERSECTING = "self_intersecting"


_DIMENSIONALITY = {
    ShapeKind.SEGMENT: Dimensionality.SHAPE_1D,
    ShapeKind.POLYLINE: Dimensionality.SHAPE_1D,
    ShapeKind.CLOSED_POLYLINE: Dimensionality.SHAPE_1D,
    ShapeKind.RECTANGLE: Dimensionality.SHAPE_2D,
    ShapeKind.POLYGON: Dimensionality.SHAPE_2D,
}

_TWO_POINT_KINDS = {ShapeKind.SEGMENT, ShapeKind.RECTANGLE}
_CLOSED_KINDS = {ShapeKind.CLOSED_POLYLINE, ShapeKind.POLYGON, ShapeKind.RECTANGLE}


def dimensionality_of(kind: ShapeKind) -> Dimensionality:
    return _DIMENSIONALITY[kind]


def coerce_kind(value: "str | ShapeKind") -> ShapeKind:
    """Accept enum members, values (``"closed_polyline"``) or names (``"CLOSED_POLYLINE"``)."""
    if isinstance(value, ShapeKind):
        return value
    text = str(value).strip()
    try:
        return ShapeKind(text.lower().replace("-", "_"))
    except ValueError:
        pass
    try:
        return ShapeKind[text.upper().replace("-", "_")]
    except KeyError as exc:
        raise ValueError(f"Unknown shape kind '{value}'") from exc


def _rectangle_corners(a: Point, b: Point) -> List[Point]:
    return [(a[0], a[1]), (b[0], a[1]), (b[0], b[1]), (a[0], b[1])]


class Shape:
    """Ordered vertex sequence with per-kind construction and edit rules."""

    def __init__(self, kind: ShapeKind, vertices: Sequence[Sequence[float]] = (), finished: bool = False):
        self.kind = coerce_kind(kind)
        self._vertices: List[Point] = [(float(p[0]), float(p[1])) for p in vertices]
        self._finished = bool(finished)

    def __repr__(self) -> str:
        state = "finished" if self._finished else "building"
        return f"Shape({self.kind.value}, {self._vertices!r}, {state})"

    # ------------------------------------------------------------------
    # State
    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def stored_vertices(self) -> Tuple[Point, ...]:
        return tuple(self._vertices)

    def is_empty(self) -> bool:
        return not self._vertices

    def dimensionality(self) -> Dimensionality:
        return dimensionality_of(self.kind)

    def can_finish(self) -> bool:
        return not self._finished and len(self._vertices) >= 2

    def copy(self) -> "Shape":
        return Shape(self.kind, self._vertices, self._finished)

    # ------------------------------------------------------------------
    # Construction
    def add_point(self, point: Sequence[float]) -> bool:
        """Append ``point``; return whether the shape is finished afterwards."""
        if self._finished:
            logger.debug("Ignoring point %s for finished %s", point, self.kind.value)
            return True
        new_point = (float(point[0]), float(point[1]))
        if self._vertices and new_point == self._vertices[-1]:
            return False
        self._vertices.append(new_point)
        if self.kind in _TWO_POINT_KINDS:
            self._finished = len(self._vertices) == 2
            return self._finished
        return False

    def finish(self) -> None:
        if self._finished:
            return
        require(len(self._vertices) >= 2, f"cannot finish a {self.kind.value} with {len(self._vertices)} vertices")
        self._finished = True

    def drag_vertex(self, index: int, new_pos: Sequence[float]) -> None:
        """Move corner ``index`` of :meth:`vertices` to ``new_pos``."""
        require(self._finished, "vertices can only be dragged on a finished shape")
        x, y = float(new_pos[0]), float(new_pos[1])
        if self.kind is ShapeKind.RECTANGLE:
            require(len(self._vertices) == 2, "rectangle must store two corners")
            (x0, y0), (x1, y1) = self._vertices
            if index == 0:
                self._vertices = [(x, y), (x1, y1)]
            elif index == 1:
                self._vertices = [(x0, y), (x, y1)]
            elif index == 2:
                self._vertices = [(x0, y0), (x, y)]
            elif index == 3:
                self._vertices = [(x, y0), (x1, y)]
            else:
                raise ContractViolation(f"rectangle has no corner {index}")
            return
        require(0 <= index < len(self._vertices), f"vertex index {index} out of range")
        self._vertices[index] = (x, y)

    # ------------------------------------------------------------------
    # Views
    def vertices(self) -> List[Point]:
        """Editable corner view: stored vertices, rectangles expanded to four corners."""
        if self.kind is ShapeKind.RECTANGLE and len(self._vertices) == 2:
            return _rectangle_corners(self._vertices[0], self._vertices[1])
        return list(self._vertices)

    def ring(self) -> List[Point]:
        """Closed view for closed kinds, the plain vertex list for open ones."""
        pts = self.vertices()
        if self.kind in _CLOSED_KINDS and pts:
            pts.append(pts[0])
        return pts

    def preview(self, cursor: Sequence[float] | None) -> "Shape":
        """Copy of an unfinished shape as it would look with ``cursor`` clicked next."""
        shape = self.copy()
        if shape._finished or cursor is None:
            return shape
        shape.add_point(cursor)
        if not shape._finished and len(shape._vertices) >= 2:
            shape._finished = True
        return shape

    # ------------------------------------------------------------------
    # Queries
    def correctness(self) -> Correctness:
        if self.kind is ShapeKind.POLYGON and geometry.is_self_intersecting(self.ring()):
            return Correctness.SELF_INTERSECTING
        return Correctness.VALID

    def is_valid(self) -> bool:
        return self.correctness() is Correctness.VALID

    def length(self) -> float:
        """Length of the ring view: polyline length, or perimeter for closed kinds."""
        return geometry.length(self.ring())

    def area(self) -> float:
        require(self.dimensionality() is Dimensionality.SHAPE_2D, f"{self.kind.value} has no area")
        return geometry.area(self.ring())

    def size(self) -> float:
        """Length for 1D kinds, area for 2D kinds, in square or linear pixels."""
        if self.dimensionality() is Dimensionality.SHAPE_1D:
            return self.length()
        return self.area()

    def linear_extent(self) -> float:
        if self.dimensionality() is Dimensionality.SHAPE_1D:
            return self.length()
        return math.sqrt(self.area())


__all__ = [
    "Correctness",
    "Dimensionality",
    "Shape",
    "ShapeKind",
    "coerce_kind",
    "dimensionality_of",
]
