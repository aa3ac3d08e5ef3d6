"""Figures and the arena that owns them.

A :class:`Figure` wraps one :class:`~areameasure_core.shapes.Shape` together
with its etalon flag and label anchor. Figures never look up session state
on their own: calibration and zoom arrive as explicit arguments.

Figures live in a :class:`FigureArena` and are addressed by
:class:`FigureHandle` values. Removing a figure bumps its slot's generation,
so every handle still pointing at it resolves to ``None`` afterwards.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from . import geometry
from .calibration import CalibrationSnapshot
from .labels import MessageCatalog
from .shapes import Correctness, Dimensionality, Shape

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class RenderRole(str, Enum):
    STATIC = "static"
    ACTIVE = "active"
    ETALON_STATIC = "etalon_static"
    ETALON_ACTIVE = "etalon_active"
    ERROR = "error"


@dataclass
class Figure:
    shape: Shape
    is_etalon: bool = False
    pinned_label_anchor: Optional[Point] = None

    @property
    def finished(self) -> bool:
        return self.shape.finished

    def active_shape(self, cursor: Optional[Sequence[float]] = None) -> Shape:
        """The shape as displayed: unfinished figures follow the cursor."""
        if self.shape.finished:
            return self.shape
        return self.shape.preview(cursor)

    def correctness(self, cursor: Optional[Sequence[float]] = None) -> Correctness:
        return self.active_shape(cursor).correctness()

    def real_size(
        self,
        snapshot: CalibrationSnapshot,
        cursor: Optional[Sequence[float]] = None,
        eps: float = 1e-6,
    ) -> Optional[float]:
        """Length or area in real units, ``None`` when it cannot be reported."""
        if not snapshot.is_calibrated:
            return None
        shape = self.active_shape(cursor)
        if shape.correctness() is not Correctness.VALID:
            return None
        value = snapshot.real_size(shape)
        return value if value > eps else None

    def size_text(
        self,
        snapshot: CalibrationSnapshot,
        messages: MessageCatalog,
        cursor: Optional[Sequence[float]] = None,
        eps: float = 1e-6,
    ) -> str:
        value = self.real_size(snapshot, cursor, eps)
        if value is None:
            return ""
        return messages.size_text(value, self.shape.dimensionality())

    def status_text(
        self,
        snapshot: CalibrationSnapshot,
        messages: MessageCatalog,
        cursor: Optional[Sequence[float]] = None,
        eps: float = 1e-6,
    ) -> str:
        if self.correctness(cursor) is Correctness.SELF_INTERSECTING:
            return messages.self_intersection_warning()
        size = self.size_text(snapshot, messages, cursor, eps)
        if not size:
            return ""
        return messages.status_text(size, self.shape.dimensionality(), self.is_etalon)

    def label_text(
        self,
        snapshot: CalibrationSnapshot,
        messages: MessageCatalog,
        cursor: Optional[Sequence[float]] = None,
        eps: float = 1e-6,
    ) -> str:
        size = self.size_text(snapshot, messages, cursor, eps)
        if not size:
            return ""
        return messages.label_text(size, self.is_etalon)

    def label_anchor(self, cursor: Optional[Sequence[float]] = None) -> Optional[Point]:
        """Pinned anchor, else the top-most (then left-most) vertex, in original coordinates."""
        if self.pinned_label_anchor is not None:
            return self.pinned_label_anchor
        pts = self.active_shape(cursor).ring()
        if not pts:
            return None
        return min(pts, key=lambda p: (p[1], p[0]))

    def pin_label(self, anchor: Sequence[float]) -> None:
        self.pinned_label_anchor = (float(anchor[0]), float(anchor[1]))

    def display_points(self, scale: float, cursor: Optional[Sequence[float]] = None) -> List[Point]:
        return geometry.scale_points(self.active_shape(cursor).ring(), scale)

    def display_vertices(self, scale: float, cursor: Optional[Sequence[float]] = None) -> List[Point]:
        return geometry.scale_points(self.active_shape(cursor).vertices(), scale)

    def render_role(self, cursor: Optional[Sequence[float]] = None) -> RenderRole:
        if self.correctness(cursor) is not Correctness.VALID:
            return RenderRole.ERROR
        if self.finished:
            return RenderRole.ETALON_STATIC if self.is_etalon else RenderRole.STATIC
        return RenderRole.ETALON_ACTIVE if self.is_etalon else RenderRole.ACTIVE

    def is_closed_drawing(self) -> bool:
        return self.shape.dimensionality() is Dimensionality.SHAPE_2D


class FigureHandle(NamedTuple):
    index: int
    generation: int


@dataclass
class _Slot:
    generation: int = 0
    figure: Optional[Figure] = None


@dataclass
class FigureArena:
    """Slot storage for figures with generation-checked handles."""

    _slots: List[_Slot] = field(default_factory=list)
    _free: List[int] = field(default_factory=list)
    _order: List[FigureHandle] = field(default_factory=list)

    def insert(self, figure: Figure) -> FigureHandle:
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
        else:
            index = len(self._slots)
            slot = _Slot()
            self._slots.append(slot)
        slot.figure = figure
        handle = FigureHandle(index, slot.generation)
        self._order.append(handle)
        return handle

    def get(self, handle: Optional[FigureHandle]) -> Optional[Figure]:
        if handle is None or not 0 <= handle.index < len(self._slots):
            return None
        slot = self._slots[handle.index]
        if slot.generation != handle.generation:
            return None
        return slot.figure

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, FigureHandle) and self.get(handle) is not None

    def remove(self, handle: FigureHandle) -> Optional[Figure]:
        figure = self.get(handle)
        if figure is None:
            return None
        slot = self._slots[handle.index]
        slot.figure = None
        slot.generation += 1
        self._free.append(handle.index)
        self._order.remove(handle)
        logger.debug("Removed figure %s", handle)
        return figure

    def clear(self) -> None:
        for handle in list(self._order):
            self.remove(handle)

    def items(self) -> List[Tuple[FigureHandle, Figure]]:
        """Live figures in creation order."""
        out: List[Tuple[FigureHandle, Figure]] = []
        for handle in self._order:
            figure = self.get(handle)
            if figure is not None:
                out.append((handle, figure))
        return out

    def __iter__(self) -> Iterator[Figure]:
        return iter([figure for _, figure in self.items()])

    def __len__(self) -> int:
        return len(self._order)


__all__ = ["Figure", "FigureArena", "FigureHandle", "RenderRole"]
