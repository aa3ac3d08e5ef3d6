"""Qt widgets for the AreaMeasure playground."""
from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import QColor, QFontMetrics, QImage, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QInputDialog, QWidget

from areameasure_core import MeasureSession, MeasureSettings, RenderRole
from areameasure_core.session import RenderItem

Point = Tuple[float, float]

PEN_COLORS: Dict[RenderRole, QColor] = {
    RenderRole.ETALON_STATIC: QColor(0, 150, 0),
    RenderRole.ETALON_ACTIVE: QColor(0, 200, 0),
    RenderRole.STATIC: QColor(0, 50, 240),
    RenderRole.ACTIVE: QColor(0, 100, 240),
    RenderRole.ERROR: QColor(255, 0, 0),
}
HANDLE_SIZE = 6.0
RULER_MARGIN = 12.0


def fill_color(pen: QColor) -> QColor:
    color = QColor(pen)
    color.setAlpha(100)
    return color


class Canvas(QWidget):
    """Shows the image and forwards pointer and key input to a :class:`MeasureSession`."""

    status_changed = Signal(str)
    scale_changed = Signal(str)

    def __init__(self, settings: Optional[MeasureSettings] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.session = MeasureSession(settings, prompt=self._prompt, text_metrics=self._text_metrics)
        self._image: Optional[QImage] = None
        self._dragging = False
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

    # ------------------------------------------------------------------
    # Collaborators handed to the session
    def _prompt(self, text: str, default: float, minimum: float, maximum: float, decimals: int) -> Optional[float]:  # pragma: no cover - GUI entry point
        value, ok = QInputDialog.getDouble(self, self.window().windowTitle(), text, default, minimum, maximum, decimals)
        return value if ok else None

    def _text_metrics(self, text: str) -> Tuple[float, float]:  # pragma: no cover - GUI entry point
        metrics = QFontMetrics(self.font())
        return (float(metrics.horizontalAdvance(text)), float(metrics.height()))

    # ------------------------------------------------------------------
    # Image and zoom
    def set_image(self, image: QImage) -> None:  # pragma: no cover - GUI entry point
        self._image = image
        self.session.reset()
        self._sync_size()
        self._emit_state()

    def has_image(self) -> bool:
        return self._image is not None and not self._image.isNull()

    def image_size(self) -> Tuple[float, float]:
        if not self.has_image():
            return (0.0, 0.0)
        return (float(self._image.width()), float(self._image.height()))

    def sizeHint(self) -> QSize:  # pragma: no cover - GUI layout handling
        w, h = self.image_size()
        scale = self.session.scale
        return QSize(max(1, int(round(w * scale))), max(1, int(round(h * scale))))

    def _sync_size(self) -> None:  # pragma: no cover - GUI layout handling
        self.setFixedSize(self.sizeHint())
        self.update()

    def zoom_in(self) -> None:  # pragma: no cover - GUI entry point
        self.session.zoom_in()
        self._sync_size()
        self._emit_state()

    def zoom_out(self) -> None:  # pragma: no cover - GUI entry point
        self.session.zoom_out()
        self._sync_size()
        self._emit_state()

    def fit_to(self, viewport: QSize) -> None:  # pragma: no cover - GUI entry point
        self.session.fit_scale(self.image_size(), (float(viewport.width()), float(viewport.height())))
        self._sync_size()
        self._emit_state()

    # ------------------------------------------------------------------
    # Modes
    def set_shape_kind(self, kind: str) -> None:  # pragma: no cover - GUI entry point
        self.session.set_shape_kind(kind)
        self._emit_state()

    def set_defining_etalon(self, enabled: bool) -> None:  # pragma: no cover - GUI entry point
        self.session.set_defining_etalon(enabled)
        self._emit_state()

    def set_show_ruler(self, enabled: bool) -> None:  # pragma: no cover - GUI entry point
        self.session.set_show_ruler(enabled)
        self.update()

    def _emit_state(self) -> None:  # pragma: no cover - GUI entry point
        self.status_changed.emit(self.session.status())
        self.scale_changed.emit(self.session.scale_text())
        self.update()

    def _original_from_event(self, event) -> Point:  # pragma: no cover - GUI entry point
        pos = event.position()
        return self.session.display_scale.to_original((pos.x(), pos.y()))

    # ------------------------------------------------------------------
    # Input
    def mousePressEvent(self, event):  # pragma: no cover - GUI entry point
        if not self.has_image() or event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        point = self._original_from_event(event)
        self.session.move_cursor(point)
        if self.session.active_figure is None and self.session.hover.is_draggable():
            self.session.select_at_cursor()
            self._dragging = True
        elif self.session.active_figure is None and not self.session.hover.is_empty:
            self.session.select_at_cursor()
        else:
            self.session.clear_selection()
            self.session.add_point(point)
        self._emit_state()

    def mouseMoveEvent(self, event):  # pragma: no cover - GUI entry point
        if not self.has_image():
            return
        point = self._original_from_event(event)
        if self._dragging:
            self.session.drag_selection(point)
        else:
            self.session.move_cursor(point)
        self._emit_state()

    def mouseReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        if event.button() == Qt.LeftButton:
            self._dragging = False
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event):  # pragma: no cover - GUI entry point
        if self.session.finish_shape():
            self._emit_state()
            return
        super().mouseDoubleClickEvent(event)

    def leaveEvent(self, event):  # pragma: no cover - GUI entry point
        if not self._dragging:
            self.session.move_cursor(None)
            self._emit_state()
        super().leaveEvent(event)

    def wheelEvent(self, event):  # pragma: no cover - GUI entry point
        if event.modifiers() & Qt.ControlModifier:
            delta = event.angleDelta().y()
            if delta > 0:
                self.zoom_in()
            elif delta < 0:
                self.zoom_out()
            event.accept()
            return
        super().wheelEvent(event)

    def keyPressEvent(self, event):  # pragma: no cover - GUI entry point
        key = event.key()
        if key in (Qt.Key_Return, Qt.Key_Enter):
            self.session.finish_shape()
        elif key == Qt.Key_Escape:
            self.session.cancel_shape()
        elif key in (Qt.Key_Delete, Qt.Key_Backspace):
            self.session.delete_selected()
        elif key in (Qt.Key_Plus, Qt.Key_Equal):
            self.zoom_in()
            return
        elif key == Qt.Key_Minus:
            self.zoom_out()
            return
        else:
            super().keyPressEvent(event)
            return
        self._emit_state()

    # ------------------------------------------------------------------
    # Painting
    def paintEvent(self, event):  # pragma: no cover - GUI entry point
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        if self.has_image():
            w, h = self.image_size()
            scale = self.session.scale
            painter.drawImage(QRectF(0.0, 0.0, w * scale, h * scale), self._image)
        for item in self.session.render_items():
            self._draw_item(painter, item)
        self._draw_labels(painter)
        self._draw_ruler(painter)
        painter.end()

    def _draw_item(self, painter: QPainter, item: RenderItem) -> None:  # pragma: no cover - GUI entry point
        if len(item.points) == 0:
            return
        color = PEN_COLORS[item.role]
        pen = QPen(color, 3 if item.selected else 2)
        if item.hovered and not item.selected:
            pen.setStyle(Qt.DashLine)
        painter.setPen(pen)
        poly = _polygon(item.points)
        if item.closed:
            painter.setBrush(fill_color(color))
            painter.drawPolygon(poly)
            painter.setBrush(Qt.NoBrush)
        else:
            painter.drawPolyline(poly)
        if item.finished and (item.hovered or item.selected):
            painter.setPen(QPen(color, 1))
            for x, y in item.vertices:
                painter.drawRect(QRectF(x - HANDLE_SIZE / 2, y - HANDLE_SIZE / 2, HANDLE_SIZE, HANDLE_SIZE))

    def _draw_labels(self, painter: QPainter) -> None:  # pragma: no cover - GUI entry point
        for label in self.session.labels():
            x, y, w, h = label.box
            rect = QRectF(x, y, w, h)
            painter.fillRect(rect, QColor(255, 255, 255, 160))
            painter.setPen(QColor(0, 0, 0))
            painter.drawText(rect, Qt.AlignLeft | Qt.AlignVCenter, label.text)

    def _draw_ruler(self, painter: QPainter) -> None:  # pragma: no cover - GUI entry point
        ruler = self.session.ruler()
        if ruler is None:
            return
        metrics = QFontMetrics(self.font())
        visible = self.visibleRegion().boundingRect()
        x0 = visible.left() + RULER_MARGIN
        y0 = visible.bottom() - RULER_MARGIN
        x1 = x0 + ruler.pixels
        painter.fillRect(QRectF(x0 - 4, y0 - metrics.height() - 10, ruler.pixels + 8, metrics.height() + 14), QColor(255, 255, 255, 160))
        painter.setPen(QPen(QColor(0, 0, 0), 2))
        painter.drawLine(QPointF(x0, y0), QPointF(x1, y0))
        painter.drawLine(QPointF(x0, y0 - 4), QPointF(x0, y0))
        painter.drawLine(QPointF(x1, y0 - 4), QPointF(x1, y0))
        painter.drawText(QPointF(x0, y0 - 6), ruler.text)


def _polygon(points: Sequence[Point]) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])
