"""Application bootstrap for the AreaMeasure playground."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QImage, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QStatusBar,
    QToolBar,
)

from areameasure_core import ShapeKind, load_settings

from .widgets import Canvas

logger = logging.getLogger(__name__)

KIND_ACTIONS = (
    (ShapeKind.SEGMENT, "Segment", "Segment: two clicks measure a straight length."),
    (ShapeKind.POLYLINE, "Polyline", "Polyline: click vertices, double click or Enter to finish."),
    (ShapeKind.CLOSED_POLYLINE, "Closed Polyline", "Closed polyline: perimeter of a closed outline."),
    (ShapeKind.RECTANGLE, "Rectangle", "Rectangle: two opposite corners give an area."),
    (ShapeKind.POLYGON, "Polygon", "Polygon: click vertices, double click or Enter to finish."),
)


class Main(QMainWindow):
    """Top-level window wiring together the canvas and its chrome."""

    def __init__(self, image_path: Optional[str] = None):
        super().__init__()
        self.setWindowTitle("AreaMeasure")

        self.canvas = Canvas(load_settings())
        self.scroll = QScrollArea()
        self.scroll.setWidget(self.canvas)
        self.scroll.setAlignment(Qt.AlignCenter)
        self.setCentralWidget(self.scroll)

        self._kind_actions: dict[ShapeKind, QAction] = {}
        self._etalon_action: QAction | None = None
        self._setup_status_bar()
        self._make_toolbar()
        self._make_menu()

        self.canvas.status_changed.connect(self._on_status_changed)
        self.canvas.scale_changed.connect(self._scale_label.setText)

        self.resize(1200, 800)
        if image_path:
            self.open_image(image_path)

    # ------------------------------------------------------------------
    # UI scaffolding
    def _setup_status_bar(self) -> None:
        bar = QStatusBar()
        bar.setSizeGripEnabled(False)
        self.setStatusBar(bar)
        self._scale_label = QLabel(self.canvas.session.scale_text())
        self._scale_label.setToolTip("Display scale. Ctrl+wheel, + and - change it.")
        bar.addPermanentWidget(self._scale_label)

    def _make_toolbar(self) -> None:
        toolbar = QToolBar("Shapes")
        toolbar.setMovable(False)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        group = QActionGroup(self)
        group.setExclusive(True)
        for kind, text, tip in KIND_ACTIONS:
            action = QAction(text, self)
            action.setCheckable(True)
            action.setActionGroup(group)
            action.setToolTip(tip)
            action.setStatusTip(tip)
            action.triggered.connect(lambda checked, k=kind: self._activate_kind(k, checked))
            toolbar.addAction(action)
            self._kind_actions[kind] = action
        self._kind_actions[self.canvas.session.shape_kind].setChecked(True)

        toolbar.addSeparator()

        etalon_tip = "Etalon: outline an object of known size to calibrate."
        self._etalon_action = QAction("Etalon", self)
        self._etalon_action.setCheckable(True)
        self._etalon_action.setToolTip(etalon_tip)
        self._etalon_action.setStatusTip(etalon_tip)
        self._etalon_action.triggered.connect(lambda checked: self.canvas.set_defining_etalon(bool(checked)))
        toolbar.addAction(self._etalon_action)

        ruler_action = QAction("Ruler", self)
        ruler_action.setCheckable(True)
        ruler_action.setChecked(self.canvas.session.show_ruler)
        ruler_action.setToolTip("Toggle the scale bar.")
        ruler_action.triggered.connect(lambda checked: self.canvas.set_show_ruler(bool(checked)))
        toolbar.addAction(ruler_action)

    def _make_menu(self) -> None:
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File")
        open_action = file_menu.addAction("Open Image...")
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._choose_image)
        quit_action = file_menu.addAction("Quit")
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)

        view_menu = menu_bar.addMenu("&View")
        zoom_in_action = view_menu.addAction("Zoom In")
        zoom_in_action.setShortcut(QKeySequence.ZoomIn)
        zoom_in_action.triggered.connect(self.canvas.zoom_in)
        zoom_out_action = view_menu.addAction("Zoom Out")
        zoom_out_action.setShortcut(QKeySequence.ZoomOut)
        zoom_out_action.triggered.connect(self.canvas.zoom_out)
        fit_action = view_menu.addAction("Fit to Window")
        fit_action.setShortcut("Ctrl+0")
        fit_action.triggered.connect(lambda: self.canvas.fit_to(self.scroll.viewport().size()))

    # ------------------------------------------------------------------
    # Event handlers
    def _activate_kind(self, kind: ShapeKind, checked: bool) -> None:
        if checked:
            self.canvas.set_shape_kind(kind.value)

    def _on_status_changed(self, message: str) -> None:
        if message:
            self.statusBar().showMessage(message)
        else:
            self.statusBar().clearMessage()
        if self._etalon_action is not None:
            blocked = self._etalon_action.blockSignals(True)
            self._etalon_action.setChecked(self.canvas.session.defining_etalon)
            self._etalon_action.blockSignals(blocked)

    def _choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Image", "", "Images (*.png *.jpg *.jpeg *.bmp *.tif *.tiff)")
        if path:
            self.open_image(path)

    def open_image(self, path: str) -> None:
        image = QImage(path)
        if image.isNull():
            logger.warning("Could not load image %s", path)
            QMessageBox.warning(self, "AreaMeasure", f"Could not load image:\n{path}")
            return
        logger.info("Opened %s (%dx%d)", path, image.width(), image.height())
        self.canvas.set_image(image)
        self.canvas.fit_to(self.scroll.viewport().size())
        self.setWindowTitle(f"AreaMeasure - {path}")


def main() -> None:  # pragma: no cover - GUI entry point
    logging.basicConfig(level=logging.INFO)
    app = QApplication(sys.argv)
    image_path = sys.argv[1] if len(sys.argv) > 1 else None
    window = Main(image_path)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":  # pragma: no cover - GUI entry point
    main()
