from __future__ import annotations

import argparse
import logging
import sys

from PySide6.QtCore import QElapsedTimer, QPoint, QPointF, QRect, Qt, QTimer
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QApplication, QMessageBox, QVBoxLayout, QWidget

from swirlgrid.core.driver import Click, DisplayParams, FrameDriver, Tick, measure_once
from swirlgrid.core.geometry import Line, Vector, line_endpoints
from swirlgrid.core.grid import GridParams, RotationPolicy
from swirlgrid.utils.svg import RenderParams

logger = logging.getLogger(__name__)


class SwirlCanvas(QWidget):
    """Fixed-size render surface; paints the driver's last frame."""

    def __init__(self, driver: FrameDriver, render: RenderParams, parent=None):
        super().__init__(parent)
        self.driver = driver
        self.render_params = render
        self.setFixedSize(render.display_size, render.display_size)
        self.setCursor(Qt.CrossCursor)

        self._clock = QElapsedTimer()
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.on_tick)
        self.timer.start(16)

        # measure once the widget is placed on screen
        QTimer.singleShot(0, self._measure)

    def _measure(self):
        def probe() -> Vector:
            p = self.mapToGlobal(QPoint(0, 0))
            return Vector(float(p.x()), float(p.y()))

        self.driver.dispatch(measure_once(probe))

    def on_tick(self):
        if self._clock.isValid():
            delta = float(self._clock.restart())
        else:
            self._clock.start()
            delta = 0.0
        self.driver.dispatch(Tick(delta))
        self.update()

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)
        p = event.globalPosition()
        self.driver.dispatch(Click(p.x(), p.y()))
        self.update()

    def paintEvent(self, event):
        c = self.driver.grid.canvas_size
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(self.render_params.background))
        painter.setWindow(QRect(0, 0, int(c), int(c)))
        pen = QPen(QColor(self.render_params.stroke))
        pen.setWidthF(self.render_params.stroke_width)
        painter.setPen(pen)
        for pic in self.driver.pictures:
            if not isinstance(pic.shape, Line):
                continue
            start, end = line_endpoints(pic.box)
            center = pic.box.center
            painter.save()
            painter.translate(center.x, center.y)
            painter.rotate(pic.shape.angle)
            painter.translate(-center.x, -center.y)
            painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))
            painter.restore()
        painter.end()


class MainWindow(QWidget):
    def __init__(self, grid: GridParams, render: RenderParams):
        super().__init__()
        self.setWindowTitle("SwirlGrid")
        self.driver = FrameDriver(grid, DisplayParams(display_size=float(render.display_size)))
        self.canvas = SwirlCanvas(self.driver, render, self)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.canvas)


def main():
    parser = argparse.ArgumentParser(prog="swirlgrid-desktop", description="SwirlGrid desktop viewer")
    parser.add_argument("--axis-count", type=int, default=70)
    parser.add_argument("--rotation", choices=[r.value for r in RotationPolicy], default=RotationPolicy.ADDITIVE.value)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv)
    try:
        w = MainWindow(GridParams(axis_count=args.axis_count, rotation=RotationPolicy(args.rotation)), RenderParams())
    except Exception as e:
        logger.exception("startup failed")
        msg = QMessageBox()
        msg.setIcon(QMessageBox.Critical)
        msg.setWindowTitle("SwirlGrid")
        msg.setText(str(e))
        msg.exec()
        sys.exit(1)
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
