"""Energy diagram: reaction-coordinate area chart with the active step marked."""

from __future__ import annotations

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import (
    QPainter, QPainterPath, QPen, QBrush, QColor, QFont, QLinearGradient,
)
from PyQt6.QtWidgets import QWidget

from stage.energy import (
    ENERGY_DOMAIN, active_point, caption, energy_curve, energy_series,
)
from ui_common import ACCENT_COLOR, MUTED_TEXT_COLOR


TITLE = "REACTION COORDINATE"
TITLE_HEIGHT = 18
CAPTION_HEIGHT = 30
MARGIN = 10
DOT_RADIUS_MIN = 6.0
DOT_RADIUS_MAX = 10.0
CURVE_WIDTH = 3.0


class EnergyDiagram(QWidget):
    """Area chart of energy level against step index.

    Draws nothing when no steps are loaded.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(240, 150)
        self.series = ()
        self.step_index = 0
        self.pulse = 0.0

    def set_steps(self, steps) -> None:
        self.series = energy_series(steps)
        self.update()

    def set_step_index(self, index: int) -> None:
        self.step_index = index
        self.update()

    def set_pulse(self, pulse: float) -> None:
        self.pulse = pulse
        if self.series:
            self.update()

    @property
    def caption(self) -> str:
        return caption(self.series, self.step_index)

    def _plot_rect(self) -> QRectF:
        return QRectF(
            MARGIN,
            TITLE_HEIGHT + MARGIN,
            max(1.0, self.width() - 2 * MARGIN),
            max(1.0, self.height() - TITLE_HEIGHT - CAPTION_HEIGHT - 2 * MARGIN),
        )

    def _to_pixel(self, rect: QRectF, x: float, energy: float) -> QPointF:
        n = len(self.series)
        lo, hi = ENERGY_DOMAIN
        fx = 0.5 if n <= 1 else x / (n - 1)
        fy = (energy - lo) / (hi - lo)
        return QPointF(rect.left() + fx * rect.width(), rect.bottom() - fy * rect.height())

    def paintEvent(self, event) -> None:
        if not self.series:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        w, h = self.width(), self.height()

        font = QFont()
        font.setPointSizeF(8)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(MUTED_TEXT_COLOR)
        painter.drawText(QRectF(MARGIN, 0, w, TITLE_HEIGHT),
                         Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
                         TITLE)

        rect = self._plot_rect()
        xs, ys = energy_curve(self.series)
        points = [self._to_pixel(rect, x, y) for x, y in zip(xs, ys)]

        # Filled area under the curve
        if len(points) > 1:
            area = QPainterPath(QPointF(points[0].x(), rect.bottom()))
            for p in points:
                area.lineTo(p)
            area.lineTo(QPointF(points[-1].x(), rect.bottom()))
            area.closeSubpath()
            gradient = QLinearGradient(0, rect.top(), 0, rect.bottom())
            gradient.setColorAt(0.05, QColor(56, 189, 248, 77))
            gradient.setColorAt(0.95, QColor(56, 189, 248, 0))
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(gradient))
            painter.drawPath(area)

            line = QPainterPath(points[0])
            for p in points[1:]:
                line.lineTo(p)
            pen = QPen(ACCENT_COLOR)
            pen.setWidthF(CURVE_WIDTH)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawPath(line)

        # Active step marker
        point = active_point(self.series, self.step_index)
        center = self._to_pixel(rect, point.step_index, point.energy)
        radius = DOT_RADIUS_MIN + (DOT_RADIUS_MAX - DOT_RADIUS_MIN) * self.pulse
        dot_pen = QPen(ACCENT_COLOR)
        dot_pen.setWidthF(2.0)
        painter.setPen(dot_pen)
        painter.setBrush(QBrush(QColor(255, 255, 255)))
        painter.drawEllipse(center, radius, radius)

        # Caption
        painter.setPen(QColor(51, 65, 85))
        painter.drawLine(QPointF(MARGIN, h - CAPTION_HEIGHT), QPointF(w - MARGIN, h - CAPTION_HEIGHT))
        font.setPointSizeF(9)
        font.setBold(False)
        painter.setFont(font)
        painter.setPen(QColor(148, 163, 184))
        painter.drawText(
            QRectF(MARGIN, h - CAPTION_HEIGHT, w - 2 * MARGIN, CAPTION_HEIGHT),
            Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
            self.caption,
        )

        painter.end()
