"""Shared UI widgets and helpers used by the input panel and the stage.

Contains LoadingOverlay, the scene-to-widget mapping, and reusable slider
helpers.
"""

import math

from PyQt6.QtCore import Qt, QTimer, QPointF, QRectF
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QFont
from PyQt6.QtWidgets import QWidget, QSlider


BACKGROUND_COLOR = QColor(15, 23, 42)     # slate-900
ACCENT_COLOR = QColor(56, 189, 248)       # sky-400
MUTED_TEXT_COLOR = QColor(100, 116, 139)  # slate-500


# ---------------------------------------------------------------------------
# Slider helpers
# ---------------------------------------------------------------------------

def make_slider(minimum, maximum, value, resolution=1):
    """Create an integer QSlider that maps to float values.

    The slider range is [minimum*resolution, maximum*resolution].
    """
    slider = QSlider(Qt.Orientation.Horizontal)
    slider.setMinimum(int(minimum * resolution))
    slider.setMaximum(int(maximum * resolution))
    slider.setValue(int(value * resolution))
    slider.resolution = resolution
    return slider


def slider_value(slider):
    """Read the float value from a slider created by make_slider."""
    return slider.value() / slider.resolution


def set_slider_value(slider, value):
    """Move a make_slider slider to a float value without emitting signals."""
    slider.blockSignals(True)
    slider.setValue(int(round(value * slider.resolution)))
    slider.blockSignals(False)


# ---------------------------------------------------------------------------
# Scene viewbox
# ---------------------------------------------------------------------------

class SceneViewport:
    """Maps a fixed scene viewbox onto a widget, preserving aspect ratio."""

    def __init__(self, x=-200.0, y=-150.0, width=400.0, height=300.0):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def transform(self, widget_w, widget_h):
        """Return (scale, offset_x, offset_y) for the given widget size."""
        scale = min(widget_w / self.width, widget_h / self.height)
        offset_x = (widget_w - self.width * scale) / 2 - self.x * scale
        offset_y = (widget_h - self.height * scale) / 2 - self.y * scale
        return scale, offset_x, offset_y


# ---------------------------------------------------------------------------
# LoadingOverlay
# ---------------------------------------------------------------------------

class LoadingOverlay(QWidget):
    """Semi-transparent overlay with electrons orbiting a nucleus."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.message = "Analyzing Reaction Kinetics..."
        self.detail = "Calculating transition states and activation energies."
        self.t = 0.0
        self._timer = QTimer()
        self._timer.setInterval(16)  # ~60 fps
        self._timer.timeout.connect(self._tick)
        self.hide()

    @property
    def running(self):
        return self._timer.isActive()

    def start(self, message=None):
        if message is not None:
            self.message = message
        self.t = 0.0
        if self.parentWidget():
            self.resize(self.parentWidget().size())
        self.show()
        self.raise_()
        self._timer.start()

    def stop(self):
        self._timer.stop()
        self.hide()

    def _tick(self):
        self.t += 0.016
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        w, h = self.width(), self.height()

        painter.fillRect(self.rect(), QColor(15, 23, 42, 200))

        cx, cy = w / 2, h / 2 - 30

        # Three tilted orbits, each carrying one electron
        orbit_a, orbit_b = 46, 14
        orbit_pen = QPen(QColor(56, 189, 248, 70))
        orbit_pen.setWidthF(1.5)
        for k, period in enumerate((1.4, 1.9, 2.6)):
            tilt = 60 * k
            painter.save()
            painter.translate(cx, cy)
            painter.rotate(tilt)
            painter.setPen(orbit_pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawEllipse(QRectF(-orbit_a, -orbit_b, 2 * orbit_a, 2 * orbit_b))

            angle = 2 * math.pi * self.t / period + k
            ex = orbit_a * math.cos(angle)
            ey = orbit_b * math.sin(angle)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(ACCENT_COLOR))
            painter.drawEllipse(QPointF(ex, ey), 4, 4)
            painter.restore()

        # Nucleus, breathing slightly
        nucleus_r = 10 + 1.5 * math.sin(2 * math.pi * self.t)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(239, 68, 68)))
        painter.drawEllipse(QPointF(cx, cy), nucleus_r, nucleus_r)

        painter.setPen(QColor(255, 255, 255, 230))
        font = QFont()
        font.setPointSizeF(16)
        font.setBold(True)
        painter.setFont(font)
        painter.drawText(
            QRectF(0, cy + 60, w, 30),
            Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
            self.message,
        )

        painter.setPen(QColor(148, 163, 184))
        font.setPointSizeF(11)
        font.setBold(False)
        painter.setFont(font)
        painter.drawText(
            QRectF(0, cy + 92, w, 24),
            Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop,
            self.detail,
        )

        painter.end()
