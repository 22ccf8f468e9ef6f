"""Stage canvas: QPainter rendering of a step's particle scene.

Paints what stage.scene.build_scene() returns: bonds first, then
particles (halo, body, specular highlight, label). When the active step
changes, particle positions ease from the previous step's coordinates to
the new ones over TRANSITION_MS.
"""

import time

from PyQt6.QtCore import Qt, QTimer, QPointF, QRectF
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QFont
from PyQt6.QtWidgets import QWidget

from stage.scene import (
    HALO_OPACITY, blend_positions, build_scene, parse_color, scene_positions,
)
from ui_common import BACKGROUND_COLOR, MUTED_TEXT_COLOR, SceneViewport


BOND_COLOR = QColor(148, 163, 184)
BOND_WIDTH = 3.0
GRID_SPACING = 40
GRID_COLOR = QColor(71, 85, 105, 60)
OUTLINE_COLOR = QColor(255, 255, 255, 51)


class StageCanvas(QWidget):
    """Custom widget that draws the active step's particles and bonds."""

    TRANSITION_MS = 1000
    FRAME_MS = 16

    def __init__(self, parent=None):
        super().__init__(parent)
        self.viewport = SceneViewport()
        self.step = None
        self.intro_text = ""
        self.pulse = 0.0
        self._from_positions = {}
        self._positions = {}
        self._transition_start = None
        self.setMinimumSize(400, 300)

        self.timer = QTimer()
        self.timer.setInterval(self.FRAME_MS)
        self.timer.timeout.connect(self._on_transition_frame)

    @property
    def in_transition(self):
        return self._transition_start is not None

    def set_step(self, step, animate=True):
        """Show a step, easing particles from wherever they are now."""
        if step is self.step:
            return
        current = scene_positions(step)
        if animate and self._positions and current:
            self._from_positions = dict(self._positions)
            self._transition_start = time.monotonic()
            self._positions = blend_positions(self._from_positions, current, 0.0)
            self.timer.start()
        else:
            self._stop_transition()
            self._positions = current
        self.step = step
        self.intro_text = ""
        self.update()

    def show_intro(self, text):
        """Clear the scene and show a centered message instead."""
        self._stop_transition()
        self.step = None
        self._positions = {}
        self.intro_text = text
        self.update()

    def set_pulse(self, pulse):
        self.pulse = pulse
        if self.step is not None:
            self.update()

    def _stop_transition(self):
        self.timer.stop()
        self._transition_start = None
        self._from_positions = {}

    def _on_transition_frame(self):
        elapsed_ms = (time.monotonic() - self._transition_start) * 1000
        t = elapsed_ms / self.TRANSITION_MS
        current = scene_positions(self.step)
        self._positions = blend_positions(self._from_positions, current, t)
        if t >= 1.0:
            self._stop_transition()
            self._positions = current
        self.update()

    # -- Painting --

    def _draw_grid(self, painter):
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(GRID_COLOR))
        for gx in range(0, self.width(), GRID_SPACING):
            for gy in range(0, self.height(), GRID_SPACING):
                painter.drawEllipse(QPointF(gx, gy), 1, 1)

    def _draw_text(self, painter, text, color, size):
        font = QFont()
        font.setPointSizeF(size)
        painter.setFont(font)
        painter.setPen(color)
        painter.drawText(
            QRectF(-self.viewport.width / 2, -20, self.viewport.width, 40),
            Qt.AlignmentFlag.AlignCenter,
            text,
        )

    def _draw_glyph(self, painter, glyph):
        fill = parse_color(glyph.fill)
        center = QPointF(glyph.x, glyph.y)

        if glyph.glow:
            halo = QColor(fill)
            halo.setAlphaF(HALO_OPACITY * (0.6 + 0.4 * self.pulse))
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(halo))
            halo_r = glyph.halo_radius * (1.0 + 0.1 * self.pulse)
            painter.drawEllipse(center, halo_r, halo_r)

        outline = QPen(OUTLINE_COLOR)
        outline.setWidthF(1.0)
        painter.setPen(outline)
        painter.setBrush(QBrush(fill))
        painter.drawEllipse(center, glyph.r, glyph.r)

        hx, hy = glyph.highlight_center
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(255, 255, 255, 102)))
        painter.drawEllipse(
            QPointF(glyph.x + hx, glyph.y + hy),
            glyph.highlight_radius, glyph.highlight_radius,
        )

        font = QFont()
        font.setPixelSize(max(1, int(round(glyph.font_size))))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor(glyph.ink))
        box = 2 * max(glyph.r, glyph.font_size)
        painter.drawText(
            QRectF(glyph.x - box, glyph.y - box / 2, 2 * box, box),
            Qt.AlignmentFlag.AlignCenter,
            glyph.label,
        )

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), BACKGROUND_COLOR)
        self._draw_grid(painter)

        scale, ox, oy = self.viewport.transform(self.width(), self.height())
        painter.translate(ox, oy)
        painter.scale(scale, scale)

        if self.intro_text:
            self._draw_text(painter, self.intro_text, QColor(226, 232, 240), 14 / scale)
            painter.end()
            return

        drawing = build_scene(self.step, self._positions)
        if drawing.is_placeholder:
            self._draw_text(painter, drawing.placeholder, MUTED_TEXT_COLOR, 10 / scale)
            painter.end()
            return

        bond_pen = QPen(BOND_COLOR)
        bond_pen.setWidthF(BOND_WIDTH)
        bond_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(bond_pen)
        for edge in drawing.edges:
            painter.drawLine(QPointF(edge.x1, edge.y1), QPointF(edge.x2, edge.y2))

        for glyph in drawing.glyphs:
            self._draw_glyph(painter, glyph)

        painter.end()
