"""Scene model: turns a step's particle set into drawable primitives.

The bond lists on VisualItem encode an undirected graph through possibly
asymmetric adjacency lists. bond_edges() normalizes them once per step into
a set of unordered pairs, so each bond is drawn exactly once regardless of
whether one or both sides list it. Edge orientation follows first-seen item
order, which keeps the output deterministic without comparing ids.

Everything here is Qt-widget free; StageCanvas only paints what
build_scene() returns.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PyQt6.QtGui import QColor

from reaction import ReactionStep, VisualItem


GLOW_THRESHOLD = 0.5
HALO_SCALE = 1.5
HALO_OPACITY = 0.3
HIGHLIGHT_OFFSET = -0.3   # fraction of r, applied to both axes
HIGHLIGHT_SCALE = 0.2
MIN_FONT_SIZE = 10.0
LIGHT_FILL_LUMINANCE = 0.85  # near-white fills only

DARK_INK = "#000000"
LIGHT_INK = "#ffffff"
FALLBACK_FILL = "#94a3b8"
PLACEHOLDER_TEXT = "Visualization not available for this step"


@dataclass(frozen=True)
class BondSegment:
    """A line between two bonded particles, in scene coordinates."""

    source_id: str
    target_id: str
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class ParticleGlyph:
    """Everything needed to paint one particle."""

    id: str
    label: str
    x: float
    y: float
    r: float
    fill: str
    ink: str
    glow: bool
    font_size: float

    @property
    def halo_radius(self) -> float:
        return self.r * HALO_SCALE

    @property
    def highlight_center(self) -> tuple[float, float]:
        return self.r * HIGHLIGHT_OFFSET, self.r * HIGHLIGHT_OFFSET

    @property
    def highlight_radius(self) -> float:
        return self.r * HIGHLIGHT_SCALE


@dataclass(frozen=True)
class SceneDrawing:
    """Drawable output for one step.

    Exactly one of (glyphs, placeholder) is populated: an empty scene
    yields no glyphs or edges and a placeholder message.
    """

    edges: tuple[BondSegment, ...]
    glyphs: tuple[ParticleGlyph, ...]
    placeholder: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


# ---------------------------------------------------------------------------
# Bond graph
# ---------------------------------------------------------------------------

def bond_edges(items) -> tuple[tuple[str, str], ...]:
    """Normalized undirected edge list for a scene.

    One (source_id, target_id) pair per unordered pair {A, B} where A lists
    B or B lists A. References to ids missing from the scene and
    self-references are dropped.
    """
    known = {item.id for item in items}
    edges: dict[frozenset, tuple[str, str]] = {}
    for item in items:
        for target_id in item.bonds:
            if target_id == item.id or target_id not in known:
                continue
            key = frozenset((item.id, target_id))
            if key not in edges:
                edges[key] = (item.id, target_id)
    return tuple(edges.values())


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

def parse_color(color: str) -> QColor:
    """Parse a hex or named color, falling back to slate grey."""
    qcolor = QColor(color) if color else QColor()
    if not qcolor.isValid():
        qcolor = QColor(FALLBACK_FILL)
    return qcolor


def relative_luminance(color: str) -> float:
    """WCAG relative luminance of a color, in [0, 1]."""
    qcolor = parse_color(color)

    def channel(c):
        c = c / 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return (
        0.2126 * channel(qcolor.red())
        + 0.7152 * channel(qcolor.green())
        + 0.0722 * channel(qcolor.blue())
    )


def label_ink(fill: str) -> str:
    """Dark ink on near-white fills, light ink on dark or colored fills."""
    if relative_luminance(fill) > LIGHT_FILL_LUMINANCE:
        return DARK_INK
    return LIGHT_INK


# ---------------------------------------------------------------------------
# Scene construction
# ---------------------------------------------------------------------------

def make_glyph(item: VisualItem, glow: bool) -> ParticleGlyph:
    return ParticleGlyph(
        id=item.id,
        label=item.label,
        x=item.x,
        y=item.y,
        r=item.r,
        fill=item.color,
        ink=label_ink(item.color),
        glow=glow,
        font_size=max(MIN_FONT_SIZE, item.r),
    )


def build_scene(step: ReactionStep | None, positions=None) -> SceneDrawing:
    """Build the drawable scene for a step.

    Args:
        step: The active step, or None when no step is available.
        positions: Optional id -> (x, y) override, used while a transition
            between steps is in flight. Ids missing from it use the step's
            own coordinates.

    Returns:
        SceneDrawing with edges drawn beneath glyphs.
    """
    if step is None or not step.visual_scene:
        return SceneDrawing(edges=(), glyphs=(), placeholder=PLACEHOLDER_TEXT)

    items = step.visual_scene
    glow = step.molecules_state.glow > GLOW_THRESHOLD
    points = {item.id: (item.x, item.y) for item in items}
    if positions:
        points.update((k, v) for k, v in positions.items() if k in points)

    glyphs = []
    for item in items:
        glyph = make_glyph(item, glow)
        x, y = points[item.id]
        if (x, y) != (item.x, item.y):
            glyph = ParticleGlyph(
                glyph.id, glyph.label, x, y, glyph.r, glyph.fill,
                glyph.ink, glyph.glow, glyph.font_size,
            )
        glyphs.append(glyph)

    edges = []
    for source_id, target_id in bond_edges(items):
        x1, y1 = points[source_id]
        x2, y2 = points[target_id]
        edges.append(BondSegment(source_id, target_id, x1, y1, x2, y2))

    return SceneDrawing(edges=tuple(edges), glyphs=tuple(glyphs))


# ---------------------------------------------------------------------------
# Step-to-step transition
# ---------------------------------------------------------------------------

def ease_in_out(t: float) -> float:
    """Cubic ease-in-out on [0, 1]; inputs outside are clamped."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def scene_positions(step: ReactionStep | None) -> dict[str, tuple[float, float]]:
    if step is None:
        return {}
    return {item.id: (item.x, item.y) for item in step.visual_scene}


def blend_positions(previous, current, t):
    """Interpolate particle positions between two steps.

    Both endpoints are exact step data; only the path between them is
    smoothed. Particles absent from the previous step start at their
    destination.

    Args:
        previous: id -> (x, y) of the previously active step.
        current: id -> (x, y) of the newly active step.
        t: Linear progress in [0, 1].

    Returns:
        id -> (x, y) for every id in current.
    """
    if not current:
        return {}
    ids = list(current)
    dest = np.array([current[i] for i in ids], dtype=np.float64)
    src = np.array([previous.get(i, current[i]) for i in ids], dtype=np.float64)
    blended = src + (dest - src) * ease_in_out(t)
    return {i: (float(x), float(y)) for i, (x, y) in zip(ids, blended)}
