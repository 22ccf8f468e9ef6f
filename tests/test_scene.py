"""Tests for stage/scene.py: bond normalization, glyphs, placeholder, easing."""

import pytest

from reaction import MoleculesState, ReactionStep, VisualItem
from stage.scene import (
    DARK_INK, GLOW_THRESHOLD, LIGHT_INK, PLACEHOLDER_TEXT,
    blend_positions, bond_edges, build_scene, ease_in_out, label_ink,
    relative_luminance, scene_positions,
)


def _item(item_id, bonds=(), x=0.0, y=0.0, color="#ef4444", r=12.0, label=None):
    return VisualItem(
        id=item_id,
        label=label or item_id.upper(),
        x=x,
        y=y,
        color=color,
        r=r,
        bonds=tuple(bonds),
    )


def _step(items, glow=0.0):
    return ReactionStep(
        step_number=1,
        name="Step",
        description="",
        energy_level=50,
        visual_scene=tuple(items),
        molecules_state=MoleculesState(glow=glow),
    )


class TestBondEdges:
    """Undirected edge normalization."""

    def test_symmetric_pair_yields_one_edge(self):
        items = [_item("a", ["b"]), _item("b", ["a"])]
        assert bond_edges(items) == (("a", "b"),)

    def test_asymmetric_reference_still_draws(self):
        """Only one side lists the bond; the union defines the relation."""
        items = [_item("a"), _item("b", ["a"])]
        assert bond_edges(items) == (("b", "a"),)

    def test_dangling_reference_dropped(self):
        items = [_item("a", ["x"])]
        assert bond_edges(items) == ()

    def test_self_reference_dropped(self):
        items = [_item("a", ["a"])]
        assert bond_edges(items) == ()

    def test_repeated_reference_deduplicated(self):
        items = [_item("a", ["b", "b"]), _item("b", ["a", "a"])]
        assert len(bond_edges(items)) == 1

    def test_orientation_follows_first_seen_order(self):
        """No id comparison: 'z' listed first keeps its orientation."""
        items = [_item("z", ["a"]), _item("a", ["z"])]
        assert bond_edges(items) == (("z", "a"),)

    def test_water_molecule(self):
        items = [
            _item("o", ["h1", "h2"]),
            _item("h1", ["o"]),
            _item("h2", []),
        ]
        edges = {frozenset(e) for e in bond_edges(items)}
        assert edges == {frozenset(("o", "h1")), frozenset(("o", "h2"))}

    def test_triangle(self):
        items = [_item("a", ["b", "c"]), _item("b", ["c"]), _item("c", ["a"])]
        assert len(bond_edges(items)) == 3


class TestBuildScene:
    """SceneDrawing construction."""

    def test_empty_scene_placeholder(self):
        drawing = build_scene(_step([]))
        assert drawing.is_placeholder
        assert drawing.placeholder == PLACEHOLDER_TEXT
        assert drawing.glyphs == ()
        assert drawing.edges == ()

    def test_no_step_placeholder(self):
        drawing = build_scene(None)
        assert drawing.is_placeholder
        assert drawing.glyphs == ()

    def test_one_glyph_per_item(self):
        items = [_item("a", ["b"], x=-10), _item("b", ["a"], x=10)]
        drawing = build_scene(_step(items))
        assert not drawing.is_placeholder
        assert [g.id for g in drawing.glyphs] == ["a", "b"]
        assert len(drawing.edges) == 1

    def test_edge_coordinates_follow_items(self):
        items = [_item("a", ["b"], x=-10, y=5), _item("b", x=20, y=-5)]
        edge = build_scene(_step(items)).edges[0]
        assert (edge.x1, edge.y1, edge.x2, edge.y2) == (-10, 5, 20, -5)

    def test_dangling_bond_no_error(self):
        drawing = build_scene(_step([_item("a", ["x"])]))
        assert drawing.edges == ()
        assert len(drawing.glyphs) == 1

    @pytest.mark.parametrize("glow,expected", [
        (0.0, False), (GLOW_THRESHOLD, False), (0.51, True), (1.0, True),
    ])
    def test_glow_threshold(self, glow, expected):
        drawing = build_scene(_step([_item("a")], glow=glow))
        assert drawing.glyphs[0].glow is expected

    def test_glyph_geometry(self):
        glyph = build_scene(_step([_item("a", r=20)])).glyphs[0]
        assert glyph.halo_radius == pytest.approx(30)
        assert glyph.highlight_center == pytest.approx((-6, -6))
        assert glyph.highlight_radius == pytest.approx(4)

    def test_font_size_has_floor(self):
        small = build_scene(_step([_item("a", r=4)])).glyphs[0]
        large = build_scene(_step([_item("a", r=18)])).glyphs[0]
        assert small.font_size == 10
        assert large.font_size == 18

    def test_position_override(self):
        items = [_item("a", ["b"], x=0), _item("b", x=50)]
        drawing = build_scene(_step(items), {"a": (25.0, 5.0), "ghost": (1.0, 1.0)})
        glyph_a = drawing.glyphs[0]
        assert (glyph_a.x, glyph_a.y) == (25.0, 5.0)
        assert (drawing.edges[0].x1, drawing.edges[0].y1) == (25.0, 5.0)
        assert drawing.glyphs[1].x == 50


class TestLabelInk:
    """Label contrast against the particle fill."""

    @pytest.mark.parametrize("fill", ["#ffffff", "#f1f5f9", "#FFFFFF", "#f8fafc", "white"])
    def test_light_fills_get_dark_ink(self, fill):
        assert label_ink(fill) == DARK_INK

    @pytest.mark.parametrize("fill", [
        "#000000", "#ef4444", "#22c55e", "#a855f7", "#334155",
        "#facc15", "#fbbf24", "#94a3b8",
    ])
    def test_dark_or_colored_fills_get_light_ink(self, fill):
        assert label_ink(fill) == LIGHT_INK

    def test_invalid_color_does_not_raise(self):
        assert label_ink("not-a-color") in (DARK_INK, LIGHT_INK)

    def test_luminance_bounds(self):
        assert relative_luminance("#000000") == pytest.approx(0.0)
        assert relative_luminance("#ffffff") == pytest.approx(1.0)


class TestTransition:
    """Eased interpolation between consecutive steps."""

    def test_ease_endpoints(self):
        assert ease_in_out(0.0) == 0.0
        assert ease_in_out(1.0) == 1.0
        assert ease_in_out(0.5) == pytest.approx(0.5)
        assert ease_in_out(-1.0) == 0.0
        assert ease_in_out(3.0) == 1.0

    def test_ease_monotone(self):
        values = [ease_in_out(i / 20) for i in range(21)]
        assert values == sorted(values)

    def test_blend_endpoints_exact(self):
        prev = {"a": (0.0, 0.0)}
        curr = {"a": (100.0, -50.0)}
        assert blend_positions(prev, curr, 0.0) == {"a": (0.0, 0.0)}
        assert blend_positions(prev, curr, 1.0) == {"a": (100.0, -50.0)}

    def test_blend_midpoint(self):
        blended = blend_positions({"a": (0.0, 0.0)}, {"a": (100.0, 40.0)}, 0.5)
        assert blended["a"] == pytest.approx((50.0, 20.0))

    def test_new_particles_start_at_destination(self):
        blended = blend_positions({}, {"n": (7.0, 8.0)}, 0.3)
        assert blended["n"] == (7.0, 8.0)

    def test_removed_particles_dropped(self):
        blended = blend_positions({"a": (0, 0), "gone": (1, 1)}, {"a": (2, 2)}, 1.0)
        assert set(blended) == {"a"}

    def test_empty_destination(self):
        assert blend_positions({"a": (0, 0)}, {}, 0.5) == {}

    def test_scene_positions(self):
        step = _step([_item("a", x=1, y=2), _item("b", x=3, y=4)])
        assert scene_positions(step) == {"a": (1, 2), "b": (3, 4)}
        assert scene_positions(None) == {}
