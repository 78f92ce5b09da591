"""
Tests for sibling alignment snapping.

Covers:
- Pull strength falloff and capture zone
- Five alignment pairs per axis, closest wins, first wins ties
- Exact snap scenario (right edge 205 -> sibling left edge 200)
- Fast-drag suppression
- Guides in world space
- Sibling cache invalidation and revision-keyed bounds
"""
import pytest

from models.transform import Rect
from models.ui_node import UiNode
from services.snap_engine import (
    AlignmentSnapEngine, SnapAxis, best_axis_match, pull_strength,
)


@pytest.fixture
def engine(tree):
    return AlignmentSnapEngine(tree)


class TestPullStrength:

    @pytest.mark.parametrize("distance, expected", [
        (0.0, 1.0),
        (5.0, 1.0),
        (7.5, 0.5),
        (10.0, 0.0),
        (12.0, 0.0),
    ])
    def test_capture_zone_falloff(self, distance, expected):
        assert pull_strength(distance, 10.0, 0.5) == pytest.approx(expected)

    def test_linear_without_capture_zone(self):
        assert pull_strength(2.0, 10.0, 0.0) == pytest.approx(0.8)

    def test_monotonic_decay(self):
        values = [pull_strength(d, 10.0, 0.5) for d in (0, 5.5, 6, 8, 9.9)]
        assert values == sorted(values, reverse=True)

    def test_zero_threshold(self):
        assert pull_strength(0.0, 0.0) == 0.0


class TestBestAxisMatch:

    def test_closest_pair_wins(self):
        own = Rect(0, 0, 100, 50)
        others = [Rect(103, 0, 50, 50), Rect(-8, 200, 50, 50)]
        match = best_axis_match(own, others, SnapAxis.X, 10)
        assert match.delta == pytest.approx(3)
        assert match.own == pytest.approx(100)

    def test_first_wins_on_tie(self):
        own = Rect(0, 0, 100, 50)
        # left edge is 4 away from other.min, right edge 4 away from other.max
        others = [Rect(4, 0, 100, 50)]
        match = best_axis_match(own, others, SnapAxis.X, 10)
        assert match.own == pytest.approx(0)
        assert match.delta == pytest.approx(4)

    def test_nothing_within_threshold(self):
        own = Rect(0, 0, 100, 50)
        assert best_axis_match(own, [Rect(500, 500, 10, 10)], SnapAxis.Y, 10) is None

    def test_center_alignment(self):
        own = Rect(0, 0, 100, 50)
        match = best_axis_match(own, [Rect(28, 300, 40, 40)], SnapAxis.X, 5)
        # centers 50 vs 48
        assert match.delta == pytest.approx(-2)


class TestSnap:

    def test_right_edge_snaps_onto_sibling_left_edge(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50))
        moving = make_box("N", pos=(0, 0), size=(100, 50))
        final, guides = engine.snap((155, 0), moving, [sibling], 10, (4, 0))
        assert final.x == pytest.approx(150)
        assert moving.rect_in_parent(final).x_max == pytest.approx(200)
        x_guides = [g for g in guides if g.axis is SnapAxis.X]
        assert len(x_guides) == 1
        assert x_guides[0].position == pytest.approx(200)
        assert x_guides[0].visible

    def test_exact_alignment_is_unchanged(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        final, guides = engine.snap((150, 0), moving, [sibling], 10, (0, 0))
        assert (final.x, final.y) == pytest.approx((150, 0))
        assert guides

    def test_partial_pull_outside_capture_zone(self, engine, make_box):
        sibling = make_box("S", pos=(250, 300), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        # right edge 208 -> 8 from 200, pull 0.4
        final, guides = engine.snap((158, 0), moving, [sibling], 10, (1, 0))
        assert final.x == pytest.approx(158 - 8 * 0.4)
        assert [g.axis for g in guides] == [SnapAxis.X]

    def test_fast_motion_suppresses_snapping(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        final, guides = engine.snap((155, 0), moving, [sibling], 10, (16, 0))
        assert final.x == pytest.approx(155)
        assert guides == []

    def test_no_match_no_guides(self, engine, make_box):
        sibling = make_box("S", pos=(600, 400), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        final, guides = engine.snap((0, 0), moving, [sibling], 10, (0, 0))
        assert (final.x, final.y) == pytest.approx((0, 0))
        assert guides == []

    def test_degenerate_sibling_skipped(self, engine, make_box):
        flat = make_box("Flat", pos=(250, 0), size=(100, 0))
        moving = make_box("N", size=(100, 50))
        final, guides = engine.snap((155, 0), moving, [flat], 10, (0, 0))
        assert guides == []

    def test_y_guide_in_world_space(self, engine, tree, make_box):
        tree.root.anchored_position = (0, 1000)
        sibling = make_box("S", pos=(0, 0), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        final, guides = engine.snap((300, 3), moving, [sibling], 10, (0, 0))
        assert final.y == pytest.approx(0)
        y_guide = [g for g in guides if g.axis is SnapAxis.Y][0]
        assert y_guide.local_position == pytest.approx(-25)
        assert y_guide.position == pytest.approx(975)

    def test_orphan_node_not_snapped(self, engine):
        orphan = UiNode("Orphan")
        final, guides = engine.snap((3, 4), orphan, [], 10, (0, 0))
        assert (final.x, final.y) == (3, 4)
        assert guides == []


class TestSiblingCache:

    def test_siblings_exclude_self_and_inactive(self, engine, make_box):
        a = make_box("A")
        b = make_box("B")
        make_box("Hidden", active=False)
        assert engine.siblings_of(a) == [b]

    def test_structure_change_invalidates(self, engine, make_box):
        a = make_box("A")
        assert engine.siblings_of(a) == []
        b = make_box("B")
        assert engine.siblings_of(a) == [b]

    def test_explicit_invalidate(self, make_box, tree):
        engine = AlignmentSnapEngine()
        a = make_box("A")
        assert engine.siblings_of(a) == []
        b = make_box("B")
        assert engine.siblings_of(a) == []
        engine.invalidate(tree.root)
        assert engine.siblings_of(a) == [b]

    def test_bounds_recomputed_after_move(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50))
        assert engine.sibling_bounds(sibling).x_min == pytest.approx(200)
        sibling.anchored_position = (350, 0)
        assert engine.sibling_bounds(sibling).x_min == pytest.approx(300)

    def test_bounds_recomputed_after_parent_resize(self, engine, tree):
        stretched = tree.add_node(UiNode("Fill", anchor_min=(0, 0), anchor_max=(1, 1), size_delta=(0, 0)))
        assert engine.sibling_bounds(stretched).width == pytest.approx(1920)
        tree.root.size_delta = (1000, 1080)
        assert engine.sibling_bounds(stretched).width == pytest.approx(1000)

    def test_hidden_after_caching_is_dropped(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50))
        moving = make_box("N", size=(100, 50))
        assert engine.siblings_of(moving) == [sibling]
        sibling.active = False
        assert engine.siblings_of(moving) == []
        final, guides = engine.snap((155, 0), moving, [sibling], 10, (0, 0))
        assert final.x == pytest.approx(155)
        assert guides == []

    def test_shown_after_caching_is_picked_up(self, engine, make_box):
        sibling = make_box("S", pos=(250, 0), size=(100, 50), active=False)
        moving = make_box("N", size=(100, 50))
        assert engine.siblings_of(moving) == []
        sibling.active = True
        assert engine.siblings_of(moving) == [sibling]
