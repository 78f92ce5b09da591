"""
Tests for dragging nodes in the viewport.

Covers:
- Grid quantization (halves away from zero)
- Pixel deltas converted to layout units
- Grid + alignment snapping applied per sample
- Samples outside the preview are consumed
- Drag ends when its node leaves the layout
"""
import pytest

from models.transform import Vec2
from services.drag_controller import quantize_to_grid
from services.snap_engine import SnapAxis


class TestQuantizeToGrid:

    @pytest.mark.parametrize("value, expected", [
        (103, 104),
        (47, 48),
        (-4, -8),
        (4, 8),
        (3.9, 0),
        (-100, -104),
        (0, 0),
    ])
    def test_grid_8(self, value, expected):
        assert quantize_to_grid(value, 8) == pytest.approx(expected)

    def test_no_grid(self):
        assert quantize_to_grid(13.37, 0) == 13.37


def press(editor, pos):
    editor.pointer_down(pos)
    assert editor.is_dragging


class TestDrag:

    def test_pixel_delta_moves_node(self, editor, make_box, to_viewport):
        node = make_box("Box")
        start = to_viewport(0, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(10, 5))
        assert (node.anchored_position.x, node.anchored_position.y) == pytest.approx((40, -20))

    def test_grid_quantizes_position(self, editor, make_box, to_viewport):
        editor.set_grid_index(2)
        node = make_box("Box", pos=(99, 43))
        start = to_viewport(99, 43)
        press(editor, start)
        editor.pointer_drag(start + Vec2(1, -1))
        assert (node.anchored_position.x, node.anchored_position.y) == pytest.approx((104, 48))

    def test_slow_drag_on_grid_still_moves(self, editor, make_box, to_viewport):
        editor.set_grid_index(2)
        node = make_box("Box")
        pos = to_viewport(0, 0)
        press(editor, pos)
        for _ in range(3):
            pos = pos + Vec2(0.25, 0)
            editor.pointer_drag(pos)
            assert node.anchored_position.x == pytest.approx(0)
        editor.pointer_drag(pos + Vec2(0.25, 0))
        assert node.anchored_position.x == pytest.approx(8)

    def test_snaps_onto_sibling_edge(self, editor, make_box, to_viewport):
        node = make_box("N", pos=(151, 0), size=(100, 50))
        make_box("S", pos=(250, 0), size=(100, 50))
        start = to_viewport(151, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(1, 0))
        assert node.anchored_position.x == pytest.approx(150)
        axes = {guide.axis for guide in editor.state.guides}
        assert axes == {SnapAxis.X, SnapAxis.Y}
        x_guide = [g for g in editor.state.guides if g.axis is SnapAxis.X][0]
        assert x_guide.position == pytest.approx(200)

    def test_fast_drag_skips_snapping(self, editor, make_box, to_viewport):
        node = make_box("N", pos=(135, 0), size=(100, 50))
        make_box("S", pos=(250, 0), size=(100, 50))
        start = to_viewport(135, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(5, 0))
        assert node.anchored_position.x == pytest.approx(155)
        assert editor.state.guides == []

    def test_snap_disabled(self, editor, make_box, to_viewport):
        editor.set_snap_enabled(False)
        node = make_box("N", pos=(151, 0), size=(100, 50))
        make_box("S", pos=(250, 0), size=(100, 50))
        start = to_viewport(151, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(1, 0))
        assert node.anchored_position.x == pytest.approx(155)
        assert editor.state.guides == []

    def test_position_written_mid_drag_is_kept(self, editor, make_box, to_viewport):
        node = make_box("Box")
        start = to_viewport(0, 0)
        press(editor, start)
        node.anchored_position = (500, 0)
        editor.pointer_drag(start + Vec2(1, 0))
        assert (node.anchored_position.x, node.anchored_position.y) == pytest.approx((504, 0))

    def test_snapped_position_feeds_next_sample(self, editor, make_box, to_viewport):
        node = make_box("N", pos=(151, 0), size=(100, 50))
        make_box("S", pos=(250, 0), size=(100, 50))
        start = to_viewport(151, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(1, 0))
        assert node.anchored_position.x == pytest.approx(150)
        editor.set_snap_enabled(False)
        editor.pointer_drag(start + Vec2(2, 0))
        assert node.anchored_position.x == pytest.approx(154)

    def test_outside_preview_consumes_sample(self, editor, make_box, to_viewport):
        node = make_box("Box")
        press(editor, to_viewport(0, 0))
        editor.pointer_drag(Vec2(100, 100))
        assert (node.anchored_position.x, node.anchored_position.y) == pytest.approx((0, 0))
        assert editor.is_dragging
        # The next sample is measured from the consumed one
        editor.pointer_drag(Vec2(400, 300))
        assert (node.anchored_position.x, node.anchored_position.y) == pytest.approx((1200, -800))

    def test_release_clears_guides(self, editor, make_box, to_viewport):
        make_box("N", pos=(151, 0), size=(100, 50))
        make_box("S", pos=(250, 0), size=(100, 50))
        start = to_viewport(151, 0)
        press(editor, start)
        editor.pointer_drag(start + Vec2(1, 0))
        assert editor.state.guides
        editor.pointer_up(start + Vec2(1, 0))
        assert not editor.is_dragging
        assert editor.state.guides == []

    def test_removed_node_ends_drag(self, editor, tree, make_box, to_viewport):
        node = make_box("Box")
        press(editor, to_viewport(0, 0))
        tree.remove_node(node)
        assert not editor.is_dragging
        assert editor.selected_node is None

    def test_update_after_removal_without_listener(self, editor, tree, make_box, to_viewport):
        node = make_box("Box")
        controller = editor.drag_controller
        controller.begin_drag(node, to_viewport(0, 0))
        tree.remove_structure_listener(editor._on_structure_changed)
        tree.remove_node(node)
        assert controller.update_drag(to_viewport(10, 0)) is None
        assert not controller.is_dragging
        assert node.anchored_position.x == pytest.approx(0)

    def test_double_click_promotion_does_not_drag(self, editor, make_box, to_viewport, fake_clock):
        panel = make_box("Panel", size=(400, 400))
        make_box("Button", parent=panel)
        start = to_viewport(0, 0)
        editor.pointer_down(start)
        editor.pointer_up(start)
        fake_clock.advance(0.1)
        editor.pointer_down(start)
        assert editor.selected_node is panel
        assert not editor.is_dragging
