"""
Tests for the preview render pipeline.

Covers:
- Surface/camera lifecycle (idempotent create and teardown, rebuild)
- Resolution changes and the geometry generation counter
- Root binding (root sized to the surface, centered on the camera)
- Camera projection round trip
- Rasterization of visible nodes only
"""
import numpy as np
import pytest

from models.transform import Vec2
from models.ui_node import UiNode
from models.layout_tree import LayoutTree
from services.preview_pipeline import PreviewRenderPipeline, VirtualCamera
from constants import CAMERA_BACKGROUND

RED = (1.0, 0.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0)


@pytest.fixture
def pipeline(tree):
    pipe = PreviewRenderPipeline((1920, 1080))
    pipe.ensure_surface()
    pipe.bind_root(tree.root)
    yield pipe
    pipe.teardown()


class TestLifecycle:

    def test_not_ready_before_ensure(self):
        pipe = PreviewRenderPipeline((640, 480))
        assert not pipe.is_ready
        assert pipe.render() is None
        assert pipe.pixels() is None

    def test_ensure_surface_is_idempotent(self, pipeline):
        camera, surface = pipeline.camera, pipeline.surface
        pipeline.ensure_surface()
        assert pipeline.camera is camera
        assert pipeline.surface is surface
        assert pipeline.is_ready

    def test_teardown_twice(self, pipeline):
        camera = pipeline.camera
        pipeline.teardown()
        pipeline.teardown()
        assert not pipeline.is_ready
        assert camera.destroyed
        assert pipeline.bound_root is None

    def test_teardown_half_initialized(self):
        pipe = PreviewRenderPipeline((640, 480))
        pipe.teardown()
        assert pipe.camera is None

    def test_rebuild_creates_new_camera(self, pipeline):
        old_camera = pipeline.camera
        generation = pipeline.geometry_generation
        pipeline.rebuild()
        assert pipeline.camera is not old_camera
        assert old_camera.destroyed
        assert pipeline.is_ready
        assert pipeline.geometry_generation == generation + 1

    def test_resolution_change(self, pipeline, tree):
        generation = pipeline.geometry_generation
        pipeline.set_resolution((1080, 1920))
        assert pipeline.surface.resolution == (1080, 1920)
        assert pipeline.camera.ortho_size == pytest.approx(960)
        assert pipeline.geometry_generation == generation + 1
        size = tree.root.size_delta
        assert (size.x, size.y) == pytest.approx((1080, 1920))

    def test_same_resolution_keeps_generation(self, pipeline):
        generation = pipeline.geometry_generation
        pipeline.set_resolution((1920, 1080))
        assert pipeline.geometry_generation == generation


class TestRootBinding:

    def test_root_fills_surface(self):
        root = UiNode("Canvas", size_delta=(10, 10), anchored_position=(77, 77))
        pipe = PreviewRenderPipeline((800, 600))
        pipe.ensure_surface()
        pipe.bind_root(root)
        assert (root.size_delta.x, root.size_delta.y) == pytest.approx((800, 600))
        assert (root.anchored_position.x, root.anchored_position.y) == pytest.approx((0, 0))

    def test_bottom_left_pivot(self):
        root = UiNode("Canvas", pivot=(0, 0))
        pipe = PreviewRenderPipeline((800, 600))
        pipe.ensure_surface()
        pipe.bind_root(root)
        corners = root.world_corners()
        assert (corners[0].x, corners[0].y) == pytest.approx((-400, -300))

    def test_bind_is_weak(self, pipeline):
        root = UiNode("Temporary")
        pipeline.bind_root(root)
        del root
        assert pipeline.bound_root is None


class TestCamera:

    def test_one_pixel_per_unit(self, pipeline):
        assert pipeline.camera.pixels_per_unit((1920, 1080)) == pytest.approx(1.0)

    def test_world_origin_at_surface_center(self):
        camera = VirtualCamera(ortho_size=540)
        screen = camera.world_to_screen(Vec2(0, 0), (1920, 1080))
        assert (screen.x, screen.y) == pytest.approx((960, 540))

    def test_round_trip(self):
        camera = VirtualCamera(position=(30, -12), ortho_size=300)
        world = camera.screen_to_world(camera.world_to_screen(Vec2(123, 45), (800, 600)), (800, 600))
        assert (world.x, world.y) == pytest.approx((123, 45))

    def test_ui_layer_only(self):
        camera = VirtualCamera()
        assert camera.renders_layer("UI")
        assert not camera.renders_layer("Default")


class TestRender:

    def test_background_and_box(self, pipeline, tree, make_box):
        make_box("Red", color=RED)
        pipeline.render()
        pixels = pipeline.pixels()
        assert pixels.shape == (1080, 1920, 4)
        assert pixels.dtype == np.uint8
        assert tuple(pixels[540, 960]) == (255, 0, 0, 255)
        assert tuple(pixels[0, 0]) == tuple(CAMERA_BACKGROUND)

    def test_box_extent(self, pipeline, make_box):
        make_box("Red", color=RED)
        pipeline.render()
        pixels = pipeline.pixels()
        # world x in [-50, 50) covers surface columns 910..1009
        assert tuple(pixels[540, 910]) == (255, 0, 0, 255)
        assert tuple(pixels[540, 1009]) == (255, 0, 0, 255)
        assert tuple(pixels[540, 909]) == tuple(CAMERA_BACKGROUND)
        assert tuple(pixels[540, 1010]) == tuple(CAMERA_BACKGROUND)

    def test_y_is_up(self, pipeline, make_box):
        make_box("High", pos=(0, 300), color=RED)
        pipeline.render()
        pixels = pipeline.pixels()
        # world y 300 is 300 rows above the center row
        assert tuple(pixels[240, 960]) == (255, 0, 0, 255)
        assert tuple(pixels[840, 960]) == tuple(CAMERA_BACKGROUND)

    def test_later_sibling_paints_over(self, pipeline, make_box):
        make_box("Red", color=RED)
        make_box("Blue", color=BLUE)
        pipeline.render()
        assert tuple(pipeline.pixels()[540, 960]) == (0, 0, 255, 255)

    def test_inactive_subtree_not_drawn(self, pipeline, make_box):
        hidden = make_box("Hidden", color=RED, active=False)
        make_box("Child", parent=hidden, color=BLUE)
        pipeline.render()
        assert tuple(pipeline.pixels()[540, 960]) == tuple(CAMERA_BACKGROUND)

    def test_other_layer_not_drawn(self, pipeline, make_box):
        make_box("World", color=RED, layer="Default")
        pipeline.render()
        assert tuple(pipeline.pixels()[540, 960]) == tuple(CAMERA_BACKGROUND)

    def test_render_clears_previous_frame(self, pipeline, tree, make_box):
        node = make_box("Red", color=RED)
        pipeline.render()
        tree.remove_node(node)
        pipeline.render()
        assert tuple(pipeline.pixels()[540, 960]) == tuple(CAMERA_BACKGROUND)

    def test_render_clears_dirty_flag(self, pipeline, make_box):
        node = make_box("Red", color=RED)
        assert node.dirty
        pipeline.render()
        assert not node.dirty

    def test_render_explicit_root(self):
        tree = LayoutTree(UiNode("Canvas"))
        pipe = PreviewRenderPipeline((200, 100))
        pipe.ensure_surface()
        tree.add_node(UiNode("Box", size_delta=(20, 20), color=RED))
        image = pipe.render(tree.root)
        assert image.size == (200, 100)
        assert image.getpixel((100, 50)) == (255, 0, 0, 255)
