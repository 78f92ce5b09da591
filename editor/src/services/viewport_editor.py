"""
Viewport Editor

Per-viewport orchestration of the interactive core. Owns the viewport state,
the preview pipeline and every controller, and turns pointer/scroll input
into layout edits.

Per-frame ordering:
1. preview placement refreshed (CoordinateMapper.update_frame)
2. pointer-down: handle hit-test first, then node hit-test
3. pointer-drag: resize or drag (with grid + alignment snapping)
4. render, then compute_overlay() for the host to paint

Overlay geometry is recomputed from scratch on every call; nothing drawn
persists between frames.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.transform import Vec2, Rect
from models.viewport_state import ViewportState
from services.preview_pipeline import PreviewRenderPipeline
from services.snap_engine import AlignmentSnapEngine, SnapAxis
from services.hit_tester import HitTester
from services.drag_controller import DragController
from components.transform_widgets.handles import HandleController
from utils.coordinate_transforms import CoordinateMapper
from constants import (
    DEVICE_PRESETS, DEFAULT_PRESET_INDEX, GRID_SIZES, DEFAULT_GRID_INDEX,
    POINTER_PRIMARY, POINTER_MIDDLE, SCROLL_ZOOM_STEP, MIN_GRID_STEP_PX,
    DEFAULT_SNAP_CAPTURE_RATIO,
)

logger = logging.getLogger(__name__)


@dataclass
class GuideLine:
    axis: SnapAxis
    start: Vec2
    end: Vec2


@dataclass
class OverlayGeometry:
    """Everything the host paints over the preview for one frame (workspace pixels)."""
    preview_rect: Optional[Rect] = None
    selection_rect: Optional[Rect] = None
    selection_outline: Optional[List[Vec2]] = None
    hierarchy_outlines: List[List[Vec2]] = field(default_factory=list)
    handles: list = field(default_factory=list)
    guide_lines: List[GuideLine] = field(default_factory=list)
    grid_lines: List[Tuple[Vec2, Vec2]] = field(default_factory=list)


class ViewportEditor:
    """Interactive layout viewport (toolkit independent)."""

    def __init__(self, tree, theme_manager=None, settings=None, clock=time.monotonic):
        self.tree = tree
        self.theme_manager = theme_manager
        self.settings = settings

        self.preset_index = DEFAULT_PRESET_INDEX
        self.grid_index = DEFAULT_GRID_INDEX
        capture_ratio = DEFAULT_SNAP_CAPTURE_RATIO
        self.state = ViewportState()
        if settings is not None:
            self.preset_index = self._clamp_index(settings.preset_index, DEVICE_PRESETS)
            self.grid_index = self._clamp_index(settings.grid_index, GRID_SIZES)
            self.state.snap_enabled = settings.smart_align
            self.state.snap_threshold = settings.snap_threshold
            capture_ratio = settings.snap_capture_ratio
        self.state.grid_size = GRID_SIZES[self.grid_index]

        self.pipeline = PreviewRenderPipeline(DEVICE_PRESETS[self.preset_index][1])
        self.mapper = CoordinateMapper(self.pipeline)
        self.snap_engine = AlignmentSnapEngine(tree, capture_ratio=capture_ratio)
        self.hit_tester = HitTester(self.mapper, self.state, tree, clock=clock)
        self.handle_controller = HandleController(self.mapper)
        self.drag_controller = DragController(self.mapper, self.state, self.snap_engine, tree)

        self.workspace_size = (0, 0)
        self.is_open = False
        self.is_panning = False
        self._last_pan_pos = None

    @staticmethod
    def _clamp_index(index, options):
        return max(0, min(len(options) - 1, int(index)))

    # ========================================
    # Lifecycle
    # ========================================

    def open(self, workspace_size=None):
        """Create the preview resources and bind the layout root."""
        if workspace_size is not None:
            self.workspace_size = (workspace_size[0], workspace_size[1])
        self.pipeline.ensure_surface()
        self.pipeline.bind_root(self.tree.root)
        self.tree.add_structure_listener(self._on_structure_changed)
        self.is_open = True
        self.refresh_frame()
        logger.info("Viewport opened at %dx%d", *self.pipeline.resolution)

    def close(self):
        """End interactions and release the preview resources."""
        self.drag_controller.end_drag()
        self.handle_controller.end_resize()
        self.handle_controller.clear()
        self.tree.remove_structure_listener(self._on_structure_changed)
        self.pipeline.teardown()
        self.state.selected_node = None
        self.state.clear_guides()
        self.hit_tester.reset()
        self.is_open = False
        logger.info("Viewport closed")

    def set_workspace_size(self, workspace_size):
        self.workspace_size = (workspace_size[0], workspace_size[1])
        self.refresh_frame()

    def refresh_frame(self):
        """Recompute the preview placement and the selection handles."""
        self.mapper.update_frame(self.workspace_size, self.state.zoom, self.state.pan_offset)
        self.handle_controller.handles_for(self.selection_rect())
        return self.mapper.preview_rect

    # ========================================
    # Queries
    # ========================================

    @property
    def selected_node(self):
        return self.state.selected_node

    @property
    def is_dragging(self):
        return self.drag_controller.is_dragging

    @property
    def is_resizing(self):
        return self.handle_controller.is_resizing

    def is_empty(self):
        return self.tree.is_empty()

    def selection_rect(self):
        node = self.state.selected_node
        if node is None or not self.tree.contains(node):
            return None
        return self.mapper.world_rect_to_viewport(node.world_corners())

    def cursor_at(self, pos):
        """Cursor of the handle under ``pos`` (None when no handle is hovered)."""
        handle = self.handle_controller.handle_at(Vec2.of(pos))
        return handle.get_cursor() if handle is not None else None

    # ========================================
    # Pointer input
    # ========================================

    def pointer_down(self, pos, button=POINTER_PRIMARY):
        """Handle a press. Returns the selected node after the press."""
        pos = Vec2.of(pos)
        if button == POINTER_MIDDLE:
            self.is_panning = True
            self._last_pan_pos = pos
            return self.state.selected_node
        if button != POINTER_PRIMARY:
            return self.state.selected_node

        self.refresh_frame()
        selected = self.state.selected_node
        if selected is not None:
            handle_type = self.handle_controller.hit_handle(pos)
            if handle_type is not None:
                self.handle_controller.begin_resize(handle_type, selected, pos)
                return selected

        node = self.hit_tester.select_at(pos)
        if node is not None and not self.hit_tester.promoted:
            self.drag_controller.begin_drag(node, pos)
        self.refresh_frame()
        return self.state.selected_node

    def pointer_drag(self, pos, button=POINTER_PRIMARY, delta=None):
        pos = Vec2.of(pos)
        if button == POINTER_MIDDLE:
            if delta is None:
                delta = pos - self._last_pan_pos if self._last_pan_pos is not None else Vec2(0.0, 0.0)
            self._last_pan_pos = pos
            self.pan(delta)
            return
        if button != POINTER_PRIMARY:
            return

        self.refresh_frame()
        if self.handle_controller.is_resizing:
            self.handle_controller.update_resize(pos)
        elif self.drag_controller.is_dragging:
            self.drag_controller.update_drag(pos)
        self.refresh_frame()

    def pointer_up(self, pos=None, button=POINTER_PRIMARY):
        if button == POINTER_MIDDLE:
            self.is_panning = False
            self._last_pan_pos = None
            return
        if button != POINTER_PRIMARY:
            return
        self.drag_controller.end_drag()
        self.handle_controller.end_resize()
        self.refresh_frame()

    def scroll(self, delta_y):
        """Scroll-wheel zoom (positive delta zooms out)."""
        self.state.zoom = self.state.zoom - delta_y * SCROLL_ZOOM_STEP
        self.refresh_frame()

    def pan(self, delta):
        self.state.pan_offset = self.state.pan_offset + Vec2.of(delta)
        self.refresh_frame()

    # ========================================
    # Toolbar operations
    # ========================================

    def set_device_preset(self, index):
        self.preset_index = self._clamp_index(index, DEVICE_PRESETS)
        label, resolution = DEVICE_PRESETS[self.preset_index]
        self.pipeline.set_resolution(resolution)
        self.state.clear_guides()
        if self.settings is not None:
            self.settings.preset_index = self.preset_index
        logger.info("Device preset: %s", label)
        self.refresh_frame()

    def set_grid_index(self, index):
        self.grid_index = self._clamp_index(index, GRID_SIZES)
        self.state.grid_size = GRID_SIZES[self.grid_index]
        if self.settings is not None:
            self.settings.grid_index = self.grid_index

    def set_snap_enabled(self, enabled):
        self.state.snap_enabled = bool(enabled)
        if not enabled:
            self.state.clear_guides()
        if self.settings is not None:
            self.settings.smart_align = self.state.snap_enabled

    def reset_view(self):
        self.state.reset_view()
        self.refresh_frame()

    def rebuild_preview(self):
        """Recreate camera and surface (e.g. after the canvas was replaced)."""
        self.pipeline.rebuild()
        self.pipeline.bind_root(self.tree.root)
        self.state.clear_guides()
        self.refresh_frame()

    def set_tree(self, tree):
        """Point the viewport at another layout canvas.

        Ends any drag or resize and drops the selection. When open, the new
        root is bound to the preview camera and its edits are followed.

        Returns:
            True if the target changed
        """
        if tree is None or tree is self.tree:
            return False
        self.drag_controller.end_drag()
        self.handle_controller.end_resize()
        self.handle_controller.clear()
        if self.is_open:
            self.tree.remove_structure_listener(self._on_structure_changed)

        self.tree = tree
        self.snap_engine.tree = tree
        self.snap_engine.invalidate()
        self.hit_tester.tree = tree
        self.drag_controller.tree = tree
        self.state.selected_node = None
        self.state.clear_guides()
        self.hit_tester.reset()

        if self.is_open:
            tree.add_structure_listener(self._on_structure_changed)
            self.pipeline.bind_root(tree.root)
        self.refresh_frame()
        logger.info("Viewport now targets canvas %r", tree.root.name)
        return True

    # ========================================
    # Tree edits
    # ========================================

    def instantiate_template(self, template, parent=None):
        """Add a template instance and restyle it with the active theme."""
        node = self.tree.instantiate_template(template, parent)
        if self.theme_manager is not None:
            self.theme_manager.reapply_theme(node)
        return node

    def _on_structure_changed(self, parent):
        self.snap_engine.invalidate(parent)
        target = self.drag_controller.target
        if self.drag_controller.is_dragging and not self.tree.contains(target):
            self.drag_controller.end_drag()
        target = self.handle_controller.target
        if self.handle_controller.is_resizing and not self.tree.contains(target):
            self.handle_controller.end_resize()
        selected = self.state.selected_node
        if selected is not None and not self.tree.contains(selected):
            logger.debug("Selected node left the layout; clearing selection")
            self.state.selected_node = None
            self.hit_tester.reset()
            self.handle_controller.clear()

    # ========================================
    # Frame output
    # ========================================

    def render(self):
        """Rasterize the layout. Returns the surface image or None."""
        if not self.is_open:
            return None
        return self.pipeline.render(self.tree.root)

    def compute_overlay(self) -> OverlayGeometry:
        """Overlay geometry for the current state."""
        overlay = OverlayGeometry()
        overlay.preview_rect = self.refresh_frame()
        if overlay.preview_rect is None:
            return overlay

        overlay.grid_lines = self._grid_lines(overlay.preview_rect)

        node = self.state.selected_node
        if node is not None and self.tree.contains(node):
            overlay.selection_rect = self.mapper.world_rect_to_viewport(node.world_corners())
            overlay.selection_outline = self.mapper.world_polygon_to_viewport(node.world_corners())
            overlay.handles = list(self.handle_controller.handles)
            parent = node.parent
            if parent is not None and parent is not self.tree.root:
                for other in [parent] + [child for child in parent.children if child is not node]:
                    if not other.active or other.is_degenerate():
                        continue
                    overlay.hierarchy_outlines.append(
                        self.mapper.world_polygon_to_viewport(other.world_corners()))

        overlay.guide_lines = self._guide_lines(overlay.preview_rect)
        return overlay

    def _guide_lines(self, preview_rect):
        lines = []
        camera = self.mapper.camera
        for guide in self.state.guides:
            if not guide.visible:
                continue
            if guide.axis is SnapAxis.X:
                point = self.mapper.world_to_viewport(Vec2(guide.position, camera.position.y))
                lines.append(GuideLine(guide.axis, Vec2(point.x, preview_rect.y_min),
                                       Vec2(point.x, preview_rect.y_max)))
            else:
                point = self.mapper.world_to_viewport(Vec2(camera.position.x, guide.position))
                lines.append(GuideLine(guide.axis, Vec2(preview_rect.x_min, point.y),
                                       Vec2(preview_rect.x_max, point.y)))
        return lines

    def _grid_lines(self, preview_rect):
        grid_size = self.state.grid_size
        if grid_size <= 0:
            return []
        step = grid_size * preview_rect.width / self.pipeline.resolution[0]
        if step < MIN_GRID_STEP_PX:
            return []
        lines = []
        x = preview_rect.x_min
        while x <= preview_rect.x_max:
            lines.append((Vec2(x, preview_rect.y_min), Vec2(x, preview_rect.y_max)))
            x += step
        # Grid rows start at the bottom edge (layout Y is up)
        y = preview_rect.y_max
        while y >= preview_rect.y_min:
            lines.append((Vec2(preview_rect.x_min, y), Vec2(preview_rect.x_max, y)))
            y -= step
        return lines
