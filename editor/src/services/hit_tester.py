"""
Hit Tester / Selection

Resolves a workspace pointer position to the topmost layout node under it
and updates the viewport selection.

Rules:
- Pointer outside the preview, or no camera/surface: rejected, no change
- Second click within DOUBLE_CLICK_INTERVAL on the still-selected node:
  selection promoted to its parent (unless the parent is the layout root),
  without re-running the hit test
- Otherwise all active, non-degenerate, non-root nodes are tested depth-first
  and the LAST hit in traversal order wins (children paint over parents,
  later siblings over earlier ones)
"""

import logging
import time
import weakref

from models.transform import Vec2
from constants import DOUBLE_CLICK_INTERVAL

logger = logging.getLogger(__name__)


class HitTester:
    """Pointer -> node selection for one viewport."""

    def __init__(self, mapper, state, tree, clock=time.monotonic,
                 click_interval=DOUBLE_CLICK_INTERVAL):
        self.mapper = mapper
        self.state = state
        self.tree = tree
        self.clock = clock
        self.click_interval = click_interval
        self.promoted = False
        self._last_click_time = None
        self._last_clicked_ref = None

    @property
    def last_clicked(self):
        return self._last_clicked_ref() if self._last_clicked_ref is not None else None

    def reset(self):
        """Forget the double-click history."""
        self._last_click_time = None
        self._last_clicked_ref = None
        self.promoted = False

    def node_at_world(self, world_point):
        """Topmost active node containing ``world_point`` (root excluded)."""
        hit = None
        for node in self._iter_candidates(self.tree.root):
            local = node.inverse_transform_point(world_point)
            if node.local_rect().contains(local):
                hit = node
        return hit

    def _iter_candidates(self, root):
        stack = list(reversed(root.children))
        while stack:
            node = stack.pop()
            if not node.active:
                continue
            stack.extend(reversed(node.children))
            if node.is_degenerate():
                continue
            yield node

    def select_at(self, pointer_pos):
        """Select the node under ``pointer_pos``.

        Returns:
            The selected node, or None (miss or rejected)
        """
        self.promoted = False
        pointer_pos = Vec2.of(pointer_pos)
        pixel = self.mapper.viewport_to_surface_pixel(pointer_pos)
        if pixel is None:
            logger.debug("Selection rejected at %s: outside preview or no surface", pointer_pos)
            return None

        now = self.clock()
        selected = self.state.selected_node
        last = self.last_clicked
        is_double_click = (
            self._last_click_time is not None
            and now - self._last_click_time < self.click_interval
            and selected is not None
            and last is selected
        )
        self._last_click_time = now

        if is_double_click:
            parent = selected.parent
            if parent is not None and parent is not self.tree.root:
                self.state.selected_node = parent
                self.state.clear_guides()
                self.promoted = True
                self._last_clicked_ref = weakref.ref(parent)
                logger.debug("Selection promoted from %r to %r", selected, parent)
                return parent
            return selected

        world = self.mapper.surface_pixel_to_world(pixel)
        hit = self.node_at_world(world) if world is not None else None
        self.state.selected_node = hit
        self.state.clear_guides()
        self._last_clicked_ref = weakref.ref(hit) if hit is not None else None
        logger.debug("Selected %r", hit)
        return hit
