"""
Drag Controller

Moves the selected node with the pointer. Each sample:

1. pixel delta since the previous sample -> layout units
2. proposed anchored_position = current + delta
3. grid quantization (grid_size > 0)
4. alignment snapping against siblings (snap_enabled)
5. assign, publish guides to the viewport state
"""

import logging
import math
import weakref

from models.transform import Vec2
from components.transform_widgets.drag_context import DragContext

logger = logging.getLogger(__name__)


def quantize_to_grid(value, grid_size):
    """Round to the nearest multiple of ``grid_size``, halves away from zero.

    grid_size <= 0 returns the value unchanged.
    """
    if grid_size <= 0:
        return value
    steps = math.floor(abs(value) / grid_size + 0.5)
    return math.copysign(steps, value) * grid_size


class DragController:
    """Pointer drag of a single node."""

    def __init__(self, mapper, state, snap_engine, tree=None):
        self.mapper = mapper
        self.state = state
        self.snap_engine = snap_engine
        self.tree = tree
        self.context = None

    @property
    def is_dragging(self):
        return self.context is not None

    @property
    def target(self):
        return self.context.node if self.context is not None else None

    def begin_drag(self, node, pointer_pos):
        if node is None:
            return False
        self.context = DragContext(
            operation='move',
            node_ref=weakref.ref(node),
            last_pointer=Vec2.of(pointer_pos),
            start_position=node.anchored_position,
            grid_residual=Vec2(0.0, 0.0),
        )
        logger.debug("Begin drag of %r", node)
        return True

    def update_drag(self, pointer_pos):
        """Move the dragged node toward ``pointer_pos``.

        Returns:
            The node's new anchored_position, or None when nothing moved
        """
        context = self.context
        if context is None:
            return None
        node = context.node
        if node is None or (self.tree is not None and not self.tree.contains(node)):
            logger.debug("Drag target left the layout; ending drag")
            self.end_drag()
            return None

        pointer_pos = Vec2.of(pointer_pos)
        pixel_delta = pointer_pos - context.last_pointer
        context.last_pointer = pointer_pos
        if not self.mapper.contains(pointer_pos):
            return None

        delta = self.mapper.pixel_delta_to_layout(pixel_delta, node)
        if delta is None:
            return None
        context.frame_motion = delta

        raw = node.anchored_position + context.grid_residual + delta
        proposed = raw.copy()
        if self.state.grid_size > 0:
            proposed = Vec2(quantize_to_grid(raw.x, self.state.grid_size),
                            quantize_to_grid(raw.y, self.state.grid_size))
        # sub-grid motion lost to rounding, replayed on the next sample
        context.grid_residual = raw - proposed

        guides = []
        if self.state.snap_enabled and self.snap_engine is not None:
            siblings = self.snap_engine.siblings_of(node)
            proposed, guides = self.snap_engine.snap(
                proposed, node, siblings, self.state.snap_threshold, delta)

        node.anchored_position = proposed
        self.state.guides = guides
        return proposed

    def end_drag(self):
        if self.context is not None:
            logger.debug("End drag")
        self.context = None
        self.state.clear_guides()
