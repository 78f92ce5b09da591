"""Selection handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- Where it sits around a projected selection rect (workspace pixels)
- How to test if a pointer position hits it
- How a layout-space delta resizes the node it belongs to
- How to draw itself and which cursor it shows

HandleController owns the nine handles of the current selection and the
resize session started from one of them.
"""

import logging
import weakref
from abc import ABC, abstractmethod
from enum import Enum

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QPen, QBrush, QColor

from models.transform import Vec2, Rect
from constants import (
    HANDLE_SIZE, ROTATE_HANDLE_OFFSET,
    HANDLE_COLOR, ROTATE_HANDLE_COLOR, HANDLE_BORDER_COLOR,
)
from .drag_context import DragContext

logger = logging.getLogger(__name__)


class HandleType(Enum):
    TOP_LEFT = 'tl'
    TOP = 't'
    TOP_RIGHT = 'tr'
    RIGHT = 'r'
    BOTTOM_RIGHT = 'br'
    BOTTOM = 'b'
    BOTTOM_LEFT = 'bl'
    LEFT = 'l'
    ROTATE = 'rotate'


# Normalized side per handle: -1 min edge, +1 max edge, 0 unaffected.
# Y is layout space (up), so "top" is +1.
_HANDLE_SIDES = {
    HandleType.TOP_LEFT: (-1, 1),
    HandleType.TOP: (0, 1),
    HandleType.TOP_RIGHT: (1, 1),
    HandleType.RIGHT: (1, 0),
    HandleType.BOTTOM_RIGHT: (1, -1),
    HandleType.BOTTOM: (0, -1),
    HandleType.BOTTOM_LEFT: (-1, -1),
    HandleType.LEFT: (-1, 0),
    HandleType.ROTATE: (0, 0),
}

# Construction (and hit-test priority) order
HANDLE_ORDER = [
    HandleType.TOP_LEFT, HandleType.TOP, HandleType.TOP_RIGHT,
    HandleType.RIGHT, HandleType.BOTTOM_RIGHT, HandleType.BOTTOM,
    HandleType.BOTTOM_LEFT, HandleType.LEFT, HandleType.ROTATE,
]


def _resize_axis(size, position, delta, side, pivot, current, scale):
    """Resize one axis keeping the opposite edge fixed.

    Args:
        size: size_delta component (node-local units)
        position: anchored_position component (parent units)
        delta: pointer delta along the axis (parent units)
        side: +1 max edge, -1 min edge, 0 axis untouched
        pivot: pivot component
        current: current rect size along the axis (node-local units)
        scale: node scale

    Returns:
        (size, position)
    """
    if side == 0 or scale == 0:
        return size, position
    change = side * delta / scale
    if current + change < 0:
        change = -current
    size += change
    shift = pivot if side > 0 else -(1.0 - pivot)
    position += shift * change * scale
    return size, position


class Handle(ABC):
    """Abstract base class for selection handles."""

    def __init__(self, handle_type, size=HANDLE_SIZE):
        self.type = handle_type
        self.size = size
        self.rect = None

    @abstractmethod
    def anchor_point(self, selection_rect: Rect) -> Vec2:
        """Handle center for a selection rect (workspace pixels, Y down)."""
        pass

    def place(self, selection_rect: Rect):
        """Center a size x size square on this handle's anchor point."""
        center = self.anchor_point(selection_rect)
        half = self.size / 2.0
        self.rect = Rect(center.x - half, center.y - half, self.size, self.size)
        return self

    def hit_test(self, x, y) -> bool:
        if self.rect is None:
            return False
        return self.rect.contains(Vec2(x, y))

    def apply(self, size_delta, anchored_position, delta, pivot, current_size, scale=1.0):
        """Resize from a layout-space delta.

        Returns:
            (size_delta, anchored_position) as Vec2
        """
        side_x, side_y = _HANDLE_SIDES[self.type]
        width, pos_x = _resize_axis(size_delta.x, anchored_position.x, delta.x,
                                    side_x, pivot.x, current_size.x, scale)
        height, pos_y = _resize_axis(size_delta.y, anchored_position.y, delta.y,
                                     side_y, pivot.y, current_size.y, scale)
        return Vec2(width, height), Vec2(pos_x, pos_y)

    def draw(self, painter):
        if self.rect is None:
            return
        painter.setPen(QPen(QColor(*HANDLE_BORDER_COLOR), 1))
        painter.setBrush(QBrush(QColor(*HANDLE_COLOR)))
        painter.drawRect(QRectF(self.rect.x, self.rect.y, self.rect.width, self.rect.height))

    @abstractmethod
    def get_cursor(self):
        """Qt cursor shape shown while hovering this handle."""
        pass


class CornerHandle(Handle):
    """Corner handle: resizes both axes."""

    def anchor_point(self, selection_rect):
        side_x, side_y = _HANDLE_SIDES[self.type]
        x = selection_rect.x_max if side_x > 0 else selection_rect.x_min
        # Workspace Y grows downward: layout top is the rect's minimum Y
        y = selection_rect.y_min if side_y > 0 else selection_rect.y_max
        return Vec2(x, y)

    def get_cursor(self):
        if self.type in (HandleType.TOP_LEFT, HandleType.BOTTOM_RIGHT):
            return Qt.SizeFDiagCursor
        return Qt.SizeBDiagCursor


class EdgeHandle(Handle):
    """Edge midpoint handle: resizes a single axis."""

    def anchor_point(self, selection_rect):
        center = selection_rect.center
        if self.type is HandleType.TOP:
            return Vec2(center.x, selection_rect.y_min)
        if self.type is HandleType.BOTTOM:
            return Vec2(center.x, selection_rect.y_max)
        if self.type is HandleType.RIGHT:
            return Vec2(selection_rect.x_max, center.y)
        return Vec2(selection_rect.x_min, center.y)

    def get_cursor(self):
        if self.type in (HandleType.LEFT, HandleType.RIGHT):
            return Qt.SizeHorCursor
        return Qt.SizeVerCursor


class RotationHandle(Handle):
    """Rotate handle above the top edge. Reserved: no geometric effect."""

    def __init__(self, offset=ROTATE_HANDLE_OFFSET, size=HANDLE_SIZE):
        super().__init__(HandleType.ROTATE, size)
        self.offset = offset

    def anchor_point(self, selection_rect):
        return Vec2(selection_rect.center.x, selection_rect.y_min - self.offset)

    def apply(self, size_delta, anchored_position, delta, pivot, current_size, scale=1.0):
        return size_delta.copy(), anchored_position.copy()

    def draw(self, painter):
        if self.rect is None:
            return
        painter.setPen(QPen(QColor(*HANDLE_BORDER_COLOR), 1))
        painter.setBrush(QBrush(QColor(*ROTATE_HANDLE_COLOR)))
        painter.drawEllipse(QRectF(self.rect.x, self.rect.y, self.rect.width, self.rect.height))

    def get_cursor(self):
        return Qt.CrossCursor


def create_handle(handle_type, size=HANDLE_SIZE):
    if handle_type is HandleType.ROTATE:
        return RotationHandle(size=size)
    side_x, side_y = _HANDLE_SIDES[handle_type]
    if side_x and side_y:
        return CornerHandle(handle_type, size)
    return EdgeHandle(handle_type, size)


class HandleController:
    """Handles of the current selection plus the resize session.

    Handles are rebuilt every frame from the projected selection rect;
    hit-testing walks them in construction order and the first match wins.
    """

    def __init__(self, mapper, handle_size=HANDLE_SIZE):
        self.mapper = mapper
        self.handle_size = handle_size
        self._handles = [create_handle(handle_type, handle_size) for handle_type in HANDLE_ORDER]
        self.handles = []
        self.context = None

    # ========================================
    # Placement / hit testing
    # ========================================

    def handles_for(self, selection_rect):
        """Place all nine handles around ``selection_rect`` (None clears them)."""
        if selection_rect is None:
            self.handles = []
            return []
        self.handles = [handle.place(selection_rect) for handle in self._handles]
        return list(self.handles)

    def handle_at(self, pos):
        for handle in self.handles:
            if handle.hit_test(pos.x, pos.y):
                return handle
        return None

    def hit_handle(self, pos):
        """HandleType under ``pos`` or None."""
        handle = self.handle_at(pos)
        return handle.type if handle is not None else None

    def clear(self):
        self.handles = []

    # ========================================
    # Resize session
    # ========================================

    @property
    def is_resizing(self):
        return self.context is not None

    @property
    def active_handle(self):
        return self.context.handle_type if self.context is not None else None

    @property
    def target(self):
        return self.context.node if self.context is not None else None

    def begin_resize(self, handle_type, node, pointer_pos):
        if node is None:
            return False
        self.context = DragContext(
            operation='resize',
            node_ref=weakref.ref(node),
            handle_type=handle_type,
            last_pointer=Vec2.of(pointer_pos),
            start_position=node.anchored_position,
            start_size=node.size_delta,
        )
        logger.debug("Begin resize of %r with %s handle", node, handle_type.name)
        return True

    def update_resize(self, pointer_pos):
        """Apply the pointer motion since the last sample.

        Returns:
            True if the node changed
        """
        context = self.context
        if context is None:
            return False
        node = context.node
        if node is None:
            self.end_resize()
            return False
        pointer_pos = Vec2.of(pointer_pos)
        pixel_delta = pointer_pos - context.last_pointer
        context.last_pointer = pointer_pos
        if not self.mapper.contains(pointer_pos):
            return False
        if context.handle_type is HandleType.ROTATE:
            return False
        delta = self.mapper.pixel_delta_to_layout(pixel_delta, node)
        if delta is None:
            return False
        context.frame_motion = delta
        handle = self._handles[HANDLE_ORDER.index(context.handle_type)]
        size_delta, anchored_position = handle.apply(
            node.size_delta, node.anchored_position, delta,
            node.pivot, node.rect_size(), node.scale,
        )
        node.size_delta = size_delta
        node.anchored_position = anchored_position
        return True

    def end_resize(self):
        if self.context is not None:
            logger.debug("End resize")
        self.context = None
