"""
SnapUI View - Layout Node Model

A UiNode is one rectangle of the retained layout hierarchy. Its geometry is
never stored in world space: every derived rectangle is recomputed from the
node's own anchor state and the anchor chain of its ancestors.

Coordinate spaces:
- Local: the node's own space, origin at the pivot, Y-up
- Parent: the parent's local space (where anchored_position lives)
- World: the root's parent space, the space the virtual camera looks at

Ownership is top-down: a parent owns its children list, a child only keeps a
weak reference back to its parent.
"""

import copy
import logging
import uuid as uuid_module
import weakref
from typing import List, Optional

from models.transform import Vec2, Rect
from constants import UI_LAYER, DEGENERATE_EPSILON


class UiNode:
    """A node of the layout tree with anchor-based geometry.

    Geometric fields (anchor_min, anchor_max, anchored_position, size_delta,
    pivot, scale) are exposed as properties; writing any of them bumps
    ``revision`` and sets ``dirty`` so the render pipeline and any
    revision-keyed memo see the change.
    """

    _logger = logging.getLogger('UiNode')

    def __init__(self, name: str = "", anchor_min=(0.5, 0.5), anchor_max=(0.5, 0.5),
                 anchored_position=(0.0, 0.0), size_delta=(100.0, 100.0),
                 pivot=(0.5, 0.5), scale: float = 1.0, color=None,
                 layer: str = UI_LAYER, active: bool = True, node_id: Optional[str] = None):
        self.id = node_id or str(uuid_module.uuid4())
        self.name = name or "Node"
        self._parent_ref = None
        self.children: List['UiNode'] = []
        self.components = []

        self._anchor_min = Vec2.of(anchor_min)
        self._anchor_max = Vec2.of(anchor_max)
        self._anchored_position = Vec2.of(anchored_position)
        self._size_delta = Vec2.of(size_delta)
        self._pivot = Vec2.of(pivot)
        self._scale = float(scale)

        # Render attributes (filled by themed components or set directly)
        self.color = color
        self.text_color = None
        self.font = None
        self.layer = layer
        self.active = active

        self.revision = 0
        self.dirty = True

    def __repr__(self):
        return f"UiNode({self.name!r}, id={self.id[:8]})"

    # ========================================
    # Dirty tracking
    # ========================================

    def mark_dirty(self):
        """Record a geometric/visual mutation."""
        self.revision += 1
        self.dirty = True

    def revision_chain(self):
        """Revisions of this node and every ancestor, root last.

        Anything derived from world geometry is valid only while this tuple
        is unchanged.
        """
        chain = []
        node = self
        while node is not None:
            chain.append(node.revision)
            node = node.parent
        return tuple(chain)

    # ========================================
    # Geometric properties
    # ========================================

    @property
    def anchor_min(self) -> Vec2:
        return self._anchor_min.copy()

    @anchor_min.setter
    def anchor_min(self, value):
        self._anchor_min = Vec2.of(value)
        self.mark_dirty()

    @property
    def anchor_max(self) -> Vec2:
        return self._anchor_max.copy()

    @anchor_max.setter
    def anchor_max(self, value):
        self._anchor_max = Vec2.of(value)
        self.mark_dirty()

    @property
    def anchored_position(self) -> Vec2:
        return self._anchored_position.copy()

    @anchored_position.setter
    def anchored_position(self, value):
        self._anchored_position = Vec2.of(value)
        self.mark_dirty()

    @property
    def size_delta(self) -> Vec2:
        return self._size_delta.copy()

    @size_delta.setter
    def size_delta(self, value):
        self._size_delta = Vec2.of(value)
        self.mark_dirty()

    @property
    def pivot(self) -> Vec2:
        return self._pivot.copy()

    @pivot.setter
    def pivot(self, value):
        self._pivot = Vec2.of(value)
        self.mark_dirty()

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value):
        self._scale = float(value)
        self.mark_dirty()

    # ========================================
    # Hierarchy
    # ========================================

    @property
    def parent(self) -> Optional['UiNode']:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def add_child(self, child: 'UiNode', index: Optional[int] = None):
        """Link a child into this node's children list.

        Low-level linking only. Nodes already inside a LayoutTree should be
        added through the tree so structure listeners are notified.

        Raises:
            ValueError: if the child is this node or one of its ancestors
        """
        if child is self or self.is_descendant_of(child):
            raise ValueError(f"Cannot parent {child!r} under its own descendant {self!r}")
        old_parent = child.parent
        if old_parent is not None:
            old_parent.remove_child(child)
        if index is None or index >= len(self.children):
            self.children.append(child)
        else:
            self.children.insert(max(0, index), child)
        child._parent_ref = weakref.ref(self)
        child.mark_dirty()
        return child

    def remove_child(self, child: 'UiNode'):
        """Unlink a child. No-op if it is not a child of this node."""
        if child in self.children:
            self.children.remove(child)
            child._parent_ref = None
            child.mark_dirty()

    def is_descendant_of(self, other: 'UiNode') -> bool:
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False

    def root(self) -> 'UiNode':
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def iter_subtree(self):
        """Depth-first, parent before children, siblings in child-list order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def add_component(self, component):
        self.components.append(component)
        component.attach(self)
        return component

    # ========================================
    # Geometry (derived on demand)
    # ========================================

    def rect_size(self) -> Vec2:
        """Width/height of the node rectangle in its own local units."""
        parent = self.parent
        if parent is None:
            return self._size_delta.copy()
        parent_size = parent.rect_size()
        return Vec2(
            parent_size.x * (self._anchor_max.x - self._anchor_min.x) + self._size_delta.x,
            parent_size.y * (self._anchor_max.y - self._anchor_min.y) + self._size_delta.y,
        )

    def local_rect(self) -> Rect:
        """Node rectangle in local space (origin at the pivot)."""
        size = self.rect_size()
        return Rect(-self._pivot.x * size.x, -self._pivot.y * size.y, size.x, size.y)

    def local_position(self, anchored_position=None) -> Vec2:
        """Pivot position in the parent's local space.

        Args:
            anchored_position: Optional override used to evaluate a proposed
                position without mutating the node.
        """
        offset = self._anchored_position if anchored_position is None else Vec2.of(anchored_position)
        parent = self.parent
        if parent is None:
            return offset.copy()
        parent_rect = parent.local_rect()
        anchor_x = parent_rect.x + parent_rect.width * self._anchor_min.x
        anchor_y = parent_rect.y + parent_rect.height * self._anchor_min.y
        span_x = parent_rect.width * (self._anchor_max.x - self._anchor_min.x)
        span_y = parent_rect.height * (self._anchor_max.y - self._anchor_min.y)
        return Vec2(
            anchor_x + span_x * self._pivot.x + offset.x,
            anchor_y + span_y * self._pivot.y + offset.y,
        )

    def rect_in_parent(self, anchored_position=None) -> Rect:
        """Node rectangle expressed in the parent's local space."""
        rect = self.local_rect()
        origin = self.local_position(anchored_position)
        return Rect(
            origin.x + rect.x * self._scale,
            origin.y + rect.y * self._scale,
            rect.width * self._scale,
            rect.height * self._scale,
        )

    def lossy_scale(self) -> float:
        """Product of this node's scale and all its ancestors' scales."""
        scale = 1.0
        node = self
        while node is not None:
            scale *= node.scale
            node = node.parent
        return scale

    def transform_point(self, point) -> Vec2:
        """Local point -> world point."""
        origin = self.local_position()
        parent_point = Vec2(point.x * self._scale + origin.x, point.y * self._scale + origin.y)
        parent = self.parent
        if parent is None:
            return parent_point
        return parent.transform_point(parent_point)

    def inverse_transform_point(self, point) -> Vec2:
        """World point -> local point.

        Raises:
            ZeroDivisionError: if this node or an ancestor has zero scale
                (callers exclude degenerate nodes first)
        """
        parent = self.parent
        parent_point = point if parent is None else parent.inverse_transform_point(point)
        origin = self.local_position()
        return Vec2((parent_point.x - origin.x) / self._scale,
                    (parent_point.y - origin.y) / self._scale)

    def world_corners(self) -> List[Vec2]:
        """Bottom-left, top-left, top-right, bottom-right in world space."""
        return [self.transform_point(corner) for corner in self.local_rect().corners()]

    def bounds_relative_to(self, ancestor: 'UiNode') -> Rect:
        """Bounding rect of this node's corners in ``ancestor``'s local space."""
        return Rect.from_points(
            ancestor.inverse_transform_point(corner) for corner in self.world_corners()
        )

    def is_degenerate(self, epsilon: float = DEGENERATE_EPSILON) -> bool:
        """True if the node has (near) zero area in world space."""
        size = self.rect_size()
        scale = abs(self.lossy_scale())
        return abs(size.x) * scale <= epsilon or abs(size.y) * scale <= epsilon

    # ========================================
    # Copying
    # ========================================

    def clone(self) -> 'UiNode':
        """Deep copy of this subtree with fresh ids and no parent."""
        twin = UiNode(
            name=self.name,
            anchor_min=self._anchor_min,
            anchor_max=self._anchor_max,
            anchored_position=self._anchored_position,
            size_delta=self._size_delta,
            pivot=self._pivot,
            scale=self._scale,
            color=copy.copy(self.color),
            layer=self.layer,
            active=self.active,
        )
        twin.text_color = copy.copy(self.text_color)
        twin.font = self.font
        for component in self.components:
            twin.add_component(component.clone())
        for child in self.children:
            twin.add_child(child.clone())
        return twin
