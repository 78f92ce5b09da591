"""
Alignment Snap Engine

Soft-snaps a moving node's edges and center onto the edges and centers of
its siblings, one axis at a time:

    X: left / right / center-x
    Y: bottom / top / center-y

For every sibling five pairs are tested per axis (min-min, max-max,
center-center, min-max, max-min). The closest pair within the threshold
wins and pulls the node by ``delta * pull_strength``. Pull strength is 1
inside the capture zone (capture_ratio * threshold) and falls linearly to 0
at the threshold. Fast frames (motion above detach_ratio * threshold) skip
snapping entirely so the node never fights the pointer.

All bounds live in the moving node's parent space.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from models.transform import Vec2, Rect
from constants import DEFAULT_SNAP_CAPTURE_RATIO, SNAP_DETACH_RATIO

logger = logging.getLogger(__name__)


class SnapAxis(Enum):
    X = 'x'
    Y = 'y'


@dataclass
class SnapGuide:
    """One visible alignment line.

    position is in world space (what the overlay projects), local_position
    is the same coordinate in the parent's layout space.
    """
    axis: SnapAxis
    position: float
    visible: bool = True
    local_position: float = 0.0


@dataclass
class AxisMatch:
    distance: float
    delta: float       # other - own
    own: float         # own coordinate that matched


def clamp01(value):
    return max(0.0, min(1.0, value))


def pull_strength(distance, threshold, capture_ratio=0.0):
    """Graduated snap factor: 1 inside the capture zone, 0 at the threshold."""
    if threshold <= 0 or distance > threshold:
        return 0.0
    band = threshold * (1.0 - capture_ratio)
    if band <= 0:
        return 1.0
    return clamp01((threshold - distance) / band)


def _axis_extents(rect: Rect, axis: SnapAxis):
    if axis is SnapAxis.X:
        return rect.x_min, rect.x_max, rect.center.x
    return rect.y_min, rect.y_max, rect.center.y


def best_axis_match(own: Rect, others: List[Rect], axis: SnapAxis, threshold: float) -> Optional[AxisMatch]:
    """Closest alignment pair on one axis within ``threshold`` (first wins ties)."""
    own_min, own_max, own_center = _axis_extents(own, axis)
    best = None
    for other in others:
        other_min, other_max, other_center = _axis_extents(other, axis)
        pairs = (
            (own_min, other_min),
            (own_max, other_max),
            (own_center, other_center),
            (own_min, other_max),
            (own_max, other_min),
        )
        for own_value, other_value in pairs:
            distance = abs(other_value - own_value)
            if distance > threshold:
                continue
            if best is None or distance < best.distance:
                best = AxisMatch(distance, other_value - own_value, own_value)
    return best


class AlignmentSnapEngine:
    """Sibling alignment snapping with a structure-invalidated sibling cache."""

    def __init__(self, tree=None, capture_ratio: float = DEFAULT_SNAP_CAPTURE_RATIO,
                 detach_ratio: float = SNAP_DETACH_RATIO):
        self.tree = tree
        self.capture_ratio = capture_ratio
        self.detach_ratio = detach_ratio
        self._sibling_cache: Dict[str, list] = {}
        self._bounds_cache: Dict[str, Tuple[tuple, Rect]] = {}
        self._cached_structure_version = None

    # ========================================
    # Caches
    # ========================================

    def invalidate(self, parent=None):
        """Drop cached sibling lists (all, or just ``parent``'s)."""
        if parent is None:
            self._sibling_cache.clear()
            self._bounds_cache.clear()
        else:
            self._sibling_cache.pop(parent.id, None)

    def _check_structure_version(self):
        if self.tree is None:
            return
        if self._cached_structure_version != self.tree.structure_version:
            self.invalidate()
            self._cached_structure_version = self.tree.structure_version

    def siblings_of(self, node) -> list:
        """Active siblings of ``node`` (same parent), cached per parent."""
        parent = node.parent
        if parent is None:
            return []
        self._check_structure_version()
        children = self._sibling_cache.get(parent.id)
        if children is None:
            children = list(parent.children)
            self._sibling_cache[parent.id] = children
        # active toggles do not bump structure_version
        return [child for child in children if child is not node and child.active]

    def sibling_bounds(self, sibling) -> Rect:
        """Sibling rect in its parent's space, memoized by revision chain."""
        key = sibling.revision_chain()
        cached = self._bounds_cache.get(sibling.id)
        if cached is not None and cached[0] == key:
            return cached[1]
        bounds = sibling.rect_in_parent()
        self._bounds_cache[sibling.id] = (key, bounds)
        return bounds

    # ========================================
    # Snapping
    # ========================================

    def snap(self, proposed_pos, moving_node, siblings, threshold, frame_motion=None):
        """Adjust a proposed anchored position toward sibling alignment.

        Args:
            proposed_pos: Proposed anchored_position (Vec2 or pair)
            moving_node: Node being dragged
            siblings: Candidate nodes sharing the moving node's parent
            threshold: Maximum distance (parent layout units) that engages
            frame_motion: This step's motion in layout units

        Returns:
            (final_pos, guides): Vec2 and list of visible SnapGuides
        """
        proposed = Vec2.of(proposed_pos)
        parent = moving_node.parent
        if parent is None or threshold is None or threshold <= 0:
            return proposed, []

        motion = Vec2.of(frame_motion) if frame_motion is not None else Vec2(0.0, 0.0)
        if motion.length() > threshold * self.detach_ratio:
            logger.debug("Snap suppressed: frame motion %.2f > %.2f",
                         motion.length(), threshold * self.detach_ratio)
            return proposed, []

        own = moving_node.rect_in_parent(proposed)
        if own.is_degenerate():
            return proposed, []

        others = []
        for sibling in siblings:
            if sibling is moving_node or sibling.parent is not parent or not sibling.active:
                continue
            bounds = self.sibling_bounds(sibling)
            if bounds is None or bounds.is_degenerate():
                continue
            others.append(bounds)
        if not others:
            return proposed, []

        result = proposed.copy()
        guides = []
        for axis in (SnapAxis.X, SnapAxis.Y):
            match = best_axis_match(own, others, axis, threshold)
            if match is None:
                continue
            applied = match.delta * pull_strength(match.distance, threshold, self.capture_ratio)
            aligned = match.own + applied
            if axis is SnapAxis.X:
                result.x += applied
                world = parent.transform_point(Vec2(aligned, 0.0)).x
            else:
                result.y += applied
                world = parent.transform_point(Vec2(0.0, aligned)).y
            guides.append(SnapGuide(axis, world, True, aligned))
        return result, guides
