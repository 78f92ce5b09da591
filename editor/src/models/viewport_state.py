"""Per-viewport editor state exposed to the host shell."""
import weakref
from dataclasses import dataclass, field
from typing import List, Optional

from models.transform import Vec2
from constants import (
    MIN_ZOOM, MAX_ZOOM, DEFAULT_ZOOM,
    DEFAULT_SNAP_THRESHOLD, DEFAULT_SNAP_ENABLED,
)


def clamp_zoom(value):
    return max(MIN_ZOOM, min(MAX_ZOOM, value))


@dataclass
class ViewportState:
    """Zoom/pan, selection, grid and snapping state of one viewport.

    The selection is held weakly: deleting a node from the layout never
    leaves the viewport pointing at it.
    """
    _zoom: float = field(default=DEFAULT_ZOOM, init=False, repr=False)
    pan_offset: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    grid_size: int = 0
    snap_enabled: bool = DEFAULT_SNAP_ENABLED
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    guides: List = field(default_factory=list)
    _selected_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value):
        self._zoom = clamp_zoom(float(value))

    @property
    def selected_node(self):
        if self._selected_ref is None:
            return None
        return self._selected_ref()

    @selected_node.setter
    def selected_node(self, node):
        self._selected_ref = weakref.ref(node) if node is not None else None

    def clear_guides(self):
        self.guides = []

    def reset_view(self):
        """Back to 100% zoom, centered."""
        self._zoom = DEFAULT_ZOOM
        self.pan_offset = Vec2(0.0, 0.0)
