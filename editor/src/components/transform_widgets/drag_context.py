"""Drag context dataclass for pointer interactions.

Unified drag state shared by node dragging and handle resizing.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from models.transform import Vec2


@dataclass
class DragContext:
    """State of one pointer drag session.

    The node is held weakly so a node deleted mid-drag simply ends the
    session instead of being kept alive by it.
    """
    operation: str  # 'move' or 'resize'
    node_ref: Any = None
    handle_type: Any = None
    last_pointer: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    start_position: Optional[Vec2] = None
    start_size: Optional[Vec2] = None
    # Motion swallowed by grid rounding, carried into the next move sample
    grid_residual: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    frame_motion: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))
    metadata: dict = field(default_factory=dict)

    @property
    def node(self):
        return self.node_ref() if self.node_ref is not None else None
