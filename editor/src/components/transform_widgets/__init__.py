"""
SnapUI View - Selection Handle Components

- handles.py: ABC-based handle classes and the HandleController
- drag_context.py: Unified drag state management
"""

from .handles import (
    Handle, HandleType, CornerHandle, EdgeHandle, RotationHandle,
    HandleController, HANDLE_ORDER, create_handle,
)
from .drag_context import DragContext

__all__ = [
    'Handle', 'HandleType', 'CornerHandle', 'EdgeHandle', 'RotationHandle',
    'HandleController', 'HANDLE_ORDER', 'create_handle',
    'DragContext',
]
