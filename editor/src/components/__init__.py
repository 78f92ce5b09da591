"""UI components for SnapUI View

- transform_widgets: selection handles and drag state
- viewport_widget: Qt host that paints the preview and overlay
- viewport_toolbar: preset/grid/smart-align controls
"""

from .viewport_toolbar import ViewportToolbar
from .viewport_widget import ViewportWidget

__all__ = [
    'ViewportToolbar',
    'ViewportWidget',
]
