"""
SnapUI View - Data Models

Layout hierarchy (UiNode, LayoutTree), element templates, themes and the
per-viewport editor state.
"""

from .transform import Vec2, Rect
from .ui_node import UiNode
from .layout_tree import LayoutTree
from .ui_template import UiElementTemplate
from .theme import UiTheme
from .viewport_state import ViewportState

__all__ = ['Vec2', 'Rect', 'UiNode', 'LayoutTree', 'UiElementTemplate', 'UiTheme', 'ViewportState']
