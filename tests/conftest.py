"""
Shared fixtures for SnapUI View tests.

Standard viewport used throughout: PC preset (1920x1080) shown in an 800x600
workspace at zoom 1. The preview rect is then (160, 165, 480, 270), one
workspace pixel is 4 world units and world (0, 0) sits at workspace (400, 300).
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from models.transform import Vec2
from models.ui_node import UiNode
from models.layout_tree import LayoutTree


WORKSPACE_SIZE = (800, 600)
WORLD_UNITS_PER_PIXEL = 4.0


class FakeClock:
    """Injectable monotonic clock"""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def tree():
    """Empty layout with a 1920x1080 canvas root"""
    return LayoutTree(UiNode("Canvas", size_delta=(1920, 1080)))


@pytest.fixture
def make_box(tree):
    """Factory adding a centered-anchor box: make_box(name, pos, size, parent=None, **kwargs)"""
    def _make(name, pos=(0, 0), size=(100, 100), parent=None, **kwargs):
        node = UiNode(name, anchored_position=pos, size_delta=size, **kwargs)
        return tree.add_node(node, parent)
    return _make


@pytest.fixture
def to_viewport():
    """World point of the standard viewport -> workspace pixel"""
    def _convert(x, y):
        return Vec2(400.0 + x / WORLD_UNITS_PER_PIXEL, 300.0 - y / WORLD_UNITS_PER_PIXEL)
    return _convert


@pytest.fixture
def editor(tree, fake_clock):
    """Opened viewport editor on the standard viewport"""
    from services.viewport_editor import ViewportEditor
    viewport = ViewportEditor(tree, clock=fake_clock)
    viewport.open(WORKSPACE_SIZE)
    yield viewport
    viewport.close()
