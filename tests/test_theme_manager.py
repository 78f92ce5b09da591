"""
Tests for theme broadcasting.

Covers:
- Immediate delivery on register, broadcast in registration order
- No duplicate registrations, idempotent unregister
- Components are held weakly
- Active theme fallback chain (explicit, settings default, temporary)
- Themed components restyling their nodes
"""
import gc
import logging

import pytest

from models.theme import UiTheme, DARK_THEME, LIGHT_THEME
from models.ui_node import UiNode
from services.editor_settings import EditorSettings
from services.theme_manager import (
    ThemeManager, ThemedComponent, ThemedImage, ThemedText, ThemeColorTarget,
)


class Recorder(ThemedComponent):
    """Component logging every delivery into a shared list"""

    def __init__(self, label, log, manager=None):
        super().__init__(manager)
        self.label = label
        self.log = log
        self.init_calls = 0

    def initialize(self):
        super().initialize()
        self.init_calls += 1

    def refresh_ui(self):
        self.log.append((self.label, self.theme.name))


@pytest.fixture
def manager():
    manager = ThemeManager()
    manager.set_theme(DARK_THEME)
    return manager


class TestRegistry:

    def test_register_delivers_immediately(self, manager):
        log = []
        manager.register(Recorder("a", log))
        assert log == [("a", "Dark")]

    def test_broadcast_in_registration_order(self, manager):
        log = []
        components = [Recorder(label, log) for label in "abc"]
        for component in components:
            manager.register(component)
        log.clear()
        manager.set_theme(LIGHT_THEME)
        assert log == [("a", "Light"), ("b", "Light"), ("c", "Light")]

    def test_no_duplicates(self, manager):
        log = []
        component = Recorder("a", log)
        manager.register(component)
        manager.register(component)
        assert len(manager.components) == 1
        assert log == [("a", "Dark")]

    def test_register_none_ignored(self, manager):
        manager.register(None)
        assert manager.components == []

    def test_unregister_is_idempotent(self, manager):
        log = []
        component = Recorder("a", log)
        manager.register(component)
        manager.unregister(component)
        manager.unregister(component)
        assert not manager.is_registered(component)
        log.clear()
        manager.set_theme(LIGHT_THEME)
        assert log == []

    def test_components_held_weakly(self, manager):
        log = []
        manager.register(Recorder("gone", log))
        gc.collect()
        assert manager.components == []
        log.clear()
        manager.set_theme(LIGHT_THEME)
        assert log == []

    def test_initialize_runs_once(self, manager):
        component = Recorder("a", [])
        manager.register(component)
        manager.set_theme(LIGHT_THEME)
        manager.set_theme(DARK_THEME)
        assert component.init_calls == 1


class TestActiveTheme:

    def test_explicit_theme(self, manager):
        assert manager.active_theme is DARK_THEME

    def test_settings_default(self):
        settings = EditorSettings(default_theme=LIGHT_THEME)
        assert ThemeManager(settings).active_theme is LIGHT_THEME

    def test_explicit_overrides_settings(self):
        manager = ThemeManager(EditorSettings(default_theme=LIGHT_THEME))
        manager.set_theme(DARK_THEME)
        assert manager.active_theme is DARK_THEME

    def test_temporary_theme_warns_once(self, caplog):
        manager = ThemeManager()
        with caplog.at_level(logging.WARNING):
            first = manager.active_theme
            second = manager.active_theme
        assert first is second
        assert first.name == "Temporary"
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1


class TestThemedComponents:

    def test_image_uses_target_color(self, manager):
        node = UiNode("Panel")
        node.add_component(ThemedImage(ThemeColorTarget.ACCENT, manager))
        assert node.color == DARK_THEME.accent_color
        manager.set_theme(LIGHT_THEME)
        assert node.color == LIGHT_THEME.accent_color

    def test_restyle_bumps_revision(self, manager):
        node = UiNode("Panel")
        revision = node.revision
        node.add_component(ThemedImage(manager=manager))
        assert node.revision > revision
        assert node.dirty

    def test_text_color_and_font(self, manager):
        theme = UiTheme(name="Fonts", text_color=(0, 0, 0, 1), main_font="Noto Sans")
        manager.set_theme(theme)
        node = UiNode("Label")
        node.add_component(ThemedText(manager))
        assert node.text_color == (0, 0, 0, 1)
        assert node.font == "Noto Sans"

    def test_detach_stops_updates(self, manager):
        node = UiNode("Panel")
        component = node.add_component(ThemedImage(manager=manager))
        component.detach()
        manager.set_theme(LIGHT_THEME)
        assert node.color == DARK_THEME.primary_color

    def test_reapply_theme_walks_subtree(self, manager):
        root = UiNode("Card")
        child = UiNode("Title")
        root.add_child(child)
        root.add_component(ThemedImage())
        child.add_component(ThemedText())
        assert manager.reapply_theme(root) == 2
        assert root.color == DARK_THEME.primary_color
        assert child.text_color == DARK_THEME.text_color

    def test_reapply_none(self, manager):
        assert manager.reapply_theme(None) == 0

    def test_clone_resets_state(self, manager):
        node = UiNode("Panel")
        component = node.add_component(ThemedImage(ThemeColorTarget.SECONDARY, manager))
        twin = component.clone()
        assert twin.node is None
        assert not twin.initialized
        assert twin.target is ThemeColorTarget.SECONDARY

    def test_cloned_node_registers_component(self, manager):
        node = UiNode("Panel")
        node.add_component(ThemedImage(manager=manager))
        copy = node.clone()
        assert len(manager.components) == 2
        manager.set_theme(LIGHT_THEME)
        assert copy.color == LIGHT_THEME.primary_color
