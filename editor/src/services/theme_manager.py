"""
Theme Manager

Registry of themed components and broadcaster of the active UiTheme.

- register(): weakly held, ordered, no duplicates; the active theme is
  delivered immediately
- set_theme(): notify every live component in registration order
- active_theme: explicit theme, else the settings default, else a fresh
  UiTheme (logged as a warning)

One instance is created by the host and passed to whoever needs it.
"""

import copy
import logging
import weakref
from enum import Enum

from models.theme import UiTheme

logger = logging.getLogger(__name__)


class ThemeManager:
    """Observer registry for theme changes."""

    def __init__(self, settings=None):
        self.settings = settings
        self._theme = None
        self._fallback = None
        self._components = []  # weakref.ref, registration order

    # ========================================
    # Active theme
    # ========================================

    @property
    def active_theme(self) -> UiTheme:
        if self._theme is not None:
            return self._theme
        default = getattr(self.settings, 'default_theme', None) if self.settings is not None else None
        if default is not None:
            return default
        if self._fallback is None:
            logger.warning("No theme set and no default theme configured; using a temporary theme")
            self._fallback = UiTheme(name="Temporary")
        return self._fallback

    def set_theme(self, theme: UiTheme):
        """Make ``theme`` active and notify all registered components."""
        self._theme = theme
        logger.info("Theme set to '%s'", theme.name if theme is not None else None)
        self._broadcast(self.active_theme)

    # ========================================
    # Registry
    # ========================================

    def _live(self):
        alive = []
        for ref in self._components:
            component = ref()
            if component is not None:
                alive.append(ref)
        self._components = alive
        return [ref() for ref in alive]

    @property
    def components(self):
        return self._live()

    def is_registered(self, component) -> bool:
        return any(existing is component for existing in self._live())

    def register(self, component):
        if component is None or self.is_registered(component):
            return
        self._components.append(weakref.ref(component))
        component.on_theme_changed(self.active_theme)

    def unregister(self, component):
        self._components = [ref for ref in self._components
                            if ref() is not None and ref() is not component]

    def _broadcast(self, theme):
        for component in self._live():
            component.on_theme_changed(theme)

    def reapply_theme(self, root):
        """Deliver the active theme to every component in ``root``'s subtree."""
        if root is None:
            return 0
        theme = self.active_theme
        count = 0
        for node in root.iter_subtree():
            for component in node.components:
                component.on_theme_changed(theme)
                count += 1
        logger.debug("Reapplied theme '%s' to %d components", theme.name, count)
        return count


class ThemeColorTarget(Enum):
    PRIMARY = 'primary_color'
    SECONDARY = 'secondary_color'
    BACKGROUND = 'background_color'
    ACCENT = 'accent_color'


class ThemedComponent:
    """Base of components that restyle their node from the active theme.

    initialize() runs once, on the first theme delivery.
    """

    def __init__(self, manager=None):
        self._node_ref = None
        self.manager = manager
        self.initialized = False
        self.theme = None

    @property
    def node(self):
        return self._node_ref() if self._node_ref is not None else None

    def attach(self, node):
        self._node_ref = weakref.ref(node)
        if self.manager is not None:
            self.manager.register(self)

    def detach(self):
        if self.manager is not None:
            self.manager.unregister(self)
        self._node_ref = None

    def initialize(self):
        self.initialized = True

    def refresh_ui(self):
        pass

    def on_theme_changed(self, theme):
        if not self.initialized:
            self.initialize()
        self.theme = theme
        self.refresh_ui()

    def clone(self):
        twin = copy.copy(self)
        twin._node_ref = None
        twin.initialized = False
        return twin


class ThemedImage(ThemedComponent):
    """Fills the node with one of the theme colors."""

    def __init__(self, target=ThemeColorTarget.PRIMARY, manager=None):
        super().__init__(manager)
        self.target = target

    def refresh_ui(self):
        node = self.node
        if node is None or self.theme is None:
            return
        node.color = tuple(getattr(self.theme, self.target.value))
        node.mark_dirty()


class ThemedText(ThemedComponent):
    """Applies the theme text color and font to the node."""

    def refresh_ui(self):
        node = self.node
        if node is None or self.theme is None:
            return
        node.text_color = tuple(self.theme.text_color)
        if self.theme.main_font is not None:
            node.font = self.theme.main_font
        node.mark_dirty()
