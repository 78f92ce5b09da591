"""UI setup for SnapUIViewWindow"""

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QLabel, QAction, QActionGroup

from components.viewport_toolbar import ViewportToolbar
from components.viewport_widget import ViewportWidget
from models.theme import LIGHT_THEME, DARK_THEME


class UISetupMixin:
    """UI initialization and component wiring"""

    def setup_ui(self):
        """Initialize and wire up all UI components"""
        self._create_menu_bar()

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        # Toolbar above the viewport
        self.viewport_toolbar = ViewportToolbar(self)
        self.viewport_toolbar.set_state(self.editor.preset_index, self.editor.grid_index,
                                        self.editor.state.snap_enabled)
        self.viewport_toolbar.set_canvases([tree.root.name for tree in self.canvases])
        main_layout.addWidget(self.viewport_toolbar)

        self.viewport_widget = ViewportWidget(self.editor, self)
        main_layout.addWidget(self.viewport_widget, 1)

        # Toolbar -> editor
        self.viewport_toolbar.canvas_changed.connect(self._on_canvas_changed)
        self.viewport_toolbar.preset_changed.connect(self._on_preset_changed)
        self.viewport_toolbar.grid_changed.connect(self._on_grid_changed)
        self.viewport_toolbar.smart_align_toggled.connect(self._on_smart_align_toggled)
        self.viewport_toolbar.rebuild_requested.connect(self.editor.rebuild_preview)
        self.viewport_toolbar.reset_view_requested.connect(self.editor.reset_view)

        # Viewport -> window
        self.viewport_widget.selectionChanged.connect(self._on_selection_changed)

        self.status_left = QLabel("Ready")
        self.status_right = QLabel("")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)
        self.statusBar().setStyleSheet("QStatusBar { border-top: 1px solid rgba(255, 255, 255, 40); padding: 4px; }")

        self._update_status_bar()

    def _create_menu_bar(self):
        menubar = self.menuBar()

        # Insert menu - one action per element template
        insert_menu = menubar.addMenu("&Insert")
        for template in self.templates:
            action = insert_menu.addAction(template.display_name)
            action.triggered.connect(lambda checked, t=template: self._insert_template(t))

        # View menu - themes
        view_menu = menubar.addMenu("&View")
        theme_menu = view_menu.addMenu("Theme")
        theme_group = QActionGroup(self)
        for theme in (DARK_THEME, LIGHT_THEME):
            action = QAction(theme.name, self, checkable=True)
            action.setChecked(theme is self.theme_manager.active_theme)
            action.triggered.connect(lambda checked, t=theme: self.theme_manager.set_theme(t))
            theme_group.addAction(action)
            theme_menu.addAction(action)

    def _update_status_bar(self):
        node = self.editor.selected_node
        self.status_left.setText(f"Selected: {node.name}" if node is not None else "Ready")
        label = self.editor.pipeline.resolution
        self.status_right.setText(f"{label[0]}x{label[1]}  {int(self.editor.state.zoom * 100)}%")
        self.viewport_toolbar.set_empty_hint(self.editor.is_empty())
