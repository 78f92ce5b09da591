import sys
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # Output to console
    ]
)

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import QMainWindow
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

# Utility imports
from utils.logger import loggerRaise, set_main_window

# Service imports
from services.theme_manager import ThemeManager
from services.viewport_editor import ViewportEditor
from services.layout_samples import build_sample_layout, build_hud_layout, default_templates
from models.theme import DARK_THEME
from constants import DEVICE_PRESETS

from version import get_version

# Mixin imports
from main_window.config_mixin import ConfigMixin
from main_window.ui_setup_mixin import UISetupMixin


class SnapUIViewWindow(ConfigMixin, UISetupMixin, QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"SnapUI View {get_version()}")
        self.resize(1280, 720)

        set_main_window(self)

        self._init_config_paths()
        self._load_config()
        if self.settings.default_theme is None:
            self.settings.default_theme = DARK_THEME

        # One theme registry for the whole window, handed to every themed component
        self.theme_manager = ThemeManager(self.settings)
        self.templates = default_templates(self.theme_manager)

        resolution = DEVICE_PRESETS[self.settings.preset_index % len(DEVICE_PRESETS)][1]
        # Canvases the viewport can target; the first one is shown at start-up
        self.canvases = [
            build_sample_layout(self.theme_manager, resolution),
            build_hud_layout(self.theme_manager, resolution),
        ]
        self.tree = self.canvases[0]
        self.editor = ViewportEditor(self.tree, self.theme_manager, self.settings)

        self.setup_ui()
        self.viewport_widget.open()

    # ========================================
    # Toolbar / menu handlers
    # ========================================

    def _on_canvas_changed(self, index):
        if not 0 <= index < len(self.canvases):
            return
        self.tree = self.canvases[index]
        self.editor.set_tree(self.tree)
        self._update_status_bar()
        self.viewport_widget.update()

    def _on_preset_changed(self, index):
        self.editor.set_device_preset(index)
        self._save_config()
        self._update_status_bar()

    def _on_grid_changed(self, index):
        self.editor.set_grid_index(index)
        self._save_config()

    def _on_smart_align_toggled(self, enabled):
        self.editor.set_snap_enabled(enabled)
        self._save_config()

    def _on_selection_changed(self, node):
        self._update_status_bar()

    def _insert_template(self, template):
        try:
            parent = self.editor.selected_node or self.tree.root
            node = self.editor.instantiate_template(template, parent)
            self.editor.state.selected_node = node
            self._update_status_bar()
            self.viewport_widget.update()
        except Exception as e:
            loggerRaise(e, f"Error inserting '{template.display_name}'")

    def closeEvent(self, event):
        self.viewport_widget.close_viewport()
        self._save_config()
        super().closeEvent(event)


def main():
    """Main entry point for the SnapUI View application"""
    app = QtWidgets.QApplication([])

    # Use Fusion style with dark palette
    app.setStyle("Fusion")

    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ToolTipBase, Qt.white)
    dark_palette.setColor(QPalette.ToolTipText, Qt.white)
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.BrightText, Qt.red)
    dark_palette.setColor(QPalette.Link, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)

    app.setPalette(dark_palette)

    window = SnapUIViewWindow()
    window.show()
    app.exec_()


if __name__ == "__main__":
    main()
