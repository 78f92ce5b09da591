"""Viewport toolbar: target canvas, device preset, grid, smart align, rebuild and reset view."""

from PyQt5.QtWidgets import QWidget, QHBoxLayout, QToolButton, QComboBox, QLabel, QCheckBox
from PyQt5.QtCore import pyqtSignal

from constants import DEVICE_PRESETS, GRID_LABELS, DEFAULT_PRESET_INDEX, DEFAULT_GRID_INDEX


class ViewportToolbar(QWidget):
	"""Toolbar above the layout viewport"""

	canvas_changed = pyqtSignal(int)      # Index into the host's canvas list
	preset_changed = pyqtSignal(int)      # Index into DEVICE_PRESETS
	grid_changed = pyqtSignal(int)        # Index into GRID_SIZES
	smart_align_toggled = pyqtSignal(bool)
	rebuild_requested = pyqtSignal()
	reset_view_requested = pyqtSignal()

	def __init__(self, parent=None):
		super().__init__(parent)

		layout = QHBoxLayout()
		layout.setContentsMargins(0, 0, 0, 0)
		layout.setSpacing(4)

		self.canvas_combo = QComboBox()
		self.canvas_combo.setMinimumWidth(120)
		self.canvas_combo.setToolTip("Canvas shown in the viewport")
		self.canvas_combo.currentIndexChanged.connect(self._on_canvas_changed)
		layout.addWidget(self.canvas_combo)

		self.preset_combo = QComboBox()
		self.preset_combo.setMinimumWidth(140)
		for label, resolution in DEVICE_PRESETS:
			self.preset_combo.addItem(label, resolution)
		self.preset_combo.setCurrentIndex(DEFAULT_PRESET_INDEX)
		self.preset_combo.currentIndexChanged.connect(self._on_preset_changed)
		layout.addWidget(self.preset_combo)

		self.grid_combo = QComboBox()
		self.grid_combo.setMinimumWidth(120)
		for label in GRID_LABELS:
			self.grid_combo.addItem(label)
		self.grid_combo.setCurrentIndex(DEFAULT_GRID_INDEX)
		self.grid_combo.currentIndexChanged.connect(self._on_grid_changed)
		layout.addWidget(self.grid_combo)

		self.smart_align_check = QCheckBox("Smart Align")
		self.smart_align_check.setChecked(True)
		self.smart_align_check.toggled.connect(self.smart_align_toggled.emit)
		layout.addWidget(self.smart_align_check)

		self.rebuild_btn = QToolButton()
		self.rebuild_btn.setText("Rebuild")
		self.rebuild_btn.setToolTip("Recreate the preview camera and surface")
		self.rebuild_btn.clicked.connect(self.rebuild_requested.emit)
		layout.addWidget(self.rebuild_btn)

		self.reset_btn = QToolButton()
		self.reset_btn.setText("Reset View")
		self.reset_btn.setToolTip("Back to 100% zoom, centered")
		self.reset_btn.clicked.connect(self.reset_view_requested.emit)
		layout.addWidget(self.reset_btn)

		layout.addStretch()

		self.hint_label = QLabel("No nodes found")
		self.hint_label.setVisible(False)
		layout.addWidget(self.hint_label)

		self.setLayout(layout)

	def _on_canvas_changed(self, index):
		if index >= 0:
			self.canvas_changed.emit(index)

	def _on_preset_changed(self, index):
		if index >= 0:
			self.preset_changed.emit(index)

	def _on_grid_changed(self, index):
		if index >= 0:
			self.grid_changed.emit(index)

	def set_state(self, preset_index, grid_index, smart_align):
		"""Sync controls without emitting signals"""
		for widget in (self.preset_combo, self.grid_combo, self.smart_align_check):
			widget.blockSignals(True)
		self.preset_combo.setCurrentIndex(preset_index)
		self.grid_combo.setCurrentIndex(grid_index)
		self.smart_align_check.setChecked(smart_align)
		for widget in (self.preset_combo, self.grid_combo, self.smart_align_check):
			widget.blockSignals(False)

	def set_canvases(self, names, current=0):
		"""Refill the canvas list without emitting signals"""
		self.canvas_combo.blockSignals(True)
		self.canvas_combo.clear()
		for name in names:
			self.canvas_combo.addItem(name)
		if names:
			self.canvas_combo.setCurrentIndex(max(0, min(len(names) - 1, current)))
		self.canvas_combo.blockSignals(False)

	def set_empty_hint(self, empty):
		self.hint_label.setVisible(bool(empty))
