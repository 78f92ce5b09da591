"""
Viewport Widget - Qt host for the layout viewport editor

Paints the rendered layout surface inside the workspace and draws the
per-frame overlay on top of it:
- Grid lines (when a grid size is active)
- Parent/sibling outlines and the selection outline
- Alignment guides
- Selection handles

Mouse and wheel events are forwarded to the ViewportEditor. While a layout is
bound the widget repaints itself at 30 Hz.
"""

import logging

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPointF, QRectF, QTimer, pyqtSignal
from PyQt5.QtGui import QPainter, QPen, QBrush, QColor, QImage, QPolygonF

from models.transform import Vec2
from constants import (
	POINTER_PRIMARY, POINTER_SECONDARY, POINTER_MIDDLE, AUTO_REPAINT_INTERVAL_MS,
	WORKSPACE_BACKGROUND, SELECTED_OUTLINE_COLOR, HIERARCHY_OUTLINE_COLOR,
	GUIDE_COLOR, GRID_COLOR,
)

logger = logging.getLogger(__name__)

# Qt wheel angle units per editor scroll unit (one notch = 120 -> 3 units)
WHEEL_UNITS_PER_STEP = 40.0

_BUTTONS = {
	Qt.LeftButton: POINTER_PRIMARY,
	Qt.RightButton: POINTER_SECONDARY,
	Qt.MiddleButton: POINTER_MIDDLE,
}


def surface_to_qimage(surface):
	"""Copy a RenderSurface into a QImage (None if the surface is gone)."""
	if surface is None:
		return None
	pixels = surface.to_array()
	if pixels is None:
		return None
	height, width = pixels.shape[0], pixels.shape[1]
	image = QImage(pixels.data, width, height, 4 * width, QImage.Format_RGBA8888)
	# QImage does not own the numpy buffer
	return image.copy()


class ViewportWidget(QWidget):
	"""Interactive layout viewport"""

	selectionChanged = pyqtSignal(object)  # Selected UiNode or None
	layoutEdited = pyqtSignal()            # Emitted when a drag/resize ends

	def __init__(self, editor, parent=None):
		super().__init__(parent)
		self.editor = editor
		self.setMouseTracking(True)
		self.setFocusPolicy(Qt.StrongFocus)
		self.setMinimumSize(320, 240)

		self._active_button = None

		self.repaint_timer = QTimer(self)
		self.repaint_timer.setInterval(AUTO_REPAINT_INTERVAL_MS)
		self.repaint_timer.timeout.connect(self.update)

	# ========================================
	# Lifecycle
	# ========================================

	def open(self):
		self.editor.open((self.width(), self.height()))
		self.repaint_timer.start()
		self.update()

	def close_viewport(self):
		self.repaint_timer.stop()
		self.editor.close()
		self.selectionChanged.emit(None)

	def resizeEvent(self, event):
		self.editor.set_workspace_size((event.size().width(), event.size().height()))
		super().resizeEvent(event)

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.fillRect(self.rect(), QColor(*WORKSPACE_BACKGROUND))
		if not self.editor.is_open:
			return

		self.editor.render()
		overlay = self.editor.compute_overlay()
		if overlay.preview_rect is None:
			return

		preview = overlay.preview_rect
		image = surface_to_qimage(self.editor.pipeline.surface)
		if image is not None:
			painter.setRenderHint(QPainter.SmoothPixmapTransform)
			painter.drawImage(QRectF(preview.x, preview.y, preview.width, preview.height), image)

		painter.setRenderHint(QPainter.Antialiasing)
		if overlay.grid_lines:
			painter.setPen(QPen(QColor(*GRID_COLOR), 1))
			for start, end in overlay.grid_lines:
				painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))

		painter.setBrush(QBrush())
		painter.setPen(QPen(QColor(*HIERARCHY_OUTLINE_COLOR), 1))
		for outline in overlay.hierarchy_outlines:
			self._draw_polygon(painter, outline)

		if overlay.selection_outline:
			painter.setPen(QPen(QColor(*SELECTED_OUTLINE_COLOR), 2))
			self._draw_polygon(painter, overlay.selection_outline)

		painter.setPen(QPen(QColor(*GUIDE_COLOR), 1, Qt.DashLine))
		for line in overlay.guide_lines:
			painter.drawLine(QPointF(line.start.x, line.start.y), QPointF(line.end.x, line.end.y))

		for handle in overlay.handles:
			handle.draw(painter)

	@staticmethod
	def _draw_polygon(painter, points):
		if not points or any(point is None for point in points):
			return
		painter.drawPolygon(QPolygonF([QPointF(point.x, point.y) for point in points]))

	# ========================================
	# Mouse Event Handlers
	# ========================================

	@staticmethod
	def _pos(event):
		return Vec2(float(event.pos().x()), float(event.pos().y()))

	def mousePressEvent(self, event):
		button = _BUTTONS.get(event.button())
		if button is None:
			super().mousePressEvent(event)
			return
		if self._active_button is None:
			self._active_button = button
		before = self.editor.selected_node
		after = self.editor.pointer_down(self._pos(event), button)
		if button == POINTER_MIDDLE:
			self.setCursor(Qt.ClosedHandCursor)
		if after is not before:
			self.selectionChanged.emit(after)
		self.update()
		event.accept()

	def mouseMoveEvent(self, event):
		pos = self._pos(event)
		if self._active_button is not None:
			self.editor.pointer_drag(pos, self._active_button)
			self.update()
			event.accept()
			return

		cursor = self.editor.cursor_at(pos)
		self.setCursor(cursor if cursor is not None else Qt.ArrowCursor)
		super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		button = _BUTTONS.get(event.button())
		if button is None:
			super().mouseReleaseEvent(event)
			return
		was_editing = self.editor.is_dragging or self.editor.is_resizing
		self.editor.pointer_up(self._pos(event), button)
		if button == self._active_button:
			self._active_button = None
		if button == POINTER_MIDDLE:
			self.setCursor(Qt.ArrowCursor)
		if was_editing and button == POINTER_PRIMARY:
			self.layoutEdited.emit()
		self.update()
		event.accept()

	def wheelEvent(self, event):
		"""Wheel zoom: scrolling down zooms out."""
		steps = -event.angleDelta().y() / WHEEL_UNITS_PER_STEP
		if steps:
			self.editor.scroll(steps)
			self.update()
		event.accept()
