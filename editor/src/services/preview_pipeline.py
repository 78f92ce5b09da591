"""
Preview Render Pipeline

Owns the offscreen render surface and the virtual camera that rasterizes the
layout tree for the viewport.

Architecture:
1. VirtualCamera: orthographic projection, UI layer only, solid background
2. RenderSurface: RGBA pixel buffer at the device-preset resolution
3. bind_root(): makes the layout root render through the camera (root sized
   to the surface, centered on the camera)
4. render(): clears the surface and fills every visible node in tree order

Surface pixel space has its origin at the bottom-left with Y up, like the
camera's screen space. Image rows are stored top-down, so rasterization
flips Y once when writing pixels.
"""

import logging
import weakref

import numpy as np
from PIL import Image, ImageDraw

from models.transform import Vec2, Rect
from constants import (
	DEVICE_PRESETS, DEFAULT_PRESET_INDEX,
	UI_LAYER, CAMERA_NEAR_CLIP, CAMERA_FAR_CLIP, CAMERA_BACKGROUND,
)

logger = logging.getLogger(__name__)


def _to_rgba255(color):
	"""Convert an RGB(A) color with 0-1 float channels to 0-255 ints."""
	channels = list(color)
	if len(channels) == 3:
		channels.append(1.0)
	return tuple(int(round(max(0.0, min(1.0, float(c))) * 255)) for c in channels)


class VirtualCamera:
	"""Orthographic camera projecting world space onto the render surface.

	ortho_size is half of the visible world height; the visible width follows
	the aspect ratio of whatever resolution the camera renders at.
	"""

	def __init__(self, position=None, ortho_size=540.0, near=CAMERA_NEAR_CLIP,
	             far=CAMERA_FAR_CLIP, culling_layers=None, background=CAMERA_BACKGROUND):
		self.position = Vec2.of(position) if position is not None else Vec2(0.0, 0.0)
		self.ortho_size = float(ortho_size)
		self.near = near
		self.far = far
		self.orthographic = True
		self.culling_layers = set(culling_layers) if culling_layers else {UI_LAYER}
		self.background = background
		self.destroyed = False

	def renders_layer(self, layer):
		return layer in self.culling_layers

	def pixels_per_unit(self, resolution):
		"""Surface pixels covered by one world unit."""
		return resolution[1] / (2.0 * self.ortho_size)

	def world_to_screen(self, point, resolution):
		"""World point -> surface pixel (origin bottom-left, Y up)."""
		width, height = resolution
		aspect = width / height
		ndc_x = (point.x - self.position.x) / (self.ortho_size * aspect)
		ndc_y = (point.y - self.position.y) / self.ortho_size
		return Vec2((ndc_x + 1.0) * 0.5 * width, (ndc_y + 1.0) * 0.5 * height)

	def screen_to_world(self, point, resolution):
		"""Surface pixel -> world point (inverse of world_to_screen)."""
		width, height = resolution
		aspect = width / height
		ndc_x = point.x / width * 2.0 - 1.0
		ndc_y = point.y / height * 2.0 - 1.0
		return Vec2(self.position.x + ndc_x * self.ortho_size * aspect,
		            self.position.y + ndc_y * self.ortho_size)

	def destroy(self):
		self.destroyed = True


class RenderSurface:
	"""Offscreen RGBA pixel buffer."""

	def __init__(self, resolution):
		self.resolution = (int(round(resolution[0])), int(round(resolution[1])))
		self.image = None

	@property
	def width(self):
		return self.resolution[0]

	@property
	def height(self):
		return self.resolution[1]

	@property
	def is_created(self):
		return self.image is not None

	def create(self, background=CAMERA_BACKGROUND):
		if self.image is None:
			self.image = Image.new("RGBA", self.resolution, tuple(background))

	def clear(self, color):
		if self.image is not None:
			self.image.paste(tuple(color), (0, 0, self.width, self.height))

	def release(self):
		self.image = None

	def to_array(self):
		"""Pixels as a contiguous (height, width, 4) uint8 array, top row first."""
		if self.image is None:
			return None
		return np.ascontiguousarray(np.asarray(self.image, dtype=np.uint8))


class PreviewRenderPipeline:
	"""Virtual camera + render surface for the viewport preview.

	Exclusively owns both resources; only ensure_surface/rebuild/teardown and
	resolution changes create or destroy them.
	"""

	def __init__(self, resolution=None):
		if resolution is None:
			resolution = DEVICE_PRESETS[DEFAULT_PRESET_INDEX][1]
		self.resolution = (int(resolution[0]), int(resolution[1]))
		self.camera = None
		self.surface = None
		self._root_ref = None
		# Bumped whenever pixel geometry derived from the old surface is stale
		self.geometry_generation = 0

	@property
	def is_ready(self):
		return (self.camera is not None and not self.camera.destroyed and
		        self.surface is not None and self.surface.is_created)

	@property
	def bound_root(self):
		return self._root_ref() if self._root_ref is not None else None

	# ========================================
	# Lifecycle
	# ========================================

	def ensure_surface(self, resolution=None):
		"""Create the camera and surface if missing, resizing to ``resolution``."""
		if resolution is not None:
			resolution = (int(resolution[0]), int(resolution[1]))
			if resolution != self.resolution:
				logger.debug("Preview resolution %s -> %s", self.resolution, resolution)
				self.resolution = resolution
				self._release_surface()
				self.geometry_generation += 1

		if self.camera is None or self.camera.destroyed:
			self.camera = VirtualCamera(ortho_size=self.resolution[1] / 2.0)

		if self.surface is None or not self.surface.is_created:
			self.surface = RenderSurface(self.resolution)
			self.surface.create(self.camera.background)
			logger.debug("Created %dx%d render surface", *self.resolution)

		self.camera.ortho_size = self.resolution[1] / 2.0
		self._apply_camera_to_root()

	def set_resolution(self, resolution):
		self.ensure_surface(resolution)

	def rebuild(self):
		"""Destroy camera and surface, recreate them, re-bind the root."""
		logger.info("Rebuilding preview camera and surface")
		self._release_surface()
		self._destroy_camera()
		self.geometry_generation += 1
		self.ensure_surface()

	def teardown(self):
		"""Release everything. Safe to call repeatedly or half-initialized."""
		self._release_surface()
		self._destroy_camera()
		self._root_ref = None

	def _release_surface(self):
		if self.surface is not None:
			self.surface.release()
			self.surface = None

	def _destroy_camera(self):
		if self.camera is not None:
			self.camera.destroy()
			self.camera = None

	# ========================================
	# Root binding
	# ========================================

	def bind_root(self, root):
		"""Render ``root`` through this pipeline's camera."""
		self._root_ref = weakref.ref(root) if root is not None else None
		self._apply_camera_to_root()

	def _apply_camera_to_root(self):
		root = self.bound_root
		if root is None or self.camera is None:
			return
		width, height = self.resolution
		scale = root.scale if root.scale else 1.0
		pivot = root.pivot
		root.size_delta = (width / scale, height / scale)
		root.anchored_position = (
			self.camera.position.x + (pivot.x - 0.5) * width,
			self.camera.position.y + (pivot.y - 0.5) * height,
		)

	# ========================================
	# Rasterization
	# ========================================

	def render(self, root=None):
		"""Rasterize the layout into the surface.

		Returns:
			PIL.Image or None if the pipeline is not ready
		"""
		if not self.is_ready:
			return None
		root = root if root is not None else self.bound_root
		self.surface.clear(self.camera.background)
		if root is None:
			return self.surface.image

		draw = ImageDraw.Draw(self.surface.image, "RGBA")
		height = self.surface.height
		stack = [root]
		while stack:
			node = stack.pop()
			if not node.active:
				continue
			stack.extend(reversed(node.children))
			node.dirty = False
			if node.color is None or not self.camera.renders_layer(node.layer):
				continue
			if node.is_degenerate():
				continue
			screen = Rect.from_points(
				self.camera.world_to_screen(corner, self.resolution)
				for corner in node.world_corners()
			)
			x0 = int(round(screen.x_min))
			x1 = int(round(screen.x_max)) - 1
			y0 = int(round(height - screen.y_max))
			y1 = int(round(height - screen.y_min)) - 1
			if x1 < x0 or y1 < y0:
				continue
			draw.rectangle([x0, y0, x1, y1], fill=_to_rgba255(node.color))
		return self.surface.image

	def pixels(self):
		return self.surface.to_array() if self.surface is not None else None
