"""Coordinate transformation utilities for the viewport.

Provides conversion between the editor's coordinate systems:
- World space (layout root's parent space, Y-up)
- Surface pixels (render surface, origin bottom-left, Y-up)
- Workspace pixels (viewport widget, origin top-left, Y-down)

The preview rect is where the render surface is drawn inside the workspace.
It is recomputed every frame from zoom, pan and the surface aspect ratio.
"""

from models.transform import Vec2, Rect
from constants import PREVIEW_BASE_SCALE, MIN_SELECTION_SIZE_PX


def compute_preview_rect(workspace_size, resolution, zoom, pan_offset):
	"""Placement of the render surface inside the workspace.

	Args:
		workspace_size: (width, height) of the workspace in pixels
		resolution: (width, height) of the render surface
		zoom: Viewport zoom factor
		pan_offset: Vec2 pan in workspace pixels

	Returns:
		Rect in workspace pixels (top-left origin)
	"""
	aspect = resolution[0] / resolution[1]
	width = resolution[0] * zoom * PREVIEW_BASE_SCALE
	height = width / aspect
	return Rect(
		pan_offset.x + (workspace_size[0] / 2.0 - width / 2.0),
		pan_offset.y + (workspace_size[1] / 2.0 - height / 2.0),
		width,
		height,
	)


def surface_pixel_to_viewport(pixel, preview_rect, resolution):
	"""Surface pixel (Y-up) -> workspace pixel (Y-down)."""
	return Vec2(
		preview_rect.x + (pixel.x / resolution[0]) * preview_rect.width,
		preview_rect.y + preview_rect.height - (pixel.y / resolution[1]) * preview_rect.height,
	)


def world_to_viewport(point, camera, surface, preview_rect):
	"""Project a world point into workspace pixels.

	Args:
		point: Vec2 in world space
		camera: VirtualCamera
		surface: RenderSurface (supplies the resolution)
		preview_rect: Current preview placement

	Returns:
		Vec2 in workspace pixels, or None without camera/surface
	"""
	if camera is None or surface is None:
		return None
	screen = camera.world_to_screen(point, surface.resolution)
	return surface_pixel_to_viewport(screen, preview_rect, surface.resolution)


def viewport_to_surface_pixel(point, preview_rect, surface):
	"""Map a workspace pixel onto the render surface.

	Points outside the preview rect are rejected.

	Returns:
		Vec2 surface pixel (Y-up), or None
	"""
	if surface is None or preview_rect is None:
		return None
	if preview_rect.width <= 0 or preview_rect.height <= 0:
		return None
	if not preview_rect.contains(point):
		return None
	norm_x = (point.x - preview_rect.x) / preview_rect.width
	norm_y = (point.y - preview_rect.y) / preview_rect.height
	return Vec2(norm_x * surface.width, (1.0 - norm_y) * surface.height)


class CoordinateMapper:
	"""World <-> workspace mapping bound to a preview pipeline.

	The preview rect must be refreshed once per frame with update_frame();
	every other method reads the pipeline's current camera and surface so a
	rebuilt or torn-down pipeline is picked up immediately.
	"""

	def __init__(self, pipeline):
		self.pipeline = pipeline
		self.preview_rect = None

	@property
	def camera(self):
		return self.pipeline.camera if self.pipeline.is_ready else None

	@property
	def surface(self):
		return self.pipeline.surface if self.pipeline.is_ready else None

	def update_frame(self, workspace_size, zoom, pan_offset):
		"""Recompute the preview placement for this frame."""
		if not self.pipeline.is_ready:
			self.preview_rect = None
			return None
		self.preview_rect = compute_preview_rect(workspace_size, self.pipeline.resolution, zoom, pan_offset)
		return self.preview_rect

	def world_to_viewport(self, point):
		if self.preview_rect is None:
			return None
		return world_to_viewport(point, self.camera, self.surface, self.preview_rect)

	def viewport_to_surface_pixel(self, point):
		if self.camera is None:
			return None
		return viewport_to_surface_pixel(point, self.preview_rect, self.surface)

	def surface_pixel_to_world(self, pixel):
		camera = self.camera
		if camera is None or pixel is None:
			return None
		return camera.screen_to_world(pixel, self.surface.resolution)

	def viewport_to_world(self, point):
		return self.surface_pixel_to_world(self.viewport_to_surface_pixel(point))

	def contains(self, point):
		"""True if the workspace point lies on the current preview."""
		return self.viewport_to_surface_pixel(point) is not None

	def world_rect_to_viewport(self, corners):
		"""Bounding workspace rect of projected world corners.

		Returns:
			Rect, or None when unmapped or thinner than MIN_SELECTION_SIZE_PX
		"""
		if self.preview_rect is None or self.camera is None:
			return None
		points = [self.world_to_viewport(corner) for corner in corners]
		rect = Rect.from_points(points)
		if rect is None:
			return None
		if rect.width <= MIN_SELECTION_SIZE_PX or rect.height <= MIN_SELECTION_SIZE_PX:
			return None
		return rect

	def world_polygon_to_viewport(self, corners):
		"""Project every corner (outline drawing keeps the corner order)."""
		if self.preview_rect is None or self.camera is None:
			return None
		return [self.world_to_viewport(corner) for corner in corners]

	def pixel_delta_to_layout(self, delta, node):
		"""Convert a workspace pixel delta into the layout units of ``node``.

		Inverts the preview placement (workspace -> surface pixels, flipping
		Y), the camera scale (surface pixels -> world) and the scale factor
		of the node's ancestors (world -> parent layout space).

		Returns:
			Vec2 delta in the node's anchored_position space, or None
		"""
		rect = self.preview_rect
		camera = self.camera
		if rect is None or camera is None or rect.width <= 0 or rect.height <= 0:
			return None
		surface = self.surface
		surface_delta = Vec2(
			delta.x / rect.width * surface.width,
			-delta.y / rect.height * surface.height,
		)
		parent = node.parent
		ancestor_scale = parent.lossy_scale() if parent is not None else 1.0
		divisor = camera.pixels_per_unit(surface.resolution) * ancestor_scale
		if abs(divisor) <= 1e-12:
			return None
		return Vec2(surface_delta.x / divisor, surface_delta.y / divisor)
