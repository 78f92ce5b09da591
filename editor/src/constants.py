"""
SnapUI View - Constants and Configuration

This module contains all constant values used throughout the editor:
- Viewport zoom/pan limits and preview placement
- Device resolution presets and grid sizes
- Handle geometry and hit-test constants
- Alignment snapping tuning
- Virtual camera parameters
- Overlay colors
"""

# ======================================================================
# VIEWPORT ZOOM / PAN
# ======================================================================

MIN_ZOOM = 0.01
MAX_ZOOM = 4.0
DEFAULT_ZOOM = 1.0

# Zoom change per unit of scroll-wheel delta (subtracted: wheel down zooms out)
SCROLL_ZOOM_STEP = 0.02

# Preview width in workspace pixels = resolution width * zoom * PREVIEW_BASE_SCALE
PREVIEW_BASE_SCALE = 0.25

# ======================================================================
# POINTER INPUT
# ======================================================================

POINTER_PRIMARY = 0
POINTER_SECONDARY = 1
POINTER_MIDDLE = 2

# Second click on the same node within this window promotes selection to parent
DOUBLE_CLICK_INTERVAL = 0.25  # seconds

# ======================================================================
# DEVICE PRESETS
# ======================================================================

# (label, (width, height)) in surface pixels
DEVICE_PRESETS = [
    ("PC 1920x1080", (1920, 1080)),
    ("Phone 1080x1920", (1080, 1920)),
    ("Tablet 1536x2048", (1536, 2048)),
    ("Square 1024x1024", (1024, 1024)),
]
DEFAULT_PRESET_INDEX = 0

# ======================================================================
# GRID
# ======================================================================

# Grid sizes in layout units, 0 = no grid
GRID_SIZES = [0, 4, 8, 10, 16, 32, 64]
GRID_LABELS = ["No Grid"] + [f"GridSize: {size} px" for size in GRID_SIZES[1:]]
DEFAULT_GRID_INDEX = 0

# Grid overlay is hidden when lines would be closer than this (workspace pixels)
MIN_GRID_STEP_PX = 2.0

# ======================================================================
# HANDLES
# ======================================================================

HANDLE_SIZE = 10.0                # Square handle edge in workspace pixels
ROTATE_HANDLE_OFFSET = 20.0       # Rotate handle distance above the top-mid handle

# Projected selection rects thinner than this get no handles
MIN_SELECTION_SIZE_PX = 0.1

# ======================================================================
# ALIGNMENT SNAPPING
# ======================================================================

DEFAULT_SNAP_THRESHOLD = 10.0
DEFAULT_SNAP_ENABLED = True

# Frame motion above threshold * ratio suppresses snapping for that step
SNAP_DETACH_RATIO = 1.5

# Fraction of the threshold that snaps at full strength; pull decays to 0
# linearly over the remaining band. 0.0 gives a pure linear falloff.
DEFAULT_SNAP_CAPTURE_RATIO = 0.5

# Layout-space size below which bounds are treated as degenerate
DEGENERATE_EPSILON = 1e-6

# ======================================================================
# VIRTUAL CAMERA / RENDER SURFACE
# ======================================================================

UI_LAYER = "UI"
CAMERA_NEAR_CLIP = -50.0
CAMERA_FAR_CLIP = 50.0
CAMERA_BACKGROUND = (26, 26, 26, 255)

# Auto-repaint tick while a layout is bound (30 Hz)
AUTO_REPAINT_INTERVAL_MS = 33

# ======================================================================
# OVERLAY COLORS (RGBA 0-255)
# ======================================================================

WORKSPACE_BACKGROUND = (40, 40, 40, 255)
SELECTED_OUTLINE_COLOR = (255, 235, 4, 255)
HIERARCHY_OUTLINE_COLOR = (178, 178, 178, 255)
GUIDE_COLOR = (255, 51, 51, 230)
GRID_COLOR = (0, 0, 0, 26)
HANDLE_COLOR = (255, 255, 255, 255)
ROTATE_HANDLE_COLOR = (102, 204, 255, 255)
HANDLE_BORDER_COLOR = (60, 60, 60, 255)

# ======================================================================
# SETTINGS
# ======================================================================

CONFIG_DIR_NAME = ".snapui"
CONFIG_FILE_NAME = "config.json"
DEFAULT_ANIMATION_DURATION = 0.25
