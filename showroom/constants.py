# =============================================================================
# SHOWROOM CONSTANTS
# =============================================================================
# Centralized constants for the garage/showroom scene. Scene literals that are
# specific to one preset live next to that preset in showroom/scenes; this file
# holds the values shared by the viewer, the loader and the CLI.
# =============================================================================

from pathlib import Path

# =============================================================================
# ASSETS
# =============================================================================

ASSET_ROOT = Path("assets")               # Default root for textures and models
ASSET_ROOT_ENV = "SHOWROOM_ASSETS"        # Environment override for ASSET_ROOT
MODEL_CACHE_DIRNAME = ".model_cache"      # Converted OBJ files, under the asset root
LOADER_MAX_WORKERS = 4                    # Parser threads for the model loader
MODEL_FILE_SUFFIXES = (".gltf", ".glb", ".obj", ".stl", ".ply")

# =============================================================================
# CAMERA & CONTROLS
# =============================================================================

CAMERA_FOV = 75.0                         # Vertical field of view (degrees)
CAMERA_NEAR = 0.1                         # Near clip plane
CAMERA_FAR = 1000.0                       # Far clip plane
CAMERA_POSITION = (0.0, 5.0, 15.0)        # Y-up start position, looking at the origin
CONTROLS_TARGET = (0.0, 0.0, 0.0)         # Orbit pivot (Y-up)
CONTROLS_DAMPING = True                   # Smooth rotate/zoom/pan over several frames
CONTROLS_DAMPING_FACTOR = 0.25            # Fraction of the pending motion applied per frame
CONTROLS_ROTATE_SPEED = 0.5               # Degrees per mouse pixel
CONTROLS_ZOOM_SPEED = 0.1                 # Fractional distance change per wheel step
CONTROLS_PAN_SPEED = 0.1875               # Scene units per frame for keyboard pan
CONTROLS_MIN_DISTANCE = 0.5
CONTROLS_MAX_DISTANCE = 500.0
PITCH_LIMIT_DEG = 89.0

# =============================================================================
# RENDERING
# =============================================================================

FRAME_RATE = 60                           # Frame loop frequency (Hz)
SNAPSHOT_WIDTH = 1280                     # Default headless snapshot size (pixels)
SNAPSHOT_HEIGHT = 720
SHADOWS_DEFAULT = False                   # Shadows start disabled, '2' toggles them
TURBO_BUILD_DEFAULT = True                # Pause rendering while spawning the scene
MIN_GLASS_ALPHA = 0.1                     # Physical glass never fully disappears
UNIFORM_SPECULAR_COLOR = (0.0, 0.0, 0.0)
POINT_LIGHT_HELPER_RADIUS = 0.25          # Marker sphere drawn for visible point lights
DEFAULT_BACKGROUND = (0.941, 0.941, 0.941)  # 0xf0f0f0

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = "INFO"
LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name} - {message}"
