"""Camera module for view and ray generation.

Components:
    camera: Look-at perspective camera with jittered pixel sampling

Camera responsibilities:
    - Derive the pixel grid from position, target, up vector and field of view
    - Generate primary rays through pixel (i, j), column i from the left and
      row j from the top
    - Apply anti-aliasing jitter within each pixel square
"""

from .camera import (
    CameraConfig,
    CameraGeometry,
    compute_camera_geometry,
    compute_image_height,
    get_camera_center,
    get_camera_info,
    get_ray,
    get_ray_centered,
    setup_camera,
)

__all__ = [
    "CameraConfig",
    "CameraGeometry",
    "compute_camera_geometry",
    "compute_image_height",
    "setup_camera",
    "get_ray",
    "get_ray_centered",
    "get_camera_center",
    "get_camera_info",
]
