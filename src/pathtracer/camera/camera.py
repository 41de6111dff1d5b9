"""Look-at perspective camera and primary ray generation.

The camera is described by a CameraConfig (position, target, up vector,
vertical field of view and image size). setup_camera derives the pixel grid
on the host with NumPy and stores it in Taichi fields for the kernels.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits at the focus distance |look_from - look_at|. Pixel (0, 0)
is the top-left of the image; rows grow downward because viewport_v points
along -v.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.camera.camera import CameraConfig, get_ray, setup_camera
    >>> geometry = setup_camera(CameraConfig(image_width=400))
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0)  # Jittered ray through the top-left pixel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.pathtracer.config import compute_image_height
from src.pathtracer.core.ray import Ray, make_ray
from src.pathtracer.core.vec3 import real, vec3

# Minimum |vup x w| before the basis is considered degenerate
_DEGENERATE_EPSILON = 1e-12


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class CameraConfig:
    """Configuration for a look-at perspective camera.

    Attributes:
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Ideal width divided by height of the output image.
        image_width: Image width in pixels.
        look_from: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
    """

    vfov: float = 20.0
    aspect_ratio: float = 16.0 / 9.0
    image_width: int = 1200
    look_from: tuple[float, float, float] = (13.0, 2.0, 3.0)
    look_at: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)


@dataclass
class CameraGeometry:
    """Pixel-grid geometry derived from a CameraConfig.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels (at least 1).
        center: Camera position.
        pixel00_loc: World-space center of the top-left pixel.
        pixel_delta_u: Offset from one pixel to the next along a row.
        pixel_delta_v: Offset from one row to the next.
        u: Camera right vector.
        v: Camera up vector.
        w: Camera backward vector.
    """

    image_width: int
    image_height: int
    center: np.ndarray
    pixel00_loc: np.ndarray
    pixel_delta_u: np.ndarray
    pixel_delta_v: np.ndarray
    u: np.ndarray
    v: np.ndarray
    w: np.ndarray


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=real, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=real, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=real, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=real, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=real, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=real, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=real, shape=())  # Backward (opposite view)


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def compute_camera_geometry(config: CameraConfig) -> CameraGeometry:
    """Derive the pixel grid for a camera configuration.

    All arithmetic is done in float64, the same precision as the Taichi
    fields it is written into.

    Args:
        config: The camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If the configuration is degenerate (non-positive image
            width or aspect ratio, vfov outside (0, 180), look_from equal to
            look_at, or vup parallel to the view direction).
    """
    if config.image_width < 1:
        raise ValueError(f"image_width must be positive, got {config.image_width}")
    if config.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {config.aspect_ratio}")
    if not 0.0 < config.vfov < 180.0:
        raise ValueError(f"vfov must be in (0, 180) degrees, got {config.vfov}")

    look_from = np.array(config.look_from, dtype=np.float64)
    look_at = np.array(config.look_at, dtype=np.float64)
    vup = np.array(config.vup, dtype=np.float64)

    image_width = int(config.image_width)
    image_height = compute_image_height(image_width, config.aspect_ratio)

    view = look_from - look_at
    focal_length = float(np.linalg.norm(view))
    if focal_length == 0.0:
        raise ValueError("look_from and look_at must be different points")

    theta = math.radians(config.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * focal_length
    viewport_width = viewport_height * (image_width / image_height)

    w = view / focal_length
    u = np.cross(vup, w)
    u_norm = float(np.linalg.norm(u))
    if u_norm < _DEGENERATE_EPSILON:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / u_norm
    v = np.cross(w, u)

    # Vectors across the horizontal and down the vertical viewport edges
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = look_from - focal_length * w - viewport_u / 2.0 - viewport_v / 2.0
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        center=look_from,
        pixel00_loc=pixel00_loc,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        u=u,
        v=v,
        w=w,
    )


def setup_camera(config: CameraConfig) -> CameraGeometry:
    """Initialize camera state from configuration.

    This must be called before rendering. It writes Taichi fields and must
    be called from Python, not from within a kernel.

    Args:
        config: The camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If the configuration is degenerate.
    """
    geometry = compute_camera_geometry(config)

    _camera_center[None] = geometry.center.tolist()
    _pixel00_loc[None] = geometry.pixel00_loc.tolist()
    _pixel_delta_u[None] = geometry.pixel_delta_u.tolist()
    _pixel_delta_v[None] = geometry.pixel_delta_v.tolist()
    _camera_u[None] = geometry.u.tolist()
    _camera_v[None] = geometry.v.tolist()
    _camera_w[None] = geometry.w.tolist()

    return geometry


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def _ray_through(pixel_i: ti.i32, pixel_j: ti.i32, offset_u: real, offset_v: real) -> Ray:
    """Ray from the camera center through a point offset from a pixel center."""
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(pixel_i, real) + offset_u) * _pixel_delta_u[None]
        + (ti.cast(pixel_j, real) + offset_v) * _pixel_delta_v[None]
    )
    origin = _camera_center[None]
    return make_ray(origin, pixel_sample - origin)


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32) -> Ray:
    """Generate a jittered primary ray for anti-aliasing.

    The sample point is uniform within the pixel square, offset by
    (-0.5 + U) along each pixel edge. The direction is not normalized.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        A Ray from the camera center through a random point of the pixel.
    """
    offset_u = -0.5 + ti.random(real)
    offset_v = -0.5 + ti.random(real)
    return _ray_through(pixel_i, pixel_j, offset_u, offset_v)


@ti.func
def get_ray_centered(pixel_i: ti.i32, pixel_j: ti.i32) -> Ray:
    """Generate the ray through the exact center of a pixel."""
    return _ray_through(pixel_i, pixel_j, 0.0, 0.0)


@ti.func
def get_camera_center() -> vec3:
    """Get the camera position in world space."""
    return _camera_center[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        u, v and w as float tuples.
    """
    fields = {
        "center": _camera_center,
        "pixel00_loc": _pixel00_loc,
        "pixel_delta_u": _pixel_delta_u,
        "pixel_delta_v": _pixel_delta_v,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
    }
    info = {}
    for name, value in fields.items():
        vec = value[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
