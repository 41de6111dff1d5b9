"""Path tracing integrator for Monte Carlo light transport.

This module evaluates the radiance arriving along camera rays and owns the
render target the kernels write into.

ray_color follows a ray through the scene for at most max_depth bounces.
Every bounce multiplies the running attenuation by the material's
attenuation. A ray that escapes picks up the sky gradient, a ray that is
absorbed or runs out of bounces contributes black. The loop is the
iterative form of

    ray_color(r, depth) = attenuation * ray_color(scattered, depth - 1)

Rendering is row oriented: _render_row evaluates every pixel of one image
row in parallel, each pixel summing its own samples into its own slot of
the color buffer. _resolve_image then averages, gamma-corrects and
quantizes the sums into 8-bit pixel values.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.camera.camera import CameraConfig, setup_camera
    >>> from src.pathtracer.core.integrator import (
    ...     render_row, resolve_image, setup_render_target
    ... )
    >>> geometry = setup_camera(CameraConfig(image_width=64))
    >>> setup_render_target(geometry.image_width, geometry.image_height)
    >>> for j in range(geometry.image_height):
    ...     render_row(j, samples=16, max_depth=8)
    >>> resolve_image(samples=16)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.camera import get_ray, get_ray_centered
from src.pathtracer.config import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from src.pathtracer.core.interval import INFINITY, Interval, interval_clamp
from src.pathtracer.core.ray import Ray, make_ray
from src.pathtracer.core.vec3 import real, unit_vector, vec3
from src.pathtracer.geometry.hittable import HitRecord
from src.pathtracer.materials.dielectric import scatter_dielectric_by_id
from src.pathtracer.materials.lambertian import scatter_lambertian_by_id
from src.pathtracer.materials.metal import scatter_metal_by_id
from src.pathtracer.scene.intersection import intersect_scene
from src.pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound on hit distance; rejects self-intersection at the ray origin
T_MIN = 0.001

# Largest channel value before quantization; keeps int(256 * c) <= 255
INTENSITY_MAX = 0.999

_LAMBERTIAN = int(MaterialType.LAMBERTIAN)
_METAL = int(MaterialType.METAL)
_DIELECTRIC = int(MaterialType.DIELECTRIC)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of samples, indexed [column, row]
_color_buffer = ti.Vector.field(3, dtype=real, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Quantized output in [0, 255], indexed [column, row]
_pixel_buffer = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers. The buffers are
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is below 1 or exceeds the maximum size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _pixel_buffer.fill(0)


def reset_render_target() -> None:
    """Clear the buffers and mark the render target as not set up."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(ray_in: Ray, rec: HitRecord):
    """Dispatch to the scattering function of the material that was hit.

    Args:
        ray_in: The incoming ray.
        rec: The hit record, carrying the unified material id.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). Unknown
        material ids absorb the ray.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == _LAMBERTIAN:
        scattered_direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, ray_in, rec
        )
    elif mat_type == _METAL:
        scattered_direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, ray_in, rec
        )
    elif mat_type == _DIELECTRIC:
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, ray_in, rec
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Radiance Estimation
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Vertical white-to-blue sky gradient seen by escaping rays.

    Args:
        direction: Ray direction (any length).

    Returns:
        (1 - a) * white + a * (0.5, 0.7, 1.0) with a = 0.5 * (unit_y + 1).
    """
    a = 0.5 * (unit_vector(direction).y + 1.0)
    return (1.0 - a) * vec3(1.0, 1.0, 1.0) + a * vec3(0.5, 0.7, 1.0)


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> vec3:
    """Estimate the color carried back along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of surface interactions. 0 yields black.

    Returns:
        The estimated color (RGB).
    """
    origin = ray.origin
    direction = ray.direction

    color = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            current = make_ray(origin, direction)
            rec = intersect_scene(current, Interval(min=T_MIN, max=INFINITY))

            if rec.hit == 0:
                color = attenuation * background_color(direction)
                active = 0
            else:
                scattered_direction, scatter_attenuation, did_scatter = _scatter_material(
                    current, rec
                )
                if did_scatter == 0:
                    active = 0
                else:
                    attenuation *= scatter_attenuation
                    origin = rec.p
                    direction = scattered_direction

    return color


@ti.func
def _zero_non_finite(color: vec3) -> vec3:
    """Replace NaN and Inf channels with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return result


@ti.func
def _camera_ray(pixel_i: ti.i32, pixel_j: ti.i32, jitter: ti.i32) -> Ray:
    """Primary ray for a pixel, jittered within the pixel when jitter is 1."""
    ray = get_ray_centered(pixel_i, pixel_j)
    if jitter == 1:
        ray = get_ray(pixel_i, pixel_j)
    return ray


@ti.func
def linear_to_gamma(linear_component: real) -> real:
    """Gamma 2 transform (square root); non-positive input maps to 0."""
    result = 0.0
    if linear_component > 0.0:
        result = ti.sqrt(linear_component)
    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_row(j: ti.i32, width: ti.i32, samples: ti.i32, max_depth: ti.i32, jitter: ti.i32):
    """Sum samples for every pixel of row j.

    The outermost loop is parallel across pixels; each pixel writes only
    its own slot.
    """
    for i in range(width):
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(samples):
            ray = _camera_ray(i, j, jitter)
            pixel_color += _zero_non_finite(ray_color(ray, max_depth))
        _color_buffer[i, j] = pixel_color


@ti.kernel
def _resolve_image(width: ti.i32, height: ti.i32, samples: ti.i32):
    """Average, gamma-correct, clamp and quantize the color buffer."""
    for i, j in ti.ndrange(width, height):
        intensity = Interval(min=0.0, max=INTENSITY_MAX)
        scale = 1.0 / ti.cast(samples, real)
        c = _color_buffer[i, j] * scale
        r = interval_clamp(intensity, linear_to_gamma(c.x))
        g = interval_clamp(intensity, linear_to_gamma(c.y))
        b = interval_clamp(intensity, linear_to_gamma(c.z))
        _pixel_buffer[i, j] = tm.ivec3(
            ti.cast(256.0 * r, ti.i32),
            ti.cast(256.0 * g, ti.i32),
            ti.cast(256.0 * b, ti.i32),
        )


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, max_depth: ti.i32, jitter: ti.i32
) -> vec3:
    """Render a single sample for a specific pixel."""
    return ray_color(_camera_ray(pixel_i, pixel_j, jitter), max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def _validate_sampling(samples: int, max_depth: int) -> None:
    if samples < 1:
        raise ValueError(f"samples must be at least 1, got {samples}")
    if max_depth < 0:
        raise ValueError(f"max_depth must not be negative, got {max_depth}")


def render_row(j: int, samples: int, max_depth: int, jitter: bool = True) -> None:
    """Render one image row into the color buffer.

    Overwrites the row's previous sums.

    Args:
        j: Row index (0 = top).
        samples: Samples per pixel.
        max_depth: Maximum bounces per path.
        jitter: Whether to jitter sample positions within each pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If j is out of range or the sampling parameters are invalid.
    """
    _check_render_target_initialized()
    _validate_sampling(samples, max_depth)

    width, height = get_image_dimensions()
    if not 0 <= j < height:
        raise ValueError(f"Row {j} is outside [0, {height})")

    _render_row(j, width, samples, max_depth, 1 if jitter else 0)


def resolve_image(samples: int) -> None:
    """Convert the summed color buffer into quantized pixel values.

    Args:
        samples: The number of samples summed into every pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples is below 1.
    """
    _check_render_target_initialized()
    if samples < 1:
        raise ValueError(f"samples must be at least 1, got {samples}")

    width, height = get_image_dimensions()
    _resolve_image(width, height, samples)


def render_sample(
    pixel_i: int, pixel_j: int, max_depth: int = 50, jitter: bool = True
) -> tuple[float, float, float]:
    """Render a single sample for a specific pixel.

    This is a Python-callable function for testing. For full images use
    render_row(), which processes a whole row in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        max_depth: Maximum bounces for the path.
        jitter: Whether to jitter the sample position within the pixel.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(pixel_i, pixel_j, max_depth, 1 if jitter else 0)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_pixels_numpy() -> np.ndarray:
    """Get the quantized image as a NumPy array.

    Returns:
        uint8 array of shape (height, width, 3), rows top to bottom.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    pixels = _pixel_buffer.to_numpy()[:width, :height, :]
    return np.ascontiguousarray(np.transpose(pixels, (1, 0, 2))).astype(np.uint8)


def get_linear_image_numpy(samples: int) -> np.ndarray:
    """Get the averaged linear color (before gamma and quantization).

    Args:
        samples: The number of samples summed into every pixel.

    Returns:
        float32 array of shape (height, width, 3).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    if samples < 1:
        raise ValueError(f"samples must be at least 1, got {samples}")

    width, height = get_image_dimensions()
    sums = _color_buffer.to_numpy()[:width, :height, :]
    return (np.transpose(sums, (1, 0, 2)) / samples).astype(np.float32)
