"""Core rendering module.

Components:
    vec3: Vector algebra and random sampling helpers
    ray: Ray data structure
    interval: Numeric intervals for hit distances and color clamping
    integrator: ray_color, render target and rendering kernels
    renderer: Row-by-row render driver with progress reporting

All compute-intensive operations use Taichi kernels.
"""

from .interval import (
    Interval,
    empty_interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
    make_interval,
    universe_interval,
)
from .ray import Ray, make_ray, ray_at
from .vec3 import (
    color,
    cross,
    degrees_to_radians,
    dot,
    length,
    length_squared,
    near_zero,
    point3,
    random_double,
    random_double_in,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    random_vec3_in,
    reflect,
    refract,
    unit_vector,
    vec3,
)

# Note: integrator and renderer are NOT imported here because they declare
# Taichi fields. Import them from src.pathtracer.core.integrator or
# src.pathtracer.core.renderer after ti.init().

__all__ = [
    "Interval",
    "make_interval",
    "empty_interval",
    "universe_interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "point3",
    "color",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "near_zero",
    "reflect",
    "refract",
    "random_double",
    "random_double_in",
    "random_vec3",
    "random_vec3_in",
    "random_in_unit_sphere",
    "random_unit_vector",
    "degrees_to_radians",
]
