"""Scene-level sphere storage and nearest-hit queries.

The scene is an ordered list of spheres stored in Taichi fields. Each sphere
carries the unified material id used for shading. Spheres are written from
Python before rendering and only read by kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from src.pathtracer.core.interval import Interval
from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import real, vec3
from src.pathtracer.geometry.hittable import HitRecord, make_miss_record
from src.pathtracer.geometry.sphere import Sphere, hit_sphere

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=real, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=real, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Only the count is reset; stale field data is overwritten by later adds.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The unified material id of the sphere.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def intersect_scene(ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the nearest sphere hit along a ray.

    Spheres are tested in insertion order against a shrinking upper bound,
    so each accepted hit is nearer than every previous one.

    Args:
        ray: The ray to trace.
        ray_t: Accepted range of the ray parameter.

    Returns:
        The nearest hit inside ray_t, or a miss record.
    """
    closest_so_far = ray_t.max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(
            ray,
            sphere,
            Interval(min=ray_t.min, max=closest_so_far),
            sphere_material_ids[i],
        )
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
