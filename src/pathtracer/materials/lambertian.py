"""Lambertian (ideal diffuse) material.

A Lambertian surface scatters toward normal + random_unit_vector(), which
produces a cosine-weighted distribution around the normal. The scattered
ray is always produced; the surface never absorbs a path outright and
instead tints it by its albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.materials.lambertian import add_lambertian_material
    >>> idx = add_lambertian_material((0.5, 0.5, 0.5))
"""

import taichi as ti

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import near_zero, random_unit_vector, real, vec3
from src.pathtracer.geometry.hittable import HitRecord


@ti.dataclass
class LambertianMaterial:
    """Lambertian material properties.

    Attributes:
        albedo: Fraction of light reflected per channel, each in [0, 1].
    """

    albedo: vec3


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Sample a diffuse scatter direction.

    Args:
        albedo: The surface color.
        normal: The unit surface normal at the hit point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). When the
        random offset cancels the normal the direction falls back to the
        normal itself. did_scatter is always 1.
    """
    scatter_direction = normal + random_unit_vector()
    if near_zero(scatter_direction) == 1:
        scatter_direction = normal
    did_scatter = 1
    return scatter_direction, albedo, did_scatter


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 1024

lambertian_albedos = ti.Vector.field(3, dtype=real, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Reset the Lambertian registry."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the registry.

    Args:
        albedo: The diffuse color as (R, G, B), each component in [0, 1].

    Returns:
        The type-local index of the added material.

    Raises:
        ValueError: If any albedo component is outside [0, 1].
        RuntimeError: If the maximum number of materials is exceeded.
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Albedo component {i} = {component} is outside [0, 1]")

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo of a Lambertian material by type-local index."""
    return lambertian_albedos[material_idx]


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord):
    """Scatter off a registered Lambertian material.

    The incoming ray does not influence a diffuse bounce; it is accepted so
    every material shares the same calling convention.
    """
    return scatter_lambertian(get_lambertian_albedo(material_idx), rec.normal)
