"""Metal (specular reflective) material implementation.

This module implements mirror reflection with optional fuzz. The reflection
formula is:
    R = I - 2(I . N)N

where I is the unit incident direction and N is the surface normal. Fuzzy
metals perturb R by fuzz * random_unit_vector(). A perturbed direction that
ends up at or below the surface is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.materials.metal import add_metal_material
    >>> idx = add_metal_material((0.7, 0.6, 0.5), fuzz=0.0)
"""

import taichi as ti

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import dot, random_unit_vector, real, reflect, unit_vector, vec3
from src.pathtracer.geometry.hittable import HitRecord


@ti.dataclass
class MetalMaterial:
    """Metal material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Perturbation radius in [0, 1]. 0 is a perfect mirror.
    """

    albedo: vec3
    fuzz: real


@ti.func
def scatter_metal(albedo: vec3, fuzz: real, incident_direction: vec3, normal: vec3):
    """Compute the scattered direction for a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: The fuzz radius in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is 0 if the scattered direction does not point away from
        the surface.
    """
    reflected = reflect(unit_vector(incident_direction), normal)
    scattered_direction = reflected + fuzz * random_unit_vector()

    did_scatter = 0
    if dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 1024

metal_albedos = ti.Vector.field(3, dtype=real, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=real, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Reset the metal registry."""
    num_metal_materials[None] = 0


def add_metal_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Add a metal material to the registry.

    Args:
        albedo: The reflective color as (R, G, B), each component in [0, 1].
        fuzz: The fuzz radius. Values above 1 are clamped to 1.

    Returns:
        The type-local index of the added material.

    Raises:
        ValueError: If any albedo component is outside [0, 1].
        ValueError: If fuzz is negative.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Albedo component {i} = {component} is outside [0, 1]")

    if fuzz < 0.0:
        raise ValueError(f"Fuzz = {fuzz} must not be negative")
    fuzz = min(fuzz, 1.0)

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzes[idx] = fuzz
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> real:
    """Get the fuzz for a metal material by index."""
    return metal_fuzzes[material_idx]


@ti.func
def scatter_metal_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord):
    """Scatter off a registered metal material.

    Args:
        material_idx: The type-local index of the material.
        ray_in: The incoming ray.
        rec: The hit record at the surface.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    return scatter_metal(
        get_metal_albedo(material_idx),
        get_metal_fuzz(material_idx),
        ray_in.direction,
        rec.normal,
    )
