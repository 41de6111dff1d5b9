"""Dielectric (glass/water) material implementation.

This module implements clear dielectrics that either reflect or refract.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The choice between reflection and refraction is random, with reflection
chosen with probability equal to the Schlick reflectance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.materials.dielectric import add_dielectric_material
    >>> glass = add_dielectric_material(1.5)
"""

import taichi as ti

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import (
    dot,
    random_double,
    real,
    reflect,
    refract,
    unit_vector,
    vec3,
)
from src.pathtracer.geometry.hittable import HitRecord


@ti.dataclass
class DielectricMaterial:
    """Dielectric material properties.

    Attributes:
        ir: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ir: real


@ti.func
def schlick_reflectance(cosine: real, ref_idx: real) -> real:
    """Schlick's approximation of Fresnel reflectance.

        R(theta) = R0 + (1 - R0)(1 - cos(theta))^5
        R0 = ((1 - ref_idx) / (1 + ref_idx))^2

    Args:
        cosine: Cosine of the angle between the incident ray and the normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The reflectance in [0, 1].
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def scatter_dielectric(ir: real, incident_direction: vec3, normal: vec3, front_face: ti.i32):
    """Compute the scattered direction for a dielectric surface.

    Args:
        ir: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the ray enters the material, 0 if it exits.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The
        attenuation is white and did_scatter is always 1.
    """
    refraction_ratio = ir
    if front_face == 1:
        refraction_ratio = 1.0 / ir

    unit_direction = unit_vector(incident_direction)
    cos_theta = ti.min(-dot(unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    direction = vec3(0.0, 0.0, 0.0)
    cannot_refract = refraction_ratio * sin_theta > 1.0
    if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > random_double():
        direction = reflect(unit_direction, normal)
    else:
        direction = refract(unit_direction, normal, refraction_ratio)

    attenuation = vec3(1.0, 1.0, 1.0)
    did_scatter = 1
    return direction, attenuation, did_scatter


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

dielectric_irs = ti.field(dtype=real, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Reset the dielectric registry."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(ir: float = 1.5) -> int:
    """Add a dielectric material to the registry.

    Args:
        ir: Index of refraction. Default is 1.5 (glass).

    Returns:
        The type-local index of the added material.

    Raises:
        ValueError: If ir is not positive.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    if ir <= 0.0:
        raise ValueError(f"Index of refraction = {ir} must be positive")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_irs[idx] = ir
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ir(material_idx: ti.i32) -> real:
    """Get the index of refraction for a dielectric material by index."""
    return dielectric_irs[material_idx]


@ti.func
def scatter_dielectric_by_id(material_idx: ti.i32, ray_in: Ray, rec: HitRecord):
    """Scatter off a registered dielectric material."""
    return scatter_dielectric(
        get_dielectric_ir(material_idx),
        ray_in.direction,
        rec.normal,
        rec.front_face,
    )
