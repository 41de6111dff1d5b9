"""Sphere primitive and ray-sphere intersection.

The intersection solves

    |origin + t * direction - center|^2 = radius^2

for t using the half-b form of the quadratic formula. With oc = origin -
center the coefficients are

    a      = dot(direction, direction)
    half_b = dot(oc, direction)
    c      = dot(oc, oc) - radius^2

and the discriminant is half_b^2 - a*c. The nearer root is preferred; the
farther root is only used when the nearer one lies outside the accepted
interval (for example when the ray starts inside the sphere).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> from src.pathtracer.core.vec3 import vec3
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from src.pathtracer.core.interval import Interval, interval_surrounds
from src.pathtracer.core.ray import Ray, ray_at
from src.pathtracer.core.vec3 import dot, length_squared, real, vec3
from src.pathtracer.geometry.hittable import HitRecord, set_face_normal


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: real


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval, material_id: ti.i32) -> HitRecord:
    """Test for ray-sphere intersection.

    A root is accepted only when it lies strictly inside ray_t.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        ray_t: Accepted range of the ray parameter.
        material_id: Material id recorded on a hit.

    Returns:
        A HitRecord; check the hit field to see whether the ray hit.
    """
    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = dot(oc, ray.direction)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        root = (-half_b - sqrtd) / a
        valid = interval_surrounds(ray_t, root)
        if valid == 0:
            root = (-half_b + sqrtd) / a
            valid = interval_surrounds(ray_t, root)

        if valid == 1:
            did_hit = 1
            hit_t = root
            hit_point = ray_at(ray, root)
            outward_normal = (hit_point - sphere.center) / sphere.radius
            front, normal = set_face_normal(ray, outward_normal)
            is_front_face = front
            hit_normal = normal

    result_material = -1
    if did_hit == 1:
        result_material = material_id

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        p=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        material_id=result_material,
    )


@ti.func
def make_sphere(center: vec3, radius: real) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
