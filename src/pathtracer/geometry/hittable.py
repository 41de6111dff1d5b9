"""Hit record shared by every ray-surface intersection.

Taichi functions cannot return an optional value, so a miss is a HitRecord
with ``hit == 0``. Every other field is meaningful only when ``hit == 1``.
"""

import taichi as ti

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vec3 import dot, real, vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 on a miss.
        t: The ray parameter of the intersection.
        p: The intersection point.
        normal: Unit surface normal, always facing against the incoming ray.
        front_face: 1 if the ray arrived from the outside of the surface.
        material_id: Unified material id of the surface that was hit,
            -1 when no surface was hit.
    """

    hit: ti.i32
    t: real
    p: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def set_face_normal(ray: Ray, outward_normal: vec3):
    """Orient a geometric normal against the incoming ray.

    Args:
        ray: The incoming ray.
        outward_normal: The unit normal pointing out of the surface.

    Returns:
        A tuple of (front_face, normal). front_face is 1 when the ray hits the
        outside of the surface, in which case normal is the outward normal;
        otherwise normal is flipped.
    """
    front_face = 0
    normal = -outward_normal
    if dot(ray.direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        p=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )
