"""Geometry module for shape primitives.

Components:
    hittable: Hit record shared by all intersection routines
    sphere: Sphere primitive with ray-sphere intersection

All intersection routines are Taichi functions. A miss is reported as a
HitRecord with hit == 0.
"""

from .hittable import HitRecord, make_miss_record, set_face_normal
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "make_miss_record",
    "set_face_normal",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]
