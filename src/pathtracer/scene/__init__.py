"""Scene module for sphere storage, materials and scene construction.

Components:
    intersection: Sphere storage in Taichi fields and nearest-hit queries
    manager: Unified material ids and the SceneManager builder
    random_spheres: The default random spheres scene
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    get_material_type,
    get_material_type_index,
    load_scene_file,
)
from .random_spheres import create_random_spheres_scene

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "load_scene_file",
    # Random spheres module
    "create_random_spheres_scene",
]
