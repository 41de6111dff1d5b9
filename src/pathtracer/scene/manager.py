"""Unified scene manager for coordinating spheres and materials.

This module provides a high-level scene management API that coordinates
sphere storage with material assignment. It tracks which material type
(Lambertian, Metal, Dielectric) each material id corresponds to, enabling
material dispatch in the integrator.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- Methods for adding spheres with materials in one call
- Declarative scene dictionaries for loading scenes from JSON

Any number of spheres may share one material id. Materials are read-only
once a render starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat_id = scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=mat_id)
"""

import json
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any

import taichi as ti

from src.pathtracer.materials.dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
)
from src.pathtracer.materials.lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
)
from src.pathtracer.materials.metal import (
    add_metal_material,
    clear_metal_materials,
)
from src.pathtracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used by the integrator to pick the scattering function for a hit.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = 3072  # 1024 per type * 3 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material id.

    Args:
        material_id: The unified material id.

    Returns:
        The material type as an integer (see MaterialType).
        Returns -1 for invalid material ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material id.

    Returns:
        The index into the type-specific registry, or -1 for invalid ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material id.
        material_type: The type of material.
        type_index: The index within the type-specific registry.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene."""

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """Declarative scene description.

    Attributes:
        materials: Material entries, each with a "type" key plus parameters.
            Material ids are assigned in list order.
        spheres: Sphere entries with "center", "radius" and "material_id".
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_number(value: Any, name: str) -> float:
    """Convert a scalar scene parameter to float."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a three-element list into a float tuple."""
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"{name} must be a list of 3 numbers, got {values!r}")
    if len(values) != 3:
        raise ValueError(f"{name} must have exactly 3 components, got {len(values)}")
    return (
        _as_number(values[0], name),
        _as_number(values[1], name),
        _as_number(values[2], name),
    )


def _as_entries(entries: Any, name: str) -> list[dict[str, Any]]:
    """Check that a scene section is a list of JSON objects."""
    if not isinstance(entries, list):
        raise ValueError(f"{name} must be a list, got {type(entries).__name__}")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{name}[{i}] must be an object, got {entry!r}")
    return entries


class SceneManager:
    """Scene builder with a unified material id space.

    Creating a SceneManager clears the global scene and material fields, so
    only one scene is live at a time.

    Attributes:
        materials: MaterialInfo for every registered material, by id.
        spheres: SphereInfo for every sphere, in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> red = scene.add_lambertian_material(albedo=(0.8, 0.1, 0.1))
        >>> gold = scene.add_metal_material(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
        >>> glass = scene.add_dielectric_material(ir=1.5)
        >>> scene.add_sphere((0, 0, -1), 0.5, red)
        >>> scene.add_sphere((1, 0, -1), 0.5, gold)
        >>> scene.add_sphere((-1, 0, -1), 0.5, glass)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.spheres.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres and materials)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        """Assign a unified material id to a type-local registry entry."""
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        return material_id

    def add_lambertian_material(self, albedo: tuple[float, float, float]) -> int:
        """Add a Lambertian (diffuse) material to the scene.

        Args:
            albedo: The diffuse color as (R, G, B), each component in [0, 1].

        Returns:
            The unified material id for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        type_index = add_lambertian_material(albedo)
        return self._register_material(
            MaterialType.LAMBERTIAN, type_index, {"albedo": list(albedo)}
        )

    def add_metal_material(self, albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
        """Add a metal material to the scene.

        Args:
            albedo: The reflective color as (R, G, B), each component in [0, 1].
            fuzz: The fuzz radius. Values above 1 are clamped to 1.

        Returns:
            The unified material id for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1] or fuzz
                is negative.
        """
        type_index = add_metal_material(albedo, fuzz)
        return self._register_material(
            MaterialType.METAL,
            type_index,
            {"albedo": list(albedo), "fuzz": min(fuzz, 1.0)},
        )

    def add_dielectric_material(self, ir: float = 1.5) -> int:
        """Add a dielectric (glass/water) material to the scene.

        Args:
            ir: Index of refraction. Default is 1.5 (glass).

        Returns:
            The unified material id for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If ir is not positive.
        """
        type_index = add_dielectric_material(ir)
        return self._register_material(MaterialType.DIELECTRIC, type_index, {"ir": ir})

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by id, or None if unknown."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Sphere Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material_id: The unified material id to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or radius is not positive.
        """
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

        sphere_index = add_sphere(center, radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=(center[0], center[1], center[2]),
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new Lambertian material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new metal material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_metal_material(albedo, fuzz)
        return self.add_sphere(center, radius, material_id), material_id

    def add_dielectric_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        ir: float = 1.5,
    ) -> tuple[int, int]:
        """Add a sphere with a new dielectric material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_dielectric_material(ir)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for mat in self.materials:
            config.materials.append({"type": mat.material_type.name.lower(), **mat.params})

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Materials are registered before
        spheres so sphere entries can refer to them by list position.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains an unknown material
                type, an invalid material id or invalid parameters.
        """
        self.clear()

        for mat_config in _as_entries(config.materials, "materials"):
            mat_type = str(mat_config.get("type", "")).lower()
            if mat_type == "lambertian":
                albedo = _as_triple(mat_config.get("albedo", [0.5, 0.5, 0.5]), "albedo")
                self.add_lambertian_material(albedo)
            elif mat_type == "metal":
                albedo = _as_triple(mat_config.get("albedo", [0.8, 0.8, 0.8]), "albedo")
                self.add_metal_material(albedo, _as_number(mat_config.get("fuzz", 0.0), "fuzz"))
            elif mat_type == "dielectric":
                self.add_dielectric_material(_as_number(mat_config.get("ir", 1.5), "ir"))
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        for sphere_config in _as_entries(config.spheres, "spheres"):
            center = _as_triple(sphere_config.get("center", [0.0, 0.0, 0.0]), "center")
            radius = _as_number(sphere_config.get("radius", 1.0), "radius")
            material_id = sphere_config.get("material_id", 0)
            if not isinstance(material_id, int) or isinstance(material_id, bool):
                raise ValueError(f"material_id must be an integer, got {material_id!r}")
            self.add_sphere(center, radius, material_id)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {"materials": config.materials, "spheres": config.spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'materials' and 'spheres' keys."""
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
        )
        self.from_config(config)

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS


def load_scene_file(path: str | Path) -> SceneManager:
    """Build a scene from a JSON file in the SceneManager.to_dict() format.

    Args:
        path: Path to the JSON scene description.

    Returns:
        A SceneManager holding the loaded scene.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or describes an invalid scene.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a JSON object")
    scene = SceneManager()
    scene.from_dict(data)
    return scene
