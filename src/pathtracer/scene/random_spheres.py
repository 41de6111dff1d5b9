"""Random spheres scene configuration.

This module builds the default scene: a large grey ground sphere, a grid of
small randomly placed spheres with random materials, and three large feature
spheres (glass, diffuse brown and polished metal) in the middle.

Small spheres sit on a 22 x 22 grid of cells, (a, b) in [-11, 11)^2, each
jittered by up to 0.9 inside its cell at height 0.2 (radius 0.2). Cells whose
sphere would be within 0.9 of (4, 0.2, 0) are left empty so the metal feature
sphere stays unobstructed. Each small sphere draws its material:

- 80%: Lambertian with albedo random_color * random_color
- 15%: Metal with albedo uniform in [0.5, 1) and fuzz uniform in [0, 0.5)
- 5%: Glass with index of refraction 1.5

All glass spheres share a single dielectric material.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.random_spheres import create_random_spheres_scene
    >>> scene, camera = create_random_spheres_scene(seed=42)
"""

import numpy as np

from src.pathtracer.camera.camera import CameraConfig
from src.pathtracer.scene.manager import SceneManager

# =============================================================================
# Scene Parameters
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

# Small spheres fill cells (a, b) for a, b in [-GRID_EXTENT, GRID_EXTENT)
GRID_EXTENT = 11
SMALL_RADIUS = 0.2
CELL_JITTER = 0.9

# Small spheres closer than this to KEEP_CLEAR_POINT are skipped
KEEP_CLEAR_POINT = np.array([4.0, 0.2, 0.0])
KEEP_CLEAR_DISTANCE = 0.9

DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.15

GLASS_IR = 1.5

FEATURE_RADIUS = 1.0
FEATURE_GLASS_CENTER = (0.0, 1.0, 0.0)
FEATURE_DIFFUSE_CENTER = (-4.0, 1.0, 0.0)
FEATURE_DIFFUSE_ALBEDO = (0.4, 0.2, 0.1)
FEATURE_METAL_CENTER = (4.0, 1.0, 0.0)
FEATURE_METAL_ALBEDO = (0.7, 0.6, 0.5)


def _random_color(rng: np.random.Generator, low: float = 0.0, high: float = 1.0) -> np.ndarray:
    return rng.uniform(low, high, size=3)


def _as_tuple(values: np.ndarray) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


def _add_small_sphere_material(
    scene: SceneManager, rng: np.random.Generator, glass_material: int
) -> int:
    """Draw the material for one small sphere and return its material id."""
    choose_mat = rng.random()
    if choose_mat < DIFFUSE_PROBABILITY:
        albedo = _random_color(rng) * _random_color(rng)
        return scene.add_lambertian_material(_as_tuple(albedo))
    if choose_mat < DIFFUSE_PROBABILITY + METAL_PROBABILITY:
        albedo = _random_color(rng, 0.5, 1.0)
        fuzz = float(rng.uniform(0.0, 0.5))
        return scene.add_metal_material(_as_tuple(albedo), fuzz)
    return glass_material


def create_random_spheres_scene(
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    camera: CameraConfig | None = None,
) -> tuple[SceneManager, CameraConfig]:
    """Create the random spheres scene.

    Replaces whatever scene is currently loaded.

    Args:
        seed: Seed for the scene layout. Ignored when rng is given. None
            draws fresh entropy, giving a different layout on every call.
        rng: Explicit random generator to draw the layout from.
        camera: Camera to return alongside the scene. Defaults to
            CameraConfig(), the view the scene is composed for.

    Returns:
        Tuple of (scene, camera).
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)

    glass = scene.add_dielectric_material(GLASS_IR)

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            center = np.array(
                [
                    a + CELL_JITTER * rng.random(),
                    SMALL_RADIUS,
                    b + CELL_JITTER * rng.random(),
                ]
            )
            if np.linalg.norm(center - KEEP_CLEAR_POINT) > KEEP_CLEAR_DISTANCE:
                material_id = _add_small_sphere_material(scene, rng, glass)
                scene.add_sphere(_as_tuple(center), SMALL_RADIUS, material_id)

    scene.add_sphere(FEATURE_GLASS_CENTER, FEATURE_RADIUS, glass)
    scene.add_lambertian_sphere(FEATURE_DIFFUSE_CENTER, FEATURE_RADIUS, FEATURE_DIFFUSE_ALBEDO)
    scene.add_metal_sphere(FEATURE_METAL_CENTER, FEATURE_RADIUS, FEATURE_METAL_ALBEDO, 0.0)

    if camera is None:
        camera = CameraConfig()
    return scene, camera
