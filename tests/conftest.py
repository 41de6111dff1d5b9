"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field declared by already imported modules.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and render target state around each test."""
    # Import here so modules declaring fields load after ti.init()
    from src.pathtracer.core.integrator import reset_render_target
    from src.pathtracer.materials.dielectric import clear_dielectric_materials
    from src.pathtracer.materials.lambertian import clear_lambertian_materials
    from src.pathtracer.materials.metal import clear_metal_materials
    from src.pathtracer.scene.intersection import clear_scene
    from src.pathtracer.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()
        reset_render_target()

    _clear_all()
    yield
    _clear_all()
