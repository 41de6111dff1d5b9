"""Taichi-based Monte Carlo path tracer for scenes of spheres.

This package renders spheres with diffuse, metal and glass materials under a
sky gradient, using Taichi kernels on the CPU backend:
- Iterative path tracing with a fixed bounce limit
- Lambertian, metal (fuzzy reflection) and dielectric (refraction) materials
- Look-at camera with jittered anti-aliasing
- Plain PPM and PNG output

Subpackages:
    core: Vector utilities, rays, intervals, the integrator and the renderer
    geometry: Hit records and the sphere primitive
    materials: Scattering models and their parameter registries
    scene: Sphere storage, scene management and the default scene
    camera: Camera model with primary ray generation
    output: Image writers
"""

__version__ = "0.1.0"
