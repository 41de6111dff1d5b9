"""Vector algebra and random sampling utilities for the path tracer.

This module provides the 3D vector helpers used throughout the renderer.
Points and colors share the vector type: ``point3`` and ``color`` are aliases
of ``vec3`` so call sites can say what a value means without any conversion
cost.

Component-wise arithmetic (add, subtract, negate, scalar multiply/divide and
the Hadamard product used for color tinting) comes directly from the Taichi
vector type. The functions here add the geometric operations and the Monte
Carlo sampling primitives. All of them are Taichi functions and must be
called from within kernels.

Randomness comes from Taichi's per-thread generator, seeded through
``ti.init(random_seed=...)``, so parallel workers never share random state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.core.vec3 import reflect, unit_vector, vec3
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(unit_vector(vec3(1.0, -1.0, 0.0)), vec3(0.0, 1.0, 0.0))
"""

import math

import taichi as ti
import taichi.math as tm

# Bounce origins on the radius-1000 ground sphere need double precision
real = ti.f64

# ti.math.vec3 is always single precision
vec3 = ti.types.vector(3, real)
point3 = vec3
color = vec3

# Components below this magnitude count as zero
NEAR_ZERO_EPSILON = 1e-8

# Upper bound on rejection-sampling attempts (acceptance rate is ~52%)
MAX_REJECTION_ATTEMPTS = 64


def degrees_to_radians(degrees: float) -> float:
    """Convert an angle from degrees to radians."""
    return degrees * math.pi / 180.0


# =============================================================================
# Geometric Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Compute the squared length of a vector.

    Prefer this over length() when only comparing magnitudes, as it avoids
    the square root.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Unlike tm.normalize there is no special case for the zero vector: a zero
    input produces non-finite components.

    Args:
        v: The input vector.

    Returns:
        v / |v|.
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is close to zero in all dimensions.

    Used to catch degenerate scatter directions.

    Args:
        v: The vector to check.

    Returns:
        1 if every component is below NEAR_ZERO_EPSILON in magnitude, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    result = 0
    if ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s:
        result = 1
    return result


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect a vector about a normal.

    Computes v - 2(v . n)n. The normal should be unit length.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The surface normal.

    Returns:
        The reflected direction.
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: real) -> vec3:
    """Refract a unit vector through a surface using Snell's law.

    The refracted ray is split into the components perpendicular and parallel
    to the normal:

        r_perp     = eta * (uv + cos_theta * n)
        r_parallel = -sqrt(|1 - |r_perp|^2|) * n

    Callers are expected to rule out total internal reflection first.

    Args:
        uv: The incoming direction (unit length).
        n: The surface normal, on the same side as the incoming ray.
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction.
    """
    cos_theta = ti.min(-tm.dot(uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_double() -> real:
    """Return a uniform random number in [0, 1)."""
    return ti.random(real)


@ti.func
def random_double_in(min_value: real, max_value: real) -> real:
    """Return a uniform random number in [min_value, max_value)."""
    return min_value + (max_value - min_value) * ti.random(real)


@ti.func
def random_vec3() -> vec3:
    """Return a vector with each component uniform in [0, 1)."""
    return vec3(ti.random(real), ti.random(real), ti.random(real))


@ti.func
def random_vec3_in(min_value: real, max_value: real) -> vec3:
    """Return a vector with each component uniform in [min_value, max_value)."""
    return vec3(
        random_double_in(min_value, max_value),
        random_double_in(min_value, max_value),
        random_double_in(min_value, max_value),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a uniformly distributed point inside the unit ball.

    Uses rejection sampling: candidates are drawn from the [-1, 1) cube until
    one has squared length below 1.

    Returns:
        A random point with length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if found == 0:
            candidate = random_vec3_in(-1.0, 1.0)
            if length_squared(candidate) < 1.0:
                p = candidate
                found = 1
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector uniformly distributed on the sphere."""
    return unit_vector(random_in_unit_sphere())
