"""Unit tests for vector algebra and random sampling.

Tests cover:
- Component-wise arithmetic
- Length, unit vectors and near_zero
- Reflection and refraction
- Random sampling distributions

Note: Imports are done inside test methods so that Taichi is initialized
by the conftest fixture before any kernel is compiled.
"""

import math

import pytest
import taichi as ti

N_SAMPLES = 2000


class TestArithmetic:
    """Tests for basic vector operations."""

    def test_addition_commutes(self):
        """Test that a + b == b + a."""
        from src.pathtracer.core.vec3 import vec3

        ab = ti.Vector.field(3, dtype=ti.f64, shape=())
        ba = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.5, -2.0, 3.25)
            b = vec3(-0.5, 4.0, 0.75)
            ab[None] = a + b
            ba[None] = b + a

        test_kernel()
        for i in range(3):
            assert ab[None][i] == pytest.approx(ba[None][i])
        assert ab[None][0] == pytest.approx(1.0)
        assert ab[None][1] == pytest.approx(2.0)
        assert ab[None][2] == pytest.approx(4.0)

    def test_hadamard_product(self):
        """Test component-wise multiplication used for color tinting."""
        from src.pathtracer.core.vec3 import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = vec3(0.5, 0.25, 2.0) * vec3(0.8, 0.4, 0.5)

        test_kernel()
        assert result[None][0] == pytest.approx(0.4)
        assert result[None][1] == pytest.approx(0.1)
        assert result[None][2] == pytest.approx(1.0)

    def test_dot_and_length(self):
        """Test dot product, length and squared length."""
        from src.pathtracer.core.vec3 import dot, length, length_squared, vec3

        results = ti.field(dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            v = vec3(1.0, 2.0, 2.0)
            results[0] = dot(v, vec3(1.0, 0.0, -1.0))
            results[1] = length_squared(v)
            results[2] = length(v)

        test_kernel()
        assert results[0] == pytest.approx(-1.0)
        assert results[1] == pytest.approx(9.0)
        assert results[2] == pytest.approx(3.0)

    def test_cross_is_orthogonal(self):
        """Test that cross(a, b) is perpendicular to a and b."""
        from src.pathtracer.core.vec3 import cross, dot, vec3

        results = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 2.0, 3.0)
            b = vec3(-2.0, 0.5, 4.0)
            c = cross(a, b)
            results[0] = dot(c, a)
            results[1] = dot(c, b)

        test_kernel()
        assert abs(results[0]) < 1e-9
        assert abs(results[1]) < 1e-9

    def test_cross_right_handed(self):
        """Test that x cross y is z."""
        from src.pathtracer.core.vec3 import cross, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert result[None][0] == pytest.approx(0.0)
        assert result[None][1] == pytest.approx(0.0)
        assert result[None][2] == pytest.approx(1.0)


class TestUnitVector:
    """Tests for unit_vector and near_zero."""

    @pytest.mark.parametrize(
        "v",
        [(3.0, 4.0, 0.0), (1e-3, 2e-3, -5e-4), (100.0, -250.0, 30.0)],
    )
    def test_unit_vector_has_length_one(self, v):
        """Test that unit_vector normalizes nonzero vectors."""
        from src.pathtracer.core.vec3 import length, unit_vector, vec3

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(x: ti.f64, y: ti.f64, z: ti.f64):
            result[None] = length(unit_vector(vec3(x, y, z)))

        test_kernel(*v)
        assert abs(result[None] - 1.0) < 1e-9

    def test_near_zero(self):
        """Test near_zero thresholds."""
        from src.pathtracer.core.vec3 import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(0.0, 0.0, 0.0))
            results[1] = near_zero(vec3(1e-9, -1e-9, 5e-9))
            results[2] = near_zero(vec3(1e-9, 1e-6, 0.0))
            results[3] = near_zero(vec3(1.0, 0.0, 0.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 1
        assert results[2] == 0
        assert results[3] == 0


class TestReflectRefract:
    """Tests for reflect and refract."""

    def test_reflect_off_floor(self):
        """Test reflection of a downward direction off a horizontal surface."""
        from src.pathtracer.core.vec3 import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert result[None][0] == pytest.approx(1.0)
        assert result[None][1] == pytest.approx(1.0)
        assert result[None][2] == pytest.approx(0.0)

    def test_reflect_twice_is_identity(self):
        """Test that reflecting twice returns the original vector."""
        from src.pathtracer.core.vec3 import length, reflect, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        lengths = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(0.3, -1.7, 2.2)
            n = unit_vector(vec3(1.0, 2.0, -0.5))
            once = reflect(v, n)
            result[None] = reflect(once, n)
            lengths[0] = length(v)
            lengths[1] = length(once)

        test_kernel()
        assert result[None][0] == pytest.approx(0.3, abs=1e-9)
        assert result[None][1] == pytest.approx(-1.7, abs=1e-9)
        assert result[None][2] == pytest.approx(2.2, abs=1e-9)
        assert lengths[1] == pytest.approx(lengths[0], abs=1e-9)

    def test_refract_ratio_one_passes_straight_through(self):
        """Test that equal indices of refraction do not bend the ray."""
        from src.pathtracer.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            uv = unit_vector(vec3(1.0, -1.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0)

        test_kernel()
        s = math.sqrt(0.5)
        assert result[None][0] == pytest.approx(s, abs=1e-9)
        assert result[None][1] == pytest.approx(-s, abs=1e-9)
        assert result[None][2] == pytest.approx(0.0, abs=1e-9)

    def test_refract_obeys_snell(self):
        """Test that sin(theta_t) = ratio * sin(theta_i)."""
        from src.pathtracer.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            uv = unit_vector(vec3(1.0, -1.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        length = math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert length == pytest.approx(1.0, abs=1e-9)
        sin_t = r[0] / length
        assert sin_t == pytest.approx(math.sqrt(0.5) / 1.5, abs=1e-9)
        assert r[1] < 0.0

    def test_degrees_to_radians(self):
        """Test the host-side angle conversion."""
        from src.pathtracer.core.vec3 import degrees_to_radians

        assert degrees_to_radians(180.0) == pytest.approx(math.pi)
        assert degrees_to_radians(90.0) == pytest.approx(math.pi / 2.0)


class TestRandomSampling:
    """Tests for the random sampling helpers."""

    def test_random_double_range(self):
        """Test that random_double and random_double_in stay in range."""
        from src.pathtracer.core.vec3 import random_double, random_double_in

        values = ti.field(dtype=ti.f64, shape=N_SAMPLES)
        ranged = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                values[i] = random_double()
                ranged[i] = random_double_in(-3.0, 2.0)

        test_kernel()
        v = values.to_numpy()
        r = ranged.to_numpy()
        assert v.min() >= 0.0 and v.max() < 1.0
        assert r.min() >= -3.0 and r.max() < 2.0
        assert abs(v.mean() - 0.5) < 0.05

    def test_random_vec3_in_range(self):
        """Test component ranges of random vectors."""
        from src.pathtracer.core.vec3 import random_vec3, random_vec3_in

        unit = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)
        ranged = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                unit[i] = random_vec3()
                ranged[i] = random_vec3_in(0.5, 1.0)

        test_kernel()
        u = unit.to_numpy()
        r = ranged.to_numpy()
        assert u.min() >= 0.0 and u.max() < 1.0
        assert r.min() >= 0.5 and r.max() < 1.0

    def test_random_in_unit_sphere_inside(self):
        """Test that unit-ball samples lie strictly inside the ball."""
        from src.pathtracer.core.vec3 import length_squared, random_in_unit_sphere

        lengths = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = length_squared(random_in_unit_sphere())

        test_kernel()
        assert lengths.to_numpy().max() < 1.0

    def test_random_unit_vector_length(self):
        """Test that random unit vectors have unit length and zero mean."""
        from src.pathtracer.core.vec3 import length, random_unit_vector

        samples = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)
        lengths = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                v = random_unit_vector()
                samples[i] = v
                lengths[i] = length(v)

        test_kernel()
        ls = lengths.to_numpy()
        assert abs(ls - 1.0).max() < 1e-9
        mean = samples.to_numpy().mean(axis=0)
        assert abs(mean).max() < 0.1
