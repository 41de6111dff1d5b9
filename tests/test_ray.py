"""Unit tests for the Ray struct and the Interval helpers."""

import pytest
import taichi as ti


class TestRay:
    """Tests for Ray construction and evaluation."""

    def test_ray_at(self):
        """Test that ray_at returns origin + t * direction."""
        from src.pathtracer.core.ray import Ray, ray_at
        from src.pathtracer.core.vec3 import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, -2.0, 0.5))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        p = result[None]
        assert p[0] == pytest.approx(1.0)
        assert p[1] == pytest.approx(-3.0)
        assert p[2] == pytest.approx(4.25)

    def test_make_ray_keeps_direction_unnormalized(self):
        """Test that make_ray stores the direction as given."""
        from src.pathtracer.core.ray import make_ray
        from src.pathtracer.core.vec3 import vec3

        origin = ti.Vector.field(3, dtype=ti.f64, shape=())
        direction = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -4.0))
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel()
        assert direction[None][2] == pytest.approx(-4.0)
        assert origin[None][0] == pytest.approx(0.0)


class TestInterval:
    """Tests for Interval queries."""

    def test_surrounds_excludes_bounds(self):
        """Test that surrounds is strict on both ends."""
        from src.pathtracer.core.interval import interval_surrounds, make_interval

        results = ti.field(dtype=ti.i32, shape=4)

        @ti.kernel
        def test_kernel():
            iv = make_interval(0.001, 10.0)
            results[0] = interval_surrounds(iv, 0.001)
            results[1] = interval_surrounds(iv, 10.0)
            results[2] = interval_surrounds(iv, 5.0)
            results[3] = interval_surrounds(iv, 0.0)

        test_kernel()
        assert results[0] == 0
        assert results[1] == 0
        assert results[2] == 1
        assert results[3] == 0

    def test_contains_includes_bounds(self):
        """Test that contains is inclusive on both ends."""
        from src.pathtracer.core.interval import interval_contains, make_interval

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = make_interval(-1.0, 1.0)
            results[0] = interval_contains(iv, -1.0)
            results[1] = interval_contains(iv, 1.0)
            results[2] = interval_contains(iv, 1.5)

        test_kernel()
        assert results[0] == 1
        assert results[1] == 1
        assert results[2] == 0

    @pytest.mark.parametrize("x", [-5.0, -0.0001, 0.0, 0.5, 0.999, 1.0, 42.0])
    def test_clamp_lands_in_range(self, x):
        """Test that clamp always lands in [min, max] and keeps inner values."""
        from src.pathtracer.core.interval import interval_clamp, make_interval

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(value: ti.f64):
            result[None] = interval_clamp(make_interval(0.0, 0.999), value)

        test_kernel(x)
        clamped = result[None]
        assert 0.0 <= clamped <= pytest.approx(0.999)
        if 0.0 <= x <= 0.999:
            assert clamped == pytest.approx(x)

    def test_empty_interval_surrounds_nothing(self):
        """Test the empty interval rejects every finite value."""
        from src.pathtracer.core.interval import (
            empty_interval,
            interval_contains,
            interval_surrounds,
        )

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = empty_interval()
            results[0] = interval_surrounds(iv, 0.0)
            results[1] = interval_contains(iv, 1e30)
            results[2] = interval_contains(iv, -1e30)

        test_kernel()
        assert results[0] == 0
        assert results[1] == 0
        assert results[2] == 0

    def test_size(self):
        """Test that size is max - min."""
        from src.pathtracer.core.interval import interval_size, make_interval

        result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = interval_size(make_interval(-1.5, 2.0))

        test_kernel()
        assert result[None] == pytest.approx(3.5)

    def test_universe_interval_surrounds_everything_finite(self):
        """Test the universe interval accepts any finite value."""
        from src.pathtracer.core.interval import interval_surrounds, universe_interval

        results = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            iv = universe_interval()
            results[0] = interval_surrounds(iv, 1e30)
            results[1] = interval_surrounds(iv, -1e30)

        test_kernel()
        assert results[0] == 1
        assert results[1] == 1
