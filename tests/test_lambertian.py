"""Unit tests for the Lambertian material module.

Tests cover:
- Scatter direction lies in the hemisphere around the normal
- Attenuation equals albedo and the surface always scatters
- Material registry operations and validation
- Scattering through the registry by type-local index
"""

import pytest
import taichi as ti

N_SAMPLES = 1000


class TestScatterLambertian:
    """Tests for scatter_lambertian."""

    def test_scatter_direction_in_hemisphere(self):
        """Test that scattered directions never point below the surface."""
        from src.pathtracer.core.vec3 import dot, vec3
        from src.pathtracer.materials.lambertian import scatter_lambertian

        cosines = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                normal = vec3(0.0, 1.0, 0.0)
                direction, _, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                cosines[i] = dot(direction, normal)

        test_kernel()
        assert cosines.to_numpy().min() >= -1e-5

    def test_mean_direction_follows_normal(self):
        """Test that the average scatter direction is the normal."""
        from src.pathtracer.core.vec3 import vec3
        from src.pathtracer.materials.lambertian import scatter_lambertian

        directions = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                normal = vec3(0.0, 0.0, 1.0)
                direction, _, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                directions[i] = direction

        test_kernel()
        mean = directions.to_numpy().mean(axis=0)
        assert abs(mean[0]) < 0.1
        assert abs(mean[1]) < 0.1
        assert abs(mean[2] - 1.0) < 0.1

    def test_attenuation_equals_albedo_and_always_scatters(self):
        """Test that the albedo is returned as attenuation."""
        from src.pathtracer.core.vec3 import vec3
        from src.pathtracer.materials.lambertian import scatter_lambertian

        attenuation = ti.Vector.field(3, dtype=ti.f64, shape=())
        scattered = ti.field(dtype=ti.i32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                _, atten, did_scatter = scatter_lambertian(
                    vec3(0.8, 0.3, 0.1), vec3(1.0, 0.0, 0.0)
                )
                scattered[i] = did_scatter
                if i == 0:
                    attenuation[None] = atten

        test_kernel()
        a = attenuation[None]
        assert abs(a[0] - 0.8) < 1e-6
        assert abs(a[1] - 0.3) < 1e-6
        assert abs(a[2] - 0.1) < 1e-6
        assert scattered.to_numpy().min() == 1


class TestLambertianRegistry:
    """Tests for the Lambertian material registry."""

    def test_add_and_get_material(self):
        """Test adding a material and reading its albedo back."""
        from src.pathtracer.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_albedo,
        )

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        idx = add_lambertian_material((0.2, 0.4, 0.6))

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            result[None] = get_lambertian_albedo(mat_idx)

        test_kernel(idx)
        r = result[None]
        assert idx == 0
        assert abs(r[0] - 0.2) < 1e-6
        assert abs(r[1] - 0.4) < 1e-6
        assert abs(r[2] - 0.6) < 1e-6

    def test_material_count(self):
        """Test that the count tracks additions and clearing."""
        from src.pathtracer.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        assert get_lambertian_material_count() == 0
        add_lambertian_material((0.1, 0.1, 0.1))
        second = add_lambertian_material((0.9, 0.9, 0.9))
        assert second == 1
        assert get_lambertian_material_count() == 2
        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    @pytest.mark.parametrize("albedo", [(-0.1, 0.5, 0.5), (0.5, 1.5, 0.5)])
    def test_albedo_out_of_range_rejected(self, albedo):
        """Test that albedo components outside [0, 1] raise ValueError."""
        from src.pathtracer.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError):
            add_lambertian_material(albedo)

    def test_scatter_by_id(self):
        """Test scattering through the registry uses the stored albedo."""
        from src.pathtracer.core.ray import Ray
        from src.pathtracer.core.vec3 import dot, vec3
        from src.pathtracer.geometry.hittable import HitRecord
        from src.pathtracer.materials.lambertian import (
            add_lambertian_material,
            scatter_lambertian_by_id,
        )

        add_lambertian_material((0.9, 0.9, 0.9))
        idx = add_lambertian_material((0.1, 0.7, 0.3))

        attenuation = ti.Vector.field(3, dtype=ti.f64, shape=())
        cosine = ti.field(dtype=ti.f64, shape=())
        scattered = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            ray = Ray(origin=vec3(0.0, 1.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
            rec = HitRecord(
                hit=1,
                t=1.0,
                p=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 1.0, 0.0),
                front_face=1,
                material_id=0,
            )
            direction, atten, did_scatter = scatter_lambertian_by_id(mat_idx, ray, rec)
            attenuation[None] = atten
            cosine[None] = dot(direction, rec.normal)
            scattered[None] = did_scatter

        test_kernel(idx)
        a = attenuation[None]
        assert abs(a[0] - 0.1) < 1e-6
        assert abs(a[1] - 0.7) < 1e-6
        assert abs(a[2] - 0.3) < 1e-6
        assert cosine[None] >= -1e-5
        assert scattered[None] == 1
