"""Unit tests for the Ray model, wavelength colours and ray sources."""

import numpy as np
import pytest

from lenstrace import (
    RGB,
    Ray,
    create_parallel_source,
    create_point_source,
    normalize,
    wavelength_to_rgb,
)


class TestNormalize:
    """Tests for normalize."""

    @pytest.mark.parametrize("vector", [[3.0, 4.0], [-1e-6, 2e-6], [1e6, -1.0], [0.0, -7.5]])
    def test_unit_length(self, vector):
        assert np.linalg.norm(normalize(vector)) == pytest.approx(1.0, abs=1e-12)

    def test_keeps_direction(self):
        np.testing.assert_allclose(normalize([3.0, 4.0]), [0.6, 0.8])

    def test_zero_vector_raises(self):
        with pytest.raises(ValueError):
            normalize([0.0, 0.0])


class TestRay:
    """Tests for Ray construction and path bookkeeping."""

    def test_direction_is_normalized(self):
        ray = Ray(origin=[1.0, 2.0], direction=[10.0, 10.0])
        assert np.linalg.norm(ray.direction) == pytest.approx(1.0)
        np.testing.assert_allclose(ray.direction, [np.sqrt(0.5), np.sqrt(0.5)])

    def test_starts_with_single_vertex(self):
        ray = Ray(origin=[1.0, 2.0], direction=[1.0, 0.0])
        assert len(ray.path) == 1
        assert ray.hits == []
        assert ray.last_hit is None
        np.testing.assert_allclose(ray.origin, [1.0, 2.0])

    def test_defaults(self):
        ray = Ray(origin=[0.0, 0.0], direction=[0.0, 1.0])
        assert ray.wavelength == 550.0
        assert ray.intensity == 1.0

    def test_wavelength_and_intensity_not_validated(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0], wavelength=-20.0, intensity=3.0)
        assert ray.wavelength == -20.0
        assert ray.intensity == 3.0

    def test_zero_direction_raises(self):
        with pytest.raises(ValueError):
            Ray(origin=[0.0, 0.0], direction=[0.0, 0.0])

    def test_non_2d_origin_raises(self):
        with pytest.raises(ValueError):
            Ray(origin=[0.0, 0.0, 0.0], direction=[1.0, 0.0])

    def test_point_at_extrapolates_from_last_vertex(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0])
        ray.add_hit([2.0, 0.0], [-1.0, 0.0], 1.0, 1.5)
        np.testing.assert_allclose(ray.point_at(3.0), [5.0, 0.0])

    def test_add_hit_keeps_invariant(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0])
        for x in (1.0, 2.0, 3.0):
            ray.add_hit([x, 0.0], [-1.0, 0.0], 1.0, 1.5)
            assert len(ray.path) == len(ray.hits) + 1
        np.testing.assert_allclose(ray.origin, [3.0, 0.0])
        np.testing.assert_allclose(ray.last_hit.point, [3.0, 0.0])

    def test_add_hit_computes_missing_distance(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0])
        ray.add_hit([3.0, 4.0], [-1.0, 0.0], 1.0, 1.5)
        assert ray.last_hit.distance == pytest.approx(5.0)

    def test_add_hit_keeps_given_distance(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0])
        ray.add_hit([3.0, 4.0], [-1.0, 0.0], 1.0, 1.5, distance=7.0)
        hit = ray.last_hit
        assert hit.distance == 7.0
        assert hit.refractive_index_before == 1.0
        assert hit.refractive_index_after == 1.5

    def test_set_direction_normalizes(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0])
        ray.set_direction([0.0, -5.0])
        np.testing.assert_allclose(ray.direction, [0.0, -1.0])

    def test_copy_is_independent(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0], wavelength=450.0, intensity=0.5)
        ray.add_hit([1.0, 0.0], [-1.0, 0.0], 1.0, 1.5)
        clone = ray.copy()

        clone.add_hit([2.0, 0.0], [-1.0, 0.0], 1.5, 1.0)
        clone.set_direction([0.0, 1.0])

        assert len(ray.path) == 2
        assert len(ray.hits) == 1
        np.testing.assert_allclose(ray.direction, [1.0, 0.0])
        assert clone.wavelength == 450.0
        assert clone.intensity == 0.5

    def test_from_angle(self):
        ray = Ray.from_angle([0.0, 0.0], 30.0)
        np.testing.assert_allclose(ray.direction, [np.cos(np.pi / 6), 0.5])
        assert ray.angle_from_axis_degrees() == pytest.approx(30.0)

    def test_from_two_points(self):
        ray = Ray.from_two_points([-10.0, 0.0], [0.0, 10.0])
        np.testing.assert_allclose(ray.direction, [np.sqrt(0.5), np.sqrt(0.5)])
        np.testing.assert_allclose(ray.origin, [-10.0, 0.0])

    def test_repr(self):
        ray = Ray(origin=[-10.0, 0.0], direction=[1.0, 0.0])
        assert repr(ray) == "Ray at [-10.0000, 0.0000], direction [1.0000, 0.0000], λ=550.0 nm"


class TestWavelengthToRGB:
    """Tests for the wavelength to colour mapping."""

    @pytest.mark.parametrize("wavelength", [350.0, 379.9, 700.1, 750.0, 0.0, -10.0])
    def test_outside_visible_range_is_black(self, wavelength):
        assert wavelength_to_rgb(wavelength) == RGB(0, 0, 0)

    def test_green_peak(self):
        color = wavelength_to_rgb(550.0)
        assert color != RGB(0, 0, 0)
        assert color.g == 255
        assert color.g > color.r
        assert color.b == 0

    def test_violet_edge_is_dimmed(self):
        assert wavelength_to_rgb(400.0) == RGB(46, 0, 76)
        assert wavelength_to_rgb(380.0) == RGB(76, 0, 76)

    def test_deep_red(self):
        assert wavelength_to_rgb(680.0) == RGB(204, 0, 0)
        assert wavelength_to_rgb(700.0) == RGB(204, 0, 0)

    def test_blue(self):
        color = wavelength_to_rgb(470.0)
        assert color.r == 0
        assert color.b == 255
        assert 0 < color.g < 255

    def test_intensity_scales_channels(self):
        assert wavelength_to_rgb(550.0, intensity=0.5).g == 127
        assert wavelength_to_rgb(550.0, intensity=0.0) == RGB(0, 0, 0)

    def test_channels_are_clamped(self):
        color = wavelength_to_rgb(550.0, intensity=2.0)
        assert color.g == 255
        assert all(0 <= c <= 255 for c in color)

    def test_ray_color_uses_wavelength_and_intensity(self):
        ray = Ray(origin=[0.0, 0.0], direction=[1.0, 0.0], wavelength=550.0, intensity=0.5)
        assert ray.color == wavelength_to_rgb(550.0, 0.5)


class TestPointSource:
    """Tests for create_point_source."""

    def test_rays_start_at_center(self):
        rays = create_point_source(ray_count=3, center=[-10.0, 0.0], aperture_size=1.0)
        assert len(rays) == 3
        for ray in rays:
            np.testing.assert_allclose(ray.origin, [-10.0, 0.0])

    def test_rays_cross_aperture_points(self):
        rays = create_point_source(ray_count=3, center=[-10.0, 0.0], aperture_size=1.0)
        for ray, height in zip(rays, (-0.5, 0.0, 0.5)):
            t = 10.0 / ray.direction[0]
            np.testing.assert_allclose(ray.point_at(t), [0.0, height], atol=1e-12)

    def test_single_ray_on_axis(self):
        rays = create_point_source(ray_count=1, center=[-5.0, 1.0], aperture_x=5.0,
                                   aperture_size=4.0)
        assert len(rays) == 1
        np.testing.assert_allclose(rays[0].direction, normalize([10.0, -1.0]))

    def test_wavelength_assigned(self):
        rays = create_point_source(ray_count=4, wavelength=450.0)
        assert all(ray.wavelength == 450.0 for ray in rays)

    def test_invalid_ray_count(self):
        with pytest.raises(ValueError):
            create_point_source(ray_count=0)

    def test_negative_aperture(self):
        with pytest.raises(ValueError):
            create_point_source(aperture_size=-1.0)


class TestParallelSource:
    """Tests for create_parallel_source."""

    def test_on_axis_beam(self):
        rays = create_parallel_source(ray_count=3, aperture_size=2.0, start_offset=10.0)
        for ray, height in zip(rays, (-1.0, 0.0, 1.0)):
            np.testing.assert_allclose(ray.origin, [-10.0, height])
            np.testing.assert_allclose(ray.direction, [1.0, 0.0])

    def test_tilted_beam_is_collimated(self):
        rays = create_parallel_source(ray_count=5, angle=10.0, aperture_x=2.0)
        expected = [np.cos(np.radians(10.0)), np.sin(np.radians(10.0))]
        for ray in rays:
            np.testing.assert_allclose(ray.direction, expected, atol=1e-12)

    def test_rays_reach_aperture_after_offset(self):
        rays = create_parallel_source(ray_count=2, angle=30.0, aperture_x=1.0,
                                      aperture_size=2.0, start_offset=4.0)
        for ray, height in zip(rays, (-1.0, 1.0)):
            np.testing.assert_allclose(ray.point_at(4.0), [1.0, height], atol=1e-12)
