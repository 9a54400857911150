"""
Tests for dynparallax.physics.geometry module.

Test cases for the apparent orbit geometry: linear eccentricity, full and
partial ellipse areas, period scaling and the combined geometry helper.
"""

import math

import numpy as np
import pytest

from dynparallax.physics.geometry import (
    OrbitGeometry,
    compute_orbit_geometry,
    eccentricity_param,
    ellipse_area,
    partial_ellipse_area,
    period
)
from dynparallax.exceptions import InvalidGeometryError, InvalidObservationError


class TestEccentricityParam:
    """Test the linear eccentricity h = sqrt(A^2 - B^2)."""

    def test_reference_orbit(self):
        """Test h for the worked example orbit A=4.5, B=3.4."""
        h = eccentricity_param(4.5, 3.4)
        assert isinstance(h, float)
        assert h == pytest.approx(math.sqrt(4.5 ** 2 - 3.4 ** 2))
        assert h == pytest.approx(2.953, abs=0.01)

    def test_circle_has_zero_eccentricity(self):
        """Test that equal semi-axes give h = 0."""
        assert eccentricity_param(2.0, 2.0) == 0.0

    @pytest.mark.parametrize("A,B", [(4.5, 3.4), (10.0, 0.1), (1.0, 0.999), (0.5, 0.5), (7.0, 1e-6)])
    def test_bounded_by_large_semi_axis(self, A, B):
        """Test that 0 <= h <= A for valid ellipses."""
        h = eccentricity_param(A, B)
        assert 0.0 <= h <= A

    def test_swapped_axes_raise(self):
        """Test that A < B is rejected instead of clamped."""
        with pytest.raises(InvalidGeometryError, match="must not be smaller"):
            eccentricity_param(3.0, 4.0)

    def test_vectorized_input(self):
        """Test that arrays are processed element-wise."""
        A = np.array([4.5, 5.0, 2.0])
        B = np.array([3.4, 3.0, 2.0])
        h = eccentricity_param(A, B)
        assert isinstance(h, np.ndarray)
        np.testing.assert_allclose(h, [math.sqrt(8.69), 4.0, 0.0])

    def test_vectorized_input_with_invalid_element(self):
        """Test that one invalid element rejects the whole array."""
        with pytest.raises(InvalidGeometryError):
            eccentricity_param(np.array([4.5, 1.0]), np.array([3.4, 2.0]))


class TestEllipseArea:
    """Test the full ellipse area S = pi A B."""

    def test_reference_area(self):
        """Test S for the worked example orbit."""
        assert ellipse_area(4.5, 3.4) == pytest.approx(48.066, abs=1e-3)

    @pytest.mark.parametrize("A,B", [(4.5, 3.4), (1.0, 0.2), (9.9, 9.9)])
    def test_symmetry(self, A, B):
        """Test that swapping the semi-axes does not change the area."""
        assert ellipse_area(A, B) == pytest.approx(ellipse_area(B, A))
        assert ellipse_area(A, B) == pytest.approx(math.pi * A * B)


class TestPartialEllipseArea:
    """Test the area swept beyond the focus."""

    def test_reference_partial_area(self):
        """Test eps against the closed-form expression."""
        A, B = 4.5, 3.4
        h = math.sqrt(A ** 2 - B ** 2)
        expected = A * B * (math.acos(h / A) - (h / A ** 2) * math.sqrt(A ** 2 - h ** 2))
        assert partial_ellipse_area(A, B, h) == pytest.approx(expected)
        assert partial_ellipse_area(A, B, h) == pytest.approx(5.5317, abs=1e-3)

    def test_circle_gives_half_area(self):
        """Test that a circle (h = 0) is split in two halves."""
        assert partial_ellipse_area(3.0, 3.0, 0.0) == pytest.approx(ellipse_area(3.0, 3.0) / 2)

    def test_partial_area_smaller_than_full_area(self):
        """Test that eps never exceeds S."""
        for A, B in [(4.5, 3.4), (10.0, 1.0), (2.0, 1.9)]:
            h = eccentricity_param(A, B)
            assert 0.0 < partial_ellipse_area(A, B, h) <= ellipse_area(A, B)

    def test_h_larger_than_A_raises(self):
        """Test that h > A is rejected instead of producing NaN."""
        with pytest.raises(InvalidGeometryError, match="outside valid range"):
            partial_ellipse_area(4.5, 3.4, 5.0)

    def test_negative_h_raises(self):
        """Test that negative h is rejected."""
        with pytest.raises(InvalidGeometryError):
            partial_ellipse_area(4.5, 3.4, -0.1)


class TestPeriod:
    """Test the period T = t S / eps."""

    def test_simple_ratio(self):
        """Test that a quarter of the orbit in 5 years gives a 20 year period."""
        assert period(5.0, 4.0, 1.0) == pytest.approx(20.0)

    @pytest.mark.parametrize("eps", [0.0, -1.0, float('nan'), float('inf'), 1e-15])
    def test_degenerate_partial_area_raises(self, eps):
        """Test that zero, negative, non-finite and tiny eps are explicit errors."""
        with pytest.raises(InvalidGeometryError, match="too small"):
            period(11.0, 48.0, eps)


class TestComputeOrbitGeometry:
    """Test the combined geometry helper."""

    def test_reference_geometry(self):
        """Test all derived quantities for A=4.5, B=3.4, t=11."""
        geometry = compute_orbit_geometry(4.5, 3.4, 11.0)

        assert isinstance(geometry, OrbitGeometry)
        assert geometry.eccentricity_param == pytest.approx(math.sqrt(8.69))
        assert geometry.ellipse_area == pytest.approx(48.066, abs=1e-3)
        assert geometry.period_years == pytest.approx(
            11.0 * geometry.ellipse_area / geometry.partial_area
        )
        assert geometry.period_years == pytest.approx(95.58, abs=0.05)

    def test_circular_orbit_period_is_twice_baseline(self):
        """Test that half an orbit is swept when the focus is at the centre."""
        geometry = compute_orbit_geometry(2.0, 2.0, 7.0)
        assert geometry.period_years == pytest.approx(14.0)

    def test_to_dict_keys(self):
        """Test the serialized names of the initial values."""
        geometry = compute_orbit_geometry(4.5, 3.4, 11.0)
        data = geometry.to_dict()
        assert set(data) == {'h', 'S', 'eps', 'T'}
        assert data['T'] == geometry.period_years

    def test_swapped_axes(self):
        """Test that A=3, B=4 raises an invalid-geometry error."""
        with pytest.raises(InvalidGeometryError):
            compute_orbit_geometry(3.0, 4.0, 11.0)

    def test_needle_ellipse_raises(self):
        """Test that a vanishing small semi-axis cannot produce a period."""
        with pytest.raises(InvalidGeometryError):
            compute_orbit_geometry(4.5, 1e-9, 11.0)

    @pytest.mark.parametrize("B,t", [(0.0, 11.0), (-1.0, 11.0), (3.4, 0.0), (3.4, -2.0)])
    def test_non_positive_inputs(self, B, t):
        """Test that B and t must be positive."""
        with pytest.raises(InvalidObservationError, match="must be positive"):
            compute_orbit_geometry(4.5, B, t)

    def test_geometry_is_immutable(self):
        """Test that derived geometry cannot be modified."""
        geometry = compute_orbit_geometry(4.5, 3.4, 11.0)
        with pytest.raises(AttributeError):
            geometry.period_years = 1.0
