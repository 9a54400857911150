"""
Unit conversions used by the dynamic parallax solver.

Angles are measured in arcseconds, lengths in astronomical units and parsecs,
periods in years and masses in solar masses. All functions operate on scalars
or numpy arrays.

Functions:
    arcsec_to_radians: Converts an angle from arcseconds to radians
    distance_from_angle: Distance at which a length subtends a given angle
    au_to_parsecs: Converts astronomical units to parsecs
    kepler_semimajor_axis: Kepler's Third Law in solar-mass/AU/year units

Dependencies:
    numpy: Vectorized numerical operations
"""

import numpy as np
from typing import Union

from ..config import ARCSEC_TO_RAD, AU_PER_PARSEC

ArrayLike = Union[float, np.ndarray]


def arcsec_to_radians(angle_arcsec: ArrayLike) -> ArrayLike:
    """Converts an angle in arcseconds to radians."""
    return angle_arcsec * ARCSEC_TO_RAD


def distance_from_angle(length_au: ArrayLike, angle_arcsec: ArrayLike) -> ArrayLike:
    """
    Distance at which a physical length subtends the observed angle.

    Small-angle approximation: distance = length / angle[rad].

    Args:
        length_au: Physical length (e.g. semi-major axis) in AU.
        angle_arcsec: Apparent angular size of that length in arcseconds.

    Returns:
        Distance in AU.
    """
    return length_au / arcsec_to_radians(angle_arcsec)


def au_to_parsecs(distance_au: ArrayLike) -> ArrayLike:
    """Converts a distance in astronomical units to parsecs."""
    return distance_au / AU_PER_PARSEC


def kepler_semimajor_axis(period_years: ArrayLike,
                          mass1_solar: ArrayLike,
                          mass2_solar: ArrayLike) -> ArrayLike:
    """
    Semi-major axis of a relative orbit from Kepler's Third Law.

    a^3 = (M1 + M2) * P^2, with a in AU, P in years and masses in solar masses.

    Args:
        period_years: Orbital period in years.
        mass1_solar: Mass of the primary in solar masses.
        mass2_solar: Mass of the secondary in solar masses.

    Returns:
        Semi-major axis in AU.
    """
    return np.power((mass1_solar + mass2_solar) * period_years ** 2, 1.0 / 3.0)
