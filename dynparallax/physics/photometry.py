"""
Photometric relations anchoring the dynamic parallax method.

Absolute magnitudes follow from the distance modulus, luminosities from the
Pogson relation referenced to the Sun, and masses from the empirical
main-sequence mass-luminosity power law L ~ M^3.5.

Functions:
    absolute_magnitude: Distance modulus m - M = 5 log10(d) - 5
    luminosity_from_magnitude: Pogson relation relative to the Sun
    mass_from_luminosity: Inverse mass-luminosity relation

Dependencies:
    numpy: Vectorized numerical operations
"""

import numpy as np
from typing import Union

from ..config import (
    ABS_MAG_SUN, LUMINOSITY_SUN_W, MASS_LUMINOSITY_EXPONENT
)

ArrayLike = Union[float, np.ndarray]


def absolute_magnitude(apparent_mag: ArrayLike, distance_pc: ArrayLike) -> ArrayLike:
    """
    Absolute magnitude from the apparent magnitude and the distance.

    Args:
        apparent_mag: Apparent magnitude.
        distance_pc: Distance in parsecs, must be positive.

    Returns:
        Absolute magnitude M = m + 5 - 5 log10(d).
    """
    return apparent_mag + 5.0 - 5.0 * np.log10(distance_pc)


def luminosity_from_magnitude(abs_mag: ArrayLike) -> ArrayLike:
    """
    Bolometric-like luminosity in Watts from an absolute magnitude.

    L = 10^((M - M_sun) / -2.5) * L_sun

    Magnitudes far brighter than any star overflow to inf; callers check finiteness.
    """
    with np.errstate(over='ignore'):
        return np.power(10.0, (abs_mag - ABS_MAG_SUN) / -2.5) * LUMINOSITY_SUN_W


def mass_from_luminosity(luminosity_w: ArrayLike) -> ArrayLike:
    """
    Stellar mass in solar masses from luminosity in Watts.

    Inverts L / L_sun = (M / M_sun)^3.5.
    """
    return np.power(luminosity_w / LUMINOSITY_SUN_W, 1.0 / MASS_LUMINOSITY_EXPONENT)
