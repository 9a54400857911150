"""
Geometry of the apparent relative orbit of a visual binary.

The observed orbit is described by its apparent large and small semi-axes A and B
(arcseconds). During an observation baseline t the companion sweeps the part of
the ellipse beyond the focus, and Kepler's second law scales that partial area up
to the full orbital period.

Functions:
    eccentricity_param: Linear eccentricity h = sqrt(A^2 - B^2)
    ellipse_area: Full ellipse area S = pi A B
    partial_ellipse_area: Area swept during the observation
    period: Orbital period T = t S / eps
    compute_orbit_geometry: All of the above for one observation

Dependencies:
    numpy: Vectorized numerical operations
    logging: Geometry diagnostics
    dataclasses: Result structure
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Union

from ..config import MIN_PARTIAL_ELLIPSE_AREA
from ..exceptions import InvalidGeometryError, InvalidObservationError

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class OrbitGeometry:
    """Quantities derived from the apparent orbit and the observation baseline."""
    eccentricity_param: float    # h [arcsec]
    ellipse_area: float          # S [arcsec^2]
    partial_area: float          # eps [arcsec^2]
    period_years: float          # T [yr]

    def to_dict(self) -> Dict[str, float]:
        return {
            'h': self.eccentricity_param,
            'S': self.ellipse_area,
            'eps': self.partial_area,
            'T': self.period_years
        }


def _finish(result: np.ndarray, input_is_scalar: bool) -> ArrayLike:
    # Return scalar if input was scalar (consistent API)
    if input_is_scalar:
        return float(result.item())
    return result


def eccentricity_param(A: ArrayLike, B: ArrayLike) -> ArrayLike:
    """
    Linear eccentricity of the apparent ellipse, h = sqrt(A^2 - B^2).

    Args:
        A: Apparent large semi-axis in arcseconds.
        B: Apparent small semi-axis in arcseconds.

    Returns:
        Distance from the centre to the focus in arcseconds.

    Raises:
        InvalidGeometryError: If A < B anywhere.
    """
    input_is_scalar = np.isscalar(A) and np.isscalar(B)
    A_arr = np.asarray(A, dtype=float)
    B_arr = np.asarray(B, dtype=float)

    if np.any(A_arr < B_arr):
        raise InvalidGeometryError(
            f"Large semi-axis A={A} must not be smaller than small semi-axis B={B}"
        )

    return _finish(np.sqrt(A_arr ** 2 - B_arr ** 2), input_is_scalar)


def ellipse_area(A: ArrayLike, B: ArrayLike) -> ArrayLike:
    """Area of the full ellipse, S = pi A B."""
    return np.pi * A * B


def partial_ellipse_area(A: ArrayLike, B: ArrayLike, h: ArrayLike) -> ArrayLike:
    """
    Area of the ellipse segment cut off at the focus.

    eps = A B (acos(h/A) - (h/A^2) sqrt(A^2 - h^2))

    Args:
        A: Apparent large semi-axis in arcseconds.
        B: Apparent small semi-axis in arcseconds.
        h: Linear eccentricity in arcseconds, 0 <= h <= A.

    Returns:
        Partial area in square arcseconds.

    Raises:
        InvalidGeometryError: If h lies outside [0, A].
    """
    input_is_scalar = np.isscalar(A) and np.isscalar(B) and np.isscalar(h)
    A_arr = np.asarray(A, dtype=float)
    B_arr = np.asarray(B, dtype=float)
    h_arr = np.asarray(h, dtype=float)

    if np.any(h_arr < 0) or np.any(h_arr > A_arr) or not np.all(np.isfinite(h_arr)):
        raise InvalidGeometryError(f"Eccentricity parameter h={h} outside valid range [0, A={A}]")

    eps = A_arr * B_arr * (np.arccos(h_arr / A_arr)
                           - (h_arr / A_arr ** 2) * np.sqrt(A_arr ** 2 - h_arr ** 2))
    return _finish(eps, input_is_scalar)


def period(t: ArrayLike, S: ArrayLike, eps: ArrayLike) -> ArrayLike:
    """
    Orbital period from Kepler's second law, T = t S / eps.

    Args:
        t: Observation baseline in years.
        S: Full ellipse area.
        eps: Area swept during the baseline.

    Returns:
        Orbital period in years.

    Raises:
        InvalidGeometryError: If eps is not a finite value above MIN_PARTIAL_ELLIPSE_AREA.
    """
    input_is_scalar = np.isscalar(t) and np.isscalar(S) and np.isscalar(eps)
    eps_arr = np.asarray(eps, dtype=float)

    if not np.all(np.isfinite(eps_arr)) or np.any(eps_arr <= MIN_PARTIAL_ELLIPSE_AREA):
        raise InvalidGeometryError(
            f"Partial ellipse area eps={eps} is too small to derive a period "
            f"(minimum {MIN_PARTIAL_ELLIPSE_AREA})"
        )

    T = np.asarray(t, dtype=float) * np.asarray(S, dtype=float) / eps_arr
    return _finish(T, input_is_scalar)


def compute_orbit_geometry(A: float, B: float, t: float) -> OrbitGeometry:
    """
    Derive h, S, eps and T for one observation.

    Args:
        A: Apparent large semi-axis in arcseconds.
        B: Apparent small semi-axis in arcseconds, must be positive.
        t: Observation baseline in years, must be positive.

    Returns:
        OrbitGeometry with all four derived quantities.

    Raises:
        InvalidObservationError: If B or t is not positive.
        InvalidGeometryError: If the ellipse is impossible or degenerate.
    """
    if not B > 0:
        raise InvalidObservationError(f"Small semi-axis B={B} must be positive")
    if not t > 0:
        raise InvalidObservationError(f"Observation baseline t={t} years must be positive")

    h = eccentricity_param(A, B)
    S = ellipse_area(A, B)
    eps = partial_ellipse_area(A, B, h)
    T = period(t, S, eps)

    logger.debug(f"Orbit geometry for A={A}, B={B}, t={t}: h={h:.6f}, S={S:.6f}, eps={eps:.6f}, T={T:.6f}")

    return OrbitGeometry(
        eccentricity_param=h,
        ellipse_area=float(S),
        partial_area=eps,
        period_years=T
    )
