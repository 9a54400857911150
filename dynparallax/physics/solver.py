"""
Dynamic parallax: joint estimate of distance and component masses of a visual binary.

The method combines Kepler's Third Law with the main-sequence mass-luminosity
relation. Starting from one solar mass per component, every iteration computes
the physical semi-major axis, the distance implied by the apparent semi-axis,
the absolute magnitudes and luminosities at that distance and finally new
masses. The new masses are fed back until the relative change of the total mass
falls below the requested accuracy or the iteration cap is reached.

Functions:
    iterate_masses: Bounded fixed-point loop over the mass-luminosity relation
    solve: Validation, orbit geometry and fixed-point loop for one Observation
    run_computation: Convenience entry point taking the six observed scalars
    _validate_observation: Input validation with typical-range warnings

Dependencies:
    numpy: Vectorized numerical operations
    logging: Convergence information and warnings
    dataclasses: Result structure
"""

import logging
import numpy as np
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple, Any

from ..config import (
    SEED_MASS_SOLAR, MAX_SOLVER_ITERATIONS, DEFAULT_WANTED_ACCURACY,
    TYPICAL_MAGNITUDE_RANGE, TYPICAL_SEMI_AXIS_RANGE_ARCSEC,
    TYPICAL_BASELINE_RANGE_YEARS, TYPICAL_ACCURACY_RANGE_PERCENT,
    MIN_STELLAR_MASS_SOLAR, MAX_STELLAR_MASS_SOLAR
)
from ..exceptions import (
    ConfigurationError, InvalidObservationError, LuminosityOverflowError, NonPositiveDistanceError
)
from .geometry import OrbitGeometry, compute_orbit_geometry
from .photometry import absolute_magnitude, luminosity_from_magnitude, mass_from_luminosity
from .units import au_to_parsecs, distance_from_angle, kepler_semimajor_axis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    """Observed photometric and astrometric parameters of a visual binary."""
    m1: float                   # apparent magnitude of the primary
    m2: float                   # apparent magnitude of the secondary
    A: float                    # apparent large semi-axis [arcsec]
    B: float                    # apparent small semi-axis [arcsec]
    t: float                    # observation baseline [yr]
    wanted_accuracy: float = DEFAULT_WANTED_ACCURACY  # [percent]


@dataclass(frozen=True)
class IterationRecord:
    """State of one fixed-point iteration."""
    iteration: int
    semimajor_axis_au: float
    distance_pc: float
    abs_mag1: float
    abs_mag2: float
    luminosity1_w: float
    luminosity2_w: float
    mass1_solar: float
    mass2_solar: float
    diff_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'iteration': self.iteration,
            'a': self.semimajor_axis_au,
            'd': self.distance_pc,
            'MAG1': self.abs_mag1,
            'MAG2': self.abs_mag2,
            'L1': self.luminosity1_w,
            'L2': self.luminosity2_w,
            'M1': self.mass1_solar,
            'M2': self.mass2_solar,
            'diff': self.diff_percent
        }


@dataclass(frozen=True)
class FinalResult:
    """Converged estimate: last iteration's photometry and masses plus the period."""
    abs_mag1: float
    abs_mag2: float
    luminosity1_w: float
    luminosity2_w: float
    mass1_solar: float
    mass2_solar: float
    distance_pc: float
    period_years: float

    @property
    def total_mass_solar(self) -> float:
        return self.mass1_solar + self.mass2_solar

    def to_dict(self) -> Dict[str, float]:
        return {
            'MAG1': self.abs_mag1,
            'MAG2': self.abs_mag2,
            'L1': self.luminosity1_w,
            'L2': self.luminosity2_w,
            'M1': self.mass1_solar,
            'M2': self.mass2_solar,
            'd': self.distance_pc,
            'T': self.period_years
        }


@dataclass(frozen=True)
class SolverResult:
    """Complete outcome of one dynamic parallax computation."""
    observation: Observation
    initial_values: OrbitGeometry
    iterations: Tuple[IterationRecord, ...]
    final_result: Optional[FinalResult]
    message: str
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def converged(self) -> bool:
        return self.final_result is not None

    @property
    def n_iterations(self) -> int:
        return len(self.iterations)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain Python types (initialValues / iterationResults / finalResult / message)."""
        return {
            'observation': asdict(self.observation),
            'initialValues': self.initial_values.to_dict(),
            'iterationResults': [record.to_dict() for record in self.iterations],
            'finalResult': self.final_result.to_dict() if self.final_result is not None else None,
            'message': self.message,
            'converged': self.converged,
            'warnings': list(self.warnings)
        }


def _range_warning(label: str, value: float, value_range: Tuple[float, float], unit: str = "") -> Optional[str]:
    lower, upper = value_range
    if lower <= value <= upper:
        return None
    return f"{label} {value}{unit} outside typical range [{lower}, {upper}]"


def _validate_observation(observation: Observation) -> List[str]:
    """
    Validate observed inputs for the dynamic parallax computation.

    Args:
        observation: Observed parameters

    Returns:
        List of warning messages for values outside typical ranges

    Raises:
        InvalidObservationError: If any input is non-finite or violates a hard constraint
    """
    values = asdict(observation)
    for name, value in values.items():
        if not np.isfinite(value):
            raise InvalidObservationError(f"Input {name}={value} must be a finite number")

    if observation.B <= 0:
        raise InvalidObservationError(f"Small semi-axis B={observation.B} must be positive")
    if observation.t <= 0:
        raise InvalidObservationError(f"Observation baseline t={observation.t} years must be positive")
    if observation.wanted_accuracy <= 0:
        raise InvalidObservationError(f"Wanted accuracy {observation.wanted_accuracy}% must be positive")

    checks = [
        _range_warning("Apparent magnitude m1", observation.m1, TYPICAL_MAGNITUDE_RANGE),
        _range_warning("Apparent magnitude m2", observation.m2, TYPICAL_MAGNITUDE_RANGE),
        _range_warning("Large semi-axis A", observation.A, TYPICAL_SEMI_AXIS_RANGE_ARCSEC, '"'),
        _range_warning("Small semi-axis B", observation.B, TYPICAL_SEMI_AXIS_RANGE_ARCSEC, '"'),
        _range_warning("Observation baseline t", observation.t, TYPICAL_BASELINE_RANGE_YEARS, " yr"),
        _range_warning("Wanted accuracy", observation.wanted_accuracy, TYPICAL_ACCURACY_RANGE_PERCENT, "%"),
    ]
    return [warning for warning in checks if warning is not None]


def iterate_masses(m1: float,
                   m2: float,
                   A: float,
                   T: float,
                   wanted_accuracy: float = DEFAULT_WANTED_ACCURACY,
                   max_iterations: Optional[int] = None
                   ) -> Tuple[Tuple[IterationRecord, ...], Optional[FinalResult], str]:
    """
    Fixed-point iteration of masses through the mass-luminosity relation.

    Each step:
        a   = ((AM1 + AM2) T^2)^(1/3)                [AU]
        d   = a / (A x) / 206265, x = 2 pi / 1296000  [pc]
        MAG = m + 5 - 5 log10(d)
        L   = 10^((MAG - 4.83) / -2.5) L_sun
        M   = (L / L_sun)^(1/3.5)
        diff = |AM1 + AM2 - (M1 + M2)| / (AM1 + AM2) * 100

    The first step uses one solar mass per component. The loop stops when
    diff < wanted_accuracy or after max_iterations steps.

    Args:
        m1: Apparent magnitude of the primary.
        m2: Apparent magnitude of the secondary.
        A: Apparent large semi-axis in arcseconds.
        T: Orbital period in years.
        wanted_accuracy: Stopping tolerance in percent.
        max_iterations: Iteration cap. Uses MAX_SOLVER_ITERATIONS if None.

    Returns:
        Tuple of (iteration records, final result or None, status message).

    Raises:
        ConfigurationError: If max_iterations is smaller than 1.
        NonPositiveDistanceError: If an iteration yields a distance that is not positive or not finite.
        LuminosityOverflowError: If an iteration yields luminosities or masses that are not finite.
    """
    max_iterations = max_iterations if max_iterations is not None else MAX_SOLVER_ITERATIONS
    if max_iterations < 1:
        raise ConfigurationError(f"Iteration cap must be at least 1, got {max_iterations}")

    records: List[IterationRecord] = []
    assumed_m1 = SEED_MASS_SOLAR
    assumed_m2 = SEED_MASS_SOLAR

    for iteration in range(1, max_iterations + 1):
        a = kepler_semimajor_axis(T, assumed_m1, assumed_m2)
        d = au_to_parsecs(distance_from_angle(a, A))

        if not (np.isfinite(d) and d > 0):
            raise NonPositiveDistanceError(iteration, float(d), (float(assumed_m1), float(assumed_m2)))

        mag1 = absolute_magnitude(m1, d)
        mag2 = absolute_magnitude(m2, d)

        lum1 = luminosity_from_magnitude(mag1)
        lum2 = luminosity_from_magnitude(mag2)

        mass1 = mass_from_luminosity(lum1)
        mass2 = mass_from_luminosity(lum2)

        if not np.all(np.isfinite([lum1, lum2, mass1, mass2])):
            raise LuminosityOverflowError(iteration, (float(mag1), float(mag2)))

        assumed_total = assumed_m1 + assumed_m2
        diff = abs(assumed_total - (mass1 + mass2)) / assumed_total * 100

        record = IterationRecord(
            iteration=iteration,
            semimajor_axis_au=float(a),
            distance_pc=float(d),
            abs_mag1=float(mag1),
            abs_mag2=float(mag2),
            luminosity1_w=float(lum1),
            luminosity2_w=float(lum2),
            mass1_solar=float(mass1),
            mass2_solar=float(mass2),
            diff_percent=float(diff)
        )
        records.append(record)
        logger.debug(f"Iteration {iteration}: a={record.semimajor_axis_au:.6f} AU, d={record.distance_pc:.6f} pc, "
                     f"M1={record.mass1_solar:.6f}, M2={record.mass2_solar:.6f}, diff={record.diff_percent:.6f}%")

        if diff < wanted_accuracy:
            final_result = FinalResult(
                abs_mag1=record.abs_mag1,
                abs_mag2=record.abs_mag2,
                luminosity1_w=record.luminosity1_w,
                luminosity2_w=record.luminosity2_w,
                mass1_solar=record.mass1_solar,
                mass2_solar=record.mass2_solar,
                distance_pc=record.distance_pc,
                period_years=float(T)
            )
            message = f"Required accuracy {wanted_accuracy:g}% reached after {iteration} iterations!"
            logger.info(message)
            return tuple(records), final_result, message

        assumed_m1 = mass1
        assumed_m2 = mass2

    message = f"Maximum iterations ({max_iterations}) reached without achieving required accuracy."
    logger.warning(message)
    return tuple(records), None, message


def solve(observation: Observation, max_iterations: Optional[int] = None) -> SolverResult:
    """
    Estimate distance and component masses of a visual binary by dynamic parallax.

    Parameters
    ----------
    observation : Observation
        Apparent magnitudes, apparent semi-axes, baseline and wanted accuracy
    max_iterations : int, optional
        Iteration cap, MAX_SOLVER_ITERATIONS by default

    Returns
    -------
    SolverResult
        Initial values, iteration history, final result (only when converged),
        status message and warnings

    Raises
    ------
    InvalidObservationError
        If an input is non-finite, B or t is not positive, or the accuracy is not positive
    InvalidGeometryError
        If A < B or the swept area is degenerate; raised before any iteration
    NonPositiveDistanceError
        If an iteration produces a non-positive or non-finite distance
    LuminosityOverflowError
        If an iteration produces luminosities or masses that are not finite
    ConfigurationError
        If max_iterations is smaller than 1

    Notes
    -----
    Non-convergence within the iteration cap is not an error: the result then
    carries the full partial history, no final result and a status message.
    """
    warnings = _validate_observation(observation)
    for warning in warnings:
        logger.warning(warning)

    geometry = compute_orbit_geometry(observation.A, observation.B, observation.t)

    records, final_result, message = iterate_masses(
        observation.m1, observation.m2, observation.A, geometry.period_years,
        wanted_accuracy=observation.wanted_accuracy,
        max_iterations=max_iterations
    )

    if final_result is not None:
        for mass, label in [(final_result.mass1_solar, "Primary"), (final_result.mass2_solar, "Secondary")]:
            if not (MIN_STELLAR_MASS_SOLAR <= mass <= MAX_STELLAR_MASS_SOLAR):
                warning = f"{label} mass ({mass:.3f} M☉) outside typical stellar range"
                logger.warning(warning)
                warnings.append(warning)

    return SolverResult(
        observation=observation,
        initial_values=geometry,
        iterations=records,
        final_result=final_result,
        message=message,
        warnings=tuple(warnings)
    )


def run_computation(m1: float,
                    m2: float,
                    A: float,
                    B: float,
                    t: float,
                    wanted_accuracy: float = DEFAULT_WANTED_ACCURACY) -> SolverResult:
    """Run the dynamic parallax computation for six observed scalars."""
    return solve(Observation(m1=m1, m2=m2, A=A, B=B, t=t, wanted_accuracy=wanted_accuracy))
