"""
Custom exceptions for the dynamic parallax solver.

This module defines domain-specific exceptions used throughout the application
to provide clear error context and enable precise error handling.
"""

import math


class DynamicParallaxError(Exception):
    """Base exception for all dynamic parallax errors."""
    pass


class InvalidObservationError(DynamicParallaxError):
    """Raised when observed input values are outside valid ranges."""
    pass


class InvalidGeometryError(InvalidObservationError):
    """Raised when the apparent orbit ellipse is geometrically impossible."""
    pass


class NumericalInstabilityError(DynamicParallaxError):
    """Raised when numerical computations become unstable."""
    pass


class NonPositiveDistanceError(NumericalInstabilityError):
    """Raised when a solver iteration produces a distance that is not positive or not finite."""

    def __init__(self, iteration, distance_pc, assumed_masses, message=None):
        self.iteration = iteration
        self.distance_pc = distance_pc
        self.assumed_masses = assumed_masses
        if message is None:
            problem = "is not positive" if math.isfinite(distance_pc) else "is not finite"
            message = (f"Iteration {iteration}: distance {distance_pc!r} pc {problem} "
                       f"(assumed masses M1={assumed_masses[0]!r}, M2={assumed_masses[1]!r})")
        super().__init__(message)


class LuminosityOverflowError(NumericalInstabilityError):
    """Raised when the luminosities or masses of an iteration are not finite."""

    def __init__(self, iteration, abs_magnitudes, message=None):
        self.iteration = iteration
        self.abs_magnitudes = abs_magnitudes
        if message is None:
            message = (f"Iteration {iteration}: luminosity or mass is not finite "
                       f"(absolute magnitudes MAG1={abs_magnitudes[0]!r}, MAG2={abs_magnitudes[1]!r})")
        super().__init__(message)


class ConfigurationError(DynamicParallaxError):
    """Raised when command line or export configuration is invalid."""
    pass


__all__ = [
    'DynamicParallaxError',
    'InvalidObservationError',
    'InvalidGeometryError',
    'NumericalInstabilityError',
    'NonPositiveDistanceError',
    'LuminosityOverflowError',
    'ConfigurationError'
]
