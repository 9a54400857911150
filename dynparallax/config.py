"""
Configuration constants for the dynamic parallax solver.

This module centralizes all configuration parameters used throughout the application,
making them easily configurable and maintainable.
"""

import math

# Physical Constants
ABS_MAG_SUN = 4.83                  # Absolute visual magnitude of the Sun
LUMINOSITY_SUN_W = 3.83e26          # Solar luminosity [W]
MASS_LUMINOSITY_EXPONENT = 3.5      # L ~ M^3.5 for main-sequence stars

# Unit Conversions
ARCSEC_PER_DEGREE = 3600.0
DEGREES_PER_CIRCLE = 360.0
ARCSEC_TO_RAD = (2 * math.pi) / (DEGREES_PER_CIRCLE * ARCSEC_PER_DEGREE)  # ~1/206265
AU_PER_PARSEC = 206265.0

# Solver Configuration
SEED_MASS_SOLAR = 1.0               # Both components start at one solar mass
MAX_SOLVER_ITERATIONS = 100         # Hard cap on fixed-point iterations
DEFAULT_WANTED_ACCURACY = 1.0       # Stopping tolerance [percent]

# Orbit Geometry Validation
MIN_PARTIAL_ELLIPSE_AREA = 1e-12    # arcsec^2, below this the period blows up

# Default Observation (visual binary used as the worked example)
DEFAULT_OBSERVATION = {
    'm1': 3.9,
    'm2': 5.3,
    'A': 4.5,
    'B': 3.4,
    't': 11.0,
    'wanted_accuracy': DEFAULT_WANTED_ACCURACY
}

# Typical Input Ranges
# Values outside these ranges are accepted but produce warnings
TYPICAL_MAGNITUDE_RANGE = (-30.0, 10.0)
TYPICAL_SEMI_AXIS_RANGE_ARCSEC = (0.1, 10.0)
TYPICAL_BASELINE_RANGE_YEARS = (1.0, 20.0)
TYPICAL_ACCURACY_RANGE_PERCENT = (0.1, 5.0)

# Physical Result Ranges
MIN_STELLAR_MASS_SOLAR = 0.08       # Brown dwarf limit
MAX_STELLAR_MASS_SOLAR = 200.0      # Upper main sequence limit

# Logging Configuration
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']

# I/O Configuration
ENCODING_FALLBACK_ORDER = ['utf-8', 'latin-1']
REQUIRED_OBSERVATION_COLUMNS = ['m1', 'm2', 'A', 'B', 't']
JSON_INDENT = 2

# Export Format Configuration
EXPORT_FORMATS = {
    'csv': {
        'name': 'CSV (Comma Separated Values)',
        'extension': '.csv',
        'description': 'Iteration table compatible with spreadsheets and pandas'
    },
    'json': {
        'name': 'JSON (JavaScript Object Notation)',
        'extension': '.json',
        'description': 'Complete result including initial values and final summary'
    },
    'ecsv': {
        'name': 'ECSV (Enhanced Character Separated Values)',
        'extension': '.ecsv',
        'description': 'Astropy text table with column units and metadata'
    },
    'fits': {
        'name': 'FITS (Flexible Image Transport System)',
        'extension': '.fits',
        'description': 'Astronomical standard format for tables and images'
    },
    'votable': {
        'name': 'VOTable (Virtual Observatory Table)',
        'extension': '.xml',
        'description': 'Virtual Observatory standard for astronomical data exchange'
    }
}

# Astropy table formats for each export key
ASTROPY_TABLE_FORMATS = {
    'ecsv': 'ascii.ecsv',
    'fits': 'fits',
    'votable': 'votable'
}

# === CLI Configuration ===
CLI_DISPLAY_LINE_WIDTH = 110
CLI_HEADER_CHAR = "="
CLI_SUBHEADER_CHAR = "-"
CLI_COLUMN_SEPARATOR = " | "
CLI_ERROR_SUMMARY_MAX_IDS = 5

# Exit codes
CLI_EXIT_OK = 0
CLI_EXIT_ERROR = 1
CLI_EXIT_NOT_CONVERGED = 2

# Display precision, matching the published tables
CLI_GEOMETRY_PRECISION = 2          # h, S, eps, T in the computed values section
CLI_AXIS_PRECISION = 3              # a [AU]
CLI_DISTANCE_PRECISION = 3          # d [pc]
CLI_MAGNITUDE_PRECISION = 2         # absolute magnitudes
CLI_LUMINOSITY_PRECISION = 2        # luminosities, exponent notation
CLI_MASS_PRECISION = 3              # masses [solar]
CLI_DIFF_PRECISION = 4              # relative change [percent]
CLI_PERIOD_PRECISION = 3            # T [yr] in the final result table

# Iteration table layout: (record key, header, width, format spec)
CLI_ITERATION_COLUMNS = [
    ('iteration', 'Iteration', 9, 'd'),
    ('a', 'a [AU]', 10, f'.{CLI_AXIS_PRECISION}f'),
    ('d', 'd [pc]', 10, f'.{CLI_DISTANCE_PRECISION}f'),
    ('MAG1', 'MAG1', 7, f'.{CLI_MAGNITUDE_PRECISION}f'),
    ('MAG2', 'MAG2', 7, f'.{CLI_MAGNITUDE_PRECISION}f'),
    ('L1', 'L1 [W]', 9, f'.{CLI_LUMINOSITY_PRECISION}e'),
    ('L2', 'L2 [W]', 9, f'.{CLI_LUMINOSITY_PRECISION}e'),
    ('M1', 'M1', 7, f'.{CLI_MASS_PRECISION}f'),
    ('M2', 'M2', 7, f'.{CLI_MASS_PRECISION}f'),
    ('diff', 'Diff (%)', 9, f'.{CLI_DIFF_PRECISION}f'),
]

# Batch error categories
BATCH_ERROR_KEYS = {
    'INVALID_GEOMETRY': 'invalid_geometry',
    'INVALID_INPUT': 'invalid_input',
    'NUMERICAL_ERROR': 'numerical_error'
}
