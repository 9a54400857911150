# dynparallax/analyzer/engine.py
"""
Batch engine for dynamic parallax computations.

This module solves a table of observations row by row with per-row error
handling. It is completely independent of CLI concerns and can be reused in
other contexts.
"""

import logging
from typing import Any, Dict, List, Tuple

import pandas as pd

from ..config import DEFAULT_WANTED_ACCURACY, BATCH_ERROR_KEYS
from ..exceptions import (
    InvalidGeometryError, InvalidObservationError, NumericalInstabilityError
)
from ..physics.solver import Observation, SolverResult, solve

log = logging.getLogger(__name__)


def observation_from_row(row: pd.Series) -> Observation:
    """
    Build an Observation from a table row.

    Args:
        row: Row with m1, m2, A, B, t and optionally wanted_accuracy

    Returns:
        Observation with float fields

    Raises:
        InvalidObservationError: If a value cannot be interpreted as a number
    """
    accuracy = row.get('wanted_accuracy', DEFAULT_WANTED_ACCURACY)
    if pd.isna(accuracy):
        accuracy = DEFAULT_WANTED_ACCURACY

    try:
        return Observation(
            m1=float(row['m1']),
            m2=float(row['m2']),
            A=float(row['A']),
            B=float(row['B']),
            t=float(row['t']),
            wanted_accuracy=float(accuracy)
        )
    except (TypeError, ValueError) as e:
        raise InvalidObservationError(f"Non-numeric observation value: {e}")


def summarize_result(name: str, result: SolverResult) -> Dict[str, Any]:
    """Flatten a solver result into one row for batch output."""
    summary = {'name': name}
    summary.update({
        'm1': result.observation.m1,
        'm2': result.observation.m2,
        'A': result.observation.A,
        'B': result.observation.B,
        't': result.observation.t,
        'wanted_accuracy': result.observation.wanted_accuracy
    })
    summary.update(result.initial_values.to_dict())
    summary['iterations'] = result.n_iterations
    summary['converged'] = result.converged
    summary['last_diff'] = result.iterations[-1].diff_percent if result.iterations else None

    final = result.final_result.to_dict() if result.final_result is not None else {}
    for key in ('d', 'MAG1', 'MAG2', 'L1', 'L2', 'M1', 'M2'):
        summary[key] = final.get(key)

    summary['message'] = result.message
    summary['warnings'] = '; '.join(result.warnings)
    return summary


def solve_observations(df: pd.DataFrame) -> Tuple[List[Dict[str, Any]], Dict[str, List[str]]]:
    """
    Solve every observation of a table independently.

    Args:
        df: Observations with columns m1, m2, A, B, t and optionally
            wanted_accuracy and name

    Returns:
        Tuple of (summary rows for solved observations,
                  error type -> names of observations that failed)
    """
    results = []
    error_summary: Dict[str, List[str]] = {}

    log.info(f"Solving {len(df)} observations...")

    for position, (_, row) in enumerate(df.iterrows(), 1):
        name = row.get('name')
        name = str(name) if name is not None and not pd.isna(name) else f"row_{position}"

        try:
            observation = observation_from_row(row)
            result = solve(observation)
        except InvalidGeometryError as e:
            log.warning(f"{name}: invalid geometry: {e}")
            error_summary.setdefault(BATCH_ERROR_KEYS['INVALID_GEOMETRY'], []).append(name)
            continue
        except InvalidObservationError as e:
            log.warning(f"{name}: invalid input: {e}")
            error_summary.setdefault(BATCH_ERROR_KEYS['INVALID_INPUT'], []).append(name)
            continue
        except NumericalInstabilityError as e:
            log.warning(f"{name}: numerical error: {e}")
            error_summary.setdefault(BATCH_ERROR_KEYS['NUMERICAL_ERROR'], []).append(name)
            continue

        if not result.converged:
            log.warning(f"{name}: {result.message}")
        results.append(summarize_result(name, result))

    log.info(f"Solved {len(results)} of {len(df)} observations")
    return results, error_summary
