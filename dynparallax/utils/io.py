import json
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd
import astropy.units as u
from astropy.table import Table

from ..config import (
    ENCODING_FALLBACK_ORDER, REQUIRED_OBSERVATION_COLUMNS,
    EXPORT_FORMATS, ASTROPY_TABLE_FORMATS, JSON_INDENT
)
from ..exceptions import ConfigurationError
from ..physics.solver import SolverResult

log = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Exception raised when data cannot be loaded from a file."""
    pass


class DataSaveError(Exception):
    """Exception raised when data cannot be saved to a file."""
    pass


# Units attached to the iteration table columns in astropy exports
ITERATION_COLUMN_UNITS = {
    'a': u.AU,
    'd': u.pc,
    'MAG1': u.mag,
    'MAG2': u.mag,
    'L1': u.W,
    'L2': u.W,
    'M1': u.M_sun,
    'M2': u.M_sun,
    'diff': u.percent
}


def _has_required_columns(df: pd.DataFrame) -> bool:
    return all(column in df.columns for column in REQUIRED_OBSERVATION_COLUMNS)


def load_observations_csv(filepath: str) -> pd.DataFrame:
    """Loads binary star observations from a CSV file.

    Comma-separated files are tried first, then semicolon-separated ones, for
    every encoding in ENCODING_FALLBACK_ORDER.

    Args:
        filepath: Path to a CSV file with at least the columns m1, m2, A, B, t.
                 Optional columns: wanted_accuracy, name.

    Returns:
        Loaded observations.

    Raises:
        DataLoadError: If the file cannot be loaded, parsed, or lacks required columns.
    """
    for encoding in ENCODING_FALLBACK_ORDER:
        try:
            log.debug(f"Attempting to read CSV with encoding: {encoding}")

            try:
                df = pd.read_csv(filepath, encoding=encoding)
                if not _has_required_columns(df):
                    log.debug("Required columns not found with comma delimiter, trying semicolon...")
                    df = pd.read_csv(filepath, encoding=encoding, sep=';')
            except pd.errors.ParserError:
                log.debug("CSV parsing failed with comma delimiter, trying semicolon...")
                try:
                    df = pd.read_csv(filepath, encoding=encoding, sep=';')
                except pd.errors.ParserError:
                    raise DataLoadError(f"Could not parse CSV format in file: {filepath}")

            if not _has_required_columns(df):
                missing = [c for c in REQUIRED_OBSERVATION_COLUMNS if c not in df.columns]
                raise DataLoadError(f"Required columns {missing} not found in {filepath}")

            log.info(f"CSV loaded successfully. Rows: {len(df)}, Encoding: {encoding}")
            return df

        except UnicodeDecodeError:
            log.debug(f"Encoding {encoding} failed, trying next...")
            continue
        except FileNotFoundError as e:
            log.error(f"File not found: {e}")
            raise DataLoadError(f"File not found: {filepath}")
        except PermissionError as e:
            log.error(f"Permission denied: {e}")
            raise DataLoadError(f"Permission denied accessing file: {filepath}")
        except pd.errors.EmptyDataError as e:
            log.error(f"Empty data file: {e}")
            raise DataLoadError(f"File contains no data: {filepath}")

    log.error(f"Could not decode file with any supported encoding: {filepath}")
    raise DataLoadError(f"Could not decode file '{filepath}' with any supported encoding")


def iterations_to_dataframe(result: SolverResult) -> pd.DataFrame:
    """Iteration history as a DataFrame, one row per iteration."""
    columns = ['iteration', 'a', 'd', 'MAG1', 'MAG2', 'L1', 'L2', 'M1', 'M2', 'diff']
    return pd.DataFrame([record.to_dict() for record in result.iterations], columns=columns)


def _write(filepath: str, writer) -> None:
    try:
        writer()
    except FileNotFoundError as e:
        log.error(f"Directory not found when saving to {filepath}: {e}")
        raise DataSaveError(f"Directory not found: {filepath}")
    except PermissionError as e:
        log.error(f"Permission denied when saving to {filepath}: {e}")
        raise DataSaveError(f"Permission denied: {filepath}")
    except (TypeError, ValueError) as e:
        log.error(f"Invalid data structure when saving to {filepath}: {e}")
        raise DataSaveError(f"Invalid results structure: {e}")
    except OSError as e:
        log.error(f"OS error when saving to {filepath}: {e}")
        raise DataSaveError(f"OS error (disk space, path length, etc.): {e}")


def save_iterations_to_csv(result: SolverResult, filepath: str) -> None:
    """Saves the iteration table of a solver result as CSV.

    Raises:
        DataSaveError: If the file cannot be written.
    """
    df = iterations_to_dataframe(result)
    _write(filepath, lambda: df.to_csv(filepath, index=False, encoding='utf-8'))
    log.info(f"Iteration table saved to {filepath} ({len(df)} rows)")


def save_result_to_json(result: SolverResult, filepath: str) -> None:
    """Saves the complete solver result (initial values, iterations, final result, message) as JSON.

    Raises:
        DataSaveError: If the file cannot be written.
    """
    def writer():
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=JSON_INDENT, ensure_ascii=False)

    _write(filepath, writer)
    log.info(f"Result saved to {filepath}")


def iterations_to_table(result: SolverResult) -> Table:
    """Iteration history as an astropy Table with physical units and run metadata."""
    df = iterations_to_dataframe(result)
    table = Table.from_pandas(df)
    for column, unit in ITERATION_COLUMN_UNITS.items():
        table[column].unit = unit

    # Keys stay within 8 characters so FITS headers need no HIERARCH cards
    observation = result.observation
    table.meta.update({
        'M1_APP': observation.m1,
        'M2_APP': observation.m2,
        'A_ARCSEC': observation.A,
        'B_ARCSEC': observation.B,
        'T_OBS_YR': observation.t,
        'ACCURACY': observation.wanted_accuracy,
        'PERIOD': result.initial_values.period_years,
        'CONVERGD': result.converged,
        'MESSAGE': result.message
    })
    return table


def save_iterations_table(result: SolverResult, filepath: str, fmt: str) -> None:
    """Saves the iteration table through astropy (ECSV, FITS or VOTable).

    Raises:
        ConfigurationError: If fmt is not an astropy table format.
        DataSaveError: If the file cannot be written.
    """
    if fmt not in ASTROPY_TABLE_FORMATS:
        raise ConfigurationError(f"Unsupported table format '{fmt}'. Options: {', '.join(ASTROPY_TABLE_FORMATS)}")

    table = iterations_to_table(result)
    _write(filepath, lambda: table.write(filepath, format=ASTROPY_TABLE_FORMATS[fmt], overwrite=True))
    log.info(f"Iteration table saved to {filepath} ({len(table)} rows, {fmt})")


def detect_export_format(filepath: str) -> str:
    """Export format key from a file extension.

    Raises:
        ConfigurationError: If the extension matches no export format.
    """
    extension = os.path.splitext(filepath)[1].lower()
    for fmt, spec in EXPORT_FORMATS.items():
        if spec['extension'] == extension:
            return fmt
    raise ConfigurationError(f"Cannot infer export format from extension '{extension}' of {filepath}")


def export_result(result: SolverResult, filepath: str, fmt: Optional[str] = None) -> str:
    """Exports a solver result, choosing the writer by format or file extension.

    Returns:
        The export format that was used.
    """
    fmt = fmt if fmt is not None else detect_export_format(filepath)

    if fmt == 'csv':
        save_iterations_to_csv(result, filepath)
    elif fmt == 'json':
        save_result_to_json(result, filepath)
    elif fmt in ASTROPY_TABLE_FORMATS:
        save_iterations_table(result, filepath, fmt)
    else:
        raise ConfigurationError(f"Unknown export format '{fmt}'. Options: {', '.join(EXPORT_FORMATS)}")
    return fmt


def save_results_to_csv(results: List[Dict[str, Any]], filepath: str) -> None:
    """Saves batch summary rows to a CSV file.

    Args:
        results: One flat dictionary per solved observation.
        filepath: Output path for the CSV file (will be created/overwritten).

    Raises:
        DataSaveError: If file writing fails.
    """
    if not results:
        log.warning("No results to save.")
        return

    df = pd.DataFrame(results)
    _write(filepath, lambda: df.to_csv(filepath, index=False, encoding='utf-8'))
    log.info(f"Results successfully saved to {filepath} ({len(df)} rows)")
