# dynparallax/analyzer/reporting.py
"""
Reporting and Display Functions for Dynamic Parallax Results.

This module handles the presentation layer for solver results: the computed
orbit values, the iteration table, the final result table and batch error
summaries. It is completely independent of the computation and can be easily
modified for different output formats.
"""

import json
from typing import Dict, List, Any

from ..config import (
    CLI_DISPLAY_LINE_WIDTH, CLI_HEADER_CHAR, CLI_SUBHEADER_CHAR,
    CLI_COLUMN_SEPARATOR, CLI_ITERATION_COLUMNS, CLI_ERROR_SUMMARY_MAX_IDS,
    CLI_GEOMETRY_PRECISION, CLI_PERIOD_PRECISION, CLI_DISTANCE_PRECISION,
    CLI_MAGNITUDE_PRECISION, CLI_MASS_PRECISION, JSON_INDENT
)
from ..physics.geometry import OrbitGeometry
from ..physics.solver import FinalResult, SolverResult


def format_computed_values(geometry: OrbitGeometry) -> str:
    """
    Format the quantities derived from the apparent orbit.

    Args:
        geometry: Orbit geometry of the observation

    Returns:
        Multi-line string with h, S, eps and T
    """
    p = CLI_GEOMETRY_PRECISION
    lines = [
        "Computed Values",
        f"  Eccentricity (h):          {geometry.eccentricity_param:.{p}f}\"",
        f"  Ellipse Area (S):          {geometry.ellipse_area:.{p}f}",
        f"  Partial Ellipse Area (eps): {geometry.partial_area:.{p}f}",
        f"  Period (T):                {geometry.period_years:.{p}f} yr",
    ]
    return "\n".join(lines)


def format_iteration_table(result: SolverResult) -> str:
    """
    Format the iteration history as a fixed-width text table.

    Args:
        result: Solver result

    Returns:
        Table with one row per iteration
    """
    header = CLI_COLUMN_SEPARATOR.join(
        f"{title:>{width}}" for _, title, width, _ in CLI_ITERATION_COLUMNS
    )
    lines = [header, CLI_SUBHEADER_CHAR * len(header)]

    for record in result.iterations:
        values = record.to_dict()
        lines.append(CLI_COLUMN_SEPARATOR.join(
            f"{values[key]:>{width}{spec}}" for key, _, width, spec in CLI_ITERATION_COLUMNS
        ))
    return "\n".join(lines)


def format_final_result(final: FinalResult) -> str:
    """Format the converged result as a parameter/value table."""
    rows = [
        ("Period (T)", f"{final.period_years:.{CLI_PERIOD_PRECISION}f} yr"),
        ("Distance (d)", f"{final.distance_pc:.{CLI_DISTANCE_PRECISION}f} pc"),
        ("STAR 1: Abs. Magnitude", f"{final.abs_mag1:.{CLI_MAGNITUDE_PRECISION}f}"),
        ("STAR 1: Weight", f"{final.mass1_solar:.{CLI_MASS_PRECISION}f} suns"),
        ("STAR 2: Abs. Magnitude", f"{final.abs_mag2:.{CLI_MAGNITUDE_PRECISION}f}"),
        ("STAR 2: Weight", f"{final.mass2_solar:.{CLI_MASS_PRECISION}f} suns"),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [f"{'Final results':<{width}}{CLI_COLUMN_SEPARATOR}Value"]
    lines.append(CLI_SUBHEADER_CHAR * len(lines[0]))
    lines.extend(f"{label:<{width}}{CLI_COLUMN_SEPARATOR}{value}" for label, value in rows)
    return "\n".join(lines)


def format_result_json(result: SolverResult) -> str:
    """JSON dump of the complete result."""
    return json.dumps(result.to_dict(), indent=JSON_INDENT, ensure_ascii=False)


def display_result(result: SolverResult) -> None:
    """
    Print a complete solver result to the console.

    Args:
        result: Solver result to display
    """
    print(CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
    print("DYNAMIC PARALLAX")
    print(CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
    print(format_computed_values(result.initial_values))
    print()
    print("Iteration Results")
    print(format_iteration_table(result))
    print()
    print(result.message)

    if result.warnings:
        print("\nWarnings:")
        for warning in result.warnings:
            print(f"  - {warning}")

    if result.final_result is not None:
        print()
        print(format_final_result(result.final_result))
    print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)


def print_error_summary(total_count: int, successful_count: int, error_summary: Dict[str, List[str]]) -> None:
    """
    Print a detailed summary of batch results and errors.

    Args:
        total_count: Total number of observations processed
        successful_count: Number of successfully solved observations
        error_summary: Dictionary mapping error types to affected observation names
    """
    failed_count = sum(len(names) for names in error_summary.values())

    print(f"\nProcessed {total_count} observations.")
    print(f"Success: {successful_count}")
    print(f"Failures: {failed_count}")

    if error_summary:
        print("\nError breakdown:")
        for error_type, names in error_summary.items():
            print(f"  {error_type}: {len(names)} observations")
            if len(names) <= CLI_ERROR_SUMMARY_MAX_IDS:
                print(f"    {', '.join(names)}")
            else:
                print(f"    {', '.join(names[:3])}, ... and {len(names)-3} more")


def display_batch_summary(results: List[Dict[str, Any]]) -> None:
    """Print one line per solved observation of a batch."""
    if not results:
        print("No results to display.")
        return

    print("\n" + CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)
    print(f"BATCH RESULTS ({len(results)} observations)")
    print(CLI_HEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)

    for i, row in enumerate(results, 1):
        if row['converged']:
            metric_str = (f"d = {row['d']:.{CLI_DISTANCE_PRECISION}f} pc, "
                          f"M1 = {row['M1']:.{CLI_MASS_PRECISION}f}, "
                          f"M2 = {row['M2']:.{CLI_MASS_PRECISION}f}")
        else:
            metric_str = "not converged"
        print(f"{i:3d}. {row['name']:<20}{CLI_COLUMN_SEPARATOR}{metric_str:<45}{CLI_COLUMN_SEPARATOR}"
              f"{row['iterations']} iterations")

    print(CLI_SUBHEADER_CHAR * CLI_DISPLAY_LINE_WIDTH)


def format_execution_time(start_time: float, end_time: float) -> str:
    """
    Format execution time for display.

    Args:
        start_time: Start time in seconds
        end_time: End time in seconds

    Returns:
        Formatted time string
    """
    execution_time = end_time - start_time
    return f"Total execution time: {execution_time:.2f} seconds"
