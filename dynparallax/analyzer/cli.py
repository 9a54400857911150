import argparse
import logging
import sys
import time
from typing import List, Optional

from ..config import (
    DEFAULT_OBSERVATION, DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, LOG_LEVELS,
    MAX_SOLVER_ITERATIONS, EXPORT_FORMATS,
    CLI_EXIT_OK, CLI_EXIT_ERROR, CLI_EXIT_NOT_CONVERGED
)
from ..exceptions import (
    ConfigurationError, InvalidGeometryError, InvalidObservationError,
    NumericalInstabilityError
)
from ..physics.geometry import compute_orbit_geometry
from ..physics.solver import Observation, solve
from ..utils.io import (
    DataLoadError, DataSaveError, export_result, load_observations_csv,
    save_results_to_csv
)
from .engine import solve_observations
from .reporting import (
    display_batch_summary, display_result, format_computed_values,
    format_execution_time, format_result_json, print_error_summary
)

log = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level), format=DEFAULT_LOG_FORMAT)


def _add_orbit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-A', '--large-semi-axis',
                        dest='A', type=float, default=DEFAULT_OBSERVATION['A'],
                        help=f'Apparent large semi-axis in arcseconds (default: {DEFAULT_OBSERVATION["A"]})')
    parser.add_argument('-B', '--small-semi-axis',
                        dest='B', type=float, default=DEFAULT_OBSERVATION['B'],
                        help=f'Apparent small semi-axis in arcseconds (default: {DEFAULT_OBSERVATION["B"]})')
    parser.add_argument('-t', '--baseline',
                        dest='t', type=float, default=DEFAULT_OBSERVATION['t'],
                        help=f'Observation length in years (default: {DEFAULT_OBSERVATION["t"]})')


def create_argument_parser():
    """Create command line argument parser with proper defaults from config."""
    parser = argparse.ArgumentParser(
        description='Dynamic Parallax Calculator for visual binary stars',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --m1 3.9 --m2 5.3 -A 4.5 -B 3.4 -t 11 --accuracy 1
  %(prog)s --accuracy 0.1 --output iterations.ecsv
  %(prog)s --input binaries.csv --output results.csv
        """
    )

    # Observation
    obs_group = parser.add_argument_group('Observation')
    obs_group.add_argument('--m1', type=float, default=DEFAULT_OBSERVATION['m1'],
                           help=f'Apparent magnitude of star 1 (default: {DEFAULT_OBSERVATION["m1"]})')
    obs_group.add_argument('--m2', type=float, default=DEFAULT_OBSERVATION['m2'],
                           help=f'Apparent magnitude of star 2 (default: {DEFAULT_OBSERVATION["m2"]})')
    _add_orbit_arguments(obs_group)
    obs_group.add_argument('--accuracy', '-a',
                           dest='wanted_accuracy', type=float,
                           default=DEFAULT_OBSERVATION['wanted_accuracy'],
                           help=f'Wanted accuracy in percent (default: {DEFAULT_OBSERVATION["wanted_accuracy"]})')

    # Solver
    parser.add_argument('--max-iterations', type=int, default=MAX_SOLVER_ITERATIONS,
                        help=f'Iteration cap (default: {MAX_SOLVER_ITERATIONS})')

    # Batch
    parser.add_argument('--input', '-i',
                        help='CSV file with columns m1, m2, A, B, t (optional: wanted_accuracy, name). '
                             'When given, every row is solved and single-observation options are ignored.')

    # Output options
    parser.add_argument('--output', '-o',
                        help='Output file. Single observation: iteration table or full result; batch: summary CSV')
    parser.add_argument('--format', '-f',
                        choices=list(EXPORT_FORMATS),
                        help='Export format for --output (default: inferred from the file extension)')
    parser.add_argument('--json', action='store_true',
                        help='Print the complete result as JSON instead of tables')
    parser.add_argument('--strict', action='store_true',
                        help=f'Exit with code {CLI_EXIT_NOT_CONVERGED} when the required accuracy is not reached')
    parser.add_argument('--log-level', choices=LOG_LEVELS, default=DEFAULT_LOG_LEVEL,
                        help=f'Logging level (default: {DEFAULT_LOG_LEVEL})')

    return parser


def run_single(args: argparse.Namespace) -> int:
    """
    Solve one observation given on the command line.

    Returns:
        Process exit code
    """
    observation = Observation(
        m1=args.m1, m2=args.m2, A=args.A, B=args.B, t=args.t,
        wanted_accuracy=args.wanted_accuracy
    )

    try:
        result = solve(observation, max_iterations=args.max_iterations)
    except InvalidGeometryError as e:
        log.error(f"Invalid orbit geometry: {e}")
        return CLI_EXIT_ERROR
    except InvalidObservationError as e:
        log.error(f"Invalid input: {e}")
        return CLI_EXIT_ERROR
    except NumericalInstabilityError as e:
        log.error(f"Computation failed: {e}")
        return CLI_EXIT_ERROR
    except ConfigurationError as e:
        log.error(f"Invalid configuration: {e}")
        return CLI_EXIT_ERROR

    if args.json:
        print(format_result_json(result))
    else:
        display_result(result)

    if args.output:
        try:
            fmt = export_result(result, args.output, args.format)
            log.info(f"Result exported to {args.output} ({fmt})")
        except (ConfigurationError, DataSaveError) as e:
            log.error(f"Could not export result: {e}")
            return CLI_EXIT_ERROR

    if args.strict and not result.converged:
        return CLI_EXIT_NOT_CONVERGED
    return CLI_EXIT_OK


def run_batch(args: argparse.Namespace) -> int:
    """
    Solve every observation of the input CSV file.

    Returns:
        Process exit code
    """
    log.info(f"Loading observations from: {args.input}")
    try:
        df = load_observations_csv(args.input)
    except DataLoadError as e:
        log.error(f"Could not load or parse the input file '{args.input}': {e}")
        return CLI_EXIT_ERROR

    if df.empty:
        log.warning("No observations to process. Exiting.")
        return CLI_EXIT_OK

    results, error_summary = solve_observations(df)

    print_error_summary(len(df), len(results), error_summary)
    display_batch_summary(results)

    if args.output and results:
        try:
            save_results_to_csv(results, args.output)
        except DataSaveError as e:
            log.error(f"Could not save results: {e}")
            return CLI_EXIT_ERROR

    if args.strict and (error_summary or not all(row['converged'] for row in results)):
        return CLI_EXIT_NOT_CONVERGED
    return CLI_EXIT_OK


def main(args_list: Optional[List[str]] = None):
    """Main entry point for the solver CLI.

    Args:
        args_list: Optional list of command line arguments.
                  If None, will parse from sys.argv
    """
    parser = create_argument_parser()
    args = parser.parse_args(args_list)
    _configure_logging(args.log_level)

    start_time = time.time()

    if args.input:
        exit_code = run_batch(args)
    else:
        exit_code = run_single(args)

    end_time = time.time()
    log.debug(format_execution_time(start_time, end_time))

    if exit_code != CLI_EXIT_OK:
        sys.exit(exit_code)


def geometry_main(args_list: Optional[List[str]] = None):
    """Print the values derived from the apparent orbit without running the solver."""
    parser = argparse.ArgumentParser(
        description='Orbit geometry preview: eccentricity, areas and period'
    )
    _add_orbit_arguments(parser)
    parser.add_argument('--log-level', choices=LOG_LEVELS, default=DEFAULT_LOG_LEVEL,
                        help=f'Logging level (default: {DEFAULT_LOG_LEVEL})')
    args = parser.parse_args(args_list)
    _configure_logging(args.log_level)

    try:
        geometry = compute_orbit_geometry(args.A, args.B, args.t)
    except InvalidObservationError as e:
        log.error(f"Invalid orbit geometry: {e}")
        sys.exit(CLI_EXIT_ERROR)

    print(format_computed_values(geometry))


if __name__ == "__main__":
    main()
