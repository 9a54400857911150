#!/usr/bin/env python
"""
Dynamic Parallax - Visual Binary Mass and Distance Estimator

This is the main entry point for the dynamic parallax tools.
It provides access to the full solver and to the orbit geometry preview.

Version: 1.0.0
"""

import sys
import argparse

# Version information for scientific reproducibility
__version__ = "1.0.0"

def main():
    """Main entry point for the dynamic parallax tools."""
    parser = argparse.ArgumentParser(
        description=f'Dynamic Parallax v{__version__} - Visual Binary Mass and Distance Estimator',
        epilog='Use "solve" for the mass-luminosity iteration or "geometry" for the orbit preview.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('tool',
                       choices=['solve', 'geometry'],
                       help='Tool to run')
    parser.add_argument('--version', action='version',
                       version=f'Dynamic Parallax {__version__}')

    args, remaining_args = parser.parse_known_args()

    try:
        if args.tool == 'solve':
            from dynparallax.analyzer.cli import main as solver_main
            solver_main(remaining_args)
        elif args.tool == 'geometry':
            from dynparallax.analyzer.cli import geometry_main
            geometry_main(remaining_args)
    except ImportError as e:
        print(f"ERROR: Failed to import required module: {e}", file=sys.stderr)
        print("Ensure all dependencies are installed: pip install -e .", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)  # Standard exit code for SIGINT

if __name__ == "__main__":
    main()
