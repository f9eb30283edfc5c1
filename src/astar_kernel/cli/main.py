"""Main CLI entry point for the A* kernel."""

import sys
import argparse
import logging
from typing import List, Optional

from . import commands
from .utils import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='astar-kernel',
        description='Generic A* shortest-path search over grid points',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  astar-kernel path 0,0 3,2                     # Unbounded four-connected grid
  astar-kernel path 0,0 9,4 --grid maze.txt     # Grid with walls ('#')
  astar-kernel path 0,0 64,64 --max-nodes 500   # Bounded search
  astar-kernel config show                      # Show current configuration
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        action='append',
        help='Configuration override, repeatable (e.g., search.astar.reopen_closed=true)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except errors'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file for results (JSON format)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    # Path command
    path_parser = subparsers.add_parser(
        'path',
        help='Find a shortest path between two points',
        description='Find a shortest path between two grid points using A*'
    )

    path_parser.add_argument('start', type=str, help='Start point as x,y')
    path_parser.add_argument('goal', type=str, help='Goal point as x,y')

    path_parser.add_argument(
        '--grid', '-g',
        type=str,
        help="Text grid file ('.' free, '#' blocked); unbounded grid if omitted"
    )

    path_parser.add_argument(
        '--max-nodes',
        type=int,
        help='Stop after expanding this many nodes'
    )

    path_parser.add_argument(
        '--timeout', '-t',
        type=float,
        help='Stop after this many seconds'
    )

    path_parser.add_argument(
        '--reopen-closed',
        action='store_true',
        help='Re-open settled points when a cheaper path is found'
    )

    path_parser.add_argument(
        '--show-stats',
        action='store_true',
        help='Print search statistics'
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Inspect the search configuration'
    )

    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )

    config_subparsers.add_parser('show', help='Show current configuration')
    config_subparsers.add_parser('validate', help='Validate configuration')

    return parser


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.quiet:
        log_level = logging.ERROR
    elif parsed_args.verbose == 0:
        log_level = logging.WARNING
    elif parsed_args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            parser.print_help()
            return 1

        if parsed_args.command == 'path':
            return commands.path_command(parsed_args)
        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()
