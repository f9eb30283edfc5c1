"""CLI command implementations."""

import json
import logging
from typing import List, Optional

from omegaconf import DictConfig, OmegaConf

from astar_kernel.config import load_config, validate_config, ConfigValidationError
from astar_kernel.core.grid import OccupancyGrid
from astar_kernel.search.astar import create_astar_searcher

from .utils import resolve_points, format_path, save_results, format_duration

logger = logging.getLogger(__name__)


def _global_overrides(args) -> List[str]:
    return list(getattr(args, 'config', None) or [])


def _load_config_or_defaults(overrides: List[str]) -> Optional[DictConfig]:
    """Load the project configuration, falling back to built-in defaults.

    A missing ``conf`` directory is not fatal for searching; invalid
    configuration still is.
    """
    try:
        return load_config(overrides=overrides)
    except FileNotFoundError as e:
        logger.warning(f"{e}; using built-in search defaults")
        return None


def path_command(args) -> int:
    """Handle path command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 when a path was found)
    """
    try:
        grid = None
        if args.grid:
            logger.info(f"Loading grid from {args.grid}")
            grid = OccupancyGrid.from_file(args.grid)

        start, goal = resolve_points(args.start, args.goal, grid)

        config_overrides = []
        if args.max_nodes is not None:
            config_overrides.append(f"search.astar.max_nodes_expanded={args.max_nodes}")
        if args.timeout is not None:
            config_overrides.append(f"search.astar.max_computation_time={args.timeout}")
        if args.reopen_closed:
            config_overrides.append("search.astar.reopen_closed=true")
        config_overrides.extend(_global_overrides(args))

        cfg = _load_config_or_defaults(config_overrides)
        if cfg is None:
            searcher = create_astar_searcher(
                cfg=None,
                max_nodes_expanded=args.max_nodes,
                max_computation_time=args.timeout,
                reopen_closed=args.reopen_closed
            )
        else:
            searcher = create_astar_searcher(cfg)

        logger.info(f"Searching {start} -> {goal}")
        result = searcher.search(start, goal)

        output = result.to_dict()
        output.update({
            'start': str(start),
            'goal': str(goal),
            'grid_file': str(args.grid) if args.grid else None
        })

        if args.output:
            save_results(output, args.output)
            logger.info(f"Results saved to {args.output}")

        if not args.quiet:
            if result.success:
                print(format_path(result.path))
                print(f"Length: {len(result.path)}  Cost: {result.cost}")
            else:
                print(f"No path found ({result.termination_reason})")
            if grid is not None:
                print()
                print(grid.render(result.path))
            if args.show_stats:
                print(json.dumps(result.statistics, indent=2))
            print(f"Computation time: {format_duration(result.computation_time)}")

        return 0 if result.success else 1

    except (ValueError, FileNotFoundError, ConfigValidationError) as e:
        logger.error(f"Path command failed: {e}")
        return 1


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    overrides = _global_overrides(args)
    try:
        if args.config_action == 'show':
            config = load_config(overrides=overrides, validate=False)
            print(OmegaConf.to_yaml(config, resolve=True))
            return 0

        elif args.config_action == 'validate':
            config = load_config(overrides=overrides, validate=False)
            try:
                validate_config(config)
            except ConfigValidationError as e:
                print(f"Configuration validation failed: {e}")
                return 1
            print("Configuration is valid")
            return 0

        else:
            print("Unknown config action")
            return 1

    except Exception as e:
        logger.error(f"Config command failed: {e}")
        return 1
