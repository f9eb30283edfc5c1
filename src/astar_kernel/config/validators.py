"""Configuration validation for the A* kernel."""

import logging
from typing import Any

from omegaconf import DictConfig

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_search_config(config.get('search', {}))
        validate_logging_config(config.get('logging', {}))
    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")

    logger.debug("Configuration validation passed")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section.

    Args:
        search_config: Search configuration section
    """
    if not search_config:
        return

    astar_config = search_config.get('astar', {})
    if not astar_config:
        return

    max_nodes = astar_config.get('max_nodes_expanded', None)
    if max_nodes is not None:
        if not isinstance(max_nodes, int) or isinstance(max_nodes, bool) or max_nodes < 0:
            raise ConfigValidationError(
                f"astar.max_nodes_expanded must be null or a non-negative integer, got {max_nodes}"
            )

    max_time = astar_config.get('max_computation_time', None)
    if max_time is not None:
        if not _is_number(max_time) or max_time <= 0:
            raise ConfigValidationError(
                f"astar.max_computation_time must be null or a positive number, got {max_time}"
            )

    for key in ('reopen_closed', 'consume_closed_on_reconstruct', 'statistics_tracking'):
        value = astar_config.get(key, False)
        if not isinstance(value, bool):
            raise ConfigValidationError(
                f"astar.{key} must be a boolean, got {value}"
            )


def validate_logging_config(logging_config: DictConfig) -> None:
    """Validate logging configuration section.

    Args:
        logging_config: Logging configuration section
    """
    if not logging_config:
        return

    level = logging_config.get('level', 'WARNING')
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level}"
        )
