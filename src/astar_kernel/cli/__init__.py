"""Command-line interface for the A* kernel.

This module provides CLI commands for running searches and inspecting the
configuration.
"""

from .main import main_cli
from .commands import path_command, config_command
from .utils import setup_logging, resolve_points, save_results

__all__ = [
    'main_cli',
    'path_command',
    'config_command',
    'setup_logging',
    'resolve_points',
    'save_results'
]
