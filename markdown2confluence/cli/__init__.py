"""Command-line interface for markdown2confluence.

This package provides the `markdown2confluence` CLI tool: it collects
markdown files, builds the run configuration and drives the sync engine,
reporting results in the terminal and through the exit code.
"""

from .sync_command import SyncCommand
from .config import AppConfig
from .models import ExitCode
from .errors import CLIError, ConfigError

__all__ = [
    'SyncCommand',
    'AppConfig',
    'ExitCode',
    'CLIError',
    'ConfigError',
]
