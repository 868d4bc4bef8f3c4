"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Every document was skipped, created or updated
    - GENERAL_ERROR (1): At least one document failed, or invalid options
    - AUTH_ERROR (3): Credentials missing

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
