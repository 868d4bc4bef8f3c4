"""Typed exception hierarchy for CLI-related errors."""

from typing import Optional

from markdown2confluence.confluence_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when command-line or environment configuration is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in option '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
