"""Sync command orchestration for CLI.

This module provides the SyncCommand class that wires the pieces of a run
together: markdown discovery, the Confluence API wrapper, the sync engine
and terminal output, and turns the outcome into an exit code.
"""

import logging
from typing import Optional

from ..confluence_client.api_wrapper import APIWrapper
from ..confluence_client.auth import Authenticator
from ..confluence_client.errors import InvalidCredentialsError
from ..documents.discovery import find_markdown_files
from ..documents.errors import DocumentReadError
from ..sync_engine.engine import SyncEngine
from .config import AppConfig
from .models import ExitCode
from .output import OutputHandler

logger = logging.getLogger(__name__)


class SyncCommand:
    """Publishes the configured paths to Confluence.

    The workflow:
        1. Expand the configured paths into markdown files
        2. Validate credentials
        3. Run the sync engine over every file
        4. Print the summary and return the exit code

    Example:
        >>> config = AppConfig.from_options(url, user, token, paths=("docs",))
        >>> exit_code = SyncCommand(config).run()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config: AppConfig,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        engine: Optional[SyncEngine] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            config: Validated run configuration
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for the Confluence API (optional)
            engine: SyncEngine to run (optional, built from config by default)
        """
        self.config = config
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator or Authenticator(
            config.base_url, config.user, config.password
        )
        self.engine = engine

    def run(self) -> ExitCode:
        """Execute the sync and return the process exit code.

        Returns:
            ExitCode.SUCCESS if every document was skipped, created or updated,
            ExitCode.GENERAL_ERROR if any document failed or a path is missing,
            ExitCode.AUTH_ERROR if credentials are missing
        """
        output = self.output_handler

        try:
            files = find_markdown_files(self.config.paths, self.config.recursive)
        except DocumentReadError as e:
            logger.error(f"Failed to collect documents: {e}")
            output.error(str(e))
            return ExitCode.GENERAL_ERROR

        output.info(f"Found {len(files)} markdown file(s)")

        if self.engine is None:
            try:
                self.authenticator.get_credentials()
            except InvalidCredentialsError as e:
                logger.error(f"Authentication failed: {e}")
                output.error(f"Authentication failed: {e}")
                output.info("Set CONFLUENCE_BASE_URL, CONFLUENCE_USER and CONFLUENCE_PASSWORD")
                return ExitCode.AUTH_ERROR
            self.engine = SyncEngine(APIWrapper(self.authenticator), self.config.sync)

        if self.config.sync.dry_run:
            output.warning("Dry run: no changes will be made in Confluence")

        summary = self.engine.run_paths(files)
        output.print_summary(summary)

        if not summary.success:
            return ExitCode.GENERAL_ERROR
        return ExitCode.SUCCESS
