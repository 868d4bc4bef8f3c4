"""Main CLI entry point for the markdown2confluence command.

This module provides the Typer application that serves as the entry point
for the markdown2confluence command-line tool. Every option can also be set
through an environment variable, and a .env file in the working directory
is loaded before options are parsed.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from markdown2confluence.cli.config import AppConfig, LOG_LEVELS
from markdown2confluence.cli.errors import ConfigError
from markdown2confluence.cli.models import ExitCode
from markdown2confluence.cli.output import OutputHandler
from markdown2confluence.cli.sync_command import SyncCommand

VERSION = "0.1.0"

app = typer.Typer(
    name="markdown2confluence",
    help="""Publish markdown files to Confluence.

Each file's YAML front matter names its page:

  ---
  space: TEAM
  page_title: Release notes
  parent_title: Engineering
  ---

Unchanged files are skipped, using a content fingerprint label on each page.""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

_VERBOSITY = {"DEBUG": 2, "INFO": 1}


def _configure_logging(level_name: str, logdir: Optional[str] = None) -> None:
    """Configure logging for the markdown2confluence namespace.

    The root logger is left unchanged; atlassian-python-api is limited to
    warnings because it logs expected lookup misses at ERROR.

    Args:
        level_name: One of DEBUG, INFO, WARNING, ERROR
        logdir: Optional directory for log files (creates timestamped log file)
    """
    level = getattr(logging, level_name, logging.INFO)

    app_logger = logging.getLogger("markdown2confluence")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    app_logger.addHandler(console_handler)

    logging.getLogger("atlassian").setLevel(logging.WARNING)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"markdown2confluence_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    paths: Optional[List[str]] = typer.Argument(
        None,
        help="Markdown files or directories to publish (default: current directory)",
        envvar="CONFLUENCE_FILEPATH",
        metavar="PATH...",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        envvar="CONFLUENCE_BASE_URL",
        help="Confluence base URL, e.g. https://company.atlassian.net",
    ),
    user: Optional[str] = typer.Option(
        None,
        "--user",
        envvar="CONFLUENCE_USER",
        help="Confluence username",
    ),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        envvar="CONFLUENCE_PASSWORD",
        help="Confluence password or API token",
    ),
    default_space: Optional[str] = typer.Option(
        None,
        "--default-space",
        envvar="CONFLUENCE_DEFAULT_SPACE",
        help="Space for documents whose front matter names none",
    ),
    default_ancestor: Optional[str] = typer.Option(
        None,
        "--default-ancestor",
        envvar="CONFLUENCE_DEFAULT_ANCESTOR",
        help="Parent page ID for documents whose front matter names no parent",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        envvar="CONFLUENCE_RECURSIVE",
        help="Descend into sub-directories",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        envvar="CONFLUENCE_WORKERS",
        help="Number of documents to publish concurrently",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Show what would be created or updated without changing Confluence",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="LOG_LEVEL",
        help=f"Logger level: {', '.join(LOG_LEVELS)}",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Publish markdown files to Confluence, skipping unchanged pages.

    \b
    EXAMPLES:
      markdown2confluence docs/guide.md
      markdown2confluence -r docs --default-space TEAM --default-ancestor 123456
      markdown2confluence -r docs --dry-run
    """
    if version:
        typer.echo(f"markdown2confluence version {VERSION}")
        raise typer.Exit()

    try:
        config = AppConfig.from_options(
            base_url=base_url,
            user=user,
            password=password,
            paths=tuple(paths) if paths else None,
            default_space=default_space,
            default_ancestor=default_ancestor,
            recursive=recursive,
            workers=workers,
            dry_run=dry_run,
            log_level=log_level,
        )
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    _configure_logging(config.log_level, logdir)
    logger.info("Starting markdown2confluence")

    output = OutputHandler(verbosity=_VERBOSITY.get(config.log_level, 0), no_color=no_color)
    exit_code = SyncCommand(config, output_handler=output).run()
    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the console script."""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
