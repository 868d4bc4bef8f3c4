"""Run configuration assembled from command-line options.

Options arrive from flags, environment variables or a .env file (loaded by
python-dotenv in ``main``). They are validated once here and frozen; the
sync engine only ever sees the resulting SyncConfig.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..sync_engine.models import SyncConfig
from .errors import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class AppConfig:
    """Validated settings for one run of the CLI.

    Attributes:
        base_url: Confluence base URL, e.g. https://acme.atlassian.net
        user: Confluence user name or e-mail
        password: Password or API token
        paths: Files and directories to publish
        recursive: Descend into sub-directories of directory paths
        log_level: One of LOG_LEVELS
        sync: Settings handed to the sync engine
    """
    base_url: str
    user: str
    password: str
    paths: Tuple[str, ...]
    recursive: bool = False
    log_level: str = "INFO"
    sync: SyncConfig = field(default_factory=SyncConfig)

    @classmethod
    def from_options(
        cls,
        base_url: Optional[str],
        user: Optional[str],
        password: Optional[str],
        paths: Optional[Tuple[str, ...]] = None,
        default_space: Optional[str] = None,
        default_ancestor: Optional[str] = None,
        recursive: bool = False,
        workers: int = 1,
        dry_run: bool = False,
        log_level: str = "INFO",
    ) -> "AppConfig":
        """Validate raw option values and build the configuration.

        Credentials are not checked here; the Authenticator reports missing
        credentials so the CLI can exit with AUTH_ERROR.

        Raises:
            ConfigError: If an option has an invalid value
        """
        base_url = (base_url or "").strip()
        if base_url and not base_url.startswith(("http://", "https://")):
            raise ConfigError(f"must start with http:// or https://, got '{base_url}'", "base-url")

        level = (log_level or "INFO").upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'", "log-level")

        if workers < 1:
            raise ConfigError(f"must be at least 1, got {workers}", "workers")

        default_ancestor = (default_ancestor or "").strip() or None
        if default_ancestor and not default_ancestor.isdigit():
            raise ConfigError(f"must be a numeric page ID, got '{default_ancestor}'", "default-ancestor")

        return cls(
            base_url=base_url,
            user=user or "",
            password=password or "",
            paths=tuple(paths or (".",)),
            recursive=recursive,
            log_level=level,
            sync=SyncConfig(
                default_space=(default_space or "").strip() or None,
                default_ancestor=default_ancestor,
                dry_run=dry_run,
                workers=workers,
            ),
        )
