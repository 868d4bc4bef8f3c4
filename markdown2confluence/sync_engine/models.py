"""Data models for the sync decision engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .fingerprint import FINGERPRINT_PREFIX


class SyncAction(Enum):
    """Terminal outcome of syncing one document."""
    SKIP = "skip"
    CREATE = "create"
    UPDATE = "update"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncConfig:
    """Run-wide settings, built once at startup and passed to the engine.

    Attributes:
        default_space: Space used when a document names none
        default_ancestor: Parent page ID used when a document names no parent
        fingerprint_prefix: Reserved label prefix marking fingerprint labels
        dry_run: Decide actions but make no changes in Confluence
        workers: Number of documents synced concurrently
    """
    default_space: Optional[str] = None
    default_ancestor: Optional[str] = None
    fingerprint_prefix: str = FINGERPRINT_PREFIX
    dry_run: bool = False
    workers: int = 1


@dataclass
class DocumentResult:
    """Outcome of syncing one document.

    Attributes:
        file_path: Path of the document
        action: What happened (or, in a dry run, what would have happened)
        page_id: Confluence page ID, when known
        fingerprint: Fingerprint of the document body, when computed
        error: The error that failed the document (action is FAILED)
    """
    file_path: str
    action: SyncAction
    page_id: Optional[str] = None
    fingerprint: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.action is not SyncAction.FAILED


@dataclass
class SyncSummary:
    """Aggregate result of a sync run, in input order."""
    results: List[DocumentResult] = field(default_factory=list)
    dry_run: bool = False

    def count(self, action: SyncAction) -> int:
        return sum(1 for result in self.results if result.action is action)

    @property
    def created_count(self) -> int:
        return self.count(SyncAction.CREATE)

    @property
    def updated_count(self) -> int:
        return self.count(SyncAction.UPDATE)

    @property
    def unchanged_count(self) -> int:
        return self.count(SyncAction.SKIP)

    @property
    def failed_count(self) -> int:
        return self.count(SyncAction.FAILED)

    @property
    def success(self) -> bool:
        """True when no document failed."""
        return all(result.success for result in self.results)
