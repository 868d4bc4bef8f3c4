"""Typed exception hierarchy for per-document failures.

Every error that fails a single document carries the document's path so the
batch can log it and move on to the next document.
"""

from typing import Optional

from markdown2confluence.confluence_client.errors import SyncError


class DocumentSyncError(SyncError):
    """Base exception for errors that fail one document but not the batch."""

    def __init__(self, file_path: str, message: str):
        super().__init__(f"{file_path}: {message}")
        self.file_path = file_path
        self.message = message


class DocumentReadError(DocumentSyncError):
    """Raised when a document cannot be found or read."""

    def __init__(self, file_path: str, reason: Optional[str] = None):
        message = "Failed to read document"
        if reason:
            message += f": {reason}"
        super().__init__(file_path, message)
        self.reason = reason


class FrontmatterError(DocumentSyncError):
    """Raised when YAML front matter parsing or validation fails."""

    def __init__(self, file_path: str, message: str):
        super().__init__(file_path, f"Frontmatter error: {message}")
