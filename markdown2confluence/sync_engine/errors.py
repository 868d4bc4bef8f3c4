"""Exceptions raised while driving one document through a sync.

Each of these fails the current document only; the engine records the
failure and continues with the next document.
"""

from typing import Optional

from markdown2confluence.documents.errors import DocumentSyncError


class HashError(DocumentSyncError):
    """Raised when the document body cannot be fingerprinted."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(file_path, f"Failed to fingerprint content: {reason}")


class MissingSpaceError(DocumentSyncError):
    """Raised when neither the document nor the configuration names a space."""

    def __init__(self, file_path: str):
        super().__init__(file_path, "Missing space and no default space configured")


class MissingParentError(DocumentSyncError):
    """Raised when no parent id, parent title or default ancestor is available."""

    def __init__(self, file_path: str):
        super().__init__(file_path, "Missing parent id/title and no default ancestor configured")


class MissingTitleError(DocumentSyncError):
    """Raised when the front matter does not name a page title."""

    def __init__(self, file_path: str):
        super().__init__(file_path, "Frontmatter missing page title")


class LookupFailedError(DocumentSyncError):
    """Raised when searching Confluence for a page or its labels fails."""

    def __init__(self, file_path: str, space: str, title: str, reason: Optional[str] = None):
        message = f"Failed to look up '{title}' in space {space}"
        if reason:
            message += f": {reason}"
        super().__init__(file_path, message)
        self.space = space
        self.title = title


class ParentNotFoundError(DocumentSyncError):
    """Raised when the parent title does not match any page in the space."""

    def __init__(self, file_path: str, space: str, parent_title: str):
        super().__init__(
            file_path,
            f"Parent page '{parent_title}' not found in space {space}"
        )
        self.space = space
        self.parent_title = parent_title


class CreateFailedError(DocumentSyncError):
    """Raised when creating the page fails."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(file_path, f"Failed to create page: {reason}")


class UpdateFailedError(DocumentSyncError):
    """Raised when reading the page version or updating its content fails."""

    def __init__(self, file_path: str, page_id: str, reason: str):
        super().__init__(file_path, f"Failed to update page {page_id}: {reason}")
        self.page_id = page_id


class LabelError(DocumentSyncError):
    """Raised when adding or removing the fingerprint label fails."""

    def __init__(self, file_path: str, page_id: str, label: str, operation: str, reason: str):
        super().__init__(
            file_path,
            f"Failed to {operation} label '{label}' on page {page_id}: {reason}"
        )
        self.page_id = page_id
        self.label = label
        self.operation = operation
