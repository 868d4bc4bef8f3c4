"""Typed exception hierarchy for Confluence-related errors.

SyncError is the root of every application error in markdown2confluence.
Errors raised by the Confluence client derive from its ConfluenceError
subclass and carry descriptive messages with context for debugging.
"""


class SyncError(Exception):
    """Base exception for all markdown2confluence errors.

    Use this to catch any application-level error from the publishing tool.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing or authentication fails."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"Credentials are missing or invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when an API call is rejected or fails for any other reason."""

    def __init__(self, message: str = "Confluence API failure"):
        super().__init__(message)


class ConversionError(ConfluenceError):
    """Raised when markdown cannot be rendered to storage format."""

    def __init__(self, message: str):
        super().__init__(message)
