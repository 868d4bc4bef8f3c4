"""Confluence client library for markdown2confluence.

This package wraps the Confluence REST API behind the small page repository
interface the sync engine needs: title lookup, page reads, create, update
and label bookkeeping.
"""

from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    ConversionError,
)

__all__ = [
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "ConversionError",
]
