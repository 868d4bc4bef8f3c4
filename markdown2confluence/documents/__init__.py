"""Local markdown documents: discovery and front matter extraction."""

from .models import Document
from .errors import DocumentSyncError, DocumentReadError, FrontmatterError
from .frontmatter_handler import FrontmatterHandler
from .discovery import find_markdown_files

__all__ = [
    'Document',
    'DocumentSyncError',
    'DocumentReadError',
    'FrontmatterError',
    'FrontmatterHandler',
    'find_markdown_files',
]
