"""Data models for local markdown documents."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Document:
    """A local markdown file split into front matter fields and body.

    Documents are rebuilt from disk on every run. Missing fields are filled
    from the global configuration by the sync engine, never here.

    Attributes:
        file_path: Path of the markdown file (used in logs and results)
        page_title: Title of the Confluence page; the match key within a space
        body: Markdown content without the front matter block
        space: Target space key, or None to use the default space
        parent_id: Explicit parent page ID
        parent_title: Parent page title, looked up when parent_id is unset
        content_fingerprint: Fingerprint of body, set by the sync engine
    """
    file_path: str
    page_title: str = ""
    body: str = ""
    space: Optional[str] = None
    parent_id: Optional[str] = None
    parent_title: Optional[str] = None
    content_fingerprint: Optional[str] = None
