"""Remote Confluence page data model."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class RemotePage:
    """A page that already exists in Confluence.

    Only the fields the sync engine needs are kept. The body is never read
    back, and labels are fetched separately through the repository;
    change detection relies on the fingerprint label.

    Attributes:
        page_id: Unique identifier for the page
        title: Page title
        space_key: Space key where the page resides (e.g., "TEAM")
        version: Current version number (required for updates)
    """
    page_id: str
    title: str
    space_key: str = ""
    version: int = 1

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemotePage":
        """Build a RemotePage from a REST API content payload."""
        return cls(
            page_id=str(data.get("id", "")),
            title=data.get("title", ""),
            space_key=data.get("space", {}).get("key", ""),
            version=int(data.get("version", {}).get("number", 1)),
        )
