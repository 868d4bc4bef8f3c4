"""Resolution of page titles to existing Confluence pages.

Pages are matched by exact title within a space. The resolver also reads
the fingerprint label that records the content last synced to a page.
"""

import logging
from typing import List, Optional, Tuple

from ..models.remote_page import RemotePage
from .errors import LookupFailedError, ParentNotFoundError
from .fingerprint import FINGERPRINT_PREFIX, is_fingerprint_label

logger = logging.getLogger(__name__)


class PageResolver:
    """Looks pages up through a page repository.

    The repository is anything providing ``find_pages(space, title)`` and
    ``get_labels(page_id)``, such as
    :class:`~markdown2confluence.confluence_client.api_wrapper.APIWrapper`.

    Example:
        >>> resolver = PageResolver(api)
        >>> page, found = resolver.find_page_by_title("TEAM", "Release notes")
        >>> parent_id = resolver.resolve_parent("TEAM", "Engineering")
    """

    def __init__(self, repository, fingerprint_prefix: str = FINGERPRINT_PREFIX):
        self.repository = repository
        self.fingerprint_prefix = fingerprint_prefix

    def find_page_by_title(
        self,
        space: str,
        title: str,
        file_path: str = "",
    ) -> Tuple[Optional[RemotePage], bool]:
        """Find the page with an exact title in a space.

        When the search returns several pages the first one is used, in the
        order the repository returned them.

        Args:
            space: Space key
            title: Exact page title
            file_path: Document being synced (for error context)

        Returns:
            (page, True) when found, (None, False) when there is no such page

        Raises:
            LookupFailedError: If the repository search fails
        """
        try:
            pages = self.repository.find_pages(space, title)
        except Exception as e:
            raise LookupFailedError(file_path, space, title, str(e)) from e

        if not pages:
            logger.debug(f"No page titled '{title}' in space {space}")
            return None, False

        if len(pages) > 1:
            logger.warning(
                f"{len(pages)} pages titled '{title}' in space {space}, "
                f"using page {pages[0].page_id}"
            )
        return pages[0], True

    def resolve_parent(self, space: str, parent_title: str, file_path: str = "") -> str:
        """Resolve a parent page title to its page ID.

        Raises:
            ParentNotFoundError: If no page has that title in the space
            LookupFailedError: If the repository search fails
        """
        page, found = self.find_page_by_title(space, parent_title, file_path)
        if not found:
            raise ParentNotFoundError(file_path, space, parent_title)
        return page.page_id

    def fingerprint_labels(self, page: RemotePage, file_path: str = "") -> List[str]:
        """Return the page's fingerprint labels, sorted.

        A page should carry at most one fingerprint label. If several are
        found a warning is logged; callers compare against the first
        (lexicographically smallest) so the choice does not depend on the
        order labels come back in.

        Raises:
            LookupFailedError: If the labels cannot be read
        """
        try:
            labels = self.repository.get_labels(page.page_id)
        except Exception as e:
            raise LookupFailedError(file_path, page.space_key, page.title, str(e)) from e

        candidates = sorted(
            label for label in labels
            if is_fingerprint_label(label, self.fingerprint_prefix)
        )
        if len(candidates) > 1:
            logger.warning(
                f"Page {page.page_id} has {len(candidates)} fingerprint labels "
                f"({', '.join(candidates)}), using {candidates[0]}"
            )
        return candidates
