"""Sync decision engine.

Drives each document through validation, resolution against Confluence and
one of three actions:

- skip: the page exists and its fingerprint label matches the body
- update: the page exists but the label differs or is missing
- create: no page with the title exists in the space

Updates are a sequence of independent calls (read version, remove the old
label, update content, add the new label). A failure part way through
leaves the page without a fingerprint label, and the next run updates it
again.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..confluence_client.errors import SyncError
from ..content_converter.markdown_converter import MarkdownConverter
from ..documents.errors import DocumentReadError, DocumentSyncError
from ..documents.frontmatter_handler import FrontmatterHandler
from ..documents.models import Document
from ..models.remote_page import RemotePage
from .errors import (
    CreateFailedError,
    HashError,
    LabelError,
    MissingParentError,
    MissingSpaceError,
    MissingTitleError,
    UpdateFailedError,
)
from .fingerprint import fingerprint
from .models import DocumentResult, SyncAction, SyncConfig, SyncSummary
from .page_resolver import PageResolver

logger = logging.getLogger(__name__)


class SyncEngine:
    """Publishes markdown documents to Confluence, one page per document.

    The repository is the page store, normally an
    :class:`~markdown2confluence.confluence_client.api_wrapper.APIWrapper`.
    It must provide ``find_pages``, ``get_page``, ``get_labels``,
    ``add_label``, ``delete_label``, ``create_page`` and ``update_page``.

    Example:
        >>> engine = SyncEngine(api, SyncConfig(default_space="TEAM"))
        >>> summary = engine.run_paths(["docs/index.md"])
        >>> summary.success
        True
    """

    def __init__(
        self,
        repository,
        config: SyncConfig,
        converter: Optional[MarkdownConverter] = None,
        resolver: Optional[PageResolver] = None,
    ):
        self.repository = repository
        self.config = config
        self.converter = converter or MarkdownConverter()
        self.resolver = resolver or PageResolver(repository, config.fingerprint_prefix)

    # Document loading

    def load_document(self, file_path: str, data: Optional[bytes] = None) -> Document:
        """Read, split and fingerprint one document.

        Args:
            file_path: Path of the document
            data: Raw file content; read from file_path when None

        Raises:
            DocumentReadError: If the file cannot be read
            FrontmatterError: If the front matter is malformed
            HashError: If the body cannot be fingerprinted
        """
        if data is None:
            try:
                with open(file_path, 'rb') as f:
                    data = f.read()
            except OSError as e:
                raise DocumentReadError(file_path, str(e)) from e

        try:
            content = data.decode('utf-8')
        except UnicodeDecodeError as e:
            # Undecodable bytes survive as surrogates, so the body hashes as on disk
            logger.warning(f"{file_path} is not valid UTF-8 ({e.reason} at byte {e.start})")
            content = data.decode('utf-8', 'surrogateescape')

        document = FrontmatterHandler.parse(file_path, content)

        try:
            document.content_fingerprint = fingerprint(
                document.body.encode('utf-8', 'surrogateescape'),
                self.config.fingerprint_prefix,
            )
        except Exception as e:
            raise HashError(file_path, str(e)) from e

        return document

    def sync_file(self, file_path: str, data: Optional[bytes] = None) -> DocumentResult:
        """Load one document and sync it, returning its outcome."""
        try:
            document = self.load_document(file_path, data)
        except DocumentSyncError as e:
            return self._failed(file_path, e)
        return self.sync_document(document)

    # Batch processing

    def run_paths(self, paths: Iterable[str]) -> SyncSummary:
        """Sync the documents stored at the given file paths."""
        return self.run((path, None) for path in paths)

    def run(self, sources: Iterable[Tuple[str, Optional[bytes]]]) -> SyncSummary:
        """Sync a batch of documents.

        A failing document is logged and recorded, and the batch carries on.

        Args:
            sources: (path, raw bytes) pairs; bytes may be None to read the path

        Returns:
            SyncSummary with one result per source, in input order
        """
        results: List[Optional[DocumentResult]] = []
        documents: List[Tuple[int, Document]] = []

        for index, (file_path, data) in enumerate(sources):
            logger.debug(f"Processing {file_path}")
            results.append(None)
            try:
                documents.append((index, self.load_document(file_path, data)))
            except DocumentSyncError as e:
                results[index] = self._failed(file_path, e)

        for index, result in self._sync_all(documents):
            results[index] = result

        summary = SyncSummary(results=results, dry_run=self.config.dry_run)
        logger.info(
            f"Sync finished: {summary.created_count} created, "
            f"{summary.updated_count} updated, {summary.unchanged_count} unchanged, "
            f"{summary.failed_count} failed"
        )
        return summary

    def _page_key(self, index: int, document: Document) -> tuple:
        """Key under which documents targeting the same page are serialized."""
        space = document.space or self.config.default_space
        if not space or not document.page_title:
            # Fails validation without touching Confluence
            return ("", "", index)
        return (space, document.page_title)

    def _sync_group(self, group: List[Tuple[int, Document]]) -> List[Tuple[int, DocumentResult]]:
        return [(index, self.sync_document(document)) for index, document in group]

    def _sync_all(self, documents: List[Tuple[int, Document]]) -> Iterator[Tuple[int, DocumentResult]]:
        """Sync parsed documents, in parallel when workers > 1.

        Documents that target the same page (same space and title) share a
        group, and a group is synced sequentially by a single worker.
        """
        if self.config.workers <= 1 or len(documents) <= 1:
            for index, document in documents:
                yield index, self.sync_document(document)
            return

        groups: Dict[tuple, List[Tuple[int, Document]]] = {}
        for index, document in documents:
            groups.setdefault(self._page_key(index, document), []).append((index, document))

        logger.debug(f"Syncing {len(groups)} page group(s) with {self.config.workers} workers")
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = [executor.submit(self._sync_group, group) for group in groups.values()]
            for future in as_completed(futures):
                yield from future.result()

    # Single document

    def sync_document(self, document: Document) -> DocumentResult:
        """Drive one document to a terminal outcome.

        Never raises for document-level problems; they are returned as a
        FAILED result.
        """
        try:
            return self._sync(document)
        except SyncError as e:
            return self._failed(document.file_path, e, document.content_fingerprint)

    def _failed(self, file_path: str, error: Exception, content_fingerprint: Optional[str] = None) -> DocumentResult:
        logger.error(f"Skipping {file_path}: {error}")
        return DocumentResult(
            file_path=file_path,
            action=SyncAction.FAILED,
            fingerprint=content_fingerprint,
            error=error,
        )

    def _validate(self, document: Document) -> Tuple[str, Optional[str], Optional[str]]:
        """Merge the document with the defaults and check it is publishable.

        Makes no repository calls.

        Returns:
            (space, parent_id, parent_title); exactly one of parent_id and
            parent_title is set

        Raises:
            MissingTitleError, MissingSpaceError, MissingParentError
        """
        if not document.page_title:
            raise MissingTitleError(document.file_path)

        space = document.space or self.config.default_space
        if not space:
            raise MissingSpaceError(document.file_path)

        if document.parent_id:
            return space, document.parent_id, None
        if document.parent_title:
            return space, None, document.parent_title
        if self.config.default_ancestor:
            return space, self.config.default_ancestor, None
        raise MissingParentError(document.file_path)

    def _sync(self, document: Document) -> DocumentResult:
        file_path = document.file_path
        space, parent_id, parent_title = self._validate(document)

        content_fingerprint = document.content_fingerprint
        if content_fingerprint is None:
            try:
                content_fingerprint = fingerprint(document.body, self.config.fingerprint_prefix)
            except Exception as e:
                raise HashError(file_path, str(e)) from e
            document.content_fingerprint = content_fingerprint

        if parent_id is None:
            parent_id = self.resolver.resolve_parent(space, parent_title, file_path)
            logger.debug(f"Resolved parent '{parent_title}' to page {parent_id} for {file_path}")

        page, found = self.resolver.find_page_by_title(space, document.page_title, file_path)

        if found:
            current_labels = self.resolver.fingerprint_labels(page, file_path)
            if current_labels and current_labels[0] == content_fingerprint:
                logger.info(f"No update needed for {file_path}")
                return DocumentResult(
                    file_path=file_path,
                    action=SyncAction.SKIP,
                    page_id=page.page_id,
                    fingerprint=content_fingerprint,
                )
            return self._update(document, space, parent_id, page, current_labels, content_fingerprint)

        return self._create(document, space, parent_id, content_fingerprint)

    def _update(
        self,
        document: Document,
        space: str,
        parent_id: str,
        page: RemotePage,
        current_labels: List[str],
        content_fingerprint: str,
    ) -> DocumentResult:
        file_path = document.file_path
        body = self.converter.markdown_to_storage(document.body)

        if self.config.dry_run:
            logger.info(f"Would update page {page.page_id} for {file_path}")
            return DocumentResult(file_path, SyncAction.UPDATE, page.page_id, content_fingerprint)

        try:
            current = self.repository.get_page(page.page_id)
        except Exception as e:
            raise UpdateFailedError(file_path, page.page_id, f"could not read version: {e}") from e

        for label in current_labels:
            try:
                self.repository.delete_label(page.page_id, label)
            except Exception as e:
                raise LabelError(file_path, page.page_id, label, "remove", str(e)) from e

        new_version = current.version + 1
        try:
            self.repository.update_page(
                page.page_id,
                document.page_title,
                space,
                parent_id,
                body,
                new_version,
            )
        except Exception as e:
            raise UpdateFailedError(file_path, page.page_id, str(e)) from e
        logger.info(f"Updated page successfully for {file_path} (v{current.version} -> v{new_version})")

        self._add_label(file_path, page.page_id, content_fingerprint)
        return DocumentResult(file_path, SyncAction.UPDATE, page.page_id, content_fingerprint)

    def _create(
        self,
        document: Document,
        space: str,
        parent_id: str,
        content_fingerprint: str,
    ) -> DocumentResult:
        file_path = document.file_path
        body = self.converter.markdown_to_storage(document.body)

        if self.config.dry_run:
            logger.info(f"Would create page '{document.page_title}' in space {space} for {file_path}")
            return DocumentResult(file_path, SyncAction.CREATE, None, content_fingerprint)

        try:
            new_page = self.repository.create_page(space, document.page_title, body, parent_id)
        except Exception as e:
            raise CreateFailedError(file_path, str(e)) from e
        logger.info(f"Created page successfully for {file_path} (page {new_page.page_id})")

        self._add_label(file_path, new_page.page_id, content_fingerprint)
        return DocumentResult(file_path, SyncAction.CREATE, new_page.page_id, content_fingerprint)

    def _add_label(self, file_path: str, page_id: str, label: str) -> None:
        try:
            self.repository.add_label(page_id, label)
        except Exception as e:
            raise LabelError(file_path, page_id, label, "add", str(e)) from e
