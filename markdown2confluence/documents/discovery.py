"""Discovery of markdown files to publish."""

import logging
import os
from typing import Iterable, List

from .errors import DocumentReadError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = '.md'


def _is_markdown(name: str) -> bool:
    return name.lower().endswith(MARKDOWN_SUFFIX)


def find_markdown_files(paths: Iterable[str], recursive: bool = False) -> List[str]:
    """Expand paths into the list of markdown files to publish.

    A regular file is taken as given, whatever its extension. A directory
    contributes the ``.md`` files directly inside it, or every ``.md`` file
    in its tree when recursive is set. Files from each directory are sorted
    so runs are reproducible.

    Args:
        paths: Files and/or directories
        recursive: Descend into sub-directories

    Returns:
        File paths in discovery order, without duplicates

    Raises:
        DocumentReadError: If a path does not exist or cannot be listed
    """
    result: List[str] = []
    seen = set()

    for path in paths:
        if not os.path.exists(path):
            raise DocumentReadError(path, "No such file or directory")

        if os.path.isfile(path):
            found = [path]
        elif recursive:
            found = []
            for root, dirs, files in os.walk(path):
                dirs.sort()
                found.extend(os.path.join(root, name) for name in sorted(files) if _is_markdown(name))
        else:
            try:
                entries = sorted(os.listdir(path))
            except OSError as e:
                raise DocumentReadError(path, str(e)) from e
            found = [
                os.path.join(path, name)
                for name in entries
                if _is_markdown(name) and os.path.isfile(os.path.join(path, name))
            ]

        logger.debug(f"Found {len(found)} markdown file(s) under {path}")
        for file_path in found:
            if file_path not in seen:
                seen.add(file_path)
                result.append(file_path)

    return result
