"""YAML front matter parsing for markdown documents.

A document may start with a YAML block between ``---`` delimiters naming
where it is published:

    ---
    space: TEAM
    page_title: Release notes
    parent_title: Engineering
    ---
    # Release notes
    ...

Everything after the closing delimiter is the body. The body is hashed and
rendered exactly as it appears in the file.
"""

import re
from typing import Any, Dict, Optional

import yaml

from .errors import FrontmatterError
from .models import Document


class FrontmatterHandler:
    """Splits markdown documents into front matter fields and body.

    Recognised fields:
        - space: Target space key
        - page_title: Page title (required by the sync engine)
        - parent_id: Parent page ID
        - parent_title: Parent page title, resolved within the space

    Unknown fields are ignored. A document without front matter is returned
    with every field unset and the whole text as body.
    """

    # YAML block between --- delimiters at the very start of the file
    FRONTMATTER_PATTERN = re.compile(
        r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)',
        re.DOTALL
    )

    FIELDS = ('space', 'page_title', 'parent_id', 'parent_title')

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj, current_depth: int = 0, max_depth: int = MAX_YAML_DEPTH) -> None:
        """Reject YAML structures nested deeper than max_depth.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > max_depth:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {max_depth}"
            )

        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1, max_depth)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1, max_depth)

    @classmethod
    def _field(cls, file_path: str, frontmatter: Dict[str, Any], name: str) -> Optional[str]:
        """Read one scalar field as a stripped string, or None when blank."""
        value = frontmatter.get(name)
        if value is None:
            return None
        if isinstance(value, (dict, list)):
            raise FrontmatterError(
                file_path,
                f"Field '{name}' must be a scalar, got {type(value).__name__}"
            )
        text = str(value).strip()
        return text or None

    @classmethod
    def parse(cls, file_path: str, content: str) -> Document:
        """Parse YAML front matter from markdown content.

        Args:
            file_path: Path to the file (for error messages)
            content: Full markdown content including front matter

        Returns:
            Document with front matter fields and the remaining body

        Raises:
            FrontmatterError: If front matter is malformed or has invalid YAML
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return Document(file_path=file_path, body=content)

        frontmatter_str = match.group(1) or ""
        body = content[match.end():]

        try:
            frontmatter = yaml.safe_load(frontmatter_str)
        except yaml.YAMLError as e:
            raise FrontmatterError(
                file_path,
                f"Invalid YAML syntax: {str(e)}"
            )

        if frontmatter is None:
            frontmatter = {}

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message.split(": ", 1)[-1])

        fields = {name: cls._field(file_path, frontmatter, name) for name in cls.FIELDS}

        return Document(
            file_path=file_path,
            page_title=fields['page_title'] or "",
            body=body,
            space=fields['space'],
            parent_id=fields['parent_id'],
            parent_title=fields['parent_title'],
        )
