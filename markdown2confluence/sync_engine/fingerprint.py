"""Content fingerprints stored on pages as labels."""

import hashlib
from typing import Union

FINGERPRINT_PREFIX = "sha-"
FINGERPRINT_LENGTH = 8


def fingerprint(body: Union[bytes, str], prefix: str = FINGERPRINT_PREFIX) -> str:
    """Return a short, stable fingerprint of a document body.

    The SHA-256 digest of the exact body bytes, as lowercase hex, truncated
    to eight characters and prefixed, e.g. ``sha-3f1a09bc``. Text is encoded
    as UTF-8 first; bytes decoded with ``surrogateescape`` are restored.
    """
    if isinstance(body, str):
        body = body.encode("utf-8", "surrogateescape")
    digest = hashlib.sha256(body).hexdigest()
    return prefix + digest[:FINGERPRINT_LENGTH]


def is_fingerprint_label(label: str, prefix: str = FINGERPRINT_PREFIX) -> bool:
    return label.startswith(prefix)
