"""Sync decision engine: fingerprints, page resolution and create/update/skip."""

from .engine import SyncEngine
from .fingerprint import FINGERPRINT_PREFIX, fingerprint, is_fingerprint_label
from .models import DocumentResult, SyncAction, SyncConfig, SyncSummary
from .page_resolver import PageResolver
from .errors import (
    HashError,
    MissingSpaceError,
    MissingParentError,
    MissingTitleError,
    LookupFailedError,
    ParentNotFoundError,
    CreateFailedError,
    UpdateFailedError,
    LabelError,
)

__all__ = [
    'SyncEngine',
    'FINGERPRINT_PREFIX',
    'fingerprint',
    'is_fingerprint_label',
    'DocumentResult',
    'SyncAction',
    'SyncConfig',
    'SyncSummary',
    'PageResolver',
    'HashError',
    'MissingSpaceError',
    'MissingParentError',
    'MissingTitleError',
    'LookupFailedError',
    'ParentNotFoundError',
    'CreateFailedError',
    'UpdateFailedError',
    'LabelError',
]
