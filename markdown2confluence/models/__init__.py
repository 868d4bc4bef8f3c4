"""Data models shared between the Confluence client and the sync engine."""

from markdown2confluence.models.remote_page import RemotePage

__all__ = ['RemotePage']
