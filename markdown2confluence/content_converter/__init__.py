"""Content conversion from markdown to Confluence storage format."""

from .markdown_converter import CodeBlock, MarkdownConverter, code_block_macro, render

__all__ = ['CodeBlock', 'MarkdownConverter', 'code_block_macro', 'render']
