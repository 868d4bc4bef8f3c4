"""Markdown to Confluence storage format rendering.

Markdown is parsed with markdown-it-py, which follows CommonMark: fenced
blocks nested in lists or block quotes are code blocks too, and the fence's
info string is kept verbatim. Every code block is handed to a render-node
hook as the HTML is emitted; the default hook turns it into a Confluence
``code`` macro so the editor shows it with syntax highlighting and does not
reinterpret the code's markup characters. All other nodes keep
markdown-it-py's rendering, and the output is never parsed again.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from xml.sax.saxutils import escape

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll

from ..confluence_client.errors import ConversionError

logger = logging.getLogger(__name__)

MACRO_XML_START = '<ac:structured-macro ac:name="code">'
MACRO_XML_LANGUAGE = '<ac:parameter ac:name="language">{language}</ac:parameter>'
MACRO_XML_BODY = '<ac:plain-text-body><![CDATA[{body}]]></ac:plain-text-body>'
MACRO_XML_STOP = '</ac:structured-macro>'

# Rules switched on beyond the CommonMark preset
DEFAULT_RULES = ('table', 'strikethrough')

# Token types markdown-it-py emits for fenced and indented code
CODE_TOKEN_TYPES = ('fence', 'code_block')


@dataclass(frozen=True)
class CodeBlock:
    """A fenced or indented code block found while rendering the document.

    Attributes:
        info: Info string of a fenced block, e.g. "python" ("" when absent)
        literal: Raw code text, unescaped
    """
    info: str
    literal: str


RenderNodeHook = Callable[[CodeBlock], Optional[str]]


def _cdata_safe(text: str) -> str:
    # "]]>" would close the CDATA section early; split it across two sections
    return text.replace(']]>', ']]]]><![CDATA[>')


def code_block_macro(node: CodeBlock) -> str:
    """Render a code block as a Confluence code macro.

    The parts are joined with newlines: macro start, the language parameter
    (only when the block has an info string), the plain-text body and the
    macro end.
    """
    parts = [MACRO_XML_START]
    if node.info:
        parts.append(MACRO_XML_LANGUAGE.format(language=escape(node.info, {'"': '&quot;'})))
    parts.append(MACRO_XML_BODY.format(body=_cdata_safe(node.literal)))
    parts.append(MACRO_XML_STOP)
    return '\n'.join(parts)


class MarkdownConverter:
    """Converts markdown into Confluence storage format (XHTML).

    Example:
        >>> converter = MarkdownConverter()
        >>> converter.markdown_to_storage("```python\\nprint(1)\\n```")
        '<ac:structured-macro ac:name="code">\\n<ac:parameter ...'
    """

    def __init__(
        self,
        render_node_hook: Optional[RenderNodeHook] = code_block_macro,
        rules: Sequence[str] = DEFAULT_RULES,
    ):
        """Initialize the converter.

        Args:
            render_node_hook: Called once per code block in document order.
                Returns the replacement markup, or None to keep the default
                rendering. Pass None to disable the rewrite entirely.
            rules: markdown-it-py rules to enable on top of CommonMark

        Raises:
            ConversionError: If a rule is unknown
        """
        self.render_node_hook = render_node_hook
        self.rules = list(rules)
        try:
            self.parser = MarkdownIt('commonmark', {'xhtmlOut': True})
            if self.rules:
                self.parser.enable(self.rules)
        except Exception as e:
            raise ConversionError(f"Markdown parser setup failed: {e}") from e

        if render_node_hook is not None:
            for token_type in CODE_TOKEN_TYPES:
                self._install_code_rule(token_type)

    def _install_code_rule(self, token_type: str) -> None:
        """Route one code token type through the render-node hook."""
        default_rule = self.parser.renderer.rules[token_type]
        hook = self.render_node_hook

        def render_code(renderer, tokens, idx, options, env):
            token = tokens[idx]
            info = unescapeAll(token.info).strip() if token.type == 'fence' else ""
            fragment = hook(CodeBlock(info=info, literal=token.content))
            if fragment is None:
                return default_rule(tokens, idx, options, env)
            env['code_blocks'] = env.get('code_blocks', 0) + 1
            return fragment + '\n'

        self.parser.add_render_rule(token_type, render_code)

    def markdown_to_storage(self, markdown_text: str) -> str:
        """Render markdown to storage format.

        Text that was decoded with ``surrogateescape`` is rendered with its
        undecodable bytes shown as U+FFFD.

        Args:
            markdown_text: Markdown body (front matter already removed)

        Returns:
            Storage-format XHTML string

        Raises:
            ConversionError: If rendering fails
        """
        if not markdown_text:
            return ""

        text = markdown_text.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')
        env = {}
        try:
            result = self.parser.render(text, env)
        except Exception as e:
            raise ConversionError(f"Markdown rendering failed: {e}") from e

        if env.get('code_blocks'):
            logger.debug(f"Rewrote {env['code_blocks']} code block(s) as code macros")
        return result


def render(body: str) -> str:
    """Render a markdown body to storage format with code macros."""
    return MarkdownConverter().markdown_to_storage(body)
