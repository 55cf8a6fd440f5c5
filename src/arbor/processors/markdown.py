"""Markdown content processor wrapping patitas.

Registered under the ``"markdown"`` capability key; blocks opt in with
``pipeline=("markdown",)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arbor.errors import ProcessorNotInstalledError

if TYPE_CHECKING:
    from patitas import Markdown

    from arbor.config import SiteConfig
    from arbor.pages.types import RenderContext


class MarkdownProcessor:
    """Render block content from Markdown to HTML via patitas.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Enable syntax highlighting for fenced code blocks.
    """

    processes = "markdown"

    def __init__(
        self,
        *,
        plugins: list[str] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md: Markdown = _get_markdown(plugins=plugins, highlight=highlight)

    @classmethod
    def from_config(cls, config: SiteConfig) -> MarkdownProcessor:
        return cls(plugins=list(config.markdown_plugins) or None, highlight=config.highlight)

    def render(self, source: str) -> str:
        if not source:
            return ""
        return self._md(source)

    def __call__(self, context: RenderContext) -> RenderContext:
        context.content = self.render(context.content)
        return context


def _get_markdown(
    *,
    plugins: list[str] | None,
    highlight: bool,
) -> Markdown:
    """Create a patitas Markdown instance, raising a clear error if missing."""
    try:
        from patitas import Markdown
    except ImportError:
        msg = (
            "arbor's markdown processor requires 'patitas'. "
            "Install with: pip install patitas"
        )
        raise ProcessorNotInstalledError(msg) from None

    return Markdown(plugins=plugins or ["all"], highlight=highlight)
