"""Pages, template chains, and the render pipeline.

Conventions:

    out/
      default.template     # Root template (wraps every page)
      index.html
      docs/
        default.template   # Nested template (inside the root template)
        page.html          # chain: out/default.template, docs/default.template, page

A directory declares its template with the ``template`` meta key, or by
holding a ``default.template`` child.
"""

from arbor.pages.chain import MetaTemplateLookup, TemplateChainResolver, TemplateLookup
from arbor.pages.changes import ChangeOracle, ChangeSet, SourceChangeQuery, StalenessCheck
from arbor.pages.handler import PageHandler
from arbor.pages.pipeline import RenderPipeline
from arbor.pages.types import (
    Block,
    Page,
    PageSource,
    RenderContext,
    RenderedBlock,
    block_for,
    render_chain,
)

__all__ = [
    "Block",
    "ChangeOracle",
    "ChangeSet",
    "MetaTemplateLookup",
    "Page",
    "PageHandler",
    "PageSource",
    "RenderContext",
    "RenderPipeline",
    "RenderedBlock",
    "SourceChangeQuery",
    "StalenessCheck",
    "TemplateChainResolver",
    "TemplateLookup",
    "block_for",
    "render_chain",
]
