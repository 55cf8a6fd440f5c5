"""Arbor — content tree and template-chain rendering for static sites.

Builds the output hierarchy of a site as a tree of nodes, resolves
references between them, renders pages inside their inherited
templates, and tells which pages are stale.

Basic usage::

    from arbor import Block, Page, PageSource, Site

    site = Site()
    docs = site.add_directory(site.root, "docs/", orderInfo=1)
    page = site.add_page(
        docs,
        PageSource("docs/page.page", Page.from_blocks(Block("content", "Hi"), title="Page")),
    )
    site.render(page).content
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ArborError",
    "Block",
    "BlockNotFound",
    "Node",
    "Page",
    "PageSource",
    "RenderPipeline",
    "RenderedBlock",
    "Site",
    "SiteConfig",
    "TemplateChainResolver",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import arbor`` fast while providing a clean top-level API.
    """
    if name == "Site":
        from arbor.site import Site

        return Site

    if name == "SiteConfig":
        from arbor.config import SiteConfig

        return SiteConfig

    if name == "Node":
        from arbor.tree.node import Node

        return Node

    if name in ("Block", "Page", "PageSource", "RenderedBlock"):
        from arbor.pages import types as _types

        return getattr(_types, name)

    if name == "RenderPipeline":
        from arbor.pages.pipeline import RenderPipeline

        return RenderPipeline

    if name == "TemplateChainResolver":
        from arbor.pages.chain import TemplateChainResolver

        return TemplateChainResolver

    if name in ("ArborError", "BlockNotFound"):
        from arbor import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
