"""One build run.

``Site`` wires the tree, the template chain, the processor registry, the
change oracle and the render pipeline together from a ``SiteConfig``.
Everything it creates lives exactly as long as the build run; there is
no process-wide registry.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from arbor.config import SiteConfig
from arbor.events import AFTER_NODE_RENDERED, EventDispatcher
from arbor.pages.chain import MetaTemplateLookup, TemplateChainResolver, TemplateLookup
from arbor.pages.changes import ChangeOracle, ChangeSet, SourceChangeQuery
from arbor.pages.handler import PageHandler
from arbor.pages.pipeline import RenderPipeline
from arbor.pages.types import PageSource, RenderedBlock
from arbor.processors.base import ProcessorRegistry
from arbor.processors.markdown import MarkdownProcessor
from arbor.processors.template import TemplateProcessor
from arbor.tree.node import Node


class Site:
    """The output tree plus everything needed to render it.

    Usage::

        site = Site(SiteConfig(root_path="out/"))
        docs = site.add_directory(site.root, "docs/", orderInfo=1)
        page = site.add_page(docs, PageSource("docs/page.page", page))
        site.render(page).content

    Args:
        config: Site configuration (defaults apply when omitted).
        sources: Change query for staleness checks; an empty
            ``ChangeSet`` by default.
        lookup: Template declarations; ``MetaTemplateLookup`` by default.
        registry: Content processors; when omitted, a registry with the
            template and markdown processors is created.
    """

    def __init__(
        self,
        config: SiteConfig | None = None,
        *,
        sources: SourceChangeQuery | None = None,
        lookup: TemplateLookup | None = None,
        registry: ProcessorRegistry | None = None,
    ) -> None:
        self.config = config or SiteConfig()
        self.root = Node(None, self.config.root_path)
        self.events = EventDispatcher()
        self.registry = registry if registry is not None else self._default_registry()
        self.sources: SourceChangeQuery = sources if sources is not None else ChangeSet()
        self.resolver = TemplateChainResolver(
            lookup or MetaTemplateLookup(self.config.default_template)
        )
        self.oracle = ChangeOracle(self.resolver, self.sources)
        self.pipeline = RenderPipeline(self.registry, self.resolver, self.events)
        self.pages = PageHandler(self.config, self.pipeline, self.oracle)

    def _default_registry(self) -> ProcessorRegistry:
        registry = ProcessorRegistry()
        registry.register(TemplateProcessor.from_config(self.config))
        registry.register(MarkdownProcessor.from_config(self.config))
        return registry

    # -- Tree construction ---------------------------------------------------

    def add_directory(self, parent: Node, path: str, **meta_info: Any) -> Node:
        """Return the child directory *path* of *parent*, creating it if needed."""
        existing = parent.find_child(path)
        if existing is not None:
            existing.meta_info.update(meta_info)
            return existing
        return Node(parent, path, meta_info=meta_info)

    def add_page(self, parent: Node, source: PageSource) -> Node:
        return self.pages.create_node(parent, source)

    def add_template(self, parent: Node, source: PageSource, path: str | None = None) -> Node:
        """Attach a template node, named after its source file unless *path* is given."""
        return self.pages.create_node(
            parent,
            source,
            path=path or source.filename.rsplit("/", 1)[-1],
            template=True,
        )

    # -- Rendering -----------------------------------------------------------

    def on_rendered(self, handler: Callable[[RenderedBlock, Node], Any]) -> None:
        self.events.subscribe(AFTER_NODE_RENDERED, handler)

    def render(
        self,
        node: Node,
        block_name: str | None = None,
        use_templates: bool = True,
    ) -> RenderedBlock | None:
        return self.pipeline.render_block(
            node, block_name or self.config.default_block, use_templates
        )

    def stale_pages(self) -> list[Node]:
        return list(self.oracle.stale_nodes(self.root))
