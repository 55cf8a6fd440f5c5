"""Page nodes.

``PageHandler`` turns parsed pages into nodes of the output tree and is
the processor those nodes delegate their capabilities to::

    node = handler.create_node(docs, PageSource("docs/index.page", page))
    node.invoke("render")       # -> RenderedBlock | None
    node.invoke("write")        # -> {"data": "..."} | None
    node.invoke("is_changed")   # -> bool
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING, Any

from arbor.tree.node import Node

if TYPE_CHECKING:
    from arbor.config import SiteConfig
    from arbor.pages.changes import ChangeOracle
    from arbor.pages.pipeline import RenderPipeline
    from arbor.pages.types import PageSource, RenderedBlock

logger = logging.getLogger("arbor.render")


class PageHandler:
    """Creates page nodes and implements their ``render``/``write``/``is_changed``.

    Args:
        config: Site configuration (default language, output extension).
        pipeline: Renders blocks of page nodes.
        oracle: Decides whether a page node is stale.
    """

    capabilities = frozenset({"render", "write", "is_changed"})

    __slots__ = ("_config", "_oracle", "_pipeline")

    def __init__(self, config: SiteConfig, pipeline: RenderPipeline, oracle: ChangeOracle) -> None:
        self._config = config
        self._pipeline = pipeline
        self._oracle = oracle

    def output_name(self, source: PageSource) -> str:
        """Output path of *source*: ``"docs/index.page"`` -> ``"index.html"``."""
        stem = posixpath.splitext(posixpath.basename(source.filename))[0]
        return f"{stem}.{self._config.output_extension}"

    def create_node(
        self,
        parent: Node,
        source: PageSource,
        *,
        path: str | None = None,
        template: bool = False,
    ) -> Node:
        """Create (or reuse) the node for *source* below *parent*.

        The node path is *path*, or the output name of *source*. An
        existing child with the same path is returned as-is. With
        *template* the node is flagged as a template that only wraps
        other pages.

        Raises:
            MalformedPath: The output name is not a valid path.
            PathCollision: The output name collides with a sibling directory.
        """
        path = path or self.output_name(source)
        existing = parent.find_child(path)
        if existing is not None:
            logger.debug("Reusing node <%s> for %s", existing.full_path, source.filename)
            return existing

        meta_info = dict(source.page.meta_info)
        meta_info.setdefault("lang", self._config.default_lang)

        node = Node(parent, path, meta_info=meta_info)
        node.render_info["src"] = source.filename
        node.render_info["processor"] = self
        node.render_info["page"] = source.page
        if template:
            node.render_info["template"] = True
        self._oracle.attach(node)
        return node

    # -- Node capabilities ---------------------------------------------------

    def render(
        self,
        node: Node,
        block_name: str | None = None,
        use_templates: bool = True,
    ) -> RenderedBlock | None:
        return self._pipeline.render_block(
            node,
            block_name or self._config.default_block,
            use_templates,
        )

    def write(self, node: Node) -> dict[str, Any] | None:
        """Data to write for *node*, or ``None`` if rendering failed."""
        result = self.render(node)
        if result is None:
            return None
        return {"data": result.content}

    def is_changed(self, node: Node) -> bool:
        return self._oracle.is_stale(node)
