"""Block rendering through the template chain.

``RenderPipeline.render_block()`` is the error boundary of a build: a
missing block, a missing processor or a processor exception is logged
with the node's full path and turns into "no output" (``None``), so one
broken page never halts the rendering of its siblings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from arbor.errors import BlockNotFound, RenderError
from arbor.events import AFTER_NODE_RENDERED, EventDispatcher
from arbor.pages.types import RenderedBlock, block_for

if TYPE_CHECKING:
    from arbor.pages.chain import TemplateChainResolver
    from arbor.processors.base import ProcessorRegistry
    from arbor.tree.node import Node

logger = logging.getLogger("arbor.render")


class RenderPipeline:
    """Renders named blocks of nodes in the context of their templates.

    Args:
        registry: Content processors available to block pipelines.
        resolver: Builds the template chain of a node.
        events: Receives ``after_node_rendered`` notifications.
    """

    __slots__ = ("_events", "_registry", "_resolver")

    def __init__(
        self,
        registry: ProcessorRegistry,
        resolver: TemplateChainResolver,
        events: EventDispatcher | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._events = events if events is not None else EventDispatcher()

    @property
    def events(self) -> EventDispatcher:
        return self._events

    def chain_for(self, node: Node, *, use_templates: bool = True) -> tuple[Node, ...]:
        if use_templates:
            return self._resolver.resolve(node)
        return (node,)

    def render_block(
        self,
        node: Node,
        block_name: str = "content",
        use_templates: bool = True,
    ) -> RenderedBlock | None:
        """Render the block *block_name* of *node*.

        With *use_templates* the node is rendered inside its template
        chain; the chain head (outermost template, or the node itself)
        must own the block.

        Returns:
            The rendered block, or ``None`` if rendering failed. Failures
            are logged, never raised.
        """
        try:
            chain = self.chain_for(node, use_templates=use_templates)
            head = chain[0]
            block = block_for(head, block_name)
            if block is None:
                raise BlockNotFound(head.full_path, block_name)
            processors = self._registry.processors_by_capability()
            content = block.render(chain, processors)
        except RenderError as exc:
            logger.error(
                "Error rendering node <%s> (block %r): %s: %s",
                node.full_path,
                block_name,
                type(exc).__name__,
                exc,
            )
            return None
        except Exception:
            logger.exception("Error rendering node <%s> (block %r)", node.full_path, block_name)
            return None

        result = RenderedBlock(content=content, node=node, block_name=block_name)
        listeners = len(self._events.listeners(AFTER_NODE_RENDERED))
        delivered = self._events.dispatch(AFTER_NODE_RENDERED, result, node)
        if delivered < listeners:
            logger.error(
                "%d of %d %s listener(s) failed for node <%s> (block %r)",
                listeners - delivered,
                listeners,
                AFTER_NODE_RENDERED,
                node.full_path,
                block_name,
            )
        return result
