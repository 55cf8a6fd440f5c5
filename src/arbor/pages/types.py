"""Data models for pages and block rendering.

A ``Page`` is the parsed form of a content file: an ordered set of named
``Block`` objects plus meta information. Pages are attached to nodes via
``render_info["page"]``; templates are ordinary nodes carrying a page.

Rendering a block walks the template chain: the chain head renders its
block, and any processor that needs the wrapped content asks the
``RenderContext`` for ``chain_content()``, which renders the same block
of the next chain element.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from arbor.errors import BlockNotFound, ProcessorFailure, RenderError

if TYPE_CHECKING:
    from arbor.processors.base import ContentProcessor
    from arbor.tree.node import Node


@dataclass(slots=True)
class RenderContext:
    """Mutable state threaded through a block's processor pipeline.

    Attributes:
        content: The text being transformed.
        chain: Template chain, outermost template first, page last.
        processors: Capability key -> processor snapshot for this render.
        block_name: Name of the block being rendered.
    """

    content: str
    chain: tuple[Node, ...]
    processors: Mapping[str, ContentProcessor]
    block_name: str = "content"

    @property
    def ref_node(self) -> Node:
        """The node owning the block currently being rendered."""
        return self.chain[0]

    @property
    def dest_node(self) -> Node:
        """The page node the output is produced for."""
        return self.chain[-1]

    def has_chain_content(self, block_name: str | None = None) -> bool:
        """True if the next chain element carries the block."""
        rest = self.chain[1:]
        return bool(rest) and block_for(rest[0], block_name or self.block_name) is not None

    def chain_content(self, block_name: str | None = None) -> str:
        """Render the same block of the next chain element.

        Returns ``""`` at the end of the chain.

        Raises:
            BlockNotFound: The next chain element lacks the block.
        """
        rest = self.chain[1:]
        if not rest:
            return ""
        return render_chain(rest, block_name or self.block_name, self.processors)


@dataclass(frozen=True, slots=True)
class Block:
    """A named, renderable unit of content.

    Attributes:
        name: Block name (``"content"``, ``"sidebar"``...).
        content: Raw block source.
        pipeline: Capability keys of the processors applied in order,
            e.g. ``("markdown", "template")``.
    """

    name: str
    content: str
    pipeline: tuple[str, ...] = ()

    def render(
        self,
        chain: Sequence[Node],
        processors: Mapping[str, ContentProcessor],
    ) -> str:
        """Render this block in the context of *chain*.

        Raises:
            ProcessorFailure: A pipeline key has no processor, or the
                processor raised.
            BlockNotFound: A nested chain element lacks the block.
        """
        context = RenderContext(
            content=self.content,
            chain=tuple(chain),
            processors=processors,
            block_name=self.name,
        )
        for key in self.pipeline:
            processor = processors.get(key)
            if processor is None:
                raise ProcessorFailure(key, "no content processor registered")
            try:
                context = processor(context)
            except RenderError:
                raise
            except Exception as exc:
                raise ProcessorFailure(key, str(exc)) from exc
        return context.content


@dataclass(frozen=True, slots=True)
class Page:
    """A parsed page: ordered blocks plus meta information."""

    blocks: Mapping[str, Block]
    meta_info: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_blocks(cls, *blocks: Block, **meta_info: Any) -> Page:
        """Build a page from blocks in declaration order.

        Usage::

            page = Page.from_blocks(
                Block("content", "# Hello", pipeline=("markdown",)),
                title="Hello",
            )
        """
        return cls({block.name: block for block in blocks}, meta_info)

    def __contains__(self, block_name: object) -> bool:
        return block_name in self.blocks


@dataclass(frozen=True, slots=True)
class PageSource:
    """An already parsed content file, ready to become a node.

    Attributes:
        filename: Source file reference, stored as ``render_info["src"]``.
        page: The parsed page.
    """

    filename: str
    page: Page


@dataclass(frozen=True, slots=True)
class RenderedBlock:
    """The output of rendering one block for one node."""

    content: str
    node: Node
    block_name: str = "content"

    def __str__(self) -> str:
        return self.content


def block_for(node: Node, block_name: str) -> Block | None:
    """Return the block *block_name* of the page attached to *node*."""
    page = node.render_info.get("page")
    if page is None:
        return None
    return page.blocks.get(block_name)


def render_chain(
    chain: Sequence[Node],
    block_name: str,
    processors: Mapping[str, ContentProcessor],
) -> str:
    """Render *block_name* of the chain head with the rest as nested content.

    Raises:
        BlockNotFound: The chain head has no such block.
    """
    head = chain[0]
    block = block_for(head, block_name)
    if block is None:
        raise BlockNotFound(head.full_path, block_name)
    return block.render(chain, processors)
