"""Template chain resolution.

The template chain of a page is the ordered sequence of templates that
wrap it: the template declared by the root first, then those declared by
each deeper ancestor, and finally the page itself. A page may instead
pick its template with its own ``template`` meta key; that template is
then wrapped in its own chain. Later elements are rendered *inside*
earlier ones, so the order is significant.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from arbor.tree.node import Node

logger = logging.getLogger("arbor.templates")

# Sentinel for "meta key absent" (None means "explicitly no template")
_MISSING = object()


class TemplateLookup(Protocol):
    """Answers "does this node declare a template, and which one?"."""

    def template_for(self, node: Node) -> Node | None: ...


class MetaTemplateLookup:
    """Template declarations read from node meta information.

    A node declares its template with the ``template`` meta key:

    - a ``Node`` is used as-is
    - a string is resolved relative to the declaring node
    - ``None`` declares that the node has no template

    Directory nodes without the key fall back to a child reachable as
    *default_template* (``"default.template"``).
    """

    __slots__ = ("_default_template",)

    def __init__(self, default_template: str = "default.template") -> None:
        self._default_template = default_template

    def template_for(self, node: Node) -> Node | None:
        from arbor.tree.node import Node

        declared = node.meta_info.get("template", _MISSING)
        if declared is None:
            return None
        if isinstance(declared, Node):
            return declared
        if isinstance(declared, str):
            template = node.resolve(declared)
            if template is None:
                logger.warning(
                    "Template %r declared by <%s> does not exist", declared, node.full_path
                )
            return template
        if declared is not _MISSING:
            logger.warning(
                "Ignoring template declaration of type %s on <%s>",
                type(declared).__name__,
                node.full_path,
            )
            return None
        if node.is_directory and self._default_template:
            return node.resolve(self._default_template)
        return None


class TemplateChainResolver:
    """Builds template chains from a ``TemplateLookup``.

    Usage::

        resolver = TemplateChainResolver(MetaTemplateLookup())
        resolver.resolve(page)  # (root_template, docs_template, page)
    """

    __slots__ = ("_lookup",)

    def __init__(self, lookup: TemplateLookup) -> None:
        self._lookup = lookup

    @property
    def lookup(self) -> TemplateLookup:
        return self._lookup

    def templates_for(self, node: Node) -> tuple[Node, ...]:
        """Templates wrapping *node*, outermost first, *node* excluded.

        A file node that declares its own template is wrapped in that
        template, which in turn is wrapped in its own templates. Otherwise
        the templates declared by the ancestors apply, root first.
        Ancestors without a template are skipped, as is a template already
        on the chain below it or repeating the previous chain element.
        """
        return tuple(self._templates_for(node, (node,)))

    def _templates_for(self, node: Node, below: tuple[Node, ...]) -> list[Node]:
        if not node.is_directory:
            own = self._lookup.template_for(node)
            if own is not None and own is not node:
                if any(own is n for n in below):
                    logger.warning(
                        "Template cycle: <%s> declares <%s>, which is already on its chain",
                        node.full_path,
                        own.full_path,
                    )
                else:
                    return [*self._templates_for(own, (*below, own)), own]
        return self._inherited(node, below)

    def _inherited(self, node: Node, below: tuple[Node, ...]) -> list[Node]:
        ancestors: list[Node] = []
        current = node.parent
        while current is not None:
            ancestors.append(current)
            current = current.parent

        chain: list[Node] = []
        for ancestor in reversed(ancestors):
            template = self._lookup.template_for(ancestor)
            if template is None or any(template is n for n in below):
                continue
            if chain and chain[-1] is template:
                continue
            chain.append(template)
        return chain

    def resolve(self, node: Node) -> tuple[Node, ...]:
        """Full template chain of *node*: its templates, then *node* itself."""
        return (*self.templates_for(node), node)
