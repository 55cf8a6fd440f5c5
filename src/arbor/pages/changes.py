"""Staleness checks for rendered pages.

A page must be re-rendered when its own source changed or when any
template of its chain changed. The check is evaluated on demand: each
page node carries a ``StalenessCheck`` in ``render_info["change_check"]``
that recomputes the template chain when asked, so a touched template
marks every dependent page stale without a reverse-dependency index.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from arbor.pages.chain import TemplateChainResolver
    from arbor.tree.node import Node


class SourceChangeQuery(Protocol):
    """Answers "has the source of this node changed since the last build?"."""

    def node_changed(self, node: Node) -> bool: ...


class ChangeSet:
    """In-memory ``SourceChangeQuery``.

    A node counts as changed when it was marked directly, or when its
    ``render_info["src"]`` is one of the changed source references.

    Usage::

        changes = ChangeSet.from_fingerprints(previous, current)
        changes.node_changed(page)
    """

    __slots__ = ("_nodes", "_sources")

    def __init__(self, sources: Iterable[str] = ()) -> None:
        self._sources: set[str] = set(sources)
        self._nodes: dict[int, Node] = {}

    @classmethod
    def from_fingerprints(
        cls,
        previous: Mapping[str, str],
        current: Mapping[str, str],
    ) -> ChangeSet:
        """Sources that are new or whose fingerprint differs from the last build."""
        return cls(src for src, digest in current.items() if previous.get(src) != digest)

    def mark(self, node: Node) -> None:
        self._nodes[id(node)] = node

    def mark_source(self, src: str) -> None:
        self._sources.add(src)

    def clear(self) -> None:
        self._sources.clear()
        self._nodes.clear()

    @property
    def sources(self) -> frozenset[str]:
        return frozenset(self._sources)

    def node_changed(self, node: Node) -> bool:
        if self._nodes.get(id(node)) is node:
            return True
        src = node.render_info.get("src")
        return src is not None and src in self._sources


@dataclass(frozen=True, slots=True)
class StalenessCheck:
    """Lazy staleness predicate bound to one node.

    Holds its dependencies explicitly: the node, the chain resolver and
    the source change query.
    """

    node: Node
    resolver: TemplateChainResolver
    sources: SourceChangeQuery

    def changed_nodes(self) -> tuple[Node, ...]:
        """Members of the current template chain whose source changed."""
        return tuple(n for n in self.resolver.resolve(self.node) if self.sources.node_changed(n))

    def __call__(self) -> bool:
        return any(self.sources.node_changed(n) for n in self.resolver.resolve(self.node))


class ChangeOracle:
    """Decides whether rendered output is still valid.

    Args:
        resolver: Builds the template chain a page depends on.
        sources: Reports changed sources.
    """

    __slots__ = ("_resolver", "_sources")

    def __init__(self, resolver: TemplateChainResolver, sources: SourceChangeQuery) -> None:
        self._resolver = resolver
        self._sources = sources

    @property
    def sources(self) -> SourceChangeQuery:
        return self._sources

    def check_for(self, node: Node) -> StalenessCheck:
        return StalenessCheck(node, self._resolver, self._sources)

    def attach(self, node: Node) -> StalenessCheck:
        """Store a staleness check on *node* and return it."""
        check = self.check_for(node)
        node.render_info["change_check"] = check
        return check

    def is_stale(self, node: Node) -> bool:
        """True if *node* or any template of its chain changed."""
        check = node.render_info.get("change_check")
        if check is None:
            check = self.check_for(node)
        return check()

    def stale_nodes(self, root: Node) -> Iterator[Node]:
        """Yield every output page below *root* (inclusive) that must be re-rendered.

        Nodes flagged with ``render_info["template"]`` only wrap other
        pages and are not yielded; their changes show up in the pages
        they wrap.
        """
        for node in root.walk():
            if _is_output_page(node) and self.is_stale(node):
                yield node

    def dependents_of(self, template: Node, root: Node) -> list[Node]:
        """Output pages below *root* whose template chain includes *template*."""
        return [
            node
            for node in root.walk()
            if node is not template
            and _is_output_page(node)
            and any(t is template for t in self._resolver.templates_for(node))
        ]


def _is_output_page(node: Node) -> bool:
    return "page" in node.render_info and not node.render_info.get("template", False)
