"""The output tree.

A ``Node`` is addressed by a path relative to its parent. The full path
of a node is the concatenation of its ancestors' paths, so the tree
doubles as the site's URL space: ``resolve()`` turns any relative or
absolute reference into the node that serves it.

Mutation (attach, detach, reparent) is single-writer. Build the tree in
one phase, then read it from as many render workers as needed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from operator import attrgetter
from typing import Any, Protocol

from arbor.errors import (
    MalformedPath,
    NodeNotFound,
    PathCollision,
    PathEscapesRoot,
    TreeCycleError,
    UnsupportedOperation,
)
from arbor.tree.address import PathAddress, PathKind
from arbor.tree.urls import (
    SITE_ORIGIN,
    escapes_root,
    join_url,
    route_url,
    site_url,
    split_url,
)

logger = logging.getLogger("arbor.tree")

# Operations a node may forward to its processor
NODE_CAPABILITIES = frozenset({"render", "write", "is_changed"})

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class NodeProcessor(Protocol):
    """Provider of per-node behaviour stored in ``render_info["processor"]``.

    Each name in ``capabilities`` is a method taking the node as its
    first argument.
    """

    capabilities: frozenset[str]


def coerce_order_info(value: Any) -> int:
    """Interpret an ``orderInfo`` meta value as an integer.

    ``3`` -> 3, ``2.9`` -> 2, ``"12abc"`` -> 12, anything else -> 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return 0


def sort_nodes(nodes: Iterable[Node]) -> list[Node]:
    """Sort nodes by ``(order_info, title)``.

    Stable: nodes with equal keys keep their relative order.
    """
    return sorted(nodes, key=attrgetter("sort_key"))


class Node:
    """A node of the output tree.

    Args:
        parent: The owning node, or ``None`` for the tree root.
        path: Path relative to *parent*. Directories end with ``/``,
            fragments start with ``#``; compound paths such as
            ``dir/file#frag`` and absolute URLs are allowed. A compound
            ``dir/file`` must not sit next to a sibling ``dir/``; create
            ``file`` below the ``dir/`` node instead.
        meta_info: Initial meta information (title, orderInfo, lang, ...).

    Raises:
        MalformedPath: *path* is empty for a non-root node or ambiguous.
        PathCollision: *path* collides with a sibling directory.
    """

    __slots__ = ("_address", "_children", "_parent", "meta_info", "render_info")

    def __init__(
        self,
        parent: Node | None,
        path: str,
        *,
        meta_info: dict[str, Any] | None = None,
    ) -> None:
        self._parent: Node | None = None
        self._children: list[Node] = []
        self._address = PathAddress.parse(path, allow_empty=parent is None)
        self.meta_info: dict[str, Any] = dict(meta_info or {})
        self.render_info: dict[str, Any] = {}
        self.parent = parent

    # -- Ownership -----------------------------------------------------------

    @property
    def parent(self) -> Node | None:
        return self._parent

    @parent.setter
    def parent(self, value: Node | None) -> None:
        """Move the node below *value*, detaching it from its old parent.

        ``None`` detaches the node (and its subtree) from the tree.
        """
        if value is self._parent:
            return
        if value is not None:
            if not self.path:
                raise MalformedPath(self.path, "only the root node may have an empty path")
            if value.in_subtree_of(self):
                msg = f"Cannot move <{self.full_path}> below its own descendant <{value.full_path}>"
                raise TreeCycleError(msg)
            value._check_collision(self._address, ignore=self)

        if self._parent is not None:
            self._parent._children.remove(self)
        self._parent = value
        if value is not None:
            value._children.append(self)

    @property
    def children(self) -> tuple[Node, ...]:
        """Children in insertion order."""
        return tuple(self._children)

    @property
    def root(self) -> Node:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def _check_collision(self, address: PathAddress, *, ignore: Node | None = None) -> None:
        """Reject *address* if it shadows, or is shadowed by, a child directory."""
        for sibling in self._children:
            if sibling is ignore:
                continue
            other = sibling._address
            if _shadows(other, address):
                raise PathCollision(address.path, other.path)
            if _shadows(address, other):
                raise PathCollision(other.path, address.path)

    # -- Paths ---------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._address.path

    @path.setter
    def path(self, value: str) -> None:
        address = PathAddress.parse(value, allow_empty=self._parent is None)
        if self._parent is not None:
            self._parent._check_collision(address, ignore=self)
        self._address = address

    @property
    def address(self) -> PathAddress:
        return self._address

    @property
    def full_path(self) -> str:
        """Concatenation of all ancestor paths, or the own path if absolute."""
        if self._address.is_absolute or self._parent is None:
            return self.path
        return self._parent.full_path + self.path

    @property
    def level(self) -> int:
        """Depth in the hierarchy; the root is at level 0."""
        return 0 if self._parent is None else self._parent.level + 1

    @property
    def is_directory(self) -> bool:
        return self._address.kind is PathKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self._address.kind is PathKind.FILE

    @property
    def is_fragment(self) -> bool:
        return self._address.kind is PathKind.FRAGMENT

    @property
    def is_absolute(self) -> bool:
        return self._address.kind is PathKind.ABSOLUTE

    def match(self, candidate: str) -> str | None:
        """Match the node's own path against the beginning of *candidate*.

        See ``PathAddress.match`` for the per-kind boundary rules.
        """
        return self._address.match(candidate)

    # -- Meta info -----------------------------------------------------------

    def __getitem__(self, name: str) -> Any:
        return self.meta_info.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.meta_info[name] = value

    @property
    def order_info(self) -> int:
        """Integer value of the ``orderInfo`` meta key, 0 if unset or not numeric."""
        return coerce_order_info(self.meta_info.get("orderInfo"))

    @property
    def sort_key(self) -> tuple[int, str]:
        title = self.meta_info.get("title")
        return (self.order_info, "" if title is None else str(title))

    def __lt__(self, other: Node) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.sort_key < other.sort_key

    def sorted_children(self) -> list[Node]:
        """Children ordered by ``(orderInfo, title)`` for listings."""
        return sort_nodes(self._children)

    # -- Traversal -----------------------------------------------------------

    def in_subtree_of(self, node: Node) -> bool:
        """Check whether this node lies in the subtree spanned by *node*.

        Uses only the ownership links, never the path values. A node is
        in its own subtree.
        """
        current: Node | None = self
        while current is not None:
            if current is node:
                return True
            current = current._parent
        return False

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants, depth-first, parents first."""
        yield self
        for child in tuple(self._children):
            yield from child.walk()

    def find_child(self, path: str) -> Node | None:
        """Return the child whose own path equals *path*."""
        for child in self._children:
            if child.path == path:
                return child
        return None

    # -- URLs and resolution -------------------------------------------------

    def to_url(self) -> str:
        """Absolute URL of the node below the placeholder site origin.

        The root's real path is stripped, so a node with full path
        ``out/docs/page`` under root ``out/`` maps to ``/docs/page``.
        """
        full = self.full_path
        root_path = self.root.path
        if root_path and not self.is_absolute and full.startswith(root_path):
            full = full[len(root_path) :]
        return site_url(full)

    def route_to(self, other: Node | str) -> str:
        """Relative route from this node to *other*.

        *other* is a node or a path relative to this node. When both
        address the same location the raw path of *other* is returned.
        """
        if isinstance(other, Node):
            target = other.to_url()
            fallback = other.path
        elif isinstance(other, str):
            target = join_url(self.to_url(), other)
            fallback = other
        else:
            msg = f"route_to() expects a Node or str, got {type(other).__name__}"
            raise TypeError(msg)
        return route_url(self.to_url(), target) or fallback

    def resolve(self, path: str) -> Node | None:
        """Return the node addressed by *path*, or ``None``.

        *path* is relative to this node, or absolute from the site root
        when it starts with ``/``. Targets outside the output root, targets
        on other hosts and unparseable references resolve to ``None``.

        Resolution descends from the root, entering at each level the
        first child (in children order) whose path matches the front of
        the remaining target.
        """
        try:
            remaining = self._target(path)
        except PathEscapesRoot:
            logger.debug("Reference %r from <%s> escapes the output root", path, self.full_path)
            return None
        except MalformedPath as exc:
            logger.debug("Reference %r from <%s> is malformed: %s", path, self.full_path, exc)
            return None
        if remaining is None:
            return None
        return self._descend(remaining)

    def require(self, path: str) -> Node:
        """Like ``resolve()`` but raise instead of returning ``None``.

        Raises:
            MalformedPath: The reference cannot be parsed.
            PathEscapesRoot: The target lies outside the output root.
            NodeNotFound: No node exists for the target.
        """
        remaining = self._target(path)
        node = self._descend(remaining) if remaining is not None else None
        if node is None:
            raise NodeNotFound(path, self.full_path)
        return node

    def _target(self, path: str) -> str | None:
        """Root-relative target of *path*, ``None`` when it is off-site."""
        origin, url_path, fragment = split_url(join_url(self.to_url(), path))
        if origin != SITE_ORIGIN:
            return None
        if escapes_root(url_path):
            raise PathEscapesRoot(path)
        remaining = url_path[1:]
        if fragment:
            remaining += "#" + fragment
        return remaining

    def _descend(self, remaining: str) -> Node | None:
        node = self.root
        while remaining:
            for child in node._children:
                matched = child.match(remaining)
                if matched is not None:
                    break
            else:
                return None
            node = child
            remaining = remaining[len(matched) :]
        return node

    # -- Capabilities --------------------------------------------------------

    def invoke(self, capability: str, *args: Any, **kwargs: Any) -> Any:
        """Forward *capability* to the node's processor, node first.

        Raises:
            UnsupportedOperation: No processor is attached, or it does
                not provide *capability*.
        """
        processor = self.render_info.get("processor")
        if (
            capability not in NODE_CAPABILITIES
            or processor is None
            or capability not in getattr(processor, "capabilities", ())
        ):
            raise UnsupportedOperation(capability, self.full_path)
        return getattr(processor, capability)(self, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<Node: path={self.full_path}>"

    def __str__(self) -> str:
        return self.full_path


def _shadows(directory: PathAddress, other: PathAddress) -> bool:
    """True if compound path *other* reaches into sibling *directory*."""
    return (
        directory.is_directory
        and bool(directory.path)
        and not other.is_absolute
        and other.path != directory.path
        and other.path.startswith(directory.path)
    )
