"""Arbor exception hierarchy.

Shared across the tree, the template chain, and the render pipeline so
every module raises and catches the same types.
"""


class ArborError(Exception):
    """Base for all arbor-specific errors."""


# -- Tree construction --------------------------------------------------------


class TreeError(ArborError):
    """A structural violation while building the node tree.

    Fatal at construction time. Never raised while rendering.
    """


class MalformedPath(TreeError, ValueError):  # noqa: N818
    """A path string that cannot be classified unambiguously."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed path {path!r}: {reason}")


class PathCollision(TreeError):  # noqa: N818
    """A compound path shadows a sibling directory (``dir/file`` next to ``dir/``)."""

    def __init__(self, path: str, sibling: str) -> None:
        self.path = path
        self.sibling = sibling
        super().__init__(
            f"Path {path!r} collides with sibling {sibling!r}; "
            f"create {path[len(sibling) :]!r} below {sibling!r} instead"
        )


class TreeCycleError(TreeError):
    """Reparenting would make a node its own ancestor."""


# -- Addressing ---------------------------------------------------------------


class PathEscapesRoot(ArborError, LookupError):  # noqa: N818
    """A resolved target lies outside the output root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path {path!r} lies outside the output root")


class NodeNotFound(ArborError, LookupError):  # noqa: N818
    """No node exists for a resolved path."""

    def __init__(self, path: str, origin: str = "") -> None:
        self.path = path
        self.origin = origin
        where = f" (resolved from <{origin}>)" if origin else ""
        super().__init__(f"No node for path {path!r}{where}")


# -- Rendering ----------------------------------------------------------------


class RenderError(ArborError):
    """Base for failures while rendering a block.

    Caught at the ``RenderPipeline`` boundary and turned into "no output".
    """


class BlockNotFound(RenderError):  # noqa: N818
    """The chain head carries no block with the requested name."""

    def __init__(self, node_path: str, block_name: str) -> None:
        self.node_path = node_path
        self.block_name = block_name
        super().__init__(f"no block with name {block_name!r} in <{node_path}>")


class ProcessorFailure(RenderError):  # noqa: N818
    """A content processor is missing or raised while rendering."""

    def __init__(self, processor: str, detail: str) -> None:
        self.processor = processor
        self.detail = detail
        super().__init__(f"content processor {processor!r} failed: {detail}")


class ProcessorNotInstalledError(RenderError):
    """Raised when the library backing a content processor is missing."""


class UnsupportedOperation(ArborError, AttributeError):  # noqa: N818
    """A capability was invoked on a node whose processor does not provide it."""

    def __init__(self, capability: str, node_path: str) -> None:
        self.capability = capability
        self.node_path = node_path
        super().__init__(f"Node <{node_path}> does not support {capability!r}")
