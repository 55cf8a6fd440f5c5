"""Path classification for node paths.

A node path is one of four kinds:

- ``"dir/"``         — directory (trailing slash)
- ``"#section"``     — fragment (leading hash)
- ``"http://x.org/"`` — absolute (parses as an absolute URI)
- anything else      — file, including compound ``"dir/file#section"``

Classification is pure and cached on a frozen value object.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from arbor.errors import MalformedPath

# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) followed by ":"
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


class PathKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    FRAGMENT = "fragment"
    ABSOLUTE = "absolute"


def is_absolute_uri(path: str) -> bool:
    """Return True if *path* carries a URI scheme (``http:``, ``mailto:``...)."""
    return _SCHEME_RE.match(path) is not None


@dataclass(frozen=True, slots=True)
class PathAddress:
    """An immutable, classified node path.

    Attributes:
        path: The raw path string.
        kind: The classification of ``path``.
    """

    path: str
    kind: PathKind

    @classmethod
    def parse(cls, path: str, *, allow_empty: bool = False) -> PathAddress:
        """Classify *path*, raising ``MalformedPath`` if it is ambiguous.

        Args:
            path: The path string relative to the parent node.
            allow_empty: Accept ``""`` (only the tree root may use it).

        Raises:
            MalformedPath: The path is empty, has more than one ``#``,
                is a fragment containing ``/``, or a directory with a ``#``.
        """
        if not isinstance(path, str):
            raise MalformedPath(repr(path), "path must be a string")
        if not path:
            if allow_empty:
                return cls(path, PathKind.DIRECTORY)
            raise MalformedPath(path, "only the root node may have an empty path")

        if is_absolute_uri(path):
            return cls(path, PathKind.ABSOLUTE)

        if path.count("#") > 1:
            raise MalformedPath(path, "more than one '#'")

        if path.startswith("#"):
            if "/" in path:
                raise MalformedPath(path, "a fragment cannot contain '/'")
            return cls(path, PathKind.FRAGMENT)

        if path.endswith("/"):
            if "#" in path:
                raise MalformedPath(path, "a directory cannot contain '#'")
            return cls(path, PathKind.DIRECTORY)

        return cls(path, PathKind.FILE)

    @property
    def is_directory(self) -> bool:
        return self.kind is PathKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is PathKind.FILE

    @property
    def is_fragment(self) -> bool:
        return self.kind is PathKind.FRAGMENT

    @property
    def is_absolute(self) -> bool:
        return self.kind is PathKind.ABSOLUTE

    def match(self, candidate: str) -> str | None:
        """Match this path against the beginning of *candidate*.

        Literal, case-sensitive comparison with per-kind boundaries:

        - directory: ``"dir/"`` matches ``"dir/rest"`` (consuming the slash)
          and ``"dir"`` at end of string
        - fragment: exact match only
        - file: prefix followed by ``#`` or end of string
        - absolute: never matches; absolute nodes sit outside the hierarchy

        Returns:
            The matched prefix of *candidate*, or ``None``.
        """
        path = self.path
        if self.kind is PathKind.DIRECTORY:
            name = path[:-1]
            if not name or not candidate.startswith(name):
                return None
            rest = candidate[len(name) :]
            if not rest:
                return name
            if rest[0] == "/":
                return name + "/"
            return None

        if self.kind is PathKind.FRAGMENT:
            return path if candidate == path else None

        if self.kind is PathKind.FILE:
            if not candidate.startswith(path):
                return None
            rest = candidate[len(path) :]
            if not rest or rest[0] == "#":
                return path
            return None

        return None

    def __str__(self) -> str:
        return self.path
