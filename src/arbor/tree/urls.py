"""Site URL helpers.

Every node projects onto a synthetic absolute URL below a fixed
placeholder origin so that joining and routing can use URL semantics
regardless of where the output tree really lives.

Joining differs from ``urllib.parse.urljoin`` in one respect: ``..``
segments that climb above the site root are kept (``/../x``) instead of
being clamped, so callers can tell that a reference escapes the root.
"""

from __future__ import annotations

import posixpath
from urllib.parse import urlsplit

from arbor.errors import MalformedPath
from arbor.tree.address import is_absolute_uri

SITE_ORIGIN = "http://arbor.localhost"
SITE_URL = SITE_ORIGIN + "/"


def split_url(url: str) -> tuple[str, str, str | None]:
    """Split *url* into ``(origin, path, fragment)``.

    The query string, if any, stays attached to the path. The fragment
    is ``None`` when the URL has no ``#`` at all.

    Raises:
        MalformedPath: *url* cannot be parsed (e.g. an unclosed ``[``
            in the host).
    """
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise MalformedPath(url, str(exc)) from exc
    origin = f"{parts.scheme}://{parts.netloc}" if parts.netloc else f"{parts.scheme}:"
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    fragment = parts.fragment if "#" in url else None
    return origin, path, fragment


def normalize_path(path: str) -> str:
    """Collapse ``.``/``..`` segments and duplicate slashes in an absolute path.

    Trailing slashes survive. Leading ``..`` segments are kept::

        "/a/./b/../c/" -> "/a/c/"
        "/a/../../x"   -> "/../x"
    """
    rel = path.lstrip("/")
    if not rel:
        return "/"
    last = rel.rsplit("/", 1)[-1]
    trailing = rel.endswith("/") or last in (".", "..")
    norm = posixpath.normpath(rel)
    if norm == ".":
        return "/"
    return "/" + norm + ("/" if trailing else "")


def escapes_root(path: str) -> bool:
    """Return True if the root-relative part of *path* starts with ``..``.

    Any leading ``..`` counts, so ``/..foo/x`` is rejected along with ``/../x``.
    """
    return path.lstrip("/").startswith("..")


def join_url(base: str, ref: str) -> str:
    """Resolve reference *ref* against absolute URL *base*.

    Follows RFC 3986 section 5.2 for the cases node paths produce:
    absolute URIs pass through, ``#frag`` keeps the base document,
    ``/path`` is origin-relative, everything else is merged with the
    base directory.
    """
    if is_absolute_uri(ref):
        return ref

    origin, base_path, _ = split_url(base)
    ref_path, sep, fragment = ref.partition("#")

    if not ref_path:
        path = base_path
    elif ref_path.startswith("/"):
        path = normalize_path(ref_path)
    else:
        directory = base_path[: base_path.rfind("/") + 1]
        path = normalize_path(directory + ref_path)

    return origin + path + (f"#{fragment}" if sep else "")


def site_url(path: str) -> str:
    """Project a root-relative *path* onto the placeholder site origin."""
    if is_absolute_uri(path):
        return path
    return join_url(SITE_URL, path.lstrip("/"))


def route_url(base: str, target: str) -> str:
    """Return the shortest relative reference leading from *base* to *target*.

    Returns ``""`` when both URLs address the same document without a
    fragment, and *target* unchanged when the origins differ.
    """
    base_origin, base_path, _ = split_url(base)
    target_origin, target_path, fragment = split_url(target)
    if base_origin != target_origin:
        return target

    suffix = f"#{fragment}" if fragment is not None else ""
    if base_path == target_path:
        return suffix

    base_dir = base_path.split("/")[:-1]
    target_segments = target_path.split("/")

    common = 0
    limit = min(len(base_dir), len(target_segments) - 1)
    while common < limit and base_dir[common] == target_segments[common]:
        common += 1

    route = "../" * (len(base_dir) - common) + "/".join(target_segments[common:])
    if not route:
        route = "./"
    elif is_absolute_uri(route):
        # "a:b" would read as a scheme
        route = "./" + route
    return route + suffix
