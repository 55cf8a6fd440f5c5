"""The content-addressing tree.

Nodes form the output hierarchy; their paths compose into site URLs::

    root = Node(None, "out/")
    docs = Node(root, "docs/", meta_info={"orderInfo": 1})
    page = Node(docs, "page.html", meta_info={"title": "Page"})

    page.full_path              # "out/docs/page.html"
    page.resolve("../index.html")
    docs.route_to(page)         # "page.html"
"""

from arbor.tree.address import PathAddress, PathKind, is_absolute_uri
from arbor.tree.node import NODE_CAPABILITIES, Node, NodeProcessor, coerce_order_info, sort_nodes
from arbor.tree.urls import SITE_URL, join_url, route_url, site_url

__all__ = [
    "NODE_CAPABILITIES",
    "SITE_URL",
    "Node",
    "NodeProcessor",
    "PathAddress",
    "PathKind",
    "coerce_order_info",
    "is_absolute_uri",
    "join_url",
    "route_url",
    "site_url",
    "sort_nodes",
]
