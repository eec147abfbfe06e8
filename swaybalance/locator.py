"""
Tree Locator

Breadth first searches over a layout tree snapshot, and re-fetching a node's
current state from the compositor.
"""

from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING, Callable, Optional

from .errors import NodeGoneError
from .protocol import Node

if TYPE_CHECKING:
    from .ipc import SwayConnection


def bfsearch(root: Node, predicate: Callable[[Node], bool]) -> Optional[Node]:
    """Breadth first search for the first node for which ``predicate`` holds.

    Args:
        root: Root of the (sub)tree to search
        predicate: Test applied to each node in frontier order

    Returns:
        The first matching node, or None if none matches
    """
    queue = deque([root])

    while queue:
        node = queue.popleft()
        if predicate(node):
            return node
        queue.extend(node.nodes)

    return None


def find_by_id(root: Node, node_id: int) -> Optional[Node]:
    """Find the node with ``node_id`` in some (sub)tree."""
    return bfsearch(root, lambda n: n.id == node_id)


def top_focus(root: Node) -> Optional[Node]:
    """Find the shallowest focused node.

    Breadth first order visits by increasing depth, so this is the largest
    container on the focus path rather than the focused leaf.
    """
    return bfsearch(root, lambda n: n.focused)


def fetch_node(conn: "SwayConnection", node_id: int) -> Node:
    """Get the latest snapshot of a node from the compositor.

    Args:
        conn: Connection providing ``get_tree()``
        node_id: Identifier of the node to fetch

    Returns:
        Fresh snapshot of the node and its subtree

    Raises:
        NodeGoneError: If the node no longer exists
    """
    node = find_by_id(conn.get_tree(), node_id)
    if node is None:
        raise NodeGoneError(node_id)
    return node
