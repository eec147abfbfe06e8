"""
sway-balance

Balances the children of containers in a sway (or i3) layout tree so that
siblings take equal space along their container's split axis.

This package provides:
- An i3/sway IPC client for reading the tree and running commands
- Breadth first lookup of nodes and of the focused container
- Reordering of children so equal sizes are reachable
- Iterative resizing of children towards the mean size
- A balancer that drives the live tree, re-reading it after every command

Example usage:
    from swaybalance import Balancer, BalanceConfig, SwayConnection
    from swaybalance.cli import resolve_target

    with SwayConnection() as conn:
        workspace = resolve_target(conn, focus=False)
        Balancer(conn, BalanceConfig()).balance(workspace)

Or run directly:
    python -m swaybalance --focus
"""

__version__ = "0.1.0"
__author__ = "Rintse"

from .protocol import (
    NodeLayout,
    Rect,
    Node,
    Workspace,
    CommandOutcome,
)

from .errors import (
    BalanceError,
    IPCError,
    IPCConnectionError,
    QueryError,
    NoFocusError,
    NodeGoneError,
    CommandError,
    ResizeError,
    SwapError,
    ReorderError,
)

from .ipc import SwayConnection, MessageType

from .locator import bfsearch, find_by_id, top_focus, fetch_node

from .axis import Axis, resolve_axis

from .reorder import (
    ReorderEngine,
    ReorderStrategy,
    find_faulty_position,
    minimum_swaps,
)

from .resize import ResizeEngine, ResizeOutcome, ResizeResult

from .balancer import Balancer, BalanceConfig, BalanceReport

from . import topics

__all__ = [
    # Version
    "__version__",
    # Data model
    "NodeLayout",
    "Rect",
    "Node",
    "Workspace",
    "CommandOutcome",
    # Errors
    "BalanceError",
    "IPCError",
    "IPCConnectionError",
    "QueryError",
    "NoFocusError",
    "NodeGoneError",
    "CommandError",
    "ResizeError",
    "SwapError",
    "ReorderError",
    # Connection
    "SwayConnection",
    "MessageType",
    # Locator
    "bfsearch",
    "find_by_id",
    "top_focus",
    "fetch_node",
    # Axis
    "Axis",
    "resolve_axis",
    # Engines
    "ReorderEngine",
    "ReorderStrategy",
    "find_faulty_position",
    "minimum_swaps",
    "ResizeEngine",
    "ResizeOutcome",
    "ResizeResult",
    # Balancer
    "Balancer",
    "BalanceConfig",
    "BalanceReport",
    # Event topics
    "topics",
]
