"""
Balancer

Walks a subtree of the layout tree level by level and equalises the
children of every split container in it.

The compositor owns the tree and may change it at any time, including in
response to our own commands. Nodes are therefore tracked by identifier
only, and each container is fetched fresh right before it is worked on.
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from pubsub import pub

from . import topics
from .axis import resolve_axis
from .locator import fetch_node
from .protocol import Node
from .reorder import ReorderEngine, ReorderStrategy
from .resize import ResizeEngine

if TYPE_CHECKING:
    from .ipc import SwayConnection

logger = logging.getLogger(__name__)


@dataclass
class BalanceConfig:
    """Configuration for a balance run."""

    # Balance the topmost focused container instead of the whole workspace
    focus: bool = False

    # Reordering done before resizing each container
    strategy: ReorderStrategy = ReorderStrategy.GEOMETRIC

    # Swap limit per container (None: square of the child count)
    max_swaps: Optional[int] = None

    # Resize pass limit per container (None: triangular number of the child count)
    max_resize_passes: Optional[int] = None

    # IPC socket (None: $SWAYSOCK, then $I3SOCK)
    socket_path: Optional[str] = None


@dataclass
class BalanceReport:
    """What a balance run did."""

    root_id: int
    balanced: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    unconverged: List[int] = field(default_factory=list)
    swaps: int = 0
    resize_commands: int = 0

    @property
    def converged(self) -> bool:
        """Whether every balanced container reached equal sizes."""
        return not self.unconverged


class Balancer:
    """Balances every split container below a root node.

    Example usage:
        with SwayConnection() as conn:
            report = Balancer(conn, BalanceConfig()).balance(workspace)
    """

    def __init__(self, conn: "SwayConnection", config: Optional[BalanceConfig] = None):
        """Initialize the balancer.

        Args:
            conn: Connection providing ``get_tree()`` and ``run_command()``
            config: Balance configuration
        """
        self.conn = conn
        self.config = config or BalanceConfig()
        self.reorderer = ReorderEngine(
            conn, self.config.strategy, self.config.max_swaps
        )
        self.resizer = ResizeEngine(conn, self.config.max_resize_passes)

    def balance(self, root: Node) -> BalanceReport:
        """Balance the subtree rooted at ``root``.

        Each container is visited once, breadth first. Containers without a
        split axis are skipped but their children are still visited.

        Args:
            root: Snapshot of the subtree root; only its identifier and
                whether it has children are used

        Returns:
            Report of the containers visited and commands issued

        Raises:
            BalanceError: On any fatal failure; containers balanced before
                the failure stay balanced
        """
        report = BalanceReport(root_id=root.id)
        if not root.nodes:
            return report

        pub.sendMessage(topics.BALANCE_STARTED, root_id=root.id)
        queue = deque([root.id])

        while queue:
            current = fetch_node(self.conn, queue.popleft())
            if not current.nodes:
                continue

            axis = resolve_axis(current.layout)
            if axis.is_supported:
                self._balance_container(current.id, report)
            else:
                logger.debug(
                    "Skipping %d with layout %s", current.id, current.layout.value
                )
                report.skipped.append(current.id)
                pub.sendMessage(
                    topics.CONTAINER_SKIPPED,
                    node_id=current.id,
                    layout=current.layout,
                )

            queue.extend(child.id for child in current.nodes)

        pub.sendMessage(topics.BALANCE_FINISHED, report=report)
        return report

    def _balance_container(self, node_id: int, report: BalanceReport):
        """Reorder, then resize, the children of one container."""
        report.swaps += self.reorderer.reorder(node_id)

        result = self.resizer.balance_children(node_id)
        report.resize_commands += result.commands
        report.balanced.append(node_id)
        if not result.converged:
            report.unconverged.append(node_id)

        logger.info(
            "Balanced %d in %d passes (%d resize commands)",
            node_id,
            result.passes,
            result.commands,
        )
        pub.sendMessage(topics.CONTAINER_BALANCED, node_id=node_id, result=result)
