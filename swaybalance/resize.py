"""
Resize Engine

Resizes a container's children to equal size along its split axis.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from pubsub import pub

from . import topics
from .axis import Axis, resolve_axis
from .errors import ResizeError
from .locator import fetch_node
from .protocol import Node

if TYPE_CHECKING:
    from .ipc import SwayConnection

logger = logging.getLogger(__name__)


class ResizeOutcome(Enum):
    """Result of resizing a single child."""

    SUCCESS = auto()
    NO_SPACE = auto()  # neighbour had no room, retry later
    UNCHANGED = auto()  # already at the target size, nothing sent


@dataclass
class ResizeResult:
    """Summary of resizing one container's children."""

    converged: bool
    passes: int = 0
    commands: int = 0
    infeasible: int = 0


def pass_budget(child_count: int) -> int:
    """Default number of resize passes for a container.

    A failed resize can succeed once a neighbour has been resized, and that
    can cascade along the row, so the budget grows with the triangular
    number of the child count.
    """
    return max(1, child_count * (child_count + 1) // 2)


class ResizeEngine:
    """Drives children of a container towards the mean size."""

    def __init__(self, conn: "SwayConnection", max_passes: Optional[int] = None):
        """Initialize the resize engine.

        Args:
            conn: Connection providing ``get_tree()`` and ``run_command()``
            max_passes: Pass limit per container. Defaults to pass_budget().
        """
        self.conn = conn
        self.max_passes = max_passes

    def resize_node(self, child: Node, parent: Node, axis: Axis) -> ResizeOutcome:
        """Resize one child to the mean size of its parent's children.

        Args:
            child: Fresh snapshot of the child
            parent: Snapshot of the container
            axis: Split axis of the container

        Returns:
            Outcome of the resize

        Raises:
            ResizeError: If the compositor rejects the resize for any reason
                other than lack of space
        """
        desired = axis.size(parent.rect) // len(parent.nodes)
        diff = desired - axis.size(child.rect)
        if diff == 0:
            return ResizeOutcome.UNCHANGED

        change = "shrink" if diff < 0 else "grow"
        command = (
            f"[con_id={child.id}] resize {change} {axis.direction} {abs(diff)} px"
        )
        outcomes = self.conn.run_command(command)
        if not outcomes:
            raise ResizeError(command, "no result returned")

        outcome = outcomes[0]
        infeasible = outcome.is_infeasible
        pub.sendMessage(
            topics.RESIZE_ISSUED,
            node_id=child.id,
            command=command,
            infeasible=infeasible,
        )

        if outcome.success:
            return ResizeOutcome.SUCCESS
        if infeasible:
            logger.debug("No space for %s", command)
            return ResizeOutcome.NO_SPACE
        raise ResizeError(command, outcome.error or "unknown error")

    def balance_children(self, node_id: int) -> ResizeResult:
        """Resize all children but the last until a pass has no failures.

        The last child takes the space that remains. Running out of passes
        is reported in the result, not raised.

        Args:
            node_id: Identifier of the container

        Returns:
            Summary of the passes made
        """
        parent = fetch_node(self.conn, node_id)
        axis = resolve_axis(parent.layout)
        result = ResizeResult(converged=True)
        if not axis.is_supported or len(parent.nodes) < 2:
            return result

        limit = self.max_passes
        if limit is None:
            limit = pass_budget(len(parent.nodes))

        for _ in range(limit):
            result.passes += 1
            succeeded = True

            for sibling in parent.nodes[:-1]:
                child = fetch_node(self.conn, sibling.id)
                outcome = self.resize_node(child, parent, axis)
                if outcome is not ResizeOutcome.UNCHANGED:
                    result.commands += 1
                if outcome is ResizeOutcome.NO_SPACE:
                    result.infeasible += 1
                    succeeded = False

            if succeeded:
                return result

        result.converged = False
        logger.warning(
            "Children of %d did not reach equal size after %d passes",
            node_id,
            result.passes,
        )
        pub.sendMessage(topics.RESIZE_EXHAUSTED, node_id=node_id, passes=result.passes)
        return result
