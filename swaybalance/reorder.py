"""
Reorder Engine

Brings a container's children into an order in which resizing every child
but the last to the mean size is possible. Resize commands only move the
trailing edge of a child, so a child whose trailing edge falls short of its
target needs a larger sibling moved into its place first.

Two strategies are provided:

- GEOMETRIC (default): find the first child whose trailing edge is short of
  its target, swap the largest later sibling into its place, re-read the
  container and repeat. Every decision uses fresh geometry.
- MIN_SWAP: sort children by size, largest first, using the fewest swaps
  possible. Geometry is read once and not re-checked between swaps.
"""

from __future__ import annotations
import logging
from collections import defaultdict, deque
from enum import Enum
from typing import TYPE_CHECKING, Deque, Dict, Hashable, List, Optional, Sequence, Tuple

from pubsub import pub

from . import topics
from .axis import Axis, resolve_axis
from .errors import ReorderError, SwapError
from .locator import fetch_node
from .protocol import Node

if TYPE_CHECKING:
    from .ipc import SwayConnection

logger = logging.getLogger(__name__)


class ReorderStrategy(Enum):
    """How children are reordered before resizing."""

    GEOMETRIC = "geometric"
    MIN_SWAP = "min-swap"
    NONE = "none"


def find_faulty_position(parent: Node, axis: Axis) -> Optional[int]:
    """Find the first child whose trailing edge is short of its target.

    The target for position ``i`` is where the child's far edge would sit if
    every child before it had the mean size, with the gap observed between
    the first two children repeated between each pair. The last child takes
    whatever space remains and is never checked.

    Args:
        parent: Container snapshot
        axis: Split axis of the container

    Returns:
        Index of the first faulty child, or None if the order is fine
    """
    children = parent.nodes
    if len(children) < 2:
        return None

    desired = axis.size(parent.rect) // len(children)
    gap = max(
        0,
        axis.position(children[1].rect) - axis.trailing_edge(children[0].rect),
    )
    origin = axis.position(parent.rect)

    for i, child in enumerate(children[:-1]):
        target = origin + gap * i + desired * (i + 1)
        if axis.trailing_edge(child.rect) < target:
            return i

    return None


def minimum_swaps(
    current: Sequence[Hashable], target: Sequence[Hashable]
) -> List[Tuple[int, int]]:
    """Compute the fewest pairwise swaps turning ``current`` into ``target``.

    Each cycle of the permutation between the two orders is resolved with
    ``len(cycle) - 1`` swaps. Repeated values are matched to their
    occurrences in ``target`` in order.

    Args:
        current: Current order
        target: Desired order, a permutation of ``current``

    Returns:
        Index pairs to swap, in order of application

    Raises:
        ValueError: If the two sequences are not permutations of each other
    """
    if len(current) != len(target):
        raise ValueError("Orders have different lengths")

    slots: Dict[Hashable, Deque[int]] = defaultdict(deque)
    for index, value in enumerate(target):
        slots[value].append(index)

    destination = []
    for value in current:
        if not slots.get(value):
            raise ValueError(f"{value!r} does not occur in target order")
        destination.append(slots[value].popleft())

    swaps = []
    for i in range(len(destination)):
        # Walk the cycle through position i, placing one element per swap
        while destination[i] != i:
            j = destination[i]
            destination[i], destination[j] = destination[j], destination[i]
            swaps.append((i, j))

    return swaps


def swap_containers(conn: "SwayConnection", first_id: int, second_id: int):
    """Swap two containers' places in the tree.

    Raises:
        SwapError: If the compositor rejects the swap
    """
    command = f"[con_id={first_id}] swap container with con_id {second_id}"
    outcomes = conn.run_command(command)

    if not outcomes:
        raise SwapError(command, "no result returned")
    if not outcomes[0].success:
        raise SwapError(command, outcomes[0].error or "unknown error")

    logger.debug("Swapped %d with %d", first_id, second_id)
    pub.sendMessage(topics.SWAP_ISSUED, first_id=first_id, second_id=second_id)


class ReorderEngine:
    """Reorders a container's children before they are resized."""

    def __init__(
        self,
        conn: "SwayConnection",
        strategy: ReorderStrategy = ReorderStrategy.GEOMETRIC,
        max_swaps: Optional[int] = None,
    ):
        """Initialize the reorder engine.

        Args:
            conn: Connection providing ``get_tree()`` and ``run_command()``
            strategy: Reordering strategy to use
            max_swaps: Swap limit per container for the geometric strategy.
                Defaults to the square of the child count.
        """
        self.conn = conn
        self.strategy = strategy
        self.max_swaps = max_swaps

    def reorder(self, node_id: int) -> int:
        """Reorder the children of a container.

        Args:
            node_id: Identifier of the container

        Returns:
            Number of swap commands issued
        """
        if self.strategy is ReorderStrategy.GEOMETRIC:
            return self.repair_order(node_id)
        if self.strategy is ReorderStrategy.MIN_SWAP:
            return self.sort_by_size(node_id)
        return 0

    def repair_order(self, node_id: int) -> int:
        """Swap larger children into faulty positions until none is left.

        Stops without error when no later sibling is larger than the faulty
        child, or when a swap did not move the faulty position's trailing
        edge forward. In the second case the swap is undone, since the
        compositor moved the geometry along with the containers.

        Raises:
            ReorderError: If the swap limit is reached
        """
        swaps = 0
        last: Optional[Tuple[int, int, int, int]] = None

        while True:
            parent = fetch_node(self.conn, node_id)
            axis = resolve_axis(parent.layout)
            if not axis.is_supported:
                return swaps

            children = parent.nodes
            faulty = find_faulty_position(parent, axis)
            if faulty is None:
                return swaps

            edge = axis.trailing_edge(children[faulty].rect)
            if last is not None:
                position, previous_edge, first_id, second_id = last
                if position == faulty and edge <= previous_edge:
                    logger.warning(
                        "Swapping children of %d did not change their sizes, "
                        "keeping original order",
                        node_id,
                    )
                    swap_containers(self.conn, first_id, second_id)
                    return swaps + 1

            limit = self.max_swaps
            if limit is None:
                limit = len(children) ** 2
            if swaps >= limit:
                raise ReorderError(node_id, swaps)

            candidate = max(
                range(faulty + 1, len(children)),
                key=lambda j: axis.size(children[j].rect),
            )
            if axis.size(children[candidate].rect) <= axis.size(
                children[faulty].rect
            ):
                logger.debug(
                    "No larger sibling for child %d of %d",
                    children[faulty].id,
                    node_id,
                )
                return swaps

            first_id, second_id = children[faulty].id, children[candidate].id
            swap_containers(self.conn, first_id, second_id)
            swaps += 1
            last = (faulty, edge, first_id, second_id)

    def sort_by_size(self, node_id: int) -> int:
        """Order children largest first with the fewest swaps."""
        parent = fetch_node(self.conn, node_id)
        axis = resolve_axis(parent.layout)
        if not axis.is_supported:
            return 0

        order = [child.id for child in parent.nodes]
        sizes = {child.id: axis.size(child.rect) for child in parent.nodes}
        target = sorted(order, key=lambda child_id: -sizes[child_id])

        swaps = minimum_swaps(order, target)
        for i, j in swaps:
            swap_containers(self.conn, order[i], order[j])
            order[i], order[j] = order[j], order[i]

        return len(swaps)
