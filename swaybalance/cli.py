"""
Command line entry point for sway-balance.

Usage:
    sway-balance [--focus] [--strategy {geometric,min-swap,none}] [-v]
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from typing import List, Optional, Sequence

from pubsub import pub

from .balancer import BalanceConfig, Balancer
from .errors import BalanceError, NoFocusError
from .ipc import SwayConnection
from .locator import find_by_id, top_focus
from .protocol import Node
from .reorder import ReorderStrategy

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="sway-balance",
        description="Balance a sway workspace, or some focus therein",
    )
    parser.add_argument(
        "-f",
        "--focus",
        action="store_true",
        help="Balance the focus, instead of the entire workspace",
    )
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in ReorderStrategy],
        default=ReorderStrategy.GEOMETRIC.value,
        help="How children are reordered before resizing (default: geometric)",
    )
    parser.add_argument(
        "--max-swaps",
        type=int,
        default=None,
        metavar="N",
        help="Swap limit per container (default: square of the child count)",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=None,
        metavar="N",
        help="Resize pass limit per container (default: triangular number of the child count)",
    )
    parser.add_argument(
        "--socket",
        default=None,
        metavar="PATH",
        help="IPC socket path (default: $SWAYSOCK, then $I3SOCK)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress; repeat to log every command and event",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BalanceConfig:
    """Create a balance configuration from parsed arguments."""
    return BalanceConfig(
        focus=args.focus,
        strategy=ReorderStrategy(args.strategy),
        max_swaps=args.max_swaps,
        max_resize_passes=args.max_passes,
        socket_path=args.socket,
    )


def resolve_target(conn: SwayConnection, focus: bool) -> Node:
    """Find the node to balance.

    Args:
        conn: Connection to the compositor
        focus: Pick the topmost focused container instead of the workspace

    Returns:
        Snapshot of the focused workspace, or of its topmost focused node

    Raises:
        NoFocusError: If no focused workspace or node can be found
    """
    tree = conn.get_tree()
    workspaces = conn.get_workspaces()

    active = next((ws for ws in workspaces if ws.focused), None)
    if active is None:
        raise NoFocusError()

    workspace = find_by_id(tree, active.id)
    if workspace is None:
        raise NoFocusError()

    if not focus:
        return workspace

    target = top_focus(workspace)
    if target is None:
        raise NoFocusError()
    return target


def debug_event_logger(topic=pub.AUTO_TOPIC, **kwargs):
    """Log all events published on the event bus."""
    timestamp = time.strftime("%H:%M:%S")
    data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug("[%s] EVENT: %s | %s", timestamp, topic.getName(), data_str)


def setup_logging(verbosity: int):
    """Configure logging for the given number of -v flags."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")

    if verbosity > 1:
        pub.subscribe(debug_event_logger, pub.ALL_TOPICS)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Process exit code
    """
    args = parse_args(argv)
    setup_logging(args.verbose)
    config = build_config(args)

    try:
        with SwayConnection(config.socket_path) as conn:
            target = resolve_target(conn, config.focus)
            report = Balancer(conn, config).balance(target)
    except BalanceError as e:
        print(f"sway-balance: error: {e}", file=sys.stderr)
        return 1

    if not report.converged:
        logger.warning(
            "Containers %s could not be fully balanced",
            ", ".join(str(node_id) for node_id in report.unconverged),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
