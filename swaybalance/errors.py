"""
Error types for sway-balance.

Every fatal condition raised while balancing derives from BalanceError so
the command line entry point can report it in one place. Running out of
resize retries is not an error and is reported through BalanceReport instead.
"""

from typing import Optional


class BalanceError(Exception):
    """Base exception for sway-balance errors."""

    pass


class IPCError(BalanceError):
    """Exception raised when talking to the compositor fails."""

    pass


class IPCConnectionError(IPCError):
    """Exception raised when no connection to the compositor can be opened."""

    def __init__(self, reason: Optional[str] = None) -> None:
        """Initialize connection error.

        Args:
            reason: Optional detail about why the connection failed
        """
        self.reason = reason
        message = "Could not open a connection to sway"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class QueryError(BalanceError):
    """Exception raised when a tree or workspace query fails."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Could not get the {query}")


class NoFocusError(BalanceError):
    """Exception raised when the focused workspace or container is unknown."""

    def __init__(self) -> None:
        super().__init__("Current focus could not be determined")


class NodeGoneError(BalanceError):
    """Exception raised when a known node no longer exists in the tree."""

    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Node {node_id} disappeared while running")


class CommandError(BalanceError):
    """Exception raised when the compositor rejects a command."""

    action = "running command"

    def __init__(self, command: str, reason: str) -> None:
        """Initialize command error.

        Args:
            command: The command text that was sent
            reason: Error message reported for the command
        """
        self.command = command
        self.reason = reason
        super().__init__(f"Error {self.action} '{command}': {reason}")


class ResizeError(CommandError):
    """Exception raised when a resize command fails for a fatal reason."""

    action = "issuing resize command"


class SwapError(CommandError):
    """Exception raised when a swap command fails."""

    action = "issuing swap command"


class ReorderError(BalanceError):
    """Exception raised when child order cannot be repaired within the swap limit."""

    def __init__(self, node_id: int, swaps: int) -> None:
        self.node_id = node_id
        self.swaps = swaps
        super().__init__(
            f"Could not reconcile child order of container {node_id} "
            f"after {swaps} swaps"
        )
