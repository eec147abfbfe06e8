"""
i3/sway IPC Client for sway-balance

Implements the client side of the i3/sway IPC protocol: enough to read the
layout tree and workspace list and to run commands.

Protocol documentation: https://i3wm.org/docs/ipc.html
"""

from __future__ import annotations
import json
import logging
import os
import socket
import struct
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from .errors import IPCConnectionError, IPCError, QueryError
from .protocol import CommandOutcome, Node, Workspace

logger = logging.getLogger(__name__)


class MessageType(IntEnum):
    """i3 IPC message types used by sway-balance."""

    RUN_COMMAND = 0
    GET_WORKSPACES = 1
    GET_TREE = 4


class SwayConnection:
    """
    Blocking connection to the compositor's IPC socket.

    Exactly one request is in flight at a time; every call sends a message
    and waits for the matching reply.
    """

    MAGIC = b"i3-ipc"
    HEADER = struct.Struct("<II")
    HEADER_SIZE = len(MAGIC) + HEADER.size

    def __init__(self, socket_path: Optional[str] = None):
        """Initialize the connection.

        Args:
            socket_path: IPC socket to connect to. Defaults to $SWAYSOCK,
                then $I3SOCK.
        """
        self.socket_path = socket_path or self._get_socket_path()
        self.sock: Optional[socket.socket] = None

    @staticmethod
    def _get_socket_path() -> Optional[str]:
        """Get the IPC socket path from the environment.

        Returns:
            Socket path, or None if neither variable is set
        """
        return os.getenv("SWAYSOCK") or os.getenv("I3SOCK")

    def connect(self) -> "SwayConnection":
        """Open the socket connection."""
        if not self.socket_path:
            raise IPCConnectionError("SWAYSOCK is not set")

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.socket_path)
        except OSError as e:
            sock.close()
            raise IPCConnectionError(str(e)) from e

        self.sock = sock
        logger.debug("Connected to %s", self.socket_path)
        return self

    def close(self):
        """Close the socket connection."""
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def __enter__(self) -> "SwayConnection":
        if self.sock is None:
            self.connect()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _send_message(self, msg_type: int, payload: str = ""):
        """Send a message in i3 IPC format.

        Args:
            msg_type: Message type code
            payload: Payload text
        """
        data = payload.encode("utf-8")
        header = self.MAGIC + self.HEADER.pack(len(data), msg_type)
        self.sock.sendall(header + data)

    def _recv_exact(self, length: int) -> bytes:
        """Read exactly ``length`` bytes from the socket."""
        data = b""
        while len(data) < length:
            chunk = self.sock.recv(length - len(data))
            if not chunk:
                raise IPCError("Connection closed by compositor")
            data += chunk
        return data

    def _recv_message(self) -> Tuple[int, Any]:
        """Receive one i3 IPC message.

        Returns:
            Tuple of (message type, decoded JSON payload)
        """
        header = self._recv_exact(self.HEADER_SIZE)

        magic = header[: len(self.MAGIC)]
        if magic != self.MAGIC:
            raise IPCError(f"Invalid magic bytes: {magic!r}")

        length, msg_type = self.HEADER.unpack(header[len(self.MAGIC) :])
        payload = self._recv_exact(length)

        try:
            return msg_type, json.loads(payload.decode("utf-8"))
        except ValueError as e:
            raise IPCError(f"Invalid reply payload: {e}") from e

    def _request(self, msg_type: MessageType, payload: str = "") -> Any:
        """Send a request and wait for its reply.

        Args:
            msg_type: Message type code
            payload: Payload text

        Returns:
            Decoded reply payload
        """
        if self.sock is None:
            raise IPCError("Not connected")

        try:
            self._send_message(msg_type, payload)
            reply_type, reply = self._recv_message()
        except OSError as e:
            raise IPCError(str(e)) from e

        if reply_type != msg_type:
            raise IPCError(
                f"Unexpected reply type {reply_type} for {msg_type.name}"
            )
        return reply

    def get_tree(self) -> Node:
        """Get a snapshot of the whole layout tree."""
        try:
            return Node.from_dict(self._request(MessageType.GET_TREE))
        except (IPCError, KeyError, TypeError) as e:
            logger.debug("GET_TREE failed: %s", e)
            raise QueryError("node layout tree") from e

    def get_workspaces(self) -> List[Workspace]:
        """Get the list of workspaces."""
        try:
            reply = self._request(MessageType.GET_WORKSPACES)
            return [Workspace.from_dict(ws) for ws in reply]
        except (IPCError, KeyError, TypeError) as e:
            logger.debug("GET_WORKSPACES failed: %s", e)
            raise QueryError("workspaces") from e

    def run_command(self, command: str) -> List[CommandOutcome]:
        """Run one or more semicolon separated commands.

        Args:
            command: Command text, e.g. ``[con_id=4] resize grow right 10 px``

        Returns:
            One outcome per sub-command
        """
        logger.debug("RUN_COMMAND: %s", command)
        reply = self._request(MessageType.RUN_COMMAND, command)
        if not isinstance(reply, list):
            raise IPCError(f"Unexpected RUN_COMMAND reply: {reply!r}")
        return [CommandOutcome.from_dict(result) for result in reply]
