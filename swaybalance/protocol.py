"""
Sway IPC Data Model

Immutable snapshots of the compositor's layout tree, workspaces and command
results, decoded from the JSON replies of the i3/sway IPC protocol.

Protocol documentation: https://i3wm.org/docs/ipc.html
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class NodeLayout(Enum):
    """Container layout as reported by the compositor."""

    SPLITH = "splith"
    SPLITV = "splitv"
    STACKED = "stacked"
    TABBED = "tabbed"
    OUTPUT = "output"
    NONE = "none"

    @classmethod
    def parse(cls, value: Optional[str]) -> "NodeLayout":
        """Decode a layout string, treating unknown values as NONE."""
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in the compositor's coordinate space."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Rect":
        data = data or {}
        return cls(
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )


@dataclass(frozen=True)
class Node:
    """Snapshot of one container in the layout tree.

    The order of ``nodes`` is the visual order along the container's split
    axis. Floating children are not part of the tiling order and are not
    decoded.
    """

    id: int
    layout: NodeLayout = NodeLayout.NONE
    rect: Rect = field(default_factory=Rect)
    focused: bool = False
    name: Optional[str] = None
    type: str = "con"
    nodes: Tuple["Node", ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Decode a node and its tiling children from a get_tree reply.

        Args:
            data: One node object of the tree reply

        Returns:
            The decoded snapshot
        """
        return cls(
            id=int(data["id"]),
            layout=NodeLayout.parse(data.get("layout")),
            rect=Rect.from_dict(data.get("rect")),
            focused=bool(data.get("focused", False)),
            name=data.get("name"),
            type=data.get("type", "con"),
            nodes=tuple(cls.from_dict(child) for child in data.get("nodes", [])),
        )


@dataclass(frozen=True)
class Workspace:
    """Workspace summary from a get_workspaces reply."""

    id: int
    name: str = ""
    focused: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workspace":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            focused=bool(data.get("focused", False)),
        )


@dataclass(frozen=True)
class CommandOutcome:
    """Result of one sub-command of a run_command request."""

    success: bool
    error: Optional[str] = None
    parse_error: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommandOutcome":
        return cls(
            success=bool(data.get("success", False)),
            error=data.get("error"),
            parse_error=bool(data.get("parse_error", False)),
        )

    @property
    def is_infeasible(self) -> bool:
        """Whether this is the "cannot resize any further" failure.

        Sway answers with that message when the neighbouring container has
        no room left to give or take. It is the only failure a resize may
        recover from by retrying.
        """
        if self.success or not self.error:
            return False
        return "cannot resize" in self.error.lower()
