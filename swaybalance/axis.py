"""
Split Axis Resolution

Maps a container layout to the dimension that balancing equalises along it.
"""

from __future__ import annotations
from enum import Enum

from .protocol import NodeLayout, Rect


class Axis(Enum):
    """Split axis of a container.

    HORIZONTAL containers arrange children left-to-right and are balanced by
    width, VERTICAL ones top-to-bottom by height. UNSUPPORTED covers every
    layout without a split axis; such containers are left alone.
    """

    HORIZONTAL = "right"
    VERTICAL = "down"
    UNSUPPORTED = None

    @property
    def is_supported(self) -> bool:
        return self is not Axis.UNSUPPORTED

    @property
    def direction(self) -> str:
        """Direction label used in resize commands."""
        self._check_supported()
        return self.value

    def size(self, rect: Rect) -> int:
        """Extent of ``rect`` along this axis."""
        self._check_supported()
        return rect.width if self is Axis.HORIZONTAL else rect.height

    def position(self, rect: Rect) -> int:
        """Leading edge of ``rect`` along this axis."""
        self._check_supported()
        return rect.x if self is Axis.HORIZONTAL else rect.y

    def trailing_edge(self, rect: Rect) -> int:
        """Far edge of ``rect`` along this axis."""
        return self.position(rect) + self.size(rect)

    def _check_supported(self):
        if self is Axis.UNSUPPORTED:
            raise ValueError("Container layout has no split axis")


def resolve_axis(layout: NodeLayout) -> Axis:
    """Get the split axis for a container layout."""
    if layout is NodeLayout.SPLITH:
        return Axis.HORIZONTAL
    if layout is NodeLayout.SPLITV:
        return Axis.VERTICAL
    return Axis.UNSUPPORTED
