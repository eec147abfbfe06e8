"""
Shared pytest fixtures for sway-balance tests.
"""

import re

import pytest
from pubsub import pub

from swaybalance.protocol import CommandOutcome, Node, NodeLayout, Rect, Workspace


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without a compositor")


RESIZE_RE = re.compile(
    r"\[con_id=(\d+)\] resize (grow|shrink) (right|down) (\d+) px$"
)
SWAP_RE = re.compile(r"\[con_id=(\d+)\] swap container with con_id (\d+)$")

NO_SPACE = {"success": False, "parse_error": False, "error": "Cannot resize any further"}


def con(node_id, *children, layout="splith", size=None, focused=False):
    """Describe a container for FakeSway.

    ``size`` is the extent along the parent's split axis; the last child of
    a split container always takes the remaining space.
    """
    return {
        "id": node_id,
        "layout": layout,
        "size": size,
        "focused": focused,
        "nodes": list(children),
    }


class FakeSway:
    """In-memory compositor that lays out split containers and runs commands.

    Resizing a child moves the boundary with its next sibling. A resize that
    would leave either of them smaller than ``min_size`` fails with sway's
    "Cannot resize any further" error. Swapping exchanges two siblings
    together with their sizes, or only their identities when
    ``swap_keeps_geometry`` is set.
    """

    def __init__(
        self,
        root,
        width=300,
        height=200,
        gap=0,
        min_size=10,
        swap_keeps_geometry=False,
        workspace_id=None,
    ):
        self.root = root
        self.width = width
        self.height = height
        self.gap = gap
        self.min_size = min_size
        self.swap_keeps_geometry = swap_keeps_geometry
        self.workspace_id = workspace_id if workspace_id is not None else root["id"]
        self.commands = []
        self.tree_queries = 0
        # Hooks called with the command text before it is applied; a hook
        # returning a dict short-circuits with that result.
        self.hooks = []
        self._layout(root, 0, 0, width, height)

    # Layout

    def _layout(self, node, x, y, width, height):
        node["rect"] = {"x": x, "y": y, "width": width, "height": height}
        children = node["nodes"]
        if not children:
            return

        if node["layout"] not in ("splith", "splitv"):
            for child in children:
                self._layout(child, x, y, width, height)
            return

        horizontal = node["layout"] == "splith"
        total = (width if horizontal else height) - self.gap * (len(children) - 1)
        for child in children[:-1]:
            if child["size"] is None:
                child["size"] = total // len(children)
        children[-1]["size"] = total - sum(c["size"] for c in children[:-1])

        pos = x if horizontal else y
        for child in children:
            if horizontal:
                self._layout(child, pos, y, child["size"], height)
            else:
                self._layout(child, x, pos, width, child["size"])
            pos += child["size"] + self.gap

    def _relayout(self):
        rect = self.root["rect"]
        self._layout(self.root, rect["x"], rect["y"], rect["width"], rect["height"])

    def _find(self, node_id, node=None, parent=None):
        node = node or self.root
        if node["id"] == node_id:
            return node, parent
        for child in node["nodes"]:
            found = self._find(node_id, child, node)
            if found[0] is not None:
                return found
        return None, None

    def sizes(self, node_id):
        """Sizes of a container's children along its split axis."""
        node, _ = self._find(node_id)
        return [child["size"] for child in node["nodes"]]

    def order(self, node_id):
        node, _ = self._find(node_id)
        return [child["id"] for child in node["nodes"]]

    def remove(self, node_id):
        node, parent = self._find(node_id)
        parent["nodes"].remove(node)
        for child in parent["nodes"]:
            child["size"] = None
        self._relayout()

    # IPC surface

    def get_tree(self):
        self.tree_queries += 1
        return Node.from_dict(self._export(self.root))

    def _export(self, node):
        return {
            "id": node["id"],
            "type": "workspace" if node["id"] == self.workspace_id else "con",
            "layout": node["layout"],
            "rect": dict(node["rect"]),
            "focused": node["focused"],
            "nodes": [self._export(child) for child in node["nodes"]],
        }

    def get_workspaces(self):
        return [Workspace(id=self.workspace_id, name="1", focused=True)]

    def run_command(self, command):
        self.commands.append(command)
        for hook in self.hooks:
            result = hook(command)
            if result is not None:
                return [CommandOutcome.from_dict(result)]

        match = RESIZE_RE.match(command)
        if match:
            return [CommandOutcome.from_dict(self._resize(*match.groups()))]

        match = SWAP_RE.match(command)
        if match:
            return [CommandOutcome.from_dict(self._swap(*match.groups()))]

        return [
            CommandOutcome(success=False, error="Unknown command", parse_error=True)
        ]

    def _resize(self, node_id, change, direction, amount):
        node, parent = self._find(int(node_id))
        if parent is None:
            return {"success": False, "error": "No matching node"}

        siblings = parent["nodes"]
        index = siblings.index(node)
        if index == len(siblings) - 1:
            return NO_SPACE

        delta = int(amount) if change == "grow" else -int(amount)
        neighbour = siblings[index + 1]
        if (
            node["size"] + delta < self.min_size
            or neighbour["size"] - delta < self.min_size
        ):
            return NO_SPACE

        node["size"] += delta
        neighbour["size"] -= delta
        self._relayout()
        return {"success": True}

    def _swap(self, first_id, second_id):
        first, parent = self._find(int(first_id))
        second, other_parent = self._find(int(second_id))
        if first is None or second is None or parent is not other_parent:
            return {"success": False, "error": "Unable to swap"}

        siblings = parent["nodes"]
        i, j = siblings.index(first), siblings.index(second)
        siblings[i], siblings[j] = second, first
        if self.swap_keeps_geometry:
            first["size"], second["size"] = second["size"], first["size"]
        self._relayout()
        return {"success": True}


@pytest.fixture
def fake_sway():
    """Factory fixture for creating FakeSway compositors."""
    return FakeSway


@pytest.fixture
def make_node():
    """Factory fixture for building Node snapshots directly."""

    def make(node_id, *children, layout="splith", rect=(0, 0, 300, 200), focused=False):
        x, y, width, height = rect
        return Node(
            id=node_id,
            layout=NodeLayout.parse(layout),
            rect=Rect(x, y, width, height),
            focused=focused,
            nodes=tuple(children),
        )

    return make


@pytest.fixture
def events():
    """Record events published on the bus during a test."""
    from swaybalance import topics

    recorded = []

    def on_swap(first_id, second_id):
        recorded.append((topics.SWAP_ISSUED, first_id, second_id))

    def on_resize(node_id, command, infeasible):
        recorded.append((topics.RESIZE_ISSUED, node_id, infeasible))

    def on_skipped(node_id, layout):
        recorded.append((topics.CONTAINER_SKIPPED, node_id))

    def on_balanced(node_id, result):
        recorded.append((topics.CONTAINER_BALANCED, node_id))

    def on_exhausted(node_id, passes):
        recorded.append((topics.RESIZE_EXHAUSTED, node_id, passes))

    listeners = [
        (on_swap, topics.SWAP_ISSUED),
        (on_resize, topics.RESIZE_ISSUED),
        (on_skipped, topics.CONTAINER_SKIPPED),
        (on_balanced, topics.CONTAINER_BALANCED),
        (on_exhausted, topics.RESIZE_EXHAUSTED),
    ]
    for listener, topic in listeners:
        pub.subscribe(listener, topic)

    yield recorded

    for listener, topic in listeners:
        pub.unsubscribe(listener, topic)
