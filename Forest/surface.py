"""
Visual Layer Interface
What the forest engine asks of, and commands on, the presentation layer.

HeadlessSurface is the in-memory implementation: it keeps a z-order and the
socket decorations, and answers geometry from BrickLayout. The Qt canvas
wraps one and adds painting on top.
"""

import logging
from typing import Dict, List, Optional, Protocol

from . import keywords
from .geometry import Point
from .layout import BrickLayout
from .node import is_operator_node
from .sockets import Side, Socket

logger = logging.getLogger(__name__)


class VisualLayer(Protocol):
    def bind(self, forest) -> None: ...

    def create_handle(self, node) -> None: ...

    def discard_handle(self, node) -> None: ...

    def locate_node_at(self, point: Point): ...

    def visual_origin(self, node) -> Point: ...

    def visual_center(self, socket: Socket) -> Point: ...

    def bring_to_front(self, node) -> None: ...

    def nest_under(self, parent, side: Side, child) -> None: ...

    def restore_independent_layout(self, node) -> None: ...

    def highlight_socket(self, socket: Optional[Socket]) -> None: ...

    def on_structural_change(self, snapshot) -> None: ...


class HeadlessSurface:
    """Visual layer without a window. Used directly by tests and wrapped by the canvas."""

    def __init__(self, layout: Optional[BrickLayout] = None):
        self.layout = layout or BrickLayout()
        self.forest = None
        # Back to front; only roots are painted independently
        self.z_order: List = []
        self.decorations: Dict[Socket, str] = {}
        self.target_socket: Optional[Socket] = None
        self.last_snapshot = None

    def bind(self, forest) -> None:
        self.forest = forest

    def create_handle(self, node) -> None:
        self.z_order.append(node)

    def discard_handle(self, node) -> None:
        if node in self.z_order:
            self.z_order.remove(node)
        if self.target_socket is not None and self.target_socket.owner is node:
            self.target_socket = None

    def roots_back_to_front(self) -> List:
        return [n for n in self.z_order if not n.has_parent()]

    def locate_node_at(self, point: Point):
        """Topmost root under the point, then the deepest nested operator inside it."""
        point = Point.parse(point)
        for root in reversed(self.roots_back_to_front()):
            if self.layout.bounds(root).contains(point):
                return self._deepest_at(root, point)
        return None

    def _deepest_at(self, node, point: Point):
        if not is_operator_node(node):
            return node
        for side in Side:
            child = node.children[side]
            if child is not None and self.layout.bounds(child).contains(point):
                return self._deepest_at(child, point)
        return node

    def socket_at(self, point: Point) -> Optional[Socket]:
        node = self.locate_node_at(point)
        if not is_operator_node(node):
            return None
        for side in Side:
            if node.children[side] is None and self.layout.zone_rect(node, side).contains(point):
                return Socket(node, side)
        return None

    def visual_origin(self, node) -> Point:
        return self.layout.origin(node)

    def visual_center(self, socket: Socket) -> Point:
        return self.layout.socket_center(socket)

    def bring_to_front(self, node) -> None:
        if node in self.z_order:
            self.z_order.remove(node)
        self.z_order.append(node)

    def nest_under(self, parent, side: Side, child) -> None:
        # Nested geometry is derived from the parent, nothing to store
        logger.debug("%s nested under %s (%s)", child.id, parent.id, side.value)

    def restore_independent_layout(self, node) -> None:
        logger.debug("%s restored to independent layout at %s", node.id, tuple(node.position))

    def highlight_socket(self, socket: Optional[Socket]) -> None:
        if self.target_socket is not None and self.target_socket in self.decorations:
            self.decorations[self.target_socket] = keywords.AVAILABLE_DROP_ZONE
        self.target_socket = socket
        if socket is not None:
            self.decorations[socket] = keywords.TARGET_DROP_ZONE

    def on_structural_change(self, snapshot) -> None:
        self.last_snapshot = snapshot
        self.decorations = {s: keywords.AVAILABLE_DROP_ZONE for s in snapshot.free_sockets}
        if self.target_socket is not None:
            if self.target_socket in self.decorations:
                self.decorations[self.target_socket] = keywords.TARGET_DROP_ZONE
            else:
                self.target_socket = None
