"""
Brick Layout
Nested box geometry for operators.

A parent's box encloses its children: the label row sits on top and the two
drop zones sit side by side below it. An empty drop zone has a fixed size, an
occupied one grows to fit the child's whole subtree. Only roots carry an
absolute position; every nested origin is derived from its parent.
"""

from typing import Tuple

from .geometry import Point, Rect
from .node import is_operator_node
from .sockets import Side, Socket

PADDING = 8.0
LABEL_HEIGHT = 28.0
ZONE_WIDTH = 44.0
ZONE_HEIGHT = 32.0
ZONE_GAP = 8.0
DRAGGABLE_WIDTH = 96.0
DRAGGABLE_HEIGHT = 40.0


class BrickLayout:
    """Computes origins, bounding boxes and socket centres for a forest."""

    def __init__(self, padding: float = PADDING, label_height: float = LABEL_HEIGHT,
                 zone_width: float = ZONE_WIDTH, zone_height: float = ZONE_HEIGHT,
                 zone_gap: float = ZONE_GAP):
        self.padding = padding
        self.label_height = label_height
        self.zone_width = zone_width
        self.zone_height = zone_height
        self.zone_gap = zone_gap

    def size(self, node) -> Tuple[float, float]:
        if not is_operator_node(node):
            return DRAGGABLE_WIDTH, DRAGGABLE_HEIGHT
        left_w, left_h = self.zone_size(node, Side.LEFT)
        right_w, right_h = self.zone_size(node, Side.RIGHT)
        width = self.padding + left_w + self.zone_gap + right_w + self.padding
        height = self.label_height + max(left_h, right_h) + self.padding
        return width, height

    def zone_size(self, node, side: Side) -> Tuple[float, float]:
        child = node.children[side]
        if child is None:
            return self.zone_width, self.zone_height
        return self.size(child)

    def origin(self, node) -> Point:
        ref = node.parent_ref
        if ref is None:
            return node.position
        return self.zone_rect(ref.owner, ref.side).origin

    def bounds(self, node) -> Rect:
        origin = self.origin(node)
        width, height = self.size(node)
        return Rect(origin.x, origin.y, width, height)

    def label_rect(self, node) -> Rect:
        origin = self.origin(node)
        width, _ = self.size(node)
        return Rect(origin.x, origin.y, width, self.label_height)

    def zone_rect(self, node, side: Side) -> Rect:
        """The drop zone of one socket; holds the child's box when occupied."""
        origin = self.origin(node)
        left_w, left_h = self.zone_size(node, Side.LEFT)
        x = origin.x + self.padding
        y = origin.y + self.label_height
        if side == Side.LEFT:
            return Rect(x, y, left_w, left_h)
        right_w, right_h = self.zone_size(node, Side.RIGHT)
        return Rect(x + left_w + self.zone_gap, y, right_w, right_h)

    def socket_center(self, socket: Socket) -> Point:
        return self.zone_rect(socket.owner, socket.side).center
