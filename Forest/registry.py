"""
Forest Registry
Owns every object on one editing surface and derives the root set and the free-socket set.

Both derived views are recomputed by a full scan after every attach/detach,
creation and removal; they are never edited in place.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from . import keywords
from .attachment import attach_child, detach_child, detach_parent
from .errors import InvalidObjectType, InvalidOperator, InvalidPosition, NoSuchNode
from .geometry import Point, ZERO
from .node import Draggable, LogicOperator, is_operator_node
from .sockets import Side, Socket, exclude_subtree
from .surface import HeadlessSurface, VisualLayer

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _new_token(length: int = 12) -> str:
    value = uuid.uuid4().int
    digits = []
    while value and len(digits) < length:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(digits)


@dataclass(frozen=True)
class ForestSnapshot:
    """Derived views at one instant, handed to structural-change listeners."""
    nodes: Tuple[Draggable, ...]
    roots: Tuple[LogicOperator, ...]
    free_sockets: Tuple[Socket, ...]


class Forest:
    """Flat collection of all draggables and operators on one surface."""

    def __init__(self, surface: Optional[VisualLayer] = None):
        self.surface = surface if surface is not None else HeadlessSurface()
        self.surface.bind(self)
        self._nodes: List[Draggable] = []
        self._by_id: Dict[str, Draggable] = {}
        self._roots: List[LogicOperator] = []
        self._free_sockets: List[Socket] = []
        self._listeners: List[Callable[[ForestSnapshot], None]] = []
        # Set by DragController so removals can end a drag on the removed node
        self.drag_controller = None

    # GETTERS

    @property
    def nodes(self) -> Tuple[Draggable, ...]:
        return tuple(self._nodes)

    @property
    def roots(self) -> Tuple[LogicOperator, ...]:
        return tuple(self._roots)

    @property
    def free_sockets(self) -> Tuple[Socket, ...]:
        return tuple(self._free_sockets)

    def find_node(self, node_id: str) -> Optional[Draggable]:
        return self._by_id.get(node_id)

    def __contains__(self, node) -> bool:
        return self._by_id.get(getattr(node, 'id', None)) is node

    def __len__(self) -> int:
        return len(self._nodes)

    # CREATION / REMOVAL

    def create_object(self, object_type: str, operator: Optional[str] = None, position=None) -> Draggable:
        """
        Create a draggable or a logic operator and add it to this forest.

        Args:
            object_type: keywords.DRAGGABLE or keywords.LOGIC_OPERATOR
            operator: 'and', 'or' or 'not'; required for logic operators
            position: (x, y) pixel position; missing or invalid falls back to (0, 0)

        Raises:
            InvalidObjectType: object_type is not recognised
            InvalidOperator: a logic operator was requested without a valid operator
        """
        if object_type not in keywords.OBJECT_TYPES:
            raise InvalidObjectType(object_type)
        kind = operator.lower() if isinstance(operator, str) else operator
        if object_type == keywords.LOGIC_OPERATOR and kind not in keywords.OPERATORS:
            raise InvalidOperator(operator)

        try:
            point = Point.parse(position)
        except InvalidPosition:
            logger.warning("Invalid/missing position %r, using %s instead", position, tuple(ZERO))
            point = ZERO

        if object_type == keywords.LOGIC_OPERATOR:
            node = LogicOperator(self._new_id(kind), kind, point, self)
        else:
            node = Draggable(self._new_id(keywords.DRAGGABLE), point, self)
        self._nodes.append(node)
        self._by_id[node.id] = node
        self.surface.create_handle(node)
        logger.info("Created %s %s at (%.0f, %.0f)", node.get_type(), node.id, point.x, point.y)
        self.refresh()
        return node

    def create_operator(self, operator: str, position=None) -> LogicOperator:
        return self.create_object(keywords.LOGIC_OPERATOR, operator, position)

    def create_draggable(self, position=None) -> Draggable:
        return self.create_object(keywords.DRAGGABLE, position=position)

    def remove_node(self, node: Draggable) -> None:
        """Detach node from its parent and from both its children, then discard it."""
        if node not in self:
            raise NoSuchNode(getattr(node, 'id', repr(node)))
        if self.drag_controller is not None:
            self.drag_controller.forget(node)
        if node.has_parent():
            detach_parent(node)
        if is_operator_node(node):
            for side in Side:
                if node.children[side] is not None:
                    detach_child(node, side)
        self._nodes.remove(node)
        del self._by_id[node.id]
        self.surface.discard_handle(node)
        node.forest = None
        logger.info("Removed %s", node.id)
        self.refresh()

    def _new_id(self, prefix: str) -> str:
        while True:
            node_id = f"{prefix}-{_new_token()}".lower()
            if node_id not in self._by_id:
                return node_id

    # STRUCTURE

    def attach(self, parent: LogicOperator, child: LogicOperator, side) -> Socket:
        """Attach child into one of parent's sockets (registry-initiated entry point)."""
        return attach_child(parent, child, side)

    def detach(self, child: LogicOperator) -> LogicOperator:
        return detach_parent(child)

    def subscribe(self, callback: Callable[[ForestSnapshot], None]) -> None:
        """Call back with a fresh snapshot after every structural change."""
        self._listeners.append(callback)

    def _on_tree_update(self) -> None:
        self.refresh()

    def refresh(self) -> ForestSnapshot:
        """Recompute the derived views and notify the surface and listeners."""
        self._recompute()
        snapshot = self.snapshot()
        self.surface.on_structural_change(snapshot)
        for callback in list(self._listeners):
            callback(snapshot)
        return snapshot

    def _recompute(self) -> None:
        roots = []
        free = []
        for node in self._nodes:
            if not is_operator_node(node):
                continue
            if not node.has_parent():
                roots.append(node)
            free.extend(node.free_sockets())
        self._roots = roots
        self._free_sockets = free
        logger.debug("Recomputed views: %d roots, %d free sockets", len(roots), len(free))

    def snapshot(self) -> ForestSnapshot:
        return ForestSnapshot(tuple(self._nodes), tuple(self._roots), tuple(self._free_sockets))

    def available_sockets(self, exclude: Optional[Draggable] = None) -> List[Socket]:
        """
        Fresh free-socket set, minus every socket inside exclude's subtree.

        Used once per pointer-move while an operator is dragged.
        """
        self._recompute()
        if exclude is None:
            return list(self._free_sockets)
        return exclude_subtree(self._free_sockets, exclude)

    # DEBUG LISTINGS

    def describe_nodes(self) -> List[str]:
        return self._describe(self._nodes, "object")

    def describe_roots(self) -> List[str]:
        return self._describe(self._roots, "root logic-operator")

    def _describe(self, items, label: str) -> List[str]:
        total = len(items)
        lines = [f"{total} {label} {'ID' if total == 1 else 'IDs'}:"]
        for index, node in enumerate(items):
            kind = node.operator if is_operator_node(node) else node.get_type()
            lines.append(f"{index} {kind} {node.id}")
        for line in lines:
            logger.debug(line)
        return lines
