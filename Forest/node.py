"""
Node Module
Draggable objects and logic operators: identity, position, parent link and child slots.

Structural legality lives in attachment.py. A node only guards its own position.
"""

import logging
from typing import Dict, Iterator, List, Optional

from . import keywords
from .errors import InvalidPosition
from .geometry import Point, ZERO
from .sockets import Side, Socket

logger = logging.getLogger(__name__)


class Draggable:
    """A movable object on the editing surface. Has no sockets and never nests."""

    def __init__(self, node_id: str, position=ZERO, forest=None):
        self.id = node_id
        self.type = keywords.DRAGGABLE
        self.forest = forest
        self.position: Point = ZERO
        # Set only by the attachment protocol
        self._parent_socket: Optional[Socket] = None
        self.set_position(position)

    def get_id(self) -> str:
        return self.id

    def get_type(self) -> str:
        return self.type

    def get_position(self) -> Point:
        return self.position

    @property
    def parent_ref(self) -> Optional[Socket]:
        """The (parent, side) socket this node occupies, or None for a root."""
        return self._parent_socket

    @property
    def parent(self):
        return self._parent_socket.owner if self._parent_socket else None

    @property
    def parent_side(self) -> Optional[Side]:
        return self._parent_socket.side if self._parent_socket else None

    def has_parent(self) -> bool:
        return self._parent_socket is not None

    def set_position(self, position) -> Point:
        """
        Set the pixel position of this object.

        Fails closed: a missing or non-finite coordinate puts the object at the origin.

        Returns:
            The position actually stored
        """
        try:
            point = Point.parse(position)
        except InvalidPosition as e:
            logger.warning("%s: %s, defaulting to %s", self.id, e, tuple(ZERO))
            point = ZERO
        self.position = point
        return point

    def bring_to_front(self) -> bool:
        """Raise this object above every other root. Refused while nested in a parent."""
        if self.has_parent():
            logger.warning("%s: cannot bring to front without detaching from parent first", self.id)
            return False
        if self.forest is not None:
            self.forest.surface.bring_to_front(self)
        return True

    def iter_subtree(self) -> Iterator['Draggable']:
        yield self

    def get_info(self) -> Dict[str, object]:
        return {
            'id': self.id,
            'type': self.type,
            'position': tuple(self.position),
            'parent': self.parent.id if self.parent else None,
        }

    def __repr__(self):
        return f"{type(self).__name__}({self.id!r})"


class LogicOperator(Draggable):
    """
    A binary logic operator with a left and a right socket.

    children maps each Side to the attached operator or None. Children are
    referenced, not owned: detaching never destroys them.
    """

    def __init__(self, node_id: str, operator: str, position=ZERO, forest=None):
        super().__init__(node_id, position, forest)
        self.type = keywords.LOGIC_OPERATOR
        self.operator = operator
        self.children: Dict[Side, Optional['LogicOperator']] = {Side.LEFT: None, Side.RIGHT: None}

    @property
    def operator_kind(self) -> str:
        return self.operator

    def get_children(self) -> Dict[Side, Optional['LogicOperator']]:
        return self.children

    def has_child(self, side) -> bool:
        return self.children[Side.coerce(side)] is not None

    def has_two_children(self) -> bool:
        return all(child is not None for child in self.children.values())

    def sockets(self) -> List[Socket]:
        return [Socket(self, side) for side in Side]

    def free_sockets(self) -> List[Socket]:
        return [Socket(self, side) for side in Side if self.children[side] is None]

    def iter_subtree(self) -> Iterator['LogicOperator']:
        """Pre-order walk: self, then the left subtree, then the right subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            for side in reversed(Side):
                child = node.children[side]
                if child is not None:
                    stack.append(child)

    def ancestors(self) -> Iterator['LogicOperator']:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> 'LogicOperator':
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    # Both link directions are legitimate entry points

    def attach_child(self, child: 'LogicOperator', side) -> Socket:
        from .attachment import attach_child
        return attach_child(self, child, side)

    def attach_parent(self, parent: 'LogicOperator', side) -> Socket:
        from .attachment import attach_parent
        return attach_parent(self, parent, side)

    def detach_child(self, side) -> 'LogicOperator':
        from .attachment import detach_child
        return detach_child(self, side)

    def detach_parent(self) -> 'LogicOperator':
        from .attachment import detach_parent
        return detach_parent(self)

    def get_info(self) -> Dict[str, object]:
        info = super().get_info()
        info['operator'] = self.operator
        info['children'] = {side.value: (child.id if child else None) for side, child in self.children.items()}
        return info


def is_operator_node(obj) -> bool:
    """Capability check: does this object have sockets of its own?"""
    return isinstance(obj, LogicOperator)
