"""
Socket Module
Socket addressing, subtree exclusion and the nearest-free-socket search used while dragging
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from . import keywords
from .errors import InvalidSide
from .geometry import Point

logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Named attachment point on an operator. Compares equal to 'left'/'right'."""
    LEFT = keywords.LEFT
    RIGHT = keywords.RIGHT

    @staticmethod
    def coerce(value: Any) -> 'Side':
        try:
            return Side(value)
        except ValueError:
            raise InvalidSide(value) from None

    @property
    def order(self) -> int:
        return keywords.SIDES.index(self.value)


@dataclass(frozen=True)
class Socket:
    """(owner, side). Occupied when owner.children[side] is set, otherwise free."""
    owner: Any
    side: Side

    @property
    def occupant(self):
        return self.owner.children[self.side]

    def is_free(self) -> bool:
        return self.occupant is None

    def __repr__(self):
        return f"Socket({self.owner.id}, {self.side.value})"


def exclude_subtree(sockets: Iterable[Socket], node) -> List[Socket]:
    """Drop every socket owned by node or one of its descendants."""
    subtree = {id(n) for n in node.iter_subtree()} if hasattr(node, 'iter_subtree') else {id(node)}
    return [s for s in sockets if id(s.owner) not in subtree]


def nearest_socket(cursor: Point,
                   candidates: Iterable[Socket],
                   center_of: Callable[[Socket], Point],
                   radius: float) -> Optional[Socket]:
    """
    Pick the candidate socket whose visual centre is closest to the cursor.

    Only sockets within radius qualify. Equal distances resolve to the lowest
    owner id, then left before right, so the result never depends on list order.

    Returns:
        The winning socket, or None when nothing lies within the radius
    """
    best = None
    best_key = None
    for socket in candidates:
        distance = cursor.distance_to(center_of(socket))
        if distance > radius:
            continue
        key = (distance, socket.owner.id, socket.side.order)
        if best_key is None or key < best_key:
            best, best_key = socket, key
    return best
