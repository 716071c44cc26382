"""
Attachment Protocol
Symmetric attach/detach keeping parent.children[side] and child.parent_ref in step.

A link can be started from either end ("attach this child to me" or "attach
myself to this parent"). Both wrappers run the same single transaction, so the
two halves of a link are always written together and nothing recurses.
"""

import logging
from typing import Optional

from .errors import (
    AlreadyHasParent, CyclicAttachment, ForeignNode, NoParentToDetach,
    NoSuchChildToDetach, NotAnOperator, SelfAttachment, SocketOccupied,
)
from .geometry import ZERO
from .node import LogicOperator, is_operator_node
from .sockets import Side, Socket

logger = logging.getLogger(__name__)


def _require_operator(node) -> None:
    if not is_operator_node(node):
        raise NotAnOperator(getattr(node, 'id', repr(node)))


def _validate_link(parent: LogicOperator, child: LogicOperator, side) -> Side:
    side = Side.coerce(side)
    _require_operator(parent)
    _require_operator(child)
    # Nodes outside any forest, removed ones included, never link
    if parent.forest is None or parent.forest is not child.forest:
        raise ForeignNode(parent.id, child.id)
    if child.has_parent():
        raise AlreadyHasParent(child.id)
    if parent.children[side] is not None:
        raise SocketOccupied(parent.id, side.value)
    if parent is child:
        raise SelfAttachment(parent.id)
    for ancestor in parent.ancestors():
        if ancestor is child:
            raise CyclicAttachment(parent.id, child.id)
    return side


def _link(parent: LogicOperator, child: LogicOperator, side) -> Socket:
    side = _validate_link(parent, child, side)
    socket = Socket(parent, side)

    parent.children[side] = child
    child._parent_socket = socket
    # Nested children are laid out by the parent; the stored position is parent-local
    child.position = ZERO

    forest = parent.forest
    if forest is not None:
        forest.surface.nest_under(parent, side, child)
        forest._on_tree_update()
    logger.debug("Attached %s to %s (%s)", child.id, parent.id, side.value)
    return socket


def _unlink(parent: LogicOperator, side: Side) -> LogicOperator:
    child = parent.children[side]
    forest = parent.forest
    # Read the rendered location while the child is still nested
    rendered = forest.surface.visual_origin(child) if forest is not None else child.position

    parent.children[side] = None
    child._parent_socket = None
    child.set_position(rendered)

    if forest is not None:
        forest.surface.restore_independent_layout(child)
        forest.surface.bring_to_front(child)
        forest._on_tree_update()
    logger.debug("Detached %s from %s (%s)", child.id, parent.id, side.value)
    return child


def attach_child(parent: LogicOperator, child: LogicOperator, side) -> Socket:
    """
    Attach child into parent's left or right socket.

    Raises:
        AlreadyHasParent: child is already nested somewhere
        SocketOccupied: parent already holds a child on that side
        SelfAttachment: parent and child are the same node
        CyclicAttachment: parent is a descendant of child

    Returns:
        The socket the child now occupies
    """
    return _link(parent, child, side)


def attach_parent(child: LogicOperator, parent: LogicOperator, side) -> Socket:
    """Mirror of attach_child, started from the child's end."""
    return _link(parent, child, side)


def detach_child(parent: LogicOperator, side) -> LogicOperator:
    """
    Detach whatever sits in parent's socket. The child becomes a root at its rendered position.

    Raises:
        NoSuchChildToDetach: the socket is already free
    """
    side = Side.coerce(side)
    _require_operator(parent)
    if parent.children[side] is None:
        raise NoSuchChildToDetach(parent.id, side.value)
    return _unlink(parent, side)


def detach_parent(child: LogicOperator) -> LogicOperator:
    """
    Detach child from its parent.

    Raises:
        NoParentToDetach: child is already a root
    """
    ref: Optional[Socket] = child.parent_ref
    if ref is None:
        raise NoParentToDetach(child.id)
    return _unlink(ref.owner, ref.side)
