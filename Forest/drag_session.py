"""
Drag Session
One pointer-drag gesture: grab (detach if nested), follow the cursor while
tracking the nearest eligible free socket, then drop (attach if a socket is
highlighted).

There is no cancel gesture. Releasing away from every socket leaves the node
a root at its last position.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .attachment import attach_child, detach_parent
from .errors import ForestError
from .geometry import Point, ZERO
from .keywords import CAPTURE_RADIUS
from .node import Draggable, is_operator_node
from .sockets import Socket, nearest_socket

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    ATTACHED = "attached"


@dataclass
class DragSession:
    """Transient state for one gesture."""
    dragged_node: Optional[Draggable] = None
    cursor_offset: Point = ZERO
    candidate_socket: Optional[Socket] = None
    state: DragState = DragState.IDLE

    def clear(self, final_state: DragState = DragState.IDLE) -> None:
        """Drop the gesture data. A finished session keeps how it ended in state."""
        self.dragged_node = None
        self.cursor_offset = ZERO
        self.candidate_socket = None
        self.state = final_state


class DragController:
    """Turns pointer down/move/up into forest operations. At most one session at a time."""

    def __init__(self, forest, capture_radius: float = CAPTURE_RADIUS):
        self.forest = forest
        self.capture_radius = float(capture_radius)
        self.session: Optional[DragSession] = None
        forest.drag_controller = self

    @property
    def state(self) -> DragState:
        return self.session.state if self.session is not None else DragState.IDLE

    def is_dragging(self) -> bool:
        return self.session is not None

    def pointer_down(self, cursor) -> Optional[DragSession]:
        """
        Start a session on whatever draggable sits under the cursor.

        A nested operator is detached from its parent straight away so it can move on its own.

        Returns:
            The new session, or None when the cursor is over empty canvas
        """
        cursor = Point.parse(cursor)
        if self.session is not None:
            logger.warning("Pointer down while %s is still dragged, dropping it first",
                           self.session.dragged_node.id)
            self.pointer_up(cursor)

        surface = self.forest.surface
        node = surface.locate_node_at(cursor)
        if node is None:
            return None

        origin = surface.visual_origin(node)
        session = DragSession(dragged_node=node,
                              cursor_offset=origin.minus(cursor),
                              state=DragState.ARMED)
        self.session = session
        if node.has_parent():
            detach_parent(node)
        logger.info("Dragging %s", node.id)
        return session

    def pointer_move(self, cursor) -> Optional[Socket]:
        """
        Move the dragged node under the cursor and refresh the candidate socket.

        Returns:
            The highlighted candidate socket, if any
        """
        if self.session is None:
            return None
        cursor = Point.parse(cursor)
        session = self.session
        node = session.dragged_node
        node.set_position(session.cursor_offset.plus(cursor))

        candidate = None
        if is_operator_node(node):
            # Own subtree is excluded so a node can never drop into its descendants
            candidates = self.forest.available_sockets(exclude=node)
            candidate = nearest_socket(cursor, candidates,
                                       self.forest.surface.visual_center,
                                       self.capture_radius)
        if candidate != session.candidate_socket:
            logger.debug("Candidate socket for %s: %s", node.id, candidate)
        session.candidate_socket = candidate

        node.bring_to_front()
        self.forest.surface.highlight_socket(candidate)
        return candidate

    def pointer_up(self, cursor=None) -> Optional[Socket]:
        """
        End the session, attaching into the candidate socket when one is highlighted.

        Returns:
            The socket the node was attached to, or None when it stays a root
        """
        if self.session is None:
            return None
        session = self.session
        self.session = None
        node = session.dragged_node
        socket = session.candidate_socket
        attached = None
        try:
            if socket is not None:
                try:
                    attach_child(socket.owner, node, socket.side)
                except ForestError as e:
                    logger.warning("Drop refused: %s", e)
                else:
                    attached = socket
                    logger.info("Dropped %s into %s (%s)", node.id, socket.owner.id, socket.side.value)
            if attached is None:
                logger.info("Dropped %s at (%.0f, %.0f)", node.id, node.position.x, node.position.y)
        finally:
            self.forest.surface.highlight_socket(None)
            session.clear(DragState.ATTACHED if attached is not None else DragState.IDLE)
        return attached

    def forget(self, node) -> None:
        """Called before node is removed from the forest."""
        session = self.session
        if session is None:
            return
        if session.dragged_node is node:
            self.forest.surface.highlight_socket(None)
            session.clear()
            self.session = None
            logger.info("Drag of %s ended: node removed", node.id)
        elif session.candidate_socket is not None and session.candidate_socket.owner is node:
            session.candidate_socket = None
            self.forest.surface.highlight_socket(None)
