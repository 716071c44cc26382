"""
Forest Errors
All errors raised by the attachment-tree engine.

Every error is local and non-fatal: the operation that raised it made no change
to the forest. Interactive callers catch ForestError, log a warning and carry on.
"""


class ForestError(Exception):
    """Base class for every recoverable forest error."""


class AttachmentError(ForestError):
    """An attach was refused; no link was created."""


class AlreadyHasParent(AttachmentError):
    def __init__(self, child_id: str):
        super().__init__(f"{child_id}: child already has a parent")
        self.child_id = child_id


class SocketOccupied(AttachmentError):
    def __init__(self, parent_id: str, side: str):
        super().__init__(f"{parent_id}: already has a child in the {side} socket")
        self.parent_id = parent_id
        self.side = side


class SelfAttachment(AttachmentError):
    def __init__(self, node_id: str):
        super().__init__(f"{node_id}: cannot attach a node to itself")
        self.node_id = node_id


class CyclicAttachment(AttachmentError):
    def __init__(self, parent_id: str, child_id: str):
        super().__init__(f"{parent_id}: is a descendant of {child_id}, attaching would create a cycle")
        self.parent_id = parent_id
        self.child_id = child_id


class NotAnOperator(AttachmentError):
    def __init__(self, node_id: str):
        super().__init__(f"{node_id}: only logic operators have sockets")
        self.node_id = node_id


class ForeignNode(AttachmentError):
    def __init__(self, parent_id: str, child_id: str):
        super().__init__(f"{parent_id}: {child_id} is not in the same forest")
        self.parent_id = parent_id
        self.child_id = child_id


class InvalidSide(AttachmentError):
    def __init__(self, side):
        super().__init__(f"invalid socket side {side!r}, expected 'left' or 'right'")
        self.side = side


class DetachmentError(ForestError):
    """A detach was refused; no link was broken."""


class NoSuchChildToDetach(DetachmentError):
    def __init__(self, parent_id: str, side: str):
        super().__init__(f"{parent_id}: no child in the {side} socket to detach")
        self.parent_id = parent_id
        self.side = side


class NoParentToDetach(DetachmentError):
    def __init__(self, node_id: str):
        super().__init__(f"{node_id}: no parent to detach")
        self.node_id = node_id


class InvalidPosition(ForestError):
    def __init__(self, value):
        super().__init__(f"position {value!r} is not a finite (x, y) pair")
        self.value = value


class InvalidObjectType(ForestError):
    def __init__(self, object_type):
        super().__init__(f"invalid object type {object_type!r}")
        self.object_type = object_type


class InvalidOperator(ForestError):
    def __init__(self, operator):
        super().__init__(f"invalid or missing operator {operator!r}")
        self.operator = operator


class NoSuchNode(ForestError):
    def __init__(self, node_id: str):
        super().__init__(f"{node_id}: not part of this forest")
        self.node_id = node_id
