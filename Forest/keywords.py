"""
Keywords Module
Index of hardcoded strings and constants shared by the forest engine and the canvas
"""

# Object types. Every object in a forest reports one of these from get_type().
DRAGGABLE = "draggable"
LOGIC_OPERATOR = "logic-operator"

OBJECT_TYPES = (DRAGGABLE, LOGIC_OPERATOR)

# Logic operator kinds
AND = "and"
OR = "or"
NOT = "not"

OPERATORS = (AND, OR, NOT)

# Socket sides, in tie-break order
LEFT = "left"
RIGHT = "right"

SIDES = (LEFT, RIGHT)

# Socket decorations painted by the visual layer
AVAILABLE_DROP_ZONE = "available-drop-zone"
TARGET_DROP_ZONE = "target-drop-zone"

# Nearest-socket capture radius in pixels
CAPTURE_RADIUS = 64.0
