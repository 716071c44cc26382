"""
Brick Style Module
Colour theme shared by the canvas and the launcher window
"""

from Forest import keywords

DARK_THEME = {
    'bg_primary': '#1f1f20',
    'bg_secondary': '#2D2D30',
    'bg_tertiary': '#3E3E42',
    'text_primary': '#D4D4D4',
    'text_secondary': "#9AA4AF",
    'accent': '#569CD6',
    'border': '#4A4D51'
}

# Operator accent colours
OPERATOR_COLORS = {
    keywords.AND: '#569CD6',
    keywords.OR: '#C586C0',
    keywords.NOT: '#CE9178',
}

DRAGGABLE_COLOR = '#DCDCAA'

# Drop-zone fills keyed by decoration
ZONE_COLORS = {
    None: '#2a2b2e',
    keywords.AVAILABLE_DROP_ZONE: '#2f3b46',
    keywords.TARGET_DROP_ZONE: '#4EC9B0',
}

BORDER_RADIUS = 10


def operator_color(node) -> str:
    """Accent colour for a node, by operator kind."""
    return OPERATOR_COLORS.get(getattr(node, 'operator', None), DRAGGABLE_COLOR)
