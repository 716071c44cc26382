"""
Unit tests for nested brick geometry and the headless visual layer.
"""

from Forest import keywords
from Forest.geometry import Point, Rect
from Forest.layout import BrickLayout
from Forest.sockets import Side, Socket


class TestBrickLayout:
    def test_empty_operator_size(self, forest):
        node = forest.create_operator("and", (0, 0))
        assert BrickLayout().size(node) == (112.0, 68.0)

    def test_draggable_size(self, forest):
        node = forest.create_draggable((0, 0))
        assert BrickLayout().size(node) == (96.0, 40.0)

    def test_empty_zones(self, forest):
        node = forest.create_operator("and", (100, 100))
        layout = BrickLayout()
        assert layout.zone_rect(node, Side.LEFT) == Rect(108, 128, 44, 32)
        assert layout.zone_rect(node, Side.RIGHT) == Rect(160, 128, 44, 32)
        assert layout.socket_center(Socket(node, Side.LEFT)) == Point(130, 144)
        assert layout.socket_center(Socket(node, Side.RIGHT)) == Point(182, 144)

    def test_parent_grows_around_child(self, forest):
        parent = forest.create_operator("and", (100, 100))
        child = forest.create_operator("or", (0, 0))
        parent.attach_child(child, "left")
        layout = BrickLayout()
        assert layout.size(parent) == (180.0, 104.0)
        assert layout.origin(child) == Point(108, 128)
        # Right zone is pushed past the child's box
        assert layout.zone_rect(parent, Side.RIGHT) == Rect(228, 128, 44, 32)

    def test_deep_nesting(self, forest):
        top = forest.create_operator("and", (0, 0))
        mid = forest.create_operator("or", (0, 0))
        low = forest.create_operator("not", (0, 0))
        top.attach_child(mid, "right")
        mid.attach_child(low, "left")
        layout = BrickLayout()
        assert layout.origin(mid) == Point(60, 28)
        assert layout.origin(low) == Point(68, 56)
        assert layout.size(top) == (8 + 44 + 8 + 180 + 8, 28 + 104 + 8)

    def test_label_rect_spans_width(self, forest):
        node = forest.create_operator("or", (10, 20))
        assert BrickLayout().label_rect(node) == Rect(10, 20, 112, 28)


class TestHeadlessSurface:
    def test_locate_prefers_deepest_node(self, forest):
        parent = forest.create_operator("and", (100, 100))
        child = forest.create_operator("or", (0, 0))
        parent.attach_child(child, "left")
        surface = forest.surface
        assert surface.locate_node_at(Point(120, 140)) is child
        assert surface.locate_node_at(Point(104, 104)) is parent
        assert surface.locate_node_at(Point(500, 500)) is None

    def test_locate_prefers_topmost_root(self, forest):
        below = forest.create_operator("and", (0, 0))
        above = forest.create_operator("or", (50, 0))
        surface = forest.surface
        assert surface.locate_node_at(Point(60, 10)) is above
        below.bring_to_front()
        assert surface.locate_node_at(Point(60, 10)) is below

    def test_socket_at(self, forest):
        node = forest.create_operator("and", (0, 0))
        surface = forest.surface
        assert surface.socket_at(Point(30, 44)) == Socket(node, Side.LEFT)
        assert surface.socket_at(Point(82, 44)) == Socket(node, Side.RIGHT)
        assert surface.socket_at(Point(56, 10)) is None

    def test_free_sockets_are_decorated_available(self, forest):
        node = forest.create_operator("and", (0, 0))
        assert forest.surface.decorations == {
            Socket(node, Side.LEFT): keywords.AVAILABLE_DROP_ZONE,
            Socket(node, Side.RIGHT): keywords.AVAILABLE_DROP_ZONE,
        }

    def test_highlight_moves_target_decoration(self, forest):
        node = forest.create_operator("and", (0, 0))
        surface = forest.surface
        left, right = Socket(node, Side.LEFT), Socket(node, Side.RIGHT)
        surface.highlight_socket(left)
        assert surface.decorations[left] == keywords.TARGET_DROP_ZONE
        surface.highlight_socket(right)
        assert surface.decorations[left] == keywords.AVAILABLE_DROP_ZONE
        assert surface.decorations[right] == keywords.TARGET_DROP_ZONE
        surface.highlight_socket(None)
        assert surface.target_socket is None
        assert set(surface.decorations.values()) == {keywords.AVAILABLE_DROP_ZONE}

    def test_target_dropped_once_socket_is_occupied(self, forest):
        parent = forest.create_operator("and", (0, 0))
        child = forest.create_operator("or", (300, 0))
        target = Socket(parent, Side.LEFT)
        forest.surface.highlight_socket(target)
        parent.attach_child(child, "left")
        assert forest.surface.target_socket is None
        assert target not in forest.surface.decorations
