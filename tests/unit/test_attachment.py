"""
Unit tests for the attachment protocol.

Covers both link directions, every refusal, position side effects and the
mutuality/acyclicity invariants over random attach/detach sequences.
"""

import random

import pytest

from Forest.attachment import attach_child, attach_parent, detach_child, detach_parent
from Forest.errors import (
    AlreadyHasParent, AttachmentError, CyclicAttachment, ForeignNode, InvalidSide,
    NoParentToDetach, NoSuchChildToDetach, NotAnOperator, SelfAttachment, SocketOccupied,
)
from Forest.geometry import ZERO
from Forest.node import LogicOperator
from Forest.registry import Forest
from Forest.sockets import Side, Socket


def links(forest):
    """Every (parent, side, child) link, read from the parent side."""
    result = set()
    for node in forest.roots + tuple(n for n in forest.nodes if n.has_parent()):
        for side, child in node.children.items():
            if child is not None:
                result.add((node.id, side.value, child.id))
    return result


def assert_mutual(forest):
    operators = [n for n in forest.nodes if hasattr(n, 'children')]
    for parent in operators:
        for side in Side:
            child = parent.children[side]
            if child is not None:
                assert child.parent_ref == Socket(parent, side)
    for child in operators:
        ref = child.parent_ref
        if ref is not None:
            assert ref.owner.children[ref.side] is child


def assert_acyclic(forest):
    total = len(forest.nodes)
    for node in forest.nodes:
        seen = {id(node)}
        current = node
        steps = 0
        while current.parent is not None:
            current = current.parent
            steps += 1
            assert id(current) not in seen
            seen.add(id(current))
            assert steps <= total
        assert not current.has_parent()


class TestScenarios:
    def test_two_children_leave_one_root(self, forest):
        x = forest.create_operator("and", (0, 0))
        y = forest.create_operator("or", (200, 0))
        z = forest.create_operator("not", (400, 0))
        attach_child(x, y, "left")
        attach_child(x, z, "right")
        assert forest.roots == (x,)
        assert set(forest.free_sockets) == {
            Socket(y, Side.LEFT), Socket(y, Side.RIGHT),
            Socket(z, Side.LEFT), Socket(z, Side.RIGHT),
        }

    def test_second_attach_into_same_socket_is_refused(self, forest):
        x = forest.create_operator("and")
        y = forest.create_operator("or")
        attach_child(x, y, "left")
        before = links(forest)
        with pytest.raises(SocketOccupied):
            attach_child(x, forest.create_operator("not"), "left")
        # The same child again: it already has a parent
        with pytest.raises(AlreadyHasParent):
            attach_child(x, y, "left")
        assert links(forest) == before
        assert x.children[Side.LEFT] is y

    def test_self_attachment_is_refused(self, forest):
        x = forest.create_operator("and")
        with pytest.raises(SelfAttachment):
            attach_child(x, x, "left")
        assert not x.has_parent()
        assert not x.has_child("left")

    def test_round_trip_restores_links(self, forest):
        p = forest.create_operator("and")
        c = forest.create_operator("or")
        other = forest.create_operator("not")
        attach_child(p, other, "right")
        attach_child(p, c, "left")
        assert detach_child(p, "left") is c
        assert c.parent_ref is None
        assert p.children[Side.LEFT] is None
        assert p.children[Side.RIGHT] is other
        assert other.parent is p


class TestEntryPoints:
    def test_attach_parent_sets_both_sides(self, forest):
        parent = forest.create_operator("and")
        child = forest.create_operator("or")
        socket = attach_parent(child, parent, "right")
        assert socket == Socket(parent, Side.RIGHT)
        assert parent.children[Side.RIGHT] is child
        assert child.parent is parent
        assert child.parent_side == Side.RIGHT

    def test_node_methods(self, forest):
        a = forest.create_operator("and")
        b = forest.create_operator("or")
        c = forest.create_operator("not")
        a.attach_child(b, "left")
        c.attach_parent(a, "right")
        assert a.has_two_children()
        assert c.detach_parent() is c
        assert a.detach_child("left") is b
        assert forest.roots == (a, b, c)

    def test_forest_entry_point(self, forest):
        a = forest.create_operator("and")
        b = forest.create_operator("or")
        forest.attach(a, b, "left")
        assert b.parent is a
        forest.detach(b)
        assert b.parent is None

    def test_detach_parent_on_root_is_refused(self, forest):
        node = forest.create_operator("and")
        with pytest.raises(NoParentToDetach):
            detach_parent(node)

    def test_detach_empty_socket_is_refused(self, forest):
        node = forest.create_operator("and")
        with pytest.raises(NoSuchChildToDetach):
            detach_child(node, "right")

    def test_invalid_side(self, forest):
        a = forest.create_operator("and")
        b = forest.create_operator("or")
        with pytest.raises(InvalidSide):
            attach_child(a, b, "up")
        with pytest.raises(InvalidSide):
            detach_child(a, 0)
        assert b.parent is None


class TestRefusals:
    def test_cycle_through_descendant(self, forest):
        a = forest.create_operator("and")
        b = forest.create_operator("or")
        c = forest.create_operator("not")
        attach_child(a, b, "left")
        attach_child(b, c, "left")
        before = links(forest)
        with pytest.raises(CyclicAttachment):
            # a is a root, so it may be attached somewhere, just not below itself
            attach_child(c, a, "right")
        assert links(forest) == before
        assert_acyclic(forest)

    def test_plain_draggable_cannot_attach(self, forest):
        op = forest.create_operator("and")
        plain = forest.create_draggable()
        with pytest.raises(NotAnOperator):
            attach_child(op, plain, "left")
        with pytest.raises(NotAnOperator):
            attach_child(plain, op, "left")
        assert not op.has_child("left")

    def test_nodes_from_different_forests(self, forest):
        other = Forest()
        a = forest.create_operator("and")
        b = other.create_operator("or")
        with pytest.raises(ForeignNode):
            attach_child(a, b, "left")

    def test_removed_nodes_cannot_be_linked(self, forest):
        a = forest.create_operator("and")
        b = forest.create_operator("or")
        forest.remove_node(a)
        forest.remove_node(b)
        assert a.forest is None and b.forest is None
        with pytest.raises(ForeignNode):
            attach_child(a, b, "left")
        with pytest.raises(ForeignNode):
            attach_parent(b, a, "right")
        assert not a.has_child("left")
        assert not b.has_parent()

    def test_standalone_operators_cannot_be_linked(self):
        a = LogicOperator("and-a", "and")
        b = LogicOperator("or-b", "or")
        with pytest.raises(ForeignNode):
            a.attach_child(b, "left")
        assert b.parent is None

    def test_refusals_share_a_base_class(self, forest):
        x = forest.create_operator("and")
        with pytest.raises(AttachmentError):
            attach_child(x, x, "left")

    def test_refusal_does_not_notify(self, forest):
        x = forest.create_operator("and")
        seen = []
        forest.subscribe(seen.append)
        with pytest.raises(SelfAttachment):
            attach_child(x, x, "left")
        assert seen == []


class TestSideEffects:
    def test_attach_resets_child_position(self, forest):
        parent = forest.create_operator("and", (100, 100))
        child = forest.create_operator("or", (400, 300))
        attach_child(parent, child, "left")
        assert child.position == ZERO

    def test_detach_takes_rendered_position(self, forest):
        parent = forest.create_operator("and", (100, 100))
        child = forest.create_operator("or", (400, 300))
        attach_child(parent, child, "right")
        rendered = forest.surface.visual_origin(child)
        assert rendered != ZERO
        detach_parent(child)
        assert child.position == rendered
        assert forest.surface.visual_origin(child) == rendered

    def test_detached_child_goes_on_top(self, forest):
        parent = forest.create_operator("and", (100, 100))
        child = forest.create_operator("or")
        forest.create_operator("not")
        attach_child(parent, child, "left")
        detach_child(parent, "left")
        assert forest.surface.z_order[-1] is child

    def test_every_change_notifies_once(self, forest):
        parent = forest.create_operator("and")
        child = forest.create_operator("or")
        seen = []
        forest.subscribe(seen.append)
        attach_child(parent, child, "left")
        assert len(seen) == 1
        assert seen[0].roots == (parent,)
        detach_parent(child)
        assert len(seen) == 2
        assert seen[1].roots == (parent, child)

    def test_surface_sees_free_sockets(self, forest):
        parent = forest.create_operator("and")
        child = forest.create_operator("or")
        attach_child(parent, child, "left")
        assert Socket(parent, Side.LEFT) not in forest.surface.decorations
        assert Socket(parent, Side.RIGHT) in forest.surface.decorations


class TestInvariants:
    @pytest.mark.parametrize("seed", range(8))
    def test_random_sequences_keep_links_mutual_and_acyclic(self, seed):
        rng = random.Random(seed)
        forest = Forest()
        nodes = [forest.create_operator(rng.choice(["and", "or", "not"]), (i * 10, 0)) for i in range(9)]
        for _ in range(200):
            action = rng.random()
            try:
                if action < 0.35:
                    attach_child(rng.choice(nodes), rng.choice(nodes), rng.choice(["left", "right"]))
                elif action < 0.55:
                    attach_parent(rng.choice(nodes), rng.choice(nodes), rng.choice(["left", "right"]))
                elif action < 0.8:
                    detach_child(rng.choice(nodes), rng.choice(["left", "right"]))
                else:
                    detach_parent(rng.choice(nodes))
            except (AttachmentError, NoParentToDetach, NoSuchChildToDetach):
                pass
            assert_mutual(forest)
            assert_acyclic(forest)
            assert set(forest.roots) == {n for n in nodes if not n.has_parent()}
