"""Tests for the mesh-to-tree projector."""

from mindweave.document.MapNode import NodeType
from mindweave.systems.mesh import build_system_tree, mesh_tree_to_dict, relevant_actor_ids
from mindweave.systems.models import SystemActor, SystemInteraction, SystemsView


def _ids(tree):
    return {node.id for node in tree.walk()}


class TestBuildSystemTree:
    """Tests for build_system_tree()."""

    def test_unknown_root(self, systems_view):
        assert build_system_tree(systems_view, "nope") is None

    def test_unfiltered_tree(self, systems_view):
        tree = build_system_tree(systems_view, "A")
        assert tree.link_label is None
        assert [c.id for c in tree.children] == ["B"]
        bravo = tree.children[0]
        assert bravo.link_label == "→ X"
        assert [c.id for c in bravo.children] == ["C"]
        assert bravo.children[0].link_label == "→ X"

    def test_filter_x_keeps_chain(self, systems_view):
        tree = build_system_tree(systems_view, "A", "X")
        bravo = tree.children[0]
        assert bravo.id == "B"
        assert bravo.children[0].id == "C"

    def test_filter_y(self, systems_view):
        tree = build_system_tree(systems_view, "A", "Y")
        assert _ids(tree) == {"A", "C"}
        assert tree.children[0].link_label == "→ Y"

    def test_filter_excludes_uninvolved_root_neighbours(self, systems_view):
        tree = build_system_tree(systems_view, "B", "Y")
        assert _ids(tree) == {"B"}

    def test_incoming_label(self, systems_view):
        tree = build_system_tree(systems_view, "C")
        assert tree.children[0].id == "B"
        assert tree.children[0].link_label == "← X"

    def test_each_actor_once(self, systems_view):
        tree = build_system_tree(systems_view, "A")
        ids = [n.id for n in tree.walk()]
        assert len(ids) == len(set(ids)) == 3

    def test_cyclic_mesh_terminates(self):
        view = SystemsView(
            actors=[SystemActor("a", "A"), SystemActor("b", "B")],
            interactions=[
                SystemInteraction("a", "b", "go", "D"),
                SystemInteraction("b", "a", "back", "D"),
            ],
        )
        tree = build_system_tree(view, "a")
        assert [n.id for n in tree.walk()] == ["a", "b"]

    def test_missing_actor_skipped(self):
        view = SystemsView(
            actors=[SystemActor("a", "A")],
            interactions=[SystemInteraction("a", "ghost", "go", "D")],
        )
        assert build_system_tree(view, "a").children == []

    def test_node_types(self, systems_view):
        tree = build_system_tree(systems_view, "A")
        assert tree.node_type == NodeType.INFO
        assert tree.children[0].node_type == NodeType.PROCESS


class TestMeshHelpers:
    """Tests for relevant_actor_ids() and mesh_tree_to_dict()."""

    def test_relevant_actor_ids(self, systems_view):
        assert relevant_actor_ids(systems_view, "X") == {"A", "B", "C"}
        assert relevant_actor_ids(systems_view, "Z") == {"A", "B"}

    def test_to_dict(self, systems_view):
        data = mesh_tree_to_dict(build_system_tree(systems_view, "A"))
        assert data["label"] == "alpha"
        assert "linkLabel" not in data
        assert data["children"][0]["linkLabel"] == "→ X"
        assert data["children"][0]["nodeType"] == "process"


class TestLongChains:
    """Projection of meshes deeper than the interpreter's recursion limit."""

    def _chain_view(self, length):
        return SystemsView(
            actors=[SystemActor(f"a{i}", f"Actor {i}") for i in range(length)],
            interactions=[
                SystemInteraction(f"a{i}", f"a{i + 1}", "hand over", "Packet")
                for i in range(length - 1)
            ],
        )

    def test_chain_depth(self):
        tree = build_system_tree(self._chain_view(2000), "a0")
        depth = 1
        node = tree
        while node.children:
            (node,) = node.children
            depth += 1
        assert depth == 2000
        assert node.id == "a1999"
        assert len(list(tree.walk())) == 2000

    def test_chain_serializes(self):
        data = mesh_tree_to_dict(build_system_tree(self._chain_view(2000), "a0"))
        depth = 1
        while data["children"]:
            (data,) = data["children"]
            depth += 1
        assert depth == 2000
        assert data["linkLabel"] == "→ Packet"

    def test_chain_from_the_far_end(self):
        tree = build_system_tree(self._chain_view(2000), "a1999")
        assert tree.children[0].id == "a1998"
        assert tree.children[0].link_label == "← Packet"
        assert len(list(tree.walk())) == 2000
