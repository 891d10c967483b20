"""Tests for node lookup and outline numbering."""

from mindweave.document.MapNode import MapNode
from mindweave.document.paths import (
    ROOT_NUMBER,
    calculate_node_number,
    context_path,
    find_node,
    find_node_and_path,
    is_root_number,
)


class TestFindNodeAndPath:
    """Tests for find_node_and_path()."""

    def test_root(self, sample_tree):
        location = find_node_and_path(sample_tree, "root")
        assert location.node is sample_tree
        assert location.path == ["Flight Ops"]
        assert location.parent is None
        assert location.depth == 0

    def test_nested_node(self, sample_tree):
        location = find_node_and_path(sample_tree, "fuel")
        assert location.node.label == "Fuel"
        assert location.path == ["Flight Ops", "Planning", "Fuel"]
        assert location.parent.id == "plan"
        assert location.depth == 2

    def test_missing_returns_none(self, sample_tree):
        assert find_node_and_path(sample_tree, "nope") is None
        assert find_node(sample_tree, "nope") is None

    def test_duplicate_id_first_preorder_match(self):
        first = MapNode(label="First", id="dup")
        second = MapNode(label="Second", id="dup")
        root = MapNode(label="R", children=[MapNode(label="P", children=[first]), second])
        assert find_node_and_path(root, "dup").node is first

    def test_context_path_fallback(self, sample_tree):
        assert context_path(sample_tree, "weather") == ["Flight Ops", "Planning", "Weather"]
        assert context_path(sample_tree, "gone", "Orphan") == ["Orphan"]


class TestCalculateNodeNumber:
    """Tests for calculate_node_number()."""

    def test_root_sentinel(self, sample_tree):
        assert calculate_node_number(sample_tree, "root") == "1.0"
        assert is_root_number(calculate_node_number(sample_tree, "root"))

    def test_first_child(self, sample_tree):
        assert calculate_node_number(sample_tree, "plan") == "1.1"

    def test_second_child_of_first_child(self, sample_tree):
        assert calculate_node_number(sample_tree, "fuel") == "1.1.2"

    def test_second_child(self, sample_tree):
        assert calculate_node_number(sample_tree, "exec") == "1.2"

    def test_missing(self, sample_tree):
        assert calculate_node_number(sample_tree, "nope") is None

    def test_numbers_follow_reordering(self, sample_tree):
        sample_tree.children.reverse()
        assert calculate_node_number(sample_tree, "exec") == "1.1"
        assert calculate_node_number(sample_tree, "fuel") == "1.2.2"

    def test_root_number_constant(self):
        assert ROOT_NUMBER == "1.0"
        assert not is_root_number("1.1")
